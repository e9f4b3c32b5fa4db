"""
LR35902命令セット実装のための共通ヘルパー関数と定数。
"""
from dmg_core.arch.lr35902.state import Lr35902CpuState
from dmg_core.transport.bus import MemoryBus

# Helper functions for register mapping
REGISTER_CODES = {
    0b000: "B", 0b001: "C", 0b010: "D", 0b011: "E",
    0b100: "H", 0b101: "L", 0b110: "(HL)", 0b111: "A"
}

CONDITION_CODES = {0b00: "NZ", 0b01: "Z", 0b10: "NC", 0b11: "C"}

# @intent:utility_function 指定されたコードに対応するレジスタ名を返します。
def get_register_name(code: int) -> str:
    return REGISTER_CODES.get(code, "UNKNOWN_REG")

# @intent:utility_function レジスタ名（または(HL)）に基づいて現在の値を取得します。
def get_register_value(state: Lr35902CpuState, bus: MemoryBus, reg_name: str) -> int:
    if reg_name == "(HL)":
        return bus.read_byte(state.hl)
    return getattr(state, reg_name.lower())

# @intent:utility_function レジスタ名（または(HL)）に値を設定します。
def set_register_value(state: Lr35902CpuState, bus: MemoryBus, reg_name: str, value: int) -> None:
    if reg_name == "(HL)":
        bus.write_byte(state.hl, value & 0xFF)
    else:
        setattr(state, reg_name.lower(), value & 0xFF)

# @intent:utility_function PUSH/POP命令で使用されるレジスタペア名を返します。
def get_push_pop_reg_name(code: int) -> str:
    return {0b00: "BC", 0b01: "DE", 0b10: "HL", 0b11: "AF"}.get(code, "UNKNOWN")

# @intent:utility_function 16ビット演算で使用されるレジスタペア名(ss)を返します。
def get_ss_reg_name(code: int) -> str:
    return {0b00: "BC", 0b01: "DE", 0b10: "HL", 0b11: "SP"}.get(code, "UNKNOWN")

# @intent:utility_function 条件コード(cc)をフラグに照らして評価します。
def check_condition(state: Lr35902CpuState, cc: str) -> bool:
    if cc == "NZ":
        return not state.zero
    if cc == "Z":
        return state.zero
    if cc == "NC":
        return not state.carry
    return state.carry

# @intent:utility_function PCの位置から8bitの即値を読み、PCを1進めます。
def fetch_immediate8(state: Lr35902CpuState, bus: MemoryBus) -> int:
    value = bus.read_byte(state.pc)
    state.pc = (state.pc + 1) & 0xFFFF
    return value

# @intent:utility_function PCの位置からリトルエンディアンの16bit即値を読み、PCを2進めます。
def fetch_immediate16(state: Lr35902CpuState, bus: MemoryBus) -> int:
    lo = bus.read_byte(state.pc)
    hi = bus.read_byte(state.pc + 1)
    state.pc = (state.pc + 2) & 0xFFFF
    return (hi << 8) | lo

# @intent:utility_function 符号付き8bitオフセットに変換します。
def to_signed8(value: int) -> int:
    return value - 256 if value >= 128 else value
