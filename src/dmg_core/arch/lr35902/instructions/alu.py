"""
LR35902 算術論理演算命令の実装。

フラグを変更する全ての命令は、boolフラグを更新した後に state.update_af_low() で
Fレジスタへ直列化します。CP命令は状態モデルの compare() をそのまま使います。
"""
from dmg_core.arch.lr35902.state import Lr35902CpuState
from dmg_core.transport.bus import MemoryBus
from .base import get_register_value, set_register_value, fetch_immediate8


# @intent:responsibility 8ビット加算の結果に基づいてフラグを更新し、Aに格納します。
def _add8(state: Lr35902CpuState, value: int) -> None:
    result = state.a + value
    state.zero = (result & 0xFF) == 0
    state.sub = False
    state.half_carry = ((state.a & 0x0F) + (value & 0x0F)) > 0x0F
    state.carry = result > 0xFF
    state.a = result & 0xFF
    state.update_af_low()

def _sub8(state: Lr35902CpuState, value: int) -> None:
    result = state.a - value
    state.zero = (result & 0xFF) == 0
    state.sub = True
    state.half_carry = (state.a & 0x0F) < (value & 0x0F)
    state.carry = result < 0
    state.a = result & 0xFF
    state.update_af_low()

# @intent:responsibility AND/OR/XORのフラグ更新。HはANDのみ1、Cは常に0。
def _logic8(state: Lr35902CpuState, result: int, half_carry: bool) -> None:
    state.a = result & 0xFF
    state.zero = state.a == 0
    state.sub = False
    state.half_carry = half_carry
    state.carry = False
    state.update_af_low()

_OPERATIONS = {
    "ADD": _add8,
    "SUB": _sub8,
    "AND": lambda state, value: _logic8(state, state.a & value, True),
    "XOR": lambda state, value: _logic8(state, state.a ^ value, False),
    "OR": lambda state, value: _logic8(state, state.a | value, False),
    "CP": lambda state, value: state.compare(state.a, value),
}

ALU_OPERATION_ORDER = ("ADD", None, "SUB", None, "AND", "XOR", "OR", "CP")  # ADC/SBCは未実装


def make_alu_r(operation: str, reg_name: str):
    apply = _OPERATIONS[operation]
    def execute_alu_r(state: Lr35902CpuState, bus: MemoryBus) -> int:
        apply(state, get_register_value(state, bus, reg_name))
        return 0
    return execute_alu_r

def make_alu_n(operation: str):
    apply = _OPERATIONS[operation]
    def execute_alu_n(state: Lr35902CpuState, bus: MemoryBus) -> int:
        apply(state, fetch_immediate8(state, bus))
        return 0
    return execute_alu_n

# @intent:responsibility INC r / DEC r。Cフラグは保持されます。
def make_inc_dec8(reg_name: str, is_inc: bool):
    def execute_inc_dec8(state: Lr35902CpuState, bus: MemoryBus) -> int:
        value = get_register_value(state, bus, reg_name)
        if is_inc:
            result = (value + 1) & 0xFF
            state.half_carry = (value & 0x0F) == 0x0F
        else:
            result = (value - 1) & 0xFF
            state.half_carry = (value & 0x0F) == 0x00
        state.zero = result == 0
        state.sub = not is_inc
        set_register_value(state, bus, reg_name, result)
        state.update_af_low()
        return 0
    return execute_inc_dec8

# INC ss / DEC ss: フラグは変化しない
def make_inc_dec16(ss_name: str, is_inc: bool):
    attr = ss_name.lower()
    delta = 1 if is_inc else -1
    def execute_inc_dec16(state: Lr35902CpuState, bus: MemoryBus) -> int:
        setattr(state, attr, (getattr(state, attr) + delta) & 0xFFFF)
        return 0
    return execute_inc_dec16
