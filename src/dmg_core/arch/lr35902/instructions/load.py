"""
LR35902 データ転送命令の実装。
"""
from dmg_core.arch.lr35902.state import Lr35902CpuState
from dmg_core.transport.bus import MemoryBus
from .base import (
    get_register_value, set_register_value, fetch_immediate8, fetch_immediate16
)

HIGH_PAGE = 0xFF00


def make_ld_r_n(reg_name: str):
    def execute_ld_r_n(state: Lr35902CpuState, bus: MemoryBus) -> int:
        set_register_value(state, bus, reg_name, fetch_immediate8(state, bus))
        return 0
    return execute_ld_r_n

def make_ld_r_r_prime(dest_name: str, src_name: str):
    def execute_ld_r_r_prime(state: Lr35902CpuState, bus: MemoryBus) -> int:
        set_register_value(state, bus, dest_name, get_register_value(state, bus, src_name))
        return 0
    return execute_ld_r_r_prime

# @intent:responsibility LD ss,nn: BC/DE/HL/SP に16bit即値を設定します。
def make_ld_ss_nn(ss_name: str):
    attr = ss_name.lower()
    def execute_ld_ss_nn(state: Lr35902CpuState, bus: MemoryBus) -> int:
        setattr(state, attr, fetch_immediate16(state, bus))
        return 0
    return execute_ld_ss_nn

def execute_ld_nn_a(state: Lr35902CpuState, bus: MemoryBus) -> int:
    bus.write_byte(fetch_immediate16(state, bus), state.a)
    return 0

def execute_ld_a_nn(state: Lr35902CpuState, bus: MemoryBus) -> int:
    state.a = bus.read_byte(fetch_immediate16(state, bus))
    return 0

# LDH (n),A / LDH A,(n): FF00+n のI/O・HRAM領域へのアクセス
def execute_ldh_n_a(state: Lr35902CpuState, bus: MemoryBus) -> int:
    bus.write_byte(HIGH_PAGE | fetch_immediate8(state, bus), state.a)
    return 0

def execute_ldh_a_n(state: Lr35902CpuState, bus: MemoryBus) -> int:
    state.a = bus.read_byte(HIGH_PAGE | fetch_immediate8(state, bus))
    return 0

def execute_ld_hli_a(state: Lr35902CpuState, bus: MemoryBus) -> int:
    bus.write_byte(state.hl, state.a)
    state.hl = (state.hl + 1) & 0xFFFF
    return 0

def execute_ld_hld_a(state: Lr35902CpuState, bus: MemoryBus) -> int:
    bus.write_byte(state.hl, state.a)
    state.hl = (state.hl - 1) & 0xFFFF
    return 0

def execute_ld_a_hli(state: Lr35902CpuState, bus: MemoryBus) -> int:
    state.a = bus.read_byte(state.hl)
    state.hl = (state.hl + 1) & 0xFFFF
    return 0

def execute_ld_a_hld(state: Lr35902CpuState, bus: MemoryBus) -> int:
    state.a = bus.read_byte(state.hl)
    state.hl = (state.hl - 1) & 0xFFFF
    return 0

# @intent:responsibility PUSH qq: レジスタペアをスタックに積みます。
def make_push(qq_name: str):
    attr = qq_name.lower()
    def execute_push(state: Lr35902CpuState, bus: MemoryBus) -> int:
        bus.stack_push(state, getattr(state, attr))
        return 0
    return execute_push

# @intent:responsibility POP qq: AFの場合、Fの下位ニブルは af セッターで0に落とされます。
def make_pop(qq_name: str):
    attr = qq_name.lower()
    def execute_pop(state: Lr35902CpuState, bus: MemoryBus) -> int:
        setattr(state, attr, bus.stack_pop(state))
        return 0
    return execute_pop
