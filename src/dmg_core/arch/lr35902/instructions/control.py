"""
LR35902 制御命令（分岐、サブルーチン呼び出し、割り込み制御）の実装。

全てのハンドラは (state, bus) を受け取り、テーブルの基本サイクル数に加算する追加サイクル数を返します。
条件付き命令の基本サイクル数は「条件不成立」の場合の値です。
"""
from dmg_core.arch.lr35902.state import Lr35902CpuState
from dmg_core.transport.bus import MemoryBus
from .base import check_condition, fetch_immediate8, fetch_immediate16, to_signed8

# 分岐成立時に追加されるサイクル数
JP_CC_TAKEN_EXTRA = 4
JR_CC_TAKEN_EXTRA = 4
CALL_CC_TAKEN_EXTRA = 12
RET_CC_TAKEN_EXTRA = 12

DI_OPCODE = 0xF3
EI_OPCODE = 0xFB


def execute_nop(state: Lr35902CpuState, bus: MemoryBus) -> int:
    return 0

# @intent:responsibility DI: IMEを直接変更せず、次の命令の実行後に無効化されるよう保留フラグを立てます。
def execute_di(state: Lr35902CpuState, bus: MemoryBus) -> int:
    state.pending_interrupt_disabled = True
    return 0

# @intent:responsibility EI: 次の命令の実行後に有効化されるよう保留フラグを立てます。
def execute_ei(state: Lr35902CpuState, bus: MemoryBus) -> int:
    state.pending_interrupt_enabled = True
    return 0

def execute_jp_nn(state: Lr35902CpuState, bus: MemoryBus) -> int:
    state.pc = fetch_immediate16(state, bus)
    return 0

# JP (HL)
def execute_jp_hl(state: Lr35902CpuState, bus: MemoryBus) -> int:
    state.pc = state.hl
    return 0

def execute_jr_e(state: Lr35902CpuState, bus: MemoryBus) -> int:
    offset = to_signed8(fetch_immediate8(state, bus))
    state.pc = (state.pc + offset) & 0xFFFF
    return 0

def execute_call_nn(state: Lr35902CpuState, bus: MemoryBus) -> int:
    target = fetch_immediate16(state, bus)
    bus.stack_push(state, state.pc)
    state.pc = target
    return 0

def execute_ret(state: Lr35902CpuState, bus: MemoryBus) -> int:
    state.pc = bus.stack_pop(state)
    return 0

# @intent:responsibility RETI: 復帰と同時にIMEを有効にします（EIと異なり遅延はありません）。
def execute_reti(state: Lr35902CpuState, bus: MemoryBus) -> int:
    state.pc = bus.stack_pop(state)
    state.interrupt_master = True
    return 0

# --- Handler factories for opcode families ---

def make_jp_cc(cc: str):
    def execute_jp_cc(state: Lr35902CpuState, bus: MemoryBus) -> int:
        target = fetch_immediate16(state, bus)
        if check_condition(state, cc):
            state.pc = target
            return JP_CC_TAKEN_EXTRA
        return 0
    return execute_jp_cc

def make_jr_cc(cc: str):
    def execute_jr_cc(state: Lr35902CpuState, bus: MemoryBus) -> int:
        offset = to_signed8(fetch_immediate8(state, bus))
        if check_condition(state, cc):
            state.pc = (state.pc + offset) & 0xFFFF
            return JR_CC_TAKEN_EXTRA
        return 0
    return execute_jr_cc

def make_call_cc(cc: str):
    def execute_call_cc(state: Lr35902CpuState, bus: MemoryBus) -> int:
        target = fetch_immediate16(state, bus)
        if check_condition(state, cc):
            bus.stack_push(state, state.pc)
            state.pc = target
            return CALL_CC_TAKEN_EXTRA
        return 0
    return execute_call_cc

def make_ret_cc(cc: str):
    def execute_ret_cc(state: Lr35902CpuState, bus: MemoryBus) -> int:
        if check_condition(state, cc):
            state.pc = bus.stack_pop(state)
            return RET_CC_TAKEN_EXTRA
        return 0
    return execute_ret_cc

# @intent:responsibility RST n: 現在のPCを積み、固定ベクタ(00h, 08h, ... 38h)へ分岐します。
def make_rst(vector: int):
    def execute_rst(state: Lr35902CpuState, bus: MemoryBus) -> int:
        bus.stack_push(state, state.pc)
        state.pc = vector
        return 0
    return execute_rst
