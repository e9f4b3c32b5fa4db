# dmg_core/arch/lr35902/cpu.py
"""
LR35902 CPUエミュレーションの中心モジュール（オペコードディスパッチエンジン）。

1回の step() 呼び出しで、PCからのフェッチ、256エントリのテーブルによるデコード、
ハンドラの実行、DI/EIの遅延適用を行い、消費したクロックサイクル数を返します。
"""
import logging
from typing import Dict, List, Tuple

from dmg_core.common.types import OpcodeEntry
from dmg_core.core.cpu import AbstractCpu
from dmg_core.transport.bus import MemoryBus
from dmg_core.arch.lr35902.state import Lr35902CpuState
from dmg_core.arch.lr35902.instructions import (
    decode_opcode, fetch_immediate8, fetch_immediate16, DI_OPCODE, EI_OPCODE
)
from dmg_core.arch.lr35902 import disassembler

logger = logging.getLogger(__name__)

LCDC_ADDRESS = 0xFF40
IF_ADDRESS = 0xFF0F
IE_ADDRESS = 0xFFFF


# @intent:responsibility LR35902 CPUの具体的なエミュレーションロジックを提供します。
class Lr35902Cpu(AbstractCpu):
    """
    Sharp LR35902をエミュレートするクラス。
    状態とバスはこのインスタンスが排他的に所有し、複数インスタンスは互いに独立です。
    """
    _state: Lr35902CpuState

    def __init__(self, bus: MemoryBus, debug: bool = False):
        super().__init__(bus, debug)
        logger.info("Initialize CPU flags and registers")

    @property
    def bus(self) -> MemoryBus:
        return self._bus

    def _create_initial_state(self) -> Lr35902CpuState:
        return Lr35902CpuState()

    def _fetch(self) -> int:
        opcode = self._bus.read_byte(self._state.pc)
        self._state.pc = (self._state.pc + 1) & 0xFFFF
        return opcode

    def _decode(self, opcode: int) -> OpcodeEntry:
        return decode_opcode(opcode)

    def _execute(self, entry: OpcodeEntry) -> int:
        return entry.handler(self._state, self._bus)

    # @intent:responsibility DI/EIの効果を「次の命令の実行後」に適用します。
    # @intent:rationale 保留フラグはDI/EI自身の実行中に立つため、同じ命令の直後の判定はオペコードの一致で読み飛ばされ、
    #                  続く1命令の実行後に初めてIMEへ反映されます。
    def _after_execute(self, opcode: int) -> None:
        state = self._state
        if state.pending_interrupt_disabled and opcode != DI_OPCODE:
            state.pending_interrupt_disabled = False
            state.interrupt_master = False

        if state.pending_interrupt_enabled and opcode != EI_OPCODE:
            state.pending_interrupt_enabled = False
            state.interrupt_master = True

    def _trace(self, entry: OpcodeEntry, pc: int) -> None:
        s = self._state
        logger.debug(
            "[OP:%s] AF:%04X  BC:%04X  DE:%04X  HL:%04X  SP:%04X  PC:%04X  LCDC:%02X  IF:%02X  IE:%02X  IME:%s",
            entry.mnemonic, s.af, s.bc, s.de, s.hl, s.sp, pc,
            self._bus.peek(LCDC_ADDRESS), self._bus.peek(IF_ADDRESS), self._bus.peek(IE_ADDRESS),
            s.interrupt_master,
        )

    # @intent:responsibility 外部のオペコードテーブル実装向けに即値読み出しを公開します。
    def fetch_immediate8(self) -> int:
        return fetch_immediate8(self._state, self._bus)

    def fetch_immediate16(self) -> int:
        return fetch_immediate16(self._state, self._bus)

    def stack_push(self, value: int) -> None:
        self._bus.stack_push(self._state, value)

    def stack_pop(self) -> int:
        return self._bus.stack_pop(self._state)

    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        return {
            "A": s.a, "F": s.f, "B": s.b, "C": s.c, "D": s.d, "E": s.e, "H": s.h, "L": s.l,
            "AF": s.af, "BC": s.bc, "DE": s.de, "HL": s.hl,
            "SP": s.sp, "PC": s.pc,
        }

    def get_flag_state(self) -> Dict[str, bool]:
        s = self._state
        return {
            "Z": s.zero,
            "N": s.sub,
            "H": s.half_carry,
            "C": s.carry,
            "IME": s.interrupt_master,
        }

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)
