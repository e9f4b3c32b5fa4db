# dmg_core/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクル（フェッチ→デコード→実行）の駆動に関する
抽象化を提供します。具体的な命令の振る舞いはInstruction Layer（オペコードテーブル）に移譲されます。
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Dict, Optional

from dmg_core.common.types import OpcodeEntry
from dmg_core.core.snapshot import CpuSnapshot
from dmg_core.core.state import CpuState
from dmg_core.transport.bus import MemoryBus

logger = logging.getLogger(__name__)


# @intent:responsibility 未割り当てオペコードのデコードを表す致命的エラー。
# @intent:rationale PCの同期が失われるため読み飛ばしは許されず、エミュレーションを終了させる必要があります。
class UnassignedOpcodeError(RuntimeError):
    """
    テーブル上で基本サイクル数が0のオペコードを実行しようとした。
    `opcode` は問題のバイト、`pc` はフェッチ前のプログラムカウンタです。
    """
    def __init__(self, opcode: int, pc: int):
        super().__init__(f"Unable to resolve OPCode:{opcode:02X}   PC:{pc:04X}")
        self.opcode = opcode
        self.pc = pc


# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    バスとのインターフェース、状態管理、命令サイクルの雛形を提供します。
    """
    # @intent:pre-condition `bus`は初期化済みのMemoryBusである必要があります。
    def __init__(self, bus: MemoryBus, debug: bool = False):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0
        self._fault: Optional[UnassignedOpcodeError] = None
        self.debug = debug

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        """

    # @intent:responsibility CPUをリセットし、初期状態に戻します。フォールト状態も解除されます。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0
        self._fault = None

    def get_state(self) -> CpuState:
        """
        現在のCPUの状態を返します。コピーではないため、ステップ間でのみ参照してください。
        """
        return self._state

    # @intent:responsibility 渡された状態のコピーを現在の状態とします。スナップショットとは状態を共有しません。
    def restore_state(self, state: CpuState) -> None:
        self._state = replace(state)

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def faulted(self) -> bool:
        return self._fault is not None

    # @intent:responsibility PCの位置からオペコードを1バイト読み、PCを1進めます。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> OpcodeEntry:
        pass

    # @intent:responsibility 命令ハンドラを呼び出し、追加サイクル数を返します。
    @abstractmethod
    def _execute(self, entry: OpcodeEntry) -> int:
        pass

    # @intent:responsibility 命令実行後のアーキテクチャ固有処理（割り込みフラグの遅延適用など）を行います。
    def _after_execute(self, opcode: int) -> None:
        """
        既定では何もしません。
        """
        return None

    # @intent:responsibility デバッグトレースを出力します。
    def _trace(self, entry: OpcodeEntry, pc: int) -> None:
        logger.debug("[OP:%s] PC:%04X", entry.mnemonic, pc)

    # @intent:responsibility CPUを1命令進め、消費したクロックサイクル数を返します。
    # @intent:rationale Template Methodパターン（フェッチ→デコード→実行→後処理）で共通の実行フローを定義します。
    def step(self) -> int:
        """
        1命令を実行し、基本サイクル数とハンドラが報告した追加サイクル数の合計を返します。
        未割り当てオペコードの場合は UnassignedOpcodeError を送出し、以後の step() も同じ例外を送出します。
        """
        if self._fault is not None:
            raise self._fault

        initial_pc = self._state.pc
        opcode = self._fetch()
        entry = self._decode(opcode)

        if not entry.is_assigned:
            self._fault = UnassignedOpcodeError(opcode, initial_pc)
            logger.critical("Unable to resolve OPCode:%02X   PC:%04X", opcode, initial_pc)
            raise self._fault

        if self.debug:
            self._trace(entry, initial_pc)

        extra_cycles = self._execute(entry)
        self._after_execute(opcode)

        cycles = entry.cycles + extra_cycles
        self._cycle_count += cycles
        return cycles

    # @intent:responsibility 指定したサイクル数に達するまで命令を実行します（フレーム単位の駆動用）。
    def run_cycles(self, budget: int) -> int:
        """
        消費サイクルが `budget` 以上になるまで step() を繰り返し、実際に消費したサイクル数を返します。
        """
        elapsed = 0
        while elapsed < budget:
            elapsed += self.step()
        return elapsed

    def snapshot(self) -> CpuSnapshot:
        return CpuSnapshot.capture(self._state, self._cycle_count, self.faulted)

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        """

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        """
        現在のフラグの各ビットの状態を辞書形式で返す。
        """
