# dmg_core/core/snapshot.py
"""
実行状態の不変スナップショット

ステップ間にCPUの状態を外部（デバッガ、表示系）から観測するためのデータ構造を定義します。
コアはステップ実行中に状態を変更し続けるため、観測側はこのコピーを参照します。
"""
from dataclasses import dataclass, replace

from dmg_core.core.state import CpuState


# @intent:responsibility ある命令境界におけるCPU状態のコピーと累計サイクル数を不変に記録します。
@dataclass(frozen=True)
class CpuSnapshot:
    state: CpuState
    cycle_count: int
    faulted: bool = False

    # @intent:rationale dataclasses.replaceで状態を浅くコピーする。状態のフィールドは全て不変な値（int/bool）なので十分です。
    @classmethod
    def capture(cls, state: CpuState, cycle_count: int, faulted: bool = False) -> "CpuSnapshot":
        return cls(state=replace(state), cycle_count=cycle_count, faulted=faulted)
