"""
共通の型定義を提供するモジュール。
オペコードテーブルやCPU層、逆アセンブラなど複数のレイヤーで共有される型を定義します。
"""
from typing import Callable, Dict, NamedTuple, TYPE_CHECKING

if TYPE_CHECKING:
    from dmg_core.core.state import CpuState
    from dmg_core.transport.bus import MemoryBus

# @intent:data_structure 命令ハンドラの型エイリアス。
# ハンドラは状態とバスへの排他的参照を受け取り、基本サイクルを超えて消費した追加サイクル数を返します。
Handler = Callable[["CpuState", "MemoryBus"], int]

# @intent:data_structure オペコード1バイト分のテーブルエントリ。
class OpcodeEntry(NamedTuple):
    cycles: int  # 基本クロックサイクル数 (0 = 未割り当て)
    handler: Handler
    mnemonic: str = "UNKNOWN"
    length: int = 1  # オペランドを含む命令のバイト長

    @property
    def is_assigned(self) -> bool:
        return self.cycles != 0

# @intent:data_structure レジスタ名と値の対応表。UIやデバッグトレースがCPUの内部構造を知らずに値を表示するために使用します。
RegisterMap = Dict[str, int]
