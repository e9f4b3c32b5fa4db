# dmg_core/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（PCとSP）を保持するデータ構造を定義します。
"""
from dataclasses import dataclass

# @intent:responsibility 全CPUアーキテクチャに共通するレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    PCとSPのみを持つ抽象的な基底状態。
    具体的なアーキテクチャは、このクラスを継承してレジスタとフラグを追加します。
    """
    pc: int = 0x0000  # Program Counter
    sp: int = 0x0000  # Stack Pointer
