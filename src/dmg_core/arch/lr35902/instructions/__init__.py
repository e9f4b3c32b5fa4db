"""
LR35902命令セット実装パッケージ。
"""
from dmg_core.common.types import OpcodeEntry
from .base import fetch_immediate8, fetch_immediate16
from .control import DI_OPCODE, EI_OPCODE
from .maps import OPCODE_TABLE, UNASSIGNED

# @intent:responsibility 与えられたオペコードのテーブルエントリを返します。
def decode_opcode(opcode: int) -> OpcodeEntry:
    """
    未割り当てのオペコードでは基本サイクル数0のエントリが返ります。
    """
    return OPCODE_TABLE[opcode & 0xFF]

__all__ = [
    "OPCODE_TABLE", "UNASSIGNED", "DI_OPCODE", "EI_OPCODE",
    "decode_opcode", "fetch_immediate8", "fetch_immediate16",
]
