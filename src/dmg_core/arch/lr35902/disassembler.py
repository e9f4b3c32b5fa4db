"""
LR35902逆アセンブラモジュール。

メモリ上のバイナリデータをオペコードテーブルのニーモニックに変換します。
"""
from typing import List, Tuple

from dmg_core.transport.bus import MemoryBus
from dmg_core.arch.lr35902.instructions import decode_opcode
from dmg_core.arch.lr35902.instructions.base import to_signed8

# @intent:responsibility 指定されたメモリ範囲を解析し、(アドレス, 16進ダンプ, ニーモニック) のリストを返します。
# @intent:rationale バンク領域のバイトもCPUから見える値で表示するため read_byte で読み出します。
#                  読み出しのみで書き込みは行わないため、バスやカートリッジの状態は変化しません。
def disassemble(bus: MemoryBus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    result = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr and current_addr <= 0xFFFF:
        opcode = bus.read_byte(current_addr)
        entry = decode_opcode(opcode)

        if not entry.is_assigned:
            result.append((current_addr, f"{opcode:02X}", f"UNKNOWN ${opcode:02X}"))
            current_addr += 1
            continue

        operand_bytes = [bus.read_byte(current_addr + i) for i in range(1, entry.length)]
        hex_dump = " ".join(f"{b:02X}" for b in [opcode] + operand_bytes)

        fields = {}
        if entry.length == 2:
            n = operand_bytes[0]
            fields["n"] = f"${n:02X}"
            # JR の分岐先は次の命令の先頭からの相対位置
            fields["e"] = f"${(current_addr + 2 + to_signed8(n)) & 0xFFFF:04X}"
        elif entry.length == 3:
            fields["nn"] = f"${(operand_bytes[1] << 8) | operand_bytes[0]:04X}"

        result.append((current_addr, hex_dump, entry.mnemonic.format(**fields)))
        current_addr += entry.length

    return result
