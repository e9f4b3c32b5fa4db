"""
LR35902 命令マッピング定義。
各命令モジュールからハンドラを集め、256エントリのオペコードテーブルを構築します。

サイクル数はT-state単位です。条件付き分岐の基本サイクル数は条件不成立時の値で、
成立時の差分はハンドラが追加サイクルとして返します。
ニーモニック中の {n}, {nn}, {e} は逆アセンブル時にオペランドで置き換えられます。
"""
from typing import List

from dmg_core.common.types import OpcodeEntry
from .base import get_register_name, get_push_pop_reg_name, get_ss_reg_name, CONDITION_CODES
from .alu import make_alu_r, make_alu_n, make_inc_dec8, make_inc_dec16, ALU_OPERATION_ORDER
from .load import (
    make_ld_r_n, make_ld_r_r_prime, make_ld_ss_nn, make_push, make_pop,
    execute_ld_nn_a, execute_ld_a_nn, execute_ldh_n_a, execute_ldh_a_n,
    execute_ld_hli_a, execute_ld_hld_a, execute_ld_a_hli, execute_ld_a_hld
)
from .control import (
    make_jp_cc, make_jr_cc, make_call_cc, make_ret_cc, make_rst,
    execute_nop, execute_di, execute_ei, execute_jp_nn, execute_jp_hl, execute_jr_e,
    execute_call_nn, execute_ret, execute_reti, DI_OPCODE, EI_OPCODE
)


def execute_unassigned(state, bus) -> int:
    # never invoked: the dispatch engine stops on cycles == 0
    return 0

UNASSIGNED = OpcodeEntry(0, execute_unassigned)


def _build_opcode_table() -> List[OpcodeEntry]:
    table = [UNASSIGNED] * 0x100

    table[0x00] = OpcodeEntry(4, execute_nop, "NOP")
    table[DI_OPCODE] = OpcodeEntry(4, execute_di, "DI")
    table[EI_OPCODE] = OpcodeEntry(4, execute_ei, "EI")

    # 16-bit loads and INC/DEC ss
    for code in range(4):
        ss = get_ss_reg_name(code)
        table[0x01 | (code << 4)] = OpcodeEntry(12, make_ld_ss_nn(ss), f"LD {ss},{{nn}}", 3)
        table[0x03 | (code << 4)] = OpcodeEntry(8, make_inc_dec16(ss, True), f"INC {ss}")
        table[0x0B | (code << 4)] = OpcodeEntry(8, make_inc_dec16(ss, False), f"DEC {ss}")

    # INC r / DEC r / LD r,n
    for code in range(8):
        reg = get_register_name(code)
        mem = reg == "(HL)"
        table[0x04 | (code << 3)] = OpcodeEntry(12 if mem else 4, make_inc_dec8(reg, True), f"INC {reg}")
        table[0x05 | (code << 3)] = OpcodeEntry(12 if mem else 4, make_inc_dec8(reg, False), f"DEC {reg}")
        table[0x06 | (code << 3)] = OpcodeEntry(12 if mem else 8, make_ld_r_n(reg), f"LD {reg},{{n}}", 2)

    table[0x22] = OpcodeEntry(8, execute_ld_hli_a, "LD (HL+),A")
    table[0x2A] = OpcodeEntry(8, execute_ld_a_hli, "LD A,(HL+)")
    table[0x32] = OpcodeEntry(8, execute_ld_hld_a, "LD (HL-),A")
    table[0x3A] = OpcodeEntry(8, execute_ld_a_hld, "LD A,(HL-)")

    # LD r,r' (0x76 is HALT, not LD (HL),(HL))
    for opcode in range(0x40, 0x80):
        if opcode == 0x76:
            continue
        dest = get_register_name((opcode >> 3) & 0b111)
        src = get_register_name(opcode & 0b111)
        cycles = 8 if "(HL)" in (dest, src) else 4
        table[opcode] = OpcodeEntry(cycles, make_ld_r_r_prime(dest, src), f"LD {dest},{src}")

    # 8-bit ALU: A op r / A op n
    for op_code, operation in enumerate(ALU_OPERATION_ORDER):
        if operation is None:
            continue
        for reg_code in range(8):
            reg = get_register_name(reg_code)
            cycles = 8 if reg == "(HL)" else 4
            table[0x80 | (op_code << 3) | reg_code] = OpcodeEntry(
                cycles, make_alu_r(operation, reg), f"{operation} {reg}")
        table[0xC6 | (op_code << 3)] = OpcodeEntry(8, make_alu_n(operation), f"{operation} {{n}}", 2)

    # Control flow
    table[0x18] = OpcodeEntry(12, execute_jr_e, "JR {e}", 2)
    table[0xC3] = OpcodeEntry(16, execute_jp_nn, "JP {nn}", 3)
    table[0xE9] = OpcodeEntry(4, execute_jp_hl, "JP (HL)")
    table[0xCD] = OpcodeEntry(24, execute_call_nn, "CALL {nn}", 3)
    table[0xC9] = OpcodeEntry(16, execute_ret, "RET")
    table[0xD9] = OpcodeEntry(16, execute_reti, "RETI")
    for cc_code, cc in CONDITION_CODES.items():
        table[0x20 | (cc_code << 3)] = OpcodeEntry(8, make_jr_cc(cc), f"JR {cc},{{e}}", 2)
        table[0xC0 | (cc_code << 3)] = OpcodeEntry(8, make_ret_cc(cc), f"RET {cc}")
        table[0xC2 | (cc_code << 3)] = OpcodeEntry(12, make_jp_cc(cc), f"JP {cc},{{nn}}", 3)
        table[0xC4 | (cc_code << 3)] = OpcodeEntry(12, make_call_cc(cc), f"CALL {cc},{{nn}}", 3)
    for n in range(8):
        vector = n * 8
        table[0xC7 | (n << 3)] = OpcodeEntry(16, make_rst(vector), f"RST {vector:02X}H")

    # PUSH/POP qq
    for code in range(4):
        qq = get_push_pop_reg_name(code)
        table[0xC1 | (code << 4)] = OpcodeEntry(12, make_pop(qq), f"POP {qq}")
        table[0xC5 | (code << 4)] = OpcodeEntry(16, make_push(qq), f"PUSH {qq}")

    # Memory-absolute and high-page loads
    table[0xE0] = OpcodeEntry(12, execute_ldh_n_a, "LDH ({n}),A", 2)
    table[0xF0] = OpcodeEntry(12, execute_ldh_a_n, "LDH A,({n})", 2)
    table[0xEA] = OpcodeEntry(16, execute_ld_nn_a, "LD ({nn}),A", 3)
    table[0xFA] = OpcodeEntry(16, execute_ld_a_nn, "LD A,({nn})", 3)

    return table


OPCODE_TABLE: List[OpcodeEntry] = _build_opcode_table()
