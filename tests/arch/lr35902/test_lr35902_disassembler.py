# tests/arch/lr35902/test_lr35902_disassembler.py
"""
dmg_core.arch.lr35902.disassemblerモジュールの単体テスト。
"""
from dmg_core.arch.lr35902.disassembler import disassemble
from dmg_core.devices.cartridge import RomOnlyCartridge

# @intent:test_suite バイト列がオペコードテーブルのニーモニックへ変換されることを検証します。


class TestDisassembler:
    def test_basic_listing(self, make_machine):
        program = bytes([
            0x00,              # NOP
            0x3E, 0x42,        # LD A,$42
            0xC3, 0x50, 0x01,  # JP $0150
            0xE0, 0x40,        # LDH ($40),A
            0x7E,              # LD A,(HL)
        ])
        _, bus = make_machine(program)
        lines = disassemble(bus, 0x0100, len(program))
        assert lines == [
            (0x0100, "00", "NOP"),
            (0x0101, "3E 42", "LD A,$42"),
            (0x0103, "C3 50 01", "JP $0150"),
            (0x0106, "E0 40", "LDH ($40),A"),
            (0x0108, "7E", "LD A,(HL)"),
        ]

    # @intent:test_case_relative JRの分岐先が絶対アドレスで表示されることを検証します。
    def test_relative_jump_target(self, make_machine):
        _, bus = make_machine(bytes([0x18, 0xFE, 0x20, 0x05]))
        lines = disassemble(bus, 0x0100, 4)
        assert lines[0] == (0x0100, "18 FE", "JR $0100")
        assert lines[1] == (0x0102, "20 05", "JR NZ,$0109")

    def test_unassigned_byte_is_reported(self, make_machine):
        _, bus = make_machine(bytes([0xD3, 0xC9]))
        lines = disassemble(bus, 0x0100, 2)
        assert lines == [(0x0100, "D3", "UNKNOWN $D3"), (0x0101, "C9", "RET")]

    # @intent:test_case_banked バンク領域はカートリッジ経由の値で表示され、バスの内容は変化しないことを検証します。
    def test_banked_rom_is_listed_from_cartridge(self, make_machine):
        rom = bytearray(0x8000)
        rom[0x4000:0x4003] = bytes([0xC3, 0x00, 0x40])  # JP $4000
        _, bus = make_machine(cartridge=RomOnlyCartridge(bytes(rom)))
        bus._memory[0x4000] = 0xD3
        before = bytes(bus._memory)

        lines = disassemble(bus, 0x4000, 3)

        assert lines == [(0x4000, "C3 00 40", "JP $4000")]
        assert bytes(bus._memory) == before

    def test_cpu_disassemble_delegates(self, make_machine):
        cpu, _ = make_machine(bytes([0xF3, 0xFB]))
        assert [line[2] for line in cpu.disassemble(0x0100, 2)] == ["DI", "EI"]
