# tests/devices/test_cartridge_timer.py
"""
dmg_core.devices.cartridge, dmg_core.devices.timer モジュールの単体テスト。
"""
import pytest

from dmg_core.devices.cartridge import RomOnlyCartridge
from dmg_core.devices.timer import TacTimerScheduler, CPU_CLOCK_HZ
from dmg_core.transport.bus import MemoryBus

# @intent:test_suite ROM専用カートリッジの読み出しとTACタイマースケジューラを検証します。


class TestRomOnlyCartridge:
    def test_reads_inside_and_outside_image(self):
        cartridge = RomOnlyCartridge(bytes([0x10, 0x20, 0x30]))
        assert cartridge.rom_length == 3
        assert cartridge.read_rom(0x0001) == 0x20
        assert cartridge.read_rom(0x0003) == 0xFF
        assert cartridge.read_rom_bank(0x4000) == 0xFF

    def test_banked_rom_read(self):
        rom = bytearray(0x8000)
        rom[0x5678] = 0x9A
        assert RomOnlyCartridge(bytes(rom)).read_rom_bank(0x5678) == 0x9A

    # @intent:test_case_ram 外部RAMイメージはA000から読み出され、無い場合は0xFFになることを検証します。
    def test_external_ram_image(self):
        cartridge = RomOnlyCartridge(bytes(0x8000), ram=bytes([0x01, 0x02]))
        assert cartridge.read_rom_bank(0xA000) == 0x01
        assert cartridge.read_rom_bank(0xA001) == 0x02
        assert cartridge.read_rom_bank(0xA002) == 0xFF
        assert RomOnlyCartridge(b"").read_rom_bank(0xBFFF) == 0xFF

    def test_banking_write_is_ignored(self):
        cartridge = RomOnlyCartridge(bytes([0x42]))
        cartridge.handle_banking(0x0000, 0x0A)
        assert cartridge.read_rom(0x0000) == 0x42

    def test_from_file(self, tmp_path):
        rom_path = tmp_path / "game.gb"
        rom_path.write_bytes(bytes([0xC3, 0x50, 0x01]))
        cartridge = RomOnlyCartridge.from_file(rom_path)
        assert cartridge.rom_length == 3
        assert cartridge.read_rom(0) == 0xC3

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RomOnlyCartridge.from_file(tmp_path / "missing.gb")


class TestTacTimerScheduler:
    def test_default_frequency(self):
        timer = TacTimerScheduler()
        assert timer.timer_counter == 1024
        assert timer.frequency_hz == 4096

    # @intent:test_case_select TACの下位2ビットごとの周波数選択を検証します。
    @pytest.mark.parametrize("tac, hz", [(0x04, 4096), (0x05, 262144), (0x06, 65536), (0x07, 16384)])
    def test_set_clock_freq(self, tac, hz):
        timer = TacTimerScheduler()
        bus = MemoryBus(RomOnlyCartridge(b""), timer)
        bus._memory[0xFF07] = tac
        assert timer.get_clock_freq(bus) == tac & 0x03
        timer.set_clock_freq(bus)
        assert timer.frequency_hz == hz
        assert timer.timer_counter == CPU_CLOCK_HZ // hz
        assert timer.reconfigure_count == 1
