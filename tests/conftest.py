# tests/conftest.py
"""
テスト共通のフィクスチャとヘルパー。
"""
import pytest

from dmg_core.transport.bus import MemoryBus
from dmg_core.devices.cartridge import Cartridge, RomOnlyCartridge
from dmg_core.devices.timer import TacTimerScheduler, TimerScheduler
from dmg_core.arch.lr35902.cpu import Lr35902Cpu

PROGRAM_START = 0x0100


# @intent:test_helper 0x0100からプログラムを配置した32KBのROMイメージを作ります。
def make_rom(program: bytes = b"", size: int = 0x8000, fill: int = 0x00) -> bytearray:
    rom = bytearray([fill] * size)
    rom[PROGRAM_START:PROGRAM_START + len(program)] = program
    return rom


# @intent:test_helper 呼び出しを記録するカートリッジ。バンク読み出しはアドレスから導出した値を返します。
class RecordingCartridge(Cartridge):
    def __init__(self, rom: bytes = b""):
        self._rom = bytes(rom)
        self.bank_reads = []
        self.banking_writes = []

    @property
    def rom_length(self) -> int:
        return len(self._rom)

    def read_rom(self, address: int) -> int:
        return self._rom[address]

    def read_rom_bank(self, address: int) -> int:
        self.bank_reads.append(address)
        return (address ^ (address >> 8) ^ 0x5A) & 0xFF

    def handle_banking(self, address: int, value: int) -> None:
        self.banking_writes.append((address, value))


# @intent:test_helper 問い合わせ回数を記録するタイマースケジューラ。
class RecordingTimer(TimerScheduler):
    def __init__(self):
        self.queries = 0
        self.reconfigurations = 0

    def get_clock_freq(self, bus) -> int:
        self.queries += 1
        return bus.peek(0xFF07) & 0x03

    def set_clock_freq(self, bus) -> None:
        self.reconfigurations += 1


@pytest.fixture
def make_machine():
    """
    プログラムを配置したROMからCPUとバスを構築するファクトリ。
    """
    def _make(program: bytes = b"", cartridge: Cartridge = None, timer: TimerScheduler = None):
        if cartridge is None:
            cartridge = RomOnlyCartridge(make_rom(program))
        bus = MemoryBus(cartridge, timer if timer is not None else TacTimerScheduler())
        cpu = Lr35902Cpu(bus)
        return cpu, bus
    return _make
