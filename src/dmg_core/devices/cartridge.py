# dmg_core/devices/cartridge.py
"""
カートリッジ（メモリバンクコントローラ）とのインターフェース。

バスはROMの固定バンク読み出し、切り替えバンク読み出し、バンク切り替え書き込みを
このインターフェースを通じて行います。MBCの具体的なバンク切り替えアルゴリズムはここでは扱いません。
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

ROM_BANK_SIZE = 0x4000
EXTERNAL_RAM_START = 0xA000
EXTERNAL_RAM_END = 0xBFFF


# @intent:responsibility バスから見たカートリッジの振る舞いを定義します。
class Cartridge(ABC):
    # @intent:responsibility ROMイメージのバイト数。電源投入時のロード範囲の上限に使われます。
    @property
    @abstractmethod
    def rom_length(self) -> int:
        pass

    @abstractmethod
    def read_rom(self, address: int) -> int:
        """
        固定バンク（電源投入時のロード）用の読み出し。
        """

    @abstractmethod
    def read_rom_bank(self, address: int) -> int:
        """
        切り替えROMバンク(4000-7FFF)と外部RAM(A000-BFFF)の両方の読み出しに使われます。
        """

    @abstractmethod
    def handle_banking(self, address: int, value: int) -> None:
        """
        0x8000未満への書き込み（バンク切り替え要求）を処理します。
        """


# @intent:responsibility MBCを持たない32KB ROMカートリッジ。バンク切り替え書き込みは無視されます。
class RomOnlyCartridge(Cartridge):
    """
    ROMイメージとオプションの外部RAMイメージを保持する最小構成のカートリッジ。
    外部RAM領域の読み出しは read_rom_bank 内でアドレスにより分岐し、RAMが無い場合は0xFFを返します。
    """
    def __init__(self, rom: bytes, ram: bytes = b""):
        self._rom = bytes(rom)
        self._ram = bytes(ram)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "RomOnlyCartridge":
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"ROM file not found: {path}")
        data = path.read_bytes()
        logger.info("Loaded ROM %s (%d bytes)", path.name, len(data))
        return cls(data)

    @property
    def rom_length(self) -> int:
        return len(self._rom)

    def read_rom(self, address: int) -> int:
        if 0 <= address < len(self._rom):
            return self._rom[address]
        return 0xFF

    def read_rom_bank(self, address: int) -> int:
        if EXTERNAL_RAM_START <= address <= EXTERNAL_RAM_END:
            return self.read_ram_bank(address)
        return self.read_rom(address)

    def read_ram_bank(self, address: int) -> int:
        offset = address - EXTERNAL_RAM_START
        if 0 <= offset < len(self._ram):
            return self._ram[offset]
        return 0xFF

    def handle_banking(self, address: int, value: int) -> None:
        # ROM only: there is no bank register to switch
        logger.debug("Ignoring banking write %02X to %04X on ROM-only cartridge", value, address)
