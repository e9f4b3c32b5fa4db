# dmg_core/transport/bus.py
"""
Transport Layer (メモリバス)

64KBのアドレス空間を1つのバイト配列で表現し、バンク切り替え領域はカートリッジへ委譲します。
特殊レジスタへの書き込みの副作用とスタック操作もこのバスが担います。

General Memory Map
  0000-3FFF   16KB ROM Bank 00     (in cartridge, fixed at bank 00)
  4000-7FFF   16KB ROM Bank 01..NN (in cartridge, switchable bank number)
  8000-9FFF   8KB Video RAM (VRAM)
  A000-BFFF   8KB External RAM     (in cartridge, switchable bank, if any)
  C000-CFFF   4KB Work RAM Bank 0 (WRAM)
  D000-DFFF   4KB Work RAM Bank 1 (WRAM)
  E000-FDFF   Same as C000-DDFF (ECHO)
  FE00-FE9F   Sprite Attribute Table (OAM)
  FEA0-FEFF   Not Usable
  FF00-FF7F   I/O Ports
  FF80-FFFE   High RAM (HRAM)
  FFFF        Interrupt Enable Register
"""
import logging
from typing import Dict

from dmg_core.core.state import CpuState
from dmg_core.devices.cartridge import Cartridge
from dmg_core.devices.timer import TimerScheduler
from dmg_core.transport.dma import DmaUnit

logger = logging.getLogger(__name__)

MEMORY_SIZE = 0x10000
FIXED_ROM_LOAD_LIMIT = 0x8000

ROM_BANK_START, ROM_BANK_END = 0x4000, 0x7FFF
EXTERNAL_RAM_START, EXTERNAL_RAM_END = 0xA000, 0xBFFF
ECHO_RAM_START, ECHO_RAM_END = 0xE000, 0xFE00  # end exclusive
ECHO_OFFSET = 0x2000
RESTRICTED_START, RESTRICTED_END = 0xFEA0, 0xFEFF  # end exclusive

DIV_REGISTER = 0xFF04
TAC_REGISTER = 0xFF07
LY_REGISTER = 0xFF44
DMA_REGISTER = 0xFF46

# @intent:constant 電源投入シーケンス後のI/Oレジスタ値 (Pan Docs "Power Up Sequence")。
POWER_ON_IO_REGISTERS: Dict[int, int] = {
    0xFF05: 0x00, 0xFF06: 0x00, 0xFF07: 0x00, 0xFF0F: 0xE1,
    0xFF10: 0x80, 0xFF11: 0xBF, 0xFF12: 0xF3, 0xFF14: 0xBF,
    0xFF16: 0x3F, 0xFF17: 0x00, 0xFF19: 0xBF, 0xFF1A: 0x7F,
    0xFF1B: 0xFF, 0xFF1C: 0x9F, 0xFF1E: 0xBF, 0xFF20: 0xFF,
    0xFF21: 0x00, 0xFF22: 0x00, 0xFF23: 0xBF, 0xFF24: 0x77,
    0xFF25: 0xF3, 0xFF26: 0xF1, 0xFF40: 0x91, 0xFF42: 0x00,
    0xFF43: 0x00, 0xFF45: 0x00, 0xFF47: 0xFC, 0xFF48: 0xFF,
    0xFF49: 0xFF, 0xFF4A: 0x00, 0xFF4B: 0x00, 0xFFFF: 0x00,
}


# @intent:responsibility アドレス空間全体への読み書きを、順序付きの規則表に従って振り分けます。
# @intent:rationale 1つの平坦なアドレス空間に多数の特殊動作が重なっているため、
#                  全てのアドレス依存の振る舞いをこのクラスに集約し、評価順序を固定します。
class MemoryBus:
    """
    LR35902のメモリバス。
    ローカル配列、カートリッジへの委譲、I/Oレジスタの副作用、DMA、スタック操作を提供します。
    """
    def __init__(self, cartridge: Cartridge, timer: TimerScheduler):
        self._cartridge = cartridge
        self._timer = timer
        self._memory = bytearray(MEMORY_SIZE)
        self._dma = DmaUnit(self)
        self.power_on()

    @property
    def cartridge(self) -> Cartridge:
        return self._cartridge

    @property
    def timer(self) -> TimerScheduler:
        return self._timer

    # @intent:responsibility ROM先頭32KBの読み込みと電源投入時のI/Oレジスタ値の設定を行います。
    def power_on(self) -> None:
        logger.info("Start to initialize memory...")
        self._memory = bytearray(MEMORY_SIZE)

        logger.info("Load first 32KByte of rom data into memory")
        for i in range(min(self._cartridge.rom_length, FIXED_ROM_LOAD_LIMIT)):
            self._memory[i] = self._cartridge.read_rom(i)

        for address, value in POWER_ON_IO_REGISTERS.items():
            self._memory[address] = value

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します。
    # @intent:rationale 外部RAM領域の読み込みもROMバンクと同じ read_rom_bank に委譲します（実機互換のための意図的な経路）。
    #                  RAMバンク固有の挙動が必要な場合は、カートリッジ側がアドレスで分岐します。
    def read_byte(self, address: int) -> int:
        address &= 0xFFFF
        if ROM_BANK_START <= address <= ROM_BANK_END:
            return self._cartridge.read_rom_bank(address)
        if EXTERNAL_RAM_START <= address <= EXTERNAL_RAM_END:
            return self._cartridge.read_rom_bank(address)
        return self._memory[address]

    # @intent:responsibility 委譲や副作用を経由せず、ローカル配列の値をそのまま返します（インスペクタ、タイマー用）。
    def peek(self, address: int) -> int:
        return self._memory[address & 0xFFFF]

    # @intent:responsibility 副作用表を優先順位どおりに評価して8bitのデータを書き込みます。
    def write_byte(self, address: int, value: int) -> None:
        """
        1. 0x8000未満: バンク切り替え書き込みとしてカートリッジへ委譲
        2. ECHO RAM: その場に格納し、0x2000下のWRAMにも書き込む
        3. 使用禁止領域: 破棄
        4. DIV / 5. LY: 値に関わらず0にリセット
        6. DMA: 転送を起動（値は格納しない）
        7. TAC: 格納し、導出されるクロック周波数が変わればタイマーを再設定
        8. その他: 格納
        """
        address &= 0xFFFF
        value &= 0xFF

        if address < FIXED_ROM_LOAD_LIMIT:
            logger.debug("Banking write to %04X: %02X", address, value)
            self._cartridge.handle_banking(address, value)
        elif ECHO_RAM_START <= address < ECHO_RAM_END:
            # writing to ECHO ram also writes in RAM
            self._memory[address] = value
            self.write_byte(address - ECHO_OFFSET, value)
        elif RESTRICTED_START <= address < RESTRICTED_END:
            # this area is restricted
            pass
        elif address == DIV_REGISTER:
            # Writing any value to this register resets it to 00h.
            self._memory[DIV_REGISTER] = 0
        elif address == LY_REGISTER:
            # Writing will reset the counter.
            self._memory[LY_REGISTER] = 0
        elif address == DMA_REGISTER:
            self._dma.transfer(value)
        elif address == TAC_REGISTER:
            current_freq = self._timer.get_clock_freq(self)
            self._memory[TAC_REGISTER] = value
            new_freq = self._timer.get_clock_freq(self)
            if current_freq != new_freq:
                self._timer.set_clock_freq(self)
        else:
            self._memory[address] = value

    # @intent:responsibility 16bit値をスタックへ積みます。上位バイトが高位アドレス側になります。
    def stack_push(self, state: CpuState, value: int) -> None:
        hi = (value >> 8) & 0xFF
        lo = value & 0xFF
        state.sp = (state.sp - 1) & 0xFFFF
        self.write_byte(state.sp, hi)
        state.sp = (state.sp - 1) & 0xFFFF
        self.write_byte(state.sp, lo)
        logger.debug("Stack Push: %X, SP:%X", value, state.sp)

    # @intent:responsibility スタックから16bit値を取り出します。
    def stack_pop(self, state: CpuState) -> int:
        lo = self.read_byte(state.sp)
        hi = self.read_byte(state.sp + 1)
        state.sp = (state.sp + 2) & 0xFFFF
        return lo | (hi << 8)
