# dmg_core/devices/timer.py
"""
タイマー周波数スケジューラとのインターフェース。

FF07 - TAC - Timer Control (R/W)
  Bit 2    - Timer Stop  (0=Stop, 1=Start)
  Bits 1-0 - Input Clock Select
             00:   4096 Hz
             01: 262144 Hz
             10:  65536 Hz
             11:  16384 Hz
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dmg_core.transport.bus import MemoryBus

CPU_CLOCK_HZ = 4194304
TAC_ADDRESS = 0xFF07
TAC_FREQUENCIES_HZ = (4096, 262144, 65536, 16384)


# @intent:responsibility TACへの書き込み前後でバスから問い合わせられるスケジューラの契約を定義します。
# @intent:pre-condition どちらのメソッドもバスに既に格納されたFF07の値を参照します。
class TimerScheduler(ABC):
    @abstractmethod
    def get_clock_freq(self, bus: "MemoryBus") -> int:
        pass

    @abstractmethod
    def set_clock_freq(self, bus: "MemoryBus") -> None:
        pass


# @intent:responsibility TACの下位2ビットから周波数を導出し、タイマーカウンタの再読み込み値を保持します。
class TacTimerScheduler(TimerScheduler):
    def __init__(self):
        self.timer_counter = CPU_CLOCK_HZ // TAC_FREQUENCIES_HZ[0]
        self.reconfigure_count = 0

    def get_clock_freq(self, bus: "MemoryBus") -> int:
        return bus.peek(TAC_ADDRESS) & 0x03

    def set_clock_freq(self, bus: "MemoryBus") -> None:
        freq = self.get_clock_freq(bus)
        self.timer_counter = CPU_CLOCK_HZ // TAC_FREQUENCIES_HZ[freq]
        self.reconfigure_count += 1

    @property
    def frequency_hz(self) -> int:
        return CPU_CLOCK_HZ // self.timer_counter
