import logging
from typing import Optional, Tuple

from dmg_core.transport.bus import MemoryBus
from dmg_core.devices.cartridge import Cartridge, RomOnlyCartridge
from dmg_core.devices.timer import TacTimerScheduler, TimerScheduler
from dmg_core.arch.lr35902.cpu import Lr35902Cpu
from .models import MachineConfig, CpuInitialState

logger = logging.getLogger(__name__)

# initial_state.registers で上書きできるレジスタ名（PC/SPは専用の項目で指定します）
REGISTERS_8BIT = ("a", "f", "b", "c", "d", "e", "h", "l")
REGISTERS_16BIT = ("af", "bc", "de", "hl")


# @intent:responsibility 設定に基づいてカートリッジ、タイマー、バス、CPUを生成・接続し、初期状態を適用します。
class SystemBuilder:
    def build_system(self, config: MachineConfig, cartridge: Optional[Cartridge] = None,
                     timer: Optional[TimerScheduler] = None) -> Tuple[Lr35902Cpu, MemoryBus]:
        if cartridge is None:
            if not config.rom:
                raise ValueError("No cartridge given and no 'rom' path in machine config")
            cartridge = RomOnlyCartridge.from_file(config.rom)

        bus = MemoryBus(cartridge, timer if timer is not None else TacTimerScheduler())
        cpu = Lr35902Cpu(bus, debug=config.debug)

        self.apply_initial_state(cpu, config.initial_state)
        return cpu, bus

    # @intent:responsibility 設定で上書きされたレジスタ値をCPUに適用します。未指定の項目はブートROM後の値のままです。
    def apply_initial_state(self, cpu: Lr35902Cpu, config_state: CpuInitialState) -> None:
        state = cpu.get_state()
        if config_state.pc is not None:
            state.pc = config_state.pc & 0xFFFF
        if config_state.sp is not None:
            state.sp = config_state.sp & 0xFFFF
        for reg_name, value in config_state.registers.items():
            if reg_name in REGISTERS_8BIT:
                value &= 0xFF
            elif reg_name in REGISTERS_16BIT:
                value &= 0xFFFF
            else:
                raise ValueError(f"Unknown register in initial_state: {reg_name}")
            if reg_name == "f":
                # keep the boolean flags in sync with F
                state.af = (state.a << 8) | value
            else:
                setattr(state, reg_name, value)
            logger.debug("Initial register override %s=%X", reg_name, value)
