from dataclasses import dataclass, field
from typing import Optional


@dataclass
class CpuInitialState:
    pc: Optional[int] = None  # None = ブートROM後の既定値を維持
    sp: Optional[int] = None
    registers: dict = field(default_factory=dict)


@dataclass
class MachineConfig:
    rom: Optional[str] = None
    debug: bool = False
    initial_state: CpuInitialState = field(default_factory=CpuInitialState)
