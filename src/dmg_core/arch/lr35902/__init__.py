# src/dmg_core/arch/lr35902/__init__.py
"""
Sharp LR35902 Architecture Package
"""
from .cpu import Lr35902Cpu
from .state import Lr35902CpuState
