# tests/config/test_machine_config.py
"""
dmg_core.configパッケージの単体テスト。
"""
import pytest
import yaml

from dmg_core.config.loader import ConfigLoader
from dmg_core.config.builder import SystemBuilder
from dmg_core.config.models import MachineConfig, CpuInitialState
from dmg_core.arch.lr35902.cpu import Lr35902Cpu
from dmg_core.devices.cartridge import RomOnlyCartridge
from conftest import make_rom, RecordingTimer

# @intent:test_suite YAML設定の解析とシステムの組み立てを検証します。

SAMPLE_CONFIG = """
rom: roms/test.gb
debug: true
initial_state:
  pc: 0x0150
  sp: "0xDFFF"
  registers:
    A: 0x12
    F: 0x5F
    b: 7
"""


class TestConfigLoader:
    def test_parse_config(self):
        config = ConfigLoader()._parse_config(yaml.safe_load(SAMPLE_CONFIG))
        assert config.rom == "roms/test.gb"
        assert config.debug is True
        assert config.initial_state.pc == 0x0150
        assert config.initial_state.sp == 0xDFFF
        assert config.initial_state.registers == {"a": 0x12, "f": 0x5F, "b": 7}

    def test_empty_config_uses_defaults(self):
        config = ConfigLoader()._parse_config({})
        assert config == MachineConfig()

    def test_non_mapping_is_rejected(self):
        with pytest.raises(ValueError):
            ConfigLoader()._parse_config(["rom.gb"])

    # @intent:test_case_sections initial_state や registers がマッピングでない場合は ValueError になることを検証します。
    @pytest.mark.parametrize("text", [
        "initial_state: [1, 2]",
        "initial_state: 5",
        "initial_state:\n  registers: [a, b]",
    ])
    def test_non_mapping_sections_are_rejected(self, text):
        with pytest.raises(ValueError):
            ConfigLoader()._parse_config(yaml.safe_load(text))

    @pytest.mark.parametrize("value", [True, 1.5, "zz"])
    def test_invalid_integers_are_rejected(self, value):
        with pytest.raises(ValueError):
            ConfigLoader()._parse_int(value)

    # @intent:test_case_relative ROMの相対パスが設定ファイルの場所を基準に解決されることを検証します。
    def test_load_from_file_resolves_rom_path(self, tmp_path):
        config_path = tmp_path / "machine.yaml"
        config_path.write_text(SAMPLE_CONFIG)
        config = ConfigLoader().load_from_file(config_path)
        assert config.rom == str(tmp_path / "roms" / "test.gb")

    def test_load_empty_file(self, tmp_path):
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        assert ConfigLoader().load_from_file(config_path) == MachineConfig()


class TestSystemBuilder:
    def test_build_from_rom_file(self, tmp_path):
        rom_path = tmp_path / "test.gb"
        rom_path.write_bytes(make_rom(bytes([0x3E, 0x42])))
        cpu, bus = SystemBuilder().build_system(MachineConfig(rom=str(rom_path)))
        assert isinstance(cpu, Lr35902Cpu)
        assert bus.read_byte(0x0100) == 0x3E
        cpu.step()
        assert cpu.get_state().a == 0x42

    def test_build_without_rom_fails(self):
        with pytest.raises(ValueError):
            SystemBuilder().build_system(MachineConfig())

    def test_build_with_injected_devices(self):
        timer = RecordingTimer()
        cpu, bus = SystemBuilder().build_system(
            MachineConfig(debug=True), cartridge=RomOnlyCartridge(make_rom(b"")), timer=timer)
        assert cpu.debug is True
        assert bus.timer is timer

    # @intent:test_case_overrides 初期状態の上書き、特にFの上書きでフラグが同期することを検証します。
    def test_initial_state_overrides(self):
        config = ConfigLoader()._parse_config(yaml.safe_load(SAMPLE_CONFIG))
        cpu, _ = SystemBuilder().build_system(config, cartridge=RomOnlyCartridge(make_rom(b"")))
        state = cpu.get_state()
        assert state.pc == 0x0150
        assert state.sp == 0xDFFF
        assert state.a == 0x12
        assert state.b == 7
        assert state.f == 0x50
        assert state.zero is False
        assert state.sub is True
        assert state.half_carry is False
        assert state.carry is True

    @pytest.mark.parametrize("name", ["ix", "zero", "pending_interrupt_enabled", "pc", "sp"])
    def test_non_register_names_are_rejected(self, name):
        config = MachineConfig(initial_state=CpuInitialState(registers={name: 1}))
        with pytest.raises(ValueError):
            SystemBuilder().build_system(config, cartridge=RomOnlyCartridge(b""))

    # @intent:test_case_mask 範囲外の値はレジスタ幅にマスクされることを検証します。
    def test_override_values_are_masked_to_register_width(self):
        config = MachineConfig(initial_state=CpuInitialState(
            registers={"a": 0x1FF, "hl": 0x12345, "bc": 0x1ABCD}))
        cpu, _ = SystemBuilder().build_system(config, cartridge=RomOnlyCartridge(b""))
        state = cpu.get_state()
        assert state.a == 0xFF
        assert state.af == 0xFFB0
        assert state.hl == 0x2345
        assert state.bc == 0xABCD
        assert state.b == 0xAB
        assert state.c == 0xCD

    def test_af_override_syncs_flags(self):
        config = MachineConfig(initial_state=CpuInitialState(registers={"af": 0x3A8F}))
        cpu, _ = SystemBuilder().build_system(config, cartridge=RomOnlyCartridge(b""))
        state = cpu.get_state()
        assert state.af == 0x3A80
        assert state.zero is True
        assert state.carry is False
