import yaml
from pathlib import Path
from typing import Dict, Any, Union
from .models import MachineConfig, CpuInitialState


class ConfigLoader:
    # @intent:responsibility YAMLファイルを読み込みます。ROMの相対パスは設定ファイルのディレクトリを基準に解決します。
    def load_from_file(self, path: Union[str, Path]) -> MachineConfig:
        path = Path(path)
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
        config = self._parse_config(data)
        if config.rom and not Path(config.rom).is_absolute():
            config.rom = str(path.parent / config.rom)
        return config

    def _parse_config(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Invalid machine config: expected a mapping, got {type(data).__name__}")

        initial_state_data = self._parse_mapping(data.get("initial_state"), "initial_state")
        registers = {
            str(name).lower(): self._parse_int(value)
            for name, value in self._parse_mapping(initial_state_data.get("registers"), "registers").items()
        }
        initial_state = CpuInitialState(
            pc=self._parse_optional_int(initial_state_data.get("pc")),
            sp=self._parse_optional_int(initial_state_data.get("sp")),
            registers=registers
        )

        return MachineConfig(
            rom=data.get("rom"),
            debug=bool(data.get("debug", False)),
            initial_state=initial_state
        )

    # 未指定（None）は空の辞書として扱う
    def _parse_mapping(self, value: Any, key: str) -> Dict[str, Any]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError(f"Invalid '{key}' section: expected a mapping, got {type(value).__name__}")
        return value

    def _parse_optional_int(self, value: Any):
        if value is None:
            return None
        return self._parse_int(value)

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.lower().startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")
