"""
Configuration Management System

Provides:
- YAML/JSON configuration loading
- Environment variable support
- Configuration validation
- Hierarchical configuration merging
"""

import os
import json
from pathlib import Path
from typing import Dict, Any, List, Optional, Type, TypeVar
from dataclasses import dataclass, field, fields, asdict
from copy import deepcopy

import yaml

from ..exceptions import ConfigurationError


T = TypeVar('T')


def get_project_root() -> Path:
    """Get the project root directory"""
    # src/green_corridor/utils/config.py -> project root
    return Path(__file__).resolve().parents[3]


@dataclass
class DriveConfig:
    """Tick timing for the drive simulation"""
    tick_ms: float = 200.0
    segment_time_ms: float = 4200.0

    @property
    def step(self) -> float:
        """Segment progress gained per nominal tick"""
        return self.tick_ms / self.segment_time_ms


@dataclass
class DetectionConfig:
    """Distance thresholds (km) for the signal override state machine"""
    advance_detection_km: float = 3.0
    override_start_km: float = 0.40
    override_end_km: float = 0.15
    departure_buffer_km: float = 0.03
    passed_progress: float = 0.6


@dataclass
class RoutingConfig:
    """Travel time estimation"""
    base_speed_kmh: float = 35.0
    traffic_multipliers: Dict[str, float] = field(default_factory=lambda: {
        "Low": 1.0, "Medium": 1.25, "High": 1.55
    })


@dataclass
class PredictorConfig:
    """Rule-based traffic prediction table"""
    peak_windows: List[List[int]] = field(default_factory=lambda: [[8, 10], [17, 19]])
    peak_weight: int = 2
    location_bias: Dict[str, int] = field(default_factory=lambda: {
        "guindy": 1, "tnagar": 2, "egmore": 2, "central": 3
    })
    default_bias: int = 1
    high_threshold: int = 4
    medium_threshold: int = 3


@dataclass
class MapConfig:
    """Map defaults"""
    city_center: List[float] = field(default_factory=lambda: [10.9601, 78.0766])


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "WARNING"
    log_file: Optional[str] = None


@dataclass
class SimulatorConfig:
    """Complete simulator configuration"""
    name: str = "green_corridor"
    drive: DriveConfig = field(default_factory=DriveConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    routing: RoutingConfig = field(default_factory=RoutingConfig)
    predictor: PredictorConfig = field(default_factory=PredictorConfig)
    map: MapConfig = field(default_factory=MapConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Loads and manages configuration
    """

    def __init__(self, env_prefix: str = "CORRIDOR_"):
        self.env_prefix = env_prefix

    def load_yaml(self, path: str) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        with open(path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def load_json(self, path: str) -> Dict[str, Any]:
        """Load configuration from JSON file"""
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def load(self, path: str) -> Dict[str, Any]:
        """Load configuration from file (auto-detect format)"""
        path = Path(path)

        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            if path.suffix == '.json':
                data = self.load_json(str(path))
            else:
                data = self.load_yaml(str(path))
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot parse {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Top level of {path} must be a mapping")
        return data

    def load_from_env(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Override config values from environment variables

        Sections are separated by a double underscore and matched without
        regard to case:
        CORRIDOR_DRIVE__TICK_MS=100
        CORRIDOR_LOGGING__LEVEL=DEBUG
        CORRIDOR_ROUTING__TRAFFIC_MULTIPLIERS__HIGH=2.0
        """
        result = deepcopy(config)

        for key, value in os.environ.items():
            if not key.startswith(self.env_prefix):
                continue

            path = key[len(self.env_prefix):].split('__')

            current = result
            for part in path[:-1]:
                matched = self._match_key(current, part)
                if matched is not None and isinstance(current[matched], dict):
                    current = current[matched]
                else:
                    break
            else:
                final_key = self._match_key(current, path[-1])
                if final_key is not None:
                    try:
                        current[final_key] = self._convert_type(value, current[final_key])
                    except ValueError as e:
                        raise ConfigurationError(f"Invalid value for {key}: {value!r}") from e

        return result

    @staticmethod
    def _match_key(mapping: Dict[str, Any], name: str) -> Optional[str]:
        """Key of mapping equal to name, ignoring case"""
        for existing in mapping:
            if str(existing).lower() == name.lower():
                return existing
        return None

    def _convert_type(self, value: str, original: Any) -> Any:
        """Convert string value to the type of the value it replaces"""
        if isinstance(original, bool):
            return value.lower() in ('true', '1', 'yes')
        elif isinstance(original, int):
            return int(value)
        elif isinstance(original, float):
            return float(value)
        elif isinstance(original, (list, dict)):
            return json.loads(value)
        else:
            return value

    def merge_configs(
        self,
        base: Dict[str, Any],
        override: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Recursively merge two configs

        Args:
            base: Base configuration
            override: Override configuration (takes precedence)

        Returns:
            Merged configuration
        """
        result = deepcopy(base)

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self.merge_configs(result[key], value)
            else:
                result[key] = deepcopy(value)

        return result

    def dict_to_dataclass(
        self,
        data: Dict[str, Any],
        dataclass_type: Type[T]
    ) -> T:
        """
        Convert dictionary to dataclass instance

        Raises:
            ConfigurationError: if a section is not a mapping or a numeric
                field holds something that is not a number
        """
        field_types = {f.name: f.type for f in fields(dataclass_type)}

        kwargs = {}
        for key, value in data.items():
            if key not in field_types:
                continue

            field_type = field_types[key]

            # Handle nested dataclasses
            if hasattr(field_type, '__dataclass_fields__'):
                if not isinstance(value, dict):
                    raise ConfigurationError(
                        f"Section '{key}' must be a mapping, got {type(value).__name__}"
                    )
                value = self.dict_to_dataclass(value, field_type)

            elif field_type in (int, float):
                if isinstance(value, (bool, list, dict)) or value is None:
                    raise ConfigurationError(
                        f"'{key}' must be a number, got {type(value).__name__}"
                    )
                try:
                    value = field_type(value)
                except (TypeError, ValueError) as e:
                    raise ConfigurationError(f"'{key}' must be a number, got {value!r}") from e

            kwargs[key] = value

        return dataclass_type(**kwargs)

    def load_simulator_config(
        self,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None
    ) -> SimulatorConfig:
        """
        Load complete simulator configuration

        Args:
            config_path: Path to config file
            overrides: Additional overrides

        Returns:
            SimulatorConfig instance
        """
        config = asdict(SimulatorConfig())

        if config_path:
            config = self.merge_configs(config, self.load(config_path))

        config = self.load_from_env(config)

        if overrides:
            config = self.merge_configs(config, overrides)

        return self.dict_to_dataclass(config, SimulatorConfig)


class ConfigValidator:
    """
    Validates configuration values
    """

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate(self, config: SimulatorConfig) -> bool:
        """
        Validate simulator configuration

        Returns:
            True if valid
        """
        self.errors = []
        self.warnings = []

        self._validate_drive(config.drive)
        self._validate_detection(config.detection)
        self._validate_routing(config.routing)
        self._validate_predictor(config.predictor)

        return len(self.errors) == 0

    def _validate_drive(self, config: DriveConfig):
        if config.tick_ms <= 0:
            self.errors.append("tick_ms must be positive")

        if config.segment_time_ms <= 0:
            self.errors.append("segment_time_ms must be positive")
        elif config.tick_ms > config.segment_time_ms:
            self.warnings.append("tick_ms > segment_time_ms skips whole segments")

    def _validate_detection(self, config: DetectionConfig):
        if config.override_start_km <= 0:
            self.errors.append("override_start_km must be positive")

        if config.advance_detection_km < config.override_start_km:
            self.errors.append("advance_detection_km must be >= override_start_km")

        if config.override_end_km > config.override_start_km:
            self.warnings.append("override_end_km > override_start_km disables the fallback crossing rule")

        if not 0 <= config.passed_progress <= 1:
            self.errors.append("passed_progress must be in [0, 1]")

    def _validate_routing(self, config: RoutingConfig):
        if config.base_speed_kmh <= 0:
            self.errors.append("base_speed_kmh must be positive")

        for level in ("Low", "Medium", "High"):
            if level not in config.traffic_multipliers:
                self.errors.append(f"traffic_multipliers is missing '{level}'")

    def _validate_predictor(self, config: PredictorConfig):
        for window in config.peak_windows:
            if len(window) != 2 or not 0 <= window[0] <= window[1] <= 23:
                self.errors.append(f"Invalid peak window: {window}")

        if config.medium_threshold > config.high_threshold:
            self.errors.append("medium_threshold must be <= high_threshold")

    def get_report(self) -> str:
        """Get validation report"""
        lines = []

        if self.errors:
            lines.append("Errors:")
            for error in self.errors:
                lines.append(f"  - {error}")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  - {warning}")

        if not self.errors and not self.warnings:
            lines.append("Configuration is valid")

        return '\n'.join(lines)


def save_config(config: SimulatorConfig, path: str) -> str:
    """Save configuration as YAML (or JSON for a .json path)"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    config_dict = asdict(config)

    with open(path, 'w', encoding='utf-8') as f:
        if path.suffix == '.json':
            json.dump(config_dict, f, indent=2)
        else:
            yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

    return str(path)


def load_config(
    config_path: Optional[str] = None,
    **overrides
) -> SimulatorConfig:
    """
    Convenience function to load and validate configuration

    Args:
        config_path: Path to config file
        **overrides: Override values, nested keys as "drive.tick_ms"

    Returns:
        SimulatorConfig

    Raises:
        ConfigurationError: if a value has the wrong type or the result fails validation
    """
    loader = ConfigLoader()

    override_dict: Dict[str, Any] = {}
    for key, value in overrides.items():
        parts = key.split('.')
        current = override_dict
        for part in parts[:-1]:
            current = current.setdefault(part, {})
        current[parts[-1]] = value

    config = loader.load_simulator_config(config_path, override_dict)

    validator = ConfigValidator()
    try:
        valid = validator.validate(config)
    except (TypeError, AttributeError, ValueError) as e:
        raise ConfigurationError(f"Malformed configuration: {e}") from e

    if not valid:
        raise ConfigurationError(validator.get_report())

    return config
