"""
Utility functions package
"""

from .config import (
    SimulatorConfig,
    DriveConfig,
    DetectionConfig,
    RoutingConfig,
    PredictorConfig,
    MapConfig,
    LoggingConfig,
    ConfigLoader,
    ConfigValidator,
    load_config,
    save_config,
    get_project_root,
)
from .logger import setup_logger, get_logger, parse_level, DriveLogger

__all__ = [
    "SimulatorConfig",
    "DriveConfig",
    "DetectionConfig",
    "RoutingConfig",
    "PredictorConfig",
    "MapConfig",
    "LoggingConfig",
    "ConfigLoader",
    "ConfigValidator",
    "load_config",
    "save_config",
    "get_project_root",
    "setup_logger",
    "get_logger",
    "parse_level",
    "DriveLogger",
]
