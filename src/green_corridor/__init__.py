"""
Green Corridor - Source Package
Simulated ambulance drive with automatic traffic signal override
"""

__version__ = "1.0.0"
__author__ = "Green Corridor Team"

from .exceptions import CorridorError, UnknownRouteError, ConfigurationError
from .utils.config import SimulatorConfig, load_config
from .utils.logger import setup_logger, DriveLogger

# Geometry
from .geometry import distance_km, polyline_length_km

# Prediction
from .prediction import TrafficLevel, TrafficPredictor, predict_traffic_level

# Routing
from .routing import Route, RouteCatalog, RouteCard, rank_routes

# Emergency
from .emergency import SignalMode, SignalDefinition, SignalOverrideHandler

# Simulation
from .simulation import (
    DriveController,
    SimulationListener,
    ManualTickScheduler,
    ThreadedTickScheduler,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Errors
    "CorridorError",
    "UnknownRouteError",
    "ConfigurationError",
    # Utils
    "SimulatorConfig",
    "load_config",
    "setup_logger",
    "DriveLogger",
    # Geometry
    "distance_km",
    "polyline_length_km",
    # Prediction
    "TrafficLevel",
    "TrafficPredictor",
    "predict_traffic_level",
    # Routing
    "Route",
    "RouteCatalog",
    "RouteCard",
    "rank_routes",
    # Emergency
    "SignalMode",
    "SignalDefinition",
    "SignalOverrideHandler",
    # Simulation
    "DriveController",
    "SimulationListener",
    "ManualTickScheduler",
    "ThreadedTickScheduler",
]
