"""
Emergency Vehicle Priority Package
Signal definitions and the proximity-based override state machine
"""

from .signals import SignalMode, SignalDefinition, SignalRuntime, SIGNAL_DEFS
from .override_handler import SignalEvent, CrossingRecord, SignalOverrideHandler

__all__ = [
    "SignalMode",
    "SignalDefinition",
    "SignalRuntime",
    "SIGNAL_DEFS",
    "SignalEvent",
    "CrossingRecord",
    "SignalOverrideHandler",
]
