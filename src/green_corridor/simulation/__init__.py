"""
Simulation Package
Drive controller, tick schedulers, event log and listener interface
"""

from .drive_simulator import DriveController, DriveSession, START_PROMPT
from .event_log import EventLog, LogEntry
from .listener import SimulationListener, RecordingListener
from .scheduler import TickScheduler, ThreadedTickScheduler, ManualTickScheduler
from .status import DriveStatus, SignalRow, format_km, format_minutes

__all__ = [
    "DriveController",
    "DriveSession",
    "START_PROMPT",
    "EventLog",
    "LogEntry",
    "SimulationListener",
    "RecordingListener",
    "TickScheduler",
    "ThreadedTickScheduler",
    "ManualTickScheduler",
    "DriveStatus",
    "SignalRow",
    "format_km",
    "format_minutes",
]
