"""
Snapshot types exposed to the rendering layer after every tick
"""

import math
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..emergency import SignalMode
from ..geometry import LatLon

PLACEHOLDER = '—'


def format_km(km: Optional[float]) -> str:
    """Distance text such as '1.25 km', or a dash when unknown"""
    if km is None or not math.isfinite(km):
        return PLACEHOLDER
    return f"{km:.2f} km"


def format_minutes(minutes: Optional[float]) -> str:
    """Travel time text such as '7 min'"""
    if minutes is None or not math.isfinite(minutes):
        return PLACEHOLDER
    if minutes < 1:
        return '< 1 min'
    # Halves round up
    return f"{int(math.floor(minutes + 0.5))} min"


@dataclass(frozen=True)
class DriveStatus:
    """Everything a renderer needs to draw one frame"""
    position: LatLon
    is_driving: bool
    route_id: Optional[str]
    current_index: int
    segment_progress: float
    signal_modes: Dict[str, SignalMode] = field(default_factory=dict)
    active_signal_id: Optional[str] = None
    distance_km: Optional[float] = None
    auto_control: bool = False
    advance_detection: bool = False
    route_highlighted: bool = False
    emergency_mode: bool = False

    @property
    def active_signal_mode(self) -> SignalMode:
        if self.active_signal_id is None:
            return SignalMode.NORMAL
        return self.signal_modes.get(self.active_signal_id, SignalMode.NORMAL)

    @property
    def active_signal_text(self) -> str:
        return self.active_signal_id or PLACEHOLDER

    @property
    def distance_text(self) -> str:
        return format_km(self.distance_km)

    @property
    def auto_control_text(self) -> str:
        return 'ON' if self.auto_control else 'OFF'

    @property
    def advance_detection_text(self) -> str:
        return 'Active' if self.advance_detection else 'Inactive'

    @property
    def emergency_mode_text(self) -> str:
        return 'ON' if self.emergency_mode else 'OFF'


@dataclass(frozen=True)
class SignalRow:
    """One line of the signal list panel"""
    id: str
    mode: SignalMode
    active: bool = False
