"""
Traffic signal definitions and their per-drive runtime state
"""

import math
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple

from ..geometry import LatLon


class SignalMode(str, Enum):
    """Display mode of a traffic signal"""
    NORMAL = "Normal Traffic Mode"
    OVERRIDE = "Green for Ambulance (Override)"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SignalDefinition:
    """Fixed signal location"""
    id: str
    location: LatLon


# Demo signals around Karur
SIGNAL_DEFS: Tuple[SignalDefinition, ...] = (
    SignalDefinition('S1', (10.9558, 78.0748)),
    SignalDefinition('S2', (10.9639, 78.0795)),
    SignalDefinition('S3', (10.9696, 78.0856)),
)


@dataclass
class SignalRuntime:
    """Mutable per-drive state of one signal"""
    id: str
    location: LatLon
    mode: SignalMode = SignalMode.NORMAL
    nearest_index: Optional[int] = None
    min_distance: float = math.inf
    last_distance: Optional[float] = None
    advance_triggered: bool = False
    override_active: bool = False
    passed: bool = False

    @classmethod
    def from_definition(cls, definition: SignalDefinition) -> 'SignalRuntime':
        return cls(id=definition.id, location=tuple(definition.location))

    def reset(self, nearest_index: Optional[int] = None) -> None:
        """Return to initial state, optionally with a new nearest index"""
        self.mode = SignalMode.NORMAL
        self.nearest_index = nearest_index
        self.min_distance = math.inf
        self.last_distance = None
        self.advance_triggered = False
        self.override_active = False
        self.passed = False

    @property
    def is_initial(self) -> bool:
        """True when no drive has touched this signal"""
        return (
            self.mode is SignalMode.NORMAL
            and self.nearest_index is None
            and math.isinf(self.min_distance)
            and self.last_distance is None
            and not (self.advance_triggered or self.override_active or self.passed)
        )
