"""
Signal Override Handler
Proximity state machine that turns signals green ahead of the ambulance
"""

from enum import Enum
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Any, Sequence

from ..geometry import nearest_waypoint_index
from ..utils.config import DetectionConfig
from ..utils.logger import setup_logger
from .signals import SignalDefinition, SignalMode, SignalRuntime, SIGNAL_DEFS

logger = setup_logger("override_handler")


class SignalEvent(Enum):
    """Transitions reported by the state machine"""
    ADVANCE_DETECTION = "advance_detection"
    OVERRIDE_STARTED = "override_started"
    CROSSED = "crossed"


@dataclass
class CrossingRecord:
    """History entry for a signal the ambulance crossed"""
    signal_id: str
    min_distance_km: float
    exit_distance_km: float
    rule: str  # 'primary' or 'fallback'


class SignalOverrideHandler:
    """
    Per-signal override state machine

    Each signal moves Normal -> Normal (advance detection flagged) ->
    Override -> Normal (passed). Only the next un-passed signal ahead of the
    ambulance is evaluated on a tick; passed signals are terminal until reset.

    Crossing uses a primary geometric rule (came within the override radius
    and is now moving away from the closest point, or has driven past the
    signal's nearest waypoint) and a fallback rule (was inside the override
    radius last tick, is farther now and at least override_end_km away).
    """

    def __init__(
        self,
        signals: Iterable[SignalDefinition] = SIGNAL_DEFS,
        config: Optional[DetectionConfig] = None
    ):
        self.config = config or DetectionConfig()
        self.signals: List[SignalRuntime] = [SignalRuntime.from_definition(s) for s in signals]

        # Metrics
        self.total_overrides = 0
        self.crossings: List[CrossingRecord] = []

    def reset(self) -> None:
        """Clear every signal's runtime state"""
        for signal in self.signals:
            signal.reset()

    def prepare(self, coords: Sequence[Sequence[float]]) -> None:
        """Reset signals and precompute nearest waypoint indices for a route"""
        for signal in self.signals:
            signal.reset(nearest_index=nearest_waypoint_index(coords, signal.location))
            logger.debug(f"Signal {signal.id} nearest waypoint: {signal.nearest_index}")

    def get(self, signal_id: str) -> SignalRuntime:
        for signal in self.signals:
            if signal.id == signal_id:
                return signal
        raise KeyError(signal_id)

    def next_signal(self, current_index: int) -> Optional[SignalRuntime]:
        """
        The signal to track at current_index

        Among un-passed signals ordered by nearest index, the first one whose
        nearest waypoint is at most one behind the ambulance; otherwise the
        last candidate.
        """
        candidates = sorted(
            (s for s in self.signals if not s.passed and s.nearest_index is not None),
            key=lambda s: s.nearest_index,
        )

        for signal in candidates:
            if current_index <= signal.nearest_index + 1:
                return signal
        return candidates[-1] if candidates else None

    def evaluate(
        self,
        signal: SignalRuntime,
        distance_km: float,
        current_index: int,
        progress: float
    ) -> List[SignalEvent]:
        """
        Run one tick of the state machine for signal

        Args:
            signal: The next signal
            distance_km: Current ambulance-to-signal distance
            current_index: Ambulance waypoint index
            progress: Fractional progress within the current segment

        Returns:
            Events fired this tick, in order
        """
        events = []

        if distance_km < signal.min_distance:
            signal.min_distance = distance_km

        if self._check_advance_detection(signal, distance_km):
            events.append(SignalEvent.ADVANCE_DETECTION)

        if self._check_override_start(signal, distance_km):
            events.append(SignalEvent.OVERRIDE_STARTED)

        if self._check_crossing(signal, distance_km, current_index, progress):
            events.append(SignalEvent.CROSSED)

        return events

    def _check_advance_detection(self, signal: SignalRuntime, distance_km: float) -> bool:
        if signal.advance_triggered:
            return False
        if distance_km <= self.config.advance_detection_km:
            signal.advance_triggered = True
            return True
        return False

    def _check_override_start(self, signal: SignalRuntime, distance_km: float) -> bool:
        if not signal.override_active and distance_km <= self.config.override_start_km:
            signal.override_active = True
            signal.mode = SignalMode.OVERRIDE
            self.total_overrides += 1
            return True
        return False

    def _check_crossing(
        self,
        signal: SignalRuntime,
        distance_km: float,
        current_index: int,
        progress: float
    ) -> bool:
        cfg = self.config

        if signal.passed:
            return False
        if signal.last_distance is None:
            signal.last_distance = distance_km
            return False

        close_enough = signal.min_distance <= cfg.override_start_km
        moving_away_from_min = distance_km > signal.min_distance + cfg.departure_buffer_km
        passed_index = signal.nearest_index is not None and (
            current_index > signal.nearest_index
            or (current_index == signal.nearest_index and progress >= cfg.passed_progress)
        )

        if signal.override_active and close_enough and (moving_away_from_min or passed_index):
            self._mark_passed(signal, distance_km, 'primary')
            signal.last_distance = distance_km
            return True

        got_close = signal.last_distance <= cfg.override_start_km
        moving_away = distance_km > signal.last_distance
        if (signal.override_active and got_close and moving_away
                and distance_km >= cfg.override_end_km):
            self._mark_passed(signal, distance_km, 'fallback')
            signal.last_distance = distance_km
            return True

        signal.last_distance = distance_km
        return False

    def _mark_passed(self, signal: SignalRuntime, distance_km: float, rule: str) -> None:
        signal.passed = True
        signal.override_active = False
        signal.mode = SignalMode.NORMAL
        self.crossings.append(CrossingRecord(
            signal_id=signal.id,
            min_distance_km=signal.min_distance,
            exit_distance_km=distance_km,
            rule=rule,
        ))

    @property
    def passed_count(self) -> int:
        return sum(1 for s in self.signals if s.passed)

    def modes(self) -> Dict[str, SignalMode]:
        return {s.id: s.mode for s in self.signals}

    def get_metrics(self) -> Dict[str, Any]:
        """Get override handling metrics"""
        return {
            'total_overrides': self.total_overrides,
            'signals_passed': self.passed_count,
            'crossings': [c.signal_id for c in self.crossings],
            'fallback_crossings': sum(1 for c in self.crossings if c.rule == 'fallback'),
        }
