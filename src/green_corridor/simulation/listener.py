"""
Listener interface between the drive controller and a rendering layer.

The controller never touches a UI directly; it calls back into a
SimulationListener. Every hook is a no-op by default so a renderer only
overrides what it draws.
"""

from typing import Any, List, Optional, Sequence, Tuple

from ..emergency import SignalMode
from ..geometry import LatLon
from ..prediction import TrafficLevel


class SimulationListener:
    """Base listener with no-op hooks"""

    def on_position_changed(self, position: LatLon) -> None:
        pass

    def on_signal_mode_changed(self, signal_id: str, mode: SignalMode) -> None:
        pass

    def on_status_changed(self, status: Any) -> None:
        pass

    def on_route_selected(self, route: Optional[Any]) -> None:
        pass

    def on_route_highlight(self, highlighted: bool) -> None:
        pass

    def on_event_logged(self, entry: Any) -> None:
        pass

    def on_log_cleared(self) -> None:
        pass

    def on_prompt(self, message: str) -> None:
        pass

    def on_emergency_mode_changed(self, on: bool) -> None:
        pass

    def on_route_cards(self, cards: Sequence[Any]) -> None:
        pass

    def on_prediction(self, level: Optional[TrafficLevel]) -> None:
        pass


class RecordingListener(SimulationListener):
    """Listener that records every callback, for tests and replays"""

    def __init__(self):
        self.calls: List[Tuple[str, tuple]] = []

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, args))

    def on_position_changed(self, position):
        self._record('position', position)

    def on_signal_mode_changed(self, signal_id, mode):
        self._record('signal_mode', signal_id, mode)

    def on_status_changed(self, status):
        self._record('status', status)

    def on_route_selected(self, route):
        self._record('route_selected', route)

    def on_route_highlight(self, highlighted):
        self._record('highlight', highlighted)

    def on_event_logged(self, entry):
        self._record('log', entry)

    def on_log_cleared(self):
        self._record('log_cleared')

    def on_prompt(self, message):
        self._record('prompt', message)

    def on_emergency_mode_changed(self, on):
        self._record('emergency_mode', on)

    def on_route_cards(self, cards):
        self._record('route_cards', list(cards))

    def on_prediction(self, level):
        self._record('prediction', level)

    def named(self, name: str) -> List[tuple]:
        """Arguments of every call to one hook, in call order"""
        return [args for call, args in self.calls if call == name]

    def signal_modes(self, signal_id: str) -> List[SignalMode]:
        return [mode for sid, mode in self.named('signal_mode') if sid == signal_id]
