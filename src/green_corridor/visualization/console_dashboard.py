"""
Console Dashboard

Terminal rendering of the ambulance driver dashboard:
- Prediction badge and route cards
- Drive status line (position, next signal, distance, auto control)
- Signal list
- Event log as it happens
"""

import sys
from typing import List, Optional, Sequence, TextIO

from colorama import Fore, Style

from ..emergency import SignalMode
from ..prediction import TrafficLevel, prediction_badge
from ..routing import RouteCard
from ..simulation import SimulationListener, DriveStatus, SignalRow, format_km, format_minutes
from ..simulation.status import PLACEHOLDER

TRAFFIC_COLORS = {
    TrafficLevel.LOW: Fore.GREEN,
    TrafficLevel.MEDIUM: Fore.YELLOW,
    TrafficLevel.HIGH: Fore.RED,
}


def colorize(text: str, color: str, enabled: bool = True) -> str:
    if not enabled:
        return text
    return f"{color}{text}{Style.RESET_ALL}"


def render_route_cards(cards: Sequence[RouteCard], color: bool = False) -> str:
    """Route card panel as a fixed-width table"""
    lines = [f"{'Route':<26} {'Traffic':<8} {'Distance':>10} {'Time':>9}", "-" * 56]
    for card in cards:
        marker = '*' if card.recommended else ' '
        traffic = colorize(f"{card.traffic.value:<8}", TRAFFIC_COLORS[card.traffic], color)
        lines.append(
            f"{marker}{card.name:<25} {traffic} "
            f"{format_km(card.distance_km):>10} {format_minutes(card.time_min):>9}"
        )
        lines.append(f"  {card.tag}")
    return "\n".join(lines)


def render_signal_list(rows: Sequence[SignalRow]) -> str:
    return "\n".join(
        f"{'>' if row.active else ' '} {row.id:<4} {row.mode.value}" for row in rows
    )


def render_status(status: DriveStatus) -> str:
    lat, lon = status.position
    return (
        f"pos=({lat:.5f}, {lon:.5f}) wp={status.current_index} "
        f"progress={status.segment_progress:.2f} | "
        f"signal {status.active_signal_text}: {status.active_signal_mode.value} | "
        f"distance {status.distance_text} | "
        f"auto control {status.auto_control_text} | "
        f"advance detection {status.advance_detection_text}"
    )


class ConsoleDashboard(SimulationListener):
    """
    Listener that writes dashboard updates to a text stream

    Args:
        stream: Output stream (stdout by default)
        status_every: Print a status line every N status updates while driving (0 disables)
        color: Use ANSI colors
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        status_every: int = 10,
        color: bool = True
    ):
        self.stream = stream or sys.stdout
        self.status_every = status_every
        self.color = color
        self._status_count = 0
        self.prompts: List[str] = []

    def _write(self, text: str) -> None:
        self.stream.write(text + "\n")
        self.stream.flush()

    def on_prediction(self, level):
        self._write(f"Predicted traffic: {level.value if level else PLACEHOLDER} ({prediction_badge(level)})")

    def on_route_cards(self, cards):
        if cards:
            self._write(render_route_cards(cards, self.color))

    def on_route_selected(self, route):
        if route is not None:
            self._write(f"Selected: {route.name} ({len(route)} waypoints)")

    def on_emergency_mode_changed(self, on):
        self._write(f"Emergency mode: {'ON' if on else 'OFF'}")

    def on_signal_mode_changed(self, signal_id, mode):
        if mode is SignalMode.OVERRIDE:
            self._write(colorize(f"Signal {signal_id}: {mode.value}", Fore.GREEN, self.color))

    def on_event_logged(self, entry):
        self._write(colorize(str(entry), Style.BRIGHT, self.color))

    def on_prompt(self, message):
        self.prompts.append(message)
        self._write(colorize(message, Fore.YELLOW, self.color))

    def on_status_changed(self, status):
        if not status.is_driving or self.status_every <= 0:
            return
        self._status_count += 1
        if self._status_count % self.status_every == 0:
            self._write(render_status(status))
