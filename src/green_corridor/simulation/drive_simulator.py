"""
Drive Simulator
Moves the ambulance along the selected route on a fixed tick and drives the
signal override state machine. All mutable simulation state lives here and
changes only through DriveController methods.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from ..emergency import (
    SignalDefinition,
    SignalEvent,
    SignalMode,
    SignalOverrideHandler,
    SignalRuntime,
    SIGNAL_DEFS,
)
from ..geometry import LatLon, distance_km, interpolate_point
from ..prediction import TrafficLevel, TrafficPredictor
from ..routing import Route, RouteCard, RouteCatalog, DEFAULT_CATALOG
from ..routing import rank_routes, display_order, recommended_route
from ..utils.config import SimulatorConfig
from ..utils.logger import setup_logger, DriveLogger
from .event_log import EventLog, LogEntry
from .listener import SimulationListener
from .scheduler import TickScheduler, ManualTickScheduler
from .status import DriveStatus, SignalRow

logger = setup_logger("drive_simulator")

START_PROMPT = 'First click "Suggest Low Traffic Route" and select a route.'


@dataclass
class DriveSession:
    """Progress of the ambulance along the selected route"""
    route_id: Optional[str] = None
    current_index: int = 0
    segment_progress: float = 0.0
    is_driving: bool = False
    ticks: int = 0

    def rewind(self) -> None:
        self.current_index = 0
        self.segment_progress = 0.0
        self.is_driving = False
        self.ticks = 0


class DriveController:
    """
    Emergency drive controller

    Owns the drive session, per-signal runtime state, UI indicators and the
    event log. A TickScheduler calls tick() while a drive is running; tests
    may call tick() directly.

    Example:
        controller = DriveController(listener=my_renderer)
        controller.suggest_routes('central')
        controller.start_drive()
        controller.scheduler.run_until_stopped()
    """

    def __init__(
        self,
        config: Optional[SimulatorConfig] = None,
        catalog: Optional[RouteCatalog] = None,
        signals: Iterable[SignalDefinition] = SIGNAL_DEFS,
        listener: Optional[SimulationListener] = None,
        scheduler: Optional[TickScheduler] = None,
        clock: Optional[Callable[[], datetime]] = None,
        hour_source: Optional[Callable[[], int]] = None
    ):
        self.config = config or SimulatorConfig()
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.listener = listener or SimulationListener()
        self.scheduler = scheduler or ManualTickScheduler()
        self._hour_source = hour_source or (lambda: datetime.now().hour)

        self.predictor = TrafficPredictor(self.config.predictor)
        self.signal_handler = SignalOverrideHandler(signals, self.config.detection)
        self.event_log = EventLog(clock)
        self.drive_logger = DriveLogger()

        # Timer thread and user actions share this state
        self._lock = threading.RLock()

        self.session = DriveSession()
        self.position: LatLon = self.city_center
        self.prediction: Optional[TrafficLevel] = None
        self.route_cards: List[RouteCard] = []

        # UI indicators
        self.emergency_mode = False
        self.route_highlighted = False
        self.auto_control = False
        self.advance_detection = False
        self.active_signal_id: Optional[str] = None
        self.distance_km: Optional[float] = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def city_center(self) -> LatLon:
        lat, lon = self.config.map.city_center
        return (lat, lon)

    @property
    def selected_route_id(self) -> Optional[str]:
        return self.session.route_id

    @property
    def selected_route(self) -> Optional[Route]:
        if self.session.route_id is None:
            return None
        return self.catalog[self.session.route_id]

    @property
    def is_driving(self) -> bool:
        return self.session.is_driving

    @property
    def signals(self) -> List[SignalRuntime]:
        return self.signal_handler.signals

    # ------------------------------------------------------------------
    # User operations
    # ------------------------------------------------------------------

    def suggest_routes(self, location_key: str, hour: Optional[int] = None) -> List[RouteCard]:
        """
        Predict traffic for an incident location, rank the routes and
        auto-select the recommended one

        Args:
            location_key: Incident location key
            hour: Hour of day, defaults to the controller's hour source

        Returns:
            Ranked route cards (best first)
        """
        if hour is None:
            hour = self._hour_source()

        predicted = self.predictor.predict(location_key, hour)
        cards = rank_routes(predicted, self.catalog, self.config.routing)

        with self._lock:
            self.prediction = predicted
            self.route_cards = cards
        self._notify('on_prediction', predicted)
        self._notify('on_route_cards', display_order(cards))

        best = recommended_route(cards)
        if best is not None:
            self.select_route(best.id)
        return cards

    def select_route(self, route_id: str) -> Route:
        """
        Select a route and put the ambulance at its start

        Any running drive is stopped and its state discarded.

        Raises:
            UnknownRouteError: if route_id is not in the catalog
        """
        route = self.catalog[route_id]

        self.scheduler.stop()
        with self._lock:
            self._reset_drive_state()
            self.session.route_id = route.id
            self.position = route.start
            self.route_highlighted = False

        logger.info(f"Route selected: {route.id} ({route.name})")
        self._notify('on_route_selected', route)
        self._notify('on_route_highlight', False)
        self._notify('on_position_changed', self.position)
        self._emit_status()
        return route

    def start_drive(self) -> bool:
        """
        Start the emergency drive on the selected route

        Returns:
            True if a drive was started. Without a selected route the user is
            prompted instead; while already driving this is a no-op.
        """
        with self._lock:
            if self.session.route_id is None:
                logger.warning("Start requested without a selected route")
                prompt = START_PROMPT
            elif self.session.is_driving:
                return False
            else:
                prompt = None
                # Claim the drive so a concurrent start sees it as running
                self.session.is_driving = True

        if prompt is not None:
            self._notify('on_prompt', prompt)
            return False

        self.scheduler.stop()
        with self._lock:
            # A reset or route change while the timer was stopping wins
            if not self.session.is_driving or self.session.route_id is None:
                return False

            self._set_emergency_mode(True)
            self._reset_drive_state()

            route = self.selected_route
            self.session.is_driving = True
            self.position = route.start
            self.signal_handler.prepare(route.coords)

            self._clear_log()
            self._log('Emergency drive started.')
            self._log(f'Selected route: {route.name}')
            self.drive_logger.log_drive_started(route.id, route.name, len(route))

        self._notify('on_position_changed', self.position)
        self._emit_status()
        self.scheduler.start(self.tick, self.config.drive.tick_ms)
        return True

    def reset(self) -> None:
        """Stop everything and return the dashboard to its initial state"""
        self.scheduler.stop()
        with self._lock:
            self._reset_drive_state()
            self._set_emergency_mode(False)
            self._clear_log()
            self._log('System reset. Ready.')

            self.prediction = None
            self.route_cards = []
            self.session.route_id = None
            self.route_highlighted = False
            self.position = self.city_center

        logger.info("System reset")
        self._notify('on_prediction', None)
        self._notify('on_route_cards', [])
        self._notify('on_route_selected', None)
        self._notify('on_route_highlight', False)
        self._notify('on_position_changed', self.position)
        self._emit_status()

    def toggle_emergency_mode(self) -> bool:
        with self._lock:
            self._set_emergency_mode(not self.emergency_mode)
            return self.emergency_mode

    def set_emergency_mode(self, on: bool) -> None:
        with self._lock:
            self._set_emergency_mode(on)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self, elapsed_ms: Optional[float] = None) -> None:
        """
        Advance the simulation by one timer tick

        Args:
            elapsed_ms: Time covered by this tick, defaults to the configured tick
        """
        with self._lock:
            if not self.session.is_driving or self.session.route_id is None:
                return

            coords = self.selected_route.coords
            session = self.session

            finished = session.current_index >= len(coords) - 1
            if finished:
                self._finish_drive()
            else:
                self._advance(coords, elapsed_ms)

        # Outside the lock: a threaded timer may need joining
        if finished:
            self.scheduler.stop()

    def _advance(self, coords, elapsed_ms: Optional[float]) -> None:
        session = self.session

        if elapsed_ms is None:
            step = self.config.drive.step
        else:
            step = elapsed_ms / self.config.drive.segment_time_ms

        session.ticks += 1
        session.segment_progress += step
        if session.segment_progress >= 1:
            session.current_index += 1
            session.segment_progress = 0.0

        self.position = self._position_on_route(coords)
        self._notify('on_position_changed', self.position)

        signal = self.signal_handler.next_signal(session.current_index)
        if signal is None:
            self.active_signal_id = None
            self.distance_km = None
            self.drive_logger.log_tick(session.current_index, session.segment_progress, None)
            self._emit_status()
            return

        dist = distance_km(self.position, signal.location)
        self.active_signal_id = signal.id
        self.distance_km = dist
        self.drive_logger.log_tick(session.current_index, session.segment_progress, dist)

        events = self.signal_handler.evaluate(
            signal, dist, session.current_index, session.segment_progress
        )
        for event in events:
            self._apply_signal_event(signal, event, dist)

        self._emit_status()

    def _position_on_route(self, coords) -> LatLon:
        # Uses the index after any wrap, so a wrapping tick lands on the new waypoint
        index = self.session.current_index
        if index >= len(coords) - 1:
            return tuple(coords[-1])
        return interpolate_point(coords[index], coords[index + 1], self.session.segment_progress)

    def _apply_signal_event(self, signal: SignalRuntime, event: SignalEvent, dist: float) -> None:
        detection = self.config.detection

        if event is SignalEvent.ADVANCE_DETECTION:
            self.advance_detection = True
            self.auto_control = True
            self._set_highlight(True)
            self._log(
                f'{signal.id}: {detection.advance_detection_km:g} km detection triggered. '
                f'Preparing signal override.'
            )

        elif event is SignalEvent.OVERRIDE_STARTED:
            self._notify('on_signal_mode_changed', signal.id, SignalMode.OVERRIDE)
            self._log(f'{signal.id}: Signal override ON (Green for Ambulance).')

        elif event is SignalEvent.CROSSED:
            self._notify('on_signal_mode_changed', signal.id, SignalMode.NORMAL)
            self.auto_control = False
            self.advance_detection = False
            self._set_highlight(False)
            self._log(f'{signal.id}: Ambulance crossed signal. Override OFF, normal resumed.')

        self.drive_logger.log_signal_event(signal.id, event.value, dist)

    def _finish_drive(self) -> None:
        self.session.is_driving = False
        self._log('Destination reached.')
        self.drive_logger.log_drive_finished(
            self.session.route_id, self.session.ticks, self.signal_handler.passed_count
        )
        self._emit_status()

    # ------------------------------------------------------------------
    # Internal state helpers (caller holds the lock)
    # ------------------------------------------------------------------

    def _reset_drive_state(self) -> None:
        self.session.rewind()
        self.signal_handler.reset()
        for signal in self.signal_handler.signals:
            self._notify('on_signal_mode_changed', signal.id, SignalMode.NORMAL)

        self.advance_detection = False
        self.auto_control = False
        self.active_signal_id = None
        self.distance_km = None

    def _set_emergency_mode(self, on: bool) -> None:
        self.emergency_mode = bool(on)
        self._notify('on_emergency_mode_changed', self.emergency_mode)

    def _set_highlight(self, on: bool) -> None:
        if self.session.route_id is None:
            return
        self.route_highlighted = on
        self._notify('on_route_highlight', on)

    def _log(self, message: str) -> LogEntry:
        entry = self.event_log.append(message)
        logger.info(message)
        self._notify('on_event_logged', entry)
        return entry

    def _clear_log(self) -> None:
        self.event_log.clear()
        self._notify('on_log_cleared')

    def _notify(self, hook: str, *args) -> None:
        try:
            getattr(self.listener, hook)(*args)
        except Exception:
            logger.exception(f"Listener hook {hook} failed")

    def _emit_status(self) -> None:
        self._notify('on_status_changed', self.status())

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def status(self) -> DriveStatus:
        """Snapshot of the current drive state"""
        with self._lock:
            return DriveStatus(
                position=self.position,
                is_driving=self.session.is_driving,
                route_id=self.session.route_id,
                current_index=self.session.current_index,
                segment_progress=self.session.segment_progress,
                signal_modes=self.signal_handler.modes(),
                active_signal_id=self.active_signal_id,
                distance_km=self.distance_km,
                auto_control=self.auto_control,
                advance_detection=self.advance_detection,
                route_highlighted=self.route_highlighted,
                emergency_mode=self.emergency_mode,
            )

    def signal_rows(self) -> List[SignalRow]:
        """Signal list panel rows, active signal flagged"""
        with self._lock:
            return [
                SignalRow(id=s.id, mode=s.mode, active=s.id == self.active_signal_id)
                for s in self.signal_handler.signals
            ]
