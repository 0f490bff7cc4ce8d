"""
Demo Script
Headless run of an emergency drive with console rendering
"""

import argparse
import sys
from typing import Dict, Any, List, Optional

from .exceptions import CorridorError
from .prediction import INCIDENT_LOCATIONS
from .routing import ROUTE_ORDER
from .simulation import DriveController, ManualTickScheduler, ThreadedTickScheduler
from .utils.config import SimulatorConfig, load_config, get_project_root
from .utils.logger import setup_logger, parse_level
from .visualization import ConsoleDashboard, render_signal_list

logger = setup_logger("demo")


def run_demo(
    location: str = 'guindy',
    hour: Optional[int] = None,
    route_id: Optional[str] = None,
    config: Optional[SimulatorConfig] = None,
    realtime: bool = False,
    max_ticks: int = 10000,
    status_every: int = 10,
    color: bool = True
) -> Dict[str, Any]:
    """
    Suggest routes for an incident, then drive the chosen route to the end

    Args:
        location: Incident location key
        hour: Hour of day for the prediction (current hour if None)
        route_id: Route to drive instead of the recommended one
        config: Simulator configuration (defaults when None)
        realtime: Tick on a background timer instead of as fast as possible
        max_ticks: Safety cap on ticks in fast mode
        status_every: Status line frequency (0 disables)
        color: Colored console output

    Returns:
        Summary dictionary
    """
    config = config or SimulatorConfig()
    scheduler = ThreadedTickScheduler() if realtime else ManualTickScheduler()
    dashboard = ConsoleDashboard(status_every=status_every, color=color)
    controller = DriveController(config=config, listener=dashboard, scheduler=scheduler)

    print(f"\n{'='*60}")
    print("GREEN CORRIDOR - AMBULANCE DRIVE DEMO")
    print(f"{'='*60}")

    controller.suggest_routes(location, hour)
    if route_id is not None:
        controller.select_route(route_id)

    controller.start_drive()

    if realtime:
        scheduler.wait()
    else:
        scheduler.run_until_stopped(max_ticks)

    status = controller.status()
    metrics = controller.signal_handler.get_metrics()

    print(f"\n{'='*60}")
    print(f"Drive Complete: {controller.selected_route.name}")
    print(f"{'='*60}")
    print(f"Ticks: {controller.session.ticks}")
    print(f"Signals passed: {metrics['signals_passed']}/{len(controller.signals)}")
    print(render_signal_list(controller.signal_rows()))
    print("Event log (newest first):")
    for entry in controller.event_log:
        print(f"  {entry}")
    print(f"{'='*60}\n")

    return {
        'route': controller.selected_route_id,
        'prediction': controller.prediction.value if controller.prediction else None,
        'ticks': controller.session.ticks,
        'finished': not status.is_driving,
        'signals_passed': metrics['signals_passed'],
        'events': controller.event_log.messages(),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulated ambulance drive with automatic signal override"
    )

    parser.add_argument(
        '--location', '-l',
        type=str,
        default='guindy',
        help=f"Incident location ({', '.join(INCIDENT_LOCATIONS)}; others use the default bias)"
    )

    parser.add_argument(
        '--hour',
        type=int,
        help='Hour of day for the traffic prediction (default: now)'
    )

    parser.add_argument(
        '--route', '-r',
        type=str,
        choices=list(ROUTE_ORDER),
        help='Drive this route instead of the recommended one'
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Config file path (default: configs/default.yaml when present)'
    )

    parser.add_argument(
        '--realtime',
        action='store_true',
        help='Run on a real 200 ms timer instead of as fast as possible'
    )

    parser.add_argument(
        '--max-ticks',
        type=int,
        default=10000,
        help='Tick cap for fast mode'
    )

    parser.add_argument(
        '--status-every',
        type=int,
        default=10,
        help='Print a status line every N ticks (0 disables)'
    )

    parser.add_argument(
        '--no-color',
        action='store_true',
        help='Disable colored output'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        help='Log level for simulator loggers (default: from config)'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Also write simulator logs to this file'
    )

    return parser


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    level = parse_level(level_name)
    for name in ("drive", "drive_simulator", "override_handler", "route_ranking",
                 "traffic_predictor", "scheduler"):
        setup_logger(name, level=level, log_file=log_file)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config_path = args.config
    if config_path is None:
        default_path = get_project_root() / "configs" / "default.yaml"
        if default_path.exists():
            config_path = str(default_path)

    try:
        config = load_config(config_path)
        configure_logging(
            args.log_level or config.logging.level,
            args.log_file or config.logging.log_file,
        )
        run_demo(
            location=args.location,
            hour=args.hour,
            route_id=args.route,
            config=config,
            realtime=args.realtime,
            max_ticks=args.max_ticks,
            status_every=args.status_every,
            color=not args.no_color,
        )
    except (CorridorError, ValueError) as e:
        logger.error(f"Demo failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
