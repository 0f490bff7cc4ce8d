"""
Logging Module
Provides consistent logging across the simulator
"""

import sys
import logging
from pathlib import Path
from typing import Optional

from colorama import init, Fore, Style

init()

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for different log levels"""

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Style.BRIGHT,
    }
    RESET = Style.RESET_ALL

    def format(self, record):
        # Color a copy so file handlers sharing the record stay plain
        record = logging.makeLogRecord(record.__dict__)
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"

        return super().format(record)


def setup_logger(
    name: str = "green_corridor",
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    console: bool = True
) -> logging.Logger:
    """
    Set up a logger with consistent formatting

    Args:
        name: Logger name
        level: Logging level
        log_file: Path to log file (optional)
        console: Whether to output to console

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "green_corridor") -> logging.Logger:
    """Get an existing logger by name"""
    return logging.getLogger(name)


def parse_level(level_name: str) -> int:
    """Translate a level name such as 'debug' into a logging constant"""
    level = logging.getLevelName(str(level_name).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return level


class DriveLogger:
    """
    Specialized logger for drive progress
    Mirrors simulator events into the standard logging pipeline
    """

    def __init__(self, name: str = "drive"):
        # Keep handlers a caller already configured
        existing = get_logger(name)
        self.logger = existing if existing.handlers else setup_logger(name)

    def log_drive_started(self, route_id: str, route_name: str, waypoints: int):
        """Log start of an emergency drive"""
        self.logger.info(
            f"DRIVE START | Route: {route_id} ({route_name}) | Waypoints: {waypoints}"
        )

    def log_signal_event(self, signal_id: str, event: str, distance_km: float):
        """Log signal override events"""
        self.logger.warning(
            f"🚑 EMERGENCY | Signal: {signal_id} | "
            f"Event: {event} | Distance: {distance_km:.3f} km"
        )

    def log_tick(self, index: int, progress: float, distance_km: Optional[float]):
        """Log individual tick (debug level)"""
        msg = f"Tick | Waypoint: {index} | Progress: {progress:.3f}"
        if distance_km is not None:
            msg += f" | Next signal: {distance_km:.3f} km"
        self.logger.debug(msg)

    def log_drive_finished(self, route_id: str, ticks: int, signals_passed: int):
        """Log drive completion"""
        self.logger.info(
            f"DRIVE END | Route: {route_id} | Ticks: {ticks} | "
            f"Signals passed: {signals_passed}"
        )
