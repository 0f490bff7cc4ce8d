"""
Traffic Level Predictor
Rule-based stand-in for an ML traffic model: hour of day plus incident location
"""

from enum import Enum
from datetime import datetime
from typing import Dict, List, Optional

from ..utils.config import PredictorConfig
from ..utils.logger import setup_logger

logger = setup_logger("traffic_predictor")


class TrafficLevel(str, Enum):
    """Traffic severity levels"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        """Severity rank used for route ordering (Low first)"""
        return SEVERITY_RANK[self]

    def __str__(self) -> str:
        return self.value


SEVERITY_RANK: Dict[TrafficLevel, int] = {
    TrafficLevel.LOW: 1,
    TrafficLevel.MEDIUM: 2,
    TrafficLevel.HIGH: 3,
}

# Incident locations offered by the dashboard
INCIDENT_LOCATIONS: Dict[str, str] = {
    'guindy': 'Guindy',
    'tnagar': 'T. Nagar',
    'egmore': 'Egmore',
    'central': 'Central',
}


class TrafficPredictor:
    """
    Deterministic traffic predictor

    score = (peak_weight if the hour is in a peak window else 0) + location bias
    High if score >= high_threshold, Medium if score >= medium_threshold, else Low.
    """

    def __init__(self, config: Optional[PredictorConfig] = None):
        self.config = config or PredictorConfig()

    @property
    def peak_windows(self) -> List[List[int]]:
        return self.config.peak_windows

    def is_peak_hour(self, hour: int) -> bool:
        """Check whether hour falls in any inclusive peak window"""
        return any(start <= hour <= end for start, end in self.config.peak_windows)

    def location_bias(self, location_key: str) -> int:
        return self.config.location_bias.get(location_key, self.config.default_bias)

    def score(self, location_key: str, hour: int) -> int:
        peak = self.config.peak_weight if self.is_peak_hour(hour) else 0
        return peak + self.location_bias(location_key)

    def predict(self, location_key: str, hour: Optional[int] = None) -> TrafficLevel:
        """
        Predict the traffic level

        Args:
            location_key: Incident location key (unknown keys use the default bias)
            hour: Hour of day 0-23, defaults to the current wall-clock hour

        Returns:
            Predicted TrafficLevel
        """
        if hour is None:
            hour = datetime.now().hour
        if not 0 <= hour <= 23:
            raise ValueError(f"hour must be in 0-23, got {hour}")

        score = self.score(location_key, hour)

        if score >= self.config.high_threshold:
            level = TrafficLevel.HIGH
        elif score >= self.config.medium_threshold:
            level = TrafficLevel.MEDIUM
        else:
            level = TrafficLevel.LOW

        logger.debug(f"Prediction | Location: {location_key} | Hour: {hour} | Score: {score} | {level}")
        return level


def predict_traffic_level(
    location_key: str,
    hour: Optional[int] = None,
    config: Optional[PredictorConfig] = None
) -> TrafficLevel:
    """Convenience wrapper around TrafficPredictor.predict"""
    return TrafficPredictor(config).predict(location_key, hour)


def prediction_badge(level: Optional[TrafficLevel]) -> str:
    """Badge text shown next to the prediction"""
    if level is None:
        return "No prediction yet"
    return f"Prediction: {TrafficLevel(level).value}"
