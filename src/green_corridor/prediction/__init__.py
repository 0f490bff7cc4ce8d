"""
Traffic Prediction Package
Rule-based traffic level prediction
"""

from .traffic_predictor import (
    TrafficLevel,
    TrafficPredictor,
    SEVERITY_RANK,
    INCIDENT_LOCATIONS,
    predict_traffic_level,
    prediction_badge,
)

__all__ = [
    "TrafficLevel",
    "TrafficPredictor",
    "SEVERITY_RANK",
    "INCIDENT_LOCATIONS",
    "predict_traffic_level",
    "prediction_badge",
]
