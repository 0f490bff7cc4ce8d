"""
Exception hierarchy for the green corridor simulator
"""


class CorridorError(Exception):
    """Base class for simulator errors"""


class UnknownRouteError(CorridorError, KeyError):
    """Raised when a route id is not part of the catalog"""

    def __init__(self, route_id: str):
        self.route_id = route_id
        super().__init__(f"Unknown route: {route_id}")

    def __str__(self) -> str:
        return f"Unknown route: {self.route_id}"


class ConfigurationError(CorridorError, ValueError):
    """Raised when configuration cannot be loaded or fails validation"""
