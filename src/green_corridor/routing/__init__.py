"""
Routing Package
Static route catalog and traffic-aware route ranking
"""

from .catalog import (
    Route,
    RouteCatalog,
    DEFAULT_CATALOG,
    ROUTE_ORDER,
    FASTEST,
    ALTERNATIVE,
    SHORTEST,
)
from .ranking import (
    RouteCard,
    adjust_traffic,
    estimated_time_minutes,
    rank_routes,
    display_order,
    recommended_route,
)

__all__ = [
    "Route",
    "RouteCatalog",
    "DEFAULT_CATALOG",
    "ROUTE_ORDER",
    "FASTEST",
    "ALTERNATIVE",
    "SHORTEST",
    "RouteCard",
    "adjust_traffic",
    "estimated_time_minutes",
    "rank_routes",
    "display_order",
    "recommended_route",
]
