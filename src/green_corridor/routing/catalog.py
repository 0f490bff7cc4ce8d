"""
Route Catalog
Three predefined ambulance routes around Karur, Tamil Nadu (approximate
coordinates, for simulation only)
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple

from ..exceptions import UnknownRouteError
from ..geometry import LatLon, polyline_length_km
from ..prediction import TrafficLevel


@dataclass(frozen=True)
class Route:
    """Immutable route definition"""
    id: str
    name: str
    tag: str
    base_traffic: TrafficLevel
    coords: Tuple[LatLon, ...]

    def __post_init__(self):
        if len(self.coords) < 2:
            raise ValueError(f"Route {self.id} needs at least 2 waypoints")
        object.__setattr__(self, 'coords', tuple(tuple(p) for p in self.coords))
        object.__setattr__(self, 'base_traffic', TrafficLevel(self.base_traffic))

    @property
    def start(self) -> LatLon:
        return self.coords[0]

    @property
    def destination(self) -> LatLon:
        return self.coords[-1]

    @property
    def length_km(self) -> float:
        return polyline_length_km(self.coords)

    def __len__(self) -> int:
        return len(self.coords)


FASTEST = Route(
    id='fastest',
    name='Fastest Route',
    tag='Recommended – Low Traffic',
    base_traffic=TrafficLevel.LOW,
    coords=(
        (10.9488, 78.0690),
        (10.9526, 78.0718),
        (10.9562, 78.0742),
        (10.9591, 78.0762),
        (10.9622, 78.0783),
        (10.9652, 78.0810),
        (10.9680, 78.0840),
        (10.9712, 78.0873),
    ),
)

ALTERNATIVE = Route(
    id='alternative',
    name='Alternative Route',
    tag='Medium Traffic',
    base_traffic=TrafficLevel.MEDIUM,
    coords=(
        (10.9488, 78.0690),
        (10.9504, 78.0750),
        (10.9536, 78.0812),
        (10.9578, 78.0860),
        (10.9630, 78.0892),
        (10.9686, 78.0903),
        (10.9712, 78.0873),
    ),
)

SHORTEST = Route(
    id='shortest',
    name='Shortest Distance Route',
    tag='High Traffic',
    base_traffic=TrafficLevel.HIGH,
    coords=(
        (10.9488, 78.0690),
        (10.9548, 78.0736),
        (10.9606, 78.0780),
        (10.9662, 78.0827),
        (10.9712, 78.0873),
    ),
)

# Card display order
ROUTE_ORDER = ('fastest', 'alternative', 'shortest')


class RouteCatalog(Mapping):
    """Read-only mapping of route id to Route, kept in display order"""

    def __init__(self, routes: Iterable[Route] = (FASTEST, ALTERNATIVE, SHORTEST)):
        self._routes: Dict[str, Route] = {}
        for route in routes:
            if route.id in self._routes:
                raise ValueError(f"Duplicate route id: {route.id}")
            self._routes[route.id] = route

    def __getitem__(self, route_id: str) -> Route:
        try:
            return self._routes[route_id]
        except KeyError:
            raise UnknownRouteError(route_id) from None

    def __iter__(self):
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def __repr__(self) -> str:
        return f"RouteCatalog({list(self._routes)})"


DEFAULT_CATALOG = RouteCatalog()
