"""
Route Ranking
Annotates catalog routes with distance, predicted traffic and travel time,
and picks the recommended route.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..prediction import TrafficLevel
from ..utils.config import RoutingConfig
from ..utils.logger import setup_logger
from .catalog import Route, RouteCatalog, DEFAULT_CATALOG, ROUTE_ORDER

logger = setup_logger("route_ranking")

RECOMMENDED_TAG = 'Recommended – Low Traffic'


@dataclass(frozen=True)
class RouteCard:
    """A route annotated for display"""
    route: Route
    distance_km: float
    traffic: TrafficLevel
    time_min: float
    recommended: bool = False

    @property
    def id(self) -> str:
        return self.route.id

    @property
    def name(self) -> str:
        return self.route.name

    @property
    def tag(self) -> str:
        # The fastest card always advertises itself as the low traffic option
        if self.route.id == 'fastest':
            return RECOMMENDED_TAG
        return self.route.tag


def adjust_traffic(base: TrafficLevel, predicted: TrafficLevel) -> TrafficLevel:
    """Nudge a route's baseline traffic one step toward the prediction"""
    base = TrafficLevel(base)
    predicted = TrafficLevel(predicted)

    if predicted is TrafficLevel.HIGH and base is TrafficLevel.LOW:
        return TrafficLevel.MEDIUM
    if predicted is TrafficLevel.HIGH and base is TrafficLevel.MEDIUM:
        return TrafficLevel.HIGH
    if predicted is TrafficLevel.LOW and base is TrafficLevel.HIGH:
        return TrafficLevel.MEDIUM
    return base


def estimated_time_minutes(
    distance_km: float,
    traffic: TrafficLevel,
    config: Optional[RoutingConfig] = None
) -> float:
    """Travel time at the base speed, scaled by the traffic multiplier"""
    config = config or RoutingConfig()
    base_minutes = (distance_km / config.base_speed_kmh) * 60
    return base_minutes * config.traffic_multipliers[TrafficLevel(traffic).value]


def rank_routes(
    predicted: TrafficLevel,
    catalog: Optional[RouteCatalog] = None,
    config: Optional[RoutingConfig] = None
) -> List[RouteCard]:
    """
    Build route cards ranked best first

    Ordering is by adjusted traffic severity, then by estimated time.
    The first card is flagged as recommended.

    Args:
        predicted: Predicted traffic level
        catalog: Routes to rank (defaults to the built-in catalog)
        config: Routing configuration

    Returns:
        Ranked list of RouteCard
    """
    catalog = catalog if catalog is not None else DEFAULT_CATALOG
    config = config or RoutingConfig()

    cards = []
    for route in catalog.values():
        distance = route.length_km
        traffic = adjust_traffic(route.base_traffic, predicted)
        cards.append(RouteCard(
            route=route,
            distance_km=distance,
            traffic=traffic,
            time_min=estimated_time_minutes(distance, traffic, config),
        ))

    cards.sort(key=lambda c: (c.traffic.rank, c.time_min))

    if cards:
        cards[0] = RouteCard(
            route=cards[0].route,
            distance_km=cards[0].distance_km,
            traffic=cards[0].traffic,
            time_min=cards[0].time_min,
            recommended=True,
        )
        logger.info(
            f"Route ranking | Prediction: {TrafficLevel(predicted).value} | "
            f"Recommended: {cards[0].id} ({cards[0].traffic.value}, {cards[0].time_min:.1f} min)"
        )

    return cards


def display_order(cards: Sequence[RouteCard], order: Sequence[str] = ROUTE_ORDER) -> List[RouteCard]:
    """Arrange ranked cards in the fixed panel order; unlisted routes go last"""
    position = {route_id: i for i, route_id in enumerate(order)}
    return sorted(cards, key=lambda c: position.get(c.id, len(position)))


def recommended_route(cards: Sequence[RouteCard]) -> Optional[RouteCard]:
    """The recommended card, if any"""
    for card in cards:
        if card.recommended:
            return card
    return None
