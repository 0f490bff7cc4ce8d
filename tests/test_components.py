"""
Test suite for Green Corridor components
"""

import json
import math
import logging
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add src to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))


class TestGeometry:
    """Test great-circle helpers"""

    POINTS = [
        (10.9488, 78.0690),
        (10.9558, 78.0748),
        (-33.8688, 151.2093),
        (51.5074, -0.1278),
    ]

    def test_distance_symmetric(self):
        from green_corridor.geometry import distance_km

        for a in self.POINTS:
            for b in self.POINTS:
                assert distance_km(a, b) == pytest.approx(distance_km(b, a))

    def test_distance_to_self_is_zero(self):
        from green_corridor.geometry import distance_km

        for p in self.POINTS:
            assert distance_km(p, p) == 0.0

    def test_one_degree_of_latitude(self):
        from green_corridor.geometry import distance_km, EARTH_RADIUS_KM

        expected = EARTH_RADIUS_KM * math.pi / 180
        assert distance_km((0.0, 0.0), (1.0, 0.0)) == pytest.approx(expected)

    def test_polyline_length_is_sum_of_segments(self):
        from green_corridor.geometry import distance_km, polyline_length_km
        from green_corridor.routing import SHORTEST

        coords = SHORTEST.coords
        expected = sum(distance_km(coords[i], coords[i + 1]) for i in range(len(coords) - 1))

        assert polyline_length_km(coords) == pytest.approx(expected)
        assert SHORTEST.length_km == pytest.approx(expected)

    def test_polyline_length_degenerate(self):
        from green_corridor.geometry import polyline_length_km

        assert polyline_length_km([(10.0, 78.0)]) == 0
        assert polyline_length_km([]) == 0

    def test_interpolate_point(self):
        from green_corridor.geometry import interpolate_point

        a, b = (10.0, 78.0), (11.0, 80.0)
        assert interpolate_point(a, b, 0.0) == a
        assert interpolate_point(a, b, 0.5) == pytest.approx((10.5, 79.0))
        assert interpolate_point(a, b, 1.0) == pytest.approx(b)

    def test_vectorised_distances_match_scalar(self):
        from green_corridor.geometry import distance_km, distances_km

        target = (10.9639, 78.0795)
        vector = distances_km(self.POINTS, target)

        for point, d in zip(self.POINTS, vector):
            assert d == pytest.approx(distance_km(point, target))

    def test_nearest_waypoint_index(self):
        from green_corridor.geometry import nearest_waypoint_index
        from green_corridor.routing import SHORTEST

        assert nearest_waypoint_index(SHORTEST.coords, (10.9558, 78.0748)) == 1
        assert nearest_waypoint_index(SHORTEST.coords, SHORTEST.destination) == 4

        with pytest.raises(ValueError):
            nearest_waypoint_index([], (0.0, 0.0))


class TestTrafficPredictor:
    """Test rule-based traffic prediction"""

    @pytest.mark.parametrize("location,hour,expected", [
        ('central', 9, 'High'),
        ('central', 12, 'Medium'),
        ('guindy', 12, 'Low'),
        ('guindy', 8, 'Medium'),
        ('tnagar', 17, 'High'),
        ('egmore', 11, 'Low'),
        ('egmore', 10, 'High'),
        ('somewhere_else', 19, 'Medium'),
        ('somewhere_else', 20, 'Low'),
    ])
    def test_prediction_table(self, location, hour, expected):
        from green_corridor.prediction import predict_traffic_level

        assert predict_traffic_level(location, hour) == expected

    def test_peak_windows_inclusive(self):
        from green_corridor.prediction import TrafficPredictor

        predictor = TrafficPredictor()

        assert [h for h in range(24) if predictor.is_peak_hour(h)] == [8, 9, 10, 17, 18, 19]

    def test_deterministic_and_bounded(self):
        from green_corridor.prediction import TrafficPredictor, TrafficLevel

        predictor = TrafficPredictor()

        for location in ('guindy', 'tnagar', 'egmore', 'central', 'unknown'):
            for hour in range(24):
                first = predictor.predict(location, hour)
                assert predictor.predict(location, hour) is first
                assert first in set(TrafficLevel)

    def test_invalid_hour(self):
        from green_corridor.prediction import predict_traffic_level

        with pytest.raises(ValueError):
            predict_traffic_level('guindy', 24)

    def test_default_hour_uses_clock(self):
        from green_corridor.prediction import TrafficPredictor, TrafficLevel

        assert TrafficPredictor().predict('guindy') in set(TrafficLevel)

    def test_custom_bias_table(self):
        from green_corridor.prediction import TrafficPredictor, TrafficLevel
        from green_corridor.utils.config import PredictorConfig

        predictor = TrafficPredictor(PredictorConfig(location_bias={'hospital': 4}))

        assert predictor.predict('hospital', 3) is TrafficLevel.HIGH
        assert predictor.predict('guindy', 3) is TrafficLevel.LOW

    def test_prediction_badge(self):
        from green_corridor.prediction import prediction_badge, TrafficLevel

        assert prediction_badge(None) == "No prediction yet"
        assert prediction_badge(TrafficLevel.MEDIUM) == "Prediction: Medium"


class TestRouteCatalog:
    """Test the static route catalog"""

    def test_catalog_contents(self):
        from green_corridor.routing import DEFAULT_CATALOG, ROUTE_ORDER

        assert list(DEFAULT_CATALOG) == list(ROUTE_ORDER)
        assert len(DEFAULT_CATALOG['shortest']) == 5
        assert len(DEFAULT_CATALOG['fastest']) == 8
        assert len(DEFAULT_CATALOG['alternative']) == 7

    def test_routes_share_endpoints(self):
        from green_corridor.routing import DEFAULT_CATALOG

        starts = {r.start for r in DEFAULT_CATALOG.values()}
        ends = {r.destination for r in DEFAULT_CATALOG.values()}

        assert starts == {(10.9488, 78.0690)}
        assert ends == {(10.9712, 78.0873)}

    def test_unknown_route(self):
        from green_corridor.routing import DEFAULT_CATALOG
        from green_corridor.exceptions import UnknownRouteError

        assert 'scenic' not in DEFAULT_CATALOG

        with pytest.raises(UnknownRouteError) as exc_info:
            DEFAULT_CATALOG['scenic']

        assert exc_info.value.route_id == 'scenic'
        assert isinstance(exc_info.value, KeyError)

    def test_route_needs_two_waypoints(self):
        from green_corridor.routing import Route

        with pytest.raises(ValueError):
            Route(id='x', name='X', tag='', base_traffic='Low', coords=((1.0, 2.0),))

    def test_duplicate_ids_rejected(self):
        from green_corridor.routing import RouteCatalog, FASTEST

        with pytest.raises(ValueError):
            RouteCatalog([FASTEST, FASTEST])


class TestRouteRanking:
    """Test route annotation and ordering"""

    @pytest.mark.parametrize("base,predicted,expected", [
        ('Low', 'High', 'Medium'),
        ('Medium', 'High', 'High'),
        ('High', 'High', 'High'),
        ('High', 'Low', 'Medium'),
        ('Medium', 'Low', 'Medium'),
        ('Low', 'Low', 'Low'),
        ('Low', 'Medium', 'Low'),
        ('High', 'Medium', 'High'),
    ])
    def test_adjust_traffic(self, base, predicted, expected):
        from green_corridor.routing import adjust_traffic
        from green_corridor.prediction import TrafficLevel

        assert adjust_traffic(TrafficLevel(base), TrafficLevel(predicted)) is TrafficLevel(expected)

    def test_estimated_time(self):
        from green_corridor.routing import estimated_time_minutes
        from green_corridor.prediction import TrafficLevel

        assert estimated_time_minutes(35.0, TrafficLevel.LOW) == pytest.approx(60.0)
        assert estimated_time_minutes(35.0, TrafficLevel.MEDIUM) == pytest.approx(75.0)
        assert estimated_time_minutes(35.0, TrafficLevel.HIGH) == pytest.approx(93.0)

    def test_default_catalog_ranking(self):
        from green_corridor.routing import rank_routes
        from green_corridor.prediction import TrafficLevel

        high = rank_routes(TrafficLevel.HIGH)
        assert [c.id for c in high] == ['fastest', 'shortest', 'alternative']
        assert [c.traffic for c in high] == [TrafficLevel.MEDIUM, TrafficLevel.HIGH, TrafficLevel.HIGH]

        low = rank_routes(TrafficLevel.LOW)
        assert [c.id for c in low] == ['fastest', 'shortest', 'alternative']
        assert low[1].traffic is TrafficLevel.MEDIUM

        medium = rank_routes(TrafficLevel.MEDIUM)
        assert [c.id for c in medium] == ['fastest', 'alternative', 'shortest']

    def test_only_top_card_recommended(self):
        from green_corridor.routing import rank_routes, recommended_route
        from green_corridor.prediction import TrafficLevel

        cards = rank_routes(TrafficLevel.MEDIUM)

        assert [c.recommended for c in cards] == [True, False, False]
        assert recommended_route(cards) is cards[0]

    def test_severity_beats_distance(self):
        from green_corridor.routing import Route, RouteCatalog, rank_routes
        from green_corridor.prediction import TrafficLevel

        long_clear = Route('long', 'Long', '', TrafficLevel.LOW, ((10.0, 78.0), (10.2, 78.0)))
        short_jam = Route('short', 'Short', '', TrafficLevel.HIGH, ((10.0, 78.0), (10.01, 78.0)))

        cards = rank_routes(TrafficLevel.MEDIUM, RouteCatalog([short_jam, long_clear]))

        assert cards[0].id == 'long'
        assert cards[0].distance_km > 10 * cards[1].distance_km

    def test_ties_broken_by_time(self):
        from green_corridor.routing import Route, RouteCatalog, rank_routes
        from green_corridor.prediction import TrafficLevel

        slow = Route('slow', 'Slow', '', TrafficLevel.MEDIUM, ((10.0, 78.0), (10.05, 78.0)))
        quick = Route('quick', 'Quick', '', TrafficLevel.MEDIUM, ((10.0, 78.0), (10.02, 78.0)))

        cards = rank_routes(TrafficLevel.MEDIUM, RouteCatalog([slow, quick]))

        assert [c.id for c in cards] == ['quick', 'slow']
        assert cards[0].time_min < cards[1].time_min

    def test_display_order_and_tags(self):
        from green_corridor.routing import rank_routes, display_order
        from green_corridor.prediction import TrafficLevel

        cards = display_order(rank_routes(TrafficLevel.HIGH))

        assert [c.id for c in cards] == ['fastest', 'alternative', 'shortest']
        assert cards[0].tag == 'Recommended – Low Traffic'
        assert cards[1].tag == 'Medium Traffic'
        assert cards[2].tag == 'High Traffic'


class TestConfig:
    """Test configuration loading"""

    def test_defaults(self):
        from green_corridor.utils.config import SimulatorConfig

        config = SimulatorConfig()

        assert config.drive.tick_ms == 200.0
        assert config.drive.step == pytest.approx(200 / 4200)
        assert config.detection.advance_detection_km == 3.0
        assert config.detection.override_start_km == 0.40
        assert config.routing.traffic_multipliers['High'] == 1.55
        assert config.predictor.location_bias['central'] == 3

    def test_default_yaml_matches_code_defaults(self):
        from dataclasses import asdict
        from green_corridor.utils.config import load_config, SimulatorConfig

        config = load_config(str(PROJECT_ROOT / "configs" / "default.yaml"))

        assert asdict(config) == asdict(SimulatorConfig())

    def test_load_yaml_partial_override(self, tmp_path):
        from green_corridor.utils.config import load_config

        path = tmp_path / "fast.yaml"
        path.write_text("drive:\n  tick_ms: 100\ndetection:\n  override_start_km: 0.5\n")

        config = load_config(str(path))

        assert config.drive.tick_ms == 100
        assert config.drive.segment_time_ms == 4200.0
        assert config.detection.override_start_km == 0.5
        assert config.detection.advance_detection_km == 3.0

    def test_load_json(self, tmp_path):
        from green_corridor.utils.config import load_config

        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"routing": {"base_speed_kmh": 50}}))

        assert load_config(str(path)).routing.base_speed_kmh == 50

    def test_env_override(self, monkeypatch):
        from green_corridor.utils.config import load_config

        monkeypatch.setenv("CORRIDOR_DRIVE__TICK_MS", "50")
        monkeypatch.setenv("CORRIDOR_LOGGING__LEVEL", "DEBUG")

        config = load_config()

        assert config.drive.tick_ms == 50.0
        assert config.logging.level == "DEBUG"

    def test_env_override_matches_keys_ignoring_case(self, monkeypatch):
        from green_corridor.utils.config import load_config

        monkeypatch.setenv("CORRIDOR_ROUTING__TRAFFIC_MULTIPLIERS__HIGH", "2")

        config = load_config()

        assert config.routing.traffic_multipliers["High"] == 2.0
        assert "HIGH" not in config.routing.traffic_multipliers
        assert "high" not in config.routing.traffic_multipliers

    def test_env_override_bad_number(self, monkeypatch):
        from green_corridor.utils.config import load_config
        from green_corridor.exceptions import ConfigurationError

        monkeypatch.setenv("CORRIDOR_DRIVE__TICK_MS", "fast")

        with pytest.raises(ConfigurationError):
            load_config()

    def test_keyword_overrides(self):
        from green_corridor.utils.config import load_config

        config = load_config(**{"drive.segment_time_ms": 1000.0, "name": "fast"})

        assert config.drive.segment_time_ms == 1000.0
        assert config.name == "fast"

    def test_merge_configs(self):
        from green_corridor.utils.config import ConfigLoader

        loader = ConfigLoader()
        merged = loader.merge_configs({'a': {'b': 1, 'c': 2}, 'd': 3}, {'a': {'b': 10}})

        assert merged == {'a': {'b': 10, 'c': 2}, 'd': 3}

    def test_validation_errors(self):
        from green_corridor.utils.config import ConfigValidator, SimulatorConfig, DetectionConfig

        config = SimulatorConfig(detection=DetectionConfig(advance_detection_km=0.1))
        validator = ConfigValidator()

        assert not validator.validate(config)
        assert "advance_detection_km" in validator.get_report()

    def test_invalid_config_raises(self, tmp_path):
        from green_corridor.utils.config import load_config
        from green_corridor.exceptions import ConfigurationError

        path = tmp_path / "bad.yaml"
        path.write_text("drive:\n  tick_ms: -5\n")

        with pytest.raises(ConfigurationError):
            load_config(str(path))

        with pytest.raises(ConfigurationError):
            load_config(str(tmp_path / "missing.yaml"))

    @pytest.mark.parametrize("body", [
        "drive:\n  tick_ms: fast\n",
        "drive: null\n",
        "detection:\n  override_start_km: [1]\n",
        "routing:\n  base_speed_kmh: true\n",
        "predictor:\n  peak_windows: 5\n",
        "map: [1, 2]\n",
    ])
    def test_badly_typed_values_raise(self, tmp_path, body):
        from green_corridor.utils.config import load_config
        from green_corridor.exceptions import ConfigurationError

        path = tmp_path / "typed.yaml"
        path.write_text(body)

        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_numeric_strings_are_coerced(self, tmp_path):
        from green_corridor.utils.config import load_config

        path = tmp_path / "quoted.yaml"
        path.write_text("drive:\n  tick_ms: \"100\"\npredictor:\n  peak_weight: 3\n")

        config = load_config(str(path))

        assert config.drive.tick_ms == 100.0
        assert isinstance(config.drive.tick_ms, float)
        assert config.predictor.peak_weight == 3

    def test_save_and_reload(self, tmp_path):
        from green_corridor.utils.config import load_config, save_config, SimulatorConfig, DriveConfig

        path = save_config(SimulatorConfig(drive=DriveConfig(tick_ms=100)), str(tmp_path / "out.yaml"))

        assert load_config(path).drive.tick_ms == 100


class TestEventLog:
    """Test the timestamped event log"""

    def test_newest_first(self):
        from green_corridor.simulation import EventLog

        log = EventLog(clock=lambda: datetime(2024, 1, 1, 9, 5, 7))
        log.append("first")
        log.append("second")

        assert log.messages() == ["second", "first"]
        assert log.entries[0].time == "09:05:07"
        assert str(log.entries[0]) == "[09:05:07] second"

    def test_clear(self):
        from green_corridor.simulation import EventLog

        log = EventLog()
        log.append("x")
        log.clear()

        assert len(log) == 0
        assert list(log) == []


class TestFormatting:
    """Test dashboard text helpers"""

    def test_format_km(self):
        from green_corridor.simulation import format_km

        assert format_km(1.234) == "1.23 km"
        assert format_km(0.0) == "0.00 km"
        assert format_km(None) == "—"
        assert format_km(math.inf) == "—"
        assert format_km(math.nan) == "—"

    def test_format_minutes(self):
        from green_corridor.simulation import format_minutes

        assert format_minutes(0.5) == "< 1 min"
        assert format_minutes(2.4) == "2 min"
        assert format_minutes(7.5) == "8 min"
        assert format_minutes(math.inf) == "—"


class TestLogger:
    """Test logging setup"""

    def test_file_handler(self, tmp_path):
        from green_corridor.utils.logger import setup_logger

        log_file = tmp_path / "logs" / "drive.log"
        logger = setup_logger("test_file_logger", log_file=str(log_file), console=False)
        logger.info("signal override")

        for handler in logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "signal override" in text
        assert "INFO" in text
        assert "\x1b[" not in text

    def test_setup_replaces_handlers(self):
        from green_corridor.utils.logger import setup_logger

        setup_logger("test_repeat_logger")
        logger = setup_logger("test_repeat_logger")

        assert len(logger.handlers) == 1

    def test_parse_level(self):
        from green_corridor.utils.logger import parse_level

        assert parse_level("debug") == logging.DEBUG
        assert parse_level("WARNING") == logging.WARNING

        with pytest.raises(ValueError):
            parse_level("chatty")
