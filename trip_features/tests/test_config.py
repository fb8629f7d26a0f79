"""
Tests for detection parameters.
"""

import pytest

import sys
sys.path.insert(0, str(__file__).rsplit('/', 3)[0])

from trip_features import DetectionConfig


class TestDetectionConfig:

    def test_defaults(self):
        config = DetectionConfig()

        assert config.heading_noise_floor == 0.25
        assert config.turn_angle_threshold == 60.0
        assert config.turn_max_mean_speed == 20.0
        assert config.turn_max_duration == 45
        assert config.min_run_length == 2
        assert config.stop_speed_floor == 0.05
        assert config.decel_window == 15
        assert config.decel_threshold == -0.5

    def test_with_overrides(self):
        config = DetectionConfig().with_overrides(decel_window=10)

        assert config.decel_window == 10
        assert config.turn_angle_threshold == 60.0

    def test_unknown_override(self):
        with pytest.raises(ValueError):
            DetectionConfig().with_overrides(turn_angel_threshold=45)

    @pytest.mark.parametrize('overrides', [
        {'decel_window': 0},
        {'decel_threshold': 0.5},
        {'turn_angle_threshold': 200},
        {'stop_speed_floor': 0},
        {'turn_max_duration': 2},
    ])
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            DetectionConfig(**overrides)

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DetectionConfig().decel_window = 3
