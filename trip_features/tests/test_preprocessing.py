"""
Tests for signal preprocessing.
"""

import numpy as np
import pandas as pd
import pytest

import sys
sys.path.insert(0, str(__file__).rsplit('/', 3)[0])

from trip_features import heading_difference, preprocess_trip, generate_sample_trip
from trip_features.config import DetectionConfig
from trip_features.preprocessing import (
    acceleration,
    heading_delta,
    impute_missing,
    prior_min_acceleration,
)


class TestHeadingDifference:
    """Tests for circular heading arithmetic."""

    def test_wraparound_clockwise(self):
        """359 -> 2 is a small right turn, not a large left one."""
        assert heading_difference(359, 2) == pytest.approx(3)

    def test_wraparound_counterclockwise(self):
        assert heading_difference(2, 359) == pytest.approx(-3)

    def test_opposite_headings_are_plus_180(self):
        """Exactly opposite headings always resolve to +180."""
        assert heading_difference(180, 0) == 180
        assert heading_difference(0, 180) == 180
        assert heading_difference(90, 270) == 180

    def test_no_change(self):
        assert heading_difference(123.4, 123.4) == 0

    def test_range_over_grid(self):
        """All results lie in (-180, 180]."""
        h = np.arange(0, 360, 7.5)
        h0, h1 = np.meshgrid(h, h)
        delta = heading_difference(h0.ravel(), h1.ravel())

        assert np.all(delta > -180)
        assert np.all(delta <= 180)
        # Adding the delta back reaches the target heading
        np.testing.assert_allclose(np.mod(h0.ravel() + delta, 360), h1.ravel(), atol=1e-9)

    def test_scalar_returns_float(self):
        assert isinstance(heading_difference(10, 20), float)


class TestDerivedSignals:
    """Tests for heading delta, acceleration and the braking window."""

    def test_heading_delta_first_sample_undefined(self):
        delta = heading_delta([350, 355, 0, 5])

        assert np.isnan(delta[0])
        np.testing.assert_allclose(delta[1:], [5, 5, 5])

    def test_acceleration(self):
        accel = acceleration([0.0, 1.0, 3.0, 2.0])

        assert np.isnan(accel[0])
        np.testing.assert_allclose(accel[1:], [1.0, 2.0, -1.0])

    def test_single_sample(self):
        assert np.isnan(heading_delta([90.0])).all()
        assert np.isnan(acceleration([1.0])).all()

    def test_prior_min_window_alignment(self):
        """Sample t sees accel[t-window] .. accel[t-1], not accel[t]."""
        accel = np.array([np.nan, -1.0, 0.0, 0.0, 0.0, -5.0, 0.0])
        prior = prior_min_acceleration(accel, window=3)

        # t=3 needs accel[0..2], and accel[0] is undefined
        assert np.isnan(prior[:4]).all()
        assert prior[4] == pytest.approx(-1.0)  # accel[1..3]
        assert prior[5] == pytest.approx(0.0)  # accel[2..4]; accel[5] excluded
        assert prior[6] == pytest.approx(-5.0)  # accel[3..5]

    def test_prior_min_default_window_needs_full_history(self):
        accel = acceleration(np.arange(30, dtype=float))
        prior = prior_min_acceleration(accel, window=15)

        # First defined at t=16: accel[1..15]
        assert np.isnan(prior[:16]).all()
        assert not np.isnan(prior[16:]).any()


class TestImputation:
    """Tests for gap filling."""

    def test_fill_leading_interior_and_trailing(self):
        df = pd.DataFrame({
            'time': [0.0, 1.0, 2.0, 3.0, 4.0, 5.0],
            'speed': [np.nan, np.nan, 3.0, np.nan, 5.0, np.nan],
            'heading': [10.0, np.nan, 30.0, 40.0, np.nan, np.nan],
        })
        result = impute_missing(df)

        assert list(result['speed']) == [3.0, 3.0, 3.0, 3.0, 5.0, 5.0]
        assert list(result['heading']) == [10.0, 10.0, 30.0, 40.0, 40.0, 40.0]

    def test_input_not_modified(self):
        df = pd.DataFrame({'time': [0.0, 1.0], 'speed': [np.nan, 1.0], 'heading': [1.0, 2.0]})
        impute_missing(df)

        assert np.isnan(df['speed'].iloc[0])


class TestPreprocessTrip:
    """Tests for the full preprocessing step."""

    def test_sample_count_preserved(self):
        df = generate_sample_trip('mixed', seed=42)
        df.loc[[0, 10, len(df) - 1], 'speed'] = np.nan
        result = preprocess_trip(df)

        assert len(result) == len(df)
        assert not result[['time', 'speed', 'heading']].isna().any().any()

    def test_adds_derived_columns(self):
        result = preprocess_trip(generate_sample_trip('stop', seed=1))

        for col in ['heading_delta', 'accel', 'prior_min_accel']:
            assert col in result.columns

    def test_idempotent(self):
        """Preprocessing its own output changes nothing."""
        df = generate_sample_trip('mixed', seed=7)
        df.loc[[0, 1, 50], 'heading'] = np.nan
        once = preprocess_trip(df)
        twice = preprocess_trip(once)

        pd.testing.assert_frame_equal(once, twice)

    def test_window_follows_config(self):
        df = generate_sample_trip('stop', seed=1)
        result = preprocess_trip(df, DetectionConfig(decel_window=5))

        assert np.isnan(result['prior_min_accel'].iloc[5])
        assert not np.isnan(result['prior_min_accel'].iloc[6])


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
