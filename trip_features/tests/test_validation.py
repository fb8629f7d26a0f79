"""
Tests for trip validation.
"""

import numpy as np
import pandas as pd
import pytest

import sys
sys.path.insert(0, str(__file__).rsplit('/', 3)[0])

from trip_features import StructuralError, detect_maneuvers, validate_trip, generate_sample_trip
from trip_features.validation import diagnose_trip


def make_trip(speeds, headings):
    n = len(speeds)
    return pd.DataFrame({
        'time': np.arange(n, dtype=float),
        'speed': np.asarray(speeds, dtype=float),
        'heading': np.asarray(headings, dtype=float),
    })


class TestValidateTrip:
    """Tests for structural checks."""

    def test_valid_trip_passes_unchanged(self):
        df = generate_sample_trip('turn', seed=42)
        assert validate_trip(df) is df

    def test_empty_trip(self):
        df = pd.DataFrame(columns=['time', 'speed', 'heading'])
        with pytest.raises(StructuralError) as exc_info:
            validate_trip(df)
        assert exc_info.value.check == 'empty'

    def test_extra_column(self):
        df = make_trip([1, 2, 3], [10, 20, 30])
        df['altitude'] = 0.0
        with pytest.raises(StructuralError) as exc_info:
            validate_trip(df)
        assert exc_info.value.check == 'columns'

    def test_missing_column(self):
        df = make_trip([1, 2, 3], [10, 20, 30]).drop(columns='heading')
        with pytest.raises(StructuralError) as exc_info:
            validate_trip(df)
        assert exc_info.value.check == 'columns'
        assert exc_info.value.diagnostics.missing_heading == 3

    def test_all_speed_missing(self):
        df = make_trip([np.nan] * 4, [10, 20, 30, 40])
        with pytest.raises(StructuralError) as exc_info:
            validate_trip(df)
        assert exc_info.value.check == 'all_missing_speed'

    def test_all_heading_missing(self):
        df = make_trip([1, 2, 3, 4], [np.nan] * 4)
        with pytest.raises(StructuralError) as exc_info:
            validate_trip(df)
        assert exc_info.value.check == 'all_missing_heading'

    def test_constant_speed(self):
        df = make_trip([5.0] * 4, [10, 20, 30, 40])
        with pytest.raises(StructuralError) as exc_info:
            validate_trip(df)
        assert exc_info.value.check == 'constant_speed'

    def test_constant_heading(self):
        """A heading stuck at 90 degrees is rejected before any classification."""
        df = make_trip(np.linspace(0, 10, 40), [90.0] * 40)
        with pytest.raises(StructuralError) as exc_info:
            validate_trip(df)

        error = exc_info.value
        assert error.check == 'constant_heading'
        assert error.diagnostics.heading_variance == 0
        assert error.diagnostics.n_samples == 40

    def test_single_observed_value_is_constant(self):
        df = make_trip([np.nan, 3.0, np.nan], [10, 20, 30])
        with pytest.raises(StructuralError) as exc_info:
            validate_trip(df)
        assert exc_info.value.check == 'constant_speed'

    def test_detection_rejects_before_classifying(self):
        df = make_trip(np.linspace(0, 10, 40), [90.0] * 40)
        with pytest.raises(StructuralError):
            detect_maneuvers(df)

    def test_repeated_column(self):
        df = pd.DataFrame(
            [[0, 1.0, 10.0, 20.0], [1, 2.0, 20.0, 30.0], [2, 3.0, 30.0, 40.0]],
            columns=['time', 'speed', 'heading', 'heading'],
        )
        with pytest.raises(StructuralError) as exc_info:
            detect_maneuvers(df)

        error = exc_info.value
        assert error.check == 'columns'
        assert error.diagnostics.columns == ('time', 'speed', 'heading', 'heading')
        assert error.diagnostics.missing_heading == 0

    @pytest.mark.parametrize('col, values', [
        ('heading', ['n', 'e', 's', 'w']),
        ('speed', ['slow', 'fast', 'slow', 'fast']),
        ('time', ['a', 'b', 'c', 'd']),
        ('speed', [True, False, True, False]),
    ])
    def test_non_numeric_signal(self, col, values):
        df = make_trip([1, 2, 3, 4], [10, 20, 30, 40])
        df[col] = values
        with pytest.raises(StructuralError) as exc_info:
            detect_maneuvers(df)
        assert exc_info.value.check == f'non_numeric_{col}'

    def test_all_time_missing(self):
        df = make_trip([1, 2, 3, 4], [10, 20, 30, 40])
        df['time'] = np.nan
        with pytest.raises(StructuralError) as exc_info:
            validate_trip(df)
        assert exc_info.value.check == 'all_missing_time'
        assert exc_info.value.diagnostics.missing_time == 4


class TestSampleRows:
    """Trips given as sequences of (time, speed, heading) rows."""

    def test_rows_converted(self):
        df = validate_trip([(0, 1.0, 10.0), (1, 2.0, 20.0)])

        assert list(df.columns) == ['time', 'speed', 'heading']
        assert list(df['heading']) == [10.0, 20.0]

    def test_rows_detected_like_frame(self):
        frame = generate_sample_trip('turn', seed=3)
        rows = list(frame.itertuples(index=False, name=None))

        assert detect_maneuvers(rows).turn_count == detect_maneuvers(frame).turn_count == 1

    def test_empty_rows(self):
        with pytest.raises(StructuralError) as exc_info:
            validate_trip([])
        assert exc_info.value.check == 'empty'

    @pytest.mark.parametrize('samples', [
        [(0, 1.0), (1, 2.0)],
        [(0, 1.0, 10.0, 5.0)],
        42,
    ])
    def test_malformed_rows(self, samples):
        with pytest.raises(StructuralError) as exc_info:
            detect_maneuvers(samples)
        assert exc_info.value.check == 'columns'


class TestDiagnostics:
    """Tests for the diagnostic snapshot."""

    def test_counts_and_variances(self):
        df = make_trip([1.0, np.nan, 3.0], [np.nan, np.nan, 45.0])
        diag = diagnose_trip(df)

        assert diag.n_samples == 3
        assert diag.missing_time == 0
        assert diag.missing_speed == 1
        assert diag.missing_heading == 2
        assert diag.speed_variance == pytest.approx(2.0)
        assert np.isnan(diag.heading_variance)
        assert diag.columns == ('time', 'speed', 'heading')

    def test_non_numeric_values_have_no_variance(self):
        df = make_trip([1.0, 2.0], [3.0, 4.0])
        df['heading'] = ['n', 'e']
        assert np.isnan(diagnose_trip(df).heading_variance)

    def test_as_dict(self):
        diag = diagnose_trip(make_trip([1.0, 2.0], [3.0, 4.0]))
        assert set(diag.as_dict()) == {
            'n_samples', 'missing_time', 'missing_speed', 'missing_heading',
            'speed_variance', 'heading_variance', 'columns',
        }


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
