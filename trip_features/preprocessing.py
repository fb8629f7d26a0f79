"""
Signal preprocessing for trip maneuver detection.

Prepares the derived signals the classifiers work on:
- Gap filling of the raw speed and heading samples
- Signed heading change between consecutive samples (circular)
- Acceleration (speed change per sample)
- Minimum acceleration over the window leading into each sample
"""

from typing import Optional

import numpy as np
import pandas as pd

from .config import TIME_COL, SPEED_COL, HEADING_COL, DetectionConfig, resolve_config


def heading_difference(h0, h1):
    """
    Signed smallest rotation from heading ``h0`` to heading ``h1``.

    Positive values are clockwise (right turns on a compass). The result lies
    in (-180, 180]; headings exactly opposite each other give +180.

    Args:
        h0, h1: Compass headings in degrees (scalars or arrays)

    Returns:
        Heading change in degrees, same shape as the inputs
    """
    # Computing the counter-clockwise rotation and negating it puts the
    # closed end of the interval at +180 instead of -180.
    ccw = np.mod(np.asarray(h0, dtype=float) - np.asarray(h1, dtype=float) + 540.0, 360.0) - 180.0
    result = -ccw + 0.0  # + 0.0 turns -0.0 into 0.0
    return float(result) if np.ndim(result) == 0 else result


def impute_missing(df: pd.DataFrame, columns=(TIME_COL, SPEED_COL, HEADING_COL)) -> pd.DataFrame:
    """
    Fill missing samples without dropping any rows.

    Each gap takes the last observed value before it. Leading gaps, which have
    nothing before them, take the first observed value.

    Args:
        df: Trip samples
        columns: Columns to fill (those absent from ``df`` are ignored)

    Returns:
        A copy of ``df`` with the columns filled
    """
    result = df.copy()
    present = [c for c in columns if c in result.columns]
    result[present] = result[present].ffill().bfill()
    return result


def heading_delta(heading) -> np.ndarray:
    """Heading change into each sample; NaN for the first sample."""
    heading = np.asarray(heading, dtype=float)
    delta = np.full(len(heading), np.nan)
    if len(heading) > 1:
        delta[1:] = heading_difference(heading[:-1], heading[1:])
    return delta


def acceleration(speed) -> np.ndarray:
    """Speed change into each sample; NaN for the first sample."""
    speed = np.asarray(speed, dtype=float)
    accel = np.full(len(speed), np.nan)
    if len(speed) > 1:
        accel[1:] = np.diff(speed)
    return accel


def prior_min_acceleration(accel, window: int = 15) -> np.ndarray:
    """
    Minimum acceleration over the ``window`` samples before each sample.

    For sample ``t`` this is ``min(accel[t-window], ..., accel[t-1])``: the
    speed changes leading up to, but not into, sample ``t``. Samples without a
    full window of defined accelerations behind them get NaN.
    """
    rolling = pd.Series(accel, dtype=float).rolling(window, min_periods=window).min()
    return rolling.shift(1).to_numpy()


def preprocess_trip(
    df: pd.DataFrame,
    config: Optional[DetectionConfig] = None,
) -> pd.DataFrame:
    """
    Fill gaps and add the derived signals used for maneuver detection.

    Args:
        df: Validated trip samples with time, speed and heading columns
        config: Detection parameters (defaults if None)

    Returns:
        DataFrame with the same rows as ``df`` and added columns:
        ``heading_delta``, ``accel`` and ``prior_min_accel``
    """
    config = resolve_config(config)

    result = impute_missing(df)
    result = result.reset_index(drop=True)

    speed = result[SPEED_COL].to_numpy(dtype=float)
    heading = result[HEADING_COL].to_numpy(dtype=float)

    accel = acceleration(speed)
    result['heading_delta'] = heading_delta(heading)
    result['accel'] = accel
    result['prior_min_accel'] = prior_min_acceleration(accel, config.decel_window)

    return result
