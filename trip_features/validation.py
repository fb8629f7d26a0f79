"""
Structural validation of raw trip tables.

A trip must have exactly the columns ``time``, ``speed`` and ``heading``, at
least one sample, numeric signals with at least one observed value each, and
some variation in both speed and heading. Anything else is rejected before
preprocessing.
"""

import logging

import numpy as np
import pandas as pd

from .config import TIME_COL, SPEED_COL, HEADING_COL, TRIP_COLUMNS
from .errors import StructuralError, TripDiagnostics

logger = logging.getLogger(__name__)


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    """First column called ``name``, or an all-missing series if there is none."""
    matches = np.flatnonzero(df.columns == name)
    if len(matches) == 0:
        return pd.Series(np.nan, index=df.index, dtype=float)
    return df.iloc[:, matches[0]]


def _variance(series: pd.Series) -> float:
    """Sample variance of the numeric values, NaN when fewer than two."""
    values = pd.to_numeric(series, errors='coerce')
    return float(values.var()) if values.notna().sum() > 1 else np.nan


def diagnose_trip(df: pd.DataFrame) -> TripDiagnostics:
    """
    Summarize a raw trip table for error reporting.

    Works on malformed input: absent signal columns count as fully missing,
    and only the first of any repeated column is looked at.
    """
    speed = _column(df, SPEED_COL)
    heading = _column(df, HEADING_COL)

    return TripDiagnostics(
        n_samples=len(df),
        missing_time=int(_column(df, TIME_COL).isna().sum()),
        missing_speed=int(speed.isna().sum()),
        missing_heading=int(heading.isna().sum()),
        speed_variance=_variance(speed),
        heading_variance=_variance(heading),
        columns=tuple(str(c) for c in df.columns),
    )


def _reject(message: str, check: str, diagnostics: TripDiagnostics):
    logger.debug("Rejecting trip (%s): %s %s", check, message, diagnostics.as_dict())
    raise StructuralError(message, check=check, diagnostics=diagnostics)


def as_trip_frame(samples) -> pd.DataFrame:
    """
    Return ``samples`` as a trip DataFrame.

    DataFrames are returned as they are. Sequences of ``(time, speed, heading)``
    rows are converted.

    Raises:
        StructuralError: If ``samples`` cannot be read as rows of three values
    """
    if isinstance(samples, pd.DataFrame):
        return samples
    try:
        return pd.DataFrame(list(samples), columns=list(TRIP_COLUMNS))
    except (TypeError, ValueError) as e:
        _reject(f"cannot read samples as (time, speed, heading) rows: {e}",
                'columns', diagnose_trip(pd.DataFrame()))


def validate_trip(samples) -> pd.DataFrame:
    """
    Check that a raw trip can be processed.

    Args:
        samples: Raw trip samples, as a DataFrame or a sequence of
            ``(time, speed, heading)`` rows

    Returns:
        The samples as a DataFrame; a DataFrame input is returned unchanged

    Raises:
        StructuralError: If the trip is empty, has the wrong columns, a signal
            is entirely missing or not numeric, or a signal never varies
    """
    df = as_trip_frame(samples)
    diagnostics = diagnose_trip(df)

    if diagnostics.n_samples == 0:
        _reject("trip has no samples", 'empty', diagnostics)

    if not df.columns.is_unique or set(df.columns) != set(TRIP_COLUMNS):
        _reject(
            f"expected columns {list(TRIP_COLUMNS)}, got {list(diagnostics.columns)}",
            'columns', diagnostics,
        )

    if diagnostics.missing_time == diagnostics.n_samples:
        _reject("all time values are missing", 'all_missing_time', diagnostics)
    if diagnostics.missing_speed == diagnostics.n_samples:
        _reject("all speed values are missing", 'all_missing_speed', diagnostics)
    if diagnostics.missing_heading == diagnostics.n_samples:
        _reject("all heading values are missing", 'all_missing_heading', diagnostics)

    for col in TRIP_COLUMNS:
        if not pd.api.types.is_numeric_dtype(df[col]) or pd.api.types.is_bool_dtype(df[col]):
            _reject(f"{col} values are not numbers (dtype {df[col].dtype})",
                    f'non_numeric_{col}', diagnostics)

    # nunique ignores NaN, so a single observed value is also constant
    if df[SPEED_COL].nunique() < 2:
        _reject("speed never varies", 'constant_speed', diagnostics)
    if df[HEADING_COL].nunique() < 2:
        _reject("heading never varies", 'constant_heading', diagnostics)

    return df
