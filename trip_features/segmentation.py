"""
Run segmentation of indicator series.

Splits a series into maximal runs of equal consecutive values and numbers
them 1, 2, 3, ... in order. Missing values (NaN/None) compare equal to each
other, so a stretch of undefined indicator values forms a run of its own.
"""

import numpy as np
import pandas as pd


def _change_points(values: pd.Series) -> np.ndarray:
    """Boolean array, True where a sample differs from the one before it."""
    current = values.iloc[1:].to_numpy()
    previous = values.iloc[:-1].to_numpy()
    both_missing = pd.isna(current) & pd.isna(previous)
    same = (current == previous) | both_missing
    return np.concatenate([[True], ~same]) if len(values) else np.array([], dtype=bool)


def assign_runs(values) -> np.ndarray:
    """
    Assign a run id to every sample of an indicator series.

    Args:
        values: Indicator values (numeric, boolean or categorical)

    Returns:
        Integer array of the same length. Ids start at 1, never decrease, and
        increase by one exactly where the value changes.
    """
    series = pd.Series(values).reset_index(drop=True)
    if series.empty:
        return np.array([], dtype=int)
    return np.cumsum(_change_points(series)).astype(int)


def summarize_runs(values, run_ids=None) -> pd.DataFrame:
    """
    One row per run: ``run_id``, ``value``, ``start_idx``, ``end_idx``, ``n_samples``.

    Args:
        values: Indicator values
        run_ids: Precomputed output of ``assign_runs(values)`` (computed if None)
    """
    series = pd.Series(values).reset_index(drop=True)
    if run_ids is None:
        run_ids = assign_runs(series)

    frame = pd.DataFrame({'run_id': run_ids, 'value': series, 'idx': np.arange(len(series))})
    summary = frame.groupby('run_id', sort=True).agg(
        value=('value', 'first'),
        start_idx=('idx', 'min'),
        end_idx=('idx', 'max'),
        n_samples=('idx', 'size'),
    )
    return summary.reset_index()
