"""
Turn and stop detection for trip sample series.

Detects two kinds of maneuvers:
- TURN: a run of same-direction heading changes that adds up to a sharp,
  slow, short change of course
- STOP: a run of near-zero speed entered after a clear deceleration

Both work on runs (see ``segmentation``) of a per-sample indicator, then
keep the runs that pass the shape, speed and duration rules.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np
import pandas as pd

from .config import TIME_COL, SPEED_COL, HEADING_COL, DetectionConfig, resolve_config
from .preprocessing import heading_difference, preprocess_trip
from .segmentation import assign_runs, summarize_runs
from .validation import validate_trip

logger = logging.getLogger(__name__)


class ManeuverType(Enum):
    """Kinds of detected maneuvers."""
    TURN = "turn"
    STOP = "stop"


@dataclass
class ManeuverEvent:
    """A detected maneuver spanning samples ``start_idx`` to ``end_idx`` inclusive."""
    maneuver_type: ManeuverType
    start_idx: int
    end_idx: int
    n_samples: int
    start_time: float
    end_time: float
    mean_speed: float
    net_heading_change: Optional[float] = None  # turns only
    min_prior_accel: Optional[float] = None  # stops only

    @property
    def direction(self) -> Optional[str]:
        """'right' or 'left' for turns, None for stops."""
        if self.net_heading_change is None:
            return None
        return "right" if self.net_heading_change > 0 else "left"


@dataclass
class TripManeuvers:
    """Result of maneuver detection on one trip."""
    # Preprocessed samples with run ids and indicator columns
    df: pd.DataFrame
    turns: List[ManeuverEvent] = field(default_factory=list)
    stops: List[ManeuverEvent] = field(default_factory=list)

    @property
    def turn_count(self) -> int:
        return len(self.turns)

    @property
    def stop_count(self) -> int:
        return len(self.stops)


def turn_indicator(delta, noise_floor: float = 0.25) -> np.ndarray:
    """
    Direction of heading change per sample: -1, 0 or +1.

    Changes of at most ``noise_floor`` degrees count as 0. Undefined deltas
    stay NaN.
    """
    delta = np.asarray(delta, dtype=float)
    return np.sign(delta) * (np.abs(delta) > noise_floor)


def stop_indicator(speed, speed_floor: float = 0.05) -> np.ndarray:
    """True where the vehicle is effectively stationary."""
    return np.abs(np.asarray(speed, dtype=float)) < speed_floor


class TurnClassifier:
    """
    Finds turns in a preprocessed trip.

    A run of heading deltas with the same sign is a turn when:
    - it is longer than ``min_run_length`` samples
    - the heading change from its first to its last sample is at least
      ``turn_angle_threshold`` degrees in magnitude
    - the mean speed over the run is below ``turn_max_mean_speed``
    - it is shorter than ``turn_max_duration`` samples
    """

    def __init__(self, config: Optional[DetectionConfig] = None):
        self.config = resolve_config(config)

    def indicator(self, df: pd.DataFrame) -> np.ndarray:
        return turn_indicator(df['heading_delta'], self.config.heading_noise_floor)

    def _is_turn(self, n_samples: int, net_change: float, mean_speed: float) -> bool:
        cfg = self.config
        return (n_samples > cfg.min_run_length
                and abs(net_change) >= cfg.turn_angle_threshold
                and mean_speed < cfg.turn_max_mean_speed
                and n_samples < cfg.turn_max_duration)

    def classify(self, df: pd.DataFrame) -> List[ManeuverEvent]:
        """
        Detect turns.

        Args:
            df: Output of ``preprocess_trip``. A ``turn_run`` column is added.

        Returns:
            Turn events in trip order
        """
        indicator = self.indicator(df)
        run_ids = assign_runs(indicator)
        df['turn_run'] = run_ids

        heading = df[HEADING_COL].to_numpy(dtype=float)
        speed = df[SPEED_COL].to_numpy(dtype=float)
        times = df[TIME_COL].to_numpy(dtype=float)

        turns = []
        for run in summarize_runs(indicator, run_ids).itertuples(index=False):
            # Undefined or no-change runs are never turns
            if pd.isna(run.value) or run.value == 0:
                continue

            start, end = int(run.start_idx), int(run.end_idx)
            net_change = heading_difference(heading[start], heading[end])
            mean_speed = float(np.mean(speed[start:end + 1]))

            if self._is_turn(int(run.n_samples), net_change, mean_speed):
                turns.append(ManeuverEvent(
                    maneuver_type=ManeuverType.TURN,
                    start_idx=start,
                    end_idx=end,
                    n_samples=int(run.n_samples),
                    start_time=float(times[start]),
                    end_time=float(times[end]),
                    mean_speed=mean_speed,
                    net_heading_change=net_change,
                ))

        return turns


class StopClassifier:
    """
    Finds stops in a preprocessed trip.

    A run of near-zero speed is a stop when it is longer than
    ``min_run_length`` samples and the minimum acceleration over the
    ``decel_window`` samples before it started is below ``decel_threshold``.
    Stationary stretches without a braking approach (sensor dropouts, trips
    that start at rest) are not stops.
    """

    def __init__(self, config: Optional[DetectionConfig] = None):
        self.config = resolve_config(config)

    def indicator(self, df: pd.DataFrame) -> np.ndarray:
        return stop_indicator(df[SPEED_COL], self.config.stop_speed_floor)

    def classify(self, df: pd.DataFrame) -> List[ManeuverEvent]:
        """
        Detect stops.

        Args:
            df: Output of ``preprocess_trip``. A ``stop_run`` column is added.

        Returns:
            Stop events in trip order
        """
        cfg = self.config
        indicator = self.indicator(df)
        run_ids = assign_runs(indicator)
        df['stop_run'] = run_ids

        speed = df[SPEED_COL].to_numpy(dtype=float)
        times = df[TIME_COL].to_numpy(dtype=float)
        prior_min = df['prior_min_accel'].to_numpy(dtype=float)

        stops = []
        for run in summarize_runs(indicator, run_ids).itertuples(index=False):
            if not run.value or run.n_samples <= cfg.min_run_length:
                continue

            start, end = int(run.start_idx), int(run.end_idx)
            decel = prior_min[start]
            # NaN (not enough history) fails the comparison
            if not decel < cfg.decel_threshold:
                continue

            stops.append(ManeuverEvent(
                maneuver_type=ManeuverType.STOP,
                start_idx=start,
                end_idx=end,
                n_samples=int(run.n_samples),
                start_time=float(times[start]),
                end_time=float(times[end]),
                mean_speed=float(np.mean(speed[start:end + 1])),
                min_prior_accel=float(decel),
            ))

        return stops


class ManeuverDetector:
    """
    Runs the full detection pipeline on one trip.

    validate -> preprocess -> turn runs / stop runs -> classify
    """

    def __init__(self, config: Optional[DetectionConfig] = None):
        self.config = resolve_config(config)
        self.turn_classifier = TurnClassifier(self.config)
        self.stop_classifier = StopClassifier(self.config)

    def detect(self, df: pd.DataFrame) -> TripManeuvers:
        """
        Detect turns and stops in a raw trip table.

        Args:
            df: Raw trip samples with time, speed and heading columns, or a
                sequence of (time, speed, heading) rows

        Returns:
            TripManeuvers with the events and the annotated samples

        Raises:
            StructuralError: If the trip fails validation
        """
        df = validate_trip(df)
        samples = preprocess_trip(df, self.config)

        turns = self.turn_classifier.classify(samples)
        stops = self.stop_classifier.classify(samples)
        logger.debug("Detected %d turns and %d stops in %d samples",
                     len(turns), len(stops), len(samples))

        return TripManeuvers(df=samples, turns=turns, stops=stops)


def detect_maneuvers(
    df: pd.DataFrame,
    config: Optional[DetectionConfig] = None,
) -> TripManeuvers:
    """
    Convenience function to detect turns and stops in a trip.

    Args:
        df: Raw trip samples with time, speed and heading columns
        config: Detection parameters (defaults if None)

    Returns:
        TripManeuvers with turn and stop events and counts
    """
    return ManeuverDetector(config).detect(df)
