"""
Detection parameters for trip maneuver extraction.

All thresholds used by the turn and stop classifiers live here so they can be
inspected and overridden in one place.
"""

from dataclasses import dataclass, fields, replace


# Expected columns of a raw trip table
TIME_COL = 'time'
SPEED_COL = 'speed'
HEADING_COL = 'heading'
TRIP_COLUMNS = (TIME_COL, SPEED_COL, HEADING_COL)


@dataclass(frozen=True)
class DetectionConfig:
    """
    Thresholds for turn and stop detection.

    Units follow the trip samples: degrees for headings, m/s for speeds and
    m/s per sample for acceleration. Durations are sample counts.
    """
    # Turn detection
    heading_noise_floor: float = 0.25  # |heading delta| at or below this is "no change"
    turn_angle_threshold: float = 60.0  # min |net heading change| of a turn
    turn_max_mean_speed: float = 20.0  # turns are slower than this on average
    turn_max_duration: int = 45  # turns are shorter than this (samples)

    # Shared
    min_run_length: int = 2  # runs must be longer than this (samples)

    # Stop detection
    stop_speed_floor: float = 0.05  # |speed| below this counts as stationary
    decel_window: int = 15  # samples of acceleration history checked before a stop
    decel_threshold: float = -0.5  # min acceleration in the window must fall below this

    def __post_init__(self):
        if self.heading_noise_floor < 0:
            raise ValueError("heading_noise_floor must be non-negative")
        if not 0 < self.turn_angle_threshold <= 180:
            raise ValueError("turn_angle_threshold must be in (0, 180]")
        if self.turn_max_mean_speed <= 0:
            raise ValueError("turn_max_mean_speed must be positive")
        if self.min_run_length < 0:
            raise ValueError("min_run_length must be non-negative")
        if self.turn_max_duration <= self.min_run_length:
            raise ValueError("turn_max_duration must exceed min_run_length")
        if self.stop_speed_floor <= 0:
            raise ValueError("stop_speed_floor must be positive")
        if self.decel_window < 1:
            raise ValueError("decel_window must be at least 1")
        if self.decel_threshold >= 0:
            raise ValueError("decel_threshold must be negative")

    def with_overrides(self, **overrides) -> 'DetectionConfig':
        """Return a copy with the given fields replaced."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown config fields: {sorted(unknown)}")
        return replace(self, **overrides)


DEFAULT_CONFIG = DetectionConfig()


def resolve_config(config=None) -> DetectionConfig:
    """Return ``config`` or the default configuration when it is None."""
    return DEFAULT_CONFIG if config is None else config
