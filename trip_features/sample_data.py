"""
Sample trip data generation for testing and development.

Builds 1 Hz trip sample tables (time, speed, heading) from simple driving
segments:
- Cruising at constant speed and heading
- Turning through a given angle
- Speeding up or braking
- Standing still
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .config import TIME_COL, SPEED_COL, HEADING_COL

TRIP_TYPES = ['straight', 'turn', 'stop', 'idle_stop', 'mixed']

Segment = Tuple[np.ndarray, np.ndarray]  # (speeds, headings)


def cruise_segment(num_samples: int, speed: float, heading: float) -> Segment:
    """Constant speed and heading."""
    return np.full(num_samples, float(speed)), np.full(num_samples, float(heading))


def turn_segment(
    num_samples: int,
    speed: float,
    start_heading: float,
    turn_angle: float,  # degrees, positive = right/clockwise
) -> Segment:
    """
    Heading changes in equal steps, ending at ``start_heading + turn_angle``.

    The first sample is already one step into the turn.
    """
    steps = np.arange(1, num_samples + 1) * (turn_angle / num_samples)
    return np.full(num_samples, float(speed)), start_heading + steps


def speed_ramp_segment(num_samples: int, start_speed: float, end_speed: float, heading: float) -> Segment:
    """
    Speed changes linearly between two speeds the vehicle is at just before
    and just after the segment.
    """
    speeds = np.linspace(start_speed, end_speed, num_samples + 2)[1:-1]
    return speeds, np.full(num_samples, float(heading))


def hold_segment(num_samples: int, heading: float) -> Segment:
    """Vehicle standing still."""
    return np.zeros(num_samples), np.full(num_samples, float(heading))


def assemble_trip(
    segments: List[Segment],
    speed_noise_std: float = 0.0,
    heading_noise_std: float = 0.0,
) -> pd.DataFrame:
    """
    Concatenate segments into a trip table sampled once per time unit.

    Noise is only added while the vehicle is moving, so stationary samples
    stay exactly zero.

    Returns:
        DataFrame with columns: time, speed, heading (degrees in [0, 360))
    """
    speeds = np.concatenate([s for s, _ in segments])
    headings = np.concatenate([h for _, h in segments])
    n = len(speeds)

    moving = speeds != 0
    if speed_noise_std > 0:
        speeds = speeds + np.where(moving, np.random.normal(0, speed_noise_std, n), 0.0)
    if heading_noise_std > 0:
        headings = headings + np.random.normal(0, heading_noise_std, n)

    return pd.DataFrame({
        TIME_COL: np.arange(n, dtype=float),
        SPEED_COL: speeds,
        HEADING_COL: np.mod(headings, 360.0),
    })


def generate_sample_trip(
    trip_type: str = 'mixed',
    seed: Optional[int] = None,
    noise: bool = True,
) -> pd.DataFrame:
    """
    Generate a sample trip.

    Expected maneuver counts with the default detection parameters:

    ===========  =====  =====
    trip_type    turns  stops
    ===========  =====  =====
    straight     0      0
    turn         1      0
    stop         0      1
    idle_stop    0      0
    mixed        2      1
    ===========  =====  =====

    ``idle_stop`` stands still for a few samples without braking first
    (speed drops straight from cruising to zero), which is not a stop.

    Args:
        trip_type: One of 'straight', 'turn', 'stop', 'idle_stop', 'mixed'
        seed: Random seed for reproducibility
        noise: Add small sensor noise to moving samples

    Returns:
        DataFrame with columns: time, speed, heading
    """
    if seed is not None:
        np.random.seed(seed)

    speed_noise = 0.05 if noise else 0.0
    heading_noise = 0.05 if noise else 0.0

    if trip_type == 'straight':
        segments = [
            cruise_segment(30, speed=12, heading=45),
            turn_segment(5, speed=12, start_heading=45, turn_angle=10),  # lane drift
            cruise_segment(30, speed=12, heading=55),
        ]

    elif trip_type == 'turn':
        # 10 -> 100 degrees over 10 samples at walking pace
        segments = [
            cruise_segment(20, speed=1, heading=10),
            turn_segment(10, speed=1, start_heading=10, turn_angle=90),
            cruise_segment(20, speed=1, heading=100),
        ]

    elif trip_type == 'stop':
        segments = [
            cruise_segment(20, speed=10, heading=270),
            speed_ramp_segment(15, 10, 0, heading=270),
            hold_segment(5, heading=270),
            speed_ramp_segment(15, 0, 10, heading=270),
            cruise_segment(15, speed=10, heading=275),
        ]

    elif trip_type == 'idle_stop':
        segments = [
            cruise_segment(30, speed=10, heading=180),
            hold_segment(5, heading=180),
            cruise_segment(20, speed=10, heading=185),
        ]
        speed_noise = 0.0

    elif trip_type == 'mixed':
        segments = [
            cruise_segment(25, speed=12, heading=0),
            speed_ramp_segment(8, 12, 5, heading=0),
            turn_segment(12, speed=5, start_heading=0, turn_angle=90),  # right
            speed_ramp_segment(8, 5, 12, heading=90),
            cruise_segment(20, speed=12, heading=90),
            speed_ramp_segment(15, 12, 0, heading=90),
            hold_segment(8, heading=90),
            speed_ramp_segment(10, 0, 6, heading=90),
            turn_segment(10, speed=6, start_heading=90, turn_angle=-75),  # left
            cruise_segment(25, speed=6, heading=15),
        ]

    else:
        raise ValueError(f"Unknown trip type: {trip_type}")

    return assemble_trip(segments, speed_noise, heading_noise)


def generate_trip_dataset(
    num_trips: int = 10,
    seed: Optional[int] = None,
) -> Dict[str, pd.DataFrame]:
    """
    Generate a set of trips cycling through all trip types.

    Args:
        num_trips: Number of trips to generate
        seed: Random seed for reproducibility

    Returns:
        Dict mapping trip id ('1', '2', ...) to trip DataFrame
    """
    trips = {}
    for i in range(num_trips):
        trip_type = TRIP_TYPES[i % len(TRIP_TYPES)]
        trips[str(i + 1)] = generate_sample_trip(
            trip_type,
            seed=seed + i if seed is not None else None,
        )
    return trips


def write_trip_dataset(
    trips: Dict[str, pd.DataFrame],
    data_root: Union[str, Path],
    partition: Optional[str] = None,
) -> Path:
    """
    Write trips as ``<data_root>/<partition>/<trip_id>.csv``.

    Returns:
        The directory the files were written to
    """
    out_dir = Path(data_root) if partition is None else Path(data_root) / partition
    out_dir.mkdir(parents=True, exist_ok=True)
    for trip_id, df in trips.items():
        df.to_csv(out_dir / f"{trip_id}.csv", index=False)
    return out_dir
