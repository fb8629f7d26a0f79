#!/usr/bin/env python3
"""
Example usage of the trip feature extractor.

This script demonstrates:
1. Generating sample trips
2. Detecting turns and stops in a single trip
3. Building a feature table over a directory of trip files
4. Tuning detection thresholds
"""

import tempfile

import pandas as pd
from trip_features import (
    CsvTripLoader,
    DetectionConfig,
    detect_maneuvers,
    extract_trip_features,
    generate_sample_trip,
    generate_trip_dataset,
)
from trip_features.sample_data import TRIP_TYPES, write_trip_dataset


def example_single_trip():
    """Basic example: detect maneuvers in a mixed trip."""
    print("=" * 60)
    print("Example 1: Single Trip")
    print("=" * 60)

    df = generate_sample_trip('mixed', seed=42)
    print(f"\nGenerated trip with {len(df)} samples")

    result = detect_maneuvers(df)

    print(f"\nTurns: {result.turn_count}")
    for turn in result.turns:
        print(f"  {turn.direction:5s} | samples {turn.start_idx:3d}-{turn.end_idx:3d} | "
              f"net change: {turn.net_heading_change:6.1f}° | "
              f"mean speed: {turn.mean_speed:4.1f} m/s")

    print(f"\nStops: {result.stop_count}")
    for stop in result.stops:
        print(f"  samples {stop.start_idx:3d}-{stop.end_idx:3d} | "
              f"duration: {stop.n_samples} samples | "
              f"hardest braking before: {stop.min_prior_accel:5.2f} m/s per sample")


def example_trip_types():
    """Counts for each sample trip type."""
    print("\n" + "=" * 60)
    print("Example 2: Sample Trip Types")
    print("=" * 60)

    print(f"\n  {'type':10s} turns  stops")
    for trip_type in TRIP_TYPES:
        result = detect_maneuvers(generate_sample_trip(trip_type, seed=42))
        print(f"  {trip_type:10s} {result.turn_count:5d}  {result.stop_count:5d}")


def example_batch():
    """Feature table over a directory of trip files, including a broken one."""
    print("\n" + "=" * 60)
    print("Example 3: Batch Feature Table")
    print("=" * 60)

    trips = generate_trip_dataset(num_trips=5, seed=42)
    # A trip whose heading never changes is rejected
    trips['6'] = pd.DataFrame({'time': [0.0, 1.0, 2.0], 'speed': [1.0, 2.0, 3.0], 'heading': [90.0] * 3})

    with tempfile.TemporaryDirectory() as data_root:
        write_trip_dataset(trips, data_root, partition='train')
        loader = CsvTripLoader(data_root)

        trip_ids = loader.list_trips('train') + ['missing']
        features = extract_trip_features(trip_ids, loader, partition='train', n_jobs=2)

    print()
    print(features.to_string(index=False))


def example_custom_thresholds():
    """Example: using custom detection thresholds."""
    print("\n" + "=" * 60)
    print("Example 4: Custom Thresholds")
    print("=" * 60)

    df = generate_sample_trip('mixed', seed=42)

    default = detect_maneuvers(df)
    sharp_only = detect_maneuvers(df, DetectionConfig(turn_angle_threshold=80.0))
    hard_braking = detect_maneuvers(df, DetectionConfig(decel_threshold=-1.0))

    print(f"\n                     Turns  Stops")
    print(f"  Default:           {default.turn_count:5d}  {default.stop_count:5d}")
    print(f"  Turns >= 80°:      {sharp_only.turn_count:5d}  {sharp_only.stop_count:5d}")
    print(f"  Braking < -1.0:    {hard_braking.turn_count:5d}  {hard_braking.stop_count:5d}")


if __name__ == '__main__':
    example_single_trip()
    example_trip_types()
    example_batch()
    example_custom_thresholds()

    print("\n" + "=" * 60)
    print("All examples completed!")
    print("=" * 60)
