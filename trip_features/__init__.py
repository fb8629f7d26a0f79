"""
Trip Features - Count turns and stops in per-trip (time, speed, heading) logs.

This package provides tools for:
- Validating raw trip sample tables
- Deriving heading-change and acceleration signals
- Segmenting indicator series into runs
- Detecting turns and stops with threshold rules
- Building a per-trip feature table over many trip files

Example usage:
    from trip_features import detect_maneuvers, generate_sample_trip

    df = generate_sample_trip('mixed', seed=42)
    result = detect_maneuvers(df)
    print(result.turn_count, result.stop_count)

    from trip_features import CsvTripLoader, extract_trip_features

    loader = CsvTripLoader('data/')
    features = extract_trip_features(loader.list_trips('train'), loader, partition='train')
"""

from .batch import extract_trip_features, process_trips, TripFeatureRecord
from .classifier import detect_maneuvers, ManeuverDetector, ManeuverType, TripManeuvers
from .config import DetectionConfig
from .errors import TripError, StructuralError, LoadError
from .loader import CsvTripLoader
from .preprocessing import heading_difference, preprocess_trip
from .sample_data import generate_sample_trip, generate_trip_dataset
from .segmentation import assign_runs
from .validation import validate_trip

__version__ = "0.1.0"
__all__ = [
    "extract_trip_features",
    "process_trips",
    "TripFeatureRecord",
    "detect_maneuvers",
    "ManeuverDetector",
    "ManeuverType",
    "TripManeuvers",
    "DetectionConfig",
    "TripError",
    "StructuralError",
    "LoadError",
    "CsvTripLoader",
    "heading_difference",
    "preprocess_trip",
    "generate_sample_trip",
    "generate_trip_dataset",
    "assign_runs",
    "validate_trip",
]
