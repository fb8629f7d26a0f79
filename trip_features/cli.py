"""
Command-line batch extraction of trip maneuver features.

Example:
    python -m trip_features data/ --partition train --output features.csv --jobs 4
"""

import argparse
import logging
import sys

from .batch import process_trips, records_to_frame
from .config import DetectionConfig
from .errors import LoadError
from .loader import CsvTripLoader


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trip-features",
        description="Count turns and stops in trip sensor logs"
    )
    parser.add_argument(
        "data_root",
        type=str,
        help="Directory holding trip CSV files (or partition directories)"
    )
    parser.add_argument(
        "--partition",
        type=str,
        default=None,
        help="Partition sub-directory of DATA_ROOT to process (default: DATA_ROOT itself)"
    )
    parser.add_argument(
        "--trips",
        type=str,
        nargs="+",
        default=None,
        help="Trip ids to process (default: every CSV file in the partition)"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output CSV path (default: write to stdout)"
    )
    parser.add_argument(
        "--jobs",
        type=int,
        default=1,
        help="Number of worker threads (default: 1)"
    )
    parser.add_argument(
        "--turn-angle",
        type=float,
        default=DetectionConfig.turn_angle_threshold,
        help="Minimum net heading change of a turn in degrees (default: %(default)s)"
    )
    parser.add_argument(
        "--decel-threshold",
        type=float,
        default=DetectionConfig.decel_threshold,
        help="Braking needed before a stop, m/s per sample (default: %(default)s)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)"
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.jobs < 1:
        parser.error("--jobs must be at least 1")

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        config = DetectionConfig(
            turn_angle_threshold=args.turn_angle,
            decel_threshold=args.decel_threshold,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    loader = CsvTripLoader(args.data_root)
    try:
        trip_ids = args.trips or loader.list_trips(args.partition)
    except LoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    records = process_trips(trip_ids, loader, args.partition, config, n_jobs=args.jobs)
    features = records_to_frame(records)

    if args.output:
        features.to_csv(args.output, index=False)
    else:
        features.to_csv(sys.stdout, index=False)

    failed = [r for r in records if not r.ok]
    print(f"Processed {len(records)} trips, {len(failed)} failed", file=sys.stderr)
    for record in failed:
        print(f"  {record.identifier}: {record.error}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
