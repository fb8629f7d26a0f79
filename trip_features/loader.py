"""
Loading trip sample files from disk.

Trips are CSV files with a header row naming the ``time``, ``speed`` and
``heading`` columns, laid out as ``<data_root>/<partition>/<trip_id>.csv``.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from .config import TRIP_COLUMNS
from .errors import LoadError

logger = logging.getLogger(__name__)


def _natural_key(name: str):
    """Sort key that orders '2' before '10'."""
    return [int(part) if part.isdigit() else part for part in re.split(r'(\d+)', name)]


@dataclass
class CsvTripLoader:
    """
    Reads trips stored as one CSV file per trip.

    Args:
        data_root: Directory holding the partition directories
        suffix: File extension of trip files
    """
    data_root: Union[str, Path]
    suffix: str = '.csv'

    def __post_init__(self):
        self.data_root = Path(self.data_root)

    def trip_path(self, trip_id, partition: Optional[str] = None) -> Path:
        """Path of a trip file. ``partition=None`` means directly under the root."""
        base = self.data_root if partition is None else self.data_root / str(partition)
        return base / f"{trip_id}{self.suffix}"

    def list_trips(self, partition: Optional[str] = None) -> List[str]:
        """Trip ids found in a partition, in natural sort order."""
        base = self.data_root if partition is None else self.data_root / str(partition)
        if not base.is_dir():
            raise LoadError(f"partition directory not found: {base}", path=base)
        stems = [p.stem for p in base.glob(f"*{self.suffix}") if p.is_file()]
        return sorted(stems, key=_natural_key)

    def __call__(self, trip_id, partition: Optional[str] = None) -> pd.DataFrame:
        """
        Load one trip.

        Values of the known signal columns that are not numbers become NaN;
        other columns are left alone for validation to reject.

        Raises:
            LoadError: If the file is missing, unreadable or not valid CSV
        """
        path = self.trip_path(trip_id, partition)
        try:
            df = pd.read_csv(path)
        except FileNotFoundError as e:
            raise LoadError(f"trip file not found: {path}", path=path, trip_id=trip_id) from e
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            raise LoadError(f"cannot parse {path}: {e}", path=path, trip_id=trip_id) from e
        except OSError as e:
            raise LoadError(f"cannot read {path}: {e}", path=path, trip_id=trip_id) from e

        df.columns = [str(c).strip() for c in df.columns]
        for col in TRIP_COLUMNS:
            if col in df.columns:
                df[col] = pd.to_numeric(df[col], errors='coerce')

        logger.debug("Loaded %s (%d samples)", path, len(df))
        return df
