"""
Error types raised while loading and validating trips.

Every per-trip failure is a ``TripError``. The batch driver catches these at
its boundary and turns them into invalid feature records.
"""

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional, Tuple


@dataclass
class TripDiagnostics:
    """Snapshot of a trip's raw signals, attached to validation failures."""
    n_samples: int
    missing_time: int
    missing_speed: int
    missing_heading: int
    speed_variance: float
    heading_variance: float
    columns: Tuple[str, ...] = field(default_factory=tuple)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TripError(Exception):
    """Base class for failures that invalidate a single trip."""

    def __init__(self, message: str, trip_id: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.trip_id = trip_id

    def __str__(self) -> str:
        if self.trip_id is None:
            return self.message
        return f"trip {self.trip_id}: {self.message}"


class StructuralError(TripError):
    """
    The trip table cannot be processed.

    Attributes:
        check: Name of the failed check (``empty``, ``columns``,
            ``all_missing_time``, ``all_missing_speed``,
            ``all_missing_heading``, ``non_numeric_<column>``,
            ``constant_speed`` or ``constant_heading``)
        diagnostics: Missing-value counts and variances of the raw signals
    """

    def __init__(
        self,
        message: str,
        check: str,
        diagnostics: Optional[TripDiagnostics] = None,
        trip_id: Optional[Any] = None,
    ):
        super().__init__(message, trip_id=trip_id)
        self.check = check
        self.diagnostics = diagnostics


class LoadError(TripError):
    """The trip file is missing, unreadable or unparseable."""

    def __init__(self, message: str, path=None, trip_id: Optional[Any] = None):
        super().__init__(message, trip_id=trip_id)
        self.path = path
