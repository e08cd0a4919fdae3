"""
Domain entities with business logic.

Patterns used
-------------
- **Value objects**: ``Location``, ``TeacherProfile`` and ``MatchResult`` are
  frozen; the match engine builds them fresh per call and never mutates them.
- **State Pattern** on ``TransferRequest``: enforces valid lifecycle
  transitions (pending -> accepted | rejected).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import MatchType, RequestStatus, REQUEST_TRANSITIONS


class InvalidStateTransition(Exception):
    """Raised when a transfer request status change violates the state machine."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


def _point(lat: Optional[float], lng: Optional[float]) -> Optional[Location]:
    if lat is None or lng is None:
        return None
    return Location(lat, lng)


@dataclass(frozen=True)
class TeacherProfile:
    """A teacher as seen by the match engine."""

    id: int
    grade_level: str
    current_district: str
    home_district: str
    preferred_districts: tuple[str, ...] = ()
    max_distance: float = 100.0
    is_active: bool = True

    current_latitude: Optional[float] = None
    current_longitude: Optional[float] = None
    current_school_latitude: Optional[float] = None
    current_school_longitude: Optional[float] = None
    home_latitude: Optional[float] = None
    home_longitude: Optional[float] = None
    preferred_location_latitude: Optional[float] = None
    preferred_location_longitude: Optional[float] = None

    # Descriptive only
    name: str = ""
    subjects: tuple[str, ...] = ()
    current_school: str = ""
    experience: int = 0

    @property
    def current_point(self) -> Optional[Location]:
        return _point(self.current_latitude, self.current_longitude)

    @property
    def school_point(self) -> Optional[Location]:
        return _point(self.current_school_latitude, self.current_school_longitude)

    @property
    def home_point(self) -> Optional[Location]:
        return _point(self.home_latitude, self.home_longitude)

    @property
    def preferred_point(self) -> Optional[Location]:
        return _point(
            self.preferred_location_latitude, self.preferred_location_longitude
        )


@dataclass(frozen=True)
class MatchResult:
    teacher: TeacherProfile
    match_type: MatchType
    distance: float
    score: int


# ── Entities ──────────────────────────────────────────────────────────


@dataclass
class TransferRequest:
    id: Optional[int] = None
    from_teacher_id: int = 0
    to_teacher_id: int = 0
    status: RequestStatus = RequestStatus.PENDING
    message: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def transition_to(self, new_status: RequestStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        allowed = REQUEST_TRANSITIONS.get(self.status, set())
        if new_status not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.status.value} to {new_status.value}"
            )
        self.status = new_status
