"""
Transfer Service
================

Glue between the store and the pure match engine.  One instance wraps one
``AsyncSession`` (unit-of-work); the caller commits.

Operations
----------
* Profile registration / update, back-filling coordinates from the district
  table when the teacher gave none.
* Match queries: whole roster -> ``find_matches`` -> ``apply_filters``.
* Match snapshots and dashboard counts.
* Transfer requests with the pending -> accepted | rejected lifecycle.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings, get_settings
from src.domain.distance import get_district_coordinates
from src.domain.entities import MatchResult, TeacherProfile, TransferRequest
from src.domain.enums import MatchType, RequestStatus, RESPONSE_STATUSES
from src.domain.filters import apply_filters
from src.domain.matching import find_matches
from src.infrastructure.repositories import (
    MatchRepository,
    TeacherRepository,
    TransferRequestRepository,
    to_profile,
    to_transfer_request,
)
from src.services.schemas import (
    DashboardStats,
    MatchFilter,
    TeacherCreate,
    TeacherUpdate,
    TransferRequestCreate,
)

logger = logging.getLogger(__name__)

# Columns an update may explicitly clear
_CLEARABLE_FIELDS = frozenset(
    {
        "current_school_address",
        "current_latitude",
        "current_longitude",
        "current_school_latitude",
        "current_school_longitude",
        "home_latitude",
        "home_longitude",
        "preferred_location_latitude",
        "preferred_location_longitude",
    }
)


class TransferServiceError(Exception):
    """Base class for service-level failures."""


class ProfileNotFound(TransferServiceError):
    pass


class TransferRequestNotFound(TransferServiceError):
    pass


class DuplicateTransferRequest(TransferServiceError):
    pass


class NotAuthorized(TransferServiceError):
    pass


class InvalidRequestStatus(TransferServiceError):
    pass


def _fill_from_district(fields: dict[str, Any], prefix: str, district: str) -> None:
    """Set ``<prefix>_latitude/_longitude`` from the district centroid if unset."""
    lat_key, lng_key = f"{prefix}_latitude", f"{prefix}_longitude"
    if fields.get(lat_key) is not None and fields.get(lng_key) is not None:
        return
    coords = get_district_coordinates(district)
    if coords is None:
        logger.debug(
            "No centroid for district %r; %s coordinates left empty", district, prefix
        )
        return
    fields[lat_key] = coords.latitude
    fields[lng_key] = coords.longitude


class TransferService:
    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.teachers = TeacherRepository(session)
        self.requests = TransferRequestRepository(session)
        self.matches = MatchRepository(session)

    # ── Profiles ──────────────────────────────────────────────────────

    async def register_teacher(self, data: TeacherCreate) -> TeacherProfile:
        fields = data.model_dump()
        _fill_from_district(fields, "current", data.current_district)
        _fill_from_district(fields, "home", data.home_district)
        if fields["max_distance"] is None:
            fields["max_distance"] = self.settings.default_max_distance_km

        teacher = await self.teachers.create(**fields)
        logger.info(
            "Registered teacher %d (%s, %s)",
            teacher.id,
            teacher.current_district,
            teacher.grade_level,
        )
        return to_profile(teacher)

    async def get_teacher(self, teacher_id: int) -> TeacherProfile:
        teacher = await self.teachers.get_by_id(teacher_id)
        if teacher is None:
            raise ProfileNotFound(f"Teacher {teacher_id} not found")
        return to_profile(teacher)

    async def update_teacher(
        self, teacher_id: int, data: TeacherUpdate
    ) -> TeacherProfile:
        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if value is not None or key in _CLEARABLE_FIELDS
        }
        for prefix in ("current", "home"):
            district = updates.get(f"{prefix}_district")
            coord_keys = {f"{prefix}_latitude", f"{prefix}_longitude"}
            if district is None or coord_keys <= updates.keys():
                continue
            # A moved district invalidates the old centroid
            updates.update(dict.fromkeys(coord_keys))
            _fill_from_district(updates, prefix, district)

        teacher = await self.teachers.update(teacher_id, **updates)
        if teacher is None:
            raise ProfileNotFound(f"Teacher {teacher_id} not found")
        return to_profile(teacher)

    # ── Matches ───────────────────────────────────────────────────────

    async def find_matches(
        self, teacher_id: int, filters: Optional[MatchFilter] = None
    ) -> list[MatchResult]:
        roster = await self.teachers.list_profiles()
        subject = next((t for t in roster if t.id == teacher_id), None)
        if subject is None:
            raise ProfileNotFound(f"Teacher {teacher_id} not found")

        matches = find_matches(subject, roster)
        logger.info("Teacher %d: %d matches", teacher_id, len(matches))
        if filters is None:
            return matches
        return apply_filters(matches, **filters.model_dump())

    async def save_matches(self, teacher_id: int) -> int:
        """Replace the stored (unfiltered) match list; returns rows written."""
        matches = await self.find_matches(teacher_id)
        removed = await self.matches.delete_for_teacher(teacher_id)
        if removed:
            logger.debug("Teacher %d: dropped %d stale matches", teacher_id, removed)
        for match in matches:
            await self.matches.create(
                teacher1_id=teacher_id,
                teacher2_id=match.teacher.id,
                match_type=match.match_type.value,
                distance=match.distance,
                score=match.score,
            )
        return len(matches)

    async def dashboard_stats(self, teacher_id: int) -> DashboardStats:
        matches = await self.find_matches(teacher_id)
        received = await self.requests.list_received(teacher_id)
        sent = await self.requests.list_sent(teacher_id)

        return DashboardStats(
            total_matches=len(matches),
            perfect_matches=sum(m.match_type is MatchType.PERFECT for m in matches),
            nearby_teachers=sum(m.match_type is MatchType.NEARBY for m in matches),
            received_requests=len(received),
            sent_requests=len(sent),
            pending_requests=sum(
                r.status == RequestStatus.PENDING.value for r in received
            ),
        )

    # ── Transfer requests ─────────────────────────────────────────────

    async def send_request(
        self, from_teacher_id: int, data: TransferRequestCreate
    ) -> TransferRequest:
        if await self.teachers.get_by_id(from_teacher_id) is None:
            raise ProfileNotFound(f"Teacher {from_teacher_id} not found")
        target = await self.teachers.get_by_id(data.to_teacher_id)
        if target is None:
            raise ProfileNotFound(f"Teacher {data.to_teacher_id} not found")
        if target.id == from_teacher_id:
            raise NotAuthorized("Cannot send a transfer request to yourself")
        if not target.allow_requests:
            raise NotAuthorized(f"Teacher {target.id} does not accept requests")
        if await self.requests.has_pending(from_teacher_id, target.id):
            raise DuplicateTransferRequest("Request already sent to this teacher")

        request = await self.requests.create(
            from_teacher_id=from_teacher_id,
            to_teacher_id=target.id,
            message=data.message,
        )
        logger.info(
            "Transfer request %d: teacher %d -> %d",
            request.id,
            from_teacher_id,
            target.id,
        )
        return to_transfer_request(request)

    async def received_requests(self, teacher_id: int) -> list[TransferRequest]:
        return [
            to_transfer_request(r) for r in await self.requests.list_received(teacher_id)
        ]

    async def sent_requests(self, teacher_id: int) -> list[TransferRequest]:
        return [to_transfer_request(r) for r in await self.requests.list_sent(teacher_id)]

    async def respond_to_request(
        self, request_id: int, teacher_id: int, status: str
    ) -> TransferRequest:
        """Accept or reject a request addressed to *teacher_id*."""
        try:
            new_status = RequestStatus(status)
        except ValueError:
            raise InvalidRequestStatus(f"Invalid status: {status!r}") from None
        if new_status not in RESPONSE_STATUSES:
            raise InvalidRequestStatus(f"Invalid status: {status!r}")

        row = await self.requests.get_by_id(request_id)
        if row is None:
            raise TransferRequestNotFound(f"Request {request_id} not found")
        if row.to_teacher_id != teacher_id:
            raise NotAuthorized("Only the recipient may respond to a request")

        request = to_transfer_request(row)
        request.transition_to(new_status)  # raises InvalidStateTransition

        row = await self.requests.update_status(request_id, request.status)
        logger.info("Transfer request %d %s", request_id, request.status.value)
        return to_transfer_request(row)
