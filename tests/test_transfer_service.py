"""
Integration tests for ``TransferService``: store + match engine together.
"""

from __future__ import annotations

import pytest
import pytest_asyncio
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings
from src.domain.entities import InvalidStateTransition
from src.domain.enums import MatchType, RequestStatus
from src.services.schemas import (
    MatchFilter,
    TeacherCreate,
    TeacherUpdate,
    TransferRequestCreate,
)
from src.services.transfers import (
    DuplicateTransferRequest,
    InvalidRequestStatus,
    NotAuthorized,
    ProfileNotFound,
    TransferRequestNotFound,
    TransferService,
)
from tests.conftest import teacher_payload


@pytest_asyncio.fixture
async def service(db_session: AsyncSession, test_settings: Settings) -> TransferService:
    return TransferService(db_session, test_settings)


async def _register(service: TransferService, **overrides):
    return await service.register_teacher(TeacherCreate(**teacher_payload(**overrides)))


class TestRegistration:
    @pytest.mark.asyncio
    async def test_coordinates_filled_from_district(self, service: TransferService):
        profile = await _register(service)
        assert (profile.current_latitude, profile.current_longitude) == (25.5941, 85.1376)
        assert (profile.home_latitude, profile.home_longitude) == (24.7955, 85.0002)

    @pytest.mark.asyncio
    async def test_given_coordinates_are_kept(self, service: TransferService):
        profile = await _register(service, current_latitude=25.61, current_longitude=85.14)
        assert (profile.current_latitude, profile.current_longitude) == (25.61, 85.14)

    @pytest.mark.asyncio
    async def test_unknown_district_leaves_coordinates_empty(self, service: TransferService):
        profile = await _register(service, home_district="Kathmandu")
        assert profile.home_point is None

    @pytest.mark.asyncio
    async def test_max_distance_defaults_from_settings(self, db_session: AsyncSession):
        svc = TransferService(db_session, Settings(default_max_distance_km=75.0))
        profile = await _register(svc)
        assert profile.max_distance == 75.0

    def test_invalid_latitude_rejected(self):
        with pytest.raises(ValidationError):
            TeacherCreate(**teacher_payload(current_latitude=91.0))

    def test_empty_preferences_rejected(self):
        with pytest.raises(ValidationError):
            TeacherCreate(**teacher_payload(preferred_districts=[]))

    @pytest.mark.asyncio
    async def test_update_applies_only_set_fields(self, service: TransferService):
        profile = await _register(service)
        updated = await service.update_teacher(
            profile.id, TeacherUpdate(preferred_districts=["nalanda"], name=None)
        )
        assert updated.preferred_districts == ("nalanda",)
        assert updated.name == "Test Teacher"
        assert updated.current_district == "patna"

    @pytest.mark.asyncio
    async def test_update_can_clear_coordinates(self, service: TransferService):
        profile = await _register(service)
        updated = await service.update_teacher(
            profile.id, TeacherUpdate(home_latitude=None, home_longitude=None)
        )
        assert updated.home_point is None

    @pytest.mark.asyncio
    async def test_district_change_refreshes_coordinates(self, service: TransferService):
        profile = await _register(service)
        updated = await service.update_teacher(
            profile.id, TeacherUpdate(current_district="gaya", home_district="Kathmandu")
        )
        assert (updated.current_latitude, updated.current_longitude) == (24.7955, 85.0002)
        assert updated.home_point is None

    @pytest.mark.asyncio
    async def test_district_change_keeps_given_coordinates(self, service: TransferService):
        profile = await _register(service)
        updated = await service.update_teacher(
            profile.id,
            TeacherUpdate(current_district="gaya", current_latitude=24.8, current_longitude=85.01),
        )
        assert (updated.current_latitude, updated.current_longitude) == (24.8, 85.01)
        assert (updated.home_latitude, updated.home_longitude) == (24.7955, 85.0002)

    @pytest.mark.asyncio
    async def test_update_missing_teacher(self, service: TransferService):
        with pytest.raises(ProfileNotFound):
            await service.update_teacher(9999, TeacherUpdate(name="x"))


class TestMatches:
    @pytest_asyncio.fixture
    async def roster(self, service: TransferService):
        subject = await _register(service, preferred_districts=["gaya"])
        perfect = await _register(
            service,
            name="Gaya Teacher",
            subjects=["Hindi"],
            current_district="gaya",
            home_district="patna",
            preferred_districts=["patna"],
        )
        nearby = await _register(
            service,
            name="Jehanabad Teacher",
            subjects=["Science"],
            current_district="jehanabad",
            home_district="patna",
            preferred_districts=["vaishali"],
        )
        await _register(
            service,
            current_district="gaya",
            preferred_districts=["patna"],
            is_active=False,
        )
        return subject, perfect, nearby

    @pytest.mark.asyncio
    async def test_ranked_matches(self, service: TransferService, roster):
        subject, perfect, nearby = roster
        results = await service.find_matches(subject.id)
        assert [(m.teacher.id, m.match_type) for m in results] == [
            (perfect.id, MatchType.PERFECT),
            (nearby.id, MatchType.NEARBY),
        ]

    @pytest.mark.asyncio
    async def test_filters_applied(self, service: TransferService, roster):
        subject, _, nearby = roster
        results = await service.find_matches(
            subject.id, MatchFilter(match_type="nearby", max_distance=60)
        )
        assert [m.teacher.id for m in results] == [nearby.id]

        results = await service.find_matches(subject.id, MatchFilter(subject="hindi"))
        assert [m.match_type for m in results] == [MatchType.PERFECT]

    @pytest.mark.asyncio
    async def test_unknown_teacher(self, service: TransferService, roster):
        with pytest.raises(ProfileNotFound):
            await service.find_matches(9999)

    @pytest.mark.asyncio
    async def test_save_matches(self, service: TransferService, roster):
        subject, perfect, _ = roster
        assert await service.save_matches(subject.id) == 2
        stored = await service.matches.list_for_teacher(perfect.id)
        assert len(stored) == 1
        assert stored[0].match_type == "perfect"
        assert stored[0].score == 100

    @pytest.mark.asyncio
    async def test_save_matches_replaces_previous_snapshot(
        self, service: TransferService, roster
    ):
        subject, _, nearby = roster
        await service.save_matches(subject.id)
        await service.update_teacher(nearby.id, TeacherUpdate(is_active=False))
        assert await service.save_matches(subject.id) == 1
        stored = await service.matches.list_for_teacher(subject.id)
        assert [m.match_type for m in stored] == ["perfect"]

    @pytest.mark.asyncio
    async def test_save_matches_twice_keeps_one_snapshot(
        self, service: TransferService, roster
    ):
        subject, _, _ = roster
        await service.save_matches(subject.id)
        await service.save_matches(subject.id)
        assert len(await service.matches.list_for_teacher(subject.id)) == 2

    @pytest.mark.asyncio
    async def test_dashboard_stats(self, service: TransferService, roster):
        subject, perfect, nearby = roster
        await service.send_request(perfect.id, TransferRequestCreate(to_teacher_id=subject.id))
        await service.send_request(nearby.id, TransferRequestCreate(to_teacher_id=subject.id))
        await service.send_request(subject.id, TransferRequestCreate(to_teacher_id=perfect.id))
        [first, _] = await service.received_requests(subject.id)
        await service.respond_to_request(first.id, subject.id, "accepted")

        stats = await service.dashboard_stats(subject.id)
        assert stats.total_matches == 2
        assert stats.perfect_matches == 1
        assert stats.nearby_teachers == 1
        assert stats.received_requests == 2
        assert stats.sent_requests == 1
        assert stats.pending_requests == 1


class TestTransferRequests:
    @pytest_asyncio.fixture
    async def pair(self, service: TransferService):
        a = await _register(service, name="A")
        b = await _register(service, name="B", current_district="gaya")
        return a, b

    @pytest.mark.asyncio
    async def test_send_and_list(self, service: TransferService, pair):
        a, b = pair
        request = await service.send_request(
            a.id, TransferRequestCreate(to_teacher_id=b.id, message="Swap?")
        )
        assert request.status is RequestStatus.PENDING
        assert request.message == "Swap?"
        assert [r.id for r in await service.sent_requests(a.id)] == [request.id]
        assert [r.id for r in await service.received_requests(b.id)] == [request.id]

    @pytest.mark.asyncio
    async def test_duplicate_pending_rejected(self, service: TransferService, pair):
        a, b = pair
        await service.send_request(a.id, TransferRequestCreate(to_teacher_id=b.id))
        with pytest.raises(DuplicateTransferRequest):
            await service.send_request(a.id, TransferRequestCreate(to_teacher_id=b.id))

    @pytest.mark.asyncio
    async def test_resend_after_rejection(self, service: TransferService, pair):
        a, b = pair
        first = await service.send_request(a.id, TransferRequestCreate(to_teacher_id=b.id))
        await service.respond_to_request(first.id, b.id, "rejected")
        second = await service.send_request(a.id, TransferRequestCreate(to_teacher_id=b.id))
        assert second.id != first.id

    @pytest.mark.asyncio
    async def test_unknown_target(self, service: TransferService, pair):
        a, _ = pair
        with pytest.raises(ProfileNotFound):
            await service.send_request(a.id, TransferRequestCreate(to_teacher_id=9999))

    @pytest.mark.asyncio
    async def test_self_request_rejected(self, service: TransferService, pair):
        a, _ = pair
        with pytest.raises(NotAuthorized):
            await service.send_request(a.id, TransferRequestCreate(to_teacher_id=a.id))

    @pytest.mark.asyncio
    async def test_target_not_accepting_requests(self, service: TransferService, pair):
        a, _ = pair
        closed = await _register(service, allow_requests=False)
        with pytest.raises(NotAuthorized):
            await service.send_request(a.id, TransferRequestCreate(to_teacher_id=closed.id))

    @pytest.mark.asyncio
    async def test_accept(self, service: TransferService, pair):
        a, b = pair
        request = await service.send_request(a.id, TransferRequestCreate(to_teacher_id=b.id))
        answered = await service.respond_to_request(request.id, b.id, "accepted")
        assert answered.status is RequestStatus.ACCEPTED

    @pytest.mark.asyncio
    async def test_only_recipient_may_respond(self, service: TransferService, pair):
        a, b = pair
        request = await service.send_request(a.id, TransferRequestCreate(to_teacher_id=b.id))
        with pytest.raises(NotAuthorized):
            await service.respond_to_request(request.id, a.id, "accepted")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["pending", "maybe"])
    async def test_invalid_response_status(self, service: TransferService, pair, status):
        a, b = pair
        request = await service.send_request(a.id, TransferRequestCreate(to_teacher_id=b.id))
        with pytest.raises(InvalidRequestStatus):
            await service.respond_to_request(request.id, b.id, status)

    @pytest.mark.asyncio
    async def test_unknown_request(self, service: TransferService, pair):
        _, b = pair
        with pytest.raises(TransferRequestNotFound):
            await service.respond_to_request(9999, b.id, "accepted")

    @pytest.mark.asyncio
    async def test_answered_request_is_final(self, service: TransferService, pair):
        a, b = pair
        request = await service.send_request(a.id, TransferRequestCreate(to_teacher_id=b.id))
        await service.respond_to_request(request.id, b.id, "accepted")
        with pytest.raises(InvalidStateTransition):
            await service.respond_to_request(request.id, b.id, "rejected")
