"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.
"""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import MatchModel, TeacherModel, TransferRequestModel
from src.domain.entities import TeacherProfile, TransferRequest
from src.domain.enums import RequestStatus


def to_profile(row: TeacherModel) -> TeacherProfile:
    """Map an ORM row onto the read-only profile the match engine consumes."""
    return TeacherProfile(
        id=row.id,
        grade_level=row.grade_level,
        current_district=row.current_district,
        home_district=row.home_district,
        preferred_districts=tuple(row.preferred_districts or ()),
        max_distance=row.max_distance,
        is_active=bool(row.is_active),
        current_latitude=row.current_latitude,
        current_longitude=row.current_longitude,
        current_school_latitude=row.current_school_latitude,
        current_school_longitude=row.current_school_longitude,
        home_latitude=row.home_latitude,
        home_longitude=row.home_longitude,
        preferred_location_latitude=row.preferred_location_latitude,
        preferred_location_longitude=row.preferred_location_longitude,
        name=row.name,
        subjects=tuple(row.subjects or ()),
        current_school=row.current_school,
        experience=row.experience or 0,
    )


def to_transfer_request(row: TransferRequestModel) -> TransferRequest:
    return TransferRequest(
        id=row.id,
        from_teacher_id=row.from_teacher_id,
        to_teacher_id=row.to_teacher_id,
        status=RequestStatus(row.status),
        message=row.message,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class TeacherRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **fields: Any) -> TeacherModel:
        teacher = TeacherModel(**fields)
        self.session.add(teacher)
        await self.session.flush()
        return teacher

    async def get_by_id(self, teacher_id: int) -> Optional[TeacherModel]:
        return await self.session.get(TeacherModel, teacher_id)

    async def update(
        self, teacher_id: int, **updates: Any
    ) -> Optional[TeacherModel]:
        teacher = await self.get_by_id(teacher_id)
        if teacher is None:
            return None
        for key, value in updates.items():
            setattr(teacher, key, value)
        await self.session.flush()
        return teacher

    async def list_all(self) -> list[TeacherModel]:
        result = await self.session.execute(
            select(TeacherModel).order_by(TeacherModel.id)
        )
        return list(result.scalars().all())

    async def list_profiles(self) -> list[TeacherProfile]:
        return [to_profile(row) for row in await self.list_all()]


class TransferRequestRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        *,
        from_teacher_id: int,
        to_teacher_id: int,
        message: str | None = None,
        status: RequestStatus = RequestStatus.PENDING,
    ) -> TransferRequestModel:
        request = TransferRequestModel(
            from_teacher_id=from_teacher_id,
            to_teacher_id=to_teacher_id,
            message=message,
            status=status.value,
        )
        self.session.add(request)
        await self.session.flush()
        return request

    async def get_by_id(self, request_id: int) -> Optional[TransferRequestModel]:
        return await self.session.get(TransferRequestModel, request_id)

    async def list_received(self, teacher_id: int) -> list[TransferRequestModel]:
        result = await self.session.execute(
            select(TransferRequestModel)
            .where(TransferRequestModel.to_teacher_id == teacher_id)
            .order_by(TransferRequestModel.id)
        )
        return list(result.scalars().all())

    async def list_sent(self, teacher_id: int) -> list[TransferRequestModel]:
        result = await self.session.execute(
            select(TransferRequestModel)
            .where(TransferRequestModel.from_teacher_id == teacher_id)
            .order_by(TransferRequestModel.id)
        )
        return list(result.scalars().all())

    async def has_pending(self, from_teacher_id: int, to_teacher_id: int) -> bool:
        result = await self.session.execute(
            select(TransferRequestModel.id).where(
                TransferRequestModel.from_teacher_id == from_teacher_id,
                TransferRequestModel.to_teacher_id == to_teacher_id,
                TransferRequestModel.status == RequestStatus.PENDING.value,
            )
        )
        return result.first() is not None

    async def update_status(
        self, request_id: int, status: RequestStatus
    ) -> Optional[TransferRequestModel]:
        request = await self.get_by_id(request_id)
        if request is None:
            return None
        request.status = status.value
        await self.session.flush()
        return request


class MatchRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        *,
        teacher1_id: int,
        teacher2_id: int,
        match_type: str,
        distance: float | None = None,
        score: int = 0,
    ) -> MatchModel:
        match = MatchModel(
            teacher1_id=teacher1_id,
            teacher2_id=teacher2_id,
            match_type=match_type,
            distance=distance,
            score=score,
        )
        self.session.add(match)
        await self.session.flush()
        return match

    async def list_for_teacher(self, teacher_id: int) -> list[MatchModel]:
        result = await self.session.execute(
            select(MatchModel)
            .where(
                or_(
                    MatchModel.teacher1_id == teacher_id,
                    MatchModel.teacher2_id == teacher_id,
                )
            )
            .order_by(MatchModel.id)
        )
        return list(result.scalars().all())

    async def delete(self, match_id: int) -> None:
        match = await self.session.get(MatchModel, match_id)
        if match is not None:
            await self.session.delete(match)
            await self.session.flush()

    async def delete_for_teacher(self, teacher_id: int) -> int:
        """Drop the snapshot rows *teacher_id* wrote; returns rows removed."""
        result = await self.session.execute(
            delete(MatchModel).where(MatchModel.teacher1_id == teacher_id)
        )
        await self.session.flush()
        return result.rowcount
