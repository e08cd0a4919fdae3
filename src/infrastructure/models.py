"""
SQLAlchemy ORM models.

Tables
------
* ``teachers``           -- transfer-seeking teacher profiles
* ``transfer_requests``  -- one teacher asking another to swap postings
* ``matches``            -- stored snapshots of computed matches

Coordinates are plain floats (nullable); the match engine falls back to the
district centroid when they are missing.

Indexes
-------
* **B-Tree** on ``current_district``, ``is_active`` for roster look-ups and
  on both teacher columns of requests / matches for per-teacher listings.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)

from .database import Base
from src.domain.enums import RequestStatus


class TeacherModel(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    subjects = Column(JSON, nullable=False, default=list)
    grade_level = Column(String(40), nullable=False)
    phone_number = Column(String(20), nullable=False)
    current_school = Column(String(255), nullable=False)
    current_school_address = Column(Text, nullable=True)

    current_district = Column(String(80), nullable=False)
    current_latitude = Column(Float, nullable=True)
    current_longitude = Column(Float, nullable=True)
    current_school_latitude = Column(Float, nullable=True)
    current_school_longitude = Column(Float, nullable=True)

    home_district = Column(String(80), nullable=False)
    home_latitude = Column(Float, nullable=True)
    home_longitude = Column(Float, nullable=True)

    preferred_districts = Column(JSON, nullable=False, default=list)
    preferred_location_latitude = Column(Float, nullable=True)
    preferred_location_longitude = Column(Float, nullable=True)
    max_distance = Column(Float, nullable=False, default=100.0)

    hide_contact = Column(Boolean, default=True)
    allow_requests = Column(Boolean, default=True)
    email_notifications = Column(Boolean, default=True)
    experience = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        Index("idx_teachers_district", "current_district"),
        Index("idx_teachers_active", "is_active"),
    )


class TransferRequestModel(Base):
    __tablename__ = "transfer_requests"

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)
    to_teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)
    status = Column(String(20), default=RequestStatus.PENDING.value, nullable=False)
    message = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        Index("idx_requests_from", "from_teacher_id"),
        Index("idx_requests_to", "to_teacher_id"),
        Index("idx_requests_status", "status"),
    )


class MatchModel(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    teacher1_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)
    teacher2_id = Column(Integer, ForeignKey("teachers.id"), nullable=False)
    match_type = Column(String(20), nullable=False)
    distance = Column(Float, nullable=True)
    score = Column(Integer, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        Index("idx_matches_teacher1", "teacher1_id"),
        Index("idx_matches_teacher2", "teacher2_id"),
    )
