"""Pydantic input / output schemas for the transfer service."""

from __future__ import annotations

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, Field

Latitude = Annotated[float, Field(ge=-90, le=90)]
Longitude = Annotated[float, Field(ge=-180, le=180)]


# ── Inputs ────────────────────────────────────────────────────────────


class TeacherCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    subjects: list[str] = Field(..., min_length=1)
    grade_level: str = Field(..., min_length=1, max_length=40)
    phone_number: str = Field(..., min_length=10, max_length=20)
    current_school: str = Field(..., min_length=1, max_length=255)
    current_school_address: Optional[str] = None

    current_district: str = Field(..., min_length=1, max_length=80)
    current_latitude: Optional[Latitude] = None
    current_longitude: Optional[Longitude] = None
    current_school_latitude: Optional[Latitude] = None
    current_school_longitude: Optional[Longitude] = None

    home_district: str = Field(..., min_length=1, max_length=80)
    home_latitude: Optional[Latitude] = None
    home_longitude: Optional[Longitude] = None

    preferred_districts: list[str] = Field(..., min_length=1)
    preferred_location_latitude: Optional[Latitude] = None
    preferred_location_longitude: Optional[Longitude] = None
    max_distance: Optional[float] = Field(
        None,
        gt=0,
        description="Maximum acceptable transfer distance in km; defaults from settings.",
    )

    hide_contact: bool = True
    allow_requests: bool = True
    email_notifications: bool = True
    experience: int = Field(0, ge=0, le=60)
    is_active: bool = True


class TeacherUpdate(BaseModel):
    """Partial update; only fields explicitly set are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    subjects: Optional[list[str]] = Field(None, min_length=1)
    grade_level: Optional[str] = Field(None, min_length=1, max_length=40)
    phone_number: Optional[str] = Field(None, min_length=10, max_length=20)
    current_school: Optional[str] = Field(None, min_length=1, max_length=255)
    current_school_address: Optional[str] = None

    current_district: Optional[str] = Field(None, min_length=1, max_length=80)
    current_latitude: Optional[Latitude] = None
    current_longitude: Optional[Longitude] = None
    current_school_latitude: Optional[Latitude] = None
    current_school_longitude: Optional[Longitude] = None

    home_district: Optional[str] = Field(None, min_length=1, max_length=80)
    home_latitude: Optional[Latitude] = None
    home_longitude: Optional[Longitude] = None

    preferred_districts: Optional[list[str]] = Field(None, min_length=1)
    preferred_location_latitude: Optional[Latitude] = None
    preferred_location_longitude: Optional[Longitude] = None
    max_distance: Optional[float] = Field(None, gt=0)

    hide_contact: Optional[bool] = None
    allow_requests: Optional[bool] = None
    email_notifications: Optional[bool] = None
    experience: Optional[int] = Field(None, ge=0, le=60)
    is_active: Optional[bool] = None


class TransferRequestCreate(BaseModel):
    to_teacher_id: int
    message: Optional[str] = Field(None, max_length=500)


class MatchFilter(BaseModel):
    match_type: Optional[Literal["perfect", "nearby", "all"]] = None
    max_distance: Optional[float] = Field(None, ge=0)
    subject: Optional[str] = None


# ── Outputs ───────────────────────────────────────────────────────────


class DashboardStats(BaseModel):
    total_matches: int
    perfect_matches: int
    nearby_teachers: int
    received_requests: int
    sent_requests: int
    pending_requests: int
