"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without any
external database server.  ``make_profile`` builds engine inputs directly,
without the store.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings
from src.domain.entities import TeacherProfile
from src.infrastructure.database import Database

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


def make_profile(id: int, **overrides) -> TeacherProfile:
    """A primary-level teacher posted in Patna with home in Gaya."""
    fields = dict(
        id=id,
        grade_level="primary",
        current_district="patna",
        home_district="gaya",
        preferred_districts=("gaya",),
        max_distance=100.0,
        name=f"Teacher {id}",
        subjects=("Mathematics",),
    )
    fields.update(overrides)
    return TeacherProfile(**fields)


def teacher_payload(**overrides) -> dict:
    """Valid ``TeacherCreate`` fields; override per test."""
    payload = {
        "name": "Test Teacher",
        "subjects": ["Mathematics"],
        "grade_level": "primary",
        "phone_number": "9876543210",
        "current_school": "GPS Danapur",
        "current_district": "patna",
        "home_district": "gaya",
        "preferred_districts": ["gaya"],
    }
    payload.update(overrides)
    return payload


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest.fixture
def test_settings() -> Settings:
    return Settings(database_url=TEST_DB_URL, default_max_distance_km=100.0)


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Create tables, yield the database, then drop everything."""
    db = Database(TEST_DB_URL)
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest_asyncio.fixture
async def db_session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session_factory() as session:
        yield session
