"""
Seed script -- populates the database with sample data for reviewers.

Run:
    python seed.py

Creates:
  - 10 sample teachers posted across Bihar districts, most of them
    primary-level, some with precise school coordinates
  - 3 sample transfer requests (2 pending, 1 accepted)
"""

import asyncio

from sqlalchemy import func, select

from src.config import settings
from src.infrastructure.database import Database
from src.infrastructure.models import TeacherModel
from src.services.schemas import TeacherCreate, TransferRequestCreate
from src.services.transfers import TransferService

TEACHERS = [
    # Patna <-> Gaya swap pair (perfect match)
    {
        "name": "Aarav Sharma", "subjects": ["Mathematics"], "grade_level": "primary",
        "phone_number": "9876500001", "current_school": "GPS Danapur",
        "current_district": "patna", "home_district": "gaya",
        "preferred_districts": ["gaya", "nalanda"],
    },
    {
        "name": "Priya Kumari", "subjects": ["Mathematics", "Science"],
        "grade_level": "primary", "phone_number": "9876500002",
        "current_school": "GMS Bodhgaya",
        "current_district": "gaya", "home_district": "patna",
        "preferred_districts": ["patna"],
    },
    # Nearby candidates for Aarav (posted close to Gaya)
    {
        "name": "Rohan Mehta", "subjects": ["Hindi"], "grade_level": "primary",
        "phone_number": "9876500003", "current_school": "GPS Jehanabad",
        "current_district": "jehanabad", "home_district": "patna",
        "preferred_districts": ["patna", "vaishali"],
        "current_school_latitude": 25.2133, "current_school_longitude": 84.9870,
    },
    {
        "name": "Sneha Gupta", "subjects": ["English"], "grade_level": "primary",
        "phone_number": "9876500004", "current_school": "GPS Nawada",
        "current_district": "nawada", "home_district": "munger",
        "preferred_districts": ["munger"],
    },
    {
        "name": "Vikram Singh", "subjects": ["Science"], "grade_level": "primary",
        "phone_number": "9876500005", "current_school": "GPS Aurangabad",
        "current_district": "aurangabad", "home_district": "rohtas",
        "preferred_districts": ["rohtas", "kaimur"], "max_distance": 150,
    },
    # North Bihar
    {
        "name": "Ananya Jha", "subjects": ["Mathematics"], "grade_level": "secondary",
        "phone_number": "9876500006", "current_school": "Zila School Darbhanga",
        "current_district": "darbhanga", "home_district": "madhubani",
        "preferred_districts": ["madhubani", "samastipur"],
    },
    {
        "name": "Karan Mishra", "subjects": ["Physics"], "grade_level": "secondary",
        "phone_number": "9876500007", "current_school": "HS Madhubani",
        "current_district": "madhubani", "home_district": "darbhanga",
        "preferred_districts": ["darbhanga"],
    },
    {
        "name": "Meera Thakur", "subjects": ["Social Science"],
        "grade_level": "secondary", "phone_number": "9876500008",
        "current_school": "HS Muzaffarpur",
        "current_district": "muzaffarpur", "home_district": "East Champaran",
        "preferred_districts": ["East Champaran", "sitamarhi"],
    },
    # Inactive profile -- never matched
    {
        "name": "Arjun Kumar", "subjects": ["Mathematics"], "grade_level": "primary",
        "phone_number": "9876500009", "current_school": "GPS Rajgir",
        "current_district": "nalanda", "home_district": "patna",
        "preferred_districts": ["patna"], "is_active": False,
    },
    {
        "name": "Diya Paswan", "subjects": ["English", "Hindi"],
        "grade_level": "primary", "phone_number": "9876500010",
        "current_school": "GPS Bhagalpur",
        "current_district": "bhagalpur", "home_district": "banka",
        "preferred_districts": ["banka", "munger"], "allow_requests": False,
    },
]


async def seed(db: Database) -> None:
    async with db.session() as session:
        # Check if already seeded
        count = await session.scalar(select(func.count()).select_from(TeacherModel))
        if count:
            print("Database already seeded. Skipping.")
            return

        service = TransferService(session, settings)

        # ── Teachers ──────────────────────────────────────────────────
        profiles = [
            await service.register_teacher(TeacherCreate(**t)) for t in TEACHERS
        ]
        print(f"  Created {len(profiles)} teachers")

        # ── Transfer requests ─────────────────────────────────────────
        aarav, priya, rohan, _, _, ananya, karan = profiles[:7]
        await service.send_request(
            aarav.id,
            TransferRequestCreate(
                to_teacher_id=priya.id, message="Shall we swap Patna and Gaya?"
            ),
        )
        await service.send_request(
            rohan.id, TransferRequestCreate(to_teacher_id=aarav.id)
        )
        accepted = await service.send_request(
            karan.id, TransferRequestCreate(to_teacher_id=ananya.id)
        )
        await service.respond_to_request(accepted.id, ananya.id, "accepted")
        print("  Created 3 transfer requests")

    print("\nSeed complete!")


async def main():
    print("Seeding database...")
    async with Database(settings.database_url, echo=settings.database_echo) as db:
        await db.create_all()
        await seed(db)


if __name__ == "__main__":
    asyncio.run(main())
