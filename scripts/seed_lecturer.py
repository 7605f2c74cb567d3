"""
Seed Lecturer Account

Creates a lecturer (staff) account and its lecturer directory entry so the
portal can be administered before anyone signs in with Google.

Usage:
    SEED_LECTURER_EMAIL=kaprodi@example.ac.id \
    SEED_LECTURER_PASSWORD=... \
    SEED_LECTURER_NAME="Dr. Budi Santoso" \
    SEED_LECTURER_NIP=198001012005011001 \
    python scripts/seed_lecturer.py
"""

import asyncio
import os
import sys

from sat_portal.core.database import async_session_maker, close_db
from sat_portal.core.security import hash_password
from sat_portal.modules.store import repository
from sat_portal.modules.store.schemas import Lecturer
from sat_portal.modules.users.models import UserRole
from sat_portal.modules.users.repository import UserRepository


async def seed_lecturer() -> int:
    """Create the lecturer account if it doesn't exist."""
    email = os.environ.get("SEED_LECTURER_EMAIL", "").strip().lower()
    password = os.environ.get("SEED_LECTURER_PASSWORD", "")
    name = os.environ.get("SEED_LECTURER_NAME", "").strip()
    nip = os.environ.get("SEED_LECTURER_NIP", "").strip()

    if not email or not password or not name or not nip:
        print("Set SEED_LECTURER_EMAIL, SEED_LECTURER_PASSWORD, SEED_LECTURER_NAME and SEED_LECTURER_NIP")
        return 1

    async with async_session_maker() as db:
        existing_user = await UserRepository.get_by_email(db, email)
        if existing_user:
            print(f"Lecturer already exists: {email}")
            print(f"  ID: {existing_user.id}")
            print(f"  Role: {existing_user.role.value}")
            return 0

        user = await UserRepository.create(
            db,
            email=email,
            password_hash=hash_password(password),
            full_name=name,
            role=UserRole.LECTURER,
            identifier=nip,
        )
        lecturer = await repository.save_entity(db, Lecturer(name=name, nip=nip))

        print("Lecturer created successfully!")
        print(f"  Email: {email}")
        print(f"  Name: {name}")
        print(f"  ID: {user.id}")
        print(f"  Directory entry: {lecturer.entity.id}")

    await close_db()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(seed_lecturer()))
