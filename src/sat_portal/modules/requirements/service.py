"""
Requirements Service Layer

Requirement texts shown to students for each stage (Sempro, Semhas,
Sidang). Stored texts override the built-in defaults. Reads go through a
short-lived Redis cache when Redis is available; the database remains
the source of truth.
"""

import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.config import settings
from sat_portal.modules.store import repository
from sat_portal.modules.store.models import RequirementType
from sat_portal.modules.store.schemas import Requirement

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "requirements:"

DEFAULT_REQUIREMENTS: dict[RequirementType, str] = {
    RequirementType.SEMPRO: (
        "1. File Proposal Lengkap (PDF)\n"
        "2. Kartu Bimbingan minimal 4x asistensi.\n"
        "3. KRS Aktif Semester ini."
    ),
    RequirementType.SEMHAS: (
        "1. Draft Laporan Tugas Akhir Lengkap.\n"
        "2. Logbook Bimbingan minimal 8x.\n"
        "3. Bukti persetujuan pembimbing."
    ),
    RequirementType.SIDANG: (
        "1. Naskah TA Fixed.\n"
        "2. Hasil cek plagiasi (Turnitin) < 20%.\n"
        "3. Transkrip Nilai Terbaru (Lulus > 138 SKS).\n"
        "4. Bebas administrasi Keuangan & Perpustakaan."
    ),
}


def _cache_key(req_type: RequirementType) -> str:
    return f"{CACHE_KEY_PREFIX}{req_type.value}"


async def _cache_get(redis: Redis | None, req_type: RequirementType) -> str | None:
    if redis is None:
        return None
    try:
        return await redis.get(_cache_key(req_type))
    except RedisError as e:
        logger.warning(f"Requirement cache read failed: {e}")
        return None


async def _cache_set(redis: Redis | None, req_type: RequirementType, content: str) -> None:
    if redis is None:
        return
    try:
        await redis.set(
            _cache_key(req_type), content, ex=settings.requirements_cache_ttl_seconds
        )
    except RedisError as e:
        logger.warning(f"Requirement cache write failed: {e}")


async def get_requirement(
    db: AsyncSession, redis: Redis | None, req_type: RequirementType
) -> Requirement:
    """The requirement text for a stage: cached, stored, or the default."""
    cached = await _cache_get(redis, req_type)
    if cached is not None:
        return Requirement(type=req_type, content=cached)

    stored = await repository.get_requirement(db, req_type)
    requirement = stored or Requirement(
        type=req_type, content=DEFAULT_REQUIREMENTS.get(req_type, "-")
    )
    await _cache_set(redis, req_type, requirement.content)
    return requirement


async def save_requirement(
    db: AsyncSession, redis: Redis | None, req_type: RequirementType, content: str
) -> Requirement:
    """Store a new requirement text and refresh the cache."""
    requirement = await repository.save_requirement(
        db, Requirement(type=req_type, content=content)
    )
    await _cache_set(redis, req_type, requirement.content)
    logger.info(f"Requirement {req_type.value} updated")
    return requirement
