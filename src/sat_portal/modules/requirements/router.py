"""
Requirements Router

Endpoints:
- GET /requirements/{type} - Requirement text for SEMPRO, SEMHAS or SIDANG
- PUT /requirements/{type} - Replace it (lecturer)
"""

from fastapi import APIRouter, Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from sat_portal.core.auth import CurrentUser, get_current_user, require_lecturer
from sat_portal.core.database import get_db
from sat_portal.core.exceptions import PortalError, to_http_exception
from sat_portal.core.redis import get_redis
from sat_portal.modules.requirements import service
from sat_portal.modules.requirements.schemas import RequirementUpdate
from sat_portal.modules.store.models import RequirementType
from sat_portal.modules.store.schemas import Requirement

router = APIRouter()


@router.get("/{req_type}", response_model=Requirement)
async def get_requirement(
    req_type: RequirementType,
    db: AsyncSession = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    _user: CurrentUser = Depends(get_current_user),
) -> Requirement:
    try:
        return await service.get_requirement(db, redis, req_type)
    except PortalError as e:
        raise to_http_exception(e) from e


@router.put("/{req_type}", response_model=Requirement)
async def save_requirement(
    req_type: RequirementType,
    data: RequirementUpdate,
    db: AsyncSession = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    _lecturer: CurrentUser = Depends(require_lecturer),
) -> Requirement:
    try:
        return await service.save_requirement(db, redis, req_type, data.content)
    except PortalError as e:
        raise to_http_exception(e) from e
