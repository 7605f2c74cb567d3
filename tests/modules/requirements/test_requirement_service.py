"""
Tests for the requirement texts service, including the Redis cache.
"""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from sat_portal.modules.requirements import service
from sat_portal.modules.store.models import RequirementType


class TestGetRequirement:
    """Tests for get_requirement."""

    @pytest.mark.asyncio
    async def test_default_without_stored_text(self, db):
        requirement = await service.get_requirement(db, None, RequirementType.SIDANG)

        assert requirement.content == service.DEFAULT_REQUIREMENTS[RequirementType.SIDANG]
        assert "138 SKS" in requirement.content

    @pytest.mark.asyncio
    async def test_stored_text_overrides_default(self, db):
        await service.save_requirement(db, None, RequirementType.SEMPRO, "1. Proposal PDF")

        requirement = await service.get_requirement(db, None, RequirementType.SEMPRO)

        assert requirement.content == "1. Proposal PDF"

    @pytest.mark.asyncio
    async def test_cached_text_is_used(self, mock_db, mock_redis):
        mock_redis.get = AsyncMock(return_value="dari cache")

        requirement = await service.get_requirement(mock_db, mock_redis, RequirementType.SEMHAS)

        assert requirement.content == "dari cache"
        mock_redis.get.assert_called_once_with("requirements:SEMHAS")
        mock_db.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_cache_miss_fills_cache(self, db, mock_redis):
        await service.get_requirement(db, mock_redis, RequirementType.SEMHAS)

        mock_redis.set.assert_called_once()
        args, kwargs = mock_redis.set.call_args
        assert args == (
            "requirements:SEMHAS",
            service.DEFAULT_REQUIREMENTS[RequirementType.SEMHAS],
        )
        assert kwargs["ex"] > 0

    @pytest.mark.asyncio
    async def test_redis_failure_falls_back_to_store(self, db, mock_redis):
        mock_redis.get = AsyncMock(side_effect=RedisConnectionError("down"))
        mock_redis.set = AsyncMock(side_effect=RedisConnectionError("down"))

        requirement = await service.get_requirement(db, mock_redis, RequirementType.SIDANG)

        assert requirement.content == service.DEFAULT_REQUIREMENTS[RequirementType.SIDANG]


class TestSaveRequirement:
    """Tests for save_requirement."""

    @pytest.mark.asyncio
    async def test_save_refreshes_cache(self, db, mock_redis):
        await service.save_requirement(db, mock_redis, RequirementType.SIDANG, "1. Naskah")

        mock_redis.set.assert_called_once()
        assert mock_redis.set.call_args.args == ("requirements:SIDANG", "1. Naskah")
