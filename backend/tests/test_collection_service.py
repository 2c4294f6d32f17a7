"""
P4P MIS Backend — Collection Service Unit Tests
=================================================

What:  Tests for collection listing and allow-listed generic reads.

What we test:
    ✅ Allowed collection returns every document
    ✅ Disallowed collection is rejected before any query is sent
    ✅ Disabling the allow-list restores unrestricted reads
    ✅ Driver failures map to the fixed messages
"""

import pytest
from pymongo.errors import OperationFailure

from p4pmis.config import settings
from p4pmis.exceptions import CollectionNotAllowedError, DatabaseError
from p4pmis.models.records import DEFAULT_ALLOWED_COLLECTIONS
from p4pmis.services.collection_service import CollectionService


class TestCollectionService:

    @pytest.mark.asyncio
    async def test_read_allowed_collection(self, fake_db, sample_collections):
        service = CollectionService(allowed=frozenset({"DealerPROFILE"}), allowlist_enabled=True)

        result = await service.read_collection(fake_db, "DealerPROFILE")

        assert result.success is True
        assert len(result.data) == len(sample_collections["DealerPROFILE"])

    @pytest.mark.asyncio
    async def test_rejected_before_query(self, fake_db):
        service = CollectionService(allowed=frozenset({"DealerPROFILE"}), allowlist_enabled=True)

        with pytest.raises(CollectionNotAllowedError) as exc_info:
            await service.read_collection(fake_db, "UsersMIS")

        assert exc_info.value.collection == "UsersMIS"
        assert fake_db.accessed == []

    @pytest.mark.asyncio
    async def test_allowlist_disabled(self, fake_db):
        service = CollectionService(allowed=frozenset(), allowlist_enabled=False)

        result = await service.read_collection(fake_db, "UsersMIS")
        assert len(result.data) == 2

    @pytest.mark.asyncio
    async def test_missing_collection_is_empty(self, fake_db):
        service = CollectionService(allowed=frozenset({"AgrovetPROFILE"}), allowlist_enabled=True)

        result = await service.read_collection(fake_db, "AgrovetPROFILE")
        assert result.data == []

    @pytest.mark.asyncio
    async def test_read_failure(self, fake_db):
        fake_db.failing["A2F"] = OperationFailure("boom")
        service = CollectionService(allowed=frozenset({"A2F"}), allowlist_enabled=True)

        with pytest.raises(DatabaseError) as exc_info:
            await service.read_collection(fake_db, "A2F")
        assert exc_info.value.message == "Error fetching data"

    @pytest.mark.asyncio
    async def test_list_names(self, fake_db, sample_collections):
        result = await CollectionService().list_names(fake_db)
        assert sorted(result.collections) == sorted(sample_collections)

    @pytest.mark.asyncio
    async def test_list_names_failure(self, fake_db):
        fake_db.list_error = OperationFailure("boom")

        with pytest.raises(DatabaseError) as exc_info:
            await CollectionService().list_names(fake_db)
        assert exc_info.value.message == "Error fetching collections"


class TestDefaultAllowList:

    def test_credentials_not_readable(self):
        assert "UsersMIS" not in settings.allowed_collections_set
        assert settings.collection_allowlist_enabled is True

    def test_every_fixed_collection_readable(self):
        assert settings.allowed_collections_set == frozenset(DEFAULT_ALLOWED_COLLECTIONS)
        for name in ("ParticipantPROFILE", "CoOpPROFILE", "AgrovetPROFILE", "MarketSurveyQSR"):
            assert name in settings.allowed_collections_set
