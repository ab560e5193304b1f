"""Tests for DeleteVersions use case."""

import pytest
from datetime import datetime, UTC
from unittest.mock import AsyncMock

from s3rollback.application.use_cases.delete_versions import DeleteVersions
from s3rollback.domain.events.rollback_events import VersionDeletedEvent
from s3rollback.domain.value_objects.version import RollbackTarget
from s3rollback.infrastructure.adapters.memory_adapter import InMemoryVersionStore
from s3rollback.infrastructure.event_bus import EventBus

T = datetime(2024, 3, 1, 12, 0, 0, tzinfo=UTC)


class TestDeleteVersion:
    @pytest.mark.asyncio
    async def test_successful_delete(self):
        store = AsyncMock()
        use_case = DeleteVersions(store)
        target = RollbackTarget("a/b", "v1")

        outcome = await use_case.delete_version("bucket", target)

        assert outcome.ok
        assert outcome.value == target
        store.delete_version.assert_awaited_once_with("bucket", "a/b", "v1")

    @pytest.mark.asyncio
    async def test_failure_is_recorded_not_raised(self):
        store = AsyncMock()
        store.delete_version = AsyncMock(side_effect=RuntimeError("AccessDenied"))
        use_case = DeleteVersions(store)

        outcome = await use_case.delete_version("bucket", RollbackTarget("a", "v1"))

        assert not outcome.ok
        assert outcome.error.container == "bucket"
        assert outcome.error.key == "a"
        assert outcome.error.version_id == "v1"

    @pytest.mark.asyncio
    async def test_second_delete_of_same_version_fails(self):
        store = InMemoryVersionStore()
        store.put_version("bucket", "a", T, "v1")
        use_case = DeleteVersions(store)
        target = RollbackTarget("a", "v1")

        first = await use_case.delete_version("bucket", target)
        second = await use_case.delete_version("bucket", target)

        assert first.ok
        assert not second.ok
        assert isinstance(second.error.error, LookupError)

    @pytest.mark.asyncio
    async def test_publishes_progress_on_success_and_failure(self):
        store = AsyncMock()
        store.delete_version = AsyncMock(side_effect=[None, RuntimeError("nope")])
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(VersionDeletedEvent, handler)
        use_case = DeleteVersions(store, bus)

        await use_case.delete_version("bucket", RollbackTarget("a", "v1"))
        await use_case.delete_version("bucket", RollbackTarget("b", "v2"))

        assert [e.succeeded for e in received] == [True, False]
        assert received[0].aggregate_id == "bucket"


class TestDeleteExecute:
    @pytest.mark.asyncio
    async def test_deletes_every_target(self):
        store = InMemoryVersionStore()
        for i in range(5):
            store.put_version("bucket", f"k{i}", T, f"v{i}")
        use_case = DeleteVersions(store, concurrency=2)
        targets = [RollbackTarget(f"k{i}", f"v{i}") for i in range(5)]

        outcomes = await use_case.execute("bucket", targets)

        assert all(o.ok for o in outcomes)
        assert len(store.delete_calls) == 5
        assert all(store.versions_of("bucket", f"k{i}") == [] for i in range(5))
