"""
Composition Root

Architectural Intent:
- Dependency injection composition root for the s3rollback application
- Single place where the store adapter, event bus and use cases are wired
- No adapter instantiation should occur outside this module

Design Decisions:
- Uses a simple dataclass container instead of a DI framework
- The store can be injected (tests use the in-memory adapter); otherwise an
  S3 adapter is built from the loaded configuration
"""

from dataclasses import dataclass
from typing import Optional

from s3rollback.application.use_cases.delete_versions import DeleteVersions
from s3rollback.application.use_cases.fetch_rollback_targets import (
    FetchRollbackTargets,
)
from s3rollback.application.use_cases.rollback_objects import RollbackObjects
from s3rollback.domain.ports.version_store_port import VersionStorePort
from s3rollback.infrastructure.config import RollbackConfig
from s3rollback.infrastructure.event_bus import EventBus


@dataclass
class RollbackContainer:
    """DI container holding all wired dependencies."""

    config: RollbackConfig
    store: VersionStorePort
    event_bus: EventBus
    fetch_targets: FetchRollbackTargets
    delete_versions: DeleteVersions
    rollback: RollbackObjects

    def close(self) -> None:
        close = getattr(self.store, "close", None)
        if close is not None:
            close()


def create_container(
    config: Optional[RollbackConfig] = None,
    store: Optional[VersionStorePort] = None,
) -> RollbackContainer:
    """Create and wire all dependencies."""
    config = config or RollbackConfig()
    settings = config.rollback

    if store is None:
        from s3rollback.infrastructure.adapters.s3_adapter import S3VersionStore

        store = S3VersionStore(
            region=config.s3.region,
            profile=config.s3.profile,
            endpoint_url=config.s3.endpoint_url,
            concurrency=settings.concurrency,
        )

    event_bus = EventBus()
    fetch_targets = FetchRollbackTargets(
        store,
        event_bus,
        concurrency=settings.concurrency,
        include_delete_markers=settings.include_delete_markers,
    )
    delete_versions = DeleteVersions(store, event_bus, concurrency=settings.concurrency)
    rollback = RollbackObjects(fetch_targets, delete_versions, event_bus)

    return RollbackContainer(
        config=config,
        store=store,
        event_bus=event_bus,
        fetch_targets=fetch_targets,
        delete_versions=delete_versions,
        rollback=rollback,
    )
