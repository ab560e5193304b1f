"""
Fetch Rollback Targets Use Case

Architectural Intent:
- For each object key, lists its version history through the store port and
  selects the versions modified after the cutoff
- A failed listing is reported as an Outcome failure for that key only;
  the rest of the batch carries on
"""

import logging
from typing import Optional, Sequence

from s3rollback.application.orchestration.fan_out import (
    DEFAULT_CONCURRENCY,
    map_concurrent,
)
from s3rollback.domain.entities.rollback_run import ErrorRecord, Outcome
from s3rollback.domain.events.rollback_events import VersionsListedEvent
from s3rollback.domain.ports.event_bus_port import EventBusPort
from s3rollback.domain.ports.version_store_port import VersionStorePort
from s3rollback.domain.services.version_selection import select_rollback_targets
from s3rollback.domain.value_objects.cutoff import Cutoff
from s3rollback.domain.value_objects.version import RollbackTarget

logger = logging.getLogger(__name__)


class FetchRollbackTargets:
    def __init__(
        self,
        store: VersionStorePort,
        event_bus: Optional[EventBusPort] = None,
        concurrency: int = DEFAULT_CONCURRENCY,
        include_delete_markers: bool = False,
    ):
        self.store = store
        self.event_bus = event_bus
        self.concurrency = concurrency
        self.include_delete_markers = include_delete_markers

    async def fetch_versions(
        self, container: str, key: str, cutoff: Cutoff
    ) -> Outcome[list[RollbackTarget]]:
        try:
            versions = await self.store.list_versions(container, key)
        except Exception as e:
            logger.warning("Listing versions of s3://%s/%s failed: %s", container, key, e)
            await self._publish(container, key, succeeded=False, target_count=0)
            return Outcome.failure(ErrorRecord(container, key, None, e))

        targets = select_rollback_targets(
            key, versions, cutoff, self.include_delete_markers
        )
        logger.debug(
            "s3://%s/%s: %d version(s) listed, %d after %s",
            container,
            key,
            len(versions),
            len(targets),
            cutoff,
        )
        await self._publish(container, key, succeeded=True, target_count=len(targets))
        return Outcome.success(targets)

    async def execute(
        self, container: str, keys: Sequence[str], cutoff: Cutoff
    ) -> list:
        """Fetch targets for every key; results line up with `keys`."""
        return await map_concurrent(
            keys,
            lambda key: self.fetch_versions(container, key, cutoff),
            self.concurrency,
        )

    async def _publish(
        self, container: str, key: str, succeeded: bool, target_count: int
    ) -> None:
        if self.event_bus is None:
            return
        await self.event_bus.publish(
            [
                VersionsListedEvent(
                    aggregate_id=container,
                    key=key,
                    succeeded=succeeded,
                    target_count=target_count,
                )
            ]
        )
