"""
Delete Versions Use Case

Architectural Intent:
- Permanently deletes exact (bucket, key, version) triples through the
  store port
- Each deletion is isolated: a failure becomes an ErrorRecord in the
  returned Outcome and never raises to the fan-out
"""

import logging
from typing import Optional, Sequence

from s3rollback.application.orchestration.fan_out import (
    DEFAULT_CONCURRENCY,
    map_concurrent,
)
from s3rollback.domain.entities.rollback_run import ErrorRecord, Outcome
from s3rollback.domain.events.rollback_events import VersionDeletedEvent
from s3rollback.domain.ports.event_bus_port import EventBusPort
from s3rollback.domain.ports.version_store_port import VersionStorePort
from s3rollback.domain.value_objects.version import RollbackTarget

logger = logging.getLogger(__name__)


class DeleteVersions:
    def __init__(
        self,
        store: VersionStorePort,
        event_bus: Optional[EventBusPort] = None,
        concurrency: int = DEFAULT_CONCURRENCY,
    ):
        self.store = store
        self.event_bus = event_bus
        self.concurrency = concurrency

    async def delete_version(
        self, container: str, target: RollbackTarget
    ) -> Outcome[RollbackTarget]:
        try:
            await self.store.delete_version(container, target.key, target.version_id)
            outcome = Outcome.success(target)
            logger.debug("Deleted s3://%s/%s", container, target)
        except Exception as e:
            logger.warning("Deleting s3://%s/%s failed: %s", container, target, e)
            outcome = Outcome.failure(
                ErrorRecord(container, target.key, target.version_id, e)
            )

        if self.event_bus is not None:
            await self.event_bus.publish(
                [
                    VersionDeletedEvent(
                        aggregate_id=container,
                        key=target.key,
                        version_id=target.version_id,
                        succeeded=outcome.ok,
                    )
                ]
            )
        return outcome

    async def execute(
        self, container: str, targets: Sequence[RollbackTarget]
    ) -> list:
        return await map_concurrent(
            targets,
            lambda target: self.delete_version(container, target),
            self.concurrency,
        )
