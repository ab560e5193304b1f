"""
Rollback Objects Use Case

Architectural Intent:
- Orchestrates one rollback run: parse -> fetch -> (dry run | delete) -> verify
- Owns the RollbackRun aggregate; fetch and delete workers stay stateless and
  hand back Outcome values that are merged here once per phase

Error Policy:
- Any malformed locator aborts the run before the store is contacted
- Listing and deletion failures are per item: recorded, logged, and carried
  into the report, while the rest of the batch proceeds
- Deletions that succeeded stay applied even when others failed
"""

import logging
from typing import Optional, Sequence

from s3rollback.application.dtos.rollback_dtos import RollbackReport, RollbackRequest
from s3rollback.application.use_cases.delete_versions import DeleteVersions
from s3rollback.application.use_cases.fetch_rollback_targets import (
    FetchRollbackTargets,
)
from s3rollback.domain.entities.rollback_run import (
    ErrorRecord,
    Outcome,
    RollbackPhase,
    RollbackRun,
)
from s3rollback.domain.errors import InvalidInput
from s3rollback.domain.events.rollback_events import (
    DeletionPlannedEvent,
    RollbackCompletedEvent,
    RollbackStartedEvent,
    TargetsFetchedEvent,
    VerificationStartedEvent,
)
from s3rollback.domain.ports.event_bus_port import EventBusPort
from s3rollback.domain.value_objects.cutoff import Cutoff
from s3rollback.domain.value_objects.locator import parse_key
from s3rollback.domain.value_objects.version import RollbackTarget

logger = logging.getLogger(__name__)


def _partition(
    container: str, items: Sequence, results: Sequence
) -> tuple[list[Outcome], list[ErrorRecord]]:
    """Split fan-out results into outcomes and error records.

    A raw exception in the results means a worker broke its contract; it is
    recorded against the item it was working on.
    """
    outcomes: list[Outcome] = []
    errors: list[ErrorRecord] = []
    for item, result in zip(items, results):
        if isinstance(result, BaseException):
            if isinstance(item, RollbackTarget):
                record = ErrorRecord(container, item.key, item.version_id, result)
            else:
                record = ErrorRecord(container, str(item), None, result)
            outcome: Outcome = Outcome.failure(record)
        else:
            outcome = result
        outcomes.append(outcome)
        if outcome.error is not None:
            errors.append(outcome.error)
    return outcomes, errors


class RollbackObjects:
    def __init__(
        self,
        fetcher: FetchRollbackTargets,
        deleter: DeleteVersions,
        event_bus: Optional[EventBusPort] = None,
    ):
        self.fetcher = fetcher
        self.deleter = deleter
        self.event_bus = event_bus

    async def execute(self, request: RollbackRequest) -> RollbackReport:
        container = request.container
        run = RollbackRun(container)

        run.advance(RollbackPhase.PARSING_INPUT)
        try:
            keys = self._parse_locators(container, request.locators)
        except InvalidInput:
            run.fail()
            raise
        logger.info("%d objects specified for s3://%s", len(keys), container)

        await self._publish(
            RollbackStartedEvent(
                aggregate_id=container,
                object_count=len(keys),
                cutoff=str(request.cutoff),
                dry_run=request.dry_run,
            )
        )

        run.advance(RollbackPhase.FETCHING_TARGETS)
        targets = await self._fetch_targets(run, keys, request.cutoff)
        logger.info(
            "%d file versions to be deleted for %d objects", len(targets), len(keys)
        )
        await self._publish(
            TargetsFetchedEvent(
                aggregate_id=container,
                object_count=len(keys),
                target_count=len(targets),
                error_count=len(run.errors),
            )
        )

        if request.abort_on_fetch_errors and run.has_errors and not request.dry_run:
            logger.error(
                "%d errors while listing versions, no write operations performed",
                len(run.errors),
            )
            run.fail()
            return await self._finish(run, keys, targets, request, aborted=True)

        if request.dry_run:
            run.advance(RollbackPhase.DRY_RUN_REPORTING)
            await self._publish(
                *(
                    DeletionPlannedEvent(
                        aggregate_id=container,
                        key=t.key,
                        version_id=t.version_id,
                    )
                    for t in targets
                )
            )
            run.advance(RollbackPhase.DONE)
            return await self._finish(run, keys, targets, request)

        run.advance(RollbackPhase.DELETING)
        results = await self.deleter.execute(container, targets)
        outcomes, errors = _partition(container, targets, results)
        run.merge_deletions(outcomes)
        run.record_errors(errors)
        logger.info(
            "%d of %d deletions succeeded",
            run.counters.successful_deletions,
            len(targets),
        )

        remaining = None
        if request.verify:
            run.advance(RollbackPhase.VERIFYING)
            run.counters.reset_reads()
            await self._publish(
                VerificationStartedEvent(aggregate_id=container, object_count=len(keys))
            )
            leftovers = await self._fetch_targets(run, keys, request.cutoff)
            remaining = len(leftovers)
            if remaining:
                logger.warning("%d reversions were not performed", remaining)

        run.advance(RollbackPhase.DONE)
        return await self._finish(run, keys, targets, request, remaining=remaining)

    def _parse_locators(self, container: str, locators: Sequence[str]) -> list[str]:
        return [parse_key(container, line) for line in locators if line.strip()]

    async def _fetch_targets(
        self, run: RollbackRun, keys: list[str], cutoff: Cutoff
    ) -> list[RollbackTarget]:
        results = await self.fetcher.execute(run.container, keys, cutoff)
        outcomes, errors = _partition(run.container, keys, results)
        run.merge_reads(outcomes)
        run.record_errors(errors)

        targets: list[RollbackTarget] = []
        for outcome in outcomes:
            if outcome.ok and outcome.value:
                targets.extend(outcome.value)
        return targets

    async def _finish(
        self,
        run: RollbackRun,
        keys: list[str],
        targets: list[RollbackTarget],
        request: RollbackRequest,
        remaining: Optional[int] = None,
        aborted: bool = False,
    ) -> RollbackReport:
        await self._publish(
            RollbackCompletedEvent(
                aggregate_id=run.container,
                phase=run.phase.name,
                error_count=len(run.errors),
            )
        )
        wrote = run.phase is RollbackPhase.DONE and not request.dry_run
        return RollbackReport(
            container=run.container,
            phase=run.phase,
            object_count=len(keys),
            targets=tuple(targets),
            dry_run=request.dry_run,
            deletions_attempted=len(targets) if wrote else 0,
            deletions_succeeded=run.counters.successful_deletions,
            successful_reads=run.counters.successful_reads,
            errors=run.errors,
            remaining=remaining,
            aborted=aborted,
        )

    async def _publish(self, *events) -> None:
        if self.event_bus is not None and events:
            await self.event_bus.publish(list(events))
