"""
Console Progress Display

Architectural Intent:
- Subscribes to rollback events and renders operator-facing progress
- Running counts are rewritten in place on a terminal; when stdout is not a
  terminal only the final count of each phase is printed
- Purely presentational: tallies here never feed back into the run
"""

import sys
from datetime import datetime
from typing import Optional, TextIO

from s3rollback.domain.events.rollback_events import (
    DeletionPlannedEvent,
    RollbackStartedEvent,
    TargetsFetchedEvent,
    VerificationStartedEvent,
    VersionDeletedEvent,
    VersionsListedEvent,
)
from s3rollback.domain.ports.event_bus_port import EventBusPort


def timestamp() -> str:
    return datetime.now().strftime("[%H:%M:%S]")


class ProgressDisplay:
    def __init__(self, stream: Optional[TextIO] = None, interactive: Optional[bool] = None):
        self.stream = stream or sys.stdout
        if interactive is None:
            isatty = getattr(self.stream, "isatty", None)
            interactive = bool(isatty and isatty())
        self.interactive = interactive
        self.reads = 0
        self.deleted = 0
        self.delete_errors = 0
        self._pending_line: Optional[str] = None

    def attach(self, event_bus: EventBusPort) -> "ProgressDisplay":
        event_bus.subscribe(RollbackStartedEvent, self._on_started)
        event_bus.subscribe(VersionsListedEvent, self._on_listed)
        event_bus.subscribe(TargetsFetchedEvent, self._on_fetched)
        event_bus.subscribe(DeletionPlannedEvent, self._on_planned)
        event_bus.subscribe(VersionDeletedEvent, self._on_deleted)
        event_bus.subscribe(VerificationStartedEvent, self._on_verify)
        return self

    def log(self, text: str) -> None:
        self.finish_line()
        print(f"{timestamp()} {text}", file=self.stream)

    def print_in_place(self, text: str) -> None:
        line = f"{timestamp()} {text}"
        if self.interactive:
            self.stream.write(f"\r\x1b[2K{line}")
            self.stream.flush()
        self._pending_line = line

    def finish_line(self) -> None:
        """Terminate the in-place line, if any, so normal output starts fresh."""
        if self._pending_line is None:
            return
        if self.interactive:
            self.stream.write("\n")
        else:
            print(self._pending_line, file=self.stream)
        self._pending_line = None

    async def _on_started(self, event: RollbackStartedEvent) -> None:
        self.log(f"{event.object_count} objects specified in file.")

    async def _on_listed(self, event: VersionsListedEvent) -> None:
        if event.succeeded:
            self.reads += 1
            self.print_in_place(f"{self.reads} objects' version information read")

    async def _on_fetched(self, event: TargetsFetchedEvent) -> None:
        self.log(
            f"{event.target_count} file versions to be deleted for "
            f"{event.object_count} objects"
        )

    async def _on_planned(self, event: DeletionPlannedEvent) -> None:
        self.log(
            f"(dryrun) Rolling back {event.key} to {event.version_id} "
            f"in {event.aggregate_id}"
        )

    async def _on_deleted(self, event: VersionDeletedEvent) -> None:
        if event.succeeded:
            self.deleted += 1
        else:
            self.delete_errors += 1
        self.print_in_place(f"{self.deleted} successes and {self.delete_errors} errors")

    async def _on_verify(self, event: VerificationStartedEvent) -> None:
        self.reads = 0
        self.log("Verifying...")
