"""
Rollback Events

Architectural Intent:
- Events emitted while a rollback run progresses through its phases
- aggregate_id is always the bucket the run operates on

Domain Events:
- RollbackStartedEvent: input parsed, fetching is about to begin
- VersionsListedEvent: one object's version listing finished
- TargetsFetchedEvent: every listing finished, rollback targets are known
- DeletionPlannedEvent: dry run would delete this version
- VersionDeletedEvent: one version deletion finished
- VerificationStartedEvent: post-deletion verify pass is starting
- RollbackCompletedEvent: run reached a terminal phase
"""

from dataclasses import dataclass
from typing import Any

from s3rollback.domain.events.event_base import DomainEvent


@dataclass(frozen=True)
class RollbackStartedEvent(DomainEvent):
    object_count: int = 0
    cutoff: str = ""
    dry_run: bool = False


@dataclass(frozen=True)
class VersionsListedEvent(DomainEvent):
    key: str = ""
    succeeded: bool = True
    target_count: int = 0


@dataclass(frozen=True)
class TargetsFetchedEvent(DomainEvent):
    object_count: int = 0
    target_count: int = 0
    error_count: int = 0


@dataclass(frozen=True)
class DeletionPlannedEvent(DomainEvent):
    key: str = ""
    version_id: str = ""


@dataclass(frozen=True)
class VersionDeletedEvent(DomainEvent):
    key: str = ""
    version_id: str = ""
    succeeded: bool = True


@dataclass(frozen=True)
class VerificationStartedEvent(DomainEvent):
    object_count: int = 0


@dataclass(frozen=True)
class RollbackCompletedEvent(DomainEvent):
    phase: str = ""
    error_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update({"phase": self.phase, "error_count": self.error_count})
        return data
