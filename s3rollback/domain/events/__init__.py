"""
Domain Events Package

Architectural Intent:
- Contains domain events published during a rollback run
- Events are the primary mechanism for progress reporting
"""

from s3rollback.domain.events.event_base import DomainEvent
from s3rollback.domain.events.rollback_events import (
    RollbackStartedEvent,
    VersionsListedEvent,
    TargetsFetchedEvent,
    DeletionPlannedEvent,
    VersionDeletedEvent,
    VerificationStartedEvent,
    RollbackCompletedEvent,
)

__all__ = [
    "DomainEvent",
    "RollbackStartedEvent",
    "VersionsListedEvent",
    "TargetsFetchedEvent",
    "DeletionPlannedEvent",
    "VersionDeletedEvent",
    "VerificationStartedEvent",
    "RollbackCompletedEvent",
]
