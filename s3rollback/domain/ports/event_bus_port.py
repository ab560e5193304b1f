"""
Event Bus Port

Architectural Intent:
- Abstract interface for publishing domain events
- Decouples the rollback use cases from progress display and telemetry
"""

from typing import Protocol, Callable, Awaitable, runtime_checkable
from s3rollback.domain.events.event_base import DomainEvent


@runtime_checkable
class EventBusPort(Protocol):
    async def publish(self, events: list[DomainEvent]) -> None: ...

    def subscribe(
        self, event_type: type, handler: Callable[[DomainEvent], Awaitable[None]]
    ) -> None: ...
