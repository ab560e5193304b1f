"""
Domain Ports Package

Architectural Intent:
- Contains port interfaces (abstract contracts) for external dependencies
- Ports define what the domain needs, adapters implement how
- Follows Hexagonal Architecture principles
"""

from s3rollback.domain.ports.version_store_port import VersionStorePort
from s3rollback.domain.ports.event_bus_port import EventBusPort

__all__ = [
    "VersionStorePort",
    "EventBusPort",
]
