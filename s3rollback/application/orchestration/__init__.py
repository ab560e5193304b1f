"""
Application Orchestration Package

Architectural Intent:
- Contains workflow orchestration components
- Bounded fan-out for per-object and per-version work
"""

from s3rollback.application.orchestration.fan_out import (
    DEFAULT_CONCURRENCY,
    map_concurrent,
)

__all__ = ["DEFAULT_CONCURRENCY", "map_concurrent"]
