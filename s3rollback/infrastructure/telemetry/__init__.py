"""
s3rollback Telemetry Infrastructure

Architectural Intent:
- OpenTelemetry integration for rollback run metrics
"""

from s3rollback.infrastructure.telemetry.otel_exporter import (
    OTELExporter,
    OTELConfig,
    create_exporter,
)

__all__ = [
    "OTELExporter",
    "OTELConfig",
    "create_exporter",
]
