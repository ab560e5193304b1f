"""Tests for OTELExporter."""

import pytest
from s3rollback.application.dtos.rollback_dtos import RollbackReport
from s3rollback.domain.entities.rollback_run import RollbackPhase
from s3rollback.domain.value_objects.version import RollbackTarget
from s3rollback.infrastructure.telemetry.otel_exporter import (
    OTELConfig,
    OTELExporter,
    create_exporter,
)


class TestOTELConfig:
    def test_default_empty_endpoint(self):
        config = OTELConfig()
        assert config.endpoint == ""
        assert config.service_name == "s3rollback"

    def test_localhost_http_allowed(self):
        config = OTELConfig(endpoint="http://localhost:4317")
        assert config.endpoint == "http://localhost:4317"

    def test_remote_https_allowed(self):
        config = OTELConfig(endpoint="https://remote.example.com:4317")
        assert config.endpoint == "https://remote.example.com:4317"

    def test_remote_http_rejected(self):
        with pytest.raises(ValueError, match="insecure=True"):
            OTELConfig(endpoint="http://remote.example.com:4317")

    def test_remote_http_with_insecure(self):
        config = OTELConfig(
            endpoint="http://remote.example.com:4317", insecure=True
        )
        assert config.insecure is True


class TestOTELExporter:
    def test_record_metric_buffers(self):
        exporter = OTELExporter(OTELConfig(endpoint=""))
        exporter.record_metric("test.metric", 42.0)
        assert len(exporter._metrics_buffer) == 1
        assert exporter._metrics_buffer[0]["name"] == "test.metric"
        assert exporter._metrics_buffer[0]["value"] == 42.0

    def test_record_rollback_report(self):
        exporter = OTELExporter(OTELConfig(endpoint=""))
        report = RollbackReport(
            container="bucket",
            phase=RollbackPhase.DONE,
            object_count=2,
            targets=(RollbackTarget("a", "v1"),),
            deletions_attempted=1,
            deletions_succeeded=1,
            remaining=0,
        )

        exporter.record_rollback_report(report)

        names = [m["name"] for m in exporter._metrics_buffer]
        assert "s3rollback.targets.found" in names
        assert "s3rollback.verify.remaining" in names
        assert exporter._metrics_buffer[0]["attributes"]["bucket"] == "bucket"

    def test_report_without_verify_skips_remaining(self):
        exporter = OTELExporter(OTELConfig(endpoint=""))
        report = RollbackReport(
            container="bucket", phase=RollbackPhase.DONE, object_count=0
        )

        exporter.record_rollback_report(report)

        names = [m["name"] for m in exporter._metrics_buffer]
        assert "s3rollback.verify.remaining" not in names

    @pytest.mark.asyncio
    async def test_export_noop_when_not_initialized(self):
        exporter = OTELExporter(OTELConfig(endpoint=""))
        exporter.record_metric("test", 1.0)
        await exporter.export()
        # Buffer not cleared when not initialized (no-op)
        assert len(exporter._metrics_buffer) == 1

    @pytest.mark.asyncio
    async def test_create_exporter_without_endpoint_is_disabled(self):
        exporter = await create_exporter()
        assert exporter.enabled is False
