"""Tests for value objects: ObjectLocator, Cutoff, VersionRecord, RollbackTarget."""

import pytest
from datetime import datetime, timedelta, timezone, UTC

from s3rollback.domain.errors import (
    ContainerMismatch,
    InvalidCutoff,
    InvalidInput,
    MalformedLocator,
)
from s3rollback.domain.value_objects.cutoff import Cutoff
from s3rollback.domain.value_objects.locator import (
    ObjectLocator,
    parse_key,
    parse_locator,
)
from s3rollback.domain.value_objects.version import RollbackTarget, VersionRecord


class TestParseLocator:
    def test_gets_the_key(self):
        assert parse_key("bucket", "s3://bucket/path/to/some/file") == "path/to/some/file"

    def test_returns_locator(self):
        locator = parse_locator("bucket", "s3://bucket/file.txt")
        assert locator == ObjectLocator(container="bucket", key="file.txt")
        assert str(locator) == "s3://bucket/file.txt"

    def test_fails_when_uri_is_invalid(self):
        with pytest.raises(MalformedLocator):
            parse_key("bucket", "/bucket/blah")

    def test_fails_when_bucket_does_not_match(self):
        with pytest.raises(ContainerMismatch):
            parse_key("bucket", "s3://another-bucket/blah")

    def test_fails_without_key(self):
        with pytest.raises(MalformedLocator):
            parse_key("bucket", "s3://bucket/")

    def test_fails_with_other_scheme(self):
        with pytest.raises(MalformedLocator):
            parse_key("bucket", "gs://bucket/blah")

    def test_errors_are_invalid_input(self):
        with pytest.raises(InvalidInput):
            parse_key("bucket", "nonsense")

    def test_strips_line_endings(self):
        assert parse_key("bucket", "s3://bucket/a/b\r\n") == "a/b"

    def test_key_keeps_trailing_slashes(self):
        assert parse_key("bucket", "s3://bucket/a//b/") == "a//b/"

    def test_frozen(self):
        locator = ObjectLocator("bucket", "key")
        with pytest.raises(AttributeError):
            locator.key = "other"


class TestCutoff:
    def test_parse_naive_is_local(self):
        cutoff = Cutoff.parse("2024-02-21T11:00:00")
        assert cutoff.moment.tzinfo is not None
        assert cutoff.moment.replace(tzinfo=None) == datetime(2024, 2, 21, 11, 0, 0)

    def test_parse_with_offset(self):
        cutoff = Cutoff.parse("2024-02-21T11:00:00+02:00")
        assert cutoff.moment == datetime(2024, 2, 21, 9, 0, 0, tzinfo=UTC)

    def test_parse_zulu(self):
        cutoff = Cutoff.parse("2024-02-21T11:00:00Z")
        assert cutoff.moment == datetime(2024, 2, 21, 11, 0, 0, tzinfo=UTC)

    def test_parse_invalid(self):
        with pytest.raises(InvalidCutoff, match="YYYY-MM-DDTHH:MM:SS"):
            Cutoff.parse("yesterday")

    def test_naive_moment_rejected(self):
        with pytest.raises(InvalidCutoff):
            Cutoff(datetime(2024, 1, 1))

    def test_boundary_is_exclusive(self):
        moment = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
        cutoff = Cutoff(moment)
        assert not cutoff.is_before(moment)
        assert not cutoff.is_before(moment - timedelta(seconds=1))
        assert cutoff.is_before(moment + timedelta(seconds=1))

    def test_compares_across_timezones(self):
        cutoff = Cutoff(datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC))
        later = datetime(2024, 1, 1, 13, 30, 0, tzinfo=timezone(timedelta(hours=1)))
        assert cutoff.is_before(later)


class TestVersionRecord:
    def test_to_target(self):
        record = VersionRecord(
            key="a/b", version_id="v1", last_modified=datetime(2024, 1, 1, tzinfo=UTC)
        )
        assert record.to_target() == RollbackTarget(key="a/b", version_id="v1")
        assert record.is_delete_marker is False

    def test_target_str(self):
        assert str(RollbackTarget("a/b", "v1")) == "a/b@v1"

    def test_frozen(self):
        target = RollbackTarget("a", "v1")
        with pytest.raises(AttributeError):
            target.version_id = "v2"
