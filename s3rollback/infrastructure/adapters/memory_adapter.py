"""
In-Memory Version Store Adapter

Architectural Intent:
- Implements VersionStorePort without any network access, for local
  development and end-to-end tests of the rollback pipeline
- Mirrors S3 listing semantics: a listing is by key prefix and returns
  versions of every key that starts with it

Design Decisions:
- Failures can be injected per key so partial-failure behaviour can be
  exercised deterministically
- Every delete call is recorded, including failed ones
- Deleting a version that is not stored raises LookupError, matching the
  rule that a repeated delete is an error
"""

import asyncio
import logging
import uuid
from datetime import datetime
from typing import Optional

from s3rollback.domain.value_objects.version import VersionRecord

logger = logging.getLogger(__name__)


class InMemoryVersionStore:
    def __init__(self, latency: float = 0.0) -> None:
        self.latency = latency
        # Keyed by bucket; each value maps version id -> record
        self._buckets: dict[str, dict[str, VersionRecord]] = {}
        self.list_failures: dict[str, Exception] = {}
        self.delete_failures: dict[str, Exception] = {}
        self.list_calls: list[tuple[str, str]] = []
        self.delete_calls: list[tuple[str, str, str]] = []

    def put_version(
        self,
        container: str,
        key: str,
        last_modified: datetime,
        version_id: Optional[str] = None,
        is_delete_marker: bool = False,
    ) -> VersionRecord:
        record = VersionRecord(
            key=key,
            version_id=version_id or uuid.uuid4().hex,
            last_modified=last_modified,
            is_delete_marker=is_delete_marker,
        )
        self._buckets.setdefault(container, {})[record.version_id] = record
        return record

    def versions_of(self, container: str, key: str) -> list[VersionRecord]:
        return [
            r for r in self._buckets.get(container, {}).values() if r.key == key
        ]

    async def list_versions(self, container: str, key: str) -> list[VersionRecord]:
        self.list_calls.append((container, key))
        await asyncio.sleep(self.latency)
        if key in self.list_failures:
            raise self.list_failures[key]
        return [
            r
            for r in self._buckets.get(container, {}).values()
            if r.key.startswith(key)
        ]

    async def delete_version(self, container: str, key: str, version_id: str) -> None:
        self.delete_calls.append((container, key, version_id))
        await asyncio.sleep(self.latency)
        if key in self.delete_failures:
            raise self.delete_failures[key]

        versions = self._buckets.get(container, {})
        record = versions.get(version_id)
        if record is None or record.key != key:
            raise LookupError(
                f"NoSuchVersion: s3://{container}/{key} version {version_id}"
            )
        del versions[version_id]
        logger.debug("Removed s3://%s/%s version %s", container, key, version_id)
