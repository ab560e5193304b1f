"""
S3 Version Store Adapter

Architectural Intent:
- Implements VersionStorePort for Amazon S3 and S3-compatible endpoints
- Wraps the blocking boto3 client so the application layer can fan out
  listing and deletion calls from a single asyncio event loop

Design Decisions:
- __init__ accepts all connection configuration (region, credentials profile,
  endpoint URL) so the adapter is fully self-contained and testable; a
  pre-built client can be injected instead
- Blocking SDK calls run on a dedicated thread pool sized to the rollback
  concurrency ceiling, and the client's HTTP connection pool is sized to
  match, so the fan-out limit is the real limit
- list_versions drains the list_object_versions paginator until a sibling
  key under the same prefix shows up; both Versions and
  DeleteMarkers are returned and tagged so the domain can decide what to keep
- delete_version issues DeleteObject with an explicit VersionId, which removes
  that version permanently instead of adding a delete marker
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

import boto3
from botocore.config import Config as BotoConfig

from s3rollback.application.orchestration.fan_out import DEFAULT_CONCURRENCY
from s3rollback.domain.value_objects.version import VersionRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _records_from_page(page: dict) -> list[VersionRecord]:
    """Translate one ListObjectVersions page into VersionRecords."""
    records = [
        VersionRecord(
            key=v["Key"],
            version_id=v["VersionId"],
            last_modified=v["LastModified"],
        )
        for v in page.get("Versions", [])
    ]
    records.extend(
        VersionRecord(
            key=m["Key"],
            version_id=m["VersionId"],
            last_modified=m["LastModified"],
            is_delete_marker=True,
        )
        for m in page.get("DeleteMarkers", [])
    )
    return records


class S3VersionStore:
    """
    S3 adapter for the version store port.

    Configuration parameters
    ------------------------
    region : str | None
        AWS region name. Falls back to the profile/environment default.
    profile : str | None
        AWS credentials profile, as with `export AWS_PROFILE=<profile>`.
    endpoint_url : str | None
        Custom endpoint for S3-compatible stores.
    concurrency : int
        Size of the worker thread pool and HTTP connection pool.
    client : Any | None
        Pre-built boto3 S3 client; when given, the settings above that only
        affect client construction are ignored.
    """

    def __init__(
        self,
        region: Optional[str] = None,
        profile: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        concurrency: int = DEFAULT_CONCURRENCY,
        client: Optional[Any] = None,
    ) -> None:
        self.region = region or None
        self.profile = profile or None
        self.endpoint_url = endpoint_url or None
        self.concurrency = concurrency

        if client is None:
            session = boto3.session.Session(
                profile_name=self.profile, region_name=self.region
            )
            client = session.client(
                "s3",
                endpoint_url=self.endpoint_url,
                config=BotoConfig(max_pool_connections=concurrency),
            )
        self._client = client
        self._executor = ThreadPoolExecutor(
            max_workers=concurrency, thread_name_prefix="s3rollback"
        )

        logger.debug(
            "S3VersionStore initialised (region=%s, profile=%s, endpoint=%s, concurrency=%d)",
            self.region,
            self.profile,
            self.endpoint_url,
            concurrency,
        )

    async def _run(self, fn: Callable[[], T]) -> T:
        return await asyncio.get_event_loop().run_in_executor(self._executor, fn)

    async def list_versions(self, container: str, key: str) -> list[VersionRecord]:
        def _list() -> list[VersionRecord]:
            paginator = self._client.get_paginator("list_object_versions")
            records: list[VersionRecord] = []
            for page in paginator.paginate(Bucket=container, Prefix=key):
                page_records = _records_from_page(page)
                records.extend(page_records)
                # Keys arrive in lexical order, and key sorts before every
                # other key it prefixes, so a sibling means key is exhausted.
                if any(r.key != key for r in page_records):
                    break
            return records

        records = await self._run(_list)
        logger.debug(
            "list_object_versions s3://%s/%s returned %d record(s)",
            container,
            key,
            len(records),
        )
        return records

    async def delete_version(self, container: str, key: str, version_id: str) -> None:
        def _delete() -> None:
            self._client.delete_object(Bucket=container, Key=key, VersionId=version_id)

        await self._run(_delete)
        logger.debug("delete_object s3://%s/%s version=%s", container, key, version_id)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
