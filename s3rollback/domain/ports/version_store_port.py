"""
Version Store Port

Architectural Intent:
- Port interface for a versioned object store (S3 or compatible)
- Abstracts the two backend operations a rollback needs: listing an
  object's version history and permanently deleting one version
- Implemented by the S3 adapter (boto3) and the in-memory adapter

Design Decisions:
- Uses Protocol for structural typing (no inheritance needed)
- list_versions must fully drain backend pagination before returning
- delete_version raises on any failure, including deleting a version that
  no longer exists; callers decide how to record it
"""

from typing import Protocol, runtime_checkable

from s3rollback.domain.value_objects.version import VersionRecord


@runtime_checkable
class VersionStorePort(Protocol):
    """Port for versioned object store operations."""

    async def list_versions(self, container: str, key: str) -> list[VersionRecord]:
        """List every version stored under `key` (prefix match) in `container`."""
        ...

    async def delete_version(self, container: str, key: str, version_id: str) -> None:
        """Permanently delete one version of `key`."""
        ...
