"""
Version Selection Service

Architectural Intent:
- Pure domain logic deciding which versions of an object a rollback removes
- No I/O; the fetcher feeds it whatever the store reported
"""

from typing import Iterable

from s3rollback.domain.value_objects.cutoff import Cutoff
from s3rollback.domain.value_objects.version import RollbackTarget, VersionRecord


def select_rollback_targets(
    key: str,
    versions: Iterable[VersionRecord],
    cutoff: Cutoff,
    include_delete_markers: bool = False,
) -> list[RollbackTarget]:
    """
    Return the versions of `key` modified strictly after `cutoff`, oldest first.

    Listings are prefix-based, so versions belonging to other keys that merely
    share the prefix are dropped. Delete markers are skipped unless
    `include_delete_markers` is set.
    """
    selected = [
        v
        for v in versions
        if v.key == key
        and (include_delete_markers or not v.is_delete_marker)
        and cutoff.is_before(v.last_modified)
    ]
    selected.sort(key=lambda v: v.last_modified)
    return [v.to_target() for v in selected]
