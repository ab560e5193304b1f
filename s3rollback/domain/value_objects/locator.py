"""
Object Locator Value Object

Architectural Intent:
- Immutable reference to one object (bucket + key) in the versioned store
- Built only through parse_locator(), which validates the S3 URI shape and
  refuses locators that point at a different bucket than the run's target
"""

import re
from dataclasses import dataclass

from s3rollback.domain.errors import ContainerMismatch, MalformedLocator

LOCATOR_SCHEME = "s3"

_LOCATOR_RE = re.compile(r"^s3://([^/]+)/(.+)$")


@dataclass(frozen=True)
class ObjectLocator:
    """
    Value Object representing a validated s3://bucket/key reference.
    """
    container: str
    key: str

    def __str__(self) -> str:
        return f"{LOCATOR_SCHEME}://{self.container}/{self.key}"


def parse_locator(container: str, locator: str) -> ObjectLocator:
    """
    Parses 's3://bucket/path/to/key' into an ObjectLocator.

    Raises MalformedLocator when the string is not an S3 URI with a non-empty
    key, and ContainerMismatch when the bucket segment is not `container`.
    """
    uri = locator.strip()
    match = _LOCATOR_RE.match(uri)
    if not match:
        raise MalformedLocator(
            f'Invalid URI "{uri}". Should be of form s3://bucket/path/to/file'
        )

    bucket_in_uri, key = match.groups()
    if bucket_in_uri != container:
        raise ContainerMismatch(
            f'Bucket specified in URI "{uri}" does not match bucket '
            f'"{container}" passed in parameters'
        )

    return ObjectLocator(container=container, key=key)


def parse_key(container: str, locator: str) -> str:
    return parse_locator(container, locator).key
