"""
Cutoff Value Object

Architectural Intent:
- Wraps the rollback threshold as a timezone-aware datetime
- Versions strictly after the cutoff are rollback candidates; a version
  modified exactly at the cutoff is kept

Design Decisions:
- A cutoff without an explicit offset is read as local time, the same way
  the operator reads the timestamps shown in the console
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime

from s3rollback.domain.errors import InvalidCutoff


@dataclass(frozen=True)
class Cutoff:
    moment: datetime

    def __post_init__(self) -> None:
        if self.moment.tzinfo is None:
            raise InvalidCutoff("Cutoff must be timezone-aware")

    def __str__(self) -> str:
        return self.moment.isoformat()

    def is_before(self, timestamp: datetime) -> bool:
        """True when `timestamp` is strictly later than the cutoff."""
        if timestamp.tzinfo is None:
            timestamp = timestamp.astimezone()
        return timestamp > self.moment

    @staticmethod
    def parse(text: str) -> "Cutoff":
        """
        Parses 'YYYY-MM-DDTHH:MM:SS' (optionally with fractional seconds or a
        UTC offset) into a Cutoff.
        """
        value = text.strip()
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(value)
        except ValueError:
            raise InvalidCutoff(
                f'Invalid datetime "{text}". Should be of form YYYY-MM-DDTHH:MM:SS'
            ) from None

        if moment.tzinfo is None:
            moment = moment.astimezone()
        return Cutoff(moment)
