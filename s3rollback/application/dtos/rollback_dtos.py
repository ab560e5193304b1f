"""
Rollback DTOs

Architectural Intent:
- Data Transfer Objects for the rollback use case boundary
- Input validation at the application boundary
- The report is the only thing the presentation layer needs to render a
  summary and choose an exit status
"""

from dataclasses import dataclass, field
from typing import Optional

from s3rollback.domain.entities.rollback_run import ErrorRecord, RollbackPhase
from s3rollback.domain.errors import InvalidInput
from s3rollback.domain.value_objects.cutoff import Cutoff
from s3rollback.domain.value_objects.version import RollbackTarget


@dataclass(frozen=True)
class RollbackRequest:
    container: str
    locators: tuple[str, ...]
    cutoff: Cutoff
    dry_run: bool = False
    verify: bool = False
    abort_on_fetch_errors: bool = False

    def __post_init__(self) -> None:
        if not self.container:
            raise InvalidInput("container cannot be empty")
        object.__setattr__(self, "locators", tuple(self.locators))


@dataclass(frozen=True)
class RollbackReport:
    container: str
    phase: RollbackPhase
    object_count: int
    targets: tuple[RollbackTarget, ...] = ()
    dry_run: bool = False
    deletions_attempted: int = 0
    deletions_succeeded: int = 0
    successful_reads: int = 0
    errors: tuple[ErrorRecord, ...] = field(default_factory=tuple)
    remaining: Optional[int] = None
    aborted: bool = False

    @property
    def targets_found(self) -> int:
        return len(self.targets)

    @property
    def exit_code(self) -> int:
        if self.aborted:
            return 1
        if not self.dry_run and self.errors:
            return 1
        return 0
