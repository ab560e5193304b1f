"""
Rollback Run Module

Architectural Intent:
- RollbackRun aggregate is the consistency boundary for one invocation
- Owns the phase state machine, the cumulative counters and the append-only
  error list; nothing here outlives the run
- Workers never touch the aggregate directly: they return Outcome values,
  and the orchestrator merges a whole phase's outcomes at once

Phases:
    IDLE -> PARSING_INPUT -> FETCHING_TARGETS -> DRY_RUN_REPORTING -> DONE
                                              -> DELETING -> [VERIFYING] -> DONE
    PARSING_INPUT / FETCHING_TARGETS -> FAILED
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, Iterable, Optional, TypeVar

from s3rollback.domain.errors import InvalidPhaseTransition

T = TypeVar("T")


class RollbackPhase(Enum):
    IDLE = auto()
    PARSING_INPUT = auto()
    FETCHING_TARGETS = auto()
    DRY_RUN_REPORTING = auto()
    DELETING = auto()
    VERIFYING = auto()
    DONE = auto()
    FAILED = auto()


_TRANSITIONS: dict[RollbackPhase, frozenset[RollbackPhase]] = {
    RollbackPhase.IDLE: frozenset({RollbackPhase.PARSING_INPUT}),
    RollbackPhase.PARSING_INPUT: frozenset(
        {RollbackPhase.FETCHING_TARGETS, RollbackPhase.FAILED}
    ),
    RollbackPhase.FETCHING_TARGETS: frozenset(
        {
            RollbackPhase.DRY_RUN_REPORTING,
            RollbackPhase.DELETING,
            RollbackPhase.FAILED,
        }
    ),
    RollbackPhase.DRY_RUN_REPORTING: frozenset({RollbackPhase.DONE}),
    RollbackPhase.DELETING: frozenset({RollbackPhase.VERIFYING, RollbackPhase.DONE}),
    RollbackPhase.VERIFYING: frozenset({RollbackPhase.DONE}),
    RollbackPhase.DONE: frozenset(),
    RollbackPhase.FAILED: frozenset(),
}


@dataclass(frozen=True)
class ErrorRecord:
    """A failed listing (version_id is None) or a failed deletion."""
    container: str
    key: str
    version_id: Optional[str]
    error: BaseException

    def __str__(self) -> str:
        version = f" (version {self.version_id})" if self.version_id else ""
        return f"s3://{self.container}/{self.key}{version}: {self.error!r}"


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Tagged worker result: either a value or an ErrorRecord, never both."""
    value: Optional[T] = None
    error: Optional[ErrorRecord] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @staticmethod
    def success(value: T) -> "Outcome[T]":
        return Outcome(value=value)

    @staticmethod
    def failure(record: ErrorRecord) -> "Outcome[T]":
        return Outcome(error=record)


@dataclass
class RunCounters:
    successful_deletions: int = 0
    successful_reads: int = 0

    def reset_reads(self) -> None:
        self.successful_reads = 0


class RollbackRun:
    __slots__ = ("_container", "_phase", "_counters", "_errors")

    def __init__(self, container: str) -> None:
        self._container = container
        self._phase = RollbackPhase.IDLE
        self._counters = RunCounters()
        self._errors: list[ErrorRecord] = []

    @property
    def container(self) -> str:
        return self._container

    @property
    def phase(self) -> RollbackPhase:
        return self._phase

    @property
    def counters(self) -> RunCounters:
        return self._counters

    @property
    def errors(self) -> tuple[ErrorRecord, ...]:
        return tuple(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def advance(self, phase: RollbackPhase) -> None:
        if phase not in _TRANSITIONS[self._phase]:
            raise InvalidPhaseTransition(
                f"Cannot move rollback run from {self._phase.name} to {phase.name}"
            )
        self._phase = phase

    def fail(self) -> None:
        self.advance(RollbackPhase.FAILED)

    def record_errors(self, records: Iterable[ErrorRecord]) -> int:
        before = len(self._errors)
        self._errors.extend(records)
        return len(self._errors) - before

    def merge_reads(self, outcomes: Iterable[Outcome]) -> None:
        self._counters.successful_reads += sum(1 for o in outcomes if o.ok)

    def merge_deletions(self, outcomes: Iterable[Outcome]) -> None:
        self._counters.successful_deletions += sum(1 for o in outcomes if o.ok)

    def __repr__(self) -> str:
        return (
            f"RollbackRun(container={self._container}, phase={self._phase.name}, "
            f"counters={self._counters}, errors={len(self._errors)})"
        )
