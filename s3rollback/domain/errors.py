"""
Domain Errors

Architectural Intent:
- Single exception hierarchy for all fatal, pre-flight failures
- Per-item backend failures are never raised past the workers; they are
  captured as ErrorRecord values instead (see entities.rollback_run)
"""


class RollbackError(Exception):
    pass


class InvalidInput(RollbackError):
    """Input that makes it unsafe to start any write operation."""


class MalformedLocator(InvalidInput):
    pass


class ContainerMismatch(InvalidInput):
    pass


class InputFileError(InvalidInput):
    pass


class InvalidCutoff(InvalidInput):
    pass


class InvalidPhaseTransition(RollbackError):
    pass
