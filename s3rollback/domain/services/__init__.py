"""
Domain Services Package

Architectural Intent:
- Contains domain services implementing rollback business rules
"""

from s3rollback.domain.services.version_selection import select_rollback_targets

__all__ = ["select_rollback_targets"]
