from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class VersionRecord:
    """
    Value Object describing one historical version reported by the store.
    """
    key: str
    version_id: str
    last_modified: datetime
    is_delete_marker: bool = False

    def to_target(self) -> "RollbackTarget":
        return RollbackTarget(key=self.key, version_id=self.version_id)


@dataclass(frozen=True)
class RollbackTarget:
    """
    Value Object naming the exact object version a rollback will delete.
    """
    key: str
    version_id: str

    def __str__(self) -> str:
        return f"{self.key}@{self.version_id}"
