"""
Data model for the Task API.

Defines the ``Task`` record returned by the store and the helpers that
translate between MongoDB documents and the JSON representation served
by the API.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class TaskStatus(str, Enum):
    """Well-known task statuses. Other non-empty values are accepted too."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"


DEFAULT_STATUS = TaskStatus.PENDING.value

TITLE_MAX_LENGTH = 200
STATUS_MAX_LENGTH = 50

# Fields a client may set; everything else is assigned by the store.
MUTABLE_FIELDS = ("title", "description", "status")


def utcnow() -> datetime:
    """
    Return the current UTC time truncated to millisecond precision.

    BSON datetimes only keep milliseconds, so truncating up front means a
    freshly created record compares equal to the one read back later.
    """
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


def ensure_utc(value: datetime) -> datetime:
    """Normalize datetimes to timezone-aware UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class Task:
    """
    Task record representing a unit of work.

    Attributes:
        id: Opaque unique identifier (string form of a MongoDB ObjectId).
        title: Short, non-empty title describing the task.
        description: Optional detailed description.
        status: Current status, ``"pending"`` unless set otherwise.
        created_at: Timestamp when the task was created.
        updated_at: Timestamp when the task was last modified.
    """

    id: str
    title: str
    description: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Task":
        """
        Build a Task from a raw MongoDB document.

        MongoDB returns naive datetimes unless the client is tz-aware, so
        timestamps are normalized to UTC here.
        """
        return cls(
            id=str(document["_id"]),
            title=document["title"],
            description=document.get("description"),
            status=document.get("status") or DEFAULT_STATUS,
            created_at=ensure_utc(document["created_at"]),
            updated_at=ensure_utc(document["updated_at"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the task to its JSON representation.

        Returns:
            Dictionary containing all task fields, timestamps as ISO-8601
            UTC strings.
        """
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "created_at": ensure_utc(self.created_at).isoformat(),
            "updated_at": ensure_utc(self.updated_at).isoformat(),
        }

    def __repr__(self) -> str:
        """Return string representation of the task."""
        return f"<Task {self.id}: {self.title}>"
