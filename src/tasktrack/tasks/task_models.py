# src/tasktrack/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from ..core.errors import ValidationError


class TaskStatus(IntEnum):
    """
    Task lifecycle status.

    Values are the ids of the static `status` lookup table.
    DELETED is terminal: the lifecycle service never moves a task out of it.
    """

    READY_TO_PICK = 1
    IN_PROGRESS = 2
    BLOCKED = 3
    COMPLETED = 4
    DELETED = 5

    @property
    def db_name(self) -> str:
        return self.name.lower()

    @property
    def display_name(self) -> str:
        return _STATUS_DISPLAY[self]

    @classmethod
    def from_db(cls, raw: int | str) -> TaskStatus:
        return cls(int(raw))

    @classmethod
    def parse(cls, raw: str) -> TaskStatus:
        """Accept a code ("3"), a db name ("blocked") or a display name ("Ready to Pick")."""
        found = _parse_lookup(cls, raw)
        if found is None:
            raise ValidationError(f"Unknown status: {raw.strip() or '(empty)'}")
        return found


_STATUS_DISPLAY = {
    TaskStatus.READY_TO_PICK: "Ready to Pick",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.BLOCKED: "Blocked",
    TaskStatus.COMPLETED: "Completed",
    TaskStatus.DELETED: "Deleted",
}


class Category(IntEnum):
    WORK = 1
    LEISURE = 2

    @property
    def db_name(self) -> str:
        return self.name.lower()

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_db(cls, raw: int | str) -> Category:
        return cls(int(raw))

    @classmethod
    def parse(cls, raw: str) -> Category:
        found = _parse_lookup(cls, raw)
        if found is None:
            raise ValidationError(f"Unknown category: {raw.strip() or '(empty)'}")
        return found


def _parse_lookup(enum_cls, raw: str):
    s = (raw or "").strip()
    if not s:
        return None
    if s.isdigit():
        try:
            return enum_cls(int(s))
        except ValueError:
            return None
    key = s.lower().replace(" ", "_").replace("-", "_")
    for member in enum_cls:
        if key in (member.db_name, member.display_name.lower().replace(" ", "_")):
            return member
    # "ReadyToPick" / "InProgress"
    squashed = key.replace("_", "")
    for member in enum_cls:
        if squashed == member.db_name.replace("_", ""):
            return member
    return None


@dataclass(slots=True)
class Task:
    id: int
    name: str
    status: TaskStatus
    owner_id: int
    category: Category
    created_at: float
    updated_at: float


@dataclass(frozen=True, slots=True)
class TaskView:
    """A list row: task fields plus joined owner/status/category names."""

    id: int
    name: str
    status: TaskStatus
    owner_id: int
    category: Category
    created_at: float
    updated_at: float

    owner_name: str
    status_name: str
    category_name: str


@dataclass(frozen=True, slots=True)
class LookupEntry:
    """One row of the static status/category tables."""

    code: int
    name: str
    display_name: str
