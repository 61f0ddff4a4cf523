# src/tasktrack/tasks/task_service.py

from __future__ import annotations

"""
Task lifecycle service.

Every mutation runs in two phases:
1. lookup + ownership check: a missing task and a task owned by someone else
   both raise NotFoundOrUnauthorized, so callers cannot discover other
   users' task ids;
2. guards for the specific operation, then a single store update that also
   refreshes updated_at.

State machine:

    READY_TO_PICK --resume--> IN_PROGRESS
    BLOCKED       --resume--> IN_PROGRESS
    any live      --block---> BLOCKED
    any live      --complete> COMPLETED
    any           --delete--> DELETED (terminal)

"Live" means anything but DELETED. Once deleted, a task rejects every
mutation with DeletedTaskError except delete itself, which is an idempotent
no-op transition.
"""

import logging

from ..core.errors import (
    DeletedTaskError,
    InvalidTransitionError,
    NotFoundOrUnauthorized,
    ValidationError,
)
from ..core.ports import TaskStore
from .task_models import Category, LookupEntry, Task, TaskStatus, TaskView

logger = logging.getLogger(__name__)

RESUMABLE_STATUSES = frozenset({TaskStatus.READY_TO_PICK, TaskStatus.BLOCKED})


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Task name cannot be empty")
    return cleaned


def _as_category(category: Category | int) -> Category:
    try:
        return Category(int(category))
    except ValueError:
        raise ValidationError(f"Unknown category: {category}") from None


def _as_status(status: TaskStatus | int) -> TaskStatus:
    try:
        return TaskStatus(int(status))
    except ValueError:
        raise ValidationError(f"Unknown status: {status}") from None


class TaskService:
    def __init__(self, tasks: TaskStore) -> None:
        self._tasks = tasks

    # ---- guards ----

    def _owned_task(self, task_id: int, acting_user_id: int) -> Task:
        task = self._tasks.find_by_id(task_id)
        if task is None or task.owner_id != acting_user_id:
            logger.debug("Task id=%s not visible to user id=%s", task_id, acting_user_id)
            raise NotFoundOrUnauthorized()
        return task

    @staticmethod
    def _ensure_live(task: Task) -> None:
        if task.status is TaskStatus.DELETED:
            logger.debug("Mutation rejected on deleted task id=%s", task.id)
            raise DeletedTaskError()

    @staticmethod
    def _applied(updated: Task | None) -> Task:
        # The row vanished between lookup and update.
        if updated is None:
            raise NotFoundOrUnauthorized()
        return updated

    def _transition(self, task_id: int, acting_user_id: int, target: TaskStatus) -> Task:
        task = self._owned_task(task_id, acting_user_id)
        self._ensure_live(task)
        updated = self._applied(self._tasks.update_status(task.id, target))
        logger.info(
            "Task id=%s status %s -> %s",
            task.id,
            task.status.db_name,
            updated.status.db_name,
        )
        return updated

    # ---- mutations ----

    def create(self, name: str, owner_id: int, category: Category) -> Task:
        cleaned = _clean_name(name)
        task = self._tasks.create_task(
            cleaned, TaskStatus.READY_TO_PICK, owner_id, _as_category(category)
        )
        logger.info("Task id=%s created owner=%s", task.id, task.owner_id)
        return task

    def rename(self, task_id: int, new_name: str, acting_user_id: int) -> Task:
        task = self._owned_task(task_id, acting_user_id)
        self._ensure_live(task)
        cleaned = _clean_name(new_name)
        updated = self._applied(self._tasks.update_name(task.id, cleaned))
        logger.info("Task id=%s renamed", task.id)
        return updated

    def reassign(self, task_id: int, new_owner_id: int, acting_user_id: int) -> Task:
        task = self._owned_task(task_id, acting_user_id)
        self._ensure_live(task)
        updated = self._applied(self._tasks.update_owner(task.id, new_owner_id))
        logger.info("Task id=%s reassigned %s -> %s", task.id, task.owner_id, updated.owner_id)
        return updated

    def mark_in_progress(self, task_id: int, acting_user_id: int) -> Task:
        task = self._owned_task(task_id, acting_user_id)
        self._ensure_live(task)
        if task.status not in RESUMABLE_STATUSES:
            logger.debug("Resume rejected task id=%s status=%s", task.id, task.status.db_name)
            raise InvalidTransitionError()
        updated = self._applied(self._tasks.update_status(task.id, TaskStatus.IN_PROGRESS))
        logger.info("Task id=%s status %s -> in_progress", task.id, task.status.db_name)
        return updated

    resume = mark_in_progress

    def mark_completed(self, task_id: int, acting_user_id: int) -> Task:
        return self._transition(task_id, acting_user_id, TaskStatus.COMPLETED)

    def mark_blocked(self, task_id: int, acting_user_id: int) -> Task:
        return self._transition(task_id, acting_user_id, TaskStatus.BLOCKED)

    def delete(self, task_id: int, acting_user_id: int) -> Task:
        """Soft delete. Deleting an already deleted task is accepted."""
        task = self._owned_task(task_id, acting_user_id)
        updated = self._applied(self._tasks.update_status(task.id, TaskStatus.DELETED))
        logger.info("Task id=%s deleted (was %s)", task.id, task.status.db_name)
        return updated

    # ---- reads (scoped to the caller's own tasks) ----

    def list_active(self, user_id: int) -> list[TaskView]:
        return self._tasks.list_for_owner(user_id)

    def list_by_status(self, user_id: int, status: TaskStatus) -> list[TaskView]:
        return self._tasks.list_for_owner(user_id, status=_as_status(status))

    def list_by_category(self, user_id: int, category: Category) -> list[TaskView]:
        return self._tasks.list_for_owner(user_id, category=_as_category(category))

    def list_resumable(self, user_id: int) -> list[TaskView]:
        return [t for t in self._tasks.list_for_owner(user_id) if t.status in RESUMABLE_STATUSES]

    def list_statuses(self) -> list[LookupEntry]:
        return self._tasks.list_statuses()

    def list_categories(self) -> list[LookupEntry]:
        return self._tasks.list_categories()
