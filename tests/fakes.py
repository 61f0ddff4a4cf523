# tests/fakes.py

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace

from tasktrack.tasks.task_models import Category, LookupEntry, Task, TaskStatus, TaskView
from tasktrack.users.user_models import User


class TickingClock:
    """Deterministic clock: every call moves time forward by `step` seconds."""

    def __init__(self, start: float = 1_700_000_000.0, step: float = 1.0) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> float:
        self.now += self.step
        return self.now


class InMemoryIdentityStore:
    """
    In-memory IdentityStore used for service unit tests.

    Mirrors the SQLite store contract: absence is None, no business rules.
    """

    def __init__(self, clock: TickingClock | None = None) -> None:
        self.users: dict[int, User] = {}
        self._clock = clock or TickingClock()
        self._next_id = 1

    def create_user(self, name: str, credential_hash: str) -> User:
        user = User(id=self._next_id, name=name, credential_hash=credential_hash, created_at=self._clock())
        self.users[user.id] = user
        self._next_id += 1
        return user

    def find_by_id(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def find_by_name(self, name: str) -> User | None:
        for u in self.users.values():
            if u.name == name:
                return u
        return None

    def count_users(self) -> int:
        return len(self.users)


class InMemoryTaskStore:
    """
    In-memory TaskStore used for service unit tests.

    This avoids SQLite and makes tests purely about lifecycle logic:
    ownership checks, guards, transitions and list filters.
    """

    def __init__(
        self,
        identities: InMemoryIdentityStore | None = None,
        clock: TickingClock | None = None,
    ) -> None:
        self.tasks: dict[int, Task] = {}
        self.identities = identities
        self._clock = clock or TickingClock()
        self._next_id = 1
        self.update_calls = 0

    def create_task(self, name: str, status: TaskStatus, owner_id: int, category: Category) -> Task:
        now = self._clock()
        task = Task(
            id=self._next_id,
            name=name,
            status=status,
            owner_id=owner_id,
            category=category,
            created_at=now,
            updated_at=now,
        )
        self.tasks[task.id] = task
        self._next_id += 1
        return replace(task)

    def find_by_id(self, task_id: int) -> Task | None:
        t = self.tasks.get(task_id)
        return replace(t) if t is not None else None

    def _update(self, task_id: int, **changes) -> Task | None:
        self.update_calls += 1
        t = self.tasks.get(task_id)
        if t is None:
            return None
        self.tasks[task_id] = replace(t, updated_at=self._clock(), **changes)
        return replace(self.tasks[task_id])

    def update_name(self, task_id: int, name: str) -> Task | None:
        return self._update(task_id, name=name)

    def update_status(self, task_id: int, status: TaskStatus) -> Task | None:
        return self._update(task_id, status=status)

    def update_owner(self, task_id: int, owner_id: int) -> Task | None:
        return self._update(task_id, owner_id=owner_id)

    def _owner_name(self, owner_id: int) -> str:
        if self.identities is None:
            return ""
        u = self.identities.find_by_id(owner_id)
        return u.name if u is not None else ""

    def list_for_owner(
        self,
        owner_id: int,
        *,
        status: TaskStatus | None = None,
        category: Category | None = None,
        include_deleted: bool = False,
    ) -> list[TaskView]:
        out: list[TaskView] = []
        for t in self.tasks.values():
            if t.owner_id != owner_id:
                continue
            if status is not None:
                if t.status != status:
                    continue
            elif not include_deleted and t.status == TaskStatus.DELETED:
                continue
            if category is not None and t.category != category:
                continue
            out.append(
                TaskView(
                    id=t.id,
                    name=t.name,
                    status=t.status,
                    owner_id=t.owner_id,
                    category=t.category,
                    created_at=t.created_at,
                    updated_at=t.updated_at,
                    owner_name=self._owner_name(t.owner_id),
                    status_name=t.status.display_name,
                    category_name=t.category.display_name,
                )
            )
        out.sort(key=lambda v: (v.updated_at, v.id), reverse=True)
        return out

    def list_statuses(self) -> list[LookupEntry]:
        return [LookupEntry(int(s), s.db_name, s.display_name) for s in TaskStatus]

    def list_categories(self) -> list[LookupEntry]:
        return [LookupEntry(int(c), c.db_name, c.display_name) for c in Category]

    def count_tasks(self) -> int:
        return len(self.tasks)


@dataclass
class ScriptedConsole:
    """
    Fake terminal for menu tests.

    - answers prompts from a fixed script (EOFError when it runs out)
    - captures every emitted line
    """

    answers: deque[str] = field(default_factory=deque)
    output: list[str] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)

    @classmethod
    def with_answers(cls, *answers: str) -> ScriptedConsole:
        return cls(answers=deque(answers))

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.popleft()

    def emit(self, text: str) -> None:
        self.output.append(text)

    @property
    def text(self) -> str:
        return "\n".join(self.output)

    def errors(self) -> list[str]:
        return [line for line in self.output if line.startswith("Error: ")]
