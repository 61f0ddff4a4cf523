# src/tasktrack/cli/menu.py

"""
Interactive numbered-menu front-end.

Two menus share one loop:
- guest menu (Register / Login / Exit) while nobody is logged in,
- task menu for the logged-in user.

The logged-in user lives on an explicit Session object that every handler
receives. Handler failures never end the session: TaskTrackError is shown as
a one-line "Error: <message>", anything else is logged with a traceback.
"""

from __future__ import annotations

import getpass
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from ..core.errors import TaskTrackError, ValidationError
from ..core.state import AppState
from ..tasks.task_models import Category, TaskStatus, TaskView
from ..users.user_models import User

Prompt = Callable[[str], str]
Emitter = Callable[[str], None]
MenuHandler = Callable[["Session"], None]

logger = logging.getLogger(__name__)


@dataclass
class Session:
    state: AppState
    ask: Prompt = input
    ask_secret: Prompt = getpass.getpass
    emit: Emitter = print

    user: User | None = None
    running: bool = True

    def require_user(self) -> User:
        if self.user is None:
            # Task menu handlers are only reachable after login.
            raise RuntimeError("No user is logged in")
        return self.user


@dataclass
class _MenuItem:
    key: str
    label: str
    handler: MenuHandler


@dataclass
class Menu:
    """Numbered menu: renders its items and routes a choice to the handler."""

    title: str
    items: dict[str, _MenuItem] = field(default_factory=dict)

    def register(self, key: str, label: str, handler: MenuHandler) -> None:
        self.items[key] = _MenuItem(key=key, label=label, handler=handler)

    def render(self, session: Session) -> str:
        user_name = session.user.name if session.user is not None else ""
        lines = ["", self.title.format(user=user_name)]
        lines.extend(f"{item.key}) {item.label}" for item in self.items.values())
        return "\n".join(lines)

    def handle(self, session: Session, choice: str) -> None:
        item = self.items.get((choice or "").strip())
        if item is None:
            session.emit("Invalid choice.")
            return

        try:
            item.handler(session)
        except (EOFError, KeyboardInterrupt):
            raise
        except TaskTrackError as e:
            session.emit(f"Error: {e.message}")
        except Exception:
            logger.exception("Menu handler %r crashed.", item.label)
            session.emit("Error: internal error (see log for details)")


# ---- input / output helpers ----


def _ts_local(ts: float) -> str:
    return datetime.fromtimestamp(ts).astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _ask_int(session: Session, label: str) -> int:
    raw = session.ask(label).strip()
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Not a number: {raw or '(empty)'}") from None


def _print_tasks(session: Session, title: str, tasks: list[TaskView]) -> None:
    if not tasks:
        session.emit("No tasks found.")
        return
    session.emit(f"\n--- {title} ---")
    for t in tasks:
        session.emit(f"ID: {t.id} | User: {t.owner_name} | Task: {t.name}")
        session.emit(f"Status: {t.status_name} | Category: {t.category_name}")
        session.emit(f"Created: {_ts_local(t.created_at)} | Updated: {_ts_local(t.updated_at)}")
        session.emit("---")


def _legend(entries) -> str:
    return ", ".join(f"{e.code}={e.display_name}" for e in entries)


# ---- guest menu ----


def cmd_register(session: Session) -> None:
    session.emit("\n--- Register ---")
    name = session.ask("Username: ")
    secret = session.ask_secret("Password: ")
    session.state.auth.register(name, secret)
    session.emit("Registration successful!")


def cmd_login(session: Session) -> None:
    session.emit("\n--- Login ---")
    name = session.ask("Username: ")
    if not name.strip():
        raise ValidationError("Username cannot be empty")
    secret = session.ask_secret("Password: ")
    if not secret.strip():
        raise ValidationError("Password cannot be empty")
    session.user = session.state.auth.authenticate(name, secret)
    session.emit(f"Welcome, {session.user.name}!")


def cmd_exit(session: Session) -> None:
    session.emit("Goodbye!")
    session.running = False


# ---- task menu ----


def cmd_add_task(session: Session) -> None:
    user = session.require_user()
    name = session.ask("Task name: ")
    if not name.strip():
        raise ValidationError("Task name cannot be empty")

    session.emit(f"Categories: {_legend(session.state.task_service.list_categories())}")
    category = Category.parse(session.ask("Category: "))

    task = session.state.task_service.create(name, user.id, category)
    session.emit(f"Task added successfully! (ID: {task.id})")


def cmd_edit_name(session: Session) -> None:
    user = session.require_user()
    task_id = _ask_int(session, "Task ID: ")
    new_name = session.ask("New task name: ")
    session.state.task_service.rename(task_id, new_name, user.id)
    session.emit("Task updated successfully!")


def cmd_resume(session: Session) -> None:
    user = session.require_user()
    startable = session.state.task_service.list_resumable(user.id)
    if not startable:
        session.emit("(No startable tasks. Only Ready to Pick or Blocked tasks can be started.)")
        return

    session.emit("\n--- Start Task (Ready to Pick / Blocked) ---")
    for t in startable:
        session.emit(f"[{t.id}] {t.name} ({t.status_name})")

    task_id = _ask_int(session, "Task ID: ")
    session.state.task_service.mark_in_progress(task_id, user.id)
    session.emit("Task marked as in progress!")


def cmd_complete(session: Session) -> None:
    user = session.require_user()
    task_id = _ask_int(session, "Task ID: ")
    session.state.task_service.mark_completed(task_id, user.id)
    session.emit("Task marked as completed!")


def cmd_block(session: Session) -> None:
    user = session.require_user()
    task_id = _ask_int(session, "Task ID: ")
    session.state.task_service.mark_blocked(task_id, user.id)
    session.emit("Task marked as blocked!")


def cmd_delete(session: Session) -> None:
    user = session.require_user()
    task_id = _ask_int(session, "Task ID: ")
    answer = session.ask(f"Delete task {task_id}? (y/N): ").strip().lower()
    if answer not in ("y", "yes"):
        session.emit("Cancelled.")
        return
    session.state.task_service.delete(task_id, user.id)
    session.emit("Task deleted successfully!")


def cmd_view(session: Session) -> None:
    user = session.require_user()
    _print_tasks(session, "My Tasks", session.state.task_service.list_active(user.id))


def cmd_filter(session: Session) -> None:
    user = session.require_user()
    service = session.state.task_service
    session.emit("Filter by: 1=Status, 2=Category")
    kind = session.ask("Choose: ").strip()

    if kind == "1":
        session.emit(f"Status: {_legend(service.list_statuses())}")
        status = TaskStatus.parse(session.ask("Status: "))
        _print_tasks(session, "Filtered Tasks", service.list_by_status(user.id, status))
    elif kind == "2":
        session.emit(f"Categories: {_legend(service.list_categories())}")
        category = Category.parse(session.ask("Category: "))
        _print_tasks(session, "Filtered Tasks", service.list_by_category(user.id, category))
    else:
        session.emit("Invalid choice.")


def cmd_reassign(session: Session) -> None:
    user = session.require_user()
    task_id = _ask_int(session, "Task ID: ")
    target = session.state.auth.resolve(session.ask("New owner username: "))
    session.state.task_service.reassign(task_id, target.id, user.id)
    session.emit(f"Task reassigned to {target.name}.")


def cmd_logout(session: Session) -> None:
    session.user = None
    session.emit("Logged out.")


def build_guest_menu() -> Menu:
    menu = Menu(title="=== Collaborative To-Do ===")
    menu.register("1", "Register", cmd_register)
    menu.register("2", "Login", cmd_login)
    menu.register("3", "Exit", cmd_exit)
    return menu


def build_task_menu() -> Menu:
    menu = Menu(title="=== Task Menu (User: {user}) ===")
    menu.register("1", "Add Task", cmd_add_task)
    menu.register("2", "Edit Task Name", cmd_edit_name)
    menu.register("3", "Start/Resume Task", cmd_resume)
    menu.register("4", "Mark Completed", cmd_complete)
    menu.register("5", "Mark Blocked", cmd_block)
    menu.register("6", "Delete Task", cmd_delete)
    menu.register("7", "View My Tasks", cmd_view)
    menu.register("8", "Filter My Tasks (by status/category)", cmd_filter)
    menu.register("9", "Reassign Task", cmd_reassign)
    menu.register("0", "Logout", cmd_logout)
    return menu


def run_menu_loop(session: Session) -> None:
    """Run until Exit is chosen or input ends (EOF / Ctrl+C)."""
    guest_menu = build_guest_menu()
    task_menu = build_task_menu()
    app_name = str(getattr(session.state.settings, "app_name", "tasktrack"))

    logger.info("Menu loop started.")
    session.emit(f"Welcome to {app_name}!")

    while session.running:
        menu = task_menu if session.user is not None else guest_menu
        session.emit(menu.render(session))
        try:
            choice = session.ask("Choose: ")
            menu.handle(session, choice)
        except (EOFError, KeyboardInterrupt):
            logger.info("Input closed, leaving menu loop.")
            session.emit("")
            break

    session.user = None
    logger.info("Menu loop finished.")
