# tests/test_menu.py

from __future__ import annotations

from tasktrack.cli.menu import Menu, Session, build_task_menu, run_menu_loop
from tasktrack.tasks.task_models import Category, TaskStatus

from .fakes import ScriptedConsole


def _session(state, console: ScriptedConsole) -> Session:
    return Session(state=state, ask=console.ask, ask_secret=console.ask, emit=console.emit)


def test_menu_routes_choice_and_reports_unknown(state) -> None:
    console = ScriptedConsole()
    session = _session(state, console)
    called = []

    menu = Menu(title="=== Test ===")
    menu.register("1", "One", lambda s: called.append(s))

    menu.handle(session, " 1 ")
    menu.handle(session, "7")

    assert called == [session]
    assert console.output == ["Invalid choice."]


def test_menu_renders_user_in_title(state, auth) -> None:
    session = _session(state, ScriptedConsole())
    session.user = auth.register("alice", "pw1")

    rendered = build_task_menu().render(session)
    assert "=== Task Menu (User: alice) ===" in rendered
    assert "0) Logout" in rendered


def test_unexpected_handler_error_is_contained(state) -> None:
    console = ScriptedConsole()
    session = _session(state, console)

    def boom(_session):
        raise KeyError("oops")

    menu = Menu(title="t")
    menu.register("1", "Boom", boom)
    menu.handle(session, "1")

    assert console.errors() == ["Error: internal error (see log for details)"]


def test_register_login_add_view_logout_exit(state, task_store) -> None:
    console = ScriptedConsole.with_answers(
        "1", "alice", "pw1",                # register
        "2", "alice", "pw1",                # login
        "1", "Write report", "1",           # add task (Work)
        "7",                                # view
        "0",                                # logout
        "3",                                # exit
    )
    session = _session(state, console)

    run_menu_loop(session)

    assert "Registration successful!" in console.output
    assert "Welcome, alice!" in console.output
    assert "Task added successfully! (ID: 1)" in console.output
    assert "ID: 1 | User: alice | Task: Write report" in console.output
    assert "Status: Ready to Pick | Category: Work" in console.output
    assert "Logged out." in console.output
    assert console.output[-1] == "Goodbye!"
    assert console.errors() == []
    assert session.user is None
    assert session.running is False

    task = task_store.find_by_id(1)
    assert task.category is Category.WORK


def test_service_errors_are_one_line_and_session_continues(state) -> None:
    console = ScriptedConsole.with_answers(
        "2", "ghost", "x",                  # failed login
        "1", "", "pw",                      # failed register
        "1", "bob", "pw",
        "1", "bob", "pw",                   # duplicate
        "3",
    )
    run_menu_loop(_session(state, console))

    assert console.errors() == [
        "Error: Invalid username or password",
        "Error: Username cannot be empty",
        "Error: Username already exists",
    ]
    assert console.output[-1] == "Goodbye!"


def test_task_actions_through_menu(state, auth, service) -> None:
    alice = auth.register("alice", "pw1")
    bob = auth.register("bob", "pw2")
    mine = service.create("Mine", alice.id, Category.WORK)
    theirs = service.create("Theirs", bob.id, Category.LEISURE)

    console = ScriptedConsole.with_answers(
        "5", str(mine.id),                          # block
        "3", str(mine.id),                          # resume (lists startable first)
        "4", str(mine.id),                          # complete
        "3",                                        # nothing startable left
        "2", str(theirs.id), "hijack",              # rename someone else's task
        "2", "abc",                                 # not a number
        "6", str(mine.id), "n",                     # delete, cancelled
        "6", str(mine.id), "y",                     # delete
        "2", str(mine.id), "again",                 # rename deleted task
    )
    session = _session(state, console)
    session.user = alice

    run_menu_loop(session)

    assert "Task marked as blocked!" in console.output
    assert f"[{mine.id}] Mine (Blocked)" in console.output
    assert "Task marked as in progress!" in console.output
    assert "Task marked as completed!" in console.output
    assert "(No startable tasks. Only Ready to Pick or Blocked tasks can be started.)" in console.output
    assert "Cancelled." in console.output
    assert "Task deleted successfully!" in console.output
    assert console.errors() == [
        "Error: Task not found or unauthorized",
        "Error: Not a number: abc",
        "Error: Cannot modify deleted task",
    ]
    assert service.list_by_status(alice.id, TaskStatus.DELETED)[0].id == mine.id


def test_filter_and_reassign_through_menu(state, auth, service) -> None:
    alice = auth.register("alice", "pw1")
    bob = auth.register("bob", "pw2")
    work = service.create("Work item", alice.id, Category.WORK)
    fun = service.create("Fun item", alice.id, Category.LEISURE)
    service.delete(fun.id, alice.id)

    console = ScriptedConsole.with_answers(
        "8", "1", "5",                              # filter status Deleted
        "8", "2", "work",                           # filter category by name
        "8", "2", "7",                              # unknown category
        "9", str(work.id), "nobody",                # reassign to unknown user
        "9", str(work.id), "bob",                   # reassign to bob
        "7",                                        # alice now has nothing active
    )
    session = _session(state, console)
    session.user = alice

    run_menu_loop(session)

    assert "ID: %d | User: alice | Task: Fun item" % fun.id in console.output
    assert "Status: Deleted | Category: Leisure" in console.output
    assert "ID: %d | User: alice | Task: Work item" % work.id in console.output
    assert "Task reassigned to bob." in console.output
    assert "No tasks found." in console.output
    assert console.errors() == [
        "Error: Unknown category: 7",
        "Error: No such user: nobody",
    ]
    assert [t.id for t in service.list_active(bob.id)] == [work.id]


def test_eof_ends_loop_cleanly(state) -> None:
    console = ScriptedConsole()
    session = _session(state, console)
    run_menu_loop(session)
    assert session.user is None
    assert console.prompts == ["Choose: "]


def test_login_rejects_blank_fields_before_checking_credentials(state, auth) -> None:
    auth.register("alice", "pw1")
    console = ScriptedConsole.with_answers(
        "2", "   ",                         # blank username, no password prompt
        "2", "alice", "  ",                 # blank password
        "3",
    )
    session = _session(state, console)

    run_menu_loop(session)

    assert console.errors() == [
        "Error: Username cannot be empty",
        "Error: Password cannot be empty",
    ]
    assert console.prompts.count("Password: ") == 1
    assert session.user is None
