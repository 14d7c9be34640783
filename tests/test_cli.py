"""Tests for the command-line focus timer."""

import pytest

import main
from config import DEFAULT_SESSION_MINUTES
from core.exceptions import PersistenceError
from tests.conftest import make_user
from utils.entity_store import EntityKind
from utils.study_accounting import StudySessionRecorder, StudyTimer, TimerState


def scripted(*answers):
    """An input function returning the given answers in order."""
    queue = list(answers)

    def input_fn(prompt):
        return queue.pop(0)

    return input_fn


def interrupt_after(seconds: int):
    """A sleep function that raises KeyboardInterrupt on call ``seconds + 1``."""
    calls = {"count": 0}

    def sleep(_):
        calls["count"] += 1
        if calls["count"] == seconds + 1:
            raise KeyboardInterrupt

    return sleep


@pytest.fixture
def running_timer(local_store) -> StudyTimer:
    learner = make_user(local_store, "cli@school.edu", "student")
    timer = StudyTimer(StudySessionRecorder(local_store), learner, module_id="1", minutes=15)
    timer.start()
    return timer


def test_countdown_runs_to_completion(local_store, running_timer) -> None:
    outcome = main.run_countdown(running_timer, sleep=lambda _: None, input_fn=scripted())

    assert outcome.state is TimerState.COMPLETED
    assert outcome.elapsed_seconds == 15 * 60
    assert len(local_store.list(EntityKind.SESSIONS)) == 1


def test_interrupt_then_done_records_elapsed(local_store, running_timer) -> None:
    outcome = main.run_countdown(running_timer, sleep=interrupt_after(20), input_fn=scripted("done"))

    assert outcome.state is TimerState.COMPLETED
    assert outcome.session.duration == 20


def test_interrupt_then_resume(running_timer) -> None:
    sleep = interrupt_after(3)

    outcome = main.run_countdown(running_timer, sleep=sleep, input_fn=scripted("bogus", "resume"))

    assert outcome.state is TimerState.COMPLETED
    assert outcome.elapsed_seconds == 15 * 60


def test_interrupt_then_reset_discards(local_store, running_timer) -> None:
    outcome = main.run_countdown(running_timer, sleep=interrupt_after(60), input_fn=scripted("reset"))

    assert outcome is None
    assert running_timer.state is TimerState.IDLE
    assert local_store.list(EntityKind.SESSIONS) == []


def test_interrupt_then_quit_exits(local_store, running_timer) -> None:
    with pytest.raises(SystemExit):
        main.run_countdown(running_timer, sleep=interrupt_after(60), input_fn=scripted("quit"))

    assert local_store.list(EntityKind.SESSIONS) == []


def test_failed_save_can_be_retried(local_store, running_timer, monkeypatch) -> None:
    original_create = local_store.create
    attempts = []

    def flaky_create(kind, data):
        attempts.append(kind)
        if len(attempts) == 1:
            raise PersistenceError("disk full")
        return original_create(kind, data)

    monkeypatch.setattr(local_store, "create", flaky_create)

    outcome = main.run_countdown(
        running_timer, sleep=interrupt_after(30), input_fn=scripted("done", "done")
    )

    assert len(attempts) == 2
    assert outcome.session.duration == 30


def test_failed_save_at_zero_keeps_run(local_store, running_timer, monkeypatch) -> None:
    original_create = local_store.create
    attempts = []

    def flaky_create(kind, data):
        attempts.append(kind)
        if len(attempts) == 1:
            raise PersistenceError("disk full")
        return original_create(kind, data)

    monkeypatch.setattr(local_store, "create", flaky_create)

    outcome = main.run_countdown(running_timer, sleep=lambda _: None, input_fn=scripted("done"))

    assert len(attempts) == 2
    assert outcome.state is TimerState.COMPLETED
    assert outcome.session.duration == 15 * 60


@pytest.mark.parametrize(
    "answers,expected",
    [(("",), DEFAULT_SESSION_MINUTES), (("45",), 45), (("10", "abc", "60"), 60)],
)
def test_choose_duration(answers, expected) -> None:
    assert main.choose_duration(scripted(*answers)) == expected


def test_authenticate_signs_up(local_store) -> None:
    manager = main.UserManager(local_store)

    context = main.authenticate(
        manager,
        input_fn=scripted("2", "new@school.edu", "Newbie", "1"),
        password_fn=lambda _: "pw",
    )

    assert context.user.email == "new@school.edu"
    assert context.is_student
    assert manager.current_context().user_id == context.user_id


def test_authenticate_retries_bad_password(local_store) -> None:
    make_user(local_store, "known@school.edu", "teacher", password="right")
    passwords = iter(["wrong", "right"])

    context = main.authenticate(
        main.UserManager(local_store),
        input_fn=scripted("1", "known@school.edu", "1", "known@school.edu"),
        password_fn=lambda _: next(passwords),
    )

    assert context.is_teacher
