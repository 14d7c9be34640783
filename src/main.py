"""Main entry point for the command-line focus timer.

This module provides an interactive command-line interface for running study
sessions against the local store. It signs the user in, lets them pick a
module and a duration, then counts down one second at a time. Ctrl+C pauses
the countdown and offers to resume, finish, reset or quit.
"""

import getpass
import logging
import sys
import time
from typing import Callable, List, Optional, Sequence

from config import DEFAULT_SESSION_MINUTES, SESSION_DURATION_CHOICES
from core.context import StudyContext
from core.dependencies import create_entity_store
from core.exceptions import PersistenceError, StudyTrackerError
from core.logging_config import setup_logging
from schemas.module import Module
from utils.entity_store import EntityStore
from utils.metrics import session_history, student_metrics, teacher_metrics
from utils.module_manager import ModuleManager
from utils.study_accounting import (
    StudySessionRecorder,
    StudyTimer,
    TimerOutcome,
    TimerState,
    format_clock,
)
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)

PAUSE_ACTIONS = ("resume", "done", "reset", "quit")


def print_banner() -> None:
    """Print program banner."""
    print("=" * 60)
    print("  Study Tracker - Focus Timer")
    print("=" * 60)
    print()


def ask(prompt: str, input_fn: Callable[[str], str] = input) -> str:
    return input_fn(prompt).strip()


def choose(
    prompt: str,
    options: Sequence[str],
    input_fn: Callable[[str], str] = input,
) -> int:
    """Print numbered options and return the index picked by the user."""
    for i, option in enumerate(options, start=1):
        print(f"  {i}. {option}")
    while True:
        answer = ask(prompt, input_fn)
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return int(answer) - 1
        print(f"Please enter a number between 1 and {len(options)}.")


def authenticate(
    user_manager: UserManager,
    input_fn: Callable[[str], str] = input,
    password_fn: Callable[[str], str] = getpass.getpass,
) -> StudyContext:
    """Sign in or sign up until a user is remembered.

    Reuses the remembered user from a previous run when there is one.
    """
    context = user_manager.current_context()
    if context is not None:
        print(f"Welcome back, {context.user.username}!")
        return context

    while True:
        action = choose("Sign in or create an account: ", ["Sign in", "Sign up"], input_fn)
        email = ask("Email: ", input_fn)
        password = password_fn("Password: ")
        try:
            if action == 0:
                user = user_manager.sign_in(email, password)
            else:
                username = ask("Username: ", input_fn)
                role = ("student", "teacher")[
                    choose("Role: ", ["Student", "Teacher"], input_fn)
                ]
                user = user_manager.sign_up(email, password, username, role)
        except StudyTrackerError as e:
            print(f"Error: {e}")
            continue
        print(f"Signed in as {user.username} ({user.role}).")
        return StudyContext(user=user)


def choose_module(
    modules: List[Module], input_fn: Callable[[str], str] = input
) -> Optional[Module]:
    if not modules:
        print("No modules available yet.")
        return None
    print("Modules:")
    index = choose("Module: ", [m.title for m in modules], input_fn)
    return modules[index]


def choose_duration(input_fn: Callable[[str], str] = input) -> int:
    """Ask for a session length; an empty answer keeps the default."""
    choices = ", ".join(str(m) for m in SESSION_DURATION_CHOICES)
    while True:
        answer = ask(
            f"Duration in minutes ({choices}) [{DEFAULT_SESSION_MINUTES}]: ", input_fn
        )
        if not answer:
            return DEFAULT_SESSION_MINUTES
        if answer.isdigit() and int(answer) in SESSION_DURATION_CHOICES:
            return int(answer)
        print(f"Please choose one of: {choices}")


def _finish(timer: StudyTimer) -> Optional[TimerOutcome]:
    try:
        return timer.finish()
    except PersistenceError as e:
        logger.error("Failed to save study session: %s", e)
        print("Could not save the session. The timer is paused; try 'done' again.")
        return None


def run_countdown(
    timer: StudyTimer,
    sleep: Callable[[float], None] = time.sleep,
    input_fn: Callable[[str], str] = input,
) -> Optional[TimerOutcome]:
    """Drive a started timer one second at a time until it ends.

    Args:
        timer: A timer in the RUNNING state.
        sleep: Blocking one-second wait, replaceable in tests.
        input_fn: Reads the action chosen while paused.

    Returns:
        The outcome of a completed or finished run, or None if it was reset.

    Raises:
        SystemExit: If the user chose to quit; the run is discarded.
    """
    while True:
        if timer.state is TimerState.RUNNING:
            try:
                sleep(1)
                outcome = timer.tick()
            except KeyboardInterrupt:
                timer.pause()
                print()
                continue
            except PersistenceError as e:
                print()
                logger.error("Failed to save study session: %s", e)
                print("Could not save the session. The timer is paused; try 'done' again.")
                continue
            print(f"\r{format_clock(timer.remaining_seconds)}", end="", flush=True)
            if outcome is not None:
                print()
                return outcome
            continue

        action = ask(f"Paused at {format_clock(timer.remaining_seconds)} "
                     f"[{'/'.join(PAUSE_ACTIONS)}]: ", input_fn).lower()
        if action == "resume":
            timer.resume()
        elif action == "done":
            outcome = _finish(timer)
            if outcome is not None:
                return outcome
        elif action == "reset":
            timer.reset()
            return None
        elif action == "quit":
            timer.reset()
            raise SystemExit(0)
        else:
            print(f"Unknown action: {action!r}")


def report_outcome(outcome: Optional[TimerOutcome]) -> None:
    if outcome is None:
        print("Timer reset. Nothing was recorded.")
    elif outcome.session is not None:
        print(f"Session saved: {format_clock(outcome.elapsed_seconds)} of focus.")
    else:
        print("Session too short to record.")


def print_stats(store: EntityStore, context: StudyContext) -> None:
    if context.is_teacher:
        metrics = teacher_metrics(store, context.user_id)
        print(f"Modules published: {metrics.modules_published}")
        print(f"Total views:       {metrics.total_views}")
        return
    metrics = student_metrics(store, context.user_id)
    print(f"Total focus:     {metrics.total_focus_minutes} min")
    print(f"Modules studied: {metrics.modules_studied}")
    for entry in session_history(store, context.user_id)[:10]:
        print(f"  {entry.timestamp}  {entry.module_title}  "
              f"{format_clock(entry.duration)}")


def focus_session(
    store: EntityStore,
    context: StudyContext,
    input_fn: Callable[[str], str] = input,
) -> None:
    """Pick a module and duration, then run one countdown."""
    module = choose_module(ModuleManager(store).list_modules(), input_fn)
    if module is None:
        return
    timer = StudyTimer(
        StudySessionRecorder(store),
        context,
        module_id=module.id,
        minutes=choose_duration(input_fn),
    )
    timer.start()
    print(f"Focusing on '{module.title}'. Press Ctrl+C to pause.")
    report_outcome(run_countdown(timer, input_fn=input_fn))


def interactive_session(store: EntityStore) -> None:
    """Main menu loop."""
    print_banner()
    user_manager = UserManager(store)
    context = authenticate(user_manager)

    while True:
        print()
        action = choose(
            "> ", ["Start focus session", "View stats", "Sign out", "Quit"]
        )
        try:
            if action == 0:
                focus_session(store, context)
            elif action == 1:
                print_stats(store, context)
            elif action == 2:
                user_manager.sign_out()
                print("Signed out.")
                context = authenticate(user_manager)
            else:
                return
        except StudyTrackerError as e:
            logger.error("Operation failed: %s", e)
            print(f"Error: {e}")


def main() -> None:
    setup_logging()
    try:
        interactive_session(create_entity_store("local"))
    except (KeyboardInterrupt, EOFError):
        print("\nBye.")
        sys.exit(0)


if __name__ == "__main__":
    main()
