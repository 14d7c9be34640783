"""Study session accounting.

This module turns timer runs into persisted StudySession records. The
``StudySessionRecorder`` owns the minimum-duration rule; ``StudyTimer`` is the
per-run state machine driven by one-second ticks::

    IDLE -> RUNNING -> (PAUSED <-> RUNNING) -> COMPLETED | ABANDONED

Completed and abandoned are reported through ``TimerOutcome``; the timer
itself returns to IDLE at the configured duration afterwards. Elapsed time is
counted in ticks, not wall-clock time, so a suspended process under-counts.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from config import DEFAULT_SESSION_MINUTES, MIN_SESSION_SECONDS, SESSION_DURATION_CHOICES
from core.context import StudyContext, require_user
from core.exceptions import ValidationError
from schemas.study_session import StudySession
from utils.entity_store import EntityKind, EntityStore

logger = logging.getLogger(__name__)


class StudySessionRecorder:
    """Persists completed timer runs that are long enough to count."""

    def __init__(self, store: EntityStore, min_seconds: int = MIN_SESSION_SECONDS):
        """Initialize StudySessionRecorder.

        Args:
            store: Entity store holding the sessions collection.
            min_seconds: Runs of this many seconds or fewer are discarded.
        """
        self.store = store
        self.min_seconds = min_seconds

    def record(
        self,
        context: Optional[StudyContext],
        module_id: str,
        elapsed_seconds: int,
    ) -> Optional[StudySession]:
        """Record a finished run for the signed-in student.

        Args:
            context: The student who ran the timer.
            module_id: The module that was studied.
            elapsed_seconds: Seconds accumulated by the timer.

        Returns:
            The stored StudySession, or None if the run was too short.

        Raises:
            NotAuthenticatedError: If nobody is signed in.
            PersistenceError: If the session could not be stored.
        """
        user = require_user(context)
        if elapsed_seconds <= self.min_seconds:
            logger.info(
                "Discarded %ds run on module %s for %s", elapsed_seconds, module_id, user.id
            )
            return None
        session = self.store.create(
            EntityKind.SESSIONS,
            {"student_id": user.id, "module_id": module_id, "duration": elapsed_seconds},
        )
        logger.info("Recorded %ds session %s for %s", elapsed_seconds, session.id, user.id)
        return session

    def list_sessions(self, student_id: str) -> List[StudySession]:
        """List a student's sessions, newest first."""
        return [
            s for s in self.store.list(EntityKind.SESSIONS) if s.student_id == student_id
        ]


class TimerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


@dataclass
class TimerOutcome:
    state: TimerState
    elapsed_seconds: int
    session: Optional[StudySession] = None


def format_clock(total_seconds: int) -> str:
    """Format seconds as MM:SS."""
    minutes, seconds = divmod(max(total_seconds, 0), 60)
    return f"{minutes:02d}:{seconds:02d}"


class StudyTimer:
    """Countdown timer for one study run on one module."""

    def __init__(
        self,
        recorder: StudySessionRecorder,
        context: Optional[StudyContext],
        module_id: Optional[str] = None,
        minutes: int = DEFAULT_SESSION_MINUTES,
    ):
        self.recorder = recorder
        self.context = context
        self.module_id = module_id
        self.minutes = self._check_minutes(minutes)
        self.state = TimerState.IDLE
        self.remaining_seconds = self.minutes * 60
        self.elapsed_seconds = 0
        self.last_outcome: Optional[TimerOutcome] = None

    @staticmethod
    def _check_minutes(minutes: int) -> int:
        if minutes not in SESSION_DURATION_CHOICES:
            raise ValidationError(
                f"Duration must be one of {SESSION_DURATION_CHOICES} minutes, got {minutes}"
            )
        return minutes

    def _require_state(self, *allowed: TimerState) -> None:
        if self.state not in allowed:
            raise ValidationError(f"Timer is {self.state.value}")

    def select_module(self, module_id: str) -> None:
        self._require_state(TimerState.IDLE)
        self.module_id = module_id

    def set_duration(self, minutes: int) -> None:
        """Pick the countdown length. Only allowed while idle."""
        self._require_state(TimerState.IDLE)
        self.minutes = self._check_minutes(minutes)
        self.remaining_seconds = self.minutes * 60

    def start(self) -> None:
        self._require_state(TimerState.IDLE)
        if not self.module_id:
            raise ValidationError("Please select a module first!")
        self.state = TimerState.RUNNING
        logger.debug("Timer started on module %s for %d min", self.module_id, self.minutes)

    def pause(self) -> None:
        self._require_state(TimerState.RUNNING)
        self.state = TimerState.PAUSED

    def resume(self) -> None:
        self._require_state(TimerState.PAUSED)
        self.state = TimerState.RUNNING

    def toggle(self) -> None:
        """Start, pause or resume, like a single play/pause button."""
        if self.state is TimerState.RUNNING:
            self.pause()
        elif self.state is TimerState.PAUSED:
            self.resume()
        else:
            self.start()

    def tick(self) -> Optional[TimerOutcome]:
        """Advance one second. Completes the run when the countdown hits zero.

        Returns:
            The outcome if this tick finished the run, otherwise None.
        """
        if self.state is not TimerState.RUNNING:
            return None
        if self.remaining_seconds > 0:
            self.remaining_seconds -= 1
            self.elapsed_seconds += 1
        if self.remaining_seconds == 0:
            return self.finish()
        return None

    def finish(self) -> TimerOutcome:
        """End the run ("Done") and record it if it is long enough.

        If storing the session fails the error propagates and the timer stays
        PAUSED with its elapsed time, so ``finish`` can be called again.

        Raises:
            ValidationError: If the timer is not running or paused.
            PersistenceError: If the session could not be stored.
        """
        self._require_state(TimerState.RUNNING, TimerState.PAUSED)
        self.state = TimerState.PAUSED
        session = self.recorder.record(self.context, self.module_id, self.elapsed_seconds)
        outcome = TimerOutcome(
            state=TimerState.COMPLETED if session else TimerState.ABANDONED,
            elapsed_seconds=self.elapsed_seconds,
            session=session,
        )
        self.reset()
        self.last_outcome = outcome
        return outcome

    def reset(self) -> None:
        """Return to idle at the configured duration, dropping elapsed time."""
        self.state = TimerState.IDLE
        self.remaining_seconds = self.minutes * 60
        self.elapsed_seconds = 0
