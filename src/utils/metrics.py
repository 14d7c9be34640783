"""Dashboard metrics.

All figures are recomputed from the current store contents on every call.
"""

from typing import Iterable, List

from config import UNKNOWN_MODULE_TITLE
from schemas.metrics import StudentMetrics, TeacherMetrics
from schemas.module import Module
from schemas.study_session import SessionHistoryEntry, StudySession
from utils.entity_store import EntityKind, EntityStore


def summarize_sessions(sessions: Iterable[StudySession]) -> StudentMetrics:
    sessions = list(sessions)
    total_seconds = sum(s.duration for s in sessions)
    return StudentMetrics(
        total_focus_seconds=total_seconds,
        total_focus_minutes=total_seconds // 60,
        modules_studied=len({s.module_id for s in sessions}),
        session_count=len(sessions),
    )


def summarize_teaching(
    teacher_id: str, modules: Iterable[Module], sessions: Iterable[StudySession]
) -> TeacherMetrics:
    """Count a teacher's modules and every session, by any student, on them."""
    owned_ids = {m.id for m in modules if m.teacher_id == teacher_id}
    return TeacherMetrics(
        modules_published=len(owned_ids),
        total_views=sum(1 for s in sessions if s.module_id in owned_ids),
    )


def student_metrics(store: EntityStore, student_id: str) -> StudentMetrics:
    sessions = store.list(EntityKind.SESSIONS)
    return summarize_sessions(s for s in sessions if s.student_id == student_id)


def teacher_metrics(store: EntityStore, teacher_id: str) -> TeacherMetrics:
    return summarize_teaching(
        teacher_id, store.list(EntityKind.MODULES), store.list(EntityKind.SESSIONS)
    )


def session_history(store: EntityStore, student_id: str) -> List[SessionHistoryEntry]:
    """A student's sessions, newest first, labelled with module titles."""
    titles = {m.id: m.title for m in store.list(EntityKind.MODULES)}
    return [
        SessionHistoryEntry(
            **s.model_dump(),
            module_title=titles.get(s.module_id, UNKNOWN_MODULE_TITLE),
        )
        for s in store.list(EntityKind.SESSIONS)
        if s.student_id == student_id
    ]
