"""Study session routes.

Clients run the focus timer themselves and post the elapsed seconds when it
completes or is stopped; runs at or below the minimum length are discarded.
"""

from typing import List

from fastapi import APIRouter, Depends

from api.errors import http_error
from api.routes.auth import get_current_context
from core.context import StudyContext
from core.dependencies import EntityStoreDep, ModuleManagerDep, SessionRecorderDep
from core.exceptions import StudyTrackerError
from schemas.study_session import (
    RecordSessionRequest,
    RecordSessionResponse,
    SessionHistoryEntry,
)
from utils.metrics import session_history

router = APIRouter(prefix="/api/sessions", tags=["Session"])


@router.get("", response_model=List[SessionHistoryEntry], summary="Session history")
def list_sessions(
    store: EntityStoreDep,
    context: StudyContext = Depends(get_current_context),
) -> List[SessionHistoryEntry]:
    """The signed-in user's sessions, newest first, with module titles."""
    try:
        return session_history(store, context.user_id)
    except StudyTrackerError as e:
        raise http_error(e) from e


@router.post("", response_model=RecordSessionResponse, summary="Record timer run")
def record_session(
    req: RecordSessionRequest,
    recorder: SessionRecorderDep,
    module_manager: ModuleManagerDep,
    context: StudyContext = Depends(get_current_context),
) -> RecordSessionResponse:
    """Record a finished timer run.

    Raises:
        HTTPException: 404 if the module does not exist.
    """
    try:
        module_manager.get_module(req.module_id)
        session = recorder.record(context, req.module_id, req.elapsed_seconds)
    except StudyTrackerError as e:
        raise http_error(e) from e
    return RecordSessionResponse(recorded=session is not None, session=session)
