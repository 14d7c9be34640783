"""Profile dashboard routes."""

from fastapi import APIRouter, Depends

from api.errors import http_error
from api.routes.auth import get_current_context
from core.context import StudyContext
from core.dependencies import EntityStoreDep
from core.exceptions import StudyTrackerError
from schemas.metrics import ProfileMetricsResponse
from utils.metrics import session_history, student_metrics, teacher_metrics

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("/metrics", response_model=ProfileMetricsResponse, summary="Dashboard metrics")
def get_metrics(
    store: EntityStoreDep,
    context: StudyContext = Depends(get_current_context),
) -> ProfileMetricsResponse:
    """Role-specific metrics for the signed-in user.

    Students get focus totals and their session history; teachers get the
    number of modules they published and sessions recorded on them.
    """
    try:
        if context.is_teacher:
            return ProfileMetricsResponse(
                user=context.user.public_dict(),
                teacher=teacher_metrics(store, context.user_id),
            )
        return ProfileMetricsResponse(
            user=context.user.public_dict(),
            student=student_metrics(store, context.user_id),
            history=session_history(store, context.user_id),
        )
    except StudyTrackerError as e:
        raise http_error(e) from e
