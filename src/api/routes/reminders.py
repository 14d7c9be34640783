"""Review reminder routes."""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from api.errors import http_error
from api.routes.auth import get_current_context
from core.context import StudyContext
from core.dependencies import ReminderManagerDep
from core.exceptions import StudyTrackerError
from schemas.reminder import ReviewReminder, ScheduleReminderRequest

router = APIRouter(prefix="/api/reminders", tags=["Reminder"])


@router.get("", response_model=List[ReviewReminder], summary="Pending reminders")
def list_reminders(
    reminder_manager: ReminderManagerDep,
    context: StudyContext = Depends(get_current_context),
) -> List[ReviewReminder]:
    try:
        return reminder_manager.list_pending(context.user_id)
    except StudyTrackerError as e:
        raise http_error(e) from e


@router.post(
    "",
    response_model=ReviewReminder,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule reminder",
)
def schedule_reminder(
    req: ScheduleReminderRequest,
    reminder_manager: ReminderManagerDep,
    context: StudyContext = Depends(get_current_context),
) -> ReviewReminder:
    """Schedule a review of a module.

    Raises:
        HTTPException: 404 for unknown modules, 400 for unparseable times.
    """
    try:
        return reminder_manager.schedule(context, req.module_id, req.scheduled_time)
    except StudyTrackerError as e:
        raise http_error(e) from e


@router.delete(
    "/{reminder_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete reminder",
)
def delete_reminder(
    reminder_id: str,
    reminder_manager: ReminderManagerDep,
    context: StudyContext = Depends(get_current_context),
) -> Response:
    """Delete a reminder. Unknown ids succeed without effect."""
    try:
        reminder_manager.delete(context, reminder_id)
    except StudyTrackerError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
