"""AI tutor chat route."""

from fastapi import APIRouter, Depends

from api.errors import http_error
from api.routes.auth import get_current_context
from core.context import StudyContext
from core.dependencies import ModuleManagerDep, TutorClientDep
from core.exceptions import StudyTrackerError
from schemas.tutor import ChatMessage, ChatRequest, ChatResponse

router = APIRouter(prefix="/api/tutor", tags=["Tutor"])


@router.post("/chat", response_model=ChatResponse, summary="Ask the tutor")
def chat(
    req: ChatRequest,
    module_manager: ModuleManagerDep,
    tutor: TutorClientDep,
    context: StudyContext = Depends(get_current_context),
) -> ChatResponse:
    """Ask the AI tutor a question, optionally about a module.

    When ``module_id`` is given, the module's content is passed to the model
    as context. Model failures come back as an apology reply, not an error.
    """
    module_context = None
    if req.module_id:
        try:
            module_context = module_manager.get_module(req.module_id).content
        except StudyTrackerError as e:
            raise http_error(e) from e

    reply = tutor.get_study_help(req.prompt, module_context)
    return ChatResponse(reply=ChatMessage(role="assistant", text=reply))
