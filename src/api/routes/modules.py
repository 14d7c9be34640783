"""Learning module routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status

from api.errors import http_error
from api.routes.auth import get_current_context
from config import MAX_DOCX_SIZE
from core.context import StudyContext
from core.dependencies import ModuleManagerDep
from core.exceptions import StudyTrackerError
from schemas.module import ImportedDocument, ModuleRequest, ModuleResponse, ModuleUpdate
from utils.document_converter import extract_docx_text
from utils.module_manager import export_module_text

router = APIRouter(prefix="/api/modules", tags=["Module"])


@router.get("", response_model=List[ModuleResponse], summary="List modules")
def list_modules(
    module_manager: ModuleManagerDep,
    q: Optional[str] = Query(default=None, description="Filter by title substring."),
    context: StudyContext = Depends(get_current_context),
) -> List[ModuleResponse]:
    """List modules newest first, optionally filtered by title."""
    try:
        modules = module_manager.list_modules(q)
    except StudyTrackerError as e:
        raise http_error(e) from e
    return [ModuleResponse.from_module(m) for m in modules]


@router.post(
    "",
    response_model=ModuleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish module",
)
def create_module(
    req: ModuleRequest,
    module_manager: ModuleManagerDep,
    context: StudyContext = Depends(get_current_context),
) -> ModuleResponse:
    try:
        module = module_manager.create_module(
            context, req.title, req.description, req.content
        )
    except StudyTrackerError as e:
        raise http_error(e) from e
    return ModuleResponse.from_module(module)


@router.post("/import-docx", response_model=ImportedDocument, summary="Import DOCX")
def import_docx(
    file: UploadFile = File(...),
    context: StudyContext = Depends(get_current_context),
) -> ImportedDocument:
    """Extract the text of an uploaded Word document.

    The text is returned for the client to place into a module's content;
    nothing is stored.

    Raises:
        HTTPException: 413 if the upload is too large, 400 if unreadable.
    """
    payload = file.file.read()
    if len(payload) > MAX_DOCX_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {MAX_DOCX_SIZE} bytes.",
        )
    try:
        content = extract_docx_text(payload)
    except StudyTrackerError as e:
        raise http_error(e) from e
    return ImportedDocument(filename=file.filename, content=content)


@router.get("/{module_id}", response_model=ModuleResponse, summary="Read module")
def get_module(
    module_id: str,
    module_manager: ModuleManagerDep,
    context: StudyContext = Depends(get_current_context),
) -> ModuleResponse:
    try:
        module = module_manager.get_module(module_id)
    except StudyTrackerError as e:
        raise http_error(e) from e
    return ModuleResponse.from_module(module)


@router.patch("/{module_id}", response_model=ModuleResponse, summary="Edit module")
def update_module(
    module_id: str,
    req: ModuleUpdate,
    module_manager: ModuleManagerDep,
    context: StudyContext = Depends(get_current_context),
) -> ModuleResponse:
    """Edit a module the signed-in teacher owns.

    Raises:
        HTTPException: 403 for non-owners, 404 for unknown modules.
    """
    try:
        module = module_manager.update_module(context, module_id, req)
    except StudyTrackerError as e:
        raise http_error(e) from e
    return ModuleResponse.from_module(module)


@router.delete(
    "/{module_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete module"
)
def delete_module(
    module_id: str,
    module_manager: ModuleManagerDep,
    context: StudyContext = Depends(get_current_context),
) -> Response:
    try:
        module_manager.delete_module(context, module_id)
    except StudyTrackerError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{module_id}/download", summary="Download module as text")
def download_module(
    module_id: str,
    module_manager: ModuleManagerDep,
    context: StudyContext = Depends(get_current_context),
) -> Response:
    """Return the module as a plain-text attachment."""
    try:
        module = module_manager.get_module(module_id)
    except StudyTrackerError as e:
        raise http_error(e) from e
    filename, body = export_module_text(module)
    return Response(
        content=body,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
