"""Translation of application errors into HTTP errors."""

import logging
from typing import Dict, Type

from fastapi import HTTPException, status

from core.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    LearningModuleNotFoundError,
    NotAuthenticatedError,
    PermissionDeniedError,
    PersistenceError,
    ProfileNotFoundError,
    StudyTrackerError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: Dict[Type[StudyTrackerError], int] = {
    DuplicateUserError: status.HTTP_409_CONFLICT,
    InvalidCredentialsError: status.HTTP_401_UNAUTHORIZED,
    NotAuthenticatedError: status.HTTP_401_UNAUTHORIZED,
    ProfileNotFoundError: status.HTTP_404_NOT_FOUND,
    LearningModuleNotFoundError: status.HTTP_404_NOT_FOUND,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PersistenceError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def http_error(exc: StudyTrackerError) -> HTTPException:
    """Build the HTTPException a route should raise for ``exc``."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            status_code = code
            break
    if status_code >= 500:
        logger.error("Request failed: %s", exc)
    return HTTPException(status_code=status_code, detail=str(exc))
