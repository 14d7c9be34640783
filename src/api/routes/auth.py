"""Authentication routes.

This module handles HTTP endpoints for registration, sign-in and the signed-in
user's profile. Identity travels as a JWT bearer token whose subject is the
user id; every protected route receives an explicit StudyContext.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from api.errors import http_error
from config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET_KEY
from core.context import StudyContext
from core.dependencies import UserManagerDep
from core.exceptions import StudyTrackerError
from schemas.user import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    ProfileUpdate,
    RegisterRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# HTTP Bearer token security
security = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    expire = datetime.now(pytz.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    """Verify JWT token from Authorization header.

    Args:
        credentials: HTTP Bearer token credentials.

    Returns:
        Decoded token payload.

    Raises:
        HTTPException: If token is invalid or expired.
    """
    try:
        payload = jwt.decode(
            credentials.credentials, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM]
        )
    except JWTError as e:
        logger.debug("Rejected token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        ) from e
    if payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )
    return payload


def get_current_context(
    user_manager: UserManagerDep,
    token_payload: dict = Depends(verify_token),
) -> StudyContext:
    """Resolve the token subject to a StudyContext.

    Raises:
        HTTPException: 404 if the identity has no profile.
    """
    try:
        user = user_manager.get_profile(token_payload["sub"])
    except StudyTrackerError as e:
        raise http_error(e) from e
    return StudyContext(user=user)


def _login_response(user) -> LoginResponse:
    token = create_access_token(data={"sub": user.id})
    return LoginResponse(user=user.public_dict(), token=token)


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Register")
def register(req: RegisterRequest, user_manager: UserManagerDep) -> LoginResponse:
    """Register a new teacher or student.

    Raises:
        HTTPException: 409 if the email is taken, 400 on malformed fields.
    """
    try:
        user = user_manager.sign_up(
            email=req.email,
            password=req.password,
            username=req.username,
            role=req.role,
            remember=False,
        )
    except StudyTrackerError as e:
        raise http_error(e) from e
    return _login_response(user)


@router.post("/login", summary="Sign in")
def login(req: LoginRequest, user_manager: UserManagerDep) -> LoginResponse:
    """Sign in with email and password.

    Raises:
        HTTPException: 401 if no user matches both email and password.
    """
    try:
        user = user_manager.sign_in(req.email, req.password, remember=False)
    except StudyTrackerError as e:
        raise http_error(e) from e
    return _login_response(user)


@router.post("/logout", summary="Sign out")
def logout() -> dict:
    """Logout endpoint.

    Tokens are stateless, so logging out means the client drops its token.
    """
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse, summary="Current user")
def get_me(context: StudyContext = Depends(get_current_context)) -> CurrentUserResponse:
    return CurrentUserResponse(user=context.user.public_dict())


@router.patch("/me", response_model=CurrentUserResponse, summary="Edit profile")
def update_me(
    req: ProfileUpdate,
    user_manager: UserManagerDep,
    context: StudyContext = Depends(get_current_context),
) -> CurrentUserResponse:
    """Change the signed-in user's username and/or email.

    Raises:
        HTTPException: 409 if the new email belongs to another user.
    """
    try:
        user = user_manager.update_profile(context, req, remember=False)
    except StudyTrackerError as e:
        raise http_error(e) from e
    return CurrentUserResponse(user=user.public_dict())
