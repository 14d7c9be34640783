"""User management utilities.

This module provides registration, sign-in, sign-out and profile editing on
top of the entity store, including bcrypt password hashing.
"""

import logging
from typing import List, Optional

import bcrypt

from config import BCRYPT_ROUNDS
from core.context import StudyContext, require_user
from core.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    ProfileNotFoundError,
)
from schemas.user import ProfileUpdate, User, UserRole, normalize_email
from utils.entity_store import EntityData, EntityKind, EntityStore, validate_data

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


class UserManager:
    """Manages user profiles and authentication over an EntityStore."""

    def __init__(self, store: EntityStore):
        """Initialize UserManager.

        Args:
            store: Entity store holding the profiles collection.
        """
        self.store = store

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > _BCRYPT_MAX_BYTES:
            logger.warning(
                "Password exceeds %d bytes, truncating", _BCRYPT_MAX_BYTES
            )
            password_bytes = password_bytes[:_BCRYPT_MAX_BYTES]

        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string, or None for accounts
                without a local password.

        Returns:
            True if password matches, False otherwise.
        """
        if not hashed_password:
            return False
        password_bytes = plain_password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def list_users(self) -> List[User]:
        return self.store.list(EntityKind.PROFILES)

    def find_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (case-insensitive).

        Args:
            email: Email address to look up.

        Returns:
            User object if found, None otherwise.
        """
        try:
            wanted = normalize_email(email)
        except ValueError:
            return None
        for user in self.list_users():
            if user.email == wanted:
                return user
        return None

    def sign_up(
        self,
        email: str,
        password: str,
        username: str,
        role: UserRole,
        remember: bool = True,
    ) -> User:
        """Register a new user and remember them as signed in.

        Args:
            email: Email address, unique across users.
            password: Plain text password.
            username: Display name.
            role: 'teacher' or 'student'.
            remember: Whether to store the user as the current user
                snapshot. The HTTP API passes False and uses tokens instead.

        Returns:
            Created User object.

        Raises:
            DuplicateUserError: If a user with this email already exists.
            ValidationError: If a field is malformed.
        """
        if self.find_by_email(email) is not None:
            raise DuplicateUserError(email)

        user = self.store.create(
            EntityKind.PROFILES,
            {
                "email": email,
                "username": username,
                "role": role,
                "password_hash": self.hash_password(password),
            },
        )
        if remember:
            self.store.remember_user(user)
        logger.info("Created user: %s (%s)", user.id, user.role)
        return user

    def sign_in(self, email: str, password: str, remember: bool = True) -> User:
        """Authenticate by email and password and remember the user.

        Raises:
            InvalidCredentialsError: If no user matches both email and password.
        """
        user = self.find_by_email(email)
        if user is None or not self.verify_password(password, user.password_hash):
            raise InvalidCredentialsError()
        if remember:
            self.store.remember_user(user)
        logger.info("User signed in: %s", user.id)
        return user

    def sign_out(self) -> None:
        self.store.forget_user()

    def get_profile(self, user_id: str) -> User:
        """Get the stored profile for an authenticated identity.

        Raises:
            ProfileNotFoundError: If no profile has this id.
        """
        user = self.store.get(EntityKind.PROFILES, user_id)
        if user is None:
            raise ProfileNotFoundError(user_id)
        return user

    def current_context(self) -> Optional[StudyContext]:
        """Return a context for the remembered user, if any."""
        user = self.store.remembered_user()
        if user is None:
            return None
        return StudyContext(user=self.get_profile(user.id))

    def update_profile(
        self,
        context: Optional[StudyContext],
        data: EntityData,
        remember: bool = True,
    ) -> User:
        """Edit the signed-in user's username and/or email.

        Args:
            context: The signed-in user.
            data: Partial fields; only ``username`` and ``email`` are accepted.

        Returns:
            The updated User.

        Raises:
            NotAuthenticatedError: If nobody is signed in.
            DuplicateUserError: If the new email belongs to another user.
            ProfileNotFoundError: If the profile no longer exists.
            ValidationError: If a field is unknown or malformed.
        """
        current = require_user(context)
        patch = validate_data(ProfileUpdate, data)
        if patch.email is not None:
            owner = self.find_by_email(patch.email)
            if owner is not None and owner.id != current.id:
                raise DuplicateUserError(patch.email)

        updated = self.store.update(EntityKind.PROFILES, current.id, patch)
        if updated is None:
            raise ProfileNotFoundError(current.id)
        if remember:
            self.store.remember_user(updated)
        logger.info("Updated profile: %s", current.id)
        return updated
