"""Custom exception classes for the Study Tracker backend.

This module defines application-specific exceptions following Google Python
Style Guide. Every error surfaces to the action that triggered it; none of
them is retried automatically.
"""


class StudyTrackerError(Exception):
    """Base exception for all Study Tracker errors."""

    pass


class DuplicateUserError(StudyTrackerError):
    """Raised when registering (or renaming to) an email that is taken."""

    def __init__(self, email: str):
        """Initialize the exception.

        Args:
            email: The email address that is already registered.
        """
        self.email = email
        super().__init__("User already exists with this email.")


class InvalidCredentialsError(StudyTrackerError):
    """Raised when no user matches both email and password."""

    def __init__(self):
        super().__init__("Invalid email or password.")


class ProfileNotFoundError(StudyTrackerError):
    """Raised when an authenticated identity has no stored profile."""

    def __init__(self, user_id: str):
        """Initialize the exception.

        Args:
            user_id: The ID of the user whose profile was not found.
        """
        self.user_id = user_id
        super().__init__(f"Profile '{user_id}' not found")


class NotAuthenticatedError(StudyTrackerError):
    """Raised when a mutating operation is attempted without a current user."""

    def __init__(self):
        super().__init__("No user logged in")


class PermissionDeniedError(StudyTrackerError):
    """Raised when the current user may not act on a resource."""

    pass


class LearningModuleNotFoundError(StudyTrackerError):
    """Raised when a referenced learning module does not exist."""

    def __init__(self, module_id: str):
        """Initialize the exception.

        Args:
            module_id: The ID of the module that was not found.
        """
        self.module_id = module_id
        super().__init__(f"Module '{module_id}' not found")


class PersistenceError(StudyTrackerError):
    """Raised when the storage backend fails to read or write."""

    pass


class ConfigurationError(StudyTrackerError):
    """Raised when there is a configuration error."""

    pass


class ValidationError(StudyTrackerError):
    """Raised when data validation fails."""

    pass
