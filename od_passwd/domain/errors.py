"""
Error Domain Model - Structured directory-service errors.
"""

from typing import Optional, List
from enum import Enum


EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_NO_USERNAME = -1  # no target user; the CLI prints usage


class ErrorCode(Enum):
    """Directory error categories the password flow reacts to."""
    SESSION_DAEMON_NOT_RUNNING = "session_daemon_not_running"
    SESSION_FAILED = "session_failed"
    NODE_UNKNOWN = "node_unknown"
    RECORD_NOT_FOUND = "record_not_found"
    AUTHENTICATION_FAILED = "authentication_failed"
    NOT_AUTHORIZED = "not_authorized"
    CREDENTIALS_FAILED = "credentials_failed"
    OTHER = "other"


class PasswdError(Exception):
    """Base error for the password change flow."""


class DirectoryError(PasswdError):
    """
    Error reported by the directory service.

    Carries three independently optional strings, rendered in order:
    description, failure reason, recovery suggestion.
    """

    def __init__(
        self,
        code: ErrorCode = ErrorCode.OTHER,
        description: Optional[str] = None,
        failure_reason: Optional[str] = None,
        recovery_suggestion: Optional[str] = None,
    ):
        self.code = code
        self.description = description
        self.failure_reason = failure_reason
        self.recovery_suggestion = recovery_suggestion
        super().__init__(description or code.value)

    def render(self, progname: str) -> str:
        """
        Format the error for display.

        Args:
            progname: Program name used as prefix of the description

        Returns:
            Single line with every available part, two-space separated
        """
        parts: List[str] = []
        if self.description:
            parts.append(f"{progname}: {self.description}")
        if self.failure_reason:
            parts.append(self.failure_reason)
        if self.recovery_suggestion:
            parts.append(self.recovery_suggestion)
        return "  ".join(parts)

    def to_dict(self):
        """Serialize to dict."""
        return {
            "code": self.code.value,
            "description": self.description,
            "failure_reason": self.failure_reason,
            "recovery_suggestion": self.recovery_suggestion,
        }


class DaemonLoadError(PasswdError):
    """The local directory daemon could not be loaded."""

    def __init__(
        self,
        path: str,
        status: Optional[int] = None,
        directory_error: Optional[DirectoryError] = None,
    ):
        self.path = path
        self.status = status
        self.directory_error = directory_error
        if status is None:
            message = f"{path}: could not be run"
        else:
            message = f"{path}: exited with status {status}"
        super().__init__(message)


class UnknownUserError(PasswdError):
    """Record lookup returned neither a record nor an error."""

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Unknown user name '{username}'.")


class UnreadableSecretError(PasswdError):
    """Terminal input could not be decoded into a password."""

    def __init__(self, prompt: str):
        self.prompt = prompt
        super().__init__(f"{prompt} input could not be decoded")
