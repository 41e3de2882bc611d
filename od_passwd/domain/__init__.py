"""
Domain Models - Requests, secrets, errors and the authentication policy.

No infrastructure dependencies. Domain logic only.
"""

from od_passwd.domain.errors import (
    ErrorCode,
    PasswdError,
    DirectoryError,
    DaemonLoadError,
    UnknownUserError,
    UnreadableSecretError,
)
from od_passwd.domain.secret import Secret
from od_passwd.domain.request import PasswordChangeRequest, PasswordChangeResult
from od_passwd.domain.policy import canonical_location, needs_authentication, old_password_prompt

__all__ = [
    "ErrorCode",
    "PasswdError",
    "DirectoryError",
    "DaemonLoadError",
    "UnknownUserError",
    "UnreadableSecretError",
    "Secret",
    "PasswordChangeRequest",
    "PasswordChangeResult",
    "canonical_location",
    "needs_authentication",
    "old_password_prompt",
]
