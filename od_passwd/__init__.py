"""
od-passwd - Directory Password Changer

Hexagonal architecture for changing a user's password through the system
directory service (Open Directory on macOS).

Usage:
    from od_passwd import PasswordChanger, PasswordChangeRequest
    from od_passwd.adapters import (
        OpenDirectoryAdapter, PosixSystemAdapter, TerminalPromptAdapter,
    )

    changer = PasswordChanger(
        directory=OpenDirectoryAdapter(),
        system=PosixSystemAdapter(),
        prompt=TerminalPromptAdapter(),
    )

    # Prompts for the old password (when required) and the new one
    result = changer.run(PasswordChangeRequest(username="alice"))
"""

__version__ = "0.1.0"

from od_passwd.sdk.client import PasswordChanger, od_passwd
from od_passwd.config import Settings
from od_passwd.domain.request import PasswordChangeRequest, PasswordChangeResult
from od_passwd.domain.secret import Secret
from od_passwd.domain.errors import PasswdError, DirectoryError

__all__ = [
    "PasswordChanger",
    "od_passwd",
    "Settings",
    "PasswordChangeRequest",
    "PasswordChangeResult",
    "Secret",
    "PasswdError",
    "DirectoryError",
]
