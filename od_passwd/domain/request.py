"""
Request Domain Model - Who changes whose password, and where.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class PasswordChangeRequest:
    """
    Password change request entity.

    Domain rules:
    - username is required
    - authname defaults to username (self-service change)
    - location is an explicit directory node name; None means search
    """
    username: str
    location: Optional[str] = None
    authname: Optional[str] = None

    def __post_init__(self):
        if not self.username:
            raise ValueError("username is required")
        if not self.authname:
            self.authname = self.username

    @property
    def change_pass_on_self(self) -> bool:
        """True when the authenticating identity is the target user."""
        return self.authname == self.username

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "username": self.username,
            "location": self.location,
            "authname": self.authname,
            "change_pass_on_self": self.change_pass_on_self,
        }


@dataclass
class PasswordChangeResult:
    """Outcome of one run of the password flow."""
    username: str
    changed: bool
    needs_auth: bool = False
    location: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "username": self.username,
            "changed": self.changed,
            "needs_auth": self.needs_auth,
            "location": self.location,
        }
