"""
Authentication Policy - Decide whether the caller must prove identity.

Pure functions; the caller's privilege is passed in, never read from
process state here.
"""

from typing import Optional, Sequence

TRUSTED_LOCAL_PREFIX = "/Local/"


def canonical_location(
    values: Optional[Sequence[str]],
    searched: Optional[str],
) -> Optional[str]:
    """
    Pick the node location used for the trust check.

    A record found through a search node lives in some concrete node; its
    metanode-location attribute names it. Prefer that over the location the
    caller supplied.

    Args:
        values: Metanode-location attribute values of the record
        searched: Location that was opened (None for a search)

    Returns:
        First attribute value if any, else the searched location
    """
    if values:
        return values[0]
    return searched


def needs_authentication(
    privileged: bool,
    location: Optional[str],
    trusted_prefix: str = TRUSTED_LOCAL_PREFIX,
) -> bool:
    """
    Check if the old password (or authenticator password) must be supplied.

    Only a privileged caller changing a record in the local database may
    skip it. An unknown location is never trusted.
    """
    if not privileged:
        return True
    if not location:
        return True
    return not location.startswith(trusted_prefix)


def old_password_prompt(username: str, authname: str) -> str:
    """Label for the re-authentication prompt."""
    if authname == username:
        return "Old password:"
    return f"Password for {authname}:"
