"""
SDK - High-level password change flow.
"""

from od_passwd.sdk.client import PasswordChanger, od_passwd

__all__ = ["PasswordChanger", "od_passwd"]
