"""
Prompt Port - Interface to the user's terminal.

Implementations:
- TerminalPromptAdapter: getpass-based prompts on the controlling terminal
"""

from abc import ABC, abstractmethod
from typing import Optional
from od_passwd.domain.secret import Secret


class PromptPort(ABC):
    """Port: Read secrets and show messages."""

    @abstractmethod
    def read_secret(self, prompt: str) -> Optional[Secret]:
        """
        Read a password without echo.

        Args:
            prompt: Prompt label, e.g. "New password:"

        Returns:
            Secret (possibly empty), or None on end-of-input

        Raises:
            UnreadableSecretError: Input could not be decoded
        """
        pass

    @abstractmethod
    def say(self, message: str):
        """Write an informational line to standard output."""
        pass

    @abstractmethod
    def warn(self, message: str):
        """Write an error line to standard error."""
        pass
