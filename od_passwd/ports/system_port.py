"""
System Port - Interface to the host operating system.

Implementations:
- PosixSystemAdapter: sysctl, getuid and child processes on the local host
"""

from abc import ABC, abstractmethod
from typing import Sequence


class SystemPort(ABC):
    """Port: Query host state and run helper programs."""

    @abstractmethod
    def is_single_user(self) -> bool:
        """
        Check if the host booted into single-user mode.

        Returns:
            True in single-user mode, False otherwise or if unknown
        """
        pass

    @abstractmethod
    def is_privileged(self) -> bool:
        """Check if the calling process runs as the super-user."""
        pass

    @abstractmethod
    def run(self, path: str, args: Sequence[str]) -> int:
        """
        Run a program and wait for it to exit.

        Args:
            path: Executable path
            args: Arguments (without argv[0])

        Returns:
            Exit status (negative if killed by a signal)

        Raises:
            OSError: If the program could not be started
        """
        pass
