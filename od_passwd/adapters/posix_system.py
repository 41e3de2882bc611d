"""
POSIX System Adapter - Host queries and helper processes.
"""

import ctypes
import ctypes.util
import logging
import os
import subprocess
from typing import Sequence
from od_passwd.ports.system_port import SystemPort

logger = logging.getLogger(__name__)


class PosixSystemAdapter(SystemPort):
    """
    Host adapter for macOS and other POSIX systems.

    The single-user flag is read with sysctlbyname(3). Hosts whose C library
    has no sysctlbyname never report single-user mode.
    """

    def __init__(self, single_user_sysctl: str = "kern.singleuser"):
        """
        Initialize system adapter.

        Args:
            single_user_sysctl: Name of the kernel single-user flag
        """
        self._sysctl_name = single_user_sysctl
        self._libc = None

    def _get_libc(self):
        """Lazy load the C library."""
        if self._libc is None:
            self._libc = ctypes.CDLL(ctypes.util.find_library("c"), use_errno=True)
        return self._libc

    def is_single_user(self) -> bool:
        """Read the single-user kernel flag; any failure means multi-user."""
        try:
            sysctlbyname = self._get_libc().sysctlbyname
        except (OSError, AttributeError):
            logger.debug("sysctlbyname unavailable, assuming multi-user")
            return False

        value = ctypes.c_uint32(0)
        size = ctypes.c_size_t(ctypes.sizeof(value))
        res = sysctlbyname(
            self._sysctl_name.encode("ascii"),
            ctypes.byref(value),
            ctypes.byref(size),
            None,
            ctypes.c_size_t(0),
        )
        if res != 0:
            logger.debug("sysctl %s failed: errno %d", self._sysctl_name, ctypes.get_errno())
            return False
        return bool(value.value)

    def is_privileged(self) -> bool:
        """Super-user check on the real user id."""
        return os.getuid() == 0

    def run(self, path: str, args: Sequence[str]) -> int:
        """Run a program in the foreground and return its exit status."""
        argv = [path] + list(args)
        logger.debug("running %s", argv)
        status = subprocess.call(argv)
        logger.debug("%s exited with status %d", path, status)
        return status
