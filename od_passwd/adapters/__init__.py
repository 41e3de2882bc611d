"""
Adapters - Implementations of ports.

Directory Service:
- OpenDirectoryAdapter: macOS Open Directory (PyObjC)
- MemoryDirectoryAdapter: In-memory directory (testing)

Host:
- PosixSystemAdapter: sysctl, uid and helper processes

Terminal:
- TerminalPromptAdapter: getpass prompts
"""

# Directory Service
from od_passwd.adapters.opendirectory import OpenDirectoryAdapter
from od_passwd.adapters.memory_directory import MemoryDirectoryAdapter

# Host
from od_passwd.adapters.posix_system import PosixSystemAdapter

# Terminal
from od_passwd.adapters.terminal_prompt import TerminalPromptAdapter

__all__ = [
    # Directory Service
    "OpenDirectoryAdapter",
    "MemoryDirectoryAdapter",
    # Host
    "PosixSystemAdapter",
    # Terminal
    "TerminalPromptAdapter",
]
