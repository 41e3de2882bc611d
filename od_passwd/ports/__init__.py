"""
Ports - Interfaces for the directory service, the host system and the terminal.

Hexagonal architecture: These define WHAT we need, not HOW.
Adapters provide the HOW.
"""

from od_passwd.ports.directory_port import (
    DirectoryServicePort,
    DirectoryHandle,
    DirectorySession,
    DirectoryNode,
    DirectoryRecord,
    NODE_TYPE_AUTHENTICATION,
    RECORD_TYPE_USERS,
    ATTRIBUTE_METANODE_LOCATION,
    AUTH_TYPE_SET_PASSWORD,
    SESSION_OPTION_LOCAL_PATH,
)
from od_passwd.ports.system_port import SystemPort
from od_passwd.ports.prompt_port import PromptPort

__all__ = [
    # Directory service
    "DirectoryServicePort",
    "DirectoryHandle",
    "DirectorySession",
    "DirectoryNode",
    "DirectoryRecord",
    "NODE_TYPE_AUTHENTICATION",
    "RECORD_TYPE_USERS",
    "ATTRIBUTE_METANODE_LOCATION",
    "AUTH_TYPE_SET_PASSWORD",
    "SESSION_OPTION_LOCAL_PATH",
    # Host
    "SystemPort",
    # Terminal
    "PromptPort",
]
