"""
Directory Service Port - Interface to a system directory daemon.

Implementations:
- OpenDirectoryAdapter: macOS Open Directory via PyObjC
- MemoryDirectoryAdapter: In-memory directory (testing only)
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any, Sequence, Callable

# Adapter-neutral names; each adapter maps them to its framework constants.
NODE_TYPE_AUTHENTICATION = "authentication"
RECORD_TYPE_USERS = "users"
ATTRIBUTE_METANODE_LOCATION = "metanode_location"
AUTH_TYPE_SET_PASSWORD = "set_password"

# Session option restricting a session to an on-disk local database.
SESSION_OPTION_LOCAL_PATH = "local_path"


class DirectoryHandle:
    """
    Scoped handle to a directory object.

    Handles are released deterministically with close() or by leaving a
    with-block. Closing twice is a no-op.
    """

    kind = "handle"

    def __init__(
        self,
        ref: Any,
        name: Optional[str] = None,
        releaser: Optional[Callable[[Any], None]] = None,
    ):
        self._ref = ref
        self.name = name
        self.closed = False
        self._releaser = releaser

    @property
    def ref(self) -> Any:
        """Adapter-specific object behind the handle."""
        if self.closed:
            raise ValueError(f"{self.kind} handle is closed")
        return self._ref

    def close(self):
        if self.closed:
            return
        self._release(self._ref)
        self._ref = None
        self.closed = True

    def _release(self, ref: Any):
        if self._releaser is not None:
            self._releaser(ref)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<{type(self).__name__} {self.name!r} {state}>"


class DirectorySession(DirectoryHandle):
    """Connection to the directory daemon."""
    kind = "session"


class DirectoryNode(DirectoryHandle):
    """A directory partition (local database, network directory, search)."""
    kind = "node"


class DirectoryRecord(DirectoryHandle):
    """A record inside a node."""
    kind = "record"


class DirectoryServicePort(ABC):
    """Port: Look up user records and change their passwords."""

    @abstractmethod
    def create_session(self, options: Optional[Dict[str, Any]] = None) -> DirectorySession:
        """
        Open a session with the directory daemon.

        Args:
            options: Session options, e.g. {SESSION_OPTION_LOCAL_PATH: path}

        Returns:
            Open session handle

        Raises:
            DirectoryError: code SESSION_DAEMON_NOT_RUNNING when the daemon
                is not reachable, another code for other failures
        """
        pass

    @abstractmethod
    def open_node_by_name(self, session: DirectorySession, name: str) -> DirectoryNode:
        """
        Open a node by its location, e.g. "/Local/Default".

        Raises:
            DirectoryError: If the node does not exist or cannot be opened
        """
        pass

    @abstractmethod
    def open_node_by_type(self, session: DirectorySession, node_type: str) -> DirectoryNode:
        """
        Open a node by type, e.g. NODE_TYPE_AUTHENTICATION.

        Raises:
            DirectoryError: If the node cannot be opened
        """
        pass

    @abstractmethod
    def copy_record(
        self,
        node: DirectoryNode,
        record_type: str,
        name: str,
    ) -> Optional[DirectoryRecord]:
        """
        Fetch a record by exact name.

        Returns:
            Record handle, or None if no record matches

        Raises:
            DirectoryError: If the lookup itself failed
        """
        pass

    @abstractmethod
    def copy_values(self, record: DirectoryRecord, attribute: str) -> List[str]:
        """
        Read the values of an attribute.

        Returns:
            Attribute values (empty list if the attribute is absent)
        """
        pass

    @abstractmethod
    def set_credentials_extended(
        self,
        record: DirectoryRecord,
        record_type: str,
        auth_type: str,
        items: Sequence[Any],
    ) -> bool:
        """
        Run an extended credential operation on the record's node.

        For AUTH_TYPE_SET_PASSWORD the items are
        [username, new password, authenticator name, authenticator password];
        passwords are Secret instances, the authenticator password may be None.

        Returns:
            True on success

        Raises:
            DirectoryError: If the operation was rejected
        """
        pass

    @abstractmethod
    def change_password(self, record: DirectoryRecord, old, new) -> bool:
        """
        Change the record's password.

        Args:
            record: Target record
            old: Old password (Secret) or None
            new: New password (Secret)

        Returns:
            True on success

        Raises:
            DirectoryError: If the change was rejected
        """
        pass
