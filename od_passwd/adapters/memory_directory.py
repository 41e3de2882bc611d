"""
Memory Directory Adapter - In-memory directory service (testing only).
"""

from typing import Optional, List, Dict, Any, Sequence, Tuple
from od_passwd.ports.directory_port import (
    DirectoryServicePort,
    DirectorySession,
    DirectoryNode,
    DirectoryRecord,
    NODE_TYPE_AUTHENTICATION,
    RECORD_TYPE_USERS,
    ATTRIBUTE_METANODE_LOCATION,
    AUTH_TYPE_SET_PASSWORD,
    SESSION_OPTION_LOCAL_PATH,
)
from od_passwd.domain.errors import DirectoryError, ErrorCode

SEARCH_NODE_NAME = "/Search"


class MemoryDirectoryAdapter(DirectoryServicePort):
    """
    In-memory directory.

    WARNING: Only for testing. Passwords are kept in clear text.

    Nodes map user names to entries ({"password": str, "admin": bool}).
    The authentication search node looks through nodes in search order.
    A session created with SESSION_OPTION_LOCAL_PATH only sees nodes under
    the local prefix and needs the local daemon to be running.
    """

    def __init__(
        self,
        daemon_running: bool = True,
        local_prefix: str = "/Local/",
    ):
        """
        Initialize an empty directory.

        Args:
            daemon_running: Whether the normal directory daemon is reachable
            local_prefix: Location prefix of local-database nodes
        """
        self.daemon_running = daemon_running
        self.local_daemon_running = False
        self._local_prefix = local_prefix
        self._nodes: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._search_order: List[str] = []

        # Inspection for tests
        self.calls: List[Tuple[Any, ...]] = []
        self.open_handles: List[Any] = []
        self.release_log: List[str] = []

        # Injected failures
        self.session_error: Optional[DirectoryError] = None
        self.lookup_error: Optional[DirectoryError] = None
        self.commit_error: Optional[DirectoryError] = None

    # Setup

    def add_node(self, name: str, searchable: bool = True) -> "MemoryDirectoryAdapter":
        """Add an empty node; searchable nodes join the authentication search."""
        self._nodes.setdefault(name, {})
        if searchable and name not in self._search_order:
            self._search_order.append(name)
        return self

    def add_user(
        self,
        node: str,
        username: str,
        password: str,
        admin: bool = False,
    ) -> "MemoryDirectoryAdapter":
        """Add a user entry to a node (creating the node if needed)."""
        self.add_node(node)
        self._nodes[node][username] = {"password": password, "admin": admin}
        return self

    def password_of(self, node: str, username: str) -> Optional[str]:
        """Current password of a user, for assertions."""
        entry = self._nodes.get(node, {}).get(username)
        return entry["password"] if entry else None

    def start_local_daemon(self):
        """Simulate a successful load of the local-only daemon."""
        self.local_daemon_running = True

    @property
    def mutations(self) -> List[Tuple[Any, ...]]:
        """Recorded calls that changed (or tried to change) a password."""
        return [c for c in self.calls if c[0] in ("set_credentials_extended", "change_password")]

    # Handles

    def _track(self, handle):
        self.open_handles.append(handle)
        return handle

    def _releaser(self, kind: str):
        def release(ref):
            self.release_log.append(kind)
            self.open_handles[:] = [h for h in self.open_handles if h._ref is not ref]
        return release

    # DirectoryServicePort

    def create_session(self, options: Optional[Dict[str, Any]] = None) -> DirectorySession:
        """Open a session against the in-memory nodes."""
        options = options or {}
        self.calls.append(("create_session", dict(options)))

        if self.session_error is not None:
            raise self.session_error

        local_path = options.get(SESSION_OPTION_LOCAL_PATH)
        if local_path:
            if not self.local_daemon_running:
                raise DirectoryError(
                    ErrorCode.SESSION_DAEMON_NOT_RUNNING,
                    "Unable to connect to the local directory daemon.",
                )
        elif not self.daemon_running:
            raise DirectoryError(
                ErrorCode.SESSION_DAEMON_NOT_RUNNING,
                "Unable to communicate with the directory daemon.",
                "The daemon is not running.",
            )

        ref = {"local_path": local_path}
        return self._track(DirectorySession(ref, name=local_path or "default", releaser=self._releaser("session")))

    def _visible_nodes(self, session: DirectorySession) -> List[str]:
        if session.ref["local_path"]:
            return [n for n in self._nodes if n.startswith(self._local_prefix)]
        return list(self._nodes)

    def open_node_by_name(self, session: DirectorySession, name: str) -> DirectoryNode:
        """Open one of the added nodes."""
        self.calls.append(("open_node_by_name", name))
        if name not in self._visible_nodes(session):
            raise DirectoryError(
                ErrorCode.NODE_UNKNOWN,
                "Unable to open the directory node.",
                f"The node '{name}' could not be found.",
            )
        ref = {"nodes": [name]}
        return self._track(DirectoryNode(ref, name=name, releaser=self._releaser("node")))

    def open_node_by_type(self, session: DirectorySession, node_type: str) -> DirectoryNode:
        """Open the authentication search node."""
        self.calls.append(("open_node_by_type", node_type))
        if node_type != NODE_TYPE_AUTHENTICATION:
            raise DirectoryError(ErrorCode.NODE_UNKNOWN, f"Unsupported node type '{node_type}'.")
        visible = self._visible_nodes(session)
        ref = {"nodes": [n for n in self._search_order if n in visible]}
        return self._track(DirectoryNode(ref, name=SEARCH_NODE_NAME, releaser=self._releaser("node")))

    def copy_record(
        self,
        node: DirectoryNode,
        record_type: str,
        name: str,
    ) -> Optional[DirectoryRecord]:
        """Find a user by exact name in the node (or the search path)."""
        self.calls.append(("copy_record", record_type, name))
        if self.lookup_error is not None:
            raise self.lookup_error
        if record_type != RECORD_TYPE_USERS:
            return None

        for node_name in node.ref["nodes"]:
            if name in self._nodes[node_name]:
                ref = {"node": node_name, "username": name}
                return self._track(DirectoryRecord(ref, name=name, releaser=self._releaser("record")))
        return None

    def copy_values(self, record: DirectoryRecord, attribute: str) -> List[str]:
        """Only the metanode location attribute is known."""
        if attribute == ATTRIBUTE_METANODE_LOCATION:
            return [record.ref["node"]]
        return []

    def _entry(self, record: DirectoryRecord) -> Dict[str, Any]:
        return self._nodes[record.ref["node"]][record.ref["username"]]

    def _find_authenticator(self, record: DirectoryRecord, authname: str) -> Optional[Dict[str, Any]]:
        node = self._nodes[record.ref["node"]]
        if authname in node:
            return node[authname]
        for node_name in self._search_order:
            if authname in self._nodes[node_name]:
                return self._nodes[node_name][authname]
        return None

    def set_credentials_extended(
        self,
        record: DirectoryRecord,
        record_type: str,
        auth_type: str,
        items: Sequence[Any],
    ) -> bool:
        """Set a password after authenticating the named authenticator."""
        username, new, authname, authpass = items
        new_value = new.reveal()
        auth_value = authpass.reveal() if authpass is not None else None
        self.calls.append(("set_credentials_extended", record_type, auth_type, username, new_value, authname, auth_value))

        if self.commit_error is not None:
            raise self.commit_error
        if auth_type != AUTH_TYPE_SET_PASSWORD:
            raise DirectoryError(ErrorCode.OTHER, f"Unsupported authentication type '{auth_type}'.")

        authenticator = self._find_authenticator(record, authname)
        if authenticator is None or auth_value is None or authenticator["password"] != auth_value:
            raise DirectoryError(
                ErrorCode.AUTHENTICATION_FAILED,
                "Credentials could not be verified, username or password is invalid.",
            )
        if authname != username and not authenticator["admin"]:
            raise DirectoryError(
                ErrorCode.NOT_AUTHORIZED,
                "Not authorized to change the password.",
                f"'{authname}' is not an administrator.",
            )

        self._entry(record)["password"] = new_value
        return True

    def change_password(self, record: DirectoryRecord, old, new) -> bool:
        """Change a password; an old password, when given, must match."""
        old_value = old.reveal() if old is not None else None
        new_value = new.reveal()
        self.calls.append(("change_password", record.ref["username"], old_value, new_value))

        if self.commit_error is not None:
            raise self.commit_error

        entry = self._entry(record)
        if old_value is not None and entry["password"] != old_value:
            raise DirectoryError(
                ErrorCode.AUTHENTICATION_FAILED,
                "Credentials could not be verified, username or password is invalid.",
            )

        entry["password"] = new_value
        return True
