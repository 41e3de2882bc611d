"""
Open Directory Adapter - macOS directory services through PyObjC.
"""

import logging
from typing import Optional, List, Dict, Any, Sequence
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
from od_passwd.domain.secret import Secret

logger = logging.getLogger(__name__)

# Open Directory error constant name -> flow error code
_ERROR_CODES = {
    "kODErrorSessionDaemonNotRunning": ErrorCode.SESSION_DAEMON_NOT_RUNNING,
    "kODErrorSessionDaemonRefused": ErrorCode.SESSION_FAILED,
    "kODErrorSessionLocalOnlyDaemonInUse": ErrorCode.SESSION_FAILED,
    "kODErrorSessionNormalDaemonInUse": ErrorCode.SESSION_FAILED,
    "kODErrorNodeUnknownName": ErrorCode.NODE_UNKNOWN,
    "kODErrorNodeUnknownType": ErrorCode.NODE_UNKNOWN,
    "kODErrorRecordTypeDisabled": ErrorCode.RECORD_NOT_FOUND,
    "kODErrorCredentialsInvalid": ErrorCode.AUTHENTICATION_FAILED,
    "kODErrorCredentialsAccountNotFound": ErrorCode.AUTHENTICATION_FAILED,
    "kODErrorCredentialsNotAuthorized": ErrorCode.NOT_AUTHORIZED,
    "kODErrorCredentialsOperationFailed": ErrorCode.CREDENTIALS_FAILED,
}


class OpenDirectoryAdapter(DirectoryServicePort):
    """
    Open Directory adapter.

    Wraps ODSession, ODNode and ODRecord from the OpenDirectory framework.
    Requires: pip install pyobjc-framework-OpenDirectory (macOS only)
    """

    def __init__(self, framework=None):
        """
        Initialize Open Directory adapter.

        Args:
            framework: OpenDirectory module (imported lazily when omitted)
        """
        self._od = framework
        self._codes: Optional[Dict[int, ErrorCode]] = None

    def _get_framework(self):
        """Lazy load the OpenDirectory framework."""
        if self._od is None:
            try:
                import OpenDirectory
                self._od = OpenDirectory
            except ImportError:
                raise ImportError(
                    "pyobjc-framework-OpenDirectory package required: "
                    "pip install pyobjc-framework-OpenDirectory"
                )
        return self._od

    def _error_codes(self) -> Dict[int, ErrorCode]:
        if self._codes is None:
            od = self._get_framework()
            self._codes = {
                getattr(od, name): code
                for name, code in _ERROR_CODES.items()
                if hasattr(od, name)
            }
        return self._codes

    def _error(self, nserror, default: ErrorCode = ErrorCode.OTHER) -> DirectoryError:
        """Convert an NSError into a DirectoryError."""
        if nserror is None:
            return DirectoryError(default, "Unknown directory error.")
        code = self._error_codes().get(nserror.code(), default)
        return DirectoryError(
            code,
            _text(nserror.localizedDescription()),
            _text(nserror.localizedFailureReason()),
            _text(nserror.localizedRecoverySuggestion()),
        )

    def create_session(self, options: Optional[Dict[str, Any]] = None) -> DirectorySession:
        """Create an ODSession (default session when no options)."""
        od = self._get_framework()

        od_options = None
        if options and options.get(SESSION_OPTION_LOCAL_PATH):
            od_options = {od.kODSessionLocalPath: options[SESSION_OPTION_LOCAL_PATH]}

        session, error = od.ODSession.sessionWithOptions_error_(od_options, None)
        if session is None:
            raise self._error(error, ErrorCode.SESSION_FAILED)

        logger.debug("opened directory session options=%s", options or {})
        return DirectorySession(session, name="default" if od_options is None else options[SESSION_OPTION_LOCAL_PATH])

    def open_node_by_name(self, session: DirectorySession, name: str) -> DirectoryNode:
        """Create an ODNode for a location such as /Local/Default."""
        od = self._get_framework()
        node, error = od.ODNode.nodeWithSession_name_error_(session.ref, name, None)
        if node is None:
            raise self._error(error, ErrorCode.NODE_UNKNOWN)
        return DirectoryNode(node, name=name)

    def open_node_by_type(self, session: DirectorySession, node_type: str) -> DirectoryNode:
        """Create an ODNode for a node type (only the authentication search)."""
        od = self._get_framework()
        if node_type != NODE_TYPE_AUTHENTICATION:
            raise DirectoryError(ErrorCode.NODE_UNKNOWN, f"Unsupported node type '{node_type}'.")

        node, error = od.ODNode.nodeWithSession_type_error_(session.ref, od.kODNodeTypeAuthentication, None)
        if node is None:
            raise self._error(error, ErrorCode.NODE_UNKNOWN)
        return DirectoryNode(node, name=_text(node.nodeName()))

    def _record_type(self, record_type: str):
        if record_type != RECORD_TYPE_USERS:
            raise DirectoryError(ErrorCode.OTHER, f"Unsupported record type '{record_type}'.")
        return self._get_framework().kODRecordTypeUsers

    def copy_record(
        self,
        node: DirectoryNode,
        record_type: str,
        name: str,
    ) -> Optional[DirectoryRecord]:
        """Copy a record by exact name; no attributes are prefetched."""
        od_type = self._record_type(record_type)
        record, error = node.ref.recordWithRecordType_name_attributes_error_(od_type, name, None, None)
        if record is None:
            if error is not None:
                raise self._error(error, ErrorCode.RECORD_NOT_FOUND)
            return None
        return DirectoryRecord(record, name=name)

    def copy_values(self, record: DirectoryRecord, attribute: str) -> List[str]:
        """Read attribute values; an unreadable attribute yields no values."""
        od = self._get_framework()
        if attribute != ATTRIBUTE_METANODE_LOCATION:
            raise DirectoryError(ErrorCode.OTHER, f"Unsupported attribute '{attribute}'.")

        values, error = record.ref.valuesForAttribute_error_(od.kODAttributeTypeMetaNodeLocation, None)
        if values is None:
            logger.debug("no %s for %s: %s", attribute, record.name, error)
            return []
        return [_text(v) for v in values]

    def set_credentials_extended(
        self,
        record: DirectoryRecord,
        record_type: str,
        auth_type: str,
        items: Sequence[Any],
    ) -> bool:
        """Set node credentials with the set-password authentication type."""
        od = self._get_framework()
        if auth_type != AUTH_TYPE_SET_PASSWORD:
            raise DirectoryError(ErrorCode.OTHER, f"Unsupported authentication type '{auth_type}'.")

        auth_items = [_native(item) for item in items]
        result = record.ref.setNodeCredentialsWithRecordType_authenticationType_authenticationItems_continueItems_context_error_(
            self._record_type(record_type),
            od.kODAuthenticationTypeSetPassword,
            auth_items,
            None,
            None,
            None,
        )
        ok, error = result[0], result[-1]
        del auth_items
        if not ok:
            raise self._error(error, ErrorCode.CREDENTIALS_FAILED)
        return True

    def change_password(self, record: DirectoryRecord, old, new) -> bool:
        """Change the password with the record's own credentials."""
        ok, error = record.ref.changePassword_toPassword_error_(_native(old), _native(new), None)
        if not ok:
            raise self._error(error, ErrorCode.CREDENTIALS_FAILED)
        return True


def _text(value) -> Optional[str]:
    """NSString (or None) to str."""
    return None if value is None else str(value)


def _native(item):
    """Secret items become plain strings at the bridge; names pass through."""
    if isinstance(item, Secret):
        return item.reveal()
    return item
