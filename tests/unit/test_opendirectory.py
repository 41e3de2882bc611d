"""
Unit tests for the Open Directory adapter against a stand-in framework module.
"""

from types import SimpleNamespace

import pytest
from od_passwd.adapters.opendirectory import OpenDirectoryAdapter
from od_passwd.domain.errors import DirectoryError, ErrorCode
from od_passwd.domain.secret import Secret
from od_passwd.ports.directory_port import (
    DirectorySession,
    NODE_TYPE_AUTHENTICATION,
    RECORD_TYPE_USERS,
    ATTRIBUTE_METANODE_LOCATION,
    AUTH_TYPE_SET_PASSWORD,
    SESSION_OPTION_LOCAL_PATH,
)


class NSError:
    def __init__(self, code, description=None, reason=None, suggestion=None):
        self._code = code
        self._description = description
        self._reason = reason
        self._suggestion = suggestion

    def code(self):
        return self._code

    def localizedDescription(self):
        return self._description

    def localizedFailureReason(self):
        return self._reason

    def localizedRecoverySuggestion(self):
        return self._suggestion


class ODRecord:
    def __init__(self, location):
        self.location = location
        self.calls = []
        self.error = None

    def valuesForAttribute_error_(self, attribute, error):
        return [self.location], None

    def setNodeCredentialsWithRecordType_authenticationType_authenticationItems_continueItems_context_error_(
        self, record_type, auth_type, items, continue_items, context, error
    ):
        self.calls.append(("set", record_type, auth_type, list(items)))
        return (self.error is None), None, None, self.error

    def changePassword_toPassword_error_(self, old, new, error):
        self.calls.append(("change", old, new))
        return (self.error is None), self.error


class ODNode:
    records = {}

    def __init__(self, name):
        self.name = name

    @classmethod
    def nodeWithSession_name_error_(cls, session, name, error):
        if name.startswith("/NoSuch"):
            return None, NSError(2000, "Unknown node name.")
        return cls(name), None

    @classmethod
    def nodeWithSession_type_error_(cls, session, node_type, error):
        return cls("/Search"), None

    def nodeName(self):
        return self.name

    def recordWithRecordType_name_attributes_error_(self, record_type, name, attributes, error):
        if name == "broken":
            return None, NSError(9999, "Lookup failed.")
        return self.records.get(name), None


class ODSession:
    running = True
    options = []

    @classmethod
    def sessionWithOptions_error_(cls, options, error):
        cls.options.append(options)
        if not cls.running:
            return None, NSError(1002, "Daemon not running.", "No connection.", "Start it.")
        return cls(), None


@pytest.fixture
def framework():
    ODSession.running = True
    ODSession.options = []
    ODNode.records = {"alice": ODRecord("/Local/Default")}
    return SimpleNamespace(
        ODSession=ODSession,
        ODNode=ODNode,
        kODSessionLocalPath="LocalPath",
        kODNodeTypeAuthentication=0x2201,
        kODRecordTypeUsers="dsRecTypeStandard:Users",
        kODAttributeTypeMetaNodeLocation="dsAttrTypeStandard:AppleMetaNodeLocation",
        kODAuthenticationTypeSetPassword="dsAuthMethodStandard:dsAuthSetPassword",
        kODErrorSessionDaemonNotRunning=1002,
        kODErrorNodeUnknownName=2000,
        kODErrorCredentialsInvalid=5000,
    )


@pytest.fixture
def adapter(framework):
    return OpenDirectoryAdapter(framework=framework)


def test_daemon_not_running_maps_error(adapter):
    ODSession.running = False

    with pytest.raises(DirectoryError) as exc_info:
        adapter.create_session()

    error = exc_info.value
    assert error.code == ErrorCode.SESSION_DAEMON_NOT_RUNNING
    assert error.description == "Daemon not running."
    assert error.failure_reason == "No connection."
    assert error.recovery_suggestion == "Start it."


def test_local_path_option(adapter):
    session = adapter.create_session({SESSION_OPTION_LOCAL_PATH: "/var/db/dslocal"})

    assert isinstance(session, DirectorySession)
    assert ODSession.options == [{"LocalPath": "/var/db/dslocal"}]


def test_default_session_has_no_options(adapter):
    adapter.create_session()
    assert ODSession.options == [None]


def test_unknown_node_name(adapter):
    session = adapter.create_session()
    with pytest.raises(DirectoryError) as exc_info:
        adapter.open_node_by_name(session, "/NoSuch/Node")
    assert exc_info.value.code == ErrorCode.NODE_UNKNOWN


def test_record_lookup(adapter):
    session = adapter.create_session()
    node = adapter.open_node_by_type(session, NODE_TYPE_AUTHENTICATION)

    record = adapter.copy_record(node, RECORD_TYPE_USERS, "alice")
    assert record.name == "alice"
    assert adapter.copy_values(record, ATTRIBUTE_METANODE_LOCATION) == ["/Local/Default"]

    assert adapter.copy_record(node, RECORD_TYPE_USERS, "nobody") is None


def test_record_lookup_error_is_raised(adapter):
    session = adapter.create_session()
    node = adapter.open_node_by_type(session, NODE_TYPE_AUTHENTICATION)

    with pytest.raises(DirectoryError) as exc_info:
        adapter.copy_record(node, RECORD_TYPE_USERS, "broken")
    assert exc_info.value.code == ErrorCode.RECORD_NOT_FOUND
    assert exc_info.value.description == "Lookup failed."


def test_set_credentials_passes_plain_strings(adapter):
    session = adapter.create_session()
    node = adapter.open_node_by_type(session, NODE_TYPE_AUTHENTICATION)
    record = adapter.copy_record(node, RECORD_TYPE_USERS, "alice")

    adapter.set_credentials_extended(
        record,
        RECORD_TYPE_USERS,
        AUTH_TYPE_SET_PASSWORD,
        ["alice", Secret("new"), "alice", Secret("old")],
    )

    assert ODNode.records["alice"].calls == [(
        "set",
        "dsRecTypeStandard:Users",
        "dsAuthMethodStandard:dsAuthSetPassword",
        ["alice", "new", "alice", "old"],
    )]


def test_change_password_failure(adapter):
    ODNode.records["alice"].error = NSError(5000, "Credentials could not be verified.")
    session = adapter.create_session()
    node = adapter.open_node_by_name(session, "/Local/Default")
    record = adapter.copy_record(node, RECORD_TYPE_USERS, "alice")

    with pytest.raises(DirectoryError) as exc_info:
        adapter.change_password(record, None, Secret("new"))

    assert exc_info.value.code == ErrorCode.AUTHENTICATION_FAILED
    assert ODNode.records["alice"].calls == [("change", None, "new")]
