"""
Unit tests for the host and terminal adapters.
"""

import io
import sys

import pytest
from od_passwd.adapters.posix_system import PosixSystemAdapter
from od_passwd.adapters.terminal_prompt import TerminalPromptAdapter
from od_passwd.domain.errors import UnreadableSecretError


def test_run_returns_exit_status():
    adapter = PosixSystemAdapter()
    assert adapter.run(sys.executable, ["-c", "raise SystemExit(0)"]) == 0
    assert adapter.run(sys.executable, ["-c", "raise SystemExit(3)"]) == 3


def test_run_missing_program_raises():
    adapter = PosixSystemAdapter()
    with pytest.raises(OSError):
        adapter.run("/nonexistent/launchctl", ["load"])


def test_single_user_without_sysctlbyname():
    """A C library without sysctlbyname never reports single-user mode."""
    adapter = PosixSystemAdapter()
    adapter._libc = object()
    assert adapter.is_single_user() is False


def test_single_user_reads_flag():
    class FakeLibc:
        def __init__(self, value, res=0):
            self.value = value
            self.res = res
            self.names = []

        def sysctlbyname(self, name, oldp, oldlenp, newp, newlen):
            self.names.append(name)
            oldp._obj.value = self.value
            return self.res

    adapter = PosixSystemAdapter("kern.singleuser")
    adapter._libc = FakeLibc(1)
    assert adapter.is_single_user() is True
    assert adapter._libc.names == [b"kern.singleuser"]

    adapter._libc = FakeLibc(0)
    assert adapter.is_single_user() is False

    adapter._libc = FakeLibc(1, res=-1)
    assert adapter.is_single_user() is False


def test_read_secret(monkeypatch):
    monkeypatch.setattr("getpass.getpass", lambda prompt: "hunter2")
    secret = TerminalPromptAdapter().read_secret("New password:")
    assert secret.reveal() == "hunter2"
    assert len(secret) == len(b"hunter2")


def test_read_secret_non_ascii(monkeypatch):
    monkeypatch.setattr("getpass.getpass", lambda prompt: "p\u00e4ss")
    secret = TerminalPromptAdapter().read_secret("New password:")
    assert secret.reveal() == "p\u00e4ss"
    assert len(secret) == 5


def test_read_secret_eof(monkeypatch):
    def eof(prompt):
        raise EOFError

    monkeypatch.setattr("getpass.getpass", eof)
    assert TerminalPromptAdapter().read_secret("New password:") is None


def test_read_secret_undecodable(monkeypatch):
    def undecodable(prompt):
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    monkeypatch.setattr("getpass.getpass", undecodable)
    with pytest.raises(UnreadableSecretError) as excinfo:
        TerminalPromptAdapter().read_secret("New password:")

    assert excinfo.value.prompt == "New password:"
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_messages_go_to_streams():
    out, err = io.StringIO(), io.StringIO()
    prompt = TerminalPromptAdapter(stdout=out, stderr=err)

    prompt.say("Password unchanged.")
    prompt.warn("passwd: failed")

    assert out.getvalue() == "Password unchanged.\n"
    assert err.getvalue() == "passwd: failed\n"
