"""
Unit tests for the Secret buffer.
"""

from od_passwd.domain.secret import Secret


def test_secret_reveal():
    secret = Secret("hunter2")
    assert secret.reveal() == "hunter2"
    assert len(secret) == 7
    assert not secret.is_empty


def test_secret_wipe_zeroes_buffer():
    """Wiping overwrites the original buffer before dropping it."""
    buffer = bytearray(b"hunter2")
    secret = Secret.from_buffer(buffer)

    secret.wipe()

    assert buffer == bytearray(7)
    assert secret.is_empty
    assert secret.reveal() == ""


def test_secret_context_manager_wipes():
    buffer = bytearray(b"pw")
    with Secret.from_buffer(buffer) as secret:
        assert secret.reveal() == "pw"
    assert buffer == bytearray(2)


def test_secret_equality():
    assert Secret("abc") == Secret("abc")
    assert Secret("abc") != Secret("abd")
    assert Secret("") == Secret()


def test_secret_not_in_repr():
    secret = Secret("hunter2")
    assert "hunter2" not in repr(secret)
    assert "hunter2" not in str(secret)
    assert repr(Secret()) == "Secret()"


def test_secret_unicode():
    secret = Secret("pässwörd")
    assert secret.reveal() == "pässwörd"
    assert len(secret) == len("pässwörd".encode("utf-8"))
