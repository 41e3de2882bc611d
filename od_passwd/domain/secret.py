"""
Secret Domain Model - Password held in a wipeable buffer.
"""

import hmac
from typing import Optional


class Secret:
    """
    Password bytes held in a mutable buffer.

    Domain rules:
    - value is never part of repr() or str()
    - wipe() zeroes the buffer in place; a wiped secret is empty
    - equality compares contents in constant time
    """

    __slots__ = ("_buffer",)

    def __init__(self, value: Optional[str] = None):
        self._buffer = bytearray(value.encode("utf-8")) if value else bytearray()

    @classmethod
    def from_buffer(cls, buffer: bytearray) -> "Secret":
        """Take ownership of a buffer without copying it."""
        secret = cls()
        secret._buffer = buffer
        return secret

    def reveal(self) -> str:
        """Return the password text (caller converts it immediately)."""
        return self._buffer.decode("utf-8")

    def wipe(self):
        """Zero the buffer, then drop it."""
        for i in range(len(self._buffer)):
            self._buffer[i] = 0
        self._buffer = bytearray()

    @property
    def is_empty(self) -> bool:
        return len(self._buffer) == 0

    def __len__(self) -> int:
        return len(self._buffer)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Secret):
            return NotImplemented
        return hmac.compare_digest(bytes(self._buffer), bytes(other._buffer))

    __hash__ = None

    def __enter__(self) -> "Secret":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.wipe()
        return False

    def __repr__(self) -> str:
        return "Secret(***)" if self._buffer else "Secret()"

    __str__ = __repr__
