"""
Terminal Prompt Adapter - getpass-based password prompts.
"""

import getpass
import sys
from typing import Optional, TextIO
from od_passwd.ports.prompt_port import PromptPort
from od_passwd.domain.secret import Secret
from od_passwd.domain.errors import UnreadableSecretError


class TerminalPromptAdapter(PromptPort):
    """
    Prompts on the controlling terminal with local echo disabled.

    Messages go to the given streams (default stdout / stderr).
    """

    def __init__(
        self,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self._stdout = stdout
        self._stderr = stderr

    def read_secret(self, prompt: str) -> Optional[Secret]:
        """Read a password; end-of-input yields None."""
        try:
            value = getpass.getpass(prompt)
        except EOFError:
            return None
        except UnicodeDecodeError as e:
            raise UnreadableSecretError(prompt) from e
        secret = Secret.from_buffer(bytearray(value, "utf-8"))
        del value
        return secret

    def say(self, message: str):
        stream = self._stdout or sys.stdout
        print(message, file=stream)
        stream.flush()

    def warn(self, message: str):
        stream = self._stderr or sys.stderr
        print(message, file=stream)
        stream.flush()
