"""
Password Change Example - In-memory directory with scripted answers.

Walks the two commit paths without touching a real directory:
an administrator changing another user's password, and root changing a
local user's password without the old one.
"""

from od_passwd import PasswordChanger, PasswordChangeRequest
from od_passwd.adapters import MemoryDirectoryAdapter, PosixSystemAdapter
from od_passwd.ports import PromptPort
from od_passwd.domain.secret import Secret


class ScriptedPrompt(PromptPort):
    """Answers prompts from a list and echoes them for the demo."""

    def __init__(self, answers):
        self._answers = list(answers)

    def read_secret(self, prompt):
        answer = self._answers.pop(0) if self._answers else None
        print(f"{prompt} {'*' * len(answer) if answer else '<EOF>'}")
        return Secret(answer) if answer is not None else None

    def say(self, message):
        print(message)

    def warn(self, message):
        print(f"error: {message}")


def main():
    directory = MemoryDirectoryAdapter()
    directory.add_user("/Local/Default", "alice", "alicepw")
    directory.add_user("/LDAPv3/ldap.example.com", "bob", "bobpw")
    directory.add_user("/LDAPv3/ldap.example.com", "admin", "adminpw", admin=True)

    # Administrator resets bob's network password
    changer = PasswordChanger(
        directory=directory,
        system=PosixSystemAdapter(),
        prompt=ScriptedPrompt(["adminpw", "s3cret", "typo", "s3cret", "s3cret"]),
        privileged=False,
    )
    result = changer.run(PasswordChangeRequest(username="bob", authname="admin"))
    print(f"\nResult: {result.to_dict()}")
    print(f"bob's password is now: {directory.password_of('/LDAPv3/ldap.example.com', 'bob')}\n")

    # root changes alice's local password, no old password needed
    changer = PasswordChanger(
        directory=directory,
        system=PosixSystemAdapter(),
        prompt=ScriptedPrompt(["n3w", "n3w"]),
        privileged=True,
    )
    result = changer.run(PasswordChangeRequest(username="alice"))
    print(f"\nResult: {result.to_dict()}")
    print(f"Directory calls: {[c[0] for c in directory.mutations]}")


if __name__ == "__main__":
    main()
