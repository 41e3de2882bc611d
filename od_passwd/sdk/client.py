"""
Password Changer - High-level SDK for changing a directory password.

Runs the whole flow: session (with the single-user fallback), node and
record lookup, authentication policy, password prompts and commit.
"""

import logging
from contextlib import ExitStack
from typing import Optional, Tuple
from od_passwd.config import Settings
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
from od_passwd.ports.system_port import SystemPort
from od_passwd.ports.prompt_port import PromptPort
from od_passwd.domain.errors import (
    ErrorCode,
    DirectoryError,
    DaemonLoadError,
    UnknownUserError,
    UnreadableSecretError,
    EXIT_SUCCESS,
    EXIT_FAILURE,
    EXIT_NO_USERNAME,
)
from od_passwd.domain.policy import canonical_location, needs_authentication, old_password_prompt
from od_passwd.domain.request import PasswordChangeRequest, PasswordChangeResult
from od_passwd.domain.secret import Secret

logger = logging.getLogger(__name__)

PROMPT_NEW = "New password:"
PROMPT_RETYPE = "Retype new password:"
MESSAGE_UNCHANGED = "Password unchanged."
MESSAGE_MISMATCH = "Mismatch; try again, EOF to quit."


class PasswordChanger:
    """
    High-level client combining the directory, host and terminal ports.

    Example:
        from od_passwd import PasswordChanger, PasswordChangeRequest
        from od_passwd.adapters import (
            OpenDirectoryAdapter, PosixSystemAdapter, TerminalPromptAdapter,
        )

        changer = PasswordChanger(
            directory=OpenDirectoryAdapter(),
            system=PosixSystemAdapter(),
            prompt=TerminalPromptAdapter(),
        )
        result = changer.run(PasswordChangeRequest(username="alice"))
    """

    def __init__(
        self,
        directory: DirectoryServicePort,
        system: SystemPort,
        prompt: PromptPort,
        settings: Optional[Settings] = None,
        privileged: Optional[bool] = None,
    ):
        """
        Initialize the changer with adapters.

        Args:
            directory: Directory service adapter
            system: Host adapter
            prompt: Terminal adapter
            settings: Paths and names (default Settings())
            privileged: Caller is the super-user (default: ask the host once)
        """
        self._directory = directory
        self._system = system
        self._prompt = prompt
        self._settings = settings or Settings()
        self.privileged = system.is_privileged() if privileged is None else privileged

    def run(self, request: PasswordChangeRequest) -> PasswordChangeResult:
        """
        Change the password described by the request.

        Args:
            request: Target user, optional location and authenticator

        Returns:
            Result; changed is False when the user declined at the prompt

        Raises:
            DirectoryError: Any directory failure
            DaemonLoadError: Single-user fallback could not load the daemon
            UnknownUserError: No such user and no directory error
        """
        with ExitStack() as stack:
            session, location = self.open_session(request)
            with session:
                node = self.open_node(session, location)
            stack.callback(node.close)

            record = self.find_record(node, request.username)
            stack.callback(record.close)

            location = canonical_location(
                self._directory.copy_values(record, ATTRIBUTE_METANODE_LOCATION),
                location,
            )
            self._prompt.say(f"Changing password for {request.username}.")

            needs_auth = self.needs_authentication(location)
            logger.debug("record %s at %s, needs_auth=%s", request.username, location, needs_auth)

            old, new = self.collect(request, needs_auth)
            try:
                if new is None:
                    return PasswordChangeResult(
                        username=request.username,
                        changed=False,
                        needs_auth=needs_auth,
                        location=location,
                    )
                self.commit(record, request, needs_auth, old, new)
            finally:
                for secret in (old, new):
                    if secret is not None:
                        secret.wipe()

            logger.info("password changed for %s at %s", request.username, location)
            return PasswordChangeResult(
                username=request.username,
                changed=True,
                needs_auth=needs_auth,
                location=location,
            )

    def open_session(self, request: PasswordChangeRequest) -> Tuple[DirectorySession, Optional[str]]:
        """
        Open a directory session.

        When the daemon is not running and the host is in single-user mode,
        load the local-only daemon once and retry against the local database.

        Returns:
            (session, location to open); the location falls back to the local
            default node after a single-user bootstrap
        """
        try:
            return self._directory.create_session(), request.location
        except DirectoryError as error:
            if error.code != ErrorCode.SESSION_DAEMON_NOT_RUNNING:
                raise
            if not self._system.is_single_user():
                logger.debug("directory daemon not running, host is multi-user")
                raise

            logger.info("single-user mode, loading the local directory daemon")
            try:
                self.load_local_daemon()
            except DaemonLoadError as load_error:
                load_error.directory_error = error
                raise

        session = self._directory.create_session(
            {SESSION_OPTION_LOCAL_PATH: self._settings.local_db_path}
        )
        return session, request.location or self._settings.local_default_node

    def load_local_daemon(self):
        """
        Run the loader of the local-only directory daemon and wait for it.

        Raises:
            DaemonLoadError: Loader could not be started or exited non-zero
        """
        path = self._settings.launchctl_path
        try:
            status = self._system.run(path, self._settings.daemon_loader_args)
        except OSError as e:
            raise DaemonLoadError(path) from e
        if status != 0:
            raise DaemonLoadError(path, status)

    def open_node(self, session: DirectorySession, location: Optional[str]) -> DirectoryNode:
        """Open the named node, or the authentication search node."""
        if location:
            return self._directory.open_node_by_name(session, location)
        return self._directory.open_node_by_type(session, NODE_TYPE_AUTHENTICATION)

    def find_record(self, node: DirectoryNode, username: str) -> DirectoryRecord:
        """
        Fetch the user's record.

        Raises:
            DirectoryError: Lookup failed
            UnknownUserError: No record and no error
        """
        record = self._directory.copy_record(node, RECORD_TYPE_USERS, username)
        if record is None:
            raise UnknownUserError(username)
        return record

    def needs_authentication(self, location: Optional[str]) -> bool:
        """Policy check with this caller's privilege."""
        return needs_authentication(self.privileged, location, self._settings.trusted_prefix)

    def collect(
        self,
        request: PasswordChangeRequest,
        needs_auth: bool,
    ) -> Tuple[Optional[Secret], Optional[Secret]]:
        """
        Prompt for the old password (if needed) and a confirmed new one.

        Returns:
            (old, new); new is None when the user gave an empty password or
            end-of-input, old is None when it was not asked for
        """
        old = None
        if needs_auth:
            try:
                old = self._prompt.read_secret(old_password_prompt(request.username, request.authname))
            except UnreadableSecretError:
                logger.warning("old password could not be decoded, sending none")

        try:
            while True:
                try:
                    new = self._prompt.read_secret(PROMPT_NEW)
                except UnreadableSecretError:
                    self._prompt.say(MESSAGE_MISMATCH)
                    continue
                if new is None or new.is_empty:
                    if new is not None:
                        new.wipe()
                    self._prompt.say(MESSAGE_UNCHANGED)
                    return old, None

                try:
                    verify = self._prompt.read_secret(PROMPT_RETYPE)
                except UnreadableSecretError:
                    new.wipe()
                    self._prompt.say(MESSAGE_MISMATCH)
                    continue
                if verify is None:
                    new.wipe()
                    continue

                matched = verify == new
                verify.wipe()
                if matched:
                    return old, new

                new.wipe()
                self._prompt.say(MESSAGE_MISMATCH)
        except BaseException:
            if old is not None:
                old.wipe()
            raise

    def commit(
        self,
        record: DirectoryRecord,
        request: PasswordChangeRequest,
        needs_auth: bool,
        old: Optional[Secret],
        new: Secret,
    ):
        """
        Submit the new password.

        With needs_auth the authenticator proves itself through an extended
        set-password operation; otherwise a privileged local change is made.
        """
        if needs_auth:
            logger.debug("set-password for %s as %s", request.username, request.authname)
            self._directory.set_credentials_extended(
                record,
                RECORD_TYPE_USERS,
                AUTH_TYPE_SET_PASSWORD,
                [request.username, new, request.authname, old],
            )
        else:
            logger.debug("change-password for %s", request.username)
            self._directory.change_password(record, old, new)


def od_passwd(
    uname: Optional[str],
    locn: Optional[str] = None,
    aname: Optional[str] = None,
    directory: Optional[DirectoryServicePort] = None,
    system: Optional[SystemPort] = None,
    prompt: Optional[PromptPort] = None,
    settings: Optional[Settings] = None,
    progname: str = "passwd",
) -> int:
    """
    Change a password and report failures on the terminal.

    Args:
        uname: Target user name
        locn: Directory node location (None to search)
        aname: Authenticating user name (default uname)
        directory: Directory adapter (default OpenDirectoryAdapter)
        system: Host adapter (default PosixSystemAdapter)
        prompt: Terminal adapter (default TerminalPromptAdapter)
        settings: Paths and names (default Settings())
        progname: Prefix of error messages

    Returns:
        EXIT_SUCCESS, EXIT_FAILURE, or EXIT_NO_USERNAME when uname is missing
    """
    if not uname:
        return EXIT_NO_USERNAME

    settings = settings or Settings()
    if directory is None:
        from od_passwd.adapters.opendirectory import OpenDirectoryAdapter
        directory = OpenDirectoryAdapter()
    if system is None:
        from od_passwd.adapters.posix_system import PosixSystemAdapter
        system = PosixSystemAdapter(settings.single_user_sysctl)
    if prompt is None:
        from od_passwd.adapters.terminal_prompt import TerminalPromptAdapter
        prompt = TerminalPromptAdapter()

    changer = PasswordChanger(directory, system, prompt, settings=settings)
    request = PasswordChangeRequest(username=uname, location=locn, authname=aname)

    try:
        changer.run(request)
    except DirectoryError as error:
        prompt.warn(error.render(progname))
        return EXIT_FAILURE
    except DaemonLoadError as error:
        prompt.warn(f"{progname}: {error}")
        if error.directory_error is not None:
            prompt.warn(error.directory_error.render(progname))
        return EXIT_FAILURE
    except UnknownUserError as error:
        prompt.warn(f"{progname}: {error}")
        return EXIT_FAILURE

    return EXIT_SUCCESS
