"""
Settings - Paths and names the password flow depends on.

Defaults match a stock macOS install. Each field can be overridden with an
environment variable named OD_PASSWD_<FIELD>.
"""

import os
from dataclasses import dataclass, fields
from typing import Optional, Mapping, Dict, Any


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings.

    Attributes:
        local_db_path: On-disk local directory database for single-user sessions
        local_default_node: Node used when the local daemon had to be loaded
        trusted_prefix: Locations under this prefix are local and trusted
        launchctl_path: Program that loads launchd jobs
        local_daemon_plist: Job definition of the local-only directory daemon
        single_user_sysctl: Kernel flag telling whether the host is single-user
    """
    local_db_path: str = "/var/db/dslocal"
    local_default_node: str = "/Local/Default"
    trusted_prefix: str = "/Local/"
    launchctl_path: str = "/bin/launchctl"
    local_daemon_plist: str = "/System/Library/LaunchDaemons/com.apple.DirectoryServicesLocal.plist"
    single_user_sysctl: str = "kern.singleuser"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        prefix: str = "OD_PASSWD_",
    ) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read (default os.environ)
            prefix: Variable name prefix (default OD_PASSWD_)

        Returns:
            Settings with overrides applied
        """
        environ = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            value = environ.get(f"{prefix}{f.name.upper()}")
            if value:
                overrides[f.name] = value
        return cls(**overrides)

    @property
    def daemon_loader_args(self):
        """Arguments passed to launchctl to load the local daemon."""
        return ["load", self.local_daemon_plist]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
