"""
Unit tests for Settings.
"""

from od_passwd.config import Settings


def test_defaults():
    settings = Settings()

    assert settings.local_db_path == "/var/db/dslocal"
    assert settings.local_default_node == "/Local/Default"
    assert settings.trusted_prefix == "/Local/"
    assert settings.daemon_loader_args == [
        "load",
        "/System/Library/LaunchDaemons/com.apple.DirectoryServicesLocal.plist",
    ]


def test_from_env_overrides():
    settings = Settings.from_env({
        "OD_PASSWD_LOCAL_DB_PATH": "/tmp/dslocal",
        "OD_PASSWD_LAUNCHCTL_PATH": "/usr/local/bin/launchctl",
        "UNRELATED": "x",
    })

    assert settings.local_db_path == "/tmp/dslocal"
    assert settings.launchctl_path == "/usr/local/bin/launchctl"
    assert settings.local_default_node == "/Local/Default"


def test_from_env_ignores_empty_values():
    settings = Settings.from_env({"OD_PASSWD_TRUSTED_PREFIX": ""})
    assert settings.trusted_prefix == "/Local/"


def test_from_env_custom_prefix():
    settings = Settings.from_env({"X_SINGLE_USER_SYSCTL": "kern.test"}, prefix="X_")
    assert settings.single_user_sysctl == "kern.test"
    assert settings.to_dict()["single_user_sysctl"] == "kern.test"
