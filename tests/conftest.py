import pytest

from od_passwd.adapters.memory_directory import MemoryDirectoryAdapter


@pytest.fixture
def directory():
    """Directory with a local node, a network node and a few users."""
    adapter = MemoryDirectoryAdapter()
    adapter.add_user("/Local/Default", "root", "rootpw", admin=True)
    adapter.add_user("/Local/Default", "alice", "alicepw")
    adapter.add_user("/LDAPv3/ldap.example.com", "bob", "bobpw")
    adapter.add_user("/LDAPv3/ldap.example.com", "admin", "adminpw", admin=True)
    return adapter
