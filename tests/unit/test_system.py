"""
Unit tests for the vaulttool system backend functions.

Tests:
- Health, init, seal status, seal and unseal
- Mount listing, tuning, mounting and unmounting
"""

import pytest

from vaulttool.errors import VaultHTTPStatusError, VaultParseBodyError
from vaulttool.models import (
    VaultMountConfigWrite,
    VaultMountWrite,
    VaultUnsealKey,
    VaultUnsealReset,
)
from vaulttool.system import (
    vault_health,
    vault_init,
    vault_mount_set_tune,
    vault_mount_tune,
    vault_mounts,
    vault_new_mount,
    vault_seal,
    vault_seal_status,
    vault_unmount,
    vault_unseal,
)

VAULT_ADDR = "http://vault.test:8200"

HEALTH = {
    "initialized": True,
    "sealed": True,
    "standby": True,
    "server_time_utc": 1476819191,
    "version": "0.6.2",
}

SEAL_STATUS = {"sealed": True, "t": 3, "n": 5, "progress": 1}


def mount_entry(mount_type, description="", default_ttl=0, max_ttl=0):
    return {
        "type": mount_type,
        "description": description,
        "config": {"default_lease_ttl": default_ttl, "max_lease_ttl": max_ttl},
    }


class TestHealth:
    """Tests for vault_health."""

    @pytest.mark.parametrize("status_code", [200, 429, 501, 503])
    def test_informational_statuses_decode(self, session, status_code):
        """Test that sealed, standby and uninitialized answers are not failures."""
        session.add("GET", "sys/health", status_code=status_code, json_body=HEALTH)

        health = vault_health(VAULT_ADDR, session=session)

        assert health.sealed is True
        assert health.initialized is True
        assert health.version == "0.6.2"

    def test_unauthenticated(self, session):
        session.add("GET", "sys/health", json_body=HEALTH)

        vault_health(VAULT_ADDR, session=session)

        assert "X-Vault-Token" not in session.last.headers
        assert not session.last.has_body

    def test_other_status_fails(self, session):
        session.add("GET", "sys/health", status_code=500, json_body={"errors": ["boom"]})

        with pytest.raises(VaultHTTPStatusError):
            vault_health(VAULT_ADDR, session=session)


class TestInit:
    """Tests for vault_init."""

    def test_init(self, session):
        session.add("PUT", "sys/init", json_body={
            "keys": ["k1", "k2", "k3"],
            "root_token": "root",
        })

        keys, root_token = vault_init(VAULT_ADDR, 3, 2, session=session)

        assert keys == [VaultUnsealKey("k1"), VaultUnsealKey("k2"), VaultUnsealKey("k3")]
        assert root_token == "root"
        assert session.last.body == {"secret_shares": 3, "secret_threshold": 2}

    def test_already_initialized(self, session):
        session.add("PUT", "sys/init", status_code=400, json_body={"errors": ["Vault is already initialized"]})

        with pytest.raises(VaultHTTPStatusError) as exc_info:
            vault_init(VAULT_ADDR, 1, 1, session=session)

        assert exc_info.value.status_code == 400


class TestSeal:
    """Tests for seal status, seal and unseal."""

    def test_seal_status(self, session):
        session.add("GET", "sys/seal-status", json_body=SEAL_STATUS)

        status = vault_seal_status(VAULT_ADDR, session=session)

        assert status.sealed is True
        assert (status.t, status.n, status.progress) == (3, 5, 1)

    def test_seal(self, session, conn):
        session.add("PUT", "sys/seal", status_code=204)

        assert vault_seal(conn) is None
        assert session.last.headers["X-Vault-Token"] == "s.test-root-token"
        assert not session.last.has_body

    def test_unseal_with_key(self, session):
        session.add("PUT", "sys/unseal", json_body=SEAL_STATUS)

        status = vault_unseal(VAULT_ADDR, VaultUnsealKey("share-1"), session=session)

        assert session.last.body == {"key": "share-1"}
        assert "reset" not in session.last.body
        assert "X-Vault-Token" not in session.last.headers
        assert status.progress == 1

    def test_unseal_reset(self, session):
        session.add("PUT", "sys/unseal", json_body={"sealed": True, "t": 3, "n": 5, "progress": 0})

        status = vault_unseal(VAULT_ADDR, VaultUnsealReset(), session=session)

        assert session.last.body == {"reset": True}
        assert "key" not in session.last.body
        assert status.progress == 0


class TestMounts:
    """Tests for mount management."""

    def test_mounts_top_level_table(self, session, conn):
        """Test the pre-0.6.1 response format."""
        session.add("GET", "sys/mounts", json_body={
            "sys/": mount_entry("system", "system endpoints"),
            "secret/": mount_entry("generic", "generic secret storage"),
            "cubbyhole/": mount_entry("cubbyhole", "per-token private secret storage"),
        })

        mounts = vault_mounts(conn)

        assert [name for name, _ in mounts] == ["cubbyhole/", "secret/", "sys/"]
        assert dict(mounts)["secret/"].type == "generic"

    def test_mounts_data_wrapped(self, session, conn):
        """Test the response format that nests the table under "data"."""
        table = {
            "sys/": mount_entry("system"),
            "secret/": mount_entry("generic"),
            "cubbyhole/": mount_entry("cubbyhole"),
        }
        body = dict(table)
        body.update({"request_id": "req-1", "lease_id": "", "renewable": False, "data": table})
        session.add("GET", "sys/mounts", json_body=body)

        mounts = vault_mounts(conn)

        assert [name for name, _ in mounts] == ["cubbyhole/", "secret/", "sys/"]
        assert session.last.headers["X-Vault-Token"] == "s.test-root-token"

    def test_mounts_sorted_lexicographically(self, session, conn):
        session.add("GET", "sys/mounts", json_body={"data": {
            "b/": mount_entry("generic"),
            "B/": mount_entry("generic"),
            "a/": mount_entry("generic"),
        }})

        assert [name for name, _ in vault_mounts(conn)] == ["B/", "a/", "b/"]

    def test_mounts_bad_entry(self, session, conn):
        session.add("GET", "sys/mounts", json_body={"data": {"secret/": {"type": "generic"}}})

        with pytest.raises(VaultParseBodyError):
            vault_mounts(conn)

    def test_mounts_not_an_object(self, session, conn):
        session.add("GET", "sys/mounts", json_body=["secret/"])

        with pytest.raises(VaultParseBodyError):
            vault_mounts(conn)

    def test_mount_tune(self, session, conn):
        session.add("GET", "sys/mounts/secret/tune", json_body={
            "default_lease_ttl": 3600,
            "max_lease_ttl": 86400,
        })

        config = vault_mount_tune(conn, "secret")

        assert config.default_lease_ttl == 3600
        assert config.max_lease_ttl == 86400

    def test_mount_set_tune(self, session, conn):
        session.add("POST", "sys/mounts/secret/tune", status_code=204)

        vault_mount_set_tune(conn, "secret", VaultMountConfigWrite(default_lease_ttl=3600))

        assert session.last.body == {"default_lease_ttl": "3600s"}
        assert "max_lease_ttl" not in session.last.body

    def test_new_mount(self, session, conn):
        session.add("POST", "sys/mounts/apps", status_code=204)

        vault_new_mount(conn, "apps", VaultMountWrite(type="generic", description="apps"))

        assert session.last.body == {"type": "generic", "description": "apps"}
        assert session.last.headers["X-Vault-Token"] == "s.test-root-token"

    def test_new_mount_conflict(self, session, conn):
        session.add("POST", "sys/mounts/secret", status_code=400, json_body={"errors": ["existing mount"]})

        with pytest.raises(VaultHTTPStatusError):
            vault_new_mount(conn, "secret", VaultMountWrite(type="generic"))

    def test_unmount(self, session, conn):
        session.add("DELETE", "sys/mounts/apps", status_code=204)

        vault_unmount(conn, "apps")

        assert session.last.method == "DELETE"
        assert session.last.url == f"{VAULT_ADDR}/v1/sys/mounts/apps"


class TestSessionLifecycle:
    """Tests for sessions created by the unauthenticated calls."""

    def test_own_session_closed(self, session, monkeypatch):
        """Test that a session created for one call is closed after it."""
        monkeypatch.setattr("vaulttool.system.new_session", lambda: session)
        session.add("GET", "sys/health", status_code=503, json_body=HEALTH)

        vault_health(VAULT_ADDR)

        assert session.closed is True

    def test_own_session_closed_on_error(self, session, monkeypatch):
        monkeypatch.setattr("vaulttool.system.new_session", lambda: session)
        session.add("PUT", "sys/unseal", status_code=400, json_body={"errors": ["bad key"]})

        with pytest.raises(VaultHTTPStatusError):
            vault_unseal(VAULT_ADDR, VaultUnsealKey("bad"))

        assert session.closed is True

    def test_caller_session_left_open(self, session):
        session.add("GET", "sys/seal-status", json_body=SEAL_STATUS)

        vault_seal_status(VAULT_ADDR, session=session)

        assert session.closed is False
