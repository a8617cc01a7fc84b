"""
Vault System Backend

Server lifecycle and mount management: health, init, seal status, seal,
unseal and the ``/sys/mounts`` endpoints.

Functions that Vault serves without a token (health, init, seal status,
unseal) take the server address. The rest take a ``VaultConnection``.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

import requests

from vaulttool.connection import VaultConnection, new_session, vault_url
from vaulttool.errors import VaultParseBodyError
from vaulttool.models import (
    VaultHealth,
    VaultInitResponse,
    VaultMountConfigRead,
    VaultMountConfigWrite,
    VaultMountRead,
    VaultMountWrite,
    VaultSealStatus,
    VaultUnseal,
    VaultUnsealKey,
    unseal_body,
)
from vaulttool.transport import parse_value, vault_request, vault_request_json

logger = logging.getLogger(__name__)

# Standby, sealed and uninitialized servers answer with these codes, but
# the body is still a valid health report.
HEALTH_STATUS_CODES = (200, 429, 501, 503)


@contextmanager
def _session_scope(session: Optional[requests.Session]) -> Iterator[requests.Session]:
    """Use the caller's session, or a new one that is closed afterwards."""
    if session is not None:
        yield session
        return
    with new_session() as owned:
        yield owned


def vault_health(
    address: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> VaultHealth:
    """https://developer.hashicorp.com/vault/api-docs/system/health"""
    with _session_scope(session) as http:
        return vault_request_json(
            http,
            "GET",
            vault_url(address, "/sys/health"),
            expected_status=HEALTH_STATUS_CODES,
            shape=VaultHealth,
            timeout=timeout,
        )


def vault_init(
    address: str,
    secret_shares: int,
    secret_threshold: int,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> Tuple[List[VaultUnsealKey], str]:
    """
    Initialize a new Vault server.

    Args:
        address: Vault base URL
        secret_shares: Number of shares to split the master key into
        secret_threshold: Number of shares required to reconstruct the
            master key. Must be less than or equal to ``secret_shares``.

    Returns:
        Tuple of (unseal key shares, initial root token)
    """
    body = {
        "secret_shares": secret_shares,
        "secret_threshold": secret_threshold,
    }
    with _session_scope(session) as http:
        rsp = vault_request_json(
            http,
            "PUT",
            vault_url(address, "/sys/init"),
            body=body,
            expected_status=(200,),
            shape=VaultInitResponse,
            timeout=timeout,
        )
    logger.info(f"Vault at {address} initialized with {secret_shares} key shares (threshold {secret_threshold})")
    return [VaultUnsealKey(key) for key in rsp.keys], rsp.root_token


def vault_seal_status(
    address: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> VaultSealStatus:
    with _session_scope(session) as http:
        return vault_request_json(
            http,
            "GET",
            vault_url(address, "/sys/seal-status"),
            expected_status=(200,),
            shape=VaultSealStatus,
            timeout=timeout,
        )


def vault_seal(conn: VaultConnection) -> None:
    vault_request(
        conn.session,
        "PUT",
        conn.url("/sys/seal"),
        headers=conn.headers,
        expected_status=(204,),
        timeout=conn.timeout,
    )
    logger.info(f"Vault at {conn.address} sealed")


def vault_unseal(
    address: str,
    unseal: VaultUnseal,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> VaultSealStatus:
    """
    Submit one key share, or reset the unseal progress.

    Args:
        address: Vault base URL
        unseal: ``VaultUnsealKey(share)`` or ``VaultUnsealReset()``

    Returns:
        Seal status after the submission
    """
    with _session_scope(session) as http:
        status = vault_request_json(
            http,
            "PUT",
            vault_url(address, "/sys/unseal"),
            body=unseal_body(unseal),
            expected_status=(200,),
            shape=VaultSealStatus,
            timeout=timeout,
        )
    logger.info(f"Vault unseal progress at {address}: {status.progress}/{status.t} (sealed={status.sealed})")
    return status


def vault_mounts(conn: VaultConnection) -> List[Tuple[str, VaultMountRead]]:
    """
    List mounted secrets engines.

    Results are sorted by mount point.
    """
    url = conn.url("/sys/mounts")
    rsp = vault_request_json(
        conn.session,
        "GET",
        url,
        headers=conn.headers,
        expected_status=(200,),
        timeout=conn.timeout,
    )
    if not isinstance(rsp, dict):
        raise VaultParseBodyError("GET", url, json.dumps(rsp), "Expected a JSON object")

    # Vault 0.6.1 moved the mount table under "data"; older servers return
    # it at the top level. See https://github.com/hashicorp/vault/issues/1965
    if "data" in rsp:
        table = rsp["data"]
    else:
        table = rsp

    mounts: Dict[str, VaultMountRead] = parse_value("GET", url, table, Dict[str, VaultMountRead])
    return sorted(mounts.items(), key=lambda item: item[0])


def vault_mount_tune(conn: VaultConnection, mount_point: str) -> VaultMountConfigRead:
    return vault_request_json(
        conn.session,
        "GET",
        conn.url(f"/sys/mounts/{mount_point}/tune"),
        headers=conn.headers,
        expected_status=(200,),
        shape=VaultMountConfigRead,
        timeout=conn.timeout,
    )


def vault_mount_set_tune(conn: VaultConnection, mount_point: str, mount_config: VaultMountConfigWrite) -> None:
    vault_request(
        conn.session,
        "POST",
        conn.url(f"/sys/mounts/{mount_point}/tune"),
        headers=conn.headers,
        body=mount_config.to_json(),
        expected_status=(204,),
        timeout=conn.timeout,
    )
    logger.info(f"Tuned Vault mount {mount_point}")


def vault_new_mount(conn: VaultConnection, mount_point: str, vault_mount: VaultMountWrite) -> None:
    vault_request(
        conn.session,
        "POST",
        conn.url(f"/sys/mounts/{mount_point}"),
        headers=conn.headers,
        body=vault_mount.to_json(),
        expected_status=(204,),
        timeout=conn.timeout,
    )
    logger.info(f"Mounted {vault_mount.type} secrets engine at {mount_point}")


def vault_unmount(conn: VaultConnection, mount_point: str) -> None:
    vault_request(
        conn.session,
        "DELETE",
        conn.url(f"/sys/mounts/{mount_point}"),
        headers=conn.headers,
        expected_status=(204,),
        timeout=conn.timeout,
    )
    logger.info(f"Unmounted {mount_point}")
