"""
Vault Connection

A ``VaultConnection`` bundles the server address, the auth token and the
HTTP session shared by every request made through it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

import requests

logger = logging.getLogger(__name__)

API_PREFIX = "/v1"
TOKEN_HEADER = "X-Vault-Token"


@dataclass(frozen=True)
class VaultConnection:
    """
    Read-only handle for authenticated Vault calls.

    There is nothing to close: the session is pooled and reused by every
    call made through this connection.
    """

    address: str
    token: str = field(repr=False)
    session: requests.Session = field(repr=False, compare=False)
    timeout: Optional[float] = None

    def url(self, path: str) -> str:
        return vault_url(self.address, path)

    @property
    def headers(self) -> Dict[str, str]:
        return {TOKEN_HEADER: self.token}


def vault_url(address: str, path: str) -> str:
    """
    Build a full API URL.

    >>> vault_url("http://localhost:8200", "/sys/health")
    'http://localhost:8200/v1/sys/health'
    >>> vault_url("http://localhost:8200/", "secret/app")
    'http://localhost:8200/v1/secret/app'
    """
    return f"{address.rstrip('/')}{API_PREFIX}/{path.lstrip('/')}"


def new_session(verify: bool = True) -> requests.Session:
    """Create the pooled HTTP session used for Vault requests."""
    session = requests.Session()
    session.verify = verify
    session.headers.update({'Accept': 'application/json'})
    return session


def connect_to_vault(
    address: str,
    token: str,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
    verify: bool = True,
) -> VaultConnection:
    """
    Create a connection object.

    Does not contact the server, which is also why there is no matching
    disconnect function.

    Args:
        address: Vault base URL (e.g., "https://vault.example.com:8200")
        token: Auth token sent as ``X-Vault-Token``
        session: Existing session to reuse. A new one is created if omitted.
        timeout: Request timeout in seconds
        verify: Verify TLS certificates (ignored when ``session`` is given)
    """
    if session is None:
        session = new_session(verify)
    logger.debug(f"Vault connection prepared for {address}")
    return VaultConnection(address=address, token=token, session=session, timeout=timeout)
