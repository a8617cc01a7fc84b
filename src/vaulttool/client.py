"""
HashiCorp Vault Client

Object interface over the vaulttool functions: one configured session and
connection, reused by every call.
"""
import logging
from typing import Any, List, Optional, Tuple, Type, TypeVar, Union

import requests

from vaulttool.config import VaultConfig
from vaulttool.connection import VaultConnection, connect_to_vault, new_session
from vaulttool.models import (
    UnparsedSecretData,
    VaultHealth,
    VaultMountConfigRead,
    VaultMountConfigWrite,
    VaultMountRead,
    VaultMountWrite,
    VaultSealStatus,
    VaultSecretMetadata,
    VaultUnseal,
    VaultUnsealKey,
)
from vaulttool import secrets, system

logger = logging.getLogger(__name__)

T = TypeVar("T")


class VaultClient:
    """
    HashiCorp Vault client.

    Wraps server lifecycle (health, init, seal, unseal), mount management
    and generic secret operations behind a single configured session.
    Operations that Vault serves without a token work without one; all
    others require ``config.token``.
    """

    def __init__(self, config: Optional[VaultConfig] = None, session: Optional[requests.Session] = None):
        """
        Initialize Vault client.

        Args:
            config: Vault configuration. If None, loads from environment.
            session: HTTP session to use. If None, one is created from config.
        """
        self.config = config or VaultConfig.from_env()
        self.session = session or new_session(self.config.verify)
        self._connection: Optional[VaultConnection] = None

        logger.info(f"Vault client initialized: {self.config.address}")

    @property
    def connection(self) -> VaultConnection:
        """Authenticated connection, created on first use."""
        if self._connection is None:
            if not self.config.token:
                raise ValueError("VAULT_TOKEN must be provided for authenticated Vault operations")
            self._connection = connect_to_vault(
                self.config.address,
                self.config.token,
                session=self.session,
                timeout=self.config.timeout,
            )
        return self._connection

    # Server lifecycle

    def health_check(self) -> VaultHealth:
        """Check Vault health. Sealed, standby and uninitialized servers still report."""
        return system.vault_health(self.config.address, self.session, self.config.timeout)

    def initialize(self, secret_shares: int, secret_threshold: int) -> Tuple[List[VaultUnsealKey], str]:
        """
        Initialize the server.

        Returns:
            Tuple of (unseal key shares, root token)
        """
        return system.vault_init(
            self.config.address, secret_shares, secret_threshold, self.session, self.config.timeout
        )

    def seal_status(self) -> VaultSealStatus:
        return system.vault_seal_status(self.config.address, self.session, self.config.timeout)

    def seal(self) -> None:
        system.vault_seal(self.connection)

    def unseal(self, unseal: VaultUnseal) -> VaultSealStatus:
        return system.vault_unseal(self.config.address, unseal, self.session, self.config.timeout)

    # Mount management

    def list_mounts(self) -> List[Tuple[str, VaultMountRead]]:
        """Mounted secrets engines, sorted by mount point."""
        return system.vault_mounts(self.connection)

    def get_mount_tune(self, mount_point: str) -> VaultMountConfigRead:
        return system.vault_mount_tune(self.connection, mount_point)

    def set_mount_tune(self, mount_point: str, mount_config: VaultMountConfigWrite) -> None:
        system.vault_mount_set_tune(self.connection, mount_point, mount_config)

    def mount(self, mount_point: str, vault_mount: VaultMountWrite) -> None:
        system.vault_new_mount(self.connection, mount_point, vault_mount)

    def unmount(self, mount_point: str) -> None:
        system.vault_unmount(self.connection, mount_point)

    # Secrets

    def write_secret(self, path: str, data: Any) -> None:
        """
        Write a secret.

        Args:
            path: Full secret path including the mount (e.g., "secret/app/db")
            data: Secret data; must encode as a JSON object
        """
        secrets.vault_write(self.connection, path, data)

    def read_secret(
        self,
        path: str,
        data_type: Type[T] = dict,
    ) -> Tuple[VaultSecretMetadata, Union[T, UnparsedSecretData]]:
        """
        Read a secret.

        Returns:
            Tuple of (lease metadata, data). The data is an
            ``UnparsedSecretData`` when it does not fit ``data_type``.
        """
        return secrets.vault_read(self.connection, path, data_type)

    def delete_secret(self, path: str) -> None:
        secrets.vault_delete(self.connection, path)

    def list_secrets(self, path: str = "") -> List[str]:
        """Entries directly below ``path``; folders end with ``/``."""
        return secrets.vault_list(self.connection, path)

    def list_secrets_recursive(self, path: str = "") -> List[str]:
        """Every secret below ``path``, subfolders included. No folders in the result."""
        return secrets.vault_list_recursive(self.connection, path)
