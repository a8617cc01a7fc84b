"""
vaulttool - HashiCorp Vault HTTP API client

Modules:
- connection: Connection handle and URL building
- system: Health, init, seal/unseal and mount management
- secrets: Generic secret read/write/delete/list, recursive listing
- client: VaultClient object interface
- helpers: Process-wide client from the environment
"""

__version__ = "0.1.0"

from vaulttool.config import VaultConfig
from vaulttool.connection import VaultConnection, connect_to_vault
from vaulttool.errors import VaultException, VaultHTTPStatusError, VaultParseBodyError
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
from vaulttool.secrets import (
    is_folder,
    vault_delete,
    vault_list,
    vault_list_recursive,
    vault_read,
    vault_write,
)
from vaulttool.client import VaultClient
from vaulttool.helpers import get_vault_client

__all__ = [
    # Configuration and connection
    'VaultConfig',
    'VaultConnection',
    'connect_to_vault',
    'VaultClient',
    'get_vault_client',
    # Errors
    'VaultException',
    'VaultHTTPStatusError',
    'VaultParseBodyError',
    # Models
    'UnparsedSecretData',
    'VaultHealth',
    'VaultMountConfigRead',
    'VaultMountConfigWrite',
    'VaultMountRead',
    'VaultMountWrite',
    'VaultSealStatus',
    'VaultSecretMetadata',
    'VaultUnseal',
    'VaultUnsealKey',
    'VaultUnsealReset',
    # System backend
    'vault_health',
    'vault_init',
    'vault_seal_status',
    'vault_seal',
    'vault_unseal',
    'vault_mounts',
    'vault_mount_tune',
    'vault_mount_set_tune',
    'vault_new_mount',
    'vault_unmount',
    # Secrets
    'vault_write',
    'vault_read',
    'vault_delete',
    'vault_list',
    'is_folder',
    'vault_list_recursive',
]
