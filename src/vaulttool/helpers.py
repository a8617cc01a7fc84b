"""
Vault Helper Functions

Process-wide Vault client for application code.
"""
import logging
import os
from typing import Optional

from vaulttool.client import VaultClient
from vaulttool.config import VaultConfig

logger = logging.getLogger(__name__)

# Global Vault client instance (lazy initialization)
_vault_client: Optional[VaultClient] = None


def get_vault_client() -> Optional[VaultClient]:
    """
    Get or create Vault client instance.

    Returns:
        VaultClient instance or None if Vault is not configured
    """
    global _vault_client

    if _vault_client is not None:
        return _vault_client

    config = VaultConfig.from_env()
    # Only create client if Vault is configured; the default address does not count
    if not (os.getenv("VAULT_ADDR") and config.is_configured):
        logger.debug("Vault not configured (missing VAULT_ADDR or VAULT_TOKEN)")
        return None

    _vault_client = VaultClient(config)
    return _vault_client


def reset_vault_client() -> None:
    """Drop the cached client so the next call re-reads the environment."""
    global _vault_client
    _vault_client = None
