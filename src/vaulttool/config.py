"""
Vault Configuration

Connection settings for vaulttool, loaded from the environment.
"""
import os
from typing import Optional
from dataclasses import dataclass


@dataclass
class VaultConfig:
    """Vault connection configuration."""

    address: str = "http://localhost:8200"
    token: Optional[str] = None

    # Connection settings
    timeout: int = 30
    verify: bool = True  # Verify SSL certificates

    @classmethod
    def from_env(cls) -> "VaultConfig":
        """Create VaultConfig from environment variables."""
        return cls(
            address=os.getenv("VAULT_ADDR", "http://localhost:8200"),
            token=os.getenv("VAULT_TOKEN"),
            timeout=int(os.getenv("VAULT_TIMEOUT", "30")),
            verify=os.getenv("VAULT_VERIFY", "true").lower() == "true",
        )

    @property
    def is_configured(self) -> bool:
        """True when both an address and a token are available."""
        return bool(self.address and self.token)
