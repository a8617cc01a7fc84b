"""
Vault Data Models

Typed shapes for the Vault API responses and request bodies handled by
vaulttool. Read shapes are frozen and strict: a field with the wrong JSON
type is a parse error, not a coercion.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr, field_serializer


class _ReadModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class _WriteModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_json(self) -> Dict[str, Any]:
        """Request body with absent fields left out entirely."""
        return self.model_dump(exclude_none=True)


class VaultHealth(_ReadModel):
    """Response of ``GET /sys/health``."""

    version: StrictStr
    server_time_utc: StrictInt
    initialized: StrictBool
    sealed: StrictBool
    standby: StrictBool


class VaultInitResponse(_ReadModel):
    keys: list[StrictStr]
    root_token: StrictStr


class VaultSealStatus(_ReadModel):
    """Snapshot of the seal state."""

    sealed: StrictBool
    t: StrictInt  # threshold
    n: StrictInt  # number of shares
    progress: StrictInt


@dataclass(frozen=True)
class VaultUnsealKey:
    """One key share, as produced by ``vault_init``."""

    key: str


@dataclass(frozen=True)
class VaultUnsealReset:
    """Discard the key shares submitted so far."""


VaultUnseal = Union[VaultUnsealKey, VaultUnsealReset]


def unseal_body(unseal: VaultUnseal) -> Dict[str, Any]:
    if isinstance(unseal, VaultUnsealKey):
        return {"key": unseal.key}
    if isinstance(unseal, VaultUnsealReset):
        return {"reset": True}
    raise TypeError(f"Expected VaultUnsealKey or VaultUnsealReset, got {type(unseal).__name__}")


class VaultMountConfigRead(_ReadModel):
    """Lease settings of a mount, TTLs in seconds."""

    default_lease_ttl: StrictInt
    max_lease_ttl: StrictInt


class VaultMountRead(_ReadModel):
    type: StrictStr
    description: StrictStr
    config: VaultMountConfigRead


class VaultMountConfigWrite(_WriteModel):
    """
    Partial lease settings update.

    Fields left as ``None`` are not sent. TTLs given in seconds are sent as
    ``"<n>s"`` strings.
    """

    default_lease_ttl: Optional[StrictInt] = None
    max_lease_ttl: Optional[StrictInt] = None

    @field_serializer("default_lease_ttl", "max_lease_ttl")
    def _format_seconds(self, value: Optional[int]) -> Optional[str]:
        if value is None:
            return None
        return f"{value}s"


class VaultMountWrite(_WriteModel):
    """Body for mounting a new secrets engine."""

    type: str
    description: Optional[str] = None
    config: Optional[VaultMountConfigWrite] = None


class VaultSecretMetadata(_ReadModel):
    """Lease information returned with every secret read."""

    lease_duration: StrictInt
    lease_id: StrictStr
    renewable: StrictBool


@dataclass(frozen=True)
class UnparsedSecretData:
    """
    Secret payload that did not fit the requested type.

    Returned by ``vault_read`` in place of the decoded value so that the
    metadata is still available. ``raw`` is the ``data`` object as sent by
    Vault, ``error`` the validation failure.
    """

    raw: Dict[str, Any]
    error: str
