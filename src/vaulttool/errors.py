"""
Vault Client Errors

Exceptions raised when the Vault HTTP API answers with an unexpected
status code or with a body that does not have the expected shape.
"""

from __future__ import annotations

from typing import Optional


class VaultException(Exception):
    """Base class for all errors raised by vaulttool."""
    pass


class VaultHTTPStatusError(VaultException):
    """Raised when Vault answers with a status code outside the accepted set."""

    def __init__(self, method: str, url: str, status_code: int, body: str):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(f"Vault API error ({status_code}) for {method} {url}: {body or 'No body'}")


class VaultParseBodyError(VaultException):
    """Raised when a Vault response body cannot be decoded into the expected shape."""

    def __init__(self, method: str, url: str, body: Optional[str], error: str):
        self.method = method
        self.url = url
        self.body = body
        self.error = error
        super().__init__(f"Could not parse Vault response for {method} {url}: {error}")
