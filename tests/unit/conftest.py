"""
Shared fixtures for vaulttool unit tests.

FakeSession stands in for ``requests.Session``: responses are registered
per (method, path) and every request is recorded for inspection.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest

from vaulttool.connection import VaultConnection, connect_to_vault

VAULT_ADDR = "http://vault.test:8200"
VAULT_TOKEN = "s.test-root-token"


def make_response(status_code: int = 200, json_body: Any = None, text: Optional[str] = None) -> MagicMock:
    """Build a response double with the parts of requests.Response vaulttool uses."""
    if text is None:
        text = "" if json_body is None else json.dumps(json_body)
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.json.side_effect = lambda: json.loads(text)
    return response


@dataclass
class RecordedRequest:
    method: str
    url: str
    kwargs: Dict[str, Any]

    @property
    def headers(self) -> Dict[str, str]:
        return self.kwargs.get("headers", {})

    @property
    def has_body(self) -> bool:
        return "json" in self.kwargs

    @property
    def body(self) -> Any:
        return self.kwargs["json"]


@dataclass
class FakeSession:
    routes: Dict[Tuple[str, str], MagicMock] = field(default_factory=dict)
    requests: List[RecordedRequest] = field(default_factory=list)
    closed: bool = False

    def add(self, method: str, path: str, status_code: int = 200, json_body: Any = None, text: Optional[str] = None):
        """Register a response for ``path`` (relative to /v1)."""
        url = f"{VAULT_ADDR}/v1/{path.lstrip('/')}"
        self.routes[(method, url)] = make_response(status_code, json_body, text)

    def request(self, method: str, url: str, **kwargs):
        self.requests.append(RecordedRequest(method, url, kwargs))
        try:
            return self.routes[(method, url)]
        except KeyError:
            return make_response(404, {"errors": []})

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def conn(session) -> VaultConnection:
    return connect_to_vault(VAULT_ADDR, VAULT_TOKEN, session=session)


@pytest.fixture
def api_url():
    """Full URL for a path below /v1 on the fake server."""
    return lambda path: f"{VAULT_ADDR}/v1/{path.lstrip('/')}"
