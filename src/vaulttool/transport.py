"""
Vault HTTP Transport

Thin adapter over a ``requests.Session``: sends one request, checks the
status code against the set the caller accepts and decodes JSON bodies.
Every resource function in vaulttool goes through here.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Optional, Type, TypeVar

import requests
from pydantic import TypeAdapter, ValidationError

from vaulttool.errors import VaultHTTPStatusError, VaultParseBodyError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def vault_request(
    session: requests.Session,
    method: str,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    body: Optional[Any] = None,
    expected_status: Iterable[int] = (200,),
    timeout: Optional[float] = None,
) -> requests.Response:
    """
    Make a request to the Vault HTTP API.

    Args:
        session: HTTP session (owns pooling and TLS settings)
        method: HTTP method, including the non-standard ``LIST``
        url: Full request URL
        headers: Extra request headers
        body: JSON-serializable request body. ``None`` sends no body at all.
        expected_status: Status codes considered successful
        timeout: Request timeout in seconds, passed to the session

    Returns:
        The raw response

    Raises:
        VaultHTTPStatusError: If the status code is not in ``expected_status``
    """
    kwargs: Dict[str, Any] = {"headers": headers or {}, "timeout": timeout}
    if body is not None:
        kwargs["json"] = body

    logger.debug(f"Vault request: {method} {url}")
    response = session.request(method, url, **kwargs)

    if response.status_code not in set(expected_status):
        logger.error(f"Vault API error ({response.status_code}) for {method} {url}")
        raise VaultHTTPStatusError(method, url, response.status_code, response.text)

    return response


def vault_request_json(
    session: requests.Session,
    method: str,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    body: Optional[Any] = None,
    expected_status: Iterable[int] = (200,),
    shape: Optional[Type[T]] = None,
    timeout: Optional[float] = None,
) -> Any:
    """
    Make a request and decode its JSON body.

    When ``shape`` is given the decoded value is validated into it (any type
    pydantic accepts: a model, a dataclass, ``dict[str, int]``...).

    Raises:
        VaultHTTPStatusError: If the status code is not in ``expected_status``
        VaultParseBodyError: If the body is not JSON or does not match ``shape``
    """
    response = vault_request(session, method, url, headers, body, expected_status, timeout)

    try:
        data = response.json()
    except ValueError as e:
        logger.error(f"Vault returned a non-JSON body for {method} {url}")
        raise VaultParseBodyError(method, url, response.text, str(e))

    if shape is None:
        return data
    return parse_value(method, url, data, shape)


def parse_value(method: str, url: str, data: Any, shape: Type[T]) -> T:
    """Validate an already decoded JSON value, raising VaultParseBodyError on mismatch."""
    try:
        return TypeAdapter(shape).validate_python(data)
    except ValidationError as e:
        logger.error(f"Vault response for {method} {url} does not match {_shape_name(shape)}")
        raise VaultParseBodyError(method, url, json.dumps(data), str(e))


def _shape_name(shape: Any) -> str:
    return getattr(shape, "__name__", repr(shape))
