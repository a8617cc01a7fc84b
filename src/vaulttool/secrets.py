"""
Vault Generic Secrets

Read, write, delete and list secrets under any mounted path, plus a
recursive listing that flattens a folder hierarchy into leaf paths.

Paths returned by listing follow Vault's own convention: an entry ending
in ``/`` is a folder, anything else is a secret.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any, Dict, List, Mapping, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, StrictStr, TypeAdapter, ValidationError

from vaulttool.connection import VaultConnection
from vaulttool.errors import VaultParseBodyError
from vaulttool.models import UnparsedSecretData, VaultSecretMetadata
from vaulttool.transport import parse_value, vault_request, vault_request_json

logger = logging.getLogger(__name__)

T = TypeVar("T")

FOLDER_SEPARATOR = "/"


class _ListKeys(BaseModel):
    keys: List[StrictStr]


class _ListResponse(BaseModel):
    data: _ListKeys


def _secret_body(value: Any) -> Dict[str, Any]:
    if isinstance(value, BaseModel):
        body = value.model_dump(mode="json")
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        body = dataclasses.asdict(value)
    elif isinstance(value, Mapping):
        body = dict(value)
    else:
        body = value

    if not isinstance(body, dict):
        raise TypeError(f"Secret value must encode as a JSON object, got {type(value).__name__}")
    return body


def vault_write(conn: VaultConnection, path: str, value: Any) -> None:
    """
    Write a secret.

    Args:
        conn: Vault connection
        path: Full secret path including the mount (e.g., "secret/app/db")
        value: Mapping, pydantic model or dataclass instance. It must
            encode as a JSON object.
    """
    body = _secret_body(value)
    vault_request(
        conn.session,
        "POST",
        conn.url(path),
        headers=conn.headers,
        body=body,
        expected_status=(204,),
        timeout=conn.timeout,
    )
    logger.debug(f"Secret written to {path}")


def vault_read(
    conn: VaultConnection,
    path: str,
    data_type: Type[T] = dict,
) -> Tuple[VaultSecretMetadata, Union[T, UnparsedSecretData]]:
    """
    Read a secret.

    The lease metadata and the secret's ``data`` are decoded separately. A
    response without valid metadata raises ``VaultParseBodyError``. If only
    ``data`` fails to validate as ``data_type``, the metadata is returned
    together with an ``UnparsedSecretData`` holding the raw value and the
    validation error.

    Args:
        conn: Vault connection
        path: Full secret path including the mount
        data_type: Type to validate ``data`` into (pydantic model,
            dataclass, ``dict[str, str]``...). Defaults to a plain dict.

    Returns:
        Tuple of (metadata, decoded data or UnparsedSecretData)
    """
    url = conn.url(path)
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

    metadata = parse_value("GET", url, rsp, VaultSecretMetadata)

    data = rsp.get("data")
    if not isinstance(data, dict):
        logger.error(f"Vault response for GET {url} has no \"data\" object")
        raise VaultParseBodyError("GET", url, json.dumps(rsp), 'Expected a "data" object')

    try:
        value = TypeAdapter(data_type).validate_python(data)
    except ValidationError as e:
        logger.warning(f"Secret at {path} does not match {getattr(data_type, '__name__', data_type)}")
        return metadata, UnparsedSecretData(raw=data, error=str(e))

    return metadata, value


def vault_delete(conn: VaultConnection, path: str) -> None:
    vault_request(
        conn.session,
        "DELETE",
        conn.url(path),
        headers=conn.headers,
        expected_status=(204,),
        timeout=conn.timeout,
    )
    logger.debug(f"Secret deleted from {path}")


def _as_folder(path: str) -> str:
    if not path:
        return FOLDER_SEPARATOR
    if path.endswith(FOLDER_SEPARATOR):
        return path
    return path + FOLDER_SEPARATOR


def vault_list(conn: VaultConnection, path: str) -> List[str]:
    """
    List the entries directly below a folder.

    Results are full secret paths, the folder path followed by each key.
    Use ``is_folder`` to tell subfolders from secrets. The order of the
    results is unspecified; use ``vault_list_recursive`` to collect every
    secret below the folder.
    """
    rsp = vault_request_json(
        conn.session,
        "LIST",
        conn.url(path),
        headers=conn.headers,
        expected_status=(200,),
        shape=_ListResponse,
        timeout=conn.timeout,
    )
    folder = _as_folder(path)
    return [folder + key for key in rsp.data.keys]


def is_folder(path: str) -> bool:
    """
    Does the path end with a ``/``?

    Meant to be used on the results of ``vault_list``.
    """
    return path.endswith(FOLDER_SEPARATOR)


def vault_list_recursive(conn: VaultConnection, path: str) -> List[str]:
    """
    List every secret below a folder, descending into all subfolders.

    There are no folders in the result. Folders are expanded depth-first in
    the order Vault lists them, one request at a time; the order itself is
    unspecified.
    """
    secrets: List[str] = []
    pending = list(reversed(vault_list(conn, path)))
    while pending:
        entry = pending.pop()
        if is_folder(entry):
            pending.extend(reversed(vault_list(conn, entry)))
        else:
            secrets.append(entry)

    logger.debug(f"Found {len(secrets)} secrets below {path}")
    return secrets
