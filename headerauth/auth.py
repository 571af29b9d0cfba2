"""API key extraction from the Authorization header.

Accepted shape: ``Authorization: ApiKey <key>``. The scheme token is
case-sensitive and must start the header value. Only the first value of the
header is read, and only the first space-delimited token after the scheme
is returned.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

log = logging.getLogger(__name__)

AUTH_HEADER = "Authorization"
AUTH_SCHEME = "ApiKey"

_MALFORMED = "malformed authorization header"


class AuthError(Exception):
    """Base class for Authorization header extraction failures."""


class NoAuthHeaderError(AuthError):
    """No usable Authorization header was supplied.

    Every instance compares equal to every other, so callers can test
    against ``NO_AUTH_HEADER`` with ``==`` as well as ``is``.
    """

    def __init__(self) -> None:
        super().__init__("no authorization header included")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NoAuthHeaderError)

    def __hash__(self) -> int:
        return hash(NoAuthHeaderError)


class MalformedAuthHeaderError(AuthError):
    """Authorization header present but not of the form ``ApiKey <key>``."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"{_MALFORMED}: {detail}" if detail else _MALFORMED)


NO_AUTH_HEADER = NoAuthHeaderError()


def mask_key(key: str) -> str:
    """Star out the key for logging, keeping at most its last 6 characters.

    No more than half of the key is ever left visible, so short keys come
    back fully starred.
    """
    visible = min(6, len(key) // 2)
    if not visible:
        return "*" * len(key)
    return "*" * (len(key) - visible) + key[-visible:]


def _first_value(headers: Mapping[str, Any], name: str) -> str:
    """Return the first value stored under ``name``, or "" if there is none.

    Multi-valued header containers (aiohttp's ``CIMultiDictProxy`` and
    friends) are read through ``getall``; plain mappings use exact-case
    lookup and may hold either a single string or a sequence of strings.
    """
    getall = getattr(headers, "getall", None)
    if getall is not None:
        values = getall(name, [])
    else:
        values = headers.get(name)
    if not values:
        return ""
    if isinstance(values, str):
        return values
    if isinstance(values, Sequence):
        return values[0]
    return ""


def extract_api_key(headers: Mapping[str, Any]) -> str:
    """Extract the API key from request headers.

    Raises NoAuthHeaderError when no Authorization value is present and
    MalformedAuthHeaderError when the value is not ``ApiKey <key>``.
    An ``ApiKey `` header with nothing after the space yields "".
    """
    raw = _first_value(headers, AUTH_HEADER)
    if not raw:
        raise NoAuthHeaderError()

    scheme, sep, rest = raw.partition(" ")
    if scheme != AUTH_SCHEME:
        log.debug("Rejected Authorization header without %s scheme", AUTH_SCHEME)
        raise MalformedAuthHeaderError(f"expected {AUTH_SCHEME} scheme")
    if not sep:
        log.debug("Rejected %s Authorization header without a key", AUTH_SCHEME)
        raise MalformedAuthHeaderError("missing key")

    key = rest.partition(" ")[0]
    log.debug("Extracted API key %s", mask_key(key))
    return key


def get_api_key(headers: Mapping[str, Any]) -> tuple[str, AuthError | None]:
    """Extract the API key, returning ``(key, error)`` instead of raising.

    On failure the key is always "". A missing header always returns the
    ``NO_AUTH_HEADER`` sentinel.
    """
    try:
        return extract_api_key(headers), None
    except NoAuthHeaderError:
        return "", NO_AUTH_HEADER
    except MalformedAuthHeaderError as exc:
        return "", exc
