"""
Base64url helpers and numeric parameter extraction for JWK objects.

Every numeric member of a JWK (RFC 7518 section 6.3) is the base64url
encoding, without padding, of the big-endian bytes of an unsigned integer.
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import TYPE_CHECKING, Any

from jwk_set.exceptions import ExtractionError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

FIELD_MISSING = "FIELD_MISSING"
TYPE_MISMATCH = "TYPE_MISMATCH"
DECODE_ERROR = "DECODE_ERROR"

_B64URL_PATTERN = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def b64url_encode(data: bytes) -> str:
    """Base64url-encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(data: str) -> bytes:
    """
    Strictly base64url-decode a string, adding padding as needed.

    Raises:
        ValueError: If the string contains characters outside the base64url
            alphabet or has an impossible length.
    """
    if not _B64URL_PATTERN.fullmatch(data):
        msg = "Value contains characters outside the base64url alphabet"
        raise ValueError(msg)
    stripped = data.rstrip("=")
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        return base64.b64decode(padded, altchars=b"-_", validate=True)
    except binascii.Error as exc:
        msg = f"Invalid base64url value: {exc}"
        raise ValueError(msg) from exc


def find_string(jwk: Mapping[str, Any], name: str) -> str:
    """
    Return the string member ``name`` of a JWK object.

    Raises:
        ExtractionError: FIELD_MISSING or TYPE_MISMATCH
    """
    if name not in jwk:
        raise ExtractionError(name, FIELD_MISSING, f"Failed to locate '{name}' in JWK")
    value = jwk[name]
    if not isinstance(value, str):
        raise ExtractionError(name, TYPE_MISMATCH, f"Member '{name}' is not a string")
    return value


def extract_big_int(jwk: Mapping[str, Any], name: str) -> int:
    """
    Decode the base64url member ``name`` as a big-endian unsigned integer.

    Raises:
        ExtractionError: FIELD_MISSING, TYPE_MISMATCH or DECODE_ERROR
    """
    encoded = find_string(jwk, name)
    try:
        raw = b64url_decode(encoded)
    except ValueError as exc:
        raise ExtractionError(
            name, DECODE_ERROR, f"Failed to base64url-decode '{name}': {exc}"
        ) from exc
    if not raw:
        raise ExtractionError(name, DECODE_ERROR, f"Member '{name}' decodes to an empty value")
    return int.from_bytes(raw, "big")


def extract_params(
    jwk: Mapping[str, Any],
    required: Iterable[str],
    optional: Iterable[str] = (),
) -> dict[str, int | None]:
    """
    Extract a set of integer parameters from a JWK object.

    Required parameters must all decode or the first failure is raised.
    Optional parameters that are missing or malformed are recorded as None.

    Raises:
        ExtractionError: If a required parameter cannot be extracted
    """
    params: dict[str, int | None] = {}
    for name in required:
        params[name] = extract_big_int(jwk, name)

    for name in optional:
        try:
            params[name] = extract_big_int(jwk, name)
        except ExtractionError:
            params[name] = None

    return params
