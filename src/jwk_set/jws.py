"""
Compact JWS token creation and verification backed by a key set.

Produces and checks three-part tokens (header.payload.signature) where the
header names the signing key with ``kid``, so a verifier can be picked from
a KeySet without knowing the key family behind it.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from jwk_set.encoding import b64url_decode, b64url_encode
from jwk_set.exceptions import VerifyError

if TYPE_CHECKING:
    from jwk_set.capabilities import Signer
    from jwk_set.key_set import KeySet


def _decode_json_part(part: str, section_name: str) -> dict[str, Any]:
    try:
        value = json.loads(b64url_decode(part))
    except (ValueError, RecursionError) as exc:
        raise VerifyError("INVALID_JWS", f"Token {section_name} is not valid base64url JSON") from exc
    if not isinstance(value, dict):
        raise VerifyError("INVALID_JWS", f"Token {section_name} must be a JSON object")
    return value


def create_jws(payload: dict[str, Any], signer: Signer, kid: str) -> str:
    """
    Create a compact JWS token signed by ``signer``.

    The header carries the signer's algorithm and ``kid``; the signature
    covers the ASCII bytes of "header.payload".

    Raises:
        SignError: If the signer fails
    """
    header = {"alg": signer.algorithm, "typ": "JWT", "kid": kid}
    header_b64 = b64url_encode(json.dumps(header, separators=(",", ":")).encode())
    payload_b64 = b64url_encode(json.dumps(payload, separators=(",", ":")).encode())

    signing_input = f"{header_b64}.{payload_b64}".encode("ascii")
    signature = signer.sign(signing_input)

    return f"{header_b64}.{payload_b64}.{b64url_encode(signature)}"


def verify_jws(token: str, key_set: KeySet) -> dict[str, Any]:
    """
    Verify a compact JWS token against the verifiers of ``key_set``.

    Returns:
        The decoded payload.

    Raises:
        VerifyError: INVALID_JWS, KEY_NOT_FOUND, ALGORITHM_MISMATCH or
            INVALID_SIGNATURE
    """
    parts = token.split(".")
    if len(parts) != 3 or not token.isascii():
        raise VerifyError("INVALID_JWS", "Invalid JWS format: expected 3 dot-separated parts")

    header_b64, payload_b64, signature_b64 = parts
    header = _decode_json_part(header_b64, "header")

    kid = header.get("kid")
    if not isinstance(kid, str) or not kid:
        raise VerifyError("INVALID_JWS", "Token header is missing kid")

    verifier = key_set.find_verifier(kid)
    if verifier is None:
        raise VerifyError("KEY_NOT_FOUND", f"No verifier for kid '{kid}'", {"kid": kid})

    alg = header.get("alg")
    if alg != verifier.algorithm:
        raise VerifyError(
            "ALGORITHM_MISMATCH",
            f"Token algorithm {alg!r} does not match key algorithm {verifier.algorithm!r}",
            {"kid": kid},
        )

    try:
        signature = b64url_decode(signature_b64)
    except ValueError as exc:
        raise VerifyError("INVALID_JWS", "Token signature is not valid base64url") from exc

    verifier.verify(f"{header_b64}.{payload_b64}".encode("ascii"), signature)

    return _decode_json_part(payload_b64, "payload")
