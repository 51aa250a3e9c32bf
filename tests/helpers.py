"""Shared test helpers for building JWK documents from real RSA keys."""

from __future__ import annotations

import base64
import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

# Public RSA key taken from a published key set; its modulus has a leading zero byte.
PUBLISHED_PUBLIC_JWK: dict[str, str] = {
    "kid": "cluster-auth",
    "kty": "RSA",
    "use": "sig",
    "n": (
        "ALhQ-ZVQM9gIxRI8yFjMAY7S60DcWl8tsJPWIsIPFDnmCXr5Bt__lFlwBLM7q6ie5av-LkjwG0xAm7cohOHU7"
        "xEhZqh6n8CmJPlRbz_E8uFYfW67eP0YmdcS9dDBYn_77t_Ji7L0T2w62k7rE_vZ4k0MoSQnYkRq6uYZoltwaA"
        "O_3pab6dPov9HtRcTERHDTlKkNR4WDBZ9zLJKo2UbNoIoJpJ0D1T6CQXQVkFRiGFW-dnd-IZi4b2Dw93-ISR0v"
        "pmb0uVuo3pAlyuBwIXgzcTrwROFdXbSC3STyRLMd1Gvdc_CBGmGvIsGzld8no3WVWdzR0sZrawEWAaaOSvQcOI0"
    ),
    "e": "AQAB",
}


def b64url_uint(value: int) -> str:
    """Encode an unsigned integer as unpadded base64url big-endian bytes."""
    raw = value.to_bytes((value.bit_length() + 7) // 8 or 1, "big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def rsa_public_jwk(private_key: RSAPrivateKey, kid: str, **extra: Any) -> dict[str, Any]:
    """Public JWK (n, e) for the given key."""
    numbers = private_key.public_key().public_numbers()
    jwk: dict[str, Any] = {
        "kty": "RSA",
        "kid": kid,
        "n": b64url_uint(numbers.n),
        "e": b64url_uint(numbers.e),
    }
    jwk.update(extra)
    return jwk


def rsa_private_jwk(
    private_key: RSAPrivateKey,
    kid: str,
    *,
    include_crt: bool = True,
    **extra: Any,
) -> dict[str, Any]:
    """Private JWK with n, e, d and, unless disabled, p, q, dp, dq and qi."""
    numbers = private_key.private_numbers()
    jwk = rsa_public_jwk(private_key, kid)
    jwk["d"] = b64url_uint(numbers.d)
    if include_crt:
        jwk.update(
            {
                "p": b64url_uint(numbers.p),
                "q": b64url_uint(numbers.q),
                "dp": b64url_uint(numbers.dmp1),
                "dq": b64url_uint(numbers.dmq1),
                "qi": b64url_uint(numbers.iqmp),
            }
        )
    jwk.update(extra)
    return jwk


def make_document(*keys: Any, **members: Any) -> str:
    """Serialize a key set document with the given key objects."""
    document: dict[str, Any] = {"keys": list(keys)}
    document.update(members)
    return json.dumps(document)
