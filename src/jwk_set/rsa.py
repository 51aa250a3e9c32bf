"""
RSA key construction from JWK parameters and RSA signer/verifier.

Signatures use RSASSA-PKCS1-v1_5 (RFC 7518 section 3.3) over the digest
selected by the JWS algorithm name.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from jwk_set.capabilities import Signer, Verifier
from jwk_set.encoding import extract_params
from jwk_set.exceptions import KeyConstructionError, SignError, VerifyError

if TYPE_CHECKING:
    from collections.abc import Mapping

PUBLIC_PARAMS: tuple[str, ...] = ("n", "e")
PRIVATE_PARAMS: tuple[str, ...] = ("n", "e", "d")
CRT_PARAMS: tuple[str, ...] = ("p", "q", "dp", "dq", "qi")

RSA_ALGORITHMS: dict[str, type[hashes.HashAlgorithm]] = {
    "RS256": hashes.SHA256,
    "RS384": hashes.SHA384,
    "RS512": hashes.SHA512,
}


def _hash_for(algorithm: str) -> hashes.HashAlgorithm:
    try:
        return RSA_ALGORITHMS[algorithm]()
    except KeyError:
        msg = f"Unsupported RSA signature algorithm: {algorithm}"
        raise ValueError(msg) from None


def _require(params: Mapping[str, int | None], names: tuple[str, ...]) -> list[int]:
    values = []
    for name in names:
        value = params.get(name)
        if value is None:
            raise KeyConstructionError(
                "KEY_CONSTRUCTION_FAILED",
                f"Missing RSA parameter '{name}'",
                {"field": name},
            )
        values.append(value)
    return values


def build_rsa_public_key(params: Mapping[str, int | None]) -> rsa.RSAPublicKey:
    """
    Build an RSA public key from the modulus ``n`` and exponent ``e``.

    Raises:
        KeyConstructionError: If a parameter is absent or the numbers are rejected
    """
    n, e = _require(params, PUBLIC_PARAMS)
    try:
        return rsa.RSAPublicNumbers(e, n).public_key()
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyConstructionError(
            "KEY_CONSTRUCTION_FAILED",
            f"Failed to create RSA public key: {exc}",
        ) from exc


def build_rsa_private_key(params: Mapping[str, int | None]) -> rsa.RSAPrivateKey:
    """
    Build an RSA private key from ``n``, ``e`` and ``d``.

    The prime factors ``p`` and ``q`` are used when both are supplied and
    recovered from ``(n, e, d)`` otherwise. The CRT values ``dp``, ``dq`` and
    ``qi`` are used when all three are supplied and derived otherwise.
    Partial CRT data is therefore never an error.

    Raises:
        KeyConstructionError: If a mandatory parameter is absent or the
            numbers do not form a valid key
    """
    n, e, d = _require(params, PRIVATE_PARAMS)
    p = params.get("p")
    q = params.get("q")
    dp = params.get("dp")
    dq = params.get("dq")
    qi = params.get("qi")

    try:
        if p is None or q is None:
            p, q = rsa.rsa_recover_prime_factors(n, e, d)
            dp = dq = qi = None

        if dp is None or dq is None or qi is None:
            dp = rsa.rsa_crt_dmp1(d, p)
            dq = rsa.rsa_crt_dmq1(d, q)
            qi = rsa.rsa_crt_iqmp(p, q)

        numbers = rsa.RSAPrivateNumbers(
            p=p,
            q=q,
            d=d,
            dmp1=dp,
            dmq1=dq,
            iqmp=qi,
            public_numbers=rsa.RSAPublicNumbers(e, n),
        )
        return numbers.private_key()
    except (ValueError, ZeroDivisionError, UnsupportedAlgorithm) as exc:
        raise KeyConstructionError(
            "KEY_CONSTRUCTION_FAILED",
            f"Failed to create RSA private key: {exc}",
        ) from exc


class RSASigner(Signer):
    """Signs messages with an RSA private key."""

    def __init__(self, private_key: rsa.RSAPrivateKey, algorithm: str = "RS256") -> None:
        self._hash = _hash_for(algorithm)
        self._algorithm = algorithm
        self._private_key = private_key

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def key_size(self) -> int:
        return self._private_key.key_size

    def sign(self, message: bytes) -> bytes:
        try:
            return self._private_key.sign(message, padding.PKCS1v15(), self._hash)
        except (ValueError, TypeError) as exc:
            raise SignError("SIGNING_FAILED", f"RSA signing failed: {exc}") from exc

    def public_verifier(self) -> RSAVerifier:
        """Return a verifier for the public half of this key."""
        return RSAVerifier(self._private_key.public_key(), self._algorithm)


class RSAVerifier(Verifier):
    """Verifies message signatures with an RSA public key."""

    def __init__(self, public_key: rsa.RSAPublicKey, algorithm: str = "RS256") -> None:
        self._hash = _hash_for(algorithm)
        self._algorithm = algorithm
        self._public_key = public_key

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def key_size(self) -> int:
        return self._public_key.key_size

    def verify(self, message: bytes, signature: bytes) -> None:
        try:
            self._public_key.verify(signature, message, padding.PKCS1v15(), self._hash)
        except InvalidSignature as exc:
            raise VerifyError("INVALID_SIGNATURE", "RSA signature verification failed") from exc
        except (ValueError, TypeError) as exc:
            raise VerifyError("INVALID_SIGNATURE", f"Malformed RSA signature: {exc}") from exc


def jwk_to_rsa_capability(jwk: Mapping[str, Any], algorithm: str) -> Signer | Verifier:
    """
    Build an RSASigner when ``d`` is present, an RSAVerifier otherwise.

    Raises:
        ExtractionError: If a mandatory numeric member is missing or malformed
        KeyConstructionError: If the numbers do not form a valid key
    """
    if "d" in jwk:
        params = extract_params(jwk, PRIVATE_PARAMS, CRT_PARAMS)
        return RSASigner(build_rsa_private_key(params), algorithm)

    params = extract_params(jwk, PUBLIC_PARAMS)
    return RSAVerifier(build_rsa_public_key(params), algorithm)
