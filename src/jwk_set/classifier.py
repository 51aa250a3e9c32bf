"""
Classification of a single JWK object into a signer or a verifier.

Key families are looked up in ``KEY_TYPE_BUILDERS``; a family is supported
by registering a builder that turns a JWK object into a Signer (private
key) or a Verifier (public key).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from jwk_set.capabilities import Signer, Verifier
from jwk_set.encoding import FIELD_MISSING, find_string
from jwk_set.exceptions import ClassificationError, ExtractionError, KeyConstructionError
from jwk_set.rsa import RSA_ALGORITHMS, jwk_to_rsa_capability

KeyBuilder = Callable[[Mapping[str, Any], str], Signer | Verifier]

KEY_TYPE_BUILDERS: dict[str, KeyBuilder] = {
    "RSA": jwk_to_rsa_capability,
}

# Algorithms each key family can sign and verify with.
KEY_TYPE_ALGORITHMS: dict[str, frozenset[str]] = {
    "RSA": frozenset(RSA_ALGORITHMS),
}

SUPPORTED_ALGORITHMS: frozenset[str] = frozenset(
    algorithm for algorithms in KEY_TYPE_ALGORITHMS.values() for algorithm in algorithms
)


@dataclass(frozen=True)
class ClassifiedKey:
    """A key object that was turned into exactly one capability."""

    kid: str
    capability: Signer | Verifier

    @property
    def is_signer(self) -> bool:
        return isinstance(self.capability, Signer)


def _read_member(jwk: Mapping[str, Any], name: str, kid: str | None) -> str:
    try:
        return find_string(jwk, name)
    except ExtractionError as exc:
        prefix = "MISSING" if exc.error == FIELD_MISSING else "INVALID"
        raise ClassificationError(
            f"{prefix}_{name.upper()}",
            f"Failed to parse JWK: {exc.message}",
            kid=kid,
        ) from exc


def classify_key(jwk: Mapping[str, Any], default_algorithm: str = "RS256") -> ClassifiedKey:
    """
    Classify one JWK object.

    Args:
        jwk: A key object from the ``keys`` array of a key set document.
        default_algorithm: Signature algorithm used when the key has no
            ``alg`` member.

    Returns:
        The key ID paired with a Signer (``d`` present) or a Verifier.

    Raises:
        ClassificationError: MISSING_KTY, INVALID_KTY, MISSING_KID, INVALID_KID,
            UNSUPPORTED_KEY_TYPE, UNSUPPORTED_ALGORITHM, INVALID_KEY_PARAMETER
            or KEY_CONSTRUCTION_FAILED
    """
    kty = _read_member(jwk, "kty", None)
    kid = _read_member(jwk, "kid", None)

    builder = KEY_TYPE_BUILDERS.get(kty)
    if builder is None:
        raise ClassificationError(
            "UNSUPPORTED_KEY_TYPE",
            f"Unsupported key type: {kty}",
            kid=kid,
            details={"kty": kty},
        )

    algorithm = jwk.get("alg", default_algorithm)
    if not isinstance(algorithm, str) or algorithm not in KEY_TYPE_ALGORITHMS[kty]:
        raise ClassificationError(
            "UNSUPPORTED_ALGORITHM",
            f"Unsupported algorithm for {kty} key: {algorithm}",
            kid=kid,
            details={"alg": algorithm},
        )

    try:
        capability = builder(jwk, algorithm)
    except ExtractionError as exc:
        raise ClassificationError(
            "INVALID_KEY_PARAMETER",
            f"Failed to parse JWK '{kid}': {exc.message}",
            kid=kid,
            details={"field": exc.field, "cause": exc.error},
        ) from exc
    except KeyConstructionError as exc:
        raise ClassificationError(
            "KEY_CONSTRUCTION_FAILED",
            f"Failed to build key '{kid}': {exc.message}",
            kid=kid,
        ) from exc

    return ClassifiedKey(kid=kid, capability=capability)
