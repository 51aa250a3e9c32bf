"""
JSON Web Key Set container (RFC 7517 section 5).

A KeySet maps key IDs to signers and verifiers. It is built in one pass by
``KeySet.parse`` and is read-only afterwards, so a constructed instance can
be shared between threads without locking.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from jwk_set.capabilities import Signer, Verifier
from jwk_set.classifier import SUPPORTED_ALGORITHMS, classify_key
from jwk_set.exceptions import ClassificationError, ParseError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


@dataclass(frozen=True)
class KeyDiagnostic:
    """Why one key object of a document was left out of the key set."""

    index: int
    kid: str | None
    error: str
    message: str


class KeySet:
    """
    Signers and verifiers indexed by key ID.

    Instances come from ``KeySet.parse``. Key objects that cannot be used
    (unsupported type, missing or malformed parameters) are omitted and
    reported in ``diagnostics``; only a malformed document raises.
    """

    __slots__ = ("_diagnostics", "_signers", "_verifiers")

    def __init__(
        self,
        signers: Mapping[str, Signer],
        verifiers: Mapping[str, Verifier],
        diagnostics: tuple[KeyDiagnostic, ...] = (),
    ) -> None:
        self._signers: Mapping[str, Signer] = MappingProxyType(dict(signers))
        self._verifiers: Mapping[str, Verifier] = MappingProxyType(dict(verifiers))
        self._diagnostics = tuple(diagnostics)

    @classmethod
    def parse(cls, document: str | bytes, default_algorithm: str = "RS256") -> KeySet:
        """
        Parse a JSON Web Key Set document.

        Args:
            document: The JSON text of the key set.
            default_algorithm: Signature algorithm for keys without an
                ``alg`` member.

        Returns:
            The key set. It may be empty if no key object was usable.

        Raises:
            ParseError: INVALID_JSON, MISSING_KEYS_FIELD, KEYS_NOT_ARRAY or
                KEY_NOT_OBJECT
            ValueError: If default_algorithm is not a supported algorithm
        """
        if default_algorithm not in SUPPORTED_ALGORITHMS:
            msg = f"Unsupported default algorithm: {default_algorithm}"
            raise ValueError(msg)

        try:
            root = json.loads(document)
        except (ValueError, RecursionError) as exc:
            raise ParseError("INVALID_JSON", f"Failed to parse into JSON: {exc}") from exc

        if not isinstance(root, dict):
            raise ParseError("INVALID_JSON", "Key set document must be a JSON object")

        if "keys" not in root:
            raise ParseError("MISSING_KEYS_FIELD", "Failed to locate 'keys' in JWK set")

        keys = root["keys"]
        if not isinstance(keys, list):
            raise ParseError("KEYS_NOT_ARRAY", "Member 'keys' is not an array")

        signers: dict[str, Signer] = {}
        verifiers: dict[str, Verifier] = {}
        diagnostics: list[KeyDiagnostic] = []

        for index, jwk in enumerate(keys):
            if not isinstance(jwk, dict):
                raise ParseError(
                    "KEY_NOT_OBJECT",
                    "'keys' must contain objects only",
                    {"index": index},
                )

            try:
                classified = classify_key(jwk, default_algorithm)
            except ClassificationError as exc:
                diagnostics.append(
                    KeyDiagnostic(index=index, kid=exc.kid, error=exc.error, message=exc.message)
                )
                continue

            # A later key object with the same kid replaces the earlier one.
            if isinstance(classified.capability, Signer):
                signers[classified.kid] = classified.capability
            else:
                verifiers[classified.kid] = classified.capability

        return cls(signers, verifiers, tuple(diagnostics))

    @property
    def signers(self) -> Mapping[str, Signer]:
        """Read-only view of signers by key ID."""
        return self._signers

    @property
    def verifiers(self) -> Mapping[str, Verifier]:
        """Read-only view of verifiers by key ID."""
        return self._verifiers

    @property
    def diagnostics(self) -> tuple[KeyDiagnostic, ...]:
        return self._diagnostics

    def find_signer(self, kid: str) -> Signer | None:
        """Return the signer for ``kid``, or None if it was not provisioned."""
        return self._signers.get(kid)

    def find_verifier(self, kid: str) -> Verifier | None:
        """Return the verifier for ``kid``, or None if it was not provisioned."""
        return self._verifiers.get(kid)

    def kids(self) -> list[str]:
        """All key IDs present in either table, sorted."""
        return sorted(set(self._signers) | set(self._verifiers))

    def __len__(self) -> int:
        return len(self._signers) + len(self._verifiers)

    def __iter__(self) -> Iterator[tuple[str, Signer | Verifier]]:
        """
        Yield ``(kid, capability)`` pairs, signers first.

        A kid present in both tables is yielded twice, so ``dict(key_set)``
        keeps only its verifier. Use ``signers`` and ``verifiers`` to keep both.
        """
        yield from self._signers.items()
        yield from self._verifiers.items()

    def __repr__(self) -> str:
        return (
            f"KeySet(signers={sorted(self._signers)}, verifiers={sorted(self._verifiers)}, "
            f"diagnostics={len(self._diagnostics)})"
        )
