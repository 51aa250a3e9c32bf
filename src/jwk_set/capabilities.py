"""
Signing and verification capabilities.

A Signer holds private key material and produces signatures; a Verifier
holds public key material and checks them. Both are independent of the key
family backing them, so callers that only sign or verify never need to know
whether the key is RSA or something added later.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class Signer(ABC):
    """Produces signatures over messages with a private key."""

    @property
    @abstractmethod
    def algorithm(self) -> str:
        """JWS algorithm name of the signatures produced (e.g. ``RS256``)."""

    @abstractmethod
    def sign(self, message: bytes) -> bytes:
        """
        Compute the signature of ``message``.

        Raises:
            SignError: If the underlying primitive fails
        """


class Verifier(ABC):
    """Checks signatures over messages with a public key."""

    @property
    @abstractmethod
    def algorithm(self) -> str:
        """JWS algorithm name of the signatures accepted (e.g. ``RS256``)."""

    @abstractmethod
    def verify(self, message: bytes, signature: bytes) -> None:
        """
        Verify ``signature`` over ``message``.

        Returns None when the signature is valid.

        Raises:
            VerifyError: If the signature does not match or is malformed
        """
