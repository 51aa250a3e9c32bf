"""Exception hierarchy for key set parsing, signing and verification."""

from __future__ import annotations

from typing import Any


class KeySetError(Exception):
    """
    Base error carrying a machine-readable code.

    Attributes:
        error: Upper-snake-case error code (e.g. ``KEYS_NOT_ARRAY``).
        message: Human-readable description.
        details: Extra context such as the offending field or key ID.
    """

    def __init__(self, error: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.error = error
        self.message = message
        self.details: dict[str, Any] = details if details is not None else {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.error!r}, {self.message!r})"


class ParseError(KeySetError):
    """The key set document is malformed as a whole. No KeySet is produced."""


class ExtractionError(KeySetError):
    """A numeric key parameter could not be read from a key object."""

    def __init__(self, field: str, cause: str, message: str) -> None:
        super().__init__(cause, message, {"field": field})
        self.field = field


class KeyConstructionError(KeySetError):
    """Extracted parameters could not be assembled into a usable key."""


class ClassificationError(KeySetError):
    """A single key object was rejected. Never fatal to the document."""

    def __init__(
        self,
        error: str,
        message: str,
        kid: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        merged = {"kid": kid}
        if details:
            merged.update(details)
        super().__init__(error, message, merged)
        self.kid = kid


class SignError(KeySetError):
    """The signing primitive failed."""


class VerifyError(KeySetError):
    """A signature or token did not verify."""
