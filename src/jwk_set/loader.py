"""Load a key set from a file and report the keys that were left out."""

from __future__ import annotations

from typing import TYPE_CHECKING

from jwk_set.config import get_config_path, get_settings, resolve_document_path
from jwk_set.key_set import KeySet
from jwk_set.logging import ROOT_LOGGER_NAME, get_logger, setup_logging

if TYPE_CHECKING:
    from pathlib import Path

    from jwk_set.config import Settings

logger = get_logger(__name__)


def load_key_set(path: Path, default_algorithm: str = "RS256") -> KeySet:
    """
    Read and parse a JSON Web Key Set file.

    Each omitted key object is logged as a warning; parsing carries on with
    the remaining keys.

    Args:
        path: Path to the key set document.
        default_algorithm: Signature algorithm for keys without ``alg``.

    Returns:
        The parsed KeySet.

    Raises:
        FileNotFoundError: If the file does not exist.
        ParseError: If the document is malformed as a whole.
        ValueError: If default_algorithm is not supported.
    """
    if not path.exists():
        msg = f"Key set file not found: {path}"
        raise FileNotFoundError(msg)

    key_set = KeySet.parse(path.read_text(encoding="utf-8"), default_algorithm)

    for diagnostic in key_set.diagnostics:
        logger.warning(
            "Skipping key: %s",
            diagnostic.message,
            extra={
                "key_index": diagnostic.index,
                "kid": diagnostic.kid,
                "error_code": diagnostic.error,
            },
        )

    logger.info(
        "Loaded key set from %s",
        path,
        extra={
            "signers": len(key_set.signers),
            "verifiers": len(key_set.verifiers),
            "skipped": len(key_set.diagnostics),
        },
    )
    return key_set


def load_key_set_from_settings(settings: Settings, config_path: Path | None = None) -> KeySet:
    """Load the key set document named in the configuration."""
    return load_key_set(
        resolve_document_path(settings, config_path),
        settings.keys.default_algorithm,
    )


def configure_from_settings(
    settings: Settings | None = None,
    config_path: Path | None = None,
) -> KeySet:
    """
    Set up logging from the configuration and load the configured key set.

    Without ``settings`` the cached settings from the configured path are
    used. ``config_path`` anchors a relative document path.
    """
    if settings is None:
        settings = get_settings()
        config_path = get_config_path()

    setup_logging(settings.logging.level, ROOT_LOGGER_NAME, settings.logging.directory)
    logger.info(
        "Loading key set",
        extra={"service": settings.service.name, "version": settings.service.version},
    )
    return load_key_set_from_settings(settings, config_path)
