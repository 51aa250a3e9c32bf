"""Unit tests for loading key sets from files."""

from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, Any

import pytest

from jwk_set.config import CONFIG_PATH_ENV_VAR, load_settings
from jwk_set.exceptions import ParseError
from jwk_set.loader import configure_from_settings, load_key_set, load_key_set_from_settings
from jwk_set.logging import ROOT_LOGGER_NAME
from tests.helpers import make_document, rsa_private_jwk, rsa_public_jwk

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey


@pytest.fixture()
def jwks_path(tmp_path: Path, rsa_key: RSAPrivateKey) -> Path:
    path = tmp_path / "jwks.json"
    path.write_text(
        make_document(
            rsa_private_jwk(rsa_key, "signing"),
            rsa_public_jwk(rsa_key, "verifying"),
            {"kid": "curve", "kty": "EC"},
        )
    )
    return path


@pytest.mark.unit
class TestLoadKeySet:
    """Tests for load_key_set."""

    def test_loads_signers_and_verifiers(self, jwks_path: Path) -> None:
        key_set = load_key_set(jwks_path)
        assert list(key_set.signers) == ["signing"]
        assert list(key_set.verifiers) == ["verifying"]

    def test_default_algorithm_is_forwarded(self, jwks_path: Path) -> None:
        key_set = load_key_set(jwks_path, "RS512")
        signer = key_set.find_signer("signing")
        assert signer is not None
        assert signer.algorithm == "RS512"

    def test_logs_skipped_keys(self, jwks_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="jwk_set"):
            load_key_set(jwks_path)

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert warnings[0].error_code == "UNSUPPORTED_KEY_TYPE"
        assert warnings[0].kid == "curve"
        assert warnings[0].key_index == 2

    def test_logs_summary(self, jwks_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="jwk_set"):
            load_key_set(jwks_path)

        summary = [r for r in caplog.records if r.getMessage().startswith("Loaded key set")]
        assert len(summary) == 1
        assert summary[0].signers == 1
        assert summary[0].verifiers == 1
        assert summary[0].skipped == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_key_set(tmp_path / "absent.json")

    def test_malformed_document_propagates(self, tmp_path: Path) -> None:
        path = tmp_path / "jwks.json"
        path.write_text('{"keys": "not-an-array"}')
        with pytest.raises(ParseError) as exc_info:
            load_key_set(path)
        assert exc_info.value.error == "KEYS_NOT_ARRAY"


@pytest.mark.unit
class TestLoadKeySetFromSettings:
    """Tests for load_key_set_from_settings."""

    def test_uses_configured_document(self, tmp_path: Path, jwks_path: Path) -> None:
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "service:\n"
            "  name: jwk-set\n"
            "  version: 0.1.0\n"
            "logging:\n"
            "  level: INFO\n"
            "  directory: null\n"
            "keys:\n"
            f"  document_path: {jwks_path.name}\n"
            "  default_algorithm: RS384\n"
        )
        settings = load_settings(config_path)

        key_set = load_key_set_from_settings(settings, config_path)

        verifier = key_set.find_verifier("verifying")
        assert verifier is not None
        assert verifier.algorithm == "RS384"


def _write_config(config_path: Path, document_name: str, log_directory: str) -> None:
    config_path.write_text(
        "service:\n"
        "  name: jwk-set\n"
        "  version: 0.1.0\n"
        "logging:\n"
        "  level: INFO\n"
        f"  directory: {log_directory}\n"
        "keys:\n"
        f"  document_path: {document_name}\n"
        "  default_algorithm: RS256\n"
    )


@pytest.fixture()
def package_logger() -> Iterator[logging.Logger]:
    """Restore the package logger after setup_logging reconfigures it."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def _log_lines(log_directory: Path, logger: logging.Logger) -> list[dict[str, Any]]:
    for handler in logger.handlers:
        handler.flush()
    files = list(log_directory.glob("*.log"))
    assert len(files) == 1
    return [json.loads(line) for line in files[0].read_text().splitlines()]


@pytest.mark.unit
class TestConfigureFromSettings:
    """Tests for configure_from_settings."""

    def test_sets_up_logging_and_loads_keys(
        self,
        tmp_path: Path,
        jwks_path: Path,
        package_logger: logging.Logger,
    ) -> None:
        log_directory = tmp_path / "logs"
        config_path = tmp_path / "config.yaml"
        _write_config(config_path, jwks_path.name, str(log_directory))

        key_set = configure_from_settings(load_settings(config_path), config_path)

        assert list(key_set.signers) == ["signing"]
        assert package_logger.level == logging.INFO
        lines = _log_lines(log_directory, package_logger)
        assert lines[0]["message"] == "Loading key set"
        assert lines[0]["extra"] == {"service": "jwk-set", "version": "0.1.0"}
        skipped = [line for line in lines if line["level"] == "WARNING"]
        assert skipped[0]["extra"]["error_code"] == "UNSUPPORTED_KEY_TYPE"
        assert lines[-1]["extra"] == {"signers": 1, "verifiers": 1, "skipped": 1}

    def test_reads_settings_from_environment(
        self,
        tmp_path: Path,
        jwks_path: Path,
        package_logger: logging.Logger,
    ) -> None:
        log_directory = tmp_path / "logs"
        config_path = tmp_path / "config.yaml"
        _write_config(config_path, jwks_path.name, str(log_directory))
        os.environ[CONFIG_PATH_ENV_VAR] = str(config_path)

        key_set = configure_from_settings()

        assert list(key_set.verifiers) == ["verifying"]
        assert _log_lines(log_directory, package_logger)[0]["message"] == "Loading key set"
