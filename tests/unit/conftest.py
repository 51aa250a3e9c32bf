"""Unit test fixtures."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from jwk_set.config import CONFIG_PATH_ENV_VAR, clear_settings_cache

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    """A 2048-bit RSA key shared across the session; generation is slow."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_key() -> rsa.RSAPrivateKey:
    """A second, unrelated RSA key."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(autouse=True)
def _clear_config_cache() -> Iterator[None]:
    """Clear config cache and the config path override between tests."""
    clear_settings_cache()
    yield
    os.environ.pop(CONFIG_PATH_ENV_VAR, None)
    clear_settings_cache()
