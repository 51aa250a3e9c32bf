"""Signers and verifiers built from JSON Web Key Set documents."""

from jwk_set.capabilities import Signer, Verifier
from jwk_set.classifier import ClassifiedKey, classify_key
from jwk_set.exceptions import (
    ClassificationError,
    ExtractionError,
    KeyConstructionError,
    KeySetError,
    ParseError,
    SignError,
    VerifyError,
)
from jwk_set.jws import create_jws, verify_jws
from jwk_set.key_set import KeyDiagnostic, KeySet
from jwk_set.loader import configure_from_settings, load_key_set, load_key_set_from_settings
from jwk_set.rsa import RSASigner, RSAVerifier

__version__ = "0.1.0"

__all__ = [
    "ClassificationError",
    "ClassifiedKey",
    "ExtractionError",
    "KeyConstructionError",
    "KeyDiagnostic",
    "KeySet",
    "KeySetError",
    "ParseError",
    "RSASigner",
    "RSAVerifier",
    "SignError",
    "Signer",
    "VerifyError",
    "Verifier",
    "classify_key",
    "configure_from_settings",
    "create_jws",
    "load_key_set",
    "load_key_set_from_settings",
    "verify_jws",
]
