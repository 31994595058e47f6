from __future__ import annotations

import base64
import json
from typing import NewType

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

# Semantic alias for base64 raw public keys
PublicKeyB64 = NewType("PublicKeyB64", str)


def json_to_bytes(data: dict) -> bytes:
    """Serialize dict to canonical JSON bytes for signing/verification."""
    return json.dumps(data, separators=(",", ":"), sort_keys=True).encode("utf-8")


def sign_bytes(private_key: ed25519.Ed25519PrivateKey, payload_bytes: bytes) -> str:
    """Sign bytes with Ed25519 and return the base64-encoded 64-byte signature."""
    signature = private_key.sign(payload_bytes)
    return base64.b64encode(signature).decode("utf-8")


def verify_signature_bytes(
    public_key: ed25519.Ed25519PublicKey, payload_bytes: bytes, signature_b64: str
) -> bool:
    """Verify base64-encoded signature over payload bytes. Raises InvalidSignature on failure."""
    signature_bytes = base64.b64decode(signature_b64, validate=True)
    public_key.verify(signature_bytes, payload_bytes)
    return True


def public_key_to_bytes(public_key: ed25519.Ed25519PublicKey) -> bytes:
    """Return the raw 32-byte encoding used as the account identity."""
    return public_key.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )


def public_key_to_b64(public_key: ed25519.Ed25519PublicKey) -> PublicKeyB64:
    return PublicKeyB64(base64.b64encode(public_key_to_bytes(public_key)).decode("utf-8"))


def load_public_key_from_b64(public_key_b64: str) -> ed25519.Ed25519PublicKey:
    """Load an Ed25519 public key from its base64-encoded raw 32 bytes."""
    raw = base64.b64decode(public_key_b64, validate=True)
    return ed25519.Ed25519PublicKey.from_public_bytes(raw)


def load_private_key_from_pem(pem_str: str) -> ed25519.Ed25519PrivateKey:
    """Load an Ed25519 private key from a PEM-formatted string."""
    key = serialization.load_pem_private_key(pem_str.encode(), password=None)
    if not isinstance(key, ed25519.Ed25519PrivateKey):
        raise ValueError("PEM does not contain an Ed25519 private key")
    return key
