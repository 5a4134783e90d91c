"""
Ed25519 signature verification for configuration updates
"""
import base64
import binascii
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from config_manager import ConfigError

PUBLIC_KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


def _b64decode(value: str) -> Optional[bytes]:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        return None


def decode_public_key(public_key_base64: str) -> Ed25519PublicKey:
    """
    Decode the trusted public key from its base64 form.

    Only called at startup, so a bad key is a configuration error.
    """
    raw = _b64decode(public_key_base64.strip())
    if raw is None or len(raw) != PUBLIC_KEY_LENGTH:
        raise ConfigError("PUBLIC_KEY must be a base64 encoded 32 byte ed25519 key")
    return Ed25519PublicKey.from_public_bytes(raw)


def decode_signature(signature_base64: str) -> Optional[bytes]:
    """Decode a base64 signature, returning None if it is malformed"""
    raw = _b64decode(signature_base64)
    if raw is None or len(raw) != SIGNATURE_LENGTH:
        return None
    return raw


def verify_signature(
    public_key: Ed25519PublicKey, message: bytes, signature_base64: str
) -> bool:
    """
    Check that signature_base64 is a valid signature of message.

    The message bytes are verified exactly as given.
    """
    signature = decode_signature(signature_base64)
    if signature is None:
        return False
    try:
        public_key.verify(signature, message)
    except InvalidSignature:
        return False
    return True
