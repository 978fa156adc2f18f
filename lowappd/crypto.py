"""
LoWAPP Key Helpers

Small wrappers around the cryptography library for handling the
per-node AES-128 encryption key.

SECURITY NOTES:
- All randomness from os.urandom (kernel CSPRNG)
- Key material is never logged; use key_check_value() to identify a key

Dependencies:
- python3-cryptography (distro package)
"""

import os

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from . import ENC_KEY_LENGTH


# Number of bytes of the encrypted zero block kept as check value
KCV_LENGTH = 3


def random_bytes(length: int) -> bytes:
    """
    Generate cryptographically secure random bytes.

    Uses os.urandom() which reads from the kernel's CSPRNG.

    Args:
        length: Number of random bytes to generate

    Returns:
        bytes: Cryptographically secure random bytes

    Raises:
        ValueError: If length is negative
    """
    if length < 0:
        raise ValueError("Length must be non-negative")
    return os.urandom(length)


def generate_enc_key() -> bytes:
    """Generate a fresh 16-byte AES-128 node key."""
    return random_bytes(ENC_KEY_LENGTH)


def key_check_value(key: bytes) -> str:
    """
    Compute the key check value (KCV) of an AES-128 key.

    KCV = AES-ECB(key, 0x00 * 16)[:3], rendered as uppercase hex.

    Two parties can compare check values to confirm they hold the
    same key without disclosing it.

    Args:
        key: 16-byte AES key

    Returns:
        str: 6-character uppercase hex check value

    Raises:
        ValueError: If key is not 16 bytes
    """
    if len(key) != ENC_KEY_LENGTH:
        raise ValueError(
            f"Invalid key length: {len(key)} (expected {ENC_KEY_LENGTH})"
        )

    encryptor = Cipher(algorithms.AES(bytes(key)), modes.ECB()).encryptor()
    block = encryptor.update(bytes(16)) + encryptor.finalize()
    return block[:KCV_LENGTH].hex().upper()
