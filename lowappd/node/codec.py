"""
LoWAPP Field Codec

Conversions between the textual form of a configuration value and its
fixed-width binary form.

Encodings:
    HEX      - 2 uppercase hex digits per byte, most significant byte first
    DECIMAL  - ASCII decimal digits, big-endian unsigned integer in storage

Decoding is strict: a hex string must carry exactly two digits per byte
of the target field and a decimal string must fit the field width.
Nothing is truncated or padded.
"""

import re
from enum import Enum


class MalformedValueError(ValueError):
    """Exception raised when a textual value cannot be decoded into a field."""
    pass


class Encoding(Enum):
    """Textual encoding of a field."""
    HEX = "hex"
    DECIMAL = "decimal"


_HEX_RE = re.compile(r"[0-9A-Fa-f]+")
_DEC_RE = re.compile(r"[0-9]+")


def encode_hex(data: bytes) -> str:
    """Render bytes as uppercase hex, two digits per byte."""
    return bytes(data).hex().upper()


def decode_hex(text: str, width: int) -> bytes:
    """
    Decode a hex string into exactly `width` bytes.

    Args:
        text: Hex digits, either case, no separators
        width: Field width in bytes

    Returns:
        bytes: Decoded value, first byte most significant

    Raises:
        MalformedValueError: If the string is not exactly 2*width hex digits
    """
    if len(text) != 2 * width:
        raise MalformedValueError(
            f"Expected {2 * width} hex digits, got {len(text)}"
        )
    if not _HEX_RE.fullmatch(text):
        raise MalformedValueError(f"Not a hex string: {text!r}")
    return bytes.fromhex(text)


def encode_decimal(data: bytes) -> str:
    """Render a big-endian unsigned integer as decimal text."""
    return str(int.from_bytes(data, "big"))


def decode_decimal(text: str, width: int) -> bytes:
    """
    Decode a decimal string into a `width`-byte big-endian integer.

    Raises:
        MalformedValueError: If the string is not a non-negative decimal
            integer or does not fit in `width` bytes
    """
    if not _DEC_RE.fullmatch(text):
        raise MalformedValueError(f"Not a decimal number: {text!r}")

    value = int(text)
    limit = 1 << (8 * width)
    if value >= limit:
        raise MalformedValueError(
            f"Value {value} out of range (max {limit - 1})"
        )
    return value.to_bytes(width, "big")


def encode(encoding: Encoding, data: bytes) -> str:
    """Render field bytes using the given encoding."""
    if encoding is Encoding.HEX:
        return encode_hex(data)
    return encode_decimal(data)


def decode(encoding: Encoding, text: str, width: int) -> bytes:
    """Decode text into `width` bytes using the given encoding."""
    if encoding is Encoding.HEX:
        return decode_hex(text, width)
    return decode_decimal(text, width)
