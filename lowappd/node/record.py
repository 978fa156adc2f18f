"""
LoWAPP Node Configuration Record

Holds the typed parameters of one simulated device in a fixed binary
layout and exposes them through a textual key/value interface.

Record Layout (27 bytes, big-endian):
    deviceId      (1 byte)   - hex, 2 chars
    groupId       (2 bytes)  - hex, 4 chars
    gwMask        (4 bytes)  - hex, 8 chars
    rchanId       (1 byte)   - hex, 2 chars
    rsf           (1 byte)   - hex, 2 chars
    preambleTime  (2 bytes)  - decimal
    encKey        (16 bytes) - hex, 32 chars

Lifecycle:
    One record per process (`my_config`). It starts zeroed, is filled
    by set() calls while a record file is loaded, and is read with get()
    for the rest of the process lifetime. The record is not thread-safe;
    callers sharing it across threads must serialize access themselves.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from .codec import Encoding, MalformedValueError, decode, encode


class ConfigRecordError(Exception):
    """Exception raised for configuration record errors."""
    pass


class UnknownKeyError(ConfigRecordError):
    """Exception raised when a key is not one of the record fields."""

    def __init__(self, key: str):
        super().__init__(f"Unknown configuration key: {key!r}")
        self.key = key


@dataclass(frozen=True)
class FieldSpec:
    """Position and encoding of one field inside the record."""
    key: str
    offset: int
    width: int
    encoding: Encoding

    @property
    def text_width(self) -> Optional[int]:
        """Exact text length for hex fields, None for variable-length fields."""
        if self.encoding is Encoding.HEX:
            return 2 * self.width
        return None


# Canonical key names
KEY_DEVICE_ID = "deviceId"
KEY_GROUP_ID = "groupId"
KEY_GW_MASK = "gwMask"
KEY_RCHAN_ID = "rchanId"
KEY_RSF = "rsf"
KEY_PREAMBLE_TIME = "preambleTime"
KEY_ENC_KEY = "encKey"


def _build_layout(*entries: Tuple[str, int, Encoding]) -> Dict[str, FieldSpec]:
    fields = {}
    offset = 0
    for key, width, encoding in entries:
        fields[key] = FieldSpec(key, offset, width, encoding)
        offset += width
    return fields


# Key -> field descriptor, in canonical (file) order
FIELDS: Dict[str, FieldSpec] = _build_layout(
    (KEY_DEVICE_ID, 1, Encoding.HEX),
    (KEY_GROUP_ID, 2, Encoding.HEX),
    (KEY_GW_MASK, 4, Encoding.HEX),
    (KEY_RCHAN_ID, 1, Encoding.HEX),
    (KEY_RSF, 1, Encoding.HEX),
    (KEY_PREAMBLE_TIME, 2, Encoding.DECIMAL),
    (KEY_ENC_KEY, 16, Encoding.HEX),
)

RECORD_SIZE = sum(spec.width for spec in FIELDS.values())


def field_spec(key: str) -> FieldSpec:
    """
    Look up the descriptor for a key.

    Raises:
        UnknownKeyError: If key is not a record field
    """
    try:
        return FIELDS[key]
    except KeyError:
        raise UnknownKeyError(key) from None


class ConfigRecord:
    """
    Binary configuration record of a simulated node.

    Usage:
        record = ConfigRecord()
        record.set("gwMask", "0A0B0C0D")
        record.get("gwMask")        # "0A0B0C0D"
        record.gw_mask              # 0x0A0B0C0D
    """

    def __init__(self):
        self._data = bytearray(RECORD_SIZE)

    def get(self, key: str) -> str:
        """
        Render a field as text.

        Args:
            key: Canonical field name

        Returns:
            str: Uppercase hex (2 digits per byte) or decimal text

        Raises:
            UnknownKeyError: If key is not a record field
        """
        spec = field_spec(key)
        return encode(spec.encoding, self._slot(spec))

    def set(self, key: str, value: str) -> None:
        """
        Decode text into a field, replacing its previous value.

        The record is left untouched when decoding fails.

        Args:
            key: Canonical field name
            value: Textual value

        Raises:
            UnknownKeyError: If key is not a record field
            MalformedValueError: If value does not decode to the field width
        """
        spec = field_spec(key)
        raw = decode(spec.encoding, value, spec.width)
        self._data[spec.offset:spec.offset + spec.width] = raw

    def clear(self) -> None:
        """Reset every field to zero."""
        self._data[:] = bytes(RECORD_SIZE)

    def items(self) -> Iterator[Tuple[str, str]]:
        """Yield (key, text) pairs in canonical order."""
        for key in FIELDS:
            yield key, self.get(key)

    def to_bytes(self) -> bytes:
        """Raw record bytes."""
        return bytes(self._data)

    def _slot(self, spec: FieldSpec) -> bytes:
        return bytes(self._data[spec.offset:spec.offset + spec.width])

    def _int(self, key: str) -> int:
        return int.from_bytes(self._slot(FIELDS[key]), "big")

    @property
    def device_id(self) -> int:
        return self._int(KEY_DEVICE_ID)

    @property
    def group_id(self) -> int:
        return self._int(KEY_GROUP_ID)

    @property
    def gw_mask(self) -> int:
        return self._int(KEY_GW_MASK)

    @property
    def rchan_id(self) -> int:
        return self._int(KEY_RCHAN_ID)

    @property
    def rsf(self) -> int:
        return self._int(KEY_RSF)

    @property
    def preamble_time(self) -> int:
        return self._int(KEY_PREAMBLE_TIME)

    @property
    def enc_key(self) -> bytes:
        """Encryption key bytes. Secret: do not log."""
        return self._slot(FIELDS[KEY_ENC_KEY])

    def __repr__(self) -> str:
        return (
            f"ConfigRecord(deviceId={self.get(KEY_DEVICE_ID)}, "
            f"groupId={self.get(KEY_GROUP_ID)}, "
            f"gwMask={self.get(KEY_GW_MASK)}, "
            f"rchanId={self.get(KEY_RCHAN_ID)}, "
            f"rsf={self.get(KEY_RSF)}, "
            f"preambleTime={self.preamble_time})"
        )


# Process-wide record of the simulated node
my_config = ConfigRecord()


def get_config(key: str) -> Optional[str]:
    """
    Get a value of the process-wide record.

    Returns:
        str: Textual value, or None if the key is unknown
    """
    try:
        return my_config.get(key)
    except UnknownKeyError:
        return None


def set_config(key: str, value: str) -> bool:
    """
    Set a value of the process-wide record.

    Returns:
        bool: True if the value was set, False if the key is unknown
            or the value malformed (record unchanged)
    """
    try:
        my_config.set(key, value)
    except (UnknownKeyError, MalformedValueError):
        return False
    return True
