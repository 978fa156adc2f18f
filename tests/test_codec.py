import pytest

from lowappd.node.codec import (
    Encoding,
    MalformedValueError,
    decode,
    decode_decimal,
    decode_hex,
    encode,
    encode_decimal,
    encode_hex,
)


def test_encode_hex_is_uppercase_two_digits_per_byte():
    assert encode_hex(b"\x0a\xff\x00") == "0AFF00"


def test_decode_hex_accepts_either_case():
    assert decode_hex("0aFf", 2) == b"\x0a\xff"


def test_decode_hex_keeps_most_significant_byte_first():
    assert decode_hex("0A0B0C0D", 4) == b"\x0a\x0b\x0c\x0d"


@pytest.mark.parametrize("text, width", [
    ("0", 1),
    ("000", 1),
    ("", 1),
    ("0A0B0C0D0E", 4),
    ("0A0B0C", 4),
])
def test_decode_hex_rejects_wrong_length(text, width):
    with pytest.raises(MalformedValueError):
        decode_hex(text, width)


@pytest.mark.parametrize("text", ["G0", "0x", " 1", "1 ", "+1", "é1"])
def test_decode_hex_rejects_non_hex_digits(text):
    with pytest.raises(MalformedValueError):
        decode_hex(text, 1)


def test_decode_decimal_big_endian():
    assert decode_decimal("1500", 2) == b"\x05\xdc"
    assert decode_decimal("0", 2) == b"\x00\x00"
    assert decode_decimal("65535", 2) == b"\xff\xff"


@pytest.mark.parametrize("text", ["65536", "-1", "", "12a", "1.5", " 15", "١"])
def test_decode_decimal_rejects_bad_values(text):
    with pytest.raises(MalformedValueError):
        decode_decimal(text, 2)


def test_encode_decimal_drops_leading_zeros():
    assert encode_decimal(b"\x00\x2a") == "42"


def test_malformed_value_is_a_value_error():
    with pytest.raises(ValueError):
        decode_hex("zz", 1)


def test_dispatch_by_encoding():
    assert encode(Encoding.HEX, b"\x01\x02") == "0102"
    assert encode(Encoding.DECIMAL, b"\x01\x02") == "258"
    assert decode(Encoding.HEX, "0102", 2) == b"\x01\x02"
    assert decode(Encoding.DECIMAL, "258", 2) == b"\x01\x02"
