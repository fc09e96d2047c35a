"""
OTTD-savegame-style gamma values.

Every length field and sparse index in the chunk stream is stored this way.
The number of leading one-bits of the first byte gives the number of bytes
that follow it; the remaining bits of the first byte are the most
significant bits of the value.
"""

from .exceptions import InvalidGammaEncoding, UnexpectedEndOfFile

GAMMA_MAX = (1 << 35) - 1

# (largest value, total length, marker bits of the first byte)
_ENCODINGS = (
    (0x7F, 1, 0x00),
    (0x3FFF, 2, 0x80),
    (0x1FFFFF, 3, 0xC0),
    (0x0FFFFFFF, 4, 0xE0),
    (GAMMA_MAX, 5, 0xF0),
)


def gamma_length(first_byte):
    if (first_byte & 0x80) == 0:
        return 1
    if (first_byte & 0xC0) == 0x80:
        return 2
    if (first_byte & 0xE0) == 0xC0:
        return 3
    if (first_byte & 0xF0) == 0xE0:
        return 4
    if (first_byte & 0xF8) == 0xF0:
        return 5
    raise InvalidGammaEncoding()


def decode_gamma(buf, offset=0):
    """
    Decode a gamma value from buf at offset.

    Returns the value and the number of bytes it took.
    """
    if offset >= len(buf):
        raise UnexpectedEndOfFile()

    first_byte = buf[offset]
    length = gamma_length(first_byte)
    if offset + length > len(buf):
        raise UnexpectedEndOfFile()

    value = first_byte & (0x7F >> (length - 1))
    for b in buf[offset + 1:offset + length]:
        value = (value << 8) | b

    return value, length


def encode_gamma(value):
    if value < 0 or value > GAMMA_MAX:
        raise ValueError(f"Value {value} cannot be gamma encoded.")

    for maximum, length, marker in _ENCODINGS:
        if value <= maximum:
            break

    encoded = bytearray(value.to_bytes(length, "big"))
    encoded[0] |= marker
    return bytes(encoded)
