import pytest

from openttd_savegame.binreader import BinaryReader
from openttd_savegame.exceptions import UnexpectedEndOfFile


def test_read_integers():
    reader = BinaryReader(
        b"\xff"
        b"\xff"
        b"\x12\x34"
        b"\xff\xfe"
        b"\x01\x02\x03"
        b"\x89\xab\xcd\xef"
        b"\xff\xff\xff\xfd"
        b"\x00\x00\x00\x00\x00\x00\x01\x00"
        b"\xff\xff\xff\xff\xff\xff\xff\xff"
    )

    assert reader.uint8() == 0xff
    assert reader.int8() == -1
    assert reader.uint16() == 0x1234
    assert reader.int16() == -2
    assert reader.uint24() == 0x010203
    assert reader.uint32() == 0x89abcdef
    assert reader.int32() == -3
    assert reader.uint64() == 256
    assert reader.int64() == -1
    assert reader.remaining == 0
    assert reader.position == 33


def test_position_and_remaining():
    reader = BinaryReader(b"abcdef", 2)
    assert reader.position == 2
    assert reader.remaining == 4

    assert reader.read(3) == b"cde"
    assert reader.position == 5
    assert reader.remaining == 1


@pytest.mark.parametrize(
    "method,data",
    (
        ("uint8", b""),
        ("int8", b""),
        ("uint16", b"\x00"),
        ("int16", b"\x00"),
        ("uint24", b"\x00\x00"),
        ("uint32", b"\x00\x00\x00"),
        ("int32", b"\x00\x00\x00"),
        ("uint64", b"\x00" * 7),
        ("int64", b"\x00" * 7),
    ),
)
def test_truncated_read_does_not_move(method, data):
    reader = BinaryReader(data)
    with pytest.raises(UnexpectedEndOfFile):
        getattr(reader, method)()
    assert reader.position == 0
    assert reader.remaining == len(data)


def test_read_exact():
    reader = BinaryReader(b"OTTX")
    with pytest.raises(UnexpectedEndOfFile):
        reader.read(5)
    assert reader.read(4) == b"OTTX"
    assert reader.read(0) == b""


def test_gamma_and_gamma_str():
    reader = BinaryReader(b"\x80\x80\x03key")
    assert reader.gamma() == 128
    assert reader.gamma_str() == b"key"
    assert reader.remaining == 0


def test_gamma_str_truncated():
    reader = BinaryReader(b"\x05ab")
    with pytest.raises(UnexpectedEndOfFile):
        reader.gamma_str()
    assert reader.position == 0
