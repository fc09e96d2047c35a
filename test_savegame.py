import lzma
import zlib

import pytest

from openttd_savegame import (
    ChunkType,
    Compression,
    DecompressionError,
    InvalidChunkType,
    InvalidMagic,
    JunkAfterEndMarker,
    RiffData,
    SavegameReader,
    SavegameWriter,
    TableData,
    UnexpectedEndOfFile,
    UnsupportedCompression,
    encode_gamma,
    read_chunks,
)


def _savegame(chunk_stream, magic=b"OTTN", version=295):
    return magic + version.to_bytes(2, "big") + b"\0\0" + chunk_stream


def test_round_trip():
    writer = SavegameWriter(295, Compression.NONE)
    writer.add_riff_chunk(b"TEST", b"Hello, World!")
    data = writer.finalize()

    reader = SavegameReader(data)
    assert reader.header.version == 295
    assert reader.header.compression == Compression.NONE

    chunks = reader.read_chunks()
    assert len(chunks) == 1
    assert chunks[0].tag == "TEST"
    assert chunks[0].chunk_type == ChunkType.RIFF
    assert chunks[0].data == RiffData(b"Hello, World!")


def test_uncompressed_bytes():
    writer = SavegameWriter(295, Compression.NONE, flags=0x0102)
    writer.add_riff_chunk("TEST", b"abc")
    assert writer.finalize() == b"OTTN\x01\x27\x01\x02TEST\x00\x00\x00\x03abc\0\0\0\0\0"


@pytest.mark.parametrize(
    "compression,magic",
    (
        (Compression.NONE, b"OTTN"),
        (Compression.ZLIB, b"OTTZ"),
        (Compression.LZMA, b"OTTX"),
    ),
)
def test_compressed_round_trip(compression, magic):
    writer = SavegameWriter(295, compression)
    writer.add_riff_chunk(b"DATA", b"Compressed data test" * 100)
    data = writer.finalize()

    assert data[:4] == magic

    reader = SavegameReader(data)
    assert reader.header.compression == compression
    chunks = reader.read_chunks(strict=True)
    assert [(chunk.tag, chunk.data) for chunk in chunks] == [("DATA", RiffData(b"Compressed data test" * 100))]


def test_zlib_payload_is_zlib():
    writer = SavegameWriter(1, Compression.ZLIB)
    writer.add_riff_chunk(b"DATA", b"x")
    data = writer.finalize()
    assert zlib.decompress(data[8:]) == b"DATA\x00\x00\x00\x01x\0\0\0\0\0"


def test_lzma_payload_is_xz():
    writer = SavegameWriter(1, Compression.LZMA)
    writer.add_riff_chunk(b"DATA", b"x")
    data = writer.finalize()
    assert lzma.decompress(data[8:], format=lzma.FORMAT_XZ) == b"DATA\x00\x00\x00\x01x\0\0\0\0\0"


def test_multiple_chunks_keep_order():
    writer = SavegameWriter(295, Compression.ZLIB)
    writer.add_riff_chunk(b"MAPS", b"Map data here")
    writer.add_riff_chunk(b"PLYR", b"Player data")
    writer.add_riff_chunk(b"VEHS", b"Vehicle data")

    chunks = read_chunks(writer.finalize())
    assert [chunk.tag for chunk in chunks] == ["MAPS", "PLYR", "VEHS"]
    assert [chunk.data.data for chunk in chunks] == [b"Map data here", b"Player data", b"Vehicle data"]


def test_empty_riff_chunk():
    writer = SavegameWriter(295, Compression.NONE)
    writer.add_riff_chunk(b"EMPT", b"")
    chunks = read_chunks(writer.finalize())
    assert chunks[0].data == RiffData(b"")


def test_large_riff_chunk_uses_mode_byte():
    size = (1 << 24) + 3
    writer = SavegameWriter(295, Compression.NONE)
    writer.add_riff_chunk(b"MAPS", bytes(size))
    data = writer.finalize()

    assert data[8:16] == b"MAPS\x10\x00\x00\x03"

    chunks = read_chunks(data, strict=True)
    assert len(chunks[0].data.data) == size


@pytest.mark.parametrize("tag", (b"TOOLONG", b"ABC", "ÄBCD", b"\0\0\0\0"))
def test_invalid_tag(tag):
    writer = SavegameWriter(295, Compression.NONE)
    with pytest.raises((ValueError, UnicodeEncodeError)):
        writer.add_riff_chunk(tag, b"")


def test_lzo_is_unsupported():
    with pytest.raises(UnsupportedCompression):
        SavegameReader(_savegame(b"\0" * 5, magic=b"OTTD"))

    writer = SavegameWriter(295, Compression.LZO)
    writer.add_riff_chunk(b"TEST", b"")
    with pytest.raises(UnsupportedCompression):
        writer.finalize()


def test_invalid_magic():
    with pytest.raises(InvalidMagic) as e:
        SavegameReader(_savegame(b"\0" * 5, magic=b"NOPE"))
    assert "invalid magic" in str(e.value).lower()


@pytest.mark.parametrize("magic", (b"OTTZ", b"OTTX"))
def test_corrupt_compressed_payload(magic):
    with pytest.raises(DecompressionError) as e:
        SavegameReader(_savegame(b"not compressed at all", magic=magic))
    assert isinstance(e.value.__cause__, (zlib.error, lzma.LZMAError))


def test_truncated_zlib_payload():
    compressed = zlib.compress(b"TEST\x00\x00\x00\x01x\0\0\0\0\0" * 50)
    with pytest.raises(DecompressionError):
        SavegameReader(_savegame(compressed[:-10], magic=b"OTTZ"))


def test_missing_end_marker():
    data = _savegame(b"TEST\x00\x00\x00\x01x\0\0")

    chunks = SavegameReader(data).read_chunks()
    assert [chunk.tag for chunk in chunks] == ["TEST"]

    with pytest.raises(UnexpectedEndOfFile):
        SavegameReader(data).read_chunks(strict=True)


def test_junk_after_end_marker():
    data = _savegame(b"TEST\x00\x00\x00\x01x" + b"\0" * 5 + b"junk")

    assert len(SavegameReader(data).read_chunks()) == 1

    with pytest.raises(JunkAfterEndMarker):
        SavegameReader(data).read_chunks(strict=True)


def test_truncated_chunk_body_is_an_error():
    with pytest.raises(UnexpectedEndOfFile):
        read_chunks(_savegame(b"TEST\x00\x00\x00\x10short"))


def test_invalid_chunk_type_in_stream():
    with pytest.raises(InvalidChunkType):
        read_chunks(_savegame(b"TEST\x0f\x00\x00\x00" + b"\0" * 5))


def test_empty_payload():
    assert read_chunks(_savegame(b"")) == []


def test_all_chunk_types():
    table_header = bytes([0x06]) + encode_gamma(5) + b"money" + b"\0"
    stream = (
        b"MAPS\x00\x00\x00\x02ab" +
        b"ARRY\x01" + encode_gamma(2) + b"x" + encode_gamma(1) + encode_gamma(2) + b"y" + b"\0" +
        b"SPRS\x02" + encode_gamma(2) + encode_gamma(5) + b"p" + encode_gamma(2) + encode_gamma(2) + b"q" + b"\0" +
        b"PLYR\x03" + encode_gamma(len(table_header) + 1) + table_header + encode_gamma(5) + b"\0\0\x01\0" + b"\0" +
        b"VEHS\x04" + encode_gamma(len(table_header) + 1) + table_header + encode_gamma(5) + encode_gamma(9) + b"\0\0\0\x07" + b"\0" +
        b"\0" * 5
    )
    chunks = SavegameReader(_savegame(stream)).read_chunks(strict=True)

    assert [(chunk.tag, chunk.chunk_type) for chunk in chunks] == [
        ("MAPS", ChunkType.RIFF),
        ("ARRY", ChunkType.ARRAY),
        ("SPRS", ChunkType.SPARSE_ARRAY),
        ("PLYR", ChunkType.TABLE),
        ("VEHS", ChunkType.SPARSE_TABLE),
    ]
    assert chunks[0].records == [(0, b"ab")]
    assert chunks[1].records == [(0, b"x"), (2, b"y")]
    assert chunks[2].records == [(5, b"p"), (2, b"q")]
    assert isinstance(chunks[3].data, TableData)
    assert chunks[3].records == [(0, b"\0\0\x01\0")]
    assert chunks[4].records == [(9, b"\0\0\0\x07")]


def test_from_chunks_streams_blocks():
    writer = SavegameWriter(300, Compression.ZLIB)
    writer.add_riff_chunk(b"MAPS", bytes(range(256)) * 64)
    writer.add_riff_chunk(b"DATE", b"\x00\x0a")
    data = writer.finalize()

    blocks = [data[i:i + 3] for i in range(0, len(data), 3)]
    reader = SavegameReader.from_chunks(blocks, chunk_size=100)

    assert reader.header.version == 300
    assert reader.read_chunks(strict=True) == SavegameReader(data).read_chunks(strict=True)


def test_from_chunks_truncated_header():
    with pytest.raises(UnexpectedEndOfFile):
        SavegameReader.from_chunks([b"OTT", b"N\x00"])


def test_from_file(tmp_path):
    writer = SavegameWriter(295, Compression.LZMA)
    writer.add_riff_chunk(b"TEST", b"Hello, World!")
    path = tmp_path / "test.sav"
    path.write_bytes(writer.finalize())

    reader = SavegameReader.from_file(path, chunk_size=16)
    assert reader.header.compression == Compression.LZMA
    assert [chunk.data for chunk in reader.read_chunks()] == [RiffData(b"Hello, World!")]
