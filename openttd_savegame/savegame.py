import logging

from .chunk import (
    CHUNK_HEADER_SIZE,
    END_MARKER,
    RIFF_MAX_SIZE,
    Chunk,
    ChunkHeader,
    parse_chunk_body,
)
from .compression import CHUNK_SIZE, compress, decompress, decompress_iter
from .enums import ChunkType
from .exceptions import JunkAfterEndMarker, UnexpectedEndOfFile
from .header import SavegameHeader

logger = logging.getLogger(__name__)


class SavegameReader:
    """
    Read the chunks of a savegame held in memory.

    The whole chunk stream is decompressed up front; read_chunks() can then
    be called any number of times.
    """

    def __init__(self, data, uncompressed=None):
        self._header = SavegameHeader.parse(data)

        if uncompressed is None:
            uncompressed = decompress(self._header.compression, bytes(data[SavegameHeader.SIZE:]))
        self._uncompressed = uncompressed

    @classmethod
    def from_chunks(cls, chunks, chunk_size=CHUNK_SIZE):
        """
        Read a savegame from an iterable of bytes, such as the blocks of a
        file, decompressing as the blocks arrive.
        """
        it = iter(chunks)
        head = b""
        for chunk in it:
            head += chunk
            if len(head) >= SavegameHeader.SIZE:
                break

        header = SavegameHeader.parse(head)

        def compressed_chunks():
            if rest := head[SavegameHeader.SIZE:]:
                yield rest
            yield from it

        uncompressed = b"".join(decompress_iter(header.compression, compressed_chunks(), chunk_size))
        return cls(head[:SavegameHeader.SIZE], uncompressed)

    @classmethod
    def from_file(cls, filename, chunk_size=CHUNK_SIZE):
        with open(filename, "rb") as f:
            return cls.from_chunks(iter(lambda: f.read(chunk_size), b""), chunk_size)

    @property
    def header(self):
        return self._header

    @property
    def uncompressed(self):
        return self._uncompressed

    def iter_chunks(self, strict=False, index_in_size=False):
        data = self._uncompressed
        offset = 0

        while True:
            if len(data) - offset < CHUNK_HEADER_SIZE:
                if strict:
                    raise UnexpectedEndOfFile("Unexpected end-of-file: missing end-of-savegame marker.")
                logger.debug("No end-of-savegame marker; %d trailing bytes", len(data) - offset)
                return

            chunk_header, size = ChunkHeader.parse(data, offset)
            offset += size

            if chunk_header.is_end_marker:
                break

            chunk_data, size = parse_chunk_body(chunk_header, data, offset, index_in_size)
            offset += size

            yield Chunk(chunk_header.tag_string, chunk_header.chunk_type, chunk_data)

        if strict and offset != len(data):
            raise JunkAfterEndMarker()

    def read_chunks(self, strict=False, index_in_size=False):
        """
        Read all chunks, in file order.

        By default a chunk stream that stops short of a full chunk header is
        treated as ending there. With strict=True the end-of-savegame marker
        is required and nothing may follow it.
        """
        return list(self.iter_chunks(strict, index_in_size))


class SavegameWriter:
    """
    Build a savegame out of RIFF chunks.
    """

    def __init__(self, version, compression, flags=0):
        self._header = SavegameHeader(compression, version, flags)
        self._chunks = bytearray()

    @property
    def header(self):
        return self._header

    def add_riff_chunk(self, tag, data):
        if isinstance(tag, str):
            tag = tag.encode("ascii")
        if len(tag) != 4:
            raise ValueError(f"Chunk tag {tag!r} is not 4 bytes long.")
        if tag == END_MARKER[:4]:
            raise ValueError("Chunk tag cannot be the end-of-savegame marker.")

        size = len(data)
        if size > RIFF_MAX_SIZE:
            raise ValueError(f"RIFF chunk of {size} bytes is too big.")

        # Bits 24..27 of the size go in the upper nibble of the mode byte
        mode_byte = (size >> 24) << 4 | ChunkType.RIFF
        self._chunks += tag
        self._chunks.append(mode_byte)
        self._chunks += (size & 0xFFFFFF).to_bytes(3, "big")
        self._chunks += data

        logger.debug("Added RIFF chunk %s of %d bytes", tag.decode("ascii", errors="replace"), size)

    def finalize(self):
        """
        Return the bytes of the complete savegame.
        """
        uncompressed = bytes(self._chunks) + END_MARKER
        return self._header.write() + compress(self._header.compression, uncompressed)


def read_chunks(data, strict=False, index_in_size=False):
    return SavegameReader(data).read_chunks(strict, index_in_size)
