import logging
import lzma
import zlib

from . import lzo
from .enums import Compression
from .exceptions import DecompressionError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 65536


def decompress_none(compressed_chunks, chunk_size=CHUNK_SIZE):
    yield from compressed_chunks


def decompress_zlib(compressed_chunks, chunk_size=CHUNK_SIZE):
    dobj = zlib.decompressobj()
    try:
        for compressed_chunk in compressed_chunks:
            if chunk := dobj.decompress(compressed_chunk, max_length=chunk_size):
                yield chunk

            while dobj.unconsumed_tail and not dobj.eof and (chunk := dobj.decompress(dobj.unconsumed_tail, max_length=chunk_size)):
                yield chunk

        if chunk := dobj.flush():
            yield chunk
    except zlib.error as e:
        raise DecompressionError(f"Invalid zlib stream: {e}") from e

    if not dobj.eof:
        raise DecompressionError("Invalid zlib stream: truncated.")


def decompress_lzma(compressed_chunks, chunk_size=CHUNK_SIZE):
    dobj = lzma.LZMADecompressor()
    try:
        for compressed_chunk in compressed_chunks:
            if dobj.eof:
                break

            if chunk := dobj.decompress(compressed_chunk, max_length=chunk_size):
                yield chunk

            while not dobj.eof and not dobj.needs_input and (chunk := dobj.decompress(b'', max_length=chunk_size)):
                yield chunk
    except lzma.LZMAError as e:
        raise DecompressionError(f"Invalid xz stream: {e}") from e

    if not dobj.eof:
        raise DecompressionError("Invalid xz stream: truncated.")


def compress_none(data):
    return bytes(data)


def compress_zlib(data):
    return zlib.compress(data)


def compress_lzma(data):
    # OpenTTD writes an xz container with a CRC32 check
    return lzma.compress(data, format=lzma.FORMAT_XZ, check=lzma.CHECK_CRC32)


DECOMPRESSORS = {
    Compression.NONE: decompress_none,
    Compression.ZLIB: decompress_zlib,
    Compression.LZMA: decompress_lzma,
    Compression.LZO: lzo.decompress_iter,
}

COMPRESSORS = {
    Compression.NONE: compress_none,
    Compression.ZLIB: compress_zlib,
    Compression.LZMA: compress_lzma,
    Compression.LZO: lzo.compress,
}


def decompress_iter(compression, compressed_chunks, chunk_size=CHUNK_SIZE):
    return DECOMPRESSORS[compression](compressed_chunks, chunk_size)


def decompress(compression, data):
    uncompressed = b"".join(decompress_iter(compression, (data,)))
    logger.debug("Decompressed %d bytes to %d bytes (%s)", len(data), len(uncompressed), compression.name)
    return uncompressed


def compress(compression, data):
    compressed = COMPRESSORS[compression](data)
    logger.debug("Compressed %d bytes to %d bytes (%s)", len(data), len(compressed), compression.name)
    return compressed
