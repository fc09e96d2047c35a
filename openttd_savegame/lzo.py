"""
LZO1X support, as written by savegames with the OTTD magic.

There is no decoder yet: loading these in Python needs a native lzo2
binding, and no current client writes this format unless it is explicitly
configured with savegame_format=lzo. Reading and writing both raise
UnsupportedCompression.
"""

from .enums import Compression
from .exceptions import UnsupportedCompression


def decompress_iter(compressed_chunks, chunk_size):
    raise UnsupportedCompression(Compression.LZO)


def compress(data):
    raise UnsupportedCompression(Compression.LZO)
