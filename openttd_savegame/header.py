import logging
import struct
from collections import namedtuple

from .binreader import BinaryReader
from .enums import COMPRESSION_BY_MAGIC
from .exceptions import InvalidMagic

logger = logging.getLogger(__name__)


class SavegameHeader(namedtuple("SavegameHeader", ("compression", "version", "flags"))):
    """
    The 8 bytes in front of every savegame: compression magic, savegame
    version and flags.
    """

    __slots__ = ()

    SIZE = 8

    @classmethod
    def parse(cls, data):
        reader = BinaryReader(data)
        magic = reader.read(4)
        try:
            compression = COMPRESSION_BY_MAGIC[magic]
        except KeyError:
            raise InvalidMagic(magic)
        version = reader.uint16()
        flags = reader.uint16()

        logger.debug("Savegame version %d, compression %s, flags 0x%04x", version, compression.name, flags)
        return cls(compression, version, flags)

    def write(self):
        return self.compression.magic + struct.pack(">HH", self.version, self.flags)


def parse_header(data):
    return SavegameHeader.parse(data)
