import struct

from .exceptions import UnexpectedEndOfFile
from .gamma import decode_gamma


class BinaryReader:
    """
    Read big-endian binary data from an in-memory buffer.

    A failed read raises UnexpectedEndOfFile and leaves the cursor where it
    was.
    """

    def __init__(self, data, offset=0):
        self._data = data
        self._pos = offset

    @property
    def position(self):
        return self._pos

    @property
    def remaining(self):
        return max(len(self._data) - self._pos, 0)

    def read(self, amount):
        if amount < 0 or self.remaining < amount:
            raise UnexpectedEndOfFile()

        data = bytes(self._data[self._pos:self._pos + amount])
        self._pos += amount
        return data

    def skip(self, amount):
        self.read(amount)

    def _unpack(self, fmt, size):
        try:
            value = struct.unpack_from(fmt, self._data, self._pos)[0]
        except struct.error:
            raise UnexpectedEndOfFile()
        self._pos += size
        return value

    def gamma(self):
        """
        Read OTTD-savegame-style gamma value.
        """
        value, size = decode_gamma(self._data, self._pos)
        self._pos += size
        return value

    def gamma_str(self):
        """
        Read OTTD-savegame-style gamma string (SLE_STR).
        """
        start = self._pos
        size = self.gamma()
        try:
            return self.read(size)
        except UnexpectedEndOfFile:
            self._pos = start
            raise

    def int8(self):
        return self._unpack(">b", 1)

    def uint8(self):
        return self._unpack(">B", 1)

    def int16(self):
        return self._unpack(">h", 2)

    def uint16(self):
        return self._unpack(">H", 2)

    def uint24(self):
        high, low = struct.unpack(">HB", self.read(3))
        return (high << 8) | low

    def int32(self):
        return self._unpack(">l", 4)

    def uint32(self):
        return self._unpack(">L", 4)

    def int64(self):
        return self._unpack(">q", 8)

    def uint64(self):
        return self._unpack(">Q", 8)
