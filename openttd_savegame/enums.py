import enum

FIELD_TYPE_HAS_LENGTH_FIELD = 0x10


class Compression(enum.Enum):
    NONE = b"OTTN"
    ZLIB = b"OTTZ"
    LZMA = b"OTTX"
    # Only very old savegames use lzo by default, but current clients can
    # still be configured to write it with savegame_format=lzo.
    LZO = b"OTTD"

    @property
    def magic(self):
        return self.value


class ChunkType(enum.IntEnum):
    RIFF = 0
    ARRAY = 1
    SPARSE_ARRAY = 2
    TABLE = 3
    SPARSE_TABLE = 4

    @property
    def is_sparse(self):
        return self in (ChunkType.SPARSE_ARRAY, ChunkType.SPARSE_TABLE)

    @property
    def has_table_header(self):
        return self in (ChunkType.TABLE, ChunkType.SPARSE_TABLE)


class FieldType(enum.IntEnum):
    END = 0
    I8 = 1
    U8 = 2
    I16 = 3
    U16 = 4
    I32 = 5
    U32 = 6
    I64 = 7
    U64 = 8
    STRINGID = 9
    STRING = 10
    STRUCT = 11


COMPRESSION_BY_MAGIC = {compression.magic: compression for compression in Compression}
CHUNK_TYPES = {chunk_type.value: chunk_type for chunk_type in ChunkType}
FIELD_TYPES = {field_type.value: field_type for field_type in FieldType if field_type != FieldType.END}
