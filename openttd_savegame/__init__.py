from .chunk import (
    ArrayData,
    Chunk,
    ChunkHeader,
    RiffData,
    TableData,
    TableField,
    TableHeader,
    parse_array_chunk,
    parse_chunk_body,
    parse_riff_chunk,
    parse_table_chunk,
)
from .enums import ChunkType, Compression, FieldType
from .exceptions import (
    DecompressionError,
    EmptyTableHeader,
    InvalidChunkType,
    InvalidFieldType,
    InvalidGammaEncoding,
    InvalidKey,
    InvalidMagic,
    InvalidRecordSize,
    JunkAfterEndMarker,
    JunkAfterRecord,
    TableHeaderSizeMismatch,
    UnexpectedEndOfFile,
    UnsupportedCompression,
    ValidationException,
)
from .gamma import decode_gamma, encode_gamma
from .header import SavegameHeader, parse_header
from .records import decode_chunk, decode_record
from .savegame import SavegameReader, SavegameWriter, read_chunks

# On release this is replaced by the release's corresponding git tag
__version__ = "0.0.0.dev0"
