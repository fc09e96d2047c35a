import itertools
import logging
from collections import namedtuple

from .binreader import BinaryReader
from .enums import CHUNK_TYPES, FIELD_TYPE_HAS_LENGTH_FIELD, FIELD_TYPES, ChunkType, FieldType
from .exceptions import (
    EmptyTableHeader,
    InvalidChunkType,
    InvalidFieldType,
    InvalidKey,
    InvalidRecordSize,
    TableHeaderSizeMismatch,
    UnexpectedEndOfFile,
)

logger = logging.getLogger(__name__)

CHUNK_HEADER_SIZE = 5
END_MARKER_TAG = b"\0\0\0\0"
END_MARKER = END_MARKER_TAG + b"\0"

# Largest RIFF payload: 24 bits of length plus 4 bits from the mode byte
RIFF_MAX_SIZE = (1 << 28) - 1


class ChunkHeader(namedtuple("ChunkHeader", ("tag", "chunk_type", "mode_byte"))):
    __slots__ = ()

    @classmethod
    def parse(cls, buf, offset=0):
        """
        Parse the tag and mode byte in front of a chunk.

        The end marker still takes up 5 bytes; its chunk_type is None.
        """
        reader = BinaryReader(buf, offset)
        if reader.remaining < CHUNK_HEADER_SIZE:
            raise UnexpectedEndOfFile()

        tag = reader.read(4)
        mode_byte = reader.uint8()
        if tag == END_MARKER_TAG:
            return cls(tag, None, 0), CHUNK_HEADER_SIZE

        try:
            chunk_type = CHUNK_TYPES[mode_byte & 0xF]
        except KeyError:
            raise InvalidChunkType(mode_byte & 0xF)

        return cls(tag, chunk_type, mode_byte), CHUNK_HEADER_SIZE

    @property
    def is_end_marker(self):
        return self.tag == END_MARKER_TAG

    @property
    def tag_string(self):
        return self.tag.decode("ascii", errors="replace")


class TableField(namedtuple("TableField", ("data_type", "is_list", "key"))):
    __slots__ = ()

    @property
    def type_byte(self):
        return self.data_type | (FIELD_TYPE_HAS_LENGTH_FIELD if self.is_list else 0)


class TableHeader(namedtuple("TableHeader", ("fields", "sub_headers"))):
    """
    Field descriptors in front of the records of a (sparse) table chunk.

    fields is the root field list, in the order the fields appear in every
    record. Each STRUCT field has its own field list in sub_headers, keyed by
    its dotted path from "root".
    """

    __slots__ = ()

    @classmethod
    def parse(cls, buf, offset=0):
        reader = BinaryReader(buf, offset)

        # Stored as size + 1, so that 0 can mean "no header"
        size_plus_one = reader.gamma()
        if size_plus_one == 0:
            raise EmptyTableHeader()
        header_end = reader.position + size_plus_one - 1

        def read_fields():
            fields = []
            while reader.position < header_end:
                type_byte = reader.uint8()
                if type_byte == 0:
                    break

                try:
                    data_type = FIELD_TYPES[type_byte & 0xF]
                except KeyError:
                    raise InvalidFieldType(type_byte)

                key = reader.gamma_str()
                try:
                    key = key.decode()
                except UnicodeDecodeError as e:
                    raise InvalidKey(f"Invalid table key {key!r}: {e}") from e

                fields.append(TableField(data_type, bool(type_byte & FIELD_TYPE_HAS_LENGTH_FIELD), key))
            return fields

        def read_substruct(fields, parent_key):
            for field in fields:
                if field.data_type == FieldType.STRUCT:
                    # Every STRUCT field has a sub-header inside the declared size
                    if reader.position >= header_end:
                        raise TableHeaderSizeMismatch()
                    full_sub_key = f"{parent_key}.{field.key}"
                    sub_fields = read_fields()
                    yield full_sub_key, sub_fields
                    yield from read_substruct(sub_fields, full_sub_key)

        root_fields = read_fields()
        sub_headers = dict(read_substruct(root_fields, "root"))

        if reader.position > header_end:
            raise TableHeaderSizeMismatch()
        reader.skip(header_end - reader.position)

        return cls(root_fields, sub_headers), reader.position - offset

    def fields_for(self, key="root"):
        return self.fields if key == "root" else self.sub_headers[key]


RiffData = namedtuple("RiffData", ("data",))
ArrayData = namedtuple("ArrayData", ("items",))
TableData = namedtuple("TableData", ("header", "records"))


class Chunk(namedtuple("Chunk", ("tag", "chunk_type", "data"))):
    __slots__ = ()

    @property
    def records(self):
        """
        The (index, bytes) records of the chunk; a RIFF chunk is one record
        at index 0.
        """
        if isinstance(self.data, RiffData):
            return [(0, self.data.data)]
        if isinstance(self.data, ArrayData):
            return self.data.items
        return self.data.records


def read_records(reader, sparse, index_in_size=False):
    """
    Read the size-prefixed records shared by all array and table chunks.

    Sizes are stored as size + 1; a stored 0 ends the records. Records of
    size 0 are empty slots: not returned, but they still take up an index
    in non-sparse chunks.

    OpenTTD itself counts the gamma-encoded index of a sparse record as part
    of its size; pass index_in_size=True to read chunks written that way.
    """
    counter = itertools.count()
    records = []

    while size_plus_one := reader.gamma():
        size = size_plus_one - 1
        if sparse:
            start = reader.position
            index = reader.gamma()
            if index_in_size:
                size -= reader.position - start
        else:
            index = next(counter)

        if size == 0:
            continue
        if size < 0:
            raise InvalidRecordSize(index)

        records.append((index, reader.read(size)))

    return records


def parse_riff_chunk(header, buf, offset=0):
    reader = BinaryReader(buf, offset)
    size = (header.mode_byte >> 4) << 24 | reader.uint24()
    data = reader.read(size)
    return data, reader.position - offset


def parse_array_chunk(header, buf, offset=0, index_in_size=False):
    reader = BinaryReader(buf, offset)
    items = read_records(reader, header.chunk_type.is_sparse, index_in_size)
    return items, reader.position - offset


def parse_table_chunk(header, buf, offset=0, index_in_size=False):
    table_header, header_size = TableHeader.parse(buf, offset)
    reader = BinaryReader(buf, offset + header_size)
    records = read_records(reader, header.chunk_type.is_sparse, index_in_size)
    return table_header, records, reader.position - offset


def parse_chunk_body(header, buf, offset=0, index_in_size=False):
    logger.debug("Reading chunk %s (%s) at offset %d", header.tag_string, header.chunk_type.name, offset)

    if header.chunk_type == ChunkType.RIFF:
        data, size = parse_riff_chunk(header, buf, offset)
        return RiffData(data), size

    if header.chunk_type.has_table_header:
        table_header, records, size = parse_table_chunk(header, buf, offset, index_in_size)
        return TableData(table_header, records), size

    items, size = parse_array_chunk(header, buf, offset, index_in_size)
    return ArrayData(items), size
