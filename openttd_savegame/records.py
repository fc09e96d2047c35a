"""
Decode the records of table chunks into plain Python values.

The table header of a chunk says, field by field, how each of its records is
laid out. This only turns the bytes into dicts, lists, ints and strings;
what the fields mean is up to the caller.
"""

from .binreader import BinaryReader
from .chunk import TableData
from .enums import FieldType
from .exceptions import InvalidKey, JunkAfterRecord

# Chunks known to have garbage after the fields in their table header
CHUNKS_WITH_TRAILING_DATA = ("GSDT", "AIPL")


def _gamma_str(reader):
    data = reader.gamma_str()
    try:
        return data.decode()
    except UnicodeDecodeError as e:
        raise InvalidKey(f"Invalid string {data!r}: {e}") from e


READERS = {
    FieldType.I8: BinaryReader.int8,
    FieldType.U8: BinaryReader.uint8,
    FieldType.I16: BinaryReader.int16,
    FieldType.U16: BinaryReader.uint16,
    FieldType.I32: BinaryReader.int32,
    FieldType.U32: BinaryReader.uint32,
    FieldType.I64: BinaryReader.int64,
    FieldType.U64: BinaryReader.uint64,
    FieldType.STRINGID: BinaryReader.uint16,
    FieldType.STRING: _gamma_str,
}


def read_table_record(reader, table_header):
    """Reads a record for a chunk."""

    def read_using_header_key(key):
        return {
            field.key: \
                read_list_of_fields(field.data_type, f"{key}.{field.key}") if field.is_list and field.data_type != FieldType.STRING else \
                read_field(field.data_type, f"{key}.{field.key}")
            for field in table_header.fields_for(key)
        }

    def read_list_of_fields(field_type, field_name):
        length = reader.gamma()
        return [
            read_field(field_type, field_name)
            for _ in range(length)
        ]

    def read_field(field_type, field_name):
        return \
            read_using_header_key(field_name) if field_type == FieldType.STRUCT else \
            READERS[field_type](reader)

    return read_using_header_key("root")


def decode_record(table_header, data, tag=None):
    reader = BinaryReader(data)
    record = read_table_record(reader, table_header)

    if reader.remaining and tag not in CHUNKS_WITH_TRAILING_DATA:
        raise JunkAfterRecord(tag)

    return record


def decode_chunk(chunk):
    """
    Decode a chunk into its headers and records, keyed by the record index
    as a string. Only table chunks can be decoded; the others are marked as
    unsupported.
    """
    if not isinstance(chunk.data, TableData):
        return {"headers": {"unsupported": ""}, "records": {}}

    table_header = chunk.data.header
    return {
        "headers": {
            key: {field.key: f"{field.type_byte:02x}" for field in fields}
            for key, fields in (("root", table_header.fields), *table_header.sub_headers.items())
        },
        "records": {
            str(index): decode_record(table_header, data, chunk.tag)
            for index, data in chunk.data.records
        },
    }
