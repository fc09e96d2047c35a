class ValidationException(Exception):
    pass


class UnexpectedEndOfFile(ValidationException):
    def __init__(self, message="Unexpected end-of-file."):
        super().__init__(message)


class InvalidMagic(ValidationException):
    def __init__(self, magic):
        self.magic = magic
        super().__init__(f"Invalid magic {magic.decode('latin-1')!r}: unknown savegame compression.")


class InvalidChunkType(ValidationException):
    def __init__(self, chunk_type):
        self.chunk_type = chunk_type
        super().__init__(f"Invalid chunk type {chunk_type}.")


class InvalidFieldType(ValidationException):
    def __init__(self, field_type):
        self.field_type = field_type
        super().__init__(f"Invalid field type {field_type}.")


class InvalidGammaEncoding(ValidationException):
    def __init__(self):
        super().__init__("Invalid gamma encoding.")


class EmptyTableHeader(ValidationException):
    def __init__(self):
        super().__init__("Table has no header.")


class InvalidKey(ValidationException):
    pass


class TableHeaderSizeMismatch(ValidationException):
    def __init__(self):
        super().__init__("Table header size mismatch.")


class JunkAfterEndMarker(ValidationException):
    def __init__(self):
        super().__init__("Junk at the end of file.")


class JunkAfterRecord(ValidationException):
    def __init__(self, tag):
        self.tag = tag
        super().__init__(f"Junk at end of chunk {tag}")


class UnsupportedCompression(ValidationException):
    def __init__(self, compression):
        self.compression = compression
        super().__init__(f"Unsupported savegame compression {compression.name.lower()}.")


class DecompressionError(ValidationException):
    pass


class InvalidRecordSize(ValidationException):
    def __init__(self, index):
        self.index = index
        super().__init__(f"Invalid size for record {index}.")
