import json
import os

import urwid

from .chunk import TableData
from .enums import FieldType
from .exceptions import ValidationException
from .records import decode_record

HEX_PREVIEW_SIZE = 256


def hex_preview(data, size=HEX_PREVIEW_SIZE):
    lines = [
        f"{offset:08x}  {data[offset:offset + 16].hex(' ')}"
        for offset in range(0, min(len(data), size), 16)
    ]
    if len(data) > size:
        lines.append(f"... ({len(data) - size} more bytes)")
    return "\n".join(lines)


class SavegameBrowser:
    palette = [
        ("body", "light gray", "black"),
        ("focus", "light gray", "dark blue", "standout"),
        ("head", "yellow", "black", "standout"),
        ("foot", "light gray", "black"),
        ("key", "light cyan", "black", "underline"),
        ("title", "white", "black", "bold"),
        ("flag", "dark gray", "light gray"),
        ("error", "dark red", "light gray"),
        ("disabled", "dark red", "black"),
    ]

    footer_text = [
        ("title", "Savegame Browser"),
        "    ",
        ("key", "UP"),
        ",",
        ("key", "DOWN"),
        ",",
        ("key", "PAGE UP"),
        ",",
        ("key", "PAGE DOWN"),
        "  ",
        ("key", "LEFT"),
        ",",
        ("key", "RIGHT"),
        "  ",
        ("key", "Q"),
    ]

    def ChunkFocus(self):
        self.indexes.clear()

        if self.chunks.focus is None:
            return

        chunk = self._chunks[self.chunks.focus]

        for index, _ in chunk.records:
            button = urwid.Button(str(index))
            self.indexes.append(urwid.AttrMap(button, None, focus_map="reversed"))

    def add_table(self, table_header, fields, table_key="root", prefix=""):
        table = {field.key: field for field in table_header.fields_for(table_key)}

        for key, value in fields.items():
            field = table[key]
            header = f"{field.data_type.name}"

            if field.data_type == FieldType.STRUCT:
                svalue = value if field.is_list else [value]
                value = f"(length: {len(svalue)})"
            else:
                value = json.dumps(value)

            key_field = urwid.AttrMap(urwid.Text(f"{prefix}{key}"), None, focus_map="reversed")
            value_field = urwid.Text(value)
            type_field = urwid.Text(header)

            self.fields.append(
                urwid.Columns(
                    [(50, key_field), value_field, (10, type_field)],
                    dividechars=2,
                )
            )

            if field.data_type == FieldType.STRUCT:
                for i, item in enumerate(svalue):
                    self.add_table(table_header, item, f"{table_key}.{key}", f"{prefix}{key}[{i}].")

    def IndexFocus(self):
        self.fields.clear()

        if self.chunks.focus is None or self.indexes.focus is None:
            return

        chunk = self._chunks[self.chunks.focus]
        _, data = chunk.records[self.indexes.focus]

        if isinstance(chunk.data, TableData):
            try:
                record = decode_record(chunk.data.header, data, chunk.tag)
            except ValidationException as e:
                self.fields.append(urwid.Text(f"Invalid record: {e}"))
                self.fields.append(urwid.Text(hex_preview(data)))
                return
            self.add_table(chunk.data.header, record)
        else:
            self.fields.append(urwid.Text(f"{chunk.chunk_type.name} record, {len(data)} bytes"))
            self.fields.append(urwid.Text(hex_preview(data)))

    def __init__(self, filename, chunks):
        self._chunks = list(chunks)

        self.chunks = urwid.SimpleFocusListWalker([])
        self.indexes = urwid.SimpleFocusListWalker([])
        self.fields = urwid.SimpleFocusListWalker([])

        for chunk in self._chunks:
            button = urwid.Button(chunk.tag)
            self.chunks.append(urwid.AttrMap(button, None if isinstance(chunk.data, TableData) else "disabled", focus_map="reversed"))

        self.ChunkFocus()
        self.IndexFocus()

        urwid.connect_signal(self.chunks, "modified", self.ChunkFocus)
        urwid.connect_signal(self.indexes, "modified", self.IndexFocus)

        self.body = urwid.Columns(
            [(20, urwid.ListBox(self.chunks)), (10, urwid.ListBox(self.indexes)), urwid.ListBox(self.fields)],
            dividechars=2,
        )

        self.header = urwid.Text(f"Savegame: {os.path.basename(filename)}")
        self.footer = urwid.AttrMap(urwid.Text(self.footer_text), "foot")
        self.view = urwid.Frame(
            urwid.AttrMap(self.body, "body"), header=urwid.AttrMap(self.header, "head"), footer=self.footer
        )

    def run(self):
        """Run the program."""

        self.loop = urwid.MainLoop(self.view, self.palette, unhandled_input=self.unhandled_input)
        self.loop.run()

    def unhandled_input(self, k):
        if k in ("q", "Q"):
            raise urwid.ExitMainLoop()
