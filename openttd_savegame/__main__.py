import json
import logging

import click
from rich.console import Console
from rich.table import Table

from .chunk import ArrayData, RiffData
from .compression import CHUNK_SIZE
from .exceptions import ValidationException
from .gui import SavegameBrowser
from .records import decode_chunk
from .savegame import SavegameReader


def describe(chunk):
    if isinstance(chunk.data, RiffData):
        return f"{len(chunk.data.data)} bytes"
    if isinstance(chunk.data, ArrayData):
        return f"{len(chunk.data.items)} items"
    return f"{len(chunk.data.records)} records, {len(chunk.data.header.fields)} fields"


def print_summary(console, filename, reader, chunks):
    header = reader.header
    console.print(f"Savegame: {filename}")
    console.print(f"  compression: {header.compression.name.lower()}")
    console.print(f"  version: {header.version}")
    console.print(f"  flags: 0x{header.flags:04x}")

    table = Table("Tag", "Type", "Contents")
    for chunk in chunks:
        table.add_row(chunk.tag, chunk.chunk_type.name, describe(chunk))
    console.print(table)


@click.command()
@click.argument("savegame", nargs=1, type=click.Path(exists=True, file_okay=True, dir_okay=False))
@click.option("--export-json", help="Export the savegame as JSON.", is_flag=True)
@click.option("--browse", help="Browse the savegame in the terminal.", is_flag=True)
@click.option("--strict", help="Require the end-of-savegame marker.", is_flag=True)
@click.option("--index-in-size", help="Sparse record sizes include their index, as OpenTTD writes them.", is_flag=True)
@click.option("--chunk-size", help="Block size for reading the savegame.", type=click.IntRange(min=1), default=CHUNK_SIZE, show_default=True)
@click.option("-v", "--verbose", help="Log what is being read.", is_flag=True)
def main(savegame, export_json, browse, strict, index_in_size, chunk_size, verbose):
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=logging.DEBUG if verbose else logging.WARNING,
    )

    try:
        reader = SavegameReader.from_file(savegame, chunk_size)
        chunks = reader.read_chunks(strict, index_in_size)

        if export_json:
            click.echo(json.dumps({
                "savegame_version": reader.header.version,
                "chunks": {chunk.tag: decode_chunk(chunk) for chunk in chunks},
            }))
            return
    except ValidationException as e:
        raise click.ClickException(f"Corrupt savegame {savegame}: {e}")

    if browse:
        SavegameBrowser(savegame, chunks).run()
        return

    print_summary(Console(), savegame, reader, chunks)


if __name__ == "__main__":
    main()
