# filename : scripts.py
# created  : 10/19/2026


import logging
from pathlib import Path

import click

from tachoparse.core.base.errors import ParseError
from tachoparse.core.base.logging import PROTOCOL, TRACE

lg = logging.getLogger(__name__)


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-v", "--verbose", is_flag=True, help="TRACE level (show record arrays and hex dumps of skipped data).")
@click.option("--detect", is_flag=True, help="Only print the device class and generation.")
@click.option("--strict", is_flag=True, help="Fail on unknown tags instead of skipping them.")
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(["summary", "json"]),
    default="summary",
    show_default=True,
    help="Output format.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write to a file instead of stdout.",
)
def tachoparse(file, verbose, detect, strict, fmt, output):

    logging.basicConfig(
        level=TRACE if verbose else PROTOCOL,
        format="%(levelname)-8s %(name)s: %(message)s",
    )

    from tachoparse.app.display import format_card, format_vehicle_unit
    from tachoparse.app.export import to_json
    from tachoparse.core.document import CardDocument, detect_file_type, parse

    data = file.read_bytes()
    try:
        if detect:
            text = str(detect_file_type(data))
        else:
            doc = parse(data, strict=strict)
            if fmt == "json":
                text = to_json(doc)
            elif isinstance(doc, CardDocument):
                text = format_card(doc)
            else:
                text = format_vehicle_unit(doc)
    except ParseError as e:
        click.echo(f"error: {e.kind}: {e}", err=True)
        raise SystemExit(1)

    if output is not None:
        output.write_text(text + "\n", encoding="utf-8")
        lg.info("wrote %s", output)
    else:
        click.echo(text)
