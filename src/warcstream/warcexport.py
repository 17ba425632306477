#!/usr/bin/env python
"""warcexport - write the response records of a warc as tsv or json lines

Because lines delimit records, any new line characters in the content are
replaced by the \\u000A sequence in tsv output.
"""

import json
import logging

import click

from .reader import InvalidVersion, WarcRecord, open_archive

logger = logging.getLogger(__name__)

NEWLINE_ESCAPE = "\\u000A"


def format_tsv(record: WarcRecord) -> str:
    content = record.text().replace("\n", NEWLINE_ESCAPE)
    return f"{record.trecid}\t{record.url}\t{content}\n"


def format_jsonl(record: WarcRecord) -> str:
    row = {"trecid": record.trecid, "url": record.url, "content": record.text()}
    return json.dumps(row, ensure_ascii=False) + "\n"


FORMATS = {
    "tsv": format_tsv,
    "jsonl": format_jsonl,
}


def export_archive(fh, out, fmt: str = "tsv", name: str = "-") -> tuple[int, int]:
    """Write every valid response record of fh to out.

    Returns a tuple (records written, failures reported).
    """
    format_record = FORMATS[fmt]
    written = failures = 0
    for offset, result in fh.read_records():
        if isinstance(result, WarcRecord):
            if result.valid_response:
                out.write(format_record(result))
                written += 1
            else:
                logger.debug("skipping %s record at %s:%d", result.type, name, offset)
        elif isinstance(result, InvalidVersion) and not result.line and fh.at_eof():
            # trailing junk, no further records
            logger.debug("no record in tail of %s after offset %d", name, offset)
        else:
            logger.warning("warc errors at %s:%d: %s", name, offset, result.describe())
            failures += 1
    return written, failures


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-f",
    "--format",
    "fmt",
    help="Output file format",
    type=click.Choice(sorted(FORMATS)),
    default="tsv",
    show_default=True,
)
@click.option(
    "-L",
    "--log-level",
    "log_level",
    help="Log level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    show_default=True,
)
@click.argument("input_file", metavar="INPUT", type=click.Path(exists=True, allow_dash=True))
@click.argument("output", required=False, type=click.File("w", encoding="utf-8"), default="-")
def main(fmt: str, log_level: str, input_file: str, output) -> None:
    """Export response records of a WARC file; use - to read from stdin.

    Writes to OUTPUT, or to stdout if it is missing.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    with open_archive(filename=input_file, gzip="auto") as fh:
        written, failures = export_archive(fh, output, fmt=fmt, name=input_file)

    logger.info("wrote %d records from %s, %d errors", written, input_file, failures)


def run() -> None:
    """Entry point for the command-line interface."""
    main()


if __name__ == "__main__":
    run()
