"""Reads WARC records one at a time from a forward-only byte stream.

Record format per WARC 1.1 Section 4:

    version CRLF *named-field CRLF block CRLF CRLF

Both CRLF and bare LF line ends are accepted. Field names are matched case
insensitively. The block is exactly Content-Length bytes long.

Two entry points share the same header and block handling:

- read_record() expects a version line to be the very next line.
- read_subsequent_record() discards lines until it finds a version line,
  which recovers from junk between records or the leftovers of a damaged one.

Neither raises on malformed input; they return a WarcRecord or one of the
failures in errors.py.

WARC Format Specification References:
- WARC 1.1 Annotated (primary): https://iipc.github.io/warc-specifications/specifications/warc-format/warc-1.1-annotated/
- WARC 1.0: https://iipc.github.io/warc-specifications/specifications/warc-format/warc-1.0/
"""

import logging
import re

from warcstream.reader.errors import (
    IncompleteRecord,
    InvalidContentLength,
    InvalidField,
    InvalidVersion,
    MissingMandatoryFields,
    ParseFailure,
)
from warcstream.reader.record import WarcRecord
from warcstream.reader.stream import CHUNK_SIZE, LineReader, open_record_stream

logger = logging.getLogger(__name__)

VERSION_PREFIX = b"WARC/"


# Content-Length per WARC 1.1 Section 5.5: "Content-Length" ":" 1*DIGIT
length_rx = re.compile(r"^[0-9]+\Z")

required_headers = (
    WarcRecord.TYPE,  # pylint: disable-msg=E1101
    WarcRecord.CONTENT_LENGTH,  # pylint: disable-msg=E1101
)


def is_header_end(line: bytes) -> bool:
    """A blank line, with or without CR, ends the header block."""
    return line.rstrip(b"\n") in (b"", b"\r")


def decode_field(raw: bytes) -> str:
    # field values may contain UTF-8 per WARC 1.1 Section 4
    return raw.decode("utf-8", errors="replace")


class WarcParser:
    """Parser for WARC records.

    Works on anything with ``readline()`` and ``read(size)`` returning bytes
    (see stream.LineReader). It never reads beyond the end of the record it
    is parsing, so the stream is left positioned at the next record.

    See:
        WARC 1.1 Section 4: https://iipc.github.io/warc-specifications/specifications/warc-format/warc-1.1-annotated/#file-and-record-model
    """

    def parse(self, stream: LineReader, skip_junk: bool = False) -> WarcRecord | ParseFailure:
        """Parse the next WARC record from the stream.

        Args:
            stream: Binary stream to read from
            skip_junk: If True, discard lines until a version line is found;
                       otherwise the first line read must be the version line

        Returns:
            WarcRecord on success, otherwise a ParseFailure describing the
            phase that failed
        """
        if skip_junk:
            version = self.find_version(stream)
        else:
            version = self.read_version(stream)
        if isinstance(version, ParseFailure):
            return version

        fields = self.read_fields(stream)
        if isinstance(fields, ParseFailure):
            return fields

        missing = tuple(name for name in required_headers if name not in fields)
        if missing:
            # Without a trustworthy length the block cannot be skipped; the
            # stream stays just after the blank line ending the header.
            logger.debug("record without mandatory fields %s", ", ".join(missing))
            return MissingMandatoryFields(missing)

        value = fields[WarcRecord.CONTENT_LENGTH]  # pylint: disable-msg=E1101
        if not length_rx.match(value):
            logger.debug("bad content length %r", value)
            return InvalidContentLength(value)

        content = self.read_content(stream, int(value))
        if isinstance(content, ParseFailure):
            return content

        return WarcRecord(version=version, fields=fields, content=content)

    def read_version(self, stream: LineReader) -> str | InvalidVersion:
        """Read one line and check it is a ``WARC/<version>`` line.

        Only a single line is consumed, whether or not it matches.
        """
        line = stream.readline()
        trimmed = line.strip()
        if len(trimmed) > len(VERSION_PREFIX) and trimmed.startswith(VERSION_PREFIX):
            return decode_field(trimmed[len(VERSION_PREFIX) :])
        return InvalidVersion(line)

    def find_version(self, stream: LineReader) -> str | InvalidVersion:
        """Discard lines until a version line is found or the stream ends."""
        while True:
            version = self.read_version(stream)
            if not isinstance(version, InvalidVersion):
                return version
            if not version.line:
                return InvalidVersion()
            logger.debug("ignored line %r", version.line)

    def read_fields(self, stream: LineReader) -> dict[str, str] | InvalidField:
        """Read named fields up to and including the blank line after them.

        Returns a dict of lower-cased names to trimmed values. The end of the
        stream also ends the header; missing fields are caught by the caller.
        """
        fields = {}
        line = stream.readline()
        while line and not is_header_end(line):
            name, colon, value = line.partition(b":")
            name = name.strip()
            value = value.strip()
            if not colon or not name or not value:
                logger.debug("could not parse field %r", line)
                return InvalidField(line)
            fields[decode_field(name).lower()] = decode_field(value)
            line = stream.readline()
        return fields

    def read_content(self, stream: LineReader, length: int) -> bytes | IncompleteRecord:
        """Read exactly length bytes of block, then skip the record trailer.

        The trailer is two line ends. Each skip discards up to and including
        the next newline, so a block that does not end on a line boundary is
        tolerated.
        """
        chunks = []
        remaining = length
        while remaining > 0:
            buf = stream.read(min(CHUNK_SIZE, remaining))
            if not buf:
                logger.debug("expected %d bytes but only read %d", length, length - remaining)
                return IncompleteRecord(expected=length, received=length - remaining)
            chunks.append(buf)
            remaining -= len(buf)

        stream.readline()
        stream.readline()
        return b"".join(chunks)


_parser = WarcParser()


def read_record(stream: LineReader) -> WarcRecord | ParseFailure:
    """Parse the WARC record starting at the current line of the stream."""
    return _parser.parse(stream, skip_junk=False)


def read_subsequent_record(stream: LineReader) -> WarcRecord | ParseFailure:
    """Parse the next WARC record, skipping anything before its version line."""
    return _parser.parse(stream, skip_junk=True)


def open_archive(filename=None, file_handle=None, gzip="auto"):
    """Open a WARC file (or wrap a handle) for reading records one by one.

    See stream.open_record_stream for the meaning of the arguments.
    """
    return open_record_stream(WarcParser(), filename, file_handle, gzip)
