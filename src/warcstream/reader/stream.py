"""Read records from normal file and compressed file

WARC Format Specification References:
- WARC 1.1 Annotated (primary): https://iipc.github.io/warc-specifications/specifications/warc-format/warc-1.1-annotated/
- Compression: See Annex D "Compression recommendations"
  https://iipc.github.io/warc-specifications/specifications/warc-format/warc-1.1-annotated/#annex-d-informative-compression-recommendations
"""

import gzip
import io
import sys
from typing import Protocol

from warcstream.reader.record import WarcRecord

CHUNK_SIZE = 8192  # the size to read in, make this bigger things go faster.

GZIP_MAGIC = b"\x1f\x8b"


class LineReader(Protocol):
    """What the record parser needs from a stream.

    Binary files, ``io.BytesIO`` and RecordStream all qualify. ``readline``
    returns ``b""`` at end of input and ``read`` may return fewer bytes than
    asked for only at end of input.
    """

    def readline(self) -> bytes: ...

    def read(self, size: int) -> bytes: ...


def peekable(file_handle):
    """Wrap file_handle so that it supports peek() without seeking."""
    if hasattr(file_handle, "peek"):
        return file_handle
    return io.BufferedReader(file_handle)


def is_gzip_file(file_handle):
    """Check if a peekable file handle points at gzip data (magic 0x1f 0x8b).

    Nothing is consumed, so this works on pipes and stdin.
    """
    return file_handle.peek(len(GZIP_MAGIC))[: len(GZIP_MAGIC)] == GZIP_MAGIC


def open_record_stream(record_parser, filename=None, file_handle=None, gzip="auto"):
    """Open an archive and return a RecordStream for reading records.

    Args:
        record_parser: Parser with a ``parse(stream, skip_junk)`` method
        filename: Path to archive file, or "-" for standard input
        file_handle: Optional binary file-like object (takes precedence over filename)
        gzip: Compression mode - "auto" (detect), "file" (gzip, one or many
              members), or None (uncompressed)

    Returns:
        RecordStream: Stream for reading archive records

    See:
        WARC 1.1 Annex D: https://iipc.github.io/warc-specifications/specifications/warc-format/warc-1.1-annotated/#annex-d-informative-compression-recommendations

    Example:
        >>> stream = open_record_stream(WarcParser(), filename="archive.warc.gz")
        >>> for record in stream:
        ...     print(record.type)
    """
    if file_handle is None:
        if filename is None:
            raise ValueError("either filename or file_handle is required")
        if filename == "-":
            file_handle = sys.stdin.buffer
        else:
            file_handle = open(filename, mode="rb")

    file_handle = peekable(file_handle)

    if gzip == "auto":
        if (filename and filename.endswith(".gz")) or is_gzip_file(file_handle):
            gzip = "file"
        else:
            # assume uncompressed file
            gzip = None

    if gzip == "file":
        # Record-at-a-time compression (Annex D.2) is a series of gzip
        # members, which GzipFile reads as one continuous stream.
        return GzipFileStream(file_handle, record_parser)
    elif gzip is None:
        return RecordStream(file_handle, record_parser)
    else:
        raise ValueError(f"unknown gzip mode {gzip!r}")


class RecordStream:
    """A readable stream of WARC records. Can be iterated over for the
    records that parse, or read_records gives every result together with
    the offset it was read from.

    Records are read strictly in order; nothing is buffered beyond the
    record currently being parsed.
    """

    def __init__(self, file_handle, record_parser):
        self.fh = peekable(file_handle)
        self.record_parser = record_parser
        # bytes consumed from the (uncompressed) stream so far
        self.position = 0

    def read_record(self):
        """Parse the record that starts at the current line."""
        return self.record_parser.parse(self, skip_junk=False)

    def read_subsequent_record(self):
        """Parse the next record, skipping junk before its version line."""
        return self.record_parser.parse(self, skip_junk=True)

    def read_records(self, limit=None):
        """Yield a tuple of (offset, result) for each record until the end
        of the stream, where result is a WarcRecord or a ParseFailure and
        offset is the position the parse started from."""
        nrecords = 0
        while (limit is None or nrecords < limit) and not self.at_eof():
            offset = self.position
            result = self.read_subsequent_record()
            nrecords += 1
            yield (offset, result)

    def __iter__(self):
        for _offset, result in self.read_records():
            if isinstance(result, WarcRecord):
                yield result

    def at_eof(self):
        return not self.fh.peek(1)

    def read(self, count=None):
        if count is not None:
            result = self.fh.read(count)
        else:
            result = self.fh.read()
        self.position += len(result)
        return result

    def readline(self):
        result = self.fh.readline()
        self.position += len(result)
        return result

    def close(self):
        """Close the underlying file handle."""
        self.fh.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class GzipFileStream(RecordStream):
    """A stream of records read through gzip decompression.

    Handles both a single gzip stream for the whole file and record-at-a-time
    compression (one member per record, Annex D.2). Offsets count
    uncompressed bytes.
    """

    def __init__(self, file_handle, record_parser):
        self.raw_fh = file_handle
        RecordStream.__init__(self, gzip.GzipFile(fileobj=file_handle, mode="rb"), record_parser)

    def close(self):
        self.fh.close()
        self.raw_fh.close()
