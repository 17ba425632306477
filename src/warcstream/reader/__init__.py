"""Reading WARC records from files, pipes and in-memory buffers.

WARC Format Specification References:
- WARC 1.1 Annotated (primary): https://iipc.github.io/warc-specifications/specifications/warc-format/warc-1.1-annotated/
"""

from . import errors, record, stream, warc
from .errors import (
    IncompleteRecord,
    InvalidContentLength,
    InvalidField,
    InvalidVersion,
    MissingMandatoryFields,
    ParseFailure,
)
from .record import WarcRecord
from .stream import LineReader, RecordStream, open_record_stream
from .warc import WarcParser, open_archive, read_record, read_subsequent_record

__all__ = [
    "WarcRecord",
    "WarcParser",
    "ParseFailure",
    "InvalidVersion",
    "InvalidField",
    "MissingMandatoryFields",
    "InvalidContentLength",
    "IncompleteRecord",
    "LineReader",
    "RecordStream",
    "open_archive",
    "open_record_stream",
    "read_record",
    "read_subsequent_record",
    "errors",
    "record",
    "stream",
    "warc",
]
