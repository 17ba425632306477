"""Parse failures returned (never raised) by the WARC record parser.

Every failure is a small immutable value. A caller gets back either a
WarcRecord or exactly one of the classes below, chosen by the parsing phase
that failed:

- locating the version line: InvalidVersion
- parsing header fields: InvalidField
- checking mandatory fields: MissingMandatoryFields
- checking the Content-Length value: InvalidContentLength
- reading the record block: IncompleteRecord

Returning failures as values lets a reader skip a damaged record and carry on
with the rest of the archive.

See:
    WARC 1.1 Section 4: https://iipc.github.io/warc-specifications/specifications/warc-format/warc-1.1-annotated/#file-and-record-model
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class ParseFailure(ABC):
    """Base class of all parse failures."""

    @abstractmethod
    def describe(self) -> str:
        """One line summary for logs."""


@dataclass(frozen=True)
class InvalidVersion(ParseFailure):
    """No ``WARC/<version>`` line was found.

    ``line`` is the offending line as read, or ``b""`` when the stream ended
    before a version line turned up.
    """

    line: bytes = b""

    def describe(self) -> str:
        if not self.line:
            return "no WARC version line before end of stream"
        return f"invalid WARC version line: {self.line!r}"


@dataclass(frozen=True)
class InvalidField(ParseFailure):
    """A header line is not of the form ``name: value``."""

    line: bytes

    def describe(self) -> str:
        return f"could not parse field: {self.line!r}"


@dataclass(frozen=True)
class MissingMandatoryFields(ParseFailure):
    """The header was parsed but lacks WARC-Type and/or Content-Length."""

    missing: tuple[str, ...] = ()

    def describe(self) -> str:
        return "missing mandatory fields: {}".format(", ".join(self.missing) or "?")


@dataclass(frozen=True)
class InvalidContentLength(ParseFailure):
    """Content-Length is present but not a non-negative decimal integer."""

    value: str

    def describe(self) -> str:
        return f"could not parse content length: {self.value!r}"


@dataclass(frozen=True)
class IncompleteRecord(ParseFailure):
    """The stream ended before Content-Length bytes of block were read."""

    expected: int = 0
    received: int = 0

    def describe(self) -> str:
        return f"incomplete record: expected {self.expected} bytes but only read {self.received}"

