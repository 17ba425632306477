"""An immutable WARC record as returned by the parser in warc.py.

WARC Format Specification References:
- WARC 1.1 Annotated (primary): https://iipc.github.io/warc-specifications/specifications/warc-format/warc-1.1-annotated/
- Named fields: https://iipc.github.io/warc-specifications/specifications/warc-format/warc-1.1-annotated/#named-fields
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


def add_headers(**kwargs):
    """Decorator helper for defining field name constants on a record class.

    Field names are stored lower-cased, the form the parser uses as keys.
    The list of constant names is kept in the _HEADERS attribute.

    Example:
        @add_headers(
            TYPE="WARC-Type",
            URL="WARC-Target-URI",
        )
        class WarcRecord:
            pass
    """

    def _add_headers(cls):
        for k, v in kwargs.items():
            setattr(cls, k, v.lower())
        cls._HEADERS = list(kwargs.keys())
        return cls

    return _add_headers


# WARC Named Fields - See WARC 1.1 Section 5 "Named fields"
@add_headers(
    TYPE="WARC-Type",  # Section 5.4 (mandatory)
    CONTENT_LENGTH="Content-Length",  # Section 5.5 (mandatory)
    URL="WARC-Target-URI",
    # Not part of the WARC standard, written by the ClueWeb crawls
    TREC_ID="WARC-TREC-ID",
)
@dataclass(frozen=True)
class WarcRecord:
    """A parsed WARC record.

    ``fields`` maps lower-cased field names to their trimmed values and
    ``content`` holds exactly Content-Length bytes of the record block.
    Records are only built by the parser once the whole block has been read,
    so a WarcRecord is never missing part of its content.
    """

    # pylint: disable-msg=E1101

    # WARC Record Types - See WARC 1.1 Section 6.3
    RESPONSE = "response"

    version: str
    fields: Mapping[str, str]
    content: bytes = b""

    def __post_init__(self):
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def __hash__(self):
        return hash((self.version, frozenset(self.fields.items()), self.content))

    def field(self, name: str) -> str | None:
        """Returns the value of a field, case insensitively, or None."""
        return self.fields.get(name.lower())

    def has(self, name: str) -> bool:
        return name.lower() in self.fields

    @property
    def type(self) -> str | None:
        return self.field(self.TYPE)

    @property
    def url(self) -> str | None:
        """WARC-Target-URI; only meaningful when valid_response holds."""
        return self.field(self.URL)

    @property
    def trecid(self) -> str | None:
        """WARC-TREC-ID; only meaningful when valid_response holds."""
        return self.field(self.TREC_ID)

    @property
    def content_length(self) -> int:
        return len(self.content)

    @property
    def valid(self) -> bool:
        """True if the record carries both mandatory fields."""
        return self.has(self.TYPE) and self.has(self.CONTENT_LENGTH)

    @property
    def valid_response(self) -> bool:
        """True for a valid 'response' record with a target URI and TREC id."""
        return (
            self.valid
            and self.has(self.URL)
            and self.has(self.TREC_ID)
            and self.type == self.RESPONSE
        )

    def text(self, errors: str = "replace") -> str:
        return self.content.decode("utf-8", errors=errors)
