"""warcstream - read WARC records from a stream, one record at a time."""

__version__ = "1.0.0"
