"""Tests for opening archives and reading them record by record."""

import gzip
from io import BytesIO

import pytest

from warcstream.reader import (
    InvalidVersion,
    MissingMandatoryFields,
    RecordStream,
    WarcParser,
    WarcRecord,
    open_archive,
)
from warcstream.reader.stream import GzipFileStream, is_gzip_file, peekable

from test_warc import RESPONSE, RESPONSE_BLOCK, WARCINFO


@pytest.fixture
def sample_warc_file(tmp_path):
    warc_file = tmp_path / "test.warc"
    warc_file.write_bytes(WARCINFO + RESPONSE)
    return warc_file


@pytest.fixture
def compressed_warc_file(tmp_path):
    """Record-at-a-time compression: one gzip member per record."""
    warc_file = tmp_path / "test.warc.gz"
    warc_file.write_bytes(gzip.compress(WARCINFO) + gzip.compress(RESPONSE))
    return warc_file


def test_read_records_from_file(sample_warc_file):
    with open_archive(str(sample_warc_file)) as fh:
        assert not isinstance(fh, GzipFileStream)
        results = list(fh.read_records())

    assert [offset for offset, _ in results] == [0, len(WARCINFO)]
    assert [result.type for _, result in results] == ["warcinfo", "response"]


def test_iterate_compressed(compressed_warc_file):
    with open_archive(str(compressed_warc_file)) as fh:
        assert isinstance(fh, GzipFileStream)
        records = list(fh)

    assert len(records) == 2
    assert records[1].content == RESPONSE_BLOCK


def test_detect_gzip_without_suffix(tmp_path):
    warc_file = tmp_path / "noext"
    warc_file.write_bytes(gzip.compress(RESPONSE))
    with open_archive(str(warc_file)) as fh:
        assert isinstance(fh, GzipFileStream)
        assert [r.trecid for r in fh] == ["clueweb12-0000tw-00-00055"]


def test_is_gzip_file_does_not_consume():
    fh = peekable(BytesIO(gzip.compress(b"x")))
    assert is_gzip_file(fh)
    assert fh.read(2) == b"\x1f\x8b"
    assert not is_gzip_file(peekable(BytesIO(b"WARC/1.0\r\n")))


def test_wrap_file_handle():
    fh = open_archive(file_handle=BytesIO(RESPONSE), gzip=None)
    record = fh.read_record()
    assert isinstance(record, WarcRecord)
    assert fh.at_eof()
    assert fh.position == len(RESPONSE)


def test_unknown_gzip_mode():
    with pytest.raises(ValueError):
        open_archive(file_handle=BytesIO(RESPONSE), gzip="record")


def test_filename_or_handle_required():
    with pytest.raises(ValueError):
        open_archive()


def test_read_records_reports_failures():
    data = b"WARC/1.0\r\nWARC-Date: 2012-02-10T22:27:49Z\r\n\r\n" + RESPONSE + b"junk at the end\n"
    fh = RecordStream(BytesIO(data), WarcParser())
    results = [result for _offset, result in fh.read_records()]

    assert isinstance(results[0], MissingMandatoryFields)
    assert isinstance(results[1], WarcRecord)
    assert results[2] == InvalidVersion(b"")
    assert fh.at_eof()


def test_iteration_skips_failures():
    data = b"WARC/1.0\r\nbroken\r\n\r\n" + WARCINFO
    fh = RecordStream(BytesIO(data), WarcParser())
    assert [record.type for record in fh] == ["warcinfo"]


def test_read_records_limit():
    fh = RecordStream(BytesIO(WARCINFO + RESPONSE), WarcParser())
    assert len(list(fh.read_records(limit=1))) == 1
    assert fh.read_subsequent_record().type == "response"
