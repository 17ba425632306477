"""Tests for WarcRecord accessors."""

from io import BytesIO

import pytest

from warcstream.reader import WarcRecord, read_record


def response_fields(**extra):
    fields = {
        "warc-type": "response",
        "content-length": "5",
        "warc-target-uri": "http://example.com/",
        "warc-trec-id": "clueweb09-en0000-00-00000",
    }
    fields.update(extra)
    return fields


def test_header_constants_are_lowercase():
    assert WarcRecord.TYPE == "warc-type"
    assert WarcRecord.URL == "warc-target-uri"
    assert WarcRecord.TREC_ID == "warc-trec-id"
    assert "TREC_ID" in WarcRecord._HEADERS


def test_field_lookup():
    record = WarcRecord("1.0", response_fields(), b"hello")
    assert record.field("WARC-Target-URI") == "http://example.com/"
    assert record.field("warc-date") is None
    assert record.has("Content-Length")
    assert not record.has("warc-date")


def test_valid_response():
    record = WarcRecord("1.0", response_fields(), b"hello")
    assert record.valid
    assert record.valid_response
    assert record.url == "http://example.com/"
    assert record.trecid == "clueweb09-en0000-00-00000"
    assert record.content_length == 5


@pytest.mark.parametrize("missing", ["warc-target-uri", "warc-trec-id"])
def test_response_without_identifiers(missing):
    fields = response_fields()
    del fields[missing]
    record = WarcRecord("1.0", fields, b"hello")
    assert record.valid
    assert not record.valid_response


def test_not_a_response():
    record = WarcRecord("1.0", response_fields(**{"warc-type": "request"}), b"hello")
    assert record.valid
    assert not record.valid_response


def test_invalid_without_mandatory_fields():
    record = WarcRecord("0.18", {"warc-type": "warcinfo"})
    assert not record.valid
    assert not record.valid_response
    assert record.content == b""


def test_record_is_immutable():
    fields = response_fields()
    record = WarcRecord("1.0", fields, b"hello")
    fields["warc-type"] = "request"
    assert record.type == "response"
    with pytest.raises(TypeError):
        record.fields["warc-type"] = "request"
    with pytest.raises(AttributeError):
        record.content = b""


def test_text_replaces_bad_utf8():
    record = WarcRecord("1.0", response_fields(), b"caf\xc3\xa9 \xff")
    assert record.text() == "caf\u00e9 \ufffd"


def test_equal_records_hash_alike():
    first = read_record(BytesIO(b"WARC/1.0\nWARC-Type: a\nContent-Length: 0\n\n\n\n"))
    second = WarcRecord("1.0", {"content-length": "0", "warc-type": "a"}, b"")
    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second}) == 1
    assert hash(first) != hash(WarcRecord("1.0", {"content-length": "0", "warc-type": "b"}, b""))


def test_header_constants_trimmed_to_used_fields():
    assert WarcRecord._HEADERS == ["TYPE", "CONTENT_LENGTH", "URL", "TREC_ID"]
