import base64

import pytest

from rpcwire.errors import MetadataDecodeError
from rpcwire.headers import Header, Headers
from rpcwire.metadata import Metadata, MetadataEntry, MetadataKey


def test_key_must_not_be_empty():
    with pytest.raises(ValueError):
        MetadataKey("")


def test_key_from_bytes():
    assert MetadataKey(b"trace-id").name == "trace-id"


def test_key_is_bin():
    assert MetadataKey("payload-bin").is_bin()
    assert not MetadataKey("payload").is_bin()
    assert not MetadataKey("bin-payload").is_bin()


def test_text_entry_header_is_verbatim():
    entry = MetadataEntry(MetadataKey("user-agent"), b"tester")
    assert entry.to_header() == Header("user-agent", b"tester")


def test_binary_entry_header_is_base64():
    value = b"\x00\x01\xff"
    header = MetadataEntry(MetadataKey("blob-bin"), value).to_header()
    assert header.name == "blob-bin"
    assert base64.b64decode(header.value) == value
    assert header.value != value


@pytest.mark.parametrize("name", [":status", ":path", "grpc-status", "grpc-message"])
def test_from_header_skips_reserved(name):
    assert MetadataEntry.from_header(Header(name, "0")) is None


def test_from_header_rejects_bad_base64():
    with pytest.raises(MetadataDecodeError):
        MetadataEntry.from_header(Header("blob-bin", "!!not base64!!"))


def test_round_trip_through_headers():
    metadata = Metadata()
    metadata.add("text-key", "hello")
    metadata.add(MetadataKey("blob-bin"), bytes(range(10)))
    decoded = Metadata.from_headers(metadata.to_headers())
    assert decoded == metadata


def test_from_headers_filters_reserved():
    headers = Headers(
        [
            Header(":status", "200"),
            Header("content-type", "application/grpc"),
            Header("grpc-status", "0"),
            Header("x-request", "abc"),
        ]
    )
    metadata = Metadata.from_headers(headers)
    assert [e.key.name for e in metadata] == ["content-type", "x-request"]


def test_get_returns_first_value():
    metadata = Metadata()
    metadata.add("k", b"first")
    metadata.add("k", b"second")
    assert metadata.get("k") == b"first"
    assert metadata.get("missing") is None


def test_extend_appends_in_order():
    left = Metadata()
    left.add("a", b"1")
    right = Metadata()
    right.add("b", b"2")
    left.extend(right)
    assert [e.key.name for e in left] == ["a", "b"]
    assert len(left) == 2