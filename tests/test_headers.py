import pytest

from rpcwire.headers import Header, Headers


def test_header_coerces_text_value_and_byte_name():
    header = Header(b"content-type", "application/grpc")
    assert header.name == "content-type"
    assert header.value == b"application/grpc"


def test_header_accepts_bytearray_value():
    assert Header("x", bytearray(b"\x00\x01")).value == b"\x00\x01"


def test_get_returns_first_matching_value():
    headers = Headers([Header("a", "1"), Header("b", "2"), Header("a", "3")])
    assert headers.get("a") == "1"
    assert headers.get("b") == "2"
    assert headers.get("c") is None


def test_get_returns_none_for_invalid_utf8():
    headers = Headers([Header("a", b"\xff\xfe")])
    assert headers.get("a") is None


@pytest.mark.parametrize("raw, expected", [("0", 0), ("13", 13), ("-4", -4), ("+7", 7)])
def test_get_int_parses(raw, expected):
    assert Headers([Header("grpc-status", raw)]).get_int("grpc-status") == expected


@pytest.mark.parametrize("raw", ["", "abc", " 1", "1.5", "2147483648"])
def test_get_int_rejects(raw):
    assert Headers([Header("grpc-status", raw)]).get_int("grpc-status") is None


def test_get_int_missing():
    assert Headers().get_int("grpc-status") is None


def test_add_and_extend_keep_order():
    headers = Headers([Header("a", "1")])
    headers.add(Header("b", "2"))
    headers.extend(Headers([Header("c", "3"), Header("d", "4")]))
    assert [h.name for h in headers] == ["a", "b", "c", "d"]
    assert len(headers) == 4


def test_equality():
    assert Headers([Header("a", "1")]) == Headers([Header("a", b"1")])
    assert not (Headers([Header("a", "1")]) == Headers([Header("a", "2")]))