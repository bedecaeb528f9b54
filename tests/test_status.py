import pytest

from rpcwire.status import GrpcStatus


def test_from_code_round_trips_every_status():
    for status in GrpcStatus:
        assert GrpcStatus.from_code(status.code) is status


def test_from_code_finds_unauthenticated_out_of_order():
    assert GrpcStatus.from_code(16) is GrpcStatus.UNAUTHENTICATED
    assert GrpcStatus.from_code(0) is GrpcStatus.OK


@pytest.mark.parametrize("code", [17, 100, -1])
def test_from_code_unknown_code(code):
    assert GrpcStatus.from_code(code) is None
    assert GrpcStatus.from_code_or_unknown(code) is GrpcStatus.UNKNOWN


def test_from_code_or_unknown_keeps_known_codes():
    assert GrpcStatus.from_code_or_unknown(13) is GrpcStatus.INTERNAL


@pytest.mark.parametrize("code", range(17))
def test_every_code_up_to_sixteen_is_known(code):
    status = GrpcStatus.from_code(code)
    assert status.code == code
    assert GrpcStatus.from_code_or_unknown(code) is status