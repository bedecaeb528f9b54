"""Turn HTTP body parts into gRPC message payloads."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .errors import GrpcMessageError, OtherError
from .frame import split_grpc_frames
from .grpc_headers import HEADER_GRPC_MESSAGE, HEADER_GRPC_STATUS
from .headers import Header, Headers
from .metadata import Metadata
from .status import GrpcStatus


@dataclass(frozen=True)
class Data:
    """A chunk of HTTP body data."""

    data: bytes
    end_stream: bool = False


@dataclass(frozen=True)
class Trailers:
    """The trailing headers of an HTTP stream."""

    headers: Headers

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))


@dataclass(frozen=True)
class TrailingMetadata:
    """Custom metadata received in the trailers of a successful response."""

    metadata: Metadata


class _FrameBuffer:
    """Accumulates body bytes and hands out every complete frame."""

    def __init__(self) -> None:
        self._pending = b""

    def feed(self, data: bytes) -> list[bytes]:
        frames, self._pending = split_grpc_frames(self._pending + bytes(data))
        return frames

    def check_complete(self) -> None:
        if self._pending:
            raise OtherError("partial frame")


def _as_headers(headers: Iterable[Header]) -> Headers:
    return headers if isinstance(headers, Headers) else Headers(headers)


def init_headers_to_metadata(headers: Iterable[Header]) -> Metadata:
    """Check the initial response headers and return their metadata.

    Raises OtherError unless the HTTP status is 200, and GrpcMessageError
    when a non-OK ``grpc-status`` is present.
    """
    headers = _as_headers(headers)
    if headers.get(":status") != "200":
        raise OtherError("not 200")
    grpc_status = headers.get_int(HEADER_GRPC_STATUS)
    if grpc_status is not None and grpc_status != GrpcStatus.OK:
        message = headers.get(HEADER_GRPC_MESSAGE)
        raise GrpcMessageError(
            grpc_status, "unknown error" if message is None else message
        )
    return Metadata.from_headers(headers)


def _check_part(part: object) -> None:
    if not isinstance(part, (Data, Trailers)):
        raise TypeError(f"expected Data or Trailers, got {type(part).__name__}")


def decode_request_frames(parts: Iterable[Data | Trailers]) -> Iterator[bytes]:
    """Yield message payloads from the body parts of a request.

    Trailers are tolerated and ignored; a frame cut off at the end of the
    stream raises OtherError.
    """
    buffer = _FrameBuffer()
    for part in parts:
        _check_part(part)
        if isinstance(part, Data):
            yield from buffer.feed(part.data)
    buffer.check_complete()


def _trailers_to_metadata(headers: Headers) -> TrailingMetadata:
    grpc_status = headers.get_int(HEADER_GRPC_STATUS)
    if grpc_status == GrpcStatus.OK:
        return TrailingMetadata(Metadata.from_headers(headers))
    message = headers.get(HEADER_GRPC_MESSAGE)
    if message is None:
        raise OtherError("trailers carry neither an OK status nor a message")
    raise GrpcMessageError(
        int(GrpcStatus.UNKNOWN) if grpc_status is None else grpc_status, message
    )


def decode_response_frames(
    parts: Iterable[Data | Trailers],
) -> Iterator[bytes | TrailingMetadata]:
    """Yield message payloads, then trailing metadata, from a response body.

    A non-OK status in the trailers raises GrpcMessageError; a frame cut off
    by the trailers or the end of the stream raises OtherError.
    """
    buffer = _FrameBuffer()
    for part in parts:
        _check_part(part)
        if isinstance(part, Data):
            yield from buffer.feed(part.data)
        else:
            buffer.check_complete()
            yield _trailers_to_metadata(part.headers)
    buffer.check_complete()