"""Response headers and trailers of the gRPC protocol."""

from __future__ import annotations

from .headers import Header, Headers
from .metadata import Metadata
from .status import GrpcStatus

HEADER_GRPC_STATUS = "grpc-status"
HEADER_GRPC_MESSAGE = "grpc-message"


def headers_500(status: GrpcStatus, message: str) -> Headers:
    """Headers of an HTTP 500 response carrying a gRPC status."""
    return Headers(
        [
            Header(":status", "500"),
            Header(HEADER_GRPC_STATUS, str(int(status))),
            Header(HEADER_GRPC_MESSAGE, message),
        ]
    )


def headers_200(metadata: Metadata) -> Headers:
    """Initial headers of a successful response, followed by ``metadata``."""
    headers = Headers(
        [
            Header(":status", "200"),
            Header("content-type", "application/grpc"),
            Header(HEADER_GRPC_STATUS, "0"),
        ]
    )
    headers.extend(metadata.to_headers())
    return headers


def grpc_error_message(message: str) -> Headers:
    """Headers of a response reporting an internal error; its body is empty."""
    internal = int(GrpcStatus.INTERNAL)
    return Headers(
        [
            Header(":status", "200"),
            Header(HEADER_GRPC_STATUS, str(internal)),
            Header(HEADER_GRPC_MESSAGE, message),
        ]
    )


def trailers(status: GrpcStatus, message: str | None, metadata: Metadata) -> Headers:
    """Trailers: status, optional message, then custom metadata."""
    headers = Headers([Header(HEADER_GRPC_STATUS, str(int(status)))])
    if message is not None:
        headers.add(Header(HEADER_GRPC_MESSAGE, message))
    headers.extend(metadata.to_headers())
    return headers