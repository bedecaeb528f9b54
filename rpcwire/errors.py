"""Exceptions raised by the RPC layer."""

from __future__ import annotations


class GrpcError(Exception):
    """Base class of every error the package raises."""


class GrpcMessageError(GrpcError):
    """The peer reported a non-OK gRPC status."""

    def __init__(self, grpc_status: int, grpc_message: str) -> None:
        super().__init__(grpc_status, grpc_message)
        self.grpc_status = grpc_status
        self.grpc_message = grpc_message

    def __str__(self) -> str:
        return f"grpc message error: {self.grpc_message}"


class MetadataDecodeError(GrpcError):
    """A binary metadata value could not be decoded."""

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return "metadata decode error"


class MarshallerError(GrpcError):
    """A message could not be serialized or parsed."""

    def __init__(self, cause: object) -> None:
        super().__init__(cause)
        self.cause = cause

    def __str__(self) -> str:
        return f"marshaller error: {self.cause}"


class CanceledError(GrpcError):
    """The operation was canceled."""

    def __str__(self) -> str:
        return "canceled"


class PanicError(GrpcError):
    """A handler failed unexpectedly."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"panic: {self.message}"


class HttpError(GrpcError):
    """The underlying HTTP transport failed."""

    def __init__(self, detail: object) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return f"http error: {self.detail}"


class OtherError(GrpcError):
    """Any other protocol error, described by a short message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"other error: {self.message}"