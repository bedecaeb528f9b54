"""gRPC status codes."""

from __future__ import annotations

from enum import IntEnum


class GrpcStatus(IntEnum):
    """Numeric status codes carried in the ``grpc-status`` header."""

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    @property
    def code(self) -> int:
        """The protocol numeric code."""
        return int(self)

    @classmethod
    def from_code(cls, code: int) -> GrpcStatus | None:
        """Return the status with the given code, or None if there is none."""
        try:
            return cls(code)
        except ValueError:
            return None

    @classmethod
    def from_code_or_unknown(cls, code: int) -> GrpcStatus:
        """Return the status with the given code, or UNKNOWN."""
        status = cls.from_code(code)
        return cls.UNKNOWN if status is None else status