"""Conversion between messages and bytes, and a framing message sink."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, TypeVar

from google.protobuf import message as pb_message

from .errors import MarshallerError
from .frame import encode_grpc_frame

M = TypeVar("M")


class Marshaller(ABC, Generic[M]):
    """Serializes messages of one type to bytes and back."""

    @abstractmethod
    def write(self, message: M) -> bytes:
        """Serialize ``message``."""

    @abstractmethod
    def read(self, data: bytes) -> M:
        """Parse a message from ``data``."""


class ProtobufMarshaller(Marshaller[pb_message.Message]):
    """Marshaller for one protobuf message class."""

    def __init__(self, message_type: type[pb_message.Message]) -> None:
        self.message_type = message_type

    def write(self, message: pb_message.Message) -> bytes:
        """Serialize ``message`` to its wire form."""
        try:
            return message.SerializeToString()
        except pb_message.Error as exc:
            raise MarshallerError(exc) from exc

    def read(self, data: bytes) -> pb_message.Message:
        """Parse ``data`` and check that all required fields are set."""
        result = self.message_type()
        try:
            result.MergeFromString(bytes(data))
        except pb_message.Error as exc:
            raise MarshallerError(exc) from exc
        if not result.IsInitialized():
            missing = ", ".join(result.FindInitializationErrors())
            raise MarshallerError(f"missing required fields: {missing}")
        return result


class MessageSink(Generic[M]):
    """Marshals messages and sends each one as a gRPC frame."""

    def __init__(self, marshaller: Marshaller[M], send: Callable[[bytes], None]) -> None:
        self.marshaller = marshaller
        self._send = send

    def send_data(self, message: M) -> None:
        """Serialize ``message``, frame it and pass it to the transport."""
        payload = self.marshaller.write(message)
        self._send(encode_grpc_frame(payload))