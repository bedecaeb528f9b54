"""Length-prefixed gRPC message framing."""

from __future__ import annotations

import struct

from .errors import OtherError

GRPC_HEADER_LEN = 5
_MAX_FRAME_LEN = 0xFFFFFFFF
_HEADER = struct.Struct(">BI")


def parse_grpc_frame_len(data: bytes) -> int | None:
    """Return the payload length of the frame at the start of ``data``.

    Returns None when ``data`` does not yet hold a whole frame.
    """
    if len(data) < GRPC_HEADER_LEN:
        return None
    flag, length = _HEADER.unpack_from(data)
    if flag == 1:
        raise OtherError("compression is not implemented")
    if flag != 0:
        raise OtherError("unknown compression flag")
    if length + GRPC_HEADER_LEN > len(data):
        return None
    return length


def parse_grpc_frame(data: bytes) -> tuple[bytes, int] | None:
    """Return the first frame's payload and the number of bytes it occupies."""
    length = parse_grpc_frame_len(data)
    if length is None:
        return None
    end = GRPC_HEADER_LEN + length
    return bytes(memoryview(data)[GRPC_HEADER_LEN:end]), end


def split_grpc_frames(data: bytes) -> tuple[list[bytes], bytes]:
    """Split off every complete frame; return the payloads and what is left."""
    view = memoryview(data)
    frames: list[bytes] = []
    while (parsed := parse_grpc_frame(view)) is not None:
        payload, consumed = parsed
        frames.append(payload)
        view = view[consumed:]
    return frames, bytes(view)


def parse_grpc_frames_completely(data: bytes) -> list[bytes]:
    """Parse ``data`` as a sequence of whole frames."""
    view = memoryview(data)
    frames: list[bytes] = []
    while view:
        parsed = parse_grpc_frame(view)
        if parsed is None:
            raise OtherError("not complete frames")
        payload, consumed = parsed
        frames.append(payload)
        view = view[consumed:]
    return frames


def parse_grpc_frame_completely(data: bytes) -> bytes:
    """Parse ``data`` as exactly one whole frame."""
    frames = parse_grpc_frames_completely(data)
    if len(frames) != 1:
        raise OtherError("expecting exactly one frame")
    return frames[0]


def encode_grpc_frame(payload: bytes) -> bytes:
    """Prefix ``payload`` with an uncompressed frame header."""
    if len(payload) > _MAX_FRAME_LEN:
        raise ValueError("frame payload too large")
    return _HEADER.pack(0, len(payload)) + bytes(payload)