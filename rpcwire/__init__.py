"""gRPC wire-format building blocks: framing, status, metadata, marshalling and stub generation."""

__version__ = "0.1.0"