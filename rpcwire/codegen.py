"""Generate client and server stub modules from protobuf service descriptors."""

from __future__ import annotations

import argparse
import re
import sys
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

_GENERATED_BANNER = "# This file is generated. Do not edit."


class GrpcStreaming(Enum):
    """Which sides of a call carry a stream of messages."""

    UNARY = "unary"
    CLIENT_STREAMING = "client_streaming"
    SERVER_STREAMING = "server_streaming"
    BIDI = "bidi"

    @classmethod
    def from_flags(cls, client_streaming: bool, server_streaming: bool) -> GrpcStreaming:
        """The kind of call with the given streaming sides."""
        if client_streaming:
            return cls.BIDI if server_streaming else cls.CLIENT_STREAMING
        return cls.SERVER_STREAMING if server_streaming else cls.UNARY


@dataclass(frozen=True)
class MethodDescriptor:
    """One RPC method of a service, with fully qualified message type names."""

    name: str
    input_type: str
    output_type: str
    client_streaming: bool = False
    server_streaming: bool = False

    @property
    def streaming(self) -> GrpcStreaming:
        """The kind of call this method makes."""
        return GrpcStreaming.from_flags(self.client_streaming, self.server_streaming)


@dataclass(frozen=True)
class ServiceDescriptor:
    """A service and its methods."""

    name: str
    methods: Sequence[MethodDescriptor] = ()


@dataclass(frozen=True)
class FileDescriptor:
    """A proto file: its package, the messages it defines and its services.

    Nested messages are listed with dotted names, such as ``Outer.Inner``.
    """

    name: str
    package: str = ""
    messages: Sequence[str] = ()
    services: Sequence[ServiceDescriptor] = ()


@dataclass(frozen=True)
class GeneratedFile:
    """A generated module: its file name and source text."""

    name: str
    content: str


def snake_name(name: str) -> str:
    """Convert a method name such as ``CreateIDForReq`` to ``create_id_for_req``."""
    out: list[str] = []
    chars = iter(name)
    last = "."
    for c in chars:
        if not c.isupper():
            last = c
            out.append(c)
            continue
        can_append_underscore = False
        if out and last != "_":
            out.append("_")
        last = c
        for nxt in chars:
            if not nxt.isupper():
                if can_append_underscore and nxt != "_":
                    out.append("_")
                out.append(last.lower())
                out.append(nxt)
                last = nxt
                break
            out.append(last.lower())
            last = nxt
            can_append_underscore = True
        else:
            out.append(last.lower())
    return "".join(out)


def _module_base(proto_path: str) -> str:
    stem = PurePosixPath(proto_path).name
    if stem.endswith(".proto"):
        stem = stem[: -len(".proto")]
    return re.sub(r"\W", "_", stem, flags=re.ASCII)


def _messages_module(proto_path: str) -> str:
    return f"{_module_base(proto_path)}_pb2"


def _find_message(type_name: str, file_descriptors: Iterable[FileDescriptor]) -> str:
    """Return a Python reference to the message with the given qualified name."""
    for file in file_descriptors:
        prefix = f".{file.package}." if file.package else "."
        if type_name.startswith(prefix):
            rest = type_name[len(prefix):]
            if rest in file.messages:
                return f"{_messages_module(file.name)}.{rest}"
    raise ValueError(f"message not found: {type_name}")


class _CodeWriter:
    def __init__(self) -> None:
        self._lines: list[str] = []
        self._indent = 0

    def line(self, text: str = "") -> None:
        self._lines.append("    " * self._indent + text if text else "")

    def comment(self, text: str) -> None:
        self.line(f"# {text}")

    @contextmanager
    def block(self, header: str, footer: str | None = None) -> Iterator[None]:
        self.line(header)
        self._indent += 1
        try:
            yield
        finally:
            self._indent -= 1
        if footer is not None:
            self.line(footer)

    def text(self) -> str:
        return "\n".join(self._lines) + "\n"


@dataclass
class _MethodGen:
    proto: MethodDescriptor
    service_path: str
    input_message: str
    output_message: str

    @property
    def snake_name(self) -> str:
        return snake_name(self.proto.name)

    def write_server_intf(self, w: _CodeWriter) -> None:
        w.line("@abc.abstractmethod")
        with w.block(f"def {self.snake_name}(self, ctx, req, resp):"):
            w.line(f'"""Handle {self.proto.name}: {self.proto.streaming.value} call."""')

    def write_descriptor(self, w: _CodeWriter, before: str, after: str) -> None:
        with w.block(f"{before}{{", f"}}{after}"):
            w.line(f'"name": {self.service_path + "/" + self.proto.name!r},')
            w.line(f'"streaming": GrpcStreaming.{self.proto.streaming.name},')
            w.line(f'"req_marshaller": ProtobufMarshaller({self.input_message}),')
            w.line(f'"resp_marshaller": ProtobufMarshaller({self.output_message}),')

    def write_client(self, w: _CodeWriter) -> None:
        single_request = not self.proto.client_streaming
        params = "self, options, req" if single_request else "self, options"
        with w.block(f"def {self.snake_name}({params}):"):
            self.write_descriptor(w, "descriptor = ", "")
            args = "options, req, descriptor" if single_request else "options, descriptor"
            w.line(f"return self.grpc_client.call_{self.proto.streaming.value}({args})")


@dataclass
class _ServiceGen:
    proto: ServiceDescriptor
    service_path: str
    methods: list[_MethodGen] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        proto: ServiceDescriptor,
        file: FileDescriptor,
        file_descriptors: Sequence[FileDescriptor],
    ) -> _ServiceGen:
        if file.package:
            service_path = f"/{file.package}.{proto.name}"
        else:
            service_path = f"/{proto.name}"
        methods = [
            _MethodGen(
                proto=m,
                service_path=service_path,
                input_message=_find_message(m.input_type, file_descriptors),
                output_message=_find_message(m.output_type, file_descriptors),
            )
            for m in proto.methods
        ]
        return cls(proto, service_path, methods)

    @property
    def server_intf_name(self) -> str:
        return self.proto.name

    @property
    def client_name(self) -> str:
        return f"{self.proto.name}Client"

    @property
    def server_name(self) -> str:
        return f"{self.proto.name}Server"

    def message_modules(self) -> set[str]:
        return {
            ref.split(".", 1)[0]
            for m in self.methods
            for ref in (m.input_message, m.output_message)
        }

    def _write_methods(self, w: _CodeWriter, write) -> None:
        for i, method in enumerate(self.methods):
            if i:
                w.line()
            write(method, w)

    def write_server_intf(self, w: _CodeWriter) -> None:
        with w.block(f"class {self.server_intf_name}(abc.ABC):"):
            w.line(f'"""Server interface of service {self.service_path}."""')
            if self.methods:
                w.line()
            self._write_methods(w, _MethodGen.write_server_intf)

    def write_client(self, w: _CodeWriter) -> None:
        with w.block(f"class {self.client_name}:"):
            w.line(f'"""Client of service {self.service_path}."""')
            w.line()
            with w.block("def __init__(self, grpc_client):"):
                w.line("self.grpc_client = grpc_client")
            if self.methods:
                w.line()
            self._write_methods(w, _MethodGen.write_client)

    def write_server(self, w: _CodeWriter) -> None:
        with w.block(f"class {self.server_name}:"):
            w.line(f'"""Builds the definition of service {self.service_path}."""')
            w.line()
            w.line("@staticmethod")
            with w.block("def new_service_def(handler):"):
                with w.block("return {", "}"):
                    w.line(f'"name": {self.service_path!r},')
                    with w.block('"methods": [', "],"):
                        for method in self.methods:
                            with w.block("(", "),"):
                                method.write_descriptor(w, "", ",")
                                w.line(f"handler.{method.snake_name},")

    def write(self, w: _CodeWriter) -> None:
        w.comment("server interface")
        w.line()
        self.write_server_intf(w)
        w.line()
        w.comment("client")
        w.line()
        self.write_client(w)
        w.line()
        w.comment("server")
        w.line()
        self.write_server(w)


def generate_file(
    file: FileDescriptor, file_descriptors: Sequence[FileDescriptor]
) -> GeneratedFile | None:
    """Generate the stub module of ``file``, or None if it has no services."""
    if not file.services:
        return None
    services = [_ServiceGen.create(s, file, file_descriptors) for s in file.services]
    modules = sorted(set().union(*(s.message_modules() for s in services)))

    w = _CodeWriter()
    w.line(_GENERATED_BANNER)
    w.line()
    w.line("import abc")
    w.line()
    for module in modules:
        w.line(f"import {module}")
    if modules:
        w.line()
    w.line("from rpcwire.codegen import GrpcStreaming")
    w.line("from rpcwire.marshall import ProtobufMarshaller")
    w.line()
    for service in services:
        w.line()
        service.write(w)

    return GeneratedFile(name=f"{_module_base(file.name)}_grpc.py", content=w.text())


def generate(
    file_descriptors: Sequence[FileDescriptor], files_to_generate: Iterable[str]
) -> list[GeneratedFile]:
    """Generate stub modules for the named files that define services."""
    files_map = {f.name: f for f in file_descriptors}
    results: list[GeneratedFile] = []
    for file_name in files_to_generate:
        if file_name not in files_map:
            raise KeyError(file_name)
        generated = generate_file(files_map[file_name], file_descriptors)
        if generated is not None:
            results.append(generated)
    return results


def _message_names(
    messages: Iterable[descriptor_pb2.DescriptorProto], prefix: str = ""
) -> Iterator[str]:
    for message in messages:
        full = f"{prefix}{message.name}"
        yield full
        yield from _message_names(message.nested_type, f"{full}.")


def _file_from_proto(proto: descriptor_pb2.FileDescriptorProto) -> FileDescriptor:
    services = [
        ServiceDescriptor(
            name=s.name,
            methods=[
                MethodDescriptor(
                    name=m.name,
                    input_type=m.input_type,
                    output_type=m.output_type,
                    client_streaming=m.client_streaming,
                    server_streaming=m.server_streaming,
                )
                for m in s.method
            ],
        )
        for s in proto.service
    ]
    return FileDescriptor(
        name=proto.name,
        package=proto.package,
        messages=list(_message_names(proto.message_type)),
        services=services,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run as a protoc plugin: read a request on stdin, write a response to stdout."""
    parser = argparse.ArgumentParser(
        prog="protoc-gen-rpcwire",
        description="protoc plugin generating RPC stub modules",
    )
    parser.parse_args(argv)

    request = plugin_pb2.CodeGeneratorRequest.FromString(sys.stdin.buffer.read())
    files = [_file_from_proto(p) for p in request.proto_file]
    response = plugin_pb2.CodeGeneratorResponse()
    try:
        for generated in generate(files, list(request.file_to_generate)):
            out = response.file.add()
            out.name = generated.name
            out.content = generated.content
    except (ValueError, KeyError) as exc:
        del response.file[:]
        response.error = str(exc)
    sys.stdout.buffer.write(response.SerializeToString())
    sys.stdout.buffer.flush()
    return 0