# rpcwire

Pure-Python building blocks for the gRPC wire format, plus a protoc plugin
that generates service stub modules.

## What is in the package

- **Framing** (`rpcwire.frame`): the five-byte length-prefixed message
  framing used by gRPC. `encode_grpc_frame` adds the prefix;
  `parse_grpc_frame_len`, `parse_grpc_frame`, `split_grpc_frames`,
  `parse_grpc_frames_completely` and `parse_grpc_frame_completely` take it
  apart. A compression flag of 1 raises `OtherError("compression is not
  implemented")`; any other flag besides 0 raises `OtherError("unknown
  compression flag")`.
- **Status codes** (`rpcwire.status`): the `GrpcStatus` enumeration (an
  `IntEnum`), with `GrpcStatus.from_code` (returns `None` for an unknown
  code) and `GrpcStatus.from_code_or_unknown` (returns `UNKNOWN` instead).
- **Headers** (`rpcwire.headers`): `Header` (a text name and a byte value)
  and `Headers`, an ordered list in which names may repeat, with `get`,
  `get_int` (a 32-bit integer or `None`), `add` and `extend`.
- **Metadata** (`rpcwire.metadata`): `Metadata`, `MetadataKey` and
  `MetadataEntry`. Keys ending in `-bin` carry binary values, which are
  base64-encoded in headers; pseudo-headers (`:...`) and `grpc-*` headers
  are never read as metadata. A bad base64 value raises
  `MetadataDecodeError`; an empty key raises `ValueError`.
- **Response headers and trailers** (`rpcwire.grpc_headers`):
  `headers_200`, `headers_500`, `grpc_error_message` and `trailers` build
  the header lists a server sends.
- **Decoding bodies** (`rpcwire.decode`): `decode_request_frames` and
  `decode_response_frames` turn a sequence of `Data` and `Trailers` parts
  into message payloads. The response decoder yields a `TrailingMetadata`
  when the trailers carry `grpc-status: 0`, raises `GrpcMessageError` for
  any other status with a message, and raises `OtherError` for a frame cut
  off by the trailers or the end of the stream. `init_headers_to_metadata`
  checks initial response headers (HTTP status 200, OK `grpc-status`) and
  returns their metadata.
- **Streams** (`rpcwire.streams`): `stream_single` returns the only
  element of an iterable and raises `OtherError` if there are none or more
  than one; `RequestOptions` holds per-call `metadata` and a `cachable`
  flag.
- **Marshalling** (`rpcwire.marshall`): the abstract `Marshaller`,
  `ProtobufMarshaller(message_type)` for a protobuf message class (parsing
  also checks required fields), and `MessageSink(marshaller, send)`, which
  marshals each message, frames it and passes the bytes to `send`.
- **Errors** (`rpcwire.errors`): every error is a subclass of `GrpcError`:
  `GrpcMessageError` (with `grpc_status` and `grpc_message`),
  `MetadataDecodeError`, `MarshallerError`, `CanceledError`, `PanicError`,
  `HttpError` and `OtherError`.
- **Route guide** (`rpcwire.route_guide`): an in-process RouteGuide
  service. `RouteGuideService` offers `get_feature`, `list_features`,
  `record_route` and `route_chat`; `RouteGuideService.from_db(path)` loads
  features with `load_features` (default path
  `testdata/route_guide_db.json`, relative to the working directory).
  Helpers: `in_range`, `calc_distance`, `serialize_point`, and the data
  classes `Point`, `Rectangle`, `Feature`, `RouteNote` and `RouteSummary`.

## Framing

```python
from rpcwire.frame import encode_grpc_frame, parse_grpc_frames_completely

wire = encode_grpc_frame(b"hello") + encode_grpc_frame(b"world")
assert wire[:5] == b"\x00\x00\x00\x00\x05"
assert parse_grpc_frames_completely(wire) == [b"hello", b"world"]
```

`parse_grpc_frame` returns `None` for a buffer that does not yet hold a
whole frame; `parse_grpc_frames_completely` raises `OtherError` if
anything is left over.

## Metadata

```python
from rpcwire.metadata import Metadata, MetadataKey

md = Metadata()
md.add(MetadataKey("x-request-id"), b"abc123")
md.add(MetadataKey("trace-bin"), b"\x00\x01\x02")

headers = md.to_headers()          # "trace-bin" is base64-encoded here
assert Metadata.from_headers(headers).get("trace-bin") == b"\x00\x01\x02"
```

## Generating service stubs

`rpcwire.codegen` describes proto files with `FileDescriptor`,
`ServiceDescriptor` and `MethodDescriptor`, and generates stub modules.
`snake_name` converts method names:

```python
from rpcwire.codegen import snake_name

assert snake_name("CreateIDForReq") == "create_id_for_req"
assert snake_name("asyncRequest") == "async_request"
```

`generate(file_descriptors, files_to_generate)` returns one
`GeneratedFile` (`name`, `content`) per named file that declares at least
one service; files without services are skipped, an unknown file name
raises `KeyError` and an unknown message type raises `ValueError`. For
`foo.proto` the module is `foo_grpc.py`; it imports the messages from
`foo_pb2` and defines, per service, an abstract server interface, a
`<Service>Client` and a `<Service>Server` whose `new_service_def(handler)`
returns the service name and its method descriptors.

The package installs a protoc plugin command:

```
protoc-gen-rpcwire
```

It reads a serialized `CodeGeneratorRequest` from standard input and
writes a `CodeGeneratorResponse` to standard output, so it is started by
the protocol-buffer compiler, for example with
`protoc --rpcwire_out=OUT_DIR foo.proto`. Generation errors are reported
in the response's `error` field.

## What the package does not do

There is no HTTP/2 transport, no network client and no network server.
The generated client classes call `call_unary`, `call_server_streaming`,
`call_client_streaming` or `call_bidi` on the client object they are
given; the package does not provide such an object. Likewise the
route guide service runs in-process only.

## Running the tests

Install the `test` extra and run:

```
pytest
```