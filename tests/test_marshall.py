import pytest
from google.protobuf import descriptor_pb2, wrappers_pb2

from rpcwire.errors import MarshallerError
from rpcwire.frame import parse_grpc_frames_completely
from rpcwire.marshall import Marshaller, MessageSink, ProtobufMarshaller


class _TextMarshaller(Marshaller):
    def write(self, message):
        return message.encode("utf-8")

    def read(self, data):
        return data.decode("utf-8")


def test_protobuf_round_trip():
    marshaller = ProtobufMarshaller(wrappers_pb2.StringValue)
    data = marshaller.write(wrappers_pb2.StringValue(value="hello"))
    restored = marshaller.read(data)
    assert restored.value == "hello"


def test_protobuf_wire_bytes():
    marshaller = ProtobufMarshaller(wrappers_pb2.StringValue)
    assert marshaller.write(wrappers_pb2.StringValue(value="hi")) == b"\n\x02hi"


def test_protobuf_read_empty_gives_default():
    marshaller = ProtobufMarshaller(wrappers_pb2.StringValue)
    assert marshaller.read(b"") == wrappers_pb2.StringValue()


def test_protobuf_read_garbage_raises():
    marshaller = ProtobufMarshaller(wrappers_pb2.StringValue)
    with pytest.raises(MarshallerError):
        marshaller.read(b"\xff")


def test_protobuf_read_missing_required_fields():
    marshaller = ProtobufMarshaller(descriptor_pb2.UninterpretedOption.NamePart)
    with pytest.raises(MarshallerError, match="missing required fields"):
        marshaller.read(b"")


def test_protobuf_write_missing_required_fields():
    marshaller = ProtobufMarshaller(descriptor_pb2.UninterpretedOption.NamePart)
    with pytest.raises(MarshallerError):
        marshaller.write(descriptor_pb2.UninterpretedOption.NamePart())


def test_protobuf_required_fields_round_trip():
    cls = descriptor_pb2.UninterpretedOption.NamePart
    marshaller = ProtobufMarshaller(cls)
    original = cls(name_part="opt", is_extension=True)
    assert marshaller.read(marshaller.write(original)) == original


def test_marshaller_is_abstract():
    with pytest.raises(TypeError):
        Marshaller()


def test_sink_sends_framed_messages():
    sent = []
    sink = MessageSink(_TextMarshaller(), sent.append)
    sink.send_data("one")
    sink.send_data("two")
    assert [parse_grpc_frames_completely(chunk) for chunk in sent] == [[b"one"], [b"two"]]


def test_sink_frame_wire_bytes():
    sent = []
    sink = MessageSink(_TextMarshaller(), sent.append)
    sink.send_data("ab")
    assert sent == [b"\x00\x00\x00\x00\x02ab"]


def test_sink_with_protobuf_marshaller():
    sent = []
    marshaller = ProtobufMarshaller(wrappers_pb2.StringValue)
    sink = MessageSink(marshaller, sent.append)
    sink.send_data(wrappers_pb2.StringValue(value="world"))
    (payload,) = parse_grpc_frames_completely(b"".join(sent))
    assert marshaller.read(payload).value == "world"


def test_sink_does_not_send_on_marshal_error():
    sent = []
    marshaller = ProtobufMarshaller(descriptor_pb2.UninterpretedOption.NamePart)
    sink = MessageSink(marshaller, sent.append)
    with pytest.raises(MarshallerError):
        sink.send_data(descriptor_pb2.UninterpretedOption.NamePart())
    assert sent == []