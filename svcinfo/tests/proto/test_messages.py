"""Tests for wire message serialization"""

from pytest import raises

from svcinfo.proto.messages import (
    NodeType,
    ServiceInfoMessage,
    ServiceListMessage,
    ServicePort,
    ServicePortType,
)
from svcinfo.proto.serialization import SerializationError

RPC_PORT = bytes.fromhex("0186260000")
HTTP_PORT = bytes.fromhex("0292260000")
DATANODE = bytes.fromhex("03") + b"node-1\x00" + b"\x02" + RPC_PORT + HTTP_PORT


def describe_enums():
    def test_pack(expect):
        expect(NodeType.KSM.pack()) == b"\x01"
        expect(NodeType.DATANODE.pack()) == b"\x03"
        expect(ServicePortType.HTTPS.pack()) == b"\x03"

    def test_unpack(expect):
        expect(NodeType.unpack(b"\x02")) == (NodeType.SCM, 1)
        expect(ServicePortType.unpack(b"\xff\x01", 1)) == (ServicePortType.RPC, 1)

    def rejects_unknown_value(expect):
        with raises(SerializationError) as exinfo:
            NodeType.unpack(b"\x09")
        expect(str(exinfo.value)).includes("unknown NodeType value 9")

    def rejects_empty_data(expect):
        with raises(SerializationError):
            ServicePortType.unpack(b"")


def describe_service_port():
    def test_pack(expect):
        expect(ServicePort(ServicePortType.RPC, 9862).pack()) == RPC_PORT

    def test_unpack(expect):
        port, consumed = ServicePort.unpack(b"\xaa" + HTTP_PORT, 1)
        expect(port) == ServicePort(ServicePortType.HTTP, 9874)
        expect(consumed) == 5

    def test_full_uint32_range(expect):
        port = ServicePort(ServicePortType.HTTPS, 0xFFFFFFFF)
        expect(port.pack()) == b"\x03\xff\xff\xff\xff"
        expect(ServicePort.from_bytes(port.pack())) == port

    def rejects_out_of_range_value(expect):
        with raises(SerializationError):
            ServicePort(ServicePortType.RPC, -1).pack()
        with raises(SerializationError):
            ServicePort(ServicePortType.RPC, 1 << 32).pack()

    def rejects_truncated_value(expect):
        with raises(SerializationError):
            ServicePort.unpack(RPC_PORT[:3])

    def is_hashable(expect):
        ports = {ServicePort(ServicePortType.RPC, 1), ServicePort(ServicePortType.RPC, 1)}
        expect(len(ports)) == 1


def describe_service_info_message():
    def test_pack(expect):
        message = ServiceInfoMessage(
            node_type=NodeType.DATANODE,
            hostname="node-1",
            service_ports=[
                ServicePort(ServicePortType.RPC, 9862),
                ServicePort(ServicePortType.HTTP, 9874),
            ],
        )
        expect(message.pack()) == DATANODE

    def test_unpack(expect):
        message, consumed = ServiceInfoMessage.unpack(DATANODE)
        expect(consumed) == len(DATANODE)
        expect(message.node_type) == NodeType.DATANODE
        expect(message.hostname) == "node-1"
        expect(message.service_ports) == [
            ServicePort(ServicePortType.RPC, 9862),
            ServicePort(ServicePortType.HTTP, 9874),
        ]

    def test_no_ports(expect):
        message = ServiceInfoMessage(NodeType.SCM, "scm")
        expect(message.pack()) == b"\x02scm\x00\x00"
        expect(ServiceInfoMessage.from_bytes(message.pack())) == message

    def test_empty_hostname(expect):
        message = ServiceInfoMessage(NodeType.KSM, "", [])
        expect(message.pack()) == b"\x01\x00\x00"
        expect(ServiceInfoMessage.from_bytes(message.pack())) == message

    def test_unpack_from_memoryview(expect):
        message, _ = ServiceInfoMessage.unpack(memoryview(DATANODE))
        expect(message.hostname) == "node-1"

    def test_utf8_hostname(expect):
        message = ServiceInfoMessage(NodeType.KSM, "nöde", [])
        expect(message.pack()) == b"\x01n\xc3\xb6de\x00\x00"
        expect(ServiceInfoMessage.from_bytes(message.pack())) == message

    def rejects_unencodable_hostname(expect):
        with raises(SerializationError) as exinfo:
            ServiceInfoMessage(NodeType.KSM, "n\udcffde", []).pack()
        expect(str(exinfo.value)).includes("hostname is not encodable as UTF-8")

    def rejects_invalid_utf8_hostname(expect):
        with raises(SerializationError) as exinfo:
            ServiceInfoMessage.unpack(b"\x01n\xffde\x00\x00")
        expect(str(exinfo.value)).includes("hostname is not valid UTF-8")

    def rejects_null_in_hostname(expect):
        with raises(SerializationError):
            ServiceInfoMessage(NodeType.KSM, "no\x00de", []).pack()

    def rejects_too_many_ports(expect):
        ports = [ServicePort(ServicePortType.RPC, n) for n in range(256)]
        with raises(SerializationError) as exinfo:
            ServiceInfoMessage(NodeType.KSM, "ksm", ports).pack()
        expect(str(exinfo.value)).includes("service_ports array exceeds 255 elements")

    def rejects_unterminated_hostname(expect):
        with raises(SerializationError) as exinfo:
            ServiceInfoMessage.unpack(b"\x03node-1")
        expect(str(exinfo.value)).includes("unterminated string hostname")

    def rejects_missing_ports(expect):
        with raises(SerializationError):
            ServiceInfoMessage.unpack(DATANODE[:-6])

    def rejects_trailing_bytes(expect):
        with raises(SerializationError):
            ServiceInfoMessage.from_bytes(DATANODE + b"\x01")


def describe_service_list_message():
    def test_pack(expect):
        message = ServiceListMessage(
            [
                ServiceInfoMessage(NodeType.SCM, "scm", []),
                ServiceInfoMessage.from_bytes(DATANODE),
            ]
        )
        expect(message.pack()) == b"\x02" + b"\x02scm\x00\x00" + DATANODE

    def test_unpack(expect):
        packed = b"\x02" + DATANODE + b"\x02scm\x00\x00"
        message, consumed = ServiceListMessage.unpack(packed)
        expect(consumed) == len(packed)
        expect([info.hostname for info in message.service_info]) == ["node-1", "scm"]

    def test_empty(expect):
        expect(ServiceListMessage().pack()) == b"\x00"
        expect(ServiceListMessage.from_bytes(b"\x00")) == ServiceListMessage([])

    def rejects_short_list(expect):
        with raises(SerializationError):
            ServiceListMessage.unpack(b"\x02" + DATANODE)
