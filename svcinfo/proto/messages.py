"""Wire message definitions for service discovery."""

import struct as _struct
from dataclasses import dataclass
from typing import Self

from .serialization import (
    SerializationError,
    Struct,
    WireEnum,
    pack_array,
    pack_string,
    pack_uint,
    unpack_array,
    unpack_string,
    wire_field,
)


class NodeType(WireEnum):
    """Role of a service instance in the cluster."""

    KSM = 1
    SCM = 2
    DATANODE = 3


class ServicePortType(WireEnum):
    """Purpose of a port exposed by a service."""

    RPC = 1
    HTTP = 2
    HTTPS = 3


@dataclass(frozen=True)
class ServicePort(Struct):
    type: ServicePortType = wire_field(type="ServicePortType")
    value: int = wire_field(type="uint32")

    def pack(self) -> bytes:
        _buf = bytearray()
        _buf.extend(self.type.pack())
        _buf.extend(pack_uint(self.value, "uint32"))
        return bytes(_buf)

    @classmethod
    def unpack(cls, _data: bytes | memoryview, offset: int = 0) -> tuple[Self, int]:
        _o = offset
        type, _n = ServicePortType.unpack(_data, _o)
        _o += _n
        try:
            (value,) = _struct.unpack_from("=I", _data, _o)
        except _struct.error as e:
            raise SerializationError(f"truncated ServicePort value at offset {_o}") from e
        _o += 4
        return cls(type, value), _o - offset


@dataclass
class ServiceInfoMessage(Struct):
    node_type: NodeType = wire_field(type="NodeType")
    hostname: str = wire_field(type="string")
    service_ports: list[ServicePort] = wire_field(
        type="ServicePort", array_size=0, default_factory=list
    )

    def pack(self) -> bytes:
        _buf = bytearray()
        _buf.extend(self.node_type.pack())
        _buf.extend(pack_string(self.hostname, "hostname"))
        _buf.extend(pack_array(self.service_ports, "service_ports"))
        return bytes(_buf)

    @classmethod
    def unpack(cls, _data: bytes | memoryview, offset: int = 0) -> tuple[Self, int]:
        _o = offset
        node_type, _n = NodeType.unpack(_data, _o)
        _o += _n
        hostname, _n = unpack_string(_data, _o, "hostname")
        _o += _n
        service_ports, _n = unpack_array(_data, _o, ServicePort)
        _o += _n
        return cls(node_type, hostname, service_ports), _o - offset


@dataclass
class ServiceListMessage(Struct):
    service_info: list[ServiceInfoMessage] = wire_field(
        type="ServiceInfoMessage", array_size=0, default_factory=list
    )

    def pack(self) -> bytes:
        return pack_array(self.service_info, "service_info")

    @classmethod
    def unpack(cls, _data: bytes | memoryview, offset: int = 0) -> tuple[Self, int]:
        service_info, _n = unpack_array(_data, offset, ServiceInfoMessage)
        return cls(service_info), _n
