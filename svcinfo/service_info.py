"""Service endpoint descriptors.

A :class:`ServiceInfo` names one service instance in the cluster by its node
type, the host it runs on and the ports it listens to, keyed by port purpose.
Descriptors are immutable; use :class:`ServiceInfoBuilder` to assemble one
incrementally.
"""

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from .proto.messages import (
    NodeType,
    ServiceInfoMessage,
    ServiceListMessage,
    ServicePort,
    ServicePortType,
)

logger = logging.getLogger(__name__)


class InvalidServiceInfoError(ValueError):
    """Raised when a descriptor is constructed without a required field."""


class PortNotFoundError(KeyError):
    """Raised when a descriptor has no port registered for a purpose."""


class ServiceInfo:
    """Immutable descriptor of a service instance.

    Ports are stored by purpose, so at most one port per ServicePortType is
    kept. When ``ports`` repeats a purpose, the last entry wins.

    Example:
        info = ServiceInfo(
            NodeType.DATANODE,
            "node-1",
            [ServicePort(ServicePortType.RPC, 9862), ServicePort(ServicePortType.HTTP, 9874)],
        )
        info.get_port(ServicePortType.RPC)  # 9862
    """

    __slots__ = ("_node_type", "_hostname", "_ports_map")

    _node_type: NodeType
    _hostname: str
    _ports_map: Mapping[ServicePortType, ServicePort]

    def __init__(
        self, node_type: NodeType, hostname: str, ports: Iterable[ServicePort] = ()
    ) -> None:
        """Create a descriptor.

        Args:
            node_type: Type of node/service.
            hostname: Hostname of the node the service runs on.
            ports: Ports the service listens to.

        Raises:
            InvalidServiceInfoError: node_type or hostname is None.
        """
        if node_type is None:
            raise InvalidServiceInfoError("node_type is required")
        if hostname is None:
            raise InvalidServiceInfoError("hostname is required")

        ports_map: dict[ServicePortType, ServicePort] = {}
        for port in ports:
            previous = ports_map.get(port.type)
            if previous is not None:
                logger.debug(
                    "%s port %d on %s replaced by %d",
                    port.type.name,
                    previous.value,
                    hostname,
                    port.value,
                )
            ports_map[port.type] = port

        object.__setattr__(self, "_node_type", node_type)
        object.__setattr__(self, "_hostname", hostname)
        object.__setattr__(self, "_ports_map", MappingProxyType(ports_map))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def node_type(self) -> NodeType:
        return self._node_type

    @property
    def hostname(self) -> str:
        return self._hostname

    @property
    def ports(self) -> list[ServicePort]:
        """A new list of the ports, in no particular order."""
        return list(self._ports_map.values())

    @property
    def ports_map(self) -> Mapping[ServicePortType, ServicePort]:
        """Read-only view of the ports keyed by purpose."""
        return self._ports_map

    def get_port(self, port_type: ServicePortType) -> int:
        """Return the port number for ``port_type``.

        Raises:
            PortNotFoundError: The service has no port of that type.
        """
        port = self._ports_map.get(port_type)
        if port is None:
            raise PortNotFoundError(
                f"no {getattr(port_type, 'name', port_type)} port for "
                f"{self._node_type.name} on {self._hostname}"
            )
        return port.value

    def find_port(self, port_type: ServicePortType) -> int | None:
        """Return the port number for ``port_type``, or None if not exposed."""
        port = self._ports_map.get(port_type)
        return port.value if port is not None else None

    def to_wire(self) -> ServiceInfoMessage:
        """Convert to the wire message."""
        return ServiceInfoMessage(
            node_type=self._node_type,
            hostname=self._hostname,
            service_ports=self.ports,
        )

    @classmethod
    def from_wire(cls, message: ServiceInfoMessage) -> "ServiceInfo":
        """Build a descriptor from a wire message."""
        return cls(message.node_type, message.hostname, message.service_ports)

    def pack(self) -> bytes:
        """Pack to the binary wire form."""
        return self.to_wire().pack()

    @classmethod
    def unpack(cls, data: bytes | memoryview) -> "ServiceInfo":
        """Unpack from the binary wire form.

        Raises:
            SerializationError: data is not exactly one packed ServiceInfoMessage.
        """
        info = cls.from_wire(ServiceInfoMessage.from_bytes(data))
        logger.debug("Decoded %r from %d bytes", info, len(data))
        return info

    @staticmethod
    def new_builder() -> "ServiceInfoBuilder":
        return ServiceInfoBuilder()

    def _key(self) -> tuple[NodeType, str, frozenset[ServicePort]]:
        return (self._node_type, self._hostname, frozenset(self._ports_map.values()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServiceInfo):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        ports = ", ".join(
            f"{port.type.name}={port.value}"
            for port in sorted(self._ports_map.values(), key=lambda p: p.type.value)
        )
        return f"ServiceInfo({self._node_type.name}, {self._hostname!r}, [{ports}])"


class ServiceInfoBuilder:
    """Accumulates descriptor fields; validation happens in build()."""

    def __init__(self) -> None:
        self._node_type: NodeType | None = None
        self._hostname: str | None = None
        self._ports: list[ServicePort] = []

    def set_node_type(self, node_type: NodeType) -> "ServiceInfoBuilder":
        self._node_type = node_type
        return self

    def set_hostname(self, hostname: str) -> "ServiceInfoBuilder":
        self._hostname = hostname
        return self

    def add_service_port(self, port: ServicePort) -> "ServiceInfoBuilder":
        self._ports.append(port)
        return self

    def build(self) -> ServiceInfo:
        """Build a descriptor from the current state.

        May be called repeatedly; each call returns an independent descriptor.
        """
        return ServiceInfo(self._node_type, self._hostname, self._ports)  # type: ignore[arg-type]


def pack_service_list(infos: Iterable[ServiceInfo]) -> bytes:
    """Pack descriptors into a ServiceListMessage."""
    return ServiceListMessage([info.to_wire() for info in infos]).pack()


def unpack_service_list(data: bytes | memoryview) -> list[ServiceInfo]:
    """Unpack descriptors from a ServiceListMessage."""
    message = ServiceListMessage.from_bytes(data)
    return [ServiceInfo.from_wire(item) for item in message.service_info]
