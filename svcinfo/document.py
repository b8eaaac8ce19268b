"""JSON documents for service descriptors.

Example:
    {"nodeType": "DATANODE", "hostname": "node-1", "ports": {"RPC": 9862, "HTTP": 9874}}
"""

import json
from dataclasses import dataclass, field
from typing import Any

from dataclasses_json import DataClassJsonMixin, config

from .proto.messages import NodeType, ServicePort, ServicePortType
from .service_info import InvalidServiceInfoError, ServiceInfo


def _decode_node_type(name: str) -> NodeType:
    try:
        return NodeType[name.upper()]
    except (KeyError, AttributeError):
        raise InvalidServiceInfoError(f"unknown node type {name!r}") from None


def _decode_ports(ports: dict[str, Any]) -> dict[ServicePortType, int]:
    if not isinstance(ports, dict):
        raise InvalidServiceInfoError(f"ports must be a JSON object, got {ports!r}")
    decoded = {}
    for name, value in ports.items():
        try:
            port_type = ServicePortType[name.upper()]
        except KeyError:
            raise InvalidServiceInfoError(f"unknown port type {name!r}") from None
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidServiceInfoError(f"{name} port must be an integer, got {value!r}")
        decoded[port_type] = value
    return decoded


@dataclass
class ServiceInfoDocument(DataClassJsonMixin):
    """JSON view of a ServiceInfo."""

    node_type: NodeType = field(
        metadata=config(
            field_name="nodeType",
            encoder=lambda node_type: node_type.name,
            decoder=_decode_node_type,
        )
    )
    hostname: str
    ports: dict[ServicePortType, int] = field(
        default_factory=dict,
        metadata=config(
            encoder=lambda ports: {port_type.name: value for port_type, value in ports.items()},
            decoder=_decode_ports,
        ),
    )

    @classmethod
    def from_service_info(cls, info: ServiceInfo) -> "ServiceInfoDocument":
        ports = {port.type: port.value for port in sorted(info.ports, key=lambda p: p.type.value)}
        return cls(node_type=info.node_type, hostname=info.hostname, ports=ports)

    def to_service_info(self) -> ServiceInfo:
        return ServiceInfo(
            self.node_type,
            self.hostname,
            [ServicePort(port_type, value) for port_type, value in self.ports.items()],
        )


@dataclass
class ServiceListDocument(DataClassJsonMixin):
    """JSON view of a list of ServiceInfo."""

    services: list[ServiceInfoDocument] = field(default_factory=list)

    @classmethod
    def from_service_infos(cls, infos: list[ServiceInfo]) -> "ServiceListDocument":
        return cls([ServiceInfoDocument.from_service_info(info) for info in infos])

    def to_service_infos(self) -> list[ServiceInfo]:
        return [doc.to_service_info() for doc in self.services]


def _load(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidServiceInfoError(f"invalid JSON: {e}") from e


def _check_service(kvs: Any) -> dict[str, Any]:
    """Reject document shapes the dataclass decoder would pass through unchecked."""
    if not isinstance(kvs, dict):
        raise InvalidServiceInfoError(f"service must be a JSON object, got {kvs!r}")
    hostname = kvs.get("hostname")
    if hostname is not None and not isinstance(hostname, str):
        raise InvalidServiceInfoError(f"hostname must be a string, got {hostname!r}")
    if "ports" in kvs and not isinstance(kvs["ports"], dict):
        raise InvalidServiceInfoError(f"ports must be a JSON object, got {kvs['ports']!r}")
    return kvs


def to_json(info: ServiceInfo, indent: int | None = None) -> str:
    """Serialize one descriptor to JSON."""
    return ServiceInfoDocument.from_service_info(info).to_json(indent=indent)


def from_json(text: str) -> ServiceInfo:
    """Parse one descriptor from JSON.

    Raises:
        InvalidServiceInfoError: The text is not a descriptor object, a required
            field is missing or has the wrong shape, or an enum name is unknown.
    """
    kvs = _check_service(_load(text))
    try:
        document = ServiceInfoDocument.from_dict(kvs)
    except KeyError as e:
        raise InvalidServiceInfoError(f"missing field {e}") from e
    return document.to_service_info()


def list_to_json(infos: list[ServiceInfo], indent: int | None = None) -> str:
    return ServiceListDocument.from_service_infos(infos).to_json(indent=indent)


def list_from_json(text: str) -> list[ServiceInfo]:
    kvs = _load(text)
    if not isinstance(kvs, dict):
        raise InvalidServiceInfoError(f"service list must be a JSON object, got {kvs!r}")
    services = kvs.get("services", [])
    if not isinstance(services, list):
        raise InvalidServiceInfoError(f"services must be a JSON array, got {services!r}")
    for service in services:
        _check_service(service)
    try:
        document = ServiceListDocument.from_dict(kvs)
    except KeyError as e:
        raise InvalidServiceInfoError(f"missing field {e}") from e
    return document.to_service_infos()
