"""Compact text notation for service descriptors using Lark.

``DATANODE@node-1[RPC:9862, HTTP:9874]`` describes a datanode on host
``node-1`` with an RPC and an HTTP port. Names are case-insensitive when
parsed and written upper-case.
"""

import os
import re
from typing import Any

from lark import Lark
from lark.exceptions import LarkError, VisitError
from lark.visitors import Transformer

from .proto.messages import NodeType, ServicePort, ServicePortType
from .service_info import ServiceInfo

_g_parser: Lark | None = None


class NotationError(ValueError):
    """Raised when service notation cannot be parsed."""


def _lookup(enum_type: Any, name: str) -> Any:
    try:
        return enum_type[name.upper()]
    except KeyError:
        choices = ", ".join(member.name for member in enum_type)
        raise NotationError(
            f"Unknown {enum_type.__name__} {name!r} (expected one of {choices})"
        ) from None


class NotationTransformer(Transformer):
    """Transform a notation parse tree into a ServiceInfo."""

    def start(self, args: list[Any]) -> ServiceInfo:
        return args[0]

    def service(self, args: list[Any]) -> ServiceInfo:
        ports = args[2] if len(args) > 2 else []
        return ServiceInfo(_lookup(NodeType, str(args[0])), str(args[1]), ports)

    def ports(self, args: list[Any]) -> list[ServicePort]:
        return list(args)

    def port(self, args: list[Any]) -> ServicePort:
        return ServicePort(_lookup(ServicePortType, str(args[0])), int(args[1]))


def _parser() -> Lark:
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/notation.lark", encoding="utf-8") as f:
            grammar = f.read()
        _g_parser = Lark(grammar)

    return _g_parser


def parse(text: str) -> ServiceInfo:
    """Parse one descriptor from notation."""
    try:
        tree = _parser().parse(text)
    except LarkError as e:
        raise NotationError(f"Invalid service notation {text.strip()!r}: {e}") from e

    try:
        return NotationTransformer().transform(tree)
    except VisitError as e:
        if isinstance(e.orig_exc, NotationError):
            raise e.orig_exc from None
        raise


def render(info: ServiceInfo) -> str:
    """Render a descriptor as notation, ports in purpose order.

    Raises:
        NotationError: The hostname does not match the ``HOSTNAME`` terminal
            (empty, or containing whitespace or other characters outside
            ``[A-Za-z0-9_.-]``) or a port value is negative, so the text
            would not parse back.
    """
    hostname_re = _parser().get_terminal("HOSTNAME").pattern.to_regexp()
    if not re.fullmatch(hostname_re, info.hostname):
        raise NotationError(f"Hostname {info.hostname!r} cannot be written as notation")

    text = f"{info.node_type.name}@{info.hostname}"
    ports = sorted(info.ports, key=lambda port: port.type.value)
    for port in ports:
        if port.value < 0:
            raise NotationError(f"{port.type.name} port {port.value} cannot be written as notation")
    if ports:
        text += "[" + ", ".join(f"{port.type.name}:{port.value}" for port in ports) + "]"
    return text
