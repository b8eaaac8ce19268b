"""svcinfo - Service endpoint descriptors for cluster discovery."""

from importlib.metadata import PackageNotFoundError, version

from .proto.messages import NodeType as NodeType
from .proto.messages import ServicePort as ServicePort
from .proto.messages import ServicePortType as ServicePortType
from .proto.serialization import SerializationError as SerializationError
from .service_info import InvalidServiceInfoError as InvalidServiceInfoError
from .service_info import PortNotFoundError as PortNotFoundError
from .service_info import ServiceInfo as ServiceInfo
from .service_info import ServiceInfoBuilder as ServiceInfoBuilder

try:
    __version__ = version("svcinfo")
except PackageNotFoundError:
    __version__ = "(local)"
