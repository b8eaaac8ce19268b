"""Wire runtime and message types for svcinfo."""

from .messages import NodeType as NodeType
from .messages import ServiceInfoMessage as ServiceInfoMessage
from .messages import ServiceListMessage as ServiceListMessage
from .messages import ServicePort as ServicePort
from .messages import ServicePortType as ServicePortType
from .serialization import SerializationError as SerializationError
from .serialization import Struct as Struct
from .serialization import WireEnum as WireEnum
