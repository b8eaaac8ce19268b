"""Serialization and deserialization for svcinfo wire types."""

import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Self


class SerializationError(RuntimeError):
    """Raised when serialization or deserialization fails."""


@dataclass(frozen=True)
class WireFieldInfo:
    """Metadata for a wire struct field."""

    wire_type: str
    array_size: int | None = None  # None = not array, 0 = variable length


# Sentinel for missing default
_MISSING: Any = object()

# Longest variable length array, bounded by the uint8 count prefix
MAX_ARRAY_LENGTH = 255

ENUM_WIRE_TYPE = "uint8"

FORMAT_CHARS = {
    "uint8": "B",
    "uint16": "H",
    "uint32": "I",
}


def wire_field(
    type: str,
    *,
    array_size: int | None = None,
    default: Any = _MISSING,
    default_factory: Any = _MISSING,
) -> Any:
    """Define a wire field with serialization metadata.

    Args:
        type: The wire type (e.g., "uint8", "uint32", "string").
        array_size: Array size (None=not array, 0=variable).
        default: Default value for the field.
        default_factory: Factory function for default value.

    Returns:
        A dataclass field with wire metadata attached.
    """
    metadata = {"wire": WireFieldInfo(type, array_size)}

    if default is not _MISSING:
        return field(default=default, metadata=metadata)
    if default_factory is not _MISSING:
        return field(default_factory=default_factory, metadata=metadata)
    return field(metadata=metadata)


def pack_uint(value: int, wire_type: str) -> bytes:
    """Pack an unsigned integer, rejecting values that don't fit."""
    try:
        return struct.pack("=" + FORMAT_CHARS[wire_type], value)
    except struct.error as e:
        raise SerializationError(f"{value!r} does not fit in {wire_type}") from e


def unpack_uint(data: bytes | memoryview, offset: int, wire_type: str) -> tuple[int, int]:
    """Unpack an unsigned integer.

    Returns:
        Tuple of (value, bytes_consumed).
    """
    fmt = "=" + FORMAT_CHARS[wire_type]
    try:
        (value,) = struct.unpack_from(fmt, data, offset)
    except struct.error as e:
        raise SerializationError(f"truncated {wire_type} at offset {offset}") from e
    return value, struct.calcsize(fmt)


def pack_string(value: str, name: str) -> bytes:
    """Pack a variable length, null terminated UTF-8 string."""
    try:
        encoded = value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise SerializationError(f"{name} is not encodable as UTF-8") from e
    if b"\x00" in encoded:
        raise SerializationError(f"{name} must not contain null bytes")
    return encoded + b"\x00"


def unpack_string(data: bytes | memoryview, offset: int, name: str) -> tuple[str, int]:
    """Unpack a null terminated UTF-8 string.

    Returns:
        Tuple of (value, bytes_consumed).
    """
    raw = bytes(data[offset:])
    end = raw.find(b"\x00")
    if end < 0:
        raise SerializationError(f"unterminated string {name}")
    try:
        value = raw[:end].decode("utf-8")
    except UnicodeDecodeError as e:
        raise SerializationError(f"{name} is not valid UTF-8") from e
    return value, end + 1


def pack_array(items: list[Any], name: str) -> bytes:
    """Pack a variable length array of wire values with a uint8 count prefix."""
    if len(items) > MAX_ARRAY_LENGTH:
        raise SerializationError(f"{name} array exceeds {MAX_ARRAY_LENGTH} elements")
    buf = bytearray(pack_uint(len(items), "uint8"))
    for item in items:
        buf.extend(item.pack())
    return bytes(buf)


def unpack_array(
    data: bytes | memoryview, offset: int, item_type: Any
) -> tuple[list[Any], int]:
    """Unpack a variable length array of ``item_type`` values.

    Returns:
        Tuple of (items, bytes_consumed).
    """
    count, o = unpack_uint(data, offset, "uint8")
    o += offset
    items = []
    for _ in range(count):
        item, n = item_type.unpack(data, o)
        o += n
        items.append(item)
    return items, o - offset


class Struct:
    """Base class for wire struct types.

    Subclasses should be @dataclass decorated and define fields using
    wire_field() or type annotations for nested structs.

    Example:
        @dataclass
        class MyMessage(Struct):
            value: int = wire_field(type="uint32")
            name: str = wire_field(type="string")
    """

    def pack(self) -> bytes:
        """Pack this struct to bytes. Subclasses override this."""
        raise NotImplementedError("pack() must be implemented by the message type")

    @classmethod
    def unpack(cls, data: bytes | memoryview, offset: int = 0) -> tuple[Self, int]:
        """Unpack a struct from bytes.

        Args:
            data: The bytes to unpack from.
            offset: Starting offset in data.

        Returns:
            Tuple of (instance, bytes_consumed).
        """
        raise NotImplementedError("unpack() must be implemented by the message type")

    @classmethod
    def from_bytes(cls, data: bytes | memoryview) -> Self:
        """Unpack a struct that must span all of ``data``."""
        instance, consumed = cls.unpack(data)
        if consumed != len(data):
            raise SerializationError(
                f"{len(data) - consumed} trailing bytes after {cls.__name__}"
            )
        return instance


class WireEnum(Enum):
    """Base class for wire enums, packed as a single uint8.

    Example:
        class Status(WireEnum):
            OK = 1
            ERROR = 2
    """

    def pack(self) -> bytes:
        """Pack enum value."""
        return pack_uint(self.value, ENUM_WIRE_TYPE)

    @classmethod
    def unpack(cls, data: bytes | memoryview, offset: int = 0) -> tuple[Self, int]:
        """Unpack enum from bytes.

        Args:
            data: The bytes to unpack from.
            offset: Starting offset in data.

        Returns:
            Tuple of (enum member, bytes_consumed).
        """
        raw, consumed = unpack_uint(data, offset, ENUM_WIRE_TYPE)
        try:
            return cls(raw), consumed
        except ValueError as e:
            raise SerializationError(f"unknown {cls.__name__} value {raw}") from e
