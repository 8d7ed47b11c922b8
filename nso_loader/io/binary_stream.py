"""
Binary stream reader with dataclass-driven struct parsing.

This module provides a BinaryStream class that reads little-endian data
from bytes or a seekable file object, and can deserialize dataclasses
whose fields carry layout metadata (see fields.py).
"""

import struct
from io import BytesIO
from typing import (
    TypeVar, Type, List, Optional, Dict, Union, Tuple, BinaryIO,
    get_type_hints
)
from dataclasses import fields, is_dataclass

from .fields import get_format_char
from ..exceptions import TruncatedReadError

T = TypeVar('T')

# Cache for compiled struct reading plans
# Key: dataclass type -> list of ('struct', format, names) / ('nested', name, type) steps
_PLAN_CACHE: Dict[type, List[Tuple]] = {}

# Cache for struct sizes
# Key: dataclass type -> size
_SIZE_CACHE: Dict[type, int] = {}


def _build_plan(cls: type) -> List[Tuple]:
    """
    Compile a dataclass into an ordered list of read steps.

    Consecutive primitive fields are merged into a single struct format so
    they can be unpacked in one call; nested dataclasses are read in
    declaration order between them.
    """
    if cls in _PLAN_CACHE:
        return _PLAN_CACHE[cls]

    try:
        hints = get_type_hints(cls)
    except Exception:
        hints = {}

    plan: List[Tuple] = []
    format_parts: List[str] = []
    names: List[str] = []

    def flush():
        if format_parts:
            plan.append(('struct', '<' + ''.join(format_parts), list(names)))
            format_parts.clear()
            names.clear()

    for field_info in fields(cls):
        field_type = hints.get(field_info.name, field_info.type)
        format_char = get_format_char(field_info)

        if format_char is not None:
            format_parts.append(format_char)
            names.append(field_info.name)
        elif is_dataclass(field_type):
            flush()
            plan.append(('nested', field_info.name, field_type))
        # Fields without layout metadata are derived values, not read

    flush()
    _PLAN_CACHE[cls] = plan
    return plan


def sizeof(cls: type) -> int:
    """Return the on-disk size of a layout dataclass."""
    if cls in _SIZE_CACHE:
        return _SIZE_CACHE[cls]

    size = 0
    for step in _build_plan(cls):
        if step[0] == 'struct':
            size += struct.calcsize(step[1])
        else:
            size += sizeof(step[2])

    _SIZE_CACHE[cls] = size
    return size


class BinaryStream:
    """
    Little-endian binary stream reader.

    Wraps either raw bytes or an already opened, seekable binary file
    object. All structured reads are strict: asking for more bytes than the
    source holds raises TruncatedReadError instead of returning short data.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview, BinaryIO]):
        """
        Initialize a BinaryStream.

        Args:
            data: Raw bytes or a seekable binary file object
        """
        if isinstance(data, (bytes, bytearray, memoryview)):
            self._stream = BytesIO(bytes(data))
        else:
            self._stream = data

    # ========== Position and Length ==========

    @property
    def position(self) -> int:
        """Get current stream position."""
        return self._stream.tell()

    @position.setter
    def position(self, value: int) -> None:
        """Set stream position."""
        self._stream.seek(value)

    @property
    def length(self) -> int:
        """Get stream length."""
        current = self._stream.tell()
        self._stream.seek(0, 2)  # Seek to end
        length = self._stream.tell()
        self._stream.seek(current)  # Restore position
        return length

    # ========== Primitive Readers ==========

    def read_exact(self, count: int, addr: Optional[int] = None) -> bytes:
        """
        Read exactly count bytes.

        Args:
            count: Number of bytes required
            addr: Optional offset to seek to before reading

        Raises:
            TruncatedReadError: If the source ends before count bytes
        """
        if addr is not None:
            self.position = addr

        offset = self.position
        # Checked before reading so a bogus size never drives an allocation
        available = max(0, self.length - offset)
        if count > available:
            raise TruncatedReadError(offset, count, available)

        data = self._stream.read(count)
        if len(data) != count:
            raise TruncatedReadError(offset, count, len(data))
        return data

    # ========== Class/Struct Reading ==========

    def read_class(self, cls: Type[T], addr: Optional[int] = None) -> T:
        """
        Read a layout dataclass from the stream.

        Args:
            cls: Dataclass whose fields were declared with uint_field/bytes_field
            addr: Optional offset to seek to before reading

        Returns:
            A populated instance of cls
        """
        if addr is not None:
            self.position = addr

        if not is_dataclass(cls):
            raise TypeError(f"{cls!r} is not a dataclass")

        # Read the whole record up front so a short source fails before
        # any partially filled instance exists.
        data = self.read_exact(sizeof(cls))
        instance, _ = _unpack(cls, data, 0)
        return instance


def unpack_class(cls: Type[T], data: Union[bytes, bytearray, memoryview], offset: int = 0) -> T:
    """
    Unpack a layout dataclass from an in-memory buffer.

    Raises:
        TruncatedReadError: If the record does not fit inside data
    """
    size = sizeof(cls)
    if offset < 0 or offset + size > len(data):
        raise TruncatedReadError(offset, size, max(0, min(size, len(data) - offset)))
    return _unpack(cls, data, offset)[0]


def _unpack(cls: Type[T], data, offset: int) -> Tuple[T, int]:
    instance = cls()
    for step in _build_plan(cls):
        if step[0] == 'struct':
            _, format_str, names = step
            values = struct.unpack_from(format_str, data, offset)
            for name, value in zip(names, values):
                setattr(instance, name, value)
            offset += struct.calcsize(format_str)
        else:
            _, name, nested_type = step
            nested, offset = _unpack(nested_type, data, offset)
            setattr(instance, name, nested)
    return instance, offset
