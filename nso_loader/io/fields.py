"""
Field helpers for binary-layout dataclasses.

These attach layout metadata (width, signedness, raw byte length) to
dataclass fields so that BinaryStream can derive a struct format for the
whole class.
"""

from dataclasses import field
from typing import Any, Dict

# struct format characters keyed by (byte width, unsigned)
PRIMITIVE_FORMAT: Dict[tuple, str] = {
    (1, True): 'B',
    (1, False): 'b',
    (2, True): 'H',
    (2, False): 'h',
    (4, True): 'I',
    (4, False): 'i',
    (8, True): 'Q',
    (8, False): 'q',
}


def uint_field(binary_size: int = 4, default: int = 0, unsigned: bool = True):
    """
    Create an integer dataclass field with an explicit on-disk width.

    Args:
        binary_size: Width in bytes (1, 2, 4, or 8)
        default: Default value for the field
        unsigned: Whether to read as unsigned (default True)

    Example:
        @dataclass
        class NsoSegmentHeader:
            offset: int = uint_field()
            location: int = uint_field()
    """
    if (binary_size, unsigned) not in PRIMITIVE_FORMAT:
        raise ValueError(f"Unsupported field width: {binary_size}")
    return field(default=default, metadata={'binary_size': binary_size, 'unsigned': unsigned})


def bytes_field(length: int):
    """Create a fixed-length raw byte field (reserved areas, tags)."""
    return field(default=b'\x00' * length, metadata={'array_length': length})


def get_format_char(field_info) -> Any:
    """Return the struct format fragment for a field, or None if it has no layout."""
    metadata = field_info.metadata or {}
    if 'binary_size' in metadata:
        return PRIMITIVE_FORMAT[(metadata['binary_size'], metadata.get('unsigned', True))]
    if 'array_length' in metadata:
        return f"{metadata['array_length']}s"
    return None
