"""
IO module for binary stream handling.
"""

from .binary_stream import BinaryStream, sizeof, unpack_class
from .fields import uint_field, bytes_field

__all__ = ['BinaryStream', 'sizeof', 'unpack_class', 'uint_field', 'bytes_field']
