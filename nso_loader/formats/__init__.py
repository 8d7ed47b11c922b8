"""
Executable format parsers.

Supports:
- NSO (Nintendo Switch), LZ4 compressed segments with optional MOD0 header
"""

from .nso import read_nso_header, read_segment, decompress_segment, find_mod_header
from .nso_structures import *

__all__ = [
    'read_nso_header', 'read_segment', 'decompress_segment', 'find_mod_header',
    'NsoHeader', 'NsoSegmentHeader', 'ModHeader', 'NSO_MAGIC', 'MOD_MAGIC',
]
