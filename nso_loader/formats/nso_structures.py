"""
NSO format structure definitions for Nintendo Switch executables.
"""

from dataclasses import dataclass, field
from typing import List

from ..io.fields import uint_field, bytes_field


def make_magic(tag: bytes) -> int:
    """Pack a four character tag into its little-endian integer form."""
    return int.from_bytes(tag, 'little')


# NSO Magic
NSO_MAGIC = make_magic(b'NSO0')  # 0x304F534E
# MOD0 Magic
MOD_MAGIC = make_magic(b'MOD0')  # 0x30444F4D

NSO_HEADER_SIZE = 0x6C
MOD_HEADER_SIZE = 0x1C

# Segment order is fixed by the format
SEGMENT_TEXT = 0
SEGMENT_RODATA = 1
SEGMENT_DATA = 2
SEGMENT_NAMES = ('.text', '.rodata', '.data')

# Offset of the MOD0 pointer inside .text
MOD_POINTER_OFFSET = 4


@dataclass
class NsoSegmentHeader:
    """One of the three segment descriptors in the NSO header."""
    offset: int = uint_field()
    location: int = uint_field()
    size: int = uint_field()
    # Alignment for .text/.rodata, bss size for .data
    alignment: int = uint_field()

    @property
    def bss_size(self) -> int:
        return self.alignment


@dataclass
class NsoHeader:
    """NSO file header."""
    magic: int = uint_field()
    version: int = uint_field()
    reserved0: int = uint_field()
    # bit 0 = .text compressed, bit 1 = .rodata compressed, bit 2 = .data compressed
    flags: int = uint_field()
    text: NsoSegmentHeader = field(default_factory=NsoSegmentHeader)
    rodata: NsoSegmentHeader = field(default_factory=NsoSegmentHeader)
    data: NsoSegmentHeader = field(default_factory=NsoSegmentHeader)
    bss_size: int = uint_field()
    reserved1: bytes = bytes_field(0x1C)
    text_compressed_size: int = uint_field()
    rodata_compressed_size: int = uint_field()
    data_compressed_size: int = uint_field()

    @property
    def segments(self) -> List[NsoSegmentHeader]:
        """Segment descriptors in format order (.text, .rodata, .data)."""
        return [self.text, self.rodata, self.data]

    @property
    def module_name_offset(self) -> int:
        """Offset of the module name, stored in the .text alignment word."""
        return self.text.alignment

    @property
    def module_name_size(self) -> int:
        """Size of the module name, stored in the .rodata alignment word."""
        return self.rodata.alignment

    @property
    def compressed_sizes(self) -> List[int]:
        return [self.text_compressed_size, self.rodata_compressed_size, self.data_compressed_size]

    def is_compressed(self, index: int) -> bool:
        """Whether the header flags mark segment index as LZ4 compressed."""
        return (self.flags >> index) & 1 == 1


@dataclass
class ModHeader:
    """MOD0 header embedded in .text."""
    magic: int = uint_field()
    dynamic_offset: int = uint_field()
    bss_start_offset: int = uint_field()
    bss_end_offset: int = uint_field()
    eh_frame_hdr_start_offset: int = uint_field()
    eh_frame_hdr_end_offset: int = uint_field()
    # Offset to the runtime-generated module object, typically the .bss base
    module_offset: int = uint_field()

    @property
    def bss_size(self) -> int:
        return self.bss_end_offset - self.bss_start_offset
