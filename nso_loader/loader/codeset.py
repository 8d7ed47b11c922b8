"""
CodeSet: the assembled program image of one NSO container.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..formats.nso_structures import ModHeader, SEGMENT_TEXT, SEGMENT_RODATA, SEGMENT_DATA


@dataclass
class Segment:
    """Placement of one segment inside the program image."""
    offset: int = 0   # Image-relative
    addr: int = 0     # Absolute, set once the CodeSet is placed
    size: int = 0     # Page aligned


@dataclass
class CodeSet:
    """
    Program image built from one NSO container.

    Attributes:
        memory: Owned image buffer, page aligned, .bss zero-filled at the end
        segments: .text, .rodata, .data placements in format order
        bss_size: Page aligned .bss size
        data_size: Unaligned decompressed size of .data
        has_mod_header: Whether a MOD0 header was found
        mod_header: The MOD0 header, if found
        entrypoint: Load base once placed, else 0
    """
    memory: bytearray = field(default_factory=bytearray)
    segments: List[Segment] = field(default_factory=lambda: [Segment() for _ in range(3)])
    bss_size: int = 0
    data_size: int = 0
    has_mod_header: bool = False
    mod_header: Optional[ModHeader] = None
    entrypoint: int = 0

    @property
    def code(self) -> Segment:
        return self.segments[SEGMENT_TEXT]

    @property
    def rodata(self) -> Segment:
        return self.segments[SEGMENT_RODATA]

    @property
    def data(self) -> Segment:
        return self.segments[SEGMENT_DATA]

    @property
    def image_size(self) -> int:
        return len(self.memory)

    def segment_bytes(self, index: int) -> memoryview:
        """View of a segment's bytes inside the image."""
        segment = self.segments[index]
        return memoryview(self.memory)[segment.offset:segment.offset + segment.size]

    def place(self, base: int) -> None:
        """Assign absolute addresses for a load at base."""
        for segment in self.segments:
            segment.addr = base + segment.offset
        self.entrypoint = base
