"""
NSO container decoding.

NSO is the executable format used on Nintendo Switch. A container holds
three segments (.text, .rodata, .data), each normally compressed as a
raw LZ4 block with no framing; the decompressed size comes from the
header. An optional MOD0 header inside .text gives the exact .bss bounds.
"""

from typing import Optional, Union

import lz4.block

from ..exceptions import FormatError, TruncatedReadError, DecompressionError
from ..io.binary_stream import BinaryStream, sizeof, unpack_class
from .nso_structures import (
    NsoHeader, NsoSegmentHeader, ModHeader,
    NSO_MAGIC, MOD_MAGIC, MOD_HEADER_SIZE, MOD_POINTER_OFFSET,
)

# LZ4 cannot expand a block by more than this ratio
LZ4_MAX_RATIO = 255
LZ4_RATIO_SLACK = 16


def read_nso_header(stream: BinaryStream) -> NsoHeader:
    """
    Read and validate the fixed-size NSO header at offset 0.

    Args:
        stream: Source positioned anywhere; it is rewound first

    Returns:
        The parsed header

    Raises:
        FormatError: If the header is truncated or the magic is not "NSO0"
    """
    try:
        header = stream.read_class(NsoHeader, addr=0)
    except TruncatedReadError as e:
        raise FormatError(f"Truncated NSO header ({e.actual} of {sizeof(NsoHeader)} bytes)") from e

    if header.magic != NSO_MAGIC:
        raise FormatError(f"Invalid NSO magic (0x{header.magic:08X})")

    return header


def is_stored(segment: NsoSegmentHeader, compressed_size: int) -> bool:
    """A segment is stored verbatim when it has no separate compressed size."""
    return compressed_size == 0 or compressed_size == segment.size


def decompress_segment(compressed: bytes, size: int) -> bytes:
    """
    Decompress one raw LZ4 block into exactly size bytes.

    Args:
        compressed: Block data without any length prefix
        size: Declared uncompressed size from the header

    Raises:
        DecompressionError: If the block is corrupt or does not expand to size
    """
    if size == 0:
        return b''

    # Reject before lz4 allocates a buffer of the declared size
    if size > len(compressed) * LZ4_MAX_RATIO + LZ4_RATIO_SLACK:
        raise DecompressionError(
            f"Declared size 0x{size:X} is impossible for a {len(compressed)} byte LZ4 block"
        )

    try:
        data = lz4.block.decompress(compressed, uncompressed_size=size)
    except lz4.block.LZ4BlockError as e:
        raise DecompressionError(f"LZ4 block decompression failed: {e}") from e

    if len(data) != size:
        raise DecompressionError(
            f"LZ4 block expanded to {len(data)} bytes, expected {size}"
        )
    return data


def read_segment(stream: BinaryStream, segment: NsoSegmentHeader, compressed_size: int) -> bytes:
    """
    Read one segment from the container and return its decompressed bytes.

    Args:
        stream: Container source
        segment: Segment descriptor from the header
        compressed_size: Matching entry of the header's compressed size table

    Returns:
        Exactly segment.size bytes

    Raises:
        TruncatedReadError: If the file ends before the segment data
        DecompressionError: If decompression fails
    """
    if is_stored(segment, compressed_size):
        return stream.read_exact(segment.size, addr=segment.offset)

    compressed = stream.read_exact(compressed_size, addr=segment.offset)
    return decompress_segment(compressed, segment.size)


def find_mod_header(image: Union[bytes, bytearray], text_offset: int = 0) -> Optional[ModHeader]:
    """
    Locate the MOD0 header through the pointer stored at .text + 4.

    The pointer and the header it references are both bounds checked
    against the current image; anything that does not fit, or does not
    carry the MOD0 magic, means the header is absent.

    Args:
        image: Assembled program image so far
        text_offset: Image offset of .text

    Returns:
        The MOD0 header, or None if not present
    """
    pointer_at = text_offset + MOD_POINTER_OFFSET
    if pointer_at < 0 or pointer_at + 4 > len(image):
        return None

    mod_offset = int.from_bytes(image[pointer_at:pointer_at + 4], 'little')
    if mod_offset + MOD_HEADER_SIZE > len(image):
        return None

    mod_header = unpack_class(ModHeader, image, mod_offset)
    if mod_header.magic != MOD_MAGIC:
        return None

    if mod_header.bss_end_offset < mod_header.bss_start_offset:
        return None

    return mod_header
