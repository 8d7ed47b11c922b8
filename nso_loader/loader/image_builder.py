"""
Program image assembly for NSO containers.

Segments are decompressed in format order and copied to their declared
image offsets. The buffer grows to the page aligned end of every segment,
then .bss is appended as zeros and the total is page aligned.
"""

from ..exceptions import FormatError
from ..io.binary_stream import BinaryStream
from ..formats.nso import read_nso_header, read_segment, find_mod_header
from ..formats.nso_structures import SEGMENT_NAMES, SEGMENT_DATA
from ..utils.alignment import page_align
from .codeset import CodeSet

DEFAULT_MAX_IMAGE_SIZE = 0x40000000


def _grow(image: bytearray, size: int) -> None:
    if len(image) < size:
        image.extend(bytes(size - len(image)))


def build_codeset(stream: BinaryStream, max_image_size: int = DEFAULT_MAX_IMAGE_SIZE) -> CodeSet:
    """
    Decode an NSO container into a CodeSet.

    Args:
        stream: Container source
        max_image_size: Upper bound on the assembled image, in bytes

    Returns:
        A fully populated CodeSet (not yet placed at a base address)

    Raises:
        FormatError: Bad header, or a layout larger than max_image_size
        TruncatedReadError: Segment data missing from the file
        DecompressionError: Corrupt segment data
    """
    header = read_nso_header(stream)

    codeset = CodeSet()
    image = bytearray()
    extent = 0

    for index, (segment, compressed_size) in enumerate(zip(header.segments, header.compressed_sizes)):
        name = SEGMENT_NAMES[index]
        end = segment.location + segment.size
        if page_align(end) > max_image_size:
            raise FormatError(
                f"{name} at 0x{segment.location:X} (+0x{segment.size:X}) exceeds "
                f"maximum image size 0x{max_image_size:X}"
            )

        data = read_segment(stream, segment, compressed_size)

        if segment.location < extent:
            print(f"WARNING: {name} at 0x{segment.location:X} overlaps previous segment "
                  f"(ends at 0x{extent:X})")

        _grow(image, page_align(end))
        image[segment.location:end] = data
        extent = max(extent, end)

        placement = codeset.segments[index]
        placement.offset = segment.location
        placement.size = page_align(len(data))

    codeset.data_size = header.data.size

    # MOD0 gives the exact .bss bounds; otherwise use the .data descriptor
    mod_header = find_mod_header(image, header.text.location)
    codeset.has_mod_header = mod_header is not None
    codeset.mod_header = mod_header
    if mod_header is not None:
        codeset.bss_size = page_align(mod_header.bss_size)
    else:
        codeset.bss_size = page_align(header.data.bss_size)

    codeset.segments[SEGMENT_DATA].size += codeset.bss_size

    image_size = page_align(len(image) + codeset.bss_size)
    if image_size > max_image_size:
        raise FormatError(f"Image size 0x{image_size:X} exceeds maximum 0x{max_image_size:X}")

    _grow(image, image_size)
    codeset.memory = image
    return codeset
