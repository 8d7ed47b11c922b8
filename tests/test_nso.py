import struct

import lz4.block
import pytest

from nso_loader.exceptions import FormatError, TruncatedReadError, DecompressionError
from nso_loader.formats.nso import (
    read_nso_header, read_segment, decompress_segment, find_mod_header, is_stored,
)
from nso_loader.formats.nso_structures import NsoSegmentHeader, NSO_MAGIC, MOD_MAGIC
from nso_loader.io.binary_stream import BinaryStream

from nso_builder import build_nso, make_text, compress


class TestReadHeader:
    def test_valid_header(self, simple_nso):
        header = read_nso_header(BinaryStream(simple_nso))
        assert header.magic == NSO_MAGIC
        assert [s.location for s in header.segments] == [0x0, 0x1000, 0x2000]
        assert [s.size for s in header.segments] == [0x800, 0x400, 0x200]
        assert header.data.bss_size == 0x300
        assert all(size > 0 for size in header.compressed_sizes)
        assert header.is_compressed(0) and header.is_compressed(2)

    def test_module_name_fields(self):
        data = build_nso([make_text(0x100), b'\x22' * 0x100, b''], module_name=(0x100, 0x24))
        header = read_nso_header(BinaryStream(data))
        assert header.module_name_offset == 0x100
        assert header.module_name_size == 0x24

    def test_bad_magic(self):
        data = build_nso([make_text(0x100), b'', b''], magic=b'NRO0')
        with pytest.raises(FormatError):
            read_nso_header(BinaryStream(data))

    def test_truncated_header(self, simple_nso):
        with pytest.raises(FormatError):
            read_nso_header(BinaryStream(simple_nso[:0x40]))

    def test_empty_file(self):
        with pytest.raises(FormatError):
            read_nso_header(BinaryStream(b''))


class TestDecompress:
    @pytest.mark.parametrize("size", [0, 1, 15, 0x100, 0x1234])
    def test_round_trip(self, size):
        data = bytes((i * 7) & 0xFF for i in range(size))
        assert decompress_segment(lz4.block.compress(data, store_size=False), size) == data

    def test_deterministic(self):
        data = b'abc' * 500
        block = compress(data)
        assert decompress_segment(block, len(data)) == decompress_segment(block, len(data))

    def test_corrupt_block(self):
        with pytest.raises(DecompressionError):
            decompress_segment(b'\xff' * 16, 0x100)

    def test_declared_size_too_small(self):
        block = compress(b'\x00' * 0x200)
        with pytest.raises(DecompressionError):
            decompress_segment(block, 0x100)

    def test_declared_size_beyond_lz4_ratio(self):
        block = compress(b'\x00' * 0x100)
        with pytest.raises(DecompressionError) as excinfo:
            decompress_segment(block, 0x3FFF0000)
        assert 'impossible' in str(excinfo.value)

    def test_declared_size_too_large(self):
        block = compress(b'\x00' * 0x100)
        with pytest.raises(DecompressionError):
            decompress_segment(block, 0x200)


class TestReadSegment:
    def test_compressed_segment(self):
        payload = compress(b'\x42' * 0x300)
        raw = bytes(0x10) + payload
        segment = NsoSegmentHeader(offset=0x10, location=0, size=0x300)
        assert read_segment(BinaryStream(raw), segment, len(payload)) == b'\x42' * 0x300

    def test_stored_segment_zero_compressed_size(self):
        raw = bytes(0x10) + b'verbatim'
        segment = NsoSegmentHeader(offset=0x10, location=0, size=8)
        assert is_stored(segment, 0)
        assert read_segment(BinaryStream(raw), segment, 0) == b'verbatim'

    def test_stored_segment_equal_sizes(self):
        raw = b'12345678'
        segment = NsoSegmentHeader(offset=0, location=0, size=8)
        assert read_segment(BinaryStream(raw), segment, 8) == raw

    def test_short_read(self):
        payload = compress(b'\x42' * 0x300)
        raw = bytes(0x10) + payload[:-4]
        segment = NsoSegmentHeader(offset=0x10, location=0, size=0x300)
        with pytest.raises(TruncatedReadError):
            read_segment(BinaryStream(raw), segment, len(payload))

    def test_stored_size_far_past_end(self):
        segment = NsoSegmentHeader(offset=0x10, location=0, size=0x3FFF0000)
        with pytest.raises(TruncatedReadError):
            read_segment(BinaryStream(b'\x00' * 0x40), segment, 0)

    def test_offset_past_end(self):
        segment = NsoSegmentHeader(offset=0x1000, location=0, size=4)
        with pytest.raises(TruncatedReadError):
            read_segment(BinaryStream(b'\x00' * 8), segment, 0)


class TestFindModHeader:
    def test_found(self):
        image = make_text(0x1000, mod_offset=0x100, bss_start=0x3000, bss_end=0x5800)
        mod_header = find_mod_header(image)
        assert mod_header is not None
        assert mod_header.magic == MOD_MAGIC
        assert mod_header.bss_start_offset == 0x3000
        assert mod_header.bss_size == 0x2800
        assert mod_header.module_offset == 0x3000

    def test_pointer_past_end(self):
        image = make_text(0x1000, mod_offset=0xFFFFFFF0)
        assert find_mod_header(image) is None

    def test_header_straddles_end(self):
        image = bytearray(make_text(0x1000))
        image[4:8] = struct.pack('<I', 0x1000 - 0x10)
        image[0xFF0:0xFF4] = b'MOD0'
        assert find_mod_header(image) is None

    def test_header_at_very_end(self):
        image = make_text(0x1000, mod_offset=0x1000 - 0x1C, bss_start=0x10, bss_end=0x20)
        assert find_mod_header(image) is not None

    def test_wrong_magic(self):
        image = make_text(0x1000, mod_offset=0x100, bss_start=0, bss_end=0x100, magic=b'MODX')
        assert find_mod_header(image) is None

    def test_inverted_bss_bounds(self):
        image = make_text(0x1000, mod_offset=0x100, bss_start=0x5000, bss_end=0x3000)
        assert find_mod_header(image) is None

    def test_image_too_small_for_pointer(self):
        assert find_mod_header(b'\x00\x00\x00\x00\x08') is None

    def test_text_offset(self):
        image = bytes(0x1000) + make_text(0x1000)
        image = bytearray(image)
        image[0x1004:0x1008] = struct.pack('<I', 0x1100)
        image[0x1100:0x111C] = b'MOD0' + struct.pack('<6I', 0, 0x100, 0x200, 0, 0, 0)
        assert find_mod_header(image, text_offset=0x1000).bss_size == 0x100
