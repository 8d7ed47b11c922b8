import pytest

from nso_builder import build_nso, make_text


@pytest.fixture
def simple_nso():
    """Three compressed segments at 0x0/0x1000/0x2000 with no MOD0."""
    return build_nso(
        [make_text(0x800), b'\x22' * 0x400, b'\x33' * 0x200],
        locations=[0x0, 0x1000, 0x2000],
        bss_size=0x300,
    )


@pytest.fixture
def exefs_dir(tmp_path):
    """ExeFS directory holding main, subsdk0 and sdk of different sizes."""
    (tmp_path / 'main').write_bytes(build_nso(
        [make_text(0x2000), b'\x22' * 0x800, b'\x33' * 0x100], bss_size=0x1800))
    (tmp_path / 'subsdk0').write_bytes(build_nso(
        [make_text(0x1000), b'\x44' * 0x10, b'\x55' * 0x10], bss_size=0))
    (tmp_path / 'sdk').write_bytes(build_nso(
        [make_text(0x3000), b'\x66' * 0x1234, b'\x77' * 0x4000], bss_size=0x10000))
    return tmp_path
