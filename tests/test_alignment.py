import pytest

from nso_loader.utils.alignment import page_align, PAGE_SIZE


def test_page_size():
    assert PAGE_SIZE == 0x1000


@pytest.mark.parametrize("value,expected", [
    (0, 0),
    (1, 0x1000),
    (0xFFF, 0x1000),
    (0x1000, 0x1000),
    (0x1001, 0x2000),
    (0x2200, 0x3000),
])
def test_page_align(value, expected):
    assert page_align(value) == expected


@pytest.mark.parametrize("value", [0, 1, 0x7FF, 0x1000, 0x12345, 0xFFFFF001])
def test_page_align_idempotent(value):
    aligned = page_align(value)
    assert page_align(aligned) == aligned
    assert aligned % PAGE_SIZE == 0
    assert 0 <= aligned - value < PAGE_SIZE
