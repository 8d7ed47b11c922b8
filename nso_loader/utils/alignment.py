"""
Page alignment helpers.
"""

PAGE_BITS = 12
PAGE_SIZE = 1 << PAGE_BITS
PAGE_MASK = PAGE_SIZE - 1


def page_align(size: int) -> int:
    """
    Round a size or offset up to the next page boundary.

    Args:
        size: Non-negative byte count

    Returns:
        Smallest multiple of PAGE_SIZE that is >= size
    """
    return (size + PAGE_MASK) & ~PAGE_MASK

