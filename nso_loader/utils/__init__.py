"""
Utility functions.
"""

from .alignment import page_align, PAGE_SIZE

__all__ = ['page_align', 'PAGE_SIZE']
