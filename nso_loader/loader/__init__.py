"""
Program image assembly and module placement.
"""

from .codeset import CodeSet, Segment
from .image_builder import build_codeset
from .module_loader import load_module, load_modules, Loaded, Skipped, LoadMap

__all__ = [
    'CodeSet', 'Segment', 'build_codeset',
    'load_module', 'load_modules', 'Loaded', 'Skipped', 'LoadMap',
]
