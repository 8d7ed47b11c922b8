"""
Output generation module.
"""

from .load_map_json import LoadMapJson, ModuleEntry, SegmentEntry

__all__ = ['LoadMapJson', 'ModuleEntry', 'SegmentEntry']
