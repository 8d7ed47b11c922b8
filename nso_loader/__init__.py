"""
NSO Loader
Decodes Nintendo Switch NSO executables into page aligned program images
and lays out a module set in one address space.
"""

__version__ = "0.1.0"

from .config import LoaderConfig
from .exceptions import NsoError, FormatError, TruncatedReadError, DecompressionError
from .loader import CodeSet, build_codeset, load_module, load_modules, Loaded, Skipped, LoadMap

__all__ = [
    'LoaderConfig', 'NsoError', 'FormatError', 'TruncatedReadError', 'DecompressionError',
    'CodeSet', 'build_codeset', 'load_module', 'load_modules', 'Loaded', 'Skipped', 'LoadMap',
    '__version__',
]
