"""
Sequential loading of NSO modules into one address space.

Each module is decoded independently and placed directly after the
previous one. A module that is missing or malformed is skipped and does
not consume address space; the sequence always continues.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ..config import LoaderConfig
from ..exceptions import NsoError
from ..io.binary_stream import BinaryStream
from ..utils.alignment import page_align
from .codeset import CodeSet
from .image_builder import build_codeset, DEFAULT_MAX_IMAGE_SIZE


@dataclass
class Loaded:
    """A module that was decoded and placed at base."""
    name: str
    base: int
    codeset: CodeSet

    @property
    def next_base(self) -> int:
        return self.base + page_align(self.codeset.image_size)


@dataclass
class Skipped:
    """A module that could not be loaded; base is left for the next one."""
    name: str
    base: int
    reason: str = ''

    @property
    def next_base(self) -> int:
        return self.base


LoadResult = Union[Loaded, Skipped]


@dataclass
class LoadMap:
    """Ordered results of loading a module set."""
    image_base: int = 0
    results: List[LoadResult] = field(default_factory=list)

    @property
    def loaded(self) -> List[Loaded]:
        return [r for r in self.results if isinstance(r, Loaded)]

    @property
    def skipped(self) -> List[Skipped]:
        return [r for r in self.results if isinstance(r, Skipped)]

    @property
    def next_base(self) -> int:
        """First free address after the last loaded module."""
        return self.results[-1].next_base if self.results else self.image_base

    def get(self, name: str) -> Optional[LoadResult]:
        for result in self.results:
            if result.name == name:
                return result
        return None


def load_module(
    path: Union[str, Path],
    base: int,
    max_image_size: int = DEFAULT_MAX_IMAGE_SIZE
) -> LoadResult:
    """
    Decode one NSO file and place it at base.

    Args:
        path: Path to the NSO file
        base: Address the image should start at
        max_image_size: Upper bound on the assembled image

    Returns:
        Loaded on success, Skipped if the file is absent or invalid.
        Either way, result.next_base is where the following module goes.
    """
    path = Path(path)
    try:
        with open(path, 'rb') as f:
            codeset = build_codeset(BinaryStream(f), max_image_size)
    except (NsoError, OSError) as e:
        return Skipped(path.name, base, str(e))

    codeset.place(base)
    return Loaded(path.name, base, codeset)


def load_modules(directory: Union[str, Path], config: Optional[LoaderConfig] = None) -> LoadMap:
    """
    Load the configured module set from an ExeFS directory.

    Modules are loaded in config.module_names order starting at
    config.image_base, each at the first free address after the previous
    loaded one.

    Args:
        directory: Directory holding the module files
        config: Loader configuration (defaults if omitted)

    Returns:
        LoadMap with one result per configured module name
    """
    if config is None:
        config = LoaderConfig()

    directory = Path(directory)
    load_map = LoadMap(image_base=config.image_base)
    next_base = config.image_base

    for name in config.module_names:
        result = load_module(directory / name, next_base, config.max_image_size)
        result.name = name
        load_map.results.append(result)

        if config.verbose:
            if isinstance(result, Loaded):
                print(f"loaded module {name} @ 0x{result.base:X}")
            else:
                print(f"skipped module {name}: {result.reason}")

        next_base = result.next_base

    return load_map
