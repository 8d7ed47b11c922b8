"""
Load map JSON output structures.

These structures define the JSON format written next to the extracted
images so a disassembler script can map each module at its base.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Any
import json

from ..config import LoaderConfig
from ..formats.nso_structures import SEGMENT_NAMES
from ..loader.module_loader import LoadMap, Loaded


@dataclass
class SegmentEntry:
    """Segment placement for load_map.json."""
    name: str = ""
    address: int = 0
    offset: int = 0
    size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Name": self.name,
            "Address": self.address,
            "Offset": self.offset,
            "Size": self.size
        }


@dataclass
class ModuleEntry:
    """One module (loaded or skipped) in load_map.json."""
    name: str = ""
    loaded: bool = False
    base: int = 0
    size: int = 0
    bss_size: int = 0
    has_mod_header: bool = False
    image_file: Optional[str] = None
    reason: str = ""
    segments: List[SegmentEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "Name": self.name,
            "Loaded": self.loaded,
            "Base": self.base,
        }
        if self.loaded:
            result.update({
                "Size": self.size,
                "BssSize": self.bss_size,
                "HasModHeader": self.has_mod_header,
                "ImageFile": self.image_file,
                "Segments": [s.to_dict() for s in self.segments]
            })
        else:
            result["Reason"] = self.reason
        return result


@dataclass
class LoadMapJson:
    """
    Complete load_map.json structure.

    Holds every configured module in load order, with segment addresses
    for the ones that were loaded. Target carries the ABI settings the
    host applies when creating the database.
    """
    image_base: int = 0
    next_base: int = 0
    target: Dict[str, Any] = field(default_factory=dict)
    modules: List[ModuleEntry] = field(default_factory=list)

    @classmethod
    def from_load_map(
        cls,
        load_map: LoadMap,
        config: Optional[LoaderConfig] = None,
        image_files: Optional[Dict[str, str]] = None
    ) -> 'LoadMapJson':
        """Build the JSON structure from a LoadMap and the config that produced it."""
        config = config or LoaderConfig()
        image_files = image_files or {}
        result = cls(image_base=load_map.image_base, next_base=load_map.next_base)
        result.target = {
            "Processor": config.processor,
            "AddressSize": config.address_size,
            "Compiler": config.compiler,
            "TypeLibrary": config.type_library
        }

        for entry in load_map.results:
            if isinstance(entry, Loaded):
                codeset = entry.codeset
                module = ModuleEntry(
                    name=entry.name,
                    loaded=True,
                    base=entry.base,
                    size=codeset.image_size,
                    bss_size=codeset.bss_size,
                    has_mod_header=codeset.has_mod_header,
                    image_file=image_files.get(entry.name),
                )
                for name, segment in zip(SEGMENT_NAMES, codeset.segments):
                    module.segments.append(SegmentEntry(
                        name=name,
                        address=segment.addr,
                        offset=segment.offset,
                        size=segment.size
                    ))
            else:
                module = ModuleEntry(name=entry.name, base=entry.base, reason=entry.reason)
            result.modules.append(module)

        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ImageBase": self.image_base,
            "NextBase": self.next_base,
            "Target": self.target,
            "Modules": [m.to_dict() for m in self.modules]
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: str) -> None:
        """Save to file."""
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
