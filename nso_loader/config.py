"""
Configuration handling for the NSO loader.
"""

from dataclasses import dataclass, field, fields as dataclass_fields, asdict
from typing import List, Optional
import json
from pathlib import Path

DEFAULT_MODULE_NAMES = [
    'rtld', 'main',
    'subsdk0', 'subsdk1', 'subsdk2', 'subsdk3',
    'subsdk4', 'subsdk5', 'subsdk6', 'subsdk7',
    'sdk',
]


@dataclass
class LoaderConfig:
    """Configuration options for loading an ExeFS module set."""

    # Address space
    image_base: int = 0x08000000
    module_names: List[str] = field(default_factory=lambda: list(DEFAULT_MODULE_NAMES))

    # Target ABI, forwarded to the host
    processor: str = 'arm'
    address_size: int = 64
    compiler: str = 'gnu'
    type_library: str = 'gnulnx_arm64'

    # Limits
    max_image_size: int = 0x40000000

    # Output
    verbose: bool = True

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'LoaderConfig':
        """Load configuration from a JSON file."""
        if path is None:
            path = Path(__file__).parent / 'config.json'

        if not path.exists():
            return cls()

        with open(path, 'r') as f:
            data = json.load(f)

        # Convert camelCase to snake_case
        converted = {}
        for key, value in data.items():
            snake_key = ''.join(
                f'_{c.lower()}' if c.isupper() else c
                for c in key
            ).lstrip('_')
            converted[snake_key] = value

        # Filter to only include valid fields
        valid_fields = {f.name for f in dataclass_fields(cls)}
        filtered = {k: v for k, v in converted.items() if k in valid_fields}

        # Addresses may be written as hex strings
        for key in ('image_base', 'max_image_size'):
            if isinstance(filtered.get(key), str):
                filtered[key] = int(filtered[key], 0)

        return cls(**filtered)

    def save(self, path: Path) -> None:
        """Save configuration to a JSON file."""
        # Convert snake_case to camelCase for compatibility
        data = {}
        for key, value in asdict(self).items():
            camel_key = ''.join(
                word.capitalize() if i > 0 else word
                for i, word in enumerate(key.split('_'))
            )
            data[camel_key] = value

        with open(path, 'w') as f:
            json.dump(data, f, indent=2)
