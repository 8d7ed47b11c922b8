#!/usr/bin/env python3
"""
NSO Loader

Command-line interface for laying out the NSO modules of a Nintendo Switch
ExeFS directory in one address space.

Usage:
    nso-loader <exefs-directory> [-o output-directory]
    nso-loader -h | --help
    nso-loader --version

Arguments:
    exefs-directory    Directory holding rtld, main, subsdk*, sdk
    output-directory   Where to write load_map.json and <module>.bin images

Options:
    -h --help          Show this help message
    --version          Show version
"""

import sys
import argparse
from pathlib import Path
from typing import Dict, Optional

from . import __version__
from .config import LoaderConfig
from .loader.module_loader import LoadMap, Loaded, load_modules
from .output.load_map_json import LoadMapJson


def print_load_map(load_map: LoadMap) -> None:
    """Print a summary table of a load map."""
    print(f"{'Module':<10} {'Base':>12} {'Size':>10}  MOD0")
    for result in load_map.results:
        if isinstance(result, Loaded):
            codeset = result.codeset
            mod0 = 'yes' if codeset.has_mod_header else 'no'
            print(f"{result.name:<10} 0x{result.base:010X} 0x{codeset.image_size:08X}  {mod0}")
        else:
            print(f"{result.name:<10} {'-':>12} {'-':>10}  skipped")
    print(f"Next free address: 0x{load_map.next_base:X}")


def write_output(load_map: LoadMap, config: LoaderConfig, output_dir: Path) -> Path:
    """
    Write raw images and load_map.json.

    Args:
        load_map: Result of load_modules
        config: Config the map was loaded with
        output_dir: Target directory (created if missing)

    Returns:
        Path of the written load_map.json
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    image_files: Dict[str, str] = {}
    for result in load_map.loaded:
        image_name = f"{result.name}.bin"
        (output_dir / image_name).write_bytes(bytes(result.codeset.memory))
        image_files[result.name] = image_name

    map_path = output_dir / 'load_map.json'
    LoadMapJson.from_load_map(load_map, config, image_files).save(str(map_path))
    return map_path


def build_config(args: argparse.Namespace) -> LoaderConfig:
    """Load the config file and apply command-line overrides."""
    config_path = Path(args.config) if args.config else None
    config = LoaderConfig.load(config_path)

    if args.base is not None:
        config.image_base = int(args.base, 0)
    if args.modules:
        config.module_names = [m.strip() for m in args.modules.split(',') if m.strip()]
    if args.quiet:
        config.verbose = False

    return config


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="NSO Loader - Lay out Nintendo Switch NSO modules in one address space",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('directory', help='ExeFS directory containing the NSO modules')
    parser.add_argument('-o', '--output', type=str, help='Directory for load_map.json and module images')
    parser.add_argument('--version', action='version', version=f'nso_loader {__version__}')
    parser.add_argument('--config', type=str, help='Path to config.json')
    parser.add_argument('--base', type=str, help='Base address of the first module (e.g. 0x8000000)')
    parser.add_argument('--modules', type=str, help='Comma separated module load order')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only print the summary')

    args = parser.parse_args(argv)

    directory = Path(args.directory)
    if not directory.is_dir():
        print(f"ERROR: {directory} is not a directory")
        return 1

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 1

    load_map = load_modules(directory, config)
    print_load_map(load_map)

    if args.output:
        map_path = write_output(load_map, config, Path(args.output))
        print(f"Wrote {map_path}")

    if not load_map.loaded:
        print("ERROR: No modules could be loaded")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
