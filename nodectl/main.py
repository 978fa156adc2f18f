#!/usr/bin/env python3
"""
nodectl - LoWAPP Node Configuration CLI

Command-line interface for inspecting and editing node record files.

Usage:
    nodectl keys              - List configuration keys
    nodectl show FILE         - Show every field of a node record
    nodectl get FILE KEY      - Print one value
    nodectl set FILE KEY VAL  - Change one value
    nodectl new               - Create a new node record
"""

import sys
import argparse
from pathlib import Path
from typing import Optional

from lowappd import __version__
from lowappd.crypto import key_check_value
from lowappd.settings import Settings, DEFAULT_SETTINGS_PATH
from lowappd.node.codec import MalformedValueError
from lowappd.node.identity import PathNotFoundError, new_node_path
from lowappd.node.record import FIELDS, KEY_ENC_KEY, UnknownKeyError, my_config
from lowappd.node.store import LoadReport, create_record, load_record, save_record


class NodeCtl:
    """nodectl CLI application."""

    def __init__(self, settings: Settings):
        """Initialize CLI with daemon settings."""
        self.settings = settings

    def _load(self, path: Path) -> Optional[LoadReport]:
        my_config.clear()
        try:
            return load_record(path)
        except (PathNotFoundError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return None

    def keys(self) -> int:
        """List configuration keys."""
        print(f"{'Key':<14} {'Bytes':<6} {'Encoding':<10} {'Text':<6}")
        print("-" * 40)

        for spec in FIELDS.values():
            text_width = spec.text_width or "var"
            print(
                f"{spec.key:<14} {spec.width:<6} "
                f"{spec.encoding.value:<10} {text_width:<6}"
            )

        return 0

    def show(self, path: Path) -> int:
        """Show every field of a node record."""
        if self._load(path) is None:
            return 1

        print(f"Node Config: {path}")
        print("=" * 50)
        for key, value in my_config.items():
            if key == KEY_ENC_KEY:
                value = f"{'*' * 8} (KCV {key_check_value(my_config.enc_key)})"
            print(f"{key + ':':<14} {value}")

        return 0

    def get(self, path: Path, key: str) -> int:
        """Print one value."""
        if self._load(path) is None:
            return 1

        try:
            print(my_config.get(key))
        except UnknownKeyError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        return 0

    def set(self, path: Path, key: str, value: str) -> int:
        """Change one value and write the record back.

        The file is rewritten in canonical form, so comments are not kept.
        Files with invalid lines are left alone rather than silently cleaned.
        """
        report = self._load(path)
        if report is None:
            return 1

        if report.skipped:
            lines = ", ".join(str(lineno) for lineno, _ in report.skipped)
            print(
                f"Error: {path} has invalid lines ({lines}); fix them first",
                file=sys.stderr,
            )
            return 1

        try:
            my_config.set(key, value)
        except (UnknownKeyError, MalformedValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        try:
            save_record(path)
        except OSError as e:
            print(f"Failed to write {path}: {e}", file=sys.stderr)
            return 1

        print(f"{key} = {my_config.get(key)}")
        return 0

    def new(self, directory: Optional[str], subdir: Optional[str]) -> int:
        """Create a new node record with a fresh identifier."""
        if directory is None and self.settings.nodes.directory is not None:
            directory = str(self.settings.nodes.directory)

        node = new_node_path(directory, subdir or self.settings.nodes.subdir)

        try:
            create_record(node.path, self.settings.defaults.as_record_values())
        except OSError as e:
            print(f"Failed to create {node.path}: {e}", file=sys.stderr)
            return 1

        print(f"Node ID: {node.node_id}")
        print(f"Config:  {node.path}")
        return 0


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="LoWAPP node configuration CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-s", "--settings",
        type=Path,
        default=DEFAULT_SETTINGS_PATH,
        help="Daemon settings file path",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"nodectl {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    # keys command
    subparsers.add_parser("keys", help="List configuration keys")

    # show command
    show_parser = subparsers.add_parser("show", help="Show a node record")
    show_parser.add_argument("file", type=Path, help="Node record file")

    # get command
    get_parser = subparsers.add_parser("get", help="Print one value")
    get_parser.add_argument("file", type=Path, help="Node record file")
    get_parser.add_argument("key", help="Configuration key")

    # set command
    set_parser = subparsers.add_parser(
        "set",
        help="Change one value (rewrites the file; comments are not kept)",
    )
    set_parser.add_argument("file", type=Path, help="Node record file")
    set_parser.add_argument("key", help="Configuration key")
    set_parser.add_argument("value", help="New value (hex, or decimal for preambleTime)")

    # new command
    new_parser = subparsers.add_parser("new", help="Create a new node record")
    new_parser.add_argument(
        "-d", "--directory",
        help="Base directory of the simulation",
    )
    new_parser.add_argument(
        "--subdir",
        help="Node subdirectory (default from settings)",
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings = Settings.load(args.settings)
        settings.validate()
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    # Create CLI instance
    cli = NodeCtl(settings)

    # Dispatch command
    if args.command == "keys":
        return cli.keys()
    elif args.command == "show":
        return cli.show(args.file)
    elif args.command == "get":
        return cli.get(args.file, args.key)
    elif args.command == "set":
        return cli.set(args.file, args.key, args.value)
    elif args.command == "new":
        return cli.new(args.directory, args.subdir)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
