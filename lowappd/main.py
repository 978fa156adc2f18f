"""
LoWAPP Node Daemon Main Entry Point

Initialises a simulated node:
- Loads daemon settings
- Resolves the node's configuration record from program arguments
- Creates the record when a new node is requested
- Loads the record into the process-wide configuration
"""

import sys
import logging
import argparse
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from . import __version__
from .crypto import key_check_value
from .settings import Settings, DEFAULT_SETTINGS_PATH
from .node.identity import NodeArguments, ResolvedNode, ResolutionError, resolve_node
from .node.codec import MalformedValueError
from .node.record import ConfigRecord, UnknownKeyError, my_config
from .node.store import create_record, load_record


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
)
logger = logging.getLogger("lowappd")


def node_init(
    args: NodeArguments,
    settings: Settings,
    generate: bool = False,
    record: Optional[ConfigRecord] = None,
) -> ResolvedNode:
    """
    Initialise a node by analysing its identity arguments.

    Args:
        args: Identity inputs (config path, uuid, directory)
        settings: Daemon settings
        generate: Create a new node when no identity is given
        record: Record to fill (default: process-wide record)

    Returns:
        ResolvedNode: Where the node's record lives

    Raises:
        ResolutionError: If no record can be located
    """
    if record is None:
        record = my_config

    if args.directory is None and settings.nodes.directory is not None:
        args = replace(args, directory=str(settings.nodes.directory))

    node = resolve_node(args, subdir=settings.nodes.subdir, generate=generate)

    if node.created:
        logger.info(f"Generated node ID {node.node_id}")
        create_record(node.path, settings.defaults.as_record_values(), record)

    report = load_record(node.path, record)
    if report.skipped:
        logger.warning(
            f"{len(report.skipped)} invalid line(s) ignored in {node.path}"
        )

    return node


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse program arguments."""
    parser = argparse.ArgumentParser(description="LoWAPP simulated node")
    parser.add_argument(
        "-c", "--config",
        help="Node configuration file (absolute, or relative to --directory)",
    )
    parser.add_argument(
        "-u", "--uuid",
        help="Node UUID, looked up in <directory>/<subdir>/",
    )
    parser.add_argument(
        "-d", "--directory",
        help="Base directory of the simulation",
    )
    parser.add_argument(
        "--new",
        action="store_true",
        help="Create a new node with a fresh UUID when none is given",
    )
    parser.add_argument(
        "-s", "--settings",
        type=Path,
        default=DEFAULT_SETTINGS_PATH,
        help="Daemon settings file path",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"lowappd {__version__}",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Load settings
    try:
        settings = Settings.load(args.settings)
        settings.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    # Set log level
    logging.getLogger().setLevel(
        logging.DEBUG if args.verbose else settings.log_level_value
    )

    if settings.log_file:
        try:
            handler = logging.FileHandler(settings.log_file)
        except OSError as e:
            logger.error(f"Cannot open log file {settings.log_file}: {e}")
            return 1
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(handler)

    logger.info(f"Starting LoWAPP node v{__version__}")

    node_args = NodeArguments(
        config=args.config,
        uuid=args.uuid,
        directory=args.directory,
    )

    try:
        node = node_init(node_args, settings, generate=args.new)
    except ResolutionError as e:
        logger.critical(str(e))
        return 1
    except (OSError, UnknownKeyError, MalformedValueError) as e:
        logger.critical(f"Node initialisation failed: {e}")
        return 1

    logger.info(f"Node config: {node.path}")
    if node.node_id:
        logger.info(f"Node ID: {node.node_id}")
    logger.info(f"{my_config!r} encKey KCV {key_check_value(my_config.enc_key)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
