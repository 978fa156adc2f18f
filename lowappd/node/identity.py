"""
LoWAPP Node Identity Resolution

Decides which configuration record a node runs with.

Resolution Modes (mutually exclusive, checked in order):
    1. Explicit path   - config given: use it as is, or below directory
    2. Identifier      - uuid + directory: <directory>/<subdir>/<uuid>
    3. Generated       - no identity given and generation enabled:
                         a fresh identifier under <directory>/<subdir>/

Any other combination is rejected. Every failure here is fatal for
node start-up; resolution is deterministic and never retried.
"""

import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .. import DEFAULT_NODE_SUBDIR, NODE_ID_LENGTH
from ..crypto import random_bytes


class ResolutionError(Exception):
    """Exception raised when no configuration record can be resolved."""
    pass


class InvalidIdentifierError(ResolutionError):
    """The node identifier is not a canonical 36-character UUID string."""
    pass


class PathNotFoundError(ResolutionError):
    """The resolved configuration record does not exist or is not a file."""

    def __init__(self, path: Path):
        super().__init__(f"The config file ({path}) does not exist")
        self.path = path


class InsufficientArgumentsError(ResolutionError):
    """No usable combination of inputs was given."""
    pass


# 8-4-4-4-12 hex digits
_NODE_ID_RE = re.compile(
    r"[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}"
)


@dataclass
class NodeArguments:
    """Identity inputs of a node, as given on the command line."""
    config: Optional[str] = None
    uuid: Optional[str] = None
    directory: Optional[str] = None


@dataclass
class ResolvedNode:
    """Outcome of identity resolution."""
    path: Path
    node_id: Optional[str] = None
    created: bool = False  # True when the record must be written first


def is_valid_node_id(node_id: str) -> bool:
    """Check that a string is a canonical hyphenated 128-bit identifier."""
    return _NODE_ID_RE.fullmatch(node_id) is not None


def generate_node_id() -> str:
    """
    Generate a fresh node identifier.

    Returns:
        str: Random (version 4) UUID in canonical lowercase form
    """
    return str(uuid.UUID(bytes=random_bytes(NODE_ID_LENGTH), version=4))


def new_node_path(
    directory: Optional[str] = None,
    subdir: str = DEFAULT_NODE_SUBDIR,
) -> ResolvedNode:
    """
    Fabricate an identifier and the path its record should be written to.

    The path is a destination; it is not checked for existence.
    """
    node_id = generate_node_id()
    base = Path(directory) if directory else Path()
    return ResolvedNode(path=base / subdir / node_id, node_id=node_id, created=True)


def resolve_node(
    args: NodeArguments,
    subdir: str = DEFAULT_NODE_SUBDIR,
    generate: bool = False,
) -> ResolvedNode:
    """
    Resolve the configuration record for a node.

    Args:
        args: Identity inputs
        subdir: Node subdirectory below the base directory
        generate: Fabricate a new identity when none is given

    Returns:
        ResolvedNode: Record path, identifier if known, creation flag

    Raises:
        PathNotFoundError: If the explicit or composed path does not exist
        InvalidIdentifierError: If the identifier is malformed
        InsufficientArgumentsError: If the inputs cannot locate a record
    """
    if args.config is not None:
        path = Path(args.config)
        if path.is_file():
            return ResolvedNode(path=path)

        # Not relative to the working directory, try below the node directory
        if args.directory is not None:
            path = Path(args.directory) / args.config.lstrip("/")
            if path.is_file():
                return ResolvedNode(path=path)

        raise PathNotFoundError(path)

    if args.uuid is not None and args.directory is not None:
        if not is_valid_node_id(args.uuid):
            raise InvalidIdentifierError(
                f"The UUID passed as parameter is not valid: {args.uuid!r}"
            )

        path = Path(args.directory) / subdir / args.uuid
        if not path.is_file():
            raise PathNotFoundError(path)
        return ResolvedNode(path=path, node_id=args.uuid)

    if generate and args.uuid is None:
        return new_node_path(args.directory, subdir)

    raise InsufficientArgumentsError(
        "Not enough parameters were sent to the program. "
        "For correct usage, see --help option"
    )
