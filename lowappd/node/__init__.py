"""
LoWAPP Node Configuration

- codec     : Text <-> fixed-width binary field conversions
- record    : The node configuration record and its key/value API
- identity  : Node identifier validation and record path resolution
- store     : Record files on disk
"""

from .codec import (
    Encoding,
    MalformedValueError,
)

from .record import (
    ConfigRecord,
    ConfigRecordError,
    UnknownKeyError,
    FieldSpec,
    FIELDS,
    my_config,
    get_config,
    set_config,
)

from .identity import (
    NodeArguments,
    ResolvedNode,
    ResolutionError,
    InvalidIdentifierError,
    PathNotFoundError,
    InsufficientArgumentsError,
    generate_node_id,
    is_valid_node_id,
    resolve_node,
)

from .store import (
    LoadReport,
    parse_line,
    load_record,
    save_record,
    create_record,
)

__all__ = [
    # Codec
    'Encoding',
    'MalformedValueError',
    # Record
    'ConfigRecord',
    'ConfigRecordError',
    'UnknownKeyError',
    'FieldSpec',
    'FIELDS',
    'my_config',
    'get_config',
    'set_config',
    # Identity
    'NodeArguments',
    'ResolvedNode',
    'ResolutionError',
    'InvalidIdentifierError',
    'PathNotFoundError',
    'InsufficientArgumentsError',
    'generate_node_id',
    'is_valid_node_id',
    'resolve_node',
    # Store
    'LoadReport',
    'parse_line',
    'load_record',
    'save_record',
    'create_record',
]
