"""
LoWAPP Node Record Files

Reads and writes configuration records on disk.

File Format:
    Plain text, one field per line:

        deviceId:1A
        groupId:0102
        gwMask:0000000F
        rchanId:03
        rsf:09
        preambleTime:1500
        encKey:000102030405060708090A0B0C0D0E0F

    No header, checksum or schema version. Blank lines and lines
    starting with '#' are ignored. Lines that cannot be applied are
    skipped with a warning; loading carries on with the next line.

Record files hold the node key and are written owner read/write only.
"""

import os
import stat
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..crypto import generate_enc_key, key_check_value
from .codec import MalformedValueError, encode_hex
from .identity import PathNotFoundError
from .record import (
    ConfigRecord,
    UnknownKeyError,
    KEY_ENC_KEY,
    my_config,
)


logger = logging.getLogger("lowappd.node")

KEY_VALUE_SEPARATOR = ":"
COMMENT_PREFIX = "#"


@dataclass
class LoadReport:
    """Summary of a record file load."""
    path: Path
    applied: int = 0
    # (line number, line) of every skipped line
    skipped: List[Tuple[int, str]] = field(default_factory=list)


def parse_line(line: str, record: Optional[ConfigRecord] = None) -> bool:
    """
    Apply one "key:value" line to a record.

    Args:
        line: Line from a record file
        record: Target record (default: process-wide record)

    Returns:
        bool: True if the value was set; False if the separator is
            missing, the key unknown or the value malformed
    """
    if record is None:
        record = my_config

    key, sep, value = line.strip().partition(KEY_VALUE_SEPARATOR)
    if not sep:
        return False

    try:
        record.set(key.strip(), value.strip())
    except (UnknownKeyError, MalformedValueError) as e:
        logger.debug(f"Rejected line {line.strip()!r}: {e}")
        return False
    return True


def load_record(path: Path, record: Optional[ConfigRecord] = None) -> LoadReport:
    """
    Load a record file into a record.

    Fields absent from the file keep their current value.

    Args:
        path: Record file
        record: Target record (default: process-wide record)

    Returns:
        LoadReport: Applied and skipped line counts

    Raises:
        PathNotFoundError: If the file does not exist or is not a regular file
    """
    if record is None:
        record = my_config

    path = Path(path)
    if not path.is_file():
        raise PathNotFoundError(path)

    report = LoadReport(path=path)
    with path.open("r", encoding="ascii", errors="replace") as f:
        for lineno, line in enumerate(f, 1):
            stripped = line.strip()
            if not stripped or stripped.startswith(COMMENT_PREFIX):
                continue

            if parse_line(stripped, record):
                report.applied += 1
            else:
                report.skipped.append((lineno, stripped))
                logger.warning(f"{path}:{lineno}: skipping invalid line")

    logger.debug(
        f"Loaded {path}: {report.applied} applied, {len(report.skipped)} skipped"
    )
    return report


def format_record(record: ConfigRecord) -> str:
    """Render a record in file format."""
    return "".join(
        f"{key}{KEY_VALUE_SEPARATOR}{value}\n" for key, value in record.items()
    )


def save_record(path: Path, record: Optional[ConfigRecord] = None) -> None:
    """
    Write a record to disk.

    The file is replaced and its permissions set to 0600.

    Args:
        path: Record file
        record: Source record (default: process-wide record)
    """
    if record is None:
        record = my_config

    path = Path(path)
    path.write_text(format_record(record), encoding="ascii")
    os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)  # 0600


def create_record(
    path: Path,
    defaults: dict,
    record: Optional[ConfigRecord] = None,
) -> ConfigRecord:
    """
    Create a new record file with default values and a fresh key.

    Args:
        path: Record file to create (parent directories are created)
        defaults: Textual values keyed by canonical field name
        record: Record to fill (default: process-wide record)

    Returns:
        ConfigRecord: The filled record

    Raises:
        FileExistsError: If the file already exists
        UnknownKeyError, MalformedValueError: If a default is invalid
    """
    if record is None:
        record = my_config

    path = Path(path)
    if path.exists():
        raise FileExistsError(f"Config file already exists: {path}")

    record.clear()
    for name, value in defaults.items():
        record.set(name, value)

    key = generate_enc_key()
    record.set(KEY_ENC_KEY, encode_hex(key))

    path.parent.mkdir(parents=True, exist_ok=True)
    save_record(path, record)

    logger.info(f"Created config file {path} (key KCV {key_check_value(key)})")
    return record
