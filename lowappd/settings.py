"""
LoWAPP Daemon Settings

Handles loading and validation of daemon settings from a TOML file.
Node parameters themselves live in per-node record files (see node/store.py);
this file only tells the daemon where to find them and what a new node
starts with.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

import toml

from . import DEFAULT_NODE_SUBDIR
from .node.record import (
    FIELDS,
    KEY_DEVICE_ID,
    KEY_GROUP_ID,
    KEY_GW_MASK,
    KEY_RCHAN_ID,
    KEY_RSF,
    KEY_PREAMBLE_TIME,
)
from .node.codec import Encoding


# Default settings path
DEFAULT_SETTINGS_PATH = Path("/etc/lowapp/lowappd.toml")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class NodesSettings:
    """Location of node record files."""
    directory: Optional[Path] = None  # None = working directory
    subdir: str = DEFAULT_NODE_SUBDIR


@dataclass
class NodeDefaults:
    """Field values written into newly created node records."""
    device_id: int = 0x01
    group_id: int = 0x0001
    gw_mask: int = 0x00000001
    rchan_id: int = 0x00
    rsf: int = 9  # SF9
    preamble_time: int = 1500  # ms

    def as_record_values(self) -> Dict[str, str]:
        """
        Render defaults as textual record values.

        Returns:
            dict: Canonical key -> value text, ready for ConfigRecord.set()
        """
        values = {
            KEY_DEVICE_ID: self.device_id,
            KEY_GROUP_ID: self.group_id,
            KEY_GW_MASK: self.gw_mask,
            KEY_RCHAN_ID: self.rchan_id,
            KEY_RSF: self.rsf,
            KEY_PREAMBLE_TIME: self.preamble_time,
        }

        rendered = {}
        for key, value in values.items():
            spec = FIELDS[key]
            if spec.encoding is Encoding.HEX:
                rendered[key] = f"{value:0{spec.text_width}X}"
            else:
                rendered[key] = str(value)
        return rendered

    def validate(self) -> None:
        """
        Check every default fits its field.

        Raises:
            ValueError: If a default is negative or too wide
        """
        for name, key in (
            ("device_id", KEY_DEVICE_ID),
            ("group_id", KEY_GROUP_ID),
            ("gw_mask", KEY_GW_MASK),
            ("rchan_id", KEY_RCHAN_ID),
            ("rsf", KEY_RSF),
            ("preamble_time", KEY_PREAMBLE_TIME),
        ):
            value = getattr(self, name)
            limit = 1 << (8 * FIELDS[key].width)
            if value < 0 or value >= limit:
                raise ValueError(f"Invalid default {name}: {value}")


@dataclass
class Settings:
    """
    Complete daemon settings.
    """
    nodes: NodesSettings = field(default_factory=NodesSettings)
    defaults: NodeDefaults = field(default_factory=NodeDefaults)

    # Paths
    settings_path: Path = field(default_factory=lambda: DEFAULT_SETTINGS_PATH)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @classmethod
    def load(cls, settings_path: Optional[Path] = None) -> 'Settings':
        """
        Load settings from file.

        A missing file yields the defaults.

        Args:
            settings_path: Path to settings file (default: /etc/lowapp/lowappd.toml)

        Returns:
            Loaded settings

        Raises:
            ValueError: If the file is not valid TOML or a value has the wrong type
        """
        path = Path(settings_path or DEFAULT_SETTINGS_PATH)
        settings = cls()
        settings.settings_path = path

        if not path.exists():
            return settings

        try:
            data = toml.load(path)
        except toml.TomlDecodeError as e:
            raise ValueError(f"Cannot parse {path}: {e}") from e

        try:
            settings._apply_dict(data)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid value in {path}: {e}") from e

        return settings

    def _apply_dict(self, data: Dict[str, Any]) -> None:
        """Apply dictionary data to settings."""
        # Top-level settings
        if "log_level" in data:
            self.log_level = str(data["log_level"]).upper()
        if "log_file" in data:
            self.log_file = Path(data["log_file"])

        # Node file locations
        if "nodes" in data:
            n = data["nodes"]
            if "directory" in n:
                self.nodes.directory = Path(n["directory"])
            if "subdir" in n:
                self.nodes.subdir = str(n["subdir"])

        # New node defaults
        if "defaults" in data:
            d = data["defaults"]
            for name in (
                "device_id",
                "group_id",
                "gw_mask",
                "rchan_id",
                "rsf",
                "preamble_time",
            ):
                if name in d:
                    setattr(self.defaults, name, int(d[name]))

    def validate(self) -> None:
        """
        Validate settings.

        Raises:
            ValueError: If settings are invalid
        """
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if not self.nodes.subdir or Path(self.nodes.subdir).is_absolute():
            raise ValueError(f"Invalid node subdirectory: {self.nodes.subdir!r}")

        self.defaults.validate()

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return getattr(logging, self.log_level)
