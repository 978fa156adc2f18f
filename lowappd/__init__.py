"""
LoWAPP Simulated Node - Configuration Daemon

Per-node configuration store for a simulated LoWAPP device.

This package contains:
- node/      : Configuration record, field codec, identity resolution, record files
- crypto     : Key helpers (random keys, key check values)
- settings   : Daemon settings (TOML)

Copyright (c) 2016-2026 LoWAPP Simulation Project
License: Open Source (see LICENSE)
"""

__version__ = "0.1.0"
__author__ = "LoWAPP Simulation Project"

# Core constants
NODE_ID_LENGTH = 16  # bytes
ENC_KEY_LENGTH = 16  # bytes (AES-128)
DEFAULT_NODE_SUBDIR = "Nodes"
