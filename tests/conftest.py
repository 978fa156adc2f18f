import sys
from pathlib import Path

import pytest

# Ensure repository root is on sys.path so tests can import top-level packages
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from lowappd.node.record import my_config  # noqa: E402
from lowappd.settings import Settings  # noqa: E402


NODE_ID = "3f2504e0-4f89-41d3-9a0c-0305e82c3301"

SAMPLE_RECORD = (
    "deviceId:1A\n"
    "groupId:0102\n"
    "gwMask:0A0B0C0D\n"
    "rchanId:03\n"
    "rsf:09\n"
    "preambleTime:1500\n"
    "encKey:000102030405060708090A0B0C0D0E0F\n"
)


@pytest.fixture(autouse=True)
def clean_record():
    """Start and finish every test with a zeroed process-wide record."""
    my_config.clear()
    yield my_config
    my_config.clear()


@pytest.fixture
def settings(tmp_path):
    """Default settings, as if no settings file were installed."""
    return Settings.load(tmp_path / "missing.toml")


@pytest.fixture
def node_dir(tmp_path):
    """A simulation directory holding one node record under Nodes/."""
    nodes = tmp_path / "Nodes"
    nodes.mkdir()
    (nodes / NODE_ID).write_text(SAMPLE_RECORD)
    return tmp_path
