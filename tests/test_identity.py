import uuid

import pytest

from lowappd.node.identity import (
    InsufficientArgumentsError,
    InvalidIdentifierError,
    NodeArguments,
    PathNotFoundError,
    ResolutionError,
    generate_node_id,
    is_valid_node_id,
    new_node_path,
    resolve_node,
)

from conftest import NODE_ID


def test_explicit_path_exists(node_dir):
    path = str(node_dir / "Nodes" / NODE_ID)
    node = resolve_node(NodeArguments(config=path))
    assert str(node.path) == path
    assert node.created is False


def test_explicit_path_relative_to_directory(node_dir):
    node = resolve_node(
        NodeArguments(config=f"Nodes/{NODE_ID}", directory=str(node_dir))
    )
    assert node.path == node_dir / "Nodes" / NODE_ID


def test_explicit_path_missing_with_directory(node_dir):
    with pytest.raises(PathNotFoundError) as excinfo:
        resolve_node(NodeArguments(config="nowhere", directory=str(node_dir)))
    assert excinfo.value.path == node_dir / "nowhere"


def test_explicit_path_missing_without_directory(tmp_path):
    missing = str(tmp_path / "nowhere")
    with pytest.raises(PathNotFoundError):
        resolve_node(NodeArguments(config=missing))


def test_explicit_path_wins_over_uuid(node_dir):
    path = str(node_dir / "Nodes" / NODE_ID)
    node = resolve_node(
        NodeArguments(config=path, uuid="not-a-uuid", directory=str(node_dir))
    )
    assert str(node.path) == path


def test_uuid_and_directory(node_dir):
    node = resolve_node(NodeArguments(uuid=NODE_ID, directory=str(node_dir)))
    assert node.path == node_dir / "Nodes" / NODE_ID
    assert node.node_id == NODE_ID


def test_uuid_custom_subdir(tmp_path):
    (tmp_path / "sim").mkdir()
    (tmp_path / "sim" / NODE_ID).write_text("")
    node = resolve_node(
        NodeArguments(uuid=NODE_ID, directory=str(tmp_path)), subdir="sim"
    )
    assert node.path == tmp_path / "sim" / NODE_ID


def test_uuid_malformed(node_dir):
    with pytest.raises(InvalidIdentifierError):
        resolve_node(NodeArguments(uuid="not-a-uuid", directory=str(node_dir)))


def test_uuid_well_formed_but_missing(node_dir):
    other = "00000000-0000-0000-0000-000000000000"
    with pytest.raises(PathNotFoundError):
        resolve_node(NodeArguments(uuid=other, directory=str(node_dir)))


def test_no_inputs():
    with pytest.raises(InsufficientArgumentsError):
        resolve_node(NodeArguments())


@pytest.mark.parametrize("args", [
    NodeArguments(uuid=NODE_ID),
    NodeArguments(directory="/tmp"),
])
def test_partial_inputs(args):
    with pytest.raises(InsufficientArgumentsError):
        resolve_node(args)


def test_resolution_errors_share_base():
    for cls in (InvalidIdentifierError, PathNotFoundError, InsufficientArgumentsError):
        assert issubclass(cls, ResolutionError)


def test_generate_without_inputs():
    node = resolve_node(NodeArguments(), generate=True)
    assert node.created is True
    assert is_valid_node_id(node.node_id)
    assert str(node.path) == f"Nodes/{node.node_id}"


def test_generate_under_directory(tmp_path):
    node = resolve_node(NodeArguments(directory=str(tmp_path)), generate=True)
    assert node.path == tmp_path / "Nodes" / node.node_id
    assert not node.path.exists()


def test_generate_does_not_complete_uuid_without_directory():
    with pytest.raises(InsufficientArgumentsError):
        resolve_node(NodeArguments(uuid=NODE_ID), generate=True)


def test_generated_ids_are_canonical_and_unique():
    ids = {generate_node_id() for _ in range(100)}
    assert len(ids) == 100
    for node_id in ids:
        assert len(node_id) == 36
        assert is_valid_node_id(node_id)
        assert uuid.UUID(node_id).version == 4


def test_new_node_path_custom_subdir(tmp_path):
    node = new_node_path(str(tmp_path), subdir="Devices")
    assert node.path.parent == tmp_path / "Devices"


@pytest.mark.parametrize("node_id", [
    NODE_ID,
    NODE_ID.upper(),
])
def test_valid_node_ids(node_id):
    assert is_valid_node_id(node_id)


@pytest.mark.parametrize("node_id", [
    "not-a-uuid",
    "",
    NODE_ID.replace("-", ""),
    "{" + NODE_ID + "}",
    "urn:uuid:" + NODE_ID,
    NODE_ID + "0",
    NODE_ID[:-1] + "g",
    NODE_ID.replace("-", "_"),
])
def test_invalid_node_ids(node_id):
    assert not is_valid_node_id(node_id)


def test_absolute_config_is_looked_up_below_directory(node_dir):
    node = resolve_node(
        NodeArguments(config=f"/Nodes/{NODE_ID}", directory=str(node_dir))
    )
    assert node.path == node_dir / "Nodes" / NODE_ID


def test_absolute_config_missing_below_directory(node_dir):
    with pytest.raises(PathNotFoundError) as excinfo:
        resolve_node(NodeArguments(config="/Nodes/other", directory=str(node_dir)))
    assert excinfo.value.path == node_dir / "Nodes" / "other"


@pytest.mark.parametrize("with_directory", [False, True])
def test_empty_config_is_not_found(node_dir, with_directory):
    directory = str(node_dir) if with_directory else None
    with pytest.raises(PathNotFoundError):
        resolve_node(NodeArguments(config="", directory=directory))


def test_directory_as_config_is_not_found(node_dir):
    with pytest.raises(PathNotFoundError):
        resolve_node(NodeArguments(config=str(node_dir / "Nodes")))
    with pytest.raises(PathNotFoundError):
        resolve_node(NodeArguments(config="Nodes", directory=str(node_dir)))


def test_uuid_naming_a_directory_is_not_found(tmp_path):
    (tmp_path / "Nodes" / NODE_ID).mkdir(parents=True)
    with pytest.raises(PathNotFoundError):
        resolve_node(NodeArguments(uuid=NODE_ID, directory=str(tmp_path)))
