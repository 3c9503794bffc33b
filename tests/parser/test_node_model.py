import pytest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..")))

from pydantic import ValidationError

from basm.exceptions import InternalCompilerError
from basm.parser.core.classes import LEAF_KINDS, Node, NodeData, NodeKind, make_leaf, make_node


@pytest.mark.parametrize("kind", sorted(LEAF_KINDS - {NodeKind.NULL_DATA}, key=lambda k: k.value))
def test_payload_leaves_require_a_value(kind):
    with pytest.raises(ValidationError):
        NodeData(kind=kind)
    assert NodeData(kind=kind, value="x").value == "x"


@pytest.mark.parametrize("kind", [NodeKind.ROOT, NodeKind.TARGET, NodeKind.SEM_VER, NodeKind.NULL_DATA])
def test_non_payload_kinds_reject_a_value(kind):
    with pytest.raises(ValidationError):
        NodeData(kind=kind, value="x")


def test_leaf_cannot_be_built_with_children():
    with pytest.raises(ValidationError):
        Node(data=NodeData(kind=NodeKind.STRING_DATA, value="a"), children=[make_node(NodeKind.ROOT, 1)], line=1)


def test_leaf_cannot_be_appended_to():
    leaf = make_leaf(NodeKind.NULL_DATA, None, 4)
    with pytest.raises(InternalCompilerError):
        leaf.append(make_node(NodeKind.VM, 4))


def test_node_data_is_frozen():
    data = NodeData(kind=NodeKind.STRING_DATA, value="a")
    with pytest.raises(ValidationError):
        data.value = "b"


def test_append_keeps_order():
    root = make_node(NodeKind.ROOT, 1)
    first = root.append(make_node(NodeKind.SEM_VER, 1))
    second = root.append(make_node(NodeKind.VM, 2))
    assert root.children == [first, second]
    assert root.kind is NodeKind.ROOT


def test_tree_dumps_to_plain_json_data():
    node = make_node(NodeKind.SEM_VER, 1)
    node.append(make_leaf(NodeKind.STRING_DATA, "3.0.0", 1))
    assert node.model_dump(mode="json") == {
        "data": {"kind": "SemVer", "value": None},
        "children": [{"data": {"kind": "StringData", "value": "3.0.0"}, "children": [], "line": 1}],
        "line": 1,
    }
