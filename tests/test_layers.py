"""Tests for acorn2svg.layers hierarchy construction."""

from acorn2svg.layers import ROOT_NAME, build_layer_tree, format_tree
from acorn2svg.model import LayerRecord


def record(layer_id, parent_id=None, name=None, uti="public.png"):
    return LayerRecord(id=layer_id, parent_id=parent_id, uti=uti, name=name or layer_id)


class TestBuildLayerTree:
    """Tests for assembling flat records into a tree."""

    def test_top_level_layers_under_root(self) -> None:
        """Records without a parent hang off the synthetic root."""
        root = build_layer_tree([record("a"), record("b")])
        assert root.is_root
        assert root.name == ROOT_NAME
        assert [c.id for c in root.children] == ["a", "b"]

    def test_children_keep_sequence_order(self) -> None:
        """Children appear in the order their records arrived."""
        records = [record("g"), record("c2", "g"), record("c1", "g"), record("c3", "g")]
        root = build_layer_tree(records)
        group = root.children[0]
        assert [c.id for c in group.children] == ["c2", "c1", "c3"]

    def test_child_before_parent(self) -> None:
        """A child may be listed before its parent."""
        root = build_layer_tree([record("c", "g"), record("g")])
        assert root.children[0].children[0].id == "c"

    def test_nested_groups(self) -> None:
        """Grandchildren nest under their parent."""
        records = [record("g"), record("h", "g"), record("leaf", "h")]
        root = build_layer_tree(records)
        assert [n.id for n in root.walk()] == [None, "g", "h", "leaf"]

    def test_orphans_are_reported_and_dropped(self) -> None:
        """A record whose parent is missing is dropped with its subtree."""
        messages = []
        records = [record("a"), record("lost", "missing", name="Lost"), record("deep", "lost")]
        root = build_layer_tree(records, warn=messages.append)
        assert [n.id for n in root.walk()] == [None, "a"]
        assert messages == ["Cannot find parent of child layer (Lost), dropping it"]

    def test_bytes_ids(self) -> None:
        """Opaque byte ids work as well as strings."""
        root = build_layer_tree([record(b"\x01"), record(b"\x02", b"\x01")])
        assert root.children[0].children[0].id == b"\x02"


class TestFormatTree:
    """Tests for the plain-text tree rendering."""

    def test_indented_lines(self) -> None:
        root = build_layer_tree([record("g", uti="group"), record("c", "g", uti="shape")])
        assert format_tree(root).splitlines() == [
            "<root>: None",
            "  g: group",
            "    c: shape",
        ]
