"""Tests for walking preference trees with the generic traversers."""

import pytest

from dazzleprefs import InvalidStateError, subtree_paths, walk
from dazzleprefs.adapter import PreferenceAdapter
from dazzleprefs.core import (
    BreadthFirstTraverser,
    DepthFirstPostOrderTraverser,
    DepthFirstPreOrderTraverser,
    create_traverser,
)


@pytest.fixture
def populated(root):
    """Tree layout:

    /
    ├── a/
    │   ├── b/
    │   │   └── d/
    │   └── c/
    └── e/
    """
    root.node("e")
    root.node("a/c")
    root.node("a/b/d")
    return root


class TestSubtreePaths:
    """Test traversal order through the functional API."""

    def test_depth_first_pre_order(self, populated):
        assert subtree_paths(populated) == ["/", "/a", "/a/b", "/a/b/d", "/a/c", "/e"]

    def test_breadth_first(self, populated):
        assert subtree_paths(populated, "bfs") == ["/", "/a", "/e", "/a/b", "/a/c", "/a/b/d"]

    def test_depth_first_post_order(self, populated):
        assert subtree_paths(populated, "dfs_post") == ["/a/b/d", "/a/b", "/a/c", "/a", "/e", "/"]

    def test_from_inner_node(self, populated):
        assert subtree_paths(populated.node("a")) == ["/a", "/a/b", "/a/b/d", "/a/c"]

    def test_max_depth(self, populated):
        nodes = walk(populated, max_depth=1)
        assert [node.absolute_path() for node in nodes] == ["/", "/a", "/e"]

    def test_walk_returns_live_handles(self, populated):
        nodes = walk(populated)
        assert nodes[1] is populated.node("a")

    def test_unknown_strategy(self, populated):
        with pytest.raises(ValueError):
            walk(populated, "sideways")

    def test_walk_removed_node(self, populated):
        a = populated.node("a")
        a.remove_node()
        with pytest.raises(InvalidStateError):
            walk(a)


class TestTraversers:
    """Test the traverser classes directly."""

    def test_factory(self):
        adapter = PreferenceAdapter()
        assert isinstance(create_traverser("bfs", adapter), BreadthFirstTraverser)
        assert isinstance(create_traverser("DFS_PRE", adapter), DepthFirstPreOrderTraverser)
        assert isinstance(create_traverser("depth_first_post", adapter), DepthFirstPostOrderTraverser)

    def test_depths_are_relative(self, populated):
        traverser = DepthFirstPreOrderTraverser(PreferenceAdapter())
        depths = {node.absolute_path(): depth for node, depth in traverser.traverse(populated.node("a"))}
        assert depths == {"/a": 0, "/a/b": 1, "/a/b/d": 2, "/a/c": 1}


class TestPreferenceAdapter:
    """Test navigation through the adapter."""

    def test_children_sorted(self, populated):
        adapter = PreferenceAdapter()
        assert [child.name() for child in adapter.get_children(populated)] == ["a", "e"]

    def test_depth_and_ancestors(self, populated):
        adapter = PreferenceAdapter()
        d = populated.node("a/b/d")
        assert adapter.get_depth(d) == 3
        assert adapter.get_depth(populated) == 0
        assert [node.absolute_path() for node in adapter.get_ancestors(d)] == ["/", "/a", "/a/b"]
        assert list(adapter.get_ancestors(populated)) == []

    def test_removed_node_is_isolated(self, populated):
        adapter = PreferenceAdapter()
        b = populated.node("a/b")
        b.remove_node()
        assert list(adapter.get_children(b)) == []
        assert adapter.get_parent(b) is None
        assert b.is_leaf()
