"""Tests for PreferenceNode navigation and value access.

Every test runs against both the user and the system root.
"""

import threading

import pytest

from dazzleprefs import (
    MAX_KEY_LENGTH,
    MAX_VALUE_LENGTH,
    MAX_NAME_LENGTH,
    NullInputError,
    InvalidArgumentError,
)
from dazzleprefs.codec import MAX_BYTES_LENGTH


class TestRoot:
    """Test root node identity."""

    def test_root_name_and_path(self, root):
        assert root.name() == ""
        assert root.absolute_path() == "/"

    def test_root_has_no_parent(self, root):
        assert root.parent() is None
        assert root.node("/").parent() is None
        assert root.node("/") is root

    def test_user_node(self, scoped_root):
        root, _, is_user = scoped_root
        assert root.is_user_node() is is_user
        assert root.node("a").is_user_node() is is_user


class TestPutGet:
    """Test string and typed values."""

    def test_put_valid(self, root):
        root.put("string", "value")
        root.put_boolean("boolean", True)
        root.put_byte_array("bytes", b"value")
        root.put_double("double", 1.0)
        root.put_float("float", 1.0)
        root.put_int("integer", 1)
        root.put_long("long", 1)
        assert len(root.keys()) == 7

    def test_put_invalid(self, root):
        a = "a" * MAX_KEY_LENGTH
        b = "b" * (MAX_KEY_LENGTH + 1)
        v = "v" * (MAX_VALUE_LENGTH + 1)

        with pytest.raises(InvalidArgumentError):
            root.put(a, v)
        with pytest.raises(InvalidArgumentError):
            root.put(a, "\u0000")
        with pytest.raises(InvalidArgumentError):
            root.put(b, "value")
        with pytest.raises(NullInputError):
            root.put(a, None)
        with pytest.raises(NullInputError):
            root.put(None, "value")

    def test_rejected_put_leaves_node_unchanged(self, root):
        root.put("k", "original")
        with pytest.raises(InvalidArgumentError):
            root.put("k", "v" * (MAX_VALUE_LENGTH + 1))
        assert root.get("k") == "original"
        assert root.keys() == ["k"]

    def test_typed_getters_parse_strings(self, root):
        root.put("string", "value")
        root.put("boolean", "true")
        root.put("double", "1.0")
        root.put("float", "1.0")
        root.put("integer", "1")
        root.put("long", "1")

        assert root.get("string", None) == "value"
        assert root.get_int("integer", 0) == 1
        assert root.get_double("double", 0.0) == 1.0
        assert root.get_float("float", 0.0) == 1.0
        assert root.get_long("long", 0) == 1
        assert root.get_boolean("boolean", False) is True

    def test_typed_round_trips(self, root):
        root.put_int("i", -5)
        root.put_long("l", 2 ** 40)
        root.put_double("d", 0.1)
        root.put_boolean("b", False)
        root.put_byte_array("ba", bytes(range(256)))

        assert root.get_int("i", 0) == -5
        assert root.get_long("l", 0) == 2 ** 40
        assert root.get_double("d", 0.0) == 0.1
        assert root.get_boolean("b", True) is False
        assert root.get_byte_array("ba", None) == bytes(range(256))

    def test_corrupt_values_fall_back_to_default(self, root):
        root.put("n", "not a number")
        assert root.get_int("n", 7) == 7
        assert root.get_long("n", 7) == 7
        assert root.get_double("n", 7.5) == 7.5
        assert root.get_boolean("n", True) is True
        assert root.get_byte_array("n", b"x") == b"x"
        assert root.get_int("missing", 3) == 3

    def test_get_default(self, root):
        assert root.get("missing") is None
        assert root.get("missing", "fallback") == "fallback"
        with pytest.raises(NullInputError):
            root.get(None, "x")

    def test_put_byte_array_limit(self, root):
        root.put_byte_array("key", b"\xab" * MAX_BYTES_LENGTH)
        assert root.get_byte_array("key", None) == b"\xab" * MAX_BYTES_LENGTH

        with pytest.raises(InvalidArgumentError):
            root.put_byte_array("key", b"\xab" * (MAX_BYTES_LENGTH + 1))

    def test_overwrite_keeps_position(self, root):
        root.put("a", "1")
        root.put("b", "2")
        root.put("a", "3")
        assert root.keys() == ["a", "b"]
        assert root.get("a") == "3"


class TestRemoveAndClear:
    """Test removing keys."""

    def test_remove(self, root):
        root.put("a", "value")
        root.put("b", "another value")

        root.remove("a")
        root.remove("c")

        assert root.get("a") is None
        assert root.get("b", None) == "another value"

    def test_remove_invalid(self, root):
        with pytest.raises(InvalidArgumentError):
            root.remove("\u0000")
        with pytest.raises(NullInputError):
            root.remove(None)

    def test_clear(self, root):
        a = root.node("a")
        a.put("a", "a")

        root.put("a", "a")
        root.put("b", "b")
        assert root.get("a", None) == "a"
        assert root.get("b", None) == "b"

        root.clear()

        assert a.get("a", None) == "a"
        assert root.get("a", None) is None
        assert root.get("b", None) is None
        assert root.node_exists("a")


class TestKeys:
    """Test key enumeration."""

    def test_keys_in_insertion_order(self, root):
        root.put_int("a", 1)
        root.put_long("b", 2)
        root.put_boolean("c", True)

        assert root.keys() == ["a", "b", "c"]

    def test_empty(self, root):
        assert root.keys() == []

    def test_items(self, root):
        root.put("x", "1")
        root.put("y", "2")
        assert root.items() == [("x", "1"), ("y", "2")]


class TestNavigation:
    """Test node(), node_exists(), children_names() and paths."""

    def test_children_names(self, root):
        a = root.node("a")
        a.node("b")

        assert root.children_names() == ["a"]
        assert a.children_names() == ["b"]

    def test_children_names_sorted_unique(self, root):
        for name in ["c", "a", "b", "a"]:
            root.node(name)
        assert root.children_names() == ["a", "b", "c"]

    def test_node_is_interned(self, root):
        assert root.node("a/b") is root.node("a").node("b")
        assert root.node("a").node("/a/b") is root.node("a/b")
        assert root.node("a").node("") is root.node("a")

    def test_node_exceptions(self, root):
        a = root.node("a")
        a.node("b")
        assert root.node_exists("a/b")

        with pytest.raises(InvalidArgumentError):
            root.node("a//b")
        with pytest.raises(InvalidArgumentError):
            root.node("/a//b")
        with pytest.raises(InvalidArgumentError):
            root.node("/a/b/")
        with pytest.raises(NullInputError):
            root.node(None)

    def test_node_exists_does_not_create(self, root):
        assert not root.node_exists("x/y")
        assert not root.node_exists("x")
        assert root.children_names() == []
        assert root.node_exists("")
        assert root.node_exists("/")

    def test_parent(self, root):
        a = root.node("a")
        assert a.parent() is root
        assert root.node("a/b").parent() is a

    def test_node_name(self, root):
        a = root.node("a")
        b = root.node("a/b")
        c = root.node("a").node("b").node("c")
        d = root.node(" ").node(" ").node(" ").node("d")

        assert root.name() == ""
        assert a.name() == "a"
        assert b.name() == "b"
        assert c.name() == "c"
        assert d.name() == "d"

    def test_node_name_length(self, root):
        root.node("n" * MAX_NAME_LENGTH)
        with pytest.raises(InvalidArgumentError):
            root.node("n" * (MAX_NAME_LENGTH + 1))

    def test_absolute_path(self, root):
        a = root.node("a")
        b = root.node("a/b")
        c = root.node("a").node("b").node("c")
        d = root.node(" ").node(" ").node(" ").node("d")

        assert root.absolute_path() == "/"
        assert a.absolute_path() == "/a"
        assert b.absolute_path() == "/a/b"
        assert c.absolute_path() == "/a/b/c"
        assert d.absolute_path() == "/ / / /d"

    def test_scopes_are_independent(self, tree):
        tree.user_root().node("only-user").put("k", "v")
        assert not tree.system_root().node_exists("only-user")
        assert tree.system_root().node("only-user").get("k") is None

    def test_metadata_and_repr(self, root):
        node = root.node("a/b")
        node.put("k", "v")
        meta = node.metadata()
        assert meta["path"] == "/a/b"
        assert meta["key_count"] == 1
        assert meta["child_count"] == 0
        assert meta["removed"] is False
        assert "/a/b" in repr(node)


class TestConcurrency:
    """Test that concurrent mutation keeps the maps consistent."""

    def test_parallel_node_creation_and_puts(self, root):
        def worker(index):
            for i in range(50):
                node = root.node(f"shared/n{i % 10}")
                node.put(f"w{index}-{i}", str(i))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        shared = root.node("shared")
        assert shared.children_names() == [f"n{i}" for i in range(10)]
        total = sum(len(shared.node(name).keys()) for name in shared.children_names())
        assert total == 8 * 50
