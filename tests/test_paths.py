"""Tests for the path grammar and resolver."""

import types as _types

import pytest as _pytest

import gluestate.paths as paths


class TestMissing:
    """Tests for the MISSING sentinel."""

    def test_is_singleton(self) -> None:
        assert paths._Missing() is paths.MISSING

    def test_is_falsy_and_not_none(self) -> None:
        assert not paths.MISSING
        assert paths.MISSING is not None

    def test_repr(self) -> None:
        assert repr(paths.MISSING) == "MISSING"


class TestKeyHelpers:
    """Tests for normalize_key, is_root, is_generic and base_key."""

    def test_normalize_strips_all_whitespace(self) -> None:
        assert paths.normalize_key(" a . b [ 1 ] ") == "a.b[1]"

    def test_root_keys(self) -> None:
        assert paths.is_root("") is True
        assert paths.is_root("*") is True
        assert paths.is_root("a") is False

    def test_generic_keys(self) -> None:
        assert paths.is_generic("items[]") is True
        assert paths.is_generic("items[0]") is False
        assert paths.is_generic("items") is False

    def test_base_key_strips_one_bracket_group(self) -> None:
        assert paths.base_key("a.b[3]") == "a.b"
        assert paths.base_key("arr[]") == "arr"
        assert paths.base_key("m[1][2]") == "m[1]"
        assert paths.base_key("plain") == "plain"


class TestParsePath:
    """Tests for parse_path."""

    def test_properties_and_indices(self) -> None:
        assert paths.parse_path("a.items[2].name") == ("a", "items", 2, "name")

    def test_root_list_index(self) -> None:
        assert paths.parse_path("[0]") == (0,)

    def test_nested_indices(self) -> None:
        assert paths.parse_path("m[1][2]") == ("m", 1, 2)

    def test_root_paths_are_empty(self) -> None:
        assert paths.parse_path("") == ()
        assert paths.parse_path("*") == ()

    @_pytest.mark.parametrize("bad", ["a..b", "a.", ".a", "a[x]", "a[1", "a]1[", "a[-1]"])
    def test_malformed_paths_raise(self, bad: str) -> None:
        with _pytest.raises(paths.InvalidPathError) as exc_info:
            paths.parse_path(bad)
        assert exc_info.value.path == bad

    def test_invalid_path_error_is_value_error(self) -> None:
        with _pytest.raises(ValueError):
            paths.parse_path("a..b")

    def test_path_text_is_never_evaluated(self) -> None:
        with _pytest.raises(paths.InvalidPathError):
            paths.parse_path("a[__import__('os')]")


class TestSplitKeysAndOperations:
    """Tests for registration string parsing."""

    def test_keys_and_operations(self) -> None:
        keys, ops = paths.split_keys_and_operations("a, b[]:set,push")
        assert keys == ["a", "b[]"]
        assert ops == ["set", "push"]

    def test_no_operations(self) -> None:
        assert paths.split_keys_and_operations("a.b") == (["a.b"], [])

    def test_empty_key_part(self) -> None:
        assert paths.split_keys_and_operations(":set") == ([""], ["set"])
        assert paths.split_keys_and_operations("") == ([""], [])


class TestPermutateKey:
    """Tests for permutate_key."""

    def test_indexed_prefixes(self) -> None:
        result = paths.permutate_key("a[1].b[2].c")
        assert result == [
            paths.KeyPermutation("a[1]", "a[]", 1),
            paths.KeyPermutation("a[1].b[2]", "a[1].b[]", 2),
        ]

    def test_no_indices(self) -> None:
        assert paths.permutate_key("a.b.c") == []

    def test_root_index(self) -> None:
        assert paths.permutate_key("[3]") == [paths.KeyPermutation("[3]", "[]", 3)]


class TestResolve:
    """Tests for read resolution."""

    def test_nested_mapping(self) -> None:
        assert paths.resolve("a.b.c", {"a": {"b": {"c": 1}}}) == 1

    def test_list_index(self) -> None:
        assert paths.resolve("items[1].name", {"items": [{"name": "x"}, {"name": "y"}]}) == "y"

    def test_root(self) -> None:
        target = {"a": 1}
        assert paths.resolve("", target) is target
        assert paths.resolve("*", target) is target

    def test_absent_key_is_missing(self) -> None:
        assert paths.resolve("a.x", {"a": {}}) is paths.MISSING

    def test_through_none_is_missing(self) -> None:
        assert paths.resolve("a.b", {"a": None}) is paths.MISSING

    def test_none_leaf_is_none(self) -> None:
        assert paths.resolve("a", {"a": None}) is None

    def test_index_out_of_range_is_missing(self) -> None:
        assert paths.resolve("[5]", [1, 2]) is paths.MISSING

    def test_malformed_path_is_missing(self) -> None:
        assert paths.resolve("a..b", {"a": 1}) is paths.MISSING

    def test_attribute_access(self) -> None:
        target = _types.SimpleNamespace(user=_types.SimpleNamespace(name="ada"))
        assert paths.resolve("user.name", target) == "ada"

    def test_no_attributes_on_scalars(self) -> None:
        assert paths.resolve("a.real", {"a": 5}) is paths.MISSING
        assert paths.resolve("s.upper", {"s": "x"}) is paths.MISSING


class TestResolveForWrite:
    """Tests for resolve_for_write."""

    def test_property_leaf(self) -> None:
        assert paths.resolve_for_write("a.b") == paths.WriteLocation("a", "b")

    def test_index_leaf(self) -> None:
        assert paths.resolve_for_write("a.b[2]") == paths.WriteLocation("a.b", 2)

    def test_top_level_property(self) -> None:
        assert paths.resolve_for_write("a") == paths.WriteLocation("", "a")

    def test_root_list_index(self) -> None:
        assert paths.resolve_for_write("[0]") == paths.WriteLocation("", 0)

    def test_property_after_index(self) -> None:
        assert paths.resolve_for_write("items[1].name") == paths.WriteLocation("items[1]", "name")

    def test_root_rejected(self) -> None:
        with _pytest.raises(paths.InvalidPathError):
            paths.resolve_for_write("")
        with _pytest.raises(paths.InvalidPathError):
            paths.resolve_for_write("*")

    def test_malformed_rejected(self) -> None:
        with _pytest.raises(paths.InvalidPathError):
            paths.resolve_for_write("a..b")


class TestAssign:
    """Tests for assign."""

    def test_mapping_set(self) -> None:
        target: dict[str, int] = {}
        paths.assign(target, "a", 1, path="a")
        assert target == {"a": 1}

    def test_mapping_missing_deletes(self) -> None:
        target = {"a": 1}
        paths.assign(target, "a", paths.MISSING, path="a")
        assert target == {}

    def test_list_replace(self) -> None:
        target = [1, 2, 3]
        paths.assign(target, 1, 9, path="[1]")
        assert target == [1, 9, 3]

    def test_list_append_at_end(self) -> None:
        target = [1]
        paths.assign(target, 1, 2, path="[1]")
        assert target == [1, 2]

    def test_list_pads_with_none(self) -> None:
        target = [1]
        paths.assign(target, 3, 4, path="[3]")
        assert target == [1, None, None, 4]

    def test_attribute(self) -> None:
        target = _types.SimpleNamespace()
        paths.assign(target, "name", "ada", path="name")
        assert target.name == "ada"

    def test_absent_container_raises(self) -> None:
        with _pytest.raises(paths.UnresolvedPathError):
            paths.assign(paths.MISSING, "b", 1, path="a.b")
        with _pytest.raises(paths.UnresolvedPathError):
            paths.assign(None, "b", 1, path="a.b")

    def test_scalar_container_raises(self) -> None:
        with _pytest.raises(paths.UnresolvedPathError):
            paths.assign(5, "b", 1, path="a.b")

    def test_index_into_mapping_uses_int_key(self) -> None:
        target: dict[int, str] = {}
        paths.assign(target, 0, "x", path="[0]")
        assert target == {0: "x"}

    def test_unresolved_path_error_is_lookup_error(self) -> None:
        with _pytest.raises(LookupError):
            paths.assign(None, "b", 1, path="a.b")


class TestDelete:
    """Tests for delete."""

    def test_mapping(self) -> None:
        target = {"a": 1, "b": 2}
        assert paths.delete(target, "a", path="a") == 1
        assert target == {"b": 2}

    def test_mapping_absent_key(self) -> None:
        assert paths.delete({}, "a", path="a") is None

    def test_list_shifts(self) -> None:
        target = ["x", "y", "z"]
        assert paths.delete(target, 1, path="[1]") == "y"
        assert target == ["x", "z"]

    def test_list_out_of_range(self) -> None:
        target = ["x"]
        assert paths.delete(target, 4, path="[4]") is None
        assert target == ["x"]

    def test_attribute(self) -> None:
        target = _types.SimpleNamespace(a=1)
        assert paths.delete(target, "a", path="a") == 1
        assert not hasattr(target, "a")

    def test_absent_container_raises(self) -> None:
        with _pytest.raises(paths.UnresolvedPathError):
            paths.delete(paths.MISSING, "a", path="x.a")
