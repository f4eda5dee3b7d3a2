"""Tests for structural snapshots."""

import pytest as _pytest

import gluestate.paths as paths
import gluestate.snapshot as snapshot


class Point:
    def __init__(self, x: int, tags: list[str] | None = None) -> None:
        self.x = x
        self.tags = tags if tags is not None else []


class Money:
    def __init__(self, amount: int) -> None:
        self.amount = amount

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Money) and other.amount == self.amount


class TestTakeSnapshot:
    """Tests for take_snapshot."""

    def test_containers_are_independent(self) -> None:
        target = {"a": [1, {"b": 2}]}
        copy = snapshot.take_snapshot(target)
        assert copy == target
        target["a"][1]["b"] = 3
        target["a"].append(4)
        assert copy == {"a": [1, {"b": 2}]}

    def test_tuples_are_rebuilt(self) -> None:
        target = ([1], 2)
        copy = snapshot.take_snapshot(target)
        assert copy == target
        assert isinstance(copy, tuple)
        assert copy[0] is not target[0]

    def test_scalars_are_shared(self) -> None:
        text = "hello"
        assert snapshot.take_snapshot(text) is text
        assert snapshot.take_snapshot(None) is None
        assert snapshot.take_snapshot(paths.MISSING) is paths.MISSING

    def test_callables_are_shared(self) -> None:
        def compute() -> int:
            return 1

        copy = snapshot.take_snapshot({"fn": compute})
        assert copy["fn"] is compute

    def test_attribute_objects_are_rebuilt(self) -> None:
        """Plain objects are copied attribute by attribute, keeping their type."""
        point = Point(1, tags=["a"])
        copy = snapshot.take_snapshot({"p": point})
        assert copy["p"] is not point
        assert type(copy["p"]) is Point
        assert copy["p"].x == 1
        point.tags.append("b")
        assert copy["p"].tags == ["a"]

    def test_objects_with_own_equality_are_deep_copied(self) -> None:
        money = Money(5)
        copy = snapshot.take_snapshot({"m": money})
        assert copy["m"] is not money
        assert copy["m"] == money

    def test_cycle_through_attribute_object(self) -> None:
        point = Point(1)
        point.tags = [point]
        with _pytest.raises(snapshot.CyclicTargetError) as exc_info:
            snapshot.take_snapshot({"p": point})
        assert exc_info.value.location == "p.tags[0]"

    def test_shared_subobject_is_not_a_cycle(self) -> None:
        shared = {"v": 1}
        copy = snapshot.take_snapshot({"a": shared, "b": shared})
        assert copy == {"a": {"v": 1}, "b": {"v": 1}}


class TestSnapshotErrors:
    """Tests for cycle and depth detection."""

    def test_direct_cycle(self) -> None:
        target: dict[str, object] = {}
        target["self"] = target
        with _pytest.raises(snapshot.CyclicTargetError) as exc_info:
            snapshot.take_snapshot(target)
        assert exc_info.value.location == "self"

    def test_cycle_through_list(self) -> None:
        items: list[object] = []
        target = {"a": {"items": items}}
        items.append(target)
        with _pytest.raises(snapshot.CyclicTargetError) as exc_info:
            snapshot.take_snapshot(target)
        assert exc_info.value.location == "a.items[0]"

    def test_depth_limit(self) -> None:
        target: list[object] = []
        current = target
        for _ in range(10):
            child: list[object] = []
            current.append(child)
            current = child
        with _pytest.raises(snapshot.SnapshotDepthError) as exc_info:
            snapshot.take_snapshot(target, max_depth=5)
        assert exc_info.value.max_depth == 5
        assert snapshot.take_snapshot(target, max_depth=20) == target

    def test_errors_are_value_errors(self) -> None:
        assert issubclass(snapshot.CyclicTargetError, ValueError)
        assert issubclass(snapshot.SnapshotDepthError, snapshot.SnapshotError)
