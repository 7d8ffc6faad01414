"""Tests for the bundled shelf CRDT (crdtbench/engines/shelf.py)."""

import json

import pytest

from crdtbench.engines.shelf import (
    ShelfAwareness,
    ShelfCRDT,
    ShelfMap,
    ShelfValue,
    from_json,
    merge_shelves,
)


def _sync(target: ShelfCRDT, source: ShelfCRDT) -> None:
    delta = source.get_state_delta(target.get_state_vector())
    if delta is not None:
        target.merge(delta)


class TestShelfBasics:
    """Tests for reading and writing a single replica."""

    def test_roundtrip_values(self):
        content = {"a": 1, "b": {"c": 2}}
        assert ShelfCRDT(content, 1).to_values() == content

    def test_get_and_set(self):
        shelf = ShelfCRDT({"a": {"b": 1}}, 1)
        shelf.set(["a", "b"], 5)
        shelf.set(["a", "new"], {"deep": True})
        assert shelf.get(["a", "b"]) == 5
        assert shelf.get(["a", "new", "deep"]) is True

    def test_set_bumps_clock(self):
        shelf = ShelfCRDT({"a": {"b": 1}}, 1)
        shelf.set(["a"], {})
        node = shelf.root.shelves["a"]
        assert isinstance(node, ShelfMap)
        assert node.clock == 1

    def test_missing_path(self):
        with pytest.raises(KeyError):
            ShelfCRDT({"a": 1}, 1).get(["b"])

    def test_set_inside_value(self):
        with pytest.raises(TypeError):
            ShelfCRDT({"a": 1}, 1).set(["a", "b"], 2)

    def test_set_empty_path(self):
        with pytest.raises(KeyError):
            ShelfCRDT({}, 1).set([], 2)

    def test_json_form(self):
        shelf = ShelfCRDT({"a": 1}, 3)
        assert shelf.to_json() == [{"a": [1, [0, 3]]}, 0]
        assert from_json(shelf.to_json()) == shelf.root


class TestShelfSync:
    """Tests for state vectors, deltas and merges."""

    def test_state_vector_has_no_values(self):
        sv = json.loads(ShelfCRDT({"a": 12345}, 1).get_state_vector())
        assert sv == [{"a": [0, 1]}, 0]

    def test_no_delta_against_self(self):
        shelf = ShelfCRDT({"a": {"b": 1}}, 1)
        assert shelf.get_state_delta(shelf.get_state_vector()) is None

    def test_single_change_delta_is_small(self):
        base = ShelfCRDT({"a": {"b": 1}, "c": {"d": 2}}, 1)
        updated = ShelfCRDT({"a": {"b": 1}, "c": {"d": 2}}, 1)
        updated.set(["test"], "delta")
        delta = json.loads(updated.get_state_delta(base.get_state_vector()))
        assert delta == [{"test": ["delta", [1, 1]]}, 0]

    def test_merge_converges(self):
        first = ShelfCRDT({"a": 1, "shared": {"x": 1}}, 1)
        second = ShelfCRDT({"b": 2, "shared": {"y": 2}}, 2)
        _sync(first, second)
        _sync(second, first)
        assert first.to_values() == second.to_values()
        assert first.to_values()["shared"] == {"x": 1, "y": 2}

    def test_higher_client_wins_concurrent_value(self):
        first = ShelfCRDT({"k": "one"}, 1)
        second = ShelfCRDT({"k": "two"}, 2)
        _sync(first, second)
        assert first.get(["k"]) == "two"

    def test_deletion_propagates(self):
        replica = ShelfCRDT({"contents": {"a": 1, "b": {"c": 2}}}, 1)
        peer = ShelfCRDT({"contents": {"a": 1, "b": {"c": 2}}}, 2)
        replica.set(["contents"], {})
        _sync(peer, replica)
        assert peer.get(["contents"]) == {}

    def test_merge_is_commutative(self):
        a = from_json([{"k": [1, [0, 1]], "m": [{"x": [2, [0, 1]]}, 0]}, 0])
        b = from_json([{"k": [3, [0, 2]], "m": [{"y": [4, [0, 2]]}, 0]}, 0])
        assert merge_shelves(a, b).to_values() == merge_shelves(b, a).to_values()

    def test_equal_dots_pick_deterministically(self):
        a = ShelfValue("x", (1, 1))
        b = ShelfValue("y", (1, 1))
        assert merge_shelves(a, b) is merge_shelves(b, a)

    def test_merged_leaves_original(self):
        first = ShelfCRDT({"a": 1}, 1)
        second = ShelfCRDT({}, 2)
        second.set(["b"], 2)
        delta = second.get_state_delta(first.get_state_vector())
        replica = first.merged(delta)
        assert replica.to_values() == {"a": 1, "b": 2}
        assert first.to_values() == {"a": 1}

    def test_malformed_delta(self):
        with pytest.raises(ValueError):
            ShelfCRDT({}, 1).merge(b"not json")
        with pytest.raises(ValueError):
            ShelfCRDT({}, 1).merge(b"[1, 2, 3]")


class TestShelfAwareness:
    """Tests for the per-client awareness shelf."""

    def test_own_state(self):
        awareness = ShelfAwareness({"cursor": 1}, 7)
        assert awareness.get_own_state() == {"cursor": 1}
        assert awareness.to_values() == {"7": {"cursor": 1}}

    def test_peers_accumulate(self):
        first = ShelfAwareness({"cursor": 1}, 1)
        second = ShelfAwareness({"cursor": 2}, 2)
        _sync(first, second)
        assert first.get_peer_state(2) == {"cursor": 2}
        assert first.get_own_state() == {"cursor": 1}

    def test_set_local_state(self):
        first = ShelfAwareness({"cursor": 1}, 1)
        peer = ShelfAwareness({}, 2)
        _sync(peer, first)
        first.set_local_state({"selection": [1, 2]})
        _sync(peer, first)
        assert peer.get_peer_state(1) == {"selection": [1, 2]}

    def test_set_is_scoped_to_own_client(self):
        awareness = ShelfAwareness({}, 4)
        awareness.set(["name"], "ada")
        assert awareness.to_values() == {"4": {"name": "ada"}}
