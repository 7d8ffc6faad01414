"""Shelf contenders backed by the bundled pure-Python engine.

Usage:
    from crdtbench.contenders.shelf import ShelfBench

    bench = ShelfBench()
    sizes = bench.test_delta_size({"a": 1}, {"b": 2})
"""

from typing import Dict, Optional

from ..core.content import ContentTree, estimate_size_bytes
from ..core.fuzzer import Fuzzer
from ..engines.shelf import ShelfAwareness, ShelfCRDT
from .base import (
    COMPLETE_DELETION,
    DELETION,
    RANDOM_MERGE,
    SINGLE_CHANGE,
    BenchmarkEnvironment,
    Thunk,
    as_map,
    content_entries,
)


def _delta_length(delta: Optional[bytes], label: str) -> int:
    if delta is None:
        raise ValueError(f"Expected a non-empty delta for {label}")
    return len(delta)


class ShelfBench(BenchmarkEnvironment):
    """A single shelf replica per client, synchronized by state-vector deltas."""

    name = "Shelf"
    replica_class = ShelfCRDT

    def _replica(self, content: ContentTree, client_id: int) -> ShelfCRDT:
        return self.replica_class(content, client_id)

    def test_delta_size(self, first: ContentTree, second: ContentTree) -> Dict[str, int]:
        sizes: Dict[str, int] = {}

        base = self._replica(as_map(first), 1)
        other = self._replica(as_map(second), 2)
        delta = other.get_state_delta(base.get_state_vector())
        sizes[RANDOM_MERGE] = _delta_length(delta, RANDOM_MERGE)

        updated = self._replica(as_map(first), 1)
        updated.set(["test"], "delta")
        delta = updated.get_state_delta(base.get_state_vector())
        sizes[SINGLE_CHANGE] = _delta_length(delta, SINGLE_CHANGE)

        deleted = self._replica({"contents": first}, 1)
        untouched = self._replica({"contents": first}, 1)
        deleted.set(["contents"], {})
        delta = deleted.get_state_delta(untouched.get_state_vector())
        sizes[COMPLETE_DELETION] = _delta_length(delta, COMPLETE_DELETION)

        return sizes

    def test_size_after_deletion(self, values: ContentTree) -> Dict[str, int]:
        replica = self._replica({"contents": values}, 1)
        replica.set(["contents"], {})
        return {DELETION: estimate_size_bytes(replica)}

    def test_crdt_size(self, values: ContentTree) -> int:
        return estimate_size_bytes(self._replica(values, 0))

    def test_n_additions(self) -> Thunk:
        replica = self._replica({"base": 1}, 1)
        content = Fuzzer(self.config.n_additions).generate_content()
        entries = content_entries(content)

        def add_all() -> None:
            for key, value in entries:
                replica.set([key], value)

        return add_all

    def test_merge(self) -> Thunk:
        large_content = Fuzzer(self.config.merge_large).generate_content()
        large = self._replica({"contents": large_content}, 1)
        small = self._replica({}, 2)
        small.set(["contents"], Fuzzer(self.config.merge_small).generate_content())

        def merge_once() -> ShelfCRDT:
            delta = small.get_state_delta(large.get_state_vector())
            if delta is None:
                raise ValueError(f"There should be a delta for the {self.name} merge")
            return large.merged(delta)

        return merge_once


class ShelfAwarenessBench(ShelfBench):
    """Shelf used as a presence map keyed by client id."""

    name = "Shelf Awareness"
    replica_class = ShelfAwareness


__all__ = ["ShelfBench", "ShelfAwarenessBench"]
