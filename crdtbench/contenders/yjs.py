"""Yjs awareness contender, via the pycrdt bindings.

Awareness is Yjs's presence protocol: every client owns one JSON state and
broadcasts it whole. Install the engine with ``pip install pycrdt``.
"""

from typing import Any, Dict

from ..core.content import ContentTree, estimate_size_bytes
from ..core.fuzzer import Fuzzer
from .base import (
    COMPLETE_DELETION,
    DELETION,
    RANDOM_MERGE,
    SINGLE_CHANGE,
    BenchmarkEnvironment,
    Thunk,
    as_map,
    check_availability,
    content_entries,
)

# Try to import pycrdt - graceful degradation if not available
try:
    from pycrdt import Awareness, Doc
    PYCRDT_AVAILABLE = True
except ImportError:
    PYCRDT_AVAILABLE = False
    Awareness = None
    Doc = None


def is_available() -> bool:
    """Check if pycrdt is installed."""
    return check_availability(lambda: __import__("pycrdt"))


def _awareness(client_id: int) -> "Awareness":
    return Awareness(Doc(client_id=client_id))


def _awareness_size(awareness: "Awareness") -> int:
    return estimate_size_bytes(awareness.states) + estimate_size_bytes(awareness.meta)


def _encode_all(awareness: "Awareness") -> bytes:
    return awareness.encode_awareness_update(list(awareness.states.keys()))


class YjsAwarenessBench(BenchmarkEnvironment):
    """Yjs awareness states exchanged as full awareness updates."""

    name = "Yjs Awareness"
    engine = "pycrdt"
    install_hint = "pip install pycrdt"
    available = PYCRDT_AVAILABLE

    def test_delta_size(self, first: ContentTree, second: ContentTree) -> Dict[str, int]:
        sizes: Dict[str, int] = {}
        awareness = _awareness(0)

        awareness.set_local_state(as_map(second))
        sizes[RANDOM_MERGE] = len(_encode_all(awareness))

        awareness.set_local_state(as_map(first))
        awareness.set_local_state_field("test", "delta")
        sizes[SINGLE_CHANGE] = len(
            awareness.encode_awareness_update([awareness.client_id])
        )

        awareness.set_local_state({})
        sizes[COMPLETE_DELETION] = len(
            awareness.encode_awareness_update([awareness.client_id])
        )
        return sizes

    def test_size_after_deletion(self, values: ContentTree) -> Dict[str, int]:
        awareness = _awareness(0)
        awareness.set_local_state({"contents": values})
        awareness.set_local_state({"contents": {}})
        return {DELETION: _awareness_size(awareness)}

    def test_crdt_size(self, values: ContentTree) -> int:
        awareness = _awareness(0)
        awareness.set_local_state(as_map(values))
        return _awareness_size(awareness)

    def test_n_additions(self) -> Thunk:
        awareness = _awareness(1)
        awareness.set_local_state({"base": 1})
        entries = content_entries(Fuzzer(self.config.n_additions).generate_content())

        def add_all() -> None:
            for key, value in entries:
                awareness.set_local_state_field(key, value)

        return add_all

    def test_merge(self) -> Thunk:
        large = _awareness(0)
        large.set_local_state(as_map(Fuzzer(self.config.merge_large).generate_content()))
        small = _awareness(1)
        small.set_local_state(as_map(Fuzzer(self.config.merge_small).generate_content()))

        def merge_once() -> Any:
            small.apply_awareness_update(_encode_all(large), "custom")
            return small

        return merge_once


__all__ = ["PYCRDT_AVAILABLE", "YjsAwarenessBench", "is_available"]
