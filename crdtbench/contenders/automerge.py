"""Automerge document contender, via the automerge Python bindings.

Install the engine with ``pip install --pre "automerge>=1.0.0rc1"``;
releases before 1.0 ship no ``automerge.core`` module.
"""

from typing import Any, Dict, List, Optional

from ..core.content import ContentTree
from ..core.fuzzer import Fuzzer
from .base import (
    COMPLETE_DELETION,
    DELETION,
    RANDOM_MERGE,
    SINGLE_CHANGE,
    BenchmarkEnvironment,
    Thunk,
    check_availability,
    content_entries,
)

# Try to import automerge - graceful degradation if not available
try:
    from automerge.core import ROOT, Document, ObjType, ScalarType
    AUTOMERGE_AVAILABLE = True
except ImportError:
    AUTOMERGE_AVAILABLE = False
    ROOT = None
    Document = None
    ObjType = None
    ScalarType = None


def is_available() -> bool:
    """Check if automerge is installed."""
    return check_availability(lambda: __import__("automerge.core"))


def _scalar_type(value: Any) -> "ScalarType":
    if value is None:
        return ScalarType.Null
    if isinstance(value, bool):
        return ScalarType.Boolean
    if isinstance(value, int):
        return ScalarType.Int
    if isinstance(value, float):
        return ScalarType.F64
    if isinstance(value, bytes):
        return ScalarType.Bytes
    return ScalarType.Str


def _put_tree(tx: Any, obj_id: Any, key: str, tree: ContentTree) -> Optional[Any]:
    """Write ``tree`` under ``key`` of ``obj_id``; returns the new map's id, if any."""
    if isinstance(tree, dict):
        child = tx.put_object(obj_id, key, ObjType.Map)
        for child_key, subtree in tree.items():
            _put_tree(tx, child, child_key, subtree)
        return child
    tx.put(obj_id, key, _scalar_type(tree), tree)
    return None


def _populated(values: ContentTree) -> "Document":
    doc = Document()
    with doc.transaction() as tx:
        _put_tree(tx, ROOT, "contents", values)
    return doc


def _change_size(doc: "Document", heads: List[bytes]) -> int:
    """Encoded size of the newest change made since ``heads``."""
    changes = doc.get_changes(heads)
    if not changes:
        raise ValueError("Expected a new change on the automerge document")
    return len(changes[-1].bytes)


class AutomergeBench(BenchmarkEnvironment):
    """Automerge documents, sized by change bytes and saved documents."""

    name = "Automerge"
    engine = "automerge"
    install_hint = 'pip install --pre "automerge>=1.0.0rc1"'
    available = AUTOMERGE_AVAILABLE

    def test_delta_size(self, first: ContentTree, second: ContentTree) -> Dict[str, int]:
        sizes: Dict[str, int] = {}

        doc = Document()
        heads = doc.get_heads()
        with doc.transaction() as tx:
            contents = _put_tree(tx, ROOT, "contents", second)
        sizes[RANDOM_MERGE] = _change_size(doc, heads)

        heads = doc.get_heads()
        with doc.transaction() as tx:
            tx.put(contents if contents is not None else ROOT, "test", ScalarType.Str, "delta")
        sizes[SINGLE_CHANGE] = _change_size(doc, heads)

        doc = _populated(first)
        heads = doc.get_heads()
        with doc.transaction() as tx:
            tx.put_object(ROOT, "contents", ObjType.Map)
        sizes[COMPLETE_DELETION] = _change_size(doc, heads)

        return sizes

    def test_size_after_deletion(self, values: ContentTree) -> Dict[str, int]:
        doc = _populated(values)
        with doc.transaction() as tx:
            tx.put_object(ROOT, "contents", ObjType.Map)
        return {DELETION: len(doc.save())}

    def test_crdt_size(self, values: ContentTree) -> int:
        return len(_populated(values).save())

    def test_n_additions(self) -> Thunk:
        doc = Document()
        with doc.transaction() as tx:
            tx.put(ROOT, "base", ScalarType.Int, 1)
        entries = content_entries(Fuzzer(self.config.n_additions).generate_content())

        def add_all() -> None:
            for key, value in entries:
                with doc.transaction() as tx:
                    _put_tree(tx, ROOT, key, value)

        return add_all

    def test_merge(self) -> Thunk:
        large = _populated(Fuzzer(self.config.merge_large).generate_content())
        small = _populated(Fuzzer(self.config.merge_small).generate_content())

        def merge_once() -> "Document":
            replica = Document.load(large.save())
            replica.merge(small)
            return replica

        return merge_once


__all__ = ["AUTOMERGE_AVAILABLE", "AutomergeBench", "is_available"]
