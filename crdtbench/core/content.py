"""Helpers for content trees: cloning, comparison and size measurement."""

import copy
import json
import sys
from typing import Any, Dict, Set, Union

ContentTree = Union[Dict[str, "ContentTree"], int]


def clone_content(tree: Any) -> Any:
    """Return a deep copy so a contender cannot mutate another's input."""
    return copy.deepcopy(tree)


def content_equal(first: Any, second: Any) -> bool:
    """Structural deep equality of two content trees.

    A mapping never equals a scalar, and ``True`` is not treated as ``1``.
    """
    if isinstance(first, dict) and isinstance(second, dict):
        if first.keys() != second.keys():
            return False
        return all(content_equal(first[key], second[key]) for key in first)
    if isinstance(first, dict) or isinstance(second, dict):
        return False
    return type(first) is type(second) and first == second


def canonicalize(obj: Any) -> Any:
    """Convert nested dict/list data to canonical form (sorted keys)."""
    if isinstance(obj, dict):
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    """Deterministic compact UTF-8 JSON encoding."""
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def encoded_size(tree: Any) -> int:
    """Byte length of a tree's canonical JSON encoding."""
    return len(canonical_json_bytes(tree))


def estimate_size_bytes(obj: Any) -> int:
    """Best-effort in-memory size of an arbitrary Python object graph.

    Walks containers, instance ``__dict__`` and ``__slots__`` recursively,
    counting each object once.
    """
    return _estimate(obj, set())


def _estimate(obj: Any, seen: Set[int]) -> int:
    if obj is None:
        return 0
    if id(obj) in seen:
        return 0
    seen.add(id(obj))

    size = sys.getsizeof(obj)

    if isinstance(obj, (str, bytes, bytearray, int, float, bool)):
        return size

    if isinstance(obj, dict):
        return size + sum(
            _estimate(k, seen) + _estimate(v, seen) for k, v in obj.items()
        )

    if isinstance(obj, (list, tuple, set, frozenset)):
        return size + sum(_estimate(item, seen) for item in obj)

    if hasattr(obj, "__dict__"):
        size += _estimate(vars(obj), seen)

    for slot in getattr(type(obj), "__slots__", ()):
        if hasattr(obj, slot):
            size += _estimate(getattr(obj, slot), seen)

    return size


__all__ = [
    "ContentTree",
    "clone_content",
    "content_equal",
    "canonicalize",
    "canonical_json_bytes",
    "encoded_size",
    "estimate_size_bytes",
]
