"""Shelf CRDT: a nested last-writer-wins map with per-node clocks.

A shelf is a tree of two node kinds:

- ``ShelfValue``: a JSON scalar (or list) stamped with a dot clock
  ``(counter, client_id)``.
- ``ShelfMap``: a mapping of child shelves stamped with a Lamport counter.

Nodes are ordered by ``(counter, kind, client_id)`` where maps rank above
values at the same counter. During a merge the greater node replaces the
lesser one outright; two maps at the same counter merge child by child.
Replacing a populated map with an empty one at a higher counter therefore
erases the whole subtree on every replica.

Replicas synchronize through a state vector (the tree of clocks without
values) and a delta (the subset of the tree the peer is missing). Both are
encoded as compact JSON:

    map node:    [{key: node, ...}, counter]
    value node:  [value, [counter, client_id]]
    sv map:      [{key: sv, ...}, counter]
    sv value:    [counter, client_id]
"""

import copy
import json
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..core.content import canonical_json_bytes

DotClock = Tuple[int, int]
OrderKey = Tuple[int, int, int]


class ShelfValue:
    """Leaf shelf holding a scalar value."""

    __slots__ = ("value", "clock")

    def __init__(self, value: Any, clock: DotClock):
        self.value = value
        self.clock = clock

    @property
    def counter(self) -> int:
        return self.clock[0]

    def order_key(self) -> OrderKey:
        return (self.clock[0], 0, self.clock[1])

    def to_json(self) -> List[Any]:
        return [self.value, list(self.clock)]

    def to_values(self) -> Any:
        return self.value

    def state_vector(self) -> List[int]:
        return list(self.clock)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShelfValue):
            return NotImplemented
        return self.value == other.value and self.clock == other.clock

    def __repr__(self) -> str:
        return f"ShelfValue({self.value!r}, {self.clock})"


class ShelfMap:
    """Internal shelf holding named child shelves."""

    __slots__ = ("shelves", "clock")

    def __init__(self, shelves: Dict[str, "Shelf"], clock: int):
        self.shelves = shelves
        self.clock = clock

    @property
    def counter(self) -> int:
        return self.clock

    def order_key(self) -> OrderKey:
        return (self.clock, 1, 0)

    def to_json(self) -> List[Any]:
        return [{k: v.to_json() for k, v in self.shelves.items()}, self.clock]

    def to_values(self) -> Dict[str, Any]:
        return {k: v.to_values() for k, v in self.shelves.items()}

    def state_vector(self) -> List[Any]:
        return [{k: v.state_vector() for k, v in self.shelves.items()}, self.clock]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShelfMap):
            return NotImplemented
        return self.clock == other.clock and self.shelves == other.shelves

    def __repr__(self) -> str:
        return f"ShelfMap({self.shelves!r}, {self.clock})"


Shelf = Union[ShelfValue, ShelfMap]


def from_values(values: Any, client_id: int, counter: int = 0) -> Shelf:
    """Build a shelf from plain content, stamping every node with ``counter``."""
    if isinstance(values, dict):
        return ShelfMap(
            {str(k): from_values(v, client_id, counter) for k, v in values.items()},
            counter,
        )
    return ShelfValue(values, (counter, client_id))


def from_json(data: Any) -> Shelf:
    """Decode a shelf from its ``[content, clock]`` JSON form.

    Raises:
        ValueError: If the data is not a well-formed shelf.
    """
    if not isinstance(data, list) or len(data) != 2:
        raise ValueError(f"Shelf must be a [content, clock] pair, got {data!r}")
    content, clock = data
    if isinstance(content, dict):
        if not isinstance(clock, int):
            raise ValueError(f"Map clock must be an integer, got {clock!r}")
        return ShelfMap({k: from_json(v) for k, v in content.items()}, clock)
    if not isinstance(clock, list) or len(clock) != 2:
        raise ValueError(f"Value clock must be a [counter, client] pair, got {clock!r}")
    return ShelfValue(content, (int(clock[0]), int(clock[1])))


def _sv_key(sv: Any) -> OrderKey:
    if isinstance(sv, list) and len(sv) == 2 and isinstance(sv[0], dict):
        return (sv[1], 1, 0)
    if isinstance(sv, list) and len(sv) == 2:
        return (sv[0], 0, sv[1])
    raise ValueError(f"Malformed state vector entry: {sv!r}")


def merge_shelves(this: Shelf, other: Shelf) -> Shelf:
    """Merge two shelves, returning the union. Inputs may be reused."""
    this_key, other_key = this.order_key(), other.order_key()
    if this_key > other_key:
        return this
    if other_key > this_key:
        return other

    if isinstance(this, ShelfMap) and isinstance(other, ShelfMap):
        merged = dict(this.shelves)
        for key, shelf in other.shelves.items():
            merged[key] = merge_shelves(merged[key], shelf) if key in merged else shelf
        return ShelfMap(merged, this.clock)

    # Same dot on both sides; pick deterministically so merges commute.
    if canonical_json_bytes(this.to_values()) >= canonical_json_bytes(other.to_values()):
        return this
    return other


def state_delta(shelf: Shelf, sv: Any) -> Optional[Shelf]:
    """Compute the part of ``shelf`` a peer with state vector ``sv`` lacks."""
    own_key, peer_key = shelf.order_key(), _sv_key(sv)
    if own_key < peer_key:
        return None
    if own_key > peer_key:
        return shelf

    if isinstance(shelf, ShelfMap):
        peer_children, peer_counter = sv
        delta: Dict[str, Shelf] = {}
        for key, child in shelf.shelves.items():
            if key in peer_children:
                child_delta = state_delta(child, peer_children[key])
            elif child.counter < peer_counter:
                # Older than the peer's map; the peer already overwrote it.
                child_delta = None
            else:
                child_delta = child
            if child_delta is not None:
                delta[key] = child_delta
        return ShelfMap(delta, shelf.clock) if delta else None

    return None


def _encode(data: Any) -> bytes:
    return canonical_json_bytes(data)


def _decode(data: bytes) -> Any:
    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Could not decode shelf payload: {e}")


class ShelfCRDT:
    """A replica of a shelf owned by one client.

    Usage:
        first = ShelfCRDT({"cursor": {"x": 1}}, client_id=1)
        second = ShelfCRDT({"cursor": {"y": 2}}, client_id=2)
        delta = second.get_state_delta(first.get_state_vector())
        if delta is not None:
            first.merge(delta)
    """

    def __init__(self, content: Any = None, client_id: int = 0):
        self.client_id = client_id
        self.root: Shelf = from_values({} if content is None else content, client_id)

    def get(self, path: Sequence[str]) -> Any:
        """Plain content at ``path``.

        Raises:
            KeyError: If the path does not exist.
        """
        return self._node_at(path).to_values()

    def set(self, path: Sequence[str], value: Any) -> None:
        """Write ``value`` at ``path`` with a clock newer than what it replaces.

        Raises:
            KeyError: If ``path`` is empty or a parent is missing.
            TypeError: If a parent on the path is a value, not a map.
        """
        if not path:
            raise KeyError("Cannot set an empty path")
        parent = self._node_at(path[:-1])
        if not isinstance(parent, ShelfMap):
            raise TypeError(f"Cannot set a key inside a value at {list(path[:-1])}")

        key = path[-1]
        old = parent.shelves.get(key)
        if isinstance(old, ShelfValue):
            counter = max(old.counter, parent.clock) + 1
        elif isinstance(old, ShelfMap):
            child_counters = [child.counter for child in old.shelves.values()]
            counter = max(child_counters + [old.clock, parent.clock]) + 1
        else:
            counter = parent.clock + 1

        parent.shelves[key] = from_values(value, self.client_id, counter)

    def get_state_vector(self) -> bytes:
        return _encode(self.root.state_vector())

    def get_state_delta(self, state_vector: bytes) -> Optional[bytes]:
        """Encoded delta against a peer's state vector, or None if nothing is new."""
        delta = state_delta(self.root, _decode(state_vector))
        if delta is None:
            return None
        return _encode(delta.to_json())

    def merge(self, delta: bytes) -> "ShelfCRDT":
        """Merge an encoded delta into this replica in place."""
        self.root = merge_shelves(self.root, from_json(_decode(delta)))
        return self

    def merged(self, delta: bytes) -> "ShelfCRDT":
        """Return a new replica with ``delta`` merged, leaving this one untouched."""
        replica = copy.copy(self)
        replica.root = merge_shelves(self.root, from_json(_decode(delta)))
        return replica

    def to_json(self) -> Any:
        return self.root.to_json()

    def to_values(self) -> Any:
        return self.root.to_values()

    def _node_at(self, path: Sequence[str]) -> Shelf:
        node = self.root
        for key in path:
            if not isinstance(node, ShelfMap) or key not in node.shelves:
                raise KeyError(f"Key Error: {key}")
            node = node.shelves[key]
        return node

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.root!r})"


class ShelfAwareness(ShelfCRDT):
    """Presence-style shelf: each client writes only under its own id.

    The replica's root is a map from client id to that client's state, so
    merging peers accumulates one subtree per client.
    """

    def __init__(self, content: Any = None, client_id: int = 0):
        self.client_id = client_id
        own = from_values({} if content is None else content, client_id)
        self.root = ShelfMap({str(client_id): own}, 0)

    @property
    def own_key(self) -> str:
        return str(self.client_id)

    def get_own_state(self) -> Any:
        return self.get([])

    def get_peer_state(self, client_id: Union[int, str]) -> Any:
        return ShelfCRDT.get(self, [str(client_id)])

    def get(self, path: Sequence[str]) -> Any:
        return super().get([self.own_key, *path])

    def set(self, path: Sequence[str], value: Any) -> None:
        super().set([self.own_key, *path], value)

    def set_local_state(self, value: Any) -> None:
        """Replace this client's whole state."""
        super().set([self.own_key], value)


__all__ = [
    "ShelfValue",
    "ShelfMap",
    "Shelf",
    "ShelfCRDT",
    "ShelfAwareness",
    "from_values",
    "from_json",
    "merge_shelves",
    "state_delta",
]
