"""The benchmark contract every contender adapter implements."""

from abc import ABC
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import ContenderConfig
from ..core.content import ContentTree
from ..core.errors import ContenderNotAvailableError, UnimplementedProbeError

Thunk = Callable[[], Any]

RANDOM_MERGE = "Random Merge Update"
SINGLE_CHANGE = "Single Change Update"
COMPLETE_DELETION = "Complete Deletion Update"
DELETION = "Complete Deletion"

PROBES = (
    "test_delta_size",
    "test_size_after_deletion",
    "test_crdt_size",
    "test_n_additions",
    "test_merge",
)


def content_entries(tree: ContentTree) -> List[Tuple[str, ContentTree]]:
    """Top-level ``(key, subtree)`` pairs of a tree; a scalar has none."""
    if isinstance(tree, dict):
        return list(tree.items())
    return []


def as_map(tree: ContentTree) -> Dict[str, ContentTree]:
    """Return ``tree`` if it is a mapping, else wrap it under ``"contents"``."""
    if isinstance(tree, dict):
        return tree
    return {"contents": tree}


def check_availability(import_check: Callable[[], Any]) -> bool:
    """Check if a CRDT engine can be imported.

    Args:
        import_check: Callable that attempts the import

    Returns:
        True if available, False otherwise
    """
    try:
        import_check()
        return True
    except ImportError:
        return False


class BenchmarkEnvironment(ABC):
    """Adapter exposing one CRDT engine through five probe operations.

    Size probes (``test_delta_size``, ``test_size_after_deletion``,
    ``test_crdt_size``) receive private copies of the trial's content trees.
    Throughput probes (``test_n_additions``, ``test_merge``) do their setup
    when called and return a zero-argument thunk; only the thunk is timed.

    A probe a subclass does not override raises ``UnimplementedProbeError``
    the moment it is called.

    Subclasses set ``name`` and, when their engine is an optional library,
    ``engine``/``install_hint``/``available`` so construction fails with
    ``ContenderNotAvailableError`` instead of a bare ImportError later on.
    """

    name: str = "BASE"
    engine: Optional[str] = None
    install_hint: str = ""
    available: bool = True

    def __init__(self, config: Optional[ContenderConfig] = None):
        if not self.available:
            raise ContenderNotAvailableError(self.engine or self.name, self.install_hint)
        self.config = config or ContenderConfig()

    def test_delta_size(self, first: ContentTree, second: ContentTree) -> Dict[str, int]:
        """Encoded sizes of a random merge, a single change and a complete deletion."""
        raise UnimplementedProbeError(self.name, "test_delta_size")

    def test_size_after_deletion(self, values: ContentTree) -> Dict[str, int]:
        """Residual footprint after populating from ``values`` and deleting everything."""
        raise UnimplementedProbeError(self.name, "test_size_after_deletion")

    def test_crdt_size(self, values: ContentTree) -> int:
        """Footprint of a CRDT populated from ``values``."""
        raise UnimplementedProbeError(self.name, "test_crdt_size")

    def test_n_additions(self) -> Thunk:
        """Set up a replica and return a thunk performing a batch of insertions."""
        raise UnimplementedProbeError(self.name, "test_n_additions")

    def test_merge(self) -> Thunk:
        """Set up two divergent replicas and return a thunk merging them once."""
        raise UnimplementedProbeError(self.name, "test_merge")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


__all__ = [
    "PROBES",
    "Thunk",
    "RANDOM_MERGE",
    "SINGLE_CHANGE",
    "COMPLETE_DELETION",
    "DELETION",
    "BenchmarkEnvironment",
    "as_map",
    "check_availability",
    "content_entries",
]
