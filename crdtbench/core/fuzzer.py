"""Deterministic generator of nested content trees.

Every contender in a trial must see byte-identical input, so the fuzzer owns
a private ``random.Random`` seeded from its config and never touches the
module-level generator. Two fuzzers built from the same config and called the
same number of times produce the same trees, in any process.
"""

import random
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .content import ContentTree
from .errors import ConfigError

Range = Tuple[int, int]

WORDS = (
    "Excepteur", "aliqua", "ullamco", "enim", "culpa", "sunt", "ad",
    "reprehenderit", "magna", "occaecat", "consequat", "pariatur", "quis",
    "esse", "voluptate", "anim", "Lorem", "non", "sed", "ea", "aute",
    "fugiat", "Duis", "exercitation", "dolor", "commodo", "minim", "veniam",
    "et", "consectetur", "adipiscing", "amet", "dolore", "officia",
    "cupidatat", "aliquip", "ipsum", "nisi", "cillum", "laborum", "nostrud",
    "irure", "Ut", "mollit", "ex", "qui", "eu", "ut", "tempor", "in",
    "labore", "velit", "do", "laboris", "elit", "id", "proident",
    "incididunt", "sint", "sit", "est", "deserunt", "eiusmod",
)


def _as_range(name: str, value: Any) -> Range:
    try:
        lo, hi = value
        lo, hi = int(lo), int(hi)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a [min, max] pair, got {value!r}")
    return (lo, hi)


@dataclass(frozen=True)
class FuzzerConfig:
    """Seed and shape of generated trees.

    Ranges are ``(min, max)`` pairs drawn half-open: a draw lies in
    ``[min, max)``, or is exactly ``min`` when ``min == max``.

    Attributes:
        seed: Seed of the fuzzer's private random generator.
        value_range: Bounds of generated scalar values.
        depth_range: Bounds of the tree's depth budget.
        branch_range: Bounds of the child count of each internal node.
    """

    seed: int = 42
    value_range: Range = (300, 500)
    depth_range: Range = (3, 5)
    branch_range: Range = (1, 4)

    def __post_init__(self) -> None:
        for name in ("value_range", "depth_range", "branch_range"):
            lo, hi = getattr(self, name)
            if lo > hi:
                raise ValueError(f"{name} minimum {lo} exceeds maximum {hi}")
        if self.depth_range[0] < 0 or self.branch_range[0] < 0:
            raise ValueError("depth_range and branch_range must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "valueRange": list(self.value_range),
            "depthRange": list(self.depth_range),
            "branchRange": list(self.branch_range),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FuzzerConfig":
        """Create a config from camelCase or snake_case keys.

        Missing keys fall back to the defaults.

        Raises:
            ConfigError: If a value is malformed or a range is inverted.
        """
        if not isinstance(d, dict):
            raise ConfigError(f"Expected dict, got {type(d).__name__}")

        defaults = cls()
        kwargs: Dict[str, Any] = {"seed": d.get("seed", defaults.seed)}
        for attr, camel in (
            ("value_range", "valueRange"),
            ("depth_range", "depthRange"),
            ("branch_range", "branchRange"),
        ):
            raw = d.get(camel, d.get(attr, getattr(defaults, attr)))
            kwargs[attr] = _as_range(camel, raw)

        try:
            kwargs["seed"] = int(kwargs["seed"])
            return cls(**kwargs)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid fuzzer config: {e}")


class Fuzzer:
    """Seeded generator of content trees.

    Usage:
        fuzzer = Fuzzer(FuzzerConfig(seed=1))
        first = fuzzer.generate_content()
        second = fuzzer.generate_content()
    """

    def __init__(self, config: FuzzerConfig):
        self.config = config
        self._rng = random.Random(config.seed)

    def set_seed(self, seed: int) -> None:
        """Reset the internal generator to a new seed."""
        self._rng = random.Random(seed)

    def generate_content(self) -> ContentTree:
        """Generate the next tree.

        A depth budget of 0 collapses the tree to a bare scalar.
        """
        depth = self._draw(self.config.depth_range)
        return self._generate(depth)

    def _generate(self, depth: int) -> ContentTree:
        if depth <= 0:
            return self._draw(self.config.value_range)

        children: Dict[str, ContentTree] = {}
        for _ in range(self._draw(self.config.branch_range)):
            key = self._fresh_key(children)
            children[key] = self._generate(depth - 1)
        return children

    def _fresh_key(self, siblings: Dict[str, Any]) -> str:
        word = self._rng.choice(WORDS)
        key = word
        suffix = 1
        while key in siblings:
            suffix += 1
            key = f"{word}_{suffix}"
        return key

    def _draw(self, bounds: Range) -> int:
        lo, hi = bounds
        if hi <= lo:
            return lo
        return self._rng.randrange(lo, hi)


__all__ = ["WORDS", "FuzzerConfig", "Fuzzer", "Range"]
