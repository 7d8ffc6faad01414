"""Fold per-trial metric samples into per-label lists."""

from typing import Dict, List, Mapping

Accumulator = Dict[str, List[int]]


def fold(accumulator: Accumulator, sample: Mapping[str, int]) -> Accumulator:
    """Append every ``(label, value)`` of ``sample`` to ``accumulator[label]``.

    Labels seen for the first time start a new list. Returns the same
    accumulator it was given.
    """
    for label, value in sample.items():
        accumulator.setdefault(label, []).append(value)
    return accumulator


class MetricFolder:
    """One accumulator per contender, in the order contenders were first seen.

    Usage:
        folder = MetricFolder()
        folder.add("Shelf", {"Random Merge Update": 120})
        folder.to_dict()  # {"Shelf": {"Random Merge Update": [120]}}
    """

    def __init__(self):
        self._metrics: Dict[str, Accumulator] = {}

    def add(self, contender: str, sample: Mapping[str, int]) -> None:
        fold(self._metrics.setdefault(contender, {}), sample)

    def samples(self, contender: str) -> Accumulator:
        """Folded samples of one contender, empty if it never reported."""
        return self._metrics.get(contender, {})

    def sample_count(self, contender: str, label: str) -> int:
        return len(self.samples(contender).get(label, []))

    def contenders(self) -> List[str]:
        return list(self._metrics)

    def to_dict(self) -> Dict[str, Accumulator]:
        return {
            contender: {label: list(values) for label, values in acc.items()}
            for contender, acc in self._metrics.items()
        }


__all__ = ["Accumulator", "fold", "MetricFolder"]
