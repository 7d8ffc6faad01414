"""Descriptive statistics over folded samples."""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from .folder import Accumulator


def _percentile(sorted_values: List[float], p: float) -> float:
    """Calculate percentile from sorted values."""
    if not sorted_values:
        return 0.0
    k = (len(sorted_values) - 1) * p
    f = int(k)
    c = f + 1
    if c >= len(sorted_values):
        return sorted_values[-1]
    return sorted_values[f] + (k - f) * (sorted_values[c] - sorted_values[f])


@dataclass
class SampleSummary:
    """Summary of one label's samples."""

    count: int = 0
    mean: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0
    p50: float = 0.0
    p90: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "count": self.count,
            "mean": self.mean,
            "min": self.minimum,
            "max": self.maximum,
            "p50": self.p50,
            "p90": self.p90,
        }


def summarize_samples(values: Sequence[float]) -> SampleSummary:
    """Summarize a list of samples; an empty list gives all zeros."""
    if not values:
        return SampleSummary()
    ordered = sorted(values)
    return SampleSummary(
        count=len(ordered),
        mean=sum(ordered) / len(ordered),
        minimum=ordered[0],
        maximum=ordered[-1],
        p50=_percentile(ordered, 0.5),
        p90=_percentile(ordered, 0.9),
    )


def summarize_metrics(metrics: Dict[str, Accumulator]) -> Dict[str, Dict[str, SampleSummary]]:
    """Summarize every ``{contender: {label: samples}}`` entry."""
    return {
        contender: {label: summarize_samples(values) for label, values in acc.items()}
        for contender, acc in metrics.items()
    }


__all__ = ["SampleSummary", "summarize_samples", "summarize_metrics"]
