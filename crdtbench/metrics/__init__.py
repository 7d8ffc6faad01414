"""Metric folding and summaries.

Usage:
    from crdtbench.metrics import MetricFolder, summarize_metrics

    folder = MetricFolder()
    folder.add("Shelf", {"Complete Deletion": 412})
    print(summarize_metrics(folder.to_dict()))
"""

from .folder import Accumulator, MetricFolder, fold
from .summary import SampleSummary, summarize_metrics, summarize_samples

__all__ = [
    "Accumulator",
    "MetricFolder",
    "fold",
    "SampleSummary",
    "summarize_metrics",
    "summarize_samples",
]
