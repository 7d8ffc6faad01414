"""Trial runners, micro-benchmarks, reports and the suite that ties them together."""

from .micro import (
    ContenderTiming,
    MicroBenchmarkConfig,
    MicroBenchmarkResult,
    MicroBenchmarkRunner,
    summarize,
    throughput,
)
from .report import DIMENSIONS, ReportWriter, compare_to_baseline, load_report
from .suite import BenchmarkSuite
from .trials import INPUT_TREE, DifferentialTrialRunner, TrialOutcome

__all__ = [
    "BenchmarkSuite",
    "ContenderTiming",
    "DIMENSIONS",
    "DifferentialTrialRunner",
    "INPUT_TREE",
    "MicroBenchmarkConfig",
    "MicroBenchmarkResult",
    "MicroBenchmarkRunner",
    "ReportWriter",
    "TrialOutcome",
    "compare_to_baseline",
    "load_report",
    "summarize",
    "throughput",
]
