"""crdtbench - Differential benchmarks for state-based CRDTs.

Every contender sees byte-identical fuzzed inputs, so the numbers it reports
are directly comparable across engines.

Usage:
    from crdtbench import BenchmarkSuite, SuiteConfig

    suite = BenchmarkSuite(SuiteConfig(delta_trials=10, deletion_trials=10))
    reports = suite.run()

CLI:
    crdtbench run                      # All dimensions, all contenders
    crdtbench run -d merges -c shelf   # One dimension, one contender
    crdtbench fuzz --count 3           # Inspect generated trees
    crdtbench contenders               # Registry and engine availability
"""

__version__ = "0.3.0"

from .bench import (
    BenchmarkSuite,
    DifferentialTrialRunner,
    MicroBenchmarkRunner,
    ReportWriter,
    TrialOutcome,
    summarize,
    throughput,
)
from .config import ContenderConfig, MicroBenchmarkConfig, SuiteConfig
from .contenders import CONTENDERS, BenchmarkEnvironment, build_contenders
from .core import (
    BenchmarkError,
    ConfigError,
    ContenderNotAvailableError,
    Fuzzer,
    FuzzerConfig,
    ProbeError,
    UnimplementedProbeError,
)
from .metrics import MetricFolder, fold

__all__ = [
    "__version__",
    # Core
    "Fuzzer",
    "FuzzerConfig",
    # Configuration
    "SuiteConfig",
    "ContenderConfig",
    "MicroBenchmarkConfig",
    # Contenders
    "CONTENDERS",
    "BenchmarkEnvironment",
    "build_contenders",
    # Metrics
    "MetricFolder",
    "fold",
    # Runners
    "BenchmarkSuite",
    "DifferentialTrialRunner",
    "MicroBenchmarkRunner",
    "ReportWriter",
    "TrialOutcome",
    "summarize",
    "throughput",
    # Errors
    "BenchmarkError",
    "ConfigError",
    "ContenderNotAvailableError",
    "ProbeError",
    "UnimplementedProbeError",
]
