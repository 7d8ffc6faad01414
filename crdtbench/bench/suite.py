"""Orchestration of all benchmark dimensions.

Usage:
    from crdtbench.bench import BenchmarkSuite
    from crdtbench.config import SuiteConfig

    suite = BenchmarkSuite(SuiteConfig.load("bench.yaml"))
    reports = suite.run(["delta-size", "merges"])
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..config import SuiteConfig
from ..contenders import build_contenders
from ..contenders.base import BenchmarkEnvironment
from ..core.errors import ConfigError
from ..core.fuzzer import Fuzzer
from .micro import MicroBenchmarkRunner
from .report import DIMENSIONS, ReportWriter, compare_to_baseline, load_report
from .trials import DifferentialTrialRunner

logger = logging.getLogger(__name__)

THROUGHPUT_DIMENSIONS = ("additions", "merges")


class BenchmarkSuite:
    """Runs dimensions in a fixed order and writes each report as it finishes.

    A failing dimension aborts the run. Reports of dimensions that already
    finished stay on disk; the failing one is never written.
    """

    def __init__(
        self,
        config: SuiteConfig,
        contenders: Optional[Sequence[BenchmarkEnvironment]] = None,
        writer: Optional[ReportWriter] = None,
    ):
        self.config = config
        if contenders is None:
            contenders = build_contenders(config.contenders, config.contender)
        self.contenders: List[BenchmarkEnvironment] = list(contenders)
        self.writer = writer or ReportWriter(config.output_dir)
        self._stages: Dict[str, Callable[[], Any]] = {
            "delta-size": self._delta_size,
            "deletion-size": self._deletion_size,
            "crdt-size": self._crdt_size,
            "additions": self._additions,
            "merges": self._merges,
        }

    def run(self, dimensions: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        """Run the requested dimensions (all by default) in canonical order.

        Returns:
            Mapping of dimension name to the payload written for it.

        Raises:
            ConfigError: If a dimension name is unknown.
        """
        selected = self._select(dimensions)
        reports: Dict[str, Any] = {}
        for dimension in selected:
            logger.info("Running %s", dimension)
            payload = self._stages[dimension]()
            self.writer.write(dimension, payload)
            reports[dimension] = payload
        return reports

    def compare(
        self, reports: Dict[str, Any], baseline_dir: Union[str, Path]
    ) -> Dict[str, Dict[str, Any]]:
        """Compare throughput reports against those saved in ``baseline_dir``.

        Dimensions without a baseline file are left out.
        """
        baseline_writer = ReportWriter(baseline_dir)
        comparisons: Dict[str, Dict[str, Any]] = {}
        for dimension in THROUGHPUT_DIMENSIONS:
            if dimension not in reports:
                continue
            path = baseline_writer.path_for(dimension)
            if not path.exists():
                logger.warning("No baseline for %s at %s", dimension, path)
                continue
            comparisons[dimension] = compare_to_baseline(
                reports[dimension], load_report(path)
            )
        return comparisons

    def _select(self, dimensions: Optional[Sequence[str]]) -> List[str]:
        if dimensions is None:
            return list(DIMENSIONS)
        unknown = [d for d in dimensions if d not in self._stages]
        if unknown:
            raise ConfigError(
                f"Unknown dimension(s): {', '.join(unknown)}. "
                f"Available: {', '.join(DIMENSIONS)}"
            )
        return [d for d in DIMENSIONS if d in dimensions]

    def _fresh_fuzzer(self) -> Fuzzer:
        return Fuzzer(self.config.fuzzer)

    def _delta_size(self) -> Dict[str, Any]:
        runner = DifferentialTrialRunner(
            self.contenders, self._fresh_fuzzer(), self.config.delta_trials
        )
        return runner.run_delta_size().to_dict()

    def _deletion_size(self) -> Dict[str, Any]:
        runner = DifferentialTrialRunner(
            self.contenders, self._fresh_fuzzer(), self.config.deletion_trials
        )
        return runner.run_deletion_size().to_dict()

    def _crdt_size(self) -> Dict[str, int]:
        runner = DifferentialTrialRunner(self.contenders, self._fresh_fuzzer(), 1)
        return runner.run_crdt_size()

    def _additions(self) -> Dict[str, Any]:
        runner = MicroBenchmarkRunner(self.contenders, self.config.additions)
        return runner.run("test_n_additions").to_dict()

    def _merges(self) -> Dict[str, Any]:
        runner = MicroBenchmarkRunner(self.contenders, self.config.merges)
        return runner.run("test_merge").to_dict()


__all__ = ["THROUGHPUT_DIMENSIONS", "BenchmarkSuite"]
