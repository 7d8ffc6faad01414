"""Differential trials: every contender sees the same fuzzed inputs.

Usage:
    runner = DifferentialTrialRunner(contenders, Fuzzer(config.fuzzer), trials=100)
    outcome = runner.run_delta_size()
    print(outcome.skipped, outcome.metrics)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..contenders.base import BenchmarkEnvironment
from ..core.content import clone_content, content_equal, encoded_size
from ..core.errors import BenchmarkError, ProbeError
from ..core.fuzzer import Fuzzer
from ..metrics.folder import Accumulator, MetricFolder

logger = logging.getLogger(__name__)

INPUT_TREE = "Input Tree"


def call_probe(
    contender: BenchmarkEnvironment,
    operation: str,
    trial: Optional[int],
    *args: Any,
) -> Any:
    """Invoke one probe, attributing any engine failure to the contender.

    Raises:
        BenchmarkError: Unchanged, if the probe raised one.
        ProbeError: For any other exception, chained to the original.
    """
    try:
        return getattr(contender, operation)(*args)
    except BenchmarkError:
        raise
    except Exception as e:
        raise ProbeError(contender.name, operation, trial, reason=str(e)) from e


@dataclass
class TrialOutcome:
    """Folded metrics of one trial dimension."""

    metrics: Dict[str, Accumulator] = field(default_factory=dict)
    trials: int = 0
    skipped: int = 0

    @property
    def completed(self) -> int:
        return self.trials - self.skipped

    def to_dict(self) -> Dict[str, Accumulator]:
        """Report payload: only the folded metrics."""
        return self.metrics


class DifferentialTrialRunner:
    """Runs size probes over fuzzed trees for a fixed set of contenders."""

    def __init__(
        self,
        contenders: Sequence[BenchmarkEnvironment],
        fuzzer: Fuzzer,
        trials: int = 100,
    ):
        if trials < 0:
            raise ValueError(f"trials must be non-negative, got {trials}")
        self.contenders: List[BenchmarkEnvironment] = list(contenders)
        self.fuzzer = fuzzer
        self.trials = trials

    def run_delta_size(self) -> TrialOutcome:
        """Delta sizes over pairs of trees; identical pairs are skipped."""
        folder = MetricFolder()
        skipped = 0

        for trial in range(self.trials):
            first = self.fuzzer.generate_content()
            second = self.fuzzer.generate_content()
            if content_equal(first, second):
                skipped += 1
                logger.debug("Trial %d skipped: identical inputs", trial)
                continue

            for contender in self.contenders:
                sample = call_probe(
                    contender,
                    "test_delta_size",
                    trial,
                    clone_content(first),
                    clone_content(second),
                )
                folder.add(contender.name, sample)

        logger.info(
            "delta-size: %d trials, %d skipped", self.trials, skipped
        )
        return TrialOutcome(folder.to_dict(), self.trials, skipped)

    def run_deletion_size(self) -> TrialOutcome:
        """Residual sizes after deleting a whole fuzzed tree."""
        folder = MetricFolder()

        for trial in range(self.trials):
            values = self.fuzzer.generate_content()
            for contender in self.contenders:
                sample = call_probe(
                    contender, "test_size_after_deletion", trial, clone_content(values)
                )
                folder.add(contender.name, sample)

        logger.info("deletion-size: %d trials", self.trials)
        return TrialOutcome(folder.to_dict(), self.trials, 0)

    def run_crdt_size(self) -> Dict[str, int]:
        """Footprint of one tree per contender, next to the tree's own size."""
        values = self.fuzzer.generate_content()
        sizes: Dict[str, int] = {INPUT_TREE: encoded_size(values)}
        for contender in self.contenders:
            sizes[contender.name] = call_probe(
                contender, "test_crdt_size", None, clone_content(values)
            )
        logger.info("crdt-size: %s", sizes)
        return sizes


__all__ = ["INPUT_TREE", "TrialOutcome", "DifferentialTrialRunner", "call_probe"]
