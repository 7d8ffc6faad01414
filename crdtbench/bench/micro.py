"""Throughput micro-benchmarks over contender thunks.

Each contender's probe is a factory: calling it does the (untimed) setup and
returns a zero-argument thunk. Only the thunk is timed unless the config asks
for setup cost to be included.
"""

import gc
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..config import MicroBenchmarkConfig
from ..contenders.base import BenchmarkEnvironment
from ..core.errors import BenchmarkError, ProbeError
from .trials import call_probe

logger = logging.getLogger(__name__)

UNIT = "ops/s"


def throughput(avg_ms: float) -> float:
    """Operations per second for an average elapsed time in milliseconds.

    Raises:
        ValueError: If ``avg_ms`` is not positive.
    """
    if avg_ms <= 0:
        raise ValueError(f"Average time must be positive, got {avg_ms}")
    return 1000.0 / avg_ms


def summarize(results: Mapping[str, float]) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(fastest, slowest)`` by ops/s; the first one seen wins ties."""
    fastest: Optional[str] = None
    slowest: Optional[str] = None
    for name, ops in results.items():
        if fastest is None or ops > results[fastest]:
            fastest = name
        if slowest is None or ops < results[slowest]:
            slowest = name
    return fastest, slowest


@dataclass
class ContenderTiming:
    """Timing of one contender's thunk."""

    avg_time_ms: float
    ops_per_second: float
    round_times_ms: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "avg_time_ms": round(self.avg_time_ms, 3),
            "ops_per_second": round(self.ops_per_second, 2),
            "round_times_ms": [round(t, 3) for t in self.round_times_ms],
        }


@dataclass
class MicroBenchmarkResult:
    """Result of one throughput comparison."""

    name: str
    config: MicroBenchmarkConfig
    timings: Dict[str, ContenderTiming] = field(default_factory=dict)

    @property
    def results(self) -> Dict[str, float]:
        return {name: t.ops_per_second for name, t in self.timings.items()}

    @property
    def fastest(self) -> Optional[str]:
        return summarize(self.results)[0]

    @property
    def slowest(self) -> Optional[str]:
        return summarize(self.results)[1]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for reporting."""
        return {
            "name": self.name,
            "unit": UNIT,
            "warmup_rounds": self.config.warmup_rounds,
            "rounds": self.config.rounds,
            "include_setup_cost": self.config.include_setup_cost,
            "results": {name: round(ops, 2) for name, ops in self.results.items()},
            "avg_time_ms": {
                name: round(t.avg_time_ms, 3) for name, t in self.timings.items()
            },
            "fastest": self.fastest,
            "slowest": self.slowest,
        }


class MicroBenchmarkRunner:
    """Times one probe across contenders.

    Usage:
        runner = MicroBenchmarkRunner(contenders, MicroBenchmarkConfig("Merge"))
        result = runner.run("test_merge")
        print(result.fastest, result.slowest)
    """

    def __init__(
        self,
        contenders: Sequence[BenchmarkEnvironment],
        config: MicroBenchmarkConfig,
    ):
        self.contenders = list(contenders)
        self.config = config

    def run(self, probe: str) -> MicroBenchmarkResult:
        """Benchmark ``probe`` (a thunk-returning operation) for every contender."""
        result = MicroBenchmarkResult(name=self.config.name, config=self.config)
        for contender in self.contenders:
            result.timings[contender.name] = self._time_contender(contender, probe)
            logger.debug(
                "%s/%s: %.3f ms",
                self.config.name,
                contender.name,
                result.timings[contender.name].avg_time_ms,
            )

        logger.info(
            "%s: fastest %s, slowest %s",
            self.config.name,
            result.fastest,
            result.slowest,
        )
        return result

    def _time_contender(self, contender: BenchmarkEnvironment, probe: str) -> ContenderTiming:
        thunk = call_probe(contender, probe, None)
        for _ in range(self.config.warmup_rounds):
            self._invoke(contender, probe, thunk, None)

        gc.collect()

        round_times: List[float] = []
        for round_index in range(self.config.rounds):
            if self.config.include_setup_cost:
                start_time = time.perf_counter()
                thunk = call_probe(contender, probe, round_index)
                self._invoke(contender, probe, thunk, round_index)
                end_time = time.perf_counter()
            else:
                thunk = call_probe(contender, probe, round_index)
                start_time = time.perf_counter()
                self._invoke(contender, probe, thunk, round_index)
                end_time = time.perf_counter()
            round_times.append((end_time - start_time) * 1000)

        avg_time_ms = sum(round_times) / len(round_times)
        # Clamped so a clock too coarse to see the thunk still gives a finite rate.
        avg_time_ms = max(avg_time_ms, 1e-6)
        return ContenderTiming(
            avg_time_ms=avg_time_ms,
            ops_per_second=throughput(avg_time_ms),
            round_times_ms=round_times,
        )

    @staticmethod
    def _invoke(
        contender: BenchmarkEnvironment, probe: str, thunk: Any, round_index: Optional[int]
    ) -> None:
        try:
            thunk()
        except BenchmarkError:
            raise
        except Exception as e:
            raise ProbeError(contender.name, probe, round_index, reason=str(e)) from e


__all__ = [
    "UNIT",
    "ContenderTiming",
    "MicroBenchmarkConfig",
    "MicroBenchmarkResult",
    "MicroBenchmarkRunner",
    "summarize",
    "throughput",
]
