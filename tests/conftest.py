"""Shared fixtures for crdtbench tests."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from crdtbench.config import ContenderConfig, MicroBenchmarkConfig, SuiteConfig
from crdtbench.contenders.base import BenchmarkEnvironment, Thunk
from crdtbench.core.fuzzer import Fuzzer, FuzzerConfig


class RecordingBench(BenchmarkEnvironment):
    """Contender that records what it was given, then trashes its inputs."""

    name = "Recording"

    def __init__(self, config: Optional[ContenderConfig] = None, name: str = "Recording"):
        super().__init__(config)
        self.name = name
        self.seen: List[str] = []
        self.factory_calls = 0
        self.thunk_calls = 0

    def test_delta_size(self, first: Any, second: Any) -> Dict[str, int]:
        self.seen.append(json.dumps([first, second], sort_keys=True))
        sizes = {
            "Random Merge Update": len(json.dumps(second)),
            "Single Change Update": len(json.dumps(first)) + 1,
        }
        if isinstance(first, dict):
            sizes["Map Only"] = len(first)
            first.clear()
        if isinstance(second, dict):
            second["mutated"] = 1
        return sizes

    def test_size_after_deletion(self, values: Any) -> Dict[str, int]:
        self.seen.append(json.dumps(values, sort_keys=True))
        if isinstance(values, dict):
            values.clear()
        return {"Complete Deletion": 0}

    def test_crdt_size(self, values: Any) -> int:
        return len(json.dumps(values)) * 2

    def test_n_additions(self) -> Thunk:
        self.factory_calls += 1

        def thunk() -> None:
            self.thunk_calls += 1

        return thunk

    def test_merge(self) -> Thunk:
        return self.test_n_additions()


class PartialBench(BenchmarkEnvironment):
    """Contender implementing only the crdt-size probe."""

    name = "Partial"

    def test_crdt_size(self, values: Any) -> int:
        return 1


class BrokenBench(BenchmarkEnvironment):
    """Contender whose engine fails at every probe."""

    name = "Broken"

    def test_delta_size(self, first: Any, second: Any) -> Dict[str, int]:
        raise RuntimeError("expected a delta")

    def test_size_after_deletion(self, values: Any) -> Dict[str, int]:
        raise RuntimeError("deletion failed")

    def test_n_additions(self) -> Thunk:
        def thunk() -> None:
            raise KeyError("missing")

        return thunk


@pytest.fixture
def base_fuzzer_config() -> FuzzerConfig:
    """Small trees for delta and deletion inputs."""
    return FuzzerConfig(seed=3, value_range=(0, 1000), depth_range=(2, 3), branch_range=(1, 3))


@pytest.fixture
def contender_config() -> ContenderConfig:
    """Small inputs so engine-backed probes stay fast."""
    return ContenderConfig(
        n_additions=FuzzerConfig(seed=42, value_range=(9000, 9001), depth_range=(1, 2), branch_range=(5, 10)),
        merge_small=FuzzerConfig(seed=37, value_range=(300, 500), depth_range=(1, 3), branch_range=(0, 3)),
        merge_large=FuzzerConfig(seed=42, value_range=(300, 500), depth_range=(2, 3), branch_range=(1, 4)),
    )


@pytest.fixture
def recording() -> RecordingBench:
    return RecordingBench()


@pytest.fixture
def wide_fuzzer() -> Fuzzer:
    """A fuzzer whose consecutive trees practically never collide."""
    return Fuzzer(FuzzerConfig(seed=7, value_range=(0, 10**9), depth_range=(2, 3), branch_range=(1, 3)))


@pytest.fixture
def colliding_fuzzer() -> Fuzzer:
    """A fuzzer producing bare scalars from a two-value range."""
    return Fuzzer(FuzzerConfig(seed=11, value_range=(1, 3), depth_range=(0, 1), branch_range=(0, 0)))


@pytest.fixture
def fast_micro() -> MicroBenchmarkConfig:
    return MicroBenchmarkConfig(name="Quick", warmup_rounds=2, rounds=3)


@pytest.fixture
def small_suite_config(
    tmp_path: Path, base_fuzzer_config: FuzzerConfig, contender_config: ContenderConfig
) -> SuiteConfig:
    """Suite config with few trials, writing under tmp_path."""
    return SuiteConfig(
        fuzzer=base_fuzzer_config,
        delta_trials=5,
        deletion_trials=5,
        contender=contender_config,
        additions=MicroBenchmarkConfig(name="Test N additions", warmup_rounds=1, rounds=2),
        merges=MicroBenchmarkConfig(name="Merge two replicas", warmup_rounds=1, rounds=2),
        output_dir=tmp_path / "results",
        contenders=["shelf", "shelf-awareness"],
    )
