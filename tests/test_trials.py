"""Tests for the differential trial runner (crdtbench/bench/trials.py)."""

import json

import pytest

from crdtbench.bench.trials import INPUT_TREE, DifferentialTrialRunner, TrialOutcome
from crdtbench.core.content import encoded_size
from crdtbench.core.errors import ProbeError, UnimplementedProbeError
from crdtbench.core.fuzzer import Fuzzer, FuzzerConfig

from conftest import BrokenBench, PartialBench, RecordingBench


class TestDeltaSize:
    """Tests for the delta-size trial loop."""

    def test_ten_trials_without_collisions(self, wide_fuzzer: Fuzzer):
        """Every label a contender always returns gets one sample per trial."""
        bench = RecordingBench()
        outcome = DifferentialTrialRunner([bench], wide_fuzzer, trials=10).run_delta_size()

        assert outcome.trials == 10
        assert outcome.skipped == 0
        assert len(outcome.metrics["Recording"]["Random Merge Update"]) == 10
        assert len(outcome.metrics["Recording"]["Single Change Update"]) == 10

    def test_identical_pairs_are_skipped(self, colliding_fuzzer: Fuzzer):
        """No sample is folded for a trial whose two trees are equal."""
        bench = RecordingBench()
        outcome = DifferentialTrialRunner([bench], colliding_fuzzer, trials=30).run_delta_size()

        assert outcome.skipped > 0
        for samples in outcome.metrics["Recording"].values():
            assert len(samples) < 30
            assert len(samples) == outcome.completed
        for pair in bench.seen:
            first, second = json.loads(pair)
            assert first != second

    def test_all_skipped_leaves_no_metrics(self):
        """A fuzzer that can only produce one tree records nothing."""
        fuzzer = Fuzzer(FuzzerConfig(seed=1, value_range=(5, 5), depth_range=(0, 0), branch_range=(0, 0)))
        bench = RecordingBench()
        outcome = DifferentialTrialRunner([bench], fuzzer, trials=5).run_delta_size()

        assert outcome.skipped == 5
        assert outcome.metrics == {}
        assert bench.seen == []

    def test_fold_shape_for_optional_labels(self):
        """A label reported in only some trials has exactly that many samples."""
        fuzzer = Fuzzer(FuzzerConfig(seed=3, value_range=(0, 10**9), depth_range=(0, 2), branch_range=(1, 3)))
        reference = Fuzzer(fuzzer.config)
        expected = 0
        for _ in range(20):
            first = reference.generate_content()
            second = reference.generate_content()
            if first != second and isinstance(first, dict):
                expected += 1

        outcome = DifferentialTrialRunner([RecordingBench()], fuzzer, trials=20).run_delta_size()
        assert len(outcome.metrics["Recording"].get("Map Only", [])) == expected

    def test_contenders_get_private_copies(self, wide_fuzzer: Fuzzer):
        """A contender mutating its input never changes what the next one sees."""
        a = RecordingBench(name="A")
        b = RecordingBench(name="B")
        DifferentialTrialRunner([a, b], wide_fuzzer, trials=5).run_delta_size()

        assert a.seen == b.seen
        reference = Fuzzer(wide_fuzzer.config)
        for pair in a.seen:
            first = reference.generate_content()
            second = reference.generate_content()
            assert pair == json.dumps([first, second], sort_keys=True)

    def test_contenders_see_same_inputs(self, wide_fuzzer: Fuzzer):
        a = RecordingBench(name="A")
        b = RecordingBench(name="B")
        outcome = DifferentialTrialRunner([a, b], wide_fuzzer, trials=3).run_delta_size()
        assert list(outcome.metrics) == ["A", "B"]
        assert outcome.metrics["A"] == outcome.metrics["B"]

    def test_zero_trials(self, wide_fuzzer: Fuzzer):
        outcome = DifferentialTrialRunner([RecordingBench()], wide_fuzzer, trials=0).run_delta_size()
        assert outcome == TrialOutcome({}, 0, 0)

    def test_negative_trials_rejected(self, wide_fuzzer: Fuzzer):
        with pytest.raises(ValueError):
            DifferentialTrialRunner([], wide_fuzzer, trials=-1)


class TestDeletionSize:
    """Tests for the deletion-size trial loop."""

    def test_one_sample_per_trial(self, colliding_fuzzer: Fuzzer):
        """Deletion trials have no skip rule."""
        outcome = DifferentialTrialRunner([RecordingBench()], colliding_fuzzer, trials=7).run_deletion_size()
        assert outcome.skipped == 0
        assert outcome.metrics == {"Recording": {"Complete Deletion": [0] * 7}}

    def test_private_copies(self, wide_fuzzer: Fuzzer):
        a = RecordingBench(name="A")
        b = RecordingBench(name="B")
        DifferentialTrialRunner([a, b], wide_fuzzer, trials=4).run_deletion_size()
        assert a.seen == b.seen
        assert all(entry != "{}" for entry in b.seen)


class TestCrdtSize:
    """Tests for the single-shot crdt-size measurement."""

    def test_includes_input_tree_baseline(self, wide_fuzzer: Fuzzer):
        tree = Fuzzer(wide_fuzzer.config).generate_content()
        sizes = DifferentialTrialRunner([RecordingBench(), PartialBench()], wide_fuzzer).run_crdt_size()

        assert list(sizes) == [INPUT_TREE, "Recording", "Partial"]
        assert sizes[INPUT_TREE] == encoded_size(tree)
        assert sizes["Recording"] == len(json.dumps(tree)) * 2
        assert sizes["Partial"] == 1


class TestFailures:
    """Tests for error propagation."""

    def test_unimplemented_probe_aborts(self, wide_fuzzer: Fuzzer):
        runner = DifferentialTrialRunner([RecordingBench(), PartialBench()], wide_fuzzer, trials=3)
        with pytest.raises(UnimplementedProbeError) as exc_info:
            runner.run_delta_size()
        assert exc_info.value.contender == "Partial"
        assert exc_info.value.operation == "test_delta_size"

    def test_engine_failure_wrapped(self, wide_fuzzer: Fuzzer):
        runner = DifferentialTrialRunner([BrokenBench()], wide_fuzzer, trials=3)
        with pytest.raises(ProbeError) as exc_info:
            runner.run_delta_size()
        err = exc_info.value
        assert err.contender == "Broken"
        assert err.operation == "test_delta_size"
        assert err.trial == 0
        assert isinstance(err.__cause__, RuntimeError)
        assert "expected a delta" in str(err)

    def test_deletion_failure_wrapped(self, wide_fuzzer: Fuzzer):
        runner = DifferentialTrialRunner([BrokenBench()], wide_fuzzer, trials=2)
        with pytest.raises(ProbeError, match="test_size_after_deletion"):
            runner.run_deletion_size()
