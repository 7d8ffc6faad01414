#!/usr/bin/env python
"""Benchmark a custom contender next to the bundled shelf engine.

A contender subclasses BenchmarkEnvironment and overrides the probes it
supports. Here a naive "send the whole JSON document" replica is compared
with the shelf CRDT on the size dimensions.

Usage:
    python examples/custom_contender.py
"""

import json
from pathlib import Path

from crdtbench import BenchmarkSuite, SuiteConfig
from crdtbench.contenders import ShelfBench
from crdtbench.contenders.base import (
    COMPLETE_DELETION,
    DELETION,
    RANDOM_MERGE,
    SINGLE_CHANGE,
    BenchmarkEnvironment,
    as_map,
)
from crdtbench.core.content import encoded_size


class FullStateBench(BenchmarkEnvironment):
    """Every update ships the complete document."""

    name = "Full State"

    def test_delta_size(self, first, second):
        updated = dict(as_map(first), test="delta")
        return {
            RANDOM_MERGE: encoded_size(second),
            SINGLE_CHANGE: encoded_size(updated),
            COMPLETE_DELETION: encoded_size({"contents": {}}),
        }

    def test_size_after_deletion(self, values):
        return {DELETION: encoded_size({"contents": {}})}

    def test_crdt_size(self, values):
        return len(json.dumps(values))


def main():
    config = SuiteConfig(delta_trials=20, deletion_trials=20, output_dir=Path("results"))
    suite = BenchmarkSuite(
        config, contenders=[FullStateBench(config.contender), ShelfBench(config.contender)]
    )
    reports = suite.run(["delta-size", "deletion-size", "crdt-size"])
    print(json.dumps(reports["crdt-size"], indent=2))


if __name__ == "__main__":
    main()
