"""Tests for JSON reports (crdtbench/bench/report.py)."""

import json
from pathlib import Path

import pytest

from crdtbench.bench.report import (
    DIMENSIONS,
    ReportWriter,
    compare_to_baseline,
    load_report,
)


class TestReportWriter:
    """Tests for writing dimension reports."""

    def test_fixed_file_names(self, tmp_path: Path):
        writer = ReportWriter(tmp_path)
        names = [writer.path_for(d).name for d in DIMENSIONS]
        assert names == [
            "delta-size.json",
            "deletion-size.json",
            "crdt-size.json",
            "additions.json",
            "merges.json",
        ]

    def test_creates_directory(self, tmp_path: Path):
        out = tmp_path / "nested" / "results"
        path = ReportWriter(out).write("crdt-size", {"Input Tree": 10})
        assert path == out / "crdt-size.json"
        assert json.loads(path.read_text()) == {"Input Tree": 10}

    def test_indented_json(self, tmp_path: Path):
        path = ReportWriter(tmp_path).write("delta-size", {"Shelf": {"a": [1, 2]}})
        assert path.read_text() == json.dumps({"Shelf": {"a": [1, 2]}}, indent=2)

    def test_overwrites_previous_report(self, tmp_path: Path):
        writer = ReportWriter(tmp_path)
        writer.write("merges", {"old": True})
        writer.write("merges", {"new": True})
        assert load_report(tmp_path / "merges.json") == {"new": True}

    def test_unknown_dimension(self, tmp_path: Path):
        with pytest.raises(ValueError, match="Unknown dimension"):
            ReportWriter(tmp_path).write("latency", {})
        assert not any(tmp_path.iterdir())


class TestLoadReport:
    """Tests for reading reports back."""

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_report(tmp_path / "nope.json")

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.json"
        path.write_text("  \n")
        with pytest.raises(ValueError, match="empty"):
            load_report(path)

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_report(path)


class TestCompareToBaseline:
    """Tests for throughput regression detection."""

    def test_classification(self):
        baseline = {"results": {"A": 100.0, "B": 100.0, "C": 100.0, "D": 0.0}}
        current = {"results": {"A": 120.0, "B": 80.0, "C": 103.0, "D": 50.0, "E": 1.0}}
        comparison = compare_to_baseline(current, baseline)

        assert [i["name"] for i in comparison["improvements"]] == ["A"]
        assert [i["name"] for i in comparison["regressions"]] == ["B"]
        assert [i["name"] for i in comparison["unchanged"]] == ["C"]
        assert comparison["improvements"][0]["change_percent"] == 20.0
        assert comparison["regression_count"] == 1

    def test_custom_threshold(self):
        comparison = compare_to_baseline(
            {"results": {"A": 103.0}}, {"results": {"A": 100.0}}, threshold_pct=1.0
        )
        assert comparison["improvement_count"] == 1

    def test_missing_results(self):
        comparison = compare_to_baseline({}, {})
        assert comparison["unchanged_count"] == 0
