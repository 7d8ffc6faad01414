"""JSON reports, one file per benchmark dimension."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

logger = logging.getLogger(__name__)

REPORT_FILES: Dict[str, str] = {
    "delta-size": "delta-size.json",
    "deletion-size": "deletion-size.json",
    "crdt-size": "crdt-size.json",
    "additions": "additions.json",
    "merges": "merges.json",
}

DIMENSIONS = tuple(REPORT_FILES)


class ReportWriter:
    """Writes dimension reports under one output directory.

    Usage:
        writer = ReportWriter(Path("results"))
        path = writer.write("crdt-size", {"Input Tree": 812, "Shelf": 4096})
    """

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    def path_for(self, dimension: str) -> Path:
        """File a dimension's report is written to.

        Raises:
            ValueError: If ``dimension`` is not a known dimension.
        """
        if dimension not in REPORT_FILES:
            raise ValueError(
                f"Unknown dimension: {dimension}. Available: {', '.join(DIMENSIONS)}"
            )
        return self.output_dir / REPORT_FILES[dimension]

    def write(self, dimension: str, payload: Any) -> Path:
        """Write ``payload`` as indented JSON, replacing any previous report."""
        path = self.path_for(dimension)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2))
        logger.info("Wrote %s report to %s", dimension, path)
        return path


def load_report(path: Union[str, Path]) -> Any:
    """Load a previously written report.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is empty or not valid JSON.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Report not found: {path}")

    content = path.read_text()
    if not content.strip():
        raise ValueError(f"Report file is empty: {path}")

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}")


def compare_to_baseline(
    current: Mapping[str, Any],
    baseline: Mapping[str, Any],
    threshold_pct: float = 5.0,
) -> Dict[str, Any]:
    """Compare two throughput reports contender by contender.

    Args:
        current: A fresh additions/merges report.
        baseline: An earlier report of the same dimension.
        threshold_pct: Changes within +/- this percentage count as unchanged.

    Returns:
        Comparison summary dictionary.
    """
    current_ops = current.get("results", {})
    baseline_ops = baseline.get("results", {})

    improvements = []
    regressions = []
    unchanged = []

    for name, ops in current_ops.items():
        base = baseline_ops.get(name)
        if not base or base <= 0:
            continue

        change_pct = ((ops - base) / base) * 100
        item = {
            "name": name,
            "baseline_ops": round(base, 2),
            "current_ops": round(ops, 2),
            "change_percent": round(change_pct, 1),
        }

        if change_pct > threshold_pct:
            improvements.append(item)
        elif change_pct < -threshold_pct:
            regressions.append(item)
        else:
            unchanged.append(item)

    improvements.sort(key=lambda x: x["change_percent"], reverse=True)
    regressions.sort(key=lambda x: x["change_percent"])

    return {
        "improvements": improvements,
        "regressions": regressions,
        "unchanged": unchanged,
        "improvement_count": len(improvements),
        "regression_count": len(regressions),
        "unchanged_count": len(unchanged),
    }


__all__ = [
    "DIMENSIONS",
    "REPORT_FILES",
    "ReportWriter",
    "compare_to_baseline",
    "load_report",
]
