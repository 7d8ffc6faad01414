"""crdtbench CLI - Differential benchmarks for state-based CRDTs."""

import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click

from .. import __version__
from ..bench import DIMENSIONS, BenchmarkSuite
from ..config import SuiteConfig
from ..contenders import CONTENDERS
from ..core.errors import BenchmarkError
from ..core.fuzzer import Fuzzer, FuzzerConfig
from ..metrics import summarize_metrics


def _load_config_safely(config_file: Optional[str]) -> Optional[SuiteConfig]:
    """Load the suite config with proper error handling.

    Returns:
        SuiteConfig if successful, None if failed (error message already printed).
    """
    if config_file is None:
        return SuiteConfig()
    try:
        return SuiteConfig.load(Path(config_file))
    except FileNotFoundError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        return None
    except BenchmarkError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        return None


def _print_trial_report(payload: Dict[str, Dict[str, Any]]) -> None:
    for contender, summaries in summarize_metrics(payload).items():
        click.echo(f"  {contender}")
        for label, summary in summaries.items():
            click.echo(
                f"    {label:<26} {summary.count:>4} samples, "
                f"mean {summary.mean:,.0f}, p90 {summary.p90:,.0f} bytes"
            )


def _print_throughput_report(payload: Dict[str, Any]) -> None:
    for contender, ops in payload["results"].items():
        marker = ""
        if contender == payload["fastest"]:
            marker = click.style(" fastest", fg="green")
        elif contender == payload["slowest"]:
            marker = click.style(" slowest", fg="red")
        click.echo(f"  {contender:<20} {ops:>12,.2f} {payload['unit']}{marker}")


def _print_comparison(dimension: str, comparison: Dict[str, Any]) -> None:
    click.echo(click.style(f"\nBaseline comparison: {dimension}", fg="cyan"))
    for item in comparison["improvements"]:
        click.echo(
            f"  {item['name']}: " + click.style(f"+{item['change_percent']}%", fg="green")
        )
    for item in comparison["regressions"]:
        click.echo(
            f"  {item['name']}: " + click.style(f"{item['change_percent']}%", fg="red")
        )
    click.echo(f"  Unchanged: {comparison['unchanged_count']}")


@click.group()
@click.version_option(version=__version__, prog_name="crdtbench")
def cli():
    """crdtbench - Compare CRDT engines on identical fuzzed inputs."""
    pass


@cli.command()
@click.option("--config", "config_file", type=click.Path(), help="Suite config (JSON or YAML)")
@click.option(
    "--dimension",
    "-d",
    "dimensions",
    multiple=True,
    type=click.Choice(DIMENSIONS),
    help="Dimension to run (repeatable, default: all)",
)
@click.option(
    "--contender",
    "-c",
    "contenders",
    multiple=True,
    help="Registry key of a contender (repeatable, default: from config)",
)
@click.option("--output-dir", "-o", type=click.Path(), help="Directory for JSON reports")
@click.option("--trials", "-n", type=click.IntRange(min=0), help="Trials per size dimension")
@click.option("--baseline-dir", type=click.Path(), help="Compare throughput with earlier reports")
@click.option("--quiet", "-q", is_flag=True, help="Only print errors")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def run(
    config_file: Optional[str],
    dimensions: Tuple[str, ...],
    contenders: Tuple[str, ...],
    output_dir: Optional[str],
    trials: Optional[int],
    baseline_dir: Optional[str],
    quiet: bool,
    verbose: bool,
):
    """Run the benchmark suite and write one report per dimension.

    Examples:
        crdtbench run
        crdtbench run --config bench.yaml -d merges -c shelf -c automerge
        crdtbench run --trials 10 --output-dir /tmp/results
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = _load_config_safely(config_file)
    if config is None:
        sys.exit(1)

    overrides: Dict[str, Any] = {}
    if contenders:
        overrides["contenders"] = list(contenders)
    if output_dir:
        overrides["output_dir"] = Path(output_dir)
    if trials is not None:
        overrides["delta_trials"] = trials
        overrides["deletion_trials"] = trials
    if overrides:
        config = dataclasses.replace(config, **overrides)

    try:
        suite = BenchmarkSuite(config)
        reports = suite.run(list(dimensions) if dimensions else None)
        comparisons = suite.compare(reports, baseline_dir) if baseline_dir else {}
    except (BenchmarkError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    if quiet:
        return

    click.echo(click.style("CRDT Benchmark Report", fg="cyan", bold=True))
    click.echo(click.style("=" * 50, fg="cyan"))
    click.echo(f"Contenders: {', '.join(c.name for c in suite.contenders)}")
    click.echo(f"Reports:    {config.output_dir}")

    for dimension, payload in reports.items():
        click.echo()
        click.echo(click.style(dimension, bold=True))
        if dimension in ("delta-size", "deletion-size"):
            _print_trial_report(payload)
        elif dimension == "crdt-size":
            for name, size in payload.items():
                click.echo(f"  {name:<20} {size:>12,} bytes")
        else:
            _print_throughput_report(payload)

    for dimension, comparison in comparisons.items():
        _print_comparison(dimension, comparison)


@cli.command()
@click.option("--seed", type=int, default=42, help="Fuzzer seed")
@click.option("--value-range", nargs=2, type=int, default=(300, 500), help="MIN MAX of scalar values")
@click.option("--depth-range", nargs=2, type=int, default=(3, 5), help="MIN MAX of the depth budget")
@click.option("--branch-range", nargs=2, type=int, default=(1, 4), help="MIN MAX children per map")
@click.option("--count", "-n", type=click.IntRange(min=1), default=1, help="Number of trees")
def fuzz(
    seed: int,
    value_range: Tuple[int, int],
    depth_range: Tuple[int, int],
    branch_range: Tuple[int, int],
    count: int,
):
    """Print fuzzed content trees as JSON.

    Examples:
        crdtbench fuzz
        crdtbench fuzz --seed 7 --depth-range 1 2 --count 3
    """
    try:
        config = FuzzerConfig(
            seed=seed,
            value_range=tuple(value_range),
            depth_range=tuple(depth_range),
            branch_range=tuple(branch_range),
        )
    except ValueError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    fuzzer = Fuzzer(config)
    for _ in range(count):
        click.echo(json.dumps(fuzzer.generate_content(), indent=2))


@cli.command()
def contenders():
    """List registered contenders and whether their engine is installed."""
    for key, bench_class in CONTENDERS.items():
        if bench_class.available:
            status = click.style("available", fg="green")
        else:
            status = click.style(f"missing ({bench_class.install_hint})", fg="yellow")
        click.echo(f"  {key:<18} {bench_class.name:<18} {status}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
