"""Suite configuration.

A ``SuiteConfig`` is built once (from defaults or a JSON/YAML file) and passed
by reference to the trial runner, the micro-benchmark runner and every
contender. Nothing in the harness reads process-wide settings.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .core.errors import ConfigError
from .core.fuzzer import FuzzerConfig

DEFAULT_CONTENDERS = ["shelf", "shelf-awareness", "yjs-awareness", "automerge"]


def _default_n_additions() -> FuzzerConfig:
    return FuzzerConfig(
        seed=42,
        value_range=(9000, 9001),
        depth_range=(1, 2),
        branch_range=(50, 100),
    )


def _default_merge_small() -> FuzzerConfig:
    return FuzzerConfig(
        seed=37,
        value_range=(300, 500),
        depth_range=(2, 4),
        branch_range=(0, 3),
    )


def _default_merge_large() -> FuzzerConfig:
    return FuzzerConfig(
        seed=42,
        value_range=(300, 500),
        depth_range=(3, 5),
        branch_range=(1, 5),
    )


@dataclass
class MicroBenchmarkConfig:
    """Settings for one throughput comparison.

    Attributes:
        name: Title of the comparison, used in reports.
        warmup_rounds: Untimed invocations of the first thunk.
        rounds: Timed rounds, each with a freshly built thunk.
        include_setup_cost: Time the probe factory call along with the thunk.
    """

    name: str
    warmup_rounds: int = 3
    rounds: int = 7
    include_setup_cost: bool = False

    def __post_init__(self) -> None:
        if self.rounds < 1:
            raise ValueError(f"rounds must be at least 1, got {self.rounds}")
        if self.warmup_rounds < 0:
            raise ValueError(f"warmup_rounds must be non-negative, got {self.warmup_rounds}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "warmup_rounds": self.warmup_rounds,
            "rounds": self.rounds,
            "include_setup_cost": self.include_setup_cost,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any], default_name: str = "") -> "MicroBenchmarkConfig":
        if not isinstance(d, dict):
            raise ConfigError(f"Expected dict, got {type(d).__name__}")
        return cls(
            name=str(d.get("name", default_name)),
            warmup_rounds=int(d.get("warmup_rounds", 3)),
            rounds=int(d.get("rounds", 7)),
            include_setup_cost=bool(d.get("include_setup_cost", False)),
        )


@dataclass
class ContenderConfig:
    """Inputs contenders use to set up their throughput probes."""

    n_additions: FuzzerConfig = field(default_factory=_default_n_additions)
    merge_small: FuzzerConfig = field(default_factory=_default_merge_small)
    merge_large: FuzzerConfig = field(default_factory=_default_merge_large)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nAdditions": self.n_additions.to_dict(),
            "merges": {
                "small": self.merge_small.to_dict(),
                "large": self.merge_large.to_dict(),
            },
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ContenderConfig":
        if not isinstance(d, dict):
            raise ConfigError(f"contender config must be a mapping, got {type(d).__name__}")

        defaults = cls()
        merges = d.get("merges", {})
        if not isinstance(merges, dict):
            raise ConfigError("contender.merges must be a mapping")

        def _load(raw: Optional[Dict[str, Any]], default: FuzzerConfig) -> FuzzerConfig:
            return default if raw is None else FuzzerConfig.from_dict(raw)

        return cls(
            n_additions=_load(
                d.get("nAdditions", d.get("n_additions")), defaults.n_additions
            ),
            merge_small=_load(merges.get("small"), defaults.merge_small),
            merge_large=_load(merges.get("large"), defaults.merge_large),
        )


@dataclass
class SuiteConfig:
    """Everything one benchmark run needs."""

    fuzzer: FuzzerConfig = field(default_factory=FuzzerConfig)
    delta_trials: int = 100
    deletion_trials: int = 100
    contender: ContenderConfig = field(default_factory=ContenderConfig)
    additions: MicroBenchmarkConfig = field(
        default_factory=lambda: MicroBenchmarkConfig(name="Test N additions")
    )
    merges: MicroBenchmarkConfig = field(
        default_factory=lambda: MicroBenchmarkConfig(name="Merge two replicas")
    )
    output_dir: Path = field(default_factory=lambda: Path("results"))
    contenders: List[str] = field(default_factory=lambda: list(DEFAULT_CONTENDERS))

    def __post_init__(self) -> None:
        self.output_dir = Path(self.output_dir)
        for name in ("delta_trials", "deletion_trials"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fuzzer": self.fuzzer.to_dict(),
            "delta_trials": self.delta_trials,
            "deletion_trials": self.deletion_trials,
            "contender": self.contender.to_dict(),
            "additions": self.additions.to_dict(),
            "merges": self.merges.to_dict(),
            "output_dir": str(self.output_dir),
            "contenders": list(self.contenders),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SuiteConfig":
        """Create a SuiteConfig, keeping defaults for missing keys.

        Raises:
            ConfigError: If any section is malformed.
        """
        if not isinstance(d, dict):
            raise ConfigError(f"Expected dict, got {type(d).__name__}")

        defaults = cls()
        fuzzer = (
            FuzzerConfig.from_dict(d["fuzzer"]) if "fuzzer" in d else defaults.fuzzer
        )
        contender = ContenderConfig.from_dict(d.get("contender", {}))

        contenders = d.get("contenders", defaults.contenders)
        if not isinstance(contenders, list) or not all(
            isinstance(c, str) for c in contenders
        ):
            raise ConfigError("contenders must be a list of registry keys")

        try:
            return cls(
                fuzzer=fuzzer,
                delta_trials=int(d.get("delta_trials", defaults.delta_trials)),
                deletion_trials=int(d.get("deletion_trials", defaults.deletion_trials)),
                contender=contender,
                additions=MicroBenchmarkConfig.from_dict(
                    d.get("additions", {}), default_name=defaults.additions.name
                ),
                merges=MicroBenchmarkConfig.from_dict(
                    d.get("merges", {}), default_name=defaults.merges.name
                ),
                output_dir=Path(d.get("output_dir", defaults.output_dir)),
                contenders=contenders,
            )
        except ConfigError:
            raise
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid suite config: {e}")

    @classmethod
    def load(cls, path: Path) -> "SuiteConfig":
        """Load a suite config from file (JSON or YAML).

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigError: If the file is empty, has invalid format, or malformed data.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        content = path.read_text()
        if not content.strip():
            raise ConfigError(f"Config file is empty: {path}")

        try:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Invalid file format in {path}: {e}")

        if data is None:
            raise ConfigError(f"Config file contains no data: {path}")

        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a dictionary, got {type(data).__name__}: {path}"
            )

        return cls.from_dict(data)

    def save(self, path: Path) -> None:
        """Save the config to file."""
        path = Path(path)
        data = self.to_dict()
        if path.suffix in (".yaml", ".yml"):
            content = yaml.dump(data, default_flow_style=False, sort_keys=False)
        else:
            content = json.dumps(data, indent=2)
        path.write_text(content)


__all__ = [
    "DEFAULT_CONTENDERS",
    "MicroBenchmarkConfig",
    "ContenderConfig",
    "SuiteConfig",
]
