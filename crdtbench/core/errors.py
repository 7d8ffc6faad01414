"""crdtbench error taxonomy.

Every failure raised by the harness derives from ``BenchmarkError``. None of
these are retried; a failing contender aborts the run.
"""

from typing import Optional


class BenchmarkError(Exception):
    """Base class for all harness errors."""


class UnimplementedProbeError(BenchmarkError, NotImplementedError):
    """Raised when a contender does not implement a required probe."""

    def __init__(self, contender: str, operation: str):
        self.contender = contender
        self.operation = operation
        super().__init__(f"{contender} does not implement {operation}")


class ProbeError(BenchmarkError):
    """Raised when a contender's own CRDT logic fails during a probe.

    The original exception is chained as ``__cause__``.
    """

    def __init__(
        self,
        contender: str,
        operation: str,
        trial: Optional[int] = None,
        reason: str = "",
    ):
        self.contender = contender
        self.operation = operation
        self.trial = trial
        location = f" (trial {trial})" if trial is not None else ""
        message = f"{contender} failed in {operation}{location}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ContenderNotAvailableError(BenchmarkError, ImportError):
    """Raised when a contender's CRDT engine is not installed."""

    def __init__(self, engine: str, install_hint: str):
        self.engine = engine
        self.install_hint = install_hint
        super().__init__(
            f"{engine} is not installed. Install with: {install_hint}"
        )


class ConfigError(BenchmarkError, ValueError):
    """Raised for malformed suite configuration."""


__all__ = [
    "BenchmarkError",
    "UnimplementedProbeError",
    "ProbeError",
    "ContenderNotAvailableError",
    "ConfigError",
]
