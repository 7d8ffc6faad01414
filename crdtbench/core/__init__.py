"""Core building blocks: content trees, the fuzzer and the error taxonomy."""

from .content import (
    ContentTree,
    canonical_json_bytes,
    clone_content,
    content_equal,
    encoded_size,
    estimate_size_bytes,
)
from .errors import (
    BenchmarkError,
    ConfigError,
    ContenderNotAvailableError,
    ProbeError,
    UnimplementedProbeError,
)
from .fuzzer import WORDS, Fuzzer, FuzzerConfig

__all__ = [
    "ContentTree",
    "canonical_json_bytes",
    "clone_content",
    "content_equal",
    "encoded_size",
    "estimate_size_bytes",
    "BenchmarkError",
    "ConfigError",
    "ContenderNotAvailableError",
    "ProbeError",
    "UnimplementedProbeError",
    "WORDS",
    "Fuzzer",
    "FuzzerConfig",
]
