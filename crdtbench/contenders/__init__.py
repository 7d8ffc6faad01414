"""Contender adapters and their registry.

Usage:
    from crdtbench.contenders import build_contenders

    contenders = build_contenders(["shelf", "automerge"], config.contender)
"""

from typing import Dict, List, Optional, Sequence, Type

from ..config import ContenderConfig
from ..core.errors import ConfigError
from .automerge import AutomergeBench
from .base import BenchmarkEnvironment, Thunk, check_availability
from .shelf import ShelfAwarenessBench, ShelfBench
from .yjs import YjsAwarenessBench

CONTENDERS: Dict[str, Type[BenchmarkEnvironment]] = {
    "shelf": ShelfBench,
    "shelf-awareness": ShelfAwarenessBench,
    "yjs-awareness": YjsAwarenessBench,
    "automerge": AutomergeBench,
}


def build_contenders(
    keys: Sequence[str], config: Optional[ContenderConfig] = None
) -> List[BenchmarkEnvironment]:
    """Instantiate registered contenders in the given order.

    Raises:
        ConfigError: If a key is not registered.
        ContenderNotAvailableError: If a contender's engine is not installed.
    """
    unknown = [key for key in keys if key not in CONTENDERS]
    if unknown:
        raise ConfigError(
            f"Unknown contender(s): {', '.join(unknown)}. "
            f"Available: {', '.join(CONTENDERS)}"
        )
    config = config or ContenderConfig()
    return [CONTENDERS[key](config) for key in keys]


__all__ = [
    "CONTENDERS",
    "AutomergeBench",
    "BenchmarkEnvironment",
    "ShelfAwarenessBench",
    "ShelfBench",
    "Thunk",
    "YjsAwarenessBench",
    "build_contenders",
    "check_availability",
]
