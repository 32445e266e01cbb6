"""
Per-declaration compilation scope.

Holds the dependency collector and the warnings of exactly one top-level
declaration's compilation. A scope is never shared between declarations,
which keeps declarations independently compilable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..errors import CompileWarning

logger = logging.getLogger(__name__)


class DependencyCollector:
    """Append-only set of schema identifiers a declaration references."""

    def __init__(self) -> None:
        self._names: list[str] = []

    def add(self, name: str) -> None:
        self._names.append(name)

    def __iter__(self):
        return iter(self.finalize())

    def __len__(self) -> int:
        return len(self.finalize())

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def finalize(self) -> list[str]:
        """Deduplicated names, in first-seen order."""
        return list(dict.fromkeys(self._names))


@dataclass
class CompilationScope:
    """Mutable state of one declaration's compilation."""

    declaration: str = ""
    dependencies: DependencyCollector = field(default_factory=DependencyCollector)
    warnings: list[CompileWarning] = field(default_factory=list)

    # The `maybe(...)` helper is referenced by the compiled schema
    uses_maybe_helper: bool = False

    def warn(self, message: str) -> None:
        warning = CompileWarning(message=message, declaration=self.declaration)
        self.warnings.append(warning)
        logger.warning("%s", warning)
