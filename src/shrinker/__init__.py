"""shrinker: rule-based minimization of failing test inputs.

The module-level functions delegate to :data:`DEFAULT_SHRINKER`, a registry
pre-populated with the built-in rules. Code that needs isolation (a test
run, a tool with its own rules) should build its own with
:func:`new_shrinker`.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

from shrinker.domain.result import ShrinkResult
from shrinker.domain.rules import FLOAT, RULES, Rule, RuleGenerate, RuleTest
from shrinker.domain.types import ValueKind, classify
from shrinker.registry import Shrinker, build_shrinker, new_shrinker

__version__ = "0.1.0"

DEFAULT_SHRINKER = new_shrinker()


def add_rule(test: RuleTest, generate: RuleGenerate) -> None:
    """Register a rule on the default registry."""
    DEFAULT_SHRINKER.add_rule(test, generate)


def shrinks(value: Any) -> Iterator[Any]:
    """Shrink candidates for *value* from the default registry."""
    return DEFAULT_SHRINKER.shrinks(value)


def shrink(
    data: Any,
    predicate: Callable[[Any], Any],
    limit: int | float | None = None,
) -> ShrinkResult:
    """Minimize *data* with the default registry."""
    return DEFAULT_SHRINKER.shrink(data, predicate, limit)


__all__ = [
    "DEFAULT_SHRINKER",
    "FLOAT",
    "RULES",
    "Rule",
    "ShrinkResult",
    "Shrinker",
    "ValueKind",
    "__version__",
    "add_rule",
    "build_shrinker",
    "classify",
    "new_shrinker",
    "shrink",
    "shrinks",
]
