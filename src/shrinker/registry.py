"""Shrinker: an ordered rule registry plus the greedy minimization loop.

Rules are consulted in insertion order and the first whose test matches
supplies the candidates. Nothing here catches errors raised by rule
callables or predicates: they abort the call that triggered them.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from shrinker.domain.result import ShrinkResult
from shrinker.domain.rules import FLOAT, RULES, Rule, RuleGenerate, RuleTest
from shrinker.domain.streams import EmptyStream

if TYPE_CHECKING:
    from shrinker.config.settings import ShrinkSettings
    from shrinker.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Shrinker:
    """An ordered collection of shrink rules.

    Usage::

        shrinker = Shrinker()
        shrinker.add_rule(is_point, shrink_point)
        shrinker.add_default_rules()
        result = shrinker.shrink(value, still_fails)
    """

    def __init__(self) -> None:
        self._rules: list[Rule] = []

    @property
    def rules(self) -> tuple[Rule, ...]:
        """Snapshot of the registered rules, in dispatch order."""
        return tuple(self._rules)

    def add_rule(self, test: RuleTest, generate: RuleGenerate) -> None:
        """Append a rule built from *test* and *generate*."""
        self._rules.append(Rule(test, generate))

    def add_default_rules(self) -> None:
        """Append the built-in rules after any rules already registered."""
        self._rules.extend(RULES.values())

    def shrinks(self, value: Any) -> Iterator[Any]:
        """Return the candidate stream of the first rule matching *value*.

        Values with no matching rule get an empty stream.
        """
        for rule in self._rules:
            if rule.test(value):
                return iter(rule.generate(value, self))
        return EmptyStream()

    def shrink(
        self,
        data: Any,
        predicate: Callable[[Any], Any],
        limit: int | float | None = None,
    ) -> ShrinkResult:
        """Greedily shrink *data* while *predicate* keeps holding.

        Each step adopts the first candidate for which *predicate* is
        truthy. Stops when no candidate passes or after *limit* accepted
        steps (``None`` means no limit).
        """
        bound = math.inf if limit is None else limit

        current = data
        iterations = 0
        logger.debug("Shrink started (limit=%s)", limit, extra={"limit": limit})

        while iterations < bound:
            examined = 0
            for candidate in self.shrinks(current):
                examined += 1
                if predicate(candidate):
                    current = candidate
                    iterations += 1
                    logger.debug(
                        "Shrink step %d accepted after %d candidates",
                        iterations,
                        examined,
                        extra={"iteration": iterations, "examined": examined},
                    )
                    break
            else:
                logger.debug(
                    "Shrink exhausted after %d steps (%d candidates rejected)",
                    iterations,
                    examined,
                    extra={"reason": "exhausted", "iteration": iterations, "examined": examined},
                )
                break
        else:
            logger.debug(
                "Shrink stopped at limit of %s steps",
                limit,
                extra={"reason": "limit", "iteration": iterations},
            )

        return ShrinkResult(iterations=iterations, data=current)


def new_shrinker(
    *,
    defaults: bool = True,
    include_float: bool = False,
    plugins: PluginManager | None = None,
) -> Shrinker:
    """Build an isolated registry.

    Plugin rules come first so they take priority, then the built-ins,
    then the opt-in float rule.
    """
    shrinker = Shrinker()
    if plugins is not None:
        plugins.install_rules(shrinker)
    if defaults:
        shrinker.add_default_rules()
    if include_float:
        shrinker.add_rule(FLOAT.test, FLOAT.generate)
    return shrinker


def build_shrinker(settings: ShrinkSettings) -> Shrinker:
    """Build a registry from :class:`ShrinkSettings`."""
    plugins: PluginManager | None = None
    if settings.load_plugins or settings.plugin_dir is not None:
        from shrinker.plugins.manager import PluginManager

        plugins = PluginManager()
        names = plugins.discover_and_load(
            local_dir=settings.plugin_dir,
            entry_points=settings.load_plugins,
        )
        logger.debug("Loaded plugins: %s", ", ".join(names) or "(none)")
    return new_shrinker(include_float=settings.include_float, plugins=plugins)
