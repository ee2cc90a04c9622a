"""Pluggy hook specifications for shrinker rule plugins.

One setup-time hook lets installed or local plugins contribute rules.
Plugin rules are added ahead of the built-ins so they win for any value
both would match.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from shrinker.domain.rules import Rule

PROJECT_NAME = "shrinker"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ShrinkerHookSpec:
    """Hook specifications for the shrinker plugin system."""

    @hookspec
    def register_shrink_rules(self) -> list[Rule] | None:
        """Return rules to add to registries built with plugins enabled."""
