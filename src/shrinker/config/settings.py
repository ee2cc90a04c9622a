"""Unified settings: CLI flags, env vars, and code defaults in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``SHRINKER_*`` prefix
  3. Code defaults
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings


class ShrinkSettings(BaseSettings):
    """Settings for building registries and running the CLI.

    Attributes:
        limit: Maximum accepted shrink steps, or None for no limit.
        include_float: Add the opt-in float rule after the built-ins.
        load_plugins: Install rules from ``shrinker.rules`` entry points.
        plugin_dir: Directory of single-file rule plugins.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SHRINKER_",
    }

    limit: int | None = Field(default=None, ge=0)
    include_float: bool = False
    load_plugins: bool = False
    plugin_dir: Path | None = None

    # --- Output flags ---
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> ShrinkSettings:
        """Construct settings from a CLI invocation.

        Flags left unset (``None``) are dropped so environment variables
        and defaults can fill them.
        """
        overrides = {key: value for key, value in cli_flags.items() if value is not None}
        return cls(**overrides)
