"""Shared pytest fixtures and test helpers for shrinker tests."""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterable
from typing import Any

import pytest
from click.testing import CliRunner

from shrinker.registry import Shrinker, new_shrinker


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def shrinker() -> Shrinker:
    """A fresh registry with the built-in rules, isolated from the default one."""
    return new_shrinker()


@pytest.fixture
def float_shrinker() -> Shrinker:
    """A fresh registry with the built-ins plus the float rule."""
    return new_shrinker(include_float=True)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore logger state after each test (the CLI reconfigures logging)."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("shrinker")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


class Atom:
    """A value no rule recognizes, printed as its name."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


def atom(name: str) -> Atom:
    return Atom(name)


def consume(stream: Iterable[Any]) -> list[Any]:
    """Drain a candidate stream into a list."""
    return list(stream)
