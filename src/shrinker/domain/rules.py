"""Shrink rules: a type test paired with a candidate generator.

The four built-in rules live in :data:`RULES` in the order
``add_default_rules()`` appends them. :data:`FLOAT` is shipped separately
and only used when a registry opts into it.

Generators take ``(value, shrinker)`` and call back into
``shrinker.shrinks()`` for nested values, so custom rules registered on a
registry also apply inside sequences and instants.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from shrinker.domain.streams import (
    BlockRemovalStream,
    ElementShrinkStream,
    FloatHalvingStream,
    HalvingStream,
    SignFlipStream,
)
from shrinker.domain.types import ValueKind, classify

if TYPE_CHECKING:
    from shrinker.registry import Shrinker

RuleTest = Callable[[Any], Any]
RuleGenerate = Callable[[Any, "Shrinker"], Iterator[Any]]


@dataclass(frozen=True)
class Rule:
    """A rule applies to a value iff ``test(value)`` is truthy."""

    test: RuleTest
    generate: RuleGenerate


def _is_kind(kind: ValueKind) -> RuleTest:
    def test(value: Any) -> bool:
        return classify(value) is kind

    test.__name__ = f"is_{kind.value}"
    return test


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------


def shrink_integer(value: int | float, shrinker: Shrinker) -> Iterator[int | float]:
    """Move toward zero; negatives try their positive twin first."""
    if value < 0:
        return SignFlipStream(value, shrinker.shrinks)
    return HalvingStream(value)


def shrink_sequence(value: Sequence[Any], shrinker: Shrinker) -> Iterator[Sequence[Any]]:
    """Drop blocks first, then shrink elements in place."""
    return itertools.chain(BlockRemovalStream(value), ElementShrinkStream(value, shrinker))


def shrink_text(value: str, shrinker: Shrinker) -> Iterator[str]:
    """Drop contiguous spans only; characters are never substituted."""
    return BlockRemovalStream(value)


def shrink_instant(value: datetime, shrinker: Shrinker) -> Iterator[datetime]:
    """Shrink the milliseconds since the epoch and rebuild datetimes."""
    candidates = shrinker.shrinks(to_epoch_millis(value))
    return (from_epoch_millis(millis, like=value) for millis in candidates)


def shrink_float(value: float, shrinker: Shrinker) -> Iterator[float]:
    """Like :func:`shrink_integer` but halving by true division."""
    if value < 0:
        return SignFlipStream(value, shrinker.shrinks)
    return FloatHalvingStream(value)


# ---------------------------------------------------------------------------
# Instant helpers
# ---------------------------------------------------------------------------

_NAIVE_EPOCH = datetime(1970, 1, 1)
_UTC_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_MILLISECOND = timedelta(milliseconds=1)


def to_epoch_millis(value: datetime) -> int:
    """Whole milliseconds since the Unix epoch (floored).

    Naive datetimes are measured against a naive epoch; aware ones against UTC.
    """
    epoch = _NAIVE_EPOCH if value.tzinfo is None else _UTC_EPOCH
    return (value - epoch) // _MILLISECOND


def from_epoch_millis(millis: int | float, *, like: datetime | None = None) -> datetime:
    """Inverse of :func:`to_epoch_millis`, matching the timezone of *like*.

    Aware results are reached by stepping from *like* in its own timezone,
    so inputs whose UTC instant lies outside ``datetime.min``/``datetime.max``
    (e.g. year 1 at +05:00) still convert.
    """
    if like is None or like.tzinfo is None:
        return _NAIVE_EPOCH + timedelta(milliseconds=millis)
    anchor = like.replace(microsecond=like.microsecond // 1000 * 1000)
    result = anchor + timedelta(milliseconds=millis - to_epoch_millis(like))
    # Aware arithmetic is wall-clock; undo any offset change along the way.
    return result + (result.utcoffset() - anchor.utcoffset())


# ---------------------------------------------------------------------------
# Built-in rule set
# ---------------------------------------------------------------------------

INTEGER = Rule(_is_kind(ValueKind.INTEGER), shrink_integer)
SEQUENCE = Rule(_is_kind(ValueKind.SEQUENCE), shrink_sequence)
TEXT = Rule(_is_kind(ValueKind.TEXT), shrink_text)
INSTANT = Rule(_is_kind(ValueKind.INSTANT), shrink_instant)

FLOAT = Rule(_is_kind(ValueKind.REAL), shrink_float)

RULES: dict[str, Rule] = {
    "integer": INTEGER,
    "sequence": SEQUENCE,
    "text": TEXT,
    "instant": INSTANT,
}
