"""Lazy candidate streams.

Each stream is a plain iterator that carries its own progress state, so a
``next()`` call advances exactly one step and the rest of the work stays
undone until asked for. Streams are single-pass: they cannot be restarted
and must not be shared between consumers.

- :class:`HalvingStream`: ``value - diff`` with ``diff`` halved each step.
- :class:`FloatHalvingStream`: the same walk over true division.
- :class:`SignFlipStream`: ``-value`` first, then a negated inner stream.
- :class:`BlockRemovalStream`: empty first, then contiguous block removals.
- :class:`ElementShrinkStream`: per-element substitutions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shrinker.registry import Shrinker


class CandidateStream(Iterator[Any]):
    """Base class for pull-based candidate iterators."""

    def __iter__(self) -> CandidateStream:
        return self

    def __next__(self) -> Any:
        raise NotImplementedError


class EmptyStream(CandidateStream):
    """A stream with nothing in it (the value is already minimal)."""

    def __next__(self) -> Any:
        raise StopIteration


class HalvingStream(CandidateStream):
    """Candidates ``value - diff`` for ``diff = value, value // 2, ..., 1``.

    Expects ``value >= 0``. ``HalvingStream(17)`` yields 0, 9, 13, 15, 16.
    """

    def __init__(self, value: int | float) -> None:
        self._value = value
        self._diff = value

    def __next__(self) -> int | float:
        if self._diff <= 0:
            raise StopIteration
        candidate = self._value - self._diff
        self._diff = self._diff // 2
        return candidate


class FloatHalvingStream(CandidateStream):
    """Candidates ``value - diff`` with ``diff`` halved by true division.

    Stops once ``diff`` is too small to change ``value``. Rounding can map
    two steps onto the same float; repeats are skipped.
    """

    def __init__(self, value: float) -> None:
        self._value = value
        self._diff = value
        self._last: float | None = None

    def __next__(self) -> float:
        while True:
            candidate = self._value - self._diff
            if candidate == self._value:
                raise StopIteration
            self._diff = self._diff / 2
            if candidate != self._last:
                self._last = candidate
                return candidate


class SignFlipStream(CandidateStream):
    """Yield ``-value``, then every candidate of *inner* negated.

    *inner* is a factory so the nested shrink is only requested once the
    flipped value has been consumed.
    """

    def __init__(self, value: Any, inner: Callable[[Any], Iterator[Any]]) -> None:
        self._flipped = -value
        self._inner_factory = inner
        self._flip_sent = False
        self._inner: Iterator[Any] | None = None

    def __next__(self) -> Any:
        if not self._flip_sent:
            self._flip_sent = True
            return self._flipped
        if self._inner is None:
            self._inner = iter(self._inner_factory(self._flipped))
        return -next(self._inner)


class BlockRemovalStream(CandidateStream):
    """Coarse-to-fine structural deletion over a sliceable sequence.

    Yields the empty sequence first, then the input with each contiguous
    block of ``len // 2`` items removed (left to right), then blocks of half
    that size, down to single items. Empty input yields nothing. Candidates
    are built by slicing, so they keep the input's type.
    """

    def __init__(self, value: Sequence[Any]) -> None:
        self._value = value
        self._length = len(value)
        self._started = False
        self._to_remove = self._length // 2
        self._offset = 0

    def __next__(self) -> Sequence[Any]:
        if self._length == 0:
            raise StopIteration
        if not self._started:
            self._started = True
            return self._value[:0]

        while self._to_remove > 0:
            offset = self._offset
            if offset + self._to_remove <= self._length:
                self._offset += 1
                return self._value[:offset] + self._value[offset + self._to_remove :]
            self._to_remove //= 2
            self._offset = 0
        raise StopIteration


class ElementShrinkStream(CandidateStream):
    """Substitute each element with each of its own shrink candidates.

    Walks indices in order; for index ``i`` it asks *shrinker* for the
    candidates of ``value[i]`` only when the previous index is exhausted.
    Elements with no applicable rule contribute nothing.
    """

    def __init__(self, value: Sequence[Any], shrinker: Shrinker) -> None:
        self._value = value
        self._shrinker = shrinker
        self._index = 0
        self._inner: Iterator[Any] | None = None

    def __next__(self) -> Sequence[Any]:
        while self._index < len(self._value):
            if self._inner is None:
                self._inner = iter(self._shrinker.shrinks(self._value[self._index]))
            try:
                candidate = next(self._inner)
            except StopIteration:
                self._inner = None
                self._index += 1
                continue
            return splice(self._value, self._index, candidate)
        raise StopIteration


def splice(value: Sequence[Any], index: int, item: Any) -> Sequence[Any]:
    """Return a copy of *value* with position *index* replaced by *item*."""
    head = value[:index]
    return head + type(head)((item,)) + value[index + 1 :]
