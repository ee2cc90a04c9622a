"""Tests for the greedy minimization loop."""

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime
from typing import Any

import pytest
from pydantic import ValidationError

from shrinker.domain.result import ShrinkResult
from shrinker.registry import Shrinker
from tests.conftest import atom


def _always(_: Any) -> bool:
    return True


def _working_sum(values: list[int]) -> int:
    return sum(values)


def _broken_sum(values: list[int]) -> int:
    """Sum that stops early at the first zero."""
    total = 0
    for n in values:
        if n == 0:
            break
        total += n
    return total


class TestShrinkIntegers:
    def test_always_true_reaches_zero(self, shrinker: Shrinker) -> None:
        assert shrinker.shrink(5, _always) == ShrinkResult(iterations=1, data=0)
        assert shrinker.shrink(-5, _always) == ShrinkResult(iterations=2, data=0)

    def test_restrictive_predicate(self, shrinker: Shrinker) -> None:
        result = shrinker.shrink(20, lambda n: n > 5)
        assert result == ShrinkResult(iterations=3, data=6)

    def test_limit_returns_intermediate_value(self, shrinker: Shrinker) -> None:
        result = shrinker.shrink(20, lambda n: n > 5, 2)
        assert result == ShrinkResult(iterations=2, data=8)

    def test_zero_limit_returns_input(self, shrinker: Shrinker) -> None:
        result = shrinker.shrink(20, _always, 0)
        assert result == ShrinkResult(iterations=0, data=20)

    def test_none_predicate_result_means_no_shrink(self, shrinker: Shrinker) -> None:
        result = shrinker.shrink(99, lambda _: None)
        assert result == ShrinkResult(iterations=0, data=99)

    def test_infinite_limit(self, shrinker: Shrinker) -> None:
        result = shrinker.shrink(20, lambda n: n > 5, math.inf)
        assert result == ShrinkResult(iterations=3, data=6)

    @pytest.mark.parametrize("limit", [1, 2, 3, 10])
    def test_never_exceeds_limit(self, shrinker: Shrinker, limit: int) -> None:
        result = shrinker.shrink(10**6, lambda n: n % 2 == 0, limit)
        assert result.iterations <= limit


class TestShrinkUnshrinkable:
    @pytest.mark.parametrize("value", [None, {}, object(), 0, "", []])
    def test_returns_input_unchanged(self, shrinker: Shrinker, value: Any) -> None:
        result = shrinker.shrink(value, _always)
        assert result.iterations == 0
        assert result.data is value


class TestShrinkSequences:
    def test_atoms_and_always_true(self, shrinker: Shrinker) -> None:
        result = shrinker.shrink([atom("a"), atom("b")], _always)
        assert result == ShrinkResult(iterations=1, data=[])

    def test_keeps_the_required_atom(self, shrinker: Shrinker) -> None:
        a, b, c, d, e = (atom(n) for n in "abcde")
        result = shrinker.shrink(
            [c, b, a, d, e],
            lambda data: any(str(element) == "a" for element in data),
        )
        assert result == ShrinkResult(iterations=3, data=[a])

    def test_finds_minimal_counterexample_for_broken_sum(self, shrinker: Shrinker) -> None:
        result = shrinker.shrink(
            [-3, 8, 4, 99, 18, 0, 78, -5, 66],
            lambda data: _working_sum(data) != _broken_sum(data),
        )
        assert result == ShrinkResult(iterations=10, data=[0, 1])


class TestShrinkText:
    def test_always_true_empties_the_string(self, shrinker: Shrinker) -> None:
        assert shrinker.shrink("food", _always) == ShrinkResult(iterations=1, data="")

    def test_length_restricted(self, shrinker: Shrinker) -> None:
        result = shrinker.shrink("some stuff is too long", lambda s: len(s) > 2)
        assert result == ShrinkResult(iterations=3, data="ong")

    def test_content_restricted(self, shrinker: Shrinker) -> None:
        result = shrinker.shrink("property", lambda s: len(s) > 0 and ord(s[0]) > 108)
        assert result == ShrinkResult(iterations=3, data="y")


class TestShrinkInstants:
    def test_always_true_reaches_the_epoch(self, shrinker: Shrinker) -> None:
        result = shrinker.shrink(datetime.now(), _always)
        assert result == ShrinkResult(iterations=1, data=datetime(1970, 1, 1))

    def test_tuesday_predicate(self, shrinker: Shrinker) -> None:
        start = datetime(2026, 10, 13, 15, 30, tzinfo=UTC)
        result = shrinker.shrink(start, lambda d: d.weekday() == 1)
        assert result.data.weekday() == 1
        assert result.iterations > 0
        assert result.data < start


class TestShrinkFloats:
    def test_restrictive_predicate(self, float_shrinker: Shrinker) -> None:
        result = float_shrinker.shrink(math.pi, lambda n: n > math.sqrt(2))
        assert result.iterations > 0
        assert math.sqrt(2) < result.data < math.pi


class TestShrinkProperties:
    @pytest.mark.parametrize(
        ("value", "predicate"),
        [
            (20, lambda n: n > 5),
            ([5, "hello", [3, 2]], lambda v: len(v) >= 2),
            ("some stuff is too long", lambda s: "o" in s),
            ([-3, 8, 4, 99, 18, 0, 78, -5, 66], lambda d: _working_sum(d) != _broken_sum(d)),
        ],
    )
    def test_idempotent(self, shrinker: Shrinker, value: Any, predicate: Any) -> None:
        first = shrinker.shrink(value, predicate)
        again = shrinker.shrink(first.data, predicate)
        assert again == ShrinkResult(iterations=0, data=first.data)

    def test_every_accepted_value_passes(self, shrinker: Shrinker) -> None:
        accepted: list[Any] = []

        def predicate(value: list[int]) -> bool:
            ok = sum(value) > 10
            if ok:
                accepted.append(value)
            return ok

        result = shrinker.shrink([9, 9, 9], predicate)
        assert accepted[-1] == result.data
        assert len(accepted) == result.iterations

    def test_predicate_errors_propagate(self, shrinker: Shrinker) -> None:
        def predicate(value: int) -> bool:
            raise KeyError(value)

        with pytest.raises(KeyError):
            shrinker.shrink(3, predicate)


class TestShrinkLogging:
    def test_logs_steps_at_debug(
        self, shrinker: Shrinker, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="shrinker")
        shrinker.shrink(20, lambda n: n > 5)
        messages = [r.getMessage() for r in caplog.records if r.name == "shrinker.registry"]
        assert messages[0].startswith("Shrink started")
        assert sum(m.startswith("Shrink step") for m in messages) == 3
        assert messages[-1].startswith("Shrink exhausted after 3 steps")

    def test_logs_limit_stop(self, shrinker: Shrinker, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="shrinker")
        shrinker.shrink(20, _always, 0)
        assert "Shrink stopped at limit of 0 steps" in caplog.text

    def test_records_carry_step_fields(
        self, shrinker: Shrinker, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="shrinker")
        shrinker.shrink(20, _always, 1)
        records = [r for r in caplog.records if r.name == "shrinker.registry"]
        assert records[0].limit == 1
        assert (records[1].iteration, records[1].examined) == (1, 1)
        assert (records[-1].reason, records[-1].iteration) == ("limit", 1)


class TestShrinkResult:
    def test_data_is_required(self) -> None:
        with pytest.raises(ValidationError):
            ShrinkResult(iterations=0)  # type: ignore[call-arg]

    def test_none_is_a_valid_final_value(self) -> None:
        assert ShrinkResult(iterations=0, data=None).data is None

    def test_iterations_cannot_be_negative(self) -> None:
        with pytest.raises(ValidationError):
            ShrinkResult(iterations=-1, data=0)

    def test_frozen(self) -> None:
        result = ShrinkResult(iterations=1, data=0)
        with pytest.raises(ValidationError):
            result.data = 5  # type: ignore[misc]
