"""Value classification for rule dispatch.

Built-in rules decide applicability through :func:`classify` rather than
ad-hoc isinstance checks. Custom rules are free to use any test.
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import StrEnum
from typing import Any


class ValueKind(StrEnum):
    """Shape of a value as far as the built-in rules are concerned."""

    INTEGER = "integer"
    REAL = "real"
    SEQUENCE = "sequence"
    TEXT = "text"
    INSTANT = "instant"
    OPAQUE = "opaque"


def classify(value: Any) -> ValueKind:
    """Return the :class:`ValueKind` of *value*.

    ``bool`` is opaque even though it subclasses ``int``. Floats with no
    fractional part count as integers; ``nan`` and infinities are opaque.
    """
    if isinstance(value, bool):
        return ValueKind.OPAQUE
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        if not math.isfinite(value):
            return ValueKind.OPAQUE
        return ValueKind.INTEGER if value.is_integer() else ValueKind.REAL
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, datetime):
        return ValueKind.INSTANT
    return ValueKind.OPAQUE
