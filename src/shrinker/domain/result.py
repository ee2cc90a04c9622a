"""ShrinkResult: the outcome of a minimization run."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ShrinkResult(BaseModel):
    """Final state of the greedy minimization loop.

    Attributes:
        iterations: Number of accepted shrink steps.
        data: The smallest value found (the input itself when nothing passed).
    """

    model_config = {"frozen": True}

    iterations: int = Field(ge=0)
    data: Any
