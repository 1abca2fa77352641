from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised when planner or aggregator input is malformed."""


__all__ = ["InvalidArgumentError"]
