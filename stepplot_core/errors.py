from __future__ import annotations


class StepplotError(Exception):
    """Base class for stepplot errors."""


class DiagramDataError(StepplotError, ValueError):
    """Raised when a diagram payload is malformed."""


class ExpressionError(StepplotError, ValueError):
    """Raised when an expression cannot be parsed or compiled."""

    def __init__(self, expression: str, reason: str) -> None:
        super().__init__(f"cannot compile expression `{expression}`: {reason}")
        self.expression = expression
        self.reason = reason
