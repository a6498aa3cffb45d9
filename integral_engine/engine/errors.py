"""Error taxonomy for expression handling and integration."""

from __future__ import annotations

from typing import Optional


class IntegrationError(ValueError):
    """Base error for every failure surfaced by the integration engine."""

    def __init__(self, message: str, expression: Optional[str] = None) -> None:
        super().__init__(message)
        self.expression = expression


class ValidationError(IntegrationError):
    """Raised when an expression contains a disallowed token."""

    def __init__(self, message: str, expression: Optional[str] = None, reason: str = "invalid") -> None:
        super().__init__(message, expression)
        self.reason = reason


class CompileError(IntegrationError):
    """Raised when a validated expression cannot be parsed."""


class EvalError(IntegrationError):
    """Raised when evaluating a compiled expression at a node fails."""

    def __init__(self, message: str, expression: Optional[str] = None, t: Optional[float] = None) -> None:
        super().__init__(message, expression)
        self.t = t


class BoundsError(IntegrationError):
    """Raised when the integration interval is empty or inverted."""
