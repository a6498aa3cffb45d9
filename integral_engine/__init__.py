"""Definite integrals of user expressions f(t) with plottable samples."""

from .engine import (
    BoundsError,
    CompileError,
    EvalError,
    IntegrationEngine,
    IntegrationError,
    IntegrationRequest,
    IntegrationResult,
    ResultCache,
    ValidationError,
)

__all__ = [
    "BoundsError",
    "CompileError",
    "EvalError",
    "IntegrationEngine",
    "IntegrationError",
    "IntegrationRequest",
    "IntegrationResult",
    "ResultCache",
    "ValidationError",
]
