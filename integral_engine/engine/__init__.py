"""Numeric integration engine: validation, compilation, quadrature and caching."""

from .cache import CacheKey, ResultCache
from .errors import BoundsError, CompileError, EvalError, IntegrationError, ValidationError
from .evaluator import CompiledFunction, compile_expression
from .models import IntegrationRequest
from .quadrature import IntegrationResult, integrate_adaptive, integrate_fixed
from .service import IntegrationEngine, check_bounds
from .validator import validate

__all__ = [
    "BoundsError",
    "CacheKey",
    "CompileError",
    "CompiledFunction",
    "EvalError",
    "IntegrationEngine",
    "IntegrationError",
    "IntegrationRequest",
    "IntegrationResult",
    "ResultCache",
    "ValidationError",
    "check_bounds",
    "compile_expression",
    "integrate_adaptive",
    "integrate_fixed",
    "validate",
]
