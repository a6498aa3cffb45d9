"""Entry point tying validation, compilation, quadrature and caching together."""

from __future__ import annotations

import logging
import math
import time
from typing import Any, Dict, Optional

from integral_engine.utils.config_loader import EngineSettings
from integral_engine.utils.logger import get_logger, log_event

from .cache import CacheKey, ResultCache
from .errors import BoundsError, IntegrationError
from .evaluator import compile_expression
from .models import IntegrationRequest
from .quadrature import (
    METHOD_ADAPTIVE,
    METHOD_TRAPEZOID,
    IntegrationResult,
    integrate_adaptive,
    integrate_fixed,
)
from .validator import validate

logger = get_logger("integral_engine.engine")


def check_bounds(expression: str, t1: float, t2: float) -> None:
    """Rejects non-finite or inverted intervals before any evaluation."""
    if not (math.isfinite(t1) and math.isfinite(t2)):
        raise BoundsError(
            "Integration bounds must be finite (t1={}, t2={}) for expression: {}".format(t1, t2, expression),
            expression=expression,
        )
    if t1 >= t2:
        raise BoundsError(
            "The end time (t2={}) must be greater than the start time (t1={}) for expression: {}".format(
                t2, t1, expression
            ),
            expression=expression,
        )


class IntegrationEngine:
    """Computes definite integrals of user expressions with result caching."""

    def __init__(self, settings: Optional[EngineSettings] = None, cache: Optional[ResultCache] = None) -> None:
        self.settings = settings or EngineSettings()
        if cache is None:
            cache = ResultCache(
                max_entries=self.settings.cache.max_entries,
                ttl_seconds=self.settings.cache.ttl_seconds,
            )
        self.cache = cache

    def clamp_steps(self, steps: Optional[int]) -> int:
        bounds = self.settings.integration
        if steps is None:
            steps = bounds.default_steps
        return min(bounds.max_steps, max(bounds.min_steps, int(steps)))

    def integrate(
        self,
        expression: str,
        t1: float,
        t2: float,
        steps: Optional[int] = None,
        use_adaptive: bool = False,
    ) -> IntegrationResult:
        """Integrates ``expression`` over ``[t1, t2]``.

        Args:
            expression: Expression of the free variable ``t``.
            t1: Lower bound.
            t2: Upper bound, strictly greater than ``t1``.
            steps: Subinterval count (maximum count in adaptive mode), clamped
                to the configured range. Defaults to the configured value.
            use_adaptive: Selects adaptive refinement instead of the fixed
                trapezoid rule.

        Returns:
            The integration result, possibly served from the cache.

        Raises:
            BoundsError: If the bounds are non-finite or ``t1 >= t2``.
            ValidationError: If the expression contains a disallowed token.
            CompileError: If the expression is malformed.
            EvalError: If evaluation fails at any node.
        """
        t1 = float(t1)
        t2 = float(t2)
        check_bounds(expression, t1, t2)

        requested = steps
        steps = self.clamp_steps(steps)
        if requested is not None and int(requested) != steps:
            log_event(logger, logging.INFO, "steps_clamped", requested=requested, used=steps)

        method = METHOD_ADAPTIVE if use_adaptive else METHOD_TRAPEZOID
        key = CacheKey(expression, t1, t2, steps, method)

        return self.cache.get_or_compute(key, lambda: self._compute(expression, t1, t2, steps, use_adaptive))

    def integrate_request(self, request: IntegrationRequest) -> IntegrationResult:
        return self.integrate(
            expression=request.expression,
            t1=request.t1,
            t2=request.t2,
            steps=request.steps,
            use_adaptive=request.use_adaptive,
        )

    def _compute(self, expression: str, t1: float, t2: float, steps: int, use_adaptive: bool) -> IntegrationResult:
        started = time.perf_counter()
        try:
            normalized = validate(
                expression,
                max_length=self.settings.validation.max_length,
                blocked_patterns=self.settings.validation.blocked_patterns,
            )
            function = compile_expression(normalized)
            if use_adaptive:
                result = integrate_adaptive(
                    function,
                    t1,
                    t2,
                    steps,
                    tolerance=self.settings.adaptive.tolerance,
                    max_depth=self.settings.adaptive.max_depth,
                    plot_points=self.settings.integration.plot_points,
                )
            else:
                result = integrate_fixed(function, t1, t2, steps, plot_points=self.settings.integration.plot_points)
        except IntegrationError as exc:
            log_event(
                logger,
                logging.WARNING,
                "integration_failed",
                error_type=type(exc).__name__,
                expression=expression,
                error=str(exc),
            )
            raise

        log_event(
            logger,
            logging.INFO,
            "integration_done",
            method=result.method,
            steps=result.steps,
            evaluations=result.evaluations,
            elapsed_ms=round((time.perf_counter() - started) * 1000.0, 1),
        )
        return result

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_stats(self) -> Dict[str, Any]:
        return self.cache.stats()
