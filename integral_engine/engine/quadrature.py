"""Fixed-step and adaptive quadrature over compiled expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

DEFAULT_PLOT_POINTS = 200
DEFAULT_TOLERANCE = 1e-6
DEFAULT_MAX_DEPTH = 20

METHOD_TRAPEZOID = "trapezoid"
METHOD_ADAPTIVE = "adaptive"

Point = Tuple[float, float]


@dataclass(frozen=True)
class IntegrationResult:
    value: float
    points: Tuple[Point, ...]
    steps: int
    estimated_error: Optional[float] = None
    method: str = METHOD_TRAPEZOID
    evaluations: int = 0

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "value": self.value,
            "points": [{"t": t, "y": y} for t, y in self.points],
            "steps": self.steps,
            "method": self.method,
            "evaluations": self.evaluations,
        }
        if self.estimated_error is not None:
            payload["estimatedError"] = self.estimated_error
        return payload


class _CountingFunction:
    def __init__(self, function: Callable[[float], float]) -> None:
        self.function = function
        self.calls = 0

    def __call__(self, t: float) -> float:
        self.calls += 1
        return self.function(t)


def _trapezoid_sum(function: Callable[[float], float], t1: float, t2: float, steps: int) -> float:
    h = (t2 - t1) / steps
    total = (function(t1) + function(t2)) / 2.0
    for i in range(1, steps):
        total += function(t1 + i * h)
    return total * h


def integrate_fixed(
    function: Callable[[float], float],
    t1: float,
    t2: float,
    steps: int,
    plot_points: int = DEFAULT_PLOT_POINTS,
) -> IntegrationResult:
    """Composite trapezoidal rule with a Richardson-style error estimate.

    The interval is split into ``steps`` equal subintervals. Endpoints carry
    weight 1/2 and interior nodes weight 1. The error estimate compares the
    result against a run with half as many subintervals:
    ``|full - half| / 3``.

    Args:
        function: Compiled expression (any callable mapping ``t`` to a float).
        t1: Lower bound.
        t2: Upper bound.
        steps: Number of subintervals; values below 1 are treated as 1.
        plot_points: Approximate number of interior samples kept for plotting.

    Returns:
        The integration result with sampled plot points.
    """
    steps = max(1, int(steps))
    counted = _CountingFunction(function)
    h = (t2 - t1) / steps

    y_first = counted(t1)
    y_last = counted(t2)
    total = (y_first + y_last) / 2.0

    points: List[Point] = [(t1, y_first)]
    stride = max(1, steps // max(1, int(plot_points)))
    for i in range(1, steps):
        t = t1 + i * h
        y = counted(t)
        total += y
        if i % stride == 0 or i == steps - 1:
            points.append((t, y))
    points.append((t2, y_last))

    value = total * h
    half = _trapezoid_sum(counted, t1, t2, max(1, steps // 2))
    estimated_error = abs(value - half) / 3.0

    return IntegrationResult(
        value=value,
        points=tuple(points),
        steps=steps,
        estimated_error=estimated_error,
        method=METHOD_TRAPEZOID,
        evaluations=counted.calls,
    )


def integrate_adaptive(
    function: Callable[[float], float],
    t1: float,
    t2: float,
    max_steps: int,
    tolerance: float = DEFAULT_TOLERANCE,
    max_depth: int = DEFAULT_MAX_DEPTH,
    plot_points: int = DEFAULT_PLOT_POINTS,
) -> IntegrationResult:
    """Recursive Simpson/trapezoid hybrid that refines where ``f`` varies most.

    A subinterval is accepted with its Simpson estimate when it agrees with
    the trapezoid estimate within ``tolerance``, when it is narrower than
    ``(t2 - t1) / max_steps``, or when the recursion is deeper than
    ``max_depth``. The reported error is the tolerance itself.
    """
    max_steps = max(1, int(max_steps))
    counted = _CountingFunction(function)
    min_width = (t2 - t1) / max_steps

    def refine(a: float, b: float, fa: float, fb: float, depth: int) -> float:
        c = (a + b) / 2.0
        fc = counted(c)
        width = b - a
        simpson = (fa + 4.0 * fc + fb) * width / 6.0
        trapezoid = (fa + fb) * width / 2.0
        if abs(simpson - trapezoid) < tolerance or width < min_width or depth > max_depth:
            return simpson
        return refine(a, c, fa, fc, depth + 1) + refine(c, b, fc, fb, depth + 1)

    value = refine(t1, t2, counted(t1), counted(t2), 0)

    samples = max(1, min(int(plot_points), max_steps))
    points = tuple(
        (t, counted(t)) for t in (t1 + (t2 - t1) * i / samples for i in range(samples + 1))
    )

    return IntegrationResult(
        value=value,
        points=points,
        steps=max_steps,
        estimated_error=tolerance,
        method=METHOD_ADAPTIVE,
        evaluations=counted.calls,
    )
