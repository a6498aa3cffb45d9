import math
import unittest

from integral_engine.engine.errors import EvalError
from integral_engine.engine.evaluator import compile_expression
from integral_engine.engine.quadrature import IntegrationResult, integrate_adaptive, integrate_fixed


class FixedStepTestCase(unittest.TestCase):
    def test_constant_function(self) -> None:
        result = integrate_fixed(compile_expression("5"), 0.0, 4.0, 100)
        self.assertAlmostEqual(result.value, 20.0, places=9)
        self.assertAlmostEqual(result.estimated_error, 0.0, places=9)

    def test_identity_function(self) -> None:
        result = integrate_fixed(compile_expression("t"), 1.0, 3.0, 100)
        self.assertAlmostEqual(result.value, (3.0**2 - 1.0**2) / 2.0, places=9)

    def test_richardson_estimate_matches_quadratic_error(self) -> None:
        result = integrate_fixed(compile_expression("t^2"), 0.0, 1.0, 100)
        self.assertAlmostEqual(result.estimated_error, abs(result.value - 1.0 / 3.0), places=9)

    def test_error_shrinks_with_more_steps(self) -> None:
        function = compile_expression("sin(t)")
        coarse = integrate_fixed(function, 0.0, math.pi, 200)
        fine = integrate_fixed(function, 0.0, math.pi, 2000)
        self.assertLessEqual(fine.estimated_error, coarse.estimated_error)

    def test_plot_points_are_bounded(self) -> None:
        result = integrate_fixed(compile_expression("t"), 0.0, 10.0, 10000)
        self.assertLessEqual(len(result.points), 202)
        self.assertEqual(result.points[0], (0.0, 0.0))
        self.assertEqual(result.points[-1], (10.0, 10.0))
        self.assertAlmostEqual(result.points[-2][0], 10.0 - 10.0 / 10000, places=9)
        ts = [t for t, _ in result.points]
        self.assertEqual(ts, sorted(ts))

    def test_small_step_count_keeps_every_node(self) -> None:
        result = integrate_fixed(compile_expression("t"), 0.0, 1.0, 50)
        self.assertEqual(len(result.points), 51)

    def test_steps_below_one_are_coerced(self) -> None:
        result = integrate_fixed(compile_expression("t"), 0.0, 2.0, 0)
        self.assertEqual(result.steps, 1)
        self.assertAlmostEqual(result.value, 2.0)

    def test_evaluation_count_includes_half_step_pass(self) -> None:
        result = integrate_fixed(compile_expression("t"), 0.0, 1.0, 100)
        self.assertEqual(result.evaluations, 101 + 51)
        self.assertEqual(result.method, "trapezoid")

    def test_accepts_plain_callables(self) -> None:
        result = integrate_fixed(lambda t: t * t, 0.0, 3.0, 1000)
        self.assertAlmostEqual(result.value, 9.0, places=4)

    def test_evaluation_error_aborts(self) -> None:
        with self.assertRaises(EvalError):
            integrate_fixed(compile_expression("log(t)"), -1.0, 1.0, 100)


class AdaptiveTestCase(unittest.TestCase):
    def test_constant_and_linear_are_exact(self) -> None:
        self.assertAlmostEqual(integrate_adaptive(compile_expression("5"), 0.0, 4.0, 1000).value, 20.0, places=9)
        self.assertAlmostEqual(integrate_adaptive(compile_expression("t"), 1.0, 3.0, 1000).value, 4.0, places=9)

    def test_reports_tolerance_as_error(self) -> None:
        result = integrate_adaptive(compile_expression("t^2"), 0.0, 1.0, 1000)
        self.assertEqual(result.estimated_error, 1e-6)
        self.assertEqual(result.steps, 1000)
        self.assertEqual(result.method, "adaptive")
        self.assertAlmostEqual(result.value, 1.0 / 3.0, places=9)

    def test_refines_square_root(self) -> None:
        result = integrate_adaptive(compile_expression("sqrt(t)"), 0.0, 1.0, 1000)
        self.assertAlmostEqual(result.value, 2.0 / 3.0, delta=1e-4)

    def test_plot_points_are_uniform(self) -> None:
        result = integrate_adaptive(compile_expression("t"), 0.0, 10.0, 1000)
        self.assertEqual(len(result.points), 201)
        self.assertEqual(result.points[0][0], 0.0)
        self.assertAlmostEqual(result.points[-1][0], 10.0)
        small = integrate_adaptive(compile_expression("t"), 0.0, 10.0, 50)
        self.assertEqual(len(small.points), 51)

    def test_custom_tolerance(self) -> None:
        loose = integrate_adaptive(compile_expression("exp(t)"), 0.0, 1.0, 1000, tolerance=1e-2)
        tight = integrate_adaptive(compile_expression("exp(t)"), 0.0, 1.0, 1000, tolerance=1e-10)
        self.assertLess(loose.evaluations, tight.evaluations)
        self.assertAlmostEqual(tight.value, math.e - 1.0, places=9)

    def test_evaluation_error_aborts(self) -> None:
        with self.assertRaises(EvalError):
            integrate_adaptive(compile_expression("1/t"), -1.0, 1.0, 1000)

    def test_depth_cap_accepts_simpson_estimate(self) -> None:
        result = integrate_adaptive(compile_expression("exp(t)"), 0.0, 1.0, 1000, tolerance=0.0, max_depth=0)

        left = (math.exp(0.0) + 4.0 * math.exp(0.25) + math.exp(0.5)) * 0.5 / 6.0
        right = (math.exp(0.5) + 4.0 * math.exp(0.75) + math.exp(1.0)) * 0.5 / 6.0
        self.assertAlmostEqual(result.value, left + right, places=12)
        left_trapezoid = (math.exp(0.0) + math.exp(0.5)) * 0.5 / 2.0
        right_trapezoid = (math.exp(0.5) + math.exp(1.0)) * 0.5 / 2.0
        self.assertNotAlmostEqual(result.value, left_trapezoid + right_trapezoid, places=3)
        # endpoints, root midpoint, two child midpoints, 201 plot samples
        self.assertEqual(result.evaluations, 2 + 1 + 2 + 201)

    def test_min_width_stops_refinement(self) -> None:
        result = integrate_adaptive(compile_expression("exp(t)"), 0.0, 1.0, 1, tolerance=0.0)

        # The root is exactly min_width wide, so only its halves fall below it.
        left = (math.exp(0.0) + 4.0 * math.exp(0.25) + math.exp(0.5)) * 0.5 / 6.0
        right = (math.exp(0.5) + 4.0 * math.exp(0.75) + math.exp(1.0)) * 0.5 / 6.0
        self.assertAlmostEqual(result.value, left + right, places=12)
        self.assertEqual(result.evaluations, 2 + 1 + 2 + 2)
        self.assertEqual(len(result.points), 2)

    def test_tolerance_met_at_root_needs_one_midpoint(self) -> None:
        result = integrate_adaptive(compile_expression("3"), 0.0, 2.0, 1000, tolerance=1e-12)

        self.assertEqual(result.value, 6.0)
        self.assertEqual(result.evaluations, 2 + 1 + 201)


class IntegrationResultTestCase(unittest.TestCase):
    def test_to_dict_shape(self) -> None:
        result = IntegrationResult(value=2.0, points=((0.0, 1.0), (2.0, 1.0)), steps=10, estimated_error=0.0)
        payload = result.to_dict()
        self.assertEqual(payload["value"], 2.0)
        self.assertEqual(payload["points"], [{"t": 0.0, "y": 1.0}, {"t": 2.0, "y": 1.0}])
        self.assertEqual(payload["steps"], 10)
        self.assertEqual(payload["estimatedError"], 0.0)

    def test_to_dict_omits_missing_error(self) -> None:
        payload = IntegrationResult(value=1.0, points=(), steps=1).to_dict()
        self.assertNotIn("estimatedError", payload)


if __name__ == "__main__":
    unittest.main()
