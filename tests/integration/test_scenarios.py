import unittest

from integral_engine import BoundsError, IntegrationEngine, ValidationError


class IntegrationScenarioTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = IntegrationEngine()

    def test_energy_consumption_is_exact_for_linear_power(self) -> None:
        result = self.engine.integrate("100 + 20*t", 0, 10, steps=1000)
        self.assertAlmostEqual(result.value, 2000.0, places=6)
        self.assertAlmostEqual(result.estimated_error, 0.0, places=6)

    def test_sine_over_half_period(self) -> None:
        result = self.engine.integrate("sin(t)", 0, 3.14159265, steps=1000)
        self.assertAlmostEqual(result.value, 2.0, delta=1e-3)

    def test_adaptive_matches_fine_fixed_step(self) -> None:
        adaptive = self.engine.integrate("5*sin(t)", 0, 10, steps=1000, use_adaptive=True)
        fixed = self.engine.integrate("5*sin(t)", 0, 10, steps=10000)
        self.assertAlmostEqual(adaptive.value, fixed.value, delta=1e-4)

    def test_strategies_agree_with_closed_forms(self) -> None:
        cases = [
            ("7", 2.0, 5.0, 7.0 * 3.0),
            ("t", -1.0, 4.0, (4.0**2 - 1.0) / 2.0),
            ("3*t^2", 0.0, 2.0, 8.0),
        ]
        for expression, t1, t2, expected in cases:
            for adaptive in (False, True):
                with self.subTest(expression=expression, adaptive=adaptive):
                    result = self.engine.integrate(expression, t1, t2, steps=2000, use_adaptive=adaptive)
                    self.assertAlmostEqual(result.value, expected, delta=1e-5)

    def test_error_estimate_decreases_with_steps(self) -> None:
        coarse = self.engine.integrate("exp(-t) * cos(t)", 0, 5, steps=200)
        fine = self.engine.integrate("exp(-t) * cos(t)", 0, 5, steps=2000)
        self.assertLessEqual(fine.estimated_error, coarse.estimated_error)

    def test_identical_requests_are_bit_identical(self) -> None:
        for adaptive in (False, True):
            first = self.engine.integrate("50 + 10*sin(t)", 0, 10, steps=1000, use_adaptive=adaptive)
            second = self.engine.integrate("50 + 10*sin(t)", 0, 10, steps=1000, use_adaptive=adaptive)
            self.assertEqual(first.value.hex(), second.value.hex())
            self.assertEqual(first.points, second.points)

    def test_empty_interval_is_rejected(self) -> None:
        with self.assertRaises(BoundsError):
            self.engine.integrate("t", 3, 3)

    def test_injection_attempts_are_rejected(self) -> None:
        attempts = [
            "__import__('os').system('id') + t",
            "t + exec('print(1)')",
            "sin(t) + globals()",
            "t + require('fs')",
        ]
        for expression in attempts:
            with self.subTest(expression=expression):
                with self.assertRaises(ValidationError):
                    self.engine.integrate(expression, 0, 1)


if __name__ == "__main__":
    unittest.main()
