from __future__ import annotations

import math
import unittest

import numpy as np

from stepplot_core.errors import ExpressionError
from stepplot_core.expressions import (
    ExpressionEvaluator,
    SympyEvaluator,
    coerce_real,
    compile_expression,
    validate_expression,
)


class CompileExpressionTests(unittest.TestCase):
    def test_caret_is_power(self) -> None:
        self.assertEqual(compile_expression("x^2")(3.0), 9.0)

    def test_implicit_multiplication(self) -> None:
        self.assertEqual(compile_expression("2x")(3.0), 6.0)
        self.assertAlmostEqual(compile_expression("2sin(x)")(math.pi / 2), 2.0)

    def test_assignment_prefix_is_ignored(self) -> None:
        self.assertEqual(compile_expression("y = x + 1")(1.0), 2.0)
        self.assertEqual(compile_expression("f(x) = 3*x")(2.0), 6.0)

    def test_named_constants(self) -> None:
        self.assertAlmostEqual(compile_expression("ln(e)")(0.0), 1.0)
        self.assertAlmostEqual(compile_expression("pi")(0.0), math.pi)

    def test_unknown_symbol_rejected(self) -> None:
        with self.assertRaises(ExpressionError) as ctx:
            compile_expression("x + z")
        self.assertIn("z", ctx.exception.reason)

    def test_empty_and_malformed_rejected(self) -> None:
        with self.assertRaises(ExpressionError):
            compile_expression("   ")
        with self.assertRaises(ExpressionError):
            compile_expression("sin(")

    def test_expression_error_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            compile_expression("y = ")

    def test_complex_results_become_nan(self) -> None:
        self.assertTrue(math.isnan(compile_expression("sqrt(x)")(-1.0)))
        self.assertTrue(math.isnan(coerce_real(complex(0.0, 1.0))))
        self.assertTrue(math.isnan(coerce_real("not a number")))
        self.assertEqual(coerce_real(complex(2.0, 0.0)), 2.0)


class EvaluateArrayTests(unittest.TestCase):
    def test_constant_broadcasts_to_sample_shape(self) -> None:
        values = compile_expression("3").evaluate_array(np.linspace(0.0, 1.0, 4))
        self.assertEqual(values.tolist(), [3.0, 3.0, 3.0, 3.0])

    def test_poles_become_nan(self) -> None:
        values = compile_expression("1/x").evaluate_array(np.array([-1.0, 0.0, 2.0]))
        self.assertEqual(values[0], -1.0)
        self.assertTrue(math.isnan(values[1]))
        self.assertEqual(values[2], 0.5)


class SympyEvaluatorTests(unittest.TestCase):
    def test_satisfies_evaluator_protocol(self) -> None:
        self.assertIsInstance(SympyEvaluator(), ExpressionEvaluator)

    def test_evaluate_requires_x(self) -> None:
        evaluator = SympyEvaluator()
        self.assertEqual(evaluator.evaluate("x*x", {"x": 4.0}), 16.0)
        with self.assertRaises(KeyError):
            evaluator.evaluate("x", {})


class ValidateExpressionTests(unittest.TestCase):
    def test_valid_expression_has_no_message(self) -> None:
        self.assertIsNone(validate_expression("x^2 + 1"))

    def test_empty_expression_message_is_localized(self) -> None:
        self.assertEqual(validate_expression(""), "Enter an expression")
        self.assertEqual(validate_expression("y =", "he"), "הכנס ביטוי")

    def test_invalid_expression_message(self) -> None:
        self.assertTrue(validate_expression("x +").startswith("Invalid expression"))
        self.assertTrue(validate_expression("x +", "he").startswith("ביטוי לא תקין"))


if __name__ == "__main__":
    unittest.main()
