from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
import math
import re
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

import numpy as np
import sympy as sp
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

from .errors import ExpressionError

LOGGER = logging.getLogger(__name__)

X = sp.Symbol("x")

_TRANSFORMATIONS = standard_transformations + (implicit_multiplication_application, convert_xor)
_ASSIGNMENT_PREFIX = re.compile(r"^\s*(?:y|f\s*\(\s*x\s*\))\s*=\s*")
_LOCALS: dict[str, Any] = {"x": X, "e": sp.E, "pi": sp.pi, "ln": sp.log}
_IMAG_TOLERANCE = 1e-12

_VALIDATION_MESSAGES: dict[str, dict[str, str]] = {
    "en": {"empty": "Enter an expression", "invalid": "Invalid expression"},
    "he": {"empty": "הכנס ביטוי", "invalid": "ביטוי לא תקין"},
}


@runtime_checkable
class ExpressionEvaluator(Protocol):
    def evaluate(self, expression: str, variables: Mapping[str, float]) -> float:
        ...


@dataclass(frozen=True)
class CompiledExpression:
    source: str
    expr: sp.Expr
    func: Callable[..., Any]

    def __call__(self, x: float) -> float:
        with np.errstate(all="ignore"):
            raw = self.func(np.float64(x))
        return coerce_real(raw)

    def evaluate_array(self, xs: np.ndarray) -> np.ndarray:
        """Evaluate over ``xs``; complex, non-numeric and non-finite entries become NaN."""

        xs = np.asarray(xs, dtype=np.float64)
        try:
            with np.errstate(all="ignore"):
                raw = self.func(xs)
        except Exception as exc:  # sympy functions without a numpy ufunc
            LOGGER.debug("vectorized evaluation of `%s` failed (%s); evaluating per sample", self.source, exc)
            return np.array([self._safe_call(float(v)) for v in xs.ravel()], dtype=np.float64).reshape(xs.shape)

        values = np.asarray(raw)
        if values.dtype == object:
            values = np.array([coerce_real(v) for v in values.ravel()], dtype=np.float64).reshape(values.shape)
        elif np.iscomplexobj(values):
            values = np.where(np.abs(values.imag) <= _IMAG_TOLERANCE, values.real, np.nan)
        values = np.array(np.broadcast_to(values, xs.shape), dtype=np.float64)
        values[~np.isfinite(values)] = np.nan
        return values

    def _safe_call(self, x: float) -> float:
        try:
            return self(x)
        except Exception as exc:
            LOGGER.debug("evaluation of `%s` at x=%s failed: %s", self.source, x, exc)
            return math.nan


def coerce_real(value: Any) -> float:
    try:
        number = complex(value)
    except (TypeError, ValueError):
        return math.nan
    if abs(number.imag) > _IMAG_TOLERANCE:
        return math.nan
    real = number.real
    return real if math.isfinite(real) else math.nan


def _strip_assignment(expression: str) -> str:
    return _ASSIGNMENT_PREFIX.sub("", expression, count=1).strip()


@lru_cache(maxsize=256)
def compile_expression(expression: str) -> CompiledExpression:
    """Parse ``expression`` into a numpy-backed callable of ``x``."""

    text = _strip_assignment(expression)
    if not text:
        raise ExpressionError(expression, "empty expression")
    try:
        parsed = parse_expr(text, local_dict=dict(_LOCALS), transformations=_TRANSFORMATIONS)
    except Exception as exc:
        raise ExpressionError(expression, str(exc) or type(exc).__name__) from exc
    if not isinstance(parsed, sp.Expr):
        raise ExpressionError(expression, f"not a numeric expression ({type(parsed).__name__})")
    unknown = sorted(str(s) for s in parsed.free_symbols if s != X)
    if unknown:
        raise ExpressionError(expression, f"unknown symbol(s): {', '.join(unknown)}")
    func = sp.lambdify(X, parsed, modules="numpy")
    return CompiledExpression(source=expression, expr=parsed, func=func)


class SympyEvaluator:
    """Default evaluator: sympy parsing, numpy evaluation, cached compilation."""

    def compile(self, expression: str) -> CompiledExpression:
        return compile_expression(expression)

    def evaluate(self, expression: str, variables: Mapping[str, float]) -> float:
        if "x" not in variables:
            raise KeyError("x")
        return compile_expression(expression)(float(variables["x"]))

    def evaluate_array(self, expression: str, xs: np.ndarray) -> np.ndarray:
        return compile_expression(expression).evaluate_array(xs)


def validate_expression(expression: str, language: str = "en") -> str | None:
    """Return a user-facing error message for ``expression``, or ``None`` when it is acceptable."""

    messages = _VALIDATION_MESSAGES.get(language, _VALIDATION_MESSAGES["en"])
    if not expression or not _strip_assignment(expression):
        return messages["empty"]
    try:
        compiled = compile_expression(expression)
        compiled(0.0)
    except ExpressionError as exc:
        return f"{messages['invalid']}: {exc.reason}"
    except Exception as exc:
        return f"{messages['invalid']}: {exc}"
    return None
