"""
Elementary functions — функции libm, вычисляемые в double

Каждое ядро принимает и возвращает Python float и вычисляется так же, как
выражение сгенерированной C++ программы (libm в double, round-to-nearest).
Финальное округление к целевой точности выполняет widened().
"""

import functools
import math
from typing import Callable

from src.core.domain.context import EvaluationContext
from src.core.domain.results import SineCosine
from src.core.domain.values import NumericValue
from src.core.math.ieee_safeguards import ieee_atanh, ieee_divide, ieee_pow, libm_unary
from src.core.math.rounding import converge


# =============================================================================
# EVALUATION
# =============================================================================


def widened(kernel: Callable[..., float]) -> Callable[..., NumericValue]:
    """
    Evaluator: ядро в double и однократное округление в режиме контекста.

    Операнды расширяются до double точно; результат сужается один раз.
    """

    @functools.wraps(kernel)
    def evaluator(*operands: NumericValue, ctx: EvaluationContext) -> NumericValue:
        values = [operand.require_precision(ctx.precision).value for operand in operands]
        return converge(kernel(*values), ctx)

    return evaluator


def sine_cosine(a: NumericValue, ctx: EvaluationContext) -> SineCosine:
    """sincos: оба результата округляются независимо."""
    x = a.require_precision(ctx.precision).value
    return SineCosine(sine=converge(sin(x), ctx), cosine=converge(cos(x), ctx))


# =============================================================================
# EXPONENTIAL AND LOGARITHM
# =============================================================================


def exp(x: float) -> float:
    return libm_unary(math.exp, x)


def exp2(x: float) -> float:
    return libm_unary(math.exp2, x)


def exp10(x: float) -> float:
    return ieee_pow(10.0, x)


def expm1(x: float) -> float:
    return libm_unary(math.expm1, x)


def log(x: float) -> float:
    return libm_unary(math.log, x, pole=0.0)


def log2(x: float) -> float:
    return libm_unary(math.log2, x, pole=0.0)


def log10(x: float) -> float:
    return libm_unary(math.log10, x, pole=0.0)


def log1p(x: float) -> float:
    return libm_unary(math.log1p, x, pole=-1.0)


def power(x: float, y: float) -> float:
    return ieee_pow(x, y)


# =============================================================================
# TRIGONOMETRIC
# =============================================================================


def sin(x: float) -> float:
    return libm_unary(math.sin, x)


def cos(x: float) -> float:
    return libm_unary(math.cos, x)


def tan(x: float) -> float:
    return libm_unary(math.tan, x)


def sinpi(x: float) -> float:
    """sin(πx) через произведение в double (без редукции аргумента)."""
    return libm_unary(math.sin, math.pi * x)


def cospi(x: float) -> float:
    return libm_unary(math.cos, math.pi * x)


def sec(x: float) -> float:
    return ieee_divide(1.0, cos(x))


def csc(x: float) -> float:
    return ieee_divide(1.0, sin(x))


def cot(x: float) -> float:
    return ieee_divide(1.0, tan(x))


def asin(x: float) -> float:
    return libm_unary(math.asin, x)


def acos(x: float) -> float:
    return libm_unary(math.acos, x)


def atan(x: float) -> float:
    return math.atan(x)


def atan2(y: float, x: float) -> float:
    return math.atan2(y, x)


# =============================================================================
# HYPERBOLIC
# =============================================================================


def sinh(x: float) -> float:
    return libm_unary(math.sinh, x, odd_overflow=True)


def cosh(x: float) -> float:
    return libm_unary(math.cosh, x)


def tanh(x: float) -> float:
    return math.tanh(x)


def asinh(x: float) -> float:
    return math.asinh(x)


def acosh(x: float) -> float:
    return libm_unary(math.acosh, x)


def atanh(x: float) -> float:
    return ieee_atanh(x)


# =============================================================================
# HYPOT
# =============================================================================


def hypot(x: float, y: float) -> float:
    """
    sqrt(x² + y²) с масштабированием по большему модулю.

    Бесконечность имеет приоритет над NaN (hypot(inf, NaN) = inf).

    Examples:
        >>> hypot(3.0, 4.0)
        5.0
    """
    ax = abs(x)
    ay = abs(y)
    if math.isinf(ax) or math.isinf(ay):
        return math.inf
    if math.isnan(ax) or math.isnan(ay):
        return math.nan
    big = ax if ax > ay else ay
    small = ay if ax > ay else ax
    if big == 0.0:
        return 0.0
    r = small / big
    return big * math.sqrt(1.0 + r * r)
