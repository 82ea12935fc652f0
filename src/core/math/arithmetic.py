"""
IEEE Arithmetic — корректно округлённые операции и утилиты <math.h>

Базовые операции (add, sub, mul, div, fma, sqrt, ldexp) вычисляют
математически точный результат в fractions.Fraction и округляют его ровно
один раз в режиме контекста. Операнды NaN/inf обрабатываются нативной
IEEE арифметикой double.

Утилиты (abs, copysign, fmax, floor, rint, ilogb, nextafter, modf, frexp
и т.д.) следуют семантике C99, чтобы результаты совпадали со
сгенерированной C++ программой.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Точный нулевой результат суммы: +0, либо -0 в режиме RD
   (кроме суммы нулей одного знака)
2. Деление на ноль даёт ±inf / NaN, исключение не выбрасывается
3. Операнды не расширяются неявно: точность проверяется по контексту
"""

import math
from fractions import Fraction
from typing import Callable, Final

from src.core.codec.bits import from_float, next_toward, signed_zero
from src.core.domain.context import EvaluationContext, RoundingMode
from src.core.domain.results import FractionSplit, MantissaExponent
from src.core.domain.values import NumericValue
from src.core.math.ieee_safeguards import ieee_divide, ieee_fmod, ieee_sqrt
from src.core.math.rounding import round_exact, round_sqrt


# =============================================================================
# CONSTANTS
# =============================================================================

# Переносимые значения ilogb (C99 допускает INT_MIN; здесь фиксированы)
FP_ILOGB0: Final[int] = -2147483647
FP_ILOGBNAN: Final[int] = 2147483647
INT_MAX: Final[int] = 2147483647

# Сдвиг ldexp, за которым результат гарантированно переполняется или
# исчезает в обоих форматах
LDEXP_SHIFT_LIMIT: Final[int] = 2300


# =============================================================================
# HELPERS
# =============================================================================


def _unpack(ctx: EvaluationContext, *operands: NumericValue) -> list[float]:
    return [operand.require_precision(ctx.precision).value for operand in operands]


def _native(result: float, ctx: EvaluationContext) -> NumericValue:
    """Результат, не требующий округления (точный, NaN или inf)."""
    return from_float(result, ctx.precision)


def _is_negative(x: float) -> bool:
    return math.copysign(1.0, x) < 0


def _all_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def exact_zero_sum_is_negative(left: float, right: float, ctx: EvaluationContext) -> bool:
    """
    Знак точной нулевой суммы left + right.

    Сумма нулей одного знака сохраняет знак; в остальных случаях +0,
    а в режиме RD -0.
    """
    if left == 0.0 and right == 0.0 and _is_negative(left) == _is_negative(right):
        return _is_negative(left)
    return ctx.rounding_mode is RoundingMode.TOWARD_NEGATIVE


def _round_sum(exact: Fraction, left: float, right: float, ctx: EvaluationContext) -> NumericValue:
    if exact == 0:
        return signed_zero(ctx.precision, negative=exact_zero_sum_is_negative(left, right, ctx))
    return round_exact(exact, ctx.rounding_mode, ctx.precision)


# =============================================================================
# BASIC OPERATIONS
# =============================================================================


def add(a: NumericValue, b: NumericValue, ctx: EvaluationContext) -> NumericValue:
    """
    Сложение с однократным округлением.

    Examples:
        >>> from src.core.codec import parse_value
        >>> ctx = EvaluationContext()
        >>> hex(add(parse_value("1.25", "binary32"), parse_value("2.5", "binary32"), ctx).bits)
        '0x40700000'
    """
    x, y = _unpack(ctx, a, b)
    if not _all_finite(x, y):
        return _native(x + y, ctx)
    return _round_sum(Fraction(x) + Fraction(y), x, y, ctx)


def sub(a: NumericValue, b: NumericValue, ctx: EvaluationContext) -> NumericValue:
    x, y = _unpack(ctx, a, b)
    if not _all_finite(x, y):
        return _native(x - y, ctx)
    return _round_sum(Fraction(x) - Fraction(y), x, -y, ctx)


def mul(a: NumericValue, b: NumericValue, ctx: EvaluationContext) -> NumericValue:
    x, y = _unpack(ctx, a, b)
    if not _all_finite(x, y):
        return _native(x * y, ctx)
    exact = Fraction(x) * Fraction(y)
    if exact == 0:
        return signed_zero(ctx.precision, negative=_is_negative(x) != _is_negative(y))
    return round_exact(exact, ctx.rounding_mode, ctx.precision)


def div(a: NumericValue, b: NumericValue, ctx: EvaluationContext) -> NumericValue:
    """
    Деление; x/±0 даёт ±inf (0/0 — NaN), DomainError не выбрасывается.
    """
    x, y = _unpack(ctx, a, b)
    if not _all_finite(x, y) or y == 0.0:
        return _native(ieee_divide(x, y), ctx)
    if x == 0.0:
        return signed_zero(ctx.precision, negative=_is_negative(x) != _is_negative(y))
    return round_exact(Fraction(x) / Fraction(y), ctx.rounding_mode, ctx.precision)


def fma(
    a: NumericValue, b: NumericValue, c: NumericValue, ctx: EvaluationContext
) -> NumericValue:
    """
    Fused multiply-add: a*b + c с одним округлением.

    Args:
        a: Первый множитель
        b: Второй множитель
        c: Слагаемое
        ctx: Контекст вычисления

    Returns:
        Корректно округлённое a*b + c
    """
    x, y, z = _unpack(ctx, a, b, c)
    if not _all_finite(x, y):
        return _native(x * y + z, ctx)
    if not math.isfinite(z):
        # Конечное произведение не влияет на inf/NaN слагаемое
        return _native(z, ctx)

    product = Fraction(x) * Fraction(y)
    exact = product + Fraction(z)
    if exact == 0:
        if product == 0:
            product_sign = -0.0 if _is_negative(x) != _is_negative(y) else 0.0
        else:
            product_sign = -1.0 if product < 0 else 1.0
        negative = exact_zero_sum_is_negative(product_sign, z, ctx)
        return signed_zero(ctx.precision, negative=negative)
    return round_exact(exact, ctx.rounding_mode, ctx.precision)


def sqrt(a: NumericValue, ctx: EvaluationContext) -> NumericValue:
    (x,) = _unpack(ctx, a)
    if math.isnan(x) or x == 0.0 or x == math.inf or x < 0:
        return _native(ieee_sqrt(x), ctx)
    return round_sqrt(x, ctx.rounding_mode, ctx.precision)


def rsqrt(a: NumericValue, ctx: EvaluationContext) -> NumericValue:
    """1/sqrt(a): оба шага округляются в режиме контекста."""
    one = from_float(1.0, ctx.precision)
    return div(one, sqrt(a, ctx), ctx)


def ldexp(a: NumericValue, exponent: int, ctx: EvaluationContext) -> NumericValue:
    """
    a * 2**exponent с однократным округлением (scalbn, scalbln).

    Examples:
        >>> from src.core.codec import parse_value
        >>> ldexp(parse_value("0.15625", "binary32"), 3, EvaluationContext()).value
        1.25
    """
    (x,) = _unpack(ctx, a)
    if not math.isfinite(x) or x == 0.0:
        return _native(x, ctx)
    shift = max(-LDEXP_SHIFT_LIMIT, min(LDEXP_SHIFT_LIMIT, int(exponent)))
    exact = Fraction(x) * Fraction(2) ** shift
    return round_exact(exact, ctx.rounding_mode, ctx.precision)


def fmod(a: NumericValue, b: NumericValue, ctx: EvaluationContext) -> NumericValue:
    """Остаток с знаком делимого; результат всегда точен."""
    x, y = _unpack(ctx, a, b)
    return _native(ieee_fmod(x, y), ctx)


# =============================================================================
# SIGN AND COMPARISON UTILITIES
# =============================================================================


def absolute(a: NumericValue, ctx: EvaluationContext) -> NumericValue:
    a.require_precision(ctx.precision)
    return NumericValue(bits=a.bits & ~ctx.precision.format.sign_mask, precision=ctx.precision)


def copy_sign(a: NumericValue, b: NumericValue, ctx: EvaluationContext) -> NumericValue:
    a.require_precision(ctx.precision)
    b.require_precision(ctx.precision)
    sign_mask = ctx.precision.format.sign_mask
    return NumericValue(
        bits=(a.bits & ~sign_mask) | (b.bits & sign_mask), precision=ctx.precision
    )


def positive_difference(a: NumericValue, b: NumericValue, ctx: EvaluationContext) -> NumericValue:
    """fdim: a - b при a > b, иначе +0."""
    x, y = _unpack(ctx, a, b)
    if math.isnan(x) or math.isnan(y):
        return _native(x + y, ctx)
    if x > y:
        return sub(a, b, ctx)
    return signed_zero(ctx.precision)


def maximum(a: NumericValue, b: NumericValue, ctx: EvaluationContext) -> NumericValue:
    """fmax: NaN уступает числу, при равенстве возвращается a."""
    x, y = _unpack(ctx, a, b)
    if math.isnan(x):
        return b
    if math.isnan(y):
        return a
    return b if y > x else a


def minimum(a: NumericValue, b: NumericValue, ctx: EvaluationContext) -> NumericValue:
    x, y = _unpack(ctx, a, b)
    if math.isnan(x):
        return b
    if math.isnan(y):
        return a
    return b if y < x else a


def next_after(a: NumericValue, b: NumericValue, ctx: EvaluationContext) -> NumericValue:
    """
    Следующее представимое значение после a в направлении b.

    При a == b возвращается b (nextafter(+0, -0) = -0); из нуля шаг даёт
    наименьшее субнормальное со знаком направления.

    Examples:
        >>> from src.core.codec import parse_value
        >>> one, two = parse_value("1.0", "binary32"), parse_value("2.0", "binary32")
        >>> hex(next_after(one, two, EvaluationContext()).bits)
        '0x3f800001'
    """
    x, y = _unpack(ctx, a, b)
    if math.isnan(x) or math.isnan(y):
        return _native(x + y, ctx)
    if x == y:
        return b
    return next_toward(a, y > x)


# =============================================================================
# ROUNDING TO INTEGER
# =============================================================================


def _to_integral(
    a: NumericValue, ctx: EvaluationContext, rounder: Callable[[Fraction], int]
) -> NumericValue:
    (x,) = _unpack(ctx, a)
    if math.isnan(x):
        return _native(x, ctx)
    if math.isinf(x) or x == math.floor(x):
        return a
    integral = float(rounder(Fraction(x)))
    if integral == 0.0:
        integral = math.copysign(0.0, x)
    return _native(integral, ctx)


def _half_away_from_zero(q: Fraction) -> int:
    magnitude = math.floor(abs(q) + Fraction(1, 2))
    return -magnitude if q < 0 else magnitude


def truncate(a: NumericValue, ctx: EvaluationContext) -> NumericValue:
    return _to_integral(a, ctx, math.trunc)


def floor(a: NumericValue, ctx: EvaluationContext) -> NumericValue:
    return _to_integral(a, ctx, math.floor)


def ceil(a: NumericValue, ctx: EvaluationContext) -> NumericValue:
    return _to_integral(a, ctx, math.ceil)


def round_half_away(a: NumericValue, ctx: EvaluationContext) -> NumericValue:
    """round: половины округляются от нуля (round(2.5) = 3, round(-0.5) = -1)."""
    return _to_integral(a, ctx, _half_away_from_zero)


_RINT_ROUNDERS: Final[dict[RoundingMode, Callable[[Fraction], int]]] = {
    # Fraction.__round__ без аргументов округляет половины к чётному
    RoundingMode.NEAREST_EVEN: round,
    RoundingMode.TOWARD_ZERO: math.trunc,
    RoundingMode.TOWARD_POSITIVE: math.ceil,
    RoundingMode.TOWARD_NEGATIVE: math.floor,
}


def round_to_integer(a: NumericValue, ctx: EvaluationContext) -> NumericValue:
    """
    rint: округление к целому в текущем режиме округления.

    Вычисляется точно, без вычитания дробной части, поэтому корректно для
    всех значений формата.
    """
    return _to_integral(a, ctx, _RINT_ROUNDERS[ctx.rounding_mode])


# =============================================================================
# EXPONENT UTILITIES
# =============================================================================


def ilogb(a: NumericValue, ctx: EvaluationContext) -> int:
    """
    Несмещённая экспонента как целое.

    Субнормальные значения обрабатываются по длине дроби, без цикла.

    Returns:
        FP_ILOGB0 для нуля, FP_ILOGBNAN для NaN, INT_MAX для ±inf

    Examples:
        >>> from src.core.codec import from_bits
        >>> ilogb(from_bits(0x00000001, "binary32"), EvaluationContext())
        -149
    """
    a.require_precision(ctx.precision)
    fmt = ctx.precision.format
    if a.is_nan:
        return FP_ILOGBNAN
    if a.is_infinite:
        return INT_MAX
    if a.is_zero:
        return FP_ILOGB0
    if a.biased_exponent == 0:
        return a.fraction.bit_length() - 1 - fmt.fraction_bits + fmt.min_exponent
    return a.biased_exponent - fmt.bias


def logb(a: NumericValue, ctx: EvaluationContext) -> NumericValue:
    """logb: logb(±0) = -inf, logb(±inf) = +inf, logb(NaN) = NaN."""
    (x,) = _unpack(ctx, a)
    if math.isnan(x):
        return _native(x, ctx)
    if math.isinf(x):
        return _native(math.inf, ctx)
    if x == 0.0:
        return _native(-math.inf, ctx)
    return _native(float(ilogb(a, ctx)), ctx)


def frexp(a: NumericValue, ctx: EvaluationContext) -> MantissaExponent:
    """Разложение a = mantissa * 2**exponent, |mantissa| в [0.5, 1)."""
    (x,) = _unpack(ctx, a)
    mantissa, exponent = math.frexp(x)
    return MantissaExponent(mantissa=_native(mantissa, ctx), exponent=exponent)


def modf(a: NumericValue, ctx: EvaluationContext) -> FractionSplit:
    """Разложение на дробную и целую части (modf(±inf) = (±0, ±inf))."""
    (x,) = _unpack(ctx, a)
    fraction, integer_part = math.modf(x)
    return FractionSplit(fraction=_native(fraction, ctx), integer_part=_native(integer_part, ctx))


# =============================================================================
# CLASSIFICATION
# =============================================================================


def is_nan(a: NumericValue, ctx: EvaluationContext) -> int:
    return int(a.require_precision(ctx.precision).is_nan)


def is_inf(a: NumericValue, ctx: EvaluationContext) -> int:
    return int(a.require_precision(ctx.precision).is_infinite)


def is_finite(a: NumericValue, ctx: EvaluationContext) -> int:
    return int(a.require_precision(ctx.precision).is_finite)


def sign_bit(a: NumericValue, ctx: EvaluationContext) -> int:
    return a.require_precision(ctx.precision).sign_bit
