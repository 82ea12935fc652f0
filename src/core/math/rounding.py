"""
RoundingEngine — однократное округление точного результата

Точный результат задаётся либо как fractions.Fraction (базовая арифметика,
fma, ldexp, разбор литералов), либо как Python float — результат вычисления
в double (трансцендентные и специальные функции).

Алгоритм:
1. NaN проходит без изменений; бесконечность и ноль сохраняются.
2. yRN — корректно округлённое к ближайшему (ties-to-even) значение,
   вычисленное целочисленной арифметикой, включая субнормальные числа.
3. Переполнение (yRN бесконечно) обрабатывается по правилам режима:
   RN -> ±inf, RZ -> ±max, RU -> +inf / -max, RD -> +max / -inf.
4. RN или точный результат -> yRN.
5. Иначе выбирается сосед yRN на расстоянии одной ULP: RU — наименьшее
   представимое >= точного, RD — наибольшее <= точного, RZ — из двух
   кандидатов с меньшим модулем.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Для любого точного x: RD(x) <= RN(x) <= RU(x), RZ(x) = RD(x) при x > 0
   и RU(x) при x < 0
2. Если x представимо, все режимы возвращают x
3. Округление выполняется ровно один раз
"""

import math
from fractions import Fraction

from src.core.codec.bits import (
    from_float,
    infinity,
    max_finite,
    nearest_representable,
    next_toward,
    signed_zero,
)
from src.core.domain.context import EvaluationContext, RoundingMode
from src.core.domain.precision import Precision
from src.core.domain.values import NumericValue


# =============================================================================
# DIRECTED ROUNDING
# =============================================================================


def overflow_result(mode: RoundingMode, precision: Precision, negative: bool) -> NumericValue:
    """
    Результат переполнения для режима округления.

    Examples:
        >>> overflow_result(RoundingMode.TOWARD_ZERO, Precision.BINARY32, False).bits
        2139095039
    """
    if mode is RoundingMode.NEAREST_EVEN:
        return infinity(precision, negative=negative)
    if mode is RoundingMode.TOWARD_ZERO:
        return max_finite(precision, negative=negative)
    if mode is RoundingMode.TOWARD_POSITIVE:
        return max_finite(precision, negative=True) if negative else infinity(precision)
    return infinity(precision, negative=True) if negative else max_finite(precision)


def select_directed(
    nearest: NumericValue, exact_above: bool, mode: RoundingMode, negative: bool
) -> NumericValue:
    """
    Выбор соседа yRN для направленного режима.

    Args:
        nearest: yRN (конечное, не равное точному значению)
        exact_above: True, если точное значение больше yRN
        mode: Направленный режим (RZ/RU/RD)
        negative: Знак точного значения
    """
    if mode is RoundingMode.TOWARD_ZERO:
        mode = RoundingMode.TOWARD_POSITIVE if negative else RoundingMode.TOWARD_NEGATIVE
    if mode is RoundingMode.TOWARD_POSITIVE:
        return next_toward(nearest, True) if exact_above else nearest
    if mode is RoundingMode.TOWARD_NEGATIVE:
        return nearest if exact_above else next_toward(nearest, False)
    return nearest


def round_exact(exact: Fraction, mode: RoundingMode, precision: Precision) -> NumericValue:
    """
    Однократное округление ненулевого точного значения.

    Точный ноль не имеет знака; знак нулевого результата определяет
    вызывающая операция (см. arithmetic.exact_zero).
    """
    precision = Precision(precision)
    mode = RoundingMode(mode)
    negative = exact < 0
    nearest_double = nearest_representable(exact, precision.format)
    if math.isinf(nearest_double):
        return overflow_result(mode, precision, negative)

    nearest = from_float(nearest_double, precision)
    if mode is RoundingMode.NEAREST_EVEN:
        return nearest
    nearest_exact = Fraction(nearest_double)
    if nearest_exact == exact:
        return nearest
    return select_directed(nearest, exact > nearest_exact, mode, negative)


def round_to(
    precise: float | Fraction, mode: RoundingMode, precision: Precision
) -> NumericValue:
    """
    Округление результата к целевой точности в заданном режиме.

    Args:
        precise: Точная дробь или результат вычисления в double
        mode: Направление округления
        precision: Целевая точность

    Returns:
        NumericValue целевой точности

    Examples:
        >>> round_to(0.1, RoundingMode.NEAREST_EVEN, Precision.BINARY32).bits
        1036831949
        >>> round_to(0.1, RoundingMode.TOWARD_ZERO, Precision.BINARY32).bits
        1036831948
    """
    precision = Precision(precision)
    if isinstance(precise, float):
        if not math.isfinite(precise) or precise == 0.0:
            return from_float(precise, precision)
        precise = Fraction(precise)
    if precise == 0:
        return signed_zero(precision)
    return round_exact(precise, mode, precision)


def converge(precise: float, ctx: EvaluationContext) -> NumericValue:
    """Финальное округление результата, вычисленного в double."""
    return round_to(precise, ctx.rounding_mode, ctx.precision)


def round_sqrt(x: float, mode: RoundingMode, precision: Precision) -> NumericValue:
    """
    Корректно округлённый квадратный корень в любом режиме.

    math.sqrt даёт корректно округлённый double; для binary32 последующее
    сужение к ближайшему также корректно (53 >= 2*24 + 2). Сторона точного
    корня определяется точным сравнением квадрата кандидата с x.

    Args:
        x: Неотрицательный конечный аргумент (или ±0)
    """
    precision = Precision(precision)
    mode = RoundingMode(mode)
    nearest = from_float(math.sqrt(x), precision)
    if mode is RoundingMode.NEAREST_EVEN or x == 0.0:
        return nearest
    candidate = Fraction(nearest.value)
    square = candidate * candidate
    target = Fraction(x)
    if square == target:
        return nearest
    return select_directed(nearest, square < target, mode, negative=False)
