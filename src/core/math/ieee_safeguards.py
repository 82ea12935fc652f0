"""
IEEE Safeguards — примитивы libm с семантикой IEEE-754

Модуль math стандартной библиотеки сигнализирует об особых случаях
исключениями (ValueError, OverflowError, ZeroDivisionError), тогда как
C/IEEE возвращают NaN, ±inf или знаковый ноль. Здесь собраны обёртки,
которые переводят исключения в IEEE-результаты, чтобы вычисления в Python
совпадали с вычислениями сгенерированной C++ программы.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ни одна обёртка не выбрасывает исключений для float-аргументов
2. NaN аргументы дают NaN (кроме случаев, где C99 определяет иначе,
   например pow(1, NaN) = 1 — их обрабатывает math.pow)
3. Полюса дают бесконечность со знаком, определённым C99
"""

import math
from typing import Callable


# =============================================================================
# DIVISION
# =============================================================================


def ieee_divide(numerator: float, denominator: float) -> float:
    """
    Деление по IEEE-754: деление на ноль даёт ±inf или NaN.

    Examples:
        >>> ieee_divide(1.0, 0.0)
        inf
        >>> ieee_divide(1.0, -0.0)
        -inf
        >>> math.isnan(ieee_divide(0.0, 0.0))
        True
    """
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if math.isnan(numerator) or numerator == 0.0:
            return math.nan
        negative = (math.copysign(1.0, numerator) < 0) != (math.copysign(1.0, denominator) < 0)
        return -math.inf if negative else math.inf


# =============================================================================
# GUARDED LIBM CALLS
# =============================================================================


def libm_unary(
    fn: Callable[[float], float],
    x: float,
    pole: float | None = None,
    odd_overflow: bool = False,
) -> float:
    """
    Вызов функции math с IEEE-обработкой особых случаев.

    Args:
        fn: Функция модуля math
        x: Аргумент
        pole: Точка полюса, в которой результат равен -inf (log: 0, log1p: -1)
        odd_overflow: Переполнение сохраняет знак аргумента (sinh)

    Returns:
        fn(x); NaN вне области определения; ±inf при переполнении

    Examples:
        >>> libm_unary(math.log, 0.0, pole=0.0)
        -inf
        >>> math.isnan(libm_unary(math.sin, math.inf))
        True
    """
    try:
        return fn(x)
    except OverflowError:
        if odd_overflow and x < 0:
            return -math.inf
        return math.inf
    except ValueError:
        if pole is not None and x == pole:
            return -math.inf
        return math.nan


def ieee_exp(x: float) -> float:
    return libm_unary(math.exp, x)


def ieee_log(x: float) -> float:
    return libm_unary(math.log, x, pole=0.0)


def ieee_atanh(x: float) -> float:
    """atanh с полюсами atanh(±1) = ±inf."""
    if abs(x) == 1.0:
        return math.copysign(math.inf, x)
    return libm_unary(math.atanh, x)


def _is_odd_integer(y: float) -> bool:
    return math.isfinite(y) and y == math.floor(y) and math.fmod(y, 2.0) != 0.0


def ieee_pow(x: float, y: float) -> float:
    """
    pow по C99: pow(±0, y<0) — полюс, отрицательное основание с
    нецелым показателем даёт NaN.

    Examples:
        >>> ieee_pow(-0.0, -1.0)
        -inf
        >>> math.isnan(ieee_pow(-1.0, 0.5))
        True
    """
    try:
        return math.pow(x, y)
    except ZeroDivisionError:
        return _pow_pole(x, y)
    except ValueError:
        if x == 0.0:
            return _pow_pole(x, y)
        return math.nan
    except OverflowError:
        if x < 0 and _is_odd_integer(y):
            return -math.inf
        return math.inf


def _pow_pole(x: float, y: float) -> float:
    if math.copysign(1.0, x) < 0 and _is_odd_integer(y):
        return -math.inf
    return math.inf


def ieee_fmod(x: float, y: float) -> float:
    """fmod по C99: fmod(x, 0) и fmod(±inf, y) дают NaN."""
    try:
        return math.fmod(x, y)
    except ValueError:
        return math.nan


def ieee_sqrt(x: float) -> float:
    if x < 0:
        return math.nan
    return math.sqrt(x)
