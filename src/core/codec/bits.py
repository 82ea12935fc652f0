"""
BitCodec — точное преобразование значение <-> битовый паттерн

Преобразование реинтерпретирует байты хранения через struct (без
числового преобразования значения), поэтому to_bits/from_bits взаимно
обратны на всех 2^32 / 2^64 паттернах, включая NaN payload.

Модуль также содержит конструкторы специальных значений формата и
пошаговое перемещение на одну ULP (next_toward), которое используют
RoundingEngine и nextafter.
"""

import math
import struct
from fractions import Fraction

from src.core.domain.precision import FloatFormat, Precision
from src.core.domain.values import NumericValue


# =============================================================================
# CORE CODEC
# =============================================================================


def from_bits(pattern: int, precision: Precision) -> NumericValue:
    """
    Построение значения из битового паттерна.

    Args:
        pattern: Беззнаковое целое 0 <= pattern < 2**width
        precision: Формат

    Returns:
        NumericValue с тем же паттерном

    Raises:
        ValueError: Если паттерн вне диапазона формата
    """
    precision = Precision(precision)
    if isinstance(pattern, bool) or not isinstance(pattern, int):
        raise ValueError(f"bit pattern must be int, got {type(pattern).__name__}")
    if pattern < 0 or pattern > precision.format.bit_mask:
        raise ValueError(
            f"bit pattern {pattern:#x} out of range for {precision.value}"
        )
    return NumericValue(bits=pattern, precision=precision)


def to_bits(value: NumericValue | float, precision: Precision) -> int:
    """
    Битовый паттерн значения.

    Для NumericValue возвращается его каноническое хранение (точность
    обязана совпадать). Python float реинтерпретируется через байты формата;
    для binary32 это сужение к ближайшему (переполнение даёт ±inf).

    Examples:
        >>> to_bits(1.0, Precision.BINARY32)
        1065353216
        >>> hex(to_bits(-0.0, Precision.BINARY64))
        '0x8000000000000000'
    """
    precision = Precision(precision)
    if isinstance(value, NumericValue):
        return value.require_precision(precision).bits
    return float_to_bits(float(value), precision.format)


def float_to_bits(x: float, fmt: FloatFormat) -> int:
    try:
        packed = struct.pack(fmt.struct_float, x)
    except OverflowError:
        # struct отказывается сужать конечные значения за пределами binary32
        packed = struct.pack(fmt.struct_float, math.copysign(math.inf, x))
    return struct.unpack(fmt.struct_bits, packed)[0]


def from_float(x: float, precision: Precision) -> NumericValue:
    """Сужение Python float к формату (binary32: к ближайшему)."""
    precision = Precision(precision)
    return NumericValue(bits=float_to_bits(x, precision.format), precision=precision)


def nearest_representable(exact: Fraction, fmt: FloatFormat) -> float:
    """
    Ближайшее к exact значение формата fmt (ties-to-even) как Python float.

    Вычисляется целочисленной арифметикой, поэтому корректно и для
    субнормальных результатов. Результат точно представим в fmt; при
    переполнении возвращается ±inf, при исчезновении — ноль со знаком exact.
    """
    if exact == 0:
        return 0.0
    negative = exact < 0
    numerator = abs(exact.numerator)
    denominator = exact.denominator

    # exponent: 2**exponent <= |exact| < 2**(exponent + 1)
    exponent = numerator.bit_length() - denominator.bit_length()
    if exponent >= 0:
        below = numerator < (denominator << exponent)
    else:
        below = (numerator << -exponent) < denominator
    if below:
        exponent -= 1

    quantum_exponent = max(exponent, fmt.min_exponent) - fmt.fraction_bits
    if quantum_exponent >= 0:
        scaled_denominator = denominator << quantum_exponent
        significand, remainder = divmod(numerator, scaled_denominator)
    else:
        scaled_denominator = denominator
        significand, remainder = divmod(numerator << -quantum_exponent, denominator)

    twice_remainder = 2 * remainder
    if twice_remainder > scaled_denominator or (
        twice_remainder == scaled_denominator and significand & 1
    ):
        significand += 1

    if significand == 0:
        return -0.0 if negative else 0.0
    if significand.bit_length() + quantum_exponent - 1 > fmt.max_exponent:
        return -math.inf if negative else math.inf

    result = math.ldexp(significand, quantum_exponent)
    return -result if negative else result


def from_fraction(exact: Fraction, precision: Precision) -> NumericValue:
    """Точная дробь, округлённая к ближайшему (ties-to-even)."""
    precision = Precision(precision)
    return from_float(nearest_representable(exact, precision.format), precision)


# =============================================================================
# SPECIAL VALUES
# =============================================================================


def quiet_nan(precision: Precision, negative: bool = False) -> NumericValue:
    """Канонический quiet NaN (0x7fc00000 / 0x7ff8000000000000)."""
    fmt = Precision(precision).format
    bits = fmt.exponent_mask | fmt.quiet_bit
    if negative:
        bits |= fmt.sign_mask
    return NumericValue(bits=bits, precision=precision)


def infinity(precision: Precision, negative: bool = False) -> NumericValue:
    fmt = Precision(precision).format
    bits = fmt.exponent_mask | (fmt.sign_mask if negative else 0)
    return NumericValue(bits=bits, precision=precision)


def max_finite(precision: Precision, negative: bool = False) -> NumericValue:
    """Наибольшее конечное значение (0x7f7fffff / 0x7fefffffffffffff)."""
    fmt = Precision(precision).format
    bits = fmt.exponent_mask - 1
    if negative:
        bits |= fmt.sign_mask
    return NumericValue(bits=bits, precision=precision)


def min_subnormal(precision: Precision, negative: bool = False) -> NumericValue:
    fmt = Precision(precision).format
    return NumericValue(bits=1 | (fmt.sign_mask if negative else 0), precision=precision)


def signed_zero(precision: Precision, negative: bool = False) -> NumericValue:
    fmt = Precision(precision).format
    return NumericValue(bits=fmt.sign_mask if negative else 0, precision=precision)


def quieted(value: NumericValue) -> NumericValue:
    """NaN с установленным quiet-битом (payload сохраняется)."""
    if not value.is_nan:
        return value
    return NumericValue(
        bits=value.bits | value.precision.format.quiet_bit, precision=value.precision
    )


# =============================================================================
# ULP STEPPING
# =============================================================================


def next_toward(value: NumericValue, toward_positive: bool) -> NumericValue:
    """
    Соседнее представимое значение в направлении +inf или -inf.

    Шаг выполняется над битовым паттерном: для значений, удаляющихся от нуля,
    паттерн увеличивается, для приближающихся — уменьшается. Из нуля любого
    знака шаг даёт наименьшее субнормальное нужного знака.

    Args:
        value: Исходное значение (NaN возвращается без изменений)
        toward_positive: True — к +inf, False — к -inf

    Returns:
        Соседнее значение (max finite переходит в inf, inf остаётся inf)
    """
    precision = value.precision
    if value.is_nan:
        return value
    if value.is_zero:
        return min_subnormal(precision, negative=not toward_positive)
    if value.is_infinite:
        if value.sign_bit == 0 and not toward_positive:
            return max_finite(precision)
        if value.sign_bit == 1 and toward_positive:
            return max_finite(precision, negative=True)
        return value

    grows_in_magnitude = toward_positive == (value.sign_bit == 0)
    step = 1 if grows_in_magnitude else -1
    return NumericValue(bits=value.bits + step, precision=precision)


# =============================================================================
# CONVERSION
# =============================================================================


def canonical_zero(precision: Precision) -> NumericValue:
    return signed_zero(precision)


def retag(value: NumericValue, precision: Precision) -> NumericValue:
    """
    Явное преобразование значения в другую точность.

    Конечные значения округляются к ближайшему (ties-to-even) один раз;
    NaN и бесконечности переносятся с сохранением знака.

    Examples:
        >>> retag(from_bits(0x3ff0000000000001, "binary64"), "binary32").bits
        1065353216
    """
    precision = Precision(precision)
    if value.precision is precision:
        return value
    if not value.is_finite:
        return from_float(value.value, precision)
    return from_fraction(Fraction(value.value), precision)
