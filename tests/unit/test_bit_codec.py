"""
Тесты для BitCodec

Проверяет:
1. Взаимную обратимость to_bits / from_bits на особых паттернах
2. Ошибки для паттернов вне диапазона формата
3. Конструкторы специальных значений
4. Округление точной дроби к ближайшему (ties-to-even, субнормальные)
5. Шаг на одну ULP (next_toward)
6. Явное преобразование точности (retag)
"""

import math
from fractions import Fraction

import pytest

from src.core.codec.bits import (
    canonical_zero,
    float_to_bits,
    from_bits,
    from_float,
    from_fraction,
    infinity,
    max_finite,
    min_subnormal,
    nearest_representable,
    next_toward,
    quiet_nan,
    quieted,
    retag,
    signed_zero,
    to_bits,
)
from src.core.domain import BINARY32_FORMAT, BINARY64_FORMAT, Precision

B32 = Precision.BINARY32
B64 = Precision.BINARY64


# =============================================================================
# ROUND TRIP
# =============================================================================


class TestRoundTrip:
    """Тесты взаимной обратимости"""

    @pytest.mark.parametrize(
        "pattern",
        [
            0x00000000,
            0x80000000,
            0x00000001,
            0x007FFFFF,
            0x3F800000,
            0x7F7FFFFF,
            0x7F800000,
            0xFF800000,
            0x7FC00000,
            0x7F800001,
            0xFFFFFFFF,
        ],
    )
    def test_binary32_patterns_preserved(self, pattern: int) -> None:
        """Паттерн сохраняется без изменений, включая NaN payload"""
        assert to_bits(from_bits(pattern, B32), B32) == pattern

    @pytest.mark.parametrize(
        "pattern",
        [
            0x0000000000000000,
            0x8000000000000000,
            0x0000000000000001,
            0x3FF0000000000000,
            0x7FF0000000000000,
            0x7FF0000000000001,
            0xFFFFFFFFFFFFFFFF,
        ],
    )
    def test_binary64_patterns_preserved(self, pattern: int) -> None:
        assert to_bits(from_bits(pattern, B64), B64) == pattern

    def test_value_view(self) -> None:
        """Значение восстанавливается побайтно"""
        assert from_bits(0x3F800000, B32).value == 1.0
        assert from_bits(0x40490FDB, B32).value == pytest.approx(math.pi, rel=1e-7)
        assert from_bits(0x3FF0000000000000, B64).value == 1.0

    def test_negative_zero_keeps_sign(self) -> None:
        assert to_bits(-0.0, B64) == 0x8000000000000000
        assert to_bits(-0.0, B32) == 0x80000000

    def test_float_narrowing_to_binary32(self) -> None:
        """Python float сужается к ближайшему binary32"""
        assert to_bits(0.1, B32) == 0x3DCCCCCD
        assert to_bits(1.0, B32) == 0x3F800000

    def test_float_overflow_narrows_to_infinity(self) -> None:
        assert float_to_bits(1e39, BINARY32_FORMAT) == 0x7F800000
        assert float_to_bits(-1e39, BINARY32_FORMAT) == 0xFF800000


class TestRangeErrors:
    """Тесты ошибок диапазона"""

    def test_pattern_too_wide(self) -> None:
        with pytest.raises(ValueError, match="out of range"):
            from_bits(1 << 32, B32)

    def test_negative_pattern(self) -> None:
        with pytest.raises(ValueError, match="out of range"):
            from_bits(-1, B64)

    def test_non_integer_pattern(self) -> None:
        with pytest.raises(ValueError, match="must be int"):
            from_bits(1.0, B32)
        with pytest.raises(ValueError, match="must be int"):
            from_bits(True, B32)

    def test_binary64_pattern_accepts_full_width(self) -> None:
        assert from_bits((1 << 64) - 1, B64).is_nan


# =============================================================================
# SPECIAL VALUES
# =============================================================================


class TestSpecialValues:
    """Тесты конструкторов специальных значений"""

    def test_quiet_nan(self) -> None:
        assert quiet_nan(B32).bits == 0x7FC00000
        assert quiet_nan(B64).bits == 0x7FF8000000000000
        assert quiet_nan(B32, negative=True).bits == 0xFFC00000

    def test_infinity(self) -> None:
        assert infinity(B32).bits == 0x7F800000
        assert infinity(B32, negative=True).bits == 0xFF800000
        assert infinity(B64).value == math.inf

    def test_max_finite(self) -> None:
        assert max_finite(B32).bits == 0x7F7FFFFF
        assert max_finite(B64).bits == 0x7FEFFFFFFFFFFFFF
        assert max_finite(B64, negative=True).value == -1.7976931348623157e308

    def test_min_subnormal(self) -> None:
        assert min_subnormal(B32).bits == 0x00000001
        assert min_subnormal(B32).is_subnormal
        assert min_subnormal(B64).value == 5e-324

    def test_zeros(self) -> None:
        assert canonical_zero(B32).bits == 0
        assert signed_zero(B64, negative=True).bits == 0x8000000000000000

    def test_quieted_sets_quiet_bit(self) -> None:
        """Signalling NaN получает quiet-бит, payload сохраняется"""
        signalling = from_bits(0x7F800001, B32)
        assert quieted(signalling).bits == 0x7FC00001
        one = from_bits(0x3F800000, B32)
        assert quieted(one) is one


# =============================================================================
# NEAREST REPRESENTABLE
# =============================================================================


class TestNearestRepresentable:
    """Тесты округления точной дроби к ближайшему"""

    def test_one_third_binary32(self) -> None:
        result = nearest_representable(Fraction(1, 3), BINARY32_FORMAT)
        assert float_to_bits(result, BINARY32_FORMAT) == 0x3EAAAAAB

    def test_one_third_binary64(self) -> None:
        assert nearest_representable(Fraction(1, 3), BINARY64_FORMAT) == 1 / 3

    def test_tie_rounds_to_even_down(self) -> None:
        """1 + 2^-24 ровно посередине: выбирается чётная мантисса 1.0"""
        exact = Fraction(1) + Fraction(1, 2**24)
        assert nearest_representable(exact, BINARY32_FORMAT) == 1.0

    def test_tie_rounds_to_even_up(self) -> None:
        """1 + 3*2^-24 посередине между 1+2^-23 и 1+2^-22: выбирается 1+2^-22"""
        exact = Fraction(1) + Fraction(3, 2**24)
        assert nearest_representable(exact, BINARY32_FORMAT) == 1.0 + 2.0**-22

    def test_subnormal_results(self) -> None:
        assert nearest_representable(Fraction(1, 2**149), BINARY32_FORMAT) == 2.0**-149
        # Половина наименьшего субнормального: к чётному (нулю)
        assert nearest_representable(Fraction(1, 2**150), BINARY32_FORMAT) == 0.0
        assert nearest_representable(Fraction(3, 2**151), BINARY32_FORMAT) == 2.0**-149

    def test_underflow_keeps_sign(self) -> None:
        result = nearest_representable(Fraction(-1, 2**200), BINARY32_FORMAT)
        assert result == 0.0
        assert math.copysign(1.0, result) == -1.0

    def test_overflow_returns_infinity(self) -> None:
        assert nearest_representable(Fraction(2**128), BINARY32_FORMAT) == math.inf
        assert nearest_representable(Fraction(-(2**1024)), BINARY64_FORMAT) == -math.inf

    def test_largest_value_below_overflow_threshold(self) -> None:
        """Значение чуть ниже max + ulp/2 округляется к max"""
        max32 = Fraction(2**24 - 1) * 2**104
        assert nearest_representable(max32 + 2**102, BINARY32_FORMAT) == float(max32)

    def test_from_fraction(self) -> None:
        assert from_fraction(Fraction(5, 4), B32).bits == 0x3FA00000


# =============================================================================
# ULP STEPPING
# =============================================================================


class TestNextToward:
    """Тесты шага на одну ULP"""

    def test_from_positive_zero(self) -> None:
        zero = from_bits(0, B32)
        assert next_toward(zero, True).bits == 0x00000001
        assert next_toward(zero, False).bits == 0x80000001

    def test_from_negative_zero(self) -> None:
        zero = from_bits(0x80000000, B32)
        assert next_toward(zero, True).bits == 0x00000001

    def test_around_one(self) -> None:
        one = from_bits(0x3F800000, B32)
        assert next_toward(one, True).bits == 0x3F800001
        assert next_toward(one, False).bits == 0x3F7FFFFF

    def test_negative_values(self) -> None:
        minus_one = from_bits(0xBF800000, B32)
        assert next_toward(minus_one, True).bits == 0xBF7FFFFF
        assert next_toward(minus_one, False).bits == 0xBF800001

    def test_max_finite_to_infinity(self) -> None:
        assert next_toward(max_finite(B32), True).bits == 0x7F800000

    def test_infinity_steps_back(self) -> None:
        assert next_toward(infinity(B32), False).bits == 0x7F7FFFFF
        assert next_toward(infinity(B32), True).bits == 0x7F800000
        assert next_toward(infinity(B64, negative=True), True).bits == 0xFFEFFFFFFFFFFFFF

    def test_nan_unchanged(self) -> None:
        nan = quiet_nan(B64)
        assert next_toward(nan, True) is nan


# =============================================================================
# RETAG
# =============================================================================


class TestRetag:
    """Тесты явного преобразования точности"""

    def test_binary64_to_binary32_rounds_to_nearest(self) -> None:
        value = from_bits(0x3FF0000000000001, B64)
        assert retag(value, B32).bits == 0x3F800000

    def test_binary32_to_binary64_is_exact(self) -> None:
        value = from_bits(0x3DCCCCCD, B32)
        widened = retag(value, B64)
        assert widened.precision is B64
        assert widened.value == value.value

    def test_overflow_to_infinity(self) -> None:
        assert retag(from_float(1e300, B64), B32).bits == 0x7F800000

    def test_specials(self) -> None:
        assert retag(infinity(B64, negative=True), B32).bits == 0xFF800000
        assert retag(quiet_nan(B64), B32).is_nan

    def test_same_precision_returns_value(self) -> None:
        value = from_bits(0x3F800000, B32)
        assert retag(value, "binary32") is value
