"""
Тесты для ValueParser

Проверяет:
1. Hex паттерны (приоритет, дополнение нулями, ширина)
2. Токены nan / inf / infinity
3. Точный перевод десятичных литералов
4. NaN для пустого и нераспознанного ввода (без исключений)
5. Разбор целой экспоненты с ограничением диапазона
"""

import logging
from fractions import Fraction

import pytest

from src.core.codec.bits import from_fraction
from src.core.codec.parser import INT32_MAX, INT32_MIN, parse_exponent, parse_value
from src.core.domain import Precision

B32 = Precision.BINARY32
B64 = Precision.BINARY64


# =============================================================================
# HEX PATTERNS
# =============================================================================


class TestHexPatterns:
    """Тесты разбора битовых паттернов"""

    def test_prefixed_pattern(self) -> None:
        assert parse_value("0x3f800000", B32).value == 1.0
        assert parse_value("0X3F800000", B32).value == 1.0

    def test_unprefixed_pattern(self) -> None:
        assert parse_value("40490fdb", B32).bits == 0x40490FDB

    def test_short_pattern_zero_padded(self) -> None:
        """Короткий паттерн дополняется нулями слева"""
        assert parse_value("1", B32).bits == 0x00000001
        assert parse_value("0x1", B64).bits == 0x0000000000000001

    def test_hex_takes_priority_over_decimal(self) -> None:
        """Строка 10 — это паттерн 0x10, а не десятичное 10"""
        assert parse_value("10", B32).bits == 0x10
        assert parse_value("10", B32).is_subnormal

    def test_binary64_full_width(self) -> None:
        assert parse_value("0x3ff0000000000000", B64).value == 1.0

    def test_pattern_too_wide_for_binary32(self) -> None:
        """9 hex цифр не являются паттерном binary32 и не являются числом"""
        assert parse_value("0x3ff000000", B32).is_nan

    def test_surrounding_whitespace_ignored(self) -> None:
        assert parse_value("  0x3f800000\n", B32).value == 1.0


# =============================================================================
# SPECIAL TOKENS
# =============================================================================


class TestSpecialTokens:
    """Тесты токенов специальных значений"""

    @pytest.mark.parametrize("text", ["inf", "INF", "+Infinity", "infinity"])
    def test_positive_infinity(self, text: str) -> None:
        assert parse_value(text, B32).bits == 0x7F800000

    @pytest.mark.parametrize("text", ["-inf", "-INFINITY"])
    def test_negative_infinity(self, text: str) -> None:
        assert parse_value(text, B64).bits == 0xFFF0000000000000

    def test_nan_tokens(self) -> None:
        assert parse_value("nan", B32).bits == 0x7FC00000
        assert parse_value("NaN", B64).bits == 0x7FF8000000000000
        assert parse_value("-nan", B32).bits == 0xFFC00000


# =============================================================================
# DECIMAL LITERALS
# =============================================================================


class TestDecimalLiterals:
    """Тесты точного перевода десятичных литералов"""

    def test_simple_values(self) -> None:
        assert parse_value("1.25", B32).bits == 0x3FA00000
        assert parse_value("2.5", B32).bits == 0x40200000
        assert parse_value("-2.0", B32).bits == 0xC0000000

    def test_one_tenth(self) -> None:
        assert parse_value("0.1", B32).bits == 0x3DCCCCCD
        assert parse_value("0.1", B64).value == 0.1

    def test_scientific_notation(self) -> None:
        assert parse_value("1.5e3", B64).value == 1500.0
        assert parse_value("25e-1", B32).value == 2.5
        assert parse_value(".5", B32).value == 0.5
        assert parse_value("3.", B64).value == 3.0

    def test_exact_rounding_avoids_double_rounding(self) -> None:
        """
        Литерал чуть выше середины между двумя binary32 значениями.

        Через double он округлился бы дважды (к середине, затем к чётному);
        точная дробь даёт верхнего соседа.
        """
        text = "1.000000059604644775390625000000000001"
        assert parse_value(text, B32).bits == 0x3F800001

    def test_exact_tie_rounds_to_even(self) -> None:
        assert parse_value("1.000000059604644775390625", B32).bits == 0x3F800000

    def test_signed_zero(self) -> None:
        assert parse_value("-0.0", B32).bits == 0x80000000
        assert parse_value("0.0e5", B64).bits == 0

    def test_overflow_to_infinity(self) -> None:
        assert parse_value("1.0e39", B32).bits == 0x7F800000
        assert parse_value("-1e400", B64).bits == 0xFFF0000000000000
        assert parse_value("1.0e999999", B64).bits == 0x7FF0000000000000

    def test_underflow_to_zero(self) -> None:
        assert parse_value("1e-50", B32).bits == 0
        assert parse_value("-1e-999999", B64).bits == 0x8000000000000000

    def test_subnormal_literal(self) -> None:
        assert parse_value("1.401298464324817e-45", B32).bits == 0x00000001


class TestLongLiterals:
    """Тесты литералов с очень длинной мантиссой или экспонентой"""

    def test_long_fraction(self) -> None:
        text = "0." + "1" * 5000
        assert parse_value(text, B32) == from_fraction(Fraction(1, 9), B32)
        assert parse_value(text, B64) == from_fraction(Fraction(1, 9), B64)

    def test_long_mantissa_with_long_negative_exponent(self) -> None:
        assert parse_value("1" * 4400 + "e-4400", B32) == from_fraction(Fraction(1, 9), B32)

    def test_leading_and_trailing_zeros(self) -> None:
        assert parse_value("0" * 5000 + "1.5" + "0" * 5000, B64).value == 1.5

    def test_long_exponent_saturates(self) -> None:
        assert parse_value("1e" + "9" * 5000, B32).bits == 0x7F800000
        assert parse_value("-1e" + "9" * 5000, B64).bits == 0xFFF0000000000000
        assert parse_value("1e-" + "9" * 5000, B32).bits == 0
        assert parse_value("-1e-" + "9" * 5000, B64).bits == 0x8000000000000000

    def test_exponent_leading_zeros(self) -> None:
        assert parse_value("1e" + "0" * 5000 + "3", B32).value == 1000.0

    def test_digits_beyond_tie_decide_rounding(self) -> None:
        """Ненулевая цифра далеко за серединой округляет вверх"""
        tie = "1.000000059604644775390625"
        assert parse_value(tie + "0" * 900 + "1", B32).bits == 0x3F800001
        assert parse_value(tie + "0" * 900, B32).bits == 0x3F800000


# =============================================================================
# PARSE FAILURES
# =============================================================================


class TestParseFailures:
    """Тесты нераспознанного ввода"""

    @pytest.mark.parametrize("text", ["", "   ", None, "abc!", "1.2.3", "--1", "0xZZ"])
    def test_failure_produces_quiet_nan(self, text) -> None:
        result = parse_value(text, B32)
        assert result.bits == 0x7FC00000

    def test_failure_logged_at_debug(self, caplog) -> None:
        with caplog.at_level(logging.DEBUG, logger="src.core.codec.parser"):
            parse_value("garbage!", B64)
        assert "garbage!" in caplog.text


# =============================================================================
# INTEGER EXPONENT
# =============================================================================


class TestParseExponent:
    """Тесты разбора целой экспоненты"""

    def test_integer_text(self) -> None:
        assert parse_exponent("3") == 3
        assert parse_exponent(" -150 ") == -150

    def test_integer_passthrough(self) -> None:
        assert parse_exponent(42) == 42

    def test_clamped_to_int_range(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="src.core.codec.parser"):
            assert parse_exponent("99999999999") == INT32_MAX
        assert "clamped" in caplog.text
        assert parse_exponent(-(2**40)) == INT32_MIN

    def test_long_text_saturates(self) -> None:
        assert parse_exponent("9" * 5000) == INT32_MAX
        assert parse_exponent("-" + "9" * 5000) == INT32_MIN
        assert parse_exponent("0" * 5000 + "7") == 7

    @pytest.mark.parametrize("text", ["", None, "1.5", "1e3", "x"])
    def test_unparseable_gives_zero(self, text) -> None:
        assert parse_exponent(text) == 0
