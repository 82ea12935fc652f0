"""
Тесты для текстового отображения значений

Проверяет десятичную (фиксированную), научную и hex формы, переход в научную форму по
порогам 1e12 / 1e-9 и строку отчёта.
"""

import pytest

from src.core.codec.bits import from_bits, from_float
from src.core.codec.display import (
    format_decimal,
    format_hex,
    format_line,
    format_scientific,
)
from src.core.domain import Precision

B32 = Precision.BINARY32
B64 = Precision.BINARY64


class TestDecimal:
    """Тесты десятичной формы"""

    def test_trailing_zeros_stripped(self) -> None:
        assert format_decimal(from_bits(0x40700000, B32)) == "3.75"
        assert format_decimal(from_bits(0x3F800000, B32)) == "1"

    def test_binary32_digits(self) -> None:
        assert format_decimal(from_bits(0x3DCCCCCD, B32)) == "0.100000001"

    def test_binary64_digits(self) -> None:
        assert format_decimal(from_float(0.1, B64)) == "0.10000000000000001"

    def test_signed_zero(self) -> None:
        assert format_decimal(from_bits(0x80000000, B32)) == "-0"
        assert format_decimal(from_bits(0, B64)) == "0"

    def test_specials(self) -> None:
        assert format_decimal(from_bits(0x7FC00000, B32)) == "nan"
        assert format_decimal(from_bits(0xFFC00000, B32)) == "nan"
        assert format_decimal(from_bits(0x7F800000, B32)) == "inf"
        assert format_decimal(from_bits(0xFF800000, B32)) == "-inf"

    def test_large_values_switch_to_scientific(self) -> None:
        assert format_decimal(from_float(1e12, B64)) == "1.0000000000000000e+12"
        assert format_decimal(from_float(1e11, B64)) == "100000000000"

    def test_fixed_notation_below_one_ten_thousandth(self) -> None:
        assert format_decimal(from_float(1e-5, B32)) == "0.00000999999975"
        assert format_decimal(from_float(1e-5, B64)) == "0.000010000000000000001"
        assert format_decimal(from_float(-1e-9, B64)) == "-0.0000000010000000000000001"

    def test_fixed_notation_keeps_significant_digits(self) -> None:
        """Целые значения выводятся без экспоненты с 9 значащими цифрами"""
        assert format_decimal(from_float(1e10, B32)) == "10000000000"
        assert format_decimal(from_float(1e11, B32)) == "99999998000"
        assert format_decimal(from_float(16777216.0, B32)) == "16777216"
        assert format_decimal(from_float(-123.5, B64)) == "-123.5"

    def test_small_values_switch_to_scientific(self) -> None:
        assert format_decimal(from_float(1e-10, B64)) == "1.0000000000000000e-10"
        assert format_decimal(from_bits(0x00000001, B32)) == "1.401298464324817e-45"


class TestScientific:
    """Тесты научной формы"""

    def test_binary32_digits(self) -> None:
        assert format_scientific(from_bits(0x3DCCCCCD, B32)) == "1.000000014901161e-01"

    def test_binary64_digits(self) -> None:
        assert format_scientific(from_float(5e-324, B64)) == "4.9406564584124654e-324"

    def test_max_finite_binary32(self) -> None:
        assert format_scientific(from_bits(0x7F7FFFFF, B32)) == "3.402823466385289e+38"

    def test_negative_zero(self) -> None:
        assert format_scientific(from_bits(0x80000000, B32)) == "-0.000000000000000e+00"


class TestHex:
    """Тесты hex формы"""

    def test_fixed_width_lowercase(self) -> None:
        assert format_hex(from_bits(0x1, B32)) == "0x00000001"
        assert format_hex(from_bits(0x3FF0000000000000, B64)) == "0x3ff0000000000000"
        assert format_hex(from_bits(0xABCDEF01, B32)) == "0xabcdef01"


class TestReportLine:
    """Тесты строки отчёта"""

    def test_value_line(self) -> None:
        line = format_line("y", from_bits(0x40700000, B32))
        assert line == "y = 3.75 | 3.750000000000000e+00 | 0x40700000"

    def test_binary64_line(self) -> None:
        line = format_line("a", from_float(1.0, B64))
        assert line == "a = 1 | 1.0000000000000000e+00 | 0x3ff0000000000000"

    @pytest.mark.parametrize("value, expected", [(3, "exp = 3"), (-149, "exp = -149")])
    def test_integer_line(self, value: int, expected: str) -> None:
        assert format_line("exp", value) == expected
