"""
Тесты для IEEE safeguards

Проверяет, что обёртки над модулем math возвращают IEEE-результаты
(NaN, ±inf, знаковый ноль) вместо исключений Python.
"""

import math

import pytest

from src.core.math.ieee_safeguards import (
    ieee_atanh,
    ieee_divide,
    ieee_exp,
    ieee_fmod,
    ieee_log,
    ieee_pow,
    ieee_sqrt,
    libm_unary,
)


def is_negative_zero(x: float) -> bool:
    return x == 0.0 and math.copysign(1.0, x) < 0


class TestDivide:
    """Тесты деления по IEEE-754"""

    def test_ordinary(self) -> None:
        assert ieee_divide(1.0, 4.0) == 0.25

    def test_signed_infinity(self) -> None:
        assert ieee_divide(1.0, 0.0) == math.inf
        assert ieee_divide(-1.0, 0.0) == -math.inf
        assert ieee_divide(-1.0, -0.0) == math.inf

    def test_indeterminate(self) -> None:
        assert math.isnan(ieee_divide(0.0, 0.0))
        assert math.isnan(ieee_divide(math.nan, 0.0))


class TestLibmUnary:
    """Тесты перевода исключений math в IEEE-значения"""

    def test_overflow(self) -> None:
        assert ieee_exp(1000.0) == math.inf
        assert libm_unary(math.cosh, -1000.0) == math.inf

    def test_odd_overflow_keeps_sign(self) -> None:
        assert libm_unary(math.sinh, -1000.0, odd_overflow=True) == -math.inf
        assert libm_unary(math.sinh, 1000.0, odd_overflow=True) == math.inf

    def test_pole(self) -> None:
        assert ieee_log(0.0) == -math.inf
        assert ieee_log(-0.0) == -math.inf
        assert libm_unary(math.log1p, -1.0, pole=-1.0) == -math.inf

    def test_outside_domain(self) -> None:
        assert math.isnan(ieee_log(-1.0))
        assert math.isnan(libm_unary(math.sin, math.inf))
        assert math.isnan(libm_unary(math.acos, 2.0))

    def test_nan_passthrough(self) -> None:
        assert math.isnan(ieee_exp(math.nan))


class TestAtanh:
    """Тесты atanh с полюсами"""

    def test_poles(self) -> None:
        assert ieee_atanh(1.0) == math.inf
        assert ieee_atanh(-1.0) == -math.inf

    def test_outside_domain(self) -> None:
        assert math.isnan(ieee_atanh(2.0))

    def test_ordinary(self) -> None:
        assert ieee_atanh(0.5) == math.atanh(0.5)


class TestPow:
    """Тесты pow по C99"""

    @pytest.mark.parametrize(
        "x, y, expected",
        [
            (0.0, -1.0, math.inf),
            (-0.0, -1.0, -math.inf),
            (-0.0, -2.0, math.inf),
            (-0.0, -0.5, math.inf),
        ],
    )
    def test_zero_base_poles(self, x: float, y: float, expected: float) -> None:
        assert ieee_pow(x, y) == expected

    def test_negative_base_fractional_exponent(self) -> None:
        assert math.isnan(ieee_pow(-1.0, 0.5))

    def test_overflow_sign(self) -> None:
        assert ieee_pow(10.0, 400.0) == math.inf
        assert ieee_pow(-10.0, 401.0) == -math.inf
        assert ieee_pow(-10.0, 400.0) == math.inf

    def test_nan_rules(self) -> None:
        """pow(1, NaN) = 1 и pow(NaN, 0) = 1"""
        assert ieee_pow(1.0, math.nan) == 1.0
        assert ieee_pow(math.nan, 0.0) == 1.0
        assert math.isnan(ieee_pow(math.nan, 1.0))

    def test_ordinary(self) -> None:
        assert ieee_pow(2.0, 10.0) == 1024.0
        assert ieee_pow(-2.0, 3.0) == -8.0


class TestFmodSqrt:
    """Тесты fmod и sqrt"""

    def test_fmod(self) -> None:
        assert ieee_fmod(5.5, 2.0) == 1.5
        assert ieee_fmod(1.0, math.inf) == 1.0
        assert is_negative_zero(ieee_fmod(-4.0, 2.0))

    def test_fmod_invalid(self) -> None:
        assert math.isnan(ieee_fmod(math.inf, 2.0))
        assert math.isnan(ieee_fmod(1.0, 0.0))

    def test_sqrt(self) -> None:
        assert ieee_sqrt(4.0) == 2.0
        assert is_negative_zero(ieee_sqrt(-0.0))
        assert math.isnan(ieee_sqrt(-1.0))
        assert math.isnan(ieee_sqrt(math.nan))
