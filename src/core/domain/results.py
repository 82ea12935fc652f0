"""
Именованные результаты функций с несколькими выходами

Заменяют «мешки» значений с произвольными ключами: каждая функция с
несколькими результатами возвращает типизированный кортеж.
"""

from typing import NamedTuple

from src.core.domain.values import NumericValue


class FractionSplit(NamedTuple):
    """Результат modf: дробная и целая части (обе со знаком аргумента)."""

    fraction: NumericValue
    integer_part: NumericValue


class MantissaExponent(NamedTuple):
    """Результат frexp: мантисса в [0.5, 1) и целая экспонента."""

    mantissa: NumericValue
    exponent: int


class SineCosine(NamedTuple):
    sine: NumericValue
    cosine: NumericValue
