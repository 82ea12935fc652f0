"""
Precision — целевой формат IEEE-754 (binary32 / binary64)

Каждая операция выполняется в явно выбранном формате; формат никогда не
выводится из значения. Параметры формата (ширина, смещение экспоненты,
количество бит дроби, параметры отображения) собраны в FloatFormat.
"""

from dataclasses import dataclass
from enum import Enum


# =============================================================================
# FORMAT PARAMETERS
# =============================================================================


@dataclass(frozen=True)
class FloatFormat:
    """
    Параметры двоичного формата IEEE-754.

    Attributes:
        width: Полная ширина в битах (32 / 64)
        exponent_bits: Ширина поля экспоненты
        fraction_bits: Ширина поля дроби (без скрытого бита)
        struct_float: Код struct для плавающего значения ("<f" / "<d")
        struct_bits: Код struct для беззнакового целого той же ширины
        decimal_digits: Значащие цифры десятичного отображения (%.9g / %.17g)
        scientific_digits: Цифры после точки в научной форме (%.15e / %.16e)
        c_type: Имя C++ типа значения
        c_bits_type: Имя C++ беззнакового типа той же ширины
    """

    width: int
    exponent_bits: int
    fraction_bits: int
    struct_float: str
    struct_bits: str
    decimal_digits: int
    scientific_digits: int
    c_type: str
    c_bits_type: str

    @property
    def precision_bits(self) -> int:
        """Точность p (включая скрытый бит)."""
        return self.fraction_bits + 1

    @property
    def bias(self) -> int:
        return (1 << (self.exponent_bits - 1)) - 1

    @property
    def min_exponent(self) -> int:
        """Минимальная экспонента нормализованного числа (emin)."""
        return 1 - self.bias

    @property
    def max_exponent(self) -> int:
        return self.bias

    @property
    def hex_digits(self) -> int:
        return self.width // 4

    @property
    def bit_mask(self) -> int:
        return (1 << self.width) - 1

    @property
    def sign_mask(self) -> int:
        return 1 << (self.width - 1)

    @property
    def exponent_mask(self) -> int:
        return ((1 << self.exponent_bits) - 1) << self.fraction_bits

    @property
    def fraction_mask(self) -> int:
        return (1 << self.fraction_bits) - 1

    @property
    def quiet_bit(self) -> int:
        return 1 << (self.fraction_bits - 1)


BINARY32_FORMAT = FloatFormat(
    width=32,
    exponent_bits=8,
    fraction_bits=23,
    struct_float="<f",
    struct_bits="<I",
    decimal_digits=9,
    scientific_digits=15,
    c_type="float",
    c_bits_type="std::uint32_t",
)

BINARY64_FORMAT = FloatFormat(
    width=64,
    exponent_bits=11,
    fraction_bits=52,
    struct_float="<d",
    struct_bits="<Q",
    decimal_digits=17,
    scientific_digits=16,
    c_type="double",
    c_bits_type="std::uint64_t",
)


# =============================================================================
# ENUMS
# =============================================================================


class Precision(str, Enum):
    """Целевая точность вычислений"""

    BINARY32 = "binary32"
    BINARY64 = "binary64"

    @property
    def format(self) -> FloatFormat:
        if self is Precision.BINARY32:
            return BINARY32_FORMAT
        return BINARY64_FORMAT
