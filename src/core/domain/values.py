"""
NumericValue — значение с плавающей точкой в явно заданной точности

Каноническое хранение — битовый паттерн, поэтому представимы все 2^32 / 2^64
паттернов, включая NaN payload, signalling NaN, ±0 и субнормальные числа.
Свойство `value` — представление в виде Python float (только для чтения).

Смешивание точностей запрещено: используйте retag() для явного преобразования.
"""

import struct

from pydantic import BaseModel, Field, field_validator, model_validator

from src.core.domain.precision import Precision


class FloatLabError(Exception):
    """Базовое исключение floatlab."""

    pass


class PrecisionMismatch(FloatLabError, ValueError):
    """
    Операнд имеет точность, отличную от точности контекста.

    Значения никогда не расширяются и не сужаются неявно.
    """

    pass


class NumericValue(BaseModel):
    """
    Immutable значение IEEE-754.

    Attributes:
        bits: Битовый паттерн (0 <= bits < 2**width)
        precision: Формат хранения
    """

    bits: int = Field(..., ge=0, description="Битовый паттерн IEEE-754")
    precision: Precision = Field(..., description="Формат хранения")

    model_config = {"frozen": True}

    @field_validator("bits", mode="before")
    @classmethod
    def validate_bits_type(cls, v: object) -> object:
        """bool и float не принимаются как битовый паттерн"""
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"bits must be int, got {type(v).__name__}")
        return v

    @model_validator(mode="after")
    def validate_bits_width(self) -> "NumericValue":
        """Паттерн должен помещаться в ширину формата"""
        if self.bits > self.precision.format.bit_mask:
            raise ValueError(
                f"bit pattern 0x{self.bits:x} exceeds {self.precision.format.width} bits"
            )
        return self

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    @property
    def value(self) -> float:
        """Значение как Python float (binary32 расширяется точно)."""
        fmt = self.precision.format
        return struct.unpack(fmt.struct_float, struct.pack(fmt.struct_bits, self.bits))[0]

    @property
    def sign_bit(self) -> int:
        return self.bits >> (self.precision.format.width - 1)

    @property
    def biased_exponent(self) -> int:
        fmt = self.precision.format
        return (self.bits & fmt.exponent_mask) >> fmt.fraction_bits

    @property
    def fraction(self) -> int:
        return self.bits & self.precision.format.fraction_mask

    @property
    def is_nan(self) -> bool:
        max_exponent = (1 << self.precision.format.exponent_bits) - 1
        return self.biased_exponent == max_exponent and self.fraction != 0

    @property
    def is_infinite(self) -> bool:
        max_exponent = (1 << self.precision.format.exponent_bits) - 1
        return self.biased_exponent == max_exponent and self.fraction == 0

    @property
    def is_finite(self) -> bool:
        return self.biased_exponent != (1 << self.precision.format.exponent_bits) - 1

    @property
    def is_zero(self) -> bool:
        return (self.bits & ~self.precision.format.sign_mask) == 0

    @property
    def is_subnormal(self) -> bool:
        return self.biased_exponent == 0 and self.fraction != 0

    def require_precision(self, precision: Precision) -> "NumericValue":
        """
        Проверка точности операнда.

        Raises:
            PrecisionMismatch: Если precision отличается от точности значения
        """
        if self.precision is not precision:
            raise PrecisionMismatch(
                f"operand is {self.precision.value}, context expects {precision.value}"
            )
        return self

    def __repr__(self) -> str:
        digits = self.precision.format.hex_digits
        return f"NumericValue(0x{self.bits:0{digits}x}, {self.precision.value}, {self.value!r})"
