"""
Display — текстовое представление значений

Три формы для каждого значения:
- десятичная: фиксированная запись с 9 (binary32) / 17 (binary64) значащими
  цифрами без хвостовых нулей; ненулевые значения с модулем >= 1e12 или
  < 1e-9 отображаются в научной форме;
- научная: %.15e / %.16e;
- hex: 0x + 8 / 16 цифр в нижнем регистре.

Строка отчёта `name = <decimal> | <scientific> | 0x<hex>` совпадает
побайтно с выводом сгенерированной C++ программы.
"""

import math
from typing import Final

from src.core.domain.values import NumericValue

# Границы перехода десятичного отображения в научную форму
SCIENTIFIC_UPPER: Final[float] = 1e12
SCIENTIFIC_LOWER: Final[float] = 1e-9


def _special_text(x: float) -> str | None:
    if math.isnan(x):
        return "nan"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    return None


def format_scientific(value: NumericValue) -> str:
    x = value.value
    special = _special_text(x)
    if special is not None:
        return special
    return f"{x:.{value.precision.format.scientific_digits}e}"


def _fixed_notation(x: float, digits: int) -> str:
    """
    Фиксированная запись с `digits` значащими цифрами.

    Цифры берутся из научной формы (одно округление), затем десятичная
    точка ставится по экспоненте; хвостовые нули и висящая точка удаляются.
    """
    mantissa, _, exponent_text = f"{x:.{digits - 1}e}".partition("e")
    exponent = int(exponent_text)
    negative = mantissa.startswith("-")
    significand = mantissa.lstrip("-").replace(".", "")
    if exponent < 0:
        text = "0." + "0" * (-exponent - 1) + significand
    elif exponent + 1 >= len(significand):
        text = significand + "0" * (exponent + 1 - len(significand))
    else:
        text = significand[: exponent + 1] + "." + significand[exponent + 1 :]
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "-" + text if negative else text


def format_decimal(value: NumericValue) -> str:
    """
    Десятичное отображение.

    Examples:
        >>> from src.core.codec.bits import from_bits
        >>> format_decimal(from_bits(0x40700000, "binary32"))
        '3.75'
        >>> format_decimal(from_bits(0x80000000, "binary32"))
        '-0'
    """
    x = value.value
    special = _special_text(x)
    if special is not None:
        return special
    magnitude = abs(x)
    if magnitude != 0.0 and (magnitude >= SCIENTIFIC_UPPER or magnitude < SCIENTIFIC_LOWER):
        return format_scientific(value)
    return _fixed_notation(x, value.precision.format.decimal_digits)


def format_hex(value: NumericValue) -> str:
    return f"0x{value.bits:0{value.precision.format.hex_digits}x}"


def format_line(name: str, value: NumericValue | int) -> str:
    """
    Строка отчёта для одного значения.

    Целые значения (экспонента frexp, ilogb, классификация) выводятся
    как `name = <int>`.
    """
    if isinstance(value, NumericValue):
        return (
            f"{name} = {format_decimal(value)} | {format_scientific(value)} | "
            f"{format_hex(value)}"
        )
    return f"{name} = {int(value)}"
