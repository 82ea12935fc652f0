"""
ValueParser — разбор пользовательского ввода в NumericValue

Грамматика:
1. Hex битовый паттерн: необязательный префикс 0x/0X и 1–8 (binary32) или
   1–16 (binary64) hex-цифр, дополняется нулями слева. Имеет приоритет при
   неоднозначности ("10" — это паттерн 0x00000010).
2. Токены nan / inf / infinity (регистр не важен, необязательный знак).
3. Десятичный или научный литерал. Литерал переводится в точную дробь
   (fractions.Fraction) и округляется один раз к ближайшему в целевой
   точности.

Разбор никогда не выбрасывает исключений: пустой или нераспознанный ввод
даёт канонический quiet NaN.
"""

import logging
import re
from fractions import Fraction
from typing import Final

from src.core.codec.bits import from_bits, from_fraction, infinity, quiet_nan, signed_zero
from src.core.domain.precision import Precision
from src.core.domain.values import NumericValue

logger = logging.getLogger(__name__)


# =============================================================================
# GRAMMAR
# =============================================================================

HEX_PATTERNS: Final[dict[Precision, re.Pattern]] = {
    Precision.BINARY32: re.compile(r"^(?:0[xX])?([0-9a-fA-F]{1,8})$"),
    Precision.BINARY64: re.compile(r"^(?:0[xX])?([0-9a-fA-F]{1,16})$"),
}

SPECIAL_PATTERN: Final[re.Pattern] = re.compile(
    r"^([+-]?)(nan|inf|infinity)$", re.IGNORECASE
)

DECIMAL_PATTERN: Final[re.Pattern] = re.compile(
    r"^([+-]?)(\d+\.?\d*|\.\d+)(?:[eE]([+-]?\d+))?$"
)

INTEGER_PATTERN: Final[re.Pattern] = re.compile(r"^[+-]?\d+$")

# Десятичные экспоненты за этими границами заведомо дают 0 или inf в binary64,
# точная дробь для них не строится
DECIMAL_EXPONENT_LIMIT: Final[int] = 400

# Цифр экспоненты, после которых она считается бесконечно большой
EXPONENT_DIGITS_LIMIT: Final[int] = 6

# Значащих цифр достаточно, чтобы различить середины соседних binary64
# (не более 767 цифр); остальные заменяются sticky-цифрой
SIGNIFICANT_DIGITS_LIMIT: Final[int] = 800

# Диапазон C int для роли целой экспоненты
INT32_MIN: Final[int] = -(2**31)
INT32_MAX: Final[int] = 2**31 - 1
INT_DIGITS_LIMIT: Final[int] = 10


# =============================================================================
# PARSING
# =============================================================================


def parse_value(text: str | None, precision: Precision) -> NumericValue:
    """
    Разбор строки в значение заданной точности.

    Args:
        text: Ввод пользователя (hex паттерн, десятичный литерал, nan/inf)
        precision: Целевая точность

    Returns:
        NumericValue; канонический quiet NaN, если ввод не распознан

    Examples:
        >>> parse_value("0x3f800000", Precision.BINARY32).value
        1.0
        >>> parse_value("1.5", Precision.BINARY32).bits == 0x3FC00000
        True
        >>> parse_value("abc!", Precision.BINARY32).is_nan
        True
    """
    precision = Precision(precision)
    candidate = (text or "").strip()
    if not candidate:
        logger.debug("empty input parsed as NaN")
        return quiet_nan(precision)

    hex_match = HEX_PATTERNS[precision].match(candidate)
    if hex_match:
        return from_bits(int(hex_match.group(1), 16), precision)

    special_match = SPECIAL_PATTERN.match(candidate)
    if special_match:
        negative = special_match.group(1) == "-"
        if special_match.group(2).lower() == "nan":
            return quiet_nan(precision, negative=negative)
        return infinity(precision, negative=negative)

    decimal_match = DECIMAL_PATTERN.match(candidate)
    if decimal_match:
        return _parse_decimal(decimal_match, precision)

    logger.debug("unparseable input %r parsed as NaN", candidate)
    return quiet_nan(precision)


def _parse_decimal(match: re.Match, precision: Precision) -> NumericValue:
    negative = match.group(1) == "-"
    mantissa_text = match.group(2)
    exponent = _decimal_exponent(match.group(3), len(mantissa_text))

    integer_digits, _, fraction_digits = mantissa_text.partition(".")
    digits = (integer_digits + fraction_digits).lstrip("0")
    if not digits:
        return signed_zero(precision, negative=negative)

    scale = exponent - len(fraction_digits)
    significant = digits.rstrip("0")
    scale += len(digits) - len(significant)
    digits = significant

    # Порядок величины литерала: позиция старшей значащей цифры
    magnitude = scale + len(digits)
    if magnitude < -DECIMAL_EXPONENT_LIMIT:
        return signed_zero(precision, negative=negative)
    if magnitude > DECIMAL_EXPONENT_LIMIT:
        return infinity(precision, negative=negative)

    if len(digits) > SIGNIFICANT_DIGITS_LIMIT:
        # Отброшенный хвост ненулевой (нули справа сняты): sticky-цифра 1
        scale += len(digits) - SIGNIFICANT_DIGITS_LIMIT - 1
        digits = digits[:SIGNIFICANT_DIGITS_LIMIT] + "1"

    exact = Fraction(int(digits)) * Fraction(10) ** scale
    if negative:
        exact = -exact
    return from_fraction(exact, precision)


def _decimal_exponent(text: str | None, mantissa_length: int) -> int:
    """
    Десятичная экспонента литерала.

    Экспонента длиннее EXPONENT_DIGITS_LIMIT цифр заменяется значением,
    которое при любой длине мантиссы уводит порядок за DECIMAL_EXPONENT_LIMIT.
    """
    if not text:
        return 0
    sign = -1 if text.startswith("-") else 1
    exponent_digits = text.lstrip("+-").lstrip("0")
    if len(exponent_digits) > EXPONENT_DIGITS_LIMIT:
        logger.debug("decimal exponent with %d digits saturated", len(exponent_digits))
        return sign * (mantissa_length + 2 * DECIMAL_EXPONENT_LIMIT)
    return sign * int(exponent_digits or "0")


def parse_exponent(text: str | int | None) -> int:
    """
    Разбор целой экспоненты (роль INTEGER_EXPONENT).

    Значение ограничивается диапазоном C int; нераспознанный ввод даёт 0.

    Examples:
        >>> parse_exponent("3")
        3
        >>> parse_exponent("1e99")
        0
    """
    if isinstance(text, int) and not isinstance(text, bool):
        value = text
    else:
        candidate = (text or "").strip()
        if not INTEGER_PATTERN.match(candidate):
            logger.warning("unparseable integer exponent %r, using 0", text)
            return 0
        digits = candidate.lstrip("+-").lstrip("0")
        sign = -1 if candidate.startswith("-") else 1
        if len(digits) > INT_DIGITS_LIMIT:
            # Заведомо вне диапазона int
            value = sign * 10**INT_DIGITS_LIMIT
        else:
            value = sign * int(digits or "0")
    clamped = max(INT32_MIN, min(INT32_MAX, value))
    if clamped != value:
        logger.warning("integer exponent clamped to int range: %d", clamped)
    return clamped
