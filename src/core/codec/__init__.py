"""
Codec — битовые паттерны, разбор ввода и отображение значений.
"""

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
from src.core.codec.display import (
    format_decimal,
    format_hex,
    format_line,
    format_scientific,
)
from src.core.codec.parser import parse_exponent, parse_value

__all__ = [
    # BitCodec
    "to_bits",
    "from_bits",
    "from_float",
    "from_fraction",
    "float_to_bits",
    "nearest_representable",
    "next_toward",
    "retag",
    # Special values
    "quiet_nan",
    "quieted",
    "infinity",
    "max_finite",
    "min_subnormal",
    "signed_zero",
    "canonical_zero",
    # Parser
    "parse_value",
    "parse_exponent",
    # Display
    "format_decimal",
    "format_scientific",
    "format_hex",
    "format_line",
]
