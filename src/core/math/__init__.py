"""
Core math modules для floatlab

Округление, корректно округлённая арифметика, функции libm и специальные
функции с гарантией однократного финального округления.
"""

# Rounding engine
from src.core.math.rounding import (
    converge,
    overflow_result,
    round_exact,
    round_sqrt,
    round_to,
    select_directed,
)

# IEEE safeguards
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

# Domain checks
from src.core.math.domain import DOMAIN_CHECKS, DomainError, check_domain

# Arithmetic
from src.core.math.arithmetic import (
    FP_ILOGB0,
    FP_ILOGBNAN,
    INT_MAX,
    absolute,
    add,
    ceil,
    copy_sign,
    div,
    floor,
    fma,
    fmod,
    frexp,
    ilogb,
    is_finite,
    is_inf,
    is_nan,
    ldexp,
    logb,
    maximum,
    minimum,
    modf,
    mul,
    next_after,
    positive_difference,
    round_half_away,
    round_to_integer,
    rsqrt,
    sign_bit,
    sqrt,
    sub,
    truncate,
)

# Elementary and special functions
from src.core.math import elementary, special_functions
from src.core.math.elementary import sine_cosine, widened

__all__ = [
    # Rounding
    "round_to",
    "round_exact",
    "round_sqrt",
    "converge",
    "overflow_result",
    "select_directed",
    # IEEE safeguards
    "ieee_divide",
    "ieee_exp",
    "ieee_log",
    "ieee_pow",
    "ieee_fmod",
    "ieee_sqrt",
    "ieee_atanh",
    "libm_unary",
    # Domain
    "DomainError",
    "DOMAIN_CHECKS",
    "check_domain",
    # Arithmetic
    "FP_ILOGB0",
    "FP_ILOGBNAN",
    "INT_MAX",
    "add",
    "sub",
    "mul",
    "div",
    "fma",
    "sqrt",
    "rsqrt",
    "ldexp",
    "fmod",
    "absolute",
    "copy_sign",
    "positive_difference",
    "maximum",
    "minimum",
    "next_after",
    "truncate",
    "floor",
    "ceil",
    "round_half_away",
    "round_to_integer",
    "ilogb",
    "logb",
    "frexp",
    "modf",
    "is_nan",
    "is_inf",
    "is_finite",
    "sign_bit",
    # Elementary / special
    "elementary",
    "special_functions",
    "widened",
    "sine_cosine",
]
