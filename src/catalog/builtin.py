"""
Встроенные функции каталога

Полный набор: базовая арифметика, экспоненты и логарифмы, тригонометрия и
гиперболические функции, специальные функции и утилиты IEEE-754 из <math.h>.

Корректно округляемые операции (арифметика, fma, sqrt, масштабирование,
утилиты) вычисляются в C++ прямо в real_t под директивой округления
(DIRECT). Функции libm и специальные функции вычисляются в double и
округляются один раз (WIDE).
"""

import math

from src.catalog import templates as tpl
from src.catalog.descriptors import ArgumentRole, FunctionDescriptor, ResultKind
from src.catalog.registry import OperationCatalog
from src.catalog.templates import TemplateKind
from src.core.math import arithmetic, elementary, special_functions
from src.core.math.elementary import sine_cosine, widened

_A = (ArgumentRole.FIRST_OPERAND,)
_AB = (ArgumentRole.FIRST_OPERAND, ArgumentRole.SECOND_OPERAND)
_ABC = (
    ArgumentRole.FIRST_OPERAND,
    ArgumentRole.SECOND_OPERAND,
    ArgumentRole.THIRD_OPERAND,
)
_A_EXP = (ArgumentRole.FIRST_OPERAND, ArgumentRole.INTEGER_EXPONENT)

_PI_LITERAL = repr(math.pi)


def _descriptor(
    identifier: str,
    roles: tuple[ArgumentRole, ...],
    result_kind: ResultKind = ResultKind.SINGLE,
) -> FunctionDescriptor:
    names = ", ".join(role.value for role in roles)
    return FunctionDescriptor(
        identifier=identifier,
        display_name=f"{identifier}({names})",
        roles=roles,
        result_kind=result_kind,
    )


# (identifier, roles, result kind, evaluator, template)
_BASIC = [
    ("add", _AB, ResultKind.SINGLE, arithmetic.add, tpl.direct("{a} + {b}")),
    ("sub", _AB, ResultKind.SINGLE, arithmetic.sub, tpl.direct("{a} - {b}")),
    ("mul", _AB, ResultKind.SINGLE, arithmetic.mul, tpl.direct("{a} * {b}")),
    ("div", _AB, ResultKind.SINGLE, arithmetic.div, tpl.direct("{a} / {b}")),
    ("fma", _ABC, ResultKind.SINGLE, arithmetic.fma, tpl.direct("std::fma({a}, {b}, {c})")),
    ("sqrt", _A, ResultKind.SINGLE, arithmetic.sqrt, tpl.direct("std::sqrt({a})")),
    (
        "rsqrt",
        _A,
        ResultKind.SINGLE,
        arithmetic.rsqrt,
        tpl.direct("real_t(1) / std::sqrt({a})"),
    ),
    ("ldexp", _A_EXP, ResultKind.SINGLE, arithmetic.ldexp, tpl.direct("std::ldexp({a}, {n})")),
    ("pow", _AB, ResultKind.SINGLE, widened(elementary.power), tpl.wide("std::pow({a}, {b})")),
    ("fmod", _AB, ResultKind.SINGLE, arithmetic.fmod, tpl.direct("std::fmod({a}, {b})")),
]

_EXPONENTIAL = [
    ("exp", elementary.exp, "std::exp({a})"),
    ("exp2", elementary.exp2, "std::exp2({a})"),
    ("exp10", elementary.exp10, "std::pow(10.0, {a})"),
    ("expm1", elementary.expm1, "std::expm1({a})"),
    ("log", elementary.log, "std::log({a})"),
    ("log2", elementary.log2, "std::log2({a})"),
    ("log10", elementary.log10, "std::log10({a})"),
    ("log1p", elementary.log1p, "std::log1p({a})"),
]

_TRIGONOMETRIC = [
    ("sin", elementary.sin, "std::sin({a})"),
    ("cos", elementary.cos, "std::cos({a})"),
    ("tan", elementary.tan, "std::tan({a})"),
    ("sinpi", elementary.sinpi, f"std::sin({_PI_LITERAL} * {{a}})"),
    ("cospi", elementary.cospi, f"std::cos({_PI_LITERAL} * {{a}})"),
    ("sec", elementary.sec, "1.0 / std::cos({a})"),
    ("csc", elementary.csc, "1.0 / std::sin({a})"),
    ("cot", elementary.cot, "1.0 / std::tan({a})"),
    ("asin", elementary.asin, "std::asin({a})"),
    ("acos", elementary.acos, "std::acos({a})"),
    ("atan", elementary.atan, "std::atan({a})"),
    ("sinh", elementary.sinh, "std::sinh({a})"),
    ("cosh", elementary.cosh, "std::cosh({a})"),
    ("tanh", elementary.tanh, "std::tanh({a})"),
    ("asinh", elementary.asinh, "std::asinh({a})"),
    ("acosh", elementary.acosh, "std::acosh({a})"),
    ("atanh", elementary.atanh, "std::atanh({a})"),
]

# Имя helper-а совпадает с вызываемой C++ функцией
_SPECIAL = [
    ("lgamma", special_functions.log_gamma, "log_gamma"),
    ("tgamma", special_functions.gamma, "gamma_function"),
    ("erf", special_functions.erf, "erf_approx"),
    ("erfc", special_functions.erfc, "erfc_approx"),
    ("erfcx", special_functions.erfcx, "erfcx_approx"),
    ("erfcinv", special_functions.erfcinv, "erfcinv_newton"),
    ("normcdfinv", special_functions.normcdfinv, "normcdfinv"),
    ("j0", special_functions.bessel_j0, "bessel_j0"),
    ("j1", special_functions.bessel_j1, "bessel_j1"),
    ("y0", special_functions.bessel_y0, "bessel_y0"),
    ("y1", special_functions.bessel_y1, "bessel_y1"),
    ("i0", special_functions.bessel_i0, "bessel_i0"),
    ("i1", special_functions.bessel_i1, "bessel_i1"),
]

_UTILITIES = [
    ("abs", _A, ResultKind.SINGLE, arithmetic.absolute, tpl.direct("std::fabs({a})")),
    (
        "copysign",
        _AB,
        ResultKind.SINGLE,
        arithmetic.copy_sign,
        tpl.direct("std::copysign({a}, {b})"),
    ),
    (
        "fdim",
        _AB,
        ResultKind.SINGLE,
        arithmetic.positive_difference,
        tpl.direct("std::fdim({a}, {b})"),
    ),
    ("fmax", _AB, ResultKind.SINGLE, arithmetic.maximum, tpl.direct("std::fmax({a}, {b})")),
    ("fmin", _AB, ResultKind.SINGLE, arithmetic.minimum, tpl.direct("std::fmin({a}, {b})")),
    (
        "hypot",
        _AB,
        ResultKind.SINGLE,
        widened(elementary.hypot),
        tpl.wide("scaled_hypot({a}, {b})", "scaled_hypot"),
    ),
    ("trunc", _A, ResultKind.SINGLE, arithmetic.truncate, tpl.direct("std::trunc({a})")),
    ("floor", _A, ResultKind.SINGLE, arithmetic.floor, tpl.direct("std::floor({a})")),
    ("ceil", _A, ResultKind.SINGLE, arithmetic.ceil, tpl.direct("std::ceil({a})")),
    ("round", _A, ResultKind.SINGLE, arithmetic.round_half_away, tpl.direct("std::round({a})")),
    ("rint", _A, ResultKind.SINGLE, arithmetic.round_to_integer, tpl.direct("std::rint({a})")),
    (
        "modf",
        _A,
        ResultKind.FRACTION_SPLIT,
        arithmetic.modf,
        tpl.dedicated(TemplateKind.FRACTION_SPLIT),
    ),
    (
        "frexp",
        _A,
        ResultKind.MANTISSA_EXPONENT,
        arithmetic.frexp,
        tpl.dedicated(TemplateKind.MANTISSA_EXPONENT),
    ),
    (
        "ilogb",
        _A,
        ResultKind.INTEGER,
        arithmetic.ilogb,
        tpl.integer("portable_ilogb({a})", "portable_ilogb"),
    ),
    ("logb", _A, ResultKind.SINGLE, arithmetic.logb, tpl.direct("std::logb({a})")),
    ("scalbn", _A_EXP, ResultKind.SINGLE, arithmetic.ldexp, tpl.direct("std::scalbn({a}, {n})")),
    (
        "scalbln",
        _A_EXP,
        ResultKind.SINGLE,
        arithmetic.ldexp,
        tpl.direct("std::scalbln({a}, static_cast<long>({n}))"),
    ),
    (
        "nextafter",
        _AB,
        ResultKind.SINGLE,
        arithmetic.next_after,
        tpl.direct("std::nextafter({a}, {b})"),
    ),
    (
        "isnan",
        _A,
        ResultKind.INTEGER,
        arithmetic.is_nan,
        tpl.integer("static_cast<int>(std::isnan({a}))"),
    ),
    (
        "isinf",
        _A,
        ResultKind.INTEGER,
        arithmetic.is_inf,
        tpl.integer("static_cast<int>(std::isinf({a}))"),
    ),
    (
        "isfinite",
        _A,
        ResultKind.INTEGER,
        arithmetic.is_finite,
        tpl.integer("static_cast<int>(std::isfinite({a}))"),
    ),
    (
        "signbit",
        _A,
        ResultKind.INTEGER,
        arithmetic.sign_bit,
        tpl.integer("static_cast<int>(std::signbit({a}))"),
    ),
]


def register_builtin_operations(catalog: OperationCatalog) -> None:
    """Регистрация всех встроенных функций в каталоге."""
    for identifier, roles, result_kind, evaluator, template in _BASIC:
        catalog.register(_descriptor(identifier, roles, result_kind), evaluator, template)

    for identifier, kernel, expression in _EXPONENTIAL:
        catalog.register(_descriptor(identifier, _A), widened(kernel), tpl.wide(expression))

    for identifier, kernel, expression in _TRIGONOMETRIC:
        catalog.register(_descriptor(identifier, _A), widened(kernel), tpl.wide(expression))
    catalog.register(
        _descriptor("atan2", _AB), widened(elementary.atan2), tpl.wide("std::atan2({a}, {b})")
    )
    catalog.register(
        _descriptor("sincos", _A, ResultKind.SINE_COSINE),
        sine_cosine,
        tpl.dedicated(TemplateKind.SINE_COSINE),
    )

    for identifier, kernel, helper in _SPECIAL:
        catalog.register(
            _descriptor(identifier, _A), widened(kernel), tpl.wide(f"{helper}({{a}})", helper)
        )

    for identifier, roles, result_kind, evaluator, template in _UTILITIES:
        catalog.register(_descriptor(identifier, roles, result_kind), evaluator, template)


def build_default_catalog() -> OperationCatalog:
    """Каталог со всеми встроенными функциями."""
    catalog = OperationCatalog()
    register_builtin_operations(catalog)
    return catalog


DEFAULT_CATALOG = build_default_catalog()
