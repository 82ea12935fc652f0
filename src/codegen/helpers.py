"""
C++ helpers — вспомогательные функции сгенерированной программы

Каждый helper — отдельная секция C++ со списком зависимостей. Генератор
включает только секции, на которые ссылается шаблон функции, вместе с их
транзитивными зависимостями; базовые секции (восстановление значения из
битов, печать) включаются всегда.

Коэффициенты специальных функций подставляются из special_functions, а
порядок операций повторяет Python-реализацию буквально.
"""

import math
from dataclasses import dataclass
from typing import Final, Sequence

from src.core.math import arithmetic
from src.core.math import special_functions as sf


@dataclass(frozen=True)
class CppHelper:
    """
    Секция C++.

    Attributes:
        name: Имя секции (совпадает с именем определяемой функции)
        requires: Секции, которые должны предшествовать этой
        source: Текст секции
    """

    name: str
    requires: tuple[str, ...]
    source: str


def _literal(x: float) -> str:
    """Литерал double, точно восстанавливающий x."""
    return repr(float(x))


def _array(name: str, coefficients: Sequence[float]) -> str:
    values = ", ".join(_literal(c) for c in coefficients)
    return f"static const double {name}[] = {{{values}}};"


# =============================================================================
# BASE SECTIONS
# =============================================================================

_KEEP = """\
template <typename T>
static T keep(T value) {
    volatile T slot = value;
    return slot;
}"""

_FROM_BITS = """\
static real_t from_bits(bits_t pattern) {
    volatile bits_t slot = pattern;
    const bits_t raw = slot;
    real_t value;
    std::memcpy(&value, &raw, sizeof value);
    return value;
}"""

_PRINT_VALUE = """\
static void format_scientific(char* out, std::size_t size, double x) {
    if (std::isnan(x)) {
        std::snprintf(out, size, "nan");
    } else if (std::isinf(x)) {
        std::snprintf(out, size, x > 0 ? "inf" : "-inf");
    } else {
        std::snprintf(out, size, "%.*e", kScientificDigits, x);
    }
}

static void format_fixed(char* out, std::size_t size, double x) {
    char mantissa[64];
    std::snprintf(mantissa, sizeof mantissa, "%.*e", kDecimalDigits - 1, x);
    const bool negative = mantissa[0] == '-';
    char significand[32];
    int count = 0;
    const char* cursor = mantissa + (negative ? 1 : 0);
    for (; *cursor != 'e'; ++cursor) {
        if (*cursor != '.') significand[count++] = *cursor;
    }
    int exponent = 0;
    std::sscanf(cursor + 1, "%d", &exponent);

    char text[64];
    int length = 0;
    bool has_point = false;
    if (negative) text[length++] = '-';
    if (exponent < 0) {
        text[length++] = '0';
        text[length++] = '.';
        has_point = true;
        for (int i = 0; i < -exponent - 1; ++i) text[length++] = '0';
        for (int i = 0; i < count; ++i) text[length++] = significand[i];
    } else {
        for (int i = 0; i <= exponent || i < count; ++i) {
            if (i == exponent + 1) {
                text[length++] = '.';
                has_point = true;
            }
            text[length++] = i < count ? significand[i] : '0';
        }
    }
    if (has_point) {
        while (text[length - 1] == '0') --length;
        if (text[length - 1] == '.') --length;
    }
    text[length] = '\\0';
    std::snprintf(out, size, "%s", text);
}

static void format_decimal(char* out, std::size_t size, double x) {
    const double magnitude = std::fabs(x);
    if (std::isnan(x) || std::isinf(x)) {
        format_scientific(out, size, x);
    } else if (magnitude != 0.0 && (magnitude >= 1e12 || magnitude < 1e-9)) {
        format_scientific(out, size, x);
    } else {
        format_fixed(out, size, x);
    }
}

static void print_value(const char* name, real_t value) {
    bits_t bits;
    std::memcpy(&bits, &value, sizeof bits);
    char decimal[64];
    char scientific[64];
    format_decimal(decimal, sizeof decimal, static_cast<double>(value));
    format_scientific(scientific, sizeof scientific, static_cast<double>(value));
    std::printf("%s = %s | %s | 0x%0*llx\\n", name, decimal, scientific, kHexDigits,
                static_cast<unsigned long long>(bits));
}

static void print_integer(const char* name, int value) {
    std::printf("%s = %d\\n", name, value);
}"""

_NEAREST_EVAL = """\
template <typename F>
static double nearest_eval(F evaluate) {
    const int saved = std::fegetround();
    std::fesetround(FE_TONEAREST);
    const double result = keep(evaluate());
    std::fesetround(saved);
    return result;
}"""

_HORNER = """\
template <std::size_t N>
static double horner(const double (&c)[N], double y) {
    double acc = c[N - 1];
    for (std::size_t i = N - 1; i-- > 0;) {
        acc = c[i] + y * acc;
    }
    return acc;
}"""

_SCALED_HYPOT = """\
static double scaled_hypot(double x, double y) {
    const double ax = std::fabs(x);
    const double ay = std::fabs(y);
    if (std::isinf(ax) || std::isinf(ay)) return std::numeric_limits<double>::infinity();
    if (std::isnan(ax) || std::isnan(ay)) return std::numeric_limits<double>::quiet_NaN();
    const double big = ax > ay ? ax : ay;
    const double small = ax > ay ? ay : ax;
    if (big == 0.0) return 0.0;
    const double r = small / big;
    return big * std::sqrt(1.0 + r * r);
}"""

_PORTABLE_ILOGB = f"""\
static int portable_ilogb(real_t x) {{
    if (std::isnan(x)) return {arithmetic.FP_ILOGBNAN};
    if (std::isinf(x)) return {arithmetic.INT_MAX};
    if (x == 0) return {arithmetic.FP_ILOGB0};
    return static_cast<int>(std::logb(x));
}}"""


# =============================================================================
# GAMMA
# =============================================================================

_LANCZOS = f"""\
{_array("kLanczos", sf.LANCZOS_COEFFICIENTS)}

static double lanczos_log_gamma(double z) {{
    double series = kLanczos[0];
    for (int i = 1; i < {len(sf.LANCZOS_COEFFICIENTS)}; ++i) {{
        series += kLanczos[i] / (z + static_cast<double>(i - 1));
    }}
    const double t = z + {_literal(sf.LANCZOS_G)} - 0.5;
    return (z - 0.5) * std::log(t) - t + {_literal(sf.HALF_LOG_2PI)} + std::log(series);
}}"""

_LOG_GAMMA = f"""\
static double log_gamma(double x) {{
    if (std::isnan(x)) return x;
    if (std::isinf(x)) return std::numeric_limits<double>::infinity();
    if (x <= 0.0 && x == std::floor(x)) return std::numeric_limits<double>::infinity();
    if (x < 0.5) {{
        const double s = std::sin({_literal(math.pi)} * x);
        if (s == 0.0) return std::numeric_limits<double>::infinity();
        return {_literal(sf.LOG_PI)} - std::log(std::fabs(s)) - lanczos_log_gamma(1.0 - x);
    }}
    return lanczos_log_gamma(x);
}}"""

_GAMMA = f"""\
static double gamma_function(double x) {{
    if (std::isnan(x) || std::isinf(x)) return std::numeric_limits<double>::quiet_NaN();
    if (x <= 0.0 && x == std::floor(x)) return std::numeric_limits<double>::infinity();
    if (x < 0.5) {{
        const double s = std::sin({_literal(math.pi)} * x);
        if (s == 0.0) return std::numeric_limits<double>::infinity();
        return {_literal(math.pi)} / (s * std::exp(log_gamma(1.0 - x)));
    }}
    return std::exp(log_gamma(x));
}}"""


# =============================================================================
# ERROR FUNCTION FAMILY
# =============================================================================

_ERF_TAIL = f"""\
{_array("kErfA", sf.ERF_A)}

static double erf_tail(double t) {{
    return t * horner(kErfA, t);
}}"""

_ERF = f"""\
static double erf_approx(double x) {{
    if (x == 0.0 || std::isnan(x)) return x;
    const double ax = std::fabs(x);
    const double t = 1.0 / (1.0 + {_literal(sf.ERF_P)} * ax);
    const double y = 1.0 - erf_tail(t) * std::exp(-ax * ax);
    return x < 0.0 ? -y : y;
}}"""

_ERFC = f"""\
static double erfc_approx(double x) {{
    if (std::isnan(x)) return x;
    const double ax = std::fabs(x);
    const double t = 1.0 / (1.0 + {_literal(sf.ERF_P)} * ax);
    const double tail = erf_tail(t) * std::exp(-ax * ax);
    return x >= 0.0 ? tail : 2.0 - tail;
}}"""

_ERFCX = f"""\
static double erfcx_asymptotic(double x) {{
    const double inv_x2 = 1.0 / (x * x);
    const double series = 1.0 - 0.5 * inv_x2 + 0.75 * inv_x2 * inv_x2 - 1.875 * inv_x2 * inv_x2 * inv_x2;
    return {_literal(sf.INV_SQRT_PI)} / x * series;
}}

static double erfcx_approx(double x) {{
    if (std::isnan(x)) return x;
    if (x > {_literal(sf.ERFCX_ASYMPTOTIC_THRESHOLD)}) return erfcx_asymptotic(x);
    if (x < -{_literal(sf.ERFCX_ASYMPTOTIC_THRESHOLD)}) return 2.0 * std::exp(x * x) - erfcx_asymptotic(-x);
    const double t = 1.0 / (1.0 + {_literal(sf.ERF_P)} * std::fabs(x));
    const double tail = erf_tail(t);
    return x >= 0.0 ? tail : 2.0 * std::exp(x * x) - tail;
}}"""

_PROBIT = f"""\
{_array("kProbitA", sf.PROBIT_A)}
{_array("kProbitB", sf.PROBIT_B)}
{_array("kProbitC", sf.PROBIT_C)}

static double probit(double p) {{
    const double q = p - 0.5;
    if (std::fabs(q) < {_literal(sf.PROBIT_CENTRAL_LIMIT)}) {{
        const double r = q * q;
        return q * horner(kProbitA, r) / horner(kProbitB, r);
    }}
    double r = q < 0.0 ? p : 1.0 - p;
    r = std::log(-std::log(r));
    const double x = horner(kProbitC, r);
    return q < 0.0 ? -x : x;
}}"""

_ERFCINV = f"""\
static double erfcinv_newton(double y) {{
    if (std::isnan(y)) return y;
    if (y <= 0.0) return std::numeric_limits<double>::infinity();
    if (y >= 2.0) return -std::numeric_limits<double>::infinity();
    if (y == 1.0) return 0.0;
    double x = -probit(0.5 * y) / {_literal(sf.SQRT2)};
    for (int step = 0; step < {sf.NEWTON_STEPS}; ++step) {{
        const double fx = erfc_approx(x) - y;
        const double dfx = -{_literal(sf.TWO_OVER_SQRT_PI)} * std::exp(-x * x);
        if (dfx == 0.0) break;
        x = x - fx / dfx;
    }}
    return x;
}}"""

_NORMCDFINV = f"""\
static double normcdfinv(double p) {{
    if (std::isnan(p)) return p;
    if (p <= 0.0) return -std::numeric_limits<double>::infinity();
    if (p >= 1.0) return std::numeric_limits<double>::infinity();
    if (p == 0.5) return 0.0;
    return -{_literal(sf.SQRT2)} * erfcinv_newton(2.0 * p);
}}"""


# =============================================================================
# BESSEL FUNCTIONS
# =============================================================================

_BESSEL_J0 = f"""\
{_array("kJ0Series", sf.J0_SERIES)}
{_array("kJ0Numerator", sf.J0_NUMERATOR)}
{_array("kJ0Denominator", sf.J0_DENOMINATOR)}
{_array("kP0", sf.P0)}
{_array("kQ0", sf.Q0)}

static double bessel_j0(double x) {{
    if (std::isinf(x)) return 0.0;
    const double ax = std::fabs(x);
    if (ax <= {_literal(sf.BESSEL_SERIES_LIMIT)}) return horner(kJ0Series, x * x);
    if (ax <= {_literal(sf.BESSEL_RATIONAL_LIMIT)}) {{
        const double y = x * x;
        return horner(kJ0Numerator, y) / horner(kJ0Denominator, y);
    }}
    const double z = {_literal(sf.BESSEL_RATIONAL_LIMIT)} / ax;
    const double y = z * z;
    const double p = horner(kP0, y);
    const double q = horner(kQ0, y);
    const double xx = ax - {_literal(sf.QUARTER_PI_NR)};
    return std::sqrt({_literal(sf.TWO_OVER_PI_NR)} / ax) * (std::cos(xx) * p - z * std::sin(xx) * q);
}}"""

_BESSEL_J1 = f"""\
{_array("kJ1Series", sf.J1_SERIES)}
{_array("kJ1Numerator", sf.J1_NUMERATOR)}
{_array("kJ1Denominator", sf.J1_DENOMINATOR)}
{_array("kP1", sf.P1)}
{_array("kQ1", sf.Q1)}

static double bessel_j1(double x) {{
    if (std::isinf(x)) return 0.0;
    const double ax = std::fabs(x);
    if (ax <= {_literal(sf.BESSEL_SERIES_LIMIT)}) return x * horner(kJ1Series, x * x);
    if (ax <= {_literal(sf.BESSEL_RATIONAL_LIMIT)}) {{
        const double y = x * x;
        return x * horner(kJ1Numerator, y) / horner(kJ1Denominator, y);
    }}
    const double z = {_literal(sf.BESSEL_RATIONAL_LIMIT)} / ax;
    const double y = z * z;
    const double p = horner(kP1, y);
    const double q = horner(kQ1, y);
    const double xx = ax - {_literal(sf.THREE_QUARTER_PI_NR)};
    const double result = std::sqrt({_literal(sf.TWO_OVER_PI_NR)} / ax) * (std::cos(xx) * p - z * std::sin(xx) * q);
    return x < 0.0 ? -result : result;
}}"""

_BESSEL_Y0 = f"""\
{_array("kY0Numerator", sf.Y0_NUMERATOR)}
{_array("kY0Denominator", sf.Y0_DENOMINATOR)}

static double bessel_y0(double x) {{
    if (std::isnan(x)) return x;
    if (x <= 0.0) return -std::numeric_limits<double>::infinity();
    if (std::isinf(x)) return 0.0;
    if (x < {_literal(sf.BESSEL_RATIONAL_LIMIT)}) {{
        const double y = x * x;
        const double rational = horner(kY0Numerator, y) / horner(kY0Denominator, y);
        return rational + {_literal(sf.TWO_OVER_PI_NR)} * bessel_j0(x) * std::log(x);
    }}
    const double z = {_literal(sf.BESSEL_RATIONAL_LIMIT)} / x;
    const double y = z * z;
    const double p = horner(kP0, y);
    const double q = horner(kQ0, y);
    const double xx = x - {_literal(sf.QUARTER_PI_NR)};
    return std::sqrt({_literal(sf.TWO_OVER_PI_NR)} / x) * (std::sin(xx) * p + z * std::cos(xx) * q);
}}"""

_BESSEL_Y1 = f"""\
{_array("kY1Numerator", sf.Y1_NUMERATOR)}
{_array("kY1Denominator", sf.Y1_DENOMINATOR)}

static double bessel_y1(double x) {{
    if (std::isnan(x)) return x;
    if (x <= 0.0) return -std::numeric_limits<double>::infinity();
    if (std::isinf(x)) return 0.0;
    if (x < {_literal(sf.BESSEL_RATIONAL_LIMIT)}) {{
        const double y = x * x;
        const double rational = x * horner(kY1Numerator, y) / horner(kY1Denominator, y);
        return rational + {_literal(sf.TWO_OVER_PI_NR)} * (bessel_j1(x) * std::log(x) - 1.0 / x);
    }}
    const double z = {_literal(sf.BESSEL_RATIONAL_LIMIT)} / x;
    const double y = z * z;
    const double p = horner(kP1, y);
    const double q = horner(kQ1, y);
    const double xx = x - {_literal(sf.THREE_QUARTER_PI_NR)};
    return std::sqrt({_literal(sf.TWO_OVER_PI_NR)} / x) * (std::sin(xx) * p + z * std::cos(xx) * q);
}}"""

_BESSEL_I0 = f"""\
{_array("kI0Small", sf.I0_SMALL)}
{_array("kI0Large", sf.I0_LARGE)}

static double bessel_i0(double x) {{
    if (std::isinf(x)) return std::numeric_limits<double>::infinity();
    const double ax = std::fabs(x);
    if (ax < {_literal(sf.BESSEL_I_LIMIT)}) {{
        const double y = ax / {_literal(sf.BESSEL_I_LIMIT)};
        return horner(kI0Small, y * y);
    }}
    const double y = {_literal(sf.BESSEL_I_LIMIT)} / ax;
    return std::exp(ax) / std::sqrt(ax) * horner(kI0Large, y);
}}"""

_BESSEL_I1 = f"""\
{_array("kI1Small", sf.I1_SMALL)}
{_array("kI1Large", sf.I1_LARGE)}

static double bessel_i1(double x) {{
    if (std::isinf(x)) return x;
    const double ax = std::fabs(x);
    double result;
    if (ax < {_literal(sf.BESSEL_I_LIMIT)}) {{
        const double y = ax / {_literal(sf.BESSEL_I_LIMIT)};
        result = ax * horner(kI1Small, y * y);
    }} else {{
        const double y = {_literal(sf.BESSEL_I_LIMIT)} / ax;
        result = std::exp(ax) / std::sqrt(ax) * horner(kI1Large, y);
    }}
    return x < 0.0 ? -result : result;
}}"""


# =============================================================================
# REGISTRY
# =============================================================================

BASE_HELPERS: Final[tuple[str, ...]] = ("keep", "from_bits", "print_value")

HELPERS: Final[dict[str, CppHelper]] = {
    helper.name: helper
    for helper in (
        CppHelper("keep", (), _KEEP),
        CppHelper("from_bits", (), _FROM_BITS),
        CppHelper("print_value", (), _PRINT_VALUE),
        CppHelper("nearest_eval", ("keep",), _NEAREST_EVAL),
        CppHelper("horner", (), _HORNER),
        CppHelper("scaled_hypot", (), _SCALED_HYPOT),
        CppHelper("portable_ilogb", (), _PORTABLE_ILOGB),
        CppHelper("lanczos_log_gamma", (), _LANCZOS),
        CppHelper("log_gamma", ("lanczos_log_gamma",), _LOG_GAMMA),
        CppHelper("gamma_function", ("log_gamma",), _GAMMA),
        CppHelper("erf_tail", ("horner",), _ERF_TAIL),
        CppHelper("erf_approx", ("erf_tail",), _ERF),
        CppHelper("erfc_approx", ("erf_tail",), _ERFC),
        CppHelper("erfcx_approx", ("erf_tail",), _ERFCX),
        CppHelper("probit", ("horner",), _PROBIT),
        CppHelper("erfcinv_newton", ("probit", "erfc_approx"), _ERFCINV),
        CppHelper("normcdfinv", ("erfcinv_newton",), _NORMCDFINV),
        CppHelper("bessel_j0", ("horner",), _BESSEL_J0),
        CppHelper("bessel_j1", ("horner",), _BESSEL_J1),
        CppHelper("bessel_y0", ("bessel_j0",), _BESSEL_Y0),
        CppHelper("bessel_y1", ("bessel_j1",), _BESSEL_Y1),
        CppHelper("bessel_i0", ("horner",), _BESSEL_I0),
        CppHelper("bessel_i1", ("horner",), _BESSEL_I1),
    )
}


def resolve_helpers(names: Sequence[str]) -> list[CppHelper]:
    """
    Транзитивное замыкание helper-ов в порядке зависимостей.

    Args:
        names: Имена, на которые ссылается шаблон

    Returns:
        Список секций: каждая следует после всех своих зависимостей

    Raises:
        KeyError: Если имя helper-а неизвестно
    """
    ordered: list[CppHelper] = []
    seen: set[str] = set()

    def visit(name: str) -> None:
        if name in seen:
            return
        seen.add(name)
        helper = HELPERS[name]
        for dependency in helper.requires:
            visit(dependency)
        ordered.append(helper)

    for name in names:
        visit(name)
    return ordered
