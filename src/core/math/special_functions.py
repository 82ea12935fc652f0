"""
Special Function Library — специальные функции в double

Все функции вычисляются в double и возвращают Python float; финальное
округление к целевой точности выполняется один раз на границе каталога
(rounding.converge).

Аппроксимации:
- log_gamma / gamma: Lanczos (g = 7, 9 коэффициентов) + отражение для x < 0.5
- erf / erfc / erfcx: Abramowitz–Stegun 7.1.26, асимптотика erfcx при |x| > 5
- erfcinv: начальное приближение probit (Beasley–Springer–Moro) и 3 шага Ньютона
- Bessel J0/J1/Y0/Y1: степенной ряд, рациональные аппроксимации Numerical
  Recipes и асимптотика при x > 8
- Bessel I0/I1: полиномы Abramowitz–Stegun 9.8.1–9.8.4

Порядок операций в каждой функции фиксирован: генератор C++ повторяет его
буквально, поэтому результаты совпадают побитово.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Функции не выбрасывают исключений (полюса -> ±inf, вне области -> NaN)
2. erfc(-x) = 2 - erfc(x)
3. erfcinv(1) = 0, erfcinv(0) = +inf, erfcinv(2) = -inf
4. Итерации ограничены: ровно NEWTON_STEPS шагов
"""

import math
from typing import Final, Sequence

from src.core.math.ieee_safeguards import ieee_exp, ieee_log


# =============================================================================
# CONSTANTS
# =============================================================================

HALF_LOG_2PI: Final[float] = 0.91893853320467274178
LOG_PI: Final[float] = math.log(math.pi)
SQRT2: Final[float] = math.sqrt(2.0)
TWO_OVER_SQRT_PI: Final[float] = 2.0 / math.sqrt(math.pi)
INV_SQRT_PI: Final[float] = 1.0 / math.sqrt(math.pi)

LANCZOS_G: Final[float] = 7.0
LANCZOS_COEFFICIENTS: Final[tuple[float, ...]] = (
    0.99999999999980993,
    676.5203681218851,
    -1259.1392167224028,
    771.32342877765313,
    -176.61502916214059,
    12.507343278686905,
    -0.13857109526572012,
    9.9843695780195716e-6,
    1.5056327351493116e-7,
)

# Abramowitz–Stegun 7.1.26
ERF_P: Final[float] = 0.3275911
ERF_A: Final[tuple[float, ...]] = (
    0.254829592,
    -0.284496736,
    1.421413741,
    -1.453152027,
    1.061405429,
)
ERFCX_ASYMPTOTIC_THRESHOLD: Final[float] = 5.0

NEWTON_STEPS: Final[int] = 3

# Beasley–Springer–Moro
PROBIT_CENTRAL_LIMIT: Final[float] = 0.42
PROBIT_A: Final[tuple[float, ...]] = (
    2.50662823884,
    -18.61500062529,
    41.39119773534,
    -25.44106049637,
)
PROBIT_B: Final[tuple[float, ...]] = (
    1.0,
    -8.47351093090,
    23.08336743743,
    -21.06224101826,
    3.13082909833,
)
PROBIT_C: Final[tuple[float, ...]] = (
    0.3374754822726147,
    0.9761690190917186,
    0.1607979714918209,
    0.0276438810333863,
    0.0038405729373609,
    0.0003951896511919,
    0.0000321767881768,
    0.0000002888167364,
    0.0000003960315187,
)

# Bessel J0/J1: степенные ряды по y = x*x для |x| <= 2
J0_SERIES: Final[tuple[float, ...]] = tuple(
    (-1) ** k / (4**k * math.factorial(k) ** 2) for k in range(8)
)
J1_SERIES: Final[tuple[float, ...]] = tuple(
    (-1) ** k / (2 ** (2 * k + 1) * math.factorial(k) * math.factorial(k + 1))
    for k in range(7)
)
BESSEL_SERIES_LIMIT: Final[float] = 2.0
BESSEL_RATIONAL_LIMIT: Final[float] = 8.0

# Numerical Recipes: рациональные аппроксимации для 2 < |x| <= 8
J0_NUMERATOR: Final[tuple[float, ...]] = (
    57568490574.0, -13362590354.0, 651619640.7, -11214424.18, 77392.33017, -184.9052456,
)
J0_DENOMINATOR: Final[tuple[float, ...]] = (
    57568490411.0, 1029532985.0, 9494680.718, 59272.64853, 267.8532712, 1.0,
)
J1_NUMERATOR: Final[tuple[float, ...]] = (
    72362614232.0, -7895059235.0, 242396853.1, -2972611.439, 15704.48260, -30.16036606,
)
J1_DENOMINATOR: Final[tuple[float, ...]] = (
    144725228442.0, 2300535178.0, 18583304.74, 99447.43394, 376.9991397, 1.0,
)
Y0_NUMERATOR: Final[tuple[float, ...]] = (
    -2957821389.0, 7062834065.0, -512359803.6, 10879881.29, -86327.92757, 228.4622733,
)
Y0_DENOMINATOR: Final[tuple[float, ...]] = (
    40076544269.0, 745249964.8, 7189466.438, 47447.26470, 226.1030244, 1.0,
)
Y1_NUMERATOR: Final[tuple[float, ...]] = (
    -0.4900604943e13, 0.1275274390e13, -0.5153438139e11,
    0.7349264551e9, -0.4237922726e7, 0.8511937935e4,
)
Y1_DENOMINATOR: Final[tuple[float, ...]] = (
    0.2499580570e14, 0.4244419664e12, 0.3733650367e10,
    0.2245904002e8, 0.1020426050e6, 0.3549632885e3, 1.0,
)

# Асимптотические ряды P/Q для x > 8 (по y = (8/x)**2)
P0: Final[tuple[float, ...]] = (
    1.0, -0.1098628627e-2, 0.2734510407e-4, -0.2073370639e-5, 0.2093887211e-6,
)
Q0: Final[tuple[float, ...]] = (
    -0.1562499995e-1, 0.1430488765e-3, -0.6911147651e-5, 0.7621095161e-6, -0.934935152e-7,
)
P1: Final[tuple[float, ...]] = (
    1.0, 0.183105e-2, -0.3516396496e-4, 0.2457520174e-5, -0.240337019e-6,
)
Q1: Final[tuple[float, ...]] = (
    0.04687499995, -0.2002690873e-3, 0.8449199096e-5, -0.88228987e-6, 0.105787412e-6,
)
TWO_OVER_PI_NR: Final[float] = 0.636619772
QUARTER_PI_NR: Final[float] = 0.785398164
THREE_QUARTER_PI_NR: Final[float] = 2.356194491

# Abramowitz–Stegun 9.8.1–9.8.4
BESSEL_I_LIMIT: Final[float] = 3.75
I0_SMALL: Final[tuple[float, ...]] = (
    1.0, 3.5156229, 3.0899424, 1.2067492, 0.2659732, 0.360768e-1, 0.45813e-2,
)
I0_LARGE: Final[tuple[float, ...]] = (
    0.39894228, 0.1328592e-1, 0.225319e-2, -0.157565e-2, 0.916281e-2,
    -0.2057706e-1, 0.2635537e-1, -0.1647633e-1, 0.392377e-2,
)
I1_SMALL: Final[tuple[float, ...]] = (
    0.5, 0.87890594, 0.51498869, 0.15084934, 0.2658733e-1, 0.301532e-2, 0.32411e-3,
)
I1_LARGE: Final[tuple[float, ...]] = (
    0.39894228, -0.3988024e-1, -0.362018e-2, 0.163801e-2, -0.1031555e-1,
    0.2282967e-1, -0.2895312e-1, 0.1787654e-1, -0.420059e-2,
)


# =============================================================================
# POLYNOMIALS
# =============================================================================


def horner(coefficients: Sequence[float], y: float) -> float:
    """
    Полином c[0] + c[1]*y + ... + c[n-1]*y**(n-1) по схеме Горнера.

    Examples:
        >>> horner((1.0, 2.0, 3.0), 2.0)
        17.0
    """
    acc = coefficients[-1]
    for coefficient in reversed(coefficients[:-1]):
        acc = coefficient + y * acc
    return acc


# =============================================================================
# GAMMA
# =============================================================================


def _lanczos_log_gamma(z: float) -> float:
    series = LANCZOS_COEFFICIENTS[0]
    for i in range(1, len(LANCZOS_COEFFICIENTS)):
        series += LANCZOS_COEFFICIENTS[i] / (z + (i - 1))
    t = z + LANCZOS_G - 0.5
    return (z - 0.5) * math.log(t) - t + HALF_LOG_2PI + math.log(series)


def _is_pole(x: float) -> bool:
    return x <= 0.0 and x == math.floor(x)


def log_gamma(x: float) -> float:
    """
    ln|Γ(x)|.

    Args:
        x: Аргумент

    Returns:
        +inf в полюсах (0, -1, -2, ...) и при x = ±inf, NaN для NaN

    Examples:
        >>> abs(log_gamma(5.0) - math.log(24.0)) < 1e-12
        True
    """
    if math.isnan(x):
        return x
    if math.isinf(x):
        return math.inf
    if _is_pole(x):
        return math.inf
    if x < 0.5:
        s = math.sin(math.pi * x)
        if s == 0.0:
            return math.inf
        return LOG_PI - math.log(abs(s)) - _lanczos_log_gamma(1.0 - x)
    return _lanczos_log_gamma(x)


def gamma(x: float) -> float:
    """
    Γ(x): exp(lnΓ(x)) при x >= 0.5, отражение π / (sin(πx)·Γ(1-x)) ниже.

    Полюса (включая 0) дают +inf; NaN и ±inf дают NaN.
    """
    if math.isnan(x) or math.isinf(x):
        return math.nan
    if _is_pole(x):
        return math.inf
    if x < 0.5:
        s = math.sin(math.pi * x)
        if s == 0.0:
            return math.inf
        return math.pi / (s * ieee_exp(log_gamma(1.0 - x)))
    return ieee_exp(log_gamma(x))


# =============================================================================
# ERROR FUNCTION FAMILY
# =============================================================================


def _erf_tail(t: float) -> float:
    return t * horner(ERF_A, t)


def erf(x: float) -> float:
    if x == 0.0 or math.isnan(x):
        return x
    ax = abs(x)
    t = 1.0 / (1.0 + ERF_P * ax)
    y = 1.0 - _erf_tail(t) * math.exp(-ax * ax)
    return -y if x < 0.0 else y


def erfc(x: float) -> float:
    """
    Дополнительная функция ошибок, вычисленная напрямую (не 1 - erf).

    Для x < 0 используется симметрия erfc(x) = 2 - erfc(-x).
    """
    if math.isnan(x):
        return x
    ax = abs(x)
    t = 1.0 / (1.0 + ERF_P * ax)
    tail = _erf_tail(t) * math.exp(-ax * ax)
    return tail if x >= 0.0 else 2.0 - tail


def _erfcx_asymptotic(x: float) -> float:
    inv_x2 = 1.0 / (x * x)
    series = 1.0 - 0.5 * inv_x2 + 0.75 * inv_x2 * inv_x2 - 1.875 * inv_x2 * inv_x2 * inv_x2
    return INV_SQRT_PI / x * series


def erfcx(x: float) -> float:
    """
    Масштабированная функция erfcx(x) = exp(x²)·erfc(x).

    При |x| > 5 используется асимптотический ряд, чтобы не вычислять
    exp(x²) для положительных x.
    """
    if math.isnan(x):
        return x
    if x > ERFCX_ASYMPTOTIC_THRESHOLD:
        return _erfcx_asymptotic(x)
    if x < -ERFCX_ASYMPTOTIC_THRESHOLD:
        return 2.0 * ieee_exp(x * x) - _erfcx_asymptotic(-x)
    t = 1.0 / (1.0 + ERF_P * abs(x))
    tail = _erf_tail(t)
    return tail if x >= 0.0 else 2.0 * math.exp(x * x) - tail


def probit(p: float) -> float:
    """
    Обратная функция нормального распределения (Beasley–Springer–Moro).

    Args:
        p: Вероятность в (0, 1)
    """
    q = p - 0.5
    if abs(q) < PROBIT_CENTRAL_LIMIT:
        r = q * q
        return q * horner(PROBIT_A, r) / horner(PROBIT_B, r)
    r = p if q < 0.0 else 1.0 - p
    r = math.log(-ieee_log(r))
    x = horner(PROBIT_C, r)
    return -x if q < 0.0 else x


def erfcinv(y: float) -> float:
    """
    Обратная дополнительная функция ошибок.

    Начальное приближение -probit(y/2)/√2 уточняется ровно NEWTON_STEPS
    шагами Ньютона по erfc(x) - y; итерация прекращается досрочно, если
    производная обращается в ноль.

    Returns:
        erfcinv(1) = 0; +inf при y <= 0, -inf при y >= 2; NaN для NaN

    Examples:
        >>> erfcinv(1.0)
        0.0
        >>> erfcinv(0.0)
        inf
    """
    if math.isnan(y):
        return y
    if y <= 0.0:
        return math.inf
    if y >= 2.0:
        return -math.inf
    if y == 1.0:
        return 0.0
    x = -probit(0.5 * y) / SQRT2
    for _ in range(NEWTON_STEPS):
        fx = erfc(x) - y
        dfx = -TWO_OVER_SQRT_PI * math.exp(-x * x)
        if dfx == 0.0:
            break
        x = x - fx / dfx
    return x


def normcdfinv(p: float) -> float:
    """
    Квантиль стандартного нормального распределения: -√2·erfcinv(2p).

    Returns:
        -inf при p <= 0, +inf при p >= 1; NaN для NaN
    """
    if math.isnan(p):
        return p
    if p <= 0.0:
        return -math.inf
    if p >= 1.0:
        return math.inf
    if p == 0.5:
        return 0.0
    return -SQRT2 * erfcinv(2.0 * p)


# =============================================================================
# BESSEL FUNCTIONS
# =============================================================================


def _asymptotic_pq(ax: float, p_coefficients, q_coefficients) -> tuple[float, float, float]:
    z = BESSEL_RATIONAL_LIMIT / ax
    y = z * z
    return z, horner(p_coefficients, y), horner(q_coefficients, y)


def bessel_j0(x: float) -> float:
    """
    Функция Бесселя первого рода порядка 0.

    Examples:
        >>> abs(bessel_j0(1.0) - 0.7651976866) < 1e-8
        True
    """
    if math.isinf(x):
        return 0.0
    ax = abs(x)
    if ax <= BESSEL_SERIES_LIMIT:
        return horner(J0_SERIES, x * x)
    if ax <= BESSEL_RATIONAL_LIMIT:
        y = x * x
        return horner(J0_NUMERATOR, y) / horner(J0_DENOMINATOR, y)
    z, p, q = _asymptotic_pq(ax, P0, Q0)
    xx = ax - QUARTER_PI_NR
    return math.sqrt(TWO_OVER_PI_NR / ax) * (math.cos(xx) * p - z * math.sin(xx) * q)


def bessel_j1(x: float) -> float:
    if math.isinf(x):
        return 0.0
    ax = abs(x)
    if ax <= BESSEL_SERIES_LIMIT:
        return x * horner(J1_SERIES, x * x)
    if ax <= BESSEL_RATIONAL_LIMIT:
        y = x * x
        return x * horner(J1_NUMERATOR, y) / horner(J1_DENOMINATOR, y)
    z, p, q = _asymptotic_pq(ax, P1, Q1)
    xx = ax - THREE_QUARTER_PI_NR
    result = math.sqrt(TWO_OVER_PI_NR / ax) * (math.cos(xx) * p - z * math.sin(xx) * q)
    return -result if x < 0.0 else result


def bessel_y0(x: float) -> float:
    """
    Функция Бесселя второго рода порядка 0.

    Определена для x > 0; при x <= 0 возвращается -inf (предел в нуле).
    """
    if math.isnan(x):
        return x
    if x <= 0.0:
        return -math.inf
    if math.isinf(x):
        return 0.0
    if x < BESSEL_RATIONAL_LIMIT:
        y = x * x
        rational = horner(Y0_NUMERATOR, y) / horner(Y0_DENOMINATOR, y)
        return rational + TWO_OVER_PI_NR * bessel_j0(x) * math.log(x)
    z, p, q = _asymptotic_pq(x, P0, Q0)
    xx = x - QUARTER_PI_NR
    return math.sqrt(TWO_OVER_PI_NR / x) * (math.sin(xx) * p + z * math.cos(xx) * q)


def bessel_y1(x: float) -> float:
    if math.isnan(x):
        return x
    if x <= 0.0:
        return -math.inf
    if math.isinf(x):
        return 0.0
    if x < BESSEL_RATIONAL_LIMIT:
        y = x * x
        rational = x * horner(Y1_NUMERATOR, y) / horner(Y1_DENOMINATOR, y)
        return rational + TWO_OVER_PI_NR * (bessel_j1(x) * math.log(x) - 1.0 / x)
    z, p, q = _asymptotic_pq(x, P1, Q1)
    xx = x - THREE_QUARTER_PI_NR
    return math.sqrt(TWO_OVER_PI_NR / x) * (math.sin(xx) * p + z * math.cos(xx) * q)


def bessel_i0(x: float) -> float:
    """Модифицированная функция Бесселя первого рода порядка 0 (чётная)."""
    if math.isinf(x):
        return math.inf
    ax = abs(x)
    if ax < BESSEL_I_LIMIT:
        y = ax / BESSEL_I_LIMIT
        return horner(I0_SMALL, y * y)
    y = BESSEL_I_LIMIT / ax
    return ieee_exp(ax) / math.sqrt(ax) * horner(I0_LARGE, y)


def bessel_i1(x: float) -> float:
    """Модифицированная функция Бесселя первого рода порядка 1 (нечётная)."""
    if math.isinf(x):
        return x
    ax = abs(x)
    if ax < BESSEL_I_LIMIT:
        y = ax / BESSEL_I_LIMIT
        result = ax * horner(I1_SMALL, y * y)
    else:
        y = BESSEL_I_LIMIT / ax
        result = ieee_exp(ax) / math.sqrt(ax) * horner(I1_LARGE, y)
    return -result if x < 0.0 else result
