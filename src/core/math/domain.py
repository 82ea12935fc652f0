"""
Domain checks — проверки области определения до вычисления

Проверка выполняется только для конечных операндов; NaN и бесконечности
проходят к вычислению и распространяются по правилам IEEE. Деление на ноль
и pow с отрицательным основанием ошибками области не считаются.
"""

from typing import Callable, Final

from src.core.domain.values import FloatLabError, NumericValue


class DomainError(FloatLabError, ValueError):
    """
    Операнд вне области определения функции.

    Attributes:
        identifier: Идентификатор функции
    """

    def __init__(self, identifier: str, message: str):
        super().__init__(f"{identifier}: {message}")
        self.identifier = identifier
        self.message = message


# Проверка возвращает сообщение об ошибке или None
DomainCheck = Callable[..., str | None]


def _negative_argument(a: NumericValue, *_: object) -> str | None:
    if a.is_finite and a.value < 0:
        return f"argument must be non-negative, got {a.value!r}"
    return None


def _non_positive_argument(a: NumericValue, *_: object) -> str | None:
    if a.is_finite and a.value <= 0:
        return f"argument must be positive, got {a.value!r}"
    return None


def _zero_divisor(a: NumericValue, b: NumericValue, *_: object) -> str | None:
    if b.is_zero:
        return "divisor must be non-zero"
    return None


DOMAIN_CHECKS: Final[dict[str, DomainCheck]] = {
    "sqrt": _negative_argument,
    "rsqrt": _negative_argument,
    "log": _non_positive_argument,
    "log2": _non_positive_argument,
    "log10": _non_positive_argument,
    "fmod": _zero_divisor,
}


def check_domain(identifier: str, operands: tuple) -> None:
    """
    Проверка операндов перед вычислением.

    Raises:
        DomainError: Если операнды вне области определения
    """
    check = DOMAIN_CHECKS.get(identifier)
    if check is None:
        return
    message = check(*operands)
    if message is not None:
        raise DomainError(identifier, message)
