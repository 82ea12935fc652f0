"""
Function descriptors — метаданные функций каталога

FunctionDescriptor описывает идентификатор, отображаемое имя, роли
аргументов и вид результата. Описание не зависит от способа вычисления и
используется одинаково evaluator-ом, генератором C++ и отчётом.
"""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================


class ArgumentRole(str, Enum):
    """Роль аргумента; значение — имя переменной в отчёте и в C++ программе"""

    FIRST_OPERAND = "a"
    SECOND_OPERAND = "b"
    THIRD_OPERAND = "c"
    INTEGER_EXPONENT = "exp"


class ResultKind(str, Enum):
    """Вид результата функции"""

    SINGLE = "single"
    INTEGER = "integer"
    FRACTION_SPLIT = "fraction_split"
    MANTISSA_EXPONENT = "mantissa_exponent"
    SINE_COSINE = "sine_cosine"

    @property
    def labels(self) -> tuple[str, ...]:
        """Имена строк результата в отчёте."""
        return _RESULT_LABELS[self]

    @property
    def is_multi_result(self) -> bool:
        return len(_RESULT_LABELS[self]) > 1


_RESULT_LABELS: dict[ResultKind, tuple[str, ...]] = {
    ResultKind.SINGLE: ("y",),
    ResultKind.INTEGER: ("y",),
    ResultKind.FRACTION_SPLIT: ("frac", "int"),
    ResultKind.MANTISSA_EXPONENT: ("mant", "exp"),
    ResultKind.SINE_COSINE: ("sin", "cos"),
}

VALUE_ROLES: tuple[ArgumentRole, ...] = (
    ArgumentRole.FIRST_OPERAND,
    ArgumentRole.SECOND_OPERAND,
    ArgumentRole.THIRD_OPERAND,
)


# =============================================================================
# DESCRIPTOR
# =============================================================================


class FunctionDescriptor(BaseModel):
    """
    Immutable описание функции каталога.

    Attributes:
        identifier: Уникальный идентификатор ("add", "erfcinv", ...)
        display_name: Отображаемое имя (сигнатура)
        roles: Роли аргументов в порядке передачи evaluator-у
        result_kind: Вид результата
    """

    identifier: str = Field(..., min_length=1, description="Идентификатор функции")
    display_name: str = Field(..., min_length=1, description="Отображаемое имя")
    roles: tuple[ArgumentRole, ...] = Field(..., description="Роли аргументов")
    result_kind: ResultKind = Field(ResultKind.SINGLE, description="Вид результата")

    model_config = {"frozen": True}

    @field_validator("roles")
    @classmethod
    def validate_roles(cls, v: tuple[ArgumentRole, ...]) -> tuple[ArgumentRole, ...]:
        """Роли уникальны, значения идут подряд начиная с FIRST_OPERAND"""
        if len(set(v)) != len(v):
            raise ValueError(f"duplicate argument roles: {v}")
        value_roles = [role for role in v if role is not ArgumentRole.INTEGER_EXPONENT]
        if tuple(value_roles) != VALUE_ROLES[: len(value_roles)]:
            raise ValueError(f"value roles must start at FIRST_OPERAND: {v}")
        return v

    @property
    def arity(self) -> int:
        return len(self.roles)

    @property
    def takes_exponent(self) -> bool:
        return ArgumentRole.INTEGER_EXPONENT in self.roles

    @property
    def is_multi_result(self) -> bool:
        return self.result_kind.is_multi_result
