"""
CodeGenerator — генерация C++17 программы, воспроизводящей вычисление

Программа восстанавливает операнды из тех же битовых паттернов, что и
вычисление in-process, устанавливает направление округления через
std::fesetround, вычисляет функцию, восстанавливает round-to-nearest и
печатает входы и результаты в формате render_report:

    name = <decimal> | <scientific> | 0x<hex>

Шаблоны записаны относительно real_t / bits_t, поэтому смена точности
меняет только определения типов и констант отображения в преамбуле.
В преамбулу попадают только helper-ы, на которые ссылается шаблон.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Операнды встраиваются как hex-литералы фиксированной ширины
2. Вычисление между fesetround(mode) и fesetround(FE_TONEAREST)
3. Печать выполняется только под round-to-nearest
"""

import logging
from dataclasses import dataclass
from typing import Final, Sequence

from pydantic import BaseModel, Field

from src.catalog import DEFAULT_CATALOG, ArgumentRole, FunctionDescriptor, OperationCatalog
from src.catalog.templates import SourceTemplate, TemplateKind
from src.codegen.helpers import BASE_HELPERS, resolve_helpers
from src.core.codec.parser import INT32_MAX, INT32_MIN
from src.core.domain.context import RoundingMode
from src.core.domain.precision import Precision
from src.core.domain.values import NumericValue

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

ROUNDING_DIRECTIVES: Final[dict[RoundingMode, str]] = {
    RoundingMode.NEAREST_EVEN: "FE_TONEAREST",
    RoundingMode.TOWARD_ZERO: "FE_TOWARDZERO",
    RoundingMode.TOWARD_POSITIVE: "FE_UPWARD",
    RoundingMode.TOWARD_NEGATIVE: "FE_DOWNWARD",
}

INCLUDES: Final[tuple[str, ...]] = (
    "cfenv",
    "cmath",
    "cstddef",
    "cstdint",
    "cstdio",
    "cstring",
    "limits",
)

# Имена переменных C++ для операндов по ролям
OPERAND_NAMES: Final[dict[ArgumentRole, str]] = {
    ArgumentRole.FIRST_OPERAND: "a",
    ArgumentRole.SECOND_OPERAND: "b",
    ArgumentRole.THIRD_OPERAND: "c",
    ArgumentRole.INTEGER_EXPONENT: "n",
}

_ROLE_FIELDS: Final[dict[ArgumentRole, str]] = {
    ArgumentRole.FIRST_OPERAND: "first",
    ArgumentRole.SECOND_OPERAND: "second",
    ArgumentRole.THIRD_OPERAND: "third",
    ArgumentRole.INTEGER_EXPONENT: "exponent",
}


# =============================================================================
# CONFIGURATION AND RESULTS
# =============================================================================


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Конфигурация генератора.

    Attributes:
        language_standard: Стандарт C++ в комментарии преамбулы
        compiler_flags: Рекомендуемая строка сборки
        echo_inputs: Печатать ли входные операнды перед результатами
    """

    language_standard: str = "C++17"
    compiler_flags: str = "g++ -std=c++17 -frounding-math -ffp-contract=off"
    echo_inputs: bool = True


class CapturedOperands(BaseModel):
    """
    Операнды, зафиксированные для генерации: битовые паттерны и экспонента.

    Attributes:
        first: Паттерн операнда a
        second: Паттерн операнда b
        third: Паттерн операнда c
        exponent: Целая экспонента (ldexp, scalbn, scalbln)
    """

    first: int | None = Field(None, ge=0, description="Паттерн операнда a")
    second: int | None = Field(None, ge=0, description="Паттерн операнда b")
    third: int | None = Field(None, ge=0, description="Паттерн операнда c")
    exponent: int | None = Field(
        None, ge=INT32_MIN, le=INT32_MAX, description="Целая экспонента"
    )

    model_config = {"frozen": True}

    @classmethod
    def capture(
        cls, descriptor: FunctionDescriptor, operands: Sequence[NumericValue | int]
    ) -> "CapturedOperands":
        """Фиксация операндов в порядке ролей функции."""
        if len(operands) != descriptor.arity:
            raise ValueError(
                f"{descriptor.identifier} expects {descriptor.arity} operands, got {len(operands)}"
            )
        fields: dict[str, int] = {}
        for role, operand in zip(descriptor.roles, operands):
            if isinstance(operand, NumericValue):
                fields[_ROLE_FIELDS[role]] = operand.bits
            else:
                fields[_ROLE_FIELDS[role]] = int(operand)
        return cls(**fields)

    def for_role(self, role: ArgumentRole) -> int | None:
        return getattr(self, _ROLE_FIELDS[role])


class GeneratedSource(BaseModel):
    """
    Immutable результат генерации.

    Attributes:
        identifier: Идентификатор функции
        precision: Точность программы
        rounding_mode: Направление округления программы
        text: Полный текст программы C++
    """

    identifier: str = Field(..., description="Идентификатор функции")
    precision: Precision = Field(..., description="Точность программы")
    rounding_mode: RoundingMode = Field(..., description="Направление округления")
    text: str = Field(..., description="Текст программы C++")

    model_config = {"frozen": True}


# =============================================================================
# GENERATOR
# =============================================================================


class CodeGenerator:
    """
    Генератор C++ программ для функций каталога.

    Example:
        >>> generator = CodeGenerator()
        >>> captured = CapturedOperands(first=0x3FA00000, second=0x40200000)
        >>> source = generator.generate("add", captured, "binary32", "RN")
        >>> "const real_t r0 = keep(a + b);" in source.text
        True
    """

    def __init__(
        self,
        catalog: OperationCatalog | None = None,
        config: GeneratorConfig | None = None,
    ):
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.config = config if config is not None else GeneratorConfig()
        self.indent = 0
        self.lines: list[str] = []

    def generate(
        self,
        identifier: str,
        captured: CapturedOperands,
        precision: Precision,
        rounding_mode: RoundingMode,
    ) -> GeneratedSource:
        """
        Генерация программы для одной функции.

        Args:
            identifier: Идентификатор функции каталога
            captured: Зафиксированные операнды
            precision: Точность (binary32 / binary64)
            rounding_mode: Направление округления

        Returns:
            GeneratedSource с полным текстом программы

        Raises:
            UnsupportedOperation: Неизвестный идентификатор
            ValueError: Отсутствует операнд или паттерн шире формата
        """
        precision = Precision(precision)
        rounding_mode = RoundingMode(rounding_mode)
        entry = self.catalog.entry(identifier)
        descriptor = entry.descriptor
        self._check_captured(descriptor, captured, precision)

        self.indent = 0
        self.lines = []
        self._emit_preamble(descriptor, precision, rounding_mode)
        self._emit_helpers(entry.template)
        self._emit_main(descriptor, entry.template, captured, precision, rounding_mode)

        text = "\n".join(self.lines) + "\n"
        logger.debug(
            "generated %s program (%s, %s): %d lines",
            identifier,
            precision.value,
            rounding_mode.value,
            len(self.lines),
        )
        return GeneratedSource(
            identifier=identifier,
            precision=precision,
            rounding_mode=rounding_mode,
            text=text,
        )

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def _check_captured(
        self, descriptor: FunctionDescriptor, captured: CapturedOperands, precision: Precision
    ) -> None:
        fmt = precision.format
        for role in descriptor.roles:
            value = captured.for_role(role)
            if value is None:
                raise ValueError(f"{descriptor.identifier}: missing operand {role.value}")
            if role is not ArgumentRole.INTEGER_EXPONENT and value > fmt.bit_mask:
                raise ValueError(
                    f"{descriptor.identifier}: pattern {value:#x} does not fit {precision.value}"
                )

    # =========================================================================
    # EMITTER
    # =========================================================================

    def _line(self, text: str = "") -> None:
        if text:
            self.lines.append("    " * self.indent + text)
        else:
            self.lines.append("")

    def _emit_preamble(
        self, descriptor: FunctionDescriptor, precision: Precision, rounding_mode: RoundingMode
    ) -> None:
        fmt = precision.format
        self._line(
            f"// {descriptor.display_name}, {precision.value}, rounding {rounding_mode.value}"
        )
        self._line(f"// {self.config.language_standard}. Build: {self.config.compiler_flags}")
        for header in INCLUDES:
            self._line(f"#include <{header}>")
        self._line()
        self._line("#pragma STDC FENV_ACCESS ON")
        self._line("#pragma STDC FP_CONTRACT OFF")
        self._line()
        self._line(f"using real_t = {fmt.c_type};")
        self._line(f"using bits_t = {fmt.c_bits_type};")
        self._line(f"constexpr int kDecimalDigits = {fmt.decimal_digits};")
        self._line(f"constexpr int kScientificDigits = {fmt.scientific_digits};")
        self._line(f"constexpr int kHexDigits = {fmt.hex_digits};")

    def _emit_helpers(self, template: SourceTemplate) -> None:
        names = list(BASE_HELPERS)
        if template.kind in (TemplateKind.WIDE, TemplateKind.SINE_COSINE):
            names.append("nearest_eval")
        names.extend(template.helpers)
        for helper in resolve_helpers(names):
            self._line()
            for text in helper.source.splitlines():
                self._line(text)

    def _emit_main(
        self,
        descriptor: FunctionDescriptor,
        template: SourceTemplate,
        captured: CapturedOperands,
        precision: Precision,
        rounding_mode: RoundingMode,
    ) -> None:
        self._line()
        self._line("int main() {")
        self.indent += 1
        for role in descriptor.roles:
            self._emit_operand(role, captured.for_role(role), precision)
        self._line(f"std::fesetround({ROUNDING_DIRECTIVES[rounding_mode]});")
        outputs = self._emit_evaluation(descriptor, template)
        self._line("std::fesetround(FE_TONEAREST);")
        if self.config.echo_inputs:
            for role in descriptor.roles:
                is_integer = role is ArgumentRole.INTEGER_EXPONENT
                self._emit_print(role.value, OPERAND_NAMES[role], is_integer)
        for label, (variable, is_integer) in zip(descriptor.result_kind.labels, outputs):
            self._emit_print(label, variable, is_integer)
        self._line("return 0;")
        self.indent -= 1
        self._line("}")

    def _emit_operand(self, role: ArgumentRole, value: int, precision: Precision) -> None:
        name = OPERAND_NAMES[role]
        if role is ArgumentRole.INTEGER_EXPONENT:
            self._line(f"const int {name} = {_int_literal(value)};")
        else:
            digits = precision.format.hex_digits
            self._line(f"const real_t {name} = from_bits(0x{value:0{digits}x});")

    def _emit_evaluation(
        self, descriptor: FunctionDescriptor, template: SourceTemplate
    ) -> list[tuple[str, bool]]:
        """Вычисление; возвращает (переменная, целая ли) для каждого результата."""
        names = {OPERAND_NAMES[role]: OPERAND_NAMES[role] for role in descriptor.roles}
        kind = template.kind
        if kind is TemplateKind.DIRECT:
            self._line(f"const real_t r0 = keep({template.render(names)});")
            return [("r0", False)]
        if kind is TemplateKind.INTEGER:
            self._line(f"const int r0 = keep({template.render(names)});")
            return [("r0", True)]
        if kind is TemplateKind.WIDE:
            self._line(f"const real_t r0 = keep({_wide(template.render(_widened(names)))});")
            return [("r0", False)]
        if kind is TemplateKind.FRACTION_SPLIT:
            self._line("real_t integral;")
            self._line("const real_t r0 = keep(std::modf(a, &integral));")
            self._line("const real_t r1 = keep(integral);")
            return [("r0", False), ("r1", False)]
        if kind is TemplateKind.MANTISSA_EXPONENT:
            self._line("int e;")
            self._line("const real_t r0 = keep(std::frexp(a, &e));")
            self._line("const int r1 = e;")
            return [("r0", False), ("r1", True)]
        if kind is TemplateKind.SINE_COSINE:
            self._line(f"const real_t r0 = keep({_wide('std::sin(static_cast<double>(a))')});")
            self._line(f"const real_t r1 = keep({_wide('std::cos(static_cast<double>(a))')});")
            return [("r0", False), ("r1", False)]
        raise ValueError(f"unknown template kind: {kind}")

    def _emit_print(self, label: str, variable: str, is_integer: bool) -> None:
        if is_integer:
            self._line(f'print_integer("{label}", {variable});')
        else:
            self._line(f'print_value("{label}", {variable});')


def _int_literal(value: int) -> str:
    # -2147483648 не является литералом int в C++
    if value == INT32_MIN:
        return f"({INT32_MIN + 1} - 1)"
    return str(value)


def _widened(names: dict[str, str]) -> dict[str, str]:
    exponent = OPERAND_NAMES[ArgumentRole.INTEGER_EXPONENT]
    return {
        key: name if name == exponent else f"static_cast<double>({name})"
        for key, name in names.items()
    }


def _wide(expression: str) -> str:
    return f"static_cast<real_t>(nearest_eval([&] {{ return {expression}; }}))"
