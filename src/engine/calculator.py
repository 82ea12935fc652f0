"""
Calculator — вычисление функций каталога и отчёт в текстовом виде

Calculator связывает настройки движка (EngineSettings), каталог и
генератор C++: каждая операция фиксирует EvaluationContext один раз при
входе, вычисляет функцию in-process и при необходимости генерирует
программу для тех же битовых паттернов.

Отчёт (render_report) совпадает построчно с выводом сгенерированной
программы: сначала входы (a, b, c, exp), затем результаты с метками
ResultKind.labels.
"""

import logging
from typing import Sequence

from src.catalog import DEFAULT_CATALOG, FunctionDescriptor, OperationCatalog
from src.codegen.generator import CapturedOperands, CodeGenerator, GeneratedSource
from src.core.codec.display import format_line
from src.core.domain.context import EngineSettings, EvaluationContext
from src.core.domain.values import NumericValue

logger = logging.getLogger(__name__)


def render_report(
    descriptor: FunctionDescriptor,
    operands: Sequence[NumericValue | int],
    result: object,
    echo_inputs: bool = True,
) -> list[str]:
    """
    Текстовый отчёт вычисления.

    Args:
        descriptor: Описание функции
        operands: Операнды в порядке ролей
        result: Результат evaluate (значение, int или именованный кортеж)
        echo_inputs: Выводить ли строки входов

    Returns:
        Строки `name = <decimal> | <scientific> | 0x<hex>` (`name = N` для целых)
    """
    lines: list[str] = []
    if echo_inputs:
        for role, operand in zip(descriptor.roles, operands):
            lines.append(format_line(role.value, operand))
    values = tuple(result) if descriptor.is_multi_result else (result,)
    for label, value in zip(descriptor.result_kind.labels, values):
        lines.append(format_line(label, value))
    return lines


class Calculator:
    """
    Точка входа для вычисления и генерации.

    Example:
        >>> from src.core.codec import parse_value
        >>> calc = Calculator()
        >>> a = parse_value("1.25", "binary32")
        >>> b = parse_value("2.5", "binary32")
        >>> calc.report("add", [a, b])[-1]
        'y = 3.75 | 3.750000000000000e+00 | 0x40700000'
    """

    def __init__(
        self,
        settings: EngineSettings | None = None,
        catalog: OperationCatalog | None = None,
        generator: CodeGenerator | None = None,
    ):
        self.settings = settings if settings is not None else EngineSettings()
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.generator = generator if generator is not None else CodeGenerator(self.catalog)

    def evaluate(
        self,
        identifier: str,
        operands: Sequence[NumericValue | int],
        ctx: EvaluationContext | None = None,
    ) -> object:
        """
        Вычисление функции.

        Args:
            identifier: Идентификатор функции
            operands: Операнды в порядке ролей
            ctx: Контекст; по умолчанию snapshot() текущих настроек

        Raises:
            UnsupportedOperation: Неизвестный идентификатор
            DomainError: Операнды вне области определения
            PrecisionMismatch: Точность операнда отличается от контекста
        """
        ctx = ctx if ctx is not None else self.settings.snapshot()
        result = self.catalog.evaluate(identifier, operands, ctx)
        logger.debug(
            "evaluated %s (%s, %s)", identifier, ctx.precision.value, ctx.rounding_mode.value
        )
        return result

    def report(
        self,
        identifier: str,
        operands: Sequence[NumericValue | int],
        ctx: EvaluationContext | None = None,
    ) -> list[str]:
        ctx = ctx if ctx is not None else self.settings.snapshot()
        result = self.evaluate(identifier, operands, ctx)
        descriptor = self.catalog.entry(identifier).descriptor
        return render_report(
            descriptor, operands, result, echo_inputs=self.generator.config.echo_inputs
        )

    def generate(
        self,
        identifier: str,
        operands: Sequence[NumericValue | int],
        ctx: EvaluationContext | None = None,
    ) -> GeneratedSource:
        """
        Генерация C++ программы для тех же операндов.

        Проверка области определения выполняется так же, как при вычислении:
        программа для недопустимых операндов не генерируется.
        """
        ctx = ctx if ctx is not None else self.settings.snapshot()
        descriptor = self.catalog.entry(identifier).descriptor
        self.evaluate(identifier, operands, ctx)
        captured = CapturedOperands.capture(descriptor, operands)
        return self.generator.generate(identifier, captured, ctx.precision, ctx.rounding_mode)
