"""
OperationCatalog — реестр функций

Реестр связывает идентификатор функции с описанием (FunctionDescriptor),
evaluator-ом и шаблоном C++. Реестр только пополняется: повторная
регистрация идентификатора — ошибка.

evaluate() выполняет проверку области определения до вычисления и
передаёт операнды evaluator-у вместе с контекстом.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence

from src.catalog.descriptors import ArgumentRole, FunctionDescriptor
from src.catalog.templates import SourceTemplate
from src.core.domain.context import EvaluationContext
from src.core.domain.values import FloatLabError, NumericValue
from src.core.math.domain import check_domain

logger = logging.getLogger(__name__)


class UnsupportedOperation(FloatLabError, KeyError):
    """
    Идентификатор функции отсутствует в каталоге.

    Attributes:
        identifier: Запрошенный идентификатор
    """

    def __init__(self, identifier: str):
        super().__init__(identifier)
        self.identifier = identifier

    def __str__(self) -> str:
        return f"unsupported operation: {self.identifier!r}"


@dataclass(frozen=True)
class CatalogEntry:
    """
    Запись каталога.

    Attributes:
        descriptor: Описание функции
        evaluator: Вычисление in-process: evaluator(*operands, ctx=ctx)
        template: Шаблон C++ для генератора
    """

    descriptor: FunctionDescriptor
    evaluator: Callable[..., object]
    template: SourceTemplate

    @property
    def identifier(self) -> str:
        return self.descriptor.identifier


class OperationCatalog:
    """
    Реестр функций с поиском по идентификатору.

    Example:
        >>> from src.catalog.builtin import build_default_catalog
        >>> catalog = build_default_catalog()
        >>> catalog.lookup("add").roles
        (<ArgumentRole.FIRST_OPERAND: 'a'>, <ArgumentRole.SECOND_OPERAND: 'b'>)
        >>> catalog.lookup("nope") is None
        True
    """

    def __init__(self):
        self._entries: dict[str, CatalogEntry] = {}

    def register(
        self,
        descriptor: FunctionDescriptor,
        evaluator: Callable[..., object],
        template: SourceTemplate,
    ) -> CatalogEntry:
        """
        Регистрация функции.

        Raises:
            ValueError: Если идентификатор уже зарегистрирован
        """
        if descriptor.identifier in self._entries:
            raise ValueError(f"operation {descriptor.identifier!r} is already registered")
        entry = CatalogEntry(descriptor=descriptor, evaluator=evaluator, template=template)
        self._entries[descriptor.identifier] = entry
        return entry

    def lookup(self, identifier: str) -> FunctionDescriptor | None:
        entry = self._entries.get(identifier)
        return entry.descriptor if entry is not None else None

    def entry(self, identifier: str) -> CatalogEntry:
        """
        Запись каталога по идентификатору.

        Raises:
            UnsupportedOperation: Если идентификатор неизвестен
        """
        try:
            return self._entries[identifier]
        except KeyError:
            logger.warning("unsupported operation requested: %r", identifier)
            raise UnsupportedOperation(identifier) from None

    def evaluate(
        self,
        identifier: str,
        operands: Sequence[NumericValue | int],
        ctx: EvaluationContext,
    ) -> object:
        """
        Вычисление функции in-process.

        Args:
            identifier: Идентификатор функции
            operands: Операнды в порядке ролей (NumericValue, int для экспоненты)
            ctx: Контекст вычисления

        Returns:
            NumericValue, int или именованный кортеж (в зависимости от result_kind)

        Raises:
            UnsupportedOperation: Неизвестный идентификатор
            DomainError: Операнды вне области определения
            PrecisionMismatch: Точность операнда отличается от контекста
            ValueError: Неверное число или тип операндов
        """
        entry = self.entry(identifier)
        operands = tuple(operands)
        _check_operands(entry.descriptor, operands, ctx)
        check_domain(identifier, operands)
        return entry.evaluator(*operands, ctx=ctx)

    def identifiers(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


def _check_operands(
    descriptor: FunctionDescriptor, operands: tuple, ctx: EvaluationContext
) -> None:
    if len(operands) != descriptor.arity:
        raise ValueError(
            f"{descriptor.identifier} expects {descriptor.arity} operands, got {len(operands)}"
        )
    for role, operand in zip(descriptor.roles, operands):
        if role is ArgumentRole.INTEGER_EXPONENT:
            if isinstance(operand, bool) or not isinstance(operand, int):
                raise ValueError(f"{descriptor.identifier}: exponent must be int")
        elif not isinstance(operand, NumericValue):
            raise ValueError(f"{descriptor.identifier}: operand {role.value} must be NumericValue")
        else:
            operand.require_precision(ctx.precision)
