"""
Source templates — C++ выражения функций каталога

Шаблон записывается один раз относительно типа real_t и не переписывается
при смене точности. Плейсхолдеры {a}, {b}, {c} обозначают операнды,
{n} — целую экспоненту.

Виды шаблонов:
- DIRECT: выражение в real_t, вычисляется под директивой округления
  (корректно округлённые операции и утилиты);
- WIDE: выражение в double, вычисляется под round-to-nearest и сужается
  к real_t под директивой (одно финальное округление);
- INTEGER: выражение с целым результатом;
- FRACTION_SPLIT / MANTISSA_EXPONENT / SINE_COSINE: отдельные шаблоны
  программы для функций с несколькими результатами.
"""

from dataclasses import dataclass
from enum import Enum


class TemplateKind(str, Enum):
    """Способ вычисления в сгенерированной программе"""

    DIRECT = "direct"
    WIDE = "wide"
    INTEGER = "integer"
    FRACTION_SPLIT = "fraction_split"
    MANTISSA_EXPONENT = "mantissa_exponent"
    SINE_COSINE = "sine_cosine"


@dataclass(frozen=True)
class SourceTemplate:
    """
    Шаблон C++ для функции каталога.

    Attributes:
        kind: Способ вычисления
        expression: Выражение с плейсхолдерами (пусто для отдельных шаблонов)
        helpers: Имена вспомогательных функций, на которые ссылается выражение
    """

    kind: TemplateKind
    expression: str = ""
    helpers: tuple[str, ...] = ()

    def render(self, operand_names: dict[str, str]) -> str:
        """Подстановка имён операндов в выражение."""
        return self.expression.format(**operand_names)


def direct(expression: str, *helpers: str) -> SourceTemplate:
    return SourceTemplate(TemplateKind.DIRECT, expression, helpers)


def wide(expression: str, *helpers: str) -> SourceTemplate:
    return SourceTemplate(TemplateKind.WIDE, expression, helpers)


def integer(expression: str, *helpers: str) -> SourceTemplate:
    return SourceTemplate(TemplateKind.INTEGER, expression, helpers)


def dedicated(kind: TemplateKind) -> SourceTemplate:
    return SourceTemplate(kind)
