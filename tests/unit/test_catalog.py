"""
Тесты для OperationCatalog

Проверяет:
1. Полноту встроенного набора функций
2. Поиск, UnsupportedOperation и запрет повторной регистрации
3. Проверку области определения до вычисления
4. Проверку числа, типа и точности операндов
5. Типы результатов функций с несколькими выходами
6. Вычислимость каждой встроенной функции
"""

import math

import pytest
from pydantic import ValidationError

from src.catalog import (
    DEFAULT_CATALOG,
    ArgumentRole,
    FunctionDescriptor,
    OperationCatalog,
    ResultKind,
    TemplateKind,
    UnsupportedOperation,
    build_default_catalog,
)
from src.catalog import templates as tpl
from src.core.codec.bits import from_bits, from_float
from src.core.domain import (
    EvaluationContext,
    FractionSplit,
    MantissaExponent,
    NumericValue,
    Precision,
    PrecisionMismatch,
    SineCosine,
)
from src.core.math import DomainError

B32 = Precision.BINARY32
B64 = Precision.BINARY64

EXPECTED_IDENTIFIERS = {
    # Basic
    "add", "sub", "mul", "div", "fma", "sqrt", "rsqrt", "ldexp", "pow", "fmod",
    # Exponential / logarithm
    "exp", "exp2", "exp10", "expm1", "log", "log2", "log10", "log1p",
    # Trigonometric / hyperbolic
    "sin", "cos", "tan", "sinpi", "cospi", "sec", "csc", "cot",
    "asin", "acos", "atan", "atan2", "sinh", "cosh", "tanh",
    "asinh", "acosh", "atanh", "sincos",
    # Special
    "lgamma", "tgamma", "erf", "erfc", "erfcx", "erfcinv", "normcdfinv",
    "j0", "j1", "y0", "y1", "i0", "i1",
    # Utilities
    "abs", "copysign", "fdim", "fmax", "fmin", "hypot", "trunc", "floor", "ceil",
    "round", "rint", "modf", "frexp", "ilogb", "logb", "scalbn", "scalbln",
    "nextafter", "isnan", "isinf", "isfinite", "signbit",
}


def v32(x: float) -> NumericValue:
    return from_float(x, B32)


@pytest.fixture
def ctx() -> EvaluationContext:
    return EvaluationContext(precision=B32, rounding_mode="RN")


# =============================================================================
# REGISTRY
# =============================================================================


class TestRegistry:
    """Тесты реестра"""

    def test_builtin_set_complete(self) -> None:
        assert set(DEFAULT_CATALOG.identifiers()) == EXPECTED_IDENTIFIERS
        assert len(DEFAULT_CATALOG) == 72

    def test_lookup(self) -> None:
        descriptor = DEFAULT_CATALOG.lookup("fma")
        assert descriptor.arity == 3
        assert descriptor.display_name == "fma(a, b, c)"
        assert DEFAULT_CATALOG.lookup("unknown") is None

    def test_exponent_role(self) -> None:
        descriptor = DEFAULT_CATALOG.lookup("ldexp")
        assert descriptor.roles == (ArgumentRole.FIRST_OPERAND, ArgumentRole.INTEGER_EXPONENT)
        assert descriptor.takes_exponent
        assert descriptor.display_name == "ldexp(a, exp)"

    def test_unknown_entry_raises(self) -> None:
        with pytest.raises(UnsupportedOperation) as exc_info:
            DEFAULT_CATALOG.entry("gamma")
        assert exc_info.value.identifier == "gamma"
        assert "gamma" in str(exc_info.value)

    def test_unsupported_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            DEFAULT_CATALOG.evaluate("nope", [], EvaluationContext())

    def test_duplicate_registration_rejected(self) -> None:
        catalog = build_default_catalog()
        descriptor = catalog.lookup("add")
        with pytest.raises(ValueError, match="already registered"):
            catalog.register(descriptor, lambda *a, ctx: a[0], tpl.direct("{a}"))

    def test_catalogs_are_independent(self) -> None:
        catalog = OperationCatalog()
        assert len(catalog) == 0
        assert "add" not in catalog
        assert "add" in DEFAULT_CATALOG

    def test_custom_registration(self, ctx: EvaluationContext) -> None:
        catalog = OperationCatalog()
        descriptor = FunctionDescriptor(
            identifier="twice",
            display_name="twice(a)",
            roles=(ArgumentRole.FIRST_OPERAND,),
        )
        catalog.register(descriptor, lambda a, ctx: from_float(2 * a.value, ctx.precision), tpl.direct("2 * {a}"))
        assert catalog.evaluate("twice", [v32(1.5)], ctx).value == 3.0


# =============================================================================
# DOMAIN AND OPERAND CHECKS
# =============================================================================


class TestDomainChecks:
    """Тесты проверки области определения"""

    @pytest.mark.parametrize(
        "identifier, operands",
        [
            ("sqrt", [-1.0]),
            ("rsqrt", [-0.5]),
            ("log", [0.0]),
            ("log2", [-2.0]),
            ("log10", [-0.0]),
            ("fmod", [1.0, 0.0]),
        ],
    )
    def test_domain_error(self, identifier: str, operands: list, ctx: EvaluationContext) -> None:
        with pytest.raises(DomainError) as exc_info:
            DEFAULT_CATALOG.evaluate(identifier, [v32(x) for x in operands], ctx)
        assert exc_info.value.identifier == identifier

    def test_division_by_zero_is_not_domain_error(self, ctx: EvaluationContext) -> None:
        result = DEFAULT_CATALOG.evaluate("div", [v32(1.0), v32(0.0)], ctx)
        assert result.bits == 0x7F800000

    def test_non_finite_operands_pass_through(self, ctx: EvaluationContext) -> None:
        """NaN и -inf не проверяются и распространяются по IEEE"""
        assert DEFAULT_CATALOG.evaluate("log", [v32(math.nan)], ctx).is_nan
        assert DEFAULT_CATALOG.evaluate("sqrt", [v32(-math.inf)], ctx).is_nan

    def test_negative_zero_sqrt_allowed(self, ctx: EvaluationContext) -> None:
        assert DEFAULT_CATALOG.evaluate("sqrt", [v32(-0.0)], ctx).bits == 0x80000000


class TestOperandChecks:
    """Тесты числа, типа и точности операндов"""

    def test_wrong_arity(self, ctx: EvaluationContext) -> None:
        with pytest.raises(ValueError, match="expects 2 operands"):
            DEFAULT_CATALOG.evaluate("add", [v32(1.0)], ctx)

    def test_exponent_must_be_int(self, ctx: EvaluationContext) -> None:
        with pytest.raises(ValueError, match="exponent must be int"):
            DEFAULT_CATALOG.evaluate("ldexp", [v32(1.0), 2.0], ctx)
        with pytest.raises(ValueError, match="exponent must be int"):
            DEFAULT_CATALOG.evaluate("ldexp", [v32(1.0), True], ctx)

    def test_value_operand_must_be_numeric_value(self, ctx: EvaluationContext) -> None:
        with pytest.raises(ValueError, match="must be NumericValue"):
            DEFAULT_CATALOG.evaluate("sin", [0.5], ctx)

    def test_precision_mismatch(self, ctx: EvaluationContext) -> None:
        with pytest.raises(PrecisionMismatch):
            DEFAULT_CATALOG.evaluate("add", [v32(1.0), from_float(1.0, B64)], ctx)


# =============================================================================
# RESULTS
# =============================================================================


class TestResults:
    """Тесты типов результатов"""

    def test_single(self, ctx: EvaluationContext) -> None:
        result = DEFAULT_CATALOG.evaluate("exp", [v32(0.0)], ctx)
        assert isinstance(result, NumericValue)
        assert result.value == 1.0

    def test_integer(self, ctx: EvaluationContext) -> None:
        assert DEFAULT_CATALOG.evaluate("ilogb", [from_bits(0x1, B32)], ctx) == -149
        assert DEFAULT_CATALOG.evaluate("signbit", [v32(-0.0)], ctx) == 1

    def test_fraction_split(self, ctx: EvaluationContext) -> None:
        result = DEFAULT_CATALOG.evaluate("modf", [v32(3.25)], ctx)
        assert isinstance(result, FractionSplit)
        assert (result.fraction.value, result.integer_part.value) == (0.25, 3.0)

    def test_mantissa_exponent(self, ctx: EvaluationContext) -> None:
        result = DEFAULT_CATALOG.evaluate("frexp", [v32(8.0)], ctx)
        assert isinstance(result, MantissaExponent)
        assert (result.mantissa.value, result.exponent) == (0.5, 4)

    def test_sine_cosine(self, ctx: EvaluationContext) -> None:
        result = DEFAULT_CATALOG.evaluate("sincos", [v32(0.0)], ctx)
        assert isinstance(result, SineCosine)
        assert (result.sine.value, result.cosine.value) == (0.0, 1.0)

    def test_wide_result_rounded_once(self) -> None:
        """exp(1) в binary32: RD и RU — соседние значения"""
        down = DEFAULT_CATALOG.evaluate("exp", [v32(1.0)], EvaluationContext(rounding_mode="RD"))
        up = DEFAULT_CATALOG.evaluate("exp", [v32(1.0)], EvaluationContext(rounding_mode="RU"))
        assert up.bits - down.bits == 1
        assert down.value < math.e < up.value

    def test_binary64_context(self) -> None:
        ctx = EvaluationContext(precision=B64)
        result = DEFAULT_CATALOG.evaluate("sin", [from_float(1.0, B64)], ctx)
        assert result.value == math.sin(1.0)
        assert result.precision is B64

    def test_scalbn_matches_ldexp(self, ctx: EvaluationContext) -> None:
        x = v32(0.75)
        assert DEFAULT_CATALOG.evaluate("scalbn", [x, 5], ctx) == DEFAULT_CATALOG.evaluate("ldexp", [x, 5], ctx)


@pytest.mark.parametrize("entry", list(DEFAULT_CATALOG), ids=lambda entry: entry.identifier)
@pytest.mark.parametrize("precision", [B32, B64])
def test_every_operation_evaluates(entry, precision: Precision) -> None:
    """Каждая встроенная функция вычислима на типичных операндах"""
    ctx = EvaluationContext(precision=precision, rounding_mode="RN")
    operands = [
        3 if role is ArgumentRole.INTEGER_EXPONENT else from_float(0.5, precision)
        for role in entry.descriptor.roles
    ]
    result = DEFAULT_CATALOG.evaluate(entry.identifier, operands, ctx)
    kind = entry.descriptor.result_kind
    if kind is ResultKind.INTEGER:
        assert isinstance(result, int)
    elif kind.is_multi_result:
        assert len(result) == len(kind.labels)
    else:
        assert isinstance(result, NumericValue)
        assert result.precision is precision


# =============================================================================
# DESCRIPTORS AND TEMPLATES
# =============================================================================


class TestDescriptor:
    """Тесты валидации FunctionDescriptor"""

    def test_duplicate_roles_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FunctionDescriptor(
                identifier="bad",
                display_name="bad(a, a)",
                roles=(ArgumentRole.FIRST_OPERAND, ArgumentRole.FIRST_OPERAND),
            )

    def test_value_roles_must_be_contiguous(self) -> None:
        with pytest.raises(ValidationError):
            FunctionDescriptor(
                identifier="bad",
                display_name="bad(b)",
                roles=(ArgumentRole.SECOND_OPERAND,),
            )

    def test_frozen(self) -> None:
        descriptor = DEFAULT_CATALOG.lookup("add")
        with pytest.raises(ValidationError):
            descriptor.identifier = "other"

    def test_result_labels(self) -> None:
        assert ResultKind.SINGLE.labels == ("y",)
        assert ResultKind.FRACTION_SPLIT.labels == ("frac", "int")
        assert ResultKind.MANTISSA_EXPONENT.labels == ("mant", "exp")
        assert ResultKind.SINE_COSINE.labels == ("sin", "cos")
        assert not ResultKind.INTEGER.is_multi_result


class TestTemplates:
    """Тесты шаблонов C++"""

    def test_render(self) -> None:
        template = DEFAULT_CATALOG.entry("fma").template
        assert template.kind is TemplateKind.DIRECT
        assert template.render({"a": "x", "b": "y", "c": "z"}) == "std::fma(x, y, z)"

    def test_special_functions_name_helpers(self) -> None:
        template = DEFAULT_CATALOG.entry("erfcinv").template
        assert template.kind is TemplateKind.WIDE
        assert template.helpers == ("erfcinv_newton",)

    def test_multi_result_templates_are_dedicated(self) -> None:
        for identifier, kind in [
            ("modf", TemplateKind.FRACTION_SPLIT),
            ("frexp", TemplateKind.MANTISSA_EXPONENT),
            ("sincos", TemplateKind.SINE_COSINE),
        ]:
            assert DEFAULT_CATALOG.entry(identifier).template.kind is kind
