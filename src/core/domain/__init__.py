"""
Domain models and value objects.

Contains the floating-point value model: Precision, NumericValue,
EvaluationContext and labelled multi-result tuples.
"""

from src.core.domain.context import EngineSettings, EvaluationContext, RoundingMode
from src.core.domain.precision import (
    BINARY32_FORMAT,
    BINARY64_FORMAT,
    FloatFormat,
    Precision,
)
from src.core.domain.results import FractionSplit, MantissaExponent, SineCosine
from src.core.domain.values import FloatLabError, NumericValue, PrecisionMismatch

__all__ = [
    # Precision
    "Precision",
    "FloatFormat",
    "BINARY32_FORMAT",
    "BINARY64_FORMAT",
    # Values
    "NumericValue",
    "FloatLabError",
    "PrecisionMismatch",
    # Context
    "RoundingMode",
    "EvaluationContext",
    "EngineSettings",
    # Multi-result tuples
    "FractionSplit",
    "MantissaExponent",
    "SineCosine",
]
