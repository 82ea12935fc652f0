"""
Contract Validation Module

Валидация JSON контрактов на границе floatlab.
"""

from .validators import (
    ContractValidator,
    EvaluationRequestValidator,
    SchemaLoader,
    ValidationError,
    validate_evaluation_request,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "EvaluationRequestValidator",
    "ValidationError",
    # Functions
    "validate_evaluation_request",
]
