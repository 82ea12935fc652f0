"""
Request service — граница с внешними клиентами

handle_request() принимает JSON-совместимый dict, проверяет его по контракту
evaluation_request.json, разбирает входы (ValueParser), вычисляет функцию или
генерирует C++ программу и возвращает JSON-совместимый ответ.

Ошибки не выбрасываются наружу: нарушения контракта, ошибки области
определения и неизвестные функции отражаются в поле status.
"""

import logging
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field

from src.catalog import ArgumentRole, UnsupportedOperation
from src.core.codec.parser import parse_exponent, parse_value
from src.core.contracts import ValidationError, validate_evaluation_request
from src.core.domain.context import EvaluationContext, RoundingMode
from src.core.domain.precision import Precision
from src.core.math.domain import DomainError
from src.engine.calculator import Calculator

logger = logging.getLogger(__name__)


# Поле inputs для каждой роли
INPUT_FIELDS: Dict[ArgumentRole, str] = {
    ArgumentRole.FIRST_OPERAND: "first",
    ArgumentRole.SECOND_OPERAND: "second",
    ArgumentRole.THIRD_OPERAND: "third",
    ArgumentRole.INTEGER_EXPONENT: "exponent",
}


class RequestStatus(str, Enum):
    """Статус обработки запроса"""

    OK = "ok"
    INVALID_REQUEST = "invalid_request"
    DOMAIN_ERROR = "domain_error"
    UNSUPPORTED = "unsupported"


class EvaluationResponse(BaseModel):
    """
    Immutable ответ на запрос.

    Attributes:
        status: Статус обработки
        function: Идентификатор функции из запроса
        precision: Точность вычисления
        rounding_mode: Направление округления
        lines: Строки отчёта (action = evaluate)
        source: Текст программы C++ (action = generate)
        error: Описание ошибки
    """

    status: RequestStatus = Field(..., description="Статус обработки")
    function: str | None = Field(None, description="Идентификатор функции")
    precision: Precision | None = Field(None, description="Точность")
    rounding_mode: RoundingMode | None = Field(None, description="Направление округления")
    lines: tuple[str, ...] | None = Field(None, description="Строки отчёта")
    source: str | None = Field(None, description="Программа C++")
    error: str | None = Field(None, description="Описание ошибки")

    model_config = {"frozen": True}

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def handle_request(
    payload: Dict[str, Any], calculator: Calculator | None = None
) -> Dict[str, Any]:
    """
    Обработка одного запроса.

    Args:
        payload: Запрос {action, function, inputs, precision, rounding_mode}
        calculator: Calculator (по умолчанию новый с каталогом по умолчанию)

    Returns:
        Ответ {status, function, precision, rounding_mode, lines | source | error}

    Examples:
        >>> response = handle_request({
        ...     "action": "evaluate",
        ...     "function": "add",
        ...     "inputs": {"first": "1.25", "second": "2.5"},
        ...     "precision": "binary32",
        ...     "rounding_mode": "RN",
        ... })
        >>> response["status"], response["lines"][-1]
        ('ok', 'y = 3.75 | 3.750000000000000e+00 | 0x40700000')
    """
    try:
        validate_evaluation_request(payload)
    except ValidationError as e:
        logger.warning("invalid request: %s", e.message)
        function = payload.get("function") if isinstance(payload, dict) else None
        return EvaluationResponse(
            status=RequestStatus.INVALID_REQUEST,
            function=function if isinstance(function, str) else None,
            error=e.message,
        ).to_dict()

    calculator = calculator if calculator is not None else Calculator()
    identifier = payload["function"]
    ctx = EvaluationContext(
        precision=payload["precision"], rounding_mode=payload["rounding_mode"]
    )
    echo = {
        "function": identifier,
        "precision": ctx.precision,
        "rounding_mode": ctx.rounding_mode,
    }

    try:
        descriptor = calculator.catalog.entry(identifier).descriptor
        inputs = payload["inputs"]
        operands = [
            _parse_operand(role, inputs.get(INPUT_FIELDS[role]), ctx.precision)
            for role in descriptor.roles
        ]
        if payload["action"] == "generate":
            generated = calculator.generate(identifier, operands, ctx)
            response = EvaluationResponse(status=RequestStatus.OK, source=generated.text, **echo)
        else:
            lines = calculator.report(identifier, operands, ctx)
            response = EvaluationResponse(status=RequestStatus.OK, lines=tuple(lines), **echo)
    except UnsupportedOperation as e:
        response = EvaluationResponse(status=RequestStatus.UNSUPPORTED, error=str(e), **echo)
    except DomainError as e:
        logger.info("domain error: %s", e)
        response = EvaluationResponse(status=RequestStatus.DOMAIN_ERROR, error=str(e), **echo)

    logger.debug("request %s %s -> %s", payload["action"], identifier, response.status.value)
    return response.to_dict()


def _parse_operand(role: ArgumentRole, text: Any, precision: Precision):
    if role is ArgumentRole.INTEGER_EXPONENT:
        return parse_exponent(text)
    return parse_value(text, precision)
