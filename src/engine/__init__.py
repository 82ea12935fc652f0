"""
Engine — вычисление, отчёт и обработка запросов.
"""

from src.engine.calculator import Calculator, render_report
from src.engine.service import EvaluationResponse, RequestStatus, handle_request

__all__ = [
    "Calculator",
    "render_report",
    "handle_request",
    "EvaluationResponse",
    "RequestStatus",
]
