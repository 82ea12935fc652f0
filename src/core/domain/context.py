"""
EvaluationContext — точность и направление округления одной операции

Вместо глобального изменяемого состояния каждая операция получает
неизменяемый EvaluationContext. EngineSettings хранит текущие настройки
процесса («установили один раз — используют многие») под одним lock;
snapshot() фиксирует контекст в начале операции.
"""

import threading
from enum import Enum

from pydantic import BaseModel, Field

from src.core.domain.precision import Precision


# =============================================================================
# ENUMS
# =============================================================================


class RoundingMode(str, Enum):
    """Направление округления IEEE-754"""

    NEAREST_EVEN = "RN"
    TOWARD_ZERO = "RZ"
    TOWARD_POSITIVE = "RU"
    TOWARD_NEGATIVE = "RD"


# =============================================================================
# CONTEXT
# =============================================================================


class EvaluationContext(BaseModel):
    """
    Immutable контекст вычисления.

    Attributes:
        precision: Целевая точность
        rounding_mode: Направление финального округления
    """

    precision: Precision = Field(Precision.BINARY32, description="Целевая точность")
    rounding_mode: RoundingMode = Field(
        RoundingMode.NEAREST_EVEN, description="Направление округления"
    )

    model_config = {"frozen": True}


class EngineSettings:
    """
    Потокобезопасный держатель настроек движка.

    Операции не читают настройки напрямую: они получают snapshot() один раз
    при входе, поэтому конкурентная смена режима не влияет на уже начатое
    вычисление.

    Example:
        >>> settings = EngineSettings()
        >>> settings.set_rounding_mode(RoundingMode.TOWARD_ZERO)
        >>> settings.snapshot().rounding_mode
        <RoundingMode.TOWARD_ZERO: 'RZ'>
    """

    def __init__(
        self,
        precision: Precision = Precision.BINARY32,
        rounding_mode: RoundingMode = RoundingMode.NEAREST_EVEN,
    ):
        self._lock = threading.Lock()
        self._precision = Precision(precision)
        self._rounding_mode = RoundingMode(rounding_mode)

    def set_precision(self, precision: Precision) -> None:
        precision = Precision(precision)
        with self._lock:
            self._precision = precision

    def set_rounding_mode(self, rounding_mode: RoundingMode) -> None:
        rounding_mode = RoundingMode(rounding_mode)
        with self._lock:
            self._rounding_mode = rounding_mode

    def snapshot(self) -> EvaluationContext:
        with self._lock:
            return EvaluationContext(
                precision=self._precision, rounding_mode=self._rounding_mode
            )
