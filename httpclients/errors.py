from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class AppError(Exception):
    """
    Унифицированная ошибка библиотеки.
    """

    category: str
    code: str
    message: str
    retryable: bool = False
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "code": self.code,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details or {},
        }


class ConfigError(AppError):
    def __init__(self, message: str, details: Dict[str, Any] | None = None):
        """
        Назначение:
            Ошибка загрузки настроек (неверное значение env/config, отсутствующий файл).
        """
        super().__init__(
            category="config",
            code="CONFIG_ERROR",
            message=message,
            retryable=False,
            details=details or {},
        )


class OperationCancelledError(AppError):
    def __init__(self, message: str = "The operation was cancelled."):
        """
        Назначение:
            Сигнал кооперативной отмены запроса (см. CancellationToken).
        Контракт:
            - retryable всегда False.
        """
        super().__init__(
            category="http",
            code="CANCELLED",
            message=message,
            retryable=False,
        )


__all__ = ["AppError", "ConfigError", "OperationCancelledError"]
