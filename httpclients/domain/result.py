from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from httpclients.domain.error_codes import ErrorCode

T = TypeVar("T")

PROBLEM_JSON_CONTENT_TYPE = "application/problem+json"
INTERNAL_SERVER_ERROR = 500
CLIENT_CLOSED_REQUEST = 499

_PROBLEM_KEYS = ("type", "title", "status", "detail", "instance", "errors")


@dataclass
class ProblemDetails:
    """
    Назначение/ответственность:
        Структурированная ошибка API в формате application/problem+json.
    Взаимодействия:
        Заполняет title/detail/errors в Result.from_problem().
    """

    type: str | None = None
    title: str | None = None
    status: int | None = None
    detail: str | None = None
    instance: str | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)
    extensions: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProblemDetails":
        """
        Контракт:
            - Ключи сопоставляются без учёта регистра.
            - errors нормализуется к dict[str, list[str]] (одиночная строка -> список).
            - Остальные ключи попадают в extensions.
        """
        lowered = {str(k).lower(): v for k, v in data.items()}
        status = lowered.get("status")
        errors: dict[str, list[str]] = {}
        raw_errors = lowered.get("errors")
        if isinstance(raw_errors, dict):
            for name, messages in raw_errors.items():
                if isinstance(messages, list):
                    errors[str(name)] = [str(m) for m in messages]
                elif messages is not None:
                    errors[str(name)] = [str(messages)]
        return cls(
            type=lowered.get("type"),
            title=lowered.get("title"),
            status=status if isinstance(status, int) else None,
            detail=lowered.get("detail"),
            instance=lowered.get("instance"),
            errors=errors,
            extensions={k: v for k, v in data.items() if str(k).lower() not in _PROBLEM_KEYS},
        )


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Назначение/ответственность:
        Конверт успеха/неуспеха, который возвращает каждый вызов BaseRestClient.
    Инварианты/гарантии:
        - ok=True только через success()/empty(); value задаётся только в success().
        - Неуспех всегда несёт status_code и error_code.
        - Неизменяем после создания.
    """

    ok: bool
    status_code: int | None = None
    value: T | None = None
    title: str | None = None
    detail: str | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)
    error_code: ErrorCode | None = None
    cancelled: bool = False

    @property
    def has_value(self) -> bool:
        return self.value is not None

    @classmethod
    def success(cls, value: T, status_code: int) -> "Result[T]":
        return cls(ok=True, status_code=status_code, value=value)

    @classmethod
    def empty(cls, status_code: int) -> "Result[T]":
        """Успех без значения: 204 или тело, десериализованное в ничто."""
        return cls(ok=True, status_code=status_code)

    @classmethod
    def failure(
        cls,
        status_code: int,
        detail: str | None,
        error_code: ErrorCode | None = None,
    ) -> "Result[T]":
        return cls(
            ok=False,
            status_code=status_code,
            detail=detail,
            error_code=error_code or ErrorCode.from_status(status_code),
        )

    @classmethod
    def from_problem(cls, status_code: int, problem: ProblemDetails) -> "Result[T]":
        return cls(
            ok=False,
            status_code=status_code,
            title=problem.title,
            detail=problem.detail,
            errors=dict(problem.errors),
            error_code=ErrorCode.PROBLEM_DETAILS,
        )

    @classmethod
    def internal_error(cls, detail: str, error_code: ErrorCode = ErrorCode.UNEXPECTED_ERROR) -> "Result[T]":
        return cls(
            ok=False,
            status_code=INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code=error_code,
        )

    @classmethod
    def cancelled_result(cls, detail: str) -> "Result[T]":
        return cls(
            ok=False,
            status_code=CLIENT_CLOSED_REQUEST,
            detail=detail,
            error_code=ErrorCode.CANCELLED,
            cancelled=True,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "status_code": self.status_code,
            "value": self.value,
            "title": self.title,
            "detail": self.detail,
            "errors": dict(self.errors),
            "error_code": self.error_code.value if self.error_code else None,
            "cancelled": self.cancelled,
        }


__all__ = ["ProblemDetails", "Result", "PROBLEM_JSON_CONTENT_TYPE"]
