from __future__ import annotations

import json
from enum import Enum

import httpx


class ErrorCode(str, Enum):
    """
    Назначение:
        Единая таксономия кодов ошибок для Result.
    """

    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_JSON = "INVALID_JSON"
    SERIALIZATION_ERROR = "SERIALIZATION_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    PROBLEM_DETAILS = "PROBLEM_DETAILS"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    CANCELLED = "CANCELLED"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"

    @classmethod
    def from_status(cls, status_code: int | None) -> "ErrorCode":
        """
        Назначение:
            Подбор общего кода по HTTP-статусу неуспешного ответа.
        """
        if status_code == 401:
            return cls.UNAUTHORIZED
        if status_code == 403:
            return cls.FORBIDDEN
        if status_code == 404:
            return cls.NOT_FOUND
        if status_code == 409:
            return cls.CONFLICT
        return cls.HTTP_ERROR

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorCode":
        """
        Назначение:
            Подбор кода для исключения, пойманного на границе пайплайна.
        Порядок важен: TimeoutException является подклассом TransportError,
        JSONDecodeError является подклассом ValueError.
        """
        if isinstance(exc, httpx.TimeoutException):
            return cls.TIMEOUT
        if isinstance(exc, httpx.TransportError):
            return cls.NETWORK_ERROR
        if isinstance(exc, json.JSONDecodeError):
            return cls.INVALID_JSON
        if isinstance(exc, (TypeError, ValueError)):
            return cls.SERIALIZATION_ERROR
        return cls.UNEXPECTED_ERROR
