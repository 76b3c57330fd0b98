from __future__ import annotations

from typing import Mapping

SENSITIVE_HEADERS: tuple[str, ...] = (
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
)

SENSITIVE_KEYS: tuple[str, ...] = (
    "password",
    "token",
    "access_token",
    "refresh_token",
    "authorization",
    "api_key",
    "secret",
)


def maskSecret(value: str | None) -> str | None:
    """
    Назначение:
        Маскирует секрет для безопасного вывода в stdout/logs.

    Выходные данные:
        str | None
            '***', если значение задано, иначе None.
    """
    if value is None:
        return None
    return "***"


def truncateText(value: str | None, limit: int = 500) -> str | None:
    """
    Назначение:
        Ограничивает длину текста (тела ответов в логах).

    Входные данные:
        value: str | None
        limit: int
            Максимальная длина результата, включая суффикс '...'.
    """
    if value is None:
        return None
    if len(value) <= limit:
        return value
    suffix = "..." if limit > 3 else ""
    head = limit - len(suffix)
    return value[:head] + suffix


def maskHeaders(
    headers: Mapping[str, str] | None,
    sensitive: tuple[str, ...] = SENSITIVE_HEADERS,
) -> dict[str, str]:
    """
    Назначение:
        Возвращает копию заголовков с замаскированными значениями
        Authorization/Cookie/X-Api-Key и т.п. Регистр имён не важен.
    """
    if not headers:
        return {}
    lowered = {name.lower() for name in sensitive}
    masked: dict[str, str] = {}
    for name, value in headers.items():
        masked[name] = "***" if name.lower() in lowered else value
    return masked


def maskSecretsInObject(obj: object, sensitive_keys: tuple[str, ...] = SENSITIVE_KEYS) -> object:
    """
    Назначение:
        Рекурсивно маскирует значения по заданным ключам в структурах dict/list.
    """
    sensitive = {key.lower() for key in sensitive_keys}
    if isinstance(obj, dict):
        masked: dict[str, object] = {}
        for k, v in obj.items():
            if isinstance(k, str) and k.lower() in sensitive:
                masked[k] = maskSecret(str(v) if v is not None else None)
            else:
                masked[k] = maskSecretsInObject(v, sensitive_keys)
        return masked
    if isinstance(obj, list):
        return [maskSecretsInObject(item, sensitive_keys) for item in obj]
    return obj
