from __future__ import annotations

import functools
import locale
from typing import Iterable, Mapping

import httpx

ACCEPT_LANGUAGE = "Accept-Language"


def currentLanguageTag(fallback: str = "en-US") -> str:
    """
    Назначение:
        Возвращает языковой тег текущей локали процесса для Accept-Language.

    Выходные данные:
        str
            'en_US' -> 'en-US'; для C/POSIX/неопределённой локали - fallback.
    """
    try:
        name, _encoding = locale.getlocale()
    except ValueError:
        name = None
    if not name or name.upper() in ("C", "POSIX"):
        return fallback
    return name.replace("_", "-")


@functools.lru_cache(maxsize=1)
def libraryDefaultHeaders() -> httpx.Headers:
    """
    Назначение:
        Заголовки, которые httpx.Client ставит сам (Accept, Accept-Encoding,
        Connection, User-Agent), в их исходных значениях.
    """
    with httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(204)), trust_env=False) as pristine:
        return httpx.Headers(pristine.headers)


def replaceableHeaderNames(clientHeaders: httpx.Headers) -> frozenset[str]:
    """
    Назначение:
        Имена заголовков клиента, которые остались библиотечными значениями по умолчанию.
        Заголовки, настроенные пользователем (Client(headers=...), default_headers),
        сюда не попадают.
    """
    defaults = libraryDefaultHeaders()
    return frozenset(
        name.lower()
        for name in defaults.keys()
        if clientHeaders.get(name) == defaults.get(name)
    )


def applyHeaders(
    request: httpx.Request,
    headers: Mapping[str, str] | None,
    acceptLanguage: str | None = None,
    replaceable: Iterable[str] = (),
) -> None:
    """
    Назначение:
        Добавляет заголовки вызывающего кода к исходящему запросу.

    Алгоритм:
        - Копирует headers (словарь вызывающего кода не изменяется).
        - Если Accept-Language не задан, добавляет его из acceptLanguage
          или текущей локали.
        - Заголовок, уже присутствующий в запросе, не перетирается и не дублируется.
          Исключение - имена из replaceable (библиотечные значения httpx):
          их значение заменяется значением вызывающего кода.
    """
    merged: dict[str, str] = dict(headers or {})
    if not any(name.lower() == ACCEPT_LANGUAGE.lower() for name in merged):
        merged[ACCEPT_LANGUAGE] = acceptLanguage or currentLanguageTag()

    replaceableNames = {name.lower() for name in replaceable}
    for name, value in merged.items():
        if name in request.headers and name.lower() not in replaceableNames:
            continue
        request.headers[name] = value
