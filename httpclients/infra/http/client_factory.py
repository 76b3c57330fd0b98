from __future__ import annotations

import httpx

from httpclients.config import Settings


def createHttpClient(settings: Settings, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    """
    Назначение:
        Создаёт httpx.Client из настроек: base_url, таймаут, TLS, заголовки по умолчанию.
    Контракт:
        - tls_skip_verify имеет приоритет над ca_file.
        - transport позволяет подменить сеть (httpx.MockTransport в тестах).
        - Владелец клиента - вызывающий код; BaseRestClient его не закрывает.
    """
    verify: bool | str = True
    if settings.tls_skip_verify:
        verify = False
    elif settings.ca_file:
        verify = settings.ca_file

    kwargs: dict = {
        "timeout": settings.timeout_seconds,
        "verify": verify,
        "headers": dict(settings.default_headers),
        "follow_redirects": True,
        "transport": transport,
    }
    if settings.base_url:
        kwargs["base_url"] = settings.base_url.rstrip("/")
    return httpx.Client(**kwargs)
