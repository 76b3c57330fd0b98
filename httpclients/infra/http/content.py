from __future__ import annotations

import io
from typing import Any, Iterator
from urllib.parse import unquote

import httpx

from httpclients.common.json_codec import JSON_CONTENT_TYPE, serialize
from httpclients.domain.models import DownloadResponse, UploadRequest

JSON_UTF8_CONTENT_TYPE = f"{JSON_CONTENT_TYPE}; charset=utf-8"


def buildJsonContent(body: Any) -> tuple[bytes | None, dict[str, str]]:
    """
    Назначение:
        Готовит JSON-тело запроса.

    Выходные данные:
        (content, headers)
            Для body=None - (None, {}): тело не прикрепляется.
    """
    content = serialize(body)
    if content is None:
        return None, {}
    return content, {"Content-Type": JSON_UTF8_CONTENT_TYPE}


def buildMultipartFiles(upload: UploadRequest) -> dict[str, tuple[str | None, Any, str | None]]:
    """
    Назначение:
        Строит аргумент files для httpx из UploadRequest.

    Контракт:
        - Ровно одна часть с именем upload.key.
        - file_stream=None -> пустая часть без имени файла и типа
          (поле формы сохраняется).
        - Пустой file_name -> часть без filename.
        - content_type применяется, только если задан.
    """
    if upload.file_stream is None:
        return {upload.key: (None, io.BytesIO(b""), None)}
    return {
        upload.key: (
            upload.file_name or None,
            upload.file_stream,
            upload.content_type or None,
        )
    }


def parseContentDisposition(value: str | None) -> str | None:
    """
    Назначение:
        Извлекает имя файла из Content-Disposition.

    Алгоритм:
        - Приоритет у параметра filename (кавычки обрезаются).
        - Иначе используется filename* (RFC 5987: charset''percent-encoded).
    """
    if not value:
        return None
    params: dict[str, str] = {}
    for part in value.split(";")[1:]:
        if "=" not in part:
            continue
        key, raw = part.split("=", 1)
        params[key.strip().lower()] = raw.strip()

    plain = params.get("filename")
    if plain:
        return plain.strip('"')

    extended = params.get("filename*")
    if extended:
        extended = extended.strip('"')
        if "''" in extended:
            charset, encoded = extended.split("''", 1)
            return unquote(encoded, encoding=charset or "utf-8", errors="replace")
        return unquote(extended)
    return None


def mediaType(headers: httpx.Headers) -> str | None:
    """Content-Type без параметров, в нижнем регистре."""
    raw = headers.get("Content-Type")
    if not raw:
        return None
    return raw.split(";", 1)[0].strip().lower() or None


def contentLength(headers: httpx.Headers) -> int | None:
    raw = headers.get("Content-Length")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


class ResponseStream(io.RawIOBase):
    """
    Назначение/ответственность:
        Читаемый поток поверх потокового httpx.Response.
    Инварианты/гарантии:
        - Тело читается лениво, по мере вызова read().
        - close() закрывает и ответ (соединение возвращается в пул).
    """

    def __init__(self, response: httpx.Response):
        super().__init__()
        self._response = response
        self._chunks: Iterator[bytes] = response.iter_bytes()
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()


def buildDownloadResponse(response: httpx.Response) -> DownloadResponse:
    """
    Назначение:
        Собирает DownloadResponse из заголовков и потока тела ответа.
        Ответ не закрывается: поток передаётся вызывающему коду.
    """
    return DownloadResponse(
        file_name=parseContentDisposition(response.headers.get("Content-Disposition")),
        content_type=mediaType(response.headers),
        size_in_bytes=contentLength(response.headers),
        file_stream=ResponseStream(response),
    )
