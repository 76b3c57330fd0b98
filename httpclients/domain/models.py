from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, TypeVar


class ApiRequest:
    """
    Маркер: тип, который можно отправить как JSON-тело запроса.
    Используется только как граница TypeVar, во время выполнения не проверяется.
    """


class ApiResponse:
    """
    Маркер: тип, в который десериализуется тело успешного ответа.
    """


TRequest = TypeVar("TRequest", bound=ApiRequest)
TResponse = TypeVar("TResponse", bound=ApiResponse)


@dataclass
class UploadRequest(ApiRequest):
    """
    Назначение/ответственность:
        Описывает файл для отправки как multipart/form-data.
    Инварианты/гарантии:
        - key обязателен: это имя поля формы.
        - file_stream читается один раз и закрывается пайплайном после отправки.
        - file_stream=None всё равно даёт пустое поле key в форме.
    """

    key: str
    file_name: str | None = None
    content_type: str | None = None
    file_stream: BinaryIO | None = None


@dataclass
class DownloadResponse(ApiResponse):
    """
    Назначение/ответственность:
        Полученный файл: метаданные из заголовков ответа и поток тела.
    Инварианты/гарантии:
        - file_stream открыт на момент возврата; владелец - вызывающий код.
    """

    file_name: str | None
    content_type: str | None
    size_in_bytes: int | None
    file_stream: BinaryIO

    def save(self, path: str | Path) -> int:
        """
        Копирует поток в файл, закрывает поток и возвращает число записанных байт.
        """
        target = Path(path)
        try:
            with target.open("wb") as f:
                shutil.copyfileobj(self.file_stream, f)
                written = f.tell()
        finally:
            self.file_stream.close()
        return written


__all__ = [
    "ApiRequest",
    "ApiResponse",
    "DownloadResponse",
    "TRequest",
    "TResponse",
    "UploadRequest",
]
