from __future__ import annotations

from typing import Mapping, Protocol

from httpclients.common.cancellation import CancellationToken
from httpclients.domain.models import DownloadResponse, TRequest, TResponse, UploadRequest
from httpclients.domain.result import Result


class RestClientProtocol(Protocol):
    """
    Назначение/ответственность:
        Порт типизированного REST-клиента.
    Взаимодействия:
        Прикладной код зависит от протокола; BaseRestClient его реализует,
        в тестах подставляются двойники.
    Ограничения:
        Синхронное выполнение, один запрос за вызов. Методы не бросают
        исключений: любой исход возвращается как Result.
    """

    def get(
        self,
        url: str,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]: ...

    def post(
        self,
        url: str,
        body: TRequest | None,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]: ...

    def put(
        self,
        url: str,
        body: TRequest | None,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]: ...

    def patch(
        self,
        url: str,
        body: TRequest | None,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]: ...

    def delete(
        self,
        url: str,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]: ...

    def upload(
        self,
        url: str,
        request: UploadRequest,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]: ...

    def download(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[DownloadResponse]: ...
