from __future__ import annotations

import logging
import time
from typing import Any, Mapping

import httpx

from httpclients.common.cancellation import CancellationToken
from httpclients.common.json_codec import deserialize
from httpclients.common.sanitize import maskHeaders, truncateText
from httpclients.domain.error_codes import ErrorCode
from httpclients.domain.models import DownloadResponse, TRequest, TResponse, UploadRequest
from httpclients.domain.result import PROBLEM_JSON_CONTENT_TYPE, ProblemDetails, Result
from httpclients.errors import OperationCancelledError
from httpclients.infra.http.content import (
    buildDownloadResponse,
    buildJsonContent,
    buildMultipartFiles,
    mediaType,
)
from httpclients.infra.http.headers import applyHeaders, replaceableHeaderNames
from httpclients.loggingSetup import logEvent

COMPONENT = "http"


class BaseRestClient:
    """
    Назначение/ответственность:
        Типизированные REST-методы (GET/POST/PUT/PATCH/DELETE, upload, download)
        поверх внешнего httpx.Client. Сериализует тело в JSON, отправляет запрос
        и превращает любой исход в Result.
    Инварианты/гарантии:
        - Методы не бросают исключений: ошибки транспорта/сериализации дают
          Result со status_code=500 и текстом исключения в detail.
        - Отмена через CancellationToken даёт отдельный исход (cancelled=True, 499).
        - Переданный httpx.Client не закрывается и не перенастраивается.
    Взаимодействия:
        Подклассы объявляют прикладные методы поверх get/post/... .
    """

    def __init__(
        self,
        client: httpx.Client,
        logger: logging.Logger | None = None,
        runId: str | None = None,
        acceptLanguage: str | None = None,
    ):
        self.client = client
        self.logger = logger or logging.getLogger("httpclients.http")
        self.runId = runId or "-"
        self.acceptLanguage = acceptLanguage

    def get(
        self,
        url: str,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]:
        return self._send("GET", url, responseType=responseType, headers=headers, cancellation=cancellation)

    def delete(
        self,
        url: str,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]:
        return self._send("DELETE", url, responseType=responseType, headers=headers, cancellation=cancellation)

    def post(
        self,
        url: str,
        body: TRequest | None,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]:
        return self._send("POST", url, body=body, responseType=responseType, headers=headers, cancellation=cancellation)

    def put(
        self,
        url: str,
        body: TRequest | None,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]:
        return self._send("PUT", url, body=body, responseType=responseType, headers=headers, cancellation=cancellation)

    def patch(
        self,
        url: str,
        body: TRequest | None,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]:
        return self._send("PATCH", url, body=body, responseType=responseType, headers=headers, cancellation=cancellation)

    def upload(
        self,
        url: str,
        request: UploadRequest,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]:
        """
        Отправляет файл как multipart/form-data (всегда POST).
        Поток request.file_stream закрывается после отправки.
        """
        if request is None:
            raise ValueError("request must not be None")
        return self._send(
            "POST",
            url,
            upload=request,
            responseType=responseType,
            headers=headers,
            cancellation=cancellation,
        )

    def download(
        self,
        url: str,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[DownloadResponse]:
        """
        GET с потоковым телом. Поток в DownloadResponse закрывает вызывающий код.
        """
        return self._send("GET", url, responseType=DownloadResponse, headers=headers, cancellation=cancellation)

    def _send(
        self,
        method: str,
        url: str,
        *,
        body: TRequest | None = None,
        upload: UploadRequest | None = None,
        responseType: type[TResponse] | None = None,
        headers: Mapping[str, str] | None = None,
        cancellation: CancellationToken | None = None,
    ) -> Result[TResponse]:
        """
        Контракт (вход/выход):
            Вход: метод, URL, JSON-тело или UploadRequest, целевой тип ответа.
            Выход: Result, никогда не исключение.
        Алгоритм:
            - Тело: JSON (camelCase) или multipart; None - без тела.
            - Заголовки: Accept-Language + заголовки вызывающего кода,
              без перезаписи уже присутствующих.
            - Отправка с stream=True: заголовки доступны до чтения тела.
            - 2xx: 204 -> пустой успех; DownloadResponse -> поток без JSON;
              иначе JSON -> responseType (None -> пустой успех).
            - Не 2xx: problem+json -> ProblemDetails; иначе сырой текст тела.
            - Любое исключение -> 500 с текстом исключения.
        """
        start = time.perf_counter()
        response: httpx.Response | None = None
        keepOpen = False
        try:
            if cancellation is not None:
                cancellation.raise_if_cancelled()

            if upload is not None:
                request = self.client.build_request(method, url, files=buildMultipartFiles(upload))
            else:
                content, contentHeaders = buildJsonContent(body)
                request = self.client.build_request(method, url, content=content, headers=contentHeaders or None)
            applyHeaders(request, headers, self.acceptLanguage, replaceableHeaderNames(self.client.headers))

            logEvent(
                self.logger,
                logging.DEBUG,
                self.runId,
                COMPONENT,
                f"request method={method} url={request.url} headers={maskHeaders(request.headers)}",
            )

            response = self.client.send(request, stream=True)

            if cancellation is not None:
                cancellation.raise_if_cancelled()

            result = self._readResult(response, responseType)
            self._logOutcome(method, url, result, start)
            keepOpen = isinstance(result.value, DownloadResponse)
            return result
        except OperationCancelledError as exc:
            logEvent(self.logger, logging.WARNING, self.runId, COMPONENT, f"{method} {url} cancelled")
            return Result.cancelled_result(exc.message)
        except Exception as exc:
            logEvent(
                self.logger,
                logging.ERROR,
                self.runId,
                COMPONENT,
                f"{method} {url} failed: {type(exc).__name__}: {exc}",
            )
            return Result.internal_error(str(exc), ErrorCode.from_exception(exc))
        finally:
            if upload is not None and upload.file_stream is not None:
                upload.file_stream.close()
            if response is not None and not keepOpen:
                response.close()

    def _readResult(self, response: httpx.Response, responseType: type[TResponse] | None) -> Result[TResponse]:
        status = response.status_code

        if response.is_success:
            if status == 204:
                return Result.empty(status)

            if responseType is DownloadResponse:
                return Result.success(buildDownloadResponse(response), status)

            response.read()
            data = deserialize(response.content, responseType)
            if data is None:
                return Result.empty(status)
            return Result.success(data, status)

        response.read()
        if mediaType(response.headers) == PROBLEM_JSON_CONTENT_TYPE:
            try:
                payload = deserialize(response.content)
            except ValueError:
                payload = None
            if isinstance(payload, dict):
                return Result.from_problem(status, ProblemDetails.from_dict(payload))

        return Result.failure(status, response.text)

    def _logOutcome(self, method: str, url: str, result: Result[Any], start: float) -> None:
        duration_ms = int((time.perf_counter() - start) * 1000)
        if result.ok:
            logEvent(
                self.logger,
                logging.DEBUG,
                self.runId,
                COMPONENT,
                f"{method} {url} status={result.status_code} duration_ms={duration_ms}",
            )
            return
        logEvent(
            self.logger,
            logging.WARNING,
            self.runId,
            COMPONENT,
            f"{method} {url} status={result.status_code} code={result.error_code.value if result.error_code else None} "
            f"duration_ms={duration_ms} detail={truncateText(result.detail, 200)}",
        )


__all__ = ["BaseRestClient"]
