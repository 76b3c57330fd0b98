from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Callable, List, Optional

import typer

from httpclients.common.sanitize import maskHeaders, maskSecretsInObject
from httpclients.config import Settings, load_settings
from httpclients.domain.models import DownloadResponse, UploadRequest
from httpclients.domain.ports.http import RestClientProtocol
from httpclients.domain.result import Result
from httpclients.errors import ConfigError
from httpclients.infra.http.client_factory import createHttpClient
from httpclients.infra.http.rest_client import BaseRestClient
from httpclients.loggingSetup import closeLogger, createCommandLogger, logEvent

app = typer.Typer(no_args_is_help=True, add_completion=False)


def parseHeaderOptions(values: List[str] | None) -> dict[str, str]:
    """
    Назначение:
        Разбирает повторяемую опцию --header "Name: value".

    Поведение:
        - Элемент без ':' - ошибка ввода, exit code 2.
    """
    headers: dict[str, str] = {}
    for raw in values or []:
        if ":" not in raw:
            typer.echo(f"ERROR: invalid header (expected 'Name: value'): {raw}", err=True)
            raise typer.Exit(code=2)
        name, value = raw.split(":", 1)
        headers[name.strip()] = value.strip()
    return headers


def readJsonBody(jsonText: str | None, jsonFile: str | None) -> Any:
    """
    Назначение:
        Читает JSON-тело из --json или --json-file (ровно один источник либо ни одного).
    """
    if jsonText is not None and jsonFile is not None:
        typer.echo("ERROR: use either --json or --json-file", err=True)
        raise typer.Exit(code=2)
    if jsonFile is not None:
        p = Path(jsonFile)
        if not p.exists() or not p.is_file():
            typer.echo(f"ERROR: JSON file not found: {jsonFile}", err=True)
            raise typer.Exit(code=2)
        jsonText = p.read_text(encoding="utf-8")
    if jsonText is None:
        return None
    try:
        return json.loads(jsonText)
    except ValueError as exc:
        typer.echo(f"ERROR: invalid JSON body: {exc}", err=True)
        raise typer.Exit(code=2)


def logRunHeader(logger: logging.Logger, runId: str, command: str, settings: Settings, sources: list[str]) -> None:
    """
    Назначение:
        Пишет в лог безопасную сводку параметров запуска (без секретов).
        stdout остаётся за JSON-результатом.
    """
    logEvent(
        logger,
        logging.INFO,
        runId,
        "config",
        f"run_id={runId} command={command} base_url={settings.base_url} "
        f"timeout_seconds={settings.timeout_seconds} tls_skip_verify={settings.tls_skip_verify} "
        f"default_headers={maskHeaders(settings.default_headers)} sources={sources}",
    )


def printResult(result: Result[Any]) -> None:
    payload = result.to_dict()
    payload["value"] = maskSecretsInObject(payload["value"])
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def runWithClient(ctx: typer.Context, commandName: str, runner: Callable[[RestClientProtocol], Result[Any]]) -> None:
    """
    Назначение:
        Унифицированная обвязка выполнения команд:
        - создаёт логгер + файл лога
        - создаёт httpx.Client и BaseRestClient
        - печатает Result как JSON
        - закрывает клиент и логгер в finally

    Поведение:
        - exit code 0 при ok=True, иначе 2.
    """
    runId = ctx.obj["runId"]
    settings: Settings = ctx.obj["settings"]
    sources = ctx.obj["sources"]

    logger, logFilePath = createCommandLogger(
        commandName=commandName,
        logDir=settings.log_dir,
        runId=runId,
        logLevel=settings.log_level,
    )
    httpClient = createHttpClient(settings, transport=ctx.obj.get("transport"))
    exitCode = 2
    try:
        logEvent(logger, logging.INFO, runId, "core", "Command started")
        logRunHeader(logger, runId, commandName, settings, sources)
        client = BaseRestClient(httpClient, logger=logger, runId=runId, acceptLanguage=settings.accept_language)
        result = runner(client)
        printResult(result)
        exitCode = 0 if result.ok else 2
        logEvent(logger, logging.INFO, runId, "core", f"Command finished ok={result.ok} status={result.status_code}")
    finally:
        httpClient.close()
        logEvent(logger, logging.INFO, runId, "core", f"Log written: {logFilePath}")
        closeLogger(logger)
    if exitCode != 0:
        raise typer.Exit(code=exitCode)


def headerOption():
    return typer.Option(None, "--header", "-H", help="Extra header 'Name: value' (repeatable)")


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", help="Path to config.yml"),
    runId: Optional[str] = typer.Option(None, "--run-id", help="Run identifier (UUID). If omitted, generated."),
    logLevel: Optional[str] = typer.Option(None, "--log-level", help="Log level: ERROR|WARN|INFO|DEBUG"),
    logDir: Optional[str] = typer.Option(None, "--log-dir", help="Directory for logs."),
    baseUrl: Optional[str] = typer.Option(None, "--base-url", help="Base URL for relative request URLs"),
    timeoutSeconds: Optional[float] = typer.Option(None, "--timeout-seconds", help="Request timeout in seconds"),
    tlsSkipVerify: Optional[bool] = typer.Option(None, "--tls-skip-verify", help="Disable TLS verification"),
    caFile: Optional[str] = typer.Option(None, "--ca-file", help="CA file path"),
    acceptLanguage: Optional[str] = typer.Option(None, "--accept-language", help="Accept-Language (default: locale)"),
):
    """
    Назначение:
        Глобальная инициализация CLI:
        - генерирует/принимает run_id
        - загружает настройки (CLI > ENV > config > defaults)
        - сохраняет всё в ctx.obj для подкоманд
    """
    if not runId:
        runId = str(uuid.uuid4())

    cliOverrides = {
        "base_url": baseUrl,
        "timeout_seconds": timeoutSeconds,
        "tls_skip_verify": tlsSkipVerify,
        "ca_file": caFile,
        "accept_language": acceptLanguage,
        "log_level": logLevel,
        "log_dir": logDir,
    }
    try:
        loaded = load_settings(config_path=config, cli_overrides=cliOverrides)
    except ConfigError as exc:
        typer.echo(f"ERROR: {exc.message}", err=True)
        raise typer.Exit(code=2)

    # transport можно передать через obj (тесты подставляют httpx.MockTransport)
    transport = (ctx.obj or {}).get("transport")
    ctx.obj = {
        "runId": runId,
        "settings": loaded.settings,
        "sources": loaded.sources_used,
        "configPath": config,
        "transport": transport,
    }


@app.command()
def get(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Absolute URL or path relative to --base-url"),
    header: Optional[List[str]] = headerOption(),
):
    headers = parseHeaderOptions(header)
    runWithClient(ctx, "get", lambda client: client.get(url, headers=headers))


@app.command()
def delete(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Absolute URL or path relative to --base-url"),
    header: Optional[List[str]] = headerOption(),
):
    headers = parseHeaderOptions(header)
    runWithClient(ctx, "delete", lambda client: client.delete(url, headers=headers))


def _bodyCommand(ctx: typer.Context, verb: str, url: str, jsonText: str | None, jsonFile: str | None, header) -> None:
    headers = parseHeaderOptions(header)
    body = readJsonBody(jsonText, jsonFile)
    runWithClient(ctx, verb, lambda client: getattr(client, verb)(url, body, headers=headers))


@app.command()
def post(
    ctx: typer.Context,
    url: str = typer.Argument(...),
    jsonText: Optional[str] = typer.Option(None, "--json", help="JSON request body"),
    jsonFile: Optional[str] = typer.Option(None, "--json-file", help="Path to JSON request body"),
    header: Optional[List[str]] = headerOption(),
):
    _bodyCommand(ctx, "post", url, jsonText, jsonFile, header)


@app.command()
def put(
    ctx: typer.Context,
    url: str = typer.Argument(...),
    jsonText: Optional[str] = typer.Option(None, "--json", help="JSON request body"),
    jsonFile: Optional[str] = typer.Option(None, "--json-file", help="Path to JSON request body"),
    header: Optional[List[str]] = headerOption(),
):
    _bodyCommand(ctx, "put", url, jsonText, jsonFile, header)


@app.command()
def patch(
    ctx: typer.Context,
    url: str = typer.Argument(...),
    jsonText: Optional[str] = typer.Option(None, "--json", help="JSON request body"),
    jsonFile: Optional[str] = typer.Option(None, "--json-file", help="Path to JSON request body"),
    header: Optional[List[str]] = headerOption(),
):
    _bodyCommand(ctx, "patch", url, jsonText, jsonFile, header)


@app.command()
def upload(
    ctx: typer.Context,
    url: str = typer.Argument(...),
    file: str = typer.Option(..., "--file", help="File to upload"),
    key: str = typer.Option("file", "--key", help="Multipart field name"),
    contentType: Optional[str] = typer.Option(None, "--content-type", help="Content type of the file part"),
    header: Optional[List[str]] = headerOption(),
):
    headers = parseHeaderOptions(header)
    p = Path(file)
    if not p.exists() or not p.is_file():
        typer.echo(f"ERROR: file not found: {file}", err=True)
        raise typer.Exit(code=2)

    def execute(client: RestClientProtocol) -> Result[Any]:
        request = UploadRequest(key=key, file_name=p.name, content_type=contentType, file_stream=p.open("rb"))
        return client.upload(url, request, headers=headers)

    runWithClient(ctx, "upload", execute)


@app.command()
def download(
    ctx: typer.Context,
    url: str = typer.Argument(...),
    out: Optional[str] = typer.Option(None, "--out", help="Output path (default: server file name)"),
    header: Optional[List[str]] = headerOption(),
):
    headers = parseHeaderOptions(header)

    def execute(client: RestClientProtocol) -> Result[Any]:
        result = client.download(url, headers=headers)
        if not result.ok or not isinstance(result.value, DownloadResponse):
            return result
        downloaded: DownloadResponse = result.value
        target = Path(out) if out else Path(Path(downloaded.file_name or "download.bin").name)
        written = downloaded.save(target)
        return Result.success(
            {
                "saved_to": str(target.resolve()),
                "file_name": downloaded.file_name,
                "content_type": downloaded.content_type,
                "size_in_bytes": downloaded.size_in_bytes,
                "written_bytes": written,
            },
            result.status_code or 200,
        )

    runWithClient(ctx, "download", execute)


if __name__ == "__main__":
    app()
