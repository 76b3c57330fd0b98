from __future__ import annotations

import io

import httpx

from httpclients.domain.models import UploadRequest
from httpclients.infra.http.content import (
    buildJsonContent,
    buildMultipartFiles,
    contentLength,
    mediaType,
    parseContentDisposition,
)
from httpclients.infra.http.headers import applyHeaders, currentLanguageTag


def test_build_json_content_for_none_is_empty():
    assert buildJsonContent(None) == (None, {})


def test_build_json_content_sets_json_content_type():
    content, headers = buildJsonContent({"a": 1})

    assert content == b'{"a": 1}'
    assert headers == {"Content-Type": "application/json; charset=utf-8"}


def test_multipart_files_for_missing_stream_is_empty_part():
    files = buildMultipartFiles(UploadRequest(key="file", file_name="x.txt", content_type="text/plain"))

    name, stream, content_type = files["file"]
    assert name is None
    assert content_type is None
    assert stream.read() == b""


def test_multipart_files_passes_name_and_type():
    stream = io.BytesIO(b"data")

    files = buildMultipartFiles(UploadRequest("file", "x.txt", "text/plain", stream))

    assert files == {"file": ("x.txt", stream, "text/plain")}


def test_parse_content_disposition():
    assert parseContentDisposition('attachment; filename="report.pdf"') == "report.pdf"
    assert parseContentDisposition("attachment; filename=report.pdf") == "report.pdf"
    assert parseContentDisposition("attachment; filename*=UTF-8''%C3%A1rvore.txt") == "árvore.txt"
    assert parseContentDisposition('attachment; filename="a.txt"; filename*=UTF-8\'\'b.txt') == "a.txt"
    assert parseContentDisposition("inline") is None
    assert parseContentDisposition(None) is None


def test_media_type_and_content_length():
    headers = httpx.Headers({"Content-Type": "Application/Problem+JSON; charset=utf-8", "Content-Length": "12"})

    assert mediaType(headers) == "application/problem+json"
    assert contentLength(headers) == 12
    assert mediaType(httpx.Headers()) is None
    assert contentLength(httpx.Headers({"Content-Length": "abc"})) is None


def test_apply_headers_injects_language_and_skips_existing():
    request = httpx.Request("GET", "http://test", headers={"X-Test": "existing"})

    applyHeaders(request, {"X-Test": "123", "X-Other": "1"})

    assert request.headers.get_list("X-Test") == ["existing"]
    assert request.headers["X-Other"] == "1"
    assert request.headers["Accept-Language"] == currentLanguageTag()


def test_apply_headers_replaces_only_listed_library_defaults():
    request = httpx.Request("GET", "http://test", headers={"Accept": "*/*", "X-Test": "existing"})

    applyHeaders(request, {"Accept": "application/xml", "X-Test": "123"}, replaceable=["accept"])

    assert request.headers.get_list("Accept") == ["application/xml"]
    assert request.headers.get_list("X-Test") == ["existing"]


def test_current_language_tag_falls_back_for_c_locale(monkeypatch):
    monkeypatch.setattr("httpclients.infra.http.headers.locale.getlocale", lambda: (None, None))
    assert currentLanguageTag() == "en-US"

    monkeypatch.setattr("httpclients.infra.http.headers.locale.getlocale", lambda: ("pt_BR", "UTF-8"))
    assert currentLanguageTag() == "pt-BR"
