from __future__ import annotations

import httpx

from httpclients.domain.error_codes import ErrorCode
from httpclients.domain.result import ProblemDetails, Result


def test_problem_details_from_dict_is_case_insensitive():
    problem = ProblemDetails.from_dict(
        {"Title": "Conflict", "Status": 409, "Detail": "exists", "traceId": "abc", "Errors": {"id": "taken"}}
    )

    assert problem.title == "Conflict"
    assert problem.status == 409
    assert problem.detail == "exists"
    assert problem.errors == {"id": ["taken"]}
    assert problem.extensions == {"traceId": "abc"}


def test_result_constructors():
    ok = Result.success({"a": 1}, 200)
    empty = Result.empty(204)
    failed = Result.failure(409, "exists")
    internal = Result.internal_error("boom")

    assert ok.ok and ok.value == {"a": 1} and ok.error_code is None
    assert empty.ok and empty.value is None and empty.status_code == 204
    assert not failed.ok and failed.error_code == ErrorCode.CONFLICT
    assert internal.status_code == 500 and internal.error_code == ErrorCode.UNEXPECTED_ERROR


def test_result_to_dict():
    data = Result.failure(401, "nope").to_dict()

    assert data["ok"] is False
    assert data["status_code"] == 401
    assert data["error_code"] == "UNAUTHORIZED"
    assert data["cancelled"] is False


def test_error_code_from_exception():
    assert ErrorCode.from_exception(httpx.ConnectTimeout("t")) == ErrorCode.TIMEOUT
    assert ErrorCode.from_exception(httpx.ConnectError("c")) == ErrorCode.NETWORK_ERROR
    assert ErrorCode.from_exception(RuntimeError("x")) == ErrorCode.UNEXPECTED_ERROR
