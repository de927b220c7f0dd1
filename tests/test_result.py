from __future__ import annotations

import pytest

from registry_backend.result import ErrorKind, Result, ResultError


def test_success_result():
    result = Result.success({"name": "pkg"})
    assert result.ok
    assert result.short is None
    assert result.unwrap() == {"name": "pkg"}
    assert result.to_dict() == {"ok": True, "content": {"name": "pkg"}}


def test_failure_result():
    result = Result.failure(ErrorKind.BAD_REPO, "missing")
    assert not result.ok
    assert result.to_dict() == {"ok": False, "content": "missing", "short": "Bad Repo"}
    with pytest.raises(ResultError, match="Bad Repo: missing"):
        result.unwrap()


def test_inconsistent_results_are_rejected():
    with pytest.raises(ValueError):
        Result(ok=True, content=None, short=ErrorKind.SERVER_ERROR)
    with pytest.raises(ValueError):
        Result(ok=False, content=None)


@pytest.mark.parametrize(
    "kind, status",
    [
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.BAD_PACKAGE, 400),
        (ErrorKind.NO_REPO_ACCESS, 401),
        (ErrorKind.SERVER_ERROR, 500),
    ],
)
def test_http_status(kind, status):
    assert kind.http_status == status
