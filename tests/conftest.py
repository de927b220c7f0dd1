from __future__ import annotations

import base64
import json
from typing import Any

import pytest
import requests

from registry_backend.config import Settings

API = "https://api.github.com"
WEB = "https://github.com"


def make_response(
    status: int = 200,
    payload: Any = None,
    headers: dict[str, str] | None = None,
) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = b"" if payload is None else json.dumps(payload).encode("utf-8")
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    return response


def contents_payload(text: str) -> dict[str, str]:
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    # The host wraps base64 content at 60 characters.
    wrapped = "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60))
    return {"type": "file", "encoding": "base64", "content": wrapped}


class FakeSession(requests.Session):
    """Session answering GETs from a url -> response table."""

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.routes = routes or {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def get(self, url, **kwargs):  # type: ignore[override]
        self.calls.append((url, kwargs))
        handler = self.routes.get(url)
        if handler is None:
            return make_response(404, {"message": "Not Found"})
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(url, **kwargs)
        return handler

    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]


@pytest.fixture
def settings() -> Settings:
    return Settings(username="registry-bot", token="service-token", max_pages=5)
