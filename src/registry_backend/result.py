"""Uniform return value for every public operation of the core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_HTTP_STATUS = {
    "Not Found": 404,
    "Bad Repo": 400,
    "Bad Package": 400,
    "No Repo Access": 401,
    "No Auth": 401,
    "Failed Request": 502,
    "Server Error": 500,
    "Config Error": 500,
}


class ErrorKind(str, Enum):
    """Discriminator attached to a failed ``Result``."""

    NOT_FOUND = "Not Found"
    BAD_REPO = "Bad Repo"
    BAD_PACKAGE = "Bad Package"
    NO_REPO_ACCESS = "No Repo Access"
    NO_AUTH = "No Auth"
    FAILED_REQUEST = "Failed Request"
    SERVER_ERROR = "Server Error"
    CONFIG_ERROR = "Config Error"

    @property
    def http_status(self) -> int:
        """Status the handler layer is expected to answer with."""
        return _HTTP_STATUS[self.value]


class ResultError(RuntimeError):
    """Raised by ``Result.unwrap`` on a failed result."""

    def __init__(self, short: ErrorKind | None, content: Any) -> None:
        super().__init__(f"{short.value if short else 'Error'}: {content}")
        self.short = short
        self.content = content


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Success value or tagged failure.

    ``content`` holds the value on success and the error payload (a message or
    the underlying exception) on failure. ``short`` is only set on failure.
    """

    ok: bool
    content: Any
    short: ErrorKind | None = None

    def __post_init__(self) -> None:
        if self.ok and self.short is not None:
            raise ValueError("A successful result cannot carry an error kind")
        if not self.ok and self.short is None:
            raise ValueError("A failed result must carry an error kind")

    @classmethod
    def success(cls, content: T) -> Result[T]:
        return cls(ok=True, content=content)

    @classmethod
    def failure(cls, short: ErrorKind, content: Any = None) -> Result[T]:
        return cls(ok=False, content=content, short=short)

    def unwrap(self) -> T:
        if not self.ok:
            raise ResultError(self.short, self.content)
        return self.content

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ok": self.ok, "content": self.content}
        if self.short is not None:
            data["short"] = self.short.value
        return data
