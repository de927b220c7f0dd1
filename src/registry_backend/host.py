"""HTTP access to the source-control host (GitHub REST shape).

The client only performs requests and hands back ``requests.Response`` objects.
Interpreting status codes is left to the components, since each step maps them
onto a different error kind.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import requests
from requests import Response

from .config import Settings
from .models import RepoReference, User

logger = logging.getLogger(__name__)


class HostRequestError(RuntimeError):
    """Raised when a request to the host fails at the transport level."""


class HostClient:
    """Thin wrapper over a ``requests.Session`` bound to one host."""

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": settings.user_agent,
                "Accept": "application/vnd.github+json",
            }
        )

    def _get(
        self,
        url: str,
        *,
        auth: tuple[str, str] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Response:
        try:
            response = self.session.get(
                url,
                auth=auth or self.settings.service_auth,
                params=params,
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as exc:
            raise HostRequestError(f"Request to {url} failed: {exc}") from exc

        logger.debug("GET %s -> %s", url, response.status_code)
        return response

    def _api(self, path: str) -> str:
        return f"{self.settings.api_url.rstrip('/')}/{path.lstrip('/')}"

    def web_url(self, repo: RepoReference) -> str:
        return f"{self.settings.web_url.rstrip('/')}/{repo}"

    def list_user_repos(self, user: User, page: int) -> Response:
        """One page of the repositories visible to ``user``, with their credential."""
        return self._get(
            self._api("/user/repos"),
            auth=(user.name, user.token),
            params={"page": page},
        )

    def probe_repository(self, repo: RepoReference) -> Response:
        return self._get(self.web_url(repo))

    def get_contents(self, repo: RepoReference, path: str) -> Response:
        return self._get(self._api(f"/repos/{repo}/contents/{path}"))

    def get_tags(self, repo: RepoReference) -> Response:
        return self._get(self._api(f"/repos/{repo}/tags"))


def decode_contents(payload: Any) -> str:
    """Return the text of a contents-API response body.

    Raises:
        ValueError: If the body is not a base64 file payload.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("content"), str):
        raise ValueError("Contents payload is missing 'content'")
    encoding = payload.get("encoding", "base64")
    if encoding != "base64":
        raise ValueError(f"Unsupported contents encoding '{encoding}'")
    raw = base64.b64decode(payload["content"])
    return raw.decode("utf-8")
