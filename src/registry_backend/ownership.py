"""Confirm that a user can reach a repository on the host.

``RepositoryOwnershipVerifier.verify`` walks the user's repository listing page
by page until it finds the requested ``owner/repo``. ``ownership`` narrows the
outcome to the two failure kinds the rest of the system deals with.
"""

from __future__ import annotations

import logging
from typing import Any

from .host import HostClient
from .models import RepoReference, User
from .result import ErrorKind, Result

logger = logging.getLogger(__name__)


class RepositoryOwnershipVerifier:
    """Sequential page walk over ``GET /user/repos``."""

    def __init__(self, client: HostClient, max_pages: int | None = None) -> None:
        self.client = client
        self.max_pages = max_pages or client.settings.max_pages

    def verify(self, user: User, repo: RepoReference) -> Result[dict[str, Any]]:
        """Return the host's entry for ``repo`` if ``user`` can see it.

        Failure kinds: ``NO_REPO_ACCESS`` when the last page holds no match,
        ``NO_AUTH`` on 401/403, ``FAILED_REQUEST`` on any other non-2xx status
        or a runaway pagination, ``SERVER_ERROR`` on transport exceptions.
        """
        try:
            return self._walk(user, repo)
        except Exception as exc:
            logger.exception("Ownership check for %s on %s failed", user.name, repo)
            return Result.failure(ErrorKind.SERVER_ERROR, exc)

    def _walk(self, user: User, repo: RepoReference) -> Result[dict[str, Any]]:
        target = str(repo)

        for page in range(1, self.max_pages + 1):
            response = self.client.list_user_repos(user, page)

            if response.status_code in (401, 403):
                return Result.failure(
                    ErrorKind.NO_AUTH, f"Host rejected credentials of {user.name}"
                )
            if not 200 <= response.status_code < 300:
                return Result.failure(
                    ErrorKind.FAILED_REQUEST,
                    f"Unexpected status code {response.status_code} listing repositories",
                )

            entries = response.json()
            for entry in entries if isinstance(entries, list) else []:
                if isinstance(entry, dict) and entry.get("full_name") == target:
                    logger.debug("Found %s on page %d", target, page)
                    return Result.success(entry)

            if "next" not in response.links:
                return Result.failure(
                    ErrorKind.NO_REPO_ACCESS, f"{user.name} has no access to {target}"
                )

        logger.warning("Stopped looking for %s after %d pages", target, self.max_pages)
        return Result.failure(
            ErrorKind.FAILED_REQUEST,
            f"Repository listing exceeded {self.max_pages} pages",
        )


# Kinds outside this mapping pass through unchanged.
_NARROWED = {
    ErrorKind.NO_AUTH: ErrorKind.NO_REPO_ACCESS,
    ErrorKind.FAILED_REQUEST: ErrorKind.SERVER_ERROR,
}


def ownership(
    verifier: RepositoryOwnershipVerifier, user: User, repo: RepoReference
) -> Result[dict[str, Any]]:
    """Verify ownership, exposing only ``NO_REPO_ACCESS`` or ``SERVER_ERROR``."""
    result = verifier.verify(user, repo)
    if result.ok:
        return result
    return Result.failure(_NARROWED.get(result.short, result.short), result.content)
