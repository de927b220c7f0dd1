"""Build a canonical package record from a repository on the host.

The pipeline runs strictly in order and stops at the first failing step:

1. the repository's web page must answer 200 (``BAD_REPO`` otherwise)
2. package.json is fetched, decoded and validated (``BAD_PACKAGE``)
3. tags are fetched; at least one is required (``SERVER_ERROR``)
4. README.md, then readme.md on a 404, is fetched (``BAD_REPO``)
5. the repository block and the version records are derived locally

No partially built package is ever returned.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Any

from .errors import OperationCancelled
from .host import HostClient, decode_contents
from .models import CanonicalPackage, RepoReference, TagDescriptor, repository_info
from .result import ErrorKind, Result
from .validators.manifest import ManifestError, parse_manifest

logger = logging.getLogger(__name__)

DEFAULT_CREATION_METHOD = "User Made Package"
README_NAMES = ("README.md", "readme.md")


class _StepFailed(Exception):
    """Internal short-circuit carrying the failure of one pipeline step."""

    def __init__(self, short: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.short = short
        self.message = message


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def reconcile_versions(
    manifest: dict[str, Any], tags: Sequence[TagDescriptor]
) -> dict[str, dict[str, Any]]:
    """Attach tag archives to the manifest's versions.

    A version only gets a record when a tag (leading ``v`` stripped) matches it.
    For multi-version manifests every tag is scanned, so when tag names repeat
    the last match wins. A single-version manifest takes the first match.
    """
    versions: dict[str, dict[str, Any]] = {}

    if isinstance(manifest.get("versions"), dict):
        for key, sub_manifest in manifest["versions"].items():
            for tag in tags:
                if tag.version != key:
                    continue
                record = copy.deepcopy(sub_manifest)
                record["tarball_url"] = tag.tarball_url
                record["sha"] = tag.sha
                versions[key] = record
        return versions

    version = manifest.get("version")
    for tag in tags:
        if tag.version == version:
            record = copy.deepcopy(manifest)
            record["tarball_url"] = tag.tarball_url
            record["sha"] = tag.sha
            versions[version] = record
            break
    return versions


class PackageAssembler:
    """Run the ingestion pipeline for one repository at a time."""

    def __init__(
        self,
        client: HostClient,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.client = client
        self.clock = clock

    def create_package(
        self,
        repo: RepoReference,
        *,
        creation_method: str = DEFAULT_CREATION_METHOD,
        cancel: threading.Event | None = None,
    ) -> Result[CanonicalPackage]:
        """Assemble the canonical record for ``repo``.

        ``cancel`` is checked before each remote call; once set the run stops
        with ``SERVER_ERROR``.
        """
        try:
            package = self._assemble(repo, creation_method, cancel)
        except _StepFailed as failed:
            logger.info("Package assembly for %s stopped: %s", repo, failed.message)
            return Result.failure(failed.short, failed.message)
        except Exception as exc:
            logger.exception("Package assembly for %s failed", repo)
            return Result.failure(ErrorKind.SERVER_ERROR, exc)

        logger.info(
            "Assembled %s from %s with %d versions", package.name, repo, len(package.versions)
        )
        return Result.success(package)

    def _assemble(
        self,
        repo: RepoReference,
        creation_method: str,
        cancel: threading.Event | None,
    ) -> CanonicalPackage:
        def checkpoint() -> None:
            if cancel is not None and cancel.is_set():
                raise OperationCancelled(f"Assembly of {repo} was cancelled")

        checkpoint()
        self._check_exists(repo)
        checkpoint()
        manifest = self._fetch_manifest(repo)
        checkpoint()
        tags = self._fetch_tags(repo)
        checkpoint()
        readme = self._fetch_readme(repo, checkpoint)

        now = self.clock()
        return CanonicalPackage(
            name=manifest["name"],
            repository=repository_info(manifest.get("repository"), self.client.web_url(repo)),
            readme=readme,
            metadata=manifest,
            versions=reconcile_versions(manifest, tags),
            latest=tags[0].version,
            created=now,
            updated=now,
            creation_method=creation_method,
        )

    def _check_exists(self, repo: RepoReference) -> None:
        response = self.client.probe_repository(repo)
        if response.status_code != 200:
            raise _StepFailed(
                ErrorKind.BAD_REPO,
                f"Repository {repo} answered {response.status_code}",
            )

    def _fetch_manifest(self, repo: RepoReference) -> dict[str, Any]:
        response = self.client.get_contents(repo, "package.json")
        if response.status_code != 200:
            raise _StepFailed(
                ErrorKind.BAD_PACKAGE,
                f"package.json of {repo} answered {response.status_code}",
            )
        try:
            return parse_manifest(decode_contents(response.json()))
        except ManifestError as exc:
            raise _StepFailed(
                ErrorKind.BAD_PACKAGE, f"package.json of {repo} is invalid: {exc}"
            ) from exc
        except ValueError as exc:
            raise _StepFailed(
                ErrorKind.BAD_PACKAGE, f"package.json of {repo} is unreadable: {exc}"
            ) from exc

    def _fetch_tags(self, repo: RepoReference) -> list[TagDescriptor]:
        response = self.client.get_tags(repo)
        if response.status_code != 200:
            raise _StepFailed(
                ErrorKind.SERVER_ERROR,
                f"Tags of {repo} answered {response.status_code}",
            )
        payload = response.json()
        if not isinstance(payload, list):
            payload = []

        tags = [TagDescriptor.from_api(item) for item in payload if isinstance(item, dict)]
        if not tags:
            raise _StepFailed(ErrorKind.SERVER_ERROR, f"Repository {repo} has no tags")
        return tags

    def _fetch_readme(self, repo: RepoReference, checkpoint: Callable[[], None]) -> str:
        status = None
        for index, name in enumerate(README_NAMES):
            if index:
                checkpoint()
            response = self.client.get_contents(repo, name)
            status = response.status_code
            if status == 200:
                try:
                    return decode_contents(response.json())
                except ValueError as exc:
                    raise _StepFailed(
                        ErrorKind.BAD_REPO, f"{name} of {repo} is unreadable: {exc}"
                    ) from exc
            if status != 404:
                break

        raise _StepFailed(ErrorKind.BAD_REPO, f"Readme of {repo} answered {status}")
