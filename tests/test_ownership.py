from __future__ import annotations

import requests

from conftest import API, FakeSession, make_response
from registry_backend.host import HostClient
from registry_backend.models import RepoReference, User
from registry_backend.ownership import RepositoryOwnershipVerifier, ownership
from registry_backend.result import ErrorKind

REPOS_URL = f"{API}/user/repos"
USER = User(name="admin_user", token="admin-token")
TARGET = RepoReference("admin_user", "atom-backend")


def next_link(page: int) -> dict[str, str]:
    return {
        "Link": (
            f'<{REPOS_URL}?page={page + 1}>; rel="next", '
            f'<{REPOS_URL}?page=9>; rel="last"'
        )
    }


def paged(pages: list[tuple[list[dict], bool]]):
    """Route handler serving ``pages`` (entries, has_next) by page number."""

    def handler(url, **kwargs):
        page = kwargs["params"]["page"]
        entries, has_next = pages[page - 1]
        return make_response(200, entries, next_link(page) if has_next else {})

    return handler


def make_verifier(settings, routes):
    session = FakeSession(routes)
    return RepositoryOwnershipVerifier(HostClient(settings, session=session)), session


def test_match_on_first_page_stops_paging(settings):
    verifier, session = make_verifier(
        settings,
        {REPOS_URL: paged([([{"id": 1, "full_name": "admin_user/atom-backend"}], True)])},
    )
    result = verifier.verify(USER, TARGET)

    assert result.ok
    assert result.content["id"] == 1
    assert len(session.calls) == 1


def test_uses_end_user_credential(settings):
    verifier, session = make_verifier(
        settings, {REPOS_URL: paged([([{"full_name": "admin_user/atom-backend"}], False)])}
    )
    verifier.verify(USER, TARGET)

    _, kwargs = session.calls[0]
    assert kwargs["auth"] == ("admin_user", "admin-token")
    assert kwargs["timeout"] == settings.request_timeout
    assert session.headers["User-Agent"] == settings.user_agent


def test_follows_next_links_until_match(settings):
    verifier, session = make_verifier(
        settings,
        {
            REPOS_URL: paged(
                [
                    ([{"full_name": "admin_user/other"}], True),
                    ([{"full_name": "org/thing"}], True),
                    ([{"id": 3, "full_name": "admin_user/atom-backend"}], False),
                ]
            )
        },
    )
    result = verifier.verify(USER, TARGET)

    assert result.ok
    assert result.content["id"] == 3
    assert [kwargs["params"]["page"] for _, kwargs in session.calls] == [1, 2, 3]


def test_no_access_after_last_page(settings):
    verifier, session = make_verifier(
        settings,
        {
            REPOS_URL: paged(
                [
                    ([{"full_name": "admin_user/other"}], True),
                    ([{"full_name": "admin_user/another"}], False),
                ]
            )
        },
    )
    result = verifier.verify(USER, TARGET)

    assert result.short is ErrorKind.NO_REPO_ACCESS
    assert len(session.calls) == 2


def test_page_bound_stops_runaway_pagination(settings):
    verifier, session = make_verifier(
        settings,
        {REPOS_URL: lambda url, **kw: make_response(200, [], next_link(kw["params"]["page"]))},
    )
    result = verifier.verify(USER, TARGET)

    assert result.short is ErrorKind.FAILED_REQUEST
    assert len(session.calls) == settings.max_pages


def test_unauthorized(settings):
    verifier, _ = make_verifier(
        settings, {REPOS_URL: make_response(401, {"message": "Requires authentication"})}
    )
    assert verifier.verify(USER, TARGET).short is ErrorKind.NO_AUTH


def test_other_status_is_failed_request(settings):
    verifier, _ = make_verifier(settings, {REPOS_URL: make_response(500, {"message": "huh??"})})
    assert verifier.verify(USER, TARGET).short is ErrorKind.FAILED_REQUEST


def test_transport_error_is_server_error(settings):
    verifier, _ = make_verifier(settings, {REPOS_URL: requests.ConnectionError("down")})
    result = verifier.verify(USER, TARGET)

    assert result.short is ErrorKind.SERVER_ERROR
    assert isinstance(result.content, Exception)


class TestOwnershipBoundary:
    def test_success_passes_through(self, settings):
        verifier, _ = make_verifier(
            settings, {REPOS_URL: paged([([{"full_name": "admin_user/atom-backend"}], False)])}
        )
        assert ownership(verifier, USER, TARGET).ok

    def test_no_auth_becomes_no_repo_access(self, settings):
        verifier, _ = make_verifier(settings, {REPOS_URL: make_response(403, {})})
        assert ownership(verifier, USER, TARGET).short is ErrorKind.NO_REPO_ACCESS

    def test_failed_request_becomes_server_error(self, settings):
        verifier, _ = make_verifier(settings, {REPOS_URL: make_response(502, {})})
        assert ownership(verifier, USER, TARGET).short is ErrorKind.SERVER_ERROR

    def test_no_access_is_kept(self, settings):
        verifier, _ = make_verifier(settings, {REPOS_URL: paged([([], False)])})
        assert ownership(verifier, USER, TARGET).short is ErrorKind.NO_REPO_ACCESS
