"""Shared fakes and fixtures for ghnet tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from ghnet.domain.entities import OwnerKind, OwnerRef, RepositoryRef, SkippedCandidate
from ghnet.domain.errors import FetchFailed, ResolverError
from ghnet.domain.interfaces import ICrawlReporter, IPageFetcher, IRepositoryResolver

FIXTURES = Path(__file__).parent / "fixtures"

TARGET_URL = "https://github.com/acme/widgets/network/dependents"
PAGE2_URL  = "https://github.com/acme/widgets/network/dependents?dependents_after=MQ"


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def repo(owner: str, name: str, language: str | None = "Java") -> RepositoryRef:
    return RepositoryRef(
        owner_login = owner,
        name        = name,
        html_url    = f"https://github.com/{owner}/{name}",
        language    = language,
    )


def render_dependents_page(
    count_label: str | None = "0 Repositories",
    rows: tuple[str, ...] = (),
    next_href: str | None = None,
) -> str:
    """Minimal dependents page: count label, "owner/name" rows, pagination buttons."""
    parts = ["<html><body><div class='Box'>"]
    if count_label is not None:
        parts.append(
            "<div class='table-list-header-toggle'>"
            f"<a class='btn-link selected' href='#'>{count_label}</a>"
            "<a class='btn-link' href='#'>0 Packages</a></div>"
        )
    for row in rows:
        parts.append(f"<div class='Box-row'><span>{row}</span></div>")
    parts.append("</div><div class='BtnGroup'><button class='btn' disabled>Previous</button>")
    if next_href is not None:
        parts.append(f"<a class='btn' href='{next_href}'>Next</a>")
    else:
        parts.append("<button class='btn' disabled>Next</button>")
    parts.append("</div></body></html>")
    return "".join(parts)


class FakePageFetcher(IPageFetcher):
    """Serves pages from a dict; unknown URLs behave like a 404."""

    def __init__(self, pages: dict[str, str]) -> None:
        self.pages = dict(pages)
        self.requested: list[str] = []

    def fetch(self, url: str) -> BeautifulSoup:
        self.requested.append(url)
        if url not in self.pages:
            raise FetchFailed(url, status_code=404)
        return BeautifulSoup(self.pages[url], "html.parser")

    def count(self, url: str) -> int:
        return self.requested.count(url)


class FakeResolver(IRepositoryResolver):
    """
    Resolves owners from the repositories it knows, plus any extra owners.
    Names listed in `failing` raise ResolverError.
    """

    def __init__(
        self,
        repositories: list[RepositoryRef],
        extra_owners: tuple[str, ...] = (),
        failing: tuple[str, ...] = (),
    ) -> None:
        self._repositories = {(r.owner_login, r.name): r for r in repositories}
        self._owners = {r.owner_login for r in repositories} | set(extra_owners)
        self._failing = set(failing)

    def resolve_owner(self, login: str) -> OwnerRef | None:
        if login in self._failing:
            raise ResolverError(f"connection reset while resolving {login}")
        if login not in self._owners:
            return None
        return OwnerRef(login=login, kind=OwnerKind.USER)

    def resolve_repository(self, owner: OwnerRef, name: str) -> RepositoryRef | None:
        return self._repositories.get((owner.login, name))


class RecordingReporter(ICrawlReporter):
    def __init__(self) -> None:
        self.pages:    list[tuple[str, int]] = []
        self.accepted: list[tuple[RepositoryRef, int]] = []
        self.skipped:  list[SkippedCandidate] = []
        self.stopped:  list[tuple[str, str]] = []

    def on_page(self, url: str, page_number: int) -> None:
        self.pages.append((url, page_number))

    def on_accepted(self, repository: RepositoryRef, count: int) -> None:
        self.accepted.append((repository, count))

    def on_skipped(self, skipped: SkippedCandidate) -> None:
        self.skipped.append(skipped)

    def on_stopped(self, url: str, reason: str) -> None:
        self.stopped.append((url, reason))


@pytest.fixture
def target() -> RepositoryRef:
    return repo("acme", "widgets", "Java")


@pytest.fixture
def listing_pages() -> dict[str, str]:
    """The two-page acme/widgets listing plus the candidates' own dependents pages."""
    return {
        TARGET_URL: read_fixture("dependents_page1.html"),
        PAGE2_URL:  read_fixture("dependents_page2.html"),
        "https://github.com/alice/app/network/dependents":   render_dependents_page("5 Repositories"),
        "https://github.com/bob/tool/network/dependents":    render_dependents_page("1,024 Repositories"),
        "https://github.com/erin/nolang/network/dependents": render_dependents_page("0 Repositories"),
        # dave/broken has no dependents page: counting it fails
    }


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver(
        repositories=[
            repo("alice", "app", "Java"),
            repo("bob", "tool", "Python"),
            repo("dave", "broken", "Java"),
            repo("erin", "nolang", None),
        ],
        extra_owners=("carol",),
    )


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()
