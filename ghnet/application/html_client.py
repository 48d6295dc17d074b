from __future__ import annotations

import logging

from ghnet.domain.entities import (
    DependentsCount,
    DependentsCrawlResult,
    DependentsQuery,
    OwnerRef,
    PackageRef,
    RepositoryRef,
)
from ghnet.domain.errors import OwnerNotFound, RepositoryNotFound
from ghnet.domain.interfaces import ICrawlReporter, IPageFetcher, IRepositoryResolver
from .crawler import DependentsCrawler
from .packages import extract_packages
from .urls import PageKind, build_url

log = logging.getLogger(__name__)


class GitHubHtmlClient:
    """
    Repository data that GitHub only shows on rendered pages: published
    packages and dependents.

    Wraps a repository resolver (the API side) and a page fetcher (the
    HTML side); both are injected and never created here.
    """

    def __init__(
        self,
        resolver: IRepositoryResolver,
        fetcher: IPageFetcher,
        reporter: ICrawlReporter | None = None,
        max_pages: int | None = None,
    ) -> None:
        self._resolver = resolver
        self._fetcher  = fetcher
        self._crawler  = DependentsCrawler(fetcher, resolver, reporter=reporter, max_pages=max_pages)

    def get_owner(self, login_or_org: str) -> OwnerRef:
        """
        Return the organization or user named `login_or_org`.
        Organizations are looked up before users.
        """
        owner = self._resolver.resolve_owner(login_or_org)
        if owner is None:
            raise OwnerNotFound(login_or_org)
        return owner

    def get_repository(self, owner_or_full_name: str, name: str | None = None) -> RepositoryRef:
        """Resolve "owner/name" (or owner, name) to a repository."""
        if name is None:
            owner_or_full_name, _, name = owner_or_full_name.partition("/")
        if not owner_or_full_name or not name:
            raise RepositoryNotFound(f"{owner_or_full_name}/{name or ''}")

        repository = self._resolver.resolve_repository(self.get_owner(owner_or_full_name), name)
        if repository is None:
            raise RepositoryNotFound(f"{owner_or_full_name}/{name}")
        return repository

    def list_packages(self, repo: RepositoryRef) -> set[PackageRef]:
        """Packages published from `repo`, read from its dependents page selector."""
        url = build_url(repo.html_url, PageKind.DEPENDENTS)
        packages = extract_packages(self._fetcher.fetch(url))
        log.debug("%s publishes %d package(s)", repo.full_name, len(packages))
        return packages

    def get_dependents_count_result(self, repo: RepositoryRef, package_id: str | None = None) -> DependentsCount:
        return self._crawler.count_dependents(repo, package_id)

    def get_dependents_count(self, repo: RepositoryRef, package_id: str | None = None) -> int:
        """
        Number of repositories depending on `repo`, or on one of its
        packages when `package_id` is given (see list_packages).
        An unrecognized count label counts as 0.
        """
        return self.get_dependents_count_result(repo, package_id).value

    def crawl_dependents(self, query: DependentsQuery) -> DependentsCrawlResult:
        return self._crawler.crawl(query)

    def list_dependents(
        self,
        repo: RepositoryRef,
        package_id: str | None = None,
        min_dependents: int = 1,
        same_language: bool = True,
    ) -> set[RepositoryRef]:
        """
        Repositories depending on `repo` (or on one of its packages).

        Args:
            repo:           repository to scan
            package_id:     restrict to one package, see list_packages
            min_dependents: only keep dependents that have at least this many dependents themselves
            same_language:  only keep dependents whose main language is the same as repo's
        """
        query = DependentsQuery(
            repository         = repo,
            package_id         = package_id,
            min_dependents     = min_dependents,
            same_language_only = same_language,
        )
        return set(self.crawl_dependents(query).repositories)
