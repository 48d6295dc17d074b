from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from ghnet.domain.entities import (
    DependentsCount,
    DependentsCrawlResult,
    DependentsQuery,
    RepositoryRef,
    SkippedCandidate,
    SkipReason,
)
from ghnet.domain.errors import CountUnavailable, FetchFailed, MalformedUrl, ResolverError
from ghnet.domain.interfaces import ICrawlReporter, IPageFetcher, IRepositoryResolver
from .counter import read_dependents_count
from .reporting import LoggingCrawlReporter
from .urls import PageKind, build_url

log = logging.getLogger(__name__)

ROW_SELECTOR       = "div.Box-row > span"
NEXT_PAGE_SELECTOR = "a.btn:nth-child(2)"
REPO_PATTERN       = re.compile(r"^\s*(\S+)\s*/\s*(\S+)\s*$")


class _CrawlAccumulator:
    """Accepted repositories plus skipped candidates, owned by a single crawl() call."""

    def __init__(self, reporter: ICrawlReporter) -> None:
        self._reporter = reporter
        self.accepted: set[RepositoryRef] = set()
        self.skipped:  list[SkippedCandidate] = []

    def accept(self, repository: RepositoryRef, count: int) -> None:
        self.accepted.add(repository)
        self._reporter.on_accepted(repository, count)

    def skip(self, owner: str, name: str, reason: SkipReason, detail: str = "") -> None:
        skipped = SkippedCandidate(owner=owner, name=name, reason=reason, detail=detail)
        self.skipped.append(skipped)
        self._reporter.on_skipped(skipped)


class DependentsCrawler:
    """
    Walks every page of a dependents listing and keeps the dependents that
    pass the query's filters.

    All collaborators are injected:
      - IPageFetcher        → how pages are downloaded and parsed
      - IRepositoryResolver → how "owner/name" rows become repositories
      - ICrawlReporter      → who hears about progress and skipped rows

    Pages are visited one at a time, following each page's "next" link.
    A page that was already visited ends the crawl, as does `max_pages`
    when set.
    """

    def __init__(
        self,
        fetcher: IPageFetcher,
        resolver: IRepositoryResolver,
        reporter: ICrawlReporter | None = None,
        max_pages: int | None = None,
    ) -> None:
        self._fetcher   = fetcher
        self._resolver  = resolver
        self._reporter  = reporter or LoggingCrawlReporter()
        self._max_pages = max_pages

    def count_dependents(self, repository: RepositoryRef, package_id: str | None = None) -> DependentsCount:
        """Fetch the repository's dependents page and read its count label."""
        url = build_url(repository.html_url, PageKind.DEPENDENTS, package_id)
        return read_dependents_count(self._fetcher.fetch(url), url)

    def crawl(self, query: DependentsQuery) -> DependentsCrawlResult:
        """
        Run one dependents crawl.

        A page that cannot be fetched aborts the whole crawl (FetchFailed
        propagates). Problems with a single listed repository only skip
        that repository.
        """
        accumulator   = _CrawlAccumulator(self._reporter)
        visited:      set[str] = set()
        stopped_early = False
        url: str | None = build_url(query.repository.html_url, PageKind.DEPENDENTS, query.package_id)

        while url is not None:
            if url in visited:
                self._reporter.on_stopped(url, "page already visited")
                stopped_early = True
                break
            if self._max_pages is not None and len(visited) >= self._max_pages:
                self._reporter.on_stopped(url, f"page limit of {self._max_pages} reached")
                stopped_early = True
                break

            visited.add(url)
            self._reporter.on_page(url, len(visited))
            log.debug("Scanning %s | accepted so far: %d", url, len(accumulator.accepted))

            document   = self._fetcher.fetch(url)
            candidates = list(self._iter_candidates(document))
            next_url   = self._next_page_url(document, url)

            # Counts are reused within one page only.
            counts: dict[RepositoryRef, DependentsCount] = {}
            for owner, name in candidates:
                self._check_candidate(query, owner, name, counts, accumulator)

            url = next_url

        log.info(
            "Dependents of %s | pages=%d | accepted=%d | skipped=%d",
            query.repository.full_name,
            len(visited),
            len(accumulator.accepted),
            len(accumulator.skipped),
        )
        return DependentsCrawlResult(
            repositories  = frozenset(accumulator.accepted),
            skipped       = tuple(accumulator.skipped),
            pages_visited = len(visited),
            stopped_early = stopped_early,
        )

    @staticmethod
    def _iter_candidates(document: BeautifulSoup) -> Iterator[tuple[str, str]]:
        """Yield (owner, name) for every well-formed row of a listing page."""
        for row in document.select(ROW_SELECTOR):
            match = REPO_PATTERN.match(row.get_text())
            if match:
                yield match.group(1), match.group(2)

    @staticmethod
    def _next_page_url(document: BeautifulSoup, current_url: str) -> str | None:
        button = document.select_one(NEXT_PAGE_SELECTOR)
        if button is None or not button.get("href"):
            return None
        return urljoin(current_url, button["href"])

    def _resolve(self, owner: str, name: str, accumulator: _CrawlAccumulator) -> RepositoryRef | None:
        try:
            owner_ref = self._resolver.resolve_owner(owner)
            if owner_ref is None:
                accumulator.skip(owner, name, SkipReason.OWNER_NOT_FOUND, f"no organization or user {owner!r}")
                return None

            repository = self._resolver.resolve_repository(owner_ref, name)
        except ResolverError as exc:
            accumulator.skip(owner, name, SkipReason.RESOLUTION_FAILED, str(exc))
            return None

        if repository is None:
            accumulator.skip(owner, name, SkipReason.REPOSITORY_NOT_FOUND, "repository not found")
        return repository

    def _check_candidate(
        self,
        query: DependentsQuery,
        owner: str,
        name: str,
        counts: dict[RepositoryRef, DependentsCount],
        accumulator: _CrawlAccumulator,
    ) -> None:
        dependent = self._resolve(owner, name, accumulator)
        if dependent is None:
            return

        count = counts.get(dependent)
        if count is None:
            try:
                count = self.count_dependents(dependent)
            except (FetchFailed, CountUnavailable, MalformedUrl) as exc:
                accumulator.skip(owner, name, SkipReason.COUNT_FAILED, str(exc))
                return
            counts[dependent] = count

        if count.value < query.min_dependents:
            accumulator.skip(
                owner, name, SkipReason.BELOW_THRESHOLD,
                f"{count.value} dependents, threshold is {query.min_dependents}",
            )
            return

        target_language = query.repository.language
        if query.same_language_only and dependent.language != target_language:
            accumulator.skip(
                owner, name, SkipReason.LANGUAGE_MISMATCH,
                f"language is {dependent.language!r}, not {target_language!r}",
            )
            return

        accumulator.accept(dependent, count.value)
