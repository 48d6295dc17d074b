"""
Domain Layer — Interfaces (Abstract Contracts)
-----------------------------------------------
The application layer (URL building, extraction, crawling) depends on
these abstractions only. Concrete implementations live in the
infrastructure layer and are wired together in ghnet.main.

Tests swap in fakes for all three without touching application code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from bs4 import BeautifulSoup

from .entities import OwnerRef, RepositoryRef, SkippedCandidate


class IRepositoryResolver(ABC):
    """
    Contract for anything that can turn names into GitHub owners and repositories.

    "Not found" is an ordinary answer and comes back as None. Only
    transport or API failures raise (ResolverError).
    """

    @abstractmethod
    def resolve_owner(self, login: str) -> OwnerRef | None:
        """Return the organization or user named `login`, or None."""
        ...

    @abstractmethod
    def resolve_repository(self, owner: OwnerRef, name: str) -> RepositoryRef | None:
        """Return the repository `name` owned by `owner`, or None."""
        ...


class IPageFetcher(ABC):
    """Contract for retrieving one HTML page as a navigable document."""

    @abstractmethod
    def fetch(self, url: str) -> BeautifulSoup:
        """
        Issue exactly one GET for `url` and return the parsed document.
        Raises FetchFailed on transport errors and non-2xx statuses.
        """
        ...


class ICrawlReporter(ABC):
    """
    Observer notified while a dependents crawl is running.

    Replaces logging as the only side channel, so callers (and tests)
    can see which candidates were skipped and why.
    """

    @abstractmethod
    def on_page(self, url: str, page_number: int) -> None:
        ...

    @abstractmethod
    def on_accepted(self, repository: RepositoryRef, count: int) -> None:
        ...

    @abstractmethod
    def on_skipped(self, skipped: SkippedCandidate) -> None:
        ...

    @abstractmethod
    def on_stopped(self, url: str, reason: str) -> None:
        """Pagination was cut short before reaching a page without a "next" link."""
        ...
