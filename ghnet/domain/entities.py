from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering


@total_ordering
@dataclass(frozen=True)
class PackageRef:
    """
    Immutable value object for one package published from a repository.

    Equality and hashing use (id, name); ordering uses the name only.
    """
    id:   str
    name: str

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, PackageRef):
            return NotImplemented
        return self.name < other.name


@dataclass(frozen=True)
class RepositoryRef:
    """
    Immutable handle to a repository as returned by the repository resolver.

    Identity is (owner_login, name). `html_url` and `language` ride along
    but never take part in equality, so the same repository seen on two
    dependents pages collapses into one set entry.
    """
    owner_login: str
    name:        str
    html_url:    str = field(compare=False)
    language:    str | None = field(default=None, compare=False)

    @property
    def full_name(self) -> str:
        return f"{self.owner_login}/{self.name}"


class OwnerKind(str, Enum):
    ORGANIZATION = "Organization"
    USER         = "User"


@dataclass(frozen=True)
class OwnerRef:
    """An organization or user account, as resolved by its login."""
    login: str
    kind:  OwnerKind

    @property
    def is_organization(self) -> bool:
        return self.kind is OwnerKind.ORGANIZATION


@dataclass(frozen=True)
class DependentsQuery:
    """
    One dependents crawl request.

    min_dependents     — dependents must themselves have at least this many dependents
    same_language_only — dependents must share the target's primary language
    """
    repository:         RepositoryRef
    package_id:         str | None = None
    min_dependents:     int = 0
    same_language_only: bool = False

    def __post_init__(self) -> None:
        if self.min_dependents < 0:
            raise ValueError(f"min_dependents must be >= 0, got {self.min_dependents}")


@dataclass(frozen=True)
class DependentsCount:
    """
    Result of reading the "N Repositories" label of a dependents page.

    A label that is present but does not look like a count is kept as
    an `unparsed` result: its value is 0, but `is_parsed` is False so
    callers can tell it apart from a real zero.
    """
    value:     int
    is_parsed: bool = True
    raw_text:  str | None = None

    @classmethod
    def counted(cls, value: int, raw_text: str | None = None) -> DependentsCount:
        return cls(value=value, is_parsed=True, raw_text=raw_text)

    @classmethod
    def unparsed(cls, raw_text: str) -> DependentsCount:
        return cls(value=0, is_parsed=False, raw_text=raw_text)


class SkipReason(str, Enum):
    OWNER_NOT_FOUND      = "owner_not_found"
    REPOSITORY_NOT_FOUND = "repository_not_found"
    RESOLUTION_FAILED    = "resolution_failed"
    COUNT_FAILED         = "count_failed"
    BELOW_THRESHOLD      = "below_threshold"
    LANGUAGE_MISMATCH    = "language_mismatch"


@dataclass(frozen=True)
class SkippedCandidate:
    """A listed dependent that did not make it into the crawl result, and why."""
    owner:  str
    name:   str
    reason: SkipReason
    detail: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class DependentsCrawlResult:
    """
    Immutable summary of a completed dependents crawl.

    stopped_early is True when pagination was cut short by the visited-page
    guard or the page cap rather than by a page without a "next" link.
    """
    repositories:  frozenset[RepositoryRef]
    skipped:       tuple[SkippedCandidate, ...] = ()
    pages_visited: int = 0
    stopped_early: bool = False

    def skipped_for(self, reason: SkipReason) -> list[SkippedCandidate]:
        return [s for s in self.skipped if s.reason is reason]
