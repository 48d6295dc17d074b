from __future__ import annotations


class GitHubHtmlError(Exception):
    """Base class for every error raised by ghnet."""
    pass


class FetchFailed(GitHubHtmlError):
    """Raised when a page could not be fetched (transport error or non-2xx status)."""

    def __init__(self, url: str, status_code: int | None = None, reason: str | None = None) -> None:
        self.url         = url
        self.status_code = status_code
        message = f"Failed to fetch {url}"
        if status_code is not None:
            message += f" (HTTP {status_code})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class MalformedUrl(GitHubHtmlError):
    """Raised when a page URL cannot be built from a repository's html_url."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Malformed URL: {url!r}")


class CountUnavailable(GitHubHtmlError):
    """Raised when a dependents page has no "N Repositories" label at all."""

    def __init__(self, url: str | None = None) -> None:
        self.url = url
        super().__init__(f"Dependents count label not found on {url or 'page'}")


class ResolverError(GitHubHtmlError):
    """Raised when the repository resolver cannot talk to the GitHub API."""
    pass


class OwnerNotFound(GitHubHtmlError):
    def __init__(self, login: str) -> None:
        self.login = login
        super().__init__(f"No organization or user named {login!r}")


class RepositoryNotFound(GitHubHtmlError):
    def __init__(self, full_name: str) -> None:
        self.full_name = full_name
        super().__init__(f"Repository {full_name} not found")
