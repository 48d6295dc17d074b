from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

import httpx

from ghnet.domain.entities import OwnerKind, OwnerRef, RepositoryRef
from ghnet.domain.errors import ResolverError
from ghnet.domain.interfaces import IRepositoryResolver

log = logging.getLogger(__name__)

GITHUB_API_URL   = "https://api.github.com"
RATE_LIMIT_SLEEP = 60
MAX_RETRIES      = 3


class RateLimitError(Exception):
    """Raised when GitHub answers with an exhausted rate limit."""

    def __init__(self, wait: float) -> None:
        self.wait = wait
        super().__init__(f"Rate limited, retry in {wait:.0f}s")


class GitHubRestResolver(IRepositoryResolver):
    """
    Concrete IRepositoryResolver for GitHub's REST API.

    The httpx.Client is injected; its lifecycle belongs to the caller.
    404 is an answer (None), not an error. Rate limits and transport
    errors are retried up to MAX_RETRIES times, then ResolverError.
    """

    def __init__(
        self,
        client: httpx.Client,
        token: str | None = None,
        api_url: str = GITHUB_API_URL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client  = client
        self._api_url = api_url.rstrip("/")
        self._sleep   = sleep
        self._headers = {"Accept": "application/vnd.github+json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    # Anti-Corruption Layer
    @staticmethod
    def _parse_owner(data: dict, fallback: OwnerKind) -> OwnerRef:
        try:
            kind = OwnerKind.ORGANIZATION if data.get("type") == OwnerKind.ORGANIZATION.value else fallback
            return OwnerRef(login=data["login"], kind=kind)
        except (AttributeError, KeyError, TypeError) as exc:
            raise ResolverError(f"Unexpected owner payload: {exc!r}") from exc

    @staticmethod
    def _parse_repository(data: dict) -> RepositoryRef:
        """
        Translate a REST repository payload into a RepositoryRef.

        GitHub sends:        We keep:
          "owner.login"   →  owner_login
          "html_url"      →  html_url
          "language"      →  language (None when GitHub has not detected one)
        """
        try:
            return RepositoryRef(
                owner_login = data["owner"]["login"],
                name        = data["name"],
                html_url    = data["html_url"],
                language    = data.get("language"),
            )
        except (AttributeError, KeyError, TypeError) as exc:
            raise ResolverError(f"Unexpected repository payload: {exc}") from exc

    def _get(self, path: str) -> dict[str, Any] | None:
        """GET an API path. Returns the JSON body, or None on 404."""
        url = f"{self._api_url}{path}"

        for attempt in range(MAX_RETRIES):
            last_attempt = attempt + 1 == MAX_RETRIES
            try:
                response = self._client.get(url, headers=self._headers, follow_redirects=True)

                if response.status_code == 404:
                    return None
                if self._is_rate_limited(response):
                    raise RateLimitError(self._rate_limit_wait(response))

                response.raise_for_status()
                return response.json()

            except RateLimitError as exc:
                if exc.wait > RATE_LIMIT_SLEEP:
                    raise ResolverError(f"GET {path} rate limited for another {exc.wait:.0f}s") from exc
                if last_attempt:
                    break
                log.info("Rate limited on %s - sleeping %.0fs before retry …", path, exc.wait)
                self._sleep(exc.wait)

            except httpx.HTTPStatusError as exc:
                if exc.response.status_code < 500:
                    raise ResolverError(f"GET {path} failed: HTTP {exc.response.status_code}") from exc
                if last_attempt:
                    break
                wait = 2 ** attempt
                log.warning("HTTP error attempt %d/%d: %s — retrying in %ds", attempt + 1, MAX_RETRIES, exc, wait)
                self._sleep(wait)

            except httpx.RequestError as exc:
                if last_attempt:
                    break
                wait = 2 ** attempt
                log.warning("Request error attempt %d/%d: %s — retrying in %ds", attempt + 1, MAX_RETRIES, exc, wait)
                self._sleep(wait)

            except ValueError as exc:
                raise ResolverError(f"GET {path} did not return JSON: {exc}") from exc

        raise ResolverError(f"Exhausted {MAX_RETRIES} retries for GET {path}")

    @staticmethod
    def _is_rate_limited(response: httpx.Response) -> bool:
        if response.status_code == 429:
            return True
        if response.status_code != 403:
            return False
        # secondary rate limits keep a non-zero remaining count but send Retry-After
        return response.headers.get("X-RateLimit-Remaining") == "0" or "Retry-After" in response.headers

    @staticmethod
    def _rate_limit_wait(response: httpx.Response) -> float:
        retry_after = response.headers.get("Retry-After")
        if retry_after and retry_after.isdigit():
            return float(retry_after)

        reset_at = response.headers.get("X-RateLimit-Reset")
        if reset_at and reset_at.isdigit():
            return max(int(reset_at) - time.time(), 0) + 1
        return RATE_LIMIT_SLEEP

    # IRepositoryResolver implementation
    def resolve_owner(self, login: str) -> OwnerRef | None:
        """Organizations first, then users."""
        data = self._get(f"/orgs/{login}")
        if data is not None:
            return self._parse_owner(data, OwnerKind.ORGANIZATION)

        data = self._get(f"/users/{login}")
        if data is not None:
            return self._parse_owner(data, OwnerKind.USER)

        log.debug("No organization or user named %s", login)
        return None

    def resolve_repository(self, owner: OwnerRef, name: str) -> RepositoryRef | None:
        data = self._get(f"/repos/{owner.login}/{name}")
        if data is None:
            log.debug("Repository %s/%s not found", owner.login, name)
            return None
        return self._parse_repository(data)
