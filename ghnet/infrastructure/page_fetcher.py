from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup

from ghnet.domain.errors import FetchFailed, MalformedUrl
from ghnet.domain.interfaces import IPageFetcher

log = logging.getLogger(__name__)

HTML_PARSER = "html.parser"


class HttpxPageFetcher(IPageFetcher):
    """
    Concrete IPageFetcher: one GET through an injected httpx.Client,
    parsed with BeautifulSoup.

    No retries. Redirects are followed by the client; any transport error
    or non-2xx status becomes FetchFailed.
    """

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    def fetch(self, url: str) -> BeautifulSoup:
        try:
            response = self._client.get(url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise FetchFailed(url, status_code=exc.response.status_code) from exc
        except httpx.InvalidURL as exc:
            raise MalformedUrl(url) from exc
        except httpx.HTTPError as exc:
            raise FetchFailed(url, reason=str(exc) or type(exc).__name__) from exc

        log.debug("GET %s -> %d (%d bytes)", url, response.status_code, len(response.content))
        return BeautifulSoup(response.text, HTML_PARSER)
