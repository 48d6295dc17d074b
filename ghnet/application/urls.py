from __future__ import annotations

from enum import Enum
from urllib.parse import urlencode

import httpx

from ghnet.domain.errors import MalformedUrl


class PageKind(str, Enum):
    """Rendered repository pages, by their path below the repository's html_url."""
    DEPENDENTS = "network/dependents"
    PACKAGES   = "packages"


def build_url(base_url: str, kind: PageKind = PageKind.DEPENDENTS, package_id: str | None = None) -> str:
    """
    Build the URL of a rendered page of the repository at `base_url`.

    The package id, when given, goes in a form-encoded `package_id` query
    parameter so that decoding it gives back the id unchanged.
    """
    url = f"{base_url.rstrip('/')}/{kind.value}"
    if package_id is not None:
        url += "?" + urlencode({"package_id": package_id})

    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise MalformedUrl(url) from exc

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise MalformedUrl(url)
    return url
