from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup

from ghnet.domain.entities import DependentsCount
from ghnet.domain.errors import CountUnavailable

log = logging.getLogger(__name__)

COUNT_LABEL_SELECTOR = "a.btn-link:nth-child(1)"
COUNT_PATTERN        = re.compile(r"^\s*([0-9,]+)\s+Repositories\s*$")


def parse_count(text: str) -> DependentsCount:
    """
    Parse a "1,234 Repositories" label (US digit grouping).

    Text that does not look like a count is not an error: it gives an
    unparsed result worth 0.
    """
    match = COUNT_PATTERN.match(text)
    if not match:
        log.debug("Unrecognized dependents label %r", text)
        return DependentsCount.unparsed(text)

    digits = match.group(1).replace(",", "")
    if not digits:
        return DependentsCount.unparsed(text)
    return DependentsCount.counted(int(digits), raw_text=text)


def read_dependents_count(document: BeautifulSoup, url: str | None = None) -> DependentsCount:
    """Read the dependents count from a (possibly package-scoped) dependents page."""
    label = document.select_one(COUNT_LABEL_SELECTOR)
    if label is None:
        raise CountUnavailable(url)
    return parse_count(label.get_text())
