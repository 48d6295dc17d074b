from __future__ import annotations

import logging

from ghnet.domain.entities import RepositoryRef, SkippedCandidate, SkipReason
from ghnet.domain.interfaces import ICrawlReporter

log = logging.getLogger(__name__)

_SKIP_LEVELS = {
    SkipReason.BELOW_THRESHOLD: logging.DEBUG,
}


class LoggingCrawlReporter(ICrawlReporter):
    """Default reporter: writes crawl progress to the standard logging module."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger or log

    def on_page(self, url: str, page_number: int) -> None:
        self._log.debug("Scanning page %d: %s", page_number, url)

    def on_accepted(self, repository: RepositoryRef, count: int) -> None:
        self._log.debug("Accepted %s (%d dependents)", repository.full_name, count)

    def on_skipped(self, skipped: SkippedCandidate) -> None:
        level = _SKIP_LEVELS.get(skipped.reason, logging.WARNING)
        self._log.log(level, "Skipped %s [%s] %s", skipped.full_name, skipped.reason.value, skipped.detail)

    def on_stopped(self, url: str, reason: str) -> None:
        self._log.warning("Pagination stopped at %s: %s", url, reason)
