from __future__ import annotations

import logging
import re
from urllib.parse import unquote_plus

from bs4 import BeautifulSoup

from ghnet.domain.entities import PackageRef

log = logging.getLogger(__name__)

PACKAGE_ITEM_SELECTOR = "a.select-menu-item"
PACKAGE_ID_PATTERN    = re.compile(r"[^?]+.*\?package_id=([a-zA-Z0-9=]+).*")


def extract_packages(document: BeautifulSoup) -> set[PackageRef]:
    """
    Read the package selector menu of a dependents page.

    Each menu item links to the dependents listing of one package; the
    package id is taken from the decoded href and the name from the
    item's label. Items without an id or with a blank label are skipped.
    """
    packages: set[PackageRef] = set()

    for item in document.select(PACKAGE_ITEM_SELECTOR):
        href  = unquote_plus(item.get("href") or "")
        match = PACKAGE_ID_PATTERN.search(href)
        if not match:
            continue

        label = item.select_one("span")
        name  = label.get_text().strip() if label is not None else ""
        if not name:
            log.debug("Skipping package %s without a label", match.group(1))
            continue

        packages.add(PackageRef(id=match.group(1), name=name))

    return packages
