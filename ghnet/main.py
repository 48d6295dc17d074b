"""
main.py — Dependency Wiring (Composition Root)
------------------------------------------------
Reads configuration, builds the concrete collaborators, injects them into
GitHubHtmlClient and runs one command:

    python -m ghnet.main packages   FasterXML/jackson-dataformats-binary
    python -m ghnet.main count      FasterXML/jackson-core
    python -m ghnet.main dependents FasterXML/jackson-dataformats-binary --min-dependents 0 --any-language

Dependency graph:
                         main.py  (wires everything)
                            │
                            ▼
                     GitHubHtmlClient
                            │
              ┌─────────────┼──────────────┐
              ▼             ▼              ▼
    GitHubRestResolver  HttpxPageFetcher  LoggingCrawlReporter
              └──────┬──────┘
                     ▼
               httpx.Client
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

import httpx

from ghnet.application.html_client import GitHubHtmlClient
from ghnet.application.reporting import LoggingCrawlReporter
from ghnet.domain.entities import DependentsQuery
from ghnet.domain.errors import GitHubHtmlError
from ghnet.infrastructure.github_client import GitHubRestResolver
from ghnet.infrastructure.page_fetcher import HttpxPageFetcher

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

REQUEST_TIMEOUT = 30.0
USER_AGENT      = "ghnet/0.1 (+https://github.com)"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )


def _read_env() -> str | None:
    """GITHUB_TOKEN is optional; without it the API allows far fewer requests."""
    token = os.environ.get("GITHUB_TOKEN")
    if not token:
        log.warning("GITHUB_TOKEN is not set - using unauthenticated API rate limits")
    return token


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghnet",
        description="Read GitHub packages and dependents that are only available as HTML",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    commands = parser.add_subparsers(dest="command", required=True)

    packages = commands.add_parser("packages", help="List packages published from a repository")
    packages.add_argument("repository", help="owner/name")

    count = commands.add_parser("count", help="Count repositories depending on a repository")
    count.add_argument("repository", help="owner/name")
    count.add_argument("--package-id", default=None, help="Count dependents of one package only")

    dependents = commands.add_parser("dependents", help="List repositories depending on a repository")
    dependents.add_argument("repository", help="owner/name")
    dependents.add_argument("--package-id", default=None, help="List dependents of one package only")
    dependents.add_argument(
        "--min-dependents",
        type    = int,
        default = 1,
        help    = "Keep dependents having at least this many dependents themselves (default: 1)",
    )
    dependents.add_argument(
        "--any-language",
        action = "store_true",
        help   = "Keep dependents whatever their main language",
    )
    dependents.add_argument(
        "--max-pages",
        type    = int,
        default = None,
        help    = "Stop after this many listing pages (default: no limit)",
    )
    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def run(args: argparse.Namespace, html_client: GitHubHtmlClient) -> int:
    repository = html_client.get_repository(args.repository)

    if args.command == "packages":
        for package in sorted(html_client.list_packages(repository)):
            print(f"{package.id}\t{package.name}")

    elif args.command == "count":
        result = html_client.get_dependents_count_result(repository, args.package_id)
        if not result.is_parsed:
            log.warning("Unrecognized dependents label %r, reporting 0", result.raw_text)
        print(result.value)

    elif args.command == "dependents":
        query = DependentsQuery(
            repository         = repository,
            package_id         = args.package_id,
            min_dependents     = args.min_dependents,
            same_language_only = not args.any_language,
        )
        result = html_client.crawl_dependents(query)
        for dependent in sorted(result.repositories, key=lambda r: r.full_name):
            print(dependent.full_name)
        log.info(
            "%d dependents kept, %d skipped, %d page(s) scanned",
            len(result.repositories),
            len(result.skipped),
            result.pages_visited,
        )

    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    token = _read_env()

    with httpx.Client(headers={"User-Agent": USER_AGENT}, timeout=REQUEST_TIMEOUT) as client:
        html_client = GitHubHtmlClient(
            resolver  = GitHubRestResolver(client=client, token=token),
            fetcher   = HttpxPageFetcher(client=client),
            reporter  = LoggingCrawlReporter(),
            max_pages = getattr(args, "max_pages", None),
        )
        try:
            return run(args, html_client)
        except (GitHubHtmlError, ValueError) as exc:
            log.error("%s", exc)
            return 1


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
