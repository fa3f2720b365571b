import argparse
import json
import logging
import sys
import time

import httpx

from snippet_aggregator.config.settings import Settings, settings
from snippet_aggregator.container import configure_container
from snippet_aggregator.core.models.hit import Report
from snippet_aggregator.core.services.search_service import SearchService

logger = logging.getLogger(__name__)


def wait_for_qdrant(config: Settings, attempts: int = 30) -> bool:
    """Poll the Qdrant health endpoint until it answers.

    Returns:
        True if Qdrant became healthy, False otherwise.
    """
    scheme = "https" if config.qdrant_https else "http"
    url = f"{scheme}://{config.qdrant_host}:{config.qdrant_port}/healthz"
    headers = {"api-key": config.qdrant_api_key} if config.qdrant_api_key else {}

    logger.info(f"Checking Qdrant at {config.qdrant_host}:{config.qdrant_port}")

    for attempt in range(attempts):
        try:
            resp = httpx.get(url, headers=headers, timeout=config.qdrant_timeout)
            if resp.status_code == 200:
                logger.info("Qdrant is healthy")
                return True
            logger.info(f"Qdrant health check returned {resp.status_code}")
        except httpx.HTTPError:
            logger.info(f"Waiting for Qdrant... ({attempt + 1}/{attempts})")
        if attempt + 1 < attempts:
            time.sleep(2)

    logger.error("Qdrant not available")
    return False


def print_report(report: Report, as_json: bool) -> None:
    if as_json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(report.text)


def cmd_health(config: Settings, args: argparse.Namespace) -> int:
    """Health command - wait for Qdrant to come up."""
    return 0 if wait_for_qdrant(config, attempts=args.attempts) else 1


def cmd_scroll(config: Settings, args: argparse.Namespace) -> int:
    """Scroll command - report on stored points."""
    service = configure_container(config).resolve(SearchService)
    print_report(service.scroll(limit=args.limit), args.json)
    return 0


def cmd_search(config: Settings, args: argparse.Namespace) -> int:
    """Search command - semantic search over the collection."""
    service = configure_container(config).resolve(SearchService)
    report = service.search(
        args.query,
        limit=args.limit,
        min_score=args.min_score,
        path_filters=args.path,
    )
    print_report(report, args.json)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snippet-aggregator",
        description="Grouped, deduplicated reports over Qdrant code search hits",
    )
    parser.add_argument("--collection", help="Qdrant collection to query")
    subparsers = parser.add_subparsers(dest="command", required=True)

    health = subparsers.add_parser("health", help="Wait for Qdrant to be healthy")
    health.add_argument("--attempts", type=int, default=30)
    health.set_defaults(handler=cmd_health)

    scroll = subparsers.add_parser("scroll", help="Report on stored points")
    scroll.add_argument("--limit", type=int, default=None)
    scroll.add_argument("--json", action="store_true", help="Print JSON content")
    scroll.set_defaults(handler=cmd_scroll)

    search = subparsers.add_parser("search", help="Semantic code search")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=None)
    search.add_argument("--min-score", type=float, default=None)
    search.add_argument(
        "--path", action="append", default=None, help="File path pattern (repeatable)"
    )
    search.add_argument("--json", action="store_true", help="Print JSON content")
    search.set_defaults(handler=cmd_search)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    config = settings
    if args.collection:
        config = settings.model_copy(update={"qdrant_collection": args.collection})

    logging.basicConfig(level=config.log_level, format="%(message)s")

    try:
        return args.handler(config, args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
