import argparse
import logging
import os
import sys

import structlog
from dotenv import load_dotenv

from go2web.cache import ResponseCache
from go2web.config import Config
from go2web.errors import Go2WebError
from go2web.fetcher import Fetcher
from go2web.search import search

logger = structlog.get_logger(__name__)


def configure_logging(level):
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="go2web",
        description="go2web - tiny fetcher & searcher (no HTTP libs)",
        formatter_class=argparse.RawTextHelpFormatter,
    )

    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument('-u', '--url', help='fetch URL and print the response')
    group.add_argument('-s', '--search', nargs='+', metavar='TERM',
                       help='search the terms (DuckDuckGo) and print the top 10 links')
    parser.add_argument('-v', '--verbose', action='store_true', help='debug logging on stderr')
    parser.add_argument('--no-cache', action='store_true', help='neither read nor write the response cache')
    return parser


def build_fetcher(config, use_cache=True):
    cache = None
    if use_cache and config.cache.get('enabled', True):
        cache = ResponseCache(
            cache_dir=os.path.expanduser(str(config.cache['dir'])),
            ttl=config.cache['ttl'],
        )
    return Fetcher(
        cache=cache,
        timeout=config.http.get('timeout'),
        max_redirects=config.http['max_redirects'],
        user_agent=config.http['user_agent'],
    )


def print_results(results):
    if not results:
        print("No results found")
        return
    for i, result in enumerate(results, 1):
        print(f"{i}. {result['title']}")
        print(f"   {result['url']}")
        print()


def main(argv=None):
    args = build_parser().parse_args(argv)

    load_dotenv()
    try:
        config = Config()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    level = "DEBUG" if args.verbose else str(config.logging.get('level', 'WARNING')).upper()
    configure_logging(level)

    fetcher = build_fetcher(config, use_cache=not args.no_cache)
    try:
        if args.url:
            result = fetcher.fetch(args.url)
            if result.from_cache:
                logger.info("using cached response", url=result.url)
            print(result.text)
        else:
            terms = " ".join(args.search)
            print_results(search(fetcher, terms, base=config.search['url']))
    except Go2WebError as e:
        logger.debug("fetch failed", error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
