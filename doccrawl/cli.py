import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_DELAY_SECONDS, DEFAULT_MAX_PAGES, DEFAULT_USER_AGENT, CrawlConfig
from .engine import Crawler
from .errors import ConfigurationError


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="doccrawl",
        description="Crawl a documentation site breadth-first and save it as JSONL and Markdown.",
    )
    parser.add_argument("--project", required=True, help="Project name, used in output file names.")
    parser.add_argument("--base-url", required=True, help="Site root, e.g. https://docs.example.com.")
    parser.add_argument(
        "--start",
        dest="start_paths",
        nargs="+",
        default=["/"],
        help="One or more start paths or URLs, resolved against --base-url.",
    )
    parser.add_argument("--max-pages", type=int, default=DEFAULT_MAX_PAGES, help="Maximum number of pages to fetch.")
    parser.add_argument("--delay", type=float, default=DEFAULT_DELAY_SECONDS, help="Seconds between fetches.")
    parser.add_argument("--timeout", type=float, default=15.0, help="HTTP read timeout in seconds.")
    parser.add_argument("--retries", type=int, default=0, help="Connection retries per URL.")
    parser.add_argument("--concurrency", type=int, default=1, help="Number of fetches in flight.")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header to send.")
    parser.add_argument("--output-dir", default=None, help="Where to write results (default: app data dir).")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase logging verbosity.")
    return parser.parse_args(argv)


def print_status(message: str) -> None:
    print(message, flush=True)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    log_level = logging.WARNING
    if args.verbose == 1:
        log_level = logging.INFO
    elif args.verbose >= 2:
        log_level = logging.DEBUG
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(threadName)s %(message)s",
    )

    try:
        config = CrawlConfig(
            project_name=args.project,
            base_url=args.base_url,
            start_paths=args.start_paths,
            max_pages=args.max_pages,
            delay_seconds=args.delay,
            request_timeout=args.timeout,
            retries=args.retries,
            concurrency=args.concurrency,
            user_agent=args.user_agent,
            output_dir=args.output_dir,
        )
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    crawler = Crawler(config, status=print_status)
    crawler.run()
    return 0 if crawler.output is not None else 1


if __name__ == "__main__":
    sys.exit(main())
