from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterator, List, Optional, Sequence

from metascraper.config import Settings, load_settings
from metascraper.errors import InputError, InvalidConfig
from metascraper.fetcher import Fetcher
from metascraper.log import LOGGER_NAME, setup_logging
from metascraper.scraper import Scraper
from metascraper.storage import CsvStorage

logger = logging.getLogger(f"{LOGGER_NAME}.main")


def _iter_urls(urls: Sequence[str], input_path: Optional[str]) -> Iterator[str]:
    """Yield command-line URLs first, then the lines of input_path (lazily)."""
    for url in urls:
        yield url
    if input_path:
        try:
            with open(input_path, "r", encoding="utf-8") as f:
                for line in f:
                    url = line.strip()
                    if url:
                        yield url
        except (OSError, UnicodeDecodeError) as exc:
            raise InputError(f"cannot read {input_path}: {exc}") from exc


def _check_input(input_path: Optional[str]) -> None:
    if not input_path:
        return
    try:
        with open(input_path, "r", encoding="utf-8"):
            pass
    except OSError as exc:
        raise InputError(f"cannot read {input_path}: {exc}") from exc


def _merge_settings(settings: Settings, args: argparse.Namespace) -> Settings:
    return Settings(
        retry_count=args.retries if args.retries is not None else settings.retry_count,
        timeout=args.timeout or settings.timeout,
        parallel_req_count=args.parallel if args.parallel is not None else settings.parallel_req_count,
        csv_filename=args.output or settings.csv_filename,
        log_level=(args.log_level or settings.log_level).upper(),
    )


def run(urls: Sequence[str], settings: Settings, input_path: Optional[str] = None) -> int:
    """Scrape urls into settings.csv_filename. Returns the number of records written."""
    fetcher = Fetcher(settings.timeout, settings.retry_count)
    scraper = Scraper(fetcher, settings.parallel_req_count)

    count = 0
    with CsvStorage(settings.csv_filename) as storage:
        for record in scraper.scrape(_iter_urls(urls, input_path)):
            storage.write(record)
            count += 1
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch pages and write their title and meta description to CSV.")
    parser.add_argument("urls", nargs="*", help="URLs to scrape")
    parser.add_argument("--input", default=None, help="File with one URL per line")
    parser.add_argument("--output", default=None, help="Output CSV path (env CSV_FILENAME, default result.csv)")
    parser.add_argument("--timeout", default=None, help="Per-request timeout, e.g. 10s (env TIMEOUT)")
    parser.add_argument("--retries", type=int, default=None, help="Attempts per URL (env RETRY_COUNT, default 3)")
    parser.add_argument(
        "--parallel", type=int, default=None, help="Max concurrent requests (env PARALLEL_REQ_COUNT, default 10)"
    )
    parser.add_argument("--log-level", default=None, help="Log level (env LOG_LEVEL, default INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = _merge_settings(load_settings(), args)
        setup_logging(settings.log_level)
    except InvalidConfig as exc:
        setup_logging("INFO")
        logger.error("failed to read config", extra={"fields": {"err": str(exc)}})
        return 1

    logger.info("starting app")
    try:
        _check_input(args.input)
        count = run(args.urls, settings, input_path=args.input)
    except InputError as exc:
        logger.error("failed to read input", extra={"fields": {"path": args.input, "err": str(exc)}})
        return 1
    except InvalidConfig as exc:
        logger.error("failed to create scraper", extra={"fields": {"err": str(exc)}})
        return 1
    except OSError as exc:
        logger.error("failed to write output", extra={"fields": {"path": settings.csv_filename, "err": str(exc)}})
        return 1

    logger.info("app finished", extra={"fields": {"records": count, "output": settings.csv_filename}})
    return 0


if __name__ == "__main__":
    sys.exit(main())
