import sys
import asyncio
import logging
import argparse
from typing import List, Optional

from .config import ScraperConfig
from .doc_crawler import DocCrawler
from .errors import PreconditionFailure, ScraperError
from .page_fetcher import PageFetcher
from .spec_writer import SpecWriter

logger = logging.getLogger(__name__)


def build_parser(config: ScraperConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="az-doc-scraper",
        description="Generate az completion specs from the Azure CLI reference docs",
    )
    parser.add_argument('--output', '-o', default=config.output_root, help='Root directory the az specs are written under')
    parser.add_argument('--version', '-V', dest='az_version', help='az version to generate (default: latest release)')
    parser.add_argument('--concurrent', '-c', type=int, default=config.fetch_limit, help='Number of group pages fetched concurrently')
    parser.add_argument('--retries', type=int, default=config.max_retries, help='Retries per failed fetch')
    parser.add_argument('--log-level', default=config.log_level, help='Logging level')
    return parser


async def run(args: argparse.Namespace, config: ScraperConfig) -> Optional[str]:
    writer = SpecWriter(args.output)
    async with PageFetcher(timeout=config.timeout, max_retries=args.retries) as fetcher:
        crawler = DocCrawler(
            fetcher,
            writer,
            reference_url=config.reference_url,
            release_url=config.release_url,
            docs_base_url=config.docs_base_url,
            fetch_limit=args.concurrent,
            subtree_limit=config.subtree_limit,
        )
        return await crawler.run(args.az_version)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        config = ScraperConfig.from_env()
    except ValueError as e:
        logging.basicConfig()
        logger.error(f"Invalid configuration: {e}")
        return 2

    parser = build_parser(config)
    args = parser.parse_args(argv)
    level = args.log_level.upper()
    if not isinstance(logging.getLevelName(level), int):
        parser.error(f"unknown log level {args.log_level!r}")
    logging.basicConfig(level=level)

    try:
        asyncio.run(run(args, config))
    except PreconditionFailure as e:
        logger.error(str(e))
        return 1
    except ScraperError as e:
        logger.error(f"Scrape aborted: {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
