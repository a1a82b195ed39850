import os
import logging
import asyncio
from typing import List, Optional

from bs4 import BeautifulSoup

from .config import DOCS_BASE_URL, REFERENCE_URL, RELEASE_URL, TOOL_NAME
from .models import BaseCommand, CommandNode, GroupPage, Option
from .page_parser import (
    make_soup,
    parse_base_commands,
    parse_global_options,
    parse_group_page,
    parse_inline_command,
    parse_release_version,
    parse_row_links,
)
from .scheduler import DEFAULT_FETCH_LIMIT, DEFAULT_SUBTREE_LIMIT, ConcurrencyScheduler
from .spec_writer import SpecWriter, load_spec_ref
from .tree import TreeAssembler, dedupe_base_commands

logger = logging.getLogger(__name__)


class DocCrawler:
    """Crawls the az reference docs and writes one completion spec per base command.

    ``fetcher`` is anything with an ``async fetch(url) -> str`` method that
    raises FetchFailure on failure (normally a PageFetcher).
    """

    def __init__(
        self,
        fetcher,
        writer: SpecWriter,
        reference_url: str = REFERENCE_URL,
        release_url: str = RELEASE_URL,
        docs_base_url: str = DOCS_BASE_URL,
        fetch_limit: int = DEFAULT_FETCH_LIMIT,
        subtree_limit: int = DEFAULT_SUBTREE_LIMIT,
    ):
        self.fetcher = fetcher
        self.writer = writer
        self.reference_url = reference_url
        self.release_url = release_url
        self.docs_base_url = docs_base_url
        self.scheduler = ConcurrencyScheduler(fetch_limit, subtree_limit)

        # Add progress tracking
        self.total_processed = 0
        logger.info(f"Initializing crawler for {reference_url}")
        logger.info(f"Output directory: {writer.output_root}")
        logger.info(f"Maximum concurrent page fetches: {fetch_limit}")

    async def resolve_version(self) -> str:
        """Read the latest az release version from the release page title."""
        soup = make_soup(await self.fetcher.fetch(self.release_url))
        version = parse_release_version(soup)
        logger.info(f"Latest az version: {version}")
        return version

    async def load_group_urls(self, url: str) -> List[str]:
        """Collect every group page linked from a base command's landing page."""
        soup = make_soup(await self.fetcher.fetch(url))
        urls = parse_row_links(soup, self.docs_base_url)
        logger.info(f"Found {len(urls)} group pages under {url}")
        return urls

    async def load_group_page(self, url: str) -> GroupPage:
        soup = make_soup(await self.fetcher.fetch(url))
        return parse_group_page(soup, url)

    def _finish(self, node: CommandNode, global_options: List[Option], total: int) -> CommandNode:
        TreeAssembler(node).drop_persistent_options(tuple(o.names) for o in global_options)
        self.total_processed += 1
        logger.info(f"Progress: {self.total_processed}/{total} base commands ({node.name})")
        return node

    async def build_subcommand(
        self,
        command: BaseCommand,
        reference: BeautifulSoup,
        global_options: List[Option],
        total: int,
    ) -> CommandNode:
        """Build the full subtree of one base command."""
        if command.link is None:
            node = parse_inline_command(reference, command.name)
            if not node.description:
                node.description = command.description
            return self._finish(node, global_options, total)

        group_urls = await self.load_group_urls(command.link)
        pages = await asyncio.gather(
            *[self.scheduler.fetch_pool.run(self.load_group_page, url) for url in group_urls]
        )
        # gather keeps request order, so the merge does not depend on which fetch finished first
        assembler = TreeAssembler(CommandNode(name=command.name, description=command.description))
        node = assembler.add_groups(pages)
        return self._finish(node, global_options, total)

    async def build_subcommands(
        self,
        commands: List[BaseCommand],
        reference: BeautifulSoup,
        global_options: List[Option],
    ) -> List[CommandNode]:
        total = len(commands)
        return await asyncio.gather(
            *[
                self.scheduler.subtree_pool.run(
                    self.build_subcommand, command, reference, global_options, total
                )
                for command in commands
            ]
        )

    def build_root(
        self, commands: List[BaseCommand], global_options: List[Option], version: str
    ) -> CommandNode:
        return CommandNode(
            name=TOOL_NAME,
            subcommands=[
                CommandNode(
                    name=command.name,
                    description=command.description,
                    load_spec=load_spec_ref(version, command.name),
                )
                for command in commands
            ],
            options=list(global_options),
        )

    async def run(self, version: Optional[str] = None) -> Optional[str]:
        """Crawl and write all specs; returns the version written, or None if already up to date."""
        self.writer.check_output_root()
        if version is None:
            version = await self.resolve_version()
        if self.writer.is_up_to_date(version):
            logger.info(f"Already up to date ({version})")
            return None

        logger.info("Starting crawl process...")
        reference = make_soup(await self.fetcher.fetch(self.reference_url))
        commands = dedupe_base_commands(
            parse_base_commands(reference, self.reference_url, self.docs_base_url)
        )
        global_options = parse_global_options(reference)
        logger.info(f"Found {len(commands)} base commands and {len(global_options)} global options")

        root = self.build_root(commands, global_options, version)
        subcommands = await self.build_subcommands(commands, reference, global_options)

        for spec in subcommands:
            self.writer.write_subcommand(spec, version)
        # the root spec marks the version as done, so it goes last
        self.writer.write_root(root, version)

        logger.info("Crawl completed!")
        logger.info(
            f"Don't forget to add the new version to {os.path.join(self.writer.spec_dir, 'index.ts')}"
        )
        return version
