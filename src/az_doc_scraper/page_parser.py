"""Extraction of commands and parameters from az reference pages.

Pages come in two shapes. The reference index (and every group landing page)
carries a table whose rows link to further pages. Group pages carry one
``h2[id^="az-"]`` heading per command, each optionally followed by
"required parameters" and "optional parameters" sections::

    <div><h2 id="az-group-create">az group create</h2></div>
    <p>Create a new resource group.</p>
    <h3 id="az-group-create-required-parameters">Required Parameters</h3>
    <div><code class="parameterName">--location -l</code></div>
    <div class="parameterInfo">Location.</div>
    ...

Parameter entries are discovered by walking the heading's siblings, see
``ParameterWalk``.
"""

import logging
import re
from enum import Enum
from typing import List, Optional
from urllib.parse import urldefrag, urljoin

from bs4 import BeautifulSoup, Tag

from .errors import PageStructureError, VersionResolutionFailure
from .models import BaseCommand, CommandNode, GroupPage, Option, RawParameterBlock
from .parameters import classify_option, split_parameters
from .text import strip_annotations, strip_trailing_period

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")
SECTION_ANCHOR_ID = re.compile(r"-(?:required|optional)-parameters$")

# "az <name>" on the reference index, "az <group> ..." on group pages
INLINE_PREFIX_TOKENS = 1
GROUP_PREFIX_TOKENS = 2


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def absolute_link(href: str, base_url: str) -> str:
    """Resolve href against base_url and drop the page fragment."""
    return urldefrag(urljoin(base_url, href)).url


def _text(element: Optional[Tag]) -> str:
    return element.get_text().strip() if element is not None else ""


class WalkState(Enum):
    BEFORE_BLOCK = "before-block"
    IN_BLOCK = "in-block"
    TERMINATED = "terminated"


class StopReason(Enum):
    NO_ANCHOR = "no-anchor"
    NO_NAME = "no-name"
    NO_DESCRIPTION = "no-description"
    GLOBAL_SCOPE = "global-scope"
    FOREIGN_ANCHOR = "foreign-anchor"
    HEADING_MISMATCH = "heading-mismatch"


class ParameterWalk:
    """Collects the parameter entries that follow one parameter-section anchor.

    Each step looks at the element right after the cursor for a
    ``.parameterName`` and at the next ``.parameterInfo`` sibling for its
    description, then moves the cursor to that description. The walk ends at
    the first entry that has no name or description, sits inside the
    collapsible global-parameters section, or no longer belongs to this anchor.
    """

    def __init__(self, soup: BeautifulSoup, anchor_id: str, is_required: bool):
        self.anchor_id = anchor_id
        self.is_required = is_required
        self.anchor = soup.find(id=anchor_id)
        self.state = WalkState.BEFORE_BLOCK
        self.stop_reason: Optional[StopReason] = None
        self.blocks: List[RawParameterBlock] = []
        self._cursor = self.anchor

    def _stop(self, reason: StopReason):
        self.state = WalkState.TERMINATED
        self.stop_reason = reason
        return None

    def _name_element(self) -> Optional[Tag]:
        wrapper = self._cursor.find_next_sibling(True)
        if wrapper is None:
            return None
        if "parameterName" in wrapper.get("class", []):
            return wrapper
        return wrapper.select_one(".parameterName")

    def _is_foreign_anchor(self, element: Tag) -> bool:
        element_id = element.get("id")
        return bool(element_id) and element_id != self.anchor_id and bool(
            SECTION_ANCHOR_ID.search(element_id)
        )

    def _crosses_foreign_anchor(self, info: Tag) -> bool:
        """True if another parameter section starts between the cursor and info."""
        for element in self._cursor.find_next_siblings(True):
            if element is info:
                return False
            if self._is_foreign_anchor(element):
                return True
            if any(self._is_foreign_anchor(inner) for inner in element.find_all(id=SECTION_ANCHOR_ID)):
                return True
        return False

    def step(self) -> Optional[RawParameterBlock]:
        """Advance by one entry; returns None once the walk has terminated."""
        if self.state is WalkState.TERMINATED:
            return None
        if self.anchor is None:
            return self._stop(StopReason.NO_ANCHOR)

        name_element = self._name_element()
        name = _text(name_element)
        if not name:
            return self._stop(StopReason.NO_NAME)

        info = self._cursor.find_next_sibling(class_="parameterInfo")
        description = _text(info)
        if not description:
            return self._stop(StopReason.NO_DESCRIPTION)
        if name_element.find_parent("details") is not None:
            return self._stop(StopReason.GLOBAL_SCOPE)
        if self._crosses_foreign_anchor(info):
            return self._stop(StopReason.FOREIGN_ANCHOR)
        heading = info.find_previous_sibling("h3")
        if heading is None or heading.get("id") != self.anchor_id:
            return self._stop(StopReason.HEADING_MISMATCH)

        block = RawParameterBlock(
            name=name,
            description=strip_trailing_period(description),
            is_required=self.is_required,
        )
        self.blocks.append(block)
        self._cursor = info
        self.state = WalkState.IN_BLOCK
        return block

    def run(self) -> List[RawParameterBlock]:
        while self.step() is not None:
            pass
        return self.blocks


def parse_parameter_blocks(soup: BeautifulSoup, command_id: str) -> List[RawParameterBlock]:
    required = ParameterWalk(soup, f"{command_id}-required-parameters", True).run()
    optional = ParameterWalk(soup, f"{command_id}-optional-parameters", False).run()
    return required + optional


def parse_command(soup: BeautifulSoup, heading: Tag, prefix_tokens: int) -> CommandNode:
    """Build a leaf command from its heading and the sections following it."""
    label = strip_annotations(heading.get_text())
    tokens = label.split()[prefix_tokens:]
    if not tokens:
        raise PageStructureError(f"Command heading {label!r} has no command name")

    container = heading.find_parent("div")
    if container is None:
        container = heading
    description = _text(container.find_next_sibling("p"))

    options, args = split_parameters(parse_parameter_blocks(soup, heading.get("id", "")))
    return CommandNode(
        name=tokens[-1],
        description=strip_trailing_period(description),
        options=options,
        args=args,
    )


def parse_commands(soup: BeautifulSoup, prefix_tokens: int = GROUP_PREFIX_TOKENS) -> List[CommandNode]:
    return [
        parse_command(soup, heading, prefix_tokens)
        for heading in soup.select('h2[id^="az-"]')
    ]


def parse_inline_command(soup: BeautifulSoup, name: str) -> CommandNode:
    """Parse a base command documented directly on the reference index."""
    heading = soup.find("h2", id=f"az-{name}")
    if heading is None:
        raise PageStructureError(f"No heading for inline command az {name}")
    return parse_command(soup, heading, INLINE_PREFIX_TOKENS)


def parse_group_page(soup: BeautifulSoup, url: str) -> GroupPage:
    title = soup.find("h1")
    if title is None:
        raise PageStructureError(f"Group page {url} has no title")
    path = strip_annotations(title.get_text()).split()[GROUP_PREFIX_TOKENS:]
    return GroupPage(
        url=url,
        path=path,
        description=strip_trailing_period(_text(soup.select_one(".summary"))),
        commands=parse_commands(soup, GROUP_PREFIX_TOKENS),
    )


def parse_base_commands(soup: BeautifulSoup, page_url: str, docs_base_url: str) -> List[BaseCommand]:
    """Read the reference index table, one base command per row."""
    commands = []
    for row in soup.select("table tbody tr"):
        cells = row.find_all("td")
        if not cells:
            continue
        tokens = strip_annotations(cells[0].get_text()).split()
        if len(tokens) < 2:
            logger.debug(f"Skipping listing row {cells[0].get_text().strip()!r}")
            continue

        link = None
        anchor = cells[0].find("a")
        if anchor is not None and anchor.get("href"):
            link = absolute_link(anchor["href"], docs_base_url)
            if link == page_url:
                link = None

        description = _text(cells[1]) if len(cells) > 1 else ""
        commands.append(
            BaseCommand(
                name=tokens[1],
                description=strip_trailing_period(description),
                link=link,
            )
        )
    return commands


def parse_row_links(soup: BeautifulSoup, docs_base_url: str) -> List[str]:
    """Every linked row of a listing table, fragment-free, in first-seen order."""
    links: List[str] = []
    for anchor in soup.select("table tbody tr td:nth-child(1) a"):
        href = anchor.get("href")
        if not href:
            continue
        url = absolute_link(href, docs_base_url)
        if url not in links:
            links.append(url)
    return links


def parse_global_options(soup: BeautifulSoup) -> List[Option]:
    section = next(
        (
            details
            for details in soup.find_all("details")
            if "global" in details.get_text().strip().lower()
        ),
        None,
    )
    if section is None:
        logger.warning("No global parameters section found")
        return []

    names = [_text(element) for element in section.select(".parameterName")]
    descriptions = [_text(element) for element in section.select(".parameterInfo")]
    if len(names) != len(descriptions):
        logger.warning(
            f"Global parameters: {len(names)} names but {len(descriptions)} descriptions"
        )
    return [
        classify_option(name, description, True, False)
        for name, description in zip(names, descriptions)
    ]


def parse_release_version(soup: BeautifulSoup) -> str:
    title = _text(soup.find("title"))
    match = VERSION_PATTERN.search(title)
    if not match:
        raise VersionResolutionFailure(f"No version found in release title {title!r}")
    return match.group(0)
