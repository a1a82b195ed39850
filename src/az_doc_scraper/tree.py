import logging
from typing import Iterable, List, Set, Tuple

from .models import BaseCommand, CommandNode, GroupPage

logger = logging.getLogger(__name__)


class TreeAssembler:
    """Folds parsed group pages into the subtree of a single base command.

    One assembler owns one subtree; pages are added one at a time by the task
    building that base command.
    """

    def __init__(self, root: CommandNode):
        self.root = root

    def node_at(self, path: Iterable[str]) -> CommandNode:
        """Walk path from the root, creating name-only groups as needed."""
        node = self.root
        for segment in path:
            child = node.find_subcommand(segment)
            if child is None:
                child = CommandNode(name=segment)
                node.subcommands.append(child)
            node = child
        return node

    def add_group(self, page: GroupPage) -> CommandNode:
        node = self.node_at(page.path)
        # first non-empty description wins when two pages claim the same path
        if not node.description and page.description:
            node.description = page.description
        for command in page.commands:
            node.add_subcommand(command)
        logger.debug(
            f"Merged {len(page.commands)} commands into {' '.join([self.root.name] + page.path)}"
        )
        return node

    def add_groups(self, pages: Iterable[GroupPage]) -> CommandNode:
        for page in pages:
            self.add_group(page)
        return self.root

    def drop_persistent_options(self, persistent: Iterable[Tuple[str, ...]]) -> int:
        """Remove options re-declaring a persistent option anywhere in the subtree."""
        names: Set[Tuple[str, ...]] = set(persistent)
        removed = 0
        stack: List[CommandNode] = [self.root]
        while stack:
            node = stack.pop()
            kept = [option for option in node.options if tuple(option.names) not in names]
            removed += len(node.options) - len(kept)
            node.options = kept
            stack.extend(node.subcommands)
        return removed


def dedupe_base_commands(commands: Iterable[BaseCommand]) -> List[BaseCommand]:
    """Keep the first listing row for every base command name.

    The index lists some command families twice (e.g. ``ml`` for the v1 and v2
    extensions); the first row is the one kept.
    """
    seen = {}
    for command in commands:
        if command.name in seen:
            logger.info(f"Ignoring duplicate base command {command.name} ({command.link})")
            continue
        seen[command.name] = command
    return list(seen.values())
