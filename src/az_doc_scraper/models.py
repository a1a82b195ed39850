"""Command tree types and their Fig completion-spec serialization."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, TypeVar, Union

T = TypeVar("T")


def collapse_list(items: Sequence[T]) -> Union[T, List[T]]:
    """Collapse a one-element sequence to its sole element."""
    if len(items) == 1:
        return items[0]
    return list(items)


def collapse_optional_list(items: Sequence[T]) -> Union[T, List[T], None]:
    """Like collapse_list, but an empty sequence becomes None."""
    if not items:
        return None
    return collapse_list(items)


@dataclass
class Argument:
    name: str
    description: str = ""
    is_optional: bool = False
    suggestions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.description:
            data["description"] = self.description
        if self.is_optional:
            data["isOptional"] = True
        if self.suggestions:
            data["suggestions"] = list(self.suggestions)
        return data


@dataclass
class Option:
    names: List[str]
    description: str = ""
    argument: Optional[Argument] = None
    is_persistent: bool = False
    is_required: bool = False

    def __post_init__(self):
        if not self.names:
            raise ValueError("Option requires at least one name")

    @property
    def is_switch(self) -> bool:
        return self.argument is None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": collapse_list(self.names),
            "description": self.description,
        }
        if self.argument is not None:
            data["args"] = self.argument.to_dict()
        if self.is_persistent:
            data["isPersistent"] = True
        if self.is_required:
            data["isRequired"] = True
        return data


@dataclass
class CommandNode:
    name: str
    description: str = ""
    options: List[Option] = field(default_factory=list)
    args: List[Argument] = field(default_factory=list)
    subcommands: List["CommandNode"] = field(default_factory=list)
    load_spec: Optional[str] = None

    def find_subcommand(self, name: str) -> Optional["CommandNode"]:
        for child in self.subcommands:
            if child.name == name:
                return child
        return None

    def add_subcommand(self, node: "CommandNode") -> "CommandNode":
        """Attach a child, merging it into an existing sibling of the same name.

        Returns the node that ends up in the tree.
        """
        existing = self.find_subcommand(node.name)
        if existing is None:
            self.subcommands.append(node)
            return node
        existing.merge(node)
        return existing

    def merge(self, other: "CommandNode") -> None:
        """Fold a same-named node into this one without discarding anything already here."""
        if not self.description and other.description:
            self.description = other.description
        known = {tuple(option.names) for option in self.options}
        for option in other.options:
            if tuple(option.names) not in known:
                self.options.append(option)
                known.add(tuple(option.names))
        if not self.args and other.args:
            self.args = list(other.args)
        if self.load_spec is None:
            self.load_spec = other.load_spec
        for child in other.subcommands:
            self.add_subcommand(child)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.description:
            data["description"] = self.description
        if self.load_spec is not None:
            data["loadSpec"] = self.load_spec
        if self.options:
            data["options"] = [option.to_dict() for option in self.options]
        args = collapse_optional_list([arg.to_dict() for arg in self.args])
        if args is not None:
            data["args"] = args
        if self.subcommands:
            data["subcommands"] = [child.to_dict() for child in self.subcommands]
        return data


@dataclass(frozen=True)
class RawParameterBlock:
    name: str
    description: str
    is_required: bool


@dataclass(frozen=True)
class BaseCommand:
    """One row of the reference index listing."""

    name: str
    description: str
    link: Optional[str] = None


@dataclass
class GroupPage:
    """Everything extracted from one subcommand-group page."""

    url: str
    path: List[str]
    description: str
    commands: List[CommandNode] = field(default_factory=list)
