"""Turn raw parameter entries from a reference page into options and arguments.

The reference pages list every parameter as a name cell ("--resource-group -g",
"<NAME>") and a free-text description which may carry trailing
"Accepted values: ..." and "Default value: ..." annotations. Options are told
apart from positional arguments by their first character; whether an option
takes a value is inferred from the annotations and from a few well-known flags.
"""

import logging
import re
from typing import Iterable, List, Tuple

from .models import Argument, Option, RawParameterBlock
from .text import collapse_whitespace, strip_trailing_period

logger = logging.getLogger(__name__)

# Global flags that never take a value
PERSISTENT_SWITCHES = frozenset({"--debug", "--verbose", "--help", "--only-show-errors"})
CONFIRM_SWITCH = "--yes"

_FALSE_DEFAULT = "default value: false"
_ACCEPTED_VALUES = re.compile(
    r"accepted values:\s*(?P<values>.+?)\s*(?:\.(?=\s|$)|(?=default value:)|$)",
    re.IGNORECASE | re.MULTILINE,
)
_DEFAULT_VALUE = re.compile(
    r"default value:\s*.*?(?:\.(?=\s|$)|(?=accepted values:)|$)",
    re.IGNORECASE | re.MULTILINE,
)


def argument_label(names: List[str]) -> str:
    """Longest alias without its leading dashes; ties go to the first alias."""
    return max(names, key=len).lstrip("-")


def is_switch(names: List[str], description: str, is_persistent: bool) -> bool:
    if _FALSE_DEFAULT in description.lower():
        return True
    if is_persistent and PERSISTENT_SWITCHES.intersection(names):
        return True
    return CONFIRM_SWITCH in names


def accepted_values(description: str) -> List[str]:
    match = _ACCEPTED_VALUES.search(description)
    if not match:
        return []
    values: List[str] = []
    for value in match.group("values").split(","):
        value = value.strip()
        if value and value not in values:
            values.append(value)
    return values


def clean_description(description: str) -> str:
    """Strip the value annotations and normalize what is left."""
    cleaned = _DEFAULT_VALUE.sub("", description, count=1)
    cleaned = _ACCEPTED_VALUES.sub("", cleaned, count=1)
    return strip_trailing_period(collapse_whitespace(cleaned))


def classify_option(
    names: str, description: str, is_persistent: bool, is_required: bool
) -> Option:
    aliases = names.split()
    argument = None
    if not is_switch(aliases, description, is_persistent):
        argument = Argument(
            name=argument_label(aliases),
            suggestions=accepted_values(description),
        )
    return Option(
        names=aliases,
        description=clean_description(description),
        argument=argument,
        is_persistent=is_persistent,
        is_required=is_required,
    )


def classify_argument(block: RawParameterBlock) -> Argument:
    return Argument(
        name=block.name.strip(),
        description=strip_trailing_period(block.description.strip()),
        is_optional=not block.is_required,
    )


def split_parameters(
    blocks: Iterable[RawParameterBlock],
) -> Tuple[List[Option], List[Argument]]:
    """Sort parameter entries into options ("-") and positional arguments ("<")."""
    options: List[Option] = []
    arguments: List[Argument] = []
    for block in blocks:
        name = block.name.strip()
        if name.startswith("-"):
            options.append(classify_option(name, block.description, False, block.is_required))
        elif name.startswith("<"):
            arguments.append(classify_argument(block))
        else:
            logger.debug(f"Ignoring parameter {name!r}: neither option nor positional")
    return options, arguments
