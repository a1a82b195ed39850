import re

_ANNOTATION = re.compile(r"\(.*\)")
_WHITESPACE = re.compile(r"\s+")


def strip_trailing_period(content: str) -> str:
    """Remove a single trailing period."""
    return content[:-1] if content.endswith(".") else content


def strip_annotations(label: str) -> str:
    """Drop the parenthesized annotation, e.g. "(preview)", from a command label."""
    return _ANNOTATION.sub("", label, count=1).strip()


def collapse_whitespace(content: str) -> str:
    return _WHITESPACE.sub(" ", content).strip()
