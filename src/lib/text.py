"""
Text helpers shared by directive handlers

content_split() cuts a block body into ordered sections on a delimiter
line; args_parse() reads ``key=value`` / ``key="quoted value"`` tails.
"""

import re
from typing import Dict, List

# key=value, key="value with spaces" or key='value with spaces'
_ARG_TOKEN = re.compile(
    r"""([A-Za-z_][\w-]*)=(?:"([^"]*)"|'([^']*)'|([^\s"']\S*))"""
)


def content_split(content: str, delimiter: str = "---") -> List[str]:
    """
    Split block content into sections on a delimiter line

    The delimiter only counts when it fills a whole line, i.e. when it is
    surrounded by newlines. Sections are trimmed; sections that are empty
    after trimming are dropped. Order is preserved.

    Args:
        content: Inner text of a block directive
        delimiter: Line separating sections (default: ---)

    Returns:
        List of non-empty, trimmed sections

    Example:
        >>> content_split("a\\n---\\n \\n---\\nb")
        ['a', 'b']
    """
    if not content:
        return []

    pieces = re.split(r"\n" + re.escape(delimiter) + r"\n", str(content))
    return [piece.strip() for piece in pieces if piece.strip()]


def args_parse(argsString: str) -> Dict[str, str]:
    """
    Parse a directive argument tail into a dict

    Tokens are read one at a time; text between recognised tokens is
    ignored. A repeated key keeps its last value.

    Args:
        argsString: Raw arguments (e.g., 'model=gpt-4 foo="bar baz"')

    Returns:
        Dict mapping argument names to string values

    Example:
        >>> args_parse('model=gpt-4 foo="bar baz"')
        {'model': 'gpt-4', 'foo': 'bar baz'}
    """
    args: Dict[str, str] = {}
    if not argsString:
        return args

    for match in _ARG_TOKEN.finditer(argsString):
        key = match.group(1)
        for value in match.group(2, 3, 4):
            if value is not None:
                args[key] = value
                break

    return args


def args_onlyKeyValues(argsString: str) -> bool:
    """True when an argument tail is empty or made only of key=value tokens"""
    remainder = _ARG_TOKEN.sub("", argsString or "")
    return not remainder.strip()


def int_parse(text: str, default: int) -> int:
    """
    Leading integer of a directive argument, or a default

    Mirrors how layout counts are read: "3" and "3 wide" give 3, while an
    empty, non-numeric or non-positive argument falls back to ``default``.
    """
    match = re.match(r"\s*(\d+)", text or "")
    if not match:
        return default
    value = int(match.group(1))
    return value if value > 0 else default
