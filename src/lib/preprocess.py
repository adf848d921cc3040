"""
Markdown cleanup passes

Small text rewrites applied to a document before directives are resolved:

- ``%% ... %%`` author comments are removed
- ``> [!comment]`` / ``> [!comments]`` callout blocks are removed
- ``==text==`` becomes ``<mark>text</mark>``
- fenced code blocks in selected languages are unwrapped, so their body
  reaches the renderer as raw markup
- ``created`` / ``modified`` frontmatter strings such as
  ``2024-10-25 14:30`` become datetime objects
"""

import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .log import LOG

_COMMENT = re.compile(r"%%[\s\S]*?%%")
_COMMENT_CALLOUT = re.compile(r"(^> \[!comments?\][^\n]*\n(?:^>.*\n?)*)", re.MULTILINE)
_HIGHLIGHT = re.compile(r"==(.+?)==")
_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}")

DATE_FIELDS = ("created", "modified")


def comments_strip(content: str) -> str:
    """Remove ``%% comment %%`` spans, including multi-line ones"""
    return _COMMENT.sub("", content)


def commentCallouts_strip(content: str) -> str:
    """Remove ``> [!comment]`` callouts and their quoted continuation lines"""
    return _COMMENT_CALLOUT.sub("", content)


def highlights_mark(content: str) -> str:
    """
    Convert ``==text==`` to ``<mark>text</mark>``

    Example:
        >>> highlights_mark("a ==key== point")
        'a <mark>key</mark> point'
    """
    return _HIGHLIGHT.sub(r"<mark>\1</mark>", content)


def codeBlocks_unescape(content: str, languages: Iterable[str]) -> str:
    """
    Unwrap fenced code blocks written in the given languages

    Args:
        content: Markdown text
        languages: Fence info strings to unwrap (e.g., ["html", "xml"])

    Returns:
        Text with matching fences replaced by their body
    """
    for language in languages or []:
        pattern = re.compile(
            r"^```" + re.escape(str(language)) + r"\n(.*?)\n```$",
            re.MULTILINE | re.DOTALL,
        )
        content = pattern.sub(lambda found: found.group(1), content)
    return content


def date_parse(value: Any) -> Any:
    """A ``YYYY-MM-DD HH:MM[...]`` string as datetime; anything else unchanged"""
    if not isinstance(value, str) or not _DATE_PREFIX.match(value):
        return value
    try:
        return datetime.fromisoformat(value.strip().replace(" ", "T", 1))
    except ValueError:
        return value


def dates_fix(pageData: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalise ``created`` and ``modified`` fields in place

    Returns:
        The same dict, for chaining
    """
    for field in DATE_FIELDS:
        if pageData.get(field):
            pageData[field] = date_parse(pageData[field])
    return pageData


def escapeLanguages_resolve(pageData: Dict[str, Any], default: Optional[List[str]] = None) -> List[str]:
    """Languages to unwrap: frontmatter ``escapeCodeBlocks`` wins over the setting"""
    from ..config import appsettings

    fromPage = pageData.get("escapeCodeBlocks")
    if fromPage is True:
        return ["html", "xml"]
    if isinstance(fromPage, str):
        return [fromPage]
    if fromPage:
        return list(fromPage)
    if default is not None:
        return list(default)
    return list(appsettings.escape_code_blocks)


def preprocess_run(content: str, pageData: Dict[str, Any], languages: Optional[List[str]] = None) -> str:
    """
    Apply every cleanup pass to one document

    Args:
        content: Markdown body (frontmatter already removed)
        pageData: Frontmatter fields; date fields are normalised in place
        languages: Code-fence languages to unwrap when frontmatter names none

    Returns:
        Cleaned body text
    """
    content = comments_strip(content)
    content = commentCallouts_strip(content)
    content = highlights_mark(content)

    escape = escapeLanguages_resolve(pageData, languages)
    if escape:
        LOG(f"Unwrapping code fences: {', '.join(escape)}", level=3)
        content = codeBlocks_unescape(content, escape)

    dates_fix(pageData)
    return content
