"""
Scanner for ::name directives

Locates inline (``::name value``) and block (``::name args`` ... ``::end``)
directives in a content string and returns them as an ordered list of
MatchSpan objects. Rewriting is done by splicing replacement strings into
those spans, so a pass never re-reads its own output.

Grammar (multiline, anchored at column zero):

    inline:  ^::NAME[ \\t]+(.+)$
    block:   ^::NAME([^\\n]*)\\n(body, shortest)^::end[ \\t]*$

NAME must be followed by a non-name character, so ``::card`` never
matches a ``::cards`` line.
"""

import re
from functools import lru_cache
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Pattern, Sequence

from ..models.directives import RESERVED_DIRECTIVES, DirectiveKind, DirectiveMatch, MatchSpan

# Any directive-looking line start; used for leftovers
_LEFTOVER = re.compile(r"^::([\w-]+)", re.MULTILINE)
_LEFTOVER_BLOCK = re.compile(r"^::[\w-]+[^\n]*\n[\s\S]*?^::end[^\S\n]*$", re.MULTILINE)
_LEFTOVER_LINE = re.compile(r"^::[\w-]+.*$", re.MULTILINE)


@lru_cache(maxsize=256)
def inline_pattern(name: str) -> Pattern[str]:
    """Compiled inline pattern for a directive name"""
    return re.compile(r"^::" + re.escape(name) + r"[^\S\n]+(.+)$", re.MULTILINE)


@lru_cache(maxsize=256)
def block_pattern(name: str) -> Pattern[str]:
    """Compiled block pattern for a directive name"""
    return re.compile(
        r"^::" + re.escape(name) + r"(?![\w-])([^\n]*)\n([\s\S]*?)^::end[^\S\n]*$",
        re.MULTILINE,
    )


def _pageData_freeze(pageData: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if isinstance(pageData, MappingProxyType):
        return pageData
    return MappingProxyType(dict(pageData or {}))


def directives_scan(
    content: str,
    name: str,
    kind: DirectiveKind,
    pageData: Optional[Mapping[str, Any]] = None,
) -> List[MatchSpan]:
    """
    Find every occurrence of one directive in one recognition form

    Args:
        content: Text to scan
        name: Directive name
        kind: DirectiveKind.INLINE or DirectiveKind.BLOCK
        pageData: Context attached to each match

    Returns:
        Non-overlapping spans in document order

    Example:
        >>> spans = directives_scan("::name a\\nline1\\n::end\\nline2", "name", DirectiveKind.BLOCK)
        >>> spans[0].match.args, spans[0].match.content
        ('a', 'line1')
    """
    if kind is DirectiveKind.BOTH:
        raise ValueError("directives_scan() takes a single form, not BOTH")

    frozen = _pageData_freeze(pageData)
    spans: List[MatchSpan] = []

    if kind is DirectiveKind.INLINE:
        for found in inline_pattern(name).finditer(content):
            value = found.group(1).strip()
            spans.append(MatchSpan(
                start=found.start(),
                end=found.end(),
                match=DirectiveMatch(
                    kind=DirectiveKind.INLINE,
                    name=name,
                    args=value,
                    value=value,
                    raw=found.group(0),
                    pageData=frozen,
                ),
            ))
    else:
        for found in block_pattern(name).finditer(content):
            spans.append(MatchSpan(
                start=found.start(),
                end=found.end(),
                match=DirectiveMatch(
                    kind=DirectiveKind.BLOCK,
                    name=name,
                    args=(found.group(1) or "").strip(),
                    content=(found.group(2) or "").strip(),
                    raw=found.group(0),
                    pageData=frozen,
                ),
            ))

    return spans


def spans_splice(content: str, spans: Sequence[MatchSpan], replacements: Sequence[str]) -> str:
    """
    Replace each span with its replacement, whole-match for whole-match

    Args:
        content: Text the spans were found in
        spans: Non-overlapping spans in document order
        replacements: One string per span

    Returns:
        New text with every span substituted
    """
    if len(spans) != len(replacements):
        raise ValueError(f"{len(spans)} spans but {len(replacements)} replacements")

    parts: List[str] = []
    cursor = 0
    for span, replacement in zip(spans, replacements):
        parts.append(content[cursor:span.start])
        parts.append(replacement)
        cursor = span.end
    parts.append(content[cursor:])
    return "".join(parts)


def unprocessed_find(content: str) -> List[str]:
    """
    Distinct directive names still present at line starts, in first-seen order

    Stray ``::end`` terminators are not reported.

    Example:
        >>> unprocessed_find("::note hi\\ntext\\n::todo\\n::note again")
        ['note', 'todo']
    """
    names = (name for name in _LEFTOVER.findall(content) if name not in RESERVED_DIRECTIVES)
    return list(dict.fromkeys(names))


def unprocessed_strip(content: str) -> str:
    """
    Remove leftover directives: whole ``::name ... ::end`` blocks first,
    then any remaining ``::name ...`` lines
    """
    content = _LEFTOVER_BLOCK.sub("", content)
    return _LEFTOVER_LINE.sub("", content)
