"""
Directive registration and match models

Defines the value objects exchanged between the HandlerRegistry, the
DirectiveEngine and the individual directive handlers.
"""

import re
from enum import Enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Set


class DirectiveKind(Enum):
    """
    Recognition forms a registration takes part in

    INLINE handlers see single ``::name value`` lines, BLOCK handlers see
    ``::name args`` ... ``::end`` spans, BOTH handlers see inline lines first
    and then blocks.
    """
    INLINE = "inline"
    BLOCK = "block"
    BOTH = "both"

    @property
    def inline(self) -> bool:
        return self in (DirectiveKind.INLINE, DirectiveKind.BOTH)

    @property
    def block(self) -> bool:
        return self in (DirectiveKind.BLOCK, DirectiveKind.BOTH)


# Directive names usable after the leading ``::``
NAME_PATTERN = re.compile(r"[A-Za-z_][\w-]*")

# Names the engine itself gives meaning to and that cannot be registered
RESERVED_DIRECTIVES: Set[str] = {
    'end',     # ::end - block terminator
}


def name_isValid(name: str) -> bool:
    """Check if a string can be used as a directive name"""
    return isinstance(name, str) and NAME_PATTERN.fullmatch(name) is not None


def reserved_is(directive_name: str) -> bool:
    """Check if a directive name is reserved"""
    return directive_name in RESERVED_DIRECTIVES


@dataclass(frozen=True)
class DirectiveMatch:
    """
    One successful recognition of a directive, handed to its handler

    Attributes:
        kind: DirectiveKind.INLINE or DirectiveKind.BLOCK (never BOTH)
        name: Directive name without the leading ``::``
        args: Trailing text on the opening line, trimmed
        value: Inline form only - same text as ``args``
        content: Block form only - text between opening line and ``::end``, trimmed
        raw: Full matched span, returned unchanged when the handler fails
        pageData: Read-only page context (frontmatter fields)

    Example:
        For "::hero center\\n# Title\\n::end":
        DirectiveMatch(kind=BLOCK, name="hero", args="center",
                       content="# Title", raw="::hero center\\n# Title\\n::end")
    """
    kind: DirectiveKind
    name: str
    args: str = ""
    value: str = ""
    content: str = ""
    raw: str = ""
    pageData: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


# Handler signature: Match -> replacement text
Handler = Callable[[DirectiveMatch], str]


@dataclass(frozen=True)
class Registration:
    """
    Registry record for one directive name

    Attributes:
        name: Directive name
        kind: Which recognition forms to attempt
        priority: Execution order, lower runs earlier
        handler: Function turning a DirectiveMatch into replacement text
    """
    name: str
    kind: DirectiveKind
    priority: int
    handler: Handler


@dataclass(frozen=True)
class MatchSpan:
    """
    Location of a recognised directive inside the content being rewritten

    ``start`` and ``end`` are string offsets, ``content[start:end] == match.raw``.
    """
    start: int
    end: int
    match: DirectiveMatch
