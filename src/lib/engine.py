"""
Directive engine

Runs every registered handler over a document, in priority order, and
deals with directives nobody claimed.

The engine operates in three steps per call to process():
1. Ordering: registrations sorted by priority (stable on ties)
2. Rewriting: for each registration, scan the current text for its inline
   and/or block form and splice in the handler results
3. Leftovers: report or strip ``::name`` lines that no handler matched

Key properties:
- Synchronous and pure apart from logging; one instance can serve many
  documents concurrently since only the registry is shared, read-only
- A handler sees the output of every handler that ran before it
- A handler that raises leaves its span byte-for-byte unchanged

Example:
    >>> engine = DirectiveEngine()
    >>> engine.process("::columns 2\\nLeft\\n---\\nRight\\n::end")
    '<div class="grid gap-4">...'
"""

from typing import Any, List, Mapping, Optional

from loguru import logger

from ..models.directives import DirectiveKind, Registration
from .log import LOG, DiagnosticLogger
from .registry import HandlerRegistry
from .scanner import directives_scan, spans_splice, unprocessed_find, unprocessed_strip
from . import text as _text


class HandlerError(Exception):
    """
    Raised by a handler that cannot produce output for a match

    Handlers may raise any exception; this one exists so a handler can say
    so explicitly. The engine logs it and keeps the original text.
    """
    pass


UNPROCESSED_POLICIES = ("warn", "strip")


class DirectiveEngine:
    """
    Applies registered directive handlers to Markdown text

    Responsibilities:
    - Order registrations by priority
    - Run inline and block rewrites for each registration
    - Contain handler failures
    - Report or strip unprocessed directives
    """

    def __init__(
        self,
        registry: Optional[HandlerRegistry] = None,
        unprocessed_policy: Optional[str] = None,
        delimiter: Optional[str] = None,
        log: Optional[DiagnosticLogger] = None,
    ) -> None:
        """
        Initialize the engine

        Args:
            registry: Handlers to run; None builds a registry with all
                      built-in directives registered
            unprocessed_policy: "warn" (log, keep text) or "strip" (remove);
                                None uses the configured default
            delimiter: Section delimiter for content_split(); None uses the
                       configured default
            log: Logger receiving handler errors and leftover warnings;
                 None uses loguru's logger
        """
        from ..config import appsettings

        if registry is None:
            from .builtins import builtins_register
            registry = HandlerRegistry(default_priority=appsettings.default_priority)
            builtins_register(registry, delimiter=delimiter)

        policy = unprocessed_policy or appsettings.unprocessed_policy
        if policy not in UNPROCESSED_POLICIES:
            raise ValueError(
                f"Unknown unprocessed policy {policy!r}; expected one of {UNPROCESSED_POLICIES}"
            )

        self.registry = registry
        self.unprocessed_policy = policy
        self.delimiter = delimiter or appsettings.section_delimiter
        self.log: DiagnosticLogger = log if log is not None else logger

    def add(self, name: str, options: Any = None, handler: Any = None) -> Registration:
        """Register a custom directive on this engine's registry"""
        return self.registry.add(name, options, handler)

    def process(self, content: str, pageData: Optional[Mapping[str, Any]] = None) -> str:
        """
        Run all registered handlers over a document

        Args:
            content: Raw Markdown text (AI directives already resolved)
            pageData: Page context passed to every handler (e.g. frontmatter)

        Returns:
            Text with recognised directives replaced by handler output;
            leftovers kept (warn policy) or removed (strip policy)
        """
        text = str(content or "")
        pageData = pageData or {}

        if "::" not in text:
            return text

        for registration in self.registry.entries_sorted():
            if registration.kind.inline:
                text = self.form_rewrite(text, registration, DirectiveKind.INLINE, pageData)
            if registration.kind.block:
                text = self.form_rewrite(text, registration, DirectiveKind.BLOCK, pageData)

        return self.unprocessed_handle(text)

    def form_rewrite(
        self,
        content: str,
        registration: Registration,
        kind: DirectiveKind,
        pageData: Mapping[str, Any],
    ) -> str:
        """
        Rewrite every occurrence of one directive in one form

        Spans are collected first and spliced afterwards, so text produced
        by this handler is not scanned again by the same handler.

        Args:
            content: Current document text
            registration: Directive to apply
            kind: DirectiveKind.INLINE or DirectiveKind.BLOCK
            pageData: Page context

        Returns:
            Rewritten text
        """
        spans = directives_scan(content, registration.name, kind, pageData)
        if not spans:
            return content

        LOG(f"::{registration.name} ({kind.value}): {len(spans)} match(es)", level=3)

        replacements: List[str] = []
        for span in spans:
            replacements.append(self.handler_invoke(registration, span.match))

        return spans_splice(content, spans, replacements)

    def handler_invoke(self, registration: Registration, match: Any) -> str:
        """
        Call a handler, falling back to the raw match on failure

        Any exception is logged and swallowed; the document pass continues.
        A handler returning None produces an empty replacement.
        """
        try:
            result = registration.handler(match)
        except Exception as e:
            self.log.error(f"Error in ::{registration.name} handler: {e}")
            return match.raw

        if result is None:
            return ""
        return str(result)

    def unprocessed_handle(self, content: str) -> str:
        """Apply the configured policy to directives no handler claimed"""
        leftovers = unprocessed_find(content)
        if not leftovers:
            return content

        if self.unprocessed_policy == "strip":
            for name in leftovers:
                self.log.debug(f"Removed unprocessed directive ::{name}")
            return unprocessed_strip(content)

        for name in leftovers:
            self.log.warning(f"Unprocessed directive ::{name}")
        return content

    # Helpers exposed to handlers that hold an engine reference

    def content_split(self, content: str) -> List[str]:
        """Split block content on this engine's delimiter"""
        return _text.content_split(content, self.delimiter)

    @staticmethod
    def args_parse(argsString: str) -> dict:
        """Parse key=value arguments (see lib.text.args_parse)"""
        return _text.args_parse(argsString)
