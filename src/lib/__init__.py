"""
layoutsyntax - Markdown layout directive preprocessor

Core library: handler registry, directive engine, AI resolution pass and
the built-in directive set.
"""

__version__ = "1.0.0"

from .registry import HandlerRegistry, DirectiveNameError
from .engine import DirectiveEngine, HandlerError
from .scanner import directives_scan, spans_splice, unprocessed_find, unprocessed_strip
from .text import content_split, args_parse
from .conditions import condition_evaluate
from .builtins import builtins_register
from .ai import (
    AIService,
    AIServiceError,
    DisabledAIService,
    OpenRouterService,
    ai_resolve,
    service_fromSettings,
)
from .pipeline import content_transform, content_transformSync
from .preprocess import preprocess_run
from .frontmatter import frontmatter_split, frontmatter_join
from .log import LOG, state_connectToLogger

__all__ = [
    "HandlerRegistry",
    "DirectiveNameError",
    "DirectiveEngine",
    "HandlerError",
    "directives_scan",
    "spans_splice",
    "unprocessed_find",
    "unprocessed_strip",
    "content_split",
    "args_parse",
    "condition_evaluate",
    "builtins_register",
    "AIService",
    "AIServiceError",
    "DisabledAIService",
    "OpenRouterService",
    "ai_resolve",
    "service_fromSettings",
    "content_transform",
    "content_transformSync",
    "preprocess_run",
    "frontmatter_split",
    "frontmatter_join",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
