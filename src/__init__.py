"""
layoutsyntax - Markdown layout directive preprocessor

Expands ``::name`` inline and block directives in Markdown into HTML
fragments for a downstream Markdown renderer.
"""

__version__ = "1.0.0"

from .lib import (
    DirectiveEngine,
    HandlerRegistry,
    ai_resolve,
    content_transform,
    content_transformSync,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "DirectiveEngine",
    "HandlerRegistry",
    "ai_resolve",
    "content_transform",
    "content_transformSync",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
