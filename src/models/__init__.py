"""
Models package for layoutsyntax

Contains data structures and type definitions for the directive pipeline.
"""

from .state import ProgramState, pipeline
from .directives import (
    DirectiveKind,
    DirectiveMatch,
    Registration,
    MatchSpan,
    Handler,
    RESERVED_DIRECTIVES,
)
from .document import SourceDocument, TransformedDocument

__all__ = [
    "ProgramState",
    "pipeline",
    "DirectiveKind",
    "DirectiveMatch",
    "Registration",
    "MatchSpan",
    "Handler",
    "RESERVED_DIRECTIVES",
    "SourceDocument",
    "TransformedDocument",
]
