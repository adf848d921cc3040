"""
Two-phase transform of a single document

Phase one awaits the AI pass over the original text; phase two runs the
synchronous directive engine over the result. Markdown cleanup, when
requested, runs before both.
"""

import asyncio
from typing import Any, Dict, Mapping, Optional

from .ai import AIService, ai_resolve, service_fromSettings
from .engine import DirectiveEngine
from .preprocess import preprocess_run


async def content_transform(
    text: str,
    pageData: Optional[Mapping[str, Any]] = None,
    engine: Optional[DirectiveEngine] = None,
    service: Optional[AIService] = None,
    preprocess: bool = False,
) -> str:
    """
    Transform one document body

    Args:
        text: Markdown body (no frontmatter)
        pageData: Frontmatter fields
        engine: Directive engine; None builds one with the built-ins
        service: Completion service; None uses the configured one
        preprocess: Run the Markdown cleanup passes first

    Returns:
        Markdown with every directive resolved, ready for a renderer
    """
    data: Dict[str, Any] = dict(pageData or {})
    engine = engine or DirectiveEngine()
    service = service or service_fromSettings()

    if preprocess:
        text = preprocess_run(text, data)

    text = await ai_resolve(text, service, log=engine.log)
    return engine.process(text, data)


def content_transformSync(
    text: str,
    pageData: Optional[Mapping[str, Any]] = None,
    engine: Optional[DirectiveEngine] = None,
    service: Optional[AIService] = None,
    preprocess: bool = False,
) -> str:
    """Blocking wrapper around content_transform() for callers without an event loop"""
    return asyncio.run(content_transform(text, pageData, engine, service, preprocess))
