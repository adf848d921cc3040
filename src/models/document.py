"""
Document models

Type-safe structures for documents moving through the CLI pipeline.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List


@dataclass
class SourceDocument:
    """
    A Markdown source read from the input directory

    Attributes:
        path: Absolute path of the source file
        relpath: Path relative to the input directory (mirrored in outputdir)
        frontmatter: Parsed YAML frontmatter, used as pageData
        frontmatterRaw: Original frontmatter block text, written back unchanged
        body: Document text after the frontmatter
    """
    path: Path
    relpath: Path
    frontmatter: Dict[str, Any]
    frontmatterRaw: str
    body: str


@dataclass
class TransformedDocument:
    """
    Result of running one SourceDocument through the content pipeline

    Attributes:
        source: The document this result was produced from
        text: Transformed body handed to the Markdown renderer
        unprocessed: Directive names left over after the engine ran
    """
    source: SourceDocument
    text: str
    unprocessed: List[str] = field(default_factory=list)
