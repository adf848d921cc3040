"""
YAML frontmatter

Documents may open with a ``---`` fenced YAML header. Its fields become the
pageData every directive handler sees.
"""

import re
from typing import Any, Dict, Tuple

import yaml

_FRONTMATTER = re.compile(r"\A---[^\S\n]*\n(.*?)^---[^\S\n]*(?:\n|\Z)", re.DOTALL | re.MULTILINE)


class FrontmatterError(ValueError):
    """Raised when a frontmatter header is not a YAML mapping"""
    pass


def frontmatter_split(text: str) -> Tuple[Dict[str, Any], str, str]:
    """
    Separate the YAML header from the body

    Args:
        text: Whole document

    Returns:
        Tuple (fields, rawHeader, body); fields is {} and rawHeader "" when
        the document has no header

    Raises:
        FrontmatterError: Header is not valid YAML or not a mapping
    """
    match = _FRONTMATTER.match(text)
    if not match:
        return {}, "", text

    raw = match.group(1)
    try:
        fields = yaml.safe_load(raw) if raw.strip() else {}
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid frontmatter: {e}") from e

    if fields is None:
        fields = {}
    if not isinstance(fields, dict):
        raise FrontmatterError(f"Frontmatter must be a mapping, got {type(fields).__name__}")

    return fields, raw, text[match.end():]


def frontmatter_join(raw: str, body: str) -> str:
    """Re-attach an untouched header to a transformed body"""
    if not raw:
        return body
    header = raw if raw.endswith("\n") else raw + "\n"
    return f"---\n{header}---\n{body}"
