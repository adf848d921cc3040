"""
Built-in layout directives

Each directive is a plain handler (DirectiveMatch) -> str registered via
HandlerRegistry.add(), the same call site authors use for their own
directives. Output is HTML meant to be passed on to the Markdown renderer,
so block bodies are surrounded by blank lines to stay Markdown.

Priorities nest blocks: code runs first, then leaf blocks and inline
notes, then single-section wrappers such as ``card``, then multi-section
layouts. A block inside another block must run earlier, since a block
body ends at the first ``::end``. ``cards`` is registered before ``card``.
"""

import html
import re
from typing import Callable, Dict, List, Optional

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from ..models.directives import DirectiveMatch
from .conditions import condition_evaluate
from .icons import icon_get
from .lexer import LayoutSyntaxLexer
from .registry import HandlerRegistry
from .text import content_split, int_parse

# Layout width of the CSS grid the column classes refer to
GRID_COLUMNS = 12

# Leaf blocks run before layout blocks so they can sit inside them
LEAF_PRIORITY = 50
WRAPPER_PRIORITY = 75
CODE_PRIORITY = 10

# Directive-looking lines inside a code listing
_LISTING_DIRECTIVE = re.compile(r"^::", re.MULTILINE)


def span_for(count: int) -> int:
    """Grid span of one of ``count`` equal columns"""
    return max(1, GRID_COLUMNS // max(1, count))


def builtins_register(registry: HandlerRegistry, delimiter: Optional[str] = None) -> HandlerRegistry:
    """
    Register every built-in directive

    Args:
        registry: Registry to populate
        delimiter: Section delimiter for multi-section blocks (default from settings)

    Returns:
        The same registry, for chaining
    """
    if delimiter is None:
        from ..config import appsettings
        delimiter = appsettings.section_delimiter

    codeDirectives_register(registry)
    layoutDirectives_register(registry, delimiter)
    containerDirectives_register(registry)
    mediaDirectives_register(registry, delimiter)
    noteDirectives_register(registry)
    interactiveDirectives_register(registry)
    logicDirectives_register(registry)
    return registry


def codeDirectives_register(registry: HandlerRegistry) -> None:
    """Register syntax highlighted code blocks"""
    from ..config import appsettings

    def code_handler(match: DirectiveMatch) -> str:
        """Handle ::code LANGUAGE - Pygments highlighted block"""
        language = match.args.split()[0] if match.args else "text"

        lexer: Lexer
        try:
            if language.lower() in LayoutSyntaxLexer.aliases:
                lexer = LayoutSyntaxLexer()
            else:
                lexer = get_lexer_by_name(language)
        except ClassNotFound:
            lexer = TextLexer()

        formatter = HtmlFormatter(style=appsettings.pygments_style, noclasses=True)
        listing = highlight(match.content, lexer, formatter)
        # Later passes must not see the listing as directives
        return _LISTING_DIRECTIVE.sub("&#58;:", listing)

    registry.add("code", {"priority": CODE_PRIORITY}, code_handler)


def layoutDirectives_register(registry: HandlerRegistry, delimiter: str) -> None:
    """Register multi-column layout directives"""

    def grid_html(sections: List[str], spans: List[int]) -> str:
        html_parts = ['<div class="grid gap-4">\n']
        for section, span in zip(sections, spans):
            html_parts.append(f'  <div class="col-12 md:col-{span}">\n\n{section}\n\n  </div>\n')
        html_parts.append("</div>\n")
        return "".join(html_parts)

    def columns_handler(match: DirectiveMatch) -> str:
        """Handle ::columns N - equal columns, N defaults to 2"""
        count = int_parse(match.args, 2)
        sections = content_split(match.content, delimiter)
        return grid_html(sections, [span_for(count)] * len(sections))

    def split_handler(match: DirectiveMatch) -> str:
        """Handle ::split 8/4 - asymmetric columns"""
        sections = content_split(match.content, delimiter)
        sizes = [int(n) for n in re.findall(r"\d+", match.args or "") if int(n) > 0]
        fallback = span_for(len(sections))
        spans = [sizes[i] if i < len(sizes) else fallback for i in range(len(sections))]
        return grid_html(sections, spans)

    def stackMobile_handler(match: DirectiveMatch) -> str:
        """Handle ::stack-mobile - as many equal columns as sections"""
        sections = content_split(match.content, delimiter)
        return grid_html(sections, [span_for(len(sections))] * len(sections))

    def grid_handler(match: DirectiveMatch) -> str:
        """Handle ::grid N - static content grid, N defaults to 3"""
        count = int_parse(match.args, 3)
        items = content_split(match.content, delimiter)
        html_parts = [f'<div class="grid-{count}">\n']
        for item in items:
            html_parts.append(f'  <div class="sm:row">\n\n{item}\n\n  </div>\n')
        html_parts.append("</div>\n")
        return "".join(html_parts)

    def collection_handler(match: DirectiveMatch) -> str:
        """Handle ::collection NAME N - loop scaffold for the template engine"""
        parts = (match.args or "").split()
        if not parts:
            return match.raw
        collection = parts[0]
        count = int_parse(parts[1] if len(parts) > 1 else "", 3)
        item_template = match.content or (
            "<h3>{{ item.title }}</h3>\n<p>{{ item.description }}</p>"
        )
        return (
            '<div class="grid">\n'
            f"{{% for item in {collection} %}}\n"
            f'  <div class="sm:row col-{span_for(count)}">\n'
            f"{item_template}\n"
            "  </div>\n"
            "{% endfor %}\n"
            "</div>"
        )

    def cards_handler(match: DirectiveMatch) -> str:
        """Handle ::cards N - grid of cards, N defaults to 3"""
        count = int_parse(match.args, 3)
        cards = content_split(match.content, delimiter)
        html_parts = ['<div class="grid gap-4">\n']
        for card in cards:
            html_parts.append(
                f'  <div class="col-12 md:col-{span_for(count)}">\n'
                f'    <div class="card">\n\n{card}\n\n    </div>\n'
                "  </div>\n"
            )
        html_parts.append("</div>\n")
        return "".join(html_parts)

    registry.add("columns", columns_handler)
    registry.add("split", split_handler)
    registry.add("stack-mobile", stackMobile_handler)
    registry.add("grid", grid_handler)
    registry.add("collection", collection_handler)
    registry.add("cards", cards_handler)


def containerDirectives_register(registry: HandlerRegistry) -> None:
    """Register single-section wrappers"""

    def make_container(open_tag: str, close_tag: str) -> Callable[[DirectiveMatch], str]:
        """Factory for simple wrapping containers"""
        def handler(match: DirectiveMatch) -> str:
            """Wrap block content, keeping it Markdown"""
            return f"{open_tag}\n\n{match.content}\n\n{close_tag}\n"
        return handler

    container_specs = [
        ("small", '<div class="container-small">', "</div>"),
        ("accent", '<div class="container-accent">', "</div>"),
        ("feature", '<div class="container-feature">', "</div>"),
        ("center", '<div class="text-center">', "</div>"),
        ("card", '<div class="card">', "</div>"),
    ]

    for name, open_tag, close_tag in container_specs:
        registry.add(name, {"priority": WRAPPER_PRIORITY}, make_container(open_tag, close_tag))

    registry.add(
        "testimonial",
        {"priority": LEAF_PRIORITY},
        make_container('<blockquote class="testimonial">', "</blockquote>"),
    )

    def hero_handler(match: DirectiveMatch) -> str:
        """Handle ::hero [center|left|right]"""
        align = (match.args or "").strip().lower()
        classes = "container-hero"
        if align in ("center", "left", "right"):
            classes += f" text-{align}"
        return f'<div class="{classes}">\n\n{match.content}\n\n</div>\n'

    registry.add("hero", hero_handler)


def mediaDirectives_register(registry: HandlerRegistry, delimiter: str) -> None:
    """Register image and gallery directives"""

    def image_handler(match: DirectiveMatch) -> str:
        """Handle ::image VARIANT - first line URL, remaining lines caption"""
        variant = (match.args or "").strip()
        lines = match.content.split("\n")
        url = lines[0].strip() if lines else ""
        if not url:
            return match.raw
        caption = "\n".join(lines[1:]).strip()

        classes = f"image-{variant}" if variant else "image"
        html_parts = [f'<figure class="{classes}">\n']
        html_parts.append(f'  <img src="{html.escape(url)}" alt="{html.escape(caption)}">\n')
        if caption:
            html_parts.append(f"  <figcaption>{caption}</figcaption>\n")
        html_parts.append("</figure>\n")
        return "".join(html_parts)

    def gallery_handler(match: DirectiveMatch) -> str:
        """Handle ::gallery N - one image URL per section, N defaults to 3"""
        count = int_parse(match.args, 3)
        images = content_split(match.content, delimiter)
        html_parts = ['<div class="gallery grid gap-4">\n']
        for url in images:
            html_parts.append(
                f'  <div class="col-12 md:col-{span_for(count)}">\n'
                f'    <img src="{html.escape(url)}" alt="">\n'
                "  </div>\n"
            )
        html_parts.append("</div>\n")
        return "".join(html_parts)

    registry.add("image", {"priority": LEAF_PRIORITY}, image_handler)
    registry.add("gallery", gallery_handler)


def noteDirectives_register(registry: HandlerRegistry) -> None:
    """Register spacing, inline notes and callouts"""

    space_sizes: Dict[str, str] = {"small": "2", "medium": "4", "large": "6", "xlarge": "8"}

    def space_handler(match: DirectiveMatch) -> str:
        """Handle ::space SIZE - vertical spacer"""
        size = space_sizes.get(match.value.strip().lower(), "4")
        return f'<div class="space-{size}"></div>\n'

    registry.add("space", {"type": "inline", "priority": LEAF_PRIORITY}, space_handler)

    def make_inline(open_tag: str, close_tag: str) -> Callable[[DirectiveMatch], str]:
        """Factory for one-line wrappers"""
        def handler(match: DirectiveMatch) -> str:
            return f"{open_tag}{match.value}{close_tag}"
        return handler

    inline_specs = [
        ("muted", '<p class="muted">', "</p>"),
        ("subtle", '<p class="subtle">', "</p>"),
        ("note", '<aside class="note">', "</aside>"),
        ("error", '<div class="alert error">', "</div>"),
        ("alert", '<div class="alert">', "</div>"),
        ("warning", '<div class="alert warning">', "</div>"),
        ("success", '<div class="alert success">', "</div>"),
    ]

    for name, open_tag, close_tag in inline_specs:
        registry.add(name, {"type": "inline", "priority": LEAF_PRIORITY}, make_inline(open_tag, close_tag))

    callout_header = re.compile(r"^([+-])?\s*(.+)$")

    def callout_handler(match: DirectiveMatch) -> str:
        """
        Handle ::callout [+|-]TYPE - Obsidian-style callout

        ``+`` renders an open <details>, ``-`` a closed one, no marker a
        plain box. Arguments that do not name a type leave the text as is.
        """
        header_match = callout_header.match((match.args or "").strip())
        if not header_match:
            return match.raw

        fold, header = header_match.groups()
        callout_type = header.lower()
        title = header[0].upper() + header[1:]
        icon = icon_get(callout_type)
        content = match.content.strip()

        if fold:
            open_attr = " open" if fold == "+" else ""
            return (
                f'<details class="callout" data-callout="{callout_type}"{open_attr}>\n'
                '<summary class="callout-title">\n'
                f'<div class="callout-title-icon">{icon}</div>\n'
                f'<div class="callout-title-inner">{title}</div>\n'
                "</summary>\n"
                f'<div class="callout-content">{content}</div>\n'
                "</details>"
            )

        return (
            f'<div class="callout" data-callout="{callout_type}">\n'
            '<div class="callout-title">\n'
            f'<div class="callout-title-icon">{icon}</div>\n'
            f'<div class="callout-title-inner">{title}</div>\n'
            "</div>\n"
            f'<div class="callout-content">{content}</div>\n'
            "</div>"
        )

    registry.add("callout", {"priority": LEAF_PRIORITY}, callout_handler)


def interactiveDirectives_register(registry: HandlerRegistry) -> None:
    """Register buttons and forms"""

    link_pattern = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

    def button_handler(match: DirectiveMatch) -> str:
        """Handle ::button [primary|secondary] - body is a Markdown link"""
        link = link_pattern.search(match.content or "")
        if not link:
            return match.raw
        text, url = link.groups()
        variant = (match.args or "").strip()
        classes = f"button button-{variant}" if variant else "button"
        return f'<a href="{url}" class="{classes}">{text}</a>\n'

    def form_handler(match: DirectiveMatch) -> str:
        """Handle ::form TYPE - one field label per line, posted to /api/TYPE"""
        form_type = (match.args or "").strip() or "contact"
        fields = [line.strip() for line in (match.content or "").split("\n") if line.strip()]

        html_parts = [f'<form class="form form-{form_type}" method="POST" action="/api/{form_type}">\n']
        for label in fields:
            field_name = label.lower()
            html_parts.append('  <div class="form-field">\n')
            html_parts.append(f'    <label for="{field_name}">{label}</label>\n')
            if field_name == "message":
                html_parts.append(f'    <textarea id="{field_name}" name="{field_name}" required></textarea>\n')
            else:
                input_type = "email" if field_name == "email" else "text"
                html_parts.append(
                    f'    <input type="{input_type}" id="{field_name}" name="{field_name}" required>\n'
                )
            html_parts.append("  </div>\n")
        html_parts.append('  <button type="submit" class="button button-primary">Send</button>\n')
        html_parts.append("</form>\n")
        return "".join(html_parts)

    registry.add("button", {"priority": LEAF_PRIORITY}, button_handler)
    registry.add("form", {"priority": LEAF_PRIORITY}, form_handler)


def logicDirectives_register(registry: HandlerRegistry) -> None:
    """Register the ::if conditional"""

    def if_handler(match: DirectiveMatch) -> str:
        """Handle ::if CONDITION - keep body only when the condition holds"""
        if condition_evaluate(match.args, match.pageData):
            return f"\n{match.content}\n"
        return ""

    registry.add("if", if_handler)
