"""Standalone HTML rendering for slide decks, plus light HTML inspection."""

import html
import logging
import re
from typing import Optional

from bs4 import BeautifulSoup

from proposal_maker.core.defaults import DEFAULT_CSS_VARIABLES
from proposal_maker.domain.slide_deck import Deck, Slide

logger = logging.getLogger(__name__)

_STYLE_CLOSE_PATTERN = re.compile(r"</(style)", re.IGNORECASE)

_BASE_CSS = """
        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }

        body {
            font-family: system-ui, -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6;
            color: var(--text);
            background: var(--background);
            padding: var(--space-md);
        }
"""

_LAYOUT_CSS = """
        .presentation-container {
            max-width: 1200px;
            margin: 0 auto;
            padding: var(--space-lg) 0;
        }

        .presentation-title {
            font-size: var(--font-3xl);
            font-weight: bold;
            color: var(--primary);
            text-align: center;
            margin-bottom: var(--space-xl);
            padding-bottom: var(--space-lg);
            border-bottom: 3px solid var(--primary);
        }

        .slide {
            position: relative;
            margin-bottom: var(--space-xl);
            padding: var(--space-lg);
            background: white;
            border-radius: 12px;
            box-shadow: 0 4px 6px -1px rgba(0, 0, 0, 0.1), 0 2px 4px -1px rgba(0, 0, 0, 0.06);
            border: 1px solid rgba(0, 0, 0, 0.1);
        }

        .slide-title {
            font-size: var(--font-2xl);
            font-weight: bold;
            color: var(--primary);
            margin-bottom: var(--space-md);
            padding-bottom: var(--space-sm);
            border-bottom: 2px solid var(--secondary);
        }

        .slide-content {
            font-size: var(--font-md);
            color: var(--text);
            margin-bottom: var(--space-md);
        }

        .slide-bullets ul {
            list-style: none;
            padding-left: var(--space-md);
        }

        .slide-bullets li {
            position: relative;
            margin-bottom: var(--space-sm);
            padding-left: var(--space-md);
        }

        .slide-bullets li::before {
            content: "\\2022";
            position: absolute;
            left: 0;
            color: var(--primary);
            font-weight: bold;
        }

        .slide-image-placeholder {
            margin-top: var(--space-md);
            padding: var(--space-lg);
            background: #f8fafc;
            border: 2px dashed var(--secondary);
            border-radius: 8px;
            text-align: center;
            color: var(--secondary);
            font-style: italic;
        }

        .slide-number {
            position: absolute;
            top: var(--space-sm);
            right: var(--space-sm);
            background: var(--primary);
            color: white;
            padding: 4px 8px;
            border-radius: 4px;
            font-size: var(--font-sm);
            font-weight: bold;
        }

        @media (max-width: 768px) {
            body { padding: var(--space-sm); }
            .presentation-title { font-size: var(--font-2xl); margin-bottom: var(--space-lg); }
            .slide { padding: var(--space-md); margin-bottom: var(--space-lg); }
            .slide-title { font-size: var(--font-xl); }
            .slide-content, .slide-bullets li { font-size: var(--font-sm); }
        }

        @media print {
            body { background: white; padding: 0; }
            .slide {
                box-shadow: none;
                border: 1px solid #ccc;
                page-break-inside: avoid;
                margin-bottom: 20px;
            }
        }
"""


def sanitize_css(css: str) -> str:
    """Keep a CSS block from terminating the surrounding ``<style>`` element."""
    return _STYLE_CLOSE_PATTERN.sub(r"<\\/\1", css)


def _render_slide(slide: Slide, number: int) -> str:
    parts = [
        '        <div class="slide">',
        f'            <div class="slide-number">{number}</div>',
        f'            <h2 class="slide-title">{html.escape(slide.title)}</h2>',
        f'            <div class="slide-content">{html.escape(slide.content)}</div>',
    ]
    if slide.bullets:
        items = "".join(f"<li>{html.escape(b)}</li>" for b in slide.bullets)
        parts.append(f'            <div class="slide-bullets"><ul>{items}</ul></div>')
    if slide.image_placeholder:
        parts.append(
            '            <div class="slide-image-placeholder">'
            f"{html.escape(slide.image_placeholder)}</div>"
        )
    parts.append("        </div>")
    return "\n".join(parts)


def render_presentation(deck: Deck, css_variables: Optional[str] = None) -> str:
    """Render *deck* as a self-contained HTML document styled by *css_variables*.

    Args:
        deck: Normalized deck to render
        css_variables: CSS block (usually a ``:root`` token set) from a design
            library. The built-in token set is used when empty.

    Returns:
        Complete HTML document as a string
    """
    css_block = sanitize_css(css_variables) if css_variables and css_variables.strip() else DEFAULT_CSS_VARIABLES
    title = html.escape(deck.title)
    slides_html = "\n".join(_render_slide(s, i) for i, s in enumerate(deck.slides, start=1))

    logger.debug(f"Rendering {deck}")
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>{_BASE_CSS}
        {css_block}
{_LAYOUT_CSS}    </style>
</head>
<body>
    <div class="presentation-container">
        <h1 class="presentation-title">{title}</h1>
{slides_html}
    </div>
</body>
</html>"""


def count_slides(html_content: str) -> int:
    """Count elements carrying the ``slide`` class in an HTML document."""
    if not html_content:
        return 0
    soup = BeautifulSoup(html_content, "html.parser")
    return len(soup.find_all(class_="slide"))
