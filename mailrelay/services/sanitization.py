"""
HTML Sanitization Service

Plain text rendition of HTML bodies using the Bleach library, for mail
that carries no text/plain part.
"""

import html
import re
from typing import Optional

import bleach

# Contents of these elements are never visible text (CSS colours would look like codes)
INVISIBLE_BLOCKS = re.compile(r"<(style|script|head)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL)

# Elements that end a line when rendered
LINE_BREAKS = re.compile(r"<br\s*/?>|</(p|div|tr|li|h[1-6]|table|blockquote)\s*>", re.IGNORECASE)

CELL_BREAKS = re.compile(r"</t[dh]\s*>", re.IGNORECASE)

# Anchors as serialized by bleach: <a href="...">text</a>
ANCHOR = re.compile(r'<a href="([^"]*)">(.*?)</a>', re.DOTALL)

BLANK_LINES = re.compile(r"\n\s*\n+")


def _render_anchor(match: re.Match) -> str:
    href, text = match.group(1), match.group(2)
    if not href or href in text:
        return text
    return f"{text} {href} "


def html_to_text(body: Optional[str]) -> str:
    """
    Convert an HTML body to plain text.

    Link targets are kept next to their anchor text so that they stay
    visible to link detection.

    Args:
        body: HTML string

    Returns:
        str: Plain text with entities decoded
    """
    if not body:
        return ""

    body = INVISIBLE_BLOCKS.sub("", body)
    body = LINE_BREAKS.sub("\n", body)
    body = CELL_BREAKS.sub(" ", body)

    # Anchors become "text href " so a URL match stops at the href
    cleaned = bleach.clean(body, tags=["a"], attributes={"a": ["href"]}, protocols=["http", "https"], strip=True)
    cleaned = ANCHOR.sub(_render_anchor, cleaned)
    cleaned = bleach.clean(cleaned, tags=[], strip=True)

    text = html.unescape(cleaned)
    return BLANK_LINES.sub("\n\n", text).strip()
