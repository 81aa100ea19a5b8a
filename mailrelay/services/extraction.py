"""
Extraction Service

Finds the one-time code and the actionable link in a plain text body.
Pure functions: no I/O, no shared state.
"""

import re
from typing import List, Optional

from mailrelay.schemas.message import ExtractionResult

# First 4-8 digit run standing on its own (ASCII digits and word boundaries)
CODE_PATTERN = re.compile(r"\b\d{4,8}\b", re.ASCII)

# scheme:// then a first character that is not whitespace or $.?#
URL_PATTERN = re.compile(r"https?://[^\s$.?#].[^\s]*")

ACTION_KEYWORDS = ("confirm", "verify", "login", "signin", "password")
ACTION_PATTERN = re.compile("|".join(ACTION_KEYWORDS), re.IGNORECASE)


def find_code(text: str) -> Optional[str]:
    """Return the leftmost 4-8 digit run, or None."""
    match = CODE_PATTERN.search(text)
    return match.group(0) if match else None


def find_links(text: str) -> List[str]:
    """Return every http(s) URL in document order."""
    return URL_PATTERN.findall(text)


def pick_action_link(links: List[str]) -> Optional[str]:
    """
    Choose the link most likely to be the call to action.

    The first link mentioning one of ACTION_KEYWORDS wins, whatever its
    position; otherwise the first link in the document.
    """
    for link in links:
        if ACTION_PATTERN.search(link):
            return link
    return links[0] if links else None


def extract(text: Optional[str]) -> ExtractionResult:
    """
    Extract the code and the actionable link from a message body.

    Args:
        text: Plain text body (may be empty or None)

    Returns:
        ExtractionResult: code and link, each None when not found
    """
    if not text:
        return ExtractionResult()

    return ExtractionResult(
        code=find_code(text),
        link=pick_action_link(find_links(text)),
    )
