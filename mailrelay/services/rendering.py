"""
HTML Rendering Service

Pages served by the web view and the escaping shared with notifications.
"""

import html
from typing import Optional

from mailrelay.schemas.message import MessageSnapshot

PAGE_STYLE = """
        body { font-family: -apple-system, sans-serif; padding: 20px; background: #fff; color: #333; }
        .header { background: #f4f4f5; padding: 15px; border-radius: 8px; margin-bottom: 20px; border-left: 5px solid #0088cc; }
        .meta { color: #666; font-size: 0.9em; margin-bottom: 5px; }
        .subject { font-size: 1.2em; font-weight: bold; }
        .content { line-height: 1.6; word-wrap: break-word; }
        pre { white-space: pre-wrap; }
        img { max-width: 100%; height: auto; }
"""

MESSAGE_PAGE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{title}</title>
    <style>{style}</style>
</head>
<body>
    <div class="header">
        <div class="meta">From: {sender}</div>
        <div class="meta">To: {recipient}</div>
        <div class="subject">{subject}</div>
    </div>
    <div class="content">{body}</div>
</body>
</html>
"""

SIMPLE_PAGE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{title}</title>
</head>
<body>
    <h1>{heading}</h1>
    {content}
</body>
</html>
"""

EXPIRED_MESSAGE = "This message has expired or does not exist."


def escape_html(value: Optional[str]) -> str:
    """
    Escape &, < and > for interpolation into HTML or Telegram markup.

    None becomes an empty string.
    """
    if not value:
        return ""
    return html.escape(value, quote=False)


def render_body(snapshot: MessageSnapshot) -> str:
    """HTML body verbatim, else the escaped text body in a <pre> block."""
    if snapshot.html:
        return snapshot.html
    return f"<pre>{escape_html(snapshot.text)}</pre>"


def render_message_page(snapshot: MessageSnapshot) -> str:
    """
    Render the full-message page.

    Args:
        snapshot: Stored message

    Returns:
        str: HTML document
    """
    subject = escape_html(snapshot.subject)
    return MESSAGE_PAGE.format(
        title=subject,
        style=PAGE_STYLE,
        sender=escape_html(snapshot.sender),
        recipient=escape_html(snapshot.recipient),
        subject=subject,
        body=render_body(snapshot),
    )


def render_simple_page(title: str, heading: str, content: str = "") -> str:
    """Render a minimal page; content is inserted as markup."""
    return SIMPLE_PAGE.format(
        title=escape_html(title),
        heading=escape_html(heading),
        content=content,
    )


def render_expired_page() -> str:
    return render_simple_page("Message unavailable", EXPIRED_MESSAGE)


def render_status_page(app_name: str, domain: str) -> str:
    return render_simple_page(
        app_name,
        f"{app_name} is running",
        f"<p>Receiving mail for <code>{escape_html(domain)}</code>.</p>",
    )
