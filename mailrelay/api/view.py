"""
Message View Endpoints

Short-lived web view of a received message:
- Full message page by id
- Expired/unknown ids answer 404
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from mailrelay.core.exceptions import MessageNotFoundException
from mailrelay.dependencies import get_mail_store
from mailrelay.services.mail_store import MailStore
from mailrelay.services.rendering import render_message_page

router = APIRouter()


@router.get(
    "/view/{message_id}",
    response_class=HTMLResponse,
    summary="View a received message",
    responses={
        200: {"description": "Message page"},
        404: {"description": "Message expired or never existed"},
    },
)
async def view_message(
    message_id: str,
    store: MailStore = Depends(get_mail_store),
):
    """
    Render a stored message.

    The HTML body is shown as received; a text-only message is escaped
    into a preformatted block.

    Raises:
        MessageNotFoundException: If the id is unknown or expired
    """
    snapshot = store.get(message_id)
    if snapshot is None:
        raise MessageNotFoundException(message_id)

    return HTMLResponse(content=render_message_page(snapshot))
