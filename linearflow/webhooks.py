"""Linear webhook → Discord notification routing."""

import hashlib
import hmac
import logging

from pydantic import ValidationError

from linearflow.chat import DiscordClient
from linearflow.events import (
    ALLOWED_EVENT_TYPES,
    CommentCreatedEvent,
    IssueCreatedEvent,
    IssueUpdatedEvent,
    event_team_id,
    parse_event,
)
from linearflow.formatting import comment_created_embed, issue_created_embed, issue_updated_embed
from linearflow.models import Embed
from linearflow.settings import LinearFlowSettings

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Linear-Signature"


def signature_valid(body: bytes, signature: str | None, secret: str) -> bool:
    """Check Linear's hex HMAC-SHA256 signature of the raw request body."""
    if not signature:
        return False
    expected = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(expected, signature)


def _notify(chat: DiscordClient, channel_id: str | None, embed: Embed) -> None:
    if not channel_id:
        raise RuntimeError("DISCORD_CHANNEL_ISSUES is not configured")
    chat.fetch_channel(channel_id)
    chat.send_message(channel_id, [embed])


def build_embed(event: IssueCreatedEvent | IssueUpdatedEvent | CommentCreatedEvent) -> Embed | None:
    """Pick the formatter for an event; None means nothing worth announcing."""
    match event:
        case IssueCreatedEvent():
            return issue_created_embed(event)
        case IssueUpdatedEvent():
            if not event.status_changed:
                logger.info("Ignoring non-status update on %s", event.data.identifier)
                return None
            return issue_updated_embed(event)
        case CommentCreatedEvent():
            return comment_created_embed(event)
    return None


def dispatch_event(payload: dict, settings: LinearFlowSettings, chat: DiscordClient) -> bool:
    """Route one webhook delivery. Returns True when a notification was sent.

    Unexpected types, other teams and payloads whose envelope does not decode
    are dropped quietly; errors while notifying propagate to the caller.
    """
    event_type = payload.get("type")
    logger.info("Received webhook: %s", event_type)

    if event_type not in ALLOWED_EVENT_TYPES:
        logger.info("Ignoring event type: %s", event_type)
        return False

    team_id = event_team_id(payload)
    if team_id is None or team_id != settings.linear_team_gateway:
        logger.info("Ignoring event from team: %s", team_id)
        return False

    try:
        event = parse_event(payload)
    except ValidationError as exc:
        logger.warning("Ignoring malformed %s event: %s", event_type, exc.errors())
        return False

    embed = build_embed(event)
    if embed is None:
        return False

    _notify(chat, settings.discord_channel_issues, embed)
    return True
