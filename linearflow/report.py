"""The /linearflow reportissue handler: chat report in, Linear issue out."""

import logging
import re

from linearflow.formatting import report_created_embed, report_description, report_failed_embed
from linearflow.models import CommandReply, IssueReport, ReportContext, TrackerIssue
from linearflow.providers.base import TrackerProvider
from linearflow.providers.linear import MEDIUM_PRIORITY

logger = logging.getLogger(__name__)

NOT_CONFIGURED = "Gateway team not configured. Please contact an admin."
SUBMITTED = "Bug report submitted successfully!"
BACKLINK_TITLE = "Bug Report from Discord"

_IDENTIFIER_IN_URL = re.compile(r"/issue/([^/]+)")


def identifier_from_url(url: str | None) -> str | None:
    """Pull the identifier out of an issue URL.

    https://linear.app/acme/issue/INK-17/test → INK-17
    """
    if not url:
        return None
    match = _IDENTIFIER_IN_URL.search(url)
    return match.group(1) if match else None


def resolve_identifier(tracker: TrackerProvider, issue: TrackerIssue) -> str | None:
    """Return the human-readable identifier, re-fetching once if creation omitted it."""
    if issue.identifier:
        return issue.identifier
    logger.info("Identifier missing on created issue %s; re-fetching", issue.id)
    fetched = tracker.get_issue(issue.id)
    return fetched.identifier or identifier_from_url(fetched.url or issue.url)


def handle_report_issue(
    report: IssueReport,
    context: ReportContext,
    tracker: TrackerProvider,
) -> CommandReply:
    if not context.team_id:
        logger.warning("Report from %s rejected: LINEAR_TEAM_GATEWAY is not set", context.author_tag)
        return CommandReply(content=NOT_CONFIGURED)

    try:
        created = tracker.create_issue(
            title=report.title,
            description=report_description(report),
            team_id=context.team_id,
            priority=MEDIUM_PRIORITY,
        )
        if created is None:
            return CommandReply(content=SUBMITTED)

        identifier = resolve_identifier(tracker, created)

        tracker.create_attachment(
            issue_id=created.id,
            title=BACKLINK_TITLE,
            url=context.message_link,
            subtitle=f"#{context.channel_name or 'unknown'} - {context.author_tag} :: Issue {identifier} created",
        )
        for attachment in report.attachments:
            tracker.create_attachment(
                issue_id=created.id,
                title=attachment.name,
                url=attachment.url,
                subtitle=f"Uploaded by {context.author_tag}",
            )
    except Exception:
        logger.exception("Error creating Linear issue for %s", context.author_tag)
        return CommandReply(embeds=[report_failed_embed()])

    logger.info("Created %s from report by %s", identifier, context.author_tag)
    return CommandReply(embeds=[report_created_embed(report, identifier, created.url, context.author_tag)])
