"""Embed rendering for chat notifications and command replies."""

from datetime import datetime, timezone

from linearflow.events import CommentCreatedEvent, IssueCreatedEvent, IssueUpdatedEvent
from linearflow.models import Attachment, Embed, EmbedField, IssueReport

LINEAR_COLOR = 0x5E6AD2
UPDATE_COLOR = 0xFFA500
COMMENT_COLOR = 0x00FF00
ERROR_COLOR = 0xFF0000

FOOTER = "LinearFlow Bot"
COMMENT_PREVIEW_LENGTH = 200

_PRIORITY_LABEL = {0: "⚪ No priority", 1: "🔥 Urgent", 2: "⚠️ High", 3: "📋 Medium", 4: "📝 Low"}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def priority_text(priority: int | None) -> str:
    """Map a Linear priority (0-4) to its label; anything else is "Unknown"."""
    if priority is None:
        return "Unknown"
    return _PRIORITY_LABEL.get(priority, "Unknown")


def truncate_comment(body: str | None) -> str:
    """First 200 characters of a comment body. The ellipsis is always appended."""
    return (body or "")[:COMMENT_PREVIEW_LENGTH] + "..."


# ---------------------------------------------------------------------------
# Webhook notifications
# ---------------------------------------------------------------------------


def issue_created_embed(event: IssueCreatedEvent) -> Embed:
    issue = event.data
    return Embed(
        title=f"🆕 New Issue: {issue.identifier or 'Unknown'}",
        description=issue.title,
        color=LINEAR_COLOR,
        fields=[
            EmbedField(name="Status", value=(issue.state and issue.state.name) or "Unknown", inline=True),
            EmbedField(name="Priority", value=priority_text(issue.priority), inline=True),
            EmbedField(name="Assignee", value=(issue.assignee and issue.assignee.name) or "Unassigned", inline=True),
        ],
        url=issue.url,
        timestamp=_now(),
    )


def issue_updated_embed(event: IssueUpdatedEvent) -> Embed:
    issue = event.data
    return Embed(
        title=f"Issue Updated: {issue.identifier or 'Unknown'}",
        description=issue.title,
        color=UPDATE_COLOR,
        fields=[
            EmbedField(name="New Status", value=(issue.state and issue.state.name) or "Unknown", inline=True),
        ],
        url=issue.url,
        timestamp=_now(),
    )


def comment_created_embed(event: CommentCreatedEvent) -> Embed:
    comment = event.data
    parent = comment.issue
    return Embed(
        title=f"💬 New Comment on {(parent and parent.identifier) or 'Unknown'}",
        description=truncate_comment(comment.body),
        color=COMMENT_COLOR,
        fields=[
            EmbedField(name="Author", value=(comment.user and comment.user.name) or "Unknown", inline=True),
        ],
        url=parent.url if parent else None,
        timestamp=_now(),
    )


# ---------------------------------------------------------------------------
# Command replies
# ---------------------------------------------------------------------------


def report_created_embed(
    report: IssueReport,
    identifier: str | None,
    url: str,
    author_tag: str,
) -> Embed:
    fields = [
        EmbedField(name="Reported by", value=author_tag, inline=True),
        EmbedField(name="Team", value="Gateway", inline=True),
        EmbedField(name="Source", value=report.source.value, inline=True),
        EmbedField(name="Status", value="Triage", inline=True),
    ]
    if report.attachments:
        fields.append(
            EmbedField(
                name="Attachments",
                value="\n".join(f"📎 {att.name}" for att in report.attachments),
                inline=False,
            )
        )
    return Embed(
        title="Bug Report Created",
        description=f"**{identifier}** - {report.title}" if identifier else report.title,
        color=LINEAR_COLOR,
        fields=fields,
        url=url,
        timestamp=_now(),
        footer=FOOTER,
    )


def report_failed_embed() -> Embed:
    return Embed(
        title="Error",
        description="Failed to create bug report. Please try again later.",
        color=ERROR_COLOR,
        timestamp=_now(),
    )


def attachment_markdown(attachments: list[Attachment]) -> str:
    """Render attachments for an issue description.

    Images are embedded with image syntax; everything else becomes a numbered
    link, numbered by submission position.
    """
    if not attachments:
        return ""
    rendered = "\n\n**Attachments:**\n\n"
    for index, att in enumerate(attachments, start=1):
        if att.is_image:
            rendered += f"![{att.name}]({att.url})\n\n"
        else:
            rendered += f"{index}. [{att.name}]({att.url})\n"
    return rendered


def report_description(report: IssueReport) -> str:
    return (
        f"**Source:** {report.source.value}\n"
        f"**User Description:** {report.description}\n"
        f"{attachment_markdown(report.attachments)}"
    )
