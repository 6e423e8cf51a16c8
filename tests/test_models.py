"""Tests for linearflow.models."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from linearflow.models import (
    EMBED_DESCRIPTION_LIMIT,
    EMBED_TITLE_LIMIT,
    Attachment,
    CommandReply,
    Embed,
    EmbedField,
    IssueReport,
    ReportSource,
    TrackerIssue,
)


def test_report_frozen(report: IssueReport) -> None:
    with pytest.raises(Exception):
        report.title = "changed"  # type: ignore[misc]


def test_report_rejects_blank_title() -> None:
    with pytest.raises(ValidationError):
        IssueReport(source=ReportSource.QA, title="   ", description="Y")


def test_report_rejects_blank_description() -> None:
    with pytest.raises(ValidationError):
        IssueReport(source=ReportSource.CS, title="X", description="")


def test_report_rejects_unknown_source() -> None:
    with pytest.raises(ValidationError):
        IssueReport(source="Sales", title="X", description="Y")  # type: ignore[arg-type]


def test_report_caps_attachments(screenshot: Attachment) -> None:
    with pytest.raises(ValidationError):
        IssueReport(source=ReportSource.QA, title="X", description="Y", attachments=[screenshot] * 4)


def test_report_accepts_three_attachments(screenshot: Attachment) -> None:
    report = IssueReport(source=ReportSource.QA, title="X", description="Y", attachments=[screenshot] * 3)
    assert len(report.attachments) == 3


def test_source_labels() -> None:
    assert ReportSource.QA.label == "Quality Assurance"
    assert ReportSource.CS.label == "Community Support"


def test_attachment_is_image(screenshot: Attachment, video: Attachment) -> None:
    assert screenshot.is_image
    assert not video.is_image
    assert not Attachment(name="log.txt", url="https://x/log.txt").is_image


def test_tracker_issue_identifier_optional() -> None:
    issue = TrackerIssue(id="1", url="https://linear.app/x/issue/INK-1/t", title="t")
    assert issue.identifier is None


class TestEmbedPayload:
    def test_full_payload(self) -> None:
        ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
        embed = Embed(
            title="Bug Report Created",
            description="**INK-1** - X",
            color=0x5E6AD2,
            fields=[EmbedField(name="Status", value="Triage", inline=True)],
            url="https://linear.app/x",
            timestamp=ts,
            footer="LinearFlow Bot",
        )
        assert embed.to_payload() == {
            "title": "Bug Report Created",
            "description": "**INK-1** - X",
            "color": 0x5E6AD2,
            "fields": [{"name": "Status", "value": "Triage", "inline": True}],
            "url": "https://linear.app/x",
            "timestamp": "2024-01-01T00:00:00+00:00",
            "footer": {"text": "LinearFlow Bot"},
        }

    def test_minimal_payload(self) -> None:
        assert Embed(title="Error", color=0xFF0000).to_payload() == {"title": "Error", "color": 0xFF0000}

    def test_long_text_clamped(self) -> None:
        payload = Embed(title="🆕 New Issue: " + "t" * 300, description="d" * 5000, color=0x5E6AD2).to_payload()
        assert len(payload["title"]) == EMBED_TITLE_LIMIT
        assert payload["title"].startswith("🆕 New Issue: ttt")
        assert payload["description"] == "d" * EMBED_DESCRIPTION_LIMIT

    def test_short_text_untouched(self) -> None:
        payload = Embed(title="t" * EMBED_TITLE_LIMIT, description="", color=0).to_payload()
        assert payload["title"] == "t" * EMBED_TITLE_LIMIT
        assert payload["description"] == ""


def test_ephemeral_reply_sets_flag() -> None:
    payload = CommandReply(content="nope", ephemeral=True).to_payload()
    assert payload == {"embeds": [], "content": "nope", "flags": 64}
