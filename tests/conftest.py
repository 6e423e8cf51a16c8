"""Shared test fixtures."""

from unittest.mock import MagicMock

import pytest

from linearflow.chat import DiscordClient
from linearflow.models import Attachment, IssueReport, ReportContext, ReportSource, TrackerIssue
from linearflow.providers.base import TrackerProvider
from linearflow.settings import LinearFlowSettings


@pytest.fixture
def settings() -> LinearFlowSettings:
    return LinearFlowSettings(  # type: ignore[call-arg]
        _env_file=None,
        linear_api_key="lin_api_test",
        linear_team_gateway="T1",
        discord_token="bot-token",
        discord_client_id="app_1",
        discord_channel_issues="chan_1",
    )


@pytest.fixture
def created_issue() -> TrackerIssue:
    return TrackerIssue(
        id="issue_abc",
        identifier="INK-17",
        title="Crash on login",
        url="https://linear.app/kizmotek/issue/INK-17/crash-on-login",
    )


@pytest.fixture
def tracker(created_issue: TrackerIssue) -> MagicMock:
    provider = MagicMock(spec=TrackerProvider)
    provider.create_issue.return_value = created_issue
    provider.get_issue.return_value = created_issue
    return provider


@pytest.fixture
def chat() -> MagicMock:
    client = MagicMock(spec=DiscordClient)
    client.fetch_channel.return_value = {"id": "chan_1", "name": "issues"}
    return client


@pytest.fixture
def report() -> IssueReport:
    return IssueReport(source=ReportSource.QA, title="X", description="Y")


@pytest.fixture
def screenshot() -> Attachment:
    return Attachment(name="shot.png", url="https://cdn.example/shot.png", content_type="image/png")


@pytest.fixture
def video() -> Attachment:
    return Attachment(name="repro.mp4", url="https://cdn.example/repro.mp4", content_type="video/mp4")


@pytest.fixture
def context() -> ReportContext:
    return ReportContext(
        channel_name="bugs",
        author_tag="tester",
        message_link="https://discord.com/channels/g1/c1/i1",
        team_id="T1",
    )
