"""Slash command definitions and the interaction → handler plumbing.

The registry is built once from ``COMMANDS`` and handed to the HTTP app;
nothing mutates it at runtime.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from pydantic import ValidationError

from linearflow.chat import DiscordClient
from linearflow.models import Attachment, CommandReply, IssueReport, ReportContext, ReportSource
from linearflow.providers.base import TrackerProvider
from linearflow.report import handle_report_issue
from linearflow.settings import LinearFlowSettings

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "There was an error executing this command!"

# Discord application command option types
SUB_COMMAND = 1
STRING = 3
ATTACHMENT = 11

ATTACHMENT_OPTIONS = ("attachment1", "attachment2", "attachment3")

LINEARFLOW_DEFINITION: dict = {
    "name": "linearflow",
    "description": "Create a issue report",
    "options": [
        {
            "type": SUB_COMMAND,
            "name": "reportissue",
            "description": "Report an issue through our gateway triage",
            "options": [
                {
                    "type": STRING,
                    "name": "source",
                    "description": "Source of the issue",
                    "required": True,
                    "choices": [{"name": s.label, "value": s.value} for s in ReportSource],
                },
                {"type": STRING, "name": "title", "description": "Brief title of the issue", "required": True},
                {
                    "type": STRING,
                    "name": "description",
                    "description": "Detailed description of the issue",
                    "required": True,
                },
                {
                    "type": ATTACHMENT,
                    "name": "attachment1",
                    "description": "Screenshot or video (optional)",
                    "required": False,
                },
                {
                    "type": ATTACHMENT,
                    "name": "attachment2",
                    "description": "Additional screenshot or video (optional)",
                    "required": False,
                },
                {
                    "type": ATTACHMENT,
                    "name": "attachment3",
                    "description": "Additional screenshot or video (optional)",
                    "required": False,
                },
            ],
        }
    ],
}


@dataclass(frozen=True)
class Command:
    name: str
    definition: dict
    run: Callable[[dict, LinearFlowSettings, TrackerProvider], CommandReply]


# ---------------------------------------------------------------------------
# Interaction parsing
# ---------------------------------------------------------------------------


def _user(interaction: dict) -> dict:
    # Guild interactions carry member.user, DMs carry user
    return (interaction.get("member") or {}).get("user") or interaction.get("user") or {}


def author_tag(interaction: dict) -> str:
    user = _user(interaction)
    username = user.get("username") or "unknown"
    discriminator = user.get("discriminator")
    if discriminator and discriminator != "0":
        return f"{username}#{discriminator}"
    return username


def message_link(interaction: dict) -> str:
    guild = interaction.get("guild_id") or "@me"
    return f"https://discord.com/channels/{guild}/{interaction.get('channel_id')}/{interaction.get('id')}"


def _subcommand(interaction: dict) -> tuple[str | None, dict[str, object]]:
    options = (interaction.get("data") or {}).get("options") or []
    if not options or options[0].get("type") != SUB_COMMAND:
        return None, {}
    sub = options[0]
    return sub.get("name"), {opt["name"]: opt.get("value") for opt in sub.get("options") or []}


def parse_report(interaction: dict) -> IssueReport:
    """Build an IssueReport from a reportissue interaction. Raises ValidationError on bad input."""
    _, values = _subcommand(interaction)
    resolved = ((interaction.get("data") or {}).get("resolved") or {}).get("attachments") or {}
    attachments = []
    for option in ATTACHMENT_OPTIONS:
        attachment_id = values.get(option)
        if attachment_id is None or str(attachment_id) not in resolved:
            continue
        raw = resolved[str(attachment_id)]
        attachments.append(
            Attachment(name=raw.get("filename", "attachment"), url=raw["url"], content_type=raw.get("content_type"))
        )
    return IssueReport(
        source=values.get("source"),
        title=values.get("title") or "",
        description=values.get("description") or "",
        attachments=attachments,
    )


def report_context(interaction: dict, settings: LinearFlowSettings) -> ReportContext:
    return ReportContext(
        channel_name=(interaction.get("channel") or {}).get("name"),
        author_tag=author_tag(interaction),
        message_link=message_link(interaction),
        team_id=settings.linear_team_gateway,
    )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def run_linearflow(interaction: dict, settings: LinearFlowSettings, tracker: TrackerProvider) -> CommandReply:
    subcommand, _ = _subcommand(interaction)
    if subcommand != "reportissue":
        logger.error("No subcommand matching %s was found.", subcommand)
        return CommandReply(content=f"Unknown subcommand: {subcommand}")
    try:
        report = parse_report(interaction)
    except ValidationError as exc:
        problems = "; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors())
        return CommandReply(content=f"Invalid report: {problems}")
    return handle_report_issue(report, report_context(interaction, settings), tracker)


COMMANDS: tuple[Command, ...] = (
    Command(name="linearflow", definition=LINEARFLOW_DEFINITION, run=run_linearflow),
)


def build_registry(commands: tuple[Command, ...] = COMMANDS) -> Mapping[str, Command]:
    return MappingProxyType({command.name: command for command in commands})


def run_deferred(
    command: Command,
    interaction: dict,
    settings: LinearFlowSettings,
    tracker: TrackerProvider,
    chat: DiscordClient,
) -> None:
    """Run a command after the deferred response went out and edit in its reply."""
    try:
        reply = command.run(interaction, settings, tracker)
    except Exception:
        logger.exception("Error executing %s", command.name)
        reply = CommandReply(content=GENERIC_FAILURE)
    try:
        chat.edit_original_response(interaction["token"], reply)
    except Exception:
        logger.exception("Could not deliver the %s reply", command.name)
