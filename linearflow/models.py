"""Shared pydantic models — the contract between the chat side and the tracker side."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_ATTACHMENTS = 3

# Discord rejects embeds over these lengths
EMBED_TITLE_LIMIT = 256
EMBED_DESCRIPTION_LIMIT = 4096


class ReportSource(str, Enum):
    QA = "QA"
    CS = "CS"

    @property
    def label(self) -> str:
        return "Quality Assurance" if self is ReportSource.QA else "Community Support"


class Attachment(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    content_type: str | None = None

    @property
    def is_image(self) -> bool:
        return bool(self.content_type and self.content_type.startswith("image/"))


class IssueReport(BaseModel):
    """One /reportissue submission. Built per invocation, discarded after the reply."""

    model_config = ConfigDict(frozen=True)

    source: ReportSource
    title: str
    description: str
    attachments: list[Attachment] = Field(default_factory=list, max_length=MAX_ATTACHMENTS)

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


class ReportContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    channel_name: str | None = None
    author_tag: str
    message_link: str
    team_id: str | None = None


class TrackerIssue(BaseModel):
    """Returned by create_issue / get_issue — identifier may lag behind creation."""

    model_config = ConfigDict(frozen=True)

    id: str
    identifier: str | None = None  # INK-17
    url: str
    title: str


class EmbedField(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    inline: bool = False


class Embed(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str | None = None
    color: int
    fields: list[EmbedField] = []
    url: str | None = None
    timestamp: datetime | None = None
    footer: str | None = None

    def to_payload(self) -> dict:
        """Render the Discord embed JSON object, clamping title and description."""
        payload: dict = {"title": self.title[:EMBED_TITLE_LIMIT], "color": self.color}
        if self.description is not None:
            payload["description"] = self.description[:EMBED_DESCRIPTION_LIMIT]
        if self.fields:
            payload["fields"] = [f.model_dump() for f in self.fields]
        if self.url:
            payload["url"] = self.url
        if self.timestamp:
            payload["timestamp"] = self.timestamp.isoformat()
        if self.footer:
            payload["footer"] = {"text": self.footer}
        return payload


class CommandReply(BaseModel):
    """What a slash command answers with: plain content, embeds, or both."""

    model_config = ConfigDict(frozen=True)

    content: str | None = None
    embeds: list[Embed] = []
    ephemeral: bool = False

    def to_payload(self) -> dict:
        payload: dict = {"embeds": [e.to_payload() for e in self.embeds]}
        if self.content is not None:
            payload["content"] = self.content
        if self.ephemeral:
            payload["flags"] = 64
        return payload
