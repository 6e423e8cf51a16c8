"""Linear webhook payloads, decoded into a tagged union keyed by ``type``.

Every nested field is optional: Linear omits relations that are unset, and
comment payloads carry the issue only as a partial reference. A nested value
of the wrong shape decodes as ``None`` so the formatters fall back to their
defaults; only the ``type`` tag and the ``data`` object itself are enforced.
"""

from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class _Lenient(_Payload):
    @field_validator("*", mode="wrap")
    @classmethod
    def _none_on_mismatch(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None


class TeamRef(_Lenient):
    id: str | None = None
    key: str | None = None
    name: str | None = None


class StateRef(_Lenient):
    id: str | None = None
    name: str | None = None


class UserRef(_Lenient):
    id: str | None = None
    name: str | None = None


class IssueData(_Lenient):
    id: str | None = None
    identifier: str | None = None
    title: str | None = None
    url: str | None = None
    priority: int | None = None
    state: StateRef | None = None
    assignee: UserRef | None = None
    team: TeamRef | None = None


class IssueRef(_Lenient):
    id: str | None = None
    identifier: str | None = None
    title: str | None = None
    url: str | None = None
    team: TeamRef | None = None


class CommentData(_Lenient):
    id: str | None = None
    body: str | None = None
    user: UserRef | None = None
    issue: IssueRef | None = None
    team: TeamRef | None = None


class UpdatedFrom(_Lenient):
    """Previous values of the fields an update touched."""

    state_id: str | None = Field(default=None, alias="stateId")


class IssueCreatedEvent(_Payload):
    type: Literal["Issue"]
    action: str | None = None
    data: IssueData


class IssueUpdatedEvent(_Payload):
    type: Literal["IssueUpdate"]
    action: str | None = None
    data: IssueData
    updated_from: UpdatedFrom | None = Field(default=None, alias="updatedFrom")

    @property
    def status_changed(self) -> bool:
        return bool(self.updated_from and self.updated_from.state_id)


class CommentCreatedEvent(_Payload):
    type: Literal["Comment"]
    action: str | None = None
    data: CommentData


WebhookEvent = Annotated[
    IssueCreatedEvent | IssueUpdatedEvent | CommentCreatedEvent,
    Field(discriminator="type"),
]

ALLOWED_EVENT_TYPES = frozenset({"Issue", "IssueUpdate", "Comment"})

_EVENT_ADAPTER = TypeAdapter(WebhookEvent)


def parse_event(payload: dict) -> IssueCreatedEvent | IssueUpdatedEvent | CommentCreatedEvent:
    """Decode a raw webhook body. Raises pydantic.ValidationError on a malformed payload."""
    return _EVENT_ADAPTER.validate_python(payload)


def event_team_id(payload: dict) -> str | None:
    """Return the originating team id from a raw payload, before full decoding."""
    data = payload.get("data")
    if not isinstance(data, dict):
        return None
    team = data.get("team")
    if isinstance(team, dict) and team.get("id"):
        return team["id"]
    # Comment payloads nest the team under the parent issue
    issue = data.get("issue")
    if isinstance(issue, dict) and isinstance(issue.get("team"), dict):
        return issue["team"].get("id")
    return None
