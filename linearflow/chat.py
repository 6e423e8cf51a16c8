"""Discord REST API v10 client."""

import httpx

from linearflow.models import CommandReply, Embed
from linearflow.settings import LinearFlowSettings

BASE_URL = "https://discord.com/api/v10"


class DiscordClient:
    def __init__(self, settings: LinearFlowSettings) -> None:
        if not settings.discord_token:
            raise RuntimeError("DISCORD_TOKEN is required")
        self._application_id = settings.discord_client_id
        self._headers = {
            "Authorization": f"Bot {settings.discord_token.get_secret_value()}",
            "User-Agent": "DiscordBot (linearflow, 0.1.0)",
        }

    def _request(self, method: str, path: str, body: dict | list | None = None, auth: bool = True) -> dict | list | None:
        response = httpx.request(
            method,
            f"{BASE_URL}{path}",
            headers=self._headers if auth else {},
            json=body,
            timeout=30,
        )
        if response.status_code == 401:
            raise RuntimeError("Discord API returned 401. Check DISCORD_TOKEN.")
        response.raise_for_status()
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def _require_application_id(self) -> str:
        if not self._application_id:
            raise RuntimeError("DISCORD_CLIENT_ID is required")
        return self._application_id

    def fetch_channel(self, channel_id: str) -> dict:
        try:
            channel = self._request("GET", f"/channels/{channel_id}")
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                raise RuntimeError(f"Channel not found: {channel_id}") from exc
            raise
        return channel  # type: ignore[return-value]

    def send_message(self, channel_id: str, embeds: list[Embed], content: str | None = None) -> dict:
        body: dict = {"embeds": [e.to_payload() for e in embeds]}
        if content:
            body["content"] = content
        return self._request("POST", f"/channels/{channel_id}/messages", body)  # type: ignore[return-value]

    def edit_original_response(self, interaction_token: str, reply: CommandReply) -> None:
        """Replace the deferred "thinking..." response of an interaction."""
        application_id = self._require_application_id()
        # Interaction webhooks are authorized by the token in the path, not the bot token
        self._request(
            "PATCH",
            f"/webhooks/{application_id}/{interaction_token}/messages/@original",
            reply.to_payload(),
            auth=False,
        )

    def register_commands(self, definitions: list[dict], guild_id: str | None = None) -> list[dict]:
        """Bulk-overwrite the application's slash commands (global, or one guild)."""
        application_id = self._require_application_id()
        path = f"/applications/{application_id}/commands"
        if guild_id:
            path = f"/applications/{application_id}/guilds/{guild_id}/commands"
        return self._request("PUT", path, definitions)  # type: ignore[return-value]
