"""FastAPI application serving /health, the tracker webhook and Discord interactions on one listener."""

import json
import logging
from collections.abc import Mapping
from typing import Any

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from nacl.exceptions import BadSignatureError
from nacl.signing import VerifyKey

from linearflow.chat import DiscordClient
from linearflow.commands import GENERIC_FAILURE, Command, build_registry, run_deferred
from linearflow.models import CommandReply
from linearflow.providers.base import TrackerProvider
from linearflow.settings import LinearFlowSettings
from linearflow.webhooks import SIGNATURE_HEADER, dispatch_event, signature_valid

logger = logging.getLogger(__name__)

# Discord interaction types / callback types
PING = 1
APPLICATION_COMMAND = 2
PONG = 1
CHANNEL_MESSAGE_WITH_SOURCE = 4
DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE = 5


def interaction_signature_valid(public_key: str, signature: str | None, timestamp: str | None, body: bytes) -> bool:
    """Verify Discord's Ed25519 signature over timestamp + raw body."""
    if not signature or not timestamp:
        return False
    try:
        VerifyKey(bytes.fromhex(public_key)).verify(timestamp.encode("utf-8") + body, bytes.fromhex(signature))
    except (BadSignatureError, ValueError, TypeError):
        return False
    return True


def _ephemeral(content: str) -> dict[str, Any]:
    return {"type": CHANNEL_MESSAGE_WITH_SOURCE, "data": CommandReply(content=content, ephemeral=True).to_payload()}


def create_app(
    settings: LinearFlowSettings,
    chat: DiscordClient,
    tracker: TrackerProvider,
    registry: Mapping[str, Command] | None = None,
) -> FastAPI:
    commands = registry if registry is not None else build_registry()
    app = FastAPI(title="LinearFlow")

    def route_interaction(interaction: dict, background_tasks: BackgroundTasks) -> dict[str, Any]:
        interaction_type = interaction.get("type")
        if interaction_type == PING:
            return {"type": PONG}
        if interaction_type != APPLICATION_COMMAND:
            logger.info("Ignoring interaction type: %s", interaction_type)
            return _ephemeral("This interaction is not supported.")

        name = (interaction.get("data") or {}).get("name")
        command = commands.get(name)
        if command is None:
            logger.error("No command matching %s was found.", name)
            return _ephemeral(f"Unknown command: {name}")

        # Discord expects an answer within 3 seconds; the reply is edited in later
        background_tasks.add_task(run_deferred, command, interaction, settings, tracker, chat)
        return {"type": DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE}

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Liveness only; no dependency checks."""
        return {"status": "ok"}

    @app.post("/webhook/{tracker_name}")
    async def tracker_webhook(tracker_name: str, request: Request) -> JSONResponse:
        """
        Relay a Linear issue/comment event into the issues channel.

        Returns:
            200 {"received": true} for handled and ignored events alike.
            401 when a webhook secret is configured and the signature does not match.
            500 {"error": ...} when an accepted event could not be delivered.
        """
        body = await request.body()
        if settings.linear_webhook_secret is not None:
            secret = settings.linear_webhook_secret.get_secret_value()
            if not signature_valid(body, request.headers.get(SIGNATURE_HEADER), secret):
                logger.warning("Rejected %s webhook: signature mismatch", tracker_name)
                return JSONResponse(status_code=401, content={"error": "unauthorized"})

        try:
            payload = json.loads(body or b"{}")
        except ValueError:
            logger.warning("Ignoring %s webhook with a non-JSON body", tracker_name)
            return JSONResponse(content={"received": True})
        if not isinstance(payload, dict):
            logger.warning("Ignoring %s webhook with a non-object body", tracker_name)
            return JSONResponse(content={"received": True})

        try:
            await run_in_threadpool(dispatch_event, payload, settings, chat)
        except Exception:
            logger.exception("Error handling webhook")
            return JSONResponse(status_code=500, content={"error": "Internal server error"})
        return JSONResponse(content={"received": True})

    @app.post("/interactions")
    async def interactions(request: Request, background_tasks: BackgroundTasks) -> JSONResponse:
        """Discord HTTP interactions endpoint (slash commands)."""
        body = await request.body()
        if not settings.discord_public_key or not interaction_signature_valid(
            settings.discord_public_key,
            request.headers.get("X-Signature-Ed25519"),
            request.headers.get("X-Signature-Timestamp"),
            body,
        ):
            return JSONResponse(status_code=401, content={"error": "invalid request signature"})

        try:
            response = route_interaction(json.loads(body), background_tasks)
        except Exception:
            logger.exception("Error dispatching interaction")
            response = _ephemeral(GENERIC_FAILURE)
        return JSONResponse(content=response)

    return app
