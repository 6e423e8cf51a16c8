"""LinearFlow CLI — serve the bot, register its commands, inspect config."""

import logging
from typing import Annotated

import typer
import uvicorn
from pydantic import SecretStr
from rich import print as rprint
from rich.logging import RichHandler
from rich.table import Table

from linearflow.chat import DiscordClient
from linearflow.commands import COMMANDS
from linearflow.providers.linear import LinearProvider
from linearflow.server import create_app
from linearflow.settings import LinearFlowSettings, get_settings

app = typer.Typer(help="LinearFlow: Discord bug reports ⇄ Linear issues", no_args_is_help=True)


# ---------------------------------------------------------------------------
# Client factories
# ---------------------------------------------------------------------------


def get_chat(settings: LinearFlowSettings) -> DiscordClient:
    try:
        return DiscordClient(settings)
    except RuntimeError as exc:
        rprint(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc


def get_tracker(settings: LinearFlowSettings) -> LinearProvider:
    try:
        return LinearProvider(settings)
    except RuntimeError as exc:
        rprint(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
        force=True,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("serve")
def serve(
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "0.0.0.0",
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Listen port (defaults to WEBHOOK_PORT)"),
    ] = None,
) -> None:
    """Run the webhook receiver and the interactions endpoint."""
    settings = get_settings()
    configure_logging(settings.log_level)

    if not settings.linear_team_gateway:
        rprint("[yellow]Warning:[/yellow] LINEAR_TEAM_GATEWAY is not set; reports will be refused.")
    if not settings.discord_public_key:
        rprint("[yellow]Warning:[/yellow] DISCORD_PUBLIC_KEY is not set; slash commands will be rejected.")

    web = create_app(settings, chat=get_chat(settings), tracker=get_tracker(settings))
    listen_port = port or settings.webhook_port
    rprint(f"📡 Webhook server listening on port {listen_port}")
    uvicorn.run(web, host=host, port=listen_port, log_config=None)


@app.command("register-commands")
def register_commands(
    guild: Annotated[
        str | None,
        typer.Option("--guild", "-g", help="Register for one guild only (applies instantly)"),
    ] = None,
) -> None:
    """Register the slash commands with Discord."""
    settings = get_settings()
    chat = get_chat(settings)
    try:
        registered = chat.register_commands([c.definition for c in COMMANDS], guild_id=guild)
    except RuntimeError as exc:
        rprint(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc

    scope = f"guild {guild}" if guild else "all guilds"
    for command in registered or []:
        rprint(f"[green]✓[/green] /{command['name']} registered for {scope}")


@app.command("config-show")
def config_show() -> None:
    """Show resolved configuration (masks credentials)."""
    settings = get_settings()

    def mask(secret: SecretStr | None) -> str:
        if secret is None:
            return "[dim](not set)[/dim]"
        val = secret.get_secret_value()
        if len(val) <= 5:
            return "***"
        return f"...{val[-5:]}"

    def plain(val: str | None) -> str:
        return val or "[dim](not set)[/dim]"

    table = Table(title="LinearFlow Configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("linear_api_key", mask(settings.linear_api_key))
    table.add_row("linear_team_gateway", plain(settings.linear_team_gateway))
    table.add_row("linear_webhook_secret", mask(settings.linear_webhook_secret))
    table.add_row("discord_token", mask(settings.discord_token))
    table.add_row("discord_client_id", plain(settings.discord_client_id))
    table.add_row("discord_public_key", plain(settings.discord_public_key))
    table.add_row("discord_channel_issues", plain(settings.discord_channel_issues))
    table.add_row("webhook_port", str(settings.webhook_port))
    table.add_row("log_level", settings.log_level)

    rprint(table)
