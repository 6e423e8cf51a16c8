"""Tests for linearflow.settings — environment and .env resolution."""

from pathlib import Path

import pytest

import linearflow.settings as settings_module
from linearflow.settings import LinearFlowSettings, get_settings

_ENV_VARS = (
    "LINEAR_API_KEY",
    "LINEAR_TEAM_GATEWAY",
    "LINEAR_WEBHOOK_SECRET",
    "DISCORD_TOKEN",
    "DISCORD_CLIENT_ID",
    "DISCORD_PUBLIC_KEY",
    "DISCORD_CHANNEL_ISSUES",
    "WEBHOOK_PORT",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Isolate from developer shell env vars and any .env in the repo."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    settings_module.get_settings.cache_clear()
    yield
    settings_module.get_settings.cache_clear()


def test_defaults() -> None:
    s = LinearFlowSettings()
    assert s.linear_api_key is None
    assert s.linear_team_gateway is None
    assert s.linear_webhook_secret is None
    assert s.webhook_port == 3000
    assert s.log_level == "INFO"


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LINEAR_API_KEY", "lin_api_env")
    monkeypatch.setenv("LINEAR_TEAM_GATEWAY", "team_gw")
    monkeypatch.setenv("DISCORD_CHANNEL_ISSUES", "123")
    monkeypatch.setenv("WEBHOOK_PORT", "8080")

    s = LinearFlowSettings()
    assert s.linear_api_key is not None
    assert s.linear_api_key.get_secret_value() == "lin_api_env"
    assert s.linear_team_gateway == "team_gw"
    assert s.discord_channel_issues == "123"
    assert s.webhook_port == 8080


def test_reads_dotenv(tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("DISCORD_TOKEN=from-dotenv\nLINEAR_TEAM_GATEWAY=T1\nUNRELATED=1\n")
    s = LinearFlowSettings()
    assert s.discord_token is not None
    assert s.discord_token.get_secret_value() == "from-dotenv"
    assert s.linear_team_gateway == "T1"


def test_environment_beats_dotenv(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("LINEAR_TEAM_GATEWAY=from-dotenv\n")
    monkeypatch.setenv("LINEAR_TEAM_GATEWAY", "from-env")
    assert LinearFlowSettings().linear_team_gateway == "from-env"


def test_secrets_are_masked_in_repr(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DISCORD_TOKEN", "very-secret-token")
    assert "very-secret-token" not in repr(LinearFlowSettings())


def test_get_settings_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LINEAR_TEAM_GATEWAY", "first")
    first = get_settings()
    monkeypatch.setenv("LINEAR_TEAM_GATEWAY", "second")
    assert get_settings() is first
    assert get_settings().linear_team_gateway == "first"
