"""Tests for the command-line interface."""

import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from lighthouse_portfolio import mcp_server
from lighthouse_portfolio.cli import main as cli
from lighthouse_portfolio.cli.main import app
from lighthouse_portfolio.core.service import PortfolioService
from lighthouse_portfolio.data.loader import ENV_OVERRIDES
from lighthouse_portfolio.tools import LighthouseTools

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(monkeypatch, client_factory, session_store):
    """Route commands to tools backed by the mocked API."""
    for name in [*ENV_OVERRIDES, "LIGHTHOUSE_CONFIG"]:
        monkeypatch.delenv(name, raising=False)

    monkeypatch.setattr(cli, "console", Console(width=200, color_system=None))

    levels = []
    monkeypatch.setattr(cli, "configure_logging", levels.append)

    def from_settings(cls, settings):
        return cls(PortfolioService(client_factory(), session_store, settings))

    monkeypatch.setattr(LighthouseTools, "from_settings", classmethod(from_settings))
    return levels


def test_portfolios():
    result = runner.invoke(app, ["portfolios"])

    assert result.exit_code == 0
    assert "Main (main-123)" in result.output
    assert "Trading (trading-456)" in result.output


def test_portfolios_json():
    result = runner.invoke(app, ["portfolios", "--format", "json"])

    assert result.exit_code == 0
    assert json.loads(result.output) == [
        {"slug": "main-123", "name": "Main"},
        {"slug": "trading-456", "name": "Trading"},
    ]


def test_summary():
    result = runner.invoke(app, ["summary", "-p", "trad"])

    assert result.exit_code == 0
    assert "Lighthouse Portfolio Summary: Trading" in result.output
    assert "STABLECOIN" in result.output


def test_summary_json():
    result = runner.invoke(app, ["summary", "--format", "json"])

    data = json.loads(result.output)
    assert data["portfolio"] == {"slug": "main-123", "name": "Main"}
    assert [item["type"] for item in data["asset_types"]] == ["STABLECOIN", "NATIVE", "MEME"]
    assert [h["symbol"] for h in data["major_holdings"]] == ["USDC", "ETH", "stETH", "DAI"]


def test_yields_json():
    result = runner.invoke(app, ["yields", "-f", "json"])

    data = json.loads(result.output)
    assert [pool["platform"] for pool in data["pools"]] == ["Aave", "Compound"]


def test_performance():
    result = runner.invoke(app, ["performance", "-s", "2024-01-01"])

    assert result.exit_code == 0
    assert "Top Gainers" in result.output
    assert "BTC" in result.output


def test_performance_json_error():
    """Test a failed JSON query exits non-zero with the error message."""
    result = runner.invoke(app, ["performance", "-s", "tomorrow", "--format", "json"])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_overview():
    result = runner.invoke(app, ["overview"])

    assert result.exit_code == 0
    assert result.output.count("Lighthouse Portfolio Summary") == 2


def test_login_and_logout(session_store):
    result = runner.invoke(app, ["logout"])
    assert "Logged out of Lighthouse" in result.output
    assert session_store.load() is None

    result = runner.invoke(app, ["login", "https://lighthouse.one/transfer?token=t"])
    assert "Successfully authenticated with Lighthouse" in result.output
    assert session_store.load() is not None


def test_login_failure_is_reported():
    result = runner.invoke(app, ["login", "not-a-url"])

    assert result.exit_code == 0
    assert "Authentication failed: Invalid URL" in result.output


def test_log_level_option(cli_env):
    runner.invoke(app, ["--log-level", "DEBUG", "portfolios"])
    runner.invoke(app, ["portfolios"])

    assert cli_env == ["DEBUG", "WARNING"]


def test_missing_config_file(tmp_path):
    result = runner.invoke(app, ["--config", str(tmp_path / "missing.yaml"), "portfolios"])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_serve_uses_cli_settings(monkeypatch, cli_env, tmp_path):
    """Test the MCP server receives the settings loaded from --config."""
    config = tmp_path / "lighthouse.yaml"
    config.write_text("api:\n  base_url: https://example.invalid/v9\n")
    served = []
    monkeypatch.setattr(mcp_server, "run", served.append)

    result = runner.invoke(app, ["--config", str(config), "--log-level", "DEBUG", "serve"])

    assert result.exit_code == 0
    assert [settings.base_url for settings in served] == ["https://example.invalid/v9"]
    assert cli_env == ["DEBUG"]


def test_command_closes_client(monkeypatch):
    """Test the API client is closed once the command finishes."""
    built = []
    original = LighthouseTools.from_settings

    def tracking(cls, settings):
        tools = original(settings)
        built.append(tools.service.client)
        return tools

    monkeypatch.setattr(LighthouseTools, "from_settings", classmethod(tracking))

    result = runner.invoke(app, ["portfolios"])

    assert result.exit_code == 0
    assert len(built) == 1
    assert built[0].client.is_closed
