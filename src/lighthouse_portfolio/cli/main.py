"""CLI for Lighthouse portfolio summaries."""

import json
from collections.abc import Callable
from enum import StrEnum
from pathlib import Path

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markdown import Markdown

from lighthouse_portfolio.core.errors import LighthouseError
from lighthouse_portfolio.data.loader import Settings, load_settings
from lighthouse_portfolio.logging_setup import configure_logging
from lighthouse_portfolio.tools import LighthouseTools

app = typer.Typer(
    name="lighthouse-portfolio",
    help="Summarize Lighthouse crypto portfolios: holdings, yield, and performance",
    add_completion=False,
)

console = Console()


class OutputFormat(StrEnum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


FORMAT_OPTION = typer.Option(OutputFormat.TABLE, "--format", "-f", help="Output format")
PORTFOLIO_OPTION = typer.Option(None, "--portfolio", "-p", help="Full or partial portfolio name")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", "-c", help="Settings YAML file"),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help="Logging level (e.g. DEBUG)"),
) -> None:
    """Load settings and configure logging for all commands."""
    try:
        settings = load_settings(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Invalid configuration:[/bold red] {e}")
        raise typer.Exit(code=1)

    configure_logging(log_level or settings.log_level)
    ctx.obj = settings


def _tools(ctx: typer.Context) -> LighthouseTools:
    settings: Settings = ctx.obj
    tools = LighthouseTools.from_settings(settings)
    ctx.call_on_close(tools.service.client.close)
    return tools


def _output_markdown(text: str) -> None:
    console.print(Markdown(text))


def _output_json(result: BaseModel | list[BaseModel]) -> None:
    """Output a result model (or list of models) as JSON."""
    if isinstance(result, list):
        data = [item.model_dump(mode="json") for item in result]
    else:
        data = result.model_dump(mode="json")
    console.print_json(json.dumps(data))


def _run_json(fetch: Callable[[], BaseModel | list[BaseModel]]) -> None:
    """Fetch a structured result and print it as JSON, exiting non-zero on failure."""
    try:
        result = fetch()
    except LighthouseError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)
    _output_json(result)


@app.command()
def login(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Transfer URL from the Lighthouse app"),
) -> None:
    """Authenticate with a transfer-token URL and store the session."""
    console.print(_tools(ctx).authenticate(url), markup=False)


@app.command()
def logout(ctx: typer.Context) -> None:
    """Clear the stored session."""
    console.print(_tools(ctx).logout(), markup=False)


@app.command()
def portfolios(ctx: typer.Context, format: OutputFormat = FORMAT_OPTION) -> None:
    """List your portfolios."""
    tools = _tools(ctx)
    if format == OutputFormat.JSON:
        _run_json(tools.service.list_portfolios)
    else:
        _output_markdown(tools.list_portfolios())


@app.command()
def summary(
    ctx: typer.Context,
    portfolio: str | None = PORTFOLIO_OPTION,
    format: OutputFormat = FORMAT_OPTION,
) -> None:
    """
    Show a portfolio's asset-type breakdown and major holdings.

    Examples:

        # First portfolio
        lighthouse-portfolio summary

        # Portfolio matching "trad"
        lighthouse-portfolio summary -p trad
    """
    tools = _tools(ctx)
    if format == OutputFormat.JSON:
        _run_json(lambda: tools.service.portfolio_overview(portfolio))
    else:
        _output_markdown(tools.get_portfolio(portfolio))


@app.command()
def yields(
    ctx: typer.Context,
    portfolio: str | None = PORTFOLIO_OPTION,
    format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Show supplied/borrowed value and net annual yield per lending pool."""
    tools = _tools(ctx)
    if format == OutputFormat.JSON:
        _run_json(lambda: tools.service.yield_summary(portfolio))
    else:
        _output_markdown(tools.get_yield(portfolio))


@app.command()
def performance(
    ctx: typer.Context,
    portfolio: str | None = PORTFOLIO_OPTION,
    start_date: str | None = typer.Option(None, "--start-date", "-s", help="Period start (YYYY-MM-DD)"),
    format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Show period return, change by asset type, and top gainers/losers."""
    tools = _tools(ctx)
    if format == OutputFormat.JSON:
        _run_json(lambda: tools.service.performance_report(portfolio, start_date))
    else:
        _output_markdown(tools.get_performance(portfolio, start_date))


@app.command()
def overview(ctx: typer.Context, format: OutputFormat = FORMAT_OPTION) -> None:
    """Summarize every portfolio."""
    tools = _tools(ctx)
    if format == OutputFormat.JSON:
        _run_json(tools.service.all_overviews)
    else:
        _output_markdown(tools.get_all_portfolios())


@app.command()
def serve(ctx: typer.Context) -> None:
    """Run the MCP server on stdio."""
    from lighthouse_portfolio.mcp_server import run as run_server

    run_server(ctx.obj)


if __name__ == "__main__":
    app()
