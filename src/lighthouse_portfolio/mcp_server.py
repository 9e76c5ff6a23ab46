"""
Lighthouse MCP server.

Exposes the portfolio tools to an MCP client over stdio. Every tool
answers with plain text, including on failure.
"""

from mcp.server.fastmcp import FastMCP

from lighthouse_portfolio.data.loader import Settings, load_settings
from lighthouse_portfolio.logging_setup import configure_logging
from lighthouse_portfolio.tools import LighthouseTools

mcp = FastMCP("Lighthouse MCP")

# Initialized on first use
_tools: LighthouseTools | None = None


def get_tools() -> LighthouseTools:
    """Get or initialize the shared tools instance."""
    global _tools
    if _tools is None:
        _tools = LighthouseTools.from_settings(load_settings())
    return _tools


def set_tools(tools: LighthouseTools | None) -> None:
    """Replace the shared tools instance (None resets to lazy initialization)."""
    global _tools
    _tools = tools


@mcp.tool()
def authenticate(url: str) -> str:
    """Authenticate with Lighthouse using a transfer token URL.

    Args:
        url: Transfer URL from the Lighthouse app, containing a token parameter
    """
    return get_tools().authenticate(url)


@mcp.tool()
def logout() -> str:
    """Log out of Lighthouse and clear the stored session."""
    return get_tools().logout()


@mcp.tool()
def list_portfolios() -> str:
    """List all Lighthouse portfolios available to the authenticated user."""
    return get_tools().list_portfolios()


@mcp.tool()
def get_lighthouse_portfolio(portfolio_name: str | None = None) -> str:
    """Fetch and display a Lighthouse portfolio with breakdown by asset types and major holdings.

    Args:
        portfolio_name: Full or partial portfolio name (default: first portfolio)
    """
    return get_tools().get_portfolio(portfolio_name)


@mcp.tool()
def get_lighthouse_yield(portfolio_name: str | None = None) -> str:
    """Fetch yield data for a Lighthouse portfolio with net annual yield per lending pool.

    Args:
        portfolio_name: Full or partial portfolio name (default: first portfolio)
    """
    return get_tools().get_yield(portfolio_name)


@mcp.tool()
def get_lighthouse_performance(portfolio_name: str | None = None, start_date: str | None = None) -> str:
    """Fetch performance of a Lighthouse portfolio with change by asset type, top gainers and losers.

    Args:
        portfolio_name: Full or partial portfolio name (default: first portfolio)
        start_date: Start of the period in YYYY-MM-DD format (default: 30 days ago)
    """
    return get_tools().get_performance(portfolio_name, start_date)


@mcp.tool()
def get_all_portfolios() -> str:
    """Fetch summaries of every Lighthouse portfolio."""
    return get_tools().get_all_portfolios()


def run(settings: Settings) -> None:
    """Serve the tools over stdio using ``settings``."""
    set_tools(LighthouseTools.from_settings(settings))
    mcp.run()


def main() -> None:
    """Run the MCP server on stdio with settings from the environment."""
    settings = load_settings()
    configure_logging(settings.log_level)
    run(settings)


if __name__ == "__main__":
    main()
