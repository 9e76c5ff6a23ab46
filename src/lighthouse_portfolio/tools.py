"""Text-returning query tools shared by the MCP server and the CLI."""

import logging
from collections.abc import Callable

from lighthouse_portfolio.core.errors import LighthouseError
from lighthouse_portfolio.core.service import PortfolioService
from lighthouse_portfolio.data.loader import Settings
from lighthouse_portfolio.integrations.lighthouse import LighthouseClient
from lighthouse_portfolio.integrations.retry import RetryConfig
from lighthouse_portfolio.integrations.session import FileSessionStore
from lighthouse_portfolio.reporting import formatter

logger = logging.getLogger(__name__)


class LighthouseTools:
    """
    User-facing tools. Every tool answers with text and never raises.

    Parameters
    ----------
    service : PortfolioService
        Service performing the queries

    """

    def __init__(self, service: PortfolioService) -> None:
        self.service = service

    @classmethod
    def from_settings(cls, settings: Settings) -> "LighthouseTools":
        """Wire a file-backed session store and an API client from ``settings``."""
        client = LighthouseClient(
            base_url=settings.base_url,
            timeout=settings.timeout,
            retry_config=RetryConfig(max_retries=settings.max_retries),
        )
        store = FileSessionStore(settings.session_file)
        return cls(PortfolioService(client, store, settings))

    def authenticate(self, url: str) -> str:
        """Authenticate with a transfer-token URL from the Lighthouse app."""

        def run() -> str:
            self.service.authenticate(url)
            return "Successfully authenticated with Lighthouse"

        return _answer("Authentication", run)

    def logout(self) -> str:
        """Clear the stored Lighthouse session."""

        def run() -> str:
            self.service.logout()
            return "Logged out of Lighthouse"

        return _answer("Logout", run)

    def list_portfolios(self) -> str:
        """List the portfolios available to the authenticated user."""
        return _answer(
            "Listing portfolios",
            lambda: formatter.render_portfolio_list(self.service.list_portfolios()),
        )

    def get_portfolio(self, portfolio_name: str | None = None) -> str:
        """Portfolio summary with asset-type breakdown and major holdings."""
        return _answer(
            "Fetching Lighthouse portfolio",
            lambda: formatter.render_portfolio_overview(self.service.portfolio_overview(portfolio_name)),
        )

    def get_yield(self, portfolio_name: str | None = None) -> str:
        """Yield summary with net annual yield per lending pool."""
        return _answer(
            "Fetching Lighthouse yield data",
            lambda: formatter.render_yield_summary(self.service.yield_summary(portfolio_name)),
        )

    def get_performance(self, portfolio_name: str | None = None, start_date: str | None = None) -> str:
        """Performance since ``start_date`` with change by type, gainers, and losers."""
        return _answer(
            "Fetching Lighthouse performance",
            lambda: formatter.render_performance_report(
                self.service.performance_report(portfolio_name, start_date)
            ),
        )

    def get_all_portfolios(self) -> str:
        """Summaries of every portfolio, fetched concurrently."""
        return _answer(
            "Fetching Lighthouse portfolios",
            lambda: formatter.render_all_overviews(self.service.all_overviews()),
        )


def _answer(action: str, run: Callable[[], str]) -> str:
    """Run a tool body and turn any failure into a plain-text answer."""
    try:
        return run()
    except LighthouseError as e:
        logger.info("%s failed: %s", action, e)
        return f"{action} failed: {e}"
    except Exception as e:
        logger.exception("%s failed unexpectedly", action)
        return f"{action} failed: {e}"
