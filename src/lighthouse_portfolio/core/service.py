"""Portfolio service tying session, client, locator, and analytics together."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta

from lighthouse_portfolio.core.aggregator import PortfolioAggregator
from lighthouse_portfolio.core.errors import InvalidInputError, LighthouseError, UnauthenticatedError
from lighthouse_portfolio.core.locator import find_portfolio
from lighthouse_portfolio.core.models import (
    PerformanceReport,
    PortfolioOutcome,
    PortfolioOverview,
    PortfolioRef,
    YieldSummary,
)
from lighthouse_portfolio.core.performance import PerformanceAnalyzer
from lighthouse_portfolio.core.yields import YieldEngine
from lighthouse_portfolio.data.loader import Settings
from lighthouse_portfolio.integrations.lighthouse import LighthouseClient
from lighthouse_portfolio.integrations.session import Credential, SessionStore

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


class PortfolioService:
    """
    Orchestrates portfolio queries.

    Workflow for every query:
    1. Load the session credential from the store
    2. Resolve the requested portfolio name to a slug
    3. Fetch the raw response for that slug
    4. Run the matching analytics component

    Parameters
    ----------
    client : LighthouseClient
        API client
    session_store : SessionStore
        Credential persistence
    settings : Settings | None
        Analytics settings (threshold, top movers, windows, workers)

    """

    def __init__(
        self,
        client: LighthouseClient,
        session_store: SessionStore,
        settings: Settings | None = None,
    ) -> None:
        self.client = client
        self.session_store = session_store
        self.settings = settings or Settings()
        self.aggregator = PortfolioAggregator(threshold=self.settings.major_holding_threshold)
        self.yield_engine = YieldEngine()
        self.analyzer = PerformanceAnalyzer(top_n=self.settings.top_movers)

    def authenticate(self, url: str) -> Credential:
        """
        Log in with a transfer-token URL and persist the session.

        Any failure clears the stored session before the error propagates.

        """
        try:
            credential = self.client.login(url)
            self.session_store.save(credential)
        except Exception:
            self.session_store.clear()
            raise

        logger.info("Authenticated with Lighthouse")
        return credential

    def logout(self) -> None:
        """Forget the stored session."""
        self.session_store.clear()

    def credential(self) -> Credential:
        """
        Return the stored credential.

        Raises
        ------
        UnauthenticatedError
            If no session is stored

        """
        credential = self.session_store.load()
        if credential is None:
            raise UnauthenticatedError
        return credential

    def list_portfolios(self) -> list[PortfolioRef]:
        """List the user's portfolios in upstream order."""
        return self.client.list_portfolios(self.credential())

    def resolve_portfolio(self, name: str | None = None) -> PortfolioRef:
        """Resolve ``name`` (exact or partial, case-insensitive) to a portfolio."""
        return find_portfolio(self.list_portfolios(), name)

    def portfolio_overview(self, name: str | None = None) -> PortfolioOverview:
        """
        Summarize the latest snapshot of a portfolio.

        Parameters
        ----------
        name : str | None
            Portfolio name; the first portfolio when omitted

        Returns
        -------
        PortfolioOverview
            Total, wallets, asset-type breakdown, and major holdings

        """
        credential = self.credential()
        portfolio = find_portfolio(self.client.list_portfolios(credential), name)
        return self._overview(credential, portfolio)

    def yield_summary(self, name: str | None = None) -> YieldSummary:
        """Compute per-pool and total yield for a portfolio."""
        credential = self.credential()
        portfolio = find_portfolio(self.client.list_portfolios(credential), name)
        response = self.client.get_yields(credential, portfolio.slug)
        return self.yield_engine.aggregate(response.pools, portfolio)

    def performance_report(self, name: str | None = None, start_date: str | None = None) -> PerformanceReport:
        """
        Report portfolio performance since ``start_date``.

        Parameters
        ----------
        name : str | None
            Portfolio name; the first portfolio when omitted
        start_date : str | None
            Window start (``YYYY-MM-DD``); defaults to
            ``settings.default_performance_days`` ago

        Returns
        -------
        PerformanceReport
            Period return, ranked types, gainers, and losers

        """
        start = resolve_start_date(start_date, self.settings.default_performance_days)
        credential = self.credential()
        portfolio = find_portfolio(self.client.list_portfolios(credential), name)
        response = self.client.get_performance(credential, portfolio.slug, start)
        return self.analyzer.report(response, portfolio)

    def all_overviews(self) -> list[PortfolioOutcome]:
        """
        Summarize every portfolio concurrently.

        Returns
        -------
        list[PortfolioOutcome]
            One outcome per portfolio in upstream order (not completion
            order). A portfolio whose fetch fails carries the error message
            instead of an overview.

        """
        credential = self.credential()
        portfolios = self.client.list_portfolios(credential)
        if not portfolios:
            return []

        with ThreadPoolExecutor(max_workers=min(len(portfolios), self.settings.max_workers)) as executor:
            futures = [executor.submit(self._overview, credential, portfolio) for portfolio in portfolios]

            outcomes = []
            for portfolio, future in zip(portfolios, futures, strict=True):
                try:
                    outcomes.append(PortfolioOutcome(portfolio=portfolio, overview=future.result()))
                except LighthouseError as e:
                    logger.warning("Failed to summarize portfolio %s: %s", portfolio.slug, e)
                    outcomes.append(PortfolioOutcome(portfolio=portfolio, error=str(e)))
                except Exception as e:
                    logger.exception("Unexpected error summarizing portfolio %s", portfolio.slug)
                    outcomes.append(PortfolioOutcome(portfolio=portfolio, error=str(e)))

        return outcomes

    def _overview(self, credential: Credential, portfolio: PortfolioRef) -> PortfolioOverview:
        snapshot = self.client.get_snapshot(credential, portfolio.slug)
        return self.aggregator.summarize(snapshot, portfolio)


def resolve_start_date(start_date: str | None, default_days: int, today: date | None = None) -> str:
    """
    Validate a ``YYYY-MM-DD`` start date, or derive the default one.

    Raises
    ------
    InvalidInputError
        If ``start_date`` is not a valid ``YYYY-MM-DD`` date

    """
    if not start_date:
        today = today or date.today()
        return (today - timedelta(days=default_days)).strftime(DATE_FORMAT)

    try:
        parsed = datetime.strptime(start_date, DATE_FORMAT)
    except ValueError as e:
        msg = f"Invalid start date {start_date!r}; expected YYYY-MM-DD"
        raise InvalidInputError(msg) from e

    return parsed.strftime(DATE_FORMAT)
