"""Performance analyzer for period returns and gainer/loser rankings."""

from decimal import Decimal

from lighthouse_portfolio.core.models import (
    GainerLoserItem,
    PerformanceReport,
    PerformanceResponse,
    PeriodReturn,
    PortfolioRef,
    RankedMover,
    TypeChange,
)

DEFAULT_TOP_MOVERS = 5


class PerformanceAnalyzer:
    """
    Derives returns and rankings from a performance response.

    Rankings sort by ``diff_usd_value`` only. Python's sort is stable, so
    items with equal differences keep the order the API listed them in.

    Parameters
    ----------
    top_n : int
        Default number of gainers and losers to report

    """

    def __init__(self, top_n: int = DEFAULT_TOP_MOVERS) -> None:
        self.top_n = top_n

    def period_return(self, resp: PerformanceResponse) -> PeriodReturn:
        """
        Compute the absolute and relative value change over the window.

        ``percent`` divides by the last snapshot value, matching the
        Lighthouse dashboard, and is ``None`` when that value is zero.

        """
        percent = None
        if resp.last_snapshot_usd_value != 0:
            percent = resp.usd_value_change / resp.last_snapshot_usd_value * 100

        return PeriodReturn(absolute=resp.usd_value_change, percent=percent)

    def rank_change_by_type(self, resp: PerformanceResponse) -> list[TypeChange]:
        """
        Rank asset types by value change, largest gain first.

        Returns
        -------
        list[TypeChange]
            Types sorted descending by ``diff_usd_value``. ``percent`` is
            ``prev_usd_value / curr_usd_value`` (``None`` when the current
            value is zero).

        """
        changes = [
            TypeChange(
                type=item.type,
                prev_usd_value=item.prev_usd_value,
                curr_usd_value=item.curr_usd_value,
                diff_usd_value=item.diff_usd_value,
                percent=None if item.curr_usd_value == 0 else item.prev_usd_value / item.curr_usd_value,
            )
            for item in resp.change_by_type
        ]

        return sorted(changes, key=lambda change: change.diff_usd_value, reverse=True)

    def top_gainers(self, resp: PerformanceResponse, n: int | None = None) -> list[RankedMover]:
        """Return up to ``n`` gainers, largest ``diff_usd_value`` first."""
        ranked = sorted(resp.gainers, key=lambda item: item.diff_usd_value, reverse=True)
        return [_to_mover(item) for item in ranked[: self._limit(n)]]

    def top_losers(self, resp: PerformanceResponse, n: int | None = None) -> list[RankedMover]:
        """Return up to ``n`` losers, most negative ``diff_usd_value`` first."""
        ranked = sorted(resp.losers, key=lambda item: item.diff_usd_value)
        return [_to_mover(item) for item in ranked[: self._limit(n)]]

    def report(
        self,
        resp: PerformanceResponse,
        portfolio: PortfolioRef | None = None,
        n: int | None = None,
    ) -> PerformanceReport:
        """
        Build the full performance report for one portfolio.

        Parameters
        ----------
        resp : PerformanceResponse
            Raw performance response
        portfolio : PortfolioRef | None
            Already-resolved portfolio reference used for labeling
        n : int | None
            Number of gainers and losers (defaults to ``top_n``)

        Returns
        -------
        PerformanceReport
            Window, period return, ranked types, gainers, and losers

        """
        return PerformanceReport(
            portfolio=portfolio,
            starts_at=resp.starts_at,
            ends_at=resp.ends_at,
            current_usd_value=resp.last_snapshot_usd_value,
            period_return=self.period_return(resp),
            change_by_type=self.rank_change_by_type(resp),
            gainers=self.top_gainers(resp, n),
            losers=self.top_losers(resp, n),
        )

    def _limit(self, n: int | None) -> int:
        limit = self.top_n if n is None else n
        return max(limit, 0)


def _to_mover(item: GainerLoserItem) -> RankedMover:
    return RankedMover(
        symbol=item.symbol,
        type=item.type,
        prev_usd_value=item.prev_usd_value,
        curr_usd_value=item.curr_usd_value,
        diff_usd_value=item.diff_usd_value,
        percent=_percent_change(item.diff_usd_value, item.prev_usd_value),
    )


def _percent_change(diff: Decimal, prev: Decimal) -> Decimal | None:
    # A zero previous value means the asset was acquired inside the window.
    if prev == 0:
        return None
    return diff / prev * 100
