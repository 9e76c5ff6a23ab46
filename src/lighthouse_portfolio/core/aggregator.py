"""Portfolio aggregator for asset-type breakdowns and major holdings."""

from decimal import Decimal

from lighthouse_portfolio.core.models import (
    Account,
    AssetTypeBreakdown,
    MajorHolding,
    PortfolioOverview,
    PortfolioRef,
    PortfolioSnapshot,
)

DEFAULT_MAJOR_HOLDING_THRESHOLD = Decimal("1000")


class PortfolioAggregator:
    """
    Derives summary analytics from a portfolio snapshot.

    All methods are pure functions of their inputs; the snapshot is never
    modified.

    Parameters
    ----------
    threshold : Decimal
        Minimum USD value for an asset to count as a major holding

    """

    def __init__(self, threshold: Decimal = DEFAULT_MAJOR_HOLDING_THRESHOLD) -> None:
        self.threshold = threshold

    def breakdown_by_asset_type(self, snapshot: PortfolioSnapshot) -> list[AssetTypeBreakdown]:
        """
        Group asset values by asset type.

        Parameters
        ----------
        snapshot : PortfolioSnapshot
            Snapshot to summarize

        Returns
        -------
        list[AssetTypeBreakdown]
            One entry per asset type, largest value first. Types with equal
            value keep the order in which they were first encountered.
            ``percentage`` is ``None`` when the snapshot total is zero.

        """
        by_type: dict[str, Decimal] = {}

        for position in snapshot.positions:
            for asset in position.assets:
                by_type[asset.type] = by_type.get(asset.type, Decimal("0")) + asset.usd_value

        breakdown = [
            AssetTypeBreakdown(
                type=asset_type,
                value=value,
                percentage=_percent_of(value, snapshot.usd_value),
            )
            for asset_type, value in by_type.items()
        ]

        return sorted(breakdown, key=lambda item: item.value, reverse=True)

    def major_holdings(
        self,
        snapshot: PortfolioSnapshot,
        threshold: Decimal | None = None,
    ) -> list[MajorHolding]:
        """
        List assets worth at least ``threshold`` USD.

        Parameters
        ----------
        snapshot : PortfolioSnapshot
            Snapshot to scan
        threshold : Decimal | None
            Override for the aggregator's threshold

        Returns
        -------
        list[MajorHolding]
            Holdings sorted by value, largest first; equal values keep
            encounter order

        """
        if threshold is None:
            threshold = self.threshold

        holdings = [
            MajorHolding(
                name=asset.name,
                symbol=asset.symbol,
                value=asset.usd_value,
                amount=asset.amount,
            )
            for position in snapshot.positions
            for asset in position.assets
            if asset.usd_value >= threshold
        ]

        return sorted(holdings, key=lambda holding: holding.value, reverse=True)

    def wallets(self, snapshot: PortfolioSnapshot) -> list[Account]:
        """Return the snapshot's connected accounts in upstream order."""
        return list(snapshot.accounts.values())

    def summarize(
        self,
        snapshot: PortfolioSnapshot,
        portfolio: PortfolioRef,
        threshold: Decimal | None = None,
    ) -> PortfolioOverview:
        """
        Build the full overview for one portfolio.

        Parameters
        ----------
        snapshot : PortfolioSnapshot
            Latest snapshot of the portfolio
        portfolio : PortfolioRef
            Already-resolved portfolio reference used for labeling
        threshold : Decimal | None
            Override for the major-holding threshold

        Returns
        -------
        PortfolioOverview
            Total value, wallets, asset-type breakdown, and major holdings

        """
        if threshold is None:
            threshold = self.threshold

        return PortfolioOverview(
            portfolio=portfolio,
            total_usd_value=snapshot.usd_value,
            wallets=self.wallets(snapshot),
            asset_types=self.breakdown_by_asset_type(snapshot),
            major_holdings=self.major_holdings(snapshot, threshold),
            threshold=threshold,
        )


def _percent_of(value: Decimal, total: Decimal) -> Decimal | None:
    """Return ``value`` as a percentage of ``total``, or ``None`` for a zero total."""
    if total == 0:
        return None
    return value / total * 100
