"""Yield engine computing supply/borrow exposure and net yield per lending pool."""

from collections.abc import Iterable, Sequence
from decimal import Decimal

from lighthouse_portfolio.core.models import LegYield, Pool, PoolYield, PortfolioRef, YieldLeg, YieldSummary


class YieldEngine:
    """
    Computes annualized income and cost for lending pools.

    Pools are independent of each other; ``aggregate`` is a plain sum over
    per-pool results, so its totals do not depend on pool order.

    """

    def compute_leg(self, leg: YieldLeg) -> LegYield:
        """
        Compute USD exposure and annualized USD flow of one leg.

        Parameters
        ----------
        leg : YieldLeg
            Supplied or borrowed asset with its rate

        Returns
        -------
        LegYield
            ``usd_value = amount * price`` and
            ``annual_usd = apy / 100 * amount * price``

        """
        usd_value = leg.amount * leg.asset.price
        return LegYield(
            symbol=leg.asset.symbol,
            amount=leg.amount,
            price=leg.asset.price,
            usd_value=usd_value,
            apy=leg.apy,
            annual_usd=leg.apy / 100 * leg.amount * leg.asset.price,
        )

    def compute_pool(self, pool: Pool) -> PoolYield:
        """
        Compute exposure and net annualized yield for a single pool.

        Parameters
        ----------
        pool : Pool
            Pool with paired supplied and borrowed legs

        Returns
        -------
        PoolYield
            ``net_yield_usd = sum(receive) - sum(pay)``

        """
        supplied = [self.compute_leg(leg) for leg in pool.supplied]
        borrowed = [self.compute_leg(leg) for leg in pool.borrowed]

        receive_usd = _sum(leg.annual_usd for leg in supplied)
        pay_usd = _sum(leg.annual_usd for leg in borrowed)

        return PoolYield(
            platform=pool.platform.name,
            network=pool.network.name,
            account=pool.account.name,
            name=pool.name,
            supply_usd=_sum(leg.usd_value for leg in supplied),
            borrow_usd=_sum(leg.usd_value for leg in borrowed),
            receive_usd=receive_usd,
            pay_usd=pay_usd,
            net_yield_usd=receive_usd - pay_usd,
            supplied=supplied,
            borrowed=borrowed,
        )

    def aggregate(
        self,
        pools: Sequence[Pool],
        portfolio: PortfolioRef | None = None,
    ) -> YieldSummary:
        """
        Compute portfolio-wide yield totals.

        Parameters
        ----------
        pools : Sequence[Pool]
            Pools to aggregate
        portfolio : PortfolioRef | None
            Owning portfolio, used for labeling only

        Returns
        -------
        YieldSummary
            Per-pool results in input order plus totals. ``avg_apy`` is
            ``total_yield_usd / total_supply_usd * 100``, or ``None`` when
            nothing is supplied.

        """
        results = [self.compute_pool(pool) for pool in pools]

        total_supply = _sum(result.supply_usd for result in results)
        total_borrow = _sum(result.borrow_usd for result in results)
        total_yield = _sum(result.net_yield_usd for result in results)

        avg_apy = None if total_supply == 0 else total_yield / total_supply * 100

        return YieldSummary(
            portfolio=portfolio,
            pools=results,
            total_supply_usd=total_supply,
            total_borrow_usd=total_borrow,
            total_yield_usd=total_yield,
            avg_apy=avg_apy,
        )


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, Decimal("0"))
