"""Resolve a user-supplied portfolio name to a portfolio reference."""

from collections.abc import Sequence

from lighthouse_portfolio.core.errors import InvalidInputError
from lighthouse_portfolio.core.models import PortfolioRef


def find_portfolio(portfolios: Sequence[PortfolioRef], query: str | None = None) -> PortfolioRef:
    """
    Find a portfolio by name.

    Matching is case-insensitive: an exact name match wins, otherwise the
    first portfolio whose name contains ``query``. Without a query the first
    portfolio in upstream order is returned.

    Parameters
    ----------
    portfolios : Sequence[PortfolioRef]
        Known portfolios in upstream order
    query : str | None
        Full or partial portfolio name

    Returns
    -------
    PortfolioRef
        The matching portfolio

    Raises
    ------
    InvalidInputError
        If there are no portfolios or nothing matches ``query``

    """
    if not portfolios:
        msg = "The user has no portfolios. Please create one."
        raise InvalidInputError(msg)

    if not query:
        return portfolios[0]

    needle = query.lower()

    for portfolio in portfolios:
        if portfolio.name.lower() == needle:
            return portfolio

    for portfolio in portfolios:
        if needle in portfolio.name.lower():
            return portfolio

    available = ", ".join(p.name for p in portfolios)
    msg = f'Portfolio "{query}" not found. Available portfolios: {available}'
    raise InvalidInputError(msg)
