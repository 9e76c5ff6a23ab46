"""Markdown rendering of portfolio, yield, and performance results."""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal, localcontext

from lighthouse_portfolio.core.models import (
    LegYield,
    PerformanceReport,
    PortfolioOutcome,
    PortfolioOverview,
    PortfolioRef,
    RankedMover,
    YieldSummary,
)

UNDEFINED = "n/a"


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


def _grouped(value: Decimal, max_fraction_digits: int) -> str:
    """Format with thousands separators and at most ``max_fraction_digits`` decimals."""
    # Large balances need more than the default 28 significant digits.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + max_fraction_digits + 2)
        rounded = value.quantize(Decimal(1).scaleb(-max_fraction_digits), rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)

    text = f"{rounded:,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_usd(value: Decimal) -> str:
    """
    Format a USD amount, e.g. ``$1,234.5`` or ``-$1,234.5``.

    Parameters
    ----------
    value : Decimal
        Amount in USD

    Returns
    -------
    str
        Amount with a dollar sign, thousands separators, and at most two
        decimals

    """
    text = _grouped(value, 2)
    if text.startswith("-"):
        return f"-${text[1:]}"
    return f"${text}"


def format_amount(value: Decimal) -> str:
    """Format a token quantity with at most six decimals."""
    return _grouped(value, 6)


def format_percentage(value: Decimal | None) -> str:
    """Format a percentage with at most two decimals; ``None`` renders as ``n/a``."""
    if value is None:
        return UNDEFINED
    return f"{_grouped(value, 2)}%"


def format_ratio(value: Decimal | None) -> str:
    """Format a plain ratio with at most four decimals; ``None`` renders as ``n/a``."""
    if value is None:
        return UNDEFINED
    return _grouped(value, 4)


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def markdown_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """
    Render a Markdown table.

    Parameters
    ----------
    headers : Sequence[str]
        Column titles
    rows : Sequence[Sequence[str]]
        Row cells, already formatted

    Returns
    -------
    str
        Table text, or ``_None_`` when there are no rows

    """
    if not rows:
        return "_None_"

    lines = [
        "| " + " | ".join(_cell(h) for h in headers) + " |",
        "|" + "|".join("-" * (len(h) + 2) for h in headers) + "|",
    ]
    lines.extend("| " + " | ".join(_cell(c) for c in row) + " |" for row in rows)
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


def render_portfolio_list(portfolios: Sequence[PortfolioRef]) -> str:
    """Render the user's portfolios as a bullet list."""
    if not portfolios:
        return "No portfolios found."

    lines = [f"## Portfolios ({len(portfolios)}):"]
    lines.extend(f"- {p.name} ({p.slug})" for p in portfolios)
    return "\n".join(lines)


def render_portfolio_overview(overview: PortfolioOverview) -> str:
    """Render a portfolio summary: total, wallets, asset types, major holdings."""
    wallets = "\n".join(f"- {w.name} ({w.type})" for w in overview.wallets) or "_None_"

    asset_types = markdown_table(
        ["Asset Type", "Net Value", "% of Portfolio"],
        [[item.type, format_usd(item.value), format_percentage(item.percentage)] for item in overview.asset_types],
    )

    holdings = markdown_table(
        ["Asset", "Value", "Amount"],
        [
            [f"{h.name} ({h.symbol})", format_usd(h.value), format_amount(h.amount)]
            for h in overview.major_holdings
        ],
    )

    return "\n\n".join(
        [
            f"# Lighthouse Portfolio Summary: {overview.portfolio.name}",
            f"## Total Portfolio Value: {format_usd(overview.total_usd_value)}",
            f"## Wallets ({len(overview.wallets)}):\n{wallets}",
            f"## Asset Type Breakdown:\n\n{asset_types}",
            f"## Major Holdings (>= {format_usd(overview.threshold)}):\n\n{holdings}",
        ]
    )


def render_all_overviews(outcomes: Sequence[PortfolioOutcome]) -> str:
    """Render one summary per portfolio, in the given order."""
    if not outcomes:
        return "No portfolios found."

    sections = []
    for outcome in outcomes:
        if outcome.overview is not None:
            sections.append(render_portfolio_overview(outcome.overview))
        else:
            sections.append(
                f"# Lighthouse Portfolio Summary: {outcome.portfolio.name}\n\n"
                f"Failed to fetch portfolio: {outcome.error}"
            )
    return "\n\n---\n\n".join(sections)


def _leg_rows(side: str, platform: str, legs: Sequence[LegYield]) -> list[list[str]]:
    return [
        [
            platform,
            side,
            leg.symbol,
            format_amount(leg.amount),
            format_usd(leg.usd_value),
            format_percentage(leg.apy),
            format_usd(leg.annual_usd),
        ]
        for leg in legs
    ]


def render_yield_summary(summary: YieldSummary) -> str:
    """Render portfolio yield totals, per-pool net yield, and leg detail."""
    title = "# Lighthouse Yield Summary"
    if summary.portfolio is not None:
        title = f"{title}: {summary.portfolio.name}"

    totals = "\n".join(
        [
            f"- Total Supplied: {format_usd(summary.total_supply_usd)}",
            f"- Total Borrowed: {format_usd(summary.total_borrow_usd)}",
            f"- Net Annual Yield: {format_usd(summary.total_yield_usd)}",
            f"- Average APY: {format_percentage(summary.avg_apy)}",
        ]
    )

    pools = markdown_table(
        ["Platform", "Network", "Account", "Supplied", "Borrowed", "Net Yield (1y)"],
        [
            [
                pool.platform,
                pool.network,
                pool.account,
                format_usd(pool.supply_usd),
                format_usd(pool.borrow_usd),
                format_usd(pool.net_yield_usd),
            ]
            for pool in summary.pools
        ],
    )

    leg_rows: list[list[str]] = []
    for pool in summary.pools:
        leg_rows.extend(_leg_rows("Supply", pool.platform, pool.supplied))
        leg_rows.extend(_leg_rows("Borrow", pool.platform, pool.borrowed))

    legs = markdown_table(["Platform", "Side", "Asset", "Amount", "Value", "APY", "Annual"], leg_rows)

    return "\n\n".join(
        [
            title,
            f"## Totals:\n{totals}",
            f"## Pools ({len(summary.pools)}):\n\n{pools}",
            f"## Positions:\n\n{legs}",
        ]
    )


def _mover_rows(movers: Sequence[RankedMover]) -> list[list[str]]:
    return [
        [
            m.symbol,
            format_usd(m.prev_usd_value),
            format_usd(m.curr_usd_value),
            format_usd(m.diff_usd_value),
            format_percentage(m.percent),
        ]
        for m in movers
    ]


def render_performance_report(report: PerformanceReport) -> str:
    """Render period return, change by asset type, and top gainers/losers."""
    title = "# Lighthouse Performance"
    if report.portfolio is not None:
        title = f"{title}: {report.portfolio.name}"

    change = report.period_return
    mover_headers = ["Asset", "Previous", "Current", "Change", "% Change"]

    by_type = markdown_table(
        ["Asset Type", "Previous", "Current", "Change", "Prev/Curr"],
        [
            [
                item.type,
                format_usd(item.prev_usd_value),
                format_usd(item.curr_usd_value),
                format_usd(item.diff_usd_value),
                format_ratio(item.percent),
            ]
            for item in report.change_by_type
        ],
    )

    return "\n\n".join(
        [
            title,
            f"Period: {report.starts_at} to {report.ends_at}",
            f"## Current Value: {format_usd(report.current_usd_value)}",
            f"## Change: {format_usd(change.absolute)} ({format_percentage(change.percent)})",
            f"## Change by Asset Type:\n\n{by_type}",
            f"## Top Gainers:\n\n{markdown_table(mover_headers, _mover_rows(report.gainers))}",
            f"## Top Losers:\n\n{markdown_table(mover_headers, _mover_rows(report.losers))}",
        ]
    )
