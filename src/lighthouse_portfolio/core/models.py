"""Data models for Lighthouse snapshots, yields, performance, and derived analytics."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from lighthouse_portfolio.core.errors import DataContractError


class LighthouseModel(BaseModel):
    """Base model reading the API's camelCase payloads into snake_case fields."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ---------------------------------------------------------------------------
# Shared reference records
# ---------------------------------------------------------------------------


class Account(LighthouseModel):
    """
    Connected wallet or exchange identity.

    Attributes
    ----------
    id : str
        Account identifier, unique within a snapshot
    name : str
        Display name
    type : str
        Account kind as reported upstream (e.g. 'WALLET', 'EXCHANGE')

    """

    id: str
    name: str
    type: str = ""


class Network(LighthouseModel):
    """Blockchain network a position lives on."""

    id: str
    name: str
    logo_url: str | None = None


class Platform(LighthouseModel):
    """Protocol or venue holding a position."""

    id: str
    name: str
    logo_url: str | None = None
    slug: str | None = None


class PortfolioRef(LighthouseModel):
    """
    Reference to a portfolio (Lighthouse workspace).

    Attributes
    ----------
    slug : str
        Workspace slug used in API paths
    name : str
        Display name

    """

    slug: str
    name: str


# ---------------------------------------------------------------------------
# /user
# ---------------------------------------------------------------------------


class UserPortfolio(LighthouseModel):
    """Portfolio entry listed on the user record."""

    id: str = ""
    name: str
    role: str = ""
    slug: str

    def to_ref(self) -> PortfolioRef:
        """Return the slug/name reference for this portfolio."""
        return PortfolioRef(slug=self.slug, name=self.name)


class User(LighthouseModel):
    """Authenticated user and the portfolios they can access."""

    id: str
    portfolios: list[UserPortfolio] = Field(default_factory=list)


class UserResponse(LighthouseModel):
    """Response from the /user endpoint."""

    user: User


# ---------------------------------------------------------------------------
# /snapshots/latest
# ---------------------------------------------------------------------------


class HealthFactor(LighthouseModel):
    """Health factor reported for a leveraged position."""

    value: Decimal
    method: str = ""


class Asset(LighthouseModel):
    """
    Asset held inside a position.

    Attributes
    ----------
    id : str
        Asset identifier
    symbol : str
        Ticker symbol
    name : str
        Full asset name
    type : str
        Open category string (e.g. 'STABLECOIN', 'NATIVE', 'NFT')
    amount : Decimal
        Quantity held
    price : Decimal
        USD price per unit
    usd_value : Decimal
        Source-computed USD value (approximately amount * price)

    """

    id: str
    symbol: str
    name: str
    type: str
    amount: Decimal
    price: Decimal = Decimal("0")
    usd_value: Decimal
    logo_url: str | None = None
    context: str | None = None
    collection_id: str | None = None


class Position(LighthouseModel):
    """
    Holding location within a snapshot (wallet balance, deposit, loan, NFT).

    The sum of ``assets[].usd_value`` approximates ``usd_value`` but is not
    required to match it.

    """

    id: str
    type: str
    account_id: str
    network_id: str = ""
    platform_id: str = ""
    usd_value: Decimal
    assets: list[Asset] = Field(default_factory=list)
    health_factor: HealthFactor | None = None


class NftCollection(LighthouseModel):
    """NFT collection metadata referenced by NFT assets."""

    id: str
    name: str
    description: str = ""
    logo_url: str | None = None


class PortfolioSnapshot(LighthouseModel):
    """
    Latest valuation of a portfolio with its constituent positions.

    ``usd_value`` is the authoritative total; percentages divide by it,
    never by a recomputed sum.

    """

    id: str = ""
    status: str = ""
    usd_value: Decimal
    taken_at: str | None = None
    finished_at: str | None = None
    accounts: dict[str, Account] = Field(default_factory=dict)
    networks: dict[str, Network] = Field(default_factory=dict)
    platforms: dict[str, Platform] = Field(default_factory=dict)
    positions: list[Position] = Field(default_factory=list)
    nft_collections: dict[str, NftCollection] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# /yields
# ---------------------------------------------------------------------------


class YieldAsset(LighthouseModel):
    """Asset supplied to or borrowed from a pool."""

    id: str = ""
    symbol: str
    name: str = ""
    type: str = ""
    price: Decimal
    logo_url: str | None = None


class YieldLeg(LighthouseModel):
    """
    One supplied or borrowed asset paired with the rate it earns or costs.

    Attributes
    ----------
    asset : YieldAsset
        Supplied or borrowed asset
    amount : Decimal
        Quantity supplied or borrowed
    apy : Decimal
        Annual percentage yield (5 means 5%)
    apy_type : str | None
        Rate source as reported upstream (e.g. 'NATIVE', 'POOL')

    """

    asset: YieldAsset
    amount: Decimal
    apy: Decimal
    apy_type: str | None = None


class PoolAccount(LighthouseModel):
    """Account owning a pool position."""

    id: str
    name: str


def _pair_legs(
    amounts: list[Any] | None, rates: list[Any] | None, side: str, pool_name: str
) -> list[dict[str, Any]]:
    """Zip positional amount and rate arrays into leg payloads; null arrays count as empty."""
    amounts = amounts or []
    rates = rates or []
    if len(amounts) != len(rates):
        msg = (
            f"Pool {pool_name!r} has {len(amounts)} {side} entries but {len(rates)} rate entries; "
            "legs must be paired by position"
        )
        raise DataContractError(msg)

    return [
        {
            "asset": amount.get("asset"),
            "amount": amount.get("amount"),
            "apy": rate.get("apy"),
            "apy_type": rate.get("type"),
        }
        for amount, rate in zip(amounts, rates, strict=True)
    ]


class Pool(LighthouseModel):
    """
    Lending or yield position on a single platform.

    The API sends ``supply``/``receive`` and ``borrow``/``pay`` as parallel
    arrays paired by index. They are zipped into ``supplied`` and
    ``borrowed`` legs when the pool is parsed; a length mismatch raises
    ``DataContractError``.

    """

    platform: Platform
    network: Network
    account: PoolAccount
    name: str = ""
    supplied: list[YieldLeg] = Field(default_factory=list)
    borrowed: list[YieldLeg] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _pair_wire_arrays(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not {"supply", "receive", "borrow", "pay"} & data.keys():
            return data

        data = dict(data)
        pool_name = data.get("name") or "<unnamed>"
        data["supplied"] = _pair_legs(data.pop("supply", []), data.pop("receive", []), "supply", pool_name)
        data["borrowed"] = _pair_legs(data.pop("borrow", []), data.pop("pay", []), "borrow", pool_name)
        return data


class YieldResponse(LighthouseModel):
    """Response from the /yields endpoint."""

    pools: list[Pool] = Field(default_factory=list)
    platforms: list[Platform] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# /performance
# ---------------------------------------------------------------------------


class TimeRangePresets(LighthouseModel):
    """Start dates for the preset performance windows."""

    one_day: str | None = Field(default=None, alias="1d")
    seven_days: str | None = Field(default=None, alias="7d")
    thirty_days: str | None = Field(default=None, alias="30d")
    ninety_days: str | None = Field(default=None, alias="90d")


class ValueSnapshot(LighthouseModel):
    """Point on the portfolio value series."""

    id: str = ""
    timestamp: str
    value: Decimal


class GainerLoserItem(LighthouseModel):
    """
    Value change of a single asset between two snapshots.

    ``diff_usd_value`` is supplied by the source and used as-is for ranking.

    """

    id: str = ""
    symbol: str
    type: str = ""
    logo_url: str | None = None
    curr_amount: Decimal | None = None
    curr_price: Decimal | None = None
    curr_usd_value: Decimal
    prev_amount: Decimal | None = None
    prev_price: Decimal | None = None
    prev_usd_value: Decimal
    diff_usd_value: Decimal


class ChangeByTypeItem(LighthouseModel):
    """Value change of one asset type between two snapshots."""

    type: str
    curr_usd_value: Decimal
    prev_usd_value: Decimal
    diff_usd_value: Decimal


class PerformanceResponse(LighthouseModel):
    """Response from the /performance endpoint for the window [starts_at, ends_at]."""

    starts_at: str
    ends_at: str
    presets: TimeRangePresets | None = None
    usd_value_change: Decimal
    last_snapshot_usd_value: Decimal
    snapshots: list[ValueSnapshot] = Field(default_factory=list)
    gainers: list[GainerLoserItem] = Field(default_factory=list)
    losers: list[GainerLoserItem] = Field(default_factory=list)
    change_by_type: list[ChangeByTypeItem] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Derived results
#
# Ratios are ``None`` when their denominator is zero ("undefined"); the
# formatter renders them as "n/a".
# ---------------------------------------------------------------------------


class AssetTypeBreakdown(LighthouseModel):
    """Total USD value held in one asset type and its share of the portfolio."""

    type: str
    value: Decimal
    percentage: Decimal | None


class MajorHolding(LighthouseModel):
    """Asset at or above the major-holding threshold."""

    name: str
    symbol: str
    value: Decimal
    amount: Decimal


class PortfolioOverview(LighthouseModel):
    """
    Summary of a portfolio snapshot.

    Attributes
    ----------
    portfolio : PortfolioRef
        Portfolio the snapshot belongs to
    total_usd_value : Decimal
        Authoritative snapshot total
    wallets : list[Account]
        Connected accounts
    asset_types : list[AssetTypeBreakdown]
        Value per asset type, largest first
    major_holdings : list[MajorHolding]
        Assets at or above ``threshold``, largest first
    threshold : Decimal
        Major-holding threshold in USD

    """

    portfolio: PortfolioRef
    total_usd_value: Decimal
    wallets: list[Account] = Field(default_factory=list)
    asset_types: list[AssetTypeBreakdown] = Field(default_factory=list)
    major_holdings: list[MajorHolding] = Field(default_factory=list)
    threshold: Decimal = Decimal("1000")


class PortfolioOutcome(LighthouseModel):
    """Overview of one portfolio in a multi-portfolio run, or the reason it failed."""

    portfolio: PortfolioRef
    overview: PortfolioOverview | None = None
    error: str | None = None


class LegYield(LighthouseModel):
    """USD exposure and annualized income or cost of a single pool leg."""

    symbol: str
    amount: Decimal
    price: Decimal
    usd_value: Decimal
    apy: Decimal
    annual_usd: Decimal


class PoolYield(LighthouseModel):
    """
    Per-pool yield figures.

    ``net_yield_usd`` is the annualized income of supplied legs minus the
    annualized cost of borrowed legs.

    """

    platform: str
    network: str
    account: str
    name: str = ""
    supply_usd: Decimal
    borrow_usd: Decimal
    receive_usd: Decimal
    pay_usd: Decimal
    net_yield_usd: Decimal
    supplied: list[LegYield] = Field(default_factory=list)
    borrowed: list[LegYield] = Field(default_factory=list)


class YieldSummary(LighthouseModel):
    """Portfolio-wide yield totals and per-pool breakdown."""

    portfolio: PortfolioRef | None = None
    pools: list[PoolYield] = Field(default_factory=list)
    total_supply_usd: Decimal
    total_borrow_usd: Decimal
    total_yield_usd: Decimal
    avg_apy: Decimal | None


class PeriodReturn(LighthouseModel):
    """Absolute and relative portfolio value change over the window."""

    absolute: Decimal
    percent: Decimal | None


class TypeChange(LighthouseModel):
    """
    Value change of one asset type.

    ``percent`` is ``prev_usd_value / curr_usd_value``, the ratio the
    Lighthouse dashboard reports, and not a percent change.

    """

    type: str
    prev_usd_value: Decimal
    curr_usd_value: Decimal
    diff_usd_value: Decimal
    percent: Decimal | None


class RankedMover(LighthouseModel):
    """Gainer or loser with its percent change (``None`` for newly acquired assets)."""

    symbol: str
    type: str = ""
    prev_usd_value: Decimal
    curr_usd_value: Decimal
    diff_usd_value: Decimal
    percent: Decimal | None


class PerformanceReport(LighthouseModel):
    """Performance of a portfolio over a time window."""

    portfolio: PortfolioRef | None = None
    starts_at: str
    ends_at: str
    current_usd_value: Decimal
    period_return: PeriodReturn
    change_by_type: list[TypeChange] = Field(default_factory=list)
    gainers: list[RankedMover] = Field(default_factory=list)
    losers: list[RankedMover] = Field(default_factory=list)
