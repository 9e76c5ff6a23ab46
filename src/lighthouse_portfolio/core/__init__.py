"""Core functionality including models, analytics engines, locator, and service."""

from lighthouse_portfolio.core.aggregator import PortfolioAggregator
from lighthouse_portfolio.core.errors import (
    DataContractError,
    InvalidInputError,
    LighthouseError,
    UnauthenticatedError,
    UpstreamError,
)
from lighthouse_portfolio.core.locator import find_portfolio
from lighthouse_portfolio.core.models import (
    PerformanceResponse,
    Pool,
    PortfolioRef,
    PortfolioSnapshot,
    YieldLeg,
    YieldResponse,
)
from lighthouse_portfolio.core.performance import PerformanceAnalyzer
from lighthouse_portfolio.core.yields import YieldEngine

__all__ = [
    "DataContractError",
    "InvalidInputError",
    "LighthouseError",
    "PerformanceAnalyzer",
    "PerformanceResponse",
    "Pool",
    "PortfolioAggregator",
    "PortfolioRef",
    "PortfolioSnapshot",
    "UnauthenticatedError",
    "UpstreamError",
    "YieldEngine",
    "YieldLeg",
    "YieldResponse",
    "find_portfolio",
]
