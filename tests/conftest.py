"""Shared fixtures: Lighthouse API payloads and a mocked API transport."""

import copy
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from lighthouse_portfolio.core.service import PortfolioService
from lighthouse_portfolio.data.loader import Settings
from lighthouse_portfolio.integrations.lighthouse import LighthouseClient
from lighthouse_portfolio.integrations.retry import RetryConfig
from lighthouse_portfolio.integrations.session import Credential, MemorySessionStore

SESSION_COOKIE = "secret-cookie"

USER_PAYLOAD = {
    "user": {
        "id": "user-1",
        "portfolios": [
            {"id": "p1", "name": "Main", "role": "OWNER", "slug": "main-123"},
            {"id": "p2", "name": "Trading", "role": "OWNER", "slug": "trading-456"},
        ],
    }
}

SNAPSHOT_PAYLOAD = {
    "id": "snap-1",
    "status": "FINISHED",
    "usdValue": 10000,
    "takenAt": "2024-01-31T00:00:00Z",
    "finishedAt": "2024-01-31T00:01:00Z",
    "accounts": {
        "acc-1": {"id": "acc-1", "name": "Ledger", "type": "WALLET"},
        "acc-2": {"id": "acc-2", "name": "Binance", "type": "EXCHANGE"},
    },
    "networks": {"ethereum": {"id": "ethereum", "name": "Ethereum", "logoUrl": "https://img/eth.png"}},
    "platforms": {"aave": {"id": "aave", "name": "Aave", "logoUrl": "https://img/aave.png", "slug": "aave"}},
    "positions": [
        {
            "id": "pos-1",
            "type": "WALLET",
            "ref": "wallet",
            "accountId": "acc-1",
            "networkId": "ethereum",
            "platformId": "wallet",
            "usdValue": 7000,
            "customPosition": None,
            "healthFactor": None,
            "assets": [
                {
                    "id": "usdc",
                    "symbol": "USDC",
                    "name": "USD Coin",
                    "logoUrl": None,
                    "type": "STABLECOIN",
                    "context": "WALLET",
                    "amount": 5000,
                    "price": 1,
                    "usdValue": 5000,
                    "ids": {"coingecko": "usd-coin"},
                },
                {
                    "id": "eth",
                    "symbol": "ETH",
                    "name": "Ether",
                    "logoUrl": None,
                    "type": "NATIVE",
                    "context": "WALLET",
                    "amount": 1,
                    "price": 2000,
                    "usdValue": 2000,
                    "ids": {},
                },
            ],
        },
        {
            "id": "pos-2",
            "type": "DEPOSIT",
            "ref": "aave-deposit",
            "accountId": "acc-2",
            "networkId": "ethereum",
            "platformId": "aave",
            "usdValue": 3000,
            "customPosition": None,
            "healthFactor": {"value": 2.5, "method": "AAVE"},
            "assets": [
                {
                    "id": "dai",
                    "symbol": "DAI",
                    "name": "Dai",
                    "logoUrl": None,
                    "type": "STABLECOIN",
                    "context": "SUPPLY",
                    "amount": 1000,
                    "price": 1,
                    "usdValue": 1000,
                    "ids": {},
                },
                {
                    "id": "steth",
                    "symbol": "stETH",
                    "name": "Lido Staked Ether",
                    "logoUrl": None,
                    "type": "NATIVE",
                    "context": "SUPPLY",
                    "amount": 1,
                    "price": 1750,
                    "usdValue": 1750,
                    "ids": {},
                },
                {
                    "id": "pepe",
                    "symbol": "PEPE",
                    "name": "Pepe",
                    "logoUrl": None,
                    "type": "MEME",
                    "context": "SUPPLY",
                    "amount": 25000000,
                    "price": "0.00001",
                    "usdValue": 250,
                    "ids": {},
                },
            ],
        },
    ],
    "nftCollections": {},
}


def _yield_asset(symbol: str, price: int) -> dict[str, Any]:
    return {
        "id": symbol.lower(),
        "symbol": symbol,
        "name": symbol,
        "logoUrl": f"https://img/{symbol.lower()}.png",
        "type": "STABLECOIN" if symbol in ("USDC", "DAI") else "NATIVE",
        "price": price,
    }


YIELD_PAYLOAD = {
    "pools": [
        {
            "platform": {"id": "aave", "name": "Aave", "logoUrl": "https://img/aave.png"},
            "network": {"id": "ethereum", "name": "Ethereum", "logoUrl": "https://img/eth.png"},
            "account": {"id": "acc-1", "name": "Ledger"},
            "name": "Aave V3",
            "supply": [{"asset": _yield_asset("USDC", 1), "amount": 1000}],
            "receive": [{"asset": _yield_asset("USDC", 1), "apy": 5, "type": "NATIVE"}],
            "borrow": [{"asset": _yield_asset("ETH", 200), "amount": 1}],
            "pay": [{"asset": _yield_asset("ETH", 200), "apy": 3, "type": "NATIVE"}],
        },
        {
            "platform": {"id": "compound", "name": "Compound", "logoUrl": "https://img/comp.png"},
            "network": {"id": "ethereum", "name": "Ethereum", "logoUrl": "https://img/eth.png"},
            "account": {"id": "acc-2", "name": "Binance"},
            "name": "Compound V3",
            "supply": [{"asset": _yield_asset("DAI", 1), "amount": 2000}],
            "receive": [{"asset": _yield_asset("DAI", 1), "apy": 4, "type": "POOL"}],
            "borrow": [],
            "pay": [],
        },
    ],
    "platforms": [
        {"id": "aave", "name": "Aave", "logoUrl": "https://img/aave.png"},
        {"id": "compound", "name": "Compound", "logoUrl": "https://img/comp.png"},
    ],
}


def _mover(symbol: str, prev: int, curr: int) -> dict[str, Any]:
    return {
        "id": symbol.lower(),
        "symbol": symbol,
        "logoUrl": f"https://img/{symbol.lower()}.png",
        "type": "NATIVE",
        "currAmount": 1,
        "currPrice": curr,
        "currUsdValue": curr,
        "prevAmount": 1,
        "prevPrice": prev,
        "prevUsdValue": prev,
        "diffUsdValue": curr - prev,
    }


PERFORMANCE_PAYLOAD = {
    "startsAt": "2024-01-01T00:00:00Z",
    "endsAt": "2024-01-31T00:00:00Z",
    "presets": {"1d": "2024-01-30", "7d": "2024-01-24", "30d": "2024-01-01", "90d": None},
    "usdValueChange": 1000,
    "lastSnapshotUsdValue": 10000,
    "snapshots": [
        {"id": "s1", "timestamp": "2024-01-01T00:00:00Z", "value": 9000},
        {"id": "s2", "timestamp": "2024-01-31T00:00:00Z", "value": 10000},
    ],
    "gainers": [
        _mover("ETH", 1000, 1500),
        _mover("BTC", 2000, 2800),
        _mover("NEW", 0, 300),
        _mover("SOL", 500, 1000),
        _mover("LINK", 1000, 1100),
        _mover("UNI", 1000, 1050),
        _mover("AAVE", 1000, 1020),
    ],
    "losers": [
        _mover("DOGE", 1000, 800),
        _mover("PEPE", 100, 50),
        _mover("SHIB", 600, 300),
    ],
    "changeByType": [
        {"type": "STABLECOIN", "prevUsdValue": 5000, "currUsdValue": 5000, "diffUsdValue": 0},
        {"type": "NATIVE", "prevUsdValue": 4000, "currUsdValue": 5000, "diffUsdValue": 1000},
        {"type": "MEME", "prevUsdValue": 100, "currUsdValue": 0, "diffUsdValue": -100},
    ],
}


@pytest.fixture
def user_payload() -> dict[str, Any]:
    return copy.deepcopy(USER_PAYLOAD)


@pytest.fixture
def snapshot_payload() -> dict[str, Any]:
    return copy.deepcopy(SNAPSHOT_PAYLOAD)


@pytest.fixture
def yield_payload() -> dict[str, Any]:
    return copy.deepcopy(YIELD_PAYLOAD)


@pytest.fixture
def performance_payload() -> dict[str, Any]:
    return copy.deepcopy(PERFORMANCE_PAYLOAD)


@pytest.fixture
def api_payloads(user_payload, snapshot_payload, yield_payload, performance_payload) -> dict[str, Any]:
    """Response bodies keyed by request path, as served by the mocked API."""
    return {
        "/v1/user": user_payload,
        "/v1/workspaces/main-123/snapshots/latest": snapshot_payload,
        "/v1/workspaces/trading-456/snapshots/latest": snapshot_payload,
        "/v1/workspaces/main-123/yields": yield_payload,
        "/v1/workspaces/trading-456/yields": yield_payload,
        "/v1/workspaces/main-123/performance": performance_payload,
        "/v1/workspaces/trading-456/performance": performance_payload,
    }


def make_handler(payloads: dict[str, Any], requests: list[httpx.Request] | None = None) -> Callable:
    """
    Build a MockTransport handler emulating the Lighthouse API.

    ``POST /v1/login`` sets the session cookie; every other path requires it
    and answers with the payload registered for that path (404 otherwise).
    """

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)

        if request.url.path == "/v1/login":
            return httpx.Response(
                200,
                json={"data": {"type": "session"}},
                headers={"set-cookie": f"lh_session={SESSION_COOKIE}; Path=/; HttpOnly; Secure"},
            )

        if request.headers.get("cookie") != f"lh_session={SESSION_COOKIE}":
            return httpx.Response(401, json={"errors": [{"detail": "unauthorized"}]})

        body = payloads.get(request.url.path)
        if body is None:
            return httpx.Response(404, json={"errors": [{"detail": "not found"}]})
        return httpx.Response(200, json=body)

    return handler


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def client_factory(api_payloads, recorded_requests) -> Callable[[], LighthouseClient]:
    """Build fresh clients talking to the mocked API without retries."""

    def build() -> LighthouseClient:
        transport = httpx.MockTransport(make_handler(api_payloads, recorded_requests))
        return LighthouseClient(transport=transport, retry_config=RetryConfig(max_retries=0))

    return build


@pytest.fixture
def client(client_factory) -> LighthouseClient:
    with client_factory() as lighthouse:
        yield lighthouse


@pytest.fixture
def credential() -> Credential:
    return Credential(session_cookie=SESSION_COOKIE)


@pytest.fixture
def session_store(credential) -> MemorySessionStore:
    return MemorySessionStore(credential)


@pytest.fixture
def service(client, session_store) -> PortfolioService:
    return PortfolioService(client, session_store, Settings())
