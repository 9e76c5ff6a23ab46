"""Lighthouse API client for login and portfolio data endpoints."""

import logging
import re
from typing import Any, TypeVar
from urllib.parse import parse_qs, quote, urlsplit

import httpx
from pydantic import BaseModel, ValidationError

from lighthouse_portfolio import __version__
from lighthouse_portfolio.core.errors import InvalidInputError, UnauthenticatedError, UpstreamError
from lighthouse_portfolio.core.models import (
    PerformanceResponse,
    PortfolioRef,
    PortfolioSnapshot,
    UserResponse,
    YieldResponse,
)
from lighthouse_portfolio.integrations.retry import RetryConfig, call_with_retry
from lighthouse_portfolio.integrations.session import Credential

ModelT = TypeVar("ModelT", bound=BaseModel)

logger = logging.getLogger(__name__)

SESSION_COOKIE = "lh_session"
_SESSION_COOKIE_RE = re.compile(rf"{SESSION_COOKIE}=([^;]+)")


class LighthouseClient:
    """
    Client for the Lighthouse REST API.

    Every data call takes the session ``Credential`` explicitly; the client
    holds no session state of its own.

    Parameters
    ----------
    base_url : str
        API base URL
    timeout : float
        Request timeout in seconds
    retry_config : RetryConfig | None
        Retry policy for transport failures
    transport : httpx.BaseTransport | None
        Custom transport (e.g. ``httpx.MockTransport`` in tests)

    """

    BASE_URL = "https://lighthouse.one/v1"
    USER_AGENT = f"lighthouse-portfolio/{__version__}"

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.retry_config = retry_config or RetryConfig()
        self.client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"User-Agent": self.USER_AGENT},
            transport=transport,
        )

    def login(self, url: str) -> Credential:
        """
        Exchange a transfer-token URL for a session credential.

        Parameters
        ----------
        url : str
            Transfer URL copied from the Lighthouse app, carrying a
            ``token`` query parameter

        Returns
        -------
        Credential
            Session credential read from the ``lh_session`` cookie

        Raises
        ------
        InvalidInputError
            If the URL is malformed or has no token
        UpstreamError
            If the login request fails or sets no session cookie

        """
        token = extract_token(url)

        response = self._request(
            "POST",
            "/login",
            json={"type": "TRANSFER_TOKEN", "token": token},
            headers={"Accept": "application/vnd.api+json"},
        )

        if not response.is_success:
            msg = f"Login failed with status {response.status_code}"
            raise UpstreamError(msg, status_code=response.status_code)

        for header in response.headers.get_list("set-cookie"):
            match = _SESSION_COOKIE_RE.search(header)
            if match:
                logger.debug("Login succeeded")
                return Credential(session_cookie=match.group(1))

        msg = "No session cookie found in response"
        raise UpstreamError(msg)

    def get_user(self, credential: Credential | None) -> UserResponse:
        """Fetch the authenticated user and their portfolios."""
        return self._get_model("/user", credential, UserResponse)

    def list_portfolios(self, credential: Credential | None) -> list[PortfolioRef]:
        """
        List the user's portfolios in upstream order.

        Parameters
        ----------
        credential : Credential | None
            Session credential

        Returns
        -------
        list[PortfolioRef]
            Slug/name references

        """
        user_data = self.get_user(credential)
        return [portfolio.to_ref() for portfolio in user_data.user.portfolios]

    def get_snapshot(self, credential: Credential | None, slug: str) -> PortfolioSnapshot:
        """Fetch the latest snapshot of portfolio ``slug``."""
        return self._get_model(f"/workspaces/{quote(slug, safe='')}/snapshots/latest", credential, PortfolioSnapshot)

    def get_yields(self, credential: Credential | None, slug: str) -> YieldResponse:
        """Fetch the lending/yield pools of portfolio ``slug``."""
        return self._get_model(f"/workspaces/{quote(slug, safe='')}/yields", credential, YieldResponse)

    def get_performance(self, credential: Credential | None, slug: str, start_date: str) -> PerformanceResponse:
        """
        Fetch performance of portfolio ``slug`` since ``start_date``.

        Parameters
        ----------
        credential : Credential | None
            Session credential
        slug : str
            Portfolio slug
        start_date : str
            Window start in ``YYYY-MM-DD`` format

        Returns
        -------
        PerformanceResponse
            Parsed performance response

        """
        return self._get_model(
            f"/workspaces/{quote(slug, safe='')}/performance",
            credential,
            PerformanceResponse,
            params={"startsAt": start_date},
        )

    def _get_model(
        self,
        path: str,
        credential: Credential | None,
        model: type[ModelT],
        params: dict[str, str] | None = None,
    ) -> ModelT:
        """
        GET ``path`` and parse the JSON body into ``model``.

        Raises
        ------
        UnauthenticatedError
            If ``credential`` is None
        UpstreamError
            On a non-success status, malformed JSON, or an unexpected shape

        """
        if credential is None:
            raise UnauthenticatedError

        response = self._request(
            "GET",
            path,
            params=params,
            headers={"Cookie": f"{SESSION_COOKIE}={credential.session_cookie}"},
        )

        if not response.is_success:
            msg = f"API request failed with status {response.status_code}"
            raise UpstreamError(msg, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            msg = f"Malformed JSON from {path}: {e}"
            raise UpstreamError(msg) from e

        try:
            return model.model_validate(payload)
        except ValidationError as e:
            msg = f"Unexpected response from {path}: {e.error_count()} validation error(s)"
            raise UpstreamError(msg) from e

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s%s", method, self.base_url, path)
        try:
            return call_with_retry(self.retry_config, self.client.request, method, path, **kwargs)
        except httpx.TimeoutException as e:
            msg = f"Request timeout: {e}"
            raise UpstreamError(msg) from e
        except httpx.HTTPError as e:
            msg = f"HTTP request failed: {e}"
            raise UpstreamError(msg) from e

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> "LighthouseClient":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type | None,
        exc_val: Exception | None,
        exc_tb: object | None,
    ) -> None:
        """Context manager exit."""
        self.close()


def extract_token(url: str) -> str:
    """
    Extract the ``token`` query parameter from a transfer URL.

    Raises
    ------
    InvalidInputError
        If ``url`` is not an absolute http(s) URL or carries no token

    """
    parts = urlsplit(url.strip())
    if parts.scheme not in ("http", "https") or not parts.netloc:
        msg = f"Invalid URL: {url!r}"
        raise InvalidInputError(msg)

    tokens = parse_qs(parts.query).get("token")
    if not tokens or not tokens[0]:
        msg = "No token found in URL"
        raise InvalidInputError(msg)

    return tokens[0]
