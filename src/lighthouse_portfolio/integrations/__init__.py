"""Lighthouse API client, session persistence, and transport retry."""

from lighthouse_portfolio.integrations.lighthouse import LighthouseClient
from lighthouse_portfolio.integrations.retry import RetryConfig, call_with_retry
from lighthouse_portfolio.integrations.session import (
    Credential,
    FileSessionStore,
    MemorySessionStore,
    SessionStore,
)

__all__ = [
    "Credential",
    "FileSessionStore",
    "LighthouseClient",
    "MemorySessionStore",
    "RetryConfig",
    "SessionStore",
    "call_with_retry",
]
