"""Settings loading and packaged defaults."""

from lighthouse_portfolio.data.loader import (
    Settings,
    load_defaults,
    load_settings,
    load_yaml,
)

__all__ = [
    "Settings",
    "load_defaults",
    "load_settings",
    "load_yaml",
]
