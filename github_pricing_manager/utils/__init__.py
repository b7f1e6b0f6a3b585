"""Utility modules for shared functionality."""

from .constants import (
    BASE_PRICE_MULTIPLIER_KEY,
    DEFAULT_TRACKED_CONFIG_PATHS,
    PRICE_LABEL_PREFIX,
    PRIVILEGED_ORGANIZATION_ROLES,
)
from .retry import retry_on_rate_limit

__all__ = [
    "BASE_PRICE_MULTIPLIER_KEY",
    "DEFAULT_TRACKED_CONFIG_PATHS",
    "PRICE_LABEL_PREFIX",
    "PRIVILEGED_ORGANIZATION_ROLES",
    "retry_on_rate_limit",
]
