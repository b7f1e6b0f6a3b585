"""Shared constants used across the application."""

import re

# Configuration File Constants
# ----------------------------

DEFAULT_TRACKED_CONFIG_PATHS = (".github/.pricing.config.yml", ".github/.pricing.config.dev.yml")
"""Configuration files whose modification can change the base price multiplier."""

BASE_PRICE_MULTIPLIER_KEY = "basePriceMultiplier"
"""Key of the base price multiplier setting inside the configuration file."""

# Organization Role Constants
# ---------------------------

PRIVILEGED_ORGANIZATION_ROLES = frozenset({"admin", "billing_manager"})
"""Organization membership roles allowed to change pricing."""

# Label Constants
# ---------------

PRICE_LABEL_PREFIX = "Price: "
"""Prefix shared by every price label."""

PRICE_LABEL_TEMPLATE = "Price: {price} USD"
"""Template for the name of a price label. Use .format(price=...) to fill in the amount."""

PRICE_LABEL_COLOR = "1f883d"
"""Colour of price labels created in the label catalog."""

DEFAULT_LABEL_COLOR = "ededed"
"""Colour of time and priority labels created in the label catalog."""

LABEL_NUMBER_PATTERN = re.compile(r"\d+")
"""Pattern matching the first integer in a time or priority label."""

# Pricing Constants
# -----------------

PRICE_BASE_UNIT = 1000
"""Amount in USD of one day of work at priority 10 with a multiplier of 1."""

PRIORITY_DIVISOR = 10
"""Divisor applied to the numeric value of a priority label."""

TIME_UNIT_FACTORS = (
    ("minute", "0.002"),
    ("hour", "0.125"),
    ("day", "1"),
    ("week", "5"),
    ("month", "20"),
)
"""Conversion factors from a time label unit into days of work."""
