"""Pure price calculations derived from time and priority labels."""

from decimal import ROUND_HALF_UP, Decimal

from github_pricing_manager.schemas.pricing_config import PricingConfig
from github_pricing_manager.utils.constants import (
    LABEL_NUMBER_PATTERN,
    PRICE_BASE_UNIT,
    PRICE_LABEL_TEMPLATE,
    PRIORITY_DIVISOR,
    TIME_UNIT_FACTORS,
)

_CENTS = Decimal("0.01")


def calculate_label_value(label: str) -> Decimal | None:
    """Return the numeric value of a time or priority label.

    Time labels are expressed in days of work, priority labels as their
    level. A label without a number is worth zero; a label that is neither a
    priority nor carries a known time unit yields None.
    """
    match = LABEL_NUMBER_PATTERN.search(label)
    number = Decimal(match.group()) if match else Decimal(0)
    lowered = label.lower()
    if "priority" in lowered:
        return number
    for unit, factor in TIME_UNIT_FACTORS:
        if unit in lowered:
            return number * Decimal(factor)
    return None


def calculate_task_price(time_value: Decimal, priority_value: Decimal, base_price_multiplier: float) -> Decimal:
    """Compute the price of a task, rounded to cents."""
    price = Decimal(str(base_price_multiplier)) * PRICE_BASE_UNIT * time_value * (priority_value / PRIORITY_DIVISOR)
    return price.quantize(_CENTS, rounding=ROUND_HALF_UP)


def format_price(price: Decimal) -> str:
    """Format a price without trailing zeros or exponent notation."""
    return f"{price.normalize():f}"


def get_price_label_name(time_label: str, priority_label: str, base_price_multiplier: float) -> str | None:
    """Return the price label for a time/priority pair, or None if the task would be free."""
    time_value = calculate_label_value(time_label)
    priority_value = calculate_label_value(priority_label)
    if time_value is None or priority_value is None:
        return None
    price = calculate_task_price(time_value, priority_value, base_price_multiplier)
    if price <= 0:
        return None
    return PRICE_LABEL_TEMPLATE.format(price=format_price(price))


def get_all_price_label_names(config: PricingConfig) -> list[str]:
    """Return the canonical price labels for every time and priority combination, without duplicates."""
    names: list[str] = []
    for time_label in config.labels.time:
        for priority_label in config.labels.priority:
            name = get_price_label_name(time_label, priority_label, config.base_price_multiplier)
            if name is not None and name not in names:
                names.append(name)
    return names


def get_lowest_valued_label(candidates: list[str]) -> str | None:
    """Return the label with the smallest value, keeping the first one on ties."""
    valued = [(value, label) for label in candidates if (value := calculate_label_value(label)) is not None]
    if not valued:
        return None
    return min(valued, key=lambda item: item[0])[1]
