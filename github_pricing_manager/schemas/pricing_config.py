"""Pydantic models for the pricing configuration."""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", frozen=True)


class PricingLabelsConfig(_ConfigModel):
    """Time and priority labels recognized when computing prices."""

    time: list[str] = Field(
        default_factory=lambda: [
            "Time: <15 Minutes",
            "Time: <1 Hour",
            "Time: <2 Hours",
            "Time: <4 Hours",
            "Time: <1 Day",
            "Time: <1 Week",
        ]
    )
    priority: list[str] = Field(
        default_factory=lambda: [
            "Priority: 1 (Normal)",
            "Priority: 2 (Medium)",
            "Priority: 3 (High)",
            "Priority: 4 (Urgent)",
            "Priority: 5 (Emergency)",
        ]
    )


class GlobalConfigUpdate(_ConfigModel):
    """Settings for propagating a base price change across the organization."""

    exclude_repos: list[str] = Field(default_factory=list)


class PricingConfig(_ConfigModel):
    """Pricing configuration of an organization.

    The model is frozen; a new base rate produces a new instance through
    ``with_base_price_multiplier`` so that a run only ever reads one snapshot.
    """

    base_price_multiplier: float = 1
    labels: PricingLabelsConfig = Field(default_factory=PricingLabelsConfig)
    global_config_update: GlobalConfigUpdate | None = None

    def with_base_price_multiplier(self, base_price_multiplier: float) -> Self:
        """Return a copy of this configuration using another base price multiplier."""
        return self.model_copy(update={"base_price_multiplier": base_price_multiplier})
