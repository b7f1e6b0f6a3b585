"""Fixtures for unit tests."""

from typing import Any, Callable, Generator
from unittest.mock import MagicMock

import pytest
import structlog

from github_pricing_manager.schemas.pricing_config import PricingConfig
from github_pricing_manager.schemas.push_event import PushEvent
from github_pricing_manager.synchronize.context import PushEventContext

from .utils import make_adapter, make_push_event_payload


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def pricing_config() -> PricingConfig:
    """Pricing configuration with propagation enabled."""
    return PricingConfig.model_validate(
        {
            "basePriceMultiplier": 1,
            "labels": {
                "time": ["Time: <1 Hour", "Time: <1 Day"],
                "priority": ["Priority: 1 (Normal)", "Priority: 2 (Medium)"],
            },
            "globalConfigUpdate": {"excludeRepos": ["C"]},
        }
    )


@pytest.fixture
def make_context(pricing_config: PricingConfig) -> Callable[..., PushEventContext]:
    """Factory building a push event context around an adapter double."""

    def _make_context(
        adapter: MagicMock | None = None,
        event_name: str = "push",
        payload: dict[str, Any] | None = None,
        config: PricingConfig | None = None,
        logger: MagicMock | None = None,
    ) -> PushEventContext:
        raw_payload = payload if payload is not None else make_push_event_payload()
        context = PushEventContext(
            event_name=event_name,
            payload=PushEvent.model_validate(raw_payload) if event_name == "push" else raw_payload,
            github_adapter=adapter if adapter is not None else make_adapter(),
            config=config if config is not None else pricing_config,
        )
        if logger is not None:
            context.logger = logger
        return context

    return _make_context
