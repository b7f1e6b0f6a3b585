"""Invocation context of the global label update pipeline."""

from dataclasses import dataclass, field
from typing import Any

import structlog
from githubkit.versions.latest.models import Issue, MinimalRepository

from github_pricing_manager.github.abc import GitHubClientBase
from github_pricing_manager.schemas.pricing_config import PricingConfig
from github_pricing_manager.schemas.push_event import PushEvent
from github_pricing_manager.utils.constants import DEFAULT_TRACKED_CONFIG_PATHS

PUSH_EVENT_NAME = "push"


@dataclass
class PushEventContext:
    """Everything a single run of the pipeline needs.

    ``github_adapter`` is scoped to the repository that received the push,
    which is also the repository holding the label catalog.
    """

    event_name: str
    payload: PushEvent | dict[str, Any]
    github_adapter: GitHubClientBase
    config: PricingConfig
    tracked_config_paths: tuple[str, ...] = DEFAULT_TRACKED_CONFIG_PATHS
    logger: structlog.stdlib.BoundLogger = field(default_factory=lambda: structlog.get_logger("github_pricing_manager"))

    @property
    def organization(self) -> str:
        """Login of the organization the push belongs to."""
        if isinstance(self.payload, PushEvent):
            return self.payload.organization_login
        organization = self.payload.get("organization") or self.payload.get("repository", {}).get("owner") or {}
        return str(organization.get("login", ""))


def is_push_event(context: PushEventContext) -> bool:
    """Return True if the context carries a parsed push event."""
    return context.event_name == PUSH_EVENT_NAME and isinstance(context.payload, PushEvent)


@dataclass(frozen=True)
class IssueRequest:
    """Per-issue unit of work built once by the fleet propagator."""

    github_adapter: GitHubClientBase
    repository: MinimalRepository
    issue: Issue
    config: PricingConfig
    logger: structlog.stdlib.BoundLogger
