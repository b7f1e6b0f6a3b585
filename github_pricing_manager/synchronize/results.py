"""Contains results of the global label update workflow."""

from dataclasses import dataclass, field

from github_pricing_manager.synchronize.models import SkipReason, SyncDecision


@dataclass
class LabelSyncResult:
    """Outcome of reconciling the label catalog with the pricing configuration."""

    created: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    kept_assigned: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass
class IssuePriceLabelResult:
    """Outcome of setting the price label on one issue."""

    repository: str
    issue_number: int
    decision: SyncDecision = SyncDecision.NOOP
    price_label: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the issue was processed without error."""
        return self.error is None


@dataclass
class RepositoryPropagationResult:
    """Outcome of propagating price labels to one repository."""

    repository: str
    skip_reason: SkipReason | None = None
    issue_results: list[IssuePriceLabelResult] = field(default_factory=list)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the repository and all of its issues were processed without error."""
        return self.error is None and all(result.succeeded for result in self.issue_results)


@dataclass
class FleetPropagationResult:
    """Outcome of propagating price labels across the organization."""

    repository_results: list[RepositoryPropagationResult] = field(default_factory=list)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the repositories were listed and every one of them was processed without error."""
        return self.error is None and not self.failed_repositories

    @property
    def processed_repositories(self) -> list[str]:
        """Names of repositories whose issues were listed."""
        return [r.repository for r in self.repository_results if r.skip_reason is None and r.error is None]

    @property
    def skipped_repositories(self) -> list[str]:
        """Names of repositories left out by a skip rule."""
        return [r.repository for r in self.repository_results if r.skip_reason is not None]

    @property
    def failed_repositories(self) -> list[str]:
        """Names of repositories with at least one failure."""
        return [r.repository for r in self.repository_results if not r.succeeded]
