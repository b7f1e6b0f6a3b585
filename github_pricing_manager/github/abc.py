"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from typing import Any, Literal, Self


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients."""

    @abstractmethod
    def for_repository(self, owner: str, repo_name: str) -> Self:
        """Return a client for another repository that shares the same connection."""
        pass

    # Organization Operations
    @abstractmethod
    async def get_organization_membership_role(self, org: str, username: str) -> str | None:
        """Get the role of a user in an organization, or None if they are not a member."""
        pass

    @abstractmethod
    async def list_organization_repositories(self, org_name: str, per_page: int = 100, **kwargs: Any) -> list[Any]:
        """List all repositories for an organization."""
        pass

    # Issue Operations
    @abstractmethod
    async def list_issues(self, state: Literal["open", "closed", "all"] = "open", per_page: int = 100, **kwargs: Any) -> list[Any]:
        """List issues for a repository, excluding pull requests."""
        pass

    @abstractmethod
    async def add_labels_to_issue(self, issue_number: int, labels: list[str]) -> None:
        """Add labels to a specific issue."""
        pass

    @abstractmethod
    async def remove_label_from_issue(self, issue_number: int, name: str) -> None:
        """Remove a single label from a specific issue."""
        pass

    # Label CRUD
    @abstractmethod
    async def create_label(self, name: str, color: str, description: str | None = None, **kwargs: Any) -> Any:
        """Create a label for a repository."""
        pass

    @abstractmethod
    async def delete_label(self, name: str) -> Any:
        """Delete a label for a repository."""
        pass

    @abstractmethod
    async def list_labels(self, per_page: int = 100, **kwargs: Any) -> list[Any]:
        """List labels for a repository."""
        pass

    # Commit Operations
    @abstractmethod
    async def get_commit(self, commit_sha: str) -> dict[str, Any]:
        """Get detailed information about a specific commit, including file patches."""
        pass
