"""GitHub client adapter for the githubkit library."""

from functools import wraps
from pathlib import Path
from typing import Any, Awaitable, Callable, Literal, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import RequestFailed
from githubkit.versions.latest.models import (
    Issue,
    Label,
    MinimalRepository,
    OrgMembership,
)

from github_pricing_manager.configuration.models import GitHubAuthenticationType
from github_pricing_manager.utils.github import split_repository_in_configuration
from github_pricing_manager.utils.retry import retry_on_rate_limit

from .abc import GitHubClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_github_422(func: F) -> F:
    """Decorator to handle GitHub 422 Unprocessable Entity errors, logging and raising with details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            if exc.response.status_code != 422:
                raise
            try:
                error_data = exc.response.json()
            except ValueError:
                error_data = {}
            message = error_data.get("message", "Unprocessable Entity")
            errors = error_data.get("errors", [])
            url = getattr(exc.response, "url", None)
            logger.error(
                "GitHub 422 Unprocessable Entity",
                function=func.__name__,
                message=message,
                errors=errors,
                url=url,
                status_code=422,
            )
            raise ValueError(f"GitHub 422 error in {func.__name__}: {message} | errors: {errors} | url: {url}") from exc

    return wrapper  # type: ignore


class GitHubKitAdapter(GitHubClientBase):
    """GitHub client adapter for the githubkit library.

    An adapter is scoped to one repository. Organization-wide calls take the
    organization name explicitly, and ``for_repository`` hands out adapters
    for sibling repositories that reuse the same authenticated client.
    """

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    def _omit_null_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Omit parameters that are None."""
        return {k: v for k, v in kwargs.items() if v is not None}

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            github_auth_type: Type of authentication (PAT or APP)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID (required for APP auth)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        return cls(client, owner, repo_name)

    def for_repository(self, owner: str, repo_name: str) -> Self:
        """Return an adapter for another repository that shares this adapter's client."""
        return type(self)(self.client, owner, repo_name)

    # Organization Operations
    @retry_on_rate_limit()
    async def get_organization_membership_role(self, org: str, username: str) -> str | None:
        """Get the role of a user in an organization.

        Returns None when the user is not a member of the organization.
        """
        try:
            response: Response[OrgMembership] = await self.client.rest.orgs.async_get_membership_for_user(org=org, username=username)
        except RequestFailed as exc:
            if exc.response.status_code == 404:
                logger.debug("User is not a member of the organization", org=org, username=username)
                return None
            raise
        return response.parsed_data.role

    @retry_on_rate_limit()
    async def list_organization_repositories(self, org_name: str, per_page: int = 100, **kwargs: Any) -> list[MinimalRepository]:
        """List all repositories for an organization, handling pagination.

        Repositories are returned in the order GitHub lists them.
        """
        all_repos: list[MinimalRepository] = []
        page: int = 1

        logger.info("Fetching repositories for organization", org=org_name, per_page=per_page, filters=kwargs)

        while True:
            logger.debug("Fetching organization repositories page", org=org_name, page=page)
            response: Response[list[MinimalRepository]] = await self.client.rest.repos.async_list_for_org(
                org=org_name, per_page=per_page, page=page, **kwargs
            )
            repos: list[MinimalRepository] = response.parsed_data
            if not repos:
                break
            all_repos.extend(repos)
            if len(repos) < per_page:
                break
            page += 1

        logger.info("Fetched all repositories for organization", org=org_name, total_repos=len(all_repos))
        return all_repos

    # Issue Operations
    @retry_on_rate_limit()
    async def list_issues(self, state: Literal["open", "closed", "all"] = "open", per_page: int = 100, **kwargs: Any) -> list[Issue]:
        """List all issues for a repository, handling pagination.

        The issues endpoint also returns pull requests; those are dropped.
        """
        all_issues: list[Issue] = []
        page: int = 1
        while True:
            response: Response[list[Issue]] = await self.client.rest.issues.async_list_for_repo(
                owner=self.owner,
                repo=self.repo_name,
                state=state,
                per_page=per_page,
                page=page,
                **kwargs,
            )
            issues: list[Issue] = response.parsed_data
            if not issues:
                break
            all_issues.extend(issue for issue in issues if not issue.pull_request)
            if len(issues) < per_page:
                break
            page += 1
        return all_issues

    @handle_github_422
    @retry_on_rate_limit()
    async def add_labels_to_issue(self, issue_number: int, labels: list[str]) -> None:
        """Add labels to a specific issue, creating any label that does not exist yet."""
        await self.client.rest.issues.async_add_labels(
            owner=self.owner,
            repo=self.repo_name,
            issue_number=issue_number,
            labels=labels,
        )

    @retry_on_rate_limit()
    async def remove_label_from_issue(self, issue_number: int, name: str) -> None:
        """Remove a single label from a specific issue.

        A label that is already gone is not an error.
        """
        try:
            await self.client.rest.issues.async_remove_label(
                owner=self.owner,
                repo=self.repo_name,
                issue_number=issue_number,
                name=name,
            )
        except RequestFailed as exc:
            if exc.response.status_code != 404:
                raise
            logger.debug("Label already absent from issue", issue_number=issue_number, label_name=name)

    # Label CRUD
    @handle_github_422
    @retry_on_rate_limit()
    async def create_label(self, name: str, color: str, description: str | None = None, **kwargs: Any) -> Label:
        """Create a label for a repository."""
        params = self._omit_null_parameters(
            name=name,
            color=color,
            description=description,
            **kwargs,
        )
        response: Response[Label] = await self.client.rest.issues.async_create_label(
            owner=self.owner,
            repo=self.repo_name,
            **params,
        )
        return response.parsed_data

    @retry_on_rate_limit()
    async def delete_label(self, name: str) -> None:
        """Delete a label for a repository."""
        await self.client.rest.issues.async_delete_label(owner=self.owner, repo=self.repo_name, name=name)
        return None

    @retry_on_rate_limit()
    async def list_labels(self, per_page: int = 100, **kwargs: Any) -> list[Label]:
        """List all labels for a repository, handling pagination."""
        all_labels: list[Label] = []
        page: int = 1
        while True:
            response: Response[list[Label]] = await self.client.rest.issues.async_list_labels_for_repo(
                owner=self.owner, repo=self.repo_name, per_page=per_page, page=page, **kwargs
            )
            labels: list[Label] = response.parsed_data
            if not labels:
                break
            all_labels.extend(labels)
            if len(labels) < per_page:
                break
            page += 1
        return all_labels

    # Commit Operations
    @retry_on_rate_limit()
    async def get_commit(self, commit_sha: str) -> dict[str, Any]:
        """Get a commit by SHA, including the patch of every changed file.

        Returns the raw commit data as a dictionary. githubkit's Commit model
        rejects the verification block GitHub sends for unsigned commits, and
        only the raw ``files`` list is needed here anyway.
        """
        response = await self.client.rest.repos.async_get_commit(owner=self.owner, repo=self.repo_name, ref=commit_sha)
        return response.json()
