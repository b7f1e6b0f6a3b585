"""Propagates price labels to the open issues of every repository in the organization."""

from typing import Sequence

from githubkit.exception import GitHubException
from githubkit.versions.latest.models import MinimalRepository

from github_pricing_manager.schemas.pricing_config import PricingConfig
from github_pricing_manager.synchronize.context import IssueRequest, PushEventContext
from github_pricing_manager.synchronize.models import SkipReason
from github_pricing_manager.synchronize.price_label import set_price_label
from github_pricing_manager.synchronize.results import (
    FleetPropagationResult,
    IssuePriceLabelResult,
    RepositoryPropagationResult,
)


def get_skip_reason(repository: MinimalRepository, exclude_repos: Sequence[str]) -> SkipReason | None:
    """Return the first reason a repository is left out of propagation, if any."""
    if repository.archived:
        return SkipReason.ARCHIVED
    if repository.disabled:
        return SkipReason.DISABLED
    if repository.name in exclude_repos:
        return SkipReason.EXCLUDED
    return None


async def update_repository_issue_price_labels(
    context: PushEventContext, config: PricingConfig, repository: MinimalRepository
) -> RepositoryPropagationResult:
    """Relabel every open issue of one repository.

    A failure on one issue is recorded and the remaining issues are still processed.
    """
    result = RepositoryPropagationResult(repository=repository.name)
    logger = context.logger.bind(repository=repository.name)
    adapter = context.github_adapter.for_repository(repository.owner.login, repository.name)

    try:
        issues = await adapter.list_issues(state="open")
    except Exception as e:
        logger.error("Failed to list open issues, skipping repository", error=str(e), exc_info=True)
        result.error = str(e)
        return result

    for issue in issues:
        logger.info("Updating issue price label", issue_number=issue.number)
        request = IssueRequest(
            github_adapter=adapter,
            repository=repository,
            issue=issue,
            config=config,
            logger=logger.bind(issue_number=issue.number),
        )
        try:
            issue_result = await set_price_label(request, issue.labels, config)
        except Exception as e:
            request.logger.error("Failed to set price label", error=str(e), exc_info=True)
            issue_result = IssuePriceLabelResult(repository=repository.name, issue_number=issue.number, error=str(e))
        result.issue_results.append(issue_result)
    return result


async def update_all_issue_price_labels(context: PushEventContext, config: PricingConfig, exclude_repos: Sequence[str]) -> FleetPropagationResult:
    """Apply the current pricing to the open issues of every eligible repository.

    Repositories are processed in listing order. Archived, disabled and
    excluded repositories are skipped, and a failure in one repository never
    stops the next one.
    """
    result = FleetPropagationResult()
    try:
        repositories = await context.github_adapter.list_organization_repositories(context.organization)
    except GitHubException as e:
        context.logger.error("Failed to list organization repositories, nothing was propagated", error=str(e), exc_info=True)
        result.error = str(e)
        return result

    for repository in repositories:
        skip_reason = get_skip_reason(repository, exclude_repos)
        if skip_reason is not None:
            context.logger.info("Skipping repository", repository=repository.name, skip_reason=skip_reason.value)
            result.repository_results.append(RepositoryPropagationResult(repository=repository.name, skip_reason=skip_reason))
            continue
        result.repository_results.append(await update_repository_issue_price_labels(context, config, repository))

    context.logger.info(
        "Propagated price labels across the organization",
        processed=len(result.processed_repositories),
        skipped=len(result.skipped_repositories),
        failed=len(result.failed_repositories),
    )
    return result
