"""Contains synchronization logic for the price label catalog."""

from githubkit.exception import GitHubException

from github_pricing_manager.schemas.pricing_config import PricingConfig
from github_pricing_manager.synchronize.context import PushEventContext
from github_pricing_manager.synchronize.models import SyncDecision
from github_pricing_manager.synchronize.pricing import get_all_price_label_names
from github_pricing_manager.synchronize.results import LabelSyncResult
from github_pricing_manager.synchronize.utils import extract_label_names, is_price_label
from github_pricing_manager.utils.constants import DEFAULT_LABEL_COLOR, PRICE_LABEL_COLOR


def decide_github_label_sync_action(desired_label: str, existing_labels: list[str], assigned_labels: set[str] | None = None) -> SyncDecision:
    """Decide what to do with a label of the catalog.

    Desired labels are created when missing. Existing price labels that are no
    longer desired are deleted unless an open issue still carries them. Key is
    label name.
    """
    if desired_label not in existing_labels:
        return SyncDecision.CREATE
    if assigned_labels is not None and desired_label not in assigned_labels:
        return SyncDecision.DELETE
    return SyncDecision.NOOP


async def sync_price_labels_to_config(context: PushEventContext, config: PricingConfig) -> LabelSyncResult:
    """Reconcile the label catalog of the configuration repository with the pricing configuration.

    Missing time, priority and price labels are created. Stale price labels
    are removed only when no open issue carries them; the ones still in use
    are superseded later when each issue is relabeled. Failing to list the
    catalog raises; a failure on a single label is recorded in ``errors``.
    """
    result = LabelSyncResult()
    adapter = context.github_adapter
    price_labels = get_all_price_label_names(config)

    existing_labels = extract_label_names(await adapter.list_labels())
    stale_price_labels = [name for name in existing_labels if is_price_label(name) and name not in price_labels]

    if stale_price_labels:
        try:
            open_issues = await adapter.list_issues(state="open")
        except GitHubException as e:
            # Without the open issues every stale label counts as assigned
            context.logger.error("Failed to list open issues, keeping stale price labels", error=str(e), exc_info=True)
            assigned_labels = set(stale_price_labels)
        else:
            assigned_labels = {name for issue in open_issues for name in extract_label_names(issue.labels)}
        for name in stale_price_labels:
            if decide_github_label_sync_action(name, existing_labels, assigned_labels) != SyncDecision.DELETE:
                context.logger.info("Keeping stale price label still assigned to open issues", label_name=name)
                result.kept_assigned.append(name)
                continue
            context.logger.info("Deleting stale price label", label_name=name)
            try:
                await adapter.delete_label(name)
            except GitHubException as e:
                context.logger.error("Failed to delete stale price label", label_name=name, error=str(e), exc_info=True)
                result.errors.append(name)
                continue
            result.deleted.append(name)

    desired_labels = [(name, DEFAULT_LABEL_COLOR) for name in (*config.labels.time, *config.labels.priority)]
    desired_labels.extend((name, PRICE_LABEL_COLOR) for name in price_labels)
    for name, color in desired_labels:
        if name in result.created or decide_github_label_sync_action(name, existing_labels) != SyncDecision.CREATE:
            continue
        try:
            await adapter.create_label(name=name, color=color)
        except (ValueError, GitHubException) as e:
            context.logger.error("Failed to create label", label_name=name, error=str(e))
            result.errors.append(name)
            continue
        context.logger.info("Created label", label_name=name, color=color)
        result.created.append(name)

    context.logger.info(
        "Synchronized price labels with configuration",
        base_price_multiplier=config.base_price_multiplier,
        created=len(result.created),
        deleted=len(result.deleted),
        kept_assigned=len(result.kept_assigned),
    )
    return result
