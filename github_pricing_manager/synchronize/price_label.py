"""Computes and applies the price label of a single issue."""

from typing import Sequence

from github_pricing_manager.schemas.pricing_config import PricingConfig
from github_pricing_manager.synchronize.context import IssueRequest
from github_pricing_manager.synchronize.models import SyncDecision
from github_pricing_manager.synchronize.pricing import get_lowest_valued_label, get_price_label_name
from github_pricing_manager.synchronize.results import IssuePriceLabelResult
from github_pricing_manager.synchronize.types import LabelType
from github_pricing_manager.synchronize.utils import extract_label_names, is_price_label


def get_target_price_label(current_labels: Sequence[LabelType], config: PricingConfig) -> str | None:
    """Return the price label an issue should carry, or None if it cannot be priced.

    Only time and priority labels recognized by the configuration count. When
    an issue carries several of a kind, the lowest-valued one wins.
    """
    names = extract_label_names(current_labels)
    time_label = get_lowest_valued_label([name for name in config.labels.time if name in names])
    priority_label = get_lowest_valued_label([name for name in config.labels.priority if name in names])
    if time_label is None or priority_label is None:
        return None
    return get_price_label_name(time_label, priority_label, config.base_price_multiplier)


async def set_price_label(request: IssueRequest, current_labels: Sequence[LabelType], config: PricingConfig) -> IssuePriceLabelResult:
    """Make the issue carry exactly the price label computed from its labels.

    Price labels that differ from the target are removed and the target is
    added when absent. An issue that cannot be priced loses every price label
    and is left unpriced.
    """
    issue_number = request.issue.number
    result = IssuePriceLabelResult(repository=request.repository.name, issue_number=issue_number)

    target_label = get_target_price_label(current_labels, config)
    result.price_label = target_label

    names = extract_label_names(current_labels)
    stale_labels = [name for name in names if is_price_label(name) and name != target_label]

    for name in stale_labels:
        request.logger.debug("Removing stale price label", label_name=name)
        await request.github_adapter.remove_label_from_issue(issue_number, name)

    if target_label is None:
        if stale_labels:
            result.decision = SyncDecision.UPDATE
            request.logger.info("Cleared price labels from unpriced issue", removed=stale_labels)
        else:
            request.logger.debug("Issue has no time or priority label, leaving it unpriced")
        return result

    if target_label not in names:
        request.logger.debug("Adding price label", label_name=target_label)
        await request.github_adapter.add_labels_to_issue(issue_number, [target_label])

    if stale_labels or target_label not in names:
        result.decision = SyncDecision.UPDATE
        request.logger.info("Updated price label", price_label=target_label, removed=stale_labels)
    return result
