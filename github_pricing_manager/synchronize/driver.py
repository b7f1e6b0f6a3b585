"""Orchestrates the global label update triggered by a pricing configuration push."""

import asyncio
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import structlog
from githubkit.exception import GitHubException
from pydantic import ValidationError
from ruamel.yaml.error import YAMLError

from github_pricing_manager.configuration.exceptions import PricingConfigurationError, PushEventPayloadError
from github_pricing_manager.configuration.models import GlobalLabelUpdateConfig
from github_pricing_manager.github.adapter import GitHubKitAdapter
from github_pricing_manager.schemas.pricing_config import PricingConfig
from github_pricing_manager.schemas.push_event import PushEvent
from github_pricing_manager.synchronize.authorization import is_authed
from github_pricing_manager.synchronize.base_rate import get_base_rate_changes, is_config_modified
from github_pricing_manager.synchronize.context import PUSH_EVENT_NAME, PushEventContext, is_push_event
from github_pricing_manager.synchronize.labels import sync_price_labels_to_config
from github_pricing_manager.synchronize.propagation import update_all_issue_price_labels
from github_pricing_manager.utils.yaml import load_json_file, load_yaml_file

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

_run_locks: dict[str, asyncio.Lock] = {}
_run_lock_users: dict[str, int] = {}


@asynccontextmanager
async def organization_run_lock(organization: str) -> AsyncIterator[None]:
    """Serialize propagation runs of an organization.

    The lock is dropped once no run holds or waits for it.
    """
    lock = _run_locks.setdefault(organization, asyncio.Lock())
    _run_lock_users[organization] = _run_lock_users.get(organization, 0) + 1
    try:
        async with lock:
            yield
    finally:
        _run_lock_users[organization] -= 1
        if not _run_lock_users[organization]:
            del _run_lock_users[organization]
            del _run_locks[organization]


async def global_label_update(context: PushEventContext) -> None:
    """Propagate a base price multiplier change to every open issue of the organization.

    Returns silently after logging when the event is not a push, the pusher or
    sender is not privileged, the configuration did not change, or no new rate
    can be read from the diff. GitHub errors while synchronizing the label
    catalog are logged and abort the run before any issue is relabeled.
    """
    if not is_push_event(context):
        context.logger.debug("Not a push event")
        return

    async with organization_run_lock(context.organization):
        await _run_global_label_update(context)


async def _run_global_label_update(context: PushEventContext) -> None:
    if not await is_authed(context):
        context.logger.error("Changes should be pushed and triggered by an admin or billing manager.")
        return

    if not await is_config_modified(context):
        return

    rates = await get_base_rate_changes(context)
    if rates.new_base_rate is None:
        context.logger.error("No new base rate found in the diff")
        return

    context.logger.info("Updating base rate", previous_base_rate=rates.previous_base_rate, new_base_rate=rates.new_base_rate)
    config = context.config.with_base_price_multiplier(rates.new_base_rate)

    try:
        await sync_price_labels_to_config(context, config)
    except GitHubException as e:
        context.logger.error("Failed to synchronize the price label catalog, skipping propagation", error=str(e), exc_info=True)
        return

    # update all issues with the new pricing
    if config.global_config_update is not None:
        await update_all_issue_price_labels(context, config, config.global_config_update.exclude_repos)


def load_pricing_config(path: Path) -> PricingConfig:
    """Load and validate the pricing configuration from a YAML file."""
    try:
        return PricingConfig.model_validate(load_yaml_file(path))
    except OSError as e:
        raise PricingConfigurationError(str(path), f"cannot read file ({e})") from e
    except (YAMLError, ValidationError) as e:
        raise PricingConfigurationError(str(path), str(e)) from e


def load_event_payload(event_name: str, path: Path) -> PushEvent | dict[str, Any]:
    """Load the webhook payload, parsing it as a push event when the event is a push."""
    try:
        payload = load_json_file(path)
    except (OSError, ValueError) as e:
        raise PushEventPayloadError(f"Cannot read event payload from {path}: {e}") from e
    if event_name != PUSH_EVENT_NAME:
        return payload
    try:
        return PushEvent.model_validate(payload)
    except ValidationError as e:
        raise PushEventPayloadError(f"Invalid push event payload in {path}: {e}") from e


async def run_global_label_update_workflow(config: GlobalLabelUpdateConfig) -> None:
    """Run the global-label-update workflow from a reconciled CLI configuration."""
    pricing_config = load_pricing_config(config.pricing_config_path)
    payload = load_event_payload(config.event_name, config.event_path)
    if not isinstance(payload, PushEvent):
        logger.debug("Not a push event", event_name=config.event_name)
        return

    github_adapter = await GitHubKitAdapter.create(
        repo=payload.repository.full_name,
        github_auth_type=config.github_authentication_type,
        github_pat_token=config.github_pat_token,
        github_app_id=config.github_app_id,
        github_app_private_key_path=config.github_app_private_key_path,
        github_app_installation_id=config.github_app_installation_id,
        github_api_url=config.github_api_url,
    )
    context = PushEventContext(
        event_name=config.event_name,
        payload=payload,
        github_adapter=github_adapter,
        config=pricing_config,
        tracked_config_paths=tuple(config.tracked_config_paths),
        logger=logger.bind(organization=payload.organization_login, repository=payload.repository.name),
    )

    start_time = time.time()
    logger.info("Running global label update", start_time=start_time, after=payload.after)
    await global_label_update(context)
    logger.info("Finished global label update", duration=round(time.time() - start_time, 2))
