"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio
from pathlib import Path

from github_pricing_manager.configuration import reconcile
from github_pricing_manager.configuration.config import set_configuration
from github_pricing_manager.configuration.models import GlobalLabelUpdateConfig


def get_global_label_update_config(
    debug: bool = False,
    github_api_url: str | None = None,
    github_pat_token: str | None = None,
    github_app_id: int | None = None,
    github_app_private_key_path: Path | None = None,
    github_app_installation_id: int | None = None,
    event_name: str | None = None,
    event_path: Path | None = None,
    pricing_config_path: Path | None = None,
    tracked_config_paths: list[str] | None = None,
) -> GlobalLabelUpdateConfig:
    """Synchronously get the reconciled global-label-update configuration."""

    async def _reconcile() -> GlobalLabelUpdateConfig:
        desired_config = await reconcile.reconcile_global_label_update_configuration(
            cli_debug=debug,
            cli_github_api_url=github_api_url,
            cli_github_pat_token=github_pat_token,
            cli_github_app_id=github_app_id,
            cli_github_app_private_key_path=github_app_private_key_path,
            cli_github_app_installation_id=github_app_installation_id,
            cli_event_name=event_name,
            cli_event_path=event_path,
            cli_pricing_config_path=pricing_config_path,
            cli_tracked_config_paths=tracked_config_paths,
        )
        await set_configuration(desired_config)
        return desired_config

    return asyncio.run(_reconcile())
