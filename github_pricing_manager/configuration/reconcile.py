"""Reconcile application configuration between CLI arguments and environment variables."""

from pathlib import Path

from github_pricing_manager.configuration.env import settings
from github_pricing_manager.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    RequiredConfigurationElementError,
)
from github_pricing_manager.configuration.models import GitHubAuthenticationType, GlobalLabelUpdateConfig
from github_pricing_manager.utils.constants import DEFAULT_TRACKED_CONFIG_PATHS


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If neither or both of the PAT and App configurations are defined,
            or if the App configuration is incomplete.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    app_settings = {
        "GitHub App ID": (github_app_id, "github_app_id", "GITHUB_APP_ID"),
        "GitHub App private key path": (github_app_private_key_path, "github_app_private_key_path", "GITHUB_APP_PRIVATE_KEY_PATH"),
        "GitHub App installation ID": (github_app_installation_id, "github_app_installation_id", "GITHUB_APP_INSTALLATION_ID"),
    }
    any_app_setting = any(value for value, _, _ in app_settings.values())

    if github_pat_token and any_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if not any_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
        )

    missing = [
        f"{name} (command line option {cli_name}, environment variable {env_name})"
        for name, (value, cli_name, env_name) in app_settings.items()
        if not value
    ]
    if missing:
        raise GitHubAuthenticationConfigurationUndefinedError("Incomplete GitHub App configuration - missing settings include " + ", ".join(missing))
    return GitHubAuthenticationType.APP


async def reconcile_global_label_update_configuration(
    cli_debug: bool = False,
    cli_github_api_url: str | None = None,
    cli_github_pat_token: str | None = None,
    cli_github_app_id: int | None = None,
    cli_github_app_private_key_path: Path | None = None,
    cli_github_app_installation_id: int | None = None,
    cli_event_name: str | None = None,
    cli_event_path: Path | None = None,
    cli_pricing_config_path: Path | None = None,
    cli_tracked_config_paths: list[str] | None = None,
) -> GlobalLabelUpdateConfig:
    """Reconcile the global-label-update configuration.

    Values passed on the command line take precedence over environment
    variables. The pricing configuration path falls back to the first tracked
    configuration path, relative to the working directory.
    """
    github_pat_token = cli_github_pat_token or settings.GITHUB_PAT_TOKEN
    github_app_id = cli_github_app_id or settings.GITHUB_APP_ID
    github_app_private_key_path = cli_github_app_private_key_path or settings.GITHUB_APP_PRIVATE_KEY_PATH
    github_app_installation_id = cli_github_app_installation_id or settings.GITHUB_APP_INSTALLATION_ID

    github_authentication_type = await validate_github_authentication_configuration(
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
    )

    event_name = cli_event_name or settings.GITHUB_EVENT_NAME
    if not event_name:
        raise RequiredConfigurationElementError(name="GitHub event name", cli_name="event_name", env_name="GITHUB_EVENT_NAME")

    event_path = cli_event_path or settings.GITHUB_EVENT_PATH
    if event_path is None:
        raise RequiredConfigurationElementError(name="GitHub event path", cli_name="event_path", env_name="GITHUB_EVENT_PATH")

    tracked_config_paths = cli_tracked_config_paths or list(DEFAULT_TRACKED_CONFIG_PATHS)
    pricing_config_path = cli_pricing_config_path or settings.PRICING_CONFIG_PATH or Path(tracked_config_paths[0])

    return GlobalLabelUpdateConfig(
        debug=cli_debug or settings.DEBUG,
        github_api_url=cli_github_api_url or settings.GITHUB_API_URL,
        github_authentication_type=github_authentication_type,
        github_pat_token=github_pat_token,
        github_app_id=github_app_id,
        github_app_private_key_path=github_app_private_key_path,
        github_app_installation_id=github_app_installation_id,
        event_name=event_name,
        event_path=event_path,
        pricing_config_path=pricing_config_path,
        tracked_config_paths=tracked_config_paths,
    )
