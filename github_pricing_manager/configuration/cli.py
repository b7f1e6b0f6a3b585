"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import logging
from pathlib import Path

import structlog
import typer
from dotenv import load_dotenv
from githubkit.exception import GitHubException
from typer import Argument, Option
from typing_extensions import Annotated

from github_pricing_manager.configuration.driver import get_global_label_update_config
from github_pricing_manager.configuration.exceptions import (
    GitHubAuthenticationConfigurationUndefinedError,
    PricingConfigurationError,
    PushEventPayloadError,
    RequiredConfigurationElementError,
)
from github_pricing_manager.synchronize.driver import load_pricing_config, run_global_label_update_workflow
from github_pricing_manager.synchronize.pricing import get_all_price_label_names

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False)


def configure_logging(debug: bool) -> None:
    """Configure structlog to render key/value events at the requested level."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if debug else logging.INFO),
        cache_logger_on_first_use=True,
    )


@typer_app.command(name="global-label-update")
def global_label_update_cli(
    event_path: Annotated[Path | None, Option(envvar="GITHUB_EVENT_PATH", help="Path to the JSON payload of the webhook event.")] = None,
    event_name: Annotated[str | None, Option(envvar="GITHUB_EVENT_NAME", help="Name of the webhook event (e.g. push).")] = None,
    pricing_config_path: Annotated[
        Path | None, Option(envvar="PRICING_CONFIG_PATH", help="Path to the pricing configuration YAML file.")
    ] = None,
    tracked_config_path: Annotated[
        list[str] | None,
        Option("--tracked-config-path", help="Configuration file path whose change triggers propagation. Can be repeated."),
    ] = None,
    github_api_url: Annotated[str | None, Option(envvar="GITHUB_API_URL", help="GitHub API URL.")] = None,
    github_pat_token: Annotated[str | None, Option(envvar="GITHUB_PAT_TOKEN", help="GitHub Personal Access Token.")] = None,
    github_app_id: Annotated[int | None, Option(envvar="GITHUB_APP_ID", help="GitHub App ID.")] = None,
    github_app_private_key_path: Annotated[Path | None, Option(envvar="GITHUB_APP_PRIVATE_KEY_PATH", help="Path to GitHub App private key.")] = None,
    github_app_installation_id: Annotated[int | None, Option(envvar="GITHUB_APP_INSTALLATION_ID", help="GitHub App Installation ID.")] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Propagate a base price multiplier change to the price label of every open issue in the organization."""
    configure_logging(debug)
    try:
        config = get_global_label_update_config(
            debug=debug,
            github_api_url=github_api_url,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            event_name=event_name,
            event_path=event_path,
            pricing_config_path=pricing_config_path,
            tracked_config_paths=tracked_config_path,
        )
    except (GitHubAuthenticationConfigurationUndefinedError, RequiredConfigurationElementError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(1) from e

    try:
        asyncio.run(run_global_label_update_workflow(config))
    except (PricingConfigurationError, PushEventPayloadError) as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1) from e
    except GitHubException as e:
        typer.echo(f"GitHub API error during global label update: {e}", err=True)
        raise typer.Exit(1) from e


@typer_app.command(name="price-labels")
def price_labels_cli(
    pricing_config_path: Annotated[Path, Argument(envvar="PRICING_CONFIG_PATH", help="Path to the pricing configuration YAML file.")],
    base_price_multiplier: Annotated[
        float | None, Option(help="Base price multiplier to use instead of the configured one.")
    ] = None,
) -> None:
    """Print the price labels the pricing configuration yields."""
    try:
        pricing_config = load_pricing_config(pricing_config_path)
    except PricingConfigurationError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(1) from e

    if base_price_multiplier is not None:
        pricing_config = pricing_config.with_base_price_multiplier(base_price_multiplier)

    typer.echo(f"Base price multiplier: {pricing_config.base_price_multiplier}")
    for name in get_all_price_label_names(pricing_config):
        typer.echo(name)


if __name__ == "__main__":
    typer_app()
