"""Typed configuration produced by reconciling CLI arguments and environment variables."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from github_pricing_manager.utils.constants import DEFAULT_TRACKED_CONFIG_PATHS


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


@dataclass
class BaseConfig:
    """Configuration shared by every command of the GitHub Pricing Manager CLI."""

    debug: bool
    github_api_url: str
    github_authentication_type: GitHubAuthenticationType
    github_pat_token: str | None
    github_app_id: int | None
    github_app_private_key_path: Path | None
    github_app_installation_id: int | None


@dataclass
class GlobalLabelUpdateConfig(BaseConfig):
    """Configuration class for the global-label-update command."""

    event_name: str
    event_path: Path
    pricing_config_path: Path
    tracked_config_paths: list[str] = field(default_factory=lambda: list(DEFAULT_TRACKED_CONFIG_PATHS))
