"""Sets up the authenticated githubkit client."""

from pathlib import Path
from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import (
    AppInstallationAuthStrategy,
    TokenAuthStrategy,
)

from github_pricing_manager.configuration.models import GitHubAuthenticationType

GitHubClient: TypeAlias = GitHub[AppInstallationAuthStrategy] | GitHub[TokenAuthStrategy]


async def get_github_app_client(
    github_app_id: int,
    github_app_private_key_path: Path,
    github_app_installation_id: int,
    github_api_url: str,
) -> GitHub[AppInstallationAuthStrategy]:
    """Returns a GitHub client authenticated as an App installation.

    The installation must cover the whole organization, since the client is
    used to list every repository and relabel issues across it.
    """
    try:
        with open(github_app_private_key_path) as f:
            private_key = f.read()
    except OSError as e:
        raise ValueError(f"Failed to read GitHub App private key: {e}") from e
    auth = AppInstallationAuthStrategy(
        app_id=github_app_id,
        private_key=private_key,
        installation_id=github_app_installation_id,
    )
    # Disable HTTP caching to always get fresh data
    return GitHub(auth=auth, base_url=github_api_url, http_cache=False)


async def get_github_pat_client(github_pat_token: str, github_api_url: str) -> GitHub[TokenAuthStrategy]:
    """Returns an authenticated GitHub client using GitHub PAT credentials."""
    if not github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires github_pat_token in config.")
    # Disable HTTP caching to always get fresh data
    return GitHub(auth=TokenAuthStrategy(github_pat_token), base_url=github_api_url, http_cache=False)


async def get_github_client(
    github_auth_type: GitHubAuthenticationType,
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
    github_api_url: str,
) -> GitHubClient:
    """Returns an authenticated GitHub client using either GitHub App or PAT credentials.

    Supports custom base URL for GitHub Enterprise Server (GHES).
    Raises RuntimeError if the credentials for the chosen type are missing.
    """
    if github_auth_type == GitHubAuthenticationType.APP:
        if not (github_app_id and github_app_private_key_path and github_app_installation_id):
            raise RuntimeError("GitHub App authentication requires app_id, private_key_path, and installation_id in config.")
        return await get_github_app_client(github_app_id, github_app_private_key_path, github_app_installation_id, github_api_url)
    if not github_pat_token:
        raise RuntimeError("GitHub PAT authentication requires github_pat_token in config.")
    return await get_github_pat_client(github_pat_token, github_api_url)
