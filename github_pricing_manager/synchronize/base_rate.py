"""Detects base price multiplier changes in a push."""

import math
import re

from githubkit.exception import GitHubException

from github_pricing_manager.synchronize.context import PushEventContext, is_push_event
from github_pricing_manager.synchronize.models import RateChange
from github_pricing_manager.utils.constants import BASE_PRICE_MULTIPLIER_KEY
from github_pricing_manager.utils.github import path_matches_any

_PREVIOUS_RATE_PATTERN = re.compile(rf"^-\s*{BASE_PRICE_MULTIPLIER_KEY}\s*:\s*(\S+)")
_NEW_RATE_PATTERN = re.compile(rf"^\+\s*{BASE_PRICE_MULTIPLIER_KEY}\s*:\s*(\S+)")


def _parse_rate(literal: str) -> float | None:
    try:
        value = float(literal.strip("'\""))
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_base_rate_changes(patch: str) -> RateChange:
    """Extract the previous and new base rate from a unified diff.

    The last removed assignment is the previous rate and the last added
    assignment is the new rate. Non-numeric values count as absent.
    """
    previous_base_rate: float | None = None
    new_base_rate: float | None = None
    for line in patch.splitlines():
        if match := _NEW_RATE_PATTERN.match(line):
            rate = _parse_rate(match.group(1))
            if rate is not None:
                new_base_rate = rate
        elif match := _PREVIOUS_RATE_PATTERN.match(line):
            rate = _parse_rate(match.group(1))
            if rate is not None:
                previous_base_rate = rate
    return RateChange(previous_base_rate=previous_base_rate, new_base_rate=new_base_rate)


async def is_config_modified(context: PushEventContext) -> bool:
    """Return True if any commit of the push added or modified a tracked configuration file."""
    if not is_push_event(context):
        context.logger.debug("Not a push event")
        return False

    changed_paths = [path for commit in context.payload.commits for path in (*commit.added, *commit.modified)]
    if not changed_paths:
        context.logger.info("No files were changed in the commits, so no action is required.")
        return False

    return any(path_matches_any(path, context.tracked_config_paths) for path in changed_paths)


def _find_config_commit_sha(context: PushEventContext) -> str:
    """Return the last commit of the push touching a tracked file, falling back to the head of the push."""
    for commit in reversed(context.payload.commits):
        if any(path_matches_any(path, context.tracked_config_paths) for path in (*commit.added, *commit.modified)):
            return commit.id
    return context.payload.after


async def get_base_rate_changes(context: PushEventContext) -> RateChange:
    """Fetch the diff of the configuration commit and extract the base rate change.

    Assumes ``is_config_modified`` already confirmed that a tracked file changed.
    """
    commit_sha = _find_config_commit_sha(context)
    try:
        commit = await context.github_adapter.get_commit(commit_sha)
    except GitHubException as e:
        context.logger.error("Failed to fetch the configuration commit", commit_sha=commit_sha, error=str(e))
        return RateChange(previous_base_rate=None, new_base_rate=None)

    patches = [
        file_data.get("patch") or ""
        for file_data in commit.get("files", [])
        if path_matches_any(file_data.get("filename", ""), context.tracked_config_paths)
    ]
    context.logger.debug("Fetched configuration diff", commit_sha=commit_sha, patch_count=len(patches))
    return parse_base_rate_changes("\n".join(patches))
