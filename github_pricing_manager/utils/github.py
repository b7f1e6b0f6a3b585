"""Contains utility functions for GitHub interactions."""


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits a repository in 'owner/repo' format into owner and repository."""
    if repo is None:
        raise ValueError("A repository in 'owner/repo' format is required.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def path_matches_any(path: str, tracked_paths: tuple[str, ...] | list[str]) -> bool:
    """Return True if a changed file path refers to one of the tracked paths."""
    normalized = path.lstrip("/")
    return any(normalized == tracked.lstrip("/") or normalized.endswith("/" + tracked.lstrip("/")) for tracked in tracked_paths)
