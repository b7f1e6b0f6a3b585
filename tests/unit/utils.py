"""Helpers building fakes of GitHub objects for unit tests."""

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

CONFIG_PATH = ".github/.pricing.config.yml"


def make_push_event_payload(**overrides: Any) -> dict[str, Any]:
    """Build a push event payload touching the pricing configuration."""
    payload: dict[str, Any] = {
        "ref": "refs/heads/main",
        "before": "0" * 40,
        "after": "c" * 40,
        "repository": {"name": ".github-private", "full_name": "acme/.github-private", "owner": {"login": "acme"}},
        "organization": {"login": "acme"},
        "sender": {"login": "alice"},
        "pusher": {"name": "bob", "email": "bob@example.com"},
        "commits": [{"id": "c" * 40, "added": [], "modified": [CONFIG_PATH], "removed": []}],
    }
    payload.update(overrides)
    return payload


def make_issue(number: int, *labels: str, pull_request: Any = None) -> SimpleNamespace:
    """Build a fake GitHub issue carrying the given labels."""
    return SimpleNamespace(number=number, labels=[SimpleNamespace(name=label) for label in labels], pull_request=pull_request)


def make_repository(name: str, archived: bool = False, disabled: bool = False, owner: str = "acme") -> SimpleNamespace:
    """Build a fake organization repository."""
    return SimpleNamespace(name=name, archived=archived, disabled=disabled, owner=SimpleNamespace(login=owner))


def make_adapter() -> MagicMock:
    """Build a GitHub adapter double with async methods."""
    adapter = MagicMock()
    adapter.get_organization_membership_role = AsyncMock(return_value="admin")
    adapter.list_organization_repositories = AsyncMock(return_value=[])
    adapter.list_issues = AsyncMock(return_value=[])
    adapter.add_labels_to_issue = AsyncMock()
    adapter.remove_label_from_issue = AsyncMock()
    adapter.create_label = AsyncMock()
    adapter.delete_label = AsyncMock()
    adapter.list_labels = AsyncMock(return_value=[])
    adapter.get_commit = AsyncMock(return_value={"files": []})
    adapter.for_repository = MagicMock(return_value=adapter)
    return adapter


def make_logger() -> MagicMock:
    """Build a logger double whose bound children are the logger itself."""
    logger = MagicMock()
    logger.bind.return_value = logger
    return logger
