"""Contains unit tests for the global label update driver."""

import asyncio
import json
from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from githubkit.exception import GitHubException

from github_pricing_manager.configuration.exceptions import PricingConfigurationError, PushEventPayloadError
from github_pricing_manager.configuration.models import GitHubAuthenticationType, GlobalLabelUpdateConfig
from github_pricing_manager.schemas.pricing_config import PricingConfig
from github_pricing_manager.schemas.push_event import PushEvent
from github_pricing_manager.synchronize.context import PushEventContext
from github_pricing_manager.synchronize.driver import (
    _run_lock_users,
    _run_locks,
    global_label_update,
    load_event_payload,
    load_pricing_config,
    organization_run_lock,
    run_global_label_update_workflow,
)

from .utils import CONFIG_PATH, make_adapter, make_issue, make_logger, make_push_event_payload, make_repository

CONFIG_PATCH = "-basePriceMultiplier: 1.0\n+basePriceMultiplier: 1.5"


def make_workflow_config(event_name: str, event_path: Path, pricing_config_path: Path) -> GlobalLabelUpdateConfig:
    """Build a reconciled workflow configuration using PAT authentication."""
    return GlobalLabelUpdateConfig(
        debug=False,
        github_api_url="https://api.github.com",
        github_authentication_type=GitHubAuthenticationType.PAT,
        github_pat_token="token",
        github_app_id=None,
        github_app_private_key_path=None,
        github_app_installation_id=None,
        event_name=event_name,
        event_path=event_path,
        pricing_config_path=pricing_config_path,
    )


def assert_no_mutations(adapter: MagicMock) -> None:
    """Assert that nothing was written through the adapter."""
    adapter.create_label.assert_not_awaited()
    adapter.delete_label.assert_not_awaited()
    adapter.add_labels_to_issue.assert_not_awaited()
    adapter.remove_label_from_issue.assert_not_awaited()


@pytest.mark.asyncio
async def test_global_label_update_end_to_end(make_context: Callable[..., PushEventContext]) -> None:
    """Test that a privileged base rate change relabels the open issues of eligible repositories only."""
    adapter = make_adapter()
    adapter.get_commit = AsyncMock(return_value={"files": [{"filename": CONFIG_PATH, "patch": CONFIG_PATCH}]})
    adapter.list_organization_repositories = AsyncMock(
        return_value=[make_repository("A"), make_repository("B", archived=True), make_repository("C")]
    )
    repository_adapter = make_adapter()
    repository_adapter.list_issues = AsyncMock(
        return_value=[make_issue(4, "Time: <1 Hour", "Priority: 1 (Normal)", "Price: 12.5 USD")]
    )
    adapter.for_repository = MagicMock(return_value=repository_adapter)

    await global_label_update(make_context(adapter=adapter))

    adapter.list_labels.assert_awaited_once()
    adapter.create_label.assert_any_await(name="Price: 18.75 USD", color="1f883d")
    adapter.for_repository.assert_called_once_with("acme", "A")
    repository_adapter.remove_label_from_issue.assert_awaited_once_with(4, "Price: 12.5 USD")
    repository_adapter.add_labels_to_issue.assert_awaited_once_with(4, ["Price: 18.75 USD"])


@pytest.mark.asyncio
async def test_global_label_update_unauthorized(make_context: Callable[..., PushEventContext]) -> None:
    """Test that a push by an unprivileged member changes nothing."""
    adapter = make_adapter()
    adapter.get_organization_membership_role = AsyncMock(return_value="member")

    await global_label_update(make_context(adapter=adapter))

    adapter.get_commit.assert_not_awaited()
    adapter.list_organization_repositories.assert_not_awaited()
    assert_no_mutations(adapter)


@pytest.mark.asyncio
async def test_global_label_update_config_not_modified(make_context: Callable[..., PushEventContext]) -> None:
    """Test that a push not touching the configuration never reads a diff."""
    adapter = make_adapter()
    payload = make_push_event_payload(commits=[{"id": "a" * 40, "modified": ["README.md"]}])

    await global_label_update(make_context(adapter=adapter, payload=payload))

    adapter.get_commit.assert_not_awaited()
    assert_no_mutations(adapter)


@pytest.mark.asyncio
async def test_global_label_update_without_new_rate(make_context: Callable[..., PushEventContext]) -> None:
    """Test that a configuration change without a new base rate changes nothing."""
    adapter = make_adapter()
    adapter.get_commit = AsyncMock(return_value={"files": [{"filename": CONFIG_PATH, "patch": "+labels:\n-labels: {}"}]})

    await global_label_update(make_context(adapter=adapter))

    adapter.get_commit.assert_awaited_once()
    adapter.list_labels.assert_not_awaited()
    assert_no_mutations(adapter)


@pytest.mark.asyncio
async def test_global_label_update_without_propagation_settings(make_context: Callable[..., PushEventContext], pricing_config: PricingConfig) -> None:
    """Test that only the label catalog is synchronized when propagation is not configured."""
    adapter = make_adapter()
    adapter.get_commit = AsyncMock(return_value={"files": [{"filename": CONFIG_PATH, "patch": CONFIG_PATCH}]})
    config = pricing_config.model_copy(update={"global_config_update": None})

    await global_label_update(make_context(adapter=adapter, config=config))

    adapter.create_label.assert_awaited()
    adapter.list_organization_repositories.assert_not_awaited()


@pytest.mark.asyncio
async def test_global_label_update_not_a_push(make_context: Callable[..., PushEventContext]) -> None:
    """Test that other events are ignored without any API call."""
    adapter = make_adapter()

    await global_label_update(make_context(adapter=adapter, event_name="issues", payload={"action": "opened"}))

    adapter.get_organization_membership_role.assert_not_awaited()
    assert_no_mutations(adapter)


@pytest.mark.asyncio
async def test_global_label_update_clears_price_from_unpriced_issue(make_context: Callable[..., PushEventContext]) -> None:
    """Test that an open issue without time or priority labels loses its outdated price label."""
    adapter = make_adapter()
    adapter.get_commit = AsyncMock(return_value={"files": [{"filename": CONFIG_PATH, "patch": CONFIG_PATCH}]})
    adapter.list_organization_repositories = AsyncMock(return_value=[make_repository("A")])
    repository_adapter = make_adapter()
    repository_adapter.list_issues = AsyncMock(return_value=[make_issue(4, "bug", "Price: 12.5 USD")])
    adapter.for_repository = MagicMock(return_value=repository_adapter)

    await global_label_update(make_context(adapter=adapter))

    repository_adapter.remove_label_from_issue.assert_awaited_once_with(4, "Price: 12.5 USD")
    repository_adapter.add_labels_to_issue.assert_not_awaited()


@pytest.mark.asyncio
async def test_global_label_update_catalog_failure_skips_propagation(make_context: Callable[..., PushEventContext]) -> None:
    """Test that a failure listing the label catalog is logged and no issue is relabeled."""
    adapter = make_adapter()
    adapter.get_commit = AsyncMock(return_value={"files": [{"filename": CONFIG_PATH, "patch": CONFIG_PATCH}]})
    adapter.list_labels = AsyncMock(side_effect=GitHubException("catalog down"))
    logger = make_logger()

    await global_label_update(make_context(adapter=adapter, logger=logger))

    logger.error.assert_any_call(
        "Failed to synchronize the price label catalog, skipping propagation", error="catalog down", exc_info=True
    )
    adapter.list_organization_repositories.assert_not_awaited()
    assert_no_mutations(adapter)


@pytest.mark.asyncio
async def test_global_label_update_repository_listing_failure(make_context: Callable[..., PushEventContext]) -> None:
    """Test that a failure listing the organization repositories is logged after the catalog was synchronized."""
    adapter = make_adapter()
    adapter.get_commit = AsyncMock(return_value={"files": [{"filename": CONFIG_PATH, "patch": CONFIG_PATCH}]})
    adapter.list_organization_repositories = AsyncMock(side_effect=GitHubException("org listing down"))
    logger = make_logger()

    await global_label_update(make_context(adapter=adapter, logger=logger))

    adapter.create_label.assert_any_await(name="Price: 18.75 USD", color="1f883d")
    adapter.list_organization_repositories.assert_awaited_once_with("acme")
    logger.error.assert_any_call(
        "Failed to list organization repositories, nothing was propagated", error="org listing down", exc_info=True
    )
    adapter.add_labels_to_issue.assert_not_awaited()


@pytest.mark.asyncio
async def test_organization_run_lock_is_dropped_after_use() -> None:
    """Test that the lock of an organization is forgotten once its run is over."""
    async with organization_run_lock("acme"):
        assert "acme" in _run_locks
        assert _run_lock_users["acme"] == 1

    assert "acme" not in _run_locks
    assert "acme" not in _run_lock_users


@pytest.mark.asyncio
async def test_organization_run_lock_is_dropped_after_failure() -> None:
    """Test that a run raising an error still releases and forgets the lock."""
    with pytest.raises(RuntimeError):
        async with organization_run_lock("acme"):
            raise RuntimeError("boom")

    assert "acme" not in _run_locks
    assert "acme" not in _run_lock_users


@pytest.mark.asyncio
async def test_organization_run_lock_is_kept_while_a_run_waits() -> None:
    """Test that a waiting run shares the lock and the lock is dropped after the last run."""
    entered: list[str] = []

    async def wait_for_lock() -> None:
        async with organization_run_lock("acme"):
            entered.append("second")

    async with organization_run_lock("acme"):
        lock = _run_locks["acme"]
        waiter = asyncio.create_task(wait_for_lock())
        await asyncio.sleep(0)
        assert _run_lock_users["acme"] == 2
        assert entered == []

    await waiter

    assert entered == ["second"]
    assert not lock.locked()
    assert "acme" not in _run_locks
    assert "acme" not in _run_lock_users


@pytest.mark.asyncio
async def test_organization_run_lock_is_per_organization() -> None:
    """Test that a run of one organization does not block another organization."""
    async with organization_run_lock("acme"):
        async with organization_run_lock("other"):
            assert _run_locks["acme"] is not _run_locks["other"]

    assert _run_locks == {}


@pytest.mark.asyncio
async def test_global_label_update_drops_run_lock(make_context: Callable[..., PushEventContext]) -> None:
    """Test that a finished run leaves no lock behind."""
    await global_label_update(make_context())

    assert "acme" not in _run_locks
    assert "acme" not in _run_lock_users


@pytest.mark.asyncio
async def test_global_label_update_serializes_runs(make_context: Callable[..., PushEventContext]) -> None:
    """Test that overlapping runs of one organization do not interleave."""
    events: list[str] = []

    async def fake_run(context: PushEventContext) -> None:
        events.append("start")
        await asyncio.sleep(0)
        events.append("end")

    with (
        patch.dict("github_pricing_manager.synchronize.driver._run_locks", clear=True),
        patch("github_pricing_manager.synchronize.driver._run_global_label_update", new=fake_run),
    ):
        await asyncio.gather(global_label_update(make_context()), global_label_update(make_context()))

    assert events == ["start", "end", "start", "end"]


def test_load_pricing_config(tmp_path: Path) -> None:
    """Test loading a pricing configuration from YAML."""
    path = tmp_path / ".pricing.config.yml"
    path.write_text("basePriceMultiplier: 1.5\nglobalConfigUpdate:\n  excludeRepos:\n    - C\n", encoding="utf-8")

    config = load_pricing_config(path)

    assert config.base_price_multiplier == 1.5
    assert config.global_config_update is not None
    assert config.global_config_update.exclude_repos == ["C"]
    assert config.labels.time[0] == "Time: <15 Minutes"


def test_load_pricing_config_empty_file(tmp_path: Path) -> None:
    """Test that an empty configuration file yields the defaults."""
    path = tmp_path / ".pricing.config.yml"
    path.write_text("", encoding="utf-8")

    config = load_pricing_config(path)

    assert config.base_price_multiplier == 1
    assert config.global_config_update is None


@pytest.mark.parametrize(
    "content",
    [
        pytest.param("basePriceMultiplier: [1", id="malformed yaml"),
        pytest.param("basePriceMultiplier: abc", id="invalid multiplier"),
    ],
)
def test_load_pricing_config_invalid(tmp_path: Path, content: str) -> None:
    """Test that unreadable configuration raises a pricing configuration error."""
    path = tmp_path / ".pricing.config.yml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(PricingConfigurationError):
        load_pricing_config(path)


def test_load_pricing_config_missing_file(tmp_path: Path) -> None:
    """Test that a missing configuration file raises a pricing configuration error."""
    with pytest.raises(PricingConfigurationError, match="cannot read file"):
        load_pricing_config(tmp_path / "missing.yml")


def test_load_event_payload_push(tmp_path: Path) -> None:
    """Test that push payloads are parsed into push events."""
    path = tmp_path / "event.json"
    path.write_text(json.dumps(make_push_event_payload()), encoding="utf-8")

    payload = load_event_payload("push", path)

    assert isinstance(payload, PushEvent)
    assert payload.organization_login == "acme"
    assert payload.commits[0].modified == [CONFIG_PATH]


def test_load_event_payload_other_event(tmp_path: Path) -> None:
    """Test that payloads of other events are returned as-is."""
    path = tmp_path / "event.json"
    path.write_text(json.dumps({"action": "opened"}), encoding="utf-8")

    assert load_event_payload("issues", path) == {"action": "opened"}


@pytest.mark.parametrize(
    "content",
    [
        pytest.param("{not json", id="malformed json"),
        pytest.param(json.dumps({"ref": "refs/heads/main"}), id="incomplete push event"),
    ],
)
def test_load_event_payload_invalid(tmp_path: Path, content: str) -> None:
    """Test that unusable push payloads raise a payload error."""
    path = tmp_path / "event.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(PushEventPayloadError):
        load_event_payload("push", path)


@pytest.mark.asyncio
async def test_run_global_label_update_workflow(tmp_path: Path) -> None:
    """Test that the workflow builds an adapter for the pushed repository and runs the pipeline."""
    pricing_path = tmp_path / ".pricing.config.yml"
    pricing_path.write_text("basePriceMultiplier: 1\n", encoding="utf-8")
    event_path = tmp_path / "event.json"
    event_path.write_text(json.dumps(make_push_event_payload()), encoding="utf-8")
    config = make_workflow_config("push", event_path, pricing_path)
    adapter = make_adapter()

    with (
        patch("github_pricing_manager.synchronize.driver.GitHubKitAdapter.create", new=AsyncMock(return_value=adapter)) as mock_create,
        patch("github_pricing_manager.synchronize.driver.global_label_update", new=AsyncMock()) as mock_update,
    ):
        await run_global_label_update_workflow(config)

    mock_create.assert_awaited_once()
    assert mock_create.await_args.kwargs["repo"] == "acme/.github-private"
    context = mock_update.await_args.args[0]
    assert context.github_adapter is adapter
    assert context.organization == "acme"
    assert context.config.base_price_multiplier == 1


@pytest.mark.asyncio
async def test_run_global_label_update_workflow_ignores_other_events(tmp_path: Path) -> None:
    """Test that no client is created for events other than push."""
    pricing_path = tmp_path / ".pricing.config.yml"
    pricing_path.write_text("", encoding="utf-8")
    event_path = tmp_path / "event.json"
    event_path.write_text(json.dumps({"action": "opened"}), encoding="utf-8")
    config = make_workflow_config("issues", event_path, pricing_path)

    with patch("github_pricing_manager.synchronize.driver.GitHubKitAdapter.create", new=AsyncMock()) as mock_create:
        await run_global_label_update_workflow(config)

    mock_create.assert_not_awaited()
