"""
Pytest Configuration and Fixtures for Claim Player Rewards Tests
================================================================

Purpose
-------
Shared fixtures for the test suite: temporary data directories, stores,
claim contexts and Discord mocks.

Architecture Notes
------------------
- Unit tests use in-memory stores backed by tmp_path files
- Integration tests reload stores from disk to simulate restarts
- Discord objects are pytest-mock MagicMocks (no gateway connection)
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest

from claimrewards.core.config.config import PersistencePolicy
from claimrewards.core.config.reward_config import RewardConfig
from claimrewards.modules.rewards.granter import RecordingItemGranter
from claimrewards.modules.rewards.permissions import CLAIM_PERMISSION, PermissionRegistry
from claimrewards.modules.rewards.service import ClaimContext

FIXED_NOW = datetime(2024, 1, 1, 0, 0, 0, tzinfo=timezone.utc)

P1 = "76561198000000001"
P2 = "76561198000000002"

# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """Keep tests away from a developer's real .env values."""
    os.environ["ENVIRONMENT"] = "testing"
    os.environ.setdefault("LOG_LEVEL", "DEBUG")


# ============================================================================
# FILESYSTEM FIXTURES
# ============================================================================


def write_json_file(path: Path, data: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def read_json_file(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """Empty data directory for one test."""
    directory = tmp_path / "data" / "ClaimPlayerRewards"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def allocations_path(data_dir) -> Path:
    return data_dir / "ClaimPlayerRewards.json"


@pytest.fixture
def ledger_path(data_dir) -> Path:
    return data_dir / "ClaimedRewards.json"


# ============================================================================
# DOMAIN FIXTURES
# ============================================================================


@pytest.fixture
def reward_config() -> RewardConfig:
    return RewardConfig(item="blood", skin_id=0)


@pytest.fixture
def granter() -> RecordingItemGranter:
    return RecordingItemGranter()


@pytest.fixture
def permission_registry() -> PermissionRegistry:
    """Registry with the claim permission registered and granted to P1 and P2."""
    registry = PermissionRegistry()
    registry.register_permission(CLAIM_PERMISSION)
    registry.grant(P1, CLAIM_PERMISSION)
    registry.grant(P2, CLAIM_PERMISSION)
    return registry


@pytest.fixture
def make_context(
    allocations_path, ledger_path, reward_config, granter
) -> Callable[..., ClaimContext]:
    """
    Factory building a ClaimContext from (optional) seeded files.

    Usage:
        context = make_context(allocations={P1: 50})
    """

    def _make(
        allocations: Optional[Dict[str, Any]] = None,
        claims: Optional[list] = None,
        policy: PersistencePolicy = PersistencePolicy.FAIL_OPEN,
    ) -> ClaimContext:
        if allocations is not None:
            write_json_file(allocations_path, allocations)
        if claims is not None:
            write_json_file(ledger_path, {"claims": claims})

        context = ClaimContext.from_paths(
            allocations_path,
            ledger_path,
            reward_config=reward_config,
            granter=granter,
            policy=policy,
        )
        context.clock = lambda: FIXED_NOW
        return context

    return _make


# ============================================================================
# DISCORD MOCKS
# ============================================================================


@pytest.fixture
def mock_bot(mocker):
    """Mock Discord bot for cog testing."""
    mock_bot = mocker.MagicMock()
    mock_bot.user = mocker.MagicMock()
    mock_bot.user.id = 123456789
    mock_bot.user.name = "TestBot"
    return mock_bot


@pytest.fixture
def mock_context(mocker, mock_bot):
    """Mock Discord command context whose author is player P1."""
    mock_ctx = mocker.MagicMock()
    mock_ctx.bot = mock_bot
    mock_ctx.author = mocker.MagicMock()
    mock_ctx.author.id = int(P1)
    mock_ctx.author.name = "TestUser"
    mock_ctx.author.display_name = "TestUser"
    mock_ctx.author.roles = []
    mock_ctx.guild = mocker.MagicMock()
    mock_ctx.guild.id = 111222333
    mock_ctx.channel = mocker.MagicMock()
    mock_ctx.send = mocker.AsyncMock()
    mock_ctx.reply = mocker.AsyncMock()
    mock_ctx.typing = mocker.AsyncMock()
    return mock_ctx
