"""
Unit tests for environment-driven Config loading.
"""

from pathlib import Path

import pytest

from claimrewards.core.config.config import Config, PersistencePolicy

pytestmark = pytest.mark.unit


LOADED_ATTRS = (
    "DISCORD_TOKEN",
    "COMMAND_PREFIX",
    "CLAIM_ROLE",
    "ENVIRONMENT",
    "DEBUG",
    "LOG_LEVEL",
    "LOG_JSON",
    "DATA_DIR",
    "CONFIG_DIR",
    "PERSISTENCE_POLICY",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Unset claim env vars; Config attributes are restored after the test."""
    for attr in LOADED_ATTRS:
        monkeypatch.setattr(Config, attr, getattr(Config, attr))
    monkeypatch.setattr(Config, "_metrics", None)
    for key in (
        "DISCORD_TOKEN",
        "COMMAND_PREFIX",
        "CLAIM_ROLE",
        "DEBUG",
        "LOG_JSON",
        "CLAIMS_DATA_DIR",
        "CLAIMS_CONFIG_DIR",
        "PERSISTENCE_POLICY",
    ):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestLoad:
    def test_defaults(self, clean_env):
        Config.load()

        assert Config.COMMAND_PREFIX == "!"
        assert Config.CLAIM_ROLE is None
        assert Config.PERSISTENCE_POLICY is PersistencePolicy.FAIL_OPEN
        assert Config.LOG_JSON is None
        assert Config.allocations_path().name == "ClaimPlayerRewards.json"
        assert Config.ledger_path().name == "ClaimedRewards.json"

    def test_environment_overrides(self, clean_env, tmp_path):
        clean_env.setenv("COMMAND_PREFIX", "?")
        clean_env.setenv("CLAIM_ROLE", "Claimers")
        clean_env.setenv("PERSISTENCE_POLICY", "FAIL_CLOSED")
        clean_env.setenv("CLAIMS_DATA_DIR", str(tmp_path / "data"))
        clean_env.setenv("LOG_JSON", "yes")

        Config.load()

        assert Config.COMMAND_PREFIX == "?"
        assert Config.CLAIM_ROLE == "Claimers"
        assert Config.PERSISTENCE_POLICY is PersistencePolicy.FAIL_CLOSED
        assert Config.DATA_DIR == Path(tmp_path / "data").resolve()
        assert Config.LOG_JSON is True

    def test_unknown_policy_falls_back_to_fail_open(self, clean_env):
        clean_env.setenv("PERSISTENCE_POLICY", "sometimes")

        Config.load()

        assert Config.PERSISTENCE_POLICY is PersistencePolicy.FAIL_OPEN
        assert "PERSISTENCE_POLICY" in Config.get_metrics().validation_errors

    def test_invalid_boolean_uses_default(self, clean_env):
        clean_env.setenv("DEBUG", "maybe")

        Config.load()

        assert Config.DEBUG is False

    def test_summary_hides_token(self, clean_env):
        clean_env.setenv("DISCORD_TOKEN", "secret-token")

        Config.load()
        summary = Config.get_config_summary()

        assert summary["discord_token_set"] is True
        assert "secret-token" not in str(summary)
