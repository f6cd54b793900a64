"""
Static configuration management for Claim Player Rewards.

Purpose
-------
Provides centralized static configuration loaded from environment variables
with sensible defaults, type validation, and bounds checking. This module
handles process settings that are fixed at startup: where the data files
live, how persistence failures are treated, and how the Discord host runs.

Responsibilities
----------------
- Load configuration from environment variables with .env support
- Provide type-safe access to all static configuration values
- Validate critical settings on startup
- Create required directories (logs, data, config)
- Track configuration loading metrics

Non-Responsibilities
--------------------
- Reward item configuration (handled by RewardConfig, a JSON file)
- Allocation and ledger data (handled by the rewards module)
- Secrets management (use environment variables)

Architecture Notes
------------------
- Singleton pattern via class methods (no instantiation)
- Metrics track which values came from environment vs defaults
- Directory paths relative to project root for portability

Environment Variables
---------------------
Required (production):
- DISCORD_TOKEN: Bot authentication token

Optional (with defaults):
- COMMAND_PREFIX: Command prefix (default: "!")
- ENVIRONMENT: Environment type (default: development)
- DEBUG: Debug mode flag (default: False)
- LOG_LEVEL: Logging level (default: INFO)
- LOG_JSON: Force JSON console logs (default: production only)
- CLAIMS_DATA_DIR: Directory holding allocation + ledger files
- CLAIMS_CONFIG_DIR: Directory holding RewardConfig.json
- PERSISTENCE_POLICY: fail_open (default) or fail_closed
- CLAIM_ROLE: Discord role name required to claim (default: anyone)
"""

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# ============================================================================
# Enums and Constants
# ============================================================================


class Environment(Enum):
    """Deployment environment types."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def from_string(cls, value: str) -> "Environment":
        """
        Parse environment string safely with fallback.

        Example
        -------
        >>> Environment.from_string("production") == Environment.PRODUCTION
        True
        >>> Environment.from_string("invalid") == Environment.DEVELOPMENT
        True
        """
        try:
            return cls(value.lower())
        except ValueError:
            # Structured logger is not configured yet at this point
            logging.warning(
                f"Unknown environment '{value}', defaulting to development"
            )
            return cls.DEVELOPMENT


class PersistencePolicy(Enum):
    """
    How the stores react to persistence failures.

    FAIL_OPEN keeps the process running on the in-memory state (write errors
    are logged, corrupt files load as empty). FAIL_CLOSED raises instead.
    """

    FAIL_OPEN = "fail_open"
    FAIL_CLOSED = "fail_closed"

    @classmethod
    def from_string(cls, value: str) -> "PersistencePolicy":
        try:
            return cls(value.strip().lower())
        except ValueError:
            logging.warning(
                f"Unknown persistence policy '{value}', defaulting to fail_open"
            )
            return cls.FAIL_OPEN


# ============================================================================
# Configuration Metrics Tracker
# ============================================================================


class _ConfigLoadMetrics:
    """
    Internal metrics tracker for configuration loading.

    Tracks which configuration values came from environment variables
    versus defaults, and any validation errors encountered.
    """

    def __init__(self):
        self.env_vars_loaded: Dict[str, bool] = {}
        self.validation_errors: Dict[str, str] = {}
        self.defaults_used: Dict[str, Any] = {}
        self.last_reload: Optional[str] = None

    def record_env_load(self, key: str, from_env: bool, value: Any, default: Any):
        """Record whether a config value came from environment."""
        self.env_vars_loaded[key] = from_env
        if not from_env:
            self.defaults_used[key] = default

    def record_validation_error(self, key: str, error: str):
        """Record a validation error."""
        self.validation_errors[key] = error

    def get_summary(self) -> Dict[str, Any]:
        """Get configuration loading summary."""
        return {
            "total_configs": len(self.env_vars_loaded),
            "from_environment": sum(1 for v in self.env_vars_loaded.values() if v),
            "from_defaults": sum(1 for v in self.env_vars_loaded.values() if not v),
            "validation_errors": len(self.validation_errors),
            "defaults_used": list(self.defaults_used.keys()),
            "last_reload": self.last_reload,
        }


# ============================================================================
# Main Configuration Class
# ============================================================================


class Config:
    """
    Centralized static configuration for the Claim Player Rewards bot.

    All configuration values loaded from environment variables with sensible
    defaults. Validates critical settings on startup to prevent runtime failures.

    Usage
    -----
    >>> Config.validate()
    >>> data_dir = Config.DATA_DIR
    >>> if Config.PERSISTENCE_POLICY is PersistencePolicy.FAIL_CLOSED:
    ...     logger.info("Persistence failures will be raised")
    """

    # =========================================================================
    # Internal State
    # =========================================================================

    _metrics: Optional[_ConfigLoadMetrics] = None
    _enable_metrics: bool = True
    _validated: bool = False

    # =========================================================================
    # Discord Configuration
    # =========================================================================

    DISCORD_TOKEN: str = ""
    COMMAND_PREFIX: str = "!"
    CLAIM_ROLE: Optional[str] = None

    # =========================================================================
    # Environment Configuration
    # =========================================================================

    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None
    LOG_COLORS: bool = True

    # =========================================================================
    # Directory Configuration
    # =========================================================================

    PROJECT_ROOT = Path(__file__).resolve().parents[3]
    LOGS_DIR = PROJECT_ROOT / "logs"
    DATA_DIR = PROJECT_ROOT / "data" / "ClaimPlayerRewards"
    CONFIG_DIR = PROJECT_ROOT / "config"

    ALLOCATIONS_FILENAME: str = "ClaimPlayerRewards.json"
    LEDGER_FILENAME: str = "ClaimedRewards.json"
    REWARD_CONFIG_FILENAME: str = "RewardConfig.json"

    # =========================================================================
    # Persistence
    # =========================================================================

    PERSISTENCE_POLICY: PersistencePolicy = PersistencePolicy.FAIL_OPEN

    # =========================================================================
    # Bot Metadata
    # =========================================================================

    BOT_NAME: str = "Claim Player Rewards"
    BOT_VERSION: str = "0.1.0"
    BOT_DESCRIPTION: str = "Lets players claim one-time item rewards and logs every claim"

    # =========================================================================
    # UI Colors
    # =========================================================================

    EMBED_COLOR_PRIMARY: int = 0x2c2d31
    EMBED_COLOR_SUCCESS: int = 0x2d5016
    EMBED_COLOR_ERROR: int = 0x8b0000
    EMBED_COLOR_WARNING: int = 0x8b6914
    EMBED_COLOR_INFO: int = 0x1e3a8a

    # =========================================================================
    # Helper Methods
    # =========================================================================

    @classmethod
    def _init_metrics(cls):
        """Initialize metrics tracking if enabled."""
        if cls._enable_metrics and cls._metrics is None:
            cls._metrics = _ConfigLoadMetrics()

    @classmethod
    def _safe_bool(cls, key: str, default: Optional[bool]) -> Optional[bool]:
        """
        Safely parse boolean from environment.

        Recognizes: true/false, yes/no, 1/0, on/off (case-insensitive).
        """
        cls._init_metrics()

        raw_value = os.getenv(key)

        if raw_value is None:
            if cls._metrics:
                cls._metrics.record_env_load(key, False, default, default)
            return default

        normalized = raw_value.lower().strip()
        true_values = {"true", "yes", "1", "on"}
        false_values = {"false", "no", "0", "off"}

        if normalized in true_values:
            value = True
        elif normalized in false_values:
            value = False
        else:
            error = f"{key}='{raw_value}' is not a valid boolean, using default {default}"
            logging.warning(error)
            if cls._metrics:
                cls._metrics.record_validation_error(key, error)
            return default

        if cls._metrics:
            cls._metrics.record_env_load(key, True, value, default)

        return value

    @classmethod
    def _safe_str(
        cls,
        key: str,
        default: str,
        required: bool = False,
    ) -> str:
        """
        Safely get string from environment.

        Parameters
        ----------
        key:
            Environment variable name.
        default:
            Default value if not set.
        required:
            Whether this config is required (logged if missing).
        """
        cls._init_metrics()

        value = os.getenv(key, default)
        from_env = key in os.environ

        if cls._metrics:
            cls._metrics.record_env_load(key, from_env, value, default)

        if required and not value:
            error = f"Required environment variable {key} is not set"
            logging.error(error)
            if cls._metrics:
                cls._metrics.record_validation_error(key, error)

        return value

    @classmethod
    def _safe_path(cls, key: str, default: Path) -> Path:
        """Get a directory path from environment, falling back to default."""
        raw_value = cls._safe_str(key, "")
        if not raw_value:
            return default
        return Path(raw_value).expanduser().resolve()

    # =========================================================================
    # Configuration Loading
    # =========================================================================

    @classmethod
    def load(cls) -> None:
        """
        Load all configuration from environment variables with validation.

        Can be called again to pick up changed environment values (tests do).
        """
        cls._init_metrics()

        # Discord Configuration
        cls.DISCORD_TOKEN = cls._safe_str("DISCORD_TOKEN", "", required=True)
        cls.COMMAND_PREFIX = cls._safe_str("COMMAND_PREFIX", "!")
        cls.CLAIM_ROLE = cls._safe_str("CLAIM_ROLE", "") or None

        # Environment Configuration
        cls.ENVIRONMENT = cls._safe_str("ENVIRONMENT", "development")
        cls.DEBUG = bool(cls._safe_bool("DEBUG", False))
        cls.LOG_LEVEL = cls._safe_str("LOG_LEVEL", "INFO")
        cls.LOG_JSON = cls._safe_bool("LOG_JSON", None)

        # Directories
        cls.DATA_DIR = cls._safe_path(
            "CLAIMS_DATA_DIR", cls.PROJECT_ROOT / "data" / "ClaimPlayerRewards"
        )
        cls.CONFIG_DIR = cls._safe_path("CLAIMS_CONFIG_DIR", cls.PROJECT_ROOT / "config")

        # Persistence
        raw_policy = cls._safe_str("PERSISTENCE_POLICY", PersistencePolicy.FAIL_OPEN.value)
        cls.PERSISTENCE_POLICY = PersistencePolicy.from_string(raw_policy)
        if cls.PERSISTENCE_POLICY.value != raw_policy.strip().lower() and cls._metrics:
            cls._metrics.record_validation_error(
                "PERSISTENCE_POLICY", f"unknown policy '{raw_policy}'"
            )

        if cls._metrics:
            cls._metrics.last_reload = datetime.now(timezone.utc).isoformat()

    @classmethod
    def validate(cls) -> None:
        """
        Validate critical configuration values on startup.

        Raises
        ------
        ValueError:
            If required config values are missing in production.
        """
        if cls._validated:
            return

        logger = logging.getLogger(__name__)
        cls._init_metrics()

        try:
            cls.load()

            if not cls.DISCORD_TOKEN and cls.is_production():
                raise ValueError("DISCORD_TOKEN environment variable is required")

            valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
            if cls.LOG_LEVEL.upper() not in valid_log_levels:
                logger.warning(f"Invalid LOG_LEVEL '{cls.LOG_LEVEL}', using INFO")
                cls.LOG_LEVEL = "INFO"

            cls.LOGS_DIR.mkdir(parents=True, exist_ok=True)
            cls.DATA_DIR.mkdir(parents=True, exist_ok=True)
            cls.CONFIG_DIR.mkdir(parents=True, exist_ok=True)

            if cls.is_production() and cls.DEBUG:
                logger.warning("DEBUG mode enabled in production!")

            cls._validated = True

            if cls._metrics:
                logger.info(f"Configuration loaded: {cls._metrics.get_summary()}")
                if cls._metrics.validation_errors:
                    logger.warning(
                        f"Configuration warnings: {cls._metrics.validation_errors}"
                    )

        except Exception as e:
            logger.warning(f"Config validation warning: {e}")
            if cls.is_production():
                logger.error("Configuration validation failed in production!")
                raise

    # =========================================================================
    # Paths
    # =========================================================================

    @classmethod
    def allocations_path(cls) -> Path:
        return cls.DATA_DIR / cls.ALLOCATIONS_FILENAME

    @classmethod
    def ledger_path(cls) -> Path:
        return cls.DATA_DIR / cls.LEDGER_FILENAME

    @classmethod
    def reward_config_path(cls) -> Path:
        return cls.CONFIG_DIR / cls.REWARD_CONFIG_FILENAME

    # =========================================================================
    # Environment Checks
    # =========================================================================

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"

    @classmethod
    def is_testing(cls) -> bool:
        """Check if running in testing environment."""
        return cls.ENVIRONMENT.lower() == "testing"

    # =========================================================================
    # Metrics & Summary
    # =========================================================================

    @classmethod
    def get_metrics(cls) -> Optional[_ConfigLoadMetrics]:
        """Get configuration loading metrics."""
        return cls._metrics

    @classmethod
    def get_config_summary(cls) -> Dict[str, Any]:
        """Get non-sensitive configuration summary for debugging."""
        return {
            "environment": cls.ENVIRONMENT,
            "debug": cls.DEBUG,
            "log_level": cls.LOG_LEVEL,
            "data_dir": str(cls.DATA_DIR),
            "config_dir": str(cls.CONFIG_DIR),
            "persistence_policy": cls.PERSISTENCE_POLICY.value,
            "claim_role": cls.CLAIM_ROLE,
            "bot_version": cls.BOT_VERSION,
            "discord_token_set": bool(cls.DISCORD_TOKEN),
        }
