"""Application configuration repository.

Centralizes access to configuration values loaded from environment variables.
Library code reads configuration only through get_config() so that callers
who never initialize it are unaffected.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AppConfig:
    """Application configuration container.

    Values are typically loaded from environment variables during
    init_runtime().
    """

    # OpenAI settings
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: Optional[str] = None

    # Run defaults (None = unbounded)
    max_turns: Optional[int] = None
    timeout_seconds: Optional[float] = None

    log_level: Optional[str] = None

    def validate(self) -> list[str]:
        """Validate configuration and return list of warnings.

        Returns:
            list[str]: List of warning messages for missing or invalid configuration.
        """
        issues = []

        if not self.openai_api_key and not self.openai_base_url:
            issues.append("OPENAI_API_KEY not set - OpenAI provider will be unavailable")

        if self.max_turns is not None and self.max_turns < 0:
            issues.append(f"Invalid ORCH_MAX_TURNS: {self.max_turns}")

        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            issues.append(f"Invalid ORCH_TIMEOUT_SECONDS: {self.timeout_seconds}")

        if self.log_level is not None and self.log_level.upper() not in LOG_LEVELS:
            issues.append(f"Invalid ORCH_LOG_LEVEL: {self.log_level}")

        return issues


# Global configuration instance (set once at startup)
_config: Optional[AppConfig] = None


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables.

    Returns:
        AppConfig: Configuration instance populated from environment variables.
    """

    def _get_env_float(key: str) -> Optional[float]:
        """Safely parse float from environment variable; None if unset or invalid."""
        val_str = os.getenv(key)
        if val_str is None or val_str == "":
            return None
        try:
            return float(val_str)
        except (ValueError, TypeError):
            logger.warning(f"Invalid value for {key}: '{val_str}'. Using default value: None.")
            return None

    def _get_env_int(key: str) -> Optional[int]:
        """Safely parse int from environment variable; None if unset or invalid."""
        val_str = os.getenv(key)
        if val_str is None or val_str == "":
            return None
        try:
            return int(val_str)
        except (ValueError, TypeError):
            logger.warning(f"Invalid value for {key}: '{val_str}'. Using default value: None.")
            return None

    config = AppConfig(
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
        max_turns=_get_env_int("ORCH_MAX_TURNS"),
        timeout_seconds=_get_env_float("ORCH_TIMEOUT_SECONDS"),
        log_level=os.getenv("ORCH_LOG_LEVEL") or None,
    )

    # Log validation issues
    issues = config.validate()
    for issue in issues:
        logger.warning(issue)

    return config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance.

    Raises:
        RuntimeError: If configuration has already been set.
    """
    global _config
    if _config is not None:
        raise RuntimeError("Configuration already set. Call reset_config() first.")
    _config = config
    logger.debug("Configuration initialized")


def get_config() -> AppConfig:
    """Get the global configuration instance.

    Raises:
        RuntimeError: If configuration has not been initialized.
                     Call init_runtime() first.
    """
    if _config is None:
        raise RuntimeError(
            "Configuration not initialized. Call init_runtime() at application startup."
        )
    return _config


def reset_config() -> None:
    """Reset configuration state.

    This function is intended for testing purposes only.
    """
    global _config
    _config = None


def is_config_initialized() -> bool:
    return _config is not None
