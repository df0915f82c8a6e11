"""Runtime initialization for multi-agent-orch applications.

Call init_runtime() once at application startup (the CLI does this) to load
``.env``, install the configuration, and optionally configure logging.
Library use of Orchestrator does not require it.
"""

import logging
import threading
from typing import Optional

from dotenv import load_dotenv

from .config import load_config_from_env, reset_config, set_config

logger = logging.getLogger(__name__)
_initialized = False
_init_lock = threading.Lock()


def init_runtime(log_level: Optional[str] = None) -> None:
    """Initialize runtime environment.

    This function:
    1. Loads environment variables from .env file
    2. Initializes the global configuration repository
    3. Optionally configures logging (argument wins over ORCH_LOG_LEVEL)

    Idempotent and thread-safe (double-checked locking). Once initialized,
    subsequent calls are ignored, including log_level.

    Raises:
        ValueError: If an invalid log_level is provided.
    """
    global _initialized

    if _initialized:
        logger.debug("Runtime already initialized, skipping")
        return

    with _init_lock:
        if _initialized:
            logger.debug("Runtime already initialized (detected in lock), skipping")
            return

        try:
            load_dotenv()

            config = load_config_from_env()
            set_config(config)

            level_name = log_level or config.log_level
            if level_name:
                numeric_level = getattr(logging, level_name.upper(), None)
                if not isinstance(numeric_level, int):
                    raise ValueError(f"Invalid log level: {level_name}")
                logging.basicConfig(level=numeric_level)

            _initialized = True
            logger.debug("Runtime initialized successfully")
        except Exception:
            # Clean up partial initialization on error
            reset_config()
            raise


def is_initialized() -> bool:
    return _initialized


def reset_runtime() -> None:
    """Reset initialization state (for testing purposes only)."""
    global _initialized
    _initialized = False
