"""Tests for runtime initialization module."""

import logging
import os
from unittest.mock import patch

import pytest

from multi_agent_orch.config import get_config, is_config_initialized, reset_config
from multi_agent_orch.runtime import init_runtime, is_initialized, reset_runtime


@pytest.fixture(autouse=True)
def reset_state():
    """Reset runtime and config state before each test."""
    reset_runtime()
    reset_config()
    yield
    reset_runtime()
    reset_config()


def test_init_runtime_loads_dotenv():
    with patch("multi_agent_orch.runtime.load_dotenv") as mock_load:
        init_runtime()
        mock_load.assert_called_once()
        assert is_initialized()
        assert is_config_initialized()


def test_init_runtime_idempotent():
    with patch("multi_agent_orch.runtime.load_dotenv") as mock_load:
        init_runtime()
        init_runtime()
        init_runtime()
        mock_load.assert_called_once()
        assert is_initialized()


def test_init_runtime_with_log_level():
    with (
        patch("multi_agent_orch.runtime.load_dotenv"),
        patch("multi_agent_orch.runtime.logging.basicConfig") as mock_config,
    ):
        init_runtime(log_level="DEBUG")
        mock_config.assert_called_once_with(level=logging.DEBUG)


def test_init_runtime_log_level_from_config():
    with (
        patch("multi_agent_orch.runtime.load_dotenv"),
        patch.dict(os.environ, {"ORCH_LOG_LEVEL": "warning"}),
        patch("multi_agent_orch.runtime.logging.basicConfig") as mock_config,
    ):
        init_runtime()
        mock_config.assert_called_once_with(level=logging.WARNING)
        assert get_config().log_level == "warning"


def test_init_runtime_without_log_level():
    with (
        patch("multi_agent_orch.runtime.load_dotenv"),
        patch("multi_agent_orch.runtime.logging.basicConfig") as mock_config,
    ):
        init_runtime(log_level=None)
        mock_config.assert_not_called()


def test_init_runtime_invalid_log_level_leaves_uninitialized():
    with patch("multi_agent_orch.runtime.load_dotenv"):
        with pytest.raises(ValueError, match="Invalid log level"):
            init_runtime(log_level="INVALID")
        assert not is_initialized()
        assert not is_config_initialized()


def test_init_runtime_invalid_then_valid():
    with patch("multi_agent_orch.runtime.load_dotenv"):
        with pytest.raises(ValueError, match="Invalid log level"):
            init_runtime(log_level="INVALID")
        assert not is_initialized()

        with patch("multi_agent_orch.runtime.logging.basicConfig"):
            init_runtime(log_level="DEBUG")
        assert is_initialized()


def test_init_runtime_thread_safety():
    """init_runtime() loads .env once despite concurrent calls."""
    import threading

    call_count = [0]

    def counting_load_dotenv(*args, **kwargs):
        call_count[0] += 1
        return True

    with patch("multi_agent_orch.runtime.load_dotenv", side_effect=counting_load_dotenv):
        threads = [threading.Thread(target=init_runtime) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    assert call_count[0] == 1
    assert is_initialized()
