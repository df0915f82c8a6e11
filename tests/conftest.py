import pytest


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch):
    """Reset global configuration and clear ORCH_* overrides around every test."""
    from multi_agent_orch.config import reset_config

    for key in ("ORCH_MAX_TURNS", "ORCH_TIMEOUT_SECONDS", "ORCH_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")

    reset_config()
    yield
    reset_config()
