"""Shared builders for provider replies and tool calls."""

import json
from unittest.mock import AsyncMock, MagicMock


def make_tool_call(call_id, name, arguments=None):
    """Build an OpenAI-style tool-call request."""
    return {
        "id": call_id,
        "type": "function",
        "function": {"name": name, "arguments": json.dumps(arguments or {})},
    }


def make_provider(*completions):
    """Mock provider returning the given completions in order."""
    provider = MagicMock()
    provider.generate_completion = AsyncMock(side_effect=list(completions))
    return provider


def tool_call_reply(*tool_calls, content=""):
    """Assistant completion requesting the given tool calls."""
    return {"role": "assistant", "content": content, "tool_calls": list(tool_calls)}


def text_reply(content):
    """Assistant completion with plain text and no tool calls."""
    return {"role": "assistant", "content": content}
