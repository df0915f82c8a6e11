"""Helpers for OpenAI-style chat messages.

Messages are plain dicts::

    {"role": "user", "content": "hello"}
    {"role": "assistant", "content": "", "sender": "Triage",
     "tool_calls": [{"id": "call_1", "type": "function",
                     "function": {"name": "lookup", "arguments": "{}"}}]}
    {"role": "tool", "content": "42", "tool_call_id": "call_1", "tool_name": "lookup"}
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

ROLES = {"user", "assistant", "system", "tool"}
logger = logging.getLogger(__name__)


def validate_message(message: Dict[str, Any]) -> None:
    """Validate a single message for structural correctness.

    Raises:
        ValueError: If the message structure is invalid
    """
    if not isinstance(message, dict):
        raise ValueError(f"Message must be dict, got {type(message).__name__}")

    role = message.get("role")
    if role not in ROLES:
        raise ValueError(f"Invalid role: '{role}'. Must be one of {sorted(ROLES)}")

    if message.get("content") is None:
        raise ValueError("Message must have 'content' field")

    if role == "tool" and not message.get("tool_call_id"):
        raise ValueError("role='tool' message must have 'tool_call_id' field")


def validate_tool_linkage(messages: List[Dict[str, Any]]) -> None:
    """Check that every tool reply answers a preceding assistant request.

    Raises:
        ValueError: If a tool message's ``tool_call_id`` was never requested
    """
    requested = set()
    for index, message in enumerate(messages):
        role = message.get("role")
        if role == "assistant":
            for tool_call in message.get("tool_calls") or []:
                requested.add(tool_call.get("id"))
        elif role == "tool":
            tool_call_id = message.get("tool_call_id")
            if tool_call_id not in requested:
                raise ValueError(
                    f"Tool message at index {index} references unknown "
                    f"tool_call_id '{tool_call_id}'"
                )


def make_tool_message(tool_call_id: Optional[str], tool_name: str, content: str) -> Dict[str, Any]:
    return {
        "role": "tool",
        "content": content,
        "tool_call_id": tool_call_id,
        "tool_name": tool_name,
    }


def parse_tool_arguments(payload: Any) -> Dict[str, Any]:
    """Decode a tool-call argument payload into a dict.

    Args:
        payload: JSON string, already-decoded mapping, or empty value

    Returns:
        Dict of argument name to value

    Raises:
        ValueError: If the payload is not valid JSON or not a JSON object
    """
    if payload is None or payload == "":
        return {}
    if isinstance(payload, Mapping):
        return dict(payload)

    try:
        arguments = json.loads(payload)
    except (TypeError, json.JSONDecodeError) as e:
        raise ValueError(f"Invalid tool arguments: {e}") from e

    if arguments is None:
        return {}
    if not isinstance(arguments, dict):
        raise ValueError(f"Tool arguments must be a JSON object, got {type(arguments).__name__}")
    return arguments


def tool_call_name(tool_call: Dict[str, Any]) -> Optional[str]:
    return (tool_call.get("function") or {}).get("name")
