"""OpenAI chat completions provider."""

import logging
from typing import Any, Dict, List, Optional

import openai

from ..config import get_config, is_config_initialized
from ..errors import ProviderError
from .base import LLMProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
LOCAL_SERVER_API_KEY = "not-needed"


def convert_tool_definition(tool: Dict[str, Any]) -> Dict[str, Any]:
    """Lowercase parameter type tags so the schema is valid JSON Schema.

    Raises:
        ValueError: If the tool is not a function definition
    """
    if tool.get("type") != "function" or not isinstance(tool.get("function"), dict):
        logger.error("Invalid function definition: %s", tool)
        raise ValueError("Invalid function definition")

    function = dict(tool["function"])
    parameters = function.get("parameters")
    if isinstance(parameters, dict) and isinstance(parameters.get("properties"), dict):
        parameters = dict(parameters)
        parameters["properties"] = {
            key: {
                **value,
                "type": value["type"].lower()
                if isinstance(value.get("type"), str)
                else value.get("type"),
            }
            for key, value in parameters["properties"].items()
        }
        function["parameters"] = parameters

    return {"type": "function", "function": function}


def format_messages(messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert internal messages to the OpenAI request format.

    Bookkeeping fields (``sender``, ``tool_name``) are dropped.

    Raises:
        ValueError: If a message has an unsupported role
    """
    formatted = []
    for message in messages:
        role = message.get("role")
        if role in ("system", "user"):
            formatted.append({"role": role, "content": message.get("content", "")})
        elif role == "assistant":
            entry: Dict[str, Any] = {"role": "assistant"}
            tool_calls = message.get("tool_calls")
            if tool_calls:
                entry["tool_calls"] = [
                    {
                        "id": tc.get("id"),
                        "type": "function",
                        "function": {
                            "name": tc["function"]["name"],
                            "arguments": tc["function"].get("arguments") or "{}",
                        },
                    }
                    for tc in tool_calls
                ]
            if message.get("content"):
                entry["content"] = message["content"]
            formatted.append(entry)
        elif role == "tool":
            formatted.append(
                {
                    "role": "tool",
                    "content": message.get("content", ""),
                    "tool_call_id": message.get("tool_call_id"),
                }
            )
        else:
            logger.error("Unsupported message role: %s", role)
            raise ValueError(f"Unsupported message role: {role}")
    return formatted


def parse_openai_tool_call(tool_call: Any) -> Dict[str, Any]:
    """Convert an SDK tool call object to the internal dict format."""
    function = tool_call.function
    return {
        "id": tool_call.id,
        "type": getattr(tool_call, "type", None) or "function",
        "function": {"name": function.name, "arguments": function.arguments or "{}"},
    }


class OpenAIProvider(LLMProvider):
    """Completion provider backed by the OpenAI chat completions API.

    ``base_url`` allows pointing at any OpenAI-compatible server. Local
    servers such as Ollama need no key; a placeholder is sent instead.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        config = get_config() if is_config_initialized() else None
        self.api_key = api_key or (config.openai_api_key if config else None)
        self.model = model or (config.openai_model if config else DEFAULT_MODEL)
        self.base_url = base_url or (config.openai_base_url if config else None)
        self._client = None
        if self.api_key or self.base_url:
            self._client = openai.AsyncOpenAI(
                api_key=self.api_key or LOCAL_SERVER_API_KEY, base_url=self.base_url
            )

    async def generate_completion(self, messages, tools=None, tool_choice=None):
        if self._client is None:
            raise ValueError("OPENAI_API_KEY is not set and no base URL is configured")

        api_params: Dict[str, Any] = {
            "model": self.model,
            "messages": format_messages(messages),
        }
        if tools:
            api_params["tools"] = [convert_tool_definition(tool) for tool in tools]
        if tool_choice:
            api_params["tool_choice"] = tool_choice

        logger.debug(
            "Sending completion request: model=%s, messages=%d, tools=%d",
            self.model,
            len(messages),
            len(tools or []),
        )
        response = await self._client.chat.completions.create(**api_params)

        if not response.choices:
            logger.warning("No completion choices returned from OpenAI")
            raise ProviderError("No completion choices returned from OpenAI")

        message = response.choices[0].message
        completion: Dict[str, Any] = {
            "role": message.role or "assistant",
            "content": message.content or "",
        }
        if message.tool_calls:
            completion["tool_calls"] = [parse_openai_tool_call(tc) for tc in message.tool_calls]
        return completion
