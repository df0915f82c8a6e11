"""Base classes for completion providers

This module defines the interface the orchestrator calls to obtain the next
assistant message.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class LLMProvider(ABC):
    """Abstract base class for completion providers"""

    @abstractmethod
    async def generate_completion(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        tool_choice: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Request the next assistant message.

        Args:
            messages: Chat messages, starting with the system instructions.
                      MUST NOT be mutated by the implementation.
            tools: Optional tool schemas ({"type": "function", "function": {...}})
            tool_choice: Optional tool-selection policy ("none", "auto", "required")

        Returns:
            dict: {"role": str, "content": str, "tool_calls": [...]} where each
            tool call is {"id": str, "type": "function",
            "function": {"name": str, "arguments": str}}
        """
        pass
