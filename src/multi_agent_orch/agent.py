"""Agent configuration."""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from .errors import InvalidFunctionError
from .functions import FunctionMetadata, resolve_function_metadata

logger = logging.getLogger(__name__)

ContextVariables = Dict[str, Any]
Instructions = Union[str, Callable[[ContextVariables], str]]


class ToolChoice(str, Enum):
    """Tool-selection policy forwarded to the completion provider."""

    NONE = "none"
    AUTO = "auto"
    REQUIRED = "required"


class Agent:
    """A named bundle of instructions, tools and provider preference.

    Agents are configured up front and only read during a run. A tool may
    return a different Agent to hand the conversation over to it.

    Attributes:
        name: Display name, also recorded as ``sender`` on assistant messages
        instructions: System prompt, or a function of the context variables
            returning one
        functions: Callable handles carrying ``FunctionMetadata``
        provider: Completion provider used for this agent (optional)
        tool_choice: Tool-selection policy (optional)
    """

    def __init__(
        self,
        name: str,
        instructions: Instructions = "You are a helpful agent.",
        functions: Optional[List[Callable[..., Any]]] = None,
        provider: Optional[Any] = None,
        tool_choice: Optional[Union[ToolChoice, str]] = None,
    ):
        self.name = name
        self.instructions = instructions
        self.functions: List[Callable[..., Any]] = []
        self.provider = provider
        self.tool_choice = ToolChoice(tool_choice) if tool_choice is not None else None
        for func in functions or []:
            self.append_function(func)

    def __repr__(self):
        return f"Agent(name={self.name!r})"

    def get_instructions(self, context_variables: ContextVariables) -> str:
        """Resolve the system prompt for the given context variables."""
        if callable(self.instructions):
            return self.instructions(context_variables)
        return self.instructions

    def get_function_metadata(self) -> List[FunctionMetadata]:
        """Metadata for every registered function, in registration order.

        Handles without metadata are skipped.
        """
        metadata = []
        for func in self.functions:
            resolved = resolve_function_metadata(func)
            if resolved is None:
                logger.debug(
                    "Skipping function without metadata on agent %s: %r", self.name, func
                )
                continue
            metadata.append(resolved)
        return metadata

    def append_function(self, func: Callable[..., Any]) -> None:
        """Register a callable on this agent.

        Not synchronized: call during setup, never while a run using this
        agent is in flight.

        Raises:
            InvalidFunctionError: If ``func`` is not callable
        """
        if not callable(func):
            raise InvalidFunctionError(f"Invalid function: {func!r} is not callable")
        self.functions.append(func)
