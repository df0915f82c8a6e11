"""Turn-based orchestration loop.

Each turn the active agent's instructions and tools are sent to its completion
provider. The reply is appended to the history; if it requests tool calls they
are executed, their replies appended, and the loop continues. The loop ends
when:
- the reply carries no tool calls
- tool execution is disabled
- max_turns tool-execution cycles have been performed

A tool returning another Agent hands control to that agent from the next turn
on. Provider failures and broken tool results abort the run.
"""

import asyncio
import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .agent import Agent, ContextVariables
from .config import get_config, is_config_initialized
from .errors import ProviderError
from .tool_executor import execute_tool_calls

logger = logging.getLogger(__name__)


class RunPhase(str, Enum):
    RUNNING = "running"
    AWAITING_COMPLETION = "awaiting_completion"
    EXECUTING_TOOLS = "executing_tools"
    TERMINATED = "terminated"


@dataclass
class RunState:
    """Mutable state owned by a single run() invocation."""

    agent: Agent
    messages: List[Dict[str, Any]]
    context_variables: ContextVariables
    turns: int = 0
    phase: RunPhase = RunPhase.RUNNING


@dataclass(frozen=True)
class Response:
    """Result of Orchestrator.run().

    Attributes:
        agent: Active agent when the run ended
        messages: Full history (input messages plus everything added)
        context_variables: Final context variables
        turns: Number of tool-execution cycles performed
    """

    agent: Agent
    messages: List[Dict[str, Any]] = field(default_factory=list)
    context_variables: ContextVariables = field(default_factory=dict)
    turns: int = 0


def build_assistant_message(completion: Optional[Dict[str, Any]], agent: Agent) -> Dict[str, Any]:
    """Normalize a provider reply into an assistant message tagged with the agent."""
    if not completion:
        return {"role": "assistant", "content": "No completion provided", "sender": agent.name}

    message: Dict[str, Any] = {
        "role": "assistant",
        "content": completion.get("content") or "",
        "sender": agent.name,
        "tool_calls": [],
    }
    for tool_call in completion.get("tool_calls") or []:
        function = tool_call.get("function") or {}
        message["tool_calls"].append(
            {
                "id": tool_call.get("id"),
                "type": tool_call.get("type") or "function",
                "function": {
                    "name": function.get("name"),
                    "arguments": function.get("arguments"),
                },
            }
        )
    return message


class Orchestrator:
    """Drives a conversation between agents, their tools and a provider.

    Args:
        default_provider: Provider for agents that have none. If omitted, an
            OpenAIProvider is created on first use.
        logger: Logger to report to (defaults to this module's logger)

    The orchestrator holds no per-run state, so concurrent runs are safe as
    long as agents are not modified while in use.
    """

    def __init__(
        self,
        default_provider: Optional[Any] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.default_provider = default_provider
        self.logger = logger or logging.getLogger(__name__)

    def _get_provider(self, agent: Agent):
        if agent.provider is not None:
            return agent.provider
        if self.default_provider is None:
            from .providers.openai import OpenAIProvider

            self.default_provider = OpenAIProvider()
        return self.default_provider

    async def get_chat_completion(
        self,
        agent: Agent,
        messages: List[Dict[str, Any]],
        context_variables: ContextVariables,
        timeout: Optional[float] = None,
    ) -> Optional[Dict[str, Any]]:
        """Ask the agent's provider for the next message.

        The resolved instructions are prepended as a system message for this
        request only.
        """
        tools = [f.to_tool_schema() for f in agent.get_function_metadata()]
        instructions = agent.get_instructions(context_variables)
        request_messages = [{"role": "system", "content": instructions}, *messages]
        tool_choice = agent.tool_choice.value if agent.tool_choice is not None else None

        provider = self._get_provider(agent)
        self.logger.debug(
            "Requesting completion: agent=%s, messages=%d, tools=%d, tool_choice=%s",
            agent.name,
            len(request_messages),
            len(tools),
            tool_choice,
        )

        call = provider.generate_completion(
            request_messages, tools=tools or None, tool_choice=tool_choice
        )
        if timeout is None:
            completion = await call
        else:
            completion = await asyncio.wait_for(call, timeout=timeout)

        if completion is not None and not isinstance(completion, dict):
            raise ProviderError(
                f"Provider returned {type(completion).__name__}, expected a message dict"
            )
        return completion

    def _transition(self, state: RunState, phase: RunPhase) -> None:
        self.logger.debug("Run phase %s -> %s", state.phase.value, phase.value)
        state.phase = phase

    async def run(
        self,
        agent: Agent,
        messages: List[Dict[str, Any]],
        context_variables: Optional[ContextVariables] = None,
        max_turns: Optional[int] = None,
        execute_tools: bool = True,
        timeout: Optional[float] = None,
    ) -> Response:
        """Run the conversation until the model stops requesting tools.

        Args:
            agent: Initial active agent
            messages: Prior conversation (read-only, will NOT be mutated)
            context_variables: Initial context variables (read-only, will NOT
                be mutated)
            max_turns: Maximum number of tool-execution cycles (default:
                unbounded)
            execute_tools: If False, stop at the first reply even when it
                requests tools
            timeout: Optional per-call timeout in seconds for provider calls
                and tool invocations

        Returns:
            Response with the final agent, full history and context variables

        Raises:
            ValueError: If agent is None
            ResultCastError: If a tool result cannot be rendered as text
            TimeoutError: If a provider call exceeds timeout
            Exception: Any error raised by the provider
        """
        if agent is None:
            raise ValueError("agent is required")

        if is_config_initialized():
            config = get_config()
            if max_turns is None:
                max_turns = config.max_turns
            if timeout is None:
                timeout = config.timeout_seconds

        state = RunState(
            agent=agent,
            messages=copy.deepcopy(list(messages)),
            context_variables=copy.deepcopy(dict(context_variables or {})),
        )

        self.logger.info(
            "Starting run: agent=%s, messages=%d, context_keys=%s, max_turns=%s, "
            "execute_tools=%s",
            agent.name,
            len(state.messages),
            list(state.context_variables),
            max_turns,
            execute_tools,
        )

        try:
            while max_turns is None or state.turns < max_turns:
                self.logger.debug("Starting turn %d with agent %s", state.turns, state.agent.name)

                self._transition(state, RunPhase.AWAITING_COMPLETION)
                completion = await self.get_chat_completion(
                    state.agent, state.messages, state.context_variables, timeout=timeout
                )
                message = build_assistant_message(completion, state.agent)
                state.messages.append(message)

                tool_calls = message.get("tool_calls") or []
                self.logger.debug(
                    "Received reply from %s: tool_calls=%d", state.agent.name, len(tool_calls)
                )

                if not tool_calls or not execute_tools:
                    break

                self._transition(state, RunPhase.EXECUTING_TOOLS)
                outcome = await execute_tool_calls(
                    tool_calls,
                    state.agent.get_function_metadata(),
                    state.context_variables,
                    log=self.logger,
                    timeout=timeout,
                )

                state.context_variables.update(outcome.context_variables)
                if outcome.agent is not None and outcome.agent is not state.agent:
                    state.agent = outcome.agent
                    self.logger.info("Switching active agent to %s", state.agent.name)

                state.messages.extend(outcome.messages)
                state.turns += 1
                self._transition(state, RunPhase.RUNNING)
        except Exception as e:
            self.logger.exception("Error during run at turn %d: %s", state.turns, e)
            raise
        finally:
            self._transition(state, RunPhase.TERMINATED)

        self.logger.info(
            "Run completed: turns=%d, final_agent=%s", state.turns, state.agent.name
        )
        return Response(
            agent=state.agent,
            messages=state.messages,
            context_variables=state.context_variables,
            turns=state.turns,
        )

    def run_sync(self, *args, **kwargs) -> Response:
        """Synchronous wrapper for run().

        Raises:
            RuntimeError: If called from within an async context
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass  # no running loop
        else:
            raise RuntimeError(
                "Orchestrator.run_sync() cannot be called from an async context. "
                "Use 'await Orchestrator.run()' instead."
            )
        return asyncio.run(self.run(*args, **kwargs))
