"""multi_agent_orch: turn-based orchestration of agents, tools and a completion provider."""

from .agent import Agent, ToolChoice
from .errors import InvalidFunctionError, OrchestrationError, ProviderError, ResultCastError
from .functions import (
    CONTEXT_VARIABLES_TYPE,
    FunctionMetadata,
    FunctionParam,
    FunctionSet,
    agent_function,
    resolve_function_metadata,
)
from .orchestrator import Orchestrator, Response, RunPhase
from .providers import LLMProvider, OpenAIProvider
from .result import Result, ResultKind, normalize_function_result
from .tool_executor import ToolCallOutcome, execute_tool_calls

__all__ = [
    "Agent",
    "ToolChoice",
    "InvalidFunctionError",
    "OrchestrationError",
    "ProviderError",
    "ResultCastError",
    "CONTEXT_VARIABLES_TYPE",
    "FunctionMetadata",
    "FunctionParam",
    "FunctionSet",
    "agent_function",
    "resolve_function_metadata",
    "Orchestrator",
    "Response",
    "RunPhase",
    "LLMProvider",
    "OpenAIProvider",
    "Result",
    "ResultKind",
    "normalize_function_result",
    "ToolCallOutcome",
    "execute_tool_calls",
]
