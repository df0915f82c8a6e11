"""Sequential execution of tool-call requests.

Requests are executed one at a time, in the order received, so that context
variable contributions merge deterministically and tool replies mirror the
request order.

Recovered errors (reported to the model as ``tool`` messages):
- the requested tool is not registered
- the arguments cannot be decoded or bound
- the tool raises or times out

Fatal errors (propagated):
- ``ResultCastError`` when the return value cannot be rendered as text
- ``ValueError`` when a structured result carries an invalid extra message
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .agent import Agent, ContextVariables
from .functions import FunctionMetadata
from .messages import make_tool_message, parse_tool_arguments, tool_call_name, validate_message
from .result import normalize_function_result

logger = logging.getLogger(__name__)


class ToolTimeout(Exception):
    """Raised when a tool invocation exceeds its timeout."""

    def __init__(self, timeout: float):
        super().__init__(f"timed out after {timeout} seconds")
        self.timeout = timeout


@dataclass
class ToolCallOutcome:
    """Accumulated effect of one batch of tool calls.

    Attributes:
        messages: Tool replies (and extra result messages) in request order
        agent: Agent named by the last handoff result, if any
        context_variables: Running context variables after all merges
    """

    messages: List[Dict[str, Any]] = field(default_factory=list)
    agent: Optional[Agent] = None
    context_variables: ContextVariables = field(default_factory=dict)


def bind_arguments(
    metadata: FunctionMetadata, arguments: Dict[str, Any], context_variables: ContextVariables
) -> Tuple[List[Any], Dict[str, Any]]:
    """Map decoded arguments onto the declared parameters.

    Parameters are bound positionally in declared order. Once an optional
    parameter is omitted, later ones are passed by keyword so the function
    default applies.

    Raises:
        TypeError: If a required argument is missing
    """
    args: List[Any] = []
    kwargs: Dict[str, Any] = {}
    positional = True
    declared = set()

    for param in metadata.params:
        declared.add(param.name)
        if param.is_context:
            value = dict(context_variables)
        elif param.name in arguments:
            value = arguments[param.name]
        elif param.optional:
            positional = False
            continue
        else:
            raise TypeError(f"{metadata.name}() missing required argument: '{param.name}'")

        if positional:
            args.append(value)
        else:
            kwargs[param.name] = value

    extra = [key for key in arguments if key not in declared]
    if extra:
        logger.debug("Ignoring undeclared arguments for %s: %s", metadata.name, extra)

    return args, kwargs


async def invoke_function(
    metadata: FunctionMetadata,
    args: List[Any],
    kwargs: Dict[str, Any],
    timeout: Optional[float] = None,
) -> Any:
    """Call the function, awaiting the result if it is awaitable.

    Raises:
        ToolTimeout: If the call does not finish within timeout. A
            TimeoutError raised by the function itself propagates unchanged.
    """

    async def _call():
        value = metadata.func(*args, **kwargs)
        if inspect.isawaitable(value):
            value = await value
        return value

    if timeout is None:
        return await _call()

    task = asyncio.ensure_future(_call())
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout)
    except asyncio.CancelledError:
        task.cancel()
        raise
    if not done:
        task.cancel()
        raise ToolTimeout(timeout)
    return task.result()


async def execute_tool_calls(
    tool_calls: List[Dict[str, Any]],
    functions: List[FunctionMetadata],
    context_variables: ContextVariables,
    log: Optional[logging.Logger] = None,
    timeout: Optional[float] = None,
) -> ToolCallOutcome:
    """Execute tool-call requests against the registered functions.

    Args:
        tool_calls: Requests from the assistant message, in order
        functions: Metadata of the active agent's functions
        context_variables: Current context variables (not mutated)
        log: Logger to report to (defaults to this module's logger)
        timeout: Optional per-invocation timeout in seconds

    Returns:
        ToolCallOutcome with the reply messages, the last handoff agent, and
        the merged context variables

    Raises:
        ResultCastError: If a return value cannot be rendered as text
    """
    log = log or logger
    function_map = {f.name: f for f in functions}
    outcome = ToolCallOutcome(context_variables=dict(context_variables))

    for tool_call in tool_calls:
        name = tool_call_name(tool_call)
        tool_call_id = tool_call.get("id")

        metadata = function_map.get(name)
        if metadata is None:
            log.warning("Tool not found: %s", name)
            outcome.messages.append(
                make_tool_message(tool_call_id, name, f"Error: Tool {name} not found.")
            )
            continue

        try:
            arguments = parse_tool_arguments((tool_call.get("function") or {}).get("arguments"))
            args, kwargs = bind_arguments(metadata, arguments, outcome.context_variables)
            log.debug("Executing function %s with arguments %s", name, arguments)
            raw = await invoke_function(metadata, args, kwargs, timeout=timeout)
        except ToolTimeout as e:
            log.warning("Function %s timed out after %s seconds", name, e.timeout)
            outcome.messages.append(
                make_tool_message(tool_call_id, name, f"Error executing function {name}: {e}")
            )
            continue
        except Exception as e:
            log.warning("Error executing function %s: %s", name, e)
            outcome.messages.append(
                make_tool_message(tool_call_id, name, f"Error executing function {name}: {e}")
            )
            continue

        result = normalize_function_result(raw)
        log.info("Function %s executed successfully (%s)", name, result.kind.value)

        outcome.messages.append(make_tool_message(tool_call_id, name, result.value or ""))

        # Last handoff in the batch wins.
        if result.agent is not None:
            outcome.agent = result.agent

        if result.context_variables:
            outcome.context_variables.update(result.context_variables)

        for message in result.messages:
            validate_message(message)
            outcome.messages.append(message)

    return outcome
