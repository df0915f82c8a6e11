"""Normalization of tool return values into a Result envelope.

A tool may return:

- a ``Result`` (or any object/dict exposing a string ``value``): structured
  result, passed through
- an ``Agent``: handoff to that agent
- anything else: rendered with ``str()``
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .agent import Agent
from .errors import ResultCastError


class ResultKind(str, Enum):
    TEXT = "text"
    HANDOFF = "handoff"
    STRUCTURED = "structured"


@dataclass
class Result:
    """Canonical envelope for a tool's return value.

    Attributes:
        value: Text sent back to the model as the tool reply
        agent: Agent to hand the conversation over to (optional)
        context_variables: Entries merged into the run's context variables
        messages: Extra messages appended after the tool reply
    """

    value: str = ""
    agent: Optional[Agent] = None
    context_variables: Dict[str, Any] = field(default_factory=dict)
    messages: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def kind(self) -> ResultKind:
        if self.agent is not None:
            return ResultKind.HANDOFF
        if self.context_variables or self.messages:
            return ResultKind.STRUCTURED
        return ResultKind.TEXT


RESULT_ATTRIBUTES = ("agent", "context_variables", "messages")


def _checked_agent(agent: Any) -> Optional[Agent]:
    if agent is not None and not isinstance(agent, Agent):
        raise ResultCastError(
            f"Result agent must be an Agent, got {type(agent).__name__}. "
            "Return the Agent object itself to hand off."
        )
    return agent


def _from_result_like(raw: Any) -> Optional[Result]:
    """Coerce a dict with a string ``value``, or an object shaped like a Result.

    Objects need a string ``value`` plus at least one of ``agent``,
    ``context_variables`` or ``messages``; anything else is rendered as text.
    """
    if isinstance(raw, Mapping):
        if not isinstance(raw.get("value"), str):
            return None
        return Result(
            value=raw["value"],
            agent=_checked_agent(raw.get("agent")),
            context_variables=dict(raw.get("context_variables") or {}),
            messages=list(raw.get("messages") or []),
        )

    if isinstance(getattr(raw, "value", None), str) and any(
        hasattr(raw, attr) for attr in RESULT_ATTRIBUTES
    ):
        return Result(
            value=raw.value,
            agent=_checked_agent(getattr(raw, "agent", None)),
            context_variables=dict(getattr(raw, "context_variables", None) or {}),
            messages=list(getattr(raw, "messages", None) or []),
        )
    return None


def normalize_function_result(raw: Any) -> Result:
    """Classify a raw tool return value into a ``Result``.

    Raises:
        ResultCastError: If the value cannot be rendered as text
    """
    if isinstance(raw, Result):
        return raw

    result = _from_result_like(raw)
    if result is not None:
        return result

    if isinstance(raw, Agent):
        return Result(value=json.dumps({"assistant": raw.name}), agent=raw)

    try:
        value = str(raw)
    except Exception as e:
        raise ResultCastError(
            f"Failed to cast response to string: {type(raw).__name__}. "
            "Make sure agent functions return a string, Agent, or Result object."
        ) from e
    return Result(value=value)
