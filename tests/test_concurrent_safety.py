"""Tests for concurrent runs sharing the same Agent

Each run deep-copies its inputs, so interleaved runs against one agent must
not see each other's history or context variables.
"""

import asyncio

import pytest

from multi_agent_orch.agent import Agent
from multi_agent_orch.functions import CONTEXT_VARIABLES_TYPE, FunctionParam, agent_function
from multi_agent_orch.orchestrator import Orchestrator
from multi_agent_orch.result import Result
from tests.helpers import make_tool_call, text_reply, tool_call_reply


class InterleavingProvider:
    """Yields to the event loop on every call so concurrent runs interleave."""

    async def generate_completion(self, messages, tools=None, tool_choice=None):
        await asyncio.sleep(0.01)
        if messages[-1]["role"] == "tool":
            return text_reply(f"stored {messages[-1]['content']}")
        return tool_call_reply(
            make_tool_call("call_1", "remember", {"value": messages[-1]["content"]})
        )


@agent_function(
    name="remember",
    params=[
        FunctionParam("value", "string"),
        FunctionParam("context_variables", CONTEXT_VARIABLES_TYPE),
    ],
)
async def remember(value, context_variables):
    await asyncio.sleep(0.01)
    seen = context_variables.get("seen", [])
    return Result(value=value, context_variables={"seen": seen + [value]})


@pytest.mark.asyncio
async def test_concurrent_runs_do_not_share_state():
    agent = Agent(name="Memory", functions=[remember], provider=InterleavingProvider())
    orchestrator = Orchestrator()
    shared_context = {"seen": []}

    runs = [
        orchestrator.run(agent, [{"role": "user", "content": f"item-{i}"}], shared_context)
        for i in range(5)
    ]
    responses = await asyncio.gather(*runs)

    for i, response in enumerate(responses):
        assert response.context_variables == {"seen": [f"item-{i}"]}
        assert response.messages[-1]["content"] == f"stored item-{i}"
        assert len(response.messages) == 4

    assert shared_context == {"seen": []}
