"""Tests for Agent configuration."""

import pytest

from multi_agent_orch.agent import Agent, ToolChoice
from multi_agent_orch.errors import InvalidFunctionError
from multi_agent_orch.functions import FunctionMetadata, agent_function


@agent_function("Echo the input.", params=["x"])
def echo(x):
    return x


def test_fixed_instructions_are_stable():
    agent = Agent(name="A", instructions="Be brief.")
    context = {"user": "ana"}
    assert agent.get_instructions(context) == "Be brief."
    assert agent.get_instructions(context) == agent.get_instructions(context)


def test_callable_instructions_receive_context():
    agent = Agent(name="A", instructions=lambda ctx: f"Help {ctx['user']}.")
    assert agent.get_instructions({"user": "ana"}) == "Help ana."


def test_default_instructions():
    assert Agent(name="A").get_instructions({}) == "You are a helpful agent."


def test_function_metadata_in_registration_order():
    other = FunctionMetadata(name="other", func=lambda: "ok")
    agent = Agent(name="A", functions=[echo, other])
    assert [f.name for f in agent.get_function_metadata()] == ["echo", "other"]


def test_functions_without_metadata_are_skipped():
    agent = Agent(name="A", functions=[echo, lambda: None])
    assert [f.name for f in agent.get_function_metadata()] == ["echo"]


def test_append_function():
    agent = Agent(name="A")
    snapshot = agent.get_function_metadata()
    agent.append_function(echo)

    assert snapshot == []
    assert [f.name for f in agent.get_function_metadata()] == ["echo"]


def test_append_non_callable_raises():
    agent = Agent(name="A")
    with pytest.raises(InvalidFunctionError, match="Invalid function"):
        agent.append_function("echo")


def test_constructor_validates_functions():
    with pytest.raises(InvalidFunctionError):
        Agent(name="A", functions=[echo, 3])


def test_tool_choice_coerced():
    assert Agent(name="A", tool_choice="required").tool_choice is ToolChoice.REQUIRED
    assert Agent(name="A").tool_choice is None
    with pytest.raises(ValueError):
        Agent(name="A", tool_choice="sometimes")
