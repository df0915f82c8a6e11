"""Tests for message helpers."""

import pytest

from multi_agent_orch.messages import (
    make_tool_message,
    parse_tool_arguments,
    validate_message,
    validate_tool_linkage,
)


class TestValidateMessage:
    def test_valid_messages(self):
        validate_message({"role": "user", "content": "hi"})
        validate_message({"role": "assistant", "content": ""})
        validate_message({"role": "tool", "content": "ok", "tool_call_id": "call_1"})

    @pytest.mark.parametrize(
        "message, error",
        [
            ("hello", "must be dict"),
            ({"role": "robot", "content": "x"}, "Invalid role"),
            ({"role": "user"}, "content"),
            ({"role": "tool", "content": "x"}, "tool_call_id"),
        ],
    )
    def test_invalid_messages(self, message, error):
        with pytest.raises(ValueError, match=error):
            validate_message(message)


class TestValidateToolLinkage:
    def test_linked_tool_reply(self):
        messages = [
            {"role": "user", "content": "hi"},
            {
                "role": "assistant",
                "content": "",
                "tool_calls": [{"id": "call_1", "function": {"name": "f", "arguments": "{}"}}],
            },
            make_tool_message("call_1", "f", "done"),
        ]
        validate_tool_linkage(messages)

    def test_orphan_tool_reply(self):
        messages = [
            {"role": "assistant", "content": "", "tool_calls": []},
            make_tool_message("call_9", "f", "done"),
        ]
        with pytest.raises(ValueError, match="call_9"):
            validate_tool_linkage(messages)


def test_make_tool_message():
    assert make_tool_message("call_1", "echo", "foo") == {
        "role": "tool",
        "content": "foo",
        "tool_call_id": "call_1",
        "tool_name": "echo",
    }


class TestParseToolArguments:
    def test_json_string(self):
        assert parse_tool_arguments('{"x": "foo", "n": 2}') == {"x": "foo", "n": 2}

    def test_mapping_is_copied(self):
        payload = {"x": 1}
        parsed = parse_tool_arguments(payload)
        assert parsed == payload
        assert parsed is not payload

    @pytest.mark.parametrize("payload", [None, "", "null"])
    def test_empty_payload(self, payload):
        assert parse_tool_arguments(payload) == {}

    def test_invalid_json(self):
        with pytest.raises(ValueError, match="Invalid tool arguments"):
            parse_tool_arguments("{not json")

    def test_non_object(self):
        with pytest.raises(ValueError, match="JSON object"):
            parse_tool_arguments("[1, 2]")
