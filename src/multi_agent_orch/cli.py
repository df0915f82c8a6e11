import asyncio
import json

from .agent import Agent
from .functions import FunctionSet, agent_function
from .orchestrator import Orchestrator


class TransferFunctions(FunctionSet):
    """Handoff tools for the demo agents."""

    def __init__(self, spanish_agent, english_agent):
        self.spanish_agent = spanish_agent
        self.english_agent = english_agent
        super().__init__()

    @agent_function("Transfer spanish speaking users immediately.")
    def transfer_to_spanish_agent(self):
        return self.spanish_agent

    @agent_function("Transfer english speaking users immediately.")
    def transfer_to_english_agent(self):
        return self.english_agent


def build_demo_agents():
    """Create the English/Spanish agent pair wired with handoff tools."""
    english_agent = Agent(name="English Agent", instructions="You only speak English.")
    spanish_agent = Agent(name="Spanish Agent", instructions="You only speak Spanish.")

    transfers = TransferFunctions(spanish_agent, english_agent)
    english_agent.append_function(transfers.transfer_to_spanish_agent)
    spanish_agent.append_function(transfers.transfer_to_english_agent)
    return english_agent, spanish_agent


def _print_new_messages(messages):
    """Print assistant replies with their sender."""
    for message in messages:
        if message.get("role") == "assistant" and message.get("content"):
            print(f"[{message.get('sender') or 'assistant'}]: {message['content']}")


def _handle_command(command, agent, initial_agent, history, context_variables):
    """Handle /reset and /context. Returns updated (agent, history, context_variables)."""
    if command == "/reset":
        print("会話をリセットしました。")
        return initial_agent, [], {}
    if command == "/context":
        print(json.dumps(context_variables, ensure_ascii=False, indent=2, default=str))
        return agent, history, context_variables
    if command == "/agent":
        print(f"現在のエージェント: {agent.name}")
        return agent, history, context_variables

    print(
        f"エラー: `{command}` は不明なコマンドです。"
        f"利用可能なコマンドは /reset, /context, /agent です。"
    )
    return agent, history, context_variables


def main(agent=None, orchestrator=None, max_turns=None):
    """Main CLI loop

    The active agent carries over between prompts, so a handoff sticks until
    another tool hands the conversation back.
    """
    if agent is None:
        agent, _ = build_demo_agents()
    orchestrator = orchestrator or Orchestrator()

    initial_agent = agent
    history = []
    context_variables = {}

    while True:
        try:
            prompt = input("> ").strip()
        except EOFError:
            break

        if prompt.lower() in ["exit", "quit"]:
            break
        if not prompt:
            continue

        if prompt.startswith("/"):
            agent, history, context_variables = _handle_command(
                prompt.split()[0], agent, initial_agent, history, context_variables
            )
            continue

        history.append({"role": "user", "content": prompt})
        try:
            response = asyncio.run(
                orchestrator.run(agent, history, context_variables, max_turns=max_turns)
            )
        except Exception as e:
            print(f"[System: エラーが発生しました: {e}]")
            history.pop()
            continue

        _print_new_messages(response.messages[len(history):])
        agent = response.agent
        history = response.messages
        context_variables = response.context_variables

    return history, context_variables
