"""Tests for the terminal chat client."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import json
import pytest
from unittest.mock import Mock
from chat_cli import TurnPrinter, run_chat
from client.conversation_store import ConversationStore
from client.relay_client import TransportError
from models.conversation import Turn


@pytest.fixture
def store():
    relay_client = Mock()
    relay_client.send.return_value = "Hello!"
    return ConversationStore(relay_client, system_prompt="Be brief")


def test_format_turn():
    turn = Turn(role="assistant", text="Oops", timestamp="2026-01-01T10:30:00+00:00", is_error=True)

    line = TurnPrinter.format_turn(turn)

    assert line.endswith("Assistant [error]: Oops")
    assert line.startswith("[")


def test_run_chat_prints_each_turn_once(store):
    output = []

    run_chat(store, ["Hi", "   ", "How are you?"], out=output.append)

    assert len(output) == 4
    assert output[0].endswith("You: Hi")
    assert output[1].endswith("Assistant: Hello!")
    assert output[2].endswith("You: How are you?")


def test_run_chat_clear(store):
    output = []

    run_chat(store, ["Hi", "/clear", "Again"], out=output.append)

    assert "Conversation cleared." in output
    assert [turn.text for turn in store.turns] == ["Again", "Hello!"]
    assert output[-1].endswith("Assistant: Hello!")


def test_run_chat_export(store, tmp_path):
    output = []
    target = tmp_path / "session.json"

    run_chat(store, ["Hi", f"/export {target}"], out=output.append)

    assert output[-1] == f"Conversation exported to {target}"
    assert json.loads(target.read_text())["totalMessages"] == 2


def test_run_chat_export_failure_keeps_session_running(store, tmp_path):
    output = []
    bad_target = tmp_path / "missing-dir" / "session.json"

    run_chat(store, [f"/export {bad_target}", "Hi"], out=output.append)

    assert output[0].startswith("ERROR: could not export conversation")
    assert output[-1].endswith("Assistant: Hello!")
    assert len(store) == 2


def test_run_chat_quit_stops_reading(store):
    run_chat(store, ["/quit", "never sent"], out=lambda line: None)

    assert len(store) == 0


def test_run_chat_error_turn(store):
    store.relay_client.send.side_effect = TransportError("down")
    output = []

    run_chat(store, ["Hi"], out=output.append)

    assert "[error]" in output[-1]


def test_run_chat_unsubscribes(store):
    output = []
    run_chat(store, ["Hi"], out=output.append)

    store.append_user_turn("later")

    assert len(output) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
