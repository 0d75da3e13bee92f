"""End-to-end tests: ConversationStore -> RelayClient -> /api/chat -> mock LLM."""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock, patch
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))


@pytest.fixture
def llm_client():
    from services.llm_client import LLMResponse

    def reply(text):
        return LLMResponse(text=text, tokens_input=1, tokens_output=1, latency_ms=1, model_used="gemini-2.0-flash")

    client = Mock()
    client.display_name = "Gemini"
    client.generate.side_effect = lambda prompt: reply("first reply")
    client.start_chat.return_value.send.side_effect = lambda message: reply(f"echo: {message}")
    return client


@pytest.fixture
def store(llm_client):
    import main
    from client import ConversationStore, RelayClient
    from services.relay_formatter import RelayFormatter

    with patch.object(main, 'relay_formatter', RelayFormatter(llm_client)):
        test_client = TestClient(main.app)
        relay_client = RelayClient(api_url="http://testserver", session=test_client)
        yield ConversationStore(relay_client, system_prompt="X")


def test_first_message_uses_single_turn_prompt(store, llm_client):
    store.append_user_turn("Hello")

    llm_client.generate.assert_called_once_with("X\n\nUser: Hello")
    assert [turn.text for turn in store.turns] == ["Hello", "first reply"]


def test_follow_up_seeds_chat_without_duplicating_message(store, llm_client):
    store.append_user_turn("Hello")
    store.append_user_turn("Again")

    seed = llm_client.start_chat.call_args[0][0]
    assert [turn.text for turn in seed][2:] == ["Hello", "first reply"]
    assert [turn.role for turn in seed] == ["user", "model", "user", "model"]
    assert store.turns[-1].text == "echo: Again"


def test_provider_failure_becomes_one_error_turn(store, llm_client):
    from services.llm_client import LLMError, LLMClientError

    llm_client.generate.side_effect = LLMClientError(LLMError(code="API_ERROR", message="down", details={}))

    store.append_user_turn("Hello")

    assert len(store) == 2
    assert store.turns[0].text == "Hello"
    assert store.turns[1].is_error is True
    assert sum(1 for turn in store.turns if turn.is_error) == 1
