"""Unit tests for RelayClient."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import pytest
import requests
from unittest.mock import Mock
from client.relay_client import RelayClient, TransportError
from models.api import ChatRequest, HistoryItem


@pytest.fixture
def chat_request():
    return ChatRequest(
        message="Hi",
        history=[HistoryItem(role="user", content="Hi")],
        system_prompt="Be brief"
    )


def _session(status_code=200, body=None, json_error=None):
    response = Mock(status_code=status_code)
    if json_error:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body
    session = Mock()
    session.post.return_value = response
    return session


def test_send_returns_reply(chat_request):
    session = _session(body={"reply": "Hello!"})
    client = RelayClient(api_url="http://relay.test/", session=session, timeout=5)

    assert client.send(chat_request) == "Hello!"
    session.post.assert_called_once_with(
        "http://relay.test/api/chat",
        json={
            "message": "Hi",
            "history": [{"role": "user", "content": "Hi"}],
            "systemPrompt": "Be brief",
        },
        timeout=5
    )


def test_network_error(chat_request):
    session = Mock()
    session.post.side_effect = requests.exceptions.ConnectionError("refused")
    client = RelayClient(session=session)

    with pytest.raises(TransportError, match="refused"):
        client.send(chat_request)


@pytest.mark.parametrize("status_code", [400, 404, 500, 503])
def test_non_2xx_status(chat_request, status_code):
    client = RelayClient(session=_session(status_code=status_code, body={"error": "x"}))

    with pytest.raises(TransportError, match=f"status: {status_code}"):
        client.send(chat_request)


def test_error_field_in_body(chat_request):
    client = RelayClient(session=_session(body={"error": "Failed to get response from Gemini"}))

    with pytest.raises(TransportError, match="Failed to get response from Gemini"):
        client.send(chat_request)


@pytest.mark.parametrize("body", [{}, {"reply": ""}, {"reply": None}, {"reply": 3}, ["reply"]])
def test_missing_or_invalid_reply(chat_request, body):
    client = RelayClient(session=_session(body=body))

    with pytest.raises(TransportError, match="Invalid response format"):
        client.send(chat_request)


def test_malformed_json(chat_request):
    client = RelayClient(session=_session(json_error=ValueError("Expecting value")))

    with pytest.raises(TransportError, match="malformed JSON"):
        client.send(chat_request)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
