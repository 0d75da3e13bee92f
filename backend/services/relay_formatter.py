"""
Relay Formatter for the Gemini Chat Relay.

Turns a generic chat request (message + role-tagged history + optional system
prompt) into a provider request, runs it, and normalizes the outcome. The
formatter holds no conversation state: every request carries its own history.
"""

from typing import Any, List
import logging

from pydantic import ValidationError

from config import SYSTEM_PROMPT_ACK
from models.api import ChatRequest, HistoryItem
from models.exchange import ModelExchange, ModelTurn, USER, MODEL
from services.llm_client import LLMClient

logger = logging.getLogger(__name__)


INVALID_MESSAGE = "INVALID_MESSAGE"
INVALID_HISTORY_TYPE = "INVALID_HISTORY_TYPE"
INVALID_HISTORY_ITEM = "INVALID_HISTORY_ITEM"

VALIDATION_MESSAGES = {
    INVALID_MESSAGE: "Message is required and must be a string",
    INVALID_HISTORY_TYPE: "History must be an array",
    INVALID_HISTORY_ITEM: "Invalid history format",
}

PROVIDER_ROLES = {"user": USER, "assistant": MODEL}


class RelayValidationError(Exception):
    """Malformed request shape; maps to HTTP 400."""

    status_code = 400

    def __init__(self, code: str):
        self.code = code
        super().__init__(VALIDATION_MESSAGES[code])


class ProviderError(Exception):
    """The model call failed for any reason; maps to HTTP 500."""

    status_code = 500


class RelayFormatter:
    """
    Stateless relay between chat clients and an LLM provider.

    Request lifecycle: validate -> transform -> invoke -> normalize. Each
    request is a single attempt; validation failures never reach the provider.
    """

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client

    def process(self, payload: Any) -> str:
        """
        Handle one raw (already JSON-decoded) request body.

        Args:
            payload: Decoded request body

        Returns:
            The model's reply text

        Raises:
            RelayValidationError: Request failed validation
            ProviderError: The provider call failed
        """
        request = self.validate(payload)
        exchange = self.build_exchange(request)
        return self.invoke(exchange)

    def validate(self, payload: Any) -> ChatRequest:
        """
        Check the request shape, first failing rule wins.

        1. message is a non-empty string
        2. history (if present) is a list
        3. every history entry has role user/assistant and string content
        """
        if not isinstance(payload, dict):
            raise RelayValidationError(INVALID_MESSAGE)

        message = payload.get("message")
        if not message or not isinstance(message, str):
            raise RelayValidationError(INVALID_MESSAGE)

        history = self._validate_history(payload.get("history"))
        prior_history = None
        if payload.get("priorHistory") is not None:
            prior_history = self._validate_history(payload["priorHistory"])

        system_prompt = payload.get("systemPrompt")
        if not isinstance(system_prompt, str):
            system_prompt = None

        return ChatRequest(
            message=message,
            history=history,
            system_prompt=system_prompt,
            prior_history=prior_history,
        )

    @staticmethod
    def _validate_history(raw: Any) -> List[HistoryItem]:
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise RelayValidationError(INVALID_HISTORY_TYPE)
        try:
            return [HistoryItem.model_validate(item) for item in raw]
        except ValidationError:
            raise RelayValidationError(INVALID_HISTORY_ITEM)

    @staticmethod
    def build_exchange(request: ChatRequest) -> ModelExchange:
        """
        Convert a validated request into the provider-facing exchange.

        With no prior turns the exchange is a single prompt. Otherwise the
        prior turns (plus the system prompt pair, if any) seed a chat and the
        message is sent as the final turn.
        """
        if request.prior_history is not None:
            prior = request.prior_history
            first_turn = not prior
        else:
            # The client appends the new message to history; drop that copy.
            prior = request.history[:-1]
            first_turn = not request.history

        if first_turn:
            prompt = request.message
            if request.system_prompt:
                prompt = f"{request.system_prompt}\n\nUser: {request.message}"
            return ModelExchange(message=request.message, prompt=prompt)

        seed: List[ModelTurn] = []
        if request.system_prompt:
            seed.append(ModelTurn(role=USER, text=request.system_prompt))
            seed.append(ModelTurn(role=MODEL, text=SYSTEM_PROMPT_ACK))
        seed.extend(ModelTurn(role=PROVIDER_ROLES[item.role], text=item.content) for item in prior)

        return ModelExchange(message=request.message, seed_history=seed)

    def invoke(self, exchange: ModelExchange) -> str:
        """Run the exchange against the provider; any failure becomes ProviderError."""
        try:
            if exchange.is_single_turn:
                logger.info("Invoking single-turn generation")
                response = self.llm_client.generate(exchange.prompt)
            else:
                logger.info(f"Invoking chat with {len(exchange.seed_history)} seed turns")
                chat = self.llm_client.start_chat(exchange.seed_history)
                response = chat.send(exchange.message)
        except Exception as e:
            logger.error(f"{self.provider_name} API error: {e}", exc_info=True)
            raise ProviderError(f"Failed to get response from {self.provider_name}") from e

        if not isinstance(response.text, str) or not response.text:
            logger.error(f"{self.provider_name} returned an empty or non-text reply")
            raise ProviderError(f"Failed to get response from {self.provider_name}")
        return response.text

    @property
    def provider_name(self) -> str:
        return getattr(self.llm_client, "display_name", "LLM")
