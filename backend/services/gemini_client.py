"""LLM client for the Google Gemini API."""
import time
from typing import Any, Callable, List, Optional
import logging

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from config import GOOGLE_API_KEY, GEMINI_MODEL
from models.exchange import GenerationConfig, ModelTurn
from services.llm_client import ChatSession, LLMClient, LLMResponse

logger = logging.getLogger(__name__)


def _token_count(usage: Any, attribute: str) -> int:
    value = getattr(usage, attribute, 0)
    return value if isinstance(value, int) else 0


class GeminiChatSession(ChatSession):
    """Wraps a google.generativeai ChatSession."""

    def __init__(self, client: "GeminiClient", chat: Any):
        self._client = client
        self._chat = chat

    def send(self, message: str) -> LLMResponse:
        return self._client._call(lambda: self._chat.send_message(message))


class GeminiClient(LLMClient):
    """Client for interfacing with the Gemini API for text generation."""

    display_name = "Gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = GEMINI_MODEL,
        generation_config: Optional[GenerationConfig] = None
    ):
        """
        Initialize the Gemini client.

        Args:
            api_key: Google API key (defaults to GOOGLE_API_KEY from environment)
            model_name: Gemini model name
            generation_config: Sampling parameters (defaults to the fixed config)
        """
        super().__init__(model_name, generation_config)
        self.api_key = api_key or GOOGLE_API_KEY
        if not self.api_key:
            raise ValueError("GOOGLE_API_KEY must be provided or set in environment")

        genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(
            model_name=self.model_name,
            generation_config=genai.GenerationConfig(
                temperature=self.generation_config.temperature,
                top_k=self.generation_config.top_k,
                top_p=self.generation_config.top_p,
                max_output_tokens=self.generation_config.max_output_tokens,
            ),
        )
        logger.info(f"GeminiClient initialized with model {self.model_name}")

    def generate(self, prompt: str) -> LLMResponse:
        logger.debug(f"Generating single-turn response with model: {self.model_name}")
        return self._call(lambda: self.model.generate_content(prompt))

    def start_chat(self, history: List[ModelTurn]) -> GeminiChatSession:
        logger.debug(f"Starting chat with {len(history)} seed turns")
        chat = self.model.start_chat(
            history=[{"role": turn.role, "parts": [turn.text]} for turn in history]
        )
        return GeminiChatSession(self, chat)

    def _call(self, request: Callable[[], Any]) -> LLMResponse:
        """
        Run one Gemini request and translate its outcome.

        Raises:
            LLMClientError: Structured error with code, message, and details
        """
        start_time = time.time()

        try:
            response = request()
            # .text raises ValueError when the candidate has no text parts
            text = response.text
        except google_exceptions.ResourceExhausted as e:
            raise self._error(
                "RATE_LIMIT_ERROR",
                "Rate limit exceeded. Please try again in a few moments.",
                start_time, e, retry_after=60
            ) from e
        except (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied) as e:
            raise self._error(
                "AUTHENTICATION_ERROR",
                "Authentication failed. Please check your API key.",
                start_time, e
            ) from e
        except google_exceptions.DeadlineExceeded as e:
            raise self._error(
                "TIMEOUT_ERROR",
                "Request timed out. Please try again.",
                start_time, e
            ) from e
        except google_exceptions.GoogleAPIError as e:
            raise self._error(
                "API_ERROR", f"Gemini API error: {str(e)}", start_time, e
            ) from e
        except ValueError as e:
            raise self._error(
                "INVALID_RESPONSE_ERROR",
                "Gemini returned a response without text.",
                start_time, e
            ) from e
        except Exception as e:
            raise self._error(
                "UNKNOWN_ERROR",
                f"Unexpected error during generation: {str(e)}",
                start_time, e, error_type=type(e).__name__
            ) from e

        latency_ms = self._elapsed_ms(start_time)
        usage = getattr(response, "usage_metadata", None)
        tokens_input = _token_count(usage, "prompt_token_count")
        tokens_output = _token_count(usage, "candidates_token_count")

        logger.info(
            f"Generated response: model={self.model_name}, "
            f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
            f"latency={latency_ms}ms"
        )

        return LLMResponse(
            text=text,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            latency_ms=latency_ms,
            model_used=self.model_name
        )
