"""LLM client for the Groq API."""
import time
from typing import Dict, List, Optional
from groq import Groq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError
import logging

from config import GROQ_API_KEY, GROQ_MODEL
from models.exchange import GenerationConfig, ModelTurn, MODEL
from services.llm_client import ChatSession, LLMClient, LLMResponse

logger = logging.getLogger(__name__)


class GroqChatSession(ChatSession):
    """
    Chat over Groq's stateless completions API.

    The message list is kept locally and resent in full on every turn.
    """

    def __init__(self, client: "GroqClient", messages: List[Dict[str, str]]):
        self._client = client
        self.messages = messages

    def send(self, message: str) -> LLMResponse:
        messages = self.messages + [{"role": "user", "content": message}]
        response = self._client._complete(messages)
        self.messages = messages + [{"role": "assistant", "content": response.text}]
        return response


class GroqClient(LLMClient):
    """Client for interfacing with Groq API for text generation."""

    display_name = "Groq"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = GROQ_MODEL,
        generation_config: Optional[GenerationConfig] = None
    ):
        """
        Initialize LLM client with Groq API key.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
            model_name: Groq model name
            generation_config: Sampling parameters (top_k is not supported by Groq)
        """
        super().__init__(model_name, generation_config)
        self.api_key = api_key or GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY must be provided or set in environment")

        self.client = Groq(api_key=self.api_key)
        logger.info("GroqClient initialized successfully")

    def generate(self, prompt: str) -> LLMResponse:
        return self._complete([{"role": "user", "content": prompt}])

    def start_chat(self, history: List[ModelTurn]) -> GroqChatSession:
        messages = [
            {
                "role": "assistant" if turn.role == MODEL else "user",
                "content": turn.text
            }
            for turn in history
        ]
        return GroqChatSession(self, messages)

    def _complete(self, messages: List[Dict[str, str]]) -> LLMResponse:
        """
        Run a chat completion against Groq.

        Args:
            messages: OpenAI-style message list

        Returns:
            LLMResponse with text, token counts, and latency

        Raises:
            LLMClientError: Structured error with code, message, and details
        """
        start_time = time.time()

        try:
            logger.debug(f"Generating response with model: {self.model_name}")

            response = self.client.chat.completions.create(
                model=self.model_name,
                messages=messages,
                max_tokens=self.generation_config.max_output_tokens,
                temperature=self.generation_config.temperature,
                top_p=self.generation_config.top_p
            )

            text = response.choices[0].message.content
            tokens_input = response.usage.prompt_tokens
            tokens_output = response.usage.completion_tokens

        except RateLimitError as e:
            raise self._error(
                "RATE_LIMIT_ERROR",
                "Rate limit exceeded. Please try again in a few moments.",
                start_time, e, retry_after=60
            ) from e
        except AuthenticationError as e:
            raise self._error(
                "AUTHENTICATION_ERROR",
                "Authentication failed. Please check your API key.",
                start_time, e
            ) from e
        except APITimeoutError as e:
            raise self._error(
                "TIMEOUT_ERROR", "Request timed out. Please try again.", start_time, e
            ) from e
        except APIError as e:
            raise self._error(
                "API_ERROR", f"Groq API error: {str(e)}", start_time, e
            ) from e
        except Exception as e:
            raise self._error(
                "UNKNOWN_ERROR",
                f"Unexpected error during generation: {str(e)}",
                start_time, e, error_type=type(e).__name__
            ) from e

        if not isinstance(text, str):
            raise self._error(
                "INVALID_RESPONSE_ERROR",
                "Groq returned a response without text.",
                start_time, TypeError(f"message content is {type(text).__name__}")
            )

        latency_ms = self._elapsed_ms(start_time)
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
