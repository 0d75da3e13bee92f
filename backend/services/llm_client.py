"""Provider-neutral LLM client interface and structured errors."""
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import logging

from config import TEMPERATURE, TOP_K, TOP_P, MAX_OUTPUT_TOKENS
from models.exchange import GenerationConfig, ModelTurn

logger = logging.getLogger(__name__)


DEFAULT_GENERATION_CONFIG = GenerationConfig(
    temperature=TEMPERATURE,
    top_k=TOP_K,
    top_p=TOP_P,
    max_output_tokens=MAX_OUTPUT_TOKENS,
)


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any]


class LLMClientError(Exception):
    """Custom exception for LLM client errors with structured error information."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


class ChatSession(ABC):
    """A stateful chat seeded with history; each send continues the conversation."""

    @abstractmethod
    def send(self, message: str) -> LLMResponse:
        """Send one more user message and return the model's reply."""


class LLMClient(ABC):
    """
    Generative-text provider with two capabilities.

    - generate(prompt): single-shot completion from a prompt string
    - start_chat(history).send(message): stateful chat seeded with history

    Implementations map their SDK's exceptions to LLMClientError so callers
    only ever deal with one error type.
    """

    display_name = "LLM"

    def __init__(self, model_name: str, generation_config: Optional[GenerationConfig] = None):
        self.model_name = model_name
        self.generation_config = generation_config or DEFAULT_GENERATION_CONFIG

    @abstractmethod
    def generate(self, prompt: str) -> LLMResponse:
        """Generate a completion for a single prompt."""

    @abstractmethod
    def start_chat(self, history: List[ModelTurn]) -> ChatSession:
        """Start a chat seeded with provider-role history."""

    def _elapsed_ms(self, start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    def _error(
        self,
        code: str,
        message: str,
        start_time: float,
        exc: Exception,
        **details: Any
    ) -> LLMClientError:
        """
        Build (and log) a structured error for a failed provider call.

        Args:
            code: Error code such as RATE_LIMIT_ERROR
            message: Human readable message
            start_time: time.time() when the call started
            exc: The provider exception being translated
            **details: Extra detail fields

        Returns:
            LLMClientError ready to be raised
        """
        latency_ms = self._elapsed_ms(start_time)
        error = LLMError(
            code=code,
            message=message,
            details={
                "model": self.model_name,
                "latency_ms": latency_ms,
                "original_error": str(exc),
                **details,
            }
        )
        logger.error(
            f"{self.display_name} call failed: code={code}, model={self.model_name}, "
            f"latency={latency_ms}ms, error={exc}",
            exc_info=True,
            extra={"error_code": error.code, "error_details": error.details}
        )
        return LLMClientError(error)
