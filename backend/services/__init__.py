"""Services for the Gemini Chat Relay."""
from .llm_client import LLMClient, ChatSession, LLMResponse, LLMError, LLMClientError
from .relay_formatter import RelayFormatter, RelayValidationError, ProviderError

__all__ = ['LLMClient', 'ChatSession', 'LLMResponse', 'LLMError', 'LLMClientError', 'RelayFormatter', 'RelayValidationError', 'ProviderError', 'create_llm_client']


def create_llm_client(provider: str) -> LLMClient:
    """
    Build the configured LLM client.

    Provider SDKs are imported on first use.
    """
    if provider == "gemini":
        from .gemini_client import GeminiClient
        return GeminiClient()
    if provider == "groq":
        from .groq_client import GroqClient
        return GroqClient()
    raise ValueError(f"Unknown LLM provider: {provider}")
