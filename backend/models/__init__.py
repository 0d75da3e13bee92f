"""Data models for the Gemini Chat Relay."""
from .conversation import Turn, USER, ASSISTANT, ROLES
from .exchange import ModelTurn, ModelExchange, GenerationConfig
from .api import HistoryItem, ChatRequest, ChatResponse, ErrorResponse

__all__ = [
    "Turn",
    "USER",
    "ASSISTANT",
    "ROLES",
    "ModelTurn",
    "ModelExchange",
    "GenerationConfig",
    "HistoryItem",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
]
