"""Chat client for the Gemini Chat Relay."""
from .relay_client import RelayClient, TransportError
from .conversation_store import ConversationStore

__all__ = ['RelayClient', 'TransportError', 'ConversationStore']
