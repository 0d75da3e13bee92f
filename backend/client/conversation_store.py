"""Client-side conversation state for one chat session."""
import json
import logging
import threading
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from config import SYSTEM_PROMPT, ERROR_TURN_TEXT
from models.api import ChatRequest, HistoryItem
from models.conversation import Turn, USER, ASSISTANT, utc_now_iso

logger = logging.getLogger(__name__)

Listener = Callable[["ConversationStore"], None]


class ConversationStore:
    """
    Observable, in-memory conversation for a single session.

    Turns are only ever appended (or all cleared at once). Subscribers are
    notified after every mutation, including loading-state changes.
    Only one request may be in flight; submissions made meanwhile are
    rejected rather than queued.
    """

    def __init__(self, relay_client: Any, system_prompt: str = SYSTEM_PROMPT):
        """
        Args:
            relay_client: Object with send(ChatRequest) -> str (see RelayClient)
            system_prompt: Prompt attached to every request
        """
        self.relay_client = relay_client
        self.system_prompt = system_prompt
        self._turns: List[Turn] = []
        self._in_flight = threading.Lock()
        self._listeners: List[Listener] = []

    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def is_loading(self) -> bool:
        return self._in_flight.locked()

    def __len__(self) -> int:
        return len(self._turns)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Store listener {listener!r} failed: {e}", exc_info=True)

    def _append(self, turn: Turn) -> Turn:
        self._turns.append(turn)
        self._notify()
        return turn

    def build_request(self, new_text: str) -> ChatRequest:
        """
        Build the relay request for a new message.

        History holds every turn already in the session followed by the new
        message itself.
        """
        history = [HistoryItem(**turn.to_history_item()) for turn in self._turns]
        history.append(HistoryItem(role=USER, content=new_text))
        return ChatRequest(
            message=new_text,
            history=history,
            system_prompt=self.system_prompt
        )

    def append_user_turn(self, text: str) -> bool:
        """
        Record a user message and dispatch it to the relay.

        Returns:
            False if the text is blank or a request is already in flight,
            True once the user turn was recorded and the round trip finished
        """
        text = (text or "").strip()
        if not text:
            return False
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Submission rejected: a request is already in flight")
            return False

        try:
            chat_request = self.build_request(text)
            self._append(Turn(role=USER, text=text))
            self._dispatch(chat_request)
        finally:
            self._in_flight.release()
            self._notify()
        return True

    def _dispatch(self, chat_request: ChatRequest) -> None:
        try:
            reply = self.relay_client.send(chat_request)
        except Exception as e:
            logger.error(f"Error sending message: {e}")
            self.append_error_turn()
            return
        self.append_reply(reply)

    def append_reply(self, text: str) -> Turn:
        return self._append(Turn(role=ASSISTANT, text=text))

    def append_error_turn(self) -> Turn:
        return self._append(Turn(role=ASSISTANT, text=ERROR_TURN_TEXT, is_error=True))

    def clear(self) -> None:
        """Drop every turn. Safe to call on an empty session."""
        self._turns = []
        self._notify()

    def export(self) -> Dict[str, Any]:
        """Snapshot of the session in the chat export format."""
        return {
            "messages": [turn.to_export_dict() for turn in self._turns],
            "exportDate": utc_now_iso(),
            "totalMessages": len(self._turns),
        }

    def export_to_file(self, path: Optional[str] = None) -> Path:
        """
        Write the export as indented JSON.

        Args:
            path: Target file (defaults to chat-export-YYYY-MM-DD.json)

        Returns:
            Path of the written file
        """
        target = Path(path or f"chat-export-{date.today().isoformat()}.json")
        with open(target, "w", encoding="utf-8") as f:
            json.dump(self.export(), f, indent=2)
        logger.info(f"Exported {len(self._turns)} turns to {target}")
        return target
