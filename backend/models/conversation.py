"""Conversation data models."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

USER = "user"
ASSISTANT = "assistant"
ROLES = (USER, ASSISTANT)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class Turn:
    """Represents a single turn in a conversation."""
    role: str
    text: str
    timestamp: str = field(default_factory=utc_now_iso)
    is_error: bool = False

    def __post_init__(self):
        if self.role not in ROLES:
            raise ValueError(f"Unknown turn role: {self.role!r}")

    def to_history_item(self) -> Dict[str, str]:
        """Wire form used in the relay request history."""
        return {"role": self.role, "content": self.text}

    def to_export_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "role": self.role,
            "text": self.text,
            "timestamp": self.timestamp,
        }
        if self.is_error:
            data["isError"] = True
        return data
