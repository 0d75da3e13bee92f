"""API request and response models."""
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictStr


class HistoryItem(BaseModel):
    """One entry of the conversation history sent to the relay."""
    role: Literal["user", "assistant"]
    content: StrictStr


class ChatRequest(BaseModel):
    """Request body for POST /api/chat."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    history: List[HistoryItem] = Field(default_factory=list)
    system_prompt: Optional[str] = Field(default=None, alias="systemPrompt")
    prior_history: Optional[List[HistoryItem]] = Field(default=None, alias="priorHistory")

    def to_wire(self) -> dict:
        """JSON body as the relay expects it (camelCase, no null fields)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ChatResponse(BaseModel):
    """Successful relay response."""
    reply: str


class ErrorResponse(BaseModel):
    """Error relay response."""
    error: str
