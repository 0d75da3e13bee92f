"""Provider-facing conversation models."""
from dataclasses import dataclass, field
from typing import List, Optional

USER = "user"
MODEL = "model"


@dataclass(frozen=True)
class ModelTurn:
    """A role-tagged content block in the provider's vocabulary."""
    role: str
    text: str


@dataclass(frozen=True)
class GenerationConfig:
    """Sampling parameters applied to every model call."""
    temperature: float
    top_k: int
    top_p: float
    max_output_tokens: int


@dataclass
class ModelExchange:
    """
    What gets sent to the model for one relay request.

    Attributes:
        message: The new user message
        prompt: Full prompt for the single-turn path (None for multi-turn)
        seed_history: History used to seed a stateful chat (multi-turn path)
    """
    message: str
    prompt: Optional[str] = None
    seed_history: List[ModelTurn] = field(default_factory=list)

    @property
    def is_single_turn(self) -> bool:
        return self.prompt is not None
