"""Per-chat conversation state for the add-expense flow."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class Step(Enum):
    NONE = "none"
    AWAITING_CATEGORY = "awaiting_category"
    AWAITING_DESCRIPTION = "awaiting_description"
    AWAITING_AMOUNT = "awaiting_amount"


@dataclass
class ConversationState:
    step: Step = Step.NONE
    category: Optional[str] = None
    description: Optional[str] = None

    @property
    def in_flow(self) -> bool:
        return self.step is not Step.NONE


class StateStore(ABC):
    """Key-value store of conversation states keyed by chat id."""

    @abstractmethod
    def get(self, chat_id: int) -> Optional[ConversationState]:
        ...

    @abstractmethod
    def set(self, chat_id: int, state: ConversationState) -> None:
        ...

    @abstractmethod
    def clear(self, chat_id: int) -> None:
        ...


class InMemoryStateStore(StateStore):
    """Process-lifetime dict of states. Entries never expire on their own."""

    def __init__(self):
        self._states: Dict[int, ConversationState] = {}

    def get(self, chat_id: int) -> Optional[ConversationState]:
        return self._states.get(chat_id)

    def set(self, chat_id: int, state: ConversationState) -> None:
        self._states[chat_id] = state

    def clear(self, chat_id: int) -> None:
        self._states.pop(chat_id, None)

    def __len__(self) -> int:
        return len(self._states)


__all__ = ["Step", "ConversationState", "StateStore", "InMemoryStateStore"]
