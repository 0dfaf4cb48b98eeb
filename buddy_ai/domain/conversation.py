from dataclasses import dataclass
from typing import List, Optional, Protocol

from .models import ChatMessage


Conversation = List[ChatMessage]


@dataclass
class SessionEntry:
    thread_id: str
    messages: Conversation
    expires_at: float


class ConversationStore(Protocol):
    def get(self, thread_id: str) -> Optional[Conversation]:
        ...

    def put(self, thread_id: str, conversation: Conversation) -> None:
        ...

    def delete(self, thread_id: str) -> None:
        ...
