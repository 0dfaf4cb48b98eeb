"""In-memory conversation store with a per-entry time-to-live.

Entries expire ``ttl_seconds`` after their last ``put``. Expired entries are
evicted when they are next read; ``purge_expired`` sweeps everything at once.
Contents are lost when the process exits.
"""

import copy
import threading
import time
from typing import Callable, Dict, List, Optional

from buddy_ai.config.settings import settings
from buddy_ai.domain.conversation import Conversation, ConversationStore, SessionEntry
from buddy_ai.domain.exceptions import ValidationError


class InMemoryConversationStore(ConversationStore):
    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        ttl = settings.session_ttl_seconds if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            raise ValidationError(code="INVALID_TTL", message=f"ttl_seconds must be positive, got {ttl}")
        self._ttl = float(ttl)
        self._clock = clock
        self._entries: Dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, thread_id: str) -> Optional[Conversation]:
        with self._lock:
            entry = self._entries.get(thread_id)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[thread_id]
                return None
            return copy.deepcopy(entry.messages)

    def put(self, thread_id: str, conversation: Conversation) -> None:
        with self._lock:
            self._entries[thread_id] = SessionEntry(
                thread_id=thread_id,
                messages=copy.deepcopy(conversation),
                expires_at=self._clock() + self._ttl,
            )

    def delete(self, thread_id: str) -> None:
        with self._lock:
            self._entries.pop(thread_id, None)

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired: List[str] = [k for k, e in self._entries.items() if e.expires_at <= now]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for e in self._entries.values() if e.expires_at > now)
