"""Provider protocols.

The agent never touches a vendor HTTP API directly; it depends on these
protocols instead:

- ProviderClient: turns a ChatRequest into one chat completion call and
  parses the answer into a ChatResult.
- SearchClient: runs one web search and returns the ordered results.

New vendors plug in by implementing the protocol, without touching the agent.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

from buddy_ai.domain.models import ChatRequest, ChatResult


class ProviderClient(Protocol):
    """LLM provider client.

    - name: provider name, used in logs.
    - chat(req): a single non-streaming completion call.
    """

    name: str

    def chat(self, req: ChatRequest) -> ChatResult:
        ...


@dataclass
class SearchResult:
    title: str
    url: str
    content: str
    score: float = 0.0
    raw: Dict[str, Any] = field(default_factory=dict)


class SearchClient(Protocol):
    name: str

    def search(self, query: str) -> List[SearchResult]:
        ...
