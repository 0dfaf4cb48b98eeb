"""Buddy assistant wiring.

Builds an AgentEngine with the web-search tool, the Groq fallback invoker
and the TTL conversation store, using settings for every default.
"""

from typing import Optional, Sequence

from buddy_ai.agents.base_agent import AgentConfig, AgentEngine, TurnResult
from buddy_ai.config.settings import settings
from buddy_ai.domain.conversation import Conversation, ConversationStore
from buddy_ai.infrastructure.storage.memory_store import InMemoryConversationStore
from buddy_ai.prompts import load_system_prompt
from buddy_ai.providers.base import ProviderClient, SearchClient
from buddy_ai.providers.fallback import FallbackInvoker
from buddy_ai.tools.executor import ToolExecutor, default_tool_defs, default_tools


class BuddyAgent:
    """Convenience wrapper around AgentEngine for the chat assistant."""

    def __init__(
        self,
        provider_client: ProviderClient,
        search_client: SearchClient,
        store: Optional[ConversationStore] = None,
        model_candidates: Optional[Sequence[str]] = None,
        max_tool_rounds: Optional[int] = None,
        locale: Optional[str] = None,
    ):
        """
        Args:
            provider_client: LLM provider client, built once and reused.
            search_client: web search client backing the webSearch tool.
            store: conversation store; an in-memory TTL store by default.
            model_candidates: ordered model ids; settings.model_candidates by default.
            max_tool_rounds: model calls allowed per turn.
            locale: system prompt locale.
        """
        self._provider_client = provider_client
        self._search_client = search_client
        self._store = store if store is not None else InMemoryConversationStore()
        prompt_locale = locale or settings.locale

        invoker = FallbackInvoker.for_provider(provider_client, model_candidates or settings.model_candidates)
        self._engine = AgentEngine(
            store=self._store,
            invoker=invoker,
            tool_executor=ToolExecutor(default_tools(search_client)),
            tool_defs=default_tool_defs(),
            system_prompt=lambda: load_system_prompt(prompt_locale),
            config=AgentConfig(max_tool_rounds=max_tool_rounds or settings.max_tool_rounds),
        )

    def chat(self, user_input: str, thread_id: str) -> TurnResult:
        return self._engine.run_step(thread_id=thread_id, user_input=user_input)

    def history(self, thread_id: str) -> Conversation:
        return self._store.get(thread_id) or []
