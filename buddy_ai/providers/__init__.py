"""External provider integrations.

- base: ProviderClient / SearchClient protocols.
- registry: provider and model configuration.
- groq_client / tavily_client: concrete vendor adapters.
- fallback: fail-over across the model candidate list.
"""

from typing import Optional

from buddy_ai.config.settings import settings
from buddy_ai.providers.base import ProviderClient, SearchClient
from buddy_ai.providers.groq_client import GroqClient
from buddy_ai.providers.registry import get_provider_config
from buddy_ai.providers.tavily_client import TavilyClient


def create_provider(name: Optional[str] = None) -> ProviderClient:
    """Create an LLM provider client, "groq" by default."""

    cfg = get_provider_config(name or "groq")
    if cfg.name == "groq":
        return GroqClient(settings)
    raise KeyError(f"No client for provider: {cfg.name!r}")


def create_search_client() -> SearchClient:
    return TavilyClient(settings)
