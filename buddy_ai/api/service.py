"""Service functions used by the HTTP app and the CLI.

The default agent is built lazily, once per process, from settings. Its
clients are reused for every request until ``reset_default_agent`` tears it
down.
"""

from typing import Optional, Dict, Any, List

from buddy_ai.agents.buddy_agent import BuddyAgent
from buddy_ai.config.settings import settings
from buddy_ai.infrastructure.logging.logger import logger
from buddy_ai.providers import create_provider, create_search_client


_agent: Optional[BuddyAgent] = None


def get_default_agent() -> BuddyAgent:
    """Return the process-wide BuddyAgent, creating it on first use.

    Raises ValidationError (MISSING_API_KEY) when a credential is missing.
    """
    global _agent
    if _agent is None:
        settings.require_credentials()
        _agent = BuddyAgent(
            provider_client=create_provider(),
            search_client=create_search_client(),
        )
        logger.info(
            "Default agent ready",
            extra={"extra": {
                "models": list(settings.model_candidates),
                "max_tool_rounds": settings.max_tool_rounds,
            }},
        )
    return _agent


def reset_default_agent() -> None:
    global _agent
    _agent = None


def run_chat(user_input: str, thread_id: str, agent: Optional[BuddyAgent] = None) -> Dict[str, Any]:
    """Run one chat turn.

    Returns:
        dict with the thread id, the assistant message, the number of model
        calls and token usage.

    Raises:
        any buddy_ai.domain.exceptions error raised by the turn.
    """
    try:
        result = (agent or get_default_agent()).chat(user_input=user_input, thread_id=thread_id)
    except Exception as e:
        logger.error(f"Chat failed: {e}", extra={"extra": {
            "thread_id": thread_id,
            "error": str(e),
        }})
        raise
    return {
        "thread_id": result.thread_id,
        "message": result.content,
        "iterations": result.iterations,
        "forced_final": result.forced_final,
        "usage": result.usage,
    }


def get_thread_messages(thread_id: str, agent: Optional[BuddyAgent] = None) -> List[Dict[str, Any]]:
    """Return the stored messages of a thread (empty if unknown or expired)."""
    msgs = (agent or get_default_agent()).history(thread_id)
    return [
        {
            "role": m.role,
            "content": m.content,
            "tool_call_id": m.tool_call_id,
            "name": m.name,
            "tool_calls": [
                {"id": c.id, "name": c.name, "arguments": c.arguments}
                for c in (m.tool_calls or [])
            ],
        }
        for m in msgs
    ]
