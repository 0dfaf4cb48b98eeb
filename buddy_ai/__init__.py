"""Buddy AI top-level package.

A conversational assistant that relays user messages to a hosted LLM,
runs a web-search tool when the model asks for one, and remembers each
thread's conversation for a limited time.
"""

from buddy_ai.agents.buddy_agent import BuddyAgent
from buddy_ai.agents.base_agent import AgentEngine, TurnResult

__all__ = ["AgentEngine", "BuddyAgent", "TurnResult"]
