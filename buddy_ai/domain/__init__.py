"""Domain models and protocols.

- models: ChatMessage / ChatRequest / ChatResult shared by all providers.
- conversation: the Conversation type and the ConversationStore protocol.
- exceptions: business error types.
"""
