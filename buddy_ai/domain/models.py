"""Provider-neutral chat data structures.

- ChatMessage: one conversation message (system/user/assistant/tool).
- ChatRequest: a complete request handed to a ProviderClient.
- ChatResult: the parsed provider response.

Provider adapters (such as GroqClient) depend only on these models and
convert between them and the vendor JSON.
"""

from dataclasses import dataclass, field
from typing import Literal, Optional, Any, Dict, List, TYPE_CHECKING

from buddy_ai.domain.exceptions import ApiError

if TYPE_CHECKING:
    # imported for type checking only, avoids a runtime import cycle
    from buddy_ai.tools.definitions import ToolCall, ToolDef


Role = Literal["system", "user", "assistant", "tool"]


@dataclass
class ChatMessage:
    """A single message, used for requests and responses alike.

    - content: text; may be None on assistant messages that only carry
      tool calls.
    - meta: local metadata (trace ids, model used...), never sent to the
      provider.
    - tool_calls: tool calls requested by an assistant message.
    - tool_call_id / name: set on role="tool" messages, linking the result
      back to the originating ToolCall.
    """

    role: Role
    content: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)
    tool_calls: Optional[List["ToolCall"]] = None
    tool_call_id: Optional[str] = None
    name: Optional[str] = None


@dataclass
class ChatRequest:
    """One chat completion request.

    ``model`` is the provider model id; the FallbackInvoker fills it in per
    candidate.
    """

    model: str
    messages: List[ChatMessage]
    temperature: float = 0.0
    max_tokens: Optional[int] = None
    tools: Optional[List["ToolDef"]] = None
    tool_choice: Literal["auto", "none", "required"] = "auto"


@dataclass
class ChatUsage:
    """Token accounting reported by the provider."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class ChatChoice:
    index: int
    message: ChatMessage
    finish_reason: Optional[str] = None


@dataclass
class ChatResult:
    """Final result of one chat call.

    - provider: provider name (e.g. "groq").
    - model: model id that produced the answer.
    - choices: one or more candidate answers.
    - usage: optional token statistics.
    - raw: raw response JSON, kept for debugging.
    """

    provider: str
    model: str
    choices: List[ChatChoice]
    usage: Optional[ChatUsage] = None
    raw: Optional[dict] = None

    @property
    def message(self) -> ChatMessage:
        """The first choice's message; raises ApiError when there is none."""
        if not self.choices:
            raise ApiError(code="EMPTY_COMPLETION", message=f"{self.provider}/{self.model} returned no choices", http_status=502)
        return self.choices[0].message
