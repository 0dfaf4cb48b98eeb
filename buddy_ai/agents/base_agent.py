"""Agent engine.

Loads the thread's conversation, drives the model/tool loop and persists the
conversation once the model produces a plain answer.

Loop states:
    AWAITING_MODEL -> DISPATCHING_TOOLS -> AWAITING_MODEL ... -> DONE
Any tool or model failure ends the turn in ABORTED and propagates; nothing
is written to the store in that case.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4
import logging
import time

from buddy_ai.domain.conversation import Conversation, ConversationStore
from buddy_ai.domain.exceptions import ValidationError
from buddy_ai.domain.models import ChatMessage, ChatResult, ChatUsage
from buddy_ai.infrastructure.logging.logger import log_event
from buddy_ai.providers.fallback import FallbackInvoker
from buddy_ai.tools.definitions import ToolDef
from buddy_ai.tools.executor import ToolExecutor


CANNED_ANSWER = "I could not find the result, please try again"


class LoopState(str, Enum):
    AWAITING_MODEL = "awaiting_model"
    DISPATCHING_TOOLS = "dispatching_tools"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class AgentConfig:
    max_tool_rounds: int = 10  # model calls allowed per turn
    canned_answer: str = CANNED_ANSWER


@dataclass
class TurnResult:
    thread_id: str
    content: str
    state: LoopState
    iterations: int
    forced_final: bool = False
    messages: Conversation = field(default_factory=list)
    usage: Dict[str, Any] = field(default_factory=dict)


class AgentEngine:
    def __init__(
        self,
        store: ConversationStore,
        invoker: FallbackInvoker,
        tool_executor: ToolExecutor,
        tool_defs: List[ToolDef],
        system_prompt: Callable[[], str],
        config: Optional[AgentConfig] = None,
    ):
        self._store = store
        self._invoker = invoker
        self._tool_executor = tool_executor
        self._tool_defs = tool_defs
        self._system_prompt = system_prompt
        self._config = config or AgentConfig()
        if self._config.max_tool_rounds < 1:
            raise ValidationError(code="INVALID_CONFIG", message="max_tool_rounds must be >= 1")

    def run_step(self, thread_id: str, user_input: str) -> TurnResult:
        """Run one user turn on ``thread_id`` and return the final answer.

        Raises MalformedToolArguments, UnknownTool, ToolExecutionFailed or
        AllModelsFailedError; the stored conversation is left untouched
        when that happens.
        """
        if not thread_id:
            raise ValidationError(code="VALIDATION_ERROR", message="thread_id is required")
        start_time = time.time()
        log_ctx: Dict[str, Any] = {
            "trace_id": f"tr-{uuid4().hex}",
            "thread_id": thread_id,
        }

        messages = self._load_conversation(thread_id, log_ctx)
        messages.append(ChatMessage(role="user", content=user_input))

        state = LoopState.AWAITING_MODEL
        try:
            result = self._run_loop(thread_id, messages, log_ctx)
        except Exception as e:
            state = LoopState.ABORTED
            log_event(
                logging.ERROR,
                "Turn aborted",
                log_ctx,
                state=state.value,
                error=str(e),
                error_type=type(e).__name__,
                elapsed_seconds=round(time.time() - start_time, 2),
            )
            raise

        self._store.put(thread_id, result.messages)
        log_event(
            logging.INFO,
            "Completed turn",
            log_ctx,
            state=result.state.value,
            iterations=result.iterations,
            forced_final=result.forced_final,
            stored_messages=len(result.messages),
            elapsed_seconds=round(time.time() - start_time, 2),
        )
        return result

    def _load_conversation(self, thread_id: str, log_ctx: Dict[str, Any]) -> Conversation:
        stored = self._store.get(thread_id)
        if stored:
            return list(stored)
        log_event(logging.INFO, "Seeding new conversation", log_ctx)
        return [ChatMessage(role="system", content=self._system_prompt())]

    def _run_loop(self, thread_id: str, messages: Conversation, log_ctx: Dict[str, Any]) -> TurnResult:
        """Model/tool loop.

        1. call the model (with fallback across candidates);
        2. no tool calls: the reply is the answer;
        3. otherwise execute every call in order, append one tool message
           per call, and go back to 1;
        4. stop with the canned answer once max_tool_rounds model calls
           produced no plain answer.
        """
        max_rounds = self._config.max_tool_rounds
        usage: Dict[str, Any] = {}

        for round_num in range(1, max_rounds + 1):
            log_event(
                logging.INFO,
                "Awaiting model",
                log_ctx,
                state=LoopState.AWAITING_MODEL.value,
                round=round_num,
                max_rounds=max_rounds,
            )
            result: ChatResult = self._invoker.complete(messages, tools=self._tool_defs, log_ctx=log_ctx)
            usage = self._merge_usage(usage, result.usage)
            assistant_msg = result.message
            assistant_msg.meta = {**assistant_msg.meta, "model": result.model}
            messages.append(assistant_msg)

            if not assistant_msg.tool_calls:
                return TurnResult(
                    thread_id=thread_id,
                    content=assistant_msg.content or "",
                    state=LoopState.DONE,
                    iterations=round_num,
                    messages=messages,
                    usage=usage,
                )

            log_event(
                logging.INFO,
                "Dispatching tools",
                log_ctx,
                state=LoopState.DISPATCHING_TOOLS.value,
                call_count=len(assistant_msg.tool_calls),
            )
            for tool_call in assistant_msg.tool_calls:
                log_event(
                    logging.INFO,
                    "Tool call received",
                    log_ctx,
                    tool_name=tool_call.name,
                    tool_call_id=tool_call.id,
                    tool_args=tool_call.arguments,
                )
                tool_result = self._tool_executor.run_call(tool_call)
                log_event(
                    logging.INFO,
                    "Tool execution finished",
                    log_ctx,
                    tool_call_id=tool_call.id,
                    result_preview=tool_result.content[:200],
                )
                messages.append(
                    ChatMessage(
                        role="tool",
                        content=tool_result.content,
                        tool_call_id=tool_result.call_id,
                        name=tool_result.name,
                    )
                )

        log_event(logging.WARNING, "Reached max tool rounds", log_ctx, max_rounds=max_rounds)
        messages.append(
            ChatMessage(role="assistant", content=self._config.canned_answer, meta={"forced_final": True})
        )
        return TurnResult(
            thread_id=thread_id,
            content=self._config.canned_answer,
            state=LoopState.DONE,
            iterations=max_rounds,
            forced_final=True,
            messages=messages,
            usage=usage,
        )

    @staticmethod
    def _merge_usage(total: Dict[str, Any], usage: Optional[ChatUsage]) -> Dict[str, Any]:
        if not usage:
            return total
        return {
            "prompt_tokens": total.get("prompt_tokens", 0) + usage.prompt_tokens,
            "completion_tokens": total.get("completion_tokens", 0) + usage.completion_tokens,
            "total_tokens": total.get("total_tokens", 0) + usage.total_tokens,
        }
