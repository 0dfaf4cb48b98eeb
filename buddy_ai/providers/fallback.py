"""Fail-over across an ordered list of models.

``FallbackInvoker`` knows nothing about HTTP: it takes the candidate list and
a single-attempt callable, tries each candidate exactly once, and returns the
first success. A completion without choices counts as a failed attempt.
When every candidate fails it raises AllModelsFailedError wrapping the last
error.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from buddy_ai.domain.exceptions import AllModelsFailedError, ApiError, ValidationError
from buddy_ai.domain.models import ChatMessage, ChatRequest, ChatResult
from buddy_ai.infrastructure.logging.logger import log_event
from buddy_ai.providers.base import ProviderClient
from buddy_ai.tools.definitions import ToolDef


AttemptFunc = Callable[[str, ChatRequest], ChatResult]

# fixed, not read from settings
TEMPERATURE = 0.0


class FallbackInvoker:
    def __init__(
        self,
        candidates: Sequence[str],
        attempt: AttemptFunc,
    ):
        if not candidates:
            raise ValidationError(code="NO_MODEL_CANDIDATES", message="At least one model candidate is required")
        self._candidates: Tuple[str, ...] = tuple(candidates)
        self._attempt = attempt

    @classmethod
    def for_provider(
        cls,
        provider_client: ProviderClient,
        candidates: Sequence[str],
    ) -> "FallbackInvoker":
        """Build an invoker whose attempt is ``provider_client.chat``."""

        def _attempt(model: str, req: ChatRequest) -> ChatResult:
            return provider_client.chat(req)

        return cls(candidates, _attempt)

    def complete(
        self,
        messages: List[ChatMessage],
        tools: Optional[List[ToolDef]] = None,
        log_ctx: Optional[Dict[str, Any]] = None,
    ) -> ChatResult:
        ctx = log_ctx or {}
        last_error: Optional[Exception] = None
        for model in self._candidates:
            req = ChatRequest(
                model=model,
                messages=messages,
                temperature=TEMPERATURE,
                tools=tools or None,
                tool_choice="auto",
            )
            log_event(logging.INFO, "Calling model", ctx, model=model, message_count=len(messages))
            try:
                result = self._attempt(model, req)
                if not result.choices:
                    raise ApiError(
                        code="EMPTY_COMPLETION",
                        message=f"Model {model} returned no choices",
                        http_status=502,
                        model=model,
                    )
            except Exception as e:
                log_event(
                    logging.WARNING,
                    "Model failed",
                    ctx,
                    model=model,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                last_error = e
                continue
            return result

        log_event(logging.ERROR, "All models failed", ctx, tried=list(self._candidates), error=str(last_error))
        raise AllModelsFailedError(list(self._candidates), last_error)
