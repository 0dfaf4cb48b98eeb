"""Groq provider adapter.

Groq exposes the OpenAI-compatible chat/completions endpoint:
- URL: {base_url}/chat/completions
- Auth: Authorization: Bearer <api_key>

This module is the "vendor JSON <-> internal model" conversion layer:

1. take a provider-neutral ChatRequest;
2. build the chat/completions payload (messages, tools, tool_choice...);
3. send it, mapping transport/rate-limit/API failures to business errors;
4. parse the response into ChatResult / ChatMessage, tool calls included.
"""

import json

import httpx
from typing import Any, Dict, List

from buddy_ai.domain.models import (
    ChatRequest,
    ChatResult,
    ChatMessage,
    ChatChoice,
    ChatUsage,
)
from buddy_ai.domain.exceptions import NetworkError, ApiError, RateLimitError, ValidationError
from buddy_ai.providers.registry import GROQ_CONFIG, ModelConfig
from buddy_ai.tools.definitions import ToolDef, ToolCall


class GroqClient:
    """Groq chat completion client.

    One instance is built at start-up and reused for every call; it holds
    no per-request state.
    """

    name = "groq"

    def __init__(self, settings):
        # settings carries the base url, api key and timeout
        self._settings = settings

    def chat(self, req: ChatRequest) -> ChatResult:
        """Run one non-streaming chat completion call."""

        if not getattr(self._settings, "groq_api_key", None):
            raise ValidationError(code="MISSING_API_KEY", message="GROQ_API_KEY not set")
        model_cfg = GROQ_CONFIG.model_config(req.model)
        payload = self._build_payload(req, model_cfg)
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                base = getattr(self._settings, "groq_base_url", None) or GROQ_CONFIG.base_url
                resp = client.post(
                    f"{base}/chat/completions",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {self._settings.groq_api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.RequestError as e:
            # DNS failure, connect/read timeout...
            raise NetworkError(code="NETWORK_ERROR", message=str(e), model=req.model)
        if resp.status_code == 429:
            raise RateLimitError(code="RATE_LIMIT", message=f"Groq rate limit ({req.model})", http_status=429)
        if resp.status_code >= 400:
            raise ApiError(code="API_ERROR", message=resp.text, http_status=resp.status_code, model=req.model)
        data = resp.json()
        return self._parse_response(data, req)

    def _build_payload(self, req: ChatRequest, model_cfg: ModelConfig) -> dict:
        payload = {
            "model": model_cfg.provider_model,
            "messages": [_wire_message(m) for m in req.messages],
            "temperature": req.temperature,
            "max_tokens": req.max_tokens or model_cfg.max_tokens,
        }
        if req.tools:
            payload["tools"] = [_function_schema(t) for t in req.tools]
            payload["tool_choice"] = req.tool_choice
        return payload

    def _parse_response(self, data: dict, req: ChatRequest) -> ChatResult:
        usage = data.get("usage") or {}
        return ChatResult(
            provider=self.name,
            model=data.get("model") or req.model,
            choices=[
                ChatChoice(
                    index=raw_choice.get("index", pos),
                    message=_parse_message(raw_choice.get("message") or {}),
                    finish_reason=raw_choice.get("finish_reason"),
                )
                for pos, raw_choice in enumerate(data.get("choices", []))
            ],
            usage=ChatUsage(
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
            ),
            raw=data,
        )


def _function_schema(tool: ToolDef) -> Dict[str, Any]:
    """ToolDef -> OpenAI-style ``{"type": "function", ...}`` entry."""
    properties = {
        key: {**(p.schema or {"type": "string"}), **({"description": p.description} if p.description else {})}
        for key, p in tool.params.items()
    }
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": [key for key, p in tool.params.items() if p.required],
            },
        },
    }


def _parse_message(raw_msg: Dict[str, Any]) -> ChatMessage:
    """Vendor message -> ChatMessage.

    Tool call arguments stay the raw string the model produced; the
    ToolExecutor owns parsing and validation.
    """
    calls: List[ToolCall] = []
    for pos, raw_call in enumerate(raw_msg.get("tool_calls") or []):
        fn = raw_call.get("function") or {}
        calls.append(ToolCall(
            id=raw_call.get("id") or f"tool_call_{pos}",
            name=fn.get("name") or raw_call.get("name") or "",
            arguments=_raw_arguments(fn.get("arguments")),
        ))
    return ChatMessage(
        role=raw_msg.get("role") or "assistant",
        content=raw_msg.get("content"),
        tool_calls=calls or None,
        tool_call_id=raw_msg.get("tool_call_id"),
    )


def _raw_arguments(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    # some gateways hand back an already decoded object
    return json.dumps(value, ensure_ascii=False)


def _wire_message(message: ChatMessage) -> Dict[str, Any]:
    """ChatMessage -> chat/completions message; ``meta`` is never sent."""
    out: Dict[str, Any] = {"role": message.role}
    if message.content is not None or not message.tool_calls:
        out["content"] = message.content or ""
    if message.tool_calls:
        out["tool_calls"] = [
            {"id": c.id, "type": "function", "function": {"name": c.name, "arguments": c.arguments}}
            for c in message.tool_calls
        ]
    if message.tool_call_id:
        out["tool_call_id"] = message.tool_call_id
    if message.role == "tool" and message.name:
        out["name"] = message.name
    return out
