import pytest

from buddy_ai.domain.exceptions import AllModelsFailedError, ApiError, NetworkError, ValidationError
from buddy_ai.domain.models import ChatChoice, ChatMessage, ChatResult
from buddy_ai.providers.fallback import FallbackInvoker
from buddy_ai.tools.executor import default_tool_defs


def _ok(model):
    return ChatResult(provider="fake", model=model, choices=[ChatChoice(index=0, message=ChatMessage(role="assistant", content=model))])


def test_first_success_stops_iteration():
    tried = []

    def attempt(model, req):
        tried.append(model)
        return _ok(model)

    invoker = FallbackInvoker(["m1", "m2", "m3"], attempt)
    result = invoker.complete([ChatMessage(role="user", content="hi")])
    assert result.model == "m1"
    assert tried == ["m1"]


def test_falls_over_to_next_candidate():
    tried = []

    def attempt(model, req):
        tried.append(model)
        if model != "m3":
            raise NetworkError(code="NETWORK_ERROR", message=f"{model} unreachable")
        return _ok(model)

    result = FallbackInvoker(["m1", "m2", "m3"], attempt).complete([ChatMessage(role="user", content="hi")])
    assert result.model == "m3"
    assert tried == ["m1", "m2", "m3"]


def test_all_candidates_fail_wraps_last_error():
    tried = []

    def attempt(model, req):
        tried.append(model)
        raise ApiError(code="API_ERROR", message=f"boom from {model}", http_status=500)

    with pytest.raises(AllModelsFailedError) as exc_info:
        FallbackInvoker(["m1", "m2"], attempt).complete([ChatMessage(role="user", content="hi")])

    err = exc_info.value
    assert tried == ["m1", "m2"]
    assert "boom from m2" in str(err)
    assert err.last_error.message == "boom from m2"
    assert err.tried == ["m1", "m2"]


def test_request_is_deterministic_with_manifest():
    seen = []

    def attempt(model, req):
        seen.append(req)
        return _ok(model)

    tools = default_tool_defs()
    FallbackInvoker(["m1"], attempt).complete([ChatMessage(role="user", content="hi")], tools=tools)
    req = seen[0]
    assert req.model == "m1"
    assert req.temperature == 0.0
    assert req.tool_choice == "auto"
    assert [t.name for t in req.tools] == ["webSearch"]


def test_for_provider_uses_provider_chat():
    class Provider:
        name = "fake"

        def __init__(self):
            self.models = []

        def chat(self, req):
            self.models.append(req.model)
            if req.model == "bad":
                raise RuntimeError("bad model")
            return _ok(req.model)

    provider = Provider()
    result = FallbackInvoker.for_provider(provider, ["bad", "good"]).complete([ChatMessage(role="user", content="x")])
    assert result.model == "good"
    assert provider.models == ["bad", "good"]


def test_completion_without_choices_falls_over():
    tried = []

    def attempt(model, req):
        tried.append(model)
        if model == "m1":
            return ChatResult(provider="fake", model=model, choices=[])
        return _ok(model)

    result = FallbackInvoker(["m1", "m2"], attempt).complete([ChatMessage(role="user", content="hi")])
    assert tried == ["m1", "m2"]
    assert result.message.content == "m2"


def test_only_empty_completions_fail_the_call():
    def attempt(model, req):
        return ChatResult(provider="fake", model=model, choices=[])

    with pytest.raises(AllModelsFailedError) as exc_info:
        FallbackInvoker(["m1"], attempt).complete([ChatMessage(role="user", content="hi")])
    assert exc_info.value.last_error.code == "EMPTY_COMPLETION"


def test_result_message_requires_a_choice():
    with pytest.raises(ApiError) as exc_info:
        ChatResult(provider="fake", model="m1", choices=[]).message
    assert exc_info.value.code == "EMPTY_COMPLETION"


def test_empty_candidates_rejected():
    with pytest.raises(ValidationError):
        FallbackInvoker([], lambda model, req: _ok(model))
