import json
import logging

from buddy_ai.config.settings import settings
from buddy_ai.infrastructure.logging.logger import JsonFormatter, log_event


def _record(msg, extra):
    record = logging.LogRecord("buddy_ai", logging.INFO, __file__, 1, msg, None, None)
    record.extra = extra
    return record


def test_json_line_carries_extras(monkeypatch):
    monkeypatch.setattr(settings, "log_redact_content", False)
    line = JsonFormatter().format(_record("Calling model", {"trace_id": "tr-1", "model": "m1"}))
    payload = json.loads(line)
    assert payload["msg"] == "Calling model"
    assert payload["level"] == "INFO"
    assert payload["trace_id"] == "tr-1"
    assert payload["ts"].endswith("Z")


def test_redaction_covers_extras(monkeypatch):
    monkeypatch.setattr(settings, "log_redact_content", True)
    secret = "my home address is " + "x" * 200
    line = JsonFormatter().format(_record("m" * 100, {
        "tool_args": json.dumps({"query": secret}),
        "query": secret,
        "results": [{"title": secret, "score": 0.5}],
        "round": 3,
    }))
    payload = json.loads(line)
    assert len(payload["msg"]) == 64
    assert len(payload["tool_args"]) == 64
    assert len(payload["query"]) == 64
    assert len(payload["results"][0]["title"]) == 64
    assert payload["results"][0]["score"] == 0.5
    assert payload["round"] == 3


def test_log_event_merges_context(caplog):
    with caplog.at_level(logging.INFO, logger="buddy_ai"):
        log_event(logging.WARNING, "Model failed", {"trace_id": "tr-9", "thread_id": "t1"}, model="m2")
    record = caplog.records[-1]
    assert record.levelno == logging.WARNING
    assert record.extra == {"trace_id": "tr-9", "thread_id": "t1", "model": "m2"}
