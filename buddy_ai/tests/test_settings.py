from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from buddy_ai.config.settings import DEFAULT_MODEL_CANDIDATES, Settings
from buddy_ai.domain.exceptions import ValidationError
from buddy_ai.prompts import load_system_prompt
from buddy_ai.providers import create_provider, create_search_client
from buddy_ai.providers.groq_client import GroqClient
from buddy_ai.providers.registry import GROQ_CONFIG, get_provider_config
from buddy_ai.providers.tavily_client import TavilyClient


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MAX_TOOL_ROUNDS", raising=False)
    monkeypatch.delenv("MODEL_CANDIDATES", raising=False)
    s = Settings(groq_api_key=None, tavily_api_key=None)
    assert s.max_tool_rounds == 10
    assert s.session_ttl_seconds == 86400
    assert s.model_candidates == DEFAULT_MODEL_CANDIDATES
    assert "http://localhost:5173" in s.cors_allow_origins


def test_env_overrides(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MAX_TOOL_ROUNDS", "4")
    monkeypatch.setenv("MODEL_CANDIDATES", '["llama-3.1-8b-instant"]')
    s = Settings()
    assert s.max_tool_rounds == 4
    assert s.model_candidates == ["llama-3.1-8b-instant"]


def test_yaml_config_file(monkeypatch, tmp_path):
    cfg = tmp_path / "buddy.yaml"
    cfg.write_text("max_tool_rounds: 7\nsearch_depth: advanced\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("MAX_TOOL_ROUNDS", raising=False)
    monkeypatch.delenv("SEARCH_DEPTH", raising=False)
    monkeypatch.setenv("BUDDY_CONFIG_FILE", str(cfg))
    s = Settings()
    assert s.max_tool_rounds == 7
    assert s.search_depth == "advanced"


def test_temperature_is_not_a_setting(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TEMPERATURE", "0.9")
    s = Settings()
    assert not hasattr(s, "temperature")


def test_invalid_values():
    with pytest.raises(PydanticValidationError):
        Settings(model_candidates=["  "])
    with pytest.raises(PydanticValidationError):
        Settings(search_depth="deep")
    with pytest.raises(PydanticValidationError):
        Settings(groq_api_key="short")


def test_require_credentials():
    s = Settings(groq_api_key="gsk_0123456789", tavily_api_key=None)
    with pytest.raises(ValidationError) as exc_info:
        s.require_credentials()
    assert exc_info.value.code == "MISSING_API_KEY"
    assert exc_info.value.extra["missing"] == ["TAVILY_API_KEY"]

    Settings(groq_api_key="gsk_0123456789", tavily_api_key="tvly-0123456789").require_credentials()


def test_system_prompt_has_date_and_tool_rules():
    now = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
    text = load_system_prompt("en", now=now)
    assert "Sat, 01 Mar 2025 12:00:00 GMT" in text
    assert "{current_datetime}" not in text
    assert "webSearch" in text


def test_unknown_locale():
    with pytest.raises(FileNotFoundError):
        load_system_prompt("xx")


def test_create_clients():
    assert isinstance(create_provider(), GroqClient)
    assert isinstance(create_provider("GROQ"), GroqClient)
    assert isinstance(create_search_client(), TavilyClient)
    with pytest.raises(KeyError):
        create_provider("openai")


def test_registry_defaults_unknown_models():
    assert get_provider_config("groq") is GROQ_CONFIG
    cfg = GROQ_CONFIG.model_config("some-new-model")
    assert cfg.provider_model == "some-new-model"
    assert cfg.max_tokens == GROQ_CONFIG.default_max_tokens
