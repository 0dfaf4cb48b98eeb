"""Configuration management.

Settings are loaded from init arguments, environment variables, a ``.env``
file and finally ``config.yaml`` (first match wins).
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from buddy_ai.domain.exceptions import ValidationError


DEFAULT_MODEL_CANDIDATES = [
    "meta-llama/llama-4-maverick-17b-128e-instruct",
    "llama-3.1-70b-versatile",
    "meta-llama/llama-4-scout-17b-16e-instruct",
    "llama-3.1-8b-instant",
]

DEFAULT_CORS_ORIGINS = [
    "https://buddy-ai-frontend.vercel.app",
    "https://kajal-buddy-ai.vercel.app",
    "http://localhost:5173",
    "http://localhost:5174",
]


def _load_config_from_yaml() -> Dict[str, Any]:
    """Load config.yaml if one exists."""
    candidates = []
    explicit = os.getenv("BUDDY_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """Process-wide settings."""

    # ---- model provider (Groq, OpenAI-compatible) ----
    groq_api_key: Optional[str] = Field(default=None, description="Groq API key")
    groq_base_url: str = Field(
        default="https://api.groq.com/openai/v1",
        description="Groq API base URL",
    )
    model_candidates: List[str] = Field(
        default_factory=lambda: list(DEFAULT_MODEL_CANDIDATES),
        description="Model ids tried in order, most preferred first",
    )

    # ---- search provider (Tavily) ----
    tavily_api_key: Optional[str] = Field(default=None, description="Tavily API key")
    tavily_base_url: str = Field(default="https://api.tavily.com", description="Tavily API base URL")
    search_max_results: int = Field(default=5, ge=1, le=20, description="Results per search")
    search_depth: str = Field(default="basic", description="Tavily search depth: basic or advanced")

    # ---- orchestration ----
    http_timeout: float = Field(default=30.0, ge=1.0, description="Per-request HTTP timeout (seconds)")
    max_tool_rounds: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum model calls per turn before giving up",
    )
    session_ttl_seconds: int = Field(default=60 * 60 * 24, ge=1, description="Conversation time-to-live")
    locale: str = Field(default="en", description="System prompt locale")

    # ---- HTTP / logging ----
    cors_allow_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_dir: str = Field(default="logs", description="Log directory")
    log_redact_content: bool = Field(default=False, description="Truncate logged messages")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=("settings_",),
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("groq_api_key", "tavily_api_key")
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v and len(v) < 10:
            raise ValueError("API key seems too short")
        return v

    @field_validator("model_candidates")
    @classmethod
    def validate_candidates(cls, v: List[str]) -> List[str]:
        cleaned = [m.strip() for m in v if m and m.strip()]
        if not cleaned:
            raise ValueError("model_candidates must not be empty")
        return cleaned

    @field_validator("search_depth")
    @classmethod
    def validate_search_depth(cls, v: str) -> str:
        if v not in {"basic", "advanced"}:
            raise ValueError("search_depth must be 'basic' or 'advanced'")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )

    def require_credentials(self) -> None:
        """Fail fast when a provider credential is missing."""
        missing = []
        if not self.groq_api_key:
            missing.append("GROQ_API_KEY")
        if not self.tavily_api_key:
            missing.append("TAVILY_API_KEY")
        if missing:
            raise ValidationError(
                code="MISSING_API_KEY",
                message=f"Missing credentials: {', '.join(missing)}",
                missing=missing,
            )


settings = Settings()
