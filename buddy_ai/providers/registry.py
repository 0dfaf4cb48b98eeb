"""Provider and model configuration.

Known models carry their own token limits. The ordered candidate list the
FallbackInvoker walks through is configuration (``settings.model_candidates``).
"""

from dataclasses import dataclass
from typing import Dict, Mapping


@dataclass
class ModelConfig:
    """Configuration of a single model."""

    provider_model: str
    max_tokens: int


@dataclass
class ProviderConfig:
    """Configuration of one provider."""

    name: str
    base_url: str
    models: Dict[str, ModelConfig]
    default_max_tokens: int = 4096

    def model_config(self, model_id: str) -> ModelConfig:
        """Return the config for ``model_id``, or a default for unknown ids."""
        cfg = self.models.get(model_id)
        if cfg is not None:
            return cfg
        return ModelConfig(provider_model=model_id, max_tokens=self.default_max_tokens)


GROQ_CONFIG = ProviderConfig(
    name="groq",
    base_url="https://api.groq.com/openai/v1",
    models={
        "meta-llama/llama-4-maverick-17b-128e-instruct": ModelConfig(
            provider_model="meta-llama/llama-4-maverick-17b-128e-instruct",
            max_tokens=8192,
        ),
        "llama-3.1-70b-versatile": ModelConfig(
            provider_model="llama-3.1-70b-versatile",
            max_tokens=8000,
        ),
        "meta-llama/llama-4-scout-17b-16e-instruct": ModelConfig(
            provider_model="meta-llama/llama-4-scout-17b-16e-instruct",
            max_tokens=8192,
        ),
        "llama-3.1-8b-instant": ModelConfig(
            provider_model="llama-3.1-8b-instant",
            max_tokens=8000,
        ),
        "llama-3.3-70b-versatile": ModelConfig(
            provider_model="llama-3.3-70b-versatile",
            max_tokens=8000,
        ),
    },
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "groq": GROQ_CONFIG,
}


def get_provider_config(name: str) -> ProviderConfig:
    """Look up a ProviderConfig by name, case-insensitively."""

    key = name.lower()
    for k, cfg in PROVIDER_REGISTRY.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")
