"""
LLM connection settings, read once from the UIFORGE_LLM_* environment.

    UIFORGE_LLM_PROVIDER=anthropic/claude-3-haiku-20240307
    UIFORGE_LLM_API_TOKEN=env:MY_KEY   # optional, defaults to ANTHROPIC_API_KEY
"""

import os
from dataclasses import dataclass
from typing import Optional

# provider -> (endpoint, env var holding its key, model used when none is named)
PROVIDERS = {
    "openai": ("https://api.openai.com/v1", "OPENAI_API_KEY", "gpt-4o-mini"),
    "anthropic": ("https://api.anthropic.com", "ANTHROPIC_API_KEY", "claude-3-haiku-20240307"),
    "groq": ("https://api.groq.com/openai/v1", "GROQ_API_KEY", "llama3-70b-8192"),
    "deepseek": ("https://api.deepseek.com/v1", "DEEPSEEK_API_KEY", "deepseek-chat"),
    "ollama": ("http://localhost:11434", None, "qwen2.5:7b"),
}

DEFAULT_PROVIDER = "openai/gpt-4o-mini"


@dataclass(frozen=True)
class LLMConfig:
    provider: str
    model: str
    base_url: str
    api_token: Optional[str] = None
    timeout: int = 300

    @classmethod
    def from_env(cls) -> "LLMConfig":
        """
        Build the settings for the instruction and refinement calls.

        Raises:
            ValueError: unknown provider, or a hosted provider without a key
        """
        name, _, model = os.getenv("UIFORGE_LLM_PROVIDER", DEFAULT_PROVIDER).partition("/")
        name = name.strip().lower()
        if name not in PROVIDERS:
            raise ValueError(f"Unknown LLM provider '{name}', expected one of: {', '.join(sorted(PROVIDERS))}")
        base_url, key_var, default_model = PROVIDERS[name]

        token = os.getenv("UIFORGE_LLM_API_TOKEN") or (os.getenv(key_var) if key_var else None)
        if token and token.startswith("env:"):
            token = os.getenv(token[4:].strip())
        if key_var and not token:
            raise ValueError(f"No API token for {name}: set UIFORGE_LLM_API_TOKEN or {key_var}")

        return cls(
            provider=name,
            model=model.strip() or default_model,
            base_url=(os.getenv("UIFORGE_LLM_BASE_URL") or base_url).rstrip("/"),
            api_token=token,
            timeout=int(os.getenv("UIFORGE_LLM_TIMEOUT", "300")),
        )
