from __future__ import annotations

import os
from typing import Literal, Optional

from pydantic import BaseModel

DEFAULT_ENDPOINT = "https://api.anthropic.com/v1/messages"
DEFAULT_API_VERSION = "2023-06-01"
DEFAULT_MAX_TOKENS = 4096
DEFAULT_TIMEOUT_SECONDS = 60.0

_DEFAULT_MODELS = {
    "messages": "claude-sonnet-4-5",
    "openai": "gpt-4o-mini",
}
_PROVIDER_KEY_VARS = {
    "messages": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}

Provider = Literal["messages", "openai"]


class Settings(BaseModel):
    """
    Gateway configuration.

    provider: "messages" (HTTP messages endpoint) or "openai" (chat completions SDK)
    endpoint: messages endpoint URL; ignored by the openai provider
    api_key: opaque credential forwarded to the endpoint
    model: model identifier sent with every request
    max_tokens: output token ceiling
    timeout: per-call deadline in seconds
    """
    provider: Provider = "messages"
    endpoint: str = DEFAULT_ENDPOINT
    api_key: Optional[str] = None
    model: str = _DEFAULT_MODELS["messages"]
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    api_version: str = DEFAULT_API_VERSION
    base_url: Optional[str] = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        provider = (os.environ.get("STORY_ANALYST_PROVIDER") or "messages").strip().lower()
        if provider not in _DEFAULT_MODELS:
            raise ValueError(
                f"Unknown STORY_ANALYST_PROVIDER '{provider}' (expected one of {sorted(_DEFAULT_MODELS)})."
            )

        api_key = os.environ.get("STORY_ANALYST_API_KEY") or os.environ.get(_PROVIDER_KEY_VARS[provider])
        return cls(
            provider=provider,
            endpoint=os.environ.get("STORY_ANALYST_ENDPOINT") or DEFAULT_ENDPOINT,
            api_key=api_key or None,
            model=os.environ.get("STORY_ANALYST_LLM_MODEL") or _DEFAULT_MODELS[provider],
            max_tokens=_env_int("STORY_ANALYST_MAX_TOKENS", DEFAULT_MAX_TOKENS),
            timeout=_env_float("STORY_ANALYST_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            api_version=os.environ.get("STORY_ANALYST_API_VERSION") or DEFAULT_API_VERSION,
            base_url=os.environ.get("OPENAI_BASE_URL") or None,
            log_level=(os.environ.get("STORY_ANALYST_LOG_LEVEL") or "WARNING").upper(),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        v = int(raw)
        return v if v > 0 else default
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        v = float(raw)
        return v if v > 0 else default
    except ValueError:
        return default
