"""
Settings for the text-completion service, loaded from the environment
(or a .env file) into an immutable value that callers pass around.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from core.errors import ConfigError

load_dotenv()

DEFAULT_PROVIDER = "siliconflow"
DEFAULT_BASE_URL = "https://api.siliconflow.cn/v1"
DEFAULT_MODEL = "Qwen/Qwen2.5-Coder-7B-Instruct"
DEFAULT_CHUNK_SIZE = 1500

# Reasoning models think for minutes before answering
REASONING_TIMEOUT = 600.0
STANDARD_TIMEOUT = 180.0

_PLACEHOLDER_KEYS = {"", "YOUR_API_KEY_HERE", "sk-your-api-key-here"}


@dataclass(frozen=True)
class AIConfig:
    api_key: str = ""
    provider: str = DEFAULT_PROVIDER
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout: Optional[float] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    @property
    def endpoint(self) -> str:
        return self.base_url.rstrip("/") + "/chat/completions"

    @property
    def is_reasoning_model(self) -> bool:
        return "R1" in self.model or "r1" in self.model

    @property
    def request_timeout(self) -> float:
        if self.timeout is not None:
            return self.timeout
        return REASONING_TIMEOUT if self.is_reasoning_model else STANDARD_TIMEOUT

    @property
    def configured(self) -> bool:
        return self.api_key.strip() not in _PLACEHOLDER_KEYS

    def require_api_key(self) -> None:
        if not self.configured:
            raise ConfigError(
                "QUIZ_AI_API_KEY not set. Please add it to your .env file."
            )

    def describe(self) -> dict:
        return {"provider": self.provider, "model": self.model, "configured": self.configured}


def _env_number(name: str, kind):
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        return kind(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def load_config() -> AIConfig:
    api_key = (
        os.environ.get("QUIZ_AI_API_KEY")
        or os.environ.get("SILICONFLOW_API_KEY")
        or os.environ.get("GROQ_API_KEY")
        or ""
    )
    timeout = _env_number("QUIZ_AI_TIMEOUT", float)
    chunk_size = _env_number("QUIZ_CHUNK_SIZE", int)
    return AIConfig(
        api_key=api_key,
        provider=os.environ.get("QUIZ_AI_PROVIDER", DEFAULT_PROVIDER).lower(),
        base_url=os.environ.get("QUIZ_AI_BASE_URL", DEFAULT_BASE_URL),
        model=os.environ.get("QUIZ_AI_MODEL", DEFAULT_MODEL),
        timeout=timeout,
        chunk_size=chunk_size or DEFAULT_CHUNK_SIZE,
    )
