"""Tests for service configuration."""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from core.config import AIConfig, load_config
from core.errors import ConfigError


def test_load_config_from_env(monkeypatch):
    monkeypatch.setenv("QUIZ_AI_API_KEY", "sk-abc")
    monkeypatch.setenv("QUIZ_AI_PROVIDER", "Groq")
    monkeypatch.setenv("QUIZ_AI_MODEL", "deepseek-ai/DeepSeek-R1")
    monkeypatch.setenv("QUIZ_CHUNK_SIZE", "800")
    monkeypatch.delenv("QUIZ_AI_TIMEOUT", raising=False)
    config = load_config()
    assert config.api_key == "sk-abc"
    assert config.provider == "groq"
    assert config.chunk_size == 800
    assert config.is_reasoning_model
    assert config.request_timeout == 600.0


def test_explicit_timeout_wins():
    assert AIConfig(timeout=30).request_timeout == 30
    assert AIConfig().request_timeout == 180.0


def test_placeholder_key_is_not_configured():
    config = AIConfig(api_key="YOUR_API_KEY_HERE")
    assert config.describe() == {
        "provider": "siliconflow",
        "model": "Qwen/Qwen2.5-Coder-7B-Instruct",
        "configured": False,
    }
    with pytest.raises(ConfigError):
        config.require_api_key()


def test_non_numeric_timeout_names_the_variable(monkeypatch):
    monkeypatch.setenv("QUIZ_AI_TIMEOUT", "soon")
    monkeypatch.delenv("QUIZ_CHUNK_SIZE", raising=False)
    with pytest.raises(ConfigError, match="QUIZ_AI_TIMEOUT"):
        load_config()


def test_non_numeric_chunk_size_names_the_variable(monkeypatch):
    monkeypatch.delenv("QUIZ_AI_TIMEOUT", raising=False)
    monkeypatch.setenv("QUIZ_CHUNK_SIZE", "big")
    with pytest.raises(ConfigError, match="QUIZ_CHUNK_SIZE"):
        load_config()
