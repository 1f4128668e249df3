"""Pytest configuration and fixtures for all tests."""

import json

import pytest

from provcat.core.config import CATALOG_URL_ENV, TIMEOUT_ENV
from provcat.utils.user_agent import PROVCAT_CLIENT_SOURCE_ENV


def _model(model_id: str, context: int, **extra) -> dict:
    entry = {
        "id": model_id,
        "name": model_id.upper(),
        "limit": {"context": context, "output": 4096},
        "cost": {"input": 1.0, "output": 2.0},
    }
    entry.update(extra)
    return entry


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep tests away from the real home directory and PROVCAT_* variables."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in (CATALOG_URL_ENV, TIMEOUT_ENV, PROVCAT_CLIENT_SOURCE_ENV):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def catalog_document() -> dict:
    """A small catalog shaped like https://models.dev/api.json."""
    return {
        "openai": {
            "id": "openai",
            "name": "OpenAI",
            "env": ["OPENAI_API_KEY"],
            "npm": "@ai-sdk/openai",
            "api": "https://api.openai.com/v1",
            "doc": "https://platform.openai.com/docs/models",
            "models": {
                "gpt-4o": _model("gpt-4o", 128_000, attachment=True),
                "gpt-4o-mini": _model("gpt-4o-mini", 128_000),
                "o3": _model("o3", 200_000, reasoning=True),
            },
        },
        "anthropic": {
            "id": "anthropic",
            "name": "Anthropic",
            "env": ["ANTHROPIC_API_KEY"],
            "models": {
                "claude-haiku": _model("claude-haiku", 100),
                "claude-opus": _model("claude-opus", 500),
                "claude-instant": _model("claude-instant", 50),
            },
        },
        "empty": {"id": "empty", "name": "Empty Provider", "models": {}},
    }


@pytest.fixture
def catalog_payload(catalog_document) -> bytes:
    return json.dumps(catalog_document).encode("utf-8")
