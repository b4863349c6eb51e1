import pytest

from shortest.utils import EnvResolver

ENV_NAMES = [
    "ANTHROPIC_API_KEY",
    "AZURE_API_KEY",
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_DEPLOYMENT",
    "AZURE_OPENAI_API_VERSION",
    "OLLAMA_BASE_URL",
    "MAILOSAUR_API_KEY",
    "MAILOSAUR_SERVER_ID",
]


@pytest.fixture
def clean_environ(monkeypatch):
    """Remove every variable the config resolver reads"""
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"SHORTEST_{name}", raising=False)
    return monkeypatch


@pytest.fixture
def empty_env():
    return EnvResolver({})


@pytest.fixture
def anthropic_env():
    return EnvResolver({"ANTHROPIC_API_KEY": "sk-1"})
