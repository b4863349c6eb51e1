import logging
from typing import Any, Callable, Dict, List, Optional

import ollama
from anthropic import AsyncAnthropic
from openai import AsyncAzureOpenAI

from .errors import UnsupportedProviderError
from .models import PROVIDERS, AIConfig, AnthropicAIConfig, AzureAIConfig, OllamaAIConfig

logger = logging.getLogger(__name__)


class LLMInterface:
    """Base class for LLM providers"""

    provider = ""

    def __init__(self, client: Any, model: str):
        self.client = client
        self.model = model

    async def get_completion(self, messages: List[Dict[str, str]]) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.model!r})"


class AnthropicInterface(LLMInterface):
    provider = "anthropic"

    def __init__(self, api_key: str, model: str, max_tokens: int = 1024):
        super().__init__(AsyncAnthropic(api_key=api_key), model)
        self.max_tokens = max_tokens

    async def get_completion(self, messages: List[Dict[str, str]]) -> str:
        # Anthropic takes the system prompt separately from the chat turns
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        chat = [m for m in messages if m["role"] != "system"]

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "temperature": 0,
            "messages": chat,
        }
        if system:
            kwargs["system"] = system

        response = await self.client.messages.create(**kwargs)
        return response.content[0].text


class AzureOpenAIInterface(LLMInterface):
    provider = "azure"

    def __init__(self, api_key: str, endpoint: str, deployment: str, api_version: str):
        client = AsyncAzureOpenAI(
            api_key=api_key,
            azure_endpoint=endpoint,
            azure_deployment=deployment,
            api_version=api_version,
        )
        super().__init__(client, deployment)
        self.endpoint = endpoint

    async def get_completion(self, messages: List[Dict[str, str]]) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=0
        )
        return response.choices[0].message.content


class OllamaInterface(LLMInterface):
    provider = "ollama"

    def __init__(self, model: str, host: Optional[str] = None):
        super().__init__(ollama.AsyncClient(host=host), model)
        self.host = host

    async def get_completion(self, messages: List[Dict[str, str]]) -> str:
        response = await self.client.chat(model=self.model, messages=messages)
        return response["message"]["content"]


def _create_anthropic(config: AnthropicAIConfig) -> LLMInterface:
    return AnthropicInterface(api_key=config.api_key, model=config.model)


def _create_azure(config: AzureAIConfig) -> LLMInterface:
    missing = [
        name
        for name, value in (("endpoint", config.endpoint), ("deployment", config.deployment))
        if not value
    ]
    if missing:
        raise UnsupportedProviderError(
            "Azure OpenAI requires endpoint and deployment configuration "
            f"(missing: {', '.join(missing)}).",
            provider=config.provider,
        )
    return AzureOpenAIInterface(
        api_key=config.api_key,
        endpoint=config.endpoint,
        deployment=config.deployment,
        api_version=config.api_version,
    )


def _create_ollama(config: OllamaAIConfig) -> LLMInterface:
    return OllamaInterface(model=config.model, host=config.ollama_base_url)


_PROVIDER_FACTORIES: Dict[str, Callable[[Any], LLMInterface]] = {
    "anthropic": _create_anthropic,
    "azure": _create_azure,
    "ollama": _create_ollama,
}

if set(_PROVIDER_FACTORIES) != set(PROVIDERS):
    raise RuntimeError("every AI provider needs a factory")


def create_provider(ai_config: AIConfig) -> LLMInterface:
    """Create the LLM client for a resolved AI config.

    No network calls are made here, the SDK clients connect lazily.
    """
    provider = getattr(ai_config, "provider", None)
    factory = _PROVIDER_FACTORIES.get(provider)
    if factory is None:
        raise UnsupportedProviderError(f"{provider} is not supported.", provider=provider)

    llm = factory(ai_config)
    logger.debug("Created %s client for model %s", provider, llm.model)
    return llm
