from typing import Annotated, Any, Dict, Literal, Optional, Union, get_args

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

# Supported Anthropic models, the first one is the default.
AnthropicModel = Literal[
    "claude-3-5-sonnet-20241022",
    "claude-3-5-sonnet-latest",
    "claude-3-7-sonnet-20250219",
    "claude-3-7-sonnet-latest",
]
ANTHROPIC_MODELS = get_args(AnthropicModel)

PROVIDERS = ("anthropic", "azure", "ollama")

DEFAULT_TEST_PATTERN = "**/*.test.ts"
DEFAULT_AZURE_API_VERSION = "2024-10-21"
DEFAULT_OLLAMA_MODEL = "llama3"

_url_adapter = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    try:
        _url_adapter.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("url_parsing", "must be a valid URL") from None
    return value


# Validated as a URL but kept as the string the user wrote
UrlStr = Annotated[str, AfterValidator(_check_url)]
NonEmptyStr = Annotated[str, Field(min_length=1)]


class StrictModel(BaseModel):
    """Closed, immutable schema keyed by camelCase aliases"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class AnthropicAIConfig(StrictModel):
    provider: Literal["anthropic"]
    api_key: NonEmptyStr
    model: AnthropicModel = ANTHROPIC_MODELS[0]


class AzureAIConfig(StrictModel):
    provider: Literal["azure"]
    api_key: NonEmptyStr
    endpoint: Optional[UrlStr] = None
    deployment: Optional[str] = None
    api_version: NonEmptyStr = DEFAULT_AZURE_API_VERSION


class OllamaAIConfig(StrictModel):
    provider: Literal["ollama"]
    model: NonEmptyStr = DEFAULT_OLLAMA_MODEL
    ollama_base_url: Optional[UrlStr] = None


AIConfig = Annotated[
    Union[AnthropicAIConfig, AzureAIConfig, OllamaAIConfig],
    Field(discriminator="provider"),
]


class BrowserConfig(StrictModel):
    # Passed through untouched to the browser context
    context_options: Dict[str, Any] = Field(default_factory=dict)


class CachingConfig(StrictModel):
    enabled: bool = True


class MailboxConfig(StrictModel):
    api_key: NonEmptyStr
    server_id: NonEmptyStr


class StrictConfig(StrictModel):
    headless: bool = True
    base_url: UrlStr
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    test_pattern: NonEmptyStr = DEFAULT_TEST_PATTERN
    anthropic_key: Optional[str] = None
    ai: AIConfig
    mailbox: Optional[MailboxConfig] = None
    caching: CachingConfig = Field(default_factory=CachingConfig)


class CLIOptions(StrictModel):
    """Overrides taken from command line flags"""

    headless: Optional[bool] = None
    base_url: Optional[UrlStr] = None
    test_pattern: Optional[NonEmptyStr] = None
    no_cache: Optional[bool] = None
