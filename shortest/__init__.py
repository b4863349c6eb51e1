from .config import apply_cli_options, load_config, load_config_file, resolve_user_config, validate_config
from .errors import ConfigValidationError, ShortestError, UnsupportedProviderError
from .llm import LLMInterface, create_provider
from .models import ANTHROPIC_MODELS, CLIOptions, StrictConfig
from .utils import EnvResolver

__all__ = [
    "validate_config",
    "resolve_user_config",
    "apply_cli_options",
    "load_config",
    "load_config_file",
    "create_provider",
    "LLMInterface",
    "StrictConfig",
    "CLIOptions",
    "ANTHROPIC_MODELS",
    "EnvResolver",
    "ShortestError",
    "ConfigValidationError",
    "UnsupportedProviderError",
]
