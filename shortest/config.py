"""
Configuration loading for shortest.

Validation runs in two phases:
- resolve: fill AI and mailbox fields from the environment (plain dicts only)
- validate: check the resolved structure against the strict schema

Every problem found in either phase is collected and raised together as
a single ConfigValidationError.
"""
import importlib.util
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from .errors import ConfigValidationError, Issue
from .models import PROVIDERS, CLIOptions, StrictConfig
from .utils import EnvResolver

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "shortest_config.py"

# Environment variables backing each AI field, per provider
AI_ENV_FIELDS: Dict[str, Dict[str, str]] = {
    "anthropic": {
        "apiKey": "ANTHROPIC_API_KEY",
    },
    "azure": {
        "apiKey": "AZURE_API_KEY",
        "endpoint": "AZURE_OPENAI_ENDPOINT",
        "deployment": "AZURE_OPENAI_DEPLOYMENT",
        "apiVersion": "AZURE_OPENAI_API_VERSION",
    },
    "ollama": {
        "ollamaBaseUrl": "OLLAMA_BASE_URL",
    },
}

MAILBOX_ENV_FIELDS: Dict[str, str] = {
    "apiKey": "MAILOSAUR_API_KEY",
    "serverId": "MAILOSAUR_SERVER_ID",
}

_TAG_ERROR_TYPES = ("union_tag_invalid", "union_tag_not_found")

RawConfig = Union[Mapping[str, Any], StrictConfig]


def _drop_none(block: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in block.items() if value is not None}


def _has_field(block: Mapping[str, Any], alias: str) -> bool:
    return alias in block or to_snake(alias) in block


def _fill_from_env(
    block: Dict[str, Any], fields: Mapping[str, str], env: EnvResolver, path: str
) -> None:
    for alias, env_name in fields.items():
        if _has_field(block, alias):
            continue
        value = env.lookup(env_name)
        if value is not None:
            logger.debug("Resolved %s.%s from environment (%s)", path, alias, env_name)
            block[alias] = value


def _resolve_ai(resolved: Dict[str, Any], env: EnvResolver, issues: List[Issue]) -> None:
    ai = resolved.get("ai")
    if not isinstance(ai, Mapping):
        # Missing or mistyped blocks are reported by the schema
        return

    provider = ai.get("provider")
    if provider is None:
        issues.append(("ai.provider", "required"))
        return

    block = _drop_none(ai)
    anthropic_key = resolved.get("anthropicKey", resolved.get("anthropic_key"))
    if anthropic_key is not None:
        logger.warning("'anthropicKey' is deprecated, use 'ai.apiKey' instead")
        if provider == "anthropic" and not _has_field(block, "apiKey"):
            block["apiKey"] = anthropic_key

    # Non-string tags are left for the schema to report
    if isinstance(provider, str):
        _fill_from_env(block, AI_ENV_FIELDS.get(provider, {}), env, "ai")
    resolved["ai"] = block


def _resolve_mailbox(resolved: Dict[str, Any], env: EnvResolver) -> None:
    mailbox = resolved.get("mailbox")
    if mailbox is None:
        values = {alias: env.lookup(name) for alias, name in MAILBOX_ENV_FIELDS.items()}
        if all(values.values()):
            logger.debug("Resolved mailbox from environment")
            resolved["mailbox"] = values
        return

    if isinstance(mailbox, Mapping):
        block = _drop_none(mailbox)
        _fill_from_env(block, MAILBOX_ENV_FIELDS, env, "mailbox")
        resolved["mailbox"] = block


def resolve_user_config(
    raw: Mapping[str, Any], env: Optional[EnvResolver] = None
) -> Tuple[Dict[str, Any], List[Issue]]:
    """Fill environment-backed fields of a raw user config.

    Returns the resolved plain structure and the issues found while
    resolving. Unset (None) values are treated as absent.
    """
    if env is None:
        env = EnvResolver.from_environ()

    issues: List[Issue] = []
    resolved = _drop_none(raw)
    _resolve_ai(resolved, env, issues)
    _resolve_mailbox(resolved, env)
    return resolved, issues


def _format_loc(loc: Tuple[Union[str, int], ...]) -> str:
    parts = [str(part) for part in loc]
    # Discriminated unions report the tag as a path segment: ai.anthropic.apiKey
    if len(parts) >= 2 and parts[0] == "ai" and parts[1] in PROVIDERS:
        del parts[1]
    return ".".join(parts)


def issues_from_validation_error(exc: ValidationError) -> List[Issue]:
    issues = []
    for err in exc.errors():
        path = _format_loc(err.get("loc", ()))
        message = err.get("msg", "invalid value")
        if err["type"] in _TAG_ERROR_TYPES:
            path = f"{path}.provider"
            message = f"must be one of: {', '.join(PROVIDERS)}"
            if err["type"] == "union_tag_not_found":
                message = "required"
        elif err["type"] == "extra_forbidden":
            message = "unknown key"
        issues.append((path or "<root>", message))
    return issues


def validate_config(raw: RawConfig, env: Optional[EnvResolver] = None) -> StrictConfig:
    """
    Validate a raw user config into an immutable StrictConfig.

    Raises ConfigValidationError listing every violation found.
    """
    if isinstance(raw, StrictConfig):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        raise ConfigValidationError(
            [("<root>", f"expected a mapping, got {type(raw).__name__}")]
        )

    resolved, issues = resolve_user_config(raw, env)

    try:
        config = StrictConfig.model_validate(resolved)
    except ValidationError as e:
        seen = {path for path, _ in issues}
        issues.extend(i for i in issues_from_validation_error(e) if i[0] not in seen)
        raise ConfigValidationError(issues) from e

    if issues:
        raise ConfigValidationError(issues)

    logger.debug("Validated config for %s using provider %s", config.base_url, config.ai.provider)
    return config


def apply_cli_options(
    config: StrictConfig, cli_options: Union[CLIOptions, Mapping[str, Any], None]
) -> StrictConfig:
    """Return a copy of config with explicit CLI flags taking precedence"""
    if cli_options is None:
        return config
    if not isinstance(cli_options, CLIOptions):
        try:
            cli_options = CLIOptions.model_validate(cli_options)
        except ValidationError as e:
            raise ConfigValidationError(
                [(f"cli.{path}", message) for path, message in issues_from_validation_error(e)]
            ) from e

    updates: Dict[str, Any] = {}
    if cli_options.headless is not None:
        updates["headless"] = cli_options.headless
    if cli_options.base_url is not None:
        updates["baseUrl"] = cli_options.base_url
    if cli_options.test_pattern is not None:
        updates["testPattern"] = cli_options.test_pattern
    if cli_options.no_cache:
        updates["caching"] = {"enabled": False}

    if not updates:
        return config

    logger.debug("Applying CLI overrides: %s", ", ".join(sorted(updates)))
    data = config.model_dump(by_alias=True)
    data.update(updates)
    return StrictConfig.model_validate(data)


def load_config(
    raw: RawConfig,
    cli_options: Union[CLIOptions, Mapping[str, Any], None] = None,
    env: Optional[EnvResolver] = None,
) -> StrictConfig:
    """
    Build the final config for a test run.

    Precedence:
    - explicit CLI flag
    - user config value
    - environment variable
    - static default
    """
    config = validate_config(raw, env)
    return apply_cli_options(config, cli_options)


def load_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Import a Python config file and return its module-level `config` mapping"""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    spec = importlib.util.spec_from_file_location(f"_shortest_user_config_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ConfigValidationError([("<root>", f"{path} is not a Python module")])

    logger.debug("Loading user config from %s", path)
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigValidationError([("<root>", f"{path}: {e}")]) from e

    config = getattr(module, "config", None)
    if not isinstance(config, Mapping):
        raise ConfigValidationError([("<root>", f"{path} must define a 'config' mapping")])
    return dict(config)
