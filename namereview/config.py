"""Configuration loading for namereview (.namereview.yml and environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".namereview.yml"

ENV_API_KEY_KEYS = ("NAMEREVIEW_API_KEY", "BLACKBOX_API_KEY", "OPENAI_API_KEY")
ENV_BASE_URL_KEYS = ("NAMEREVIEW_LLM_BASE_URL", "OPENAI_BASE_URL")


class ConfigError(RuntimeError):
    """Raised when the configuration is malformed or incomplete."""


@dataclass(frozen=True)
class LLMSettings:
    """Suggestion service settings."""

    model: str = "gpt-4o-mini"
    max_tokens: int = 1000
    temperature: float = 0.3
    max_retries: int = 2
    base_url: str = "https://api.openai.com/v1"
    api_key: Optional[str] = None
    request_timeout: Optional[float] = 60.0

    def __post_init__(self) -> None:
        if not self.model:
            raise ConfigError("llm.model must not be empty")
        if self.max_tokens <= 0:
            raise ConfigError(f"llm.max_tokens must be positive, got {self.max_tokens}")
        if not 0.0 <= self.temperature <= 1.0:
            raise ConfigError(
                f"llm.temperature must be between 0 and 1, got {self.temperature}"
            )
        if self.max_retries < 0:
            raise ConfigError(f"llm.max_retries must be >= 0, got {self.max_retries}")

    def require_api_key(self) -> str:
        """Return the API key or fail before any pipeline work starts."""
        if not self.api_key:
            keys = ", ".join(ENV_API_KEY_KEYS)
            raise ConfigError(f"An API key is required; set one of {keys}")
        return self.api_key


@dataclass(frozen=True)
class AutofixSettings:
    """Thresholds for collecting and auto-applying suggestions."""

    enabled: bool = True
    min_confidence: float = 0.85
    collect_threshold: float = 0.3


@dataclass(frozen=True)
class ToolSettings:
    """External commands used by the rename backends."""

    python: str = "python3"
    gopls: str = "gopls"
    go: str = "go"
    command_timeout: Optional[float] = None


@dataclass
class NameReviewConfig:
    """Represents the settings defined in .namereview.yml plus environment overrides."""

    root: Path
    llm: LLMSettings = field(default_factory=LLMSettings)
    autofix: AutofixSettings = field(default_factory=AutofixSettings)
    tools: ToolSettings = field(default_factory=ToolSettings)
    modification_window: int = 2
    cache_ttl_seconds: float = 3600.0
    exclude_paths: List[str] = field(default_factory=list)
    few_shot_examples: bool = True


def load_config(config_path: Path, *, environ: Mapping[str, str] | None = None) -> NameReviewConfig:
    """Load configuration from disk and apply environment overrides."""
    env = os.environ if environ is None else environ
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)
        if not isinstance(data, dict):
            raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    llm = _llm_settings(_as_dict(data.get("llm")), env)

    autofix_data = _as_dict(data.get("autofix"))
    defaults = AutofixSettings()
    autofix = AutofixSettings(
        enabled=_first_not_none(_as_bool(autofix_data.get("enabled")), defaults.enabled),
        min_confidence=_first_not_none(
            _as_float(autofix_data.get("min_confidence")), defaults.min_confidence
        ),
        collect_threshold=_first_not_none(
            _as_float(autofix_data.get("collect_threshold")), defaults.collect_threshold
        ),
    )

    tools_data = _as_dict(data.get("tools"))
    tool_defaults = ToolSettings()
    tools = ToolSettings(
        python=_as_str(tools_data.get("python")) or tool_defaults.python,
        gopls=_as_str(tools_data.get("gopls")) or tool_defaults.gopls,
        go=_as_str(tools_data.get("go")) or tool_defaults.go,
        command_timeout=_as_float(tools_data.get("command_timeout")),
    )

    diff_data = _as_dict(data.get("diff"))
    window = _first_not_none(_as_int(diff_data.get("modification_window")), 2)
    if window < 0:
        raise ConfigError(f"diff.modification_window must be >= 0, got {window}")

    cache_data = _as_dict(data.get("cache"))
    ttl = _first_not_none(_as_float(cache_data.get("ttl_seconds")), 3600.0)
    if ttl <= 0:
        raise ConfigError(f"cache.ttl_seconds must be positive, got {ttl}")

    prompt_data = _as_dict(data.get("prompt"))
    few_shot = _first_not_none(_as_bool(prompt_data.get("few_shot")), True)

    return NameReviewConfig(
        root=root,
        llm=llm,
        autofix=autofix,
        tools=tools,
        modification_window=window,
        cache_ttl_seconds=ttl,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        few_shot_examples=few_shot,
    )


def settings_from_env(environ: Mapping[str, str] | None = None) -> LLMSettings:
    """Build LLM settings from environment variables only."""
    return _llm_settings({}, os.environ if environ is None else environ)


def _llm_settings(llm_data: Mapping[str, Any], env: Mapping[str, str]) -> LLMSettings:
    defaults = LLMSettings()
    model = _env_str(env, "LLM_MODEL") or _as_str(llm_data.get("model")) or defaults.model
    max_tokens = _first_not_none(
        _env_number(env, "MAX_TOKENS", int),
        _as_int(llm_data.get("max_tokens")),
        defaults.max_tokens,
    )
    temperature = _first_not_none(
        _env_number(env, "LLM_TEMPERATURE", float),
        _as_float(llm_data.get("temperature")),
        defaults.temperature,
    )
    max_retries = _first_not_none(
        _env_number(env, "MAX_RETRIES", int),
        _as_int(llm_data.get("max_retries")),
        defaults.max_retries,
    )
    base_url = (
        _first_env(env, ENV_BASE_URL_KEYS)
        or _as_str(llm_data.get("base_url"))
        or defaults.base_url
    )
    api_key = _first_env(env, ENV_API_KEY_KEYS) or _as_str(llm_data.get("api_key"))
    timeout = _as_float(llm_data.get("request_timeout"))
    return LLMSettings(
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        max_retries=max_retries,
        base_url=base_url.rstrip("/"),
        api_key=api_key,
        request_timeout=timeout if timeout is not None else defaults.request_timeout,
    )


def with_overrides(config: NameReviewConfig, **llm_overrides: Any) -> NameReviewConfig:
    """Return a copy of *config* with selected LLM settings replaced."""
    cleaned = {key: value for key, value in llm_overrides.items() if value is not None}
    if not cleaned:
        return config
    return replace(config, llm=replace(config.llm, **cleaned))


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _env_str(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key)
    return value.strip() if value and value.strip() else None


def _first_env(env: Mapping[str, str], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = _env_str(env, key)
        if value:
            return value
    return None


def _env_number(env: Mapping[str, str], key: str, kind: type) -> Any:
    raw = _env_str(env, key)
    if raw is None:
        return None
    try:
        return kind(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {key} must be a number, got {raw!r}") from exc


def _first_not_none(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "AutofixSettings",
    "ConfigError",
    "LLMSettings",
    "NameReviewConfig",
    "ToolSettings",
    "load_config",
    "settings_from_env",
    "with_overrides",
]
