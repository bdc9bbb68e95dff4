"""Tests for namereview.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from namereview.config import (
    ConfigError,
    LLMSettings,
    NameReviewConfig,
    load_config,
    settings_from_env,
    with_overrides,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, environ={})

    assert isinstance(config, NameReviewConfig)
    assert config.root == tmp_path.resolve()
    assert config.llm == LLMSettings()
    assert config.autofix.min_confidence == 0.85
    assert config.autofix.collect_threshold == 0.3
    assert config.modification_window == 2
    assert config.cache_ttl_seconds == 3600.0
    assert config.tools.python == "python3"
    assert config.tools.command_timeout is None
    assert config.exclude_paths == []
    assert config.few_shot_examples is True


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".namereview.yml").write_text(
        """
llm:
  model: "gpt-4o"
  max_tokens: 500
  temperature: 0.1
  max_retries: 4
  base_url: "http://localhost:8080/v1/"
  request_timeout: 30
autofix:
  enabled: false
  min_confidence: 0.9
diff:
  modification_window: 3
cache:
  ttl_seconds: 120
tools:
  python: "/usr/bin/python3.12"
  command_timeout: 45
exclude_paths:
  - "vendor/"
  - "*.min.js"
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path, environ={})

    assert config.llm.model == "gpt-4o"
    assert config.llm.max_tokens == 500
    assert config.llm.temperature == 0.1
    assert config.llm.max_retries == 4
    assert config.llm.base_url == "http://localhost:8080/v1"
    assert config.llm.request_timeout == 30.0
    assert config.autofix.enabled is False
    assert config.autofix.min_confidence == 0.9
    assert config.modification_window == 3
    assert config.cache_ttl_seconds == 120.0
    assert config.tools.python == "/usr/bin/python3.12"
    assert config.tools.gopls == "gopls"
    assert config.tools.command_timeout == 45.0
    assert config.exclude_paths == ["vendor/", "*.min.js"]


def test_environment_overrides_file_values(tmp_path: Path) -> None:
    (tmp_path / ".namereview.yml").write_text("llm:\n  model: gpt-4o\n  max_tokens: 500\n", encoding="utf-8")
    env = {
        "LLM_MODEL": "gpt-3.5-turbo",
        "MAX_TOKENS": "256",
        "LLM_TEMPERATURE": "0.5",
        "MAX_RETRIES": "1",
        "OPENAI_BASE_URL": "https://proxy.example/v1",
        "OPENAI_API_KEY": "sk-openai",
        "BLACKBOX_API_KEY": "bb-key",
    }

    config = load_config(tmp_path, environ=env)

    assert config.llm.model == "gpt-3.5-turbo"
    assert config.llm.max_tokens == 256
    assert config.llm.temperature == 0.5
    assert config.llm.max_retries == 1
    assert config.llm.base_url == "https://proxy.example/v1"
    assert config.llm.api_key == "bb-key"


def test_load_config_accepts_explicit_file_path(tmp_path: Path) -> None:
    config_file = tmp_path / ".namereview.yml"
    config_file.write_text("diff:\n  modification_window: 0\n", encoding="utf-8")

    config = load_config(config_file, environ={})

    assert config.modification_window == 0


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".namereview.yml").write_text("llm: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


def test_non_mapping_root_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".namereview.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


@pytest.mark.parametrize(
    "env",
    [
        {"MAX_TOKENS": "0"},
        {"LLM_TEMPERATURE": "1.5"},
        {"MAX_RETRIES": "-1"},
        {"MAX_TOKENS": "lots"},
    ],
)
def test_invalid_numeric_settings_are_rejected(env: dict) -> None:
    with pytest.raises(ConfigError):
        settings_from_env(env)


def test_negative_modification_window_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".namereview.yml").write_text("diff:\n  modification_window: -1\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


def test_require_api_key_fails_fast() -> None:
    settings = settings_from_env({})

    with pytest.raises(ConfigError, match="API key"):
        settings.require_api_key()

    assert settings_from_env({"NAMEREVIEW_API_KEY": "key"}).require_api_key() == "key"


def test_with_overrides_replaces_llm_fields(tmp_path: Path) -> None:
    config = load_config(tmp_path, environ={})

    updated = with_overrides(config, model="gpt-4o", max_tokens=None)

    assert updated.llm.model == "gpt-4o"
    assert updated.llm.max_tokens == config.llm.max_tokens
    assert with_overrides(config) is config


def test_few_shot_examples_can_be_disabled(tmp_path: Path) -> None:
    (tmp_path / ".namereview.yml").write_text("prompt:\n  few_shot: false\n", encoding="utf-8")

    assert load_config(tmp_path, environ={}).few_shot_examples is False
