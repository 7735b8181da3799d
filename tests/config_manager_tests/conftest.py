"""Shared fixtures for ConfigManager tests."""

import json

import pytest

from edumind.config_manager.config_manager import ConfigManager

_DEFAULT_ENV_VAR_MAP = dict(ConfigManager._env_var_map)
_DEFAULT_BASE_FILENAME = ConfigManager._base_config_filename


def reset_config_manager_singleton():
    """Resets the ConfigManager singleton instance and its class-level state."""
    ConfigManager._instance = None
    ConfigManager._config_dir = None
    ConfigManager._config = None
    ConfigManager._env_var_map = dict(_DEFAULT_ENV_VAR_MAP)
    ConfigManager._base_config_filename = _DEFAULT_BASE_FILENAME


@pytest.fixture(autouse=True)
def reset_singleton_before_each_test(monkeypatch):
    """Fresh singleton and no leaking APP_ENV / mapped env vars for every test."""
    for env_name in ["APP_ENV", *_DEFAULT_ENV_VAR_MAP.values()]:
        monkeypatch.delenv(env_name, raising=False)
    reset_config_manager_singleton()
    yield
    reset_config_manager_singleton()


@pytest.fixture
def temp_config_dir(tmp_path):
    config_dir = tmp_path / "config_test_dir"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def base_config_content():
    """Provides base configuration data."""
    return {
        "llm": {
            "provider": "gemini",
            "api_key": "file_key",
            "default_model": "gemini-3-flash-preview",
            "request_timeout": 60,
        },
        "planner": {"language": "Italiano"},
        "storage": {"backend": "sqlite", "db_path": "data/edumind.db"},
        "monitoring": {"logging": {"level": "INFO", "rotation": {"type": "size", "backup_count": 3}}},
    }


@pytest.fixture
def env_specific_config_content():
    """Overrides for the 'test_env' environment."""
    return {
        "llm": {"request_timeout": 5, "default_temperature": 0.1},
        "storage": {"backend": "memory"},
        "monitoring": {"logging": {"level": "DEBUG"}},
    }


@pytest.fixture
def create_base_config_file(temp_config_dir, base_config_content):
    config_file_path = temp_config_dir / "config.json"
    config_file_path.write_text(json.dumps(base_config_content), encoding="utf-8")
    return config_file_path


@pytest.fixture
def create_env_specific_config_file(temp_config_dir, env_specific_config_content):
    """Creates config.test_env.json; returns (path, env_name)."""
    env_name = "test_env"
    env_config_file_path = temp_config_dir / f"config.{env_name}.json"
    env_config_file_path.write_text(json.dumps(env_specific_config_content), encoding="utf-8")
    return env_config_file_path, env_name
