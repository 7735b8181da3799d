# -*- coding: utf-8 -*-
"""Configuration manager (ConfigManager) implementation.

Loads the planner settings from ``config.json``, overlays the
environment-specific ``config.{APP_ENV}.json`` and lets mapped environment
variables (API keys, database path) win over both.
"""
import copy
import json
import logging
import os

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class ConfigManager:
    _instance = None
    _config = None
    _config_dir = None
    _base_config_filename = "config.json"
    # Dot-notation config key -> environment variable
    _env_var_map = {
        "llm.api_key": "LLM_API_KEY",
        "llm.api_endpoint": "LLM_API_ENDPOINT",
        "llm.default_model": "LLM_MODEL",
        "storage.db_path": "EDUMIND_DB_PATH",
    }

    def __new__(cls, config_dir=None):
        """
        Returns the shared ConfigManager.

        The first call fixes the config directory (``config_dir`` or the
        current working directory) and loads the files. Later calls with a
        different directory are ignored with a warning; use reload_config().
        """
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
            if config_dir:
                cls._config_dir = os.path.abspath(config_dir)
                logger.info(f"ConfigManager initializing with config directory: {cls._config_dir}")
            else:
                cls._config_dir = os.path.abspath(os.getcwd())
                logger.info(
                    f"ConfigManager initializing. No config_dir provided, using current working directory: {cls._config_dir}"
                )
            cls._instance._load_config()
        elif config_dir:
            requested_dir = os.path.abspath(config_dir)
            if cls._config_dir != requested_dir:
                logger.warning(
                    f"ConfigManager already initialized with config directory {cls._config_dir}. "
                    f"Ignoring requested directory {requested_dir}. Use reload_config() to switch."
                )
        return cls._instance

    @classmethod
    def _get_config_path(cls, filename):
        """Full path of ``filename`` inside the configured directory."""
        if not cls._config_dir:
            logger.error("Config directory is not set. Falling back to the current working directory.")
            cls._config_dir = os.path.abspath(os.getcwd())
        return os.path.join(cls._config_dir, filename)

    @staticmethod
    def _deep_merge(source, destination):
        """
        Merges ``source`` into ``destination`` in place. Nested dicts are merged,
        lists and scalars from ``source`` replace the destination value.
        """
        for key, value in source.items():
            if isinstance(value, dict):
                node = destination.setdefault(key, {})
                if isinstance(node, dict):
                    ConfigManager._deep_merge(value, node)
                else:
                    destination[key] = copy.deepcopy(value)
            elif isinstance(value, list):
                destination[key] = copy.deepcopy(value)
            else:
                destination[key] = value
        return destination

    @staticmethod
    def _read_json_file(path, label):
        """Reads one JSON config file. Any failure yields an empty dict."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            logger.info(f"Loaded {label} config from {path}")
            return data if isinstance(data, dict) else {}
        except FileNotFoundError:
            logger.warning(f"{label.capitalize()} config file not found at {path}. Using empty {label} config.")
        except json.JSONDecodeError as e:
            logger.error(f"Could not decode JSON from {path}: {e}. Using empty {label} config.")
        except (IOError, OSError) as e:
            logger.error(f"Could not read config file {path}: {e}. Using empty {label} config.")
        return {}

    def _load_config(self):
        """Loads the base file and the APP_ENV overlay, then deep-merges them."""
        base_config = self._read_json_file(
            self._get_config_path(self._base_config_filename), "base"
        )

        app_env = os.environ.get("APP_ENV")
        env_config = {}
        env_config_filename = None
        if app_env:
            env_config_filename = f"config.{app_env}.json"
            env_config = self._read_json_file(
                self._get_config_path(env_config_filename), "environment"
            )
        else:
            logger.info("APP_ENV not set. No environment-specific config file loaded.")

        merged_config = copy.deepcopy(base_config)
        self._deep_merge(env_config, merged_config)
        self.__class__._config = merged_config

        if isinstance(merged_config.get("ENV_VAR_MAP"), dict):
            self.__class__._env_var_map = merged_config["ENV_VAR_MAP"]
            logger.info(f"Environment variable map replaced from configuration: {self.__class__._env_var_map}")

        logger.info(
            f"Configuration loaded. APP_ENV='{app_env}'. Priority: Env Vars > "
            f"Env File ('{env_config_filename}') > Base File ('{self._base_config_filename}')."
        )

    def reload_config(self, config_dir=None, base_filename=None, app_env_override=None):
        """
        Reloads configuration, optionally switching directory, base filename or
        APP_ENV (the override only applies to this reload).
        """
        logger.info("Reloading configuration...")
        original_env = os.environ.get("APP_ENV")
        if app_env_override:
            os.environ["APP_ENV"] = app_env_override

        if config_dir:
            new_config_dir = os.path.abspath(config_dir)
            if new_config_dir != self.__class__._config_dir:
                self.__class__._config_dir = new_config_dir
                logger.warning(f"Configuration directory changed to: {new_config_dir}")
        if base_filename and base_filename != self.__class__._base_config_filename:
            self.__class__._base_config_filename = base_filename
            logger.info(f"Base configuration filename changed to: {base_filename}")

        try:
            self._load_config()
        finally:
            if app_env_override:
                if original_env is None:
                    del os.environ["APP_ENV"]
                else:
                    os.environ["APP_ENV"] = original_env

    @staticmethod
    def _coerce_env_value(raw):
        """'true'/'false' to bool, then int, then float, otherwise the string."""
        if raw.lower() == "true":
            return True
        if raw.lower() == "false":
            return False
        for cast in (int, float):
            try:
                return cast(raw)
            except ValueError:
                continue
        return raw

    def get_config(self, key, default_value=None):
        """
        Returns a configuration value.

        Mapped environment variables win, then the loaded files are searched
        using dot notation ("llm.api_key"). Missing keys return ``default_value``.

        Args:
            key (str): Dot-notation key. An empty key returns the whole config.
            default_value: Value returned when the key is absent.
        """
        env_var_name = (self.__class__._env_var_map or {}).get(key)
        if env_var_name:
            env_value = os.environ.get(env_var_name)
            if env_value is not None:
                logger.info(f"Configuration '{key}' overridden by environment variable '{env_var_name}'.")
                return self._coerce_env_value(env_value)

        if key == "":
            if default_value is not None:
                return default_value
            return self.__class__._config

        if self.__class__._config is None:
            logger.warning("Config accessed before it was loaded. Loading now.")
            self._load_config()

        value = self.__class__._config
        try:
            for part in key.split("."):
                if not isinstance(value, dict):
                    raise KeyError(part)
                value = value[part]
            return value
        except KeyError:
            if default_value is None:
                logger.debug(f"Configuration key '{key}' not found and no default value provided.")
            return default_value
