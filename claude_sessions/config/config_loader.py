"""Configuration loading with file and environment support."""

import json
import os
from pathlib import Path
from typing import Any

from ..sessions_logging import get_logger
from .models import StoreConfig, default_claude_dir

logger = get_logger()

CONFIG_FILENAME = "session-store.json"

ENV_VARS = {
    "claude_dir": "CLAUDE_DIR",
    "sessions_dir": "CLAUDE_SESSIONS_DIR",
    "aliases_file": "CLAUDE_SESSION_ALIASES",
    "log_level": "CLAUDE_SESSIONS_LOG_LEVEL",
}


class ConfigLoader:
    """Configuration loader merging defaults, config file and environment."""

    def __init__(
        self,
        config_file: Path | None = None,
        environ: dict[str, str] | None = None,
    ):
        self._config_file = Path(config_file) if config_file else None
        self._environ = os.environ if environ is None else environ

    def _env_overrides(self) -> dict[str, Any]:
        overrides = {}
        for key, env_var in ENV_VARS.items():
            value = self._environ.get(env_var)
            if value:
                overrides[key] = value
        return overrides

    def _resolve_config_file(self, claude_dir: Path) -> Path:
        if self._config_file is not None:
            return self._config_file
        return claude_dir / CONFIG_FILENAME

    def _load_file(self, config_file: Path) -> dict[str, Any]:
        """Load the JSON config file, returning {} if missing or invalid."""
        if not config_file.exists():
            return {}
        try:
            with open(config_file, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read config file {config_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config file {config_file}: not a JSON object")
            return {}
        logger.debug(f"Loaded {len(data)} settings from {config_file}")
        return data

    def load(self, **overrides: Any) -> StoreConfig:
        """Load configuration from all sources.

        Precedence (highest to lowest):
        1. Explicit overrides
        2. Environment variables
        3. Config file (<claude_dir>/session-store.json)
        4. Defaults
        """
        env = self._env_overrides()

        # claude_dir decides where the config file lives
        claude_dir = Path(
            overrides.get("claude_dir") or env.get("claude_dir") or default_claude_dir()
        ).expanduser()

        config_dict: dict[str, Any] = {}
        config_dict.update(self._load_file(self._resolve_config_file(claude_dir)))
        config_dict.update(env)
        if env:
            logger.debug(f"Applied {len(env)} environment variables")
        config_dict.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return StoreConfig(**config_dict)
        except Exception as e:
            logger.warning(f"Configuration validation failed: {e}, using defaults")
            config = StoreConfig()
            for key, value in config_dict.items():
                if key not in StoreConfig.model_fields:
                    continue
                try:
                    config = StoreConfig(**{**config.model_dump(), key: value})
                except (ValueError, TypeError) as e:
                    logger.warning(f"Ignoring invalid setting {key}={value}: {e}")
            return config


def load_config(config_file: Path | None = None, **overrides: Any) -> StoreConfig:
    """Load configuration from multiple sources with precedence.

    Args:
        config_file: Explicit config file path (default: <claude_dir>/session-store.json)
        **overrides: Explicit configuration overrides

    Returns:
        Configured StoreConfig instance
    """
    return ConfigLoader(config_file=config_file).load(**overrides)
