"""Configuration package for the session store.

Configuration Precedence (highest to lowest):
1. Explicit overrides
2. Environment variables
3. Config file (~/.claude/session-store.json)
4. Defaults
"""

from .config_loader import ConfigLoader, load_config
from .models import StoreConfig

__all__ = [
    "ConfigLoader",
    "StoreConfig",
    "load_config",
]
