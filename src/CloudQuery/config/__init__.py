from __future__ import annotations

"""Public configuration API for CloudQuery."""

from CloudQuery.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from CloudQuery.config.runtime import RuntimeConfig
from CloudQuery.config.server import ServerConfig

__all__ = [
    "RuntimeConfig",
    "ServerConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
]
