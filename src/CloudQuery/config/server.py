"""Server configuration: where the data service lives and how to reach it.

Credentials are never stored in the YAML file. The config names the
environment variables holding them (`app_id_env`, `app_key_env`), which the
CLI populates from a `.env` file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from CloudQuery.config.common import (
    expect_float,
    expect_int,
    expect_str,
    get_required_value,
    get_section,
)


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Data service endpoint and request behavior.

    Attributes:
        base_url: Service root, e.g. https://api.example.com.
        api_version: Version path segment inserted after the base URL.
        app_id_env: Environment variable holding the application id.
        app_key_env: Environment variable holding the application key.
        timeout: Request timeout in seconds.
        max_retries: Attempts per request, including the first one.
    """

    base_url: str
    api_version: str
    app_id_env: str
    app_key_env: str
    timeout: float
    max_retries: int


def load_server(raw: Mapping[str, Any]) -> ServerConfig:
    """Load the `server` section.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "server", required=True)
    return ServerConfig(
        base_url=expect_str(get_required_value(section, "base_url", "server.base_url"), "server.base_url"),
        api_version=str(section.get("api_version", "1.1")),
        app_id_env=expect_str(section.get("app_id_env", "CLOUDQUERY_APP_ID"), "server.app_id_env"),
        app_key_env=expect_str(section.get("app_key_env", "CLOUDQUERY_APP_KEY"), "server.app_key_env"),
        timeout=expect_float(get_required_value(section, "timeout", "server.timeout"), "server.timeout"),
        max_retries=expect_int(
            get_required_value(section, "max_retries", "server.max_retries"),
            "server.max_retries",
        ),
    )


def check_server(config: ServerConfig) -> None:
    if not config.base_url.startswith(("http://", "https://")):
        raise ValueError("server.base_url must start with http:// or https://")
    if not config.api_version.strip():
        raise ValueError("server.api_version must not be empty")
    if not config.app_id_env.strip() or not config.app_key_env.strip():
        raise ValueError("server.app_id_env and server.app_key_env must not be empty")
    if config.timeout <= 0:
        raise ValueError("server.timeout must be positive")
    if config.max_retries <= 0:
        raise ValueError("server.max_retries must be positive")
