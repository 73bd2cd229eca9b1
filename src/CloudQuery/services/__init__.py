"""Query execution services for CloudQuery.

Provides the executor that runs compiled queries, and a factory wiring it to
a REST client built from configuration.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from CloudQuery.client.rest import RestClient
from CloudQuery.services.executor import QueryExecutor, Transport
from CloudQuery.utils.log import log

if TYPE_CHECKING:
    from CloudQuery.config import AppConfig


def create_query_executor(config: AppConfig) -> QueryExecutor:
    """Create a query executor talking to the configured server.

    Args:
        config: Application configuration containing server settings.

    Returns:
        QueryExecutor backed by a new RestClient.

    Raises:
        ValueError: If the credential environment variables are not set.
    """
    server = config.server
    app_id = os.getenv(server.app_id_env)
    app_key = os.getenv(server.app_key_env)
    missing = [name for name, value in ((server.app_id_env, app_id), (server.app_key_env, app_key)) if not value]
    if missing:
        raise ValueError(
            f"Missing credentials: {', '.join(missing)} not set. "
            f"Set them in your .env file or shell environment."
        )

    client = RestClient(
        base_url=server.base_url,
        app_id=app_id,
        app_key=app_key,
        api_version=server.api_version,
        timeout=server.timeout,
        max_retries=server.max_retries,
    )
    log.debug("Query executor created: base_url=%s api_version=%s", server.base_url, server.api_version)
    return QueryExecutor(client=client)


__all__ = [
    "QueryExecutor",
    "Transport",
    "create_query_executor",
]
