"""Command runner for coordinating CLI execution.

Configures logging, creates the executor when the action needs the network,
and turns failures into a click abort.
"""

from __future__ import annotations

import click

from CloudQuery.cli.commands import QueryCommand, QueryOptions, build_query
from CloudQuery.config import AppConfig
from CloudQuery.services import create_query_executor
from CloudQuery.utils.log import configure_logging, log

OFFLINE_ACTIONS = frozenset({"compile"})


class CommandRunner:
    """Executes one query action with logging and error handling."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run(self, action: str, options: QueryOptions) -> None:
        """Build the query from `options` and run `action` on it.

        Args:
            action: One of "compile", "find", "count".
            options: Query description from the command line.

        Raises:
            click.Abort: When the action fails.
        """
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        executor = None
        try:
            query = build_query(options)
            if action not in OFFLINE_ACTIONS:
                executor = create_query_executor(self.config)
            command = QueryCommand(query=query, executor=executor)
            getattr(command, action)()
        except click.BadParameter:
            raise
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action.capitalize(), e)
            raise click.Abort from e
        finally:
            if executor is not None:
                close = getattr(executor.client, "close", None)
                if callable(close):
                    close()
